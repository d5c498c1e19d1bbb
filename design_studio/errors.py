from __future__ import annotations


class MissionValidationError(ValueError):
    """A submitted mission is missing required fields or is internally inconsistent."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid mission.")


class TemplateNotFoundError(LookupError):
    def __init__(self, sector: str) -> None:
        self.sector = sector
        super().__init__(f"No catalog templates available for sector '{sector}'.")


class MissionNotFoundError(LookupError):
    def __init__(self, mission_id: str) -> None:
        self.mission_id = mission_id
        super().__init__(f"Mission '{mission_id}' not found.")


class MissionProcessingError(RuntimeError):
    def __init__(self, message: str, *, mission_id: str, stage: str) -> None:
        super().__init__(message)
        self.mission_id = mission_id
        self.stage = stage
