from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union
from uuid import uuid4

from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from design_studio.domain.taxonomy import MissionEventTypeEnum, MissionPriorityEnum, MissionStatusEnum
from design_studio.schemas.base import ApiModel, FrozenApiModel
from design_studio.schemas.business import BusinessInfo, BusinessRequirements
from design_studio.schemas.customization import ColorPalette, CustomizationResult
from design_studio.schemas.selection import SmartSelectionResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BusinessMission(ApiModel):
    """
    One submitted business request.

    Business info and requirements are frozen; only the orchestrator mutates
    `status` and `priority`, through assignment (validated).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, validate_assignment=True)

    id: str = Field(default_factory=lambda: uuid4().hex, min_length=1)
    timestamp: datetime = Field(default_factory=_utcnow)
    business_info: BusinessInfo
    requirements: BusinessRequirements
    priority: MissionPriorityEnum = MissionPriorityEnum.medium
    deadline: datetime | None = None
    status: MissionStatusEnum = MissionStatusEnum.pending
    client_id: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def _sectors_match(self) -> "BusinessMission":
        if self.requirements.sector != self.business_info.sector:
            raise ValueError(
                f"requirements.sector ({self.requirements.sector.value}) must match "
                f"businessInfo.sector ({self.business_info.sector.value})"
            )
        return self


class ContentPack(FrozenApiModel):
    title: str
    subtitle: str
    cta: str
    sections: tuple[str, ...]


class GeneratedAssets(FrozenApiModel):
    """Opaque asset identifiers; rendering happens elsewhere."""

    logo: str
    hero_image: str
    color_palette: ColorPalette
    content_pack: ContentPack


class Deliverables(FrozenApiModel):
    preview_url: str
    download_url: str
    deploy_url: str


class DesignMissionResult(FrozenApiModel):
    mission_id: str
    business_info: BusinessInfo
    selection: SmartSelectionResult
    customization: CustomizationResult
    generated_assets: GeneratedAssets
    deliverables: Deliverables
    quality_score: int = Field(ge=0, le=100)
    completion_time: str
    optimizations: tuple[str, ...]


class SubmissionReady(FrozenApiModel):
    kind: Literal["ready"] = "ready"
    result: DesignMissionResult


class SubmissionAccepted(FrozenApiModel):
    kind: Literal["accepted"] = "accepted"
    mission_id: str
    status: MissionStatusEnum = MissionStatusEnum.pending


SubmissionOutcome = Annotated[Union[SubmissionReady, SubmissionAccepted], Field(discriminator="kind")]


class MissionStatusReport(FrozenApiModel):
    is_processing: bool
    is_paused: bool
    missions_in_queue: int
    missions_in_progress: int
    missions_completed: int
    total_missions: int


class MissionRecordOut(FrozenApiModel):
    mission: BusinessMission
    attempts: int
    last_error: str | None = None
    result: DesignMissionResult | None = None


class MissionEvent(FrozenApiModel):
    type: MissionEventTypeEnum
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=_utcnow)


class ControlCommand(ApiModel):
    command: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def mission_id(self) -> str | None:
        value = self.data.get("missionId") or self.data.get("mission_id")
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None
