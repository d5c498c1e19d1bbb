from __future__ import annotations

from pydantic import Field, field_validator

from design_studio.domain.taxonomy import BudgetTierEnum, DesignStyleEnum, SectorEnum, TimeframeEnum
from design_studio.schemas.base import FrozenApiModel


class BusinessInfo(FrozenApiModel):
    name: str = Field(min_length=1)
    sector: SectorEnum
    city: str = Field(min_length=1)
    description: str = ""
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    website: str | None = None

    @field_validator("name", "city", mode="before")
    @classmethod
    def _strip_required_text(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class BusinessRequirements(FrozenApiModel):
    sector: SectorEnum
    business_type: str = Field(min_length=1)
    target_audience: str = ""
    business_goals: tuple[str, ...] = ()
    preferred_style: DesignStyleEnum
    budget: BudgetTierEnum
    timeframe: TimeframeEnum
    special_requirements: tuple[str, ...] = ()

    @field_validator("business_type", mode="before")
    @classmethod
    def _normalize_business_type(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("business_goals", mode="before")
    @classmethod
    def _dedupe_goals(cls, value: object) -> object:
        if not isinstance(value, (list, tuple)):
            return value
        seen: set[str] = set()
        deduped: list[str] = []
        for entry in value:
            if not isinstance(entry, str) or not entry.strip():
                raise ValueError("businessGoals must contain non-empty strings.")
            goal = entry.strip().lower()
            if goal in seen:
                continue
            seen.add(goal)
            deduped.append(goal)
        return deduped
