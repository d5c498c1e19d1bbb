from __future__ import annotations

from pydantic import Field

from design_studio.domain.taxonomy import DesignStyleEnum, SectorEnum
from design_studio.schemas.base import FrozenApiModel


class TemplateColors(FrozenApiModel):
    primary: str
    secondary: str
    accent: str


class TemplateStats(FrozenApiModel):
    load_time: str
    lighthouse: int = Field(ge=0, le=100)
    conversion_rate: str


class BusinessExample(FrozenApiModel):
    name: str
    city: str
    description: str = ""


class Template(FrozenApiModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    sector: SectorEnum
    description: str = ""
    # Catalog files call this field designType.
    design_style: DesignStyleEnum = Field(alias="designType")
    features: tuple[str, ...] = ()
    colors: TemplateColors
    stats: TemplateStats
    business_example: BusinessExample | None = None
    wow_factors: tuple[str, ...] = ()
