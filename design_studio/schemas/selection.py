from __future__ import annotations

from pydantic import Field

from design_studio.schemas.base import FrozenApiModel
from design_studio.schemas.business import BusinessInfo, BusinessRequirements
from design_studio.schemas.customization import CustomizationResult
from design_studio.schemas.templates import Template


class ScoreBreakdown(FrozenApiModel):
    style: float = Field(ge=0, le=1)
    budget: float = Field(ge=0, le=1)
    features: float = Field(ge=0, le=1)
    performance: float = Field(ge=0, le=1)


class TemplateScore(FrozenApiModel):
    template_id: str
    score: int = Field(ge=0, le=100)
    breakdown: ScoreBreakdown


class ColorDirection(FrozenApiModel):
    primary: str
    secondary: str
    accent: str
    reasoning: str


class LogoDirection(FrozenApiModel):
    style: str
    elements: tuple[str, ...]
    reasoning: str


class PhotoDirection(FrozenApiModel):
    categories: tuple[str, ...]
    mood: str
    reasoning: str


class BrandDirection(FrozenApiModel):
    colors: ColorDirection
    logo: LogoDirection
    photos: PhotoDirection


class SmartSelectionResult(FrozenApiModel):
    primary_template: Template
    alternative_templates: tuple[Template, ...] = Field(max_length=3)
    match_score: int = Field(ge=0, le=100)
    customization: CustomizationResult
    conversion_optimizations: tuple[str, ...]
    estimated_delivery: str
    reasoning: str
    ranking: tuple[TemplateScore, ...]
    brand_direction: BrandDirection


class TemplateSelectionRequest(FrozenApiModel):
    requirements: BusinessRequirements
    business_info: BusinessInfo | None = None
