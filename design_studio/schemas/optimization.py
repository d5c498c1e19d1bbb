from __future__ import annotations

from pydantic import Field

from design_studio.domain.taxonomy import ImpactTierEnum, OptimizationTypeEnum
from design_studio.schemas.base import FrozenApiModel


class ConversionOptimization(FrozenApiModel):
    id: str
    type: OptimizationTypeEnum
    title: str
    description: str
    impact: ImpactTierEnum
    implementation: str
    expected_gain: str
    priority: int
    sectors: tuple[str, ...] = ()


class HeroOptimization(FrozenApiModel):
    title_template: str
    title_psychology: tuple[str, ...]
    subtitle: str
    benefits: tuple[str, ...]
    urgency: str
    cta_text: str
    cta_color: str
    background_strategy: str


class PerformanceOptimization(FrozenApiModel):
    type: str
    description: str
    implementation: str
    impact: str


class OptimizationReport(FrozenApiModel):
    optimizations: tuple[ConversionOptimization, ...]
    quality_score: int = Field(ge=0, le=100)
    hero: HeroOptimization
    performance_optimizations: tuple[PerformanceOptimization, ...]

    @property
    def titles(self) -> list[str]:
        return [opt.title for opt in self.optimizations]
