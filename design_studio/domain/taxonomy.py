from __future__ import annotations

from enum import Enum


class SectorEnum(str, Enum):
    restaurant = "restaurant"
    beaute = "beaute"
    artisan = "artisan"
    medical = "medical"


class DesignStyleEnum(str, Enum):
    luxury = "luxury"
    premium = "premium"
    modern = "modern"
    elegant = "elegant"
    professional = "professional"


class BudgetTierEnum(str, Enum):
    standard = "standard"
    premium = "premium"
    luxury = "luxury"


class TimeframeEnum(str, Enum):
    express = "express"
    standard = "standard"
    custom = "custom"


class MissionPriorityEnum(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class MissionStatusEnum(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    delivered = "delivered"


class ImpactTierEnum(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class OptimizationTypeEnum(str, Enum):
    layout = "layout"
    content = "content"
    cta = "cta"
    form = "form"
    trust = "trust"
    speed = "speed"
    seo = "seo"


class MissionEventTypeEnum(str, Enum):
    received = "received"
    started = "started"
    completed = "completed"
    error = "error"
    cancelled = "cancelled"
    status_report = "statusReport"


PRIORITY_WEIGHTS: dict[MissionPriorityEnum, int] = {
    MissionPriorityEnum.urgent: 4,
    MissionPriorityEnum.high: 3,
    MissionPriorityEnum.medium: 2,
    MissionPriorityEnum.low: 1,
}

IMPACT_WEIGHTS: dict[ImpactTierEnum, int] = {
    ImpactTierEnum.critical: 4,
    ImpactTierEnum.high: 3,
    ImpactTierEnum.medium: 2,
    ImpactTierEnum.low: 1,
}

# Statuses that no longer take part in queue processing.
FINISHED_STATUSES = frozenset({MissionStatusEnum.completed, MissionStatusEnum.delivered})
