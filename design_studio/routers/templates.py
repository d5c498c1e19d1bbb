from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from design_studio.deps import get_orchestrator
from design_studio.domain.taxonomy import SectorEnum
from design_studio.schemas.selection import TemplateSelectionRequest
from design_studio.services.mission_orchestrator import MissionOrchestrator

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("")
def list_templates(
    sector: Optional[SectorEnum] = Query(default=None),
    orchestrator: MissionOrchestrator = Depends(get_orchestrator),
) -> list[dict[str, Any]]:
    catalog = orchestrator.catalog
    templates = catalog.by_sector(sector) if sector is not None else list(catalog)
    return [template.model_dump(mode="json", by_alias=True) for template in templates]


@router.post("/select")
def select_template(
    payload: TemplateSelectionRequest,
    orchestrator: MissionOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    result = orchestrator.selector.select_optimal_template(payload.requirements, payload.business_info)
    return result.model_dump(mode="json", by_alias=True)
