from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import ORJSONResponse

from design_studio.deps import get_orchestrator
from design_studio.schemas.missions import ControlCommand, SubmissionAccepted
from design_studio.services.mission_orchestrator import MissionOrchestrator

router = APIRouter(prefix="/missions", tags=["missions"])


@router.post("")
async def submit_mission(
    payload: dict[str, Any] = Body(...),
    orchestrator: MissionOrchestrator = Depends(get_orchestrator),
):
    # Raw body: the orchestrator owns validation and reports every field error at once.
    outcome = await orchestrator.submit(payload)
    content = outcome.model_dump(mode="json", by_alias=True)
    if isinstance(outcome, SubmissionAccepted):
        return ORJSONResponse(status_code=status.HTTP_202_ACCEPTED, content=content)
    return content


@router.get("/status")
def mission_status(orchestrator: MissionOrchestrator = Depends(get_orchestrator)) -> dict[str, Any]:
    return orchestrator.get_status().model_dump(mode="json", by_alias=True)


@router.get("/events")
def recent_events(
    limit: int = Query(default=10, ge=1, le=100),
    orchestrator: MissionOrchestrator = Depends(get_orchestrator),
) -> list[dict[str, Any]]:
    return [event.model_dump(mode="json", by_alias=True) for event in orchestrator.recent_events(limit)]


@router.post("/control")
async def control(
    command: ControlCommand,
    orchestrator: MissionOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    report = await orchestrator.handle_command(command)
    if report is not None:
        return report.model_dump(mode="json", by_alias=True)
    return {"ok": True}


@router.get("/{mission_id}")
def get_mission(mission_id: str, orchestrator: MissionOrchestrator = Depends(get_orchestrator)) -> dict[str, Any]:
    return orchestrator.get_mission(mission_id).model_dump(mode="json", by_alias=True)
