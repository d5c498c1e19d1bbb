from fastapi import HTTPException, Request, status

from design_studio.services.mission_orchestrator import MissionOrchestrator


def get_orchestrator(request: Request) -> MissionOrchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Orchestrator not started")
    return orchestrator
