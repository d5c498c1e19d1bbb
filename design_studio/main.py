import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from design_studio.config import settings
from design_studio.errors import (
    MissionNotFoundError,
    MissionProcessingError,
    MissionValidationError,
    TemplateNotFoundError,
)
from design_studio.routers import missions, templates
from design_studio.services.catalog import load_catalog
from design_studio.services.mission_orchestrator import MissionOrchestrator

logger = logging.getLogger(__name__)


def create_app(orchestrator: Optional[MissionOrchestrator] = None) -> FastAPI:
    @asynccontextmanager
    async def _app_lifespan(app: FastAPI) -> AsyncIterator[None]:
        instance = orchestrator or MissionOrchestrator(load_catalog())
        app.state.orchestrator = instance
        logger.info(
            "Design studio started",
            extra={"environment": settings.ENVIRONMENT, "template_count": len(instance.catalog)},
        )
        try:
            yield
        finally:
            await instance.aclose()
            app.state.orchestrator = None

    app = FastAPI(
        title="Design Mission Studio API",
        default_response_class=ORJSONResponse,
        lifespan=_app_lifespan,
    )

    allow_origins = sorted(set(settings.BACKEND_CORS_ORIGINS))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MissionValidationError)
    async def mission_validation_error_handler(_request: Request, exc: MissionValidationError) -> ORJSONResponse:
        return ORJSONResponse(status_code=422, content={"detail": exc.errors})

    @app.exception_handler(TemplateNotFoundError)
    async def template_not_found_handler(_request: Request, exc: TemplateNotFoundError) -> ORJSONResponse:
        return ORJSONResponse(status_code=404, content={"detail": str(exc), "sector": exc.sector})

    @app.exception_handler(MissionNotFoundError)
    async def mission_not_found_handler(_request: Request, exc: MissionNotFoundError) -> ORJSONResponse:
        return ORJSONResponse(status_code=404, content={"detail": str(exc), "missionId": exc.mission_id})

    @app.exception_handler(MissionProcessingError)
    async def mission_processing_error_handler(_request: Request, exc: MissionProcessingError) -> ORJSONResponse:
        logger.exception("Mission processing failed", exc_info=exc)
        return ORJSONResponse(
            status_code=500,
            content={"detail": str(exc), "missionId": exc.mission_id, "stage": exc.stage},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("Unhandled server exception", exc_info=exc)
        return ORJSONResponse(status_code=500, content={"detail": "Internal server error."})

    @app.get("/health")
    async def health() -> dict[str, object]:
        return {"ok": True, "environment": settings.ENVIRONMENT}

    app.include_router(templates.router)
    app.include_router(missions.router)

    return app


app = create_app()
