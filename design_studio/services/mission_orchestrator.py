from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from design_studio.config import settings
from design_studio.domain.taxonomy import (
    MissionEventTypeEnum,
    MissionPriorityEnum,
    MissionStatusEnum,
    TimeframeEnum,
)
from design_studio.errors import (
    MissionNotFoundError,
    MissionProcessingError,
    MissionValidationError,
    TemplateNotFoundError,
)
from design_studio.schemas.customization import CustomizationResult
from design_studio.schemas.missions import (
    BusinessMission,
    ControlCommand,
    DesignMissionResult,
    MissionEvent,
    MissionRecordOut,
    MissionStatusReport,
    SubmissionAccepted,
    SubmissionReady,
)
from design_studio.schemas.selection import SmartSelectionResult
from design_studio.schemas.templates import Template
from design_studio.services.assets import AssetProvider, PlaceholderAssetProvider
from design_studio.services.catalog import TemplateCatalog
from design_studio.services.colors import round_half_up
from design_studio.services.conversion_optimizer import ConversionOptimizer
from design_studio.services.customization import CustomizationGenerator
from design_studio.services.events import EventBus, EventCallback, Subscription, broadcast_bus
from design_studio.services.mission_queue import MissionInProgressError, MissionRecord, MissionRegistry
from design_studio.services.template_selection import TemplateSelector

logger = logging.getLogger(__name__)

SECTOR_REPORT_ITEMS: dict[str, tuple[str, ...]] = {
    "restaurant": (
        "Schema.org Restaurant markup ajouté",
        "Intégration Google My Business optimisée",
        "Menu structuré pour rich snippets",
    ),
    "beaute": (
        "Booking widget haute conversion intégré",
        "Galerie avant/après optimisée mobile",
        "Avis clients automatisés",
    ),
    "artisan": (
        "Portfolio avec lazy loading optimisé",
        "Formulaire devis simplifié 3 étapes",
        "Certifications en évidence",
    ),
    "medical": (
        "Conformité RGPD renforcée",
        "Prise RDV médicale sécurisée",
        "Informations pratiques prioritaires",
    ),
}

# Animation types that read as coherent for each template style.
COHERENT_ANIMATIONS: dict[str, frozenset[str]] = {
    "luxury": frozenset({"elegant", "subtle"}),
    "premium": frozenset({"modern", "elegant"}),
    "modern": frozenset({"dynamic", "modern"}),
    "elegant": frozenset({"elegant", "subtle"}),
    "professional": frozenset({"subtle", "modern"}),
}

_COMMAND_ALIASES = {
    "pause": "pause",
    "pauseProcessing": "pause",
    "resume": "resume",
    "resumeProcessing": "resume",
    "prioritize": "prioritize",
    "prioritizeMission": "prioritize",
    "cancel": "cancel",
    "cancelMission": "cancel",
    "getStatus": "getStatus",
}


def customization_quality(customization: CustomizationResult) -> int:
    score = 70
    palette = customization.colors
    if palette.primary != palette.secondary and palette.primary != palette.accent:
        score += 15
    if customization.fonts.primary != customization.fonts.secondary:
        score += 10
    if len(customization.animations.effects) > 2:
        score += 5
    return min(score, 100)


def design_coherence(template: Template, customization: CustomizationResult) -> int:
    score = 80
    if customization.animations.type in COHERENT_ANIMATIONS.get(template.design_style.value, frozenset()):
        score += 20
    return min(score, 100)


def mission_quality_score(selection: SmartSelectionResult, customization: CustomizationResult) -> int:
    template = selection.primary_template
    score = (
        selection.match_score * 0.4
        + customization_quality(customization) * 0.3
        + design_coherence(template, customization) * 0.2
        + template.stats.lighthouse * 0.1
    )
    return max(0, min(100, round_half_up(score)))


def merge_optimizations(*groups: Any) -> list[str]:
    seen: set[str] = set()
    merged: list[str] = []
    for group in groups:
        for item in group:
            if item in seen:
                continue
            seen.add(item)
            merged.append(item)
    return merged


def is_immediate(mission: BusinessMission) -> bool:
    return (
        mission.requirements.timeframe == TimeframeEnum.express
        or mission.priority == MissionPriorityEnum.urgent
    )


class MissionOrchestrator:
    """
    Owns the mission registry and runs missions through selection, customization,
    optimization and asset assembly.

    Express or urgent missions run immediately in the caller's task. Everything
    else waits for a batch pass, scheduled `batch_delay` seconds after
    submission, which drains pending missions one at a time.
    """

    def __init__(
        self,
        catalog: Optional[TemplateCatalog] = None,
        *,
        selector: Optional[TemplateSelector] = None,
        customization_generator: Optional[CustomizationGenerator] = None,
        optimizer: Optional[ConversionOptimizer] = None,
        asset_provider: Optional[AssetProvider] = None,
        event_bus: Optional[EventBus] = None,
        broadcast: Optional[EventBus] = None,
        batch_delay: Optional[float] = None,
        mission_timeout: Optional[float] = None,
    ) -> None:
        self._customization = customization_generator or CustomizationGenerator()
        self._selector = selector or TemplateSelector(catalog, customization_generator=self._customization)
        self._optimizer = optimizer or ConversionOptimizer()
        self._assets: AssetProvider = asset_provider or PlaceholderAssetProvider()
        self._bus = event_bus or EventBus()
        self._broadcast = broadcast if broadcast is not None else broadcast_bus
        self._batch_delay = settings.MISSION_BATCH_DELAY_SECONDS if batch_delay is None else batch_delay
        self._mission_timeout = settings.MISSION_TIMEOUT_SECONDS if mission_timeout is None else mission_timeout
        if self._batch_delay < 0:
            raise ValueError("batch_delay must be >= 0")
        if self._mission_timeout <= 0:
            raise ValueError("mission_timeout must be > 0")

        self._registry = MissionRegistry()
        self._batch_task: Optional[asyncio.Task[None]] = None
        self._processing = False
        self._paused = False

    @property
    def catalog(self) -> TemplateCatalog:
        return self._selector.catalog

    @property
    def selector(self) -> TemplateSelector:
        return self._selector

    @property
    def events(self) -> EventBus:
        return self._bus

    @property
    def is_paused(self) -> bool:
        return self._paused

    # Events

    def subscribe(self, callback: EventCallback, name: Optional[str] = None) -> Subscription:
        return self._bus.subscribe(callback, name=name)

    def unsubscribe(self, subscription: Subscription) -> None:
        self._bus.unsubscribe(subscription)

    def recent_events(self, limit: Optional[int] = None) -> list[MissionEvent]:
        return self._bus.recent(limit)

    def _emit(self, event_type: MissionEventTypeEnum, data: dict[str, Any]) -> None:
        event = MissionEvent(type=event_type, data=data)
        self._bus.publish(event)
        if self._broadcast is not self._bus:
            self._broadcast.publish(event)

    # Submission

    def _validate(self, mission: Union[BusinessMission, Mapping[str, Any]]) -> BusinessMission:
        if isinstance(mission, BusinessMission):
            candidate = mission.model_copy(deep=True)
        else:
            try:
                candidate = BusinessMission.model_validate(mission)
            except ValidationError as exc:
                raise MissionValidationError(
                    [f"{'.'.join(str(part) for part in err['loc']) or 'mission'}: {err['msg']}" for err in exc.errors()]
                ) from exc

        errors: list[str] = []
        if candidate.requirements.sector != candidate.business_info.sector:
            errors.append("requirements.sector must match businessInfo.sector")
        if candidate.status != MissionStatusEnum.pending:
            errors.append(f"status must be pending on submission, got {candidate.status.value}")
        if candidate.id in self._registry:
            errors.append(f"mission id '{candidate.id}' already submitted")
        if errors:
            raise MissionValidationError(errors)
        return candidate

    async def submit(
        self, mission: Union[BusinessMission, Mapping[str, Any]]
    ) -> Union[SubmissionReady, SubmissionAccepted]:
        candidate = self._validate(mission)
        try:
            record = await self._registry.add(candidate)
        except ValueError as exc:
            raise MissionValidationError([str(exc)]) from exc

        immediate = is_immediate(candidate)
        mode = "immediate" if immediate else "batched"
        logger.info(
            "Mission accepted",
            extra={"mission_id": candidate.id, "mode": mode, "priority": candidate.priority.value},
        )
        self._emit(
            MissionEventTypeEnum.received,
            {"missionId": candidate.id, "priority": candidate.priority.value, "mode": mode},
        )

        if immediate:
            claimed = await self._registry.claim(record.mission_id)
            if claimed is None:
                # Cancelled between enqueue and claim.
                raise MissionNotFoundError(record.mission_id)
            result = await self._run_claimed(claimed)
            return SubmissionReady(result=result)

        self._schedule_batch()
        return SubmissionAccepted(mission_id=candidate.id, status=MissionStatusEnum.pending)

    # Execution

    async def _run_claimed(self, record: MissionRecord) -> DesignMissionResult:
        """Execute a claimed mission, recording success or failure. Failures re-raise."""
        mission_id = record.mission_id
        self._emit(MissionEventTypeEnum.started, {"missionId": mission_id, "attempt": record.attempts})
        try:
            result = await asyncio.wait_for(self._execute(record.mission), timeout=self._mission_timeout)
        except asyncio.TimeoutError as exc:
            error = MissionProcessingError(
                f"Mission timed out after {self._mission_timeout:g}s",
                mission_id=mission_id,
                stage="timeout",
            )
            await self._record_failure(mission_id, error)
            raise error from exc
        except (TemplateNotFoundError, MissionProcessingError) as exc:
            await self._record_failure(mission_id, exc)
            raise
        except asyncio.CancelledError:
            # Back to pending so the next pass (or process) can pick it up.
            await self._registry.fail(mission_id, "Mission execution was cancelled")
            logger.warning("Mission execution cancelled", extra={"mission_id": mission_id})
            raise

        await self._registry.complete(mission_id, result)
        logger.info(
            "Mission completed",
            extra={
                "mission_id": mission_id,
                "quality_score": result.quality_score,
                "completion_time": result.completion_time,
            },
        )
        self._emit(
            MissionEventTypeEnum.completed,
            {
                "missionId": mission_id,
                "qualityScore": result.quality_score,
                "templateId": result.selection.primary_template.id,
            },
        )
        return result

    async def _record_failure(self, mission_id: str, exc: Exception) -> None:
        record = await self._registry.fail(mission_id, str(exc))
        if record is None:
            return
        data: dict[str, Any] = {"missionId": mission_id, "error": str(exc)}
        stage = getattr(exc, "stage", None)
        if stage:
            data["stage"] = stage
        if isinstance(exc, TemplateNotFoundError):
            data["stage"] = "selection"
        self._emit(MissionEventTypeEnum.error, data)

    async def _execute(self, mission: BusinessMission) -> DesignMissionResult:
        started = time.perf_counter()
        info = mission.business_info
        requirements = mission.requirements

        try:
            selection = self._selector.select_optimal_template(requirements, info)
        except TemplateNotFoundError:
            raise
        except Exception as exc:
            raise MissionProcessingError(str(exc), mission_id=mission.id, stage="selection") from exc

        try:
            customization = self._customization.generate_customization(
                info, requirements.preferred_style, requirements.target_audience
            )
        except Exception as exc:
            raise MissionProcessingError(str(exc), mission_id=mission.id, stage="customization") from exc

        try:
            report = self._optimizer.optimize_template(
                selection.primary_template, info, requirements.target_audience
            )
        except Exception as exc:
            raise MissionProcessingError(str(exc), mission_id=mission.id, stage="optimization") from exc

        try:
            generated = await self._assets.generate_assets(info, selection, customization)
            deliverables = self._assets.build_deliverables(mission.id, selection.primary_template.id)
        except Exception as exc:
            raise MissionProcessingError(str(exc), mission_id=mission.id, stage="assets") from exc

        optimizations = merge_optimizations(
            report.titles,
            selection.conversion_optimizations,
            SECTOR_REPORT_ITEMS.get(info.sector.value, ()),
        )
        elapsed = time.perf_counter() - started
        try:
            return DesignMissionResult(
                mission_id=mission.id,
                business_info=info,
                selection=selection,
                customization=customization,
                generated_assets=generated,
                deliverables=deliverables,
                quality_score=mission_quality_score(selection, customization),
                completion_time=f"{elapsed:.1f}s",
                optimizations=tuple(optimizations),
            )
        except ValidationError as exc:
            raise MissionProcessingError(str(exc), mission_id=mission.id, stage="assets") from exc

    # Batch processing

    def _schedule_batch(self) -> None:
        if self._paused:
            return
        if self._batch_task is not None and not self._batch_task.done():
            return
        if not self._registry.has_pending():
            return
        loop = asyncio.get_running_loop()
        self._batch_task = loop.create_task(self._batch_after_delay(), name="mission-batch-pass")

    async def _batch_after_delay(self) -> None:
        if self._batch_delay:
            await asyncio.sleep(self._batch_delay)
        await self.process_pending()

    async def process_pending(self) -> int:
        """Run pending missions one at a time. Returns how many completed in this pass."""
        if self._processing or self._paused:
            return 0
        self._processing = True
        attempted: set[str] = set()
        completed = 0
        logger.info("Batch pass started", extra={"missions_in_queue": len(self._registry.pending_ids())})
        try:
            while not self._paused:
                next_id = next((mid for mid in self._registry.pending_ids() if mid not in attempted), None)
                if next_id is None:
                    break
                attempted.add(next_id)
                record = await self._registry.claim(next_id)
                if record is None:
                    continue
                try:
                    await self._run_claimed(record)
                    completed += 1
                except (TemplateNotFoundError, MissionProcessingError):
                    logger.exception("Mission failed in batch pass", extra={"mission_id": next_id})
        finally:
            self._processing = False
        logger.info("Batch pass finished", extra={"attempted": len(attempted), "completed": completed})
        return completed

    async def wait_for_batch(self) -> None:
        """Wait for the scheduled batch pass, if any, then for event delivery."""
        task = self._batch_task
        if task is not None and not task.done():
            await asyncio.shield(task)
        await self._bus.drain()

    # Control

    async def prioritize(self, mission_id: str) -> MissionRecordOut:
        record = await self._registry.prioritize(mission_id)
        logger.info("Mission prioritized", extra={"mission_id": mission_id})
        return record.to_out()

    async def cancel(self, mission_id: str) -> bool:
        try:
            await self._registry.remove(mission_id)
        except MissionInProgressError:
            logger.warning("Cancellation refused: mission is in progress", extra={"mission_id": mission_id})
            return False
        logger.info("Mission cancelled", extra={"mission_id": mission_id})
        self._emit(MissionEventTypeEnum.cancelled, {"missionId": mission_id})
        return True

    def pause(self) -> None:
        self._paused = True
        logger.info("Mission processing paused")

    def resume(self) -> None:
        self._paused = False
        logger.info("Mission processing resumed")
        self._schedule_batch()

    def get_status(self) -> MissionStatusReport:
        return self._registry.status_report(is_processing=self._processing, is_paused=self._paused)

    def get_mission(self, mission_id: str) -> MissionRecordOut:
        return self._registry.get(mission_id).to_out()

    async def handle_command(
        self, command: Union[ControlCommand, Mapping[str, Any]]
    ) -> Optional[MissionStatusReport]:
        """Apply a control-channel command. Unknown commands and unknown mission ids are no-ops."""
        if not isinstance(command, ControlCommand):
            command = ControlCommand.model_validate(command)
        action = _COMMAND_ALIASES.get(command.command)
        if action is None:
            logger.warning("Unknown control command ignored", extra={"command": command.command})
            return None

        if action == "pause":
            self.pause()
        elif action == "resume":
            self.resume()
        elif action == "getStatus":
            status = self.get_status()
            self._emit(MissionEventTypeEnum.status_report, status.model_dump(by_alias=True))
            return status
        else:
            mission_id = command.mission_id
            if mission_id is None:
                logger.warning("Control command without missionId ignored", extra={"command": command.command})
                return None
            try:
                if action == "prioritize":
                    await self.prioritize(mission_id)
                else:
                    await self.cancel(mission_id)
            except MissionNotFoundError:
                logger.warning(
                    "Control command for unknown mission ignored",
                    extra={"command": command.command, "mission_id": mission_id},
                )
        return None

    async def aclose(self) -> None:
        task, self._batch_task = self._batch_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await self._bus.aclose()
