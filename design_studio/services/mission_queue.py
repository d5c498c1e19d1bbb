from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from design_studio.domain.taxonomy import (
    FINISHED_STATUSES,
    PRIORITY_WEIGHTS,
    MissionPriorityEnum,
    MissionStatusEnum,
)
from design_studio.errors import MissionNotFoundError
from design_studio.schemas.missions import BusinessMission, DesignMissionResult, MissionRecordOut, MissionStatusReport


class MissionInProgressError(RuntimeError):
    def __init__(self, mission_id: str) -> None:
        self.mission_id = mission_id
        super().__init__(f"Mission '{mission_id}' is in progress and cannot be cancelled.")


@dataclass
class MissionRecord:
    mission: BusinessMission
    attempts: int = 0
    last_error: Optional[str] = None
    result: Optional[DesignMissionResult] = None

    @property
    def mission_id(self) -> str:
        return self.mission.id

    @property
    def status(self) -> MissionStatusEnum:
        return self.mission.status

    def to_out(self) -> MissionRecordOut:
        return MissionRecordOut(
            mission=self.mission.model_copy(deep=True),
            attempts=self.attempts,
            last_error=self.last_error,
            result=self.result,
        )


class MissionRegistry:
    """
    Every known mission plus the pending processing order.

    All mutations (enqueue, reprioritize, cancel, claim, complete, fail) take the
    same asyncio lock, so immediate submissions and a running batch pass never
    interleave inside a mutation.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._records: dict[str, MissionRecord] = {}
        self._order: list[str] = []

    def __contains__(self, mission_id: object) -> bool:
        return mission_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def get(self, mission_id: str) -> MissionRecord:
        record = self._records.get(mission_id)
        if record is None:
            raise MissionNotFoundError(mission_id)
        return record

    def pending_ids(self) -> list[str]:
        return [mid for mid in self._order if self._records[mid].status == MissionStatusEnum.pending]

    def has_pending(self) -> bool:
        return any(record.status == MissionStatusEnum.pending for record in self._records.values())

    async def add(self, mission: BusinessMission) -> MissionRecord:
        async with self._lock:
            if mission.id in self._records:
                raise ValueError(f"Mission '{mission.id}' already exists.")
            record = MissionRecord(mission=mission)
            self._records[mission.id] = record
            self._order.append(mission.id)
            return record

    async def claim(self, mission_id: str) -> Optional[MissionRecord]:
        """Move one pending mission to in_progress. Returns None if it is gone or not pending."""
        async with self._lock:
            record = self._records.get(mission_id)
            if record is None or record.status != MissionStatusEnum.pending:
                return None
            record.mission.status = MissionStatusEnum.in_progress
            record.attempts += 1
            return record

    async def complete(self, mission_id: str, result: DesignMissionResult) -> MissionRecord:
        async with self._lock:
            record = self.get(mission_id)
            record.mission.status = MissionStatusEnum.completed
            record.result = result
            record.last_error = None
            return record

    async def fail(self, mission_id: str, error: str) -> Optional[MissionRecord]:
        async with self._lock:
            record = self._records.get(mission_id)
            if record is None:
                return None
            if record.status == MissionStatusEnum.in_progress:
                record.mission.status = MissionStatusEnum.pending
            record.last_error = error
            return record

    async def prioritize(self, mission_id: str) -> MissionRecord:
        async with self._lock:
            record = self.get(mission_id)
            record.mission.priority = MissionPriorityEnum.urgent
            # sort() is stable: equal weights keep their relative order.
            self._order.sort(key=lambda mid: -PRIORITY_WEIGHTS[self._records[mid].mission.priority])
            return record

    async def remove(self, mission_id: str) -> MissionRecord:
        async with self._lock:
            record = self.get(mission_id)
            if record.status == MissionStatusEnum.in_progress:
                raise MissionInProgressError(mission_id)
            del self._records[mission_id]
            self._order.remove(mission_id)
            return record

    def status_report(self, *, is_processing: bool, is_paused: bool) -> MissionStatusReport:
        statuses = [record.status for record in self._records.values()]
        return MissionStatusReport(
            is_processing=is_processing,
            is_paused=is_paused,
            missions_in_queue=sum(1 for status in statuses if status == MissionStatusEnum.pending),
            missions_in_progress=sum(1 for status in statuses if status == MissionStatusEnum.in_progress),
            missions_completed=sum(1 for status in statuses if status in FINISHED_STATUSES),
            total_missions=len(statuses),
        )
