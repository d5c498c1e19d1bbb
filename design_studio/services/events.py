from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Optional, Union

from design_studio.config import settings
from design_studio.schemas.missions import MissionEvent

logger = logging.getLogger(__name__)

EventCallback = Callable[[MissionEvent], Union[None, Awaitable[None]]]


class Subscription:
    """One subscriber: a bounded queue drained by its own dispatch task."""

    def __init__(self, callback: EventCallback, *, name: str, queue_size: int) -> None:
        self.callback = callback
        self.name = name
        self.queue_size = queue_size
        self.dropped = 0
        self.delivered = 0
        self._queue: Optional[asyncio.Queue[MissionEvent]] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def _ensure_dispatcher(self) -> asyncio.Queue[MissionEvent]:
        loop = asyncio.get_running_loop()
        # Queues and tasks belong to one loop; rebuild when a new loop publishes.
        if self._queue is None or self._loop is not loop or self._task is None or self._task.done():
            if self._loop is not loop or self._queue is None:
                self._queue = asyncio.Queue(maxsize=self.queue_size)
            self._loop = loop
            self._task = loop.create_task(self._dispatch(self._queue), name=f"event-subscriber:{self.name}")
        return self._queue

    def offer(self, event: MissionEvent) -> bool:
        queue = self._ensure_dispatcher()
        try:
            queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Event dropped: subscriber queue is full",
                extra={"subscriber": self.name, "event_type": event.type.value, "dropped": self.dropped},
            )
            return False
        return True

    async def _dispatch(self, queue: asyncio.Queue[MissionEvent]) -> None:
        while True:
            event = await queue.get()
            try:
                result = self.callback(event)
                if inspect.isawaitable(result):
                    await result
                self.delivered += 1
            except Exception:
                logger.exception(
                    "Event subscriber callback failed",
                    extra={"subscriber": self.name, "event_type": event.type.value},
                )
            finally:
                queue.task_done()

    async def drain(self) -> None:
        if self._queue is not None and self._loop is asyncio.get_running_loop():
            await self._queue.join()

    async def close(self) -> None:
        task, self._task = self._task, None
        self._queue = None
        if task is None or task.done():
            return
        if task.get_loop() is not asyncio.get_running_loop():
            if not task.get_loop().is_closed():
                task.cancel()
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


class EventBus:
    """
    Publish/subscribe fan-out for mission lifecycle events.

    `publish` never blocks: each subscriber owns a bounded queue and a dispatch
    task, so a slow subscriber only delays itself. When a subscriber's queue is
    full the event is dropped for that subscriber alone.
    """

    def __init__(self, *, queue_size: Optional[int] = None, history_limit: Optional[int] = None) -> None:
        self._queue_size = queue_size or settings.EVENT_SUBSCRIBER_QUEUE_SIZE
        self._history: deque[MissionEvent] = deque(maxlen=history_limit or settings.EVENT_HISTORY_LIMIT)
        self._subscriptions: list[Subscription] = []
        self._counter = 0

    @property
    def subscriptions(self) -> list[Subscription]:
        return list(self._subscriptions)

    def subscribe(self, callback: EventCallback, name: Optional[str] = None) -> Subscription:
        self._counter += 1
        subscription = Subscription(
            callback,
            name=name or getattr(callback, "__name__", None) or f"subscriber-{self._counter}",
            queue_size=self._queue_size,
        )
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
        task = subscription._task
        subscription._task = None
        subscription._queue = None
        if task is not None and not task.done() and not task.get_loop().is_closed():
            task.cancel()

    def publish(self, event: MissionEvent) -> None:
        """Record the event and enqueue it for every subscriber, in registration order."""
        self._history.append(event)
        for subscription in list(self._subscriptions):
            subscription.offer(event)

    def emit(self, event_type: Any, data: Optional[dict[str, Any]] = None) -> MissionEvent:
        event = MissionEvent(type=event_type, data=data or {})
        self.publish(event)
        return event

    def recent(self, limit: Optional[int] = None) -> list[MissionEvent]:
        events = list(self._history)
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events

    async def drain(self) -> None:
        """Wait until every subscriber has processed what was queued so far."""
        await asyncio.gather(*(subscription.drain() for subscription in list(self._subscriptions)))

    async def aclose(self) -> None:
        for subscription in list(self._subscriptions):
            await subscription.close()


# Process-wide surface for external consumers; orchestrators forward every event here.
broadcast_bus = EventBus()
