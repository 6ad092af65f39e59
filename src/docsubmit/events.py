"""Typed lifecycle events, in-process fan-out and Redis pub/sub publishing."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from docsubmit.models.enums import LifecycleEventType, SubmissionStatus

logger = logging.getLogger(__name__)

CHANNEL = "submission_events"


class LifecycleEvent(BaseModel):
    type: LifecycleEventType
    status: SubmissionStatus
    generation: int
    steps_completed: int | None = None
    total_steps: int | None = None
    file_names: list[str] = Field(default_factory=list)
    reason: str | None = None
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


EventListener = Callable[[LifecycleEvent], None]


class EventBus:
    """Synchronous fan-out; a failing listener never breaks the publisher."""

    def __init__(self):
        self._listeners: list[EventListener] = []
        self._sinks: list = []

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: LifecycleEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Lifecycle listener failed on %s", event.type.value)

    def attach(self, sink) -> Callable[[], None]:
        """Subscribe a sink that owns resources; aclose() releases it."""
        self._sinks.append(sink)
        return self.subscribe(sink)

    async def aclose(self) -> None:
        sinks, self._sinks = self._sinks, []
        for sink in sinks:
            if sink in self._listeners:
                self._listeners.remove(sink)
            await sink.aclose()


class RedisEventPublisher:
    """EventBus listener that forwards each event to a Redis channel as JSON."""

    def __init__(self, redis, channel: str = CHANNEL):
        self._redis = redis
        self.channel = channel
        self._pending: set[asyncio.Task] = set()

    def __call__(self, event: LifecycleEvent) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; dropping %s event", event.type.value)
            return
        task = loop.create_task(self.publish(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def publish(self, event: LifecycleEvent) -> None:
        try:
            await self._redis.publish(self.channel, event.model_dump_json())
        except Exception:
            logger.exception("Failed to publish submission event")

    async def drain(self) -> None:
        """Wait for publishes already scheduled."""
        if self._pending:
            await asyncio.gather(*self._pending)

    async def aclose(self) -> None:
        """Flush pending publishes, then close the Redis connection."""
        await self.drain()
        try:
            await self._redis.aclose()
        except Exception:
            logger.exception("Failed to close Redis connection")
