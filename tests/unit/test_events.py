from __future__ import annotations

import asyncio
import json
import logging

import pytest

from docsubmit.app import create_orchestrator
from docsubmit.events import EventBus, LifecycleEvent, RedisEventPublisher
from docsubmit.exceptions import IdentityError
from docsubmit.identity import AuthenticatedIdentity, StaticIdentityProvider
from docsubmit.models.enums import LifecycleEventType, SubmissionStatus
from docsubmit.redis import get_async_redis
from tests.factories import FakeRedis, FakeSubmissionClient, pdf


def reset_event(generation: int = 1) -> LifecycleEvent:
    return LifecycleEvent(
        type=LifecycleEventType.reset,
        status=SubmissionStatus.idle,
        generation=generation,
    )


def test_bus_isolates_failing_listener(caplog) -> None:
    bus = EventBus()
    received: list[LifecycleEvent] = []

    def broken(event: LifecycleEvent) -> None:
        raise RuntimeError("boom")

    bus.subscribe(broken)
    bus.subscribe(received.append)

    with caplog.at_level(logging.ERROR):
        bus.publish(reset_event())

    assert len(received) == 1
    assert "Lifecycle listener failed" in caplog.text


def test_redis_publisher_sends_json() -> None:
    redis = FakeRedis()
    publisher = RedisEventPublisher(redis, "test_channel")

    async def scenario() -> None:
        publisher(reset_event(generation=4))
        await publisher.drain()

    asyncio.run(scenario())
    channel, message = redis.published[0]
    assert channel == "test_channel"
    payload = json.loads(message)
    assert payload["type"] == "reset"
    assert payload["status"] == "idle"
    assert payload["generation"] == 4


def test_redis_failure_is_logged_not_raised(caplog) -> None:
    publisher = RedisEventPublisher(FakeRedis(fail=True))

    async def scenario() -> None:
        with caplog.at_level(logging.ERROR):
            await publisher.publish(reset_event())

    asyncio.run(scenario())
    assert "Failed to publish submission event" in caplog.text


def test_redis_publisher_outside_loop_drops_event() -> None:
    redis = FakeRedis()
    RedisEventPublisher(redis)(reset_event())
    assert redis.published == []


def test_no_redis_without_url(settings) -> None:
    assert get_async_redis(settings) is None


class TestCreateOrchestrator:
    def test_full_lifecycle_published_to_redis(self, settings) -> None:
        redis = FakeRedis()
        settings.events_channel = "docs"
        client = FakeSubmissionClient()
        orch = create_orchestrator(settings, client=client, redis=redis)
        orch.stage_files([pdf("a.pdf")])
        orch.select_jurisdiction("India")
        orch.set_contact_email("a@b.com")

        async def scenario() -> None:
            orch.submit()
            await orch.wait()
            orch.reset()
            await asyncio.sleep(0.01)

        asyncio.run(scenario())
        types = [json.loads(m)["type"] for channel, m in redis.published]
        assert {channel for channel, _ in redis.published} == {"docs"}
        assert types[0] == "entered_processing"
        assert "succeeded" in types
        assert types[-1] == "reset"

    def test_exit_flushes_and_closes_redis(self, settings) -> None:
        redis = FakeRedis()

        async def scenario() -> None:
            async with create_orchestrator(
                settings, client=FakeSubmissionClient(), redis=redis,
            ) as orch:
                orch.reset()
                assert redis.published == []

        asyncio.run(scenario())
        assert [json.loads(m)["type"] for _, m in redis.published] == ["reset"]
        assert redis.closed

    def test_bus_aclose_detaches_sink(self) -> None:
        redis = FakeRedis()
        bus = EventBus()
        bus.attach(RedisEventPublisher(redis))

        async def scenario() -> None:
            await bus.aclose()
            bus.publish(reset_event())
            await asyncio.sleep(0)

        asyncio.run(scenario())
        assert redis.closed
        assert redis.published == []

    def test_configured_jurisdictions(self, settings) -> None:
        settings.jurisdictions = ["Norway", "Chile"]
        orch = create_orchestrator(settings, client=FakeSubmissionClient())
        assert orch.directory.names == ("Norway", "Chile")

    def test_authenticated_mode(self, settings) -> None:
        settings.identity_mode = "authenticated"
        provider = StaticIdentityProvider()
        orch = create_orchestrator(settings, client=FakeSubmissionClient(), provider=provider)
        assert isinstance(orch.identity, AuthenticatedIdentity)
        assert provider.subscriber_count == 1
        orch.close()
        assert provider.subscriber_count == 0

    def test_authenticated_mode_needs_provider(self, settings) -> None:
        settings.identity_mode = "authenticated"
        with pytest.raises(IdentityError):
            create_orchestrator(settings, client=FakeSubmissionClient())
