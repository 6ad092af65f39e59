import logging

from docsubmit.client import HttpSubmissionClient, SubmissionClient
from docsubmit.config import Settings, configure_logging, get_settings
from docsubmit.events import EventBus, RedisEventPublisher
from docsubmit.identity import IdentityProvider, build_identity_strategy
from docsubmit.jurisdictions import get_directory
from docsubmit.orchestrator import SubmissionOrchestrator
from docsubmit.redis import get_async_redis

logger = logging.getLogger(__name__)


def create_orchestrator(
    settings: Settings | None = None,
    *,
    client: SubmissionClient | None = None,
    provider: IdentityProvider | None = None,
    redis=None,
) -> SubmissionOrchestrator:
    """Wire an orchestrator from settings: webhook client, identity mode, event sinks."""
    settings = settings or get_settings()
    configure_logging(settings)

    events = EventBus()
    redis = redis if redis is not None else get_async_redis(settings)
    if redis is not None:
        events.attach(RedisEventPublisher(redis, settings.events_channel))
        logger.info("Publishing submission events to channel %s", settings.events_channel)

    orchestrator = SubmissionOrchestrator(
        client or HttpSubmissionClient(settings),
        directory=get_directory(settings.jurisdictions),
        identity=build_identity_strategy(settings, provider),
        events=events,
        settings=settings,
    )
    logger.info("Submission orchestrator ready (identity_mode=%s)", settings.identity_mode)
    return orchestrator
