from __future__ import annotations

import pytest

from docsubmit.config import Settings
from docsubmit.jurisdictions import JurisdictionDirectory
from tests.factories import FakeSubmissionClient


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        progress_interval_seconds=0.01,
        success_settle_seconds=0,
        failure_settle_seconds=0,
        redis_url=None,
        secret_key="test-secret-key-long-enough-for-hs256-signing",
    )


@pytest.fixture
def directory() -> JurisdictionDirectory:
    return JurisdictionDirectory(["India", "Germany", "United States"])


@pytest.fixture
def client() -> FakeSubmissionClient:
    return FakeSubmissionClient()
