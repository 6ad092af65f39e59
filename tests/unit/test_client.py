from __future__ import annotations

import asyncio

import httpx
import pytest

from docsubmit.client import HttpSubmissionClient
from docsubmit.exceptions import SubmissionError
from docsubmit.schemas.files import SubmissionRequest
from tests.factories import pdf


def make_request() -> SubmissionRequest:
    return SubmissionRequest(
        files=(pdf("policy.pdf", 20), pdf("handbook.pdf", 30)),
        jurisdiction="India",
        contact_email="legal@example.com",
    )


def run_with(handler, settings) -> list[httpx.Request]:
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        request.read()
        seen.append(request)
        return handler(request)

    async def scenario() -> None:
        async with httpx.AsyncClient(transport=httpx.MockTransport(recording)) as http:
            await HttpSubmissionClient(settings, http_client=http).submit(make_request())

    asyncio.run(scenario())
    return seen


def test_posts_multipart_bundle(settings) -> None:
    settings.webhook_url = "https://hooks.example.test/analyze"
    seen = run_with(lambda request: httpx.Response(200, json={"ok": True}), settings)

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://hooks.example.test/analyze"
    assert request.headers["content-type"].startswith("multipart/form-data")

    body = request.content
    assert body.count(b'name="files"') == 2
    assert b'filename="policy.pdf"' in body
    assert b'filename="handbook.pdf"' in body
    assert b'name="email"' in body and b"legal@example.com" in body
    assert b'name="jurisdiction"' in body and b"India" in body
    assert body.index(b"policy.pdf") < body.index(b"handbook.pdf")


def test_http_error_status_raises(settings) -> None:
    with pytest.raises(SubmissionError, match="HTTP 500"):
        run_with(lambda request: httpx.Response(500), settings)


def test_transport_failure_raises(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SubmissionError, match="failed"):
        run_with(handler, settings)


def test_request_requires_files() -> None:
    with pytest.raises(ValueError):
        SubmissionRequest(files=(), jurisdiction="India", contact_email="a@b.com")


def test_request_is_immutable() -> None:
    request = make_request()
    with pytest.raises(ValueError):
        request.jurisdiction = "Germany"
