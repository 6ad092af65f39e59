"""External submission collaborator: posts the bundle to the analysis webhook."""

import logging
from typing import Protocol

import httpx

from docsubmit.config import Settings, get_settings
from docsubmit.exceptions import SubmissionError
from docsubmit.schemas.files import SubmissionRequest

logger = logging.getLogger(__name__)


class SubmissionClient(Protocol):
    async def submit(self, request: SubmissionRequest) -> None:
        """Deliver the request; raise on any failure."""
        ...


class HttpSubmissionClient:
    """Multipart POST of every staged file plus email and jurisdiction fields."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings or get_settings()
        self._http_client = http_client

    def _build_multipart(self, request: SubmissionRequest):
        files = [
            ("files", (f.name, f.content, f.media_type))
            for f in request.files
        ]
        data = {
            "email": request.contact_email,
            "jurisdiction": request.jurisdiction,
        }
        return files, data

    async def submit(self, request: SubmissionRequest) -> None:
        url = self._settings.webhook_url
        files, data = self._build_multipart(request)

        try:
            if self._http_client is not None:
                resp = await self._http_client.post(url, files=files, data=data)
            else:
                async with httpx.AsyncClient(
                    timeout=self._settings.webhook_timeout_seconds,
                ) as client:
                    resp = await client.post(url, files=files, data=data)
        except httpx.HTTPError as exc:
            raise SubmissionError(f"Request to {url} failed: {exc}") from exc

        if resp.is_error:
            raise SubmissionError(
                f"Submission rejected with HTTP {resp.status_code}"
            )

        logger.info(
            "Submitted %d file(s) for %s (HTTP %d)",
            len(request.files), request.jurisdiction, resp.status_code,
        )
