"""
Calling-side client for the /gateway endpoint.

One coroutine per input modality. Each projects its input onto the gateway
payload, makes a single POST and resolves to an AnalysisResultModel; none of
them raises. Use analyze() directly when the caller needs to tell success and
failure apart.

Usage:
    async with AnalysisClient('http://localhost:5001') as client:
        result = await client.analyze_text('...')
"""

from __future__ import annotations

import logging
import os
from typing import Callable

import httpx

from client.result_normalizer import AnalysisOutcome, exception_outcome, normalize_envelope
from models.analysis_result_model import AnalysisResultModel
from models.request_payload_model import FilePayloadModel, RequestPayloadModel
from utils.constants import Defaults, Instructions
from utils.content_util import data_url_mime_type, strip_data_url

logger = logging.getLogger('insight.client')


def gateway_base_url() -> str:
    return os.getenv('BASE_URL', Defaults.GATEWAY_BASE_URL).rstrip('/')


class AnalysisClient:

    def __init__(
        self,
        base_url: str | None = None,
        *,
        gateway_path: str = Defaults.GATEWAY_PATH,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or gateway_base_url()).rstrip('/')
        self.gateway_path = '/' + gateway_path.lstrip('/')
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> AnalysisClient:
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
        return False

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self._http_client

    async def analyze(self, payload: RequestPayloadModel) -> AnalysisOutcome:
        """POST one payload to the gateway and normalize whatever comes back."""
        try:
            response = await self._client().post(
                self.base_url + self.gateway_path,
                json=payload.model_dump(by_alias=True, exclude_none=True),
            )
            body = response.json()
            return normalize_envelope(response.status_code, body)
        except Exception as e:
            return exception_outcome(e)

    async def _request(self, build: Callable[[], RequestPayloadModel]) -> AnalysisResultModel:
        try:
            payload = build()
        except Exception as e:
            return exception_outcome(e).result
        outcome = await self.analyze(payload)
        if not outcome.ok:
            logger.warning(f'Analysis failed: {outcome.message}')
        return outcome.result

    async def analyze_text(self, text: str) -> AnalysisResultModel:
        return await self._request(lambda: RequestPayloadModel(text=text))

    async def analyze_image(self, base64: str, mime_type: str | None = None) -> AnalysisResultModel:
        """Analyze an image; mime_type falls back to the data URL prefix, then the gateway default."""
        return await self._request(lambda: RequestPayloadModel(
            text=Instructions.IMAGE,
            image=strip_data_url(base64),
            image_mime_type=mime_type or data_url_mime_type(base64),
        ))

    async def analyze_document(self, base64: str, mime_type: str) -> AnalysisResultModel:
        return await self._request(lambda: RequestPayloadModel(
            text=Instructions.DOCUMENT,
            file=FilePayloadModel(base64=strip_data_url(base64), mime_type=mime_type),
        ))

    async def analyze_audio_file(self, base64: str, mime_type: str) -> AnalysisResultModel:
        return await self.analyze_document(base64, mime_type)

    async def analyze_video_file(self, base64: str, mime_type: str) -> AnalysisResultModel:
        return await self.analyze_document(base64, mime_type)

    async def analyze_web_url(self, url: str) -> AnalysisResultModel:
        return await self._request(lambda: RequestPayloadModel(text=Instructions.WEB_URL.format(url=url)))

    async def analyze_video_url(self, url: str) -> AnalysisResultModel:
        return await self._request(lambda: RequestPayloadModel(text=Instructions.VIDEO_URL.format(url=url)))
