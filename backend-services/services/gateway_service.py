"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

import json
import logging
import time
from typing import Any, Callable

import httpx
from pydantic import ValidationError

from models.request_payload_model import RequestPayloadModel
from models.response_model import ResponseModel
from utils.constants import Messages
from utils.content_util import build_generate_request
from utils.error_codes import ErrorKind, status_for
from utils.http_client import build_http_client, post_generate_content
from utils.settings_util import GatewaySettings

logger = logging.getLogger('insight.gateway')

ALLOWED_METHODS = ('GET', 'POST')


class GatewayService:

    def __init__(
        self,
        settings: GatewaySettings,
        client_factory: Callable[[GatewaySettings], httpx.AsyncClient] = build_http_client,
    ) -> None:
        self.settings = settings
        self._client_factory = client_factory
        self._http_client: httpx.AsyncClient | None = None

    def get_http_client(self) -> httpx.AsyncClient:
        """Return a pooled AsyncClient by default for connection reuse.

        Set ENABLE_HTTPX_CLIENT_CACHE=false to disable pooling and create a
        fresh client per request.
        """
        if self.settings.enable_client_cache:
            if self._http_client is None:
                self._http_client = self._client_factory(self.settings)
            return self._http_client
        return self._client_factory(self.settings)

    async def aclose_http_client(self) -> None:
        try:
            if self._http_client is not None:
                await self._http_client.aclose()
        except Exception as e:
            logger.warning(f'Closing upstream client failed: {e}')
        finally:
            self._http_client = None

    @staticmethod
    def error_response(request_id, kind, message, status=None, raw=None):
        status = status if status is not None else status_for(kind)
        logger.error(f'{request_id} | Gateway failed with {kind.value} ({status})')
        return ResponseModel(
            status_code=status,
            response_headers={'request_id': request_id},
            error_code=kind.value,
            error_message=message,
            raw=raw,
        )

    def liveness(self, request_id) -> ResponseModel:
        return ResponseModel(
            status_code=200,
            response_headers={'request_id': request_id},
            response={'ok': True, 'message': Messages.LIVENESS},
        )

    @staticmethod
    def parse_payload(body: Any) -> RequestPayloadModel | None:
        """Validate a request body; None when it carries no analyzable content."""
        if isinstance(body, (bytes, bytearray, str)):
            if not body:
                return None
            try:
                body = json.loads(body)
            except ValueError:
                return None
        if not isinstance(body, dict):
            return None
        try:
            payload = RequestPayloadModel.model_validate(body)
        except ValidationError:
            return None
        return payload if payload.has_content() else None

    async def handle(self, method: str, body: Any, request_id: str) -> ResponseModel:
        """Dispatch one /gateway call by method."""
        method = (method or '').upper()
        if method == 'GET':
            return self.liveness(request_id)
        if method not in ALLOWED_METHODS:
            return GatewayService.error_response(
                request_id, ErrorKind.METHOD_NOT_ALLOWED,
                Messages.METHOD_NOT_ALLOWED.format(method=method),
            )
        payload = GatewayService.parse_payload(body)
        if payload is None:
            return GatewayService.error_response(request_id, ErrorKind.INVALID_REQUEST, Messages.INVALID_REQUEST)
        return await self.forward(payload, request_id)

    def _log_context(self, request_id) -> None:
        settings = self.settings
        context = settings.execution_context
        logger.info(f'{request_id} | --- Requesting Gemini ({context.title()}) ---')
        logger.info(f'{request_id} | API Key configured: {bool(settings.google_api_key)}')
        if context == 'local':
            logger.info(f"{request_id} | Proxy configuration: {'Enabled' if settings.http_proxy else 'Disabled'}")
            logger.info(f'{request_id} | Proxy URL: {settings.http_proxy or "N/A"}')

    @staticmethod
    def _upstream_message(data: Any, status: int) -> str:
        if isinstance(data, dict):
            error = data.get('error')
            if isinstance(error, dict) and error.get('message'):
                return str(error['message'])
            if data.get('message'):
                return str(data['message'])
        return Messages.UPSTREAM_ERROR.format(status=status)

    async def forward(self, payload: RequestPayloadModel, request_id: str) -> ResponseModel:
        """Send one generateContent call and classify its outcome."""
        self._log_context(request_id)
        start_time = time.time() * 1000
        client = None
        try:
            body = build_generate_request(payload)
            client = self.get_http_client()
            http_response = await post_generate_content(client, self.settings, body, request_id=request_id)
            status = http_response.status_code
            logger.info(f'{request_id} | Upstream status code: {status}')
            ok = 200 <= status < 300
            try:
                data = http_response.json()
            except ValueError:
                # Success bodies must be JSON; error bodies are passed on as text
                if ok:
                    raise
                data = http_response.text

            if status == 429:
                return GatewayService.error_response(
                    request_id, ErrorKind.RATE_LIMIT, Messages.RATE_LIMIT, raw=data,
                )
            if not ok:
                return GatewayService.error_response(
                    request_id, ErrorKind.UPSTREAM_ERROR,
                    GatewayService._upstream_message(data, status),
                    status=status_for(ErrorKind.UPSTREAM_ERROR, status),
                    raw=data,
                )
            return ResponseModel(
                status_code=200,
                response_headers={'request_id': request_id},
                response=http_response.content,
            )
        except Exception as e:
            logger.error(f'{request_id} | Gemini proxy internal error: {e}', exc_info=True)
            return GatewayService.error_response(
                request_id, ErrorKind.INTERNAL_ERROR, str(e) or Messages.INTERNAL_ERROR,
            )
        finally:
            if client is not None and not self.settings.enable_client_cache:
                try:
                    await client.aclose()
                except Exception as e:
                    logger.warning(f'{request_id} | Closing upstream client failed: {e}')
            logger.info(f'{request_id} | Upstream time {time.time() * 1000 - start_time}ms')
