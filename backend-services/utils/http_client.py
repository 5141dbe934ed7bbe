"""
HTTP client helper for the single outbound generateContent call.

Usage:
    client = build_http_client(settings)
    resp = await post_generate_content(client, settings, body)

No retries, no backoff: a failed call surfaces immediately to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from utils.settings_util import GatewaySettings

logger = logging.getLogger('insight.gateway')


def _build_timeout(settings: GatewaySettings) -> httpx.Timeout:
    # Unset means wait for the upstream as long as it takes
    return httpx.Timeout(settings.upstream_timeout)


def build_http_client(settings: GatewaySettings) -> httpx.AsyncClient:
    """Create the AsyncClient used for upstream calls.

    trust_env is off so HTTP_PROXY/HTTPS_PROXY in the environment are never
    applied implicitly; the proxy comes only from settings.proxy_url.
    """
    kwargs: Dict[str, Any] = {
        'timeout': _build_timeout(settings),
        'trust_env': False,
    }
    proxy = settings.proxy_url
    if proxy:
        kwargs['proxy'] = proxy
    return httpx.AsyncClient(**kwargs)


async def post_generate_content(
    client: httpx.AsyncClient,
    settings: GatewaySettings,
    body: Dict[str, Any],
    *,
    request_id: str | None = None,
) -> httpx.Response:
    """POST the request body to the configured model, credential as the key query parameter."""
    url = settings.generate_content_url
    logger.info(f'{request_id} | Upstream call to: {url}')
    return await client.post(
        url,
        params={'key': settings.google_api_key},
        headers={'Content-Type': 'application/json'},
        json=body,
    )
