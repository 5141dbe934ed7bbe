"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

import logging
import time
import uuid

from fastapi import APIRouter, Request

from services.gateway_service import GatewayService
from utils.response_util import process_rest_response

gateway_router = APIRouter()

logger = logging.getLogger('insight.gateway')

GATEWAY_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']


def get_gateway_service(request: Request) -> GatewayService:
    return request.app.state.gateway_service


"""
Endpoint

Request:
{"text": "...", "image": "<base64>", "file": {"base64": "...", "mimeType": "application/pdf"}}
Response:
<raw generateContent body> | {"error": "...", "message": "...", "raw": ...}
"""


@gateway_router.api_route(
    '/gateway',
    methods=GATEWAY_METHODS,
    description='Forward one analysis request to Gemini (GET is a liveness probe)',
)
async def gateway(request: Request):
    request_id = str(uuid.uuid4())
    start_time = time.time() * 1000
    try:
        logger.info(f'{request_id} | Gateway {request.method} {request.url.path}')
        service = get_gateway_service(request)
        body = await request.body() if request.method.upper() == 'POST' else None
        return process_rest_response(await service.handle(request.method, body, request_id))
    finally:
        end_time = time.time() * 1000
        logger.info(f'{request_id} | Total time: {end_time - start_time}ms')


@gateway_router.get('/health', description='Public health probe', include_in_schema=False)
async def health():
    return {'status': 'online'}
