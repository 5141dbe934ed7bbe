"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv
import os
import uuid
import uvicorn

load_dotenv('.env.local')
load_dotenv()

from models.error_envelope_model import ErrorEnvelopeModel
from routes.gateway_routes import gateway_router
from services.gateway_service import GatewayService
from utils.constants import Messages
from utils.error_codes import ErrorKind
from utils.logging_util import configure_logger
from utils.response_util import process_rest_response
from utils.settings_util import get_settings

gateway_logger = configure_logger('insight.gateway')
client_logger = configure_logger('insight.client')


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    settings = app.state.gateway_service.settings
    gateway_logger.info(
        f'Insight gateway starting ({settings.execution_context}), '
        f'model {settings.gemini_model}, API key configured: {bool(settings.google_api_key)}'
    )
    if settings.http_proxy and not settings.is_local:
        gateway_logger.info('HTTP_PROXY is set but ignored outside local development')
    try:
        yield
    finally:
        await app.state.gateway_service.aclose_http_client()
        gateway_logger.info('Insight gateway stopped')


insight = FastAPI(
    title='insight',
    description='Multimodal analysis gateway: normalizes text, image, document, audio, video and web inputs into one Gemini request and classifies its failures.',
    version='1.0.0',
    lifespan=app_lifespan,
)

insight.state.gateway_service = GatewayService(get_settings())


def _env_cors_config():
    origins_env = os.getenv('ALLOWED_ORIGINS', 'http://localhost:3000')
    if not (origins_env or '').strip():
        origins_env = 'http://localhost:3000'
    origins = [o.strip() for o in origins_env.split(',') if o.strip()]
    credentials = os.getenv('ALLOW_CREDENTIALS', 'false').lower() == 'true'
    if credentials and any(o == '*' for o in origins):
        origins = ['http://localhost', 'http://localhost:3000']
    return {
        'origins': origins,
        'credentials': credentials,
        'methods': ['GET', 'POST', 'OPTIONS'],
        'headers': ['Accept', 'Content-Type'],
    }


_cors = _env_cors_config()
insight.add_middleware(
    CORSMiddleware,
    allow_origins=_cors['origins'],
    allow_credentials=_cors['credentials'],
    allow_methods=_cors['methods'],
    allow_headers=_cors['headers'],
)


@insight.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code != 405:
        return await http_exception_handler(request, exc)
    request_id = str(uuid.uuid4())
    gateway_logger.info(f'{request_id} | Unrouted method {request.method} {request.url.path}')
    return process_rest_response(GatewayService.error_response(
        request_id, ErrorKind.METHOD_NOT_ALLOWED,
        Messages.METHOD_NOT_ALLOWED.format(method=request.method),
    ))


@insight.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    gateway_logger.error(f'Unhandled error on {request.method} {request.url.path}: {exc}', exc_info=True)
    envelope = ErrorEnvelopeModel(error=ErrorKind.INTERNAL_ERROR, message=str(exc) or Messages.INTERNAL_ERROR)
    return JSONResponse(content=envelope.to_content(), status_code=500)


insight.include_router(gateway_router, tags=['Gateway'])


def run():
    server_port = int(os.getenv('PORT', 5001))
    gateway_logger.info(f'Started insight on port {server_port}')
    uvicorn.run(
        'insight:insight',
        host=os.getenv('HOST', '0.0.0.0'),
        port=server_port,
        reload=os.getenv('DEV_RELOAD', 'false').lower() == 'true',
        reload_excludes=['venv/*', 'platform-logs/*'],
        log_level='info',
    )


def main():
    try:
        run()
    except Exception as e:
        gateway_logger.error(f'Failed to start server: {str(e)}')
        raise


if __name__ == '__main__':
    main()
