from fastapi.responses import JSONResponse, Response
import logging

from models.error_envelope_model import ErrorEnvelopeModel
from models.response_model import ResponseModel
from utils.constants import Headers, Messages
from utils.error_codes import ErrorKind, is_valid_kind

logger = logging.getLogger('insight.gateway')


def _normalize_headers(hdrs: dict | None) -> dict | None:
    try:
        if not hdrs:
            return hdrs

        out = {k: str(v) for k, v in hdrs.items() if k != Headers.REQUEST_ID}
        rid = hdrs.get(Headers.REQUEST_ID) or hdrs.get('Request-Id') or hdrs.get('X-Request-ID')

        if rid and 'X-Request-ID' not in out:
            out['X-Request-ID'] = str(rid)
        return out
    except Exception:
        return hdrs


def _error_envelope(response: ResponseModel) -> ErrorEnvelopeModel:
    kind = response.error_code if response.error_code and is_valid_kind(response.error_code) else ErrorKind.INTERNAL_ERROR
    message = response.error_message or response.message or Messages.INTERNAL_ERROR
    return ErrorEnvelopeModel(error=kind, message=message, raw=response.raw)


def process_rest_response(response: ResponseModel):
    """Render a ResponseModel.

    Success bodies held as bytes are sent verbatim; dict/list/str bodies are
    JSON encoded. Failures become the {error, message, raw?} envelope.
    """
    try:
        headers = _normalize_headers(response.response_headers)
        status = int(response.status_code or 200)
        ok = 200 <= status < 300
        if ok:
            body = response.response
            if isinstance(body, (bytes, bytearray)):
                return Response(content=bytes(body), status_code=status, media_type=Headers.CONTENT_TYPE_JSON, headers=headers)
            if body is None:
                body = {'message': response.message} if response.message else {}
            return JSONResponse(content=body, status_code=status, headers=headers)

        envelope = _error_envelope(response)
        return JSONResponse(content=envelope.to_content(), status_code=status, headers=headers)
    except Exception as e:
        logger.error(f'An error occurred while processing the response: {e}')
        envelope = ErrorEnvelopeModel(error=ErrorKind.INTERNAL_ERROR, message=Messages.INTERNAL_ERROR)
        return JSONResponse(content=envelope.to_content(), status_code=500)
