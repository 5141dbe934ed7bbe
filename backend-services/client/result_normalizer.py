"""
Convert gateway envelopes into AnalysisResult values.

The gateway hands back either the raw generateContent body or an error
envelope. Everything here returns an outcome and never raises: structured
JSON in the model's text is used when it parses, plain text otherwise, and
every failure becomes an error-shaped result.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, ClassVar

from models.analysis_result_model import AnalysisResultModel
from utils.constants import Defaults, ResultText
from utils.error_codes import ErrorKind

logger = logging.getLogger('insight.client')


@dataclass(frozen=True)
class AnalysisSuccess:
    result: AnalysisResultModel
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class AnalysisFailure:
    result: AnalysisResultModel
    message: str
    kind: str | None = None
    ok: ClassVar[bool] = False


AnalysisOutcome = AnalysisSuccess | AnalysisFailure


def extract_text(body: Any) -> str:
    """First text fragment of the first candidate, '' when any level is missing."""
    try:
        text = body['candidates'][0]['content']['parts'][0].get('text')
    except (KeyError, IndexError, TypeError, AttributeError):
        return ''
    return text if isinstance(text, str) else ''


def _strip_fences(text: str) -> str:
    return text.replace('```json', '').replace('```', '').strip()


def _load_json(text: str) -> Any:
    cleaned = _strip_fences(text)
    try:
        return json.loads(cleaned)
    except ValueError:
        start, end = cleaned.find('{'), cleaned.rfind('}')
        if start == -1 or end <= start:
            raise
        return json.loads(cleaned[start:end + 1])


def _as_text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _as_points(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, list):
        return [_as_text(v) for v in value]
    return [_as_text(value)]


def structured_result(text: str) -> AnalysisResultModel | None:
    """Read summary/keyPoints/conclusion/detailedAnalysis from JSON embedded in text.

    Returns None when the text holds no '{' or the JSON does not parse.
    """
    if '{' not in text:
        return None
    try:
        parsed = _load_json(text)
    except ValueError:
        logger.debug('Model text is not JSON; using plain text presentation')
        return None
    fields = parsed if isinstance(parsed, dict) else {}
    return AnalysisResultModel(
        summary=_as_text(fields.get('summary')) or ResultText.PARSED_SUMMARY_DEFAULT,
        key_points=_as_points(fields.get('keyPoints')),
        conclusion=_as_text(fields.get('conclusion')),
        detailed_analysis=_as_text(fields.get('detailedAnalysis')) or text,
    )


def plain_text_result(text: str) -> AnalysisResultModel:
    return AnalysisResultModel(
        summary=text[:Defaults.SUMMARY_PREVIEW_CHARS] + '...',
        key_points=[text],
        conclusion=ResultText.PLAIN_CONCLUSION,
        detailed_analysis=text,
    )


def rate_limit_result(message: str | None = None) -> AnalysisResultModel:
    message = message or ResultText.RATE_LIMIT_DEFAULT
    return AnalysisResultModel(
        summary=ResultText.RATE_LIMIT_SUMMARY,
        key_points=[message],
        conclusion=ResultText.RATE_LIMIT_CONCLUSION,
        detailed_analysis=message,
    )


def error_result(message: str) -> AnalysisResultModel:
    return AnalysisResultModel(
        summary=ResultText.ERROR_SUMMARY.format(message=message),
        key_points=[],
        conclusion=ResultText.ERROR_CONCLUSION,
        detailed_analysis=message,
    )


def _error_message(body: dict, status_code: int) -> str:
    error = body.get('error')
    if isinstance(error, dict) and error.get('message'):
        return _as_text(error['message'])
    if body.get('message'):
        return _as_text(body['message'])
    return ResultText.REQUEST_FAILED.format(status=status_code)


def normalize_envelope(status_code: int, body: Any) -> AnalysisOutcome:
    """Map one gateway response onto an outcome."""
    try:
        if not 200 <= status_code < 300:
            envelope = body if isinstance(body, dict) else {}
            kind = envelope.get('error') if isinstance(envelope.get('error'), str) else None
            if status_code == 429 or kind == ErrorKind.RATE_LIMIT.value:
                message = _as_text(envelope.get('message')) or ResultText.RATE_LIMIT_DEFAULT
                return AnalysisFailure(
                    result=rate_limit_result(message),
                    message=message,
                    kind=ErrorKind.RATE_LIMIT.value,
                )
            message = _error_message(envelope, status_code)
            return AnalysisFailure(result=error_result(message), message=message, kind=kind)

        text = extract_text(body)
        result = structured_result(text) or plain_text_result(text)
        return AnalysisSuccess(result=result)
    except Exception as e:
        return exception_outcome(e)


def exception_outcome(exc: BaseException) -> AnalysisFailure:
    """Error-shaped outcome for a failure raised anywhere on the calling path."""
    message = str(exc) or exc.__class__.__name__
    logger.error(f'Analysis request failed: {message}')
    return AnalysisFailure(result=error_result(message), message=message)
