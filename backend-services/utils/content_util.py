from models.content_part_model import (
    InlineDataModel,
    InlineDataPartModel,
    TextPartModel,
    UpstreamContentPart,
    dump_part,
)
from models.request_payload_model import RequestPayloadModel
from utils.constants import Defaults


def build_content_parts(payload: RequestPayloadModel) -> list[UpstreamContentPart]:
    """Turn a request payload into the ordered upstream parts.

    The text part always comes first so the upstream request is never empty.
    Image and file parts follow in that order; both are kept when both are set.
    """
    parts: list[UpstreamContentPart] = [TextPartModel(text=payload.text or Defaults.PLACEHOLDER_TEXT)]

    if payload.image:
        parts.append(InlineDataPartModel(
            inline_data=InlineDataModel(
                mime_type=payload.image_mime_type or Defaults.IMAGE_MIME_TYPE,
                data=payload.image,
            )
        ))

    if payload.file and payload.file.base64:
        parts.append(InlineDataPartModel(
            inline_data=InlineDataModel(
                mime_type=payload.file.mime_type or Defaults.FILE_MIME_TYPE,
                data=payload.file.base64,
            )
        ))
    return parts


def build_generate_request(payload: RequestPayloadModel) -> dict:
    """Wrap the parts in the generateContent request body."""
    return {'contents': [{'parts': [dump_part(p) for p in build_content_parts(payload)]}]}


def strip_data_url(value: str) -> str:
    """Drop a 'data:<mime>;base64,' prefix, keeping the value when there is nothing after the comma."""
    segments = (value or '').split(',')
    if len(segments) > 1 and segments[1]:
        return segments[1]
    return value


def data_url_mime_type(value: str) -> str | None:
    """MIME type declared by a data URL prefix, if any."""
    if not value or not value.startswith('data:') or ',' not in value:
        return None
    header = value[len('data:'):value.index(',')]
    mime = header.split(';', 1)[0].strip()
    return mime or None
