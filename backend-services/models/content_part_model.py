"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

from pydantic import BaseModel, ConfigDict, Field


class InlineDataModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    mime_type: str = Field(..., alias='mimeType')
    data: str = Field(..., description='Base64 payload')


class TextPartModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


class InlineDataPartModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    inline_data: InlineDataModel = Field(..., alias='inlineData')


UpstreamContentPart = TextPartModel | InlineDataPartModel


def dump_part(part: UpstreamContentPart) -> dict:
    """Serialize a part with the upstream's camelCase field names."""
    return part.model_dump(by_alias=True)
