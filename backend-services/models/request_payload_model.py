"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

from pydantic import BaseModel, ConfigDict, Field


class FilePayloadModel(BaseModel):
    """Inline file carried to the upstream model as base64 bytes."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    base64: str | None = Field(
        None,
        description='Base64 file content without any data URL prefix',
        examples=['JVBERi0xLjQK'],
    )

    mime_type: str | None = Field(
        None,
        alias='mimeType',
        description='MIME type of the file',
        examples=['application/pdf'],
    )


class RequestPayloadModel(BaseModel):
    """Body accepted by POST /gateway.

    At least one of text, image or file.base64 must be non-empty; see
    has_content().
    """

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    text: str | None = Field(
        None,
        description='Prompt or plain text content to analyze',
        examples=['请分析这张图片的内容'],
    )

    image: str | None = Field(
        None,
        description='Base64 image content without any data URL prefix',
        examples=['iVBORw0KGgo='],
    )

    image_mime_type: str | None = Field(
        None,
        alias='imageMimeType',
        description='MIME type of the image; image/jpeg when omitted',
        examples=['image/png'],
    )

    file: FilePayloadModel | None = Field(
        None,
        description='Inline document, audio or video file',
    )

    def has_content(self) -> bool:
        return bool(self.text or self.image or (self.file and self.file.base64))
