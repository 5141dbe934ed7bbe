"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from utils.error_codes import ErrorKind


class ErrorEnvelopeModel(BaseModel):
    """Error body returned by the gateway for every failed call."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    error: ErrorKind = Field(..., description='Stable error kind the caller can branch on')

    message: str = Field(..., min_length=1, description='Human readable message')

    raw: Any = Field(None, description='Upstream body, when the failure came from upstream')

    def to_content(self) -> dict:
        return self.model_dump(exclude_none=True)
