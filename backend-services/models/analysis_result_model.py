"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

from pydantic import BaseModel, ConfigDict, Field


class SourceModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    uri: str


class AnalysisResultModel(BaseModel):
    """Canonical analysis result handed to callers.

    Every field is populated; missing values use the normalizer's defaults.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    summary: str = Field(..., description='Short summary')

    key_points: list[str] = Field(default_factory=list, alias='keyPoints')

    conclusion: str = Field('', description='Conclusion text')

    detailed_analysis: str | None = Field(None, alias='detailedAnalysis')

    sources: list[SourceModel] = Field(default_factory=list)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
