from typing import Annotated, List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


class BareAlternative(BaseModel):
    kind: Literal["bare"] = "bare"
    size: str


class DescribedAlternative(BaseModel):
    kind: Literal["described"] = "described"
    size: str
    description: str


AlternativeSize = Annotated[Union[BareAlternative, DescribedAlternative], Field(discriminator="kind")]


class RecommendationRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    size: str = Field(min_length=1)
    confidence: Literal["high", "medium", "low"]
    reasoning: str = ""
    fit_type: Literal["fitted", "regular", "loose", ""] = Field("", alias="fitType")
    key_measurements: List[str] = Field(default_factory=list, alias="keyMeasurements")
    potential_issues: List[str] = Field(default_factory=list, alias="potentialIssues")
    alternative_sizes: List[AlternativeSize] = Field(default_factory=list, alias="alternativeSizes")


class ParseRequest(BaseModel):
    text: str
