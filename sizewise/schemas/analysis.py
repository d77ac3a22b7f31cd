from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .chart import MaterialEntry, NormalizedSizeChart
from .recommend import RecommendationRecord


class FitFeedback(BaseModel):
    response: str
    percentage: float


class ProductData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    title: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    fit: Optional[str] = None
    available_sizes: List[str] = Field(default_factory=list, alias="availableSizes")
    size_chart: Optional[str] = Field(None, alias="sizeChart")
    size_chart_headers: Optional[List[str]] = Field(None, alias="sizeChartHeaders")
    size_chart_rows: Optional[List[List[str]]] = Field(None, alias="sizeChartRows")
    materials: List[Dict[str, Any]] = Field(default_factory=list)
    fit_feedback: Dict[str, FitFeedback] = Field(default_factory=dict, alias="fitFeedback")


class Preferences(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    preferred_fit: Optional[str] = Field(None, alias="preferredFit")
    size_preference: Optional[str] = Field(None, alias="sizePreference")


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product: ProductData
    # Raw user profile snapshot; values may be numbers or numeric strings
    profile: Dict[str, Any] = Field(default_factory=dict)
    preferences: Preferences = Field(default_factory=Preferences)


class MaterialProperties(BaseModel):
    stretch: int
    materials: List[MaterialEntry] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    recommendation: RecommendationRecord = Field(alias="sizeRecommendation")
    product: ProductData = Field(alias="productInfo")
    user_measurements: Dict[str, float] = Field(alias="userMeasurements")
    size_chart: Optional[NormalizedSizeChart] = Field(None, alias="sizeChart")
    material_properties: MaterialProperties = Field(alias="materialProperties")
    timestamp: str
