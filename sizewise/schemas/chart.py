from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class NormalizedSizeChart(BaseModel):
    # Canonical measurement headers, size column excluded, original order kept
    headers: List[str] = Field(default_factory=list)
    # size label -> canonical header -> centimeters
    entries: Dict[str, Dict[str, float]] = Field(default_factory=dict)


class MaterialEntry(BaseModel):
    material: str
    percentage: float


class NormalizeChartRequest(BaseModel):
    raw: Optional[str] = None
    headers: Optional[List[str]] = None
    rows: Optional[List[List[str]]] = None
    available_sizes: List[str] = Field(default_factory=list)


class NormalizeChartResponse(BaseModel):
    chart: Optional[NormalizedSizeChart]
    table: str
    fallback: bool = False


class StretchRequest(BaseModel):
    # Either a structured list or free text such as "95% Cotton 5% Elastane"
    materials: List[Dict[str, object]] = Field(default_factory=list)
    text: Optional[str] = None


class StretchResponse(BaseModel):
    stretch: int
    materials: List[MaterialEntry]
