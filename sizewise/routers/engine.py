from fastapi import APIRouter, Depends, HTTPException

from ..errors import InvalidAIResponseFormat
from ..schemas.chart import NormalizeChartRequest, NormalizeChartResponse, StretchRequest, StretchResponse
from ..schemas.recommend import ParseRequest, RecommendationRecord
from ..security import verify_api_key
from ..services.materials import MaterialStretchEstimator
from ..services.recommendation_parser import RecommendationParser
from ..services.size_chart import SizeChartNormalizer


router = APIRouter(tags=["engine"], dependencies=[Depends(verify_api_key)])


@router.post("/size-chart/normalize")
async def normalize_size_chart(body: NormalizeChartRequest) -> NormalizeChartResponse:
    """
    Normalize a scraped size chart (pipe table or header/row lists) into centimeters.
    Falls back to a basic chart built from available sizes when no chart parses.
    """
    normalizer = SizeChartNormalizer()
    chart = None
    if body.raw:
        chart = normalizer.normalize(body.raw)
    elif body.headers and body.rows:
        chart = normalizer.normalize_rows(body.headers, body.rows)

    fallback = False
    if chart is None and body.available_sizes:
        chart = normalizer.basic_chart(body.available_sizes)
        fallback = chart is not None

    return NormalizeChartResponse(chart=chart, table=normalizer.format(chart), fallback=fallback)


@router.post("/materials/stretch")
async def material_stretch(body: StretchRequest) -> StretchResponse:
    estimator = MaterialStretchEstimator()
    materials = body.materials or estimator.parse_materials(body.text)
    return StretchResponse(stretch=estimator.estimate(materials), materials=estimator.clean(materials))


@router.post("/recommendation/parse")
async def parse_recommendation(body: ParseRequest) -> RecommendationRecord:
    try:
        return RecommendationParser().parse(body.text)
    except InvalidAIResponseFormat as e:
        raise HTTPException(status_code=422, detail=str(e))
