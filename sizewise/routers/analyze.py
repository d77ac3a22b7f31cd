from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import settings
from ..errors import AnalysisInProgressError, InvalidAIResponseFormat, NoRelevantMeasurementsError, TextGenerationError
from ..schemas.analysis import AnalysisResult, AnalyzeRequest
from ..security import verify_api_key
from ..services.analysis import AnalysisService
from ..services.retry import RetryPolicy
from ..services.store import AnalysisStore
from ..services.text_providers import get_provider


router = APIRouter(tags=["analysis"], dependencies=[Depends(verify_api_key)])

# In-memory analysis store (per process). Replace with persistent store in production.
store = AnalysisStore(ttl_seconds=settings.cache_ttl_seconds)
_service: AnalysisService | None = None


def get_analysis_service() -> AnalysisService:
    global _service
    if _service is None:
        _service = AnalysisService(
            provider=get_provider(settings.text_provider),
            store=store,
            policy=RetryPolicy(
                max_attempts=settings.generation_max_attempts,
                delay_seconds=settings.generation_retry_delay_seconds,
            ),
        )
    return _service


@router.post("/analyze")
async def analyze(body: AnalyzeRequest, service: AnalysisService = Depends(get_analysis_service)) -> AnalysisResult:
    try:
        return await service.analyze(body.product, body.profile, body.preferences)
    except NoRelevantMeasurementsError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AnalysisInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidAIResponseFormat as e:
        raise HTTPException(status_code=502, detail=f"Failed to parse AI response: {e}")
    except TextGenerationError as e:
        raise HTTPException(status_code=502, detail=f"Text generation failed: {e}")


@router.get("/analysis")
async def get_analysis(url: Optional[str] = Query(None)) -> AnalysisResult:
    result = store.get(url) if url else store.latest()
    if result is None:
        raise HTTPException(status_code=404, detail="No analysis found")
    return result


@router.delete("/analysis")
async def clear_analysis(url: Optional[str] = Query(None)):
    store.clear(url)
    return {"success": True}
