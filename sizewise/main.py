import os
import time
import hashlib
from typing import Dict
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from .config import settings
from .routers.analyze import router as analyze_router, store as analysis_store
from .routers.engine import router as engine_router
from .security import create_jwt, verify_api_key


logger = structlog.get_logger("sizewise")


app = FastAPI(title="Sizewise Size Recommender", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Token-bucket rate limit per client
_buckets: Dict[str, tuple[float, float]] = {}


def _rate_limit(ident: str, requests_per_min: int, burst: int) -> bool:
    if requests_per_min <= 0:
        return True
    refill_rate = requests_per_min / 60.0
    capacity = float(burst)
    now = time.time()
    tokens, last = _buckets.get(ident, (capacity, now))
    tokens = min(capacity, tokens + refill_rate * (now - last))
    if tokens < 1.0:
        _buckets[ident] = (tokens, now)
        return False
    _buckets[ident] = (tokens - 1.0, now)
    return True


def _request_id(request: Request) -> str:
    return hashlib.md5(f"{request.client.host if request.client else 'unknown'}{time.time()}".encode()).hexdigest()[:8]


def _validate_config() -> None:
    strict = os.getenv("STRICT_CONFIG", "0") == "1"
    errors = []
    if not settings.api_key or settings.api_key == "change-me":
        errors.append("API_KEY must be set to a secure value")
    provider = (settings.text_provider or "rule").lower()
    if provider == "openai" and not settings.openai_api_key:
        errors.append("OPENAI_API_KEY must be set for openai provider")
    if provider in ("http", "remote") and not settings.text_api_base:
        errors.append("TEXT_API_BASE must be set for http provider")
    if settings.generation_max_attempts < 1:
        errors.append("GENERATION_MAX_ATTEMPTS must be at least 1")
    if errors:
        if strict:
            raise RuntimeError("Configuration error: " + "; ".join(errors))
        else:
            for e in errors:
                logger.warning("config_warning", warning=e)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    request_id = _request_id(request)
    resp = None

    try:
        client_ip = request.client.host if request.client else "unknown"
        if not _rate_limit(client_ip, settings.rate_limit_per_min, settings.rate_limit_burst):
            logger.warning("rate_limit_exceeded", client_ip=client_ip, request_id=request_id)
            resp = JSONResponse(status_code=429, content={"detail": "Too Many Requests"})
            return resp

        logger.info("request_started",
                   request_id=request_id,
                   path=str(request.url.path),
                   method=request.method,
                   client_ip=client_ip,
                   user_agent=request.headers.get("user-agent", "unknown"))

        resp = await call_next(request)
        return resp

    except Exception as e:
        duration_ms = int((time.time() - start) * 1000)
        logger.error("request_failed",
                    request_id=request_id,
                    path=str(request.url.path),
                    method=request.method,
                    error=str(e),
                    duration_ms=duration_ms,
                    exc_info=True)
        raise
    finally:
        duration_ms = int((time.time() - start) * 1000)
        status_code = getattr(resp, "status_code", 0) if resp else 0
        logger.info("request_completed",
                   request_id=request_id,
                   path=str(request.url.path),
                   method=request.method,
                   status=status_code,
                   duration_ms=duration_ms)


@app.exception_handler(Exception)
async def handle_exceptions(request: Request, exc: Exception):
    request_id = _request_id(request)

    logger.error("unhandled_exception",
                request_id=request_id,
                path=str(request.url.path),
                method=request.method,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_code": "INTERNAL_ERROR",
            "request_id": request_id,
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        }
    )


@app.get("/v1/health")
async def health():
    return {"status": "ok"}


@app.get("/v1/debug/status")
async def debug_status():
    """Debug endpoint to check provider, store and rate limiting state"""
    return {
        "status": "ok",
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "text_provider": settings.text_provider,
        "retry": {
            "max_attempts": settings.generation_max_attempts,
            "delay_seconds": settings.generation_retry_delay_seconds,
        },
        "cache": analysis_store.stats(),
        "rate_limiting": {
            "requests_per_min": settings.rate_limit_per_min,
            "burst_capacity": settings.rate_limit_burst,
            "active_buckets": len(_buckets)
        }
    }


@app.post("/v1/auth/token", dependencies=[Depends(verify_api_key)])
async def issue_token():
    token = create_jwt("sizewise-client")
    return {"token": token}


# Routers under versioned prefix
app.include_router(analyze_router, prefix="/v1")
app.include_router(engine_router, prefix="/v1")

# Validate configuration at import time (warnings by default; set STRICT_CONFIG=1 to enforce)
_validate_config()
