"""Liveness (/health), service info (/about), and metrics for Prometheus scrapes."""
import time

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from routemeter.metrics import CONTENT_TYPE
from routemeter.settings import settings

router = APIRouter()


@router.get("/health")
def health():
    """Liveness: process is up. No dependencies checked."""
    return {"status": "ok"}


@router.get("/about")
def about(request: Request):
    started_at = request.app.state.started_at
    routes = sorted({getattr(r, "path", "") for r in request.app.routes if getattr(r, "path", "")})
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "uptime_seconds": round(time.monotonic() - started_at, 2),
        "routes": routes,
    }


@router.get("/metrics", response_class=PlainTextResponse)
def metrics(request: Request):
    """Prometheus text exposition format: http_requests_total, http_request_duration_seconds."""
    return PlainTextResponse(
        request.app.state.metrics.render(),
        media_type=CONTENT_TYPE,
    )
