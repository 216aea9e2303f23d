import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .chat import ChatHub
from .logging_config import configure_logging
from .metrics import MetricsRegistry
from .request_context import request_id_ctx
from .routers import health, home, sample, ws
from .settings import settings

configure_logging()
logger = logging.getLogger("routemeter")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("server starting name=%s version=%s", settings.APP_NAME, settings.APP_VERSION)
    logger.info("metrics endpoint available at /metrics")
    yield
    logger.info("shutting down server clients=%s", app.state.chat.client_count)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_ctx.set(request_id)
        start = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "method=%s path=%s status=%s duration_ms=%.2f",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        response.headers["x-request-id"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "unhandled error method=%s path=%s",
                request.method,
                request.url.path,
            )
            response = PlainTextResponse("Internal Server Error", status_code=500)
        duration = time.perf_counter() - start
        try:
            request.app.state.metrics.record(request.method, request.url.path, response.status_code, duration)
        except Exception:
            # Recording must never break the response path
            logger.exception("metrics record failed path=%s", request.url.path)
        return response


# Plain-text bodies for router-level errors, as the original servers answered
ERROR_BODIES = {
    404: "Not Found",
    405: "Method not allowed",
}


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    body = ERROR_BODIES.get(exc.status_code, str(exc.detail))
    return PlainTextResponse(body, status_code=exc.status_code, headers=exc.headers)


def create_app(metrics: MetricsRegistry | None = None, static_dir: str | None = None) -> FastAPI:
    """Build the application. Pass a registry to share or inspect it (tests construct their own)."""
    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.state.metrics = metrics if metrics is not None else MetricsRegistry()
    app.state.chat = ChatHub()
    app.state.started_at = time.monotonic()

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestLogMiddleware)

    app.include_router(home.router)
    app.include_router(health.router)
    app.include_router(sample.router)
    app.include_router(ws.router)

    static_dir = static_dir or settings.STATIC_DIR
    if static_dir:
        app.mount("/static", StaticFiles(directory=static_dir), name="static")
    return app


app = create_app()
