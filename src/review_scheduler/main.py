import time
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from . import __version__
from .config import settings
from .errors import ReviewSchedulerError
from .logging import configure_logging, logger
from .routers import health, review


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assign a request ID to each incoming request and expose it in headers.

    - Sets `request.state.request_id`
    - Adds `X-Request-ID` to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:  # type: ignore[override]
        request_id = request.headers.get("x-request-id") or uuid4().hex
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Emit one structured `request_complete` line per request.

    遅延・ステータス・エラー型を構造化ログに残し、運用時の
    トラブルシュートに使う。
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:  # type: ignore[override]
        start = time.time()
        path = request.url.path
        method = request.method
        status_code: int | None = None
        error_type: str | None = None
        error_message: str | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as exc:
            status_code = 500
            error_type = exc.__class__.__name__
            raw_error_message = str(exc)
            error_message = (
                raw_error_message
                if len(raw_error_message) <= 200
                else f"{raw_error_message[:197]}..."
            )
            raise
        finally:
            latency_ms = (time.time() - start) * 1000
            log_method = logger.error if error_type else logger.info
            log_method(
                "request_complete",
                path=path,
                method=method,
                latency_ms=latency_ms,
                status_code=status_code,
                error_type=error_type,
                error_message=error_message,
                request_id=getattr(request.state, "request_id", None),
            )


async def _review_error_handler(request: Request, exc: ReviewSchedulerError) -> JSONResponse:
    """Translate engine rejections into 422 responses."""
    error = exc.__class__.__name__
    logger.warning(
        "review_rejected",
        path=request.url.path,
        error=error,
        detail=str(exc),
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=422, content={"detail": str(exc), "error": error})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    configure_logging()
    logger.info(
        "app_configured",
        environment=settings.environment,
        default_strategy=settings.default_strategy,
        maximum_interval_days=settings.maximum_interval_days,
    )
    app = FastAPI(title="Review Scheduler API", version=__version__)

    # 後に追加したミドルウェアが外側になる: RequestID -> AccessLog -> ルータ
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(ReviewSchedulerError, _review_error_handler)

    app.include_router(health.router)  # ヘルスチェック
    app.include_router(review.router, prefix="/api/review")
    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn (console script `review-scheduler`)."""
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
