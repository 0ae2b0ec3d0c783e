"""
MOODJOURNAL - FastAPI Application
メインアプリケーションエントリーポイント
"""
from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import structlog

from app.core.config import settings
from app.core.exceptions import AggregationValidationError, StoreUnavailable
from app.core.trace_context import generate_trace_id
from app.core.logger import get_traced_logger
from app.api.v1.router import api_router
from app.db.base import engine, Base
from app.models import Mood, Note, User  # noqa: F401  テーブル定義を metadata に登録

# ロギング設定
logging.basicConfig(level=settings.log_level.upper(), format="%(message)s")

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """アプリケーションのライフサイクル管理"""
    logger.info("Starting MoodJournal application", version=settings.app_version)

    # データベーステーブルの作成（開発用）
    if settings.is_development():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    yield

    await engine.dispose()
    logger.info("Shutting down MoodJournal application")


app = FastAPI(
    title=settings.app_name,
    description="""
    MoodJournal: 気分の記録から、カレンダー・統計・グラフを導出する API
    """,
    version=settings.app_version,
    openapi_url=f"{settings.api_v1_prefix}/openapi.json",
    docs_url=f"{settings.api_v1_prefix}/docs",
    redoc_url=f"{settings.api_v1_prefix}/redoc",
    lifespan=lifespan,
)

# --- Trace ID Middleware ---
_request_logger = get_traced_logger("Main")


class TraceIDMiddleware(BaseHTTPMiddleware):
    """リクエストごとに trace_id を生成し、レスポンスヘッダーに付与する"""

    async def dispatch(self, request: Request, call_next):
        trace_id = generate_trace_id(request.headers.get("X-Trace-ID"))
        start = time.monotonic()

        _request_logger.info(
            "Request received",
            metadata={
                "method": request.method,
                "path": request.url.path,
            },
        )

        response: Response = await call_next(request)

        duration_ms = round((time.monotonic() - start) * 1000, 1)
        response.headers["X-Trace-ID"] = trace_id

        _request_logger.info(
            "Response sent",
            metadata={
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        return response


# --- Exception Handlers ---
_error_logger = get_traced_logger("Errors")


@app.exception_handler(AggregationValidationError)
async def aggregation_validation_error_handler(request: Request, exc: AggregationValidationError):
    """入力値エラー: ストアには問い合わせずに 400"""
    _error_logger.info(
        "Rejected invalid aggregation request",
        metadata={"path": request.url.path, "field": exc.field, "error": exc.message},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    """ストア障害: 空データで代替せず 503（再試行は呼び出し側の判断）"""
    _error_logger.error(
        "Store unavailable",
        metadata={"path": request.url.path, "error": exc.message},
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message},
    )


# CORS設定
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Trace ID Middleware（CORSより内側に配置）
app.add_middleware(TraceIDMiddleware)

# APIルーターの登録
app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    """ルートエンドポイント"""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Mood journal calendar and statistics API",
        "docs": f"{settings.api_v1_prefix}/docs",
    }


@app.get("/health")
async def health_check():
    """ヘルスチェックエンドポイント"""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "calendar_timezone": settings.calendar_timezone,
    }
