"""
FastAPI application for sentence-level sentiment analysis.
"""

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from sentiment_service.analysis import Analysis
from sentiment_service.api.schemas import AnalyzeRequest, ErrorResponse
from sentiment_service.config import Settings, settings
from sentiment_service.context import ServiceContext, build_context
from sentiment_service.errors import (
    DispatchError,
    PayloadTooLargeError,
    ServiceError,
    ValidationError,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ROOT_MESSAGE = "its dark and I am lost ▪ chaos"

router = APIRouter()


# Dependency functions
def get_context(request: Request) -> ServiceContext:
    """Get the service context built at startup."""
    context = request.app.state.context
    if context is None:
        raise DispatchError("Service not initialized")
    return context


async def read_analyze_request(request: Request, limit: int) -> AnalyzeRequest:
    """
    Read and parse the request body, enforcing the size limit while streaming.

    Raises:
        PayloadTooLargeError: If the body exceeds ``limit`` bytes
        ValidationError: If the body is not a valid analyze request
    """
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        raise PayloadTooLargeError(f"Request body exceeds {limit} bytes")

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeError(f"Request body exceeds {limit} bytes")

    try:
        return AnalyzeRequest.model_validate_json(bytes(body))
    except PydanticValidationError as e:
        raise ValidationError(f"Malformed request body: {e.errors()[0]['msg']}") from e


# Exception handlers
def _error_response(status_code: int, kind: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(kind=kind, message=message).model_dump()
    )


def _count_error(request: Request, kind: str):
    context = request.app.state.context
    if context:
        context.metrics.increment_error_count(kind)


async def service_error_handler(request: Request, exc: ServiceError):
    """Map service errors to their status code and kind."""
    request_id = request.headers.get("X-Request-ID", "")
    logger.error(f"{exc.kind} error: {exc.message} - Request ID: {request_id}")
    _count_error(request, exc.kind)
    return _error_response(exc.status_code, exc.kind, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes and wrong methods on known routes are both not found."""
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return _error_response(status.HTTP_404_NOT_FOUND, "not_found", "Not Found")
    return _error_response(exc.status_code, "http", str(exc.detail))


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=exc)
    _count_error(request, "internal")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "internal", "An unexpected error occurred"
    )


# API Routes
@router.post("/analyze", response_model=Analysis)
async def analyze_text(
    request: Request,
    context: ServiceContext = Depends(get_context),
):
    """
    Split text into sentences and score the sentiment of each one.

    - **text**: The text to analyze (request body at most 128 KiB)

    Returns per-sentence signed scores and their sum.
    """
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "")
    logger.info(f"Analyze request started - Request ID: {request_id}")

    status_code = status.HTTP_200_OK

    try:
        query = await read_analyze_request(request, context.settings.max_body_bytes)

        analysis = None
        cache = context.cache
        if cache and cache.connected:
            analysis = await cache.get(query.text)
            if analysis is not None:
                context.metrics.increment_cache_hit_count()
            else:
                context.metrics.increment_cache_miss_count()

        if analysis is None:
            analysis = await context.analyze(query.text)
            context.metrics.record_analysis(len(analysis.sentences))

            if cache and cache.connected:
                await cache.set(query.text, analysis)

        return analysis

    except ServiceError as e:
        status_code = e.status_code
        raise
    except Exception:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        raise
    finally:
        context.metrics.record_request_duration(
            time.time() - start_time, endpoint="analyze", status=status_code
        )


@router.get("/", response_class=PlainTextResponse)
async def root():
    return ROOT_MESSAGE


def create_app(context: ServiceContext | None = None, app_settings: Settings = settings) -> FastAPI:
    """
    Build the application.

    When ``context`` is given it is used as-is and the lifespan neither loads
    models nor closes it. Otherwise models are loaded at startup and a
    failure aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        owned = app.state.context is None
        if owned:
            app.state.context = await build_context(app_settings)
        yield
        if owned:
            logger.info("Cleaning up application components...")
            await app.state.context.close()
            app.state.context = None

    app = FastAPI(
        title="Sentence Sentiment API",
        description="Sentence-level sentiment analysis over serialized, shared NLP models",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins.split(","),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=app_settings.allowed_hosts.split(",")
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(router)
    return app


app = create_app()


def main():
    """Run the FastAPI application."""
    logger.info(f"Listening on {settings.host}:{settings.port}")
    uvicorn.run(
        "sentiment_service.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        server_header=False
    )

if __name__ == "__main__":
    main()
