"""Main FastAPI application for interview feedback."""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from interview_feedback import __version__
from interview_feedback.config import settings
from interview_feedback.utils.logging import configure_logging, get_logger
from interview_feedback.api.routes import all_routers
from interview_feedback.api.models import ErrorResponse
from interview_feedback.feedback.pipeline import FeedbackGenerationError, FeedbackPipeline
from interview_feedback.gateway.gemini import GeminiGateway

# Configure logging
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting interview feedback API")

    gateway: Optional[GeminiGateway] = None
    if app.state.pipeline is None:
        gateway = GeminiGateway()
        app.state.pipeline = FeedbackPipeline.from_settings(gateway)
        logger.info("Feedback pipeline initialized", model=gateway.model)

    yield

    logger.info("Shutting down interview feedback API")
    if gateway is not None:
        await gateway.close()
        app.state.pipeline = None


def create_app(pipeline: Optional[FeedbackPipeline] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        pipeline: Pipeline to serve; when omitted one backed by Gemini is
            built on startup and closed on shutdown
    """
    app = FastAPI(
        title="Interview Feedback API",
        description="Scored, explained feedback for practice interviews",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )
    app.state.pipeline = pipeline

    setup_middleware(app)
    setup_exception_handlers(app)

    for router in all_routers:
        app.include_router(router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "name": "Interview Feedback API",
            "version": __version__,
            "status": "running",
            "docs": "/docs" if settings.debug else "disabled"
        }

    return app


def setup_middleware(app: FastAPI) -> None:
    """Setup application middleware."""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = asyncio.get_running_loop().time()

        logger.info(
            "Request started",
            method=request.method,
            url=str(request.url),
            client_ip=request.client.host if request.client else None
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                url=str(request.url),
                error=str(e),
                duration_seconds=asyncio.get_running_loop().time() - start_time
            )
            raise

        logger.info(
            "Request completed",
            method=request.method,
            url=str(request.url),
            status_code=response.status_code,
            duration_seconds=asyncio.get_running_loop().time() - start_time
        )
        return response


def _error_response(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            message=message,
            details=details,
            timestamp=datetime.now(timezone.utc)
        ).model_dump(mode="json")
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup global exception handlers."""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            url=str(request.url)
        )
        return _error_response(exc.status_code, "HTTPException", str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Validation error",
            error_count=len(exc.errors()),
            url=str(request.url)
        )
        return _error_response(
            422,
            "ValidationError",
            "Request validation failed",
            details={"validation_errors": jsonable_errors(exc)}
        )

    @app.exception_handler(FeedbackGenerationError)
    async def feedback_exception_handler(request: Request, exc: FeedbackGenerationError):
        logger.error(
            "Feedback generation error",
            cause=repr(exc.__cause__),
            url=str(request.url)
        )
        return _error_response(500, "FeedbackGenerationError", str(exc))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            url=str(request.url)
        )
        return _error_response(
            500,
            "InternalServerError",
            "An unexpected error occurred",
            details={"error_type": type(exc).__name__} if settings.debug else None
        )


def jsonable_errors(exc: RequestValidationError):
    """Validation errors without the raw exception objects pydantic may attach."""
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in exc.errors()
    ]


# Create the application instance
app = create_app()
