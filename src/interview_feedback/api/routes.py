"""API routes for interview feedback."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from interview_feedback import __version__
from interview_feedback.api.models import HealthCheck
from interview_feedback.core.models import FeedbackRequest, InterviewResults
from interview_feedback.feedback.pipeline import FeedbackPipeline
from interview_feedback.feedback.report import render_report
from interview_feedback.utils.logging import get_logger

logger = get_logger(__name__)

feedback_router = APIRouter(prefix="/feedback", tags=["feedback"])
health_router = APIRouter(prefix="/health", tags=["health"])


def get_pipeline(request: Request) -> FeedbackPipeline:
    """Return the application's feedback pipeline."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Feedback pipeline not initialized")
    return pipeline


@feedback_router.post("", response_model=InterviewResults)
async def generate_feedback(
    feedback_request: FeedbackRequest,
    deadline: Optional[float] = Query(None, gt=0, description="Overall deadline in seconds"),
    pipeline: FeedbackPipeline = Depends(get_pipeline)
):
    """Generate scored feedback for a completed interview."""
    logger.info(
        "Feedback request received",
        interview_id=feedback_request.interview_id,
        user_id=feedback_request.user_id,
        question_count=len(feedback_request.questions)
    )
    return await pipeline.generate_feedback(feedback_request, deadline=deadline)


@feedback_router.post("/report", response_class=PlainTextResponse)
async def generate_feedback_report(
    feedback_request: FeedbackRequest,
    deadline: Optional[float] = Query(None, gt=0, description="Overall deadline in seconds"),
    pipeline: FeedbackPipeline = Depends(get_pipeline)
):
    """Generate feedback and return it as a Markdown report."""
    results = await pipeline.generate_feedback(feedback_request, deadline=deadline)
    return PlainTextResponse(render_report(results), media_type="text/markdown")


@health_router.get("", response_model=HealthCheck)
async def health_check(request: Request):
    """Service health check."""
    pipeline = getattr(request.app.state, "pipeline", None)
    return HealthCheck(
        status="healthy" if pipeline is not None else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        components={"feedback_pipeline": "ready" if pipeline is not None else "unavailable"}
    )


all_routers = [feedback_router, health_router]
