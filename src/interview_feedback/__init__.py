"""
Interview Feedback: scored, explained feedback for practice interviews.

This package turns interview questions and a candidate's free-text answers
into per-answer analyses, an aggregated performance summary, narrative
commentary and recommendations, using an external generative-text service
that may be slow, rate-limited or return malformed output.
"""

__version__ = "0.1.0"

from interview_feedback.core.models import (
    Answer,
    AnswerAnalysis,
    FeedbackRequest,
    InterviewResults,
    PerformanceLevel,
    PerformanceSummary,
    Question,
)
from interview_feedback.feedback.pipeline import FeedbackPipeline, FeedbackGenerationError
from interview_feedback.gateway.base import AIGateway, TransportError

__all__ = [
    "Answer",
    "AnswerAnalysis",
    "FeedbackRequest",
    "InterviewResults",
    "PerformanceLevel",
    "PerformanceSummary",
    "Question",
    "FeedbackPipeline",
    "FeedbackGenerationError",
    "AIGateway",
    "TransportError",
]
