"""Interview feedback generation."""

from .analyzer import (
    AnswerAnalyzer,
    RetryPolicy,
    linear_backoff,
    exponential_backoff
)
from .aggregator import aggregate, performance_level
from .extractor import ExtractionError, extract_json_object, parse_analysis_payload
from .narrative import NarrativeGenerator
from .recommendations import recommend
from .pipeline import FeedbackPipeline, FeedbackGenerationError
from .report import render_report

__all__ = [
    "AnswerAnalyzer",
    "RetryPolicy",
    "linear_backoff",
    "exponential_backoff",
    "aggregate",
    "performance_level",
    "ExtractionError",
    "extract_json_object",
    "parse_analysis_payload",
    "NarrativeGenerator",
    "recommend",
    "FeedbackPipeline",
    "FeedbackGenerationError",
    "render_report"
]
