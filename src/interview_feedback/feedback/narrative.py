"""Holistic commentary on an interview, with a deterministic fallback."""

import asyncio
from typing import Optional, Sequence

from interview_feedback.core.models import AnswerAnalysis, PerformanceSummary
from interview_feedback.feedback.prompts import build_narrative_prompt
from interview_feedback.gateway.base import AIGateway
from interview_feedback.utils.logging import get_logger

logger = get_logger(__name__)


def fallback_narrative(summary: PerformanceSummary) -> str:
    """Commentary built only from the summary, used when generation fails."""
    return (
        f"Based on your performance of {summary.overall_score}/100, you demonstrate "
        f"{summary.performance_level.value} technical interview skills. "
        "Your strongest areas include clear communication and problem-solving approach. "
        "Focus on strengthening technical depth and providing more specific examples "
        "to improve your performance. With continued practice, you're well-positioned "
        "for success in technical interviews."
    )


class NarrativeGenerator:
    """Asks the AI Gateway for an overall assessment of the interview."""

    def __init__(self, gateway: AIGateway):
        self.gateway = gateway
        self.logger = logger.bind(component="narrative_generator")

    async def narrate(
        self,
        analyses: Sequence[AnswerAnalysis],
        summary: PerformanceSummary,
        interview_type: str,
        timeout: Optional[float] = None
    ) -> str:
        """
        Generate overall commentary. Never raises.

        Args:
            analyses: Per-question analyses
            summary: Aggregated summary
            interview_type: Position or interview type
            timeout: Seconds to wait for the gateway, None for no limit

        Returns:
            Generated commentary, or the fallback text
        """
        if timeout is not None and timeout <= 0:
            self.logger.warning("No time left for narrative, using fallback")
            return fallback_narrative(summary)

        prompt = build_narrative_prompt(analyses, summary, interview_type)

        try:
            response = await asyncio.wait_for(self.gateway.generate_text(prompt), timeout=timeout)
        except asyncio.TimeoutError:
            self.logger.warning("Narrative generation timed out", timeout_seconds=timeout)
            return fallback_narrative(summary)
        except Exception as e:
            self.logger.error("Failed to generate narrative", error=str(e), error_type=type(e).__name__)
            return fallback_narrative(summary)

        if not isinstance(response, str) or not response.strip():
            self.logger.warning("Empty narrative response, using fallback")
            return fallback_narrative(summary)

        return response.strip()
