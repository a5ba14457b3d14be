"""Orchestration of a complete interview feedback run."""

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

from interview_feedback.config import Settings, settings as default_settings
from interview_feedback.core.models import AnswerAnalysis, FeedbackRequest, InterviewResults, Question
from interview_feedback.feedback.aggregator import aggregate
from interview_feedback.feedback.analyzer import (
    AnswerAnalyzer,
    RetryPolicy,
    Sleep,
    is_unanswered,
    transport_fallback_analysis,
    unanswered_analysis,
)
from interview_feedback.feedback.narrative import NarrativeGenerator
from interview_feedback.feedback.recommendations import recommend
from interview_feedback.gateway.base import AIGateway
from interview_feedback.utils.logging import get_logger

logger = get_logger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to generate interview feedback. Please try again."


class FeedbackGenerationError(RuntimeError):
    """Feedback could not be produced; the caller may retry the whole run."""

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(message)


class FeedbackPipeline:
    """Turns questions and answers into scored, aggregated interview results."""

    def __init__(
        self,
        gateway: AIGateway,
        retry_policy: Optional[RetryPolicy] = None,
        max_concurrency: int = 4,
        deadline: Optional[float] = None,
        sleep: Sleep = asyncio.sleep
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.analyzer = AnswerAnalyzer(gateway, retry_policy=retry_policy, sleep=sleep)
        self.narrator = NarrativeGenerator(gateway)
        self.max_concurrency = max_concurrency
        self.deadline = deadline
        self.logger = logger.bind(component="feedback_pipeline")

    @classmethod
    def from_settings(cls, gateway: AIGateway, config: Optional[Settings] = None) -> "FeedbackPipeline":
        config = config or default_settings
        return cls(
            gateway,
            retry_policy=RetryPolicy.from_settings(config),
            max_concurrency=config.max_concurrency,
            deadline=config.pipeline_deadline
        )

    async def generate_feedback(
        self,
        request: FeedbackRequest,
        deadline: Optional[float] = None
    ) -> InterviewResults:
        """
        Generate complete feedback for a finished interview.

        Individual analyses that fail, or are still running when the
        deadline passes, are replaced by fallback analyses instead of
        failing the run.

        Args:
            request: Interview questions, answers and metadata
            deadline: Overall time budget in seconds; defaults to the
                pipeline's configured deadline, None meaning no limit

        Returns:
            Interview results

        Raises:
            FeedbackGenerationError: If anything unexpected goes wrong
        """
        deadline = self.deadline if deadline is None else deadline
        loop = asyncio.get_running_loop()
        started = loop.time()

        self.logger.info(
            "Starting feedback generation",
            interview_id=request.interview_id,
            question_count=len(request.questions),
            answer_count=len(request.answers),
            deadline_seconds=deadline
        )

        try:
            analyses = await self._analyze_answers(request, deadline)

            summary = aggregate(analyses, request.time_spent, len(request.questions))

            remaining = None if deadline is None else deadline - (loop.time() - started)
            narrative = await self.narrator.narrate(
                analyses, summary, request.interview_type, timeout=remaining
            )

            recommendations = recommend(summary, analyses)

            results = InterviewResults(
                interview_id=request.interview_id,
                user_id=request.user_id,
                completed_at=datetime.now(timezone.utc),
                time_spent=request.time_spent,
                answers=analyses,
                summary=summary,
                ai_analysis=narrative,
                recommendations=recommendations
            )
        except Exception as e:
            self.logger.error(
                "Feedback generation failed",
                interview_id=request.interview_id,
                error=str(e),
                error_type=type(e).__name__
            )
            raise FeedbackGenerationError() from e

        self.logger.info(
            "Feedback generation completed",
            interview_id=request.interview_id,
            overall_score=summary.overall_score,
            performance_level=summary.performance_level.value,
            duration_seconds=loop.time() - started
        )
        return results

    async def _analyze_answers(
        self,
        request: FeedbackRequest,
        deadline: Optional[float]
    ) -> List[AnswerAnalysis]:
        """Analyze every question concurrently, keeping question order."""
        if not request.questions:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)
        answers = [request.answer_for(question.id) for question in request.questions]

        async def analyze_one(question: Question, answer: Optional[str]) -> AnswerAnalysis:
            async with semaphore:
                return await self.analyzer.analyze(
                    question, answer, request.interview_type, request.difficulty
                )

        tasks = [
            asyncio.ensure_future(analyze_one(question, answer))
            for question, answer in zip(request.questions, answers)
        ]

        try:
            done, pending = await asyncio.wait(tasks, timeout=deadline)
        finally:
            # Also runs when the caller cancels the whole run.
            await self._cancel_unfinished(tasks)

        if pending:
            self.logger.warning(
                "Deadline reached, degraded pending analyses",
                interview_id=request.interview_id,
                pending_count=len(pending),
                deadline_seconds=deadline
            )

        analyses: List[AnswerAnalysis] = []
        for question, answer, task in zip(request.questions, answers, tasks):
            if task in pending or task.cancelled():
                analyses.append(self._degraded_analysis(question, answer))
                continue

            error = task.exception()
            if error is not None:
                self.logger.error(
                    "Answer analysis failed, using fallback",
                    question_id=question.id,
                    error=str(error),
                    error_type=type(error).__name__
                )
                analyses.append(self._degraded_analysis(question, answer))
                continue

            analyses.append(task.result())

        return analyses

    @staticmethod
    async def _cancel_unfinished(tasks: List["asyncio.Future[AnswerAnalysis]"]) -> None:
        unfinished = [task for task in tasks if not task.done()]
        for task in unfinished:
            task.cancel()
        await asyncio.gather(*unfinished, return_exceptions=True)

    @staticmethod
    def _degraded_analysis(question: Question, answer: Optional[str]) -> AnswerAnalysis:
        if is_unanswered(answer):
            return unanswered_analysis(question)
        return transport_fallback_analysis(question, answer)
