"""Per-answer analysis with retry, parse validation and fallbacks."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from interview_feedback.config import Settings, settings as default_settings
from interview_feedback.core.models import AnswerAnalysis, Question
from interview_feedback.feedback.extractor import ExtractionError, is_finite_number, parse_analysis_payload
from interview_feedback.feedback.prompts import build_analysis_prompt
from interview_feedback.feedback.scoring import clamp, clamp_score, round_score
from interview_feedback.gateway.base import AIGateway, TransportError
from interview_feedback.utils.logging import get_logger, log_text_stats

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


def linear_backoff(retry_delay: float, attempt: int) -> float:
    """Wait ``retry_delay * attempt`` after the given failed attempt."""
    return retry_delay * attempt


def exponential_backoff(retry_delay: float, attempt: int) -> float:
    """Wait ``retry_delay * 2 ** (attempt - 1)`` after the given failed attempt."""
    return retry_delay * (2 ** (attempt - 1))


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently to retry a failing gateway call."""
    max_attempts: int = 3
    retry_delay: float = 1.0
    backoff: Callable[[float, int], float] = field(default=linear_backoff)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must not be negative")

    def delay_for(self, attempt: int) -> float:
        """Delay before the attempt following failed attempt ``attempt`` (1-based)."""
        return self.backoff(self.retry_delay, attempt)

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "RetryPolicy":
        config = config or default_settings
        return cls(max_attempts=config.max_retries, retry_delay=config.retry_delay)


PARSE_FALLBACK: Dict[str, Any] = {
    "score": 70,
    "feedback": "Answer provided demonstrates understanding of the topic with room for improvement.",
    "strengths": ["Shows basic understanding", "Attempted to address the question"],
    "improvements": ["Add more technical details", "Provide specific examples"],
    "technicalAccuracy": 70,
    "completeness": 65,
    "clarity": 75,
    "keywords": [],
}


def is_unanswered(answer: Optional[str]) -> bool:
    return answer is None or not answer.strip()


def unanswered_analysis(question: Question) -> AnswerAnalysis:
    """Analysis for a question the candidate skipped."""
    return AnswerAnalysis(
        question_id=question.id,
        question=question.text,
        user_answer="",
        score=0,
        feedback="This question was not answered. Consider reviewing this topic for future interviews.",
        strengths=[],
        improvements=["Review this topic area", "Practice similar questions"],
        technical_accuracy=0,
        completeness=0,
        clarity=0,
        keywords=[]
    )


def parse_fallback_analysis(question: Question, answer: str) -> AnswerAnalysis:
    """Analysis used when the gateway answered but the payload was unusable."""
    return _analysis_from_payload(question, answer, PARSE_FALLBACK)


def transport_fallback_analysis(question: Question, answer: str) -> AnswerAnalysis:
    """Length-based analysis used when the gateway could not be reached at all."""
    raw_score = clamp(len(answer) / 10, 40, 80)
    score = round_score(raw_score)

    return AnswerAnalysis(
        question_id=question.id,
        question=question.text,
        user_answer=answer,
        score=score,
        feedback=(
            "Your answer demonstrates engagement with the question. "
            "Consider adding more technical details and specific examples."
        ),
        strengths=["Attempted to answer the question", "Shows basic understanding"],
        improvements=["Add more technical depth", "Provide specific examples"],
        technical_accuracy=clamp_score(raw_score * 0.8),
        completeness=clamp_score(raw_score * 0.9),
        clarity=clamp_score(raw_score * 1.1),
        keywords=[]
    )


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


def _sub_score(payload: Dict[str, Any], key: str, default: int) -> int:
    value = payload.get(key)
    if is_finite_number(value):
        return clamp_score(value)
    return default


def _analysis_from_payload(question: Question, answer: str, payload: Dict[str, Any]) -> AnswerAnalysis:
    score = clamp_score(payload["score"])
    return AnswerAnalysis(
        question_id=question.id,
        question=question.text,
        user_answer=answer,
        score=score,
        feedback=payload["feedback"],
        strengths=_string_list(payload["strengths"]),
        improvements=_string_list(payload["improvements"]),
        technical_accuracy=_sub_score(payload, "technicalAccuracy", score),
        completeness=_sub_score(payload, "completeness", score),
        clarity=_sub_score(payload, "clarity", score),
        keywords=_string_list(payload.get("keywords"))
    )


class AnswerAnalyzer:
    """Scores one answer through the AI Gateway."""

    def __init__(
        self,
        gateway: AIGateway,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Sleep = asyncio.sleep
    ):
        self.gateway = gateway
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep
        self.logger = logger.bind(component="answer_analyzer")

    async def analyze(
        self,
        question: Question,
        answer: Optional[str],
        interview_type: str,
        difficulty: str
    ) -> AnswerAnalysis:
        """
        Analyze a candidate's answer to one question.

        Blank answers are scored without contacting the gateway. A response
        that cannot be parsed yields the parse fallback without retrying.

        Args:
            question: The interview question
            answer: Candidate's answer, or None if absent
            interview_type: Position or interview type
            difficulty: Overall interview difficulty

        Returns:
            Analysis for the answer

        Raises:
            TransportError: When every attempt failed to reach the gateway
        """
        if is_unanswered(answer):
            self.logger.info("Question unanswered", question_id=question.id)
            return unanswered_analysis(question)

        prompt = build_analysis_prompt(question, answer, interview_type, difficulty)
        response = await self._generate_with_retry(prompt, question.id)

        try:
            payload = parse_analysis_payload(response)
        except ExtractionError as e:
            self.logger.warning(
                "Unparseable analysis response, using fallback",
                question_id=question.id,
                error=str(e),
                **log_text_stats(response)
            )
            return parse_fallback_analysis(question, answer)

        analysis = _analysis_from_payload(question, answer, payload)
        self.logger.info(
            "Answer analysis completed",
            question_id=question.id,
            score=analysis.score,
            **log_text_stats(answer)
        )
        return analysis

    async def _generate_with_retry(self, prompt: str, question_id: str) -> str:
        policy = self.retry_policy
        last_error: Optional[TransportError] = None

        for attempt in range(1, policy.max_attempts + 1):
            try:
                return await self.gateway.generate_text(prompt)
            except TransportError as e:
                last_error = e
                self.logger.warning(
                    "Analysis attempt failed",
                    question_id=question_id,
                    attempt=attempt,
                    max_attempts=policy.max_attempts,
                    error=str(e)
                )
                if attempt < policy.max_attempts:
                    delay = policy.delay_for(attempt)
                    self.logger.debug("Retrying analysis", question_id=question_id, delay_seconds=delay)
                    await self.sleep(delay)

        self.logger.error(
            "Analysis failed after all retries",
            question_id=question_id,
            attempts=policy.max_attempts
        )
        raise last_error
