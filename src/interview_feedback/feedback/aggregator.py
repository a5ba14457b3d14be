"""Aggregation of answer analyses into an interview-level summary."""

from typing import Dict, Iterable, List, Sequence

from interview_feedback.core.models import AnswerAnalysis, PerformanceLevel, PerformanceSummary
from interview_feedback.feedback.scoring import round_score

MAX_STRENGTHS = 5
MAX_WEAKNESSES = 5
MAX_RECOMMENDED_TOPICS = 8
WEAK_SCORE_THRESHOLD = 70

NEXT_STEPS: Dict[PerformanceLevel, List[str]] = {
    PerformanceLevel.EXCELLENT: [
        "Consider advanced system design practice",
        "Mentor others to reinforce your knowledge",
        "Prepare for senior-level technical discussions"
    ],
    PerformanceLevel.GOOD: [
        "Practice explaining complex concepts simply",
        "Work on system design fundamentals",
        "Focus on real-world application examples"
    ],
    PerformanceLevel.AVERAGE: [
        "Strengthen core technical concepts",
        "Practice coding and problem-solving daily",
        "Study common interview patterns"
    ],
    PerformanceLevel.NEEDS_IMPROVEMENT: [
        "Review fundamental programming concepts",
        "Practice basic problem-solving techniques",
        "Focus on one technical area at a time"
    ]
}


def unique_in_order(items: Iterable[str]) -> List[str]:
    """Drop exact duplicates, keeping the first occurrence of each item."""
    # Near-duplicate phrasings are kept as distinct entries.
    return list(dict.fromkeys(items))


def performance_level(score: float) -> PerformanceLevel:
    if score >= 85:
        return PerformanceLevel.EXCELLENT
    if score >= 70:
        return PerformanceLevel.GOOD
    if score >= 55:
        return PerformanceLevel.AVERAGE
    return PerformanceLevel.NEEDS_IMPROVEMENT


def recommended_topics(analyses: Sequence[AnswerAnalysis]) -> List[str]:
    """Keywords to review, with keywords from weak answers ranked first."""
    weak_keywords = [
        keyword
        for analysis in analyses if analysis.score < WEAK_SCORE_THRESHOLD
        for keyword in analysis.keywords
    ]
    all_keywords = [keyword for analysis in analyses for keyword in analysis.keywords]
    return unique_in_order(weak_keywords + all_keywords)[:MAX_RECOMMENDED_TOPICS]


def aggregate(
    analyses: Sequence[AnswerAnalysis],
    time_spent: float,
    total_questions: int
) -> PerformanceSummary:
    """
    Combine per-question analyses into a performance summary.

    Unanswered questions (score 0) do not count towards the average.

    Args:
        analyses: One analysis per question
        time_spent: Minutes spent on the interview
        total_questions: Number of questions asked

    Returns:
        Aggregated summary
    """
    answered_questions = sum(1 for analysis in analyses if analysis.score > 0)
    total_score = sum(analysis.score for analysis in analyses)
    average_score = total_score / answered_questions if answered_questions > 0 else 0.0
    overall_score = round_score(average_score)

    level = performance_level(overall_score)

    return PerformanceSummary(
        overall_score=overall_score,
        total_questions=total_questions,
        answered_questions=answered_questions,
        average_score=overall_score,
        time_spent=time_spent,
        strengths=unique_in_order(
            strength for analysis in analyses for strength in analysis.strengths
        )[:MAX_STRENGTHS],
        weaknesses=unique_in_order(
            improvement for analysis in analyses for improvement in analysis.improvements
        )[:MAX_WEAKNESSES],
        recommended_topics=recommended_topics(analyses),
        performance_level=level,
        next_steps=list(NEXT_STEPS[level])
    )
