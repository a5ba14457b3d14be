"""Rule-based recommendations derived from an interview summary."""

from typing import List, Sequence

from interview_feedback.core.models import AnswerAnalysis, PerformanceSummary
from interview_feedback.feedback.aggregator import WEAK_SCORE_THRESHOLD, unique_in_order

FOUNDATIONAL = [
    "Focus on strengthening fundamental concepts before attempting advanced topics",
    "Practice explaining technical concepts clearly and concisely"
]
INTERMEDIATE = [
    "Work on providing more detailed and specific examples in your answers",
    "Practice system design and architectural thinking"
]
ADVANCED = [
    "Continue refining your communication of complex technical concepts",
    "Consider mentoring others to further solidify your knowledge"
]

SLOW_DOWN = "Take more time to think through your answers and provide comprehensive responses"
BE_CONCISE = "Practice being more concise while maintaining completeness in your answers"

# Minutes per question
MIN_TIME_PER_QUESTION = 3
MAX_TIME_PER_QUESTION = 8


def base_recommendations(overall_score: int) -> List[str]:
    if overall_score < 60:
        return list(FOUNDATIONAL)
    if overall_score < 80:
        return list(INTERMEDIATE)
    return list(ADVANCED)


def recommend(summary: PerformanceSummary, analyses: Sequence[AnswerAnalysis]) -> List[str]:
    """
    Build the ordered recommendation list for an interview.

    Two base items chosen by score, then a weak-topics item if any answer
    scored below 70, then a time-management item if the pace per question
    was outside 3 to 8 minutes.
    """
    recommendations = base_recommendations(summary.overall_score)

    weak = [analysis for analysis in analyses if analysis.score < WEAK_SCORE_THRESHOLD]
    if weak:
        topics = unique_in_order(keyword for analysis in weak for keyword in analysis.keywords)
        recommendations.append(f"Review topics related to: {', '.join(topics)}")

    if summary.total_questions > 0:
        time_per_question = summary.time_spent / summary.total_questions
        if time_per_question < MIN_TIME_PER_QUESTION:
            recommendations.append(SLOW_DOWN)
        elif time_per_question > MAX_TIME_PER_QUESTION:
            recommendations.append(BE_CONCISE)

    return recommendations
