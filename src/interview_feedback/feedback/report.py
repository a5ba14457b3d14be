"""Markdown report export for interview results."""

from typing import Dict, List, Optional

from interview_feedback.core.models import AnswerAnalysis, InterviewResults
from interview_feedback.feedback.scoring import round_score

LEVEL_LABELS = {
    "excellent": "Excellent",
    "good": "Good",
    "average": "Average",
    "needs-improvement": "Needs Improvement",
}


def skill_breakdown(analyses: List[AnswerAnalysis]) -> Dict[str, int]:
    """Mean sub-scores over answered questions, 0 when none were answered."""
    answered = [analysis for analysis in analyses if analysis.score > 0]
    if not answered:
        return {"Technical Accuracy": 0, "Completeness": 0, "Clarity": 0}

    count = len(answered)
    return {
        "Technical Accuracy": round_score(sum(a.technical_accuracy for a in answered) / count),
        "Completeness": round_score(sum(a.completeness for a in answered) / count),
        "Clarity": round_score(sum(a.clarity for a in answered) / count),
    }


def _bullets(items: List[str]) -> List[str]:
    return [f"- {item}" for item in items] or ["- None"]


def render_report(results: InterviewResults, title: Optional[str] = None) -> str:
    """
    Render interview results as a Markdown document.

    Args:
        results: Completed interview results
        title: Optional interview title shown in the header

    Returns:
        Markdown text
    """
    summary = results.summary
    lines = [
        "# Interview Results Report",
        "",
        f"- Interview: {title or results.interview_id}",
        f"- Date: {results.completed_at.strftime('%Y-%m-%d')}",
        f"- Duration: {results.time_spent:g} minutes",
        f"- Questions: {summary.answered_questions}/{summary.total_questions} answered",
        "",
        "## Overall Performance",
        "",
        f"- Overall Score: {summary.overall_score}/100",
        f"- Performance Level: {LEVEL_LABELS[summary.performance_level.value]}",
        "",
        "## Skill Breakdown",
        "",
    ]
    lines.extend(f"- {name}: {value}%" for name, value in skill_breakdown(results.answers).items())

    lines.extend(["", "## Key Strengths", ""])
    lines.extend(_bullets(summary.strengths))
    lines.extend(["", "## Areas for Improvement", ""])
    lines.extend(_bullets(summary.weaknesses))
    lines.extend(["", "## Recommended Topics", ""])
    lines.extend(_bullets(summary.recommended_topics))

    lines.extend(["", "## Overall Analysis", "", results.ai_analysis])
    lines.extend(["", "## Recommendations", ""])
    lines.extend(f"{index}. {item}" for index, item in enumerate(results.recommendations, start=1))
    lines.extend(["", "## Next Steps", ""])
    lines.extend(_bullets(summary.next_steps))

    lines.extend(["", "## Question Details"])
    for index, analysis in enumerate(results.answers, start=1):
        lines.extend([
            "",
            f"### Question {index}: {analysis.question}",
            "",
            f"**Answer:** {analysis.user_answer or 'Not answered'}",
            "",
            f"**Score:** {analysis.score}/100 "
            f"(technical accuracy {analysis.technical_accuracy}, "
            f"completeness {analysis.completeness}, clarity {analysis.clarity})",
            "",
            f"**Feedback:** {analysis.feedback}",
        ])
        if analysis.strengths:
            lines.extend(["", "Strengths:"])
            lines.extend(_bullets(analysis.strengths))
        if analysis.improvements:
            lines.extend(["", "Improvements:"])
            lines.extend(_bullets(analysis.improvements))

    return "\n".join(lines) + "\n"
