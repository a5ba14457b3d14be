"""Prompt templates for answer analysis and overall commentary."""

from typing import Sequence

from interview_feedback.core.models import AnswerAnalysis, PerformanceSummary, Question


ANALYSIS_PROMPT = """You are an expert technical interviewer analyzing a candidate's response to an interview question.

INTERVIEW CONTEXT:
- Position Type: {interview_type}
- Overall Difficulty: {difficulty}
- Question Difficulty: {question_difficulty}
- Question: {question}
- Candidate Answer: {answer}

EVALUATION CRITERIA:
Analyze the answer based on these criteria (score each 0-100):
1. Technical Accuracy: How technically correct and accurate is the answer?
2. Completeness: Does it address all parts of the question comprehensively?
3. Clarity: How well-structured, clear, and easy to understand is the explanation?

ANALYSIS REQUIREMENTS:
1. Overall Score (0-100): Weighted average of the three criteria
2. Detailed Feedback: 2-3 sentences explaining the assessment
3. Strengths: 2-3 specific positive aspects of the answer
4. Improvements: 2-3 specific, actionable suggestions for improvement
5. Keywords: Technical terms and concepts mentioned in the answer

RESPONSE FORMAT:
Return your analysis as a JSON object with this exact structure:
{{
  "score": number,
  "feedback": "string",
  "strengths": ["string", "string"],
  "improvements": ["string", "string"],
  "technicalAccuracy": number,
  "completeness": number,
  "clarity": number,
  "keywords": ["string", "string"]
}}

Important: Provide constructive, specific feedback that helps the candidate improve. Focus on both technical content and communication skills."""


NARRATIVE_PROMPT = """You are an expert technical interviewer providing an overall assessment of a candidate's interview performance.

INTERVIEW SUMMARY:
- Position Type: {interview_type}
- Overall Score: {overall_score}/100
- Questions Answered: {answered}/{total}
- Time Spent: {time_spent} minutes
- Performance Level: {performance_level}

INDIVIDUAL QUESTION PERFORMANCE:
{question_lines}

Provide a comprehensive 3-4 sentence analysis of the candidate's overall performance, highlighting their strongest areas and the most critical areas for improvement. Focus on technical competency, problem-solving approach, and communication effectiveness.

Keep the tone professional but encouraging."""


def build_analysis_prompt(
    question: Question,
    answer: str,
    interview_type: str,
    difficulty: str
) -> str:
    return ANALYSIS_PROMPT.format(
        interview_type=interview_type,
        difficulty=difficulty,
        question_difficulty=question.difficulty,
        question=question.text,
        answer=answer
    )


def build_narrative_prompt(
    analyses: Sequence[AnswerAnalysis],
    summary: PerformanceSummary,
    interview_type: str
) -> str:
    question_lines = "\n\n".join(
        f"Question {index} (Score: {analysis.score}): {analysis.question}\n"
        f"  Answer Quality: {analysis.feedback}"
        for index, analysis in enumerate(analyses, start=1)
    )
    return NARRATIVE_PROMPT.format(
        interview_type=interview_type,
        overall_score=summary.overall_score,
        answered=summary.answered_questions,
        total=summary.total_questions,
        time_spent=_format_minutes(summary.time_spent),
        performance_level=summary.performance_level.value,
        question_lines=question_lines
    )


def _format_minutes(minutes: float) -> str:
    """Render 12.0 as "12" and 7.5 as "7.5"."""
    return f"{minutes:g}"
