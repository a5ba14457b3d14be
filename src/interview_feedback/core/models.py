"""Core data models for interview feedback generation."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FeedbackModel(BaseModel):
    """Immutable base model serialized with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PerformanceLevel(str, Enum):
    """Banding of an interview's overall score."""
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    NEEDS_IMPROVEMENT = "needs-improvement"


class Question(FeedbackModel):
    """An interview question supplied by the caller."""
    id: str = Field(..., description="Question identifier")
    text: str = Field(..., description="Question text")
    difficulty: str = Field("", description="Question difficulty")


class Answer(FeedbackModel):
    """A candidate's submitted text for one question."""
    question_id: str = Field(..., description="Identifier of the answered question")
    text: Optional[str] = Field(None, description="Answer text, may be blank")


class AnswerAnalysis(FeedbackModel):
    """Scored evaluation of a single answer."""
    question_id: str = Field(..., description="Question identifier")
    question: str = Field(..., description="Question text")
    user_answer: str = Field("", description="Candidate answer text")
    score: int = Field(..., ge=0, le=100, description="Overall answer score")
    feedback: str = Field(..., description="Short assessment of the answer")
    strengths: List[str] = Field(default_factory=list, description="Positive aspects")
    improvements: List[str] = Field(default_factory=list, description="Actionable suggestions")
    technical_accuracy: int = Field(..., ge=0, le=100, description="Technical accuracy score")
    completeness: int = Field(..., ge=0, le=100, description="Completeness score")
    clarity: int = Field(..., ge=0, le=100, description="Clarity score")
    keywords: List[str] = Field(default_factory=list, description="Concepts mentioned in the answer")


class PerformanceSummary(FeedbackModel):
    """Interview-level statistics derived from all answer analyses."""
    overall_score: int = Field(..., ge=0, le=100, description="Rounded average score")
    total_questions: int = Field(..., ge=0, description="Number of questions asked")
    answered_questions: int = Field(..., ge=0, description="Number of questions with a positive score")
    average_score: int = Field(..., ge=0, le=100, description="Average score over answered questions")
    time_spent: float = Field(..., ge=0, description="Time spent in minutes")
    strengths: List[str] = Field(default_factory=list, max_length=5, description="Top strengths")
    weaknesses: List[str] = Field(default_factory=list, max_length=5, description="Top weaknesses")
    recommended_topics: List[str] = Field(default_factory=list, max_length=8, description="Topics to review")
    performance_level: PerformanceLevel = Field(..., description="Performance band")
    next_steps: List[str] = Field(default_factory=list, description="Suggested next steps")


class InterviewResults(FeedbackModel):
    """Complete feedback for one interview completion."""
    interview_id: str = Field(..., description="Interview identifier")
    user_id: str = Field(..., description="User identifier")
    completed_at: datetime = Field(..., description="Completion timestamp")
    time_spent: float = Field(..., ge=0, description="Time spent in minutes")
    answers: List[AnswerAnalysis] = Field(..., description="Per-question analyses in question order")
    summary: PerformanceSummary = Field(..., description="Aggregated performance summary")
    ai_analysis: str = Field(..., description="Overall narrative commentary")
    recommendations: List[str] = Field(..., description="Ordered recommendations")


class FeedbackRequest(FeedbackModel):
    """Input for one feedback generation run."""
    interview_id: str = Field(..., description="Interview identifier")
    user_id: str = Field(..., description="User identifier")
    questions: List[Question] = Field(default_factory=list, description="Questions in asking order")
    answers: List[Answer] = Field(default_factory=list, description="Submitted answers")
    interview_type: str = Field(..., description="Position or interview type")
    difficulty: str = Field(..., description="Overall interview difficulty")
    time_spent: float = Field(0.0, ge=0, description="Time spent in minutes")

    def answer_for(self, question_id: str) -> Optional[str]:
        """Return the text of the first answer submitted for a question."""
        for answer in self.answers:
            if answer.question_id == question_id:
                return answer.text
        return None
