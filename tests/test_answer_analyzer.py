"""Tests for per-answer analysis, retries and fallbacks."""

import pytest

from fakes import ScriptedGateway, analysis_json
from interview_feedback.feedback.analyzer import (
    AnswerAnalyzer,
    RetryPolicy,
    exponential_backoff,
    linear_backoff,
    parse_fallback_analysis,
    transport_fallback_analysis,
    unanswered_analysis
)
from interview_feedback.gateway.base import TransportError


PROSE_WRAPPED = (
    'Sure! {"score":88,"feedback":"Great","strengths":["x"],"improvements":["y"],'
    '"technicalAccuracy":90,"completeness":85,"clarity":80,"keywords":["k"]} Hope that helps!'
)


class TestUnansweredQuestions:
    """Blank answers never reach the gateway."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", [None, "", "   ", "\n\t "])
    async def test_blank_answer_scores_zero_without_calls(self, question, answer):
        gateway = ScriptedGateway(responses=[])
        analyzer = AnswerAnalyzer(gateway)

        analysis = await analyzer.analyze(question, answer, "backend", "intermediate")

        assert gateway.calls == 0
        assert analysis.score == 0
        assert analysis.strengths == []
        assert analysis.keywords == []
        assert analysis.improvements == ["Review this topic area", "Practice similar questions"]
        assert analysis.user_answer == ""
        assert analysis.question_id == question.id


class TestSuccessfulAnalysis:
    """Parsing of successful gateway responses."""

    @pytest.mark.asyncio
    async def test_extracts_json_from_prose(self, question):
        gateway = ScriptedGateway(responses=[PROSE_WRAPPED])
        analyzer = AnswerAnalyzer(gateway)

        analysis = await analyzer.analyze(question, "Chaining with linked lists.", "backend", "intermediate")

        assert analysis.score == 88
        assert analysis.feedback == "Great"
        assert analysis.strengths == ["x"]
        assert analysis.improvements == ["y"]
        assert analysis.technical_accuracy == 90
        assert analysis.completeness == 85
        assert analysis.clarity == 80
        assert analysis.keywords == ["k"]
        assert analysis.user_answer == "Chaining with linked lists."
        assert analysis.question == question.text

    @pytest.mark.asyncio
    async def test_prompt_embeds_context(self, question):
        gateway = ScriptedGateway(responses=[analysis_json(80)])
        analyzer = AnswerAnalyzer(gateway)

        await analyzer.analyze(question, "Open addressing probes the table.", "frontend", "advanced")

        prompt = gateway.prompts[0]
        assert "Position Type: frontend" in prompt
        assert "Overall Difficulty: advanced" in prompt
        assert "Question Difficulty: medium" in prompt
        assert question.text in prompt
        assert "Open addressing probes the table." in prompt
        assert '"technicalAccuracy": number' in prompt

    @pytest.mark.asyncio
    async def test_scores_are_normalized(self, question):
        response = (
            '{"score": 104.6, "feedback": "ok", "strengths": ["a", 2], '
            '"improvements": [], "clarity": -5, "keywords": "not a list"}'
        )
        analyzer = AnswerAnalyzer(ScriptedGateway(responses=[response]))

        analysis = await analyzer.analyze(question, "answer", "backend", "intermediate")

        assert analysis.score == 100
        assert analysis.technical_accuracy == 100
        assert analysis.completeness == 100
        assert analysis.clarity == 0
        assert analysis.strengths == ["a", "2"]
        assert analysis.keywords == []

    @pytest.mark.asyncio
    async def test_non_finite_sub_scores_default_to_score(self, question):
        response = (
            '{"score": 64, "feedback": "ok", "strengths": [], "improvements": [], '
            '"technicalAccuracy": NaN, "completeness": Infinity, "clarity": -1e400}'
        )
        analyzer = AnswerAnalyzer(ScriptedGateway(responses=[response]))

        analysis = await analyzer.analyze(question, "answer", "backend", "intermediate")

        assert analysis.score == 64
        assert analysis.technical_accuracy == analysis.completeness == analysis.clarity == 64

    @pytest.mark.asyncio
    async def test_huge_integer_score_is_clamped(self, question):
        response = '{"score": 1' + "0" * 400 + ', "feedback": "ok", "strengths": [], "improvements": []}'
        analyzer = AnswerAnalyzer(ScriptedGateway(responses=[response]))

        analysis = await analyzer.analyze(question, "answer", "backend", "intermediate")

        assert analysis.score == 100

    @pytest.mark.asyncio
    async def test_fractional_score_rounds_half_up(self, question):
        analyzer = AnswerAnalyzer(ScriptedGateway(responses=[analysis_json(72.5)]))

        analysis = await analyzer.analyze(question, "answer", "backend", "intermediate")

        assert analysis.score == 73


class TestParseFallback:
    """Unparseable responses produce the fixed fallback without retrying."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        "I think this answer is pretty good, maybe 80/100.",
        '{"score": "eighty", "feedback": "ok", "strengths": [], "improvements": []}',
        "{broken json",
        '{"score": NaN, "feedback": "ok", "strengths": [], "improvements": []}',
        '{"score": Infinity, "feedback": "ok", "strengths": [], "improvements": []}',
        '{"score": 1e400, "feedback": "ok", "strengths": [], "improvements": []}',
    ])
    async def test_fallback_structure(self, question, recording_sleep, response):
        gateway = ScriptedGateway(responses=[response])
        analyzer = AnswerAnalyzer(gateway, sleep=recording_sleep)

        analysis = await analyzer.analyze(question, "some answer", "backend", "intermediate")

        assert gateway.calls == 1
        assert recording_sleep.delays == []
        assert analysis.score == 70
        assert analysis.feedback == (
            "Answer provided demonstrates understanding of the topic with room for improvement."
        )
        assert analysis.strengths == ["Shows basic understanding", "Attempted to address the question"]
        assert analysis.improvements == ["Add more technical details", "Provide specific examples"]
        assert analysis.technical_accuracy == 70
        assert analysis.completeness == 65
        assert analysis.clarity == 75
        assert analysis.keywords == []

    def test_parse_and_transport_fallbacks_differ(self, question):
        parse = parse_fallback_analysis(question, "x" * 700)
        transport = transport_fallback_analysis(question, "x" * 700)

        assert transport.score == 70
        assert transport.feedback != parse.feedback
        assert transport.strengths != parse.strengths
        assert transport.improvements != parse.improvements


class TestRetries:
    """Transport failures are retried with linear backoff."""

    @pytest.mark.asyncio
    async def test_always_failing_gateway_makes_three_attempts(self, question, recording_sleep):
        gateway = ScriptedGateway(handler=lambda prompt: TransportError("unreachable"))
        analyzer = AnswerAnalyzer(gateway, RetryPolicy(max_attempts=3, retry_delay=1.0), sleep=recording_sleep)

        with pytest.raises(TransportError, match="unreachable"):
            await analyzer.analyze(question, "an answer", "backend", "intermediate")

        assert gateway.calls == 3
        assert recording_sleep.delays == [1.0, 2.0]
        assert all(a < b for a, b in zip(recording_sleep.delays, recording_sleep.delays[1:]))

    @pytest.mark.asyncio
    async def test_last_transport_error_is_raised(self, question, recording_sleep):
        gateway = ScriptedGateway(responses=[
            TransportError("first"),
            TransportError("second"),
            TransportError("third"),
        ])
        analyzer = AnswerAnalyzer(gateway, sleep=recording_sleep)

        with pytest.raises(TransportError, match="third"):
            await analyzer.analyze(question, "an answer", "backend", "intermediate")

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(self, question, recording_sleep):
        gateway = ScriptedGateway(responses=[TransportError("timeout"), analysis_json(82)])
        analyzer = AnswerAnalyzer(gateway, RetryPolicy(retry_delay=0.5), sleep=recording_sleep)

        analysis = await analyzer.analyze(question, "an answer", "backend", "intermediate")

        assert analysis.score == 82
        assert gateway.calls == 2
        assert recording_sleep.delays == [0.5]

    @pytest.mark.asyncio
    async def test_non_transport_errors_are_not_retried(self, question, recording_sleep):
        gateway = ScriptedGateway(responses=[ValueError("bug")])
        analyzer = AnswerAnalyzer(gateway, sleep=recording_sleep)

        with pytest.raises(ValueError):
            await analyzer.analyze(question, "an answer", "backend", "intermediate")

        assert gateway.calls == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_custom_backoff_is_used(self, question, recording_sleep):
        gateway = ScriptedGateway(handler=lambda prompt: TransportError("down"))
        policy = RetryPolicy(max_attempts=4, retry_delay=1.0, backoff=exponential_backoff)
        analyzer = AnswerAnalyzer(gateway, policy, sleep=recording_sleep)

        with pytest.raises(TransportError):
            await analyzer.analyze(question, "an answer", "backend", "intermediate")

        assert gateway.calls == 4
        assert recording_sleep.delays == [1.0, 2.0, 4.0]


class TestRetryPolicy:
    """Retry policy configuration."""

    def test_linear_backoff(self):
        assert [linear_backoff(1.5, attempt) for attempt in (1, 2, 3)] == [1.5, 3.0, 4.5]

    def test_defaults(self):
        policy = RetryPolicy()

        assert policy.max_attempts == 3
        assert policy.delay_for(1) == 1.0
        assert policy.delay_for(2) == 2.0

    @pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"retry_delay": -1.0}])
    def test_invalid_policy(self, kwargs):
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)


class TestFallbackBuilders:
    """Deterministic fallback analyses."""

    @pytest.mark.parametrize("length, expected", [
        (0, 40),
        (100, 40),
        (405, 41),
        (600, 60),
        (800, 80),
        (5000, 80),
    ])
    def test_transport_fallback_score_tracks_length(self, question, length, expected):
        analysis = transport_fallback_analysis(question, "a" * length)

        assert analysis.score == expected
        assert 40 <= analysis.score <= 80

    def test_transport_fallback_sub_scores(self, question):
        analysis = transport_fallback_analysis(question, "a" * 800)

        assert analysis.score == 80
        assert analysis.technical_accuracy == 64
        assert analysis.completeness == 72
        assert analysis.clarity == 88
        assert analysis.strengths == ["Attempted to answer the question", "Shows basic understanding"]
        assert analysis.improvements == ["Add more technical depth", "Provide specific examples"]

    def test_transport_fallback_sub_scores_use_unrounded_score(self, question):
        analysis = transport_fallback_analysis(question, "a" * 455)

        assert analysis.score == 46
        assert analysis.technical_accuracy == 36
        assert analysis.completeness == 41
        assert analysis.clarity == 50

    def test_unanswered_analysis(self, question):
        analysis = unanswered_analysis(question)

        assert analysis.score == 0
        assert analysis.technical_accuracy == analysis.completeness == analysis.clarity == 0
