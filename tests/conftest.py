"""Pytest fixtures for feedback tests."""

import pytest

from fakes import RecordingSleep
from interview_feedback.core.models import Question


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def question() -> Question:
    return Question(id="q1", text="Explain how a hash map handles collisions.", difficulty="medium")
