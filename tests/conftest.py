import random
from collections.abc import Callable

import pytest
import streamlit as st

from trivia_quiz.quiz.adapters.db_manager import DatabaseManager
from trivia_quiz.quiz.adapters.quiz_storage import QuizStorage
from trivia_quiz.quiz.adapters.sqlite_store import SQLiteKeyValueStore
from trivia_quiz.quiz.application.session import QuizSessionController
from trivia_quiz.quiz.application.timer import CountdownTimer
from trivia_quiz.quiz.domain.models import (
    Difficulty,
    Question,
    QuestionType,
    QuizQuestion,
)
from trivia_quiz.quiz.domain.ports import IQuestionSource


class MockSessionState(dict):
    """
    Mock for st.session_state that behaves like both a dict and an object.
    Allows both dict-style and attribute-style access.
    """

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as err:
            raise AttributeError(
                f"'MockSessionState' object has no attribute '{name}'"
            ) from err

    def __setattr__(self, name, value):
        self[name] = value

    def __delattr__(self, name):
        try:
            del self[name]
        except KeyError as err:
            raise AttributeError(
                f"'MockSessionState' object has no attribute '{name}'"
            ) from err


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualHandle:
    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Collects scheduled callbacks; tests fire them explicitly."""

    def __init__(self):
        self.handles: list[ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def fire_next(self) -> bool:
        for handle in self.handles:
            if not handle.cancelled:
                self.handles.remove(handle)
                handle.callback()
                return True
        return False

    def fire(self, count: int) -> int:
        fired = 0
        while fired < count and self.fire_next():
            fired += 1
        return fired


class StubQuestionSource(IQuestionSource):
    def __init__(self, questions: list[QuizQuestion], error: Exception | None = None):
        self.questions = questions
        self.error = error
        self.calls = 0

    def get_questions(self, amount, category=None, difficulty=None):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.questions[:amount])


def make_question(index: int, correct: str = "Right") -> Question:
    return Question(
        category="General Knowledge",
        type=QuestionType.MULTIPLE,
        difficulty=Difficulty.EASY,
        question=f"Question number {index}?",
        correct_answer=correct,
        incorrect_answers=("Wrong A", "Wrong B", "Wrong C"),
    )


@pytest.fixture(autouse=True)
def mock_streamlit_session():
    """
    Auto-use fixture that ensures st.session_state exists for all tests.
    Uses a custom MockSessionState that supports both dict and attribute access.
    """
    original_session_state = getattr(st, "session_state", None)

    st.session_state = MockSessionState()

    yield st.session_state

    st.session_state.clear()

    if original_session_state is not None:
        st.session_state = original_session_state


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def timer(scheduler):
    return CountdownTimer(scheduler=scheduler)


@pytest.fixture
def db_manager():
    manager = DatabaseManager(db_path=":memory:")
    yield manager
    manager.close()


@pytest.fixture
def kv_store(db_manager):
    """A clean, empty in-memory key-value store."""
    return SQLiteKeyValueStore(db_manager)


@pytest.fixture
def storage(kv_store, fake_clock):
    return QuizStorage(kv_store, clock=fake_clock)


@pytest.fixture
def sample_questions(rng):
    return [
        QuizQuestion.from_question(make_question(i), f"q-{i}", rng) for i in range(10)
    ]


@pytest.fixture
def stub_source(sample_questions):
    return StubQuestionSource(sample_questions)


@pytest.fixture
def controller(stub_source, storage, timer, fake_clock):
    ctrl = QuizSessionController(
        source=stub_source,
        storage=storage,
        timer=timer,
        clock=fake_clock,
        duration=180,
    )
    yield ctrl
    ctrl.close()


@pytest.fixture
def question_factory():
    return make_question


@pytest.fixture
def source_factory():
    return StubQuestionSource
