# ==============================================================================
# ARCHITECTURE: UNIT TEST (CORE LOGIC)
# ------------------------------------------------------------------------------
# GOAL: Verify pure business logic, state transitions, and algorithms.
# CONSTRAINTS:
#   1. EXECUTION: FAST (< 50ms per test).
#   2. I/O: FORBIDDEN. No Database, No Network, No File System.
#   3. MOCKS: Mandatory for Repositories and External Services.
# ==============================================================================
import json
import random
from collections import Counter

import pytest
from pydantic import ValidationError

from trivia_quiz.config import ScoreBand
from trivia_quiz.quiz.domain.errors import SessionClosedError
from trivia_quiz.quiz.domain.models import (
    QuizQuestion,
    QuizResult,
    QuizSession,
    round_half_up,
)


class TestQuizQuestion:
    def test_answers_are_a_permutation_with_correct_answer_once(self, question_factory):
        question = question_factory(1)

        for seed in range(20):
            quiz_q = QuizQuestion.from_question(question, "id", random.Random(seed))

            assert Counter(quiz_q.answers) == Counter(
                [question.correct_answer, *question.incorrect_answers]
            )
            assert quiz_q.answers.count(question.correct_answer) == 1
            assert len(quiz_q.answers) == 1 + len(question.incorrect_answers)

    def test_answer_order_is_stable_after_construction(self, sample_questions):
        q = sample_questions[0]
        first_read = q.answers

        assert q.answers == first_read
        assert q.answers is first_read

    def test_question_is_immutable(self, sample_questions):
        with pytest.raises(ValidationError):
            sample_questions[0].question = "changed"

    def test_json_round_trip_keeps_order(self, sample_questions):
        q = sample_questions[3]
        restored = QuizQuestion.model_validate_json(q.model_dump_json())

        assert restored == q
        assert restored.answers == q.answers


class TestQuizSession:
    def test_record_answer_advances_index(self, sample_questions):
        session = QuizSession.start(sample_questions, now=100.0, duration=180)

        completed = session.record_answer("Right")

        assert completed is False
        assert session.current_question_index == 1
        assert session.user_answers == {0: "Right"}

    def test_last_answer_completes_without_advancing(self, sample_questions):
        session = QuizSession.start(sample_questions, now=100.0, duration=180)
        session.current_question_index = len(sample_questions) - 1

        completed = session.record_answer("Right")

        assert completed is True
        assert session.is_completed is True
        assert session.current_question_index == len(sample_questions) - 1

    def test_completed_session_refuses_answers(self, sample_questions):
        session = QuizSession.start(sample_questions, now=100.0, duration=180)
        session.complete()

        with pytest.raises(SessionClosedError):
            session.record_answer("Right")

    @pytest.mark.parametrize(
        "elapsed, expected",
        [(0, 180), (45, 135), (45.9, 135), (179, 1), (180, 0), (500, 0)],
    )
    def test_remaining_at(self, sample_questions, elapsed, expected):
        session = QuizSession.start(sample_questions, now=1000.0, duration=180)

        assert session.remaining_at(1000.0 + elapsed) == expected

    def test_remaining_never_exceeds_duration_when_clock_goes_back(
        self, sample_questions
    ):
        session = QuizSession.start(sample_questions, now=1000.0, duration=180)

        assert session.remaining_at(900.0) == 180

    def test_snapshot_uses_camel_case_keys(self, sample_questions):
        session = QuizSession.start(sample_questions, now=1.5, duration=180)
        session.record_answer("Right")

        data = json.loads(session.model_dump_json(by_alias=True))

        assert data["currentQuestionIndex"] == 1
        assert data["userAnswers"] == {"0": "Right"}
        assert data["startTime"] == 1.5
        assert data["timeRemaining"] == 180
        assert data["isCompleted"] is False
        assert "correct_answer" in data["questions"][0]

    def test_snapshot_round_trip(self, sample_questions):
        session = QuizSession.start(sample_questions, now=1.5, duration=180)
        session.record_answer("Wrong A")

        restored = QuizSession.model_validate_json(session.model_dump_json(by_alias=True))

        assert restored == session
        assert restored.user_answers == {0: "Wrong A"}

    def test_is_resumable(self, sample_questions):
        assert QuizSession.start(sample_questions, 0, 180).is_resumable()
        assert not QuizSession.start([], 0, 180).is_resumable()


class TestQuizResult:
    def test_accuracy_uses_answered_questions(self):
        result = QuizResult(
            total_questions=10,
            correct_answers=5,
            wrong_answers=2,
            answered_questions=7,
            score=50,
        )

        assert result.accuracy == 71

    def test_accuracy_is_zero_when_nothing_answered(self):
        result = QuizResult(
            total_questions=10,
            correct_answers=0,
            wrong_answers=0,
            answered_questions=0,
            score=0,
        )

        assert result.accuracy == 0
        assert result.band is ScoreBand.POOR


def test_round_half_up_rounds_halves_away_from_even():
    assert round_half_up(12.5) == 13
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
