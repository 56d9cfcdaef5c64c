import math
import random
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from trivia_quiz.config import QuizConfig, ScoreBand
from trivia_quiz.quiz.domain.errors import SessionClosedError


# --- Enums ---
class QuestionType(str, Enum):
    MULTIPLE = "multiple"
    BOOLEAN = "boolean"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# --- Entities ---
class Question(BaseModel):
    """A trivia question exactly as the API describes it (entities decoded)."""

    model_config = ConfigDict(frozen=True)

    category: str
    type: QuestionType
    difficulty: Difficulty
    question: str
    correct_answer: str
    incorrect_answers: tuple[str, ...]


class QuizQuestion(Question):
    """
    A Question ready to be played.
    `answers` is shuffled once, here, and never again.
    """

    id: str
    answers: tuple[str, ...]

    @classmethod
    def from_question(
        cls, question: Question, question_id: str, rng: random.Random
    ) -> "QuizQuestion":
        pool = [question.correct_answer, *question.incorrect_answers]
        rng.shuffle(pool)
        return cls(**question.model_dump(), id=question_id, answers=tuple(pool))


class TriviaCategory(BaseModel):
    id: int
    name: str


class _CamelModel(BaseModel):
    # Snapshots keep the camelCase keys the records have always been stored with.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuizSession(_CamelModel):
    """
    Encapsulates the state of a running quiz.
    """

    questions: list[QuizQuestion]
    current_question_index: int = 0
    user_answers: dict[int, str] = Field(default_factory=dict)
    start_time: float
    time_remaining: int
    duration: int = QuizConfig.QUIZ_DURATION_SECONDS
    is_completed: bool = False

    @classmethod
    def start(
        cls, questions: list[QuizQuestion], now: float, duration: int
    ) -> "QuizSession":
        return cls(
            questions=questions,
            start_time=now,
            time_remaining=duration,
            duration=duration,
        )

    @property
    def current_question(self) -> QuizQuestion | None:
        if 0 <= self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    @property
    def answered_count(self) -> int:
        return len(self.user_answers)

    @property
    def is_last_question(self) -> bool:
        return self.current_question_index >= len(self.questions) - 1

    def is_resumable(self) -> bool:
        return bool(self.questions) and not self.is_completed

    def record_answer(self, answer: str) -> bool:
        """
        Stores the answer for the current question, then either advances
        or completes the session. Returns True when the session completed.
        """
        if self.is_completed:
            raise SessionClosedError("Cannot answer a completed session")

        self.user_answers[self.current_question_index] = answer
        if self.is_last_question:
            self.is_completed = True
        else:
            self.current_question_index += 1
        return self.is_completed

    def complete(self) -> None:
        self.is_completed = True

    def remaining_at(self, now: float) -> int:
        elapsed = max(0, math.floor(now - self.start_time))
        return max(0, self.duration - elapsed)


class QuizResult(_CamelModel):
    total_questions: int
    correct_answers: int
    wrong_answers: int
    answered_questions: int
    score: int

    @property
    def accuracy(self) -> int:
        """Share of answered questions that were correct (0-100)."""
        if self.answered_questions <= 0:
            return 0
        return round_half_up(self.correct_answers / self.answered_questions * 100)

    @property
    def band(self) -> ScoreBand:
        return ScoreBand.for_score(self.score)


class QuizHistoryEntry(QuizResult):
    timestamp: float
    username: str | None = None


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; 2.5 must become 3 here.
    return math.floor(value + 0.5)
