import os
from enum import Enum
from typing import Final


class ScoreBand(Enum):
    # Enum Member = ("Label", "Minimum score", "Colour")
    EXCELLENT = ("Excellent", 80, "#16a34a")
    GOOD = ("Good", 60, "#2563eb")
    FAIR = ("Fair", 40, "#ea580c")
    POOR = ("Keep practising", 0, "#dc2626")

    def __init__(self, label: str, threshold: int, color: str):
        self.label = label
        self.threshold = threshold
        self.color = color

    @classmethod
    def for_score(cls, score: int) -> "ScoreBand":
        """Returns the highest band whose threshold the score reaches."""
        for band in cls:
            if score >= band.threshold:
                return band
        return cls.POOR


class QuizConfig:
    # --- Remote Source ---
    API_BASE_URL: str = os.getenv("TRIVIA_API_BASE_URL", "https://opentdb.com")
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # --- Fetch Policy ---
    MAX_FETCH_ATTEMPTS: Final[int] = 3
    BACKOFF_STEP_SECONDS: Final[float] = 2.0
    RATE_LIMIT_WAIT_SECONDS: Final[float] = 5.0
    RATE_LIMIT_RESPONSE_CODE: Final[int] = 5

    # --- Cache ---
    CACHE_KEY: Final[str] = "trivia_questions_cache"
    CACHE_TTL_SECONDS: Final[int] = 5 * 60

    # --- Game Rules ---
    TOTAL_QUESTIONS: Final[int] = 10
    QUIZ_DURATION_SECONDS: int = int(os.getenv("TRIVIA_QUIZ_DURATION", "180"))

    # --- Login ---
    USERNAME_MIN_LENGTH: Final[int] = 3

    # --- Timer Display ---
    TIMER_WARNING_SECONDS: Final[int] = 30
    TIMER_CRITICAL_SECONDS: Final[int] = 10

    # --- Infrastructure ---
    DB_PATH: str = os.getenv("TRIVIA_DB_PATH", "data/trivia_quiz.db")

    # --- Storage Keys ---
    USER_KEY: Final[str] = "quiz_user"
    QUIZ_STATE_KEY: Final[str] = "quiz_state"
    QUIZ_HISTORY_KEY: Final[str] = "quiz_history"

    @staticmethod
    def storage_keys() -> list[str]:
        """Keys owned by the local persistence store (cache excluded)."""
        return [
            QuizConfig.USER_KEY,
            QuizConfig.QUIZ_STATE_KEY,
            QuizConfig.QUIZ_HISTORY_KEY,
        ]
