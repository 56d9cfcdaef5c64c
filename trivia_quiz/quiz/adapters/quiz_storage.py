import time
from collections.abc import Callable

from pydantic import TypeAdapter, ValidationError

from trivia_quiz.config import QuizConfig
from trivia_quiz.quiz.domain.models import QuizHistoryEntry, QuizResult, QuizSession
from trivia_quiz.quiz.domain.ports import IKeyValueStore
from trivia_quiz.shared.telemetry import Telemetry

_HISTORY_ADAPTER = TypeAdapter(list[QuizHistoryEntry])


class QuizStorage:
    """
    The three local records: user name, in-progress snapshot, history log.

    Each record is written independently. A crash between two writes can
    leave them out of step; readers tolerate a missing or unreadable record
    by treating it as absent. Write failures surface as StorageError.
    """

    def __init__(
        self, store: IKeyValueStore, clock: Callable[[], float] = time.time
    ) -> None:
        self.store = store
        self.clock = clock
        self.telemetry = Telemetry("QuizStorage")

    # --- User ---

    def set_user(self, username: str) -> None:
        self.store.set(QuizConfig.USER_KEY, username)

    def get_user(self) -> str | None:
        return self.store.get(QuizConfig.USER_KEY)

    def remove_user(self) -> None:
        self.store.remove(QuizConfig.USER_KEY)

    # --- In-progress Snapshot ---

    def save_quiz_state(self, session: QuizSession) -> None:
        self.store.set(QuizConfig.QUIZ_STATE_KEY, session.model_dump_json(by_alias=True))

    def get_quiz_state(self) -> QuizSession | None:
        raw = self.store.get(QuizConfig.QUIZ_STATE_KEY)
        if raw is None:
            return None
        try:
            return QuizSession.model_validate_json(raw)
        except ValidationError as e:
            self.telemetry.log_error("Unreadable quiz snapshot ignored", e)
            return None

    def clear_quiz_state(self) -> None:
        self.store.remove(QuizConfig.QUIZ_STATE_KEY)

    # --- History ---

    def save_quiz_history(self, result: QuizResult) -> QuizHistoryEntry:
        """Appends one entry (read-modify-write) and returns it."""
        history = self.get_quiz_history()
        entry = QuizHistoryEntry(
            **result.model_dump(),
            timestamp=self.clock(),
            username=self.get_user(),
        )
        history.append(entry)
        self.store.set(
            QuizConfig.QUIZ_HISTORY_KEY,
            _HISTORY_ADAPTER.dump_json(history, by_alias=True).decode("utf-8"),
        )
        return entry

    def get_quiz_history(self) -> list[QuizHistoryEntry]:
        raw = self.store.get(QuizConfig.QUIZ_HISTORY_KEY)
        if raw is None:
            return []
        try:
            return _HISTORY_ADAPTER.validate_json(raw)
        except ValidationError as e:
            self.telemetry.log_error("Unreadable quiz history ignored", e)
            return []

    def clear_all(self) -> None:
        for key in QuizConfig.storage_keys():
            self.store.remove(key)
