import threading
import time
from collections.abc import Callable
from typing import Any

from trivia_quiz.config import QuizConfig
from trivia_quiz.fsm import QuizAction, QuizPhase, QuizStateMachine
from trivia_quiz.quiz.adapters.quiz_storage import QuizStorage
from trivia_quiz.quiz.application.timer import CountdownTimer
from trivia_quiz.quiz.domain.errors import QuestionSourceError, StorageError
from trivia_quiz.quiz.domain.models import (
    QuizHistoryEntry,
    QuizQuestion,
    QuizResult,
    QuizSession,
)
from trivia_quiz.quiz.domain.ports import IQuestionSource
from trivia_quiz.quiz.domain.scoring import calculate_result
from trivia_quiz.shared.telemetry import Telemetry, measure_time


class QuizSessionController:
    """
    Owns the one active QuizSession and drives it through its phases.

    Every mutation is followed by a full snapshot write. Snapshot and
    history writes are best-effort: a StorageError is logged and the
    session carries on in memory. User actions and timer callbacks arrive
    on different threads and are serialised by a re-entrant lock.
    """

    def __init__(
        self,
        source: IQuestionSource,
        storage: QuizStorage,
        timer: CountdownTimer | None = None,
        clock: Callable[[], float] = time.time,
        total_questions: int = QuizConfig.TOTAL_QUESTIONS,
        duration: int = QuizConfig.QUIZ_DURATION_SECONDS,
    ) -> None:
        self.source = source
        self.storage = storage
        self.timer = timer or CountdownTimer()
        self.clock = clock
        self.total_questions = total_questions
        self.duration = duration
        self.telemetry = Telemetry("QuizSessionController")

        self.fsm = QuizStateMachine()
        self.session: QuizSession | None = None
        self.result: QuizResult | None = None
        self.history_entry: QuizHistoryEntry | None = None
        self.error_message: str | None = None

        self._pending: QuizSession | None = None
        self._finalized = False
        self._lock = threading.RLock()

    def __enter__(self) -> "QuizSessionController":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --- Properties ---
    @property
    def phase(self) -> QuizPhase:
        return self.fsm.current_state

    @property
    def pending_snapshot(self) -> QuizSession | None:
        """The unfinished session offered on the resume prompt."""
        return self._pending

    @property
    def current_question(self) -> QuizQuestion | None:
        return self.session.current_question if self.session else None

    @property
    def time_remaining(self) -> int:
        if self.phase == QuizPhase.ACTIVE:
            return self.timer.remaining
        return self.session.time_remaining if self.session else 0

    # --- Lifecycle ---

    def boot(self) -> QuizPhase:
        """Offers a resume if an unfinished snapshot exists, else starts fresh."""
        with self._lock:
            if self.phase != QuizPhase.IDLE:
                return self.phase

            Telemetry.start_trace()
            snapshot = self.storage.get_quiz_state()
            if snapshot and snapshot.is_resumable():
                self._pending = snapshot
                self.fsm.transition(QuizAction.FOUND_SNAPSHOT)
                self.telemetry.log_info(
                    "Unfinished quiz found", answered=snapshot.answered_count
                )
                return self.phase

            if self.fsm.transition(QuizAction.BOOT):
                self._load()
            return self.phase

    def resume(self) -> QuizPhase:
        with self._lock:
            if self.phase != QuizPhase.RESUME_PROMPT:
                self.telemetry.log_warning("Resume ignored", phase=self.phase.name)
                return self.phase

            snapshot = self._pending or self.storage.get_quiz_state()
            if snapshot is None or not snapshot.is_resumable():
                self.telemetry.log_info("Snapshot vanished, starting a new quiz")
                return self.start_new()

            snapshot.time_remaining = snapshot.remaining_at(self.clock())
            self.telemetry.log_info(
                "Resuming quiz",
                index=snapshot.current_question_index,
                time_remaining=snapshot.time_remaining,
            )
            self._activate(snapshot, QuizAction.RESUME)
            return self.phase

    @measure_time("start_new_quiz")
    def start_new(self) -> QuizPhase:
        """Discards any snapshot and fetches a fresh batch."""
        with self._lock:
            action = {
                QuizPhase.IDLE: QuizAction.BOOT,
                QuizPhase.RESUME_PROMPT: QuizAction.START_NEW,
                QuizPhase.LOAD_FAILED: QuizAction.RETRY,
                QuizPhase.COMPLETED: QuizAction.PLAY_AGAIN,
            }.get(self.phase)

            if action is None or not self.fsm.transition(action):
                self.telemetry.log_warning("Start ignored", phase=self.phase.name)
                return self.phase

            self.timer.cancel()
            self._pending = None
            self._discard_snapshot()
            self._load()
            return self.phase

    def retry(self) -> QuizPhase:
        if self.phase != QuizPhase.LOAD_FAILED:
            return self.phase
        return self.start_new()

    def play_again(self) -> QuizPhase:
        if self.phase != QuizPhase.COMPLETED:
            return self.phase
        return self.start_new()

    def cancel(self) -> None:
        """Walks away from the current screen. An unfinished snapshot stays on disk."""
        with self._lock:
            self.timer.cancel()
            self.error_message = None
            self._pending = None
            self.fsm.transition(QuizAction.RESET)

    def close(self) -> None:
        self.timer.cancel()

    # --- Events ---

    @measure_time("submit_answer")
    def submit_answer(self, answer: str) -> bool:
        """Records an answer for the current question. False if not accepted."""
        with self._lock:
            if self.phase != QuizPhase.ACTIVE or self.session is None:
                self.telemetry.log_warning("Answer ignored", phase=self.phase.name)
                return False

            index = self.session.current_question_index
            completed = self.session.record_answer(answer)
            self.telemetry.log_info(
                "Answer Submitted", index=index, completed=completed
            )
            self._persist()

            if completed:
                self._finish("all_answered")
            return True

    def expire(self) -> None:
        """Time is up: freeze the session as it stands."""
        with self._lock:
            if self.session is not None:
                self._expire_session(self.session)

    def _expire_session(self, session: QuizSession) -> None:
        with self._lock:
            if self.phase != QuizPhase.ACTIVE or self.session is not session:
                return
            session.time_remaining = 0
            session.complete()
            self._persist()
            self._finish("time_up")

    def _on_tick(self, remaining: int, session: QuizSession) -> None:
        # A tick can be queued on the lock while its session is replaced.
        with self._lock:
            if self.phase == QuizPhase.ACTIVE and self.session is session:
                session.time_remaining = remaining

    # --- Internals ---

    def _load(self) -> None:
        try:
            questions = self.source.get_questions(self.total_questions)
            if not questions:
                raise QuestionSourceError("No questions available")
        except Exception as e:
            self.error_message = f"Failed to load quiz: {e}"
            self.telemetry.log_error("Loading quiz failed", e)
            self.fsm.transition(QuizAction.LOAD_FAILURE)
            return

        session = QuizSession.start(questions, self.clock(), self.duration)
        self._activate(session, QuizAction.LOAD_SUCCESS)

    def _activate(self, session: QuizSession, action: QuizAction) -> None:
        self.session = session
        self.result = None
        self.history_entry = None
        self.error_message = None
        self._pending = None
        self._finalized = False

        self.fsm.transition(action)
        self._persist()

        if session.time_remaining <= 0:
            session.complete()
            self._finish("time_up")
            return
        self.timer.start(
            session.time_remaining,
            lambda remaining: self._on_tick(remaining, session),
            lambda: self._expire_session(session),
        )

    def _finish(self, reason: str) -> None:
        """Scores, archives and clears the snapshot. Runs once per session."""
        if self._finalized or self.session is None:
            return
        self._finalized = True

        try:
            self.session.complete()
            self.fsm.transition(QuizAction.FINISH)
            self.result = calculate_result(self.session)

            try:
                self.history_entry = self.storage.save_quiz_history(self.result)
            except StorageError as e:
                self.telemetry.log_error("History write failed", e)

            self._discard_snapshot()
            self.telemetry.log_info(
                "Quiz Completed", reason=reason, score=self.result.score
            )
        finally:
            self.timer.cancel()

    def _persist(self) -> None:
        if self.session is None:
            return
        try:
            self.storage.save_quiz_state(self.session)
        except StorageError as e:
            self.telemetry.log_error("Snapshot write failed", e)

    def _discard_snapshot(self) -> None:
        try:
            self.storage.clear_quiz_state()
        except StorageError as e:
            self.telemetry.log_error("Snapshot clear failed", e)
