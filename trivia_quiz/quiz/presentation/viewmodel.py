from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from trivia_quiz.config import QuizConfig
from trivia_quiz.fsm import QuizPhase
from trivia_quiz.quiz.adapters.quiz_storage import QuizStorage
from trivia_quiz.quiz.application.session import QuizSessionController
from trivia_quiz.quiz.domain.errors import StorageError
from trivia_quiz.quiz.domain.models import (
    QuestionType,
    QuizHistoryEntry,
    QuizQuestion,
    QuizResult,
)
from trivia_quiz.quiz.presentation.state_provider import IStateProvider
from trivia_quiz.shared.telemetry import Telemetry


class Screen(Enum):
    LOGIN = auto()
    RESUME_PROMPT = auto()
    LOADING = auto()
    LOAD_FAILED = auto()
    QUIZ = auto()
    RESULT = auto()


_SCREEN_BY_PHASE = {
    QuizPhase.IDLE: Screen.LOGIN,
    QuizPhase.LOADING: Screen.LOADING,
    QuizPhase.RESUME_PROMPT: Screen.RESUME_PROMPT,
    QuizPhase.LOAD_FAILED: Screen.LOAD_FAILED,
    QuizPhase.ACTIVE: Screen.QUIZ,
    QuizPhase.COMPLETED: Screen.RESULT,
}


@dataclass(frozen=True)
class TimerView:
    text: str
    level: str  # 'normal', 'warning' or 'critical'


@dataclass(frozen=True)
class ProgressView:
    total: int
    answered: int
    remaining: int
    current: int


class QuizViewModel:
    """
    Screen-level logic for the Streamlit views.
    Holds the session controller in per-browser UI state; durable records
    go through QuizStorage.
    """

    CONTROLLER_KEY = "quiz_controller"

    def __init__(
        self,
        storage: QuizStorage,
        controller_factory: Callable[[], QuizSessionController],
        state_provider: IStateProvider,
    ) -> None:
        self.storage = storage
        self.controller_factory = controller_factory
        self.state = state_provider
        self.telemetry = Telemetry("ViewModel")

    # --- Properties ---
    @property
    def controller(self) -> QuizSessionController | None:
        return self.state.get(self.CONTROLLER_KEY)

    @property
    def username(self) -> str | None:
        return self.storage.get_user()

    @property
    def screen(self) -> Screen:
        if not self.username:
            return Screen.LOGIN
        controller = self.controller
        if controller is None:
            return Screen.LOADING
        return _SCREEN_BY_PHASE[controller.phase]

    @property
    def current_question(self) -> QuizQuestion | None:
        controller = self.controller
        return controller.current_question if controller else None

    @property
    def result(self) -> QuizResult | None:
        controller = self.controller
        return controller.result if controller else None

    @property
    def error_message(self) -> str | None:
        controller = self.controller
        return controller.error_message if controller else None

    def resume_answered_count(self) -> int:
        controller = self.controller
        snapshot = controller.pending_snapshot if controller else None
        return snapshot.answered_count if snapshot else 0

    def timer_view(self) -> TimerView:
        controller = self.controller
        seconds = controller.time_remaining if controller else 0
        minutes, secs = divmod(max(0, seconds), 60)

        if seconds <= QuizConfig.TIMER_CRITICAL_SECONDS:
            level = "critical"
        elif seconds <= QuizConfig.TIMER_WARNING_SECONDS:
            level = "warning"
        else:
            level = "normal"
        return TimerView(text=f"{minutes:02d}:{secs:02d}", level=level)

    def progress(self) -> ProgressView:
        controller = self.controller
        session = controller.session if controller else None
        if session is None:
            return ProgressView(total=0, answered=0, remaining=0, current=0)

        total = len(session.questions)
        answered = session.answered_count
        return ProgressView(
            total=total,
            answered=answered,
            remaining=total - answered,
            current=session.current_question_index + 1,
        )

    def selected_answer(self) -> str | None:
        controller = self.controller
        session = controller.session if controller else None
        if session is None:
            return None
        return session.user_answers.get(session.current_question_index)

    def recent_history(self, limit: int = 5) -> list[QuizHistoryEntry]:
        history = self.storage.get_quiz_history()
        return list(reversed(history[-limit:]))

    @staticmethod
    def question_type_label(question: QuizQuestion) -> str:
        if question.type == QuestionType.MULTIPLE:
            return "Multiple Choice"
        return "True/False"

    # --- Actions ---

    def login(self, name: str) -> str | None:
        """Returns an error message, or None once the quiz is under way."""
        Telemetry.start_trace()
        username = name.strip()
        if not username:
            return "Please enter your name"
        if len(username) < QuizConfig.USERNAME_MIN_LENGTH:
            return f"Name must be at least {QuizConfig.USERNAME_MIN_LENGTH} characters"

        try:
            self.storage.set_user(username)
        except StorageError as e:
            self.telemetry.log_error("Login failed", e)
            return "Could not save your name. Please try again."

        self.telemetry.log_info("Action: Login", username=username)
        self._drop_controller()
        self.ensure_session()
        return None

    def ensure_session(self) -> QuizSessionController | None:
        """Creates and boots a controller for a logged-in user, once."""
        if not self.username:
            return None
        controller = self.controller
        if controller is None:
            controller = self.controller_factory()
            self.state.set(self.CONTROLLER_KEY, controller)
            controller.boot()
        return controller

    def resume(self) -> None:
        if self.controller:
            self.controller.resume()

    def start_new(self) -> None:
        if self.controller:
            self.controller.start_new()

    def retry(self) -> None:
        if self.controller:
            self.controller.retry()

    def answer(self, answer: str) -> bool:
        Telemetry.start_trace()
        controller = self.controller
        return controller.submit_answer(answer) if controller else False

    def play_again(self) -> None:
        if self.controller:
            self.controller.play_again()

    def logout(self) -> None:
        """Leaves the quiz. An unfinished snapshot stays for the next login."""
        Telemetry.start_trace()
        self.telemetry.log_info("Action: Logout", username=self.username)
        self._drop_controller()
        try:
            self.storage.remove_user()
        except StorageError as e:
            self.telemetry.log_error("Logout failed", e)

    def _drop_controller(self) -> None:
        controller = self.controller
        if controller is not None:
            try:
                controller.cancel()
            finally:
                controller.close()
        self.state.remove(self.CONTROLLER_KEY)
