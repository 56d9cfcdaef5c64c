from enum import Enum, auto
import logging

logger = logging.getLogger(__name__)


class QuizPhase(Enum):
    IDLE = auto()  # No session yet, or the user walked away
    LOADING = auto()  # Fetching questions
    RESUME_PROMPT = auto()  # Unfinished snapshot found, waiting for a choice
    ACTIVE = auto()  # Questions on screen, countdown running
    COMPLETED = auto()  # Scored and archived; terminal for this session
    LOAD_FAILED = auto()  # Fetch failed, waiting for retry or cancel


class QuizAction(Enum):
    BOOT = auto()
    FOUND_SNAPSHOT = auto()
    RESUME = auto()
    START_NEW = auto()
    LOAD_SUCCESS = auto()
    LOAD_FAILURE = auto()
    RETRY = auto()
    FINISH = auto()
    PLAY_AGAIN = auto()
    RESET = auto()


class QuizStateMachine:
    """
    Pure FSM Logic.
    It only cares about phase transitions, not UI, storage or timers.
    """

    def __init__(self, initial_state: QuizPhase = QuizPhase.IDLE) -> None:
        self._state = initial_state

    @property
    def current_state(self) -> QuizPhase:
        return self._state

    def transition(self, action: QuizAction) -> bool:
        """Applies the action. Invalid transitions are logged and refused."""
        previous = self._state
        target = self._next(action)

        if target is None:
            logger.error(f"⛔ INVALID TRANSITION: {previous.name} + {action.name}")
            return False

        self._state = target
        logger.info(f"🔄 FSM: {previous.name} --[{action.name}]--> {target.name}")
        return True

    def _next(self, action: QuizAction) -> QuizPhase | None:
        """The Transition Table."""
        match (self._state, action):
            # IDLE -> LOADING or RESUME_PROMPT
            case (QuizPhase.IDLE, QuizAction.BOOT):
                return QuizPhase.LOADING
            case (QuizPhase.IDLE, QuizAction.FOUND_SNAPSHOT):
                return QuizPhase.RESUME_PROMPT

            # RESUME_PROMPT -> ACTIVE (Resume) or LOADING (Start New)
            case (QuizPhase.RESUME_PROMPT, QuizAction.RESUME):
                return QuizPhase.ACTIVE
            case (QuizPhase.RESUME_PROMPT, QuizAction.START_NEW):
                return QuizPhase.LOADING

            # LOADING -> ACTIVE or LOAD_FAILED
            case (QuizPhase.LOADING, QuizAction.LOAD_SUCCESS):
                return QuizPhase.ACTIVE
            case (QuizPhase.LOADING, QuizAction.LOAD_FAILURE):
                return QuizPhase.LOAD_FAILED
            case (QuizPhase.LOAD_FAILED, QuizAction.RETRY):
                return QuizPhase.LOADING

            # ACTIVE -> COMPLETED (last answer or time up)
            case (QuizPhase.ACTIVE, QuizAction.FINISH):
                return QuizPhase.COMPLETED
            case (QuizPhase.COMPLETED, QuizAction.PLAY_AGAIN):
                return QuizPhase.LOADING

            case (_, QuizAction.RESET):
                return QuizPhase.IDLE

            case _:
                return None
