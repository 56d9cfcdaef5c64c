class QuizError(Exception):
    """Base class for every error raised by the quiz package."""


class TriviaApiError(QuizError):
    """The trivia API could not produce a usable response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(TriviaApiError):
    """HTTP 429, or the API's own 'rate limit' response code."""


class StorageError(QuizError):
    """A durable key-value write or delete failed."""


class QuestionSourceError(QuizError):
    """No usable question batch could be produced for a new session."""


class SessionClosedError(QuizError):
    """A completed session was asked to change."""
