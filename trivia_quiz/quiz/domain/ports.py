from abc import ABC, abstractmethod

from trivia_quiz.quiz.domain.models import Difficulty, QuizQuestion


class IKeyValueStore(ABC):
    """
    Flat, string-keyed, string-valued durable storage.
    Writes are independent: there is no transaction spanning two keys.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass


class IQuestionSource(ABC):
    @abstractmethod
    def get_questions(
        self,
        amount: int,
        category: int | None = None,
        difficulty: Difficulty | None = None,
    ) -> list[QuizQuestion]:
        """
        Always returns a usable batch; implementations degrade to a
        bundled question set instead of raising.
        """
        pass
