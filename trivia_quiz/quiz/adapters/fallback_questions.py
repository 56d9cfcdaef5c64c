import random

from trivia_quiz.quiz.domain.models import (
    Difficulty,
    Question,
    QuestionType,
    QuizQuestion,
)

# --- ADR 002: Offline Fallback ---
# Decision: A fixed set of ten questions ships with the code.
# Rationale: The trivia API is rate limited and occasionally down; a session
# must still be playable. These are never cached, so the next session tries
# the network again.
# ---------------------------------

FALLBACK_QUESTIONS: tuple[Question, ...] = (
    Question(
        category="General Knowledge",
        type=QuestionType.MULTIPLE,
        difficulty=Difficulty.MEDIUM,
        question="What is the capital of France?",
        correct_answer="Paris",
        incorrect_answers=("London", "Berlin", "Madrid"),
    ),
    Question(
        category="Science",
        type=QuestionType.MULTIPLE,
        difficulty=Difficulty.EASY,
        question="What planet is known as the Red Planet?",
        correct_answer="Mars",
        incorrect_answers=("Venus", "Jupiter", "Saturn"),
    ),
    Question(
        category="History",
        type=QuestionType.MULTIPLE,
        difficulty=Difficulty.MEDIUM,
        question="In which year did World War II end?",
        correct_answer="1945",
        incorrect_answers=("1944", "1946", "1943"),
    ),
    Question(
        category="Geography",
        type=QuestionType.MULTIPLE,
        difficulty=Difficulty.EASY,
        question="What is the largest ocean on Earth?",
        correct_answer="Pacific Ocean",
        incorrect_answers=("Atlantic Ocean", "Indian Ocean", "Arctic Ocean"),
    ),
    Question(
        category="Science",
        type=QuestionType.BOOLEAN,
        difficulty=Difficulty.EASY,
        question="The Earth is flat.",
        correct_answer="False",
        incorrect_answers=("True",),
    ),
    Question(
        category="General Knowledge",
        type=QuestionType.MULTIPLE,
        difficulty=Difficulty.EASY,
        question="How many continents are there?",
        correct_answer="7",
        incorrect_answers=("5", "6", "8"),
    ),
    Question(
        category="Science",
        type=QuestionType.MULTIPLE,
        difficulty=Difficulty.MEDIUM,
        question="What is the chemical symbol for gold?",
        correct_answer="Au",
        incorrect_answers=("Go", "Gd", "Ag"),
    ),
    Question(
        category="History",
        type=QuestionType.MULTIPLE,
        difficulty=Difficulty.EASY,
        question="Who was the first President of the United States?",
        correct_answer="George Washington",
        incorrect_answers=("Thomas Jefferson", "John Adams", "Benjamin Franklin"),
    ),
    Question(
        category="Geography",
        type=QuestionType.MULTIPLE,
        difficulty=Difficulty.MEDIUM,
        question="What is the capital of Japan?",
        correct_answer="Tokyo",
        incorrect_answers=("Kyoto", "Osaka", "Hiroshima"),
    ),
    Question(
        category="Science",
        type=QuestionType.BOOLEAN,
        difficulty=Difficulty.EASY,
        question="Water boils at 100 degrees Celsius at sea level.",
        correct_answer="True",
        incorrect_answers=("False",),
    ),
)


def build_fallback_questions(rng: random.Random) -> list[QuizQuestion]:
    """Each call reshuffles every question's answers independently."""
    return [
        QuizQuestion.from_question(q, f"fallback-{index}", rng)
        for index, q in enumerate(FALLBACK_QUESTIONS)
    ]
