import html

from trivia_quiz.quiz.domain.models import Question


def decode_entities(text: str) -> str:
    """
    Decodes HTML entities (&quot; &#039; &eacute; ...) into plain text.
    The API encodes every string field this way by default.
    """
    return html.unescape(text)


def decode_question(question: Question) -> Question:
    return question.model_copy(
        update={
            "question": decode_entities(question.question),
            "correct_answer": decode_entities(question.correct_answer),
            "incorrect_answers": tuple(
                decode_entities(a) for a in question.incorrect_answers
            ),
        }
    )
