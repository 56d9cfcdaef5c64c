from trivia_quiz.quiz.domain.models import QuizResult, QuizSession, round_half_up


def calculate_result(session: QuizSession) -> QuizResult:
    """
    Scores a finished session.

    An answer counts as correct only on an exact, case-sensitive match with
    the question's correct answer. Unanswered questions count toward the
    total but are neither correct nor wrong.
    """
    total = len(session.questions)
    answered = 0
    correct = 0

    for index, answer in session.user_answers.items():
        if not 0 <= index < total:
            continue
        answered += 1
        if session.questions[index].correct_answer == answer:
            correct += 1

    score = round_half_up(correct / total * 100) if total > 0 else 0

    return QuizResult(
        total_questions=total,
        correct_answers=correct,
        wrong_answers=answered - correct,
        answered_questions=answered,
        score=score,
    )
