# ==============================================================================
# ARCHITECTURE: UNIT TEST (CORE LOGIC)
# ------------------------------------------------------------------------------
# GOAL: Verify the result calculator is a pure function of the session.
# CONSTRAINTS:
#   1. EXECUTION: FAST (< 50ms per test).
#   2. I/O: FORBIDDEN.
# ==============================================================================
from trivia_quiz.quiz.domain.models import QuizSession
from trivia_quiz.quiz.domain.scoring import calculate_result


def _session(questions, answers):
    session = QuizSession.start(questions, now=0.0, duration=180)
    session.user_answers = dict(answers)
    session.complete()
    return session


def test_partial_session_counts_correct_wrong_and_unanswered(sample_questions):
    # 7 answered, 5 of them correct, 3 left blank
    answers = {i: "Right" for i in range(5)}
    answers.update({5: "Wrong A", 6: "Wrong B"})

    result = calculate_result(_session(sample_questions, answers))

    assert result.total_questions == 10
    assert result.correct_answers == 5
    assert result.wrong_answers == 2
    assert result.answered_questions == 7
    assert result.score == 50


def test_match_is_case_sensitive(sample_questions):
    result = calculate_result(_session(sample_questions, {0: "right", 1: "Right"}))

    assert result.correct_answers == 1
    assert result.wrong_answers == 1


def test_perfect_score(sample_questions):
    answers = {i: "Right" for i in range(10)}

    result = calculate_result(_session(sample_questions, answers))

    assert result.score == 100
    assert result.wrong_answers == 0


def test_no_answers_scores_zero(sample_questions):
    result = calculate_result(_session(sample_questions, {}))

    assert result.answered_questions == 0
    assert result.score == 0


def test_empty_question_list_does_not_divide_by_zero():
    result = calculate_result(_session([], {}))

    assert result.total_questions == 0
    assert result.score == 0


def test_answers_for_unknown_indexes_are_ignored(sample_questions):
    result = calculate_result(_session(sample_questions[:2], {0: "Right", 7: "Right"}))

    assert result.answered_questions == 1
    assert result.correct_answers == 1
    assert result.score == 50


def test_score_rounds_half_up(sample_questions):
    # 1 of 8 correct = 12.5%
    result = calculate_result(_session(sample_questions[:8], {0: "Right"}))

    assert result.score == 13
