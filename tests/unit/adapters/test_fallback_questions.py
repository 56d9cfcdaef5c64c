import random
from collections import Counter

from trivia_quiz.quiz.adapters.fallback_questions import (
    FALLBACK_QUESTIONS,
    build_fallback_questions,
)


def test_fallback_set_has_ten_questions_with_stable_ids():
    questions = build_fallback_questions(random.Random(0))

    assert len(questions) == 10
    assert [q.id for q in questions] == [f"fallback-{i}" for i in range(10)]


def test_every_fallback_question_has_a_valid_answer_list():
    for q in build_fallback_questions(random.Random(7)):
        assert Counter(q.answers) == Counter([q.correct_answer, *q.incorrect_answers])
        assert q.answers.count(q.correct_answer) == 1


def test_each_build_shuffles_independently():
    orders = {
        tuple(q.answers for q in build_fallback_questions(random.Random(seed)))
        for seed in range(10)
    }

    assert len(orders) > 1


def test_source_data_is_left_untouched():
    build_fallback_questions(random.Random(1))

    assert FALLBACK_QUESTIONS[0].correct_answer == "Paris"
    assert FALLBACK_QUESTIONS[0].incorrect_answers == ("London", "Berlin", "Madrid")
