# ==============================================================================
# ARCHITECTURE: INTEGRATION TEST (ADAPTER LAYER)
# ------------------------------------------------------------------------------
# GOAL: Verify the time-boxed question cache over a real SQLite table.
# CONSTRAINTS:
#   1. DATABASE: In-memory SQLite.
#   2. TIME: FakeClock only.
# ==============================================================================
import json

from trivia_quiz.config import QuizConfig
from trivia_quiz.quiz.adapters.trivia_api import QuestionCache
from trivia_quiz.quiz.domain.errors import StorageError


def test_read_within_window_returns_equal_batch(kv_store, fake_clock, sample_questions):
    cache = QuestionCache(kv_store, clock=fake_clock)
    cache.write(sample_questions)

    fake_clock.advance(QuizConfig.CACHE_TTL_SECONDS)

    assert cache.read() == sample_questions


def test_read_after_expiry_returns_nothing_and_evicts(
    kv_store, fake_clock, sample_questions
):
    cache = QuestionCache(kv_store, clock=fake_clock)
    cache.write(sample_questions)

    fake_clock.advance(QuizConfig.CACHE_TTL_SECONDS + 1)

    assert cache.read() is None
    assert kv_store.get(QuizConfig.CACHE_KEY) is None


def test_record_shape(kv_store, fake_clock, sample_questions):
    QuestionCache(kv_store, clock=fake_clock).write(sample_questions)

    raw = json.loads(kv_store.get(QuizConfig.CACHE_KEY))

    assert raw["timestamp"] == fake_clock.now
    assert len(raw["questions"]) == len(sample_questions)
    assert raw["questions"][0]["answers"] == list(sample_questions[0].answers)


def test_corrupt_entry_reads_as_miss(kv_store, fake_clock):
    kv_store.set(QuizConfig.CACHE_KEY, "garbage")

    assert QuestionCache(kv_store, clock=fake_clock).read() is None


def test_write_failure_is_swallowed(fake_clock, sample_questions):
    class BrokenStore:
        def get(self, key):
            return None

        def set(self, key, value):
            raise StorageError("disk full")

        def remove(self, key):
            raise StorageError("disk full")

    cache = QuestionCache(BrokenStore(), clock=fake_clock)

    cache.write(sample_questions)

    assert cache.read() is None
