import random
import time
import uuid
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from trivia_quiz.config import QuizConfig
from trivia_quiz.quiz.adapters.fallback_questions import build_fallback_questions
from trivia_quiz.quiz.adapters.html_text import decode_question
from trivia_quiz.quiz.domain.errors import (
    RateLimitedError,
    StorageError,
    TriviaApiError,
)
from trivia_quiz.quiz.domain.models import (
    Difficulty,
    Question,
    QuizQuestion,
    TriviaCategory,
)
from trivia_quiz.quiz.domain.ports import IKeyValueStore, IQuestionSource
from trivia_quiz.shared.telemetry import Telemetry, measure_time, record_fetch_outcome


# --- Wire Models ---
class TriviaResponse(BaseModel):
    response_code: int
    results: list[Question] = Field(default_factory=list)


class CategoryListResponse(BaseModel):
    trivia_categories: list[TriviaCategory]


class QuestionCacheEntry(BaseModel):
    questions: list[QuizQuestion]
    timestamp: float


class QuestionCache:
    """
    One time-boxed batch of prepared questions in durable storage.
    Cache problems never reach the caller: they read as a miss.
    """

    def __init__(
        self,
        store: IKeyValueStore,
        clock: Callable[[], float] = time.time,
        ttl_seconds: float = QuizConfig.CACHE_TTL_SECONDS,
        key: str = QuizConfig.CACHE_KEY,
    ) -> None:
        self.store = store
        self.clock = clock
        self.ttl_seconds = ttl_seconds
        self.key = key
        self.telemetry = Telemetry("QuestionCache")

    def read(self) -> list[QuizQuestion] | None:
        raw = self.store.get(self.key)
        if raw is None:
            return None

        try:
            entry = QuestionCacheEntry.model_validate_json(raw)
        except ValidationError as e:
            self.telemetry.log_error("Error reading from cache", e)
            return None

        if self.clock() - entry.timestamp > self.ttl_seconds:
            self.telemetry.log_info("Cache expired, evicting", key=self.key)
            self._evict()
            return None

        return entry.questions

    def write(self, questions: list[QuizQuestion]) -> None:
        entry = QuestionCacheEntry(questions=questions, timestamp=self.clock())
        try:
            self.store.set(self.key, entry.model_dump_json())
        except StorageError as e:
            self.telemetry.log_error("Error saving to cache", e)

    def _evict(self) -> None:
        try:
            self.store.remove(self.key)
        except StorageError as e:
            self.telemetry.log_error("Error evicting cache", e)


class TriviaApiClient(IQuestionSource):
    """
    Open Trivia DB client.

    get_questions() never raises: cache first, then up to `max_attempts`
    network attempts with linear backoff, then the bundled fallback set.
    An HTTP 429 waits `rate_limit_wait` and uses up its attempt; there is no
    wait after the last one.
    """

    def __init__(
        self,
        cache: QuestionCache | None = None,
        base_url: str = QuizConfig.API_BASE_URL,
        timeout: float = QuizConfig.REQUEST_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
        max_attempts: int = QuizConfig.MAX_FETCH_ATTEMPTS,
        backoff_step: float = QuizConfig.BACKOFF_STEP_SECONDS,
        rate_limit_wait: float = QuizConfig.RATE_LIMIT_WAIT_SECONDS,
    ) -> None:
        self.cache = cache
        self.http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)
        self.sleep = sleep
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts
        self.backoff_step = backoff_step
        self.rate_limit_wait = rate_limit_wait
        self.telemetry = Telemetry("TriviaApiClient")

    def __enter__(self) -> "TriviaApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.http.close()

    @measure_time("get_questions")
    def get_questions(
        self,
        amount: int = QuizConfig.TOTAL_QUESTIONS,
        category: int | None = None,
        difficulty: Difficulty | None = None,
    ) -> list[QuizQuestion]:
        if self.cache:
            cached = self.cache.read()
            if cached:
                record_fetch_outcome("cache_hit")
                self.telemetry.log_info("Using cached questions", count=len(cached))
                return cached

        params: dict[str, Any] = {"amount": amount}
        if category:
            params["category"] = category
        if difficulty:
            params["difficulty"] = Difficulty(difficulty).value

        for attempt in range(self.max_attempts):
            if attempt > 0:
                delay = self.backoff_step * attempt
                self.telemetry.log_info(f"Retry attempt {attempt}", delay_s=delay)
                self.sleep(delay)

            try:
                batch = self._fetch_batch(params)
            except RateLimitedError as e:
                record_fetch_outcome("rate_limited")
                self.telemetry.log_warning(
                    "Rate limited. Waiting before retry...",
                    attempt=attempt + 1,
                    wait_s=self.rate_limit_wait,
                    reason=str(e),
                )
                if attempt < self.max_attempts - 1:
                    self.sleep(self.rate_limit_wait)
                continue
            except TriviaApiError as e:
                record_fetch_outcome("failed_attempt")
                self.telemetry.log_warning(
                    f"Attempt {attempt + 1} failed",
                    reason=str(e),
                    status=e.status_code,
                )
                continue

            questions = self._prepare(batch)
            if self.cache:
                self.cache.write(questions)
            record_fetch_outcome("success")
            return questions

        record_fetch_outcome("fallback")
        self.telemetry.log_warning("All attempts failed, using fallback questions")
        return build_fallback_questions(self.rng)

    def get_categories(self) -> list[TriviaCategory]:
        """Raises TriviaApiError; category discovery has no fallback."""
        try:
            response = self.http.get("/api_category.php")
            response.raise_for_status()
            payload = CategoryListResponse.model_validate_json(response.content)
        except httpx.HTTPStatusError as e:
            self.telemetry.log_error("Error fetching categories", e)
            raise TriviaApiError(
                f"HTTP error! status: {e.response.status_code}",
                e.response.status_code,
            ) from e
        except (httpx.RequestError, ValidationError) as e:
            self.telemetry.log_error("Error fetching categories", e)
            raise TriviaApiError(f"Error fetching categories: {e}") from e

        return payload.trivia_categories

    def _fetch_batch(self, params: dict[str, Any]) -> list[Question]:
        try:
            response = self.http.get("/api.php", params=params)
        except httpx.RequestError as e:
            raise TriviaApiError(f"Request failed: {e}") from e

        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            raise RateLimitedError("HTTP 429 Too Many Requests", response.status_code)
        if not response.is_success:
            raise TriviaApiError(
                f"HTTP error! status: {response.status_code}", response.status_code
            )

        try:
            payload = TriviaResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise TriviaApiError(f"Malformed payload ({e.error_count()} errors)") from e

        if payload.response_code == QuizConfig.RATE_LIMIT_RESPONSE_CODE:
            raise TriviaApiError(
                "Rate limit exceeded. Please try again in a few seconds."
            )
        if payload.response_code != 0:
            raise TriviaApiError(f"API error code: {payload.response_code}")
        if not payload.results:
            raise TriviaApiError("API returned an empty batch")

        return payload.results

    def _prepare(self, batch: list[Question]) -> list[QuizQuestion]:
        batch_id = uuid.uuid4().hex[:12]
        return [
            QuizQuestion.from_question(
                decode_question(question), f"{batch_id}-{index}", self.rng
            )
            for index, question in enumerate(batch)
        ]
