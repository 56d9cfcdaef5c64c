import logging

import streamlit as st

from trivia_quiz.config import QuizConfig
from trivia_quiz.quiz.adapters.db_manager import DatabaseManager
from trivia_quiz.quiz.adapters.quiz_storage import QuizStorage
from trivia_quiz.quiz.adapters.sqlite_store import SQLiteKeyValueStore
from trivia_quiz.quiz.adapters.trivia_api import QuestionCache, TriviaApiClient
from trivia_quiz.quiz.application.session import QuizSessionController
from trivia_quiz.quiz.presentation.state_provider import StreamlitStateProvider
from trivia_quiz.quiz.presentation.viewmodel import QuizViewModel, Screen
from trivia_quiz.quiz.presentation.views import (
    components,
    login_view,
    quiz_view,
    result_view,
)
from trivia_quiz.shared.observability import configure_observability

# --- 1. Bootstrap Observability (once per browser session) ---
if "observability_configured" not in st.session_state:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s"
    )
    configure_observability()
    st.session_state.observability_configured = True


# --- 2. Dependency Injection (Composition Root) ---
@st.cache_resource
def get_store() -> SQLiteKeyValueStore:
    return SQLiteKeyValueStore(DatabaseManager(QuizConfig.DB_PATH))


@st.cache_resource
def get_question_source() -> TriviaApiClient:
    return TriviaApiClient(cache=QuestionCache(get_store()))


def build_view_model() -> QuizViewModel:
    storage = QuizStorage(get_store())

    def controller_factory() -> QuizSessionController:
        return QuizSessionController(source=get_question_source(), storage=storage)

    return QuizViewModel(storage, controller_factory, StreamlitStateProvider())


def main() -> None:
    st.set_page_config(page_title="Trivia Quiz", page_icon="🧠", layout="centered")
    components.apply_styles()

    vm = build_view_model()

    # --- 3. Main Router ---
    screen = vm.screen

    if screen == Screen.LOGIN:
        login_view.render(vm)
    elif screen == Screen.LOADING:
        quiz_view.render_loading(vm)
    elif screen == Screen.RESUME_PROMPT:
        quiz_view.render_resume_prompt(vm)
    elif screen == Screen.LOAD_FAILED:
        quiz_view.render_load_failed(vm)
    elif screen == Screen.QUIZ:
        quiz_view.render_active(vm)
    elif screen == Screen.RESULT:
        result_view.render(vm)


if __name__ == "__main__":
    main()
