import streamlit as st

from trivia_quiz.quiz.presentation.viewmodel import QuizViewModel, Screen
from trivia_quiz.quiz.presentation.views import components


def render_resume_prompt(vm: QuizViewModel) -> None:
    st.title("🔁 Resume Quiz?")
    st.write(
        f"You have an unfinished quiz with {vm.resume_answered_count()} "
        "questions answered."
    )

    if st.button("Resume Quiz", type="primary", use_container_width=True):
        vm.resume()
        st.rerun()
    if st.button("Start New Quiz", use_container_width=True):
        vm.start_new()
        st.rerun()


def render_loading(vm: QuizViewModel) -> None:
    with st.spinner("Loading your quiz... This may take a few seconds"):
        vm.ensure_session()
    st.caption("💡 Questions are fetched from Open Trivia DB")
    st.rerun()


def render_load_failed(vm: QuizViewModel) -> None:
    st.error(vm.error_message or "Failed to load quiz")
    st.write("Would you like to try again?")

    col1, col2 = st.columns(2)
    if col1.button("🔄 Try again", type="primary", use_container_width=True):
        vm.retry()
        st.rerun()
    if col2.button("Cancel", use_container_width=True):
        vm.logout()
        st.rerun()


@st.fragment(run_every="1s")
def _render_live_timer(vm: QuizViewModel) -> None:
    # The countdown runs on a background thread; this polls it once a second.
    if vm.screen != Screen.QUIZ:
        st.rerun()
    components.render_timer(vm.timer_view())


def render_active(vm: QuizViewModel) -> None:
    if components.render_header(vm.username or ""):
        vm.logout()
        st.rerun()

    _render_live_timer(vm)
    progress = vm.progress()
    components.render_stats(progress)

    question = vm.current_question
    if question is None:
        st.warning("No question available.")
        return

    st.caption(
        f"Question {progress.current} of {progress.total} • {question.category} • "
        f"{vm.question_type_label(question)} • {question.difficulty.value.title()}"
    )
    st.subheader(question.question)

    selected = vm.selected_answer()
    for position, answer in enumerate(question.answers):
        clicked = st.button(
            answer,
            key=f"answer_{question.id}_{position}",
            type="primary" if answer == selected else "secondary",
            use_container_width=True,
        )
        if clicked:
            vm.answer(answer)
            st.rerun()
