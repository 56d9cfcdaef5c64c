import streamlit as st

from trivia_quiz.config import ScoreBand
from trivia_quiz.quiz.presentation.viewmodel import QuizViewModel


def render(vm: QuizViewModel) -> None:
    result = vm.result
    if result is None:
        st.warning("No result to show.")
        return

    band = result.band
    if band == ScoreBand.EXCELLENT:
        st.balloons()

    st.title("🏁 Your Score")
    st.markdown(
        f'<div style="font-size:3.5rem;font-weight:700;color:{band.color}">'
        f"{result.score}%</div>",
        unsafe_allow_html=True,
    )
    st.caption(band.label)

    col1, col2 = st.columns(2)
    col1.metric("Total Questions", result.total_questions)
    col2.metric("Answered", result.answered_questions)
    col3, col4 = st.columns(2)
    col3.metric("Correct Answers", result.correct_answers)
    col4.metric("Wrong Answers", result.wrong_answers)

    st.markdown(f"**Accuracy** {result.accuracy}%")
    st.progress(result.accuracy / 100)

    st.markdown("---")
    col_a, col_b = st.columns(2)
    with col_a:
        if st.button("🔄 Play Again", type="primary", use_container_width=True):
            vm.play_again()
            st.rerun()
    with col_b:
        if st.button("🏠 Home", use_container_width=True):
            vm.logout()
            st.rerun()
