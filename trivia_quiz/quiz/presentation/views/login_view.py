import streamlit as st

from trivia_quiz.quiz.presentation.viewmodel import QuizViewModel


def render(vm: QuizViewModel) -> None:
    st.title("🧠 Trivia Quiz")
    st.write("Ten questions, three minutes. Enter your name to begin.")

    with st.form("login_form"):
        name = st.text_input("Your name", max_chars=40)
        submitted = st.form_submit_button("🚀 Start Quiz", type="primary")

    if submitted:
        error = vm.login(name)
        if error:
            st.error(error)
        else:
            st.rerun()

    history = vm.recent_history()
    if history:
        st.markdown("---")
        st.subheader("Recent results")
        for entry in history:
            who = entry.username or "Anonymous"
            st.caption(
                f"{who}: {entry.score}% "
                f"({entry.correct_answers}/{entry.total_questions} correct)"
            )
