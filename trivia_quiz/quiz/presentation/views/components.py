import streamlit as st

from trivia_quiz.quiz.presentation.viewmodel import ProgressView, TimerView

TIMER_COLORS = {
    "normal": "#111827",
    "warning": "#f97316",
    "critical": "#dc2626",
}


def apply_styles() -> None:
    st.markdown(
        """
        <style>
            .block-container { padding-top: 2rem !important; }
            .stat-box { padding: 10px; background-color: #f0f2f6; border-radius: 5px; text-align: center; }
            .stat-box .label { font-size: 0.8rem; color: #4b5563; }
            .stat-box .value { font-size: 1.5rem; font-weight: 700; }
            .timer { font-size: 1.6rem; font-weight: 700; font-variant-numeric: tabular-nums; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_header(username: str) -> bool:
    """Returns True when Logout was clicked."""
    col1, col2 = st.columns([3, 1])
    col1.caption("Welcome back,")
    col1.markdown(f"**{username}**")
    return col2.button("🚪 Logout", use_container_width=True)


def render_timer(view: TimerView) -> None:
    color = TIMER_COLORS.get(view.level, TIMER_COLORS["normal"])
    st.markdown(
        f'⏱️ Time Remaining <span class="timer" style="color:{color}">{view.text}</span>',
        unsafe_allow_html=True,
    )


def render_stats(view: ProgressView) -> None:
    cells = [
        ("Total Questions", view.total),
        ("Answered", view.answered),
        ("Remaining", view.remaining),
        ("Current", view.current),
    ]
    for col, (label, value) in zip(st.columns(len(cells)), cells):
        col.markdown(
            f'<div class="stat-box"><div class="label">{label}</div>'
            f'<div class="value">{value}</div></div>',
            unsafe_allow_html=True,
        )
    if view.total:
        st.progress(view.answered / view.total)
