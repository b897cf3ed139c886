"""
Streamlit frontend.

Renders a search box, a department dropdown, a department button group, a
level menu and a clear button above the matching course cards. All widgets
feed one BrowserSession kept in st.session_state; the dropdown widget is
registered as one more department surface so that a button click or a clear
is reflected in it on the next rerun.

Streamlit only reports text input on Enter or when the box loses focus, so
search results refresh then rather than on every keystroke.

Run with:
    streamlit run frontend/ui.py
"""

import logging
import sys
from pathlib import Path

import streamlit as st

sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog import config
from catalog.controller import ALL_LABEL, fields_of
from catalog.loader import Course
from catalog.session import BrowserSession

log = logging.getLogger("ui")
logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(message)s")

SEARCH_KEY = "search_text"
DEPT_KEY   = "department_dropdown"
LEVEL_KEY  = "level_select"
BUTTONS_PER_ROW = 5


class DropdownWidget:
    """Department surface backed by the dropdown's widget state."""

    def set_options(self, options: tuple[str, ...]) -> None:
        # The widget lists session.dropdown.options; only a stale pick needs resetting.
        if st.session_state.get(DEPT_KEY, "") not in ("",) + tuple(options):
            st.session_state[DEPT_KEY] = ""

    def show(self, department: str) -> None:
        st.session_state[DEPT_KEY] = department


def _session() -> BrowserSession:
    if "browser" not in st.session_state:
        with st.spinner("Loading courses…"):
            session = BrowserSession.from_source(config.CATALOG_SOURCE)
        session.controller.register_surface(DropdownWidget())
        st.session_state["browser"] = session
    return st.session_state["browser"]


# ---------------------------------------------------------------------------
# Widget callbacks
# ---------------------------------------------------------------------------

def _on_search() -> None:
    _session().controller.set_search_text(st.session_state[SEARCH_KEY])


def _on_dropdown() -> None:
    _session().controller.set_department(st.session_state[DEPT_KEY])


def _on_button(value: str) -> None:
    _session().controller.set_department(value)


def _on_level() -> None:
    _session().controller.set_level(st.session_state[LEVEL_KEY])


def _on_clear() -> None:
    st.session_state[SEARCH_KEY] = ""
    st.session_state[LEVEL_KEY] = ""
    _session().controller.clear_all()


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _course_card(course: Course) -> None:
    course = fields_of(course)
    with st.container(border=True):
        st.markdown(f"**{course.get('courseCode', '')}** · {course.get('title', '')}")
        st.caption(f"{course.get('department', '')} · {course.get('credits', '')} Credits")
        st.write(course.get("description", ""))
        terms = course.get("terms") or []
        if terms:
            st.markdown(" ".join(f"`{t}`" for t in terms))
        prereqs = course.get("prerequisites") or []
        if prereqs:
            st.markdown(f"*Prerequisites:* {', '.join(prereqs)}")


def _department_buttons(session: BrowserSession) -> None:
    buttons = session.buttons.buttons
    for start in range(0, len(buttons), BUTTONS_PER_ROW):
        row = buttons[start:start + BUTTONS_PER_ROW]
        for col, button in zip(st.columns(BUTTONS_PER_ROW), row):
            col.button(
                button.label,
                key=f"dept_btn_{button.value or ALL_LABEL}",
                type="primary" if button.active else "secondary",
                on_click=_on_button,
                args=(button.value,),
                use_container_width=True,
            )


def main() -> None:
    st.set_page_config(page_title="Course Catalog", layout="wide")
    st.title("Course Catalog")

    session = _session()
    ctl = session.controller

    st.text_input("Search courses", key=SEARCH_KEY, on_change=_on_search,
                  placeholder="Course code, title, department or description")

    left, right = st.columns(2)
    left.selectbox("Department", session.dropdown.options, key=DEPT_KEY,
                   format_func=session.dropdown.label, on_change=_on_dropdown)
    right.selectbox("Level", ("",) + ctl.levels, key=LEVEL_KEY,
                    format_func=lambda v: v or "All Levels", on_change=_on_level)

    _department_buttons(session)
    st.button("Clear filters", on_click=_on_clear)

    if session.error_message:
        st.error(session.error_message)
        return

    stats = ctl.stats()
    st.subheader(ctl.summary())
    st.caption(f"{stats.departments} departments")

    if not ctl.view:
        st.info("No courses found matching your criteria.")
        return

    for course in ctl.view:
        _course_card(course)


main()
