"""
Filter state controller.

Owns the one authoritative FilterState for a browsing session and derives the
filtered view from the catalog after every change. The department field has
several presentations (a dropdown, a button group); those are surfaces that
get republished from the state and never hold a value of their own.

Every mutation goes through _apply():
    1. replace the FilterState
    2. publish the department to every registered surface
    3. recompute the view
    4. notify subscribers with (view, stats)

Out-of-domain department or level values are rejected as a no-op: the setter
returns False, logs a warning and leaves state, surfaces and view untouched.

Public API:
    FilterController(catalog=())
    FilterController.set_search_text / set_department / set_level / clear_all
    FilterController.recompute() → FilteredView
    FilterController.stats() / summary() / get_course_by_code(code)
    FilterController.register_surface(surface) / subscribe(listener)
"""

import dataclasses
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from catalog.config import LEVEL_OPTIONS
from catalog.loader import Catalog, Course

log = logging.getLogger(__name__)

FilteredView = tuple[Course, ...]

SEARCH_FIELDS = ("courseCode", "title", "department", "description")
ALL_LABEL = "All"


@dataclass(frozen=True)
class FilterState:
    """Search text, department and level; "" means no filter."""

    search: str = ""
    department: str = ""
    level: str = ""

    def is_empty(self) -> bool:
        return not (self.search or self.department or self.level)


@dataclass(frozen=True)
class ViewStats:
    matching: int
    departments: int
    total: int


def fields_of(course: Course) -> Mapping:
    """The record itself, or an empty mapping for a malformed non-mapping record."""
    return course if isinstance(course, Mapping) else {}


def department_of(course: Course) -> str:
    dept = fields_of(course).get("department")
    return dept if isinstance(dept, str) else ""


def _text(value) -> str:
    return "" if value is None else str(value)


def department_options(catalog: Iterable[Course]) -> tuple[str, ...]:
    """Distinct non-empty string department labels, sorted."""
    return tuple(sorted({d for d in map(department_of, catalog) if d}))


def matches(course: Course, state: FilterState) -> bool:
    """True if course passes all three filters of state."""
    fields = fields_of(course)
    if state.search and not any(
        state.search in _text(fields.get(f)).lower() for f in SEARCH_FIELDS
    ):
        return False
    if state.department and fields.get("department") != state.department:
        return False
    # Levels compare as strings, never numerically.
    if state.level and _text(fields.get("level")) != state.level:
        return False
    return True


def filter_catalog(catalog: Iterable[Course], state: FilterState) -> FilteredView:
    return tuple(c for c in catalog if matches(c, state))


# ---------------------------------------------------------------------------
# Department surfaces
# ---------------------------------------------------------------------------

class DepartmentSurface(Protocol):
    def set_options(self, options: tuple[str, ...]) -> None: ...
    def show(self, department: str) -> None: ...


@dataclass
class DepartmentDropdown:
    """Select box: an "All" entry ("") followed by every department."""

    options: tuple[str, ...] = ("",)
    selected: str = ""

    def set_options(self, options: tuple[str, ...]) -> None:
        self.options = ("",) + tuple(options)

    def show(self, department: str) -> None:
        self.selected = department

    def label(self, value: str) -> str:
        return value or ALL_LABEL


@dataclass
class DepartmentButton:
    label: str
    value: str
    active: bool = False


@dataclass
class DepartmentButtonGroup:
    """One toggle button per department plus a leading "All" button."""

    buttons: list[DepartmentButton] = field(
        default_factory=lambda: [DepartmentButton(ALL_LABEL, "", active=True)]
    )

    def set_options(self, options: tuple[str, ...]) -> None:
        self.buttons = [DepartmentButton(ALL_LABEL, "")]
        self.buttons += [DepartmentButton(o, o) for o in options]

    def show(self, department: str) -> None:
        for button in self.buttons:
            button.active = button.value == department

    @property
    def active(self) -> list[str]:
        return [b.value for b in self.buttons if b.active]


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

Listener = Callable[[FilteredView, ViewStats], None]


class FilterController:
    def __init__(self, catalog: Catalog = ()):
        self.state = FilterState()
        self.catalog: Catalog = ()
        self.departments: tuple[str, ...] = ()
        self.levels: tuple[str, ...] = LEVEL_OPTIONS
        self.view: FilteredView = ()
        self._surfaces: list[DepartmentSurface] = []
        self._listeners: list[Listener] = []
        self.attach_catalog(catalog)

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def attach_catalog(self, catalog: Catalog) -> None:
        """Install the loaded catalog and derive the department options."""
        self.catalog = tuple(catalog)
        self.departments = department_options(self.catalog)
        for surface in self._surfaces:
            surface.set_options(self.departments)
        self._apply(FilterState())

    def register_surface(self, surface: DepartmentSurface) -> None:
        surface.set_options(self.departments)
        surface.show(self.state.department)
        self._surfaces.append(surface)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def set_search_text(self, text: str) -> bool:
        self._apply(dataclasses.replace(self.state, search=text.lower()))
        return True

    def set_department(self, value: str) -> bool:
        if value and value not in self.departments:
            log.warning("Ignoring unknown department %r", value)
            return False
        self._apply(dataclasses.replace(self.state, department=value))
        return True

    def set_level(self, value: str) -> bool:
        if value and value not in self.levels:
            log.warning("Ignoring unknown level %r", value)
            return False
        self._apply(dataclasses.replace(self.state, level=value))
        return True

    def clear_all(self) -> None:
        self._apply(FilterState())

    def _apply(self, state: FilterState) -> None:
        self.state = state
        for surface in self._surfaces:
            surface.show(state.department)
        self.view = self.recompute()
        stats = self.stats()
        log.debug("state=%r  hits=%d", state, stats.matching)
        for listener in self._listeners:
            listener(self.view, stats)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def recompute(self) -> FilteredView:
        return filter_catalog(self.catalog, self.state)

    def stats(self) -> ViewStats:
        return ViewStats(
            matching=len(self.view),
            departments=len({d for d in map(department_of, self.view) if d}),
            total=len(self.catalog),
        )

    def summary(self) -> str:
        if not self.view:
            return "No courses found"
        return f"Showing {len(self.view)} of {len(self.catalog)} courses"

    def get_course_by_code(self, code: str) -> Course | None:
        return next(
            (c for c in self.catalog if fields_of(c).get("courseCode") == code), None
        )
