"""
FastAPI application — HTTP front for one course-browsing session.

Run as a script:
    python app/app.py

Or as a module:
    uvicorn app.app:app --reload

At startup the catalog document (CATALOG_SOURCE) is read once; if that fails
the session stays empty and every view carries the load error message.

Endpoints:
    GET  /courses              current view, stats and filter state
    GET  /courses/{code}       one course by code
    GET  /options              department and level menus
    PUT  /filters/search       body: {"value": "..."}
    PUT  /filters/department   body: {"value": "..."}   ("" = all)
    PUT  /filters/level        body: {"value": "..."}   ("" = all)
    POST /filters/clear

Filter endpoints return the same payload as GET /courses. Endpoints are async
so every mutation runs on the event loop, one at a time.

Logs each filter change and wall-clock response time to stdout and
logs/app.log (rotating, 5 MB max, 3 backups).
"""

import asyncio
import logging
import logging.handlers
import sys
import time
from collections.abc import Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

# Ensure project root is on sys.path when running as a script (python app/app.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog import config
from catalog.session import BrowserSession
from catalog.loader import load


def _setup_logging() -> None:
    config.LOG_DIR.mkdir(exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        config.LOG_DIR / "app.log", maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")


# ---------------------------------------------------------------------------
# App + lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    session = BrowserSession()
    app.state.session = session

    log.info("Loading catalog from %s…", config.CATALOG_SOURCE)
    session.install(await asyncio.to_thread(load, config.CATALOG_SOURCE))
    if session.error is not None:
        log.error("  %s", session.error)
    else:
        log.info("  %d courses, %d departments.",
                 len(session.controller.catalog), len(session.controller.departments))

    yield  # server runs here

    session.close()


app = FastAPI(title="Course Catalog Browser", lifespan=lifespan)


def _session(request: Request) -> BrowserSession:
    return request.app.state.session


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class FilterValue(BaseModel):
    value: str = ""


class Stats(BaseModel):
    matching: int
    departments: int
    total: int


class Filters(BaseModel):
    search: str
    department: str
    level: str


class ButtonState(BaseModel):
    label: str
    value: str
    active: bool


class Surfaces(BaseModel):
    dropdown: str
    buttons: list[ButtonState]


class ViewResponse(BaseModel):
    courses: list[Any]
    stats: Stats
    summary: str
    filters: Filters
    surfaces: Surfaces
    error: str | None = None


class OptionsResponse(BaseModel):
    departments: list[str]
    levels: list[str]


def _view(session: BrowserSession) -> ViewResponse:
    ctl = session.controller
    stats = ctl.stats()
    return ViewResponse(
        # Records are passed through unvalidated; mappings are copied so callers can't mutate the catalog.
        courses=[dict(c) if isinstance(c, Mapping) else c for c in ctl.view],
        stats=Stats(matching=stats.matching, departments=stats.departments, total=stats.total),
        summary=session.error_message or ctl.summary(),
        filters=Filters(
            search=ctl.state.search,
            department=ctl.state.department,
            level=ctl.state.level,
        ),
        surfaces=Surfaces(
            dropdown=session.dropdown.selected,
            buttons=[
                ButtonState(label=b.label, value=b.value, active=b.active)
                for b in session.buttons.buttons
            ],
        ),
        error=session.error_message,
    )


def _logged(name: str, value: str, session: BrowserSession, t0: float) -> ViewResponse:
    resp = _view(session)
    elapsed = time.perf_counter() - t0
    log.info("%s=%r  hits=%d  %.3fs", name, value, resp.stats.matching, elapsed)
    return resp


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/courses", response_model=ViewResponse)
async def courses(request: Request) -> ViewResponse:
    return _view(_session(request))


@app.get("/courses/{code}")
async def course(code: str, request: Request) -> dict[str, Any]:
    found = _session(request).controller.get_course_by_code(code)
    if found is None:
        raise HTTPException(status_code=404, detail=f"No course {code!r}.")
    return dict(found)


@app.get("/options", response_model=OptionsResponse)
async def options(request: Request) -> OptionsResponse:
    ctl = _session(request).controller
    return OptionsResponse(departments=list(ctl.departments), levels=list(ctl.levels))


@app.put("/filters/search", response_model=ViewResponse)
async def set_search(body: FilterValue, request: Request) -> ViewResponse:
    t0 = time.perf_counter()
    session = _session(request)
    session.controller.set_search_text(body.value)
    return _logged("search", body.value, session, t0)


@app.put("/filters/department", response_model=ViewResponse)
async def set_department(body: FilterValue, request: Request) -> ViewResponse:
    t0 = time.perf_counter()
    session = _session(request)
    if not session.controller.set_department(body.value):
        raise HTTPException(status_code=422, detail=f"Unknown department {body.value!r}.")
    return _logged("department", body.value, session, t0)


@app.put("/filters/level", response_model=ViewResponse)
async def set_level(body: FilterValue, request: Request) -> ViewResponse:
    t0 = time.perf_counter()
    session = _session(request)
    if not session.controller.set_level(body.value):
        raise HTTPException(status_code=422, detail=f"Unknown level {body.value!r}.")
    return _logged("level", body.value, session, t0)


@app.post("/filters/clear", response_model=ViewResponse)
async def clear(request: Request) -> ViewResponse:
    t0 = time.perf_counter()
    session = _session(request)
    session.controller.clear_all()
    return _logged("clear", "", session, t0)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _launch_server() -> None:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        uvicorn.run(app, host=config.API_HOST, port=config.API_PORT, reload=False)
        return

    server = uvicorn.Server(uvicorn.Config(app, host=config.API_HOST, port=config.API_PORT))
    log.warning(
        "Detected an existing asyncio event loop; serving with create_task() instead of asyncio.run()."
    )
    asyncio.create_task(server.serve())


if __name__ == "__main__":
    log.info("=== Course Catalog Browser — launching on http://%s:%d ===",
             config.API_HOST, config.API_PORT)
    _launch_server()
