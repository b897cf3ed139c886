"""
Catalog loader.

Reads the course document once and exposes its records as an immutable
tuple. The document is a JSON object whose "courses" key holds the list of
course records:

    {"courses": [{"courseCode": "CS101", "title": "...", ...}, ...]}

The source is either a filesystem path or an http(s) URL. Failures are never
raised to the caller; load() returns a LoadError describing what went wrong.
Records are not validated, malformed ones are passed through untouched.

Public API:
    load(source) → Catalog | LoadError
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from catalog.config import CATALOG_KEY

log = logging.getLogger(__name__)

Course  = dict[str, Any]
Catalog = tuple[Course, ...]

SESSION = requests.Session()
SESSION.headers["User-Agent"] = "Course-Catalog-Browser/1.0"


@dataclass(frozen=True)
class LoadError:
    """Terminal failure to read or parse the catalog document."""

    source: str
    reason: str

    def __str__(self) -> str:
        return f"could not load {self.source}: {self.reason}"


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read(source: str) -> str:
    if _is_url(source):
        resp = SESSION.get(source)
        resp.raise_for_status()
        return resp.text
    return Path(source).read_text(encoding="utf-8")


def parse(text: str) -> Catalog:
    """Parse a catalog document; raises ValueError on a bad shape."""
    data = json.loads(text)
    if not isinstance(data, dict) or CATALOG_KEY not in data:
        raise ValueError(f"document has no {CATALOG_KEY!r} collection")
    courses = data[CATALOG_KEY]
    if not isinstance(courses, list):
        raise ValueError(f"{CATALOG_KEY!r} is not a list")
    return tuple(courses)


def load(source: str | Path) -> Catalog | LoadError:
    """Read and parse the catalog at source. Never raises."""
    source = str(source)
    try:
        catalog = parse(_read(source))
    except (OSError, requests.RequestException, ValueError) as exc:
        # json.JSONDecodeError is a ValueError
        log.error("Error loading courses from %s: %s", source, exc)
        return LoadError(source=source, reason=str(exc))

    log.info("Loaded %d courses from %s", len(catalog), source)
    return catalog
