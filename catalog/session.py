"""
Browser session.

One BrowserSession per running application: it owns the catalog (or the
LoadError that replaced it), the filter controller and both department
surfaces. The entry point creates it at startup and closes it on shutdown;
everything else receives it by reference.
"""

import logging
from pathlib import Path

from catalog.config import LOAD_ERROR_MESSAGE
from catalog.controller import DepartmentButtonGroup, DepartmentDropdown, FilterController
from catalog.loader import Catalog, LoadError, load

log = logging.getLogger(__name__)


class BrowserSession:
    def __init__(self):
        self.controller = FilterController()
        self.dropdown   = DepartmentDropdown()
        self.buttons    = DepartmentButtonGroup()
        self.error: LoadError | None = None
        self.loaded = False
        self.controller.register_surface(self.dropdown)
        self.controller.register_surface(self.buttons)

    @classmethod
    def from_source(cls, source: str | Path) -> "BrowserSession":
        session = cls()
        session.install(load(source))
        return session

    def install(self, result: Catalog | LoadError) -> None:
        """Attach a load() result. A LoadError leaves the catalog empty for good."""
        if self.loaded or self.error is not None:
            raise RuntimeError("catalog already installed for this session")
        if isinstance(result, LoadError):
            self.error = result
            return
        self.controller.attach_catalog(result)
        self.loaded = True

    @property
    def error_message(self) -> str | None:
        return LOAD_ERROR_MESSAGE if self.error is not None else None

    def close(self) -> None:
        log.info("Closing session (%d courses).", len(self.controller.catalog))
        self.controller.attach_catalog(())
        self.loaded = False
