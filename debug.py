# debug.py
from __future__ import annotations
import logging
from typing import Callable, Dict

from errors import ConfigError

_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
COMPONENTS = ("config", "settings", "machine", "output")


class Debug:
    """Component-switched diagnostics on top of the ``ENIGMA`` logger.

    The engine never logs by itself; the front end hands ``sink("machine")``
    to :class:`machine.Machine` as its trace callable.
    """

    _root_configured: bool = False          # class-level guard

    def __init__(self, *, log_to: str | None = None, verbose: bool = False) -> None:
        """
        If `log_to` is given, messages also stream to that file.
        Multiple Debug() instances share the same root logger config.
        """
        if not Debug._root_configured:
            logging.basicConfig(
                level=logging.DEBUG,
                format=_FORMAT,
                datefmt=_DATEFMT,
                handlers=[logging.StreamHandler()],
            )
            Debug._root_configured = True

        self.logger = logging.getLogger("ENIGMA")
        self.logger.setLevel(logging.DEBUG)
        self._file_handler: logging.Handler | None = None
        if log_to:
            try:
                self._file_handler = logging.FileHandler(log_to, encoding="utf-8")
            except OSError:
                raise ConfigError(f"could not open {log_to}") from None
            self._file_handler.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))
            self.logger.addHandler(self._file_handler)

        self.components: Dict[str, bool] = {c: verbose for c in COMPONENTS}

    # ── logging API ──────────────────────────────────────────────
    def log(self, component: str, message: str) -> None:
        if self.components.get(component, False):
            self.logger.debug("[%s] %s", component.upper(), message)

    def sink(self, component: str) -> Callable[[str], None]:
        """Return a trace callable that logs under *component*."""
        self._require(component)
        return lambda message: self.log(component, message)

    def close(self) -> None:
        if self._file_handler is not None:
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    # ── component toggles ────────────────────────────────────────
    def enable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = True

    def is_enabled(self, component: str) -> bool:
        return self.components.get(component, False)

    def _require(self, component: str) -> None:
        if component not in self.components:
            raise ValueError(f"No such component: {component!r}")

    def __repr__(self) -> str:
        active = [k for k, v in self.components.items() if v]
        return f"<Debug active={active}>"
