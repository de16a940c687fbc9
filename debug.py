# debug.py
from __future__ import annotations
import logging
from typing import Dict

COMPONENTS = ("keyboard", "plugboard", "rotor", "reflector", "stepping", "encipher")
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Debug:
    _root_configured: bool = False          # class-level guard
    _shared: Dict[str, bool] = {c: False for c in COMPONENTS}
    _global: bool = True

    def __init__(self, *, log_to: str | None = None) -> None:
        """Hook this module into the process-wide logging setup.

        The first instance installs the handlers; a later one given
        `log_to` only adds a file handler. Switches live on the class, so
        `--debug stepping` on the command line lights up every module.
        """
        if not Debug._root_configured:
            handlers: list[logging.Handler] = [logging.StreamHandler()]
            if log_to:
                handlers.append(logging.FileHandler(log_to, encoding="utf-8"))

            logging.basicConfig(
                level=logging.DEBUG,
                format=LOG_FORMAT,
                datefmt=DATE_FORMAT,
                handlers=handlers,
            )
            Debug._root_configured = True
        elif log_to:
            handler = logging.FileHandler(log_to, encoding="utf-8")
            handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
            logging.getLogger().addHandler(handler)

        self.logger = logging.getLogger("UNIGMA")
        self.logger.setLevel(logging.DEBUG)
        self.components = Debug._shared

    @property
    def enabled(self) -> bool:
        return Debug._global

    # ── logging API ──────────────────────────────────────────────
    def log(self, component: str, message: str) -> None:
        if Debug._global and self.components.get(component, False):
            self.logger.debug("[%s] %s", component.upper(), message)

    # ── component toggles ────────────────────────────────────────
    def enable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = True

    def disable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = False

    def toggle(self, component: str) -> None:
        self._require(component)
        self.components[component] = not self.components[component]

    def toggle_global(self, state: bool) -> None:
        """Switch every component on/off at once."""
        Debug._global = state

    def status(self) -> Dict[str, bool]:
        """Return a *copy* of the current component map."""
        return self.components.copy()

    # ── helpers ──────────────────────────────────────────────────
    def _require(self, component: str) -> None:
        if component not in self.components:
            raise ValueError(f"No such component: {component!r}")

    # nicety for `print(dbg)`
    def __repr__(self) -> str:
        active = [k for k, v in self.components.items() if v]
        return f"<Debug enabled={self.enabled} active={active}>"
