"""Opt-in logging setup for scripts that use httpmodule.

The library itself only creates module loggers under ``httpmodule``; nothing
is configured on import.
"""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "HTTPMODULE_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s [%(threadName)s] %(levelname)-8s %(name)s - %(message)s"


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    # getLevelName returns "Level <name>" for names it does not know.
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(level: str | None = None) -> None:
    """Install a root stream handler at ``level``.

    Without ``level`` the ``HTTPMODULE_LOG_LEVEL`` variable is consulted.
    Unknown level names fall back to ``WARNING``.
    """
    requested = level if level is not None else os.environ.get(LOG_LEVEL_ENV, "WARNING")
    logging.basicConfig(level=_resolve_level(requested), format=LOG_FORMAT)


__all__ = ["setup_logging"]
