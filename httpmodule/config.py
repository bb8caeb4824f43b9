"""Runtime settings for httpmodule, overridable through ``HTTPMODULE_*`` variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable

from httpmodule.version import __version__

DEFAULT_USER_AGENT = f"httpmodule/{__version__}"

ENV_PREFIX = "HTTPMODULE_"
_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})


@dataclass
class HTTPSettings:
    """Transport and dispatch defaults."""

    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True
    parallel_workers: int = 8
    chunk_size: int = 64 * 1024

    @classmethod
    def from_env(cls) -> HTTPSettings:
        """Build settings from the environment as it is at call time.

        Each field is read from ``HTTPMODULE_<FIELD>``. A value that does not
        parse keeps the field default. ``parallel_workers`` is raised to at
        least one, and a non-positive ``chunk_size`` keeps the default.
        """

        def read(field_name: str, parse: Callable[[str], Any]) -> Any:
            default = getattr(cls, field_name)
            raw = os.environ.get(ENV_PREFIX + field_name.upper())
            if raw is None:
                return default
            try:
                return parse(raw)
            except ValueError:
                return default

        chunk_size = read("chunk_size", int)
        return cls(
            timeout=read("timeout", float),
            user_agent=read("user_agent", str),
            follow_redirects=read("follow_redirects", lambda raw: raw.strip().lower() in _TRUE_WORDS),
            parallel_workers=max(1, read("parallel_workers", int)),
            chunk_size=chunk_size if chunk_size > 0 else cls.chunk_size,
        )


def load_http_settings() -> HTTPSettings:
    """Shortcut for :meth:`HTTPSettings.from_env`."""
    return HTTPSettings.from_env()
