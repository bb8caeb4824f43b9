"""Mutable request draft assembled by the router before dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx


@dataclass
class HTTPRequestDraft:
    """In-flight request representation handed to an HTTP transport.

    ``headers`` is an :class:`httpx.Headers` instance, so lookups are
    case-insensitive the same way they are on the wire.
    """

    method: str = "GET"
    url: httpx.URL | None = None
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes | None = None

    def set_header(self, name: str, value: str) -> None:
        """Set ``name`` to ``value``, replacing any previous value."""
        self.headers[name] = value

    def set_default_header(self, name: str, value: str) -> None:
        """Set ``name`` only when the draft does not carry it yet."""
        if name not in self.headers:
            self.headers[name] = value
