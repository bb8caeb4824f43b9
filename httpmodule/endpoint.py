"""Endpoint description types.

An endpoint is any object exposing ``url``, ``path``, ``method``, ``task`` and
``headers``. Callers usually describe their API as an enum or a set of
dataclasses and hand those values to :class:`~httpmodule.router.HTTPRouter`::

    class Users(Enum):
        LIST = "list"

        @property
        def url(self) -> str:
            return "https://api.example.com"

        @property
        def path(self) -> str:
            return "/users"

        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union, runtime_checkable

import httpx

from httpmodule.parameters import HTTPParameters, HTTPParametersEncoding

HTTPHeaders = dict[str, str]


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class PlainRequest:
    """Send the request as built from the endpoint, without parameters."""


@dataclass(frozen=True)
class RequestWithParameters:
    """Attach body and/or URL parameters using ``encoding``."""

    body_params: HTTPParameters | None = None
    encoding: HTTPParametersEncoding = HTTPParametersEncoding.JSON
    url_params: HTTPParameters | None = None


@dataclass(frozen=True)
class RequestWithParametersAndHeaders(RequestWithParameters):
    """Set ``headers`` on the request, then attach parameters as :class:`RequestWithParameters` does."""

    headers: HTTPHeaders | None = None


HTTPTask = Union[PlainRequest, RequestWithParameters, RequestWithParametersAndHeaders]


@runtime_checkable
class HTTPEndpoint(Protocol):
    """Capabilities an object needs to be dispatched by the router."""

    @property
    def url(self) -> str | httpx.URL: ...

    @property
    def path(self) -> str: ...

    @property
    def method(self) -> HTTPMethod: ...

    @property
    def task(self) -> HTTPTask: ...

    @property
    def headers(self) -> HTTPHeaders | None: ...


@dataclass(frozen=True)
class Endpoint:
    """Ready-made immutable :class:`HTTPEndpoint` implementation."""

    url: str | httpx.URL
    path: str = ""
    method: HTTPMethod = HTTPMethod.GET
    task: HTTPTask = PlainRequest()
    headers: HTTPHeaders | None = None


__all__ = [
    "Endpoint",
    "HTTPEndpoint",
    "HTTPHeaders",
    "HTTPMethod",
    "HTTPTask",
    "PlainRequest",
    "RequestWithParameters",
    "RequestWithParametersAndHeaders",
]
