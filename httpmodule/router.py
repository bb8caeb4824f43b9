"""Request construction and dispatch for a single endpoint type."""

from __future__ import annotations

import logging
from typing import Generic, Protocol, TypeVar

import httpx

from httpmodule._transport import HTTPDataTask, HTTPRouterCompletion, HTTPTransport
from httpmodule.config import HTTPSettings
from httpmodule.endpoint import HTTPEndpoint, HTTPMethod, RequestWithParameters, RequestWithParametersAndHeaders
from httpmodule.exceptions import HTTPModuleError, MissingURLError, UnsupportedMethodError
from httpmodule.request import HTTPRequestDraft
from httpmodule.session import HttpxTransport, shared_transport

logger = logging.getLogger(__name__)

EndpointT = TypeVar("EndpointT", bound=HTTPEndpoint)
EndpointT_contra = TypeVar("EndpointT_contra", bound=HTTPEndpoint, contravariant=True)


class HTTPRouterProtocol(Protocol[EndpointT_contra]):
    """Protocol for objects the client dispatches requests through."""

    def resume(self, route: EndpointT_contra, completion: HTTPRouterCompletion) -> None: ...

    def cancel(self) -> None: ...


def append_path(url: str | httpx.URL, path: str) -> httpx.URL:
    """Append ``path`` to ``url`` as a path component.

    Exactly one ``/`` separates the existing path and ``path``; the query of
    ``url`` is preserved. An empty ``path`` returns ``url`` unchanged.

    Raises:
        MissingURLError: If ``url`` cannot be parsed.
    """
    try:
        base = httpx.URL(url)
        if not path:
            return base
        joined = base.path.rstrip("/") + "/" + path.lstrip("/")
        return base.copy_with(path=joined)
    except httpx.InvalidURL as exc:
        raise MissingURLError() from exc


class HTTPRouter(Generic[EndpointT]):
    """Build requests from endpoints and hand them to a transport.

    The router tracks one in-flight data task. Starting a new request before
    the previous one completes replaces the tracked task, so :meth:`cancel`
    only reaches the most recent request. Callers sharing one router across
    threads get last-writer-wins semantics for that slot.

    Args:
        transport: Network collaborator. Defaults to the shared
            :class:`~httpmodule.session.HttpxTransport`, or to a dedicated one
            when ``settings`` is given.
        settings: Settings for a dedicated default transport.
    """

    def __init__(self, transport: HTTPTransport | None = None, *, settings: HTTPSettings | None = None) -> None:
        if transport is None:
            transport = HttpxTransport(settings=settings) if settings is not None else shared_transport()
        self._transport = transport
        self._task: HTTPDataTask | None = None

    def build_request(self, route: EndpointT) -> HTTPRequestDraft:
        """Return the request draft described by ``route``.

        Raises:
            UnsupportedMethodError: If ``route.method`` is not an :class:`HTTPMethod`.
            MissingURLError: If the endpoint URL cannot be parsed.
            HTTPParametersEncoderError: If the task parameters cannot be encoded.
        """
        try:
            method = HTTPMethod(route.method)
        except ValueError as exc:
            raise UnsupportedMethodError(route.method) from exc

        request = HTTPRequestDraft(method=method.value, url=append_path(route.url, route.path))

        task = route.task
        if isinstance(task, RequestWithParametersAndHeaders) and task.headers:
            for key, value in task.headers.items():
                request.set_header(key, value)
        if isinstance(task, RequestWithParameters):
            task.encoding.encode(request, body_params=task.body_params, url_params=task.url_params)

        return request

    def resume(self, route: EndpointT, completion: HTTPRouterCompletion) -> None:
        """Build the request for ``route`` and start it on the transport.

        ``completion`` receives the transport result unchanged. When the
        request cannot be built it is called immediately with
        ``(None, None, error)`` and nothing is sent.
        """
        try:
            request = self.build_request(route)
        except HTTPModuleError as exc:
            logger.warning("Could not build request for %r: %s", route, exc)
            completion(None, None, exc)
            return

        logger.debug("Dispatching %s %s", request.method, request.url)
        self._task = self._transport.data_task(request, completion)
        self._task.start()

    def cancel(self) -> None:
        """Cancel the most recently started request, if any."""
        if self._task is not None:
            self._task.cancel()
