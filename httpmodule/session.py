"""httpx-backed :class:`~httpmodule._transport.HTTPTransport` implementation."""

from __future__ import annotations

import logging
import threading
from typing import Any

import httpx

from httpmodule.config import HTTPSettings, load_http_settings
from httpmodule.exceptions import HTTPRequestCancelledError, MissingURLError
from httpmodule._transport import HTTPRouterCompletion
from httpmodule.request import HTTPRequestDraft

logger = logging.getLogger(__name__)


class HttpxDataTask:
    """One request bound to an :class:`httpx.Client`.

    The request runs inside :meth:`start` on the calling thread. The body is
    read in chunks so :meth:`cancel` from another thread interrupts the read;
    the completion then receives :class:`HTTPRequestCancelledError`.
    """

    def __init__(
        self,
        client: httpx.Client,
        request: HTTPRequestDraft,
        completion: HTTPRouterCompletion,
        *,
        settings: HTTPSettings,
    ) -> None:
        self._client = client
        self._request = request
        self._completion = completion
        self._settings = settings
        self._cancelled = threading.Event()
        self._started = False
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Mark the task cancelled; a pending or running read stops early."""
        self._cancelled.set()

    def start(self) -> None:
        """Send the request and deliver the result to the completion.

        Calling ``start`` more than once has no effect.
        """
        with self._lock:
            if self._started:
                return
            self._started = True

        if self.cancelled:
            self._completion(None, None, HTTPRequestCancelledError())
            return

        body, response, error = self._perform()
        self._completion(body, response, error)

    def _build_request(self) -> httpx.Request:
        draft = self._request
        if draft.url is None:
            raise MissingURLError()
        headers = httpx.Headers(draft.headers)
        if "User-Agent" not in headers:
            headers["User-Agent"] = self._settings.user_agent
        return self._client.build_request(
            draft.method,
            draft.url,
            headers=headers,
            content=draft.body,
        )

    def _perform(self) -> tuple[bytes | None, httpx.Response | None, BaseException | None]:
        response: httpx.Response | None = None
        try:
            request = self._build_request()
            logger.debug("Sending %s %s", request.method, request.url)
            response = self._client.send(request, stream=True)
            try:
                content = bytearray()
                for chunk in response.iter_bytes(self._settings.chunk_size):
                    if self.cancelled:
                        raise HTTPRequestCancelledError()
                    content.extend(chunk)
            finally:
                response.close()
        except HTTPRequestCancelledError as exc:
            logger.debug("Request to %s cancelled", self._request.url)
            return None, response, exc
        except (httpx.HTTPError, httpx.InvalidURL, MissingURLError) as exc:
            logger.debug("Request to %s failed: %s", self._request.url, exc)
            return None, None, exc

        logger.debug("Received HTTP %s (%d bytes) from %s", response.status_code, len(content), response.url)
        return bytes(content), response, None


class HttpxTransport:
    """Transport that executes request drafts with an :class:`httpx.Client`.

    Usage::

        transport = HttpxTransport()
        task = transport.data_task(draft, lambda body, response, error: ...)
        task.start()

    Args:
        client: Optional preconfigured :class:`httpx.Client`. When omitted the
            transport creates and owns one built from ``settings``.
        settings: Transport defaults. Loaded from the environment when omitted.
    """

    def __init__(self, client: httpx.Client | None = None, *, settings: HTTPSettings | None = None) -> None:
        self.settings = settings or load_http_settings()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=self.settings.timeout,
            follow_redirects=self.settings.follow_redirects,
        )

    # -- Context manager ----------------------------------------------------

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def data_task(self, request: HTTPRequestDraft, completion: HTTPRouterCompletion) -> HttpxDataTask:
        return HttpxDataTask(self._client, request, completion, settings=self.settings)


_shared_transport: HttpxTransport | None = None
_shared_lock = threading.Lock()


def shared_transport() -> HttpxTransport:
    """Return the process-wide default transport, creating it on first use."""
    global _shared_transport
    with _shared_lock:
        if _shared_transport is None:
            _shared_transport = HttpxTransport()
        return _shared_transport


__all__ = ["HttpxDataTask", "HttpxTransport", "shared_transport"]
