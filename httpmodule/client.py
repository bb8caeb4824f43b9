"""Queue-based HTTP client.

Provides ``HTTPClient``, which dispatches endpoint requests through an
:class:`~httpmodule.router.HTTPRouter` on one of two background lanes and
reports an :class:`HTTPClientResult` to the caller's completion.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Protocol, TypeVar

import httpx

from httpmodule.config import HTTPSettings, load_http_settings
from httpmodule.endpoint import HTTPEndpoint
from httpmodule.exceptions import HTTPClientError, HTTPClientErrorKind
from httpmodule.router import HTTPRouterProtocol

logger = logging.getLogger(__name__)

EndpointT = TypeVar("EndpointT", bound=HTTPEndpoint)
EndpointT_contra = TypeVar("EndpointT_contra", bound=HTTPEndpoint, contravariant=True)


@dataclass(frozen=True)
class HTTPClientResult:
    """Outcome of a fetch: raw response bytes or an :class:`HTTPClientError`."""

    value: bytes | None = None
    error: HTTPClientError | None = None

    @classmethod
    def success(cls, value: bytes | None) -> HTTPClientResult:
        return cls(value=value)

    @classmethod
    def failure(cls, error: HTTPClientError) -> HTTPClientResult:
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    def unwrap(self) -> bytes | None:
        """Return the response bytes, raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value


HTTPClientCompletion = Callable[[HTTPClientResult], None]


class HTTPClientQueue(str, Enum):
    """Background lane a fetch runs on."""

    PARALLEL = "parallel"
    SERIAL = "serial"


def check_status(status_code: int) -> HTTPClientError | None:
    """Map an HTTP status code to a client error, or None for 2xx.

    The buckets are coarse: every status from 401 through 500 counts as an
    authentication failure and 501 through 599 as a request failure.
    Every other status, 400 included, is unknown.
    """
    if 200 <= status_code <= 299:
        return None
    if 401 <= status_code <= 500:
        return HTTPClientError(HTTPClientErrorKind.AUTH_ERROR, status=status_code)
    if 501 <= status_code <= 599:
        return HTTPClientError(HTTPClientErrorKind.REQUEST_ERROR, status=status_code)
    return HTTPClientError(HTTPClientErrorKind.UNKNOWN_ERROR, status=status_code)


def classify_response(
    data: bytes | None,
    response: httpx.Response | None,
    error: BaseException | None,
) -> HTTPClientResult:
    """Turn a raw transport result into an :class:`HTTPClientResult`."""
    if error is not None:
        failure = HTTPClientError(HTTPClientErrorKind.CONNECTION_ERROR)
        failure.__cause__ = error
        return HTTPClientResult.failure(failure)

    if not isinstance(response, httpx.Response):
        return HTTPClientResult.failure(HTTPClientError(HTTPClientErrorKind.UNKNOWN_ERROR))

    status_error = check_status(response.status_code)
    if status_error is not None:
        return HTTPClientResult.failure(status_error)

    if not data:
        return HTTPClientResult.failure(
            HTTPClientError(HTTPClientErrorKind.EMPTY_DATA_ERROR, status=response.status_code)
        )
    return HTTPClientResult.success(data)


class HTTPClientProtocol(Protocol[EndpointT_contra]):
    """The four dispatch variants offered by a client."""

    def fetch_sync(
        self, endpoint: EndpointT_contra, queue: HTTPClientQueue, completion: HTTPClientCompletion
    ) -> None: ...

    def fetch_sync_after(
        self,
        endpoint: EndpointT_contra,
        queue: HTTPClientQueue,
        delay: float,
        completion: HTTPClientCompletion,
    ) -> None: ...

    def fetch_async(
        self, endpoint: EndpointT_contra, queue: HTTPClientQueue, completion: HTTPClientCompletion
    ) -> None: ...

    def fetch_async_after(
        self,
        endpoint: EndpointT_contra,
        queue: HTTPClientQueue,
        delay: float,
        completion: HTTPClientCompletion,
    ) -> None: ...


class HTTPClient(Generic[EndpointT]):
    """Dispatch endpoint requests on a serial or a parallel background lane.

    Usage::

        from httpmodule import HTTPClient, HTTPClientQueue, HTTPRouter

        with HTTPClient("com.example.api", HTTPRouter()) as client:
            client.fetch_async(Users.LIST, HTTPClientQueue.SERIAL, print)

    The serial lane runs one unit of work at a time in submission order. The
    parallel lane runs up to ``settings.parallel_workers`` at once with no
    ordering guarantee.

    The ``fetch_sync*`` variants block until the submitted unit of work has
    run. With the default :class:`~httpmodule.session.HttpxTransport` that
    includes the network round trip; a transport whose ``start`` returns
    before the response arrives only guarantees that the request was sent.
    Calling a ``fetch_sync*`` variant from a completion running on the serial
    lane deadlocks.

    Args:
        queue_name: Label used to name the lane worker threads.
        router: Router that builds and sends the requests.
        settings: Lane sizing. Loaded from the environment when omitted.
    """

    def __init__(
        self,
        queue_name: str,
        router: HTTPRouterProtocol[EndpointT],
        *,
        settings: HTTPSettings | None = None,
    ) -> None:
        self.queue_name = queue_name
        self.settings = settings or load_http_settings()
        self._router = router
        self._serial_queue = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"{queue_name}.serial")
        self._parallel_queue = ThreadPoolExecutor(
            max_workers=self.settings.parallel_workers,
            thread_name_prefix=f"{queue_name}.parallel",
        )
        self._timers: set[threading.Timer] = set()
        self._timers_lock = threading.Lock()
        self._closed = False

    # -- Context manager ----------------------------------------------------

    def __enter__(self) -> HTTPClient[EndpointT]:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Drop pending delayed fetches and wait for both lanes to drain."""
        with self._timers_lock:
            self._closed = True
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        self._serial_queue.shutdown(wait=True)
        self._parallel_queue.shutdown(wait=True)

    # -- Dispatch -----------------------------------------------------------

    def fetch_sync(self, endpoint: EndpointT, queue: HTTPClientQueue, completion: HTTPClientCompletion) -> None:
        """Run the fetch on ``queue`` and block until it has run."""
        self._select_queue(queue).submit(self._fetch, endpoint, completion).result()

    def fetch_sync_after(
        self,
        endpoint: EndpointT,
        queue: HTTPClientQueue,
        delay: float,
        completion: HTTPClientCompletion,
    ) -> None:
        """Like :meth:`fetch_sync`, but the lane waits ``delay`` seconds first."""

        def work() -> None:
            time.sleep(max(0.0, delay))
            self._fetch(endpoint, completion)

        self._select_queue(queue).submit(work).result()

    def fetch_async(self, endpoint: EndpointT, queue: HTTPClientQueue, completion: HTTPClientCompletion) -> None:
        """Submit the fetch to ``queue`` and return immediately."""
        self._submit(queue, endpoint, completion)

    def fetch_async_after(
        self,
        endpoint: EndpointT,
        queue: HTTPClientQueue,
        delay: float,
        completion: HTTPClientCompletion,
    ) -> None:
        """Submit the fetch to ``queue`` once ``delay`` seconds have passed.

        Returns immediately; the wait happens on a timer thread.
        """
        timer: threading.Timer

        def fire() -> None:
            with self._timers_lock:
                self._timers.discard(timer)
                if self._closed:
                    logger.debug("Client %s closed, dropping delayed fetch of %r", self.queue_name, endpoint)
                    return
                self._submit(queue, endpoint, completion)

        timer = threading.Timer(max(0.0, delay), fire)
        timer.daemon = True
        with self._timers_lock:
            if self._closed:
                raise RuntimeError(f"HTTPClient {self.queue_name!r} is closed")
            self._timers.add(timer)
        timer.start()

    # -- Internals ----------------------------------------------------------

    def _submit(self, queue: HTTPClientQueue, endpoint: EndpointT, completion: HTTPClientCompletion) -> None:
        future = self._select_queue(queue).submit(self._fetch, endpoint, completion)
        future.add_done_callback(self._report_failure)

    def _report_failure(self, future: Future[None]) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("Fetch on %s raised", self.queue_name, exc_info=exc)

    def _fetch(self, endpoint: EndpointT, completion: HTTPClientCompletion) -> None:
        def handle(data: bytes | None, response: httpx.Response | None, error: BaseException | None) -> None:
            result = classify_response(data, response, error)
            if result.error is not None:
                logger.debug("Fetch of %r failed: %s", endpoint, result.error)
            completion(result)

        self._router.resume(endpoint, handle)

    def _select_queue(self, queue: HTTPClientQueue) -> ThreadPoolExecutor:
        if queue is HTTPClientQueue.SERIAL:
            return self._serial_queue
        return self._parallel_queue
