"""Transport protocol definitions.

The router never talks to the network itself: it hands a finished
:class:`~httpmodule.request.HTTPRequestDraft` to an :class:`HTTPTransport`
and gets back a data task it can start and cancel. These protocols describe
that contract; :class:`~httpmodule.session.HttpxTransport` is the default
implementation.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

import httpx

from httpmodule.request import HTTPRequestDraft

HTTPRouterCompletion = Callable[
    [Optional[bytes], Optional[httpx.Response], Optional[BaseException]], None
]


class HTTPDataTask(Protocol):
    """Handle to one request submitted to a transport."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...


class HTTPTransport(Protocol):
    """Protocol for the network collaborator used by the router.

    ``completion`` must be invoked exactly once with
    ``(body, response, error)``.
    """

    def data_task(
        self, request: HTTPRequestDraft, completion: HTTPRouterCompletion
    ) -> HTTPDataTask: ...
