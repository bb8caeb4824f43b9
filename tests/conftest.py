"""Shared fixtures and in-memory transports for the httpmodule tests."""

from __future__ import annotations

import httpx
import pytest

from httpmodule import HTTPRequestDraft, HTTPRouterCompletion, HTTPSettings

BASE_URL = "https://example.com"


class StubDataTask:
    """Data task that reports a canned result when started."""

    def __init__(self, transport: StubTransport, request: HTTPRequestDraft, completion: HTTPRouterCompletion) -> None:
        self._transport = transport
        self.request = request
        self.completion = completion
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True
        if self._transport.auto_complete:
            self.completion(*self._transport.result_for(self.request))

    def cancel(self) -> None:
        self.cancelled = True


class StubTransport:
    """Deterministic, programmable transport that records every draft it receives."""

    def __init__(
        self,
        body: bytes | None = b"ok",
        status_code: int | None = 200,
        error: BaseException | None = None,
        *,
        auto_complete: bool = True,
    ) -> None:
        self.body = body
        self.status_code = status_code
        self.error = error
        self.auto_complete = auto_complete
        self.tasks: list[StubDataTask] = []

    @property
    def requests(self) -> list[HTTPRequestDraft]:
        return [task.request for task in self.tasks]

    def result_for(
        self, request: HTTPRequestDraft
    ) -> tuple[bytes | None, httpx.Response | None, BaseException | None]:
        response = httpx.Response(self.status_code) if self.status_code is not None else None
        return self.body, response, self.error

    def data_task(self, request: HTTPRequestDraft, completion: HTTPRouterCompletion) -> StubDataTask:
        task = StubDataTask(self, request, completion)
        self.tasks.append(task)
        return task


class EchoPathTransport(StubTransport):
    """Transport whose response body is the request path."""

    def result_for(
        self, request: HTTPRequestDraft
    ) -> tuple[bytes | None, httpx.Response | None, BaseException | None]:
        assert request.url is not None
        return request.url.path.encode(), httpx.Response(200), None


@pytest.fixture()
def draft() -> HTTPRequestDraft:
    """A GET draft pointed at the test base URL."""
    return HTTPRequestDraft(method="GET", url=httpx.URL(BASE_URL))


@pytest.fixture()
def settings() -> HTTPSettings:
    return HTTPSettings(timeout=5.0, parallel_workers=4)


@pytest.fixture()
def stub_transport() -> StubTransport:
    return StubTransport()
