"""Tests for the httpx-backed transport and the full client pipeline.

Uses ``respx`` to mock httpx requests without hitting a real server.
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from httpmodule import (
    Endpoint,
    HTTPClient,
    HTTPClientErrorKind,
    HTTPClientQueue,
    HTTPClientResult,
    HTTPMethod,
    HTTPParametersEncoding,
    HTTPRequestCancelledError,
    HTTPRequestDraft,
    HTTPRouter,
    HTTPSettings,
    HttpxTransport,
    MissingURLError,
    RequestWithParameters,
    RequestWithParametersAndHeaders,
)

API_URL = "http://api.test"


class Completion:
    def __init__(self) -> None:
        self.calls: list[tuple[bytes | None, httpx.Response | None, BaseException | None]] = []

    def __call__(self, data: bytes | None, response: httpx.Response | None, error: BaseException | None) -> None:
        self.calls.append((data, response, error))


@pytest.fixture()
def transport(settings: HTTPSettings) -> HttpxTransport:
    with HttpxTransport(settings=settings) as transport:
        yield transport


def draft_for(path: str, method: str = "GET", **kwargs) -> HTTPRequestDraft:
    return HTTPRequestDraft(method=method, url=httpx.URL(f"{API_URL}{path}"), **kwargs)


# ---------------------------------------------------------------------------
# Transport construction
# ---------------------------------------------------------------------------


class TestTransportConstruction:
    """Verify client ownership and settings handling."""

    def test_owned_client_closed(self, settings: HTTPSettings) -> None:
        transport = HttpxTransport(settings=settings)
        transport.close()
        assert transport._client.is_closed

    def test_injected_client_left_open(self, settings: HTTPSettings) -> None:
        client = httpx.Client()
        with HttpxTransport(client, settings=settings):
            pass
        assert not client.is_closed
        client.close()

    def test_settings_applied(self) -> None:
        transport = HttpxTransport(settings=HTTPSettings(timeout=3.0, follow_redirects=False))
        assert transport._client.timeout.read == 3.0
        assert transport._client.follow_redirects is False
        transport.close()


# ---------------------------------------------------------------------------
# Data tasks
# ---------------------------------------------------------------------------


class TestDataTask:
    """Verify requests are sent as drafted and results are reported once."""

    @respx.mock
    def test_get_delivers_body_and_response(self, transport: HttpxTransport) -> None:
        route = respx.get(f"{API_URL}/users").mock(return_value=httpx.Response(200, content=b"[1,2]"))
        completion = Completion()

        transport.data_task(draft_for("/users"), completion).start()

        assert route.called
        assert len(completion.calls) == 1
        data, response, error = completion.calls[0]
        assert data == b"[1,2]"
        assert response is not None
        assert response.status_code == 200
        assert error is None

    @respx.mock
    def test_sends_method_headers_and_body(self, transport: HttpxTransport) -> None:
        route = respx.post(f"{API_URL}/items").mock(return_value=httpx.Response(201, content=b"created"))
        draft = draft_for("/items", method="POST", body=b'{"a":1}')
        draft.set_header("Content-Type", "application/json")
        draft.set_header("X-Trace", "t-1")

        transport.data_task(draft, Completion()).start()

        request = route.calls.last.request
        assert request.method == "POST"
        assert request.content == b'{"a":1}'
        assert request.headers["content-type"] == "application/json"
        assert request.headers["x-trace"] == "t-1"

    @respx.mock
    def test_default_user_agent(self, transport: HttpxTransport, settings: HTTPSettings) -> None:
        route = respx.get(f"{API_URL}/ua").mock(return_value=httpx.Response(200, content=b"x"))

        transport.data_task(draft_for("/ua"), Completion()).start()

        assert route.calls.last.request.headers["user-agent"] == settings.user_agent

    @respx.mock
    def test_explicit_user_agent_kept(self, transport: HttpxTransport) -> None:
        route = respx.get(f"{API_URL}/ua").mock(return_value=httpx.Response(200, content=b"x"))
        draft = draft_for("/ua")
        draft.set_header("User-Agent", "custom/1.0")

        transport.data_task(draft, Completion()).start()

        assert route.calls.last.request.headers["user-agent"] == "custom/1.0"

    @respx.mock
    def test_connect_error_reported(self, transport: HttpxTransport) -> None:
        respx.get(f"{API_URL}/down").mock(side_effect=httpx.ConnectError)
        completion = Completion()

        transport.data_task(draft_for("/down"), completion).start()

        data, response, error = completion.calls[0]
        assert data is None
        assert response is None
        assert isinstance(error, httpx.ConnectError)

    @respx.mock(assert_all_called=False)
    def test_cancel_before_start(self, transport: HttpxTransport) -> None:
        route = respx.get(f"{API_URL}/slow").mock(return_value=httpx.Response(200, content=b"x"))
        completion = Completion()

        task = transport.data_task(draft_for("/slow"), completion)
        task.cancel()
        task.start()

        assert not route.called
        assert isinstance(completion.calls[0][2], HTTPRequestCancelledError)

    @respx.mock
    def test_cancel_while_reading_body(self) -> None:
        completion = Completion()
        task = None

        def body():
            yield b"a"
            task.cancel()
            yield b"b"
            yield b"c"

        route = respx.get(f"{API_URL}/stream").mock(side_effect=lambda request: httpx.Response(200, content=body()))

        with HttpxTransport(settings=HTTPSettings(chunk_size=1)) as transport:
            task = transport.data_task(draft_for("/stream"), completion)
            task.start()

        assert route.called
        assert task.cancelled
        assert len(completion.calls) == 1
        data, response, error = completion.calls[0]
        assert data is None
        assert response is not None
        assert response.status_code == 200
        assert isinstance(error, HTTPRequestCancelledError)

    @respx.mock
    def test_start_twice_sends_once(self, transport: HttpxTransport) -> None:
        route = respx.get(f"{API_URL}/once").mock(return_value=httpx.Response(200, content=b"x"))
        completion = Completion()

        task = transport.data_task(draft_for("/once"), completion)
        task.start()
        task.start()

        assert route.call_count == 1
        assert len(completion.calls) == 1

    def test_missing_url_reported(self, transport: HttpxTransport) -> None:
        completion = Completion()

        transport.data_task(HTTPRequestDraft(url=None), completion).start()

        assert isinstance(completion.calls[0][2], MissingURLError)


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------


class TestPipeline:
    """Verify client, router and httpx transport working together."""

    @pytest.fixture()
    def client(self, transport: HttpxTransport, settings: HTTPSettings) -> HTTPClient:
        with HTTPClient("test.pipeline", HTTPRouter(transport), settings=settings) as client:
            yield client

    def fetch(self, client: HTTPClient, endpoint: Endpoint) -> HTTPClientResult:
        results: list[HTTPClientResult] = []
        client.fetch_sync(endpoint, HTTPClientQueue.SERIAL, results.append)
        assert len(results) == 1
        return results[0]

    @respx.mock
    def test_search_with_query(self, client: HTTPClient) -> None:
        route = respx.get(f"{API_URL}/search").mock(return_value=httpx.Response(200, json={"hits": 3}))
        endpoint = Endpoint(
            url=API_URL,
            path="/search",
            task=RequestWithParameters(encoding=HTTPParametersEncoding.URL, url_params={"q": "python"}),
        )

        result = self.fetch(client, endpoint)

        assert json.loads(result.unwrap()) == {"hits": 3}
        request = route.calls.last.request
        assert request.url.params["q"] == "python"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"

    @respx.mock
    def test_post_json_with_headers(self, client: HTTPClient) -> None:
        route = respx.post(f"{API_URL}/items").mock(return_value=httpx.Response(201, json={"id": 7}))
        endpoint = Endpoint(
            url=API_URL,
            path="items",
            method=HTTPMethod.POST,
            task=RequestWithParametersAndHeaders(
                body_params={"name": "widget"},
                encoding=HTTPParametersEncoding.JSON,
                headers={"Authorization": "Bearer token"},
            ),
        )

        result = self.fetch(client, endpoint)

        assert json.loads(result.unwrap()) == {"id": 7}
        request = route.calls.last.request
        assert json.loads(request.content) == {"name": "widget"}
        assert request.headers["authorization"] == "Bearer token"
        assert request.headers["content-type"] == "application/json"

    @respx.mock
    def test_unauthorized(self, client: HTTPClient) -> None:
        respx.delete(f"{API_URL}/items/1").mock(return_value=httpx.Response(401, json={"error": "nope"}))

        result = self.fetch(client, Endpoint(url=API_URL, path="/items/1", method=HTTPMethod.DELETE))

        assert result.error is not None
        assert result.error.kind is HTTPClientErrorKind.AUTH_ERROR
        assert result.error.status == 401

    @respx.mock
    def test_no_content(self, client: HTTPClient) -> None:
        respx.put(f"{API_URL}/items/1").mock(return_value=httpx.Response(204))

        result = self.fetch(client, Endpoint(url=API_URL, path="/items/1", method=HTTPMethod.PUT))

        assert result.error is not None
        assert result.error.kind is HTTPClientErrorKind.EMPTY_DATA_ERROR

    @respx.mock
    def test_network_failure(self, client: HTTPClient) -> None:
        respx.get(f"{API_URL}/").mock(side_effect=httpx.ConnectTimeout)

        result = self.fetch(client, Endpoint(url=API_URL, path="/"))

        assert result.error is not None
        assert result.error.kind is HTTPClientErrorKind.CONNECTION_ERROR
        assert isinstance(result.error.__cause__, httpx.ConnectTimeout)
