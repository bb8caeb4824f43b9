"""httpmodule: a small layer for describing and dispatching HTTP requests.

Describe endpoints, let a router encode their parameters, and dispatch them
on a serial or parallel background lane.

Quick start::

    from httpmodule import (
        Endpoint,
        HTTPClient,
        HTTPClientQueue,
        HTTPMethod,
        HTTPParametersEncoding,
        HTTPRouter,
        RequestWithParameters,
    )

    search = Endpoint(
        url="https://api.example.com",
        path="/search",
        method=HTTPMethod.GET,
        task=RequestWithParameters(encoding=HTTPParametersEncoding.URL, url_params={"q": "python"}),
    )

    with HTTPClient("com.example.api", HTTPRouter()) as client:
        client.fetch_sync(search, HTTPClientQueue.SERIAL, lambda result: print(result.unwrap()))
"""

from __future__ import annotations

from httpmodule._transport import HTTPDataTask, HTTPRouterCompletion, HTTPTransport
from httpmodule.client import (
    HTTPClient,
    HTTPClientCompletion,
    HTTPClientProtocol,
    HTTPClientQueue,
    HTTPClientResult,
    check_status,
)
from httpmodule.config import HTTPSettings, load_http_settings
from httpmodule.endpoint import (
    Endpoint,
    HTTPEndpoint,
    HTTPHeaders,
    HTTPMethod,
    HTTPTask,
    PlainRequest,
    RequestWithParameters,
    RequestWithParametersAndHeaders,
)
from httpmodule.exceptions import (
    EncodeFailureError,
    HTTPClientError,
    HTTPClientErrorKind,
    HTTPModuleError,
    HTTPParametersEncoderError,
    HTTPRequestCancelledError,
    MissingURLError,
    UnsupportedMethodError,
)
from httpmodule.parameters import (
    HTTPParameters,
    HTTPParametersEncoder,
    HTTPParametersEncoding,
    HTTPParametersJSONEncoder,
    HTTPParametersURLEncoder,
)
from httpmodule.request import HTTPRequestDraft
from httpmodule.router import HTTPRouter, HTTPRouterProtocol
from httpmodule.session import HttpxTransport
from httpmodule.version import __version__

__all__ = [
    "EncodeFailureError",
    "Endpoint",
    "HTTPClient",
    "HTTPClientCompletion",
    "HTTPClientError",
    "HTTPClientErrorKind",
    "HTTPClientProtocol",
    "HTTPClientQueue",
    "HTTPClientResult",
    "HTTPDataTask",
    "HTTPEndpoint",
    "HTTPHeaders",
    "HTTPMethod",
    "HTTPModuleError",
    "HTTPParameters",
    "HTTPParametersEncoder",
    "HTTPParametersEncoderError",
    "HTTPParametersEncoding",
    "HTTPParametersJSONEncoder",
    "HTTPParametersURLEncoder",
    "HTTPRequestCancelledError",
    "HTTPRequestDraft",
    "HTTPRouter",
    "HTTPRouterCompletion",
    "HTTPRouterProtocol",
    "HTTPSettings",
    "HTTPTask",
    "HTTPTransport",
    "HttpxTransport",
    "MissingURLError",
    "PlainRequest",
    "RequestWithParameters",
    "RequestWithParametersAndHeaders",
    "UnsupportedMethodError",
    "__version__",
    "check_status",
    "load_http_settings",
]
