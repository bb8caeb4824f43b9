"""Request parameter encoders.

Two encoders attach parameters to a :class:`~httpmodule.request.HTTPRequestDraft`:
the JSON encoder writes the request body and the URL encoder writes the query
string. :class:`HTTPParametersEncoding` picks which of them run for a request.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Protocol

import httpx

from httpmodule import codec
from httpmodule.exceptions import EncodeFailureError, MissingURLError
from httpmodule.request import HTTPRequestDraft

logger = logging.getLogger(__name__)

HTTPParameters = dict[str, Any]

FORM_URLENCODED = "application/x-www-form-urlencoded"
APPLICATION_JSON = "application/json"


class HTTPParametersEncoder(Protocol):
    """Protocol for objects that attach parameters to a request draft."""

    @staticmethod
    def encode(request: HTTPRequestDraft, params: HTTPParameters) -> None: ...


class HTTPParametersJSONEncoder:
    """Serialize parameters as a JSON object into the request body."""

    @staticmethod
    def encode(request: HTTPRequestDraft, params: HTTPParameters) -> None:
        """Replace the body of ``request`` with the JSON form of ``params``.

        Raises:
            EncodeFailureError: If ``params`` holds a value JSON cannot represent.
                The body is left untouched in that case.
        """
        if not codec.is_valid_json_object(params):
            raise EncodeFailureError()
        try:
            serialized = codec.serialize(params)
        except (TypeError, ValueError) as exc:
            raise EncodeFailureError() from exc
        request.body = serialized


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


class HTTPParametersURLEncoder:
    """Replace the query string of the request URL with the given parameters."""

    @staticmethod
    def encode(request: HTTPRequestDraft, params: HTTPParameters) -> None:
        """Write one query item per parameter into the URL of ``request``.

        Existing query items are discarded. Values are stringified; lists and
        mappings are not expanded.

        Raises:
            MissingURLError: If the draft has no URL or it cannot be parsed.
        """
        if request.url is None or not str(request.url):
            raise MissingURLError()
        if not params:
            return
        try:
            url = httpx.URL(request.url)
            request.url = url.copy_with(params={key: _stringify(value) for key, value in params.items()})
        except httpx.InvalidURL as exc:
            raise MissingURLError() from exc


class HTTPParametersEncoding(str, Enum):
    """Which encoder(s) attach the parameters of a request."""

    URL = "url"
    JSON = "json"
    BOTH = "both"

    def encode(
        self,
        request: HTTPRequestDraft,
        body_params: HTTPParameters | None = None,
        url_params: HTTPParameters | None = None,
    ) -> None:
        """Apply the encoder(s) selected by this mode to ``request``.

        ``URL`` and ``JSON`` also set a default ``Content-Type`` when the draft
        carries none. ``BOTH`` never touches ``Content-Type``.

        Raises:
            HTTPParametersEncoderError: The first encoder failure; later steps
                are skipped.
        """
        if self is HTTPParametersEncoding.URL:
            if url_params is None:
                return
            HTTPParametersURLEncoder.encode(request, url_params)
            request.set_default_header("Content-Type", FORM_URLENCODED)

        elif self is HTTPParametersEncoding.JSON:
            if body_params is None:
                return
            HTTPParametersJSONEncoder.encode(request, body_params)
            request.set_default_header("Content-Type", APPLICATION_JSON)

        else:
            if body_params is not None:
                HTTPParametersJSONEncoder.encode(request, body_params)
            if url_params is not None:
                HTTPParametersURLEncoder.encode(request, url_params)

        logger.debug("Encoded %s parameters for %s %s", self.value, request.method, request.url)


__all__ = [
    "APPLICATION_JSON",
    "FORM_URLENCODED",
    "HTTPParameters",
    "HTTPParametersEncoder",
    "HTTPParametersEncoding",
    "HTTPParametersJSONEncoder",
    "HTTPParametersURLEncoder",
]
