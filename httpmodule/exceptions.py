"""Exception classes for httpmodule."""

from __future__ import annotations

from enum import Enum


class HTTPModuleError(Exception):
    """Base class for every error raised or reported by httpmodule.

    Attributes:
        code: Machine-readable error code (e.g. ``"MISSING_URL"``).
        message: Human-readable error description.
    """

    def __init__(self, message: str, *, code: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# -- Parameter encoding -----------------------------------------------------


class HTTPParametersEncoderError(HTTPModuleError):
    """Raised when request parameters cannot be attached to a draft."""


class MissingURLError(HTTPParametersEncoderError):
    """The draft has no usable URL to attach query parameters to."""

    def __init__(self, message: str = "Received empty or corrupted url") -> None:
        super().__init__(message, code="MISSING_URL")


class EncodeFailureError(HTTPParametersEncoderError):
    """The parameters are not representable in the target encoding."""

    def __init__(self, message: str = "Failed to encode the parameters") -> None:
        super().__init__(message, code="ENCODE_FAILURE")


class UnsupportedMethodError(HTTPModuleError):
    """The endpoint names an HTTP method the router does not dispatch."""

    def __init__(self, method: object) -> None:
        super().__init__(f"Unsupported HTTP method: {method!r}", code="UNSUPPORTED_METHOD")
        self.method = method


# -- Transport --------------------------------------------------------------


class HTTPRequestCancelledError(HTTPModuleError):
    """Delivered to a transport completion when its data task was cancelled."""

    def __init__(self, message: str = "Request was cancelled") -> None:
        super().__init__(message, code="CANCELLED")


# -- Client -----------------------------------------------------------------


class HTTPClientErrorKind(str, Enum):
    """Fixed taxonomy of failures a client completion can receive."""

    CONNECTION_ERROR = "CONNECTION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    REQUEST_ERROR = "REQUEST_ERROR"
    EMPTY_DATA_ERROR = "EMPTY_DATA_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    @property
    def description(self) -> str:
        return _CLIENT_ERROR_MESSAGES[self]


_CLIENT_ERROR_MESSAGES = {
    HTTPClientErrorKind.CONNECTION_ERROR: "Internet connection not found",
    HTTPClientErrorKind.AUTH_ERROR: "Authentication failed",
    HTTPClientErrorKind.REQUEST_ERROR: "Corrupted request",
    HTTPClientErrorKind.EMPTY_DATA_ERROR: "Data is empty",
    HTTPClientErrorKind.UNKNOWN_ERROR: "Unknown error",
}


class HTTPClientError(HTTPModuleError):
    """Failure reported through an :class:`~httpmodule.client.HTTPClient` completion.

    Attributes:
        kind: The :class:`HTTPClientErrorKind` bucket of the failure.
        status: HTTP status code of the response, when one was received.
    """

    def __init__(self, kind: HTTPClientErrorKind, *, status: int | None = None) -> None:
        super().__init__(kind.description, code=kind.value)
        self.kind = kind
        self.status = status

    def __repr__(self) -> str:
        return f"HTTPClientError(kind={self.kind.value!r}, status={self.status})"

    def __str__(self) -> str:
        if self.status is None:
            return f"[{self.code}] {self.message}"
        return f"[{self.code}] {self.message} (HTTP {self.status})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HTTPClientError):
            return NotImplemented
        return self.kind == other.kind and self.status == other.status

    def __hash__(self) -> int:
        return hash((self.kind, self.status))
