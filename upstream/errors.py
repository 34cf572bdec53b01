"""Error taxonomy shared by the proxy endpoint and the Gemini wrapper.

Every error knows the HTTP status it maps to and the JSON body the endpoint
returns for it, so the app layer only has to serialize.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

import httpx


class ChatError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(ChatError):
    """Missing or malformed input the caller can correct."""

    status_code = 400

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.details is not None:
            body["details"] = self.details
        return body


class NotFoundError(ChatError):
    status_code = 404

    def __init__(self, path: str) -> None:
        super().__init__("Endpoint not found")
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "path": self.path}


class UpstreamError(ChatError):
    """Uncategorized failure while talking to Gemini."""

    public_message = "An error occurred while processing your request"

    def __init__(self, details: str) -> None:
        super().__init__(self.public_message)
        self.details = details

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


class CredentialError(UpstreamError):
    public_message = (
        "Invalid or expired API key. Please check your Gemini API key in settings."
    )


class ConfigurationError(CredentialError):
    """Raised before any upstream call when the credential is missing or a placeholder."""


class RateLimitError(UpstreamError):
    public_message = "API quota exceeded. Please try again later."


class ConnectivityError(UpstreamError):
    public_message = "Network error. Please check your internet connection."


_STATUS_KINDS = {
    401: CredentialError,
    403: CredentialError,
    429: RateLimitError,
    502: ConnectivityError,
    503: ConnectivityError,
    504: ConnectivityError,
}

# Last resort when the provider gives us nothing but text.
_TEXT_KINDS = (
    ("api key", CredentialError),
    ("quota", RateLimitError),
    ("network", ConnectivityError),
)


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _status_code(exc: BaseException) -> Optional[int]:
    response = getattr(exc, "response", None)
    if isinstance(response, httpx.Response):
        return response.status_code
    for attr in ("code", "status_code"):
        value = getattr(exc, attr, None)
        # grpc exposes code() as a method; only plain integers are HTTP statuses
        if isinstance(value, int) and not isinstance(value, bool):
            return int(value)
    return None


def classify_upstream_error(exc: BaseException) -> UpstreamError:
    """Map an opaque provider failure onto the closed set of upstream errors."""
    if isinstance(exc, UpstreamError):
        return exc

    details = str(exc) or type(exc).__name__
    chain = list(_exception_chain(exc))

    for item in chain:
        if isinstance(item, (httpx.TransportError, ConnectionError, TimeoutError)):
            return ConnectivityError(details)
        kind = _STATUS_KINDS.get(_status_code(item))
        if kind is not None:
            return kind(details)

    text = " ".join(str(item) for item in chain).lower()
    for needle, kind in _TEXT_KINDS:
        if needle in text:
            return kind(details)
    return UpstreamError(details)
