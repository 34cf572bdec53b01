from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from client.errors import NetworkError, ServerError


class ChatClient:
    """Thin synchronous client for the Thunder GPT backend."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 90.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "ChatClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def send(self, request: Dict[str, Any]) -> str:
        """POST a built chat request and return the assistant's reply text."""
        try:
            response = self._client.post("/api/chat", json=request)
        except httpx.TransportError as exc:
            raise NetworkError(f"Failed to reach the server: {exc}") from exc

        if not response.is_success:
            try:
                error = response.json().get("error")
            except (ValueError, AttributeError):
                error = None
            raise ServerError(error or "Failed to get response", response.status_code)

        try:
            return response.json()["response"]
        except (ValueError, KeyError, TypeError) as exc:
            raise ServerError("Malformed response from server", response.status_code) from exc

    def health(self) -> Dict[str, Any]:
        try:
            response = self._client.get("/health")
            response.raise_for_status()
        except httpx.TransportError as exc:
            raise NetworkError(f"Failed to reach the server: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise ServerError("Health check failed", exc.response.status_code) from exc
        return response.json()
