from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from client.models import Message
from upstream.turns import to_upstream_turns


def build_chat_request(message: str, history: Sequence[Message]) -> Optional[Dict[str, Any]]:
    """Shape the request body for ``POST /api/chat``.

    ``history`` is the chat as it stood before ``message``; the new message
    travels only in the ``message`` field. Returns ``None`` for blank input.
    """
    text = (message or "").strip()
    if not text:
        return None
    return {
        "message": text,
        "history": to_upstream_turns([item.model_dump() for item in history]),
    }
