from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage


Turn = Dict[str, Any]


def upstream_role(role: Optional[str]) -> str:
    return "model" if role == "assistant" else "user"


def to_upstream_turn(item: Mapping[str, Any]) -> Turn:
    """Shape one stored message as a Gemini turn.

    Entries that already carry ``parts`` are turns built by the client; their
    ``model`` role is kept and every other role collapses to ``user``.
    """
    parts = item.get("parts")
    if parts is not None:
        role = "model" if item.get("role") == "model" else "user"
        return {
            "role": role,
            "parts": [{"text": (part or {}).get("text") or ""} for part in parts],
        }
    return {
        "role": upstream_role(item.get("role")),
        "parts": [{"text": item.get("content") or ""}],
    }


def to_upstream_turns(history: Optional[Sequence[Mapping[str, Any]]]) -> List[Turn]:
    # One turn per entry, in input order. No de-duplication and no length cap.
    return [to_upstream_turn(item) for item in history or []]


def turn_text(turn: Mapping[str, Any]) -> str:
    return "".join(part.get("text") or "" for part in turn.get("parts") or [])


def to_lc_messages(turns: Sequence[Mapping[str, Any]]) -> List[BaseMessage]:
    messages: List[BaseMessage] = []
    for turn in turns:
        if turn.get("role") == "model":
            messages.append(AIMessage(content=turn_text(turn)))
        else:
            messages.append(HumanMessage(content=turn_text(turn)))
    return messages
