"""Pure projections of client state into what the front end shows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from client.models import Message
from client.store import ConversationStore


QUICK_ACTIONS = (
    "Explain quantum computing",
    "Write a poem about nature",
    "Help with JavaScript",
    "Explain artificial intelligence",
)


@dataclass(frozen=True)
class ChatListItem:
    id: str
    title: str
    active: bool


@dataclass(frozen=True)
class MessageRow:
    kind: str  # "user" or "ai"
    content: str


def chat_list(store: ConversationStore) -> List[ChatListItem]:
    return [
        ChatListItem(id=chat.id, title=chat.title, active=chat.id == store.current_chat_id)
        for chat in store.list_chats()
    ]


def message_rows(history: Sequence[Message]) -> List[MessageRow]:
    return [
        MessageRow(kind="user" if message.role == "user" else "ai", content=message.content)
        for message in history
    ]


def welcome(quick_actions: Sequence[str] = QUICK_ACTIONS) -> str:
    lines = [
        "Welcome to Thunder GPT",
        "Start a conversation by asking me anything",
        "",
    ]
    lines.extend(f"  [{idx}] {action}" for idx, action in enumerate(quick_actions, start=1))
    return "\n".join(lines)


def format_transcript(rows: Sequence[MessageRow]) -> str:
    if not rows:
        return welcome()
    labels = {"user": "You", "ai": "Thunder"}
    return "\n\n".join(f"{labels[row.kind]}: {row.content}" for row in rows)


def format_chat_list(items: Sequence[ChatListItem]) -> str:
    if not items:
        return "No saved chats yet."
    return "\n".join(
        f"{'*' if item.active else ' '} {item.id}  {item.title}" for item in items
    )
