"""Client-side conversation state.

``ConversationStore`` owns the chat collection, the active chat and its
in-memory history. Nothing reaches storage until ``save_active_chat``; after
a save the persisted history equals the in-memory one.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from client.models import Chat, Message
from client.storage import JsonFileStorage


logger = logging.getLogger("thunder.client")

CHATS_KEY = "thunder-chats"
THEME_KEY = "thunder-theme"
DEFAULT_THEME = "dark"
DEFAULT_TITLE = "New Chat"
TITLE_LENGTH = 30


def now_ms() -> int:
    return int(time.time() * 1000)


def derive_title(history: Sequence[Message]) -> str:
    # Plain character cut, no word-boundary handling.
    if not history:
        return DEFAULT_TITLE
    return history[0].content[:TITLE_LENGTH] or DEFAULT_TITLE


class ConversationStore:
    def __init__(self, storage: JsonFileStorage, clock: Optional[Callable[[], int]] = None) -> None:
        self.storage = storage
        self.clock = clock or now_ms
        self.chats: Dict[str, Chat] = self._load_chats()
        self.current_chat_id: Optional[str] = None
        self.history: List[Message] = []

    def _load_chats(self) -> Dict[str, Chat]:
        raw = self.storage.get_item(CHATS_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
            return {chat_id: Chat.model_validate(item) for chat_id, item in data.items()}
        except (json.JSONDecodeError, AttributeError, ValidationError) as exc:
            logger.warning("Stored chat collection is unreadable, starting empty: %s", exc)
            return {}

    def _persist(self, chats: Dict[str, Chat]) -> None:
        payload = {chat_id: chat.model_dump() for chat_id, chat in chats.items()}
        self.storage.set_item(CHATS_KEY, json.dumps(payload))

    def _new_chat_id(self) -> str:
        candidate = self.clock()
        while str(candidate) in self.chats or str(candidate) == self.current_chat_id:
            candidate += 1
        return str(candidate)

    def create_chat(self) -> str:
        self.current_chat_id = self._new_chat_id()
        self.history = []
        return self.current_chat_id

    def append_message(self, message: Message) -> None:
        self.history.append(message)

    def save_active_chat(self) -> Optional[Chat]:
        if not self.current_chat_id:
            return None
        chat = Chat(
            id=self.current_chat_id,
            title=derive_title(self.history),
            history=list(self.history),
            timestamp=self.clock(),
        )
        # memory only follows a completed write
        chats = dict(self.chats)
        chats[chat.id] = chat
        self._persist(chats)
        self.chats = chats
        return chat

    def load_chat(self, chat_id: str) -> bool:
        chat = self.chats.get(chat_id)
        if chat is None:
            return False
        self.current_chat_id = chat_id
        self.history = list(chat.history)
        return True

    def list_chats(self) -> List[Chat]:
        return sorted(self.chats.values(), key=lambda chat: chat.timestamp, reverse=True)

    def get_theme(self) -> str:
        return self.storage.get_item(THEME_KEY) or DEFAULT_THEME

    def set_theme(self, theme: str) -> None:
        self.storage.set_item(THEME_KEY, theme)
