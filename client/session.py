from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from client.api import ChatClient
from client.builder import build_chat_request
from client.errors import ClientError
from client.models import Message
from client.store import ConversationStore


logger = logging.getLogger("thunder.client")


@dataclass
class SendResult:
    reply: Optional[str] = None
    notification: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reply is not None


class ChatSession:
    """Drives one user's sends against the store and the backend.

    A failed send never raises: the user's message stays in the in-memory
    history, nothing is saved, and the result carries the notification text.
    """

    def __init__(self, store: ConversationStore, api: ChatClient) -> None:
        self.store = store
        self.api = api
        self.busy = False

    def new_chat(self) -> str:
        return self.store.create_chat()

    def open_chat(self, chat_id: str) -> bool:
        return self.store.load_chat(chat_id)

    def change_theme(self, theme: str) -> str:
        self.store.set_theme(theme)
        return "Theme updated!"

    def send(self, text: str) -> SendResult:
        request = build_chat_request(text, self.store.history)
        if request is None:
            return SendResult()

        if self.store.current_chat_id is None:
            self.store.create_chat()
        self.store.append_message(Message(role="user", content=request["message"]))

        self.busy = True
        try:
            reply = self.api.send(request)
        except ClientError as exc:
            logger.warning("Send failed: %s", exc)
            return SendResult(notification=f"Error: {exc}")
        finally:
            self.busy = False

        self.store.append_message(Message(role="assistant", content=reply))
        try:
            self.store.save_active_chat()
        except OSError as exc:
            logger.warning("Saving chat %s failed: %s", self.store.current_chat_id, exc)
            return SendResult(reply=reply, notification=f"Error: {exc}")
        return SendResult(reply=reply)
