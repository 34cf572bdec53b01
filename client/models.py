from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class Chat(BaseModel):
    id: str
    title: str
    history: List[Message] = Field(default_factory=list)
    timestamp: int = Field(..., description="Last update, epoch milliseconds")
