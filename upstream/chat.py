from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from config.settings import Settings, get_settings
from upstream.errors import ConfigurationError, UpstreamError, classify_upstream_error
from upstream.turns import to_lc_messages, to_upstream_turns


GENERATION_CONFIG: Dict[str, Any] = {
    "max_output_tokens": 2048,
    "temperature": 0.7,
    "top_p": 1.0,
    "top_k": 1,
}


def build_model(settings: Optional[Settings] = None) -> ChatGoogleGenerativeAI:
    settings = settings or get_settings()
    if not settings.credential_configured:
        raise ConfigurationError(
            "GEMINI_API_KEY is not configured. Set it in your .env file or environment variables."
        )

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.gemini_api_key,
        timeout=settings.upstream_timeout,
        # single attempt: a failed send is reported, never resubmitted
        max_retries=1,
        **GENERATION_CONFIG,
    )


def build_conversation(
    message: str, history: Optional[Sequence[Mapping[str, Any]]]
) -> List[BaseMessage]:
    """Seed a fresh conversation with the replayed history and the new turn last."""
    turns = to_upstream_turns(history)
    return to_lc_messages(turns) + [HumanMessage(content=message)]


def _reply_text(reply: BaseMessage) -> str:
    content = reply.content
    if isinstance(content, str):
        return content
    chunks = []
    for part in content:
        if isinstance(part, str):
            chunks.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            chunks.append(part.get("text") or "")
    return "".join(chunks)


def run_chat(
    message: str,
    history: Optional[Sequence[Mapping[str, Any]]] = None,
    settings: Optional[Settings] = None,
    llm: Optional[BaseChatModel] = None,
) -> str:
    """Send ``message`` as the next turn after ``history`` and return the reply text.

    Any failure, including a missing credential, surfaces as a classified
    ``UpstreamError`` subclass.
    """
    try:
        model = llm or build_model(settings)
        reply = model.invoke(build_conversation(message, history))
    except UpstreamError:
        raise
    except Exception as exc:
        raise classify_upstream_error(exc) from exc
    return _reply_text(reply)
