from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from agent.core.memory import ConversationBuffer
from config.settings import Settings, get_settings


class RelayError(RuntimeError):
    """Base class for failures raised while relaying a chat message."""


class EmptyMessageError(RelayError):
    """Raised when the caller sends no message text."""


class ConfigurationError(RelayError):
    """Raised when the model client cannot be configured."""


class UpstreamError(RelayError):
    """Raised when the generative model call fails."""


@dataclass(frozen=True)
class RelayResult:
    reply: str
    timestamp: str


def build_llm(settings: Optional[Settings] = None) -> BaseChatModel:
    settings = settings or get_settings()
    if not settings.google_api_key:
        raise ConfigurationError(
            "GOOGLE_API_KEY not set. Please configure it in environment or .env"
        )

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.google_api_key,
        temperature=settings.temperature,
        top_p=settings.top_p,
    )


def message_text(message: Any) -> str:
    """Return the plain text of a model response.

    Gemini may return either a string or a list of content parts.
    """
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(part.get("text") or "")
    return "".join(parts)


def relay_message(buffer: ConversationBuffer, message: Optional[str], llm: BaseChatModel) -> RelayResult:
    if not message or not message.strip():
        raise EmptyMessageError("Message is required")

    buffer.add("user", message)
    prompt = buffer.flatten()
    try:
        response = llm.invoke(prompt)
    except Exception as exc:
        # Keep the user turn but hold the size cap.
        buffer.truncate()
        raise UpstreamError(str(exc)) from exc

    reply = message_text(response)
    timestamp = datetime.now(timezone.utc).isoformat()
    buffer.add("assistant", reply)
    buffer.truncate()
    return RelayResult(reply=reply, timestamp=timestamp)
