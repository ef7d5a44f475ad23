from __future__ import annotations

from typing import List

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from agent.core.memory import ConversationBuffer
from app.main import app, get_buffer, get_llm_provider


class RecordingLLM:
    """Stand-in chat model that records prompts and replies from a script."""

    def __init__(self, replies: List[str] | None = None, error: Exception | None = None) -> None:
        self.replies = list(replies or ["hello there"])
        self.error = error
        self.prompts: List[str] = []

    def invoke(self, prompt: str) -> AIMessage:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        return AIMessage(content=reply)


@pytest.fixture
def buffer() -> ConversationBuffer:
    return ConversationBuffer()


@pytest.fixture
def fake_llm() -> RecordingLLM:
    return RecordingLLM()


@pytest.fixture
def client(buffer: ConversationBuffer, fake_llm: RecordingLLM):
    app.dependency_overrides[get_buffer] = lambda: buffer
    app.dependency_overrides[get_llm_provider] = lambda: (lambda: fake_llm)
    yield TestClient(app)
    app.dependency_overrides.clear()
