from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from langchain_core.language_models import BaseChatModel
import logging
from pydantic import BaseModel, Field
import uvicorn

from agent.agent import EmptyMessageError, RelayError, build_llm, relay_message
from agent.core.memory import ConversationBuffer
from config.settings import get_settings


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("gemini_relay")

STATIC_DIR = Path(__file__).parent / "static"

app = FastAPI(title="Gemini Relay Chat", version="1.0.0")

# CORS: allow local frontend during development
settings = get_settings()
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Shared by every caller for the lifetime of the process.
conversation = ConversationBuffer(max_entries=settings.max_history)


class ChatRequest(BaseModel):
    message: Optional[str] = Field(None, description="User's latest message")


def get_buffer() -> ConversationBuffer:
    return conversation


@lru_cache(maxsize=1)
def _shared_llm() -> BaseChatModel:
    return build_llm(get_settings())


def get_llm_provider() -> Callable[[], BaseChatModel]:
    return _shared_llm


@app.exception_handler(RelayError)
def handle_relay_error(request: Request, exc: RelayError) -> JSONResponse:
    if isinstance(exc, EmptyMessageError):
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to generate response", "details": str(exc)},
    )


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.get("/", include_in_schema=False)
def index() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/chat")
def chat(
    req: ChatRequest,
    buffer: ConversationBuffer = Depends(get_buffer),
    llm_provider: Callable[[], BaseChatModel] = Depends(get_llm_provider),
) -> Dict[str, Any]:
    if not req.message or not req.message.strip():
        raise EmptyMessageError("Message is required")

    try:
        settings = get_settings()
        logger.info(
            "Config: model=%s key_set=%s",
            settings.gemini_model,
            bool(settings.google_api_key),
        )
        logger.info(
            "Incoming chat: message_len=%s history_entries=%s",
            len(req.message),
            len(buffer),
        )
        result = relay_message(buffer, req.message, llm_provider())
    except RelayError as e:
        logger.exception("Chat processing failed: %s", e)
        raise

    logger.info(
        "Model responded with %s chars; history_entries=%s",
        len(result.reply),
        len(buffer),
    )
    return {"reply": result.reply, "timestamp": result.timestamp}


@app.post("/clear")
def clear(buffer: ConversationBuffer = Depends(get_buffer)) -> Dict[str, str]:
    buffer.clear()
    logger.info("Conversation history cleared")
    return {"message": "Conversation history cleared"}


@app.get("/history")
def history(buffer: ConversationBuffer = Depends(get_buffer)) -> Dict[str, Any]:
    return {"history": [item.model_dump() for item in buffer.history()]}


def run() -> None:
    settings = get_settings()
    logger.info("Starting relay on %s:%s (model=%s)", settings.host, settings.port, settings.gemini_model)
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
