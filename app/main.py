from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import get_settings
from upstream.chat import run_chat
from upstream.errors import ChatError, NotFoundError, UpstreamError, ValidationError


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("thunder")

APP_NAME = "Thunder GPT"
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    logger.info(
        "%s backend listening on http://localhost:%s (health: /health, info: /api/info)",
        APP_NAME,
        settings.port,
    )
    if settings.credential_configured:
        logger.info("Gemini API key loaded from environment, model=%s", settings.gemini_model)
    else:
        # /health keeps working; /api/chat answers with a credential error
        logger.warning("GEMINI_API_KEY is not configured; chat requests will fail")
    yield


app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class TurnPart(BaseModel):
    text: str = ""


class ChatTurn(BaseModel):
    role: str = Field(..., description="'user' or 'assistant' ('model' for pre-shaped turns)")
    content: Optional[str] = None
    parts: Optional[List[TurnPart]] = None


class ChatRequest(BaseModel):
    message: Optional[str] = Field(None, description="User's latest message")
    history: Optional[List[ChatTurn]] = Field(
        default_factory=list,
        description="Earlier turns of the active chat, oldest first (client-managed)",
    )


@app.exception_handler(ChatError)
async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError("Invalid request body", details=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        error = NotFoundError(request.url.path)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s: %s", request.url.path, exc)
    message = str(exc) if get_settings().is_development else "An error occurred"
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": message},
    )


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": f"{APP_NAME} backend is running!"}


@app.get("/api/info")
def info() -> Dict[str, Any]:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": "AI Chatbot powered by Google Gemini",
        "models": [get_settings().gemini_model],
        "features": ["Multi-turn conversation", "Context awareness", "Real-time responses"],
    }


@app.post("/api/chat")
def chat(req: Optional[ChatRequest] = None) -> Dict[str, Any]:
    if req is None or not req.message:
        raise ValidationError("Message is required")

    history = [turn.model_dump(exclude_none=True) for turn in (req.history or [])]
    logger.info(
        "Incoming chat: message_len=%s history_turns=%s",
        len(req.message),
        len(history),
    )
    try:
        reply = run_chat(req.message, history, settings=get_settings())
    except UpstreamError as exc:
        logger.warning("Upstream call failed (%s): %s", exc.kind, exc.details)
        raise

    logger.info("Model responded with %s chars", len(reply))
    return {"success": True, "response": reply, "message": req.message}


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
