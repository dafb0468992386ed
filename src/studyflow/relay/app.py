# src/studyflow/relay/app.py

"""FastAPI application exposing the chat relay."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Literal

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from ..logging_setup import setup_logging
from .service import ChatRelay

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


class HistoryItem(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str
    history: list[HistoryItem] = Field(default_factory=list)


class ChatResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


def create_app(settings: Settings | None = None, relay: ChatRelay | None = None) -> FastAPI:
    settings = settings or get_settings()
    relay = relay or ChatRelay(settings)

    app = FastAPI(
        title="StudyFlow chat relay",
        description="Forwards study-assistant chat turns to one configured LLM provider",
        version=VERSION,
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected chat request: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "StudyFlow chat relay",
            "version": VERSION,
            "endpoints": {
                "chat": "/api/chat",
                "status": "/status",
            },
        }

    @app.get("/status")
    async def status():
        """Server status endpoint."""
        return {
            "status": "running",
            "version": VERSION,
            "timestamp": datetime.now(UTC).isoformat(),
            "provider": relay.configured_provider(),
        }

    @app.post(
        "/api/chat",
        response_model=ChatResponse,
        responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    )
    async def chat_endpoint(payload: ChatRequest) -> JSONResponse:
        """
        Relay one chat turn.

        Success and missing-configuration both answer 200 with {"message"};
        failures answer non-2xx with {"error"}.
        """
        history = [h.model_dump() for h in payload.history]
        reply = await relay.handle(payload.message, history)

        if reply.error is not None:
            return JSONResponse(status_code=reply.status_code, content={"error": reply.error})
        return JSONResponse(status_code=reply.status_code, content={"message": reply.message})

    return app


def run() -> None:
    """Console entry point: serve the relay with uvicorn."""
    import uvicorn

    settings = get_settings()
    level_name = str(settings.log_level).upper()
    setup_logging(log_dir=settings.data_dir, console_level=getattr(logging, level_name, logging.INFO))

    logger.info("Starting chat relay on %s:%s", settings.relay_host, settings.relay_port)
    uvicorn.run(
        create_app(settings),
        host=settings.relay_host,
        port=settings.relay_port,
        log_level=level_name.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    run()
