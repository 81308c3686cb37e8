"""
FastAPI server for the Mindful Chat service.

This module exposes a chat session over HTTP: chat turns, the mood history
(with Server-Sent Events streaming), the journal, preferences and the API
key. One session is served per application instance.
"""

import asyncio
import json
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from .config import AppConfig, configure_logging
from .crisis import CRISIS_RESOURCES, CrisisResources
from .models import (
    Emotion,
    JournalEntry,
    Message,
    MoodEntry,
    Notification,
    Personality,
    Settings,
)
from .mood import MoodSummary, summarize
from .session import ChatSession, TurnResult


# API Request/Response Schemas
class ChatRequest(BaseModel):
    """Payload for chat requests."""

    message: str = Field(..., description="The user's message")


class ChatResponse(BaseModel):
    turn: TurnResult | None = Field(..., description="The turn, None for blank input")
    show_crisis_resources: bool
    notifications: list[Notification]


class MoodResponse(BaseModel):
    """Response model for mood endpoints."""

    mood: MoodEntry | None = Field(..., description="The most recent mood")


class ScanResponse(BaseModel):
    emotion: Emotion
    turn_sent: bool = Field(..., description="Whether an automatic message was sent")
    notifications: list[Notification]


class JournalRequest(BaseModel):
    content: str
    emotion: Emotion | None = Field(
        None, description="Defaults to the current mood"
    )


class PersonalityUpdate(BaseModel):
    personality: Personality


class CredentialUpdate(BaseModel):
    api_key: str = Field(..., description="The new generative API key")


class CredentialResponse(BaseModel):
    valid: bool


def create_app(session: ChatSession, http: httpx.AsyncClient | None = None) -> FastAPI:
    """
    Create a FastAPI application serving the given chat session.

    Args:
        session: The ChatSession instance to serve
        http: HTTP client used by the session, closed on shutdown if given

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for FastAPI application."""
        # Startup
        await session.startup()
        yield
        # Shutdown
        session.face.disable()
        if http is not None:
            await http.aclose()

    app = FastAPI(
        title="Mindful Chat",
        description="An emotion-aware supportive chat service",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "mindful-chat"}

    @app.post("/chat")
    async def chat(request: ChatRequest) -> ChatResponse:
        """
        Run one chat turn.

        Remote failures never fail this endpoint; they show up as fallback
        results and notifications.
        """
        turn = await session.send_message(request.message)
        return ChatResponse(
            turn=turn,
            show_crisis_resources=session.show_crisis_resources,
            notifications=session.drain_notifications(),
        )

    @app.get("/messages")
    async def messages() -> list[Message]:
        return session.store.messages()

    @app.get("/mood")
    async def get_mood() -> MoodResponse:
        """
        Get the most recent mood.

        Returns:
            The latest mood entry, or None before the first detection
        """
        return MoodResponse(mood=await session.store.current_mood())

    @app.get("/mood/summary")
    async def mood_summary() -> MoodSummary:
        return summarize(session.store.mood_history())

    @app.get("/mood/stream")
    async def stream_mood() -> StreamingResponse:
        """
        Stream mood updates via Server-Sent Events.

        The current mood is sent immediately upon connection, followed by
        every newly detected mood.

        Returns:
            StreamingResponse with text/event-stream content type
        """

        async def event_generator() -> AsyncGenerator[str, None]:
            """Generate SSE events for mood updates."""
            try:
                async with session.store.stream() as mood_stream:
                    async for entry in mood_stream:
                        data = entry.model_dump_json()
                        yield f"data: {data}\n\n"
            except asyncio.CancelledError:
                # Client disconnected
                pass
            except Exception as e:
                # Send error event and close
                error_data = json.dumps({"error": str(e)})
                yield f"event: error\ndata: {error_data}\n\n"

        return StreamingResponse(
            event_generator(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Headers": "*",
            },
        )

    @app.post("/face/scan")
    async def face_scan() -> ScanResponse:
        if not session.emotion_detection_enabled:
            session.toggle_emotion_detection()
        emotion, turn = await session.scan_face()
        return ScanResponse(
            emotion=emotion,
            turn_sent=turn is not None,
            notifications=session.drain_notifications(),
        )

    @app.get("/journal")
    async def journal() -> list[JournalEntry]:
        return session.store.journal()

    @app.post("/journal")
    async def add_journal_entry(request: JournalRequest) -> JournalEntry:
        emotion = request.emotion
        if emotion is None:
            current = await session.store.current_mood()
            emotion = current.emotion if current else Emotion.NEUTRAL
        return session.add_journal_entry(request.content, emotion)

    @app.put("/journal/{index}")
    async def update_journal_entry(index: int, request: JournalRequest) -> JournalEntry:
        try:
            return session.store.update_journal_entry(index, request.content)
        except IndexError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @app.get("/settings")
    async def get_settings() -> Settings:
        return session.settings

    @app.put("/settings")
    async def update_settings(settings: Settings) -> Settings:
        return session.update_settings(settings)

    @app.put("/personality")
    async def set_personality(update: PersonalityUpdate) -> PersonalityUpdate:
        session.set_personality(update.personality)
        return PersonalityUpdate(personality=session.personality)

    @app.put("/credential")
    async def update_credential(update: CredentialUpdate) -> CredentialResponse:
        return CredentialResponse(valid=await session.update_credential(update.api_key))

    @app.get("/crisis-resources")
    async def crisis_resources() -> CrisisResources:
        return CRISIS_RESOURCES

    return app


def build_app(config: AppConfig | None = None) -> FastAPI:
    """Create the application from environment configuration."""
    config = config or AppConfig.from_env()
    http = httpx.AsyncClient()
    return create_app(ChatSession.from_config(config, http), http=http)


def main() -> None:
    """Main entry point for the server."""
    import uvicorn

    config = AppConfig.from_env()
    configure_logging(config.log_level)
    uvicorn.run(
        "mindful_chat.server:build_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
