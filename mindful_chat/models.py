"""
Shared data models for the Mindful Chat service.

This module defines the core domain models used across multiple layers
of the application (chat session, store, CLI, API).
"""

import time
from enum import Enum
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Emotion(str, Enum):
    """The closed set of emotions the service recognises."""

    HAPPY = "happy"
    NEUTRAL = "neutral"
    SAD = "sad"
    ANXIOUS = "anxious"
    STRESSED = "stressed"
    ANGRY = "angry"


class Personality(str, Enum):
    """Persona controlling response tone and fallback text."""

    SUPPORTIVE = "supportive"
    THERAPIST = "therapist"
    COACH = "coach"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ValidationState(str, Enum):
    UNCHECKED = "unchecked"
    VALID = "valid"
    INVALID = "invalid"


class Outcome(str, Enum):
    SUCCESS = "success"
    FALLBACK = "fallback"


class Result(BaseModel, Generic[T]):
    """
    Value produced by a component together with the path that produced it.

    ``reason`` is only set for fallbacks and names the failure that caused
    the component to use its local path.
    """

    outcome: Outcome = Field(..., description="Which path produced the value")
    value: T = Field(..., description="The produced value")
    reason: str | None = Field(None, description="Why the fallback path was used")

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(outcome=Outcome.SUCCESS, value=value)

    @classmethod
    def fallback(cls, value: T, reason: str) -> "Result[T]":
        return cls(outcome=Outcome.FALLBACK, value=value, reason=reason)


class Message(BaseModel):
    """A single entry of the conversation log."""

    role: Role = Field(..., description="Who wrote the message")
    content: str = Field(..., description="The message text as written")
    timestamp: float = Field(
        default_factory=time.time, description="Unix timestamp of the message"
    )
    emotion: Emotion | None = Field(
        None, description="Emotion detected for the turn (assistant messages)"
    )
    translated: str | None = Field(
        None, description="English translation of a user message, if any"
    )


class MoodEntry(BaseModel):
    """Represents a detected mood at a point in time."""

    emotion: Emotion = Field(..., description="The detected emotion")
    timestamp: float = Field(
        default_factory=time.time, description="Unix timestamp of the detection"
    )


class JournalEntry(BaseModel):
    content: str = Field("", description="The journal text")
    emotion: Emotion = Field(..., description="Emotion the entry was written in")
    timestamp: float = Field(default_factory=time.time)


class Settings(BaseModel):
    """User preferences persisted in the key-value store."""

    auto_message_enabled: bool = Field(
        True, description="Send a message automatically after a face scan"
    )
    offline_mode: bool = Field(False, description="Skip every remote call")
    voice_language: Literal["en-US", "hi-IN"] = Field(
        "en-US", description="Language tag used for voice input"
    )


class Notification(BaseModel):
    """Advisory message shown to the user; never blocks a chat turn."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"
