"""
Tests for reply generation and the static fallback table.
"""

from mindful_chat.capabilities import MemoryKeyValueStore
from mindful_chat.credentials import CredentialService
from mindful_chat.models import Emotion, Message, Outcome, Personality, Role
from mindful_chat.responder import (
    FALLBACK_RESPONSES,
    ResponseGenerator,
    build_context,
    build_directive,
    fallback_response,
)

COACH_STRESSED = (
    "When we're overwhelmed, prioritization is key. "
    "What's the most important thing that needs your attention?"
)


def test_fallback_table_is_complete():
    for personality in Personality:
        for emotion in Emotion:
            assert FALLBACK_RESPONSES[personality][emotion].strip()


def test_fallback_response_accepts_plain_strings():
    assert fallback_response("coach", "stressed") == COACH_STRESSED


def test_build_context_prefers_translation_and_limits_history():
    history = [Message(role=Role.USER, content=f"m{i}") for i in range(12)]
    history.append(Message(role=Role.USER, content="नमस्ते", translated="Hello"))
    history.append(Message(role=Role.ASSISTANT, content="Hi there"))

    context = build_context(history)
    lines = context.splitlines()

    assert len(lines) == 10
    assert lines[0] == "User: m4"
    assert lines[-2] == "User: Hello"
    assert lines[-1] == "Assistant: Hi there"


def test_build_directive_combines_prompts():
    history = [Message(role=Role.USER, content="I had a rough week")]
    directive = build_directive(Personality.THERAPIST, Emotion.ANXIOUS, history)

    assert directive.startswith("You are a professional therapist")
    assert "The user's current emotional state appears to be: anxious." in directive
    assert "- Help them ground themselves" in directive
    assert "- Never suggest medical treatments" in directive
    assert directive.endswith("Recent conversation:\nUser: I had a rough week")


class TestResponseGenerator:
    """Test suite for ResponseGenerator paths."""

    async def test_offline_returns_fallback_without_calls(self, credentials, remote):
        result = await ResponseGenerator(credentials).respond(
            "Too much to do", "coach", "stressed", [], offline=True
        )

        assert result.value == COACH_STRESSED
        assert result.outcome is Outcome.FALLBACK
        assert result.reason == "offline"
        assert remote.generate_calls == []

    async def test_remote_reply_is_returned_verbatim(self, credentials, remote):
        remote.answer_by_prompt({"Any tips?": "  Try a short walk.  "})
        history = [
            Message(role=Role.USER, content="I'm tired"),
            Message(role=Role.ASSISTANT, content="That sounds hard."),
        ]

        result = await ResponseGenerator(credentials).respond(
            "Any tips?", Personality.SUPPORTIVE, Emotion.SAD, history
        )

        assert result.outcome is Outcome.SUCCESS
        assert result.value == "  Try a short walk.  "
        system = remote.systems()[-1]
        assert system.startswith("You are a supportive friend")
        assert "User: I'm tired\nAssistant: That sounds hard." in system

    async def test_invalid_credential_uses_fallback(self, http, remote):
        credentials = CredentialService(MemoryKeyValueStore(), http)

        result = await ResponseGenerator(credentials).respond(
            "hi", Personality.THERAPIST, Emotion.NEUTRAL, []
        )

        assert result.value == FALLBACK_RESPONSES[Personality.THERAPIST][Emotion.NEUTRAL]
        assert result.reason == "credential-invalid"
        assert remote.generate_calls == []

    async def test_remote_error_uses_fallback(self, credentials, remote):
        remote.answer_by_prompt({"hello": 500})

        result = await ResponseGenerator(credentials).respond(
            "hello", Personality.COACH, Emotion.HAPPY, []
        )

        assert result.value == FALLBACK_RESPONSES[Personality.COACH][Emotion.HAPPY]
        assert result.reason == "transport-error"

    async def test_blank_remote_reply_uses_fallback(self, credentials, remote):
        remote.answer_by_prompt({"hello": "   "})

        result = await ResponseGenerator(credentials).respond(
            "hello", Personality.SUPPORTIVE, Emotion.ANGRY, []
        )

        assert result.value == FALLBACK_RESPONSES[Personality.SUPPORTIVE][Emotion.ANGRY]
        assert result.reason == "malformed-remote-response"
