"""
Reply generation conditioned on personality, emotion and recent history.

Every failure ends in the static fallback table, so a reply is always
available even without network access or a valid API key.
"""

import logging
from collections.abc import Sequence

from .credentials import CredentialService
from .generative import failure_reason
from .models import Emotion, Message, Personality, Result, Role

logger = logging.getLogger(__name__)

CONTEXT_LIMIT = 10

PERSONALITY_PROMPTS: dict[Personality, str] = {
    Personality.SUPPORTIVE: (
        "You are a supportive friend who listens and provides emotional support. "
        "You're warm, empathetic, and non-judgmental. You validate feelings and "
        "offer gentle encouragement."
    ),
    Personality.THERAPIST: (
        "You are a professional therapist who helps people understand their "
        "thoughts and feelings. You use therapeutic techniques like cognitive "
        "reframing and mindfulness. You ask thoughtful questions and provide "
        "evidence-based guidance."
    ),
    Personality.COACH: (
        "You are a motivational coach who helps people achieve their goals. "
        "You're action-oriented, encouraging, and focused on solutions. You help "
        "break down problems into manageable steps and provide accountability."
    ),
}

EMOTION_GUIDANCE: dict[Emotion, str] = {
    Emotion.HAPPY: "Celebrate their positive feelings and help maintain this state.",
    Emotion.NEUTRAL: "Engage them in thoughtful conversation and explore their current situation.",
    Emotion.SAD: "Provide comfort and validate their feelings. Offer gentle perspective when appropriate.",
    Emotion.ANXIOUS: "Help them ground themselves and break down their worries. Suggest calming techniques.",
    Emotion.STRESSED: "Acknowledge their stress and help prioritize. Suggest stress management techniques.",
    Emotion.ANGRY: "Allow them to express feelings safely. Help identify the source of anger and constructive outlets.",
}

GUIDELINES = (
    "Keep responses concise (2-4 sentences) and conversational.",
    "Never identify yourself as an AI, model, or assistant. Respond as the personality type.",
    "Don't use phrases like \"I understand\" or \"I'm sorry to hear that\" too frequently.",
    "Avoid clinical language unless you're in therapist mode.",
    "Never suggest medical treatments or diagnose conditions.",
    "If the user mentions self-harm or suicide, provide crisis resources.",
)

FALLBACK_RESPONSES: dict[Personality, dict[Emotion, str]] = {
    Personality.SUPPORTIVE: {
        Emotion.HAPPY: "That's wonderful to hear! I'm glad things are going well for you. What's been bringing you joy lately?",
        Emotion.NEUTRAL: "I'm here to chat. How has your day been going so far?",
        Emotion.SAD: "I'm sorry you're feeling down. It's okay to feel this way, and I'm here to listen if you want to talk more about it.",
        Emotion.ANXIOUS: "It sounds like you're feeling anxious. Let's take a deep breath together. What's on your mind right now?",
        Emotion.STRESSED: "It seems like you're under a lot of pressure. What's one small thing we could focus on right now?",
        Emotion.ANGRY: "I can see you're upset. It's okay to feel angry sometimes. Would it help to talk about what happened?",
    },
    Personality.THERAPIST: {
        Emotion.HAPPY: "I notice you're in a positive state. What factors do you think contributed to this feeling?",
        Emotion.NEUTRAL: "How would you describe your emotional state right now? What thoughts are you having?",
        Emotion.SAD: "Depression and sadness are common human experiences. Can you identify what might be contributing to these feelings?",
        Emotion.ANXIOUS: "Anxiety often involves worrying about future events. What specific concerns are on your mind?",
        Emotion.STRESSED: "Stress is your body's response to demands. Let's identify what's causing this pressure and explore coping strategies.",
        Emotion.ANGRY: "Anger often masks other emotions. When you look beneath the anger, what other feelings might be present?",
    },
    Personality.COACH: {
        Emotion.HAPPY: "Great energy! Let's channel this positive momentum. What's one goal you'd like to make progress on today?",
        Emotion.NEUTRAL: "Let's set an intention for our conversation. What would you like to accomplish or work toward?",
        Emotion.SAD: "Even when motivation is low, small steps matter. What's one tiny action that might feel manageable right now?",
        Emotion.ANXIOUS: "Let's break down what's causing worry into smaller, actionable parts. What's the most immediate concern?",
        Emotion.STRESSED: "When we're overwhelmed, prioritization is key. What's the most important thing that needs your attention?",
        Emotion.ANGRY: "That energy can be redirected productively. Once you've processed this feeling, what constructive action could you take?",
    },
}


def fallback_response(personality: Personality, emotion: Emotion) -> str:
    return FALLBACK_RESPONSES[Personality(personality)][Emotion(emotion)]


def build_context(history: Sequence[Message], limit: int = CONTEXT_LIMIT) -> str:
    """Render the most recent messages as ``User:``/``Assistant:`` lines."""
    lines = []
    for message in list(history)[-limit:]:
        if message.role is Role.USER:
            lines.append(f"User: {message.translated or message.content}")
        else:
            lines.append(f"Assistant: {message.content}")
    return "\n".join(lines)


def build_directive(
    personality: Personality, emotion: Emotion, history: Sequence[Message]
) -> str:
    """Compose the system directive for a reply."""
    emotion = Emotion(emotion)
    guidelines = "\n".join(
        f"- {line}" for line in (EMOTION_GUIDANCE[emotion], *GUIDELINES)
    )
    return (
        f"{PERSONALITY_PROMPTS[Personality(personality)]}\n"
        f"The user's current emotional state appears to be: {emotion.value}.\n\n"
        f"Guidelines:\n{guidelines}\n\n"
        f"Recent conversation:\n{build_context(history)}"
    )


class ResponseGenerator:
    def __init__(self, credentials: CredentialService) -> None:
        self._credentials = credentials

    async def respond(
        self,
        message: str,
        personality: Personality,
        emotion: Emotion,
        history: Sequence[Message],
        offline: bool = False,
    ) -> Result[str]:
        """
        Produce a reply to the user's message.

        Args:
            message: The current user message (translated if applicable)
            personality: Persona to answer as
            emotion: Emotion detected for this turn
            history: Conversation log before this turn
            offline: Answer from the fallback table without any remote call

        Returns:
            A non-empty reply and the path that produced it
        """
        fallback = fallback_response(personality, emotion)
        if offline:
            return Result.fallback(fallback, "offline")

        try:
            client = await self._credentials.client()
            if client is None:
                return Result.fallback(fallback, "credential-invalid")

            text = await client.generate(
                message, system=build_directive(personality, emotion, history)
            )
        except Exception as e:
            logger.warning("Error in AI response generation, using fallback: %s", e)
            return Result.fallback(fallback, failure_reason(e))

        if not text.strip():
            logger.warning("AI response was empty, using fallback")
            return Result.fallback(fallback, "malformed-remote-response")
        return Result.success(text)
