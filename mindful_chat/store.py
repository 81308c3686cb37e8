"""
Session storage implementation for the Mindful Chat service.

This module provides an in-memory store for one chat session: the ordered
conversation log, the mood history (with real-time streaming to multiple
subscribers) and the journal. Nothing is persisted between sessions.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from .models import Emotion, JournalEntry, Message, MoodEntry


class SessionStore:
    """
    In-memory session storage with real-time mood streaming.

    The conversation log is append-only. Mood subscribers are woken through
    a condition variable instead of per-subscriber queues.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._moods: list[MoodEntry] = []
        self._journal: list[JournalEntry] = []
        self._condition = asyncio.Condition()

    # MARK: - Conversation

    def append_message(self, message: Message) -> Message:
        self._messages.append(message)
        return message

    def messages(self) -> list[Message]:
        return list(self._messages)

    # MARK: - Mood

    async def record_mood(self, emotion: Emotion) -> MoodEntry:
        """
        Append a mood entry and notify all subscribers.

        Args:
            emotion: The detected emotion

        Returns:
            The recorded MoodEntry with timestamp
        """
        async with self._condition:
            entry = MoodEntry(emotion=emotion)
            self._moods.append(entry)

            # Notify all waiting subscribers
            self._condition.notify_all()

            return entry

    async def current_mood(self) -> MoodEntry | None:
        async with self._condition:
            return self._moods[-1] if self._moods else None

    def mood_history(self) -> list[MoodEntry]:
        return list(self._moods)

    @asynccontextmanager
    async def stream(self) -> AsyncGenerator[AsyncGenerator[MoodEntry, None], None]:
        """
        Stream mood updates to a subscriber.

        This context manager yields an async generator that first produces the
        current mood (neutral if nothing was recorded yet) and then every new
        entry as it is recorded.

        Yields:
            An async generator of MoodEntry objects
        """

        async def mood_generator() -> AsyncGenerator[MoodEntry, None]:
            async with self._condition:
                last_seen = len(self._moods)
                current = (
                    self._moods[-1] if self._moods else MoodEntry(emotion=Emotion.NEUTRAL)
                )
            yield current

            try:
                while True:
                    async with self._condition:
                        await self._condition.wait_for(
                            lambda: len(self._moods) > last_seen
                        )
                        new_entries = self._moods[last_seen:]
                        last_seen = len(self._moods)

                    for entry in new_entries:
                        yield entry

            except (asyncio.CancelledError, GeneratorExit):
                # Client disconnected or generator closed, clean exit
                return

        yield mood_generator()

    # MARK: - Journal

    def add_journal_entry(self, content: str, emotion: Emotion) -> JournalEntry:
        entry = JournalEntry(content=content, emotion=emotion)
        self._journal.append(entry)
        return entry

    def update_journal_entry(self, index: int, content: str) -> JournalEntry:
        """
        Replace the text of a journal entry.

        Raises:
            IndexError: If no entry exists at ``index``
        """
        if not 0 <= index < len(self._journal):
            raise IndexError(f"No journal entry at index {index}")
        entry = self._journal[index].model_copy(update={"content": content})
        self._journal[index] = entry
        return entry

    def journal(self) -> list[JournalEntry]:
        return list(self._journal)
