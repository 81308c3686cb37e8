"""
Tests for the SessionStore implementation.

These tests verify the conversation log, the mood history with its
streaming capabilities, and the journal.
"""

import asyncio

import pytest

from mindful_chat.models import Emotion, Message, Role
from mindful_chat.store import SessionStore


class TestSessionStore:
    """Test suite for SessionStore functionality."""

    def setup_method(self):
        """Set up a fresh SessionStore for each test."""
        self.store = SessionStore()

    async def test_initial_state(self):
        """Test that a new store starts empty."""
        assert await self.store.current_mood() is None
        assert self.store.messages() == []
        assert self.store.journal() == []

    def test_messages_are_append_only(self):
        first = self.store.append_message(Message(role=Role.USER, content="hi"))
        second = self.store.append_message(Message(role=Role.ASSISTANT, content="hello"))

        snapshot = self.store.messages()
        snapshot.clear()

        assert self.store.messages() == [first, second]

    async def test_record_and_read(self):
        """Test mood recording and retrieval."""
        entry = await self.store.record_mood(Emotion.HAPPY)

        assert entry.emotion is Emotion.HAPPY
        assert entry.timestamp is not None

        current = await self.store.current_mood()
        assert current == entry

        second = await self.store.record_mood(Emotion.SAD)
        assert (await self.store.current_mood()) == second
        assert [m.emotion for m in self.store.mood_history()] == [
            Emotion.HAPPY,
            Emotion.SAD,
        ]

    async def test_streaming(self):
        """Test that two consumers receive streaming mood updates."""
        consumer1_moods = []
        consumer2_moods = []

        async def consume(received):
            async with self.store.stream() as mood_stream:
                async for entry in mood_stream:
                    received.append(entry.emotion.value)
                    if len(received) >= 3:  # neutral + 2 updates
                        break

        task1 = asyncio.create_task(consume(consumer1_moods))
        task2 = asyncio.create_task(consume(consumer2_moods))

        # Let them set up
        await asyncio.sleep(0.01)

        await self.store.record_mood(Emotion.HAPPY)
        await asyncio.sleep(0.01)
        await self.store.record_mood(Emotion.SAD)

        try:
            await asyncio.wait_for(asyncio.gather(task1, task2), timeout=2.0)
        except TimeoutError:
            task1.cancel()
            task2.cancel()
            await asyncio.gather(task1, task2, return_exceptions=True)
            assert False, (
                f"Test timed out. Consumer1 got: {consumer1_moods}, "
                f"Consumer2 got: {consumer2_moods}"
            )

        assert consumer1_moods == ["neutral", "happy", "sad"]
        assert consumer2_moods == ["neutral", "happy", "sad"]

    async def test_stream_delivers_entries_recorded_back_to_back(self):
        received = []

        async def consume():
            async with self.store.stream() as mood_stream:
                async for entry in mood_stream:
                    received.append(entry.emotion)
                    if len(received) >= 3:
                        break

        await self.store.record_mood(Emotion.ANGRY)
        task = asyncio.create_task(consume())
        await asyncio.sleep(0.01)

        await self.store.record_mood(Emotion.ANXIOUS)
        await self.store.record_mood(Emotion.STRESSED)

        await asyncio.wait_for(task, timeout=2.0)
        assert received == [Emotion.ANGRY, Emotion.ANXIOUS, Emotion.STRESSED]

    def test_journal(self):
        entry = self.store.add_journal_entry("", Emotion.SAD)
        assert entry.content == ""

        updated = self.store.update_journal_entry(0, "Wrote it down")
        assert updated.content == "Wrote it down"
        assert updated.emotion is Emotion.SAD
        assert updated.timestamp == entry.timestamp
        assert self.store.journal() == [updated]

        with pytest.raises(IndexError):
            self.store.update_journal_entry(1, "missing")
