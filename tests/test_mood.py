"""
Tests for mood history summaries.
"""

from datetime import date, datetime

import pytest

from mindful_chat.models import Emotion, MoodEntry
from mindful_chat.mood import (
    current_mood,
    mood_label,
    recent_changes,
    summarize,
    weekly_chart,
)

TODAY = date(2026, 3, 10)


def entry(emotion: Emotion, day: date, hour: int = 12) -> MoodEntry:
    when = datetime(day.year, day.month, day.day, hour)
    return MoodEntry(emotion=emotion, timestamp=when.timestamp())


def test_weekly_chart_averages_each_day():
    entries = [
        entry(Emotion.HAPPY, date(2026, 3, 10), 9),
        entry(Emotion.SAD, date(2026, 3, 10), 18),
        entry(Emotion.NEUTRAL, date(2026, 3, 4)),
        entry(Emotion.ANGRY, date(2026, 3, 3)),  # outside the window
    ]

    chart = weekly_chart(entries, TODAY)

    assert [day.date for day in chart] == [
        "Mar 04", "Mar 05", "Mar 06", "Mar 07", "Mar 08", "Mar 09", "Mar 10",
    ]
    assert chart[0].mood == 3
    assert chart[-1].mood == 3  # (5 + 1) / 2
    assert all(day.mood is None for day in chart[1:-1])


@pytest.mark.parametrize(
    ("value", "label"),
    [
        (None, "No data"),
        (5, "Happy"),
        (4.5, "Happy"),
        (4, "Good"),
        (3, "Neutral"),
        (2, "Low"),
        (1, "Very Low"),
    ],
)
def test_mood_label(value, label):
    assert mood_label(value) == label


def test_current_mood_defaults_to_neutral():
    assert current_mood([]) is Emotion.NEUTRAL
    assert current_mood([entry(Emotion.ANXIOUS, TODAY)]) is Emotion.ANXIOUS


def test_recent_changes_newest_first():
    entries = [entry(emotion, TODAY, hour) for hour, emotion in enumerate(Emotion)]

    recent = recent_changes(entries)

    assert [e.emotion for e in recent] == [
        Emotion.ANGRY,
        Emotion.STRESSED,
        Emotion.ANXIOUS,
        Emotion.SAD,
        Emotion.NEUTRAL,
    ]


def test_summarize():
    entries = [entry(Emotion.STRESSED, TODAY)]

    summary = summarize(entries, today=TODAY)

    assert summary.current is Emotion.STRESSED
    assert summary.emoji == "😓"
    assert summary.last_updated == entries[0].timestamp
    assert summary.chart[-1].mood == 2
    assert summary.recent == entries

    empty = summarize([], today=TODAY)
    assert empty.current is Emotion.NEUTRAL
    assert empty.last_updated is None
