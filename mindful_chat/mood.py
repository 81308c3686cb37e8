"""
Mood history summaries: current mood, a seven-day chart and recent changes.
"""

from collections.abc import Sequence
from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field

from .models import Emotion, MoodEntry

EMOTION_VALUES: dict[Emotion, int] = {
    Emotion.HAPPY: 5,
    Emotion.NEUTRAL: 3,
    Emotion.SAD: 1,
    Emotion.ANXIOUS: 2,
    Emotion.STRESSED: 2,
    Emotion.ANGRY: 1,
}

MOOD_EMOJIS: dict[Emotion, str] = {
    Emotion.HAPPY: "😊",
    Emotion.NEUTRAL: "😐",
    Emotion.SAD: "😢",
    Emotion.ANXIOUS: "😰",
    Emotion.STRESSED: "😓",
    Emotion.ANGRY: "😠",
}


class DayMood(BaseModel):
    date: str = Field(..., description="Day label, e.g. 'Mar 04'")
    mood: float | None = Field(None, description="Average mood value for the day")


class MoodSummary(BaseModel):
    current: Emotion
    emoji: str
    last_updated: float | None
    chart: list[DayMood]
    recent: list[MoodEntry]


def weekly_chart(entries: Sequence[MoodEntry], today: date) -> list[DayMood]:
    """Average mood value for each of the seven days ending ``today``."""
    days = [today - timedelta(days=6 - i) for i in range(7)]
    totals = {day: [0, 0] for day in days}
    for entry in entries:
        day = datetime.fromtimestamp(entry.timestamp).date()
        if day in totals:
            totals[day][0] += EMOTION_VALUES[entry.emotion]
            totals[day][1] += 1

    return [
        DayMood(
            date=day.strftime("%b %d"),
            mood=totals[day][0] / totals[day][1] if totals[day][1] else None,
        )
        for day in days
    ]


def mood_label(value: float | None) -> str:
    if value is None:
        return "No data"
    if value >= 4.5:
        return "Happy"
    if value >= 3.5:
        return "Good"
    if value >= 2.5:
        return "Neutral"
    if value >= 1.5:
        return "Low"
    return "Very Low"


def current_mood(entries: Sequence[MoodEntry]) -> Emotion:
    return entries[-1].emotion if entries else Emotion.NEUTRAL


def recent_changes(entries: Sequence[MoodEntry], count: int = 5) -> list[MoodEntry]:
    """The latest ``count`` entries, newest first."""
    return list(reversed(entries[-count:]))


def summarize(entries: Sequence[MoodEntry], today: date | None = None) -> MoodSummary:
    current = current_mood(entries)
    return MoodSummary(
        current=current,
        emoji=MOOD_EMOJIS[current],
        last_updated=entries[-1].timestamp if entries else None,
        chart=weekly_chart(entries, today or date.today()),
        recent=recent_changes(entries),
    )
