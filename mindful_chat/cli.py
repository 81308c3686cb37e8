"""
Command-line interface tools for the Mindful Chat service.
"""

import asyncio
import json
from collections.abc import Coroutine
from datetime import datetime
from typing import Any

import httpx
import typer
from httpx_sse import ServerSentEvent, aconnect_sse

from .config import configure_logging
from .models import Message, MoodEntry, Notification, Personality
from .mood import MOOD_EMOJIS, MoodSummary, mood_label

DEFAULT_BASE_URL = "http://localhost:8000"

app = typer.Typer(help="Mindful Chat CLI tools")


# MARK: - CLI Entry Points


def cli_chat() -> None:
    """Entry point for chat-send CLI command."""
    typer.run(chat)


def cli_get_mood() -> None:
    """Entry point for mood-get CLI command."""
    typer.run(mood)


def cli_stream() -> None:
    """Entry point for mood-stream CLI command."""
    typer.run(stream)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging("DEBUG" if verbose else "WARNING")


# MARK: - Commands


@app.command()
def chat(
    message: str = typer.Argument(..., help="The message to send"),
    personality: Personality | None = typer.Option(
        None, "--personality", "-p", help="Switch personality before sending"
    ),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Mindful Chat service"
    ),
) -> None:
    """Send a message and print the reply."""

    async def _chat() -> None:
        async with httpx.AsyncClient(timeout=None) as client:
            if personality is not None:
                response = await client.put(
                    f"{base_url}/personality",
                    json={"personality": personality.value},
                )
                response.raise_for_status()

            response = await client.post(f"{base_url}/chat", json={"message": message})
            response.raise_for_status()
            result = response.json()

            turn = result["turn"]
            if turn is None:
                print("Nothing to send")
                return

            reply = Message.model_validate(turn["reply"])
            if reply.emotion is not None:
                print(f"[{reply.emotion.value}] {reply.content}")
            else:
                print(reply.content)

            if result["show_crisis_resources"]:
                await _print_crisis_resources(client, base_url)
            _print_notifications(result["notifications"])

    _run_with_error_handling(_chat(), base_url)


@app.command()
def mood(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Mindful Chat service"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """Show the current mood and the last seven days."""

    async def _mood() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.get(f"{base_url}/mood/summary")
            response.raise_for_status()
            result = response.json()

            if json_output:
                print(json.dumps(result, indent=2))
                return

            summary = MoodSummary.model_validate(result)
            print(f"Current mood: {summary.current.value} {summary.emoji}")
            for day in summary.chart:
                print(f"  {day.date}: {mood_label(day.mood)}")

    _run_with_error_handling(_mood(), base_url)


@app.command()
def stream(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Mindful Chat service"
    ),
) -> None:
    """Stream mood updates in real-time."""

    async def _stream() -> None:
        print(f"Streaming from {base_url}/mood/stream... (Ctrl+C to stop)")

        async with httpx.AsyncClient(timeout=None) as client:
            async with aconnect_sse(
                client, "GET", f"{base_url}/mood/stream"
            ) as event_source:
                async for sse in event_source.aiter_sse():
                    _handle_sse_event(sse)

    _run_with_error_handling(_stream(), base_url)


@app.command()
def journal(
    content: str | None = typer.Argument(None, help="Add an entry with this text"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Mindful Chat service"
    ),
) -> None:
    """List journal entries, or add one."""

    async def _journal() -> None:
        async with httpx.AsyncClient() as client:
            if content is not None:
                response = await client.post(
                    f"{base_url}/journal", json={"content": content}
                )
                response.raise_for_status()
                print("Journal entry added")
                return

            response = await client.get(f"{base_url}/journal")
            response.raise_for_status()
            for index, entry in enumerate(response.json()):
                emoji = MOOD_EMOJIS.get(entry["emotion"], "")
                when = datetime.fromtimestamp(entry["timestamp"])
                print(f"{index}. {emoji} {when:%b %d, %Y %H:%M} {entry['content']}")

    _run_with_error_handling(_journal(), base_url)


@app.command()
def set_key(
    api_key: str = typer.Argument(..., help="The generative API key"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Mindful Chat service"
    ),
) -> None:
    """Update the API key used for remote generation."""

    async def _set_key() -> None:
        async with httpx.AsyncClient(timeout=None) as client:
            response = await client.put(
                f"{base_url}/credential", json={"api_key": api_key}
            )
            response.raise_for_status()
            if response.json()["valid"]:
                print("API key is valid")
            else:
                print("API key is invalid, using offline responses")

    _run_with_error_handling(_set_key(), base_url)


@app.command()
def settings(
    offline: bool | None = typer.Option(None, "--offline/--online"),
    auto_message: bool | None = typer.Option(None, "--auto-message/--no-auto-message"),
    voice_language: str | None = typer.Option(
        None, "--voice-language", help="en-US or hi-IN"
    ),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Mindful Chat service"
    ),
) -> None:
    """Show or change preferences."""

    async def _settings() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.get(f"{base_url}/settings")
            response.raise_for_status()
            current = response.json()

            updates = {
                "offline_mode": offline,
                "auto_message_enabled": auto_message,
                "voice_language": voice_language,
            }
            updates = {key: value for key, value in updates.items() if value is not None}
            if updates:
                response = await client.put(
                    f"{base_url}/settings", json={**current, **updates}
                )
                response.raise_for_status()
                current = response.json()

            print(json.dumps(current, indent=2))

    _run_with_error_handling(_settings(), base_url)


# MARK: - Private Helpers


def _format_mood_timestamp(entry: MoodEntry) -> str:
    """Format mood with its timestamp."""
    dt = datetime.fromtimestamp(entry.timestamp)
    timestamp = dt.strftime("%H:%M:%S")
    return f"{timestamp} > {MOOD_EMOJIS[entry.emotion]} {entry.emotion.value}"


def _print_notifications(raw: list[dict[str, Any]]) -> None:
    for item in raw:
        notification = Notification.model_validate(item)
        prefix = "!" if notification.variant == "destructive" else "*"
        print(f"{prefix} {notification.title}: {notification.description}")


async def _print_crisis_resources(client: httpx.AsyncClient, base_url: str) -> None:
    response = await client.get(f"{base_url}/crisis-resources")
    response.raise_for_status()
    resources = response.json()
    print(f"\n{resources['title']}: {resources['description']}")
    for resource in resources["hotlines"] + resources["online"]:
        print(f"  {resource['name']}: {resource['contact']}")
    print(resources["reminder"])


def _handle_sse_event(sse: ServerSentEvent) -> None:
    """Handle a single SSE event."""
    try:
        # Handle error events from server
        if sse.event == "error":
            error_data = json.loads(sse.data)
            print(f"Server error: {error_data.get('error', 'Unknown error')}")
            return

        entry = MoodEntry.model_validate_json(sse.data)
        print(_format_mood_timestamp(entry))

    except ValueError as e:
        print(f"Warning: Could not parse SSE data: {sse.data} - {e}")


def _run_with_error_handling(coro: Coroutine[Any, Any, Any], base_url: str) -> None:
    """Run an async coroutine with standardized error handling."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        print("\nStopped")
        raise typer.Exit(0)
    except httpx.ConnectError:
        print(f"Error: Could not connect to {base_url}")
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        print(f"Error: HTTP {e.response.status_code}")
        raise typer.Exit(1)
    except Exception as e:
        error_msg = str(e) if str(e) else f"Unknown error of type {type(e).__name__}"
        print(f"Error: {error_msg}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
