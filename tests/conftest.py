"""
Shared fixtures: a fake generation/translation API served through
``httpx.MockTransport`` and fake device backends.
"""

import json
from collections.abc import Callable

import httpx
import pytest

from mindful_chat.capabilities import MemoryKeyValueStore
from mindful_chat.credentials import CredentialService
from mindful_chat.emotion import EmotionClassifier
from mindful_chat.responder import ResponseGenerator
from mindful_chat.session import ChatSession
from mindful_chat.settings import SettingsStore
from mindful_chat.store import SessionStore
from mindful_chat.translator import Translator

# A reply is either generated text or an HTTP error status.
Reply = str | int


def prompt_of(payload: dict) -> str:
    return payload["contents"][0]["parts"][0]["text"]


def system_of(payload: dict) -> str | None:
    instruction = payload.get("systemInstruction")
    return instruction["parts"][0]["text"] if instruction else None


def generation(text: str) -> httpx.Response:
    return httpx.Response(
        200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]}
    )


class FakeRemote:
    """Records requests and answers them from configurable replies."""

    def __init__(self) -> None:
        self.generate_calls: list[dict] = []
        self.translate_calls: list[dict[str, str]] = []
        self.reply: Reply | Callable[[dict], Reply] = "ok"
        self.translate_status = 200
        self.translate_body: object = [
            [["Hello ", "नमस्ते ", None], ["friend", "दोस्त", None]],
            None,
            "hi",
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith(":generateContent"):
            payload = json.loads(request.content)
            self.generate_calls.append(payload)
            reply = self.reply(payload) if callable(self.reply) else self.reply
            if isinstance(reply, int):
                return httpx.Response(reply, json={"error": {"code": reply}})
            return generation(reply)

        if request.url.path.endswith("/translate_a/single"):
            self.translate_calls.append(dict(request.url.params))
            if isinstance(self.translate_body, str):
                return httpx.Response(self.translate_status, text=self.translate_body)
            return httpx.Response(self.translate_status, json=self.translate_body)

        return httpx.Response(404)

    def answer_by_prompt(self, answers: dict[str, Reply], default: Reply = "ok") -> None:
        """Reply with the first answer whose key occurs in the prompt."""

        def reply(payload: dict) -> Reply:
            prompt = prompt_of(payload)
            for fragment, answer in answers.items():
                if fragment in prompt:
                    return answer
            return default

        self.reply = reply

    def prompts(self) -> list[str]:
        return [prompt_of(payload) for payload in self.generate_calls]

    def systems(self) -> list[str | None]:
        return [system_of(payload) for payload in self.generate_calls]


class FakeSpeech:
    def __init__(self) -> None:
        self.events: list[tuple[str, str | None]] = []

    def start(self, language: str) -> None:
        self.events.append(("start", language))

    def stop(self) -> None:
        self.events.append(("stop", None))


class FakeCamera:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.opened = False
        self.captures = 0

    def open(self) -> None:
        if self.fail:
            raise PermissionError("camera permission denied")
        self.opened = True

    def capture(self) -> bytes:
        self.captures += 1
        return b"\xff\xd8frame"

    def close(self) -> None:
        self.opened = False


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
async def http(remote):
    async with httpx.AsyncClient(transport=httpx.MockTransport(remote.handler)) as client:
        yield client


@pytest.fixture
def key_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def credentials(key_store, http) -> CredentialService:
    return CredentialService(key_store, http, default_key="test-key")


@pytest.fixture
def session(key_store, credentials, http) -> ChatSession:
    return ChatSession(
        store=SessionStore(),
        credentials=credentials,
        classifier=EmotionClassifier(credentials),
        responder=ResponseGenerator(credentials),
        translator=Translator(credentials, http),
        settings_store=SettingsStore(key_store),
        auto_message_delay=0,
    )


@pytest.fixture
def speech() -> FakeSpeech:
    return FakeSpeech()


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()
