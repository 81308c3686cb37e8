"""
Runtime configuration for the Mindful Chat service.

Values come from the process environment; a ``.env`` file in the working
directory is loaded first when present.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_GENERATIVE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"
DEFAULT_STORE_PATH = Path.home() / ".mindful_chat" / "store.json"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AppConfig(BaseModel):
    """Service configuration resolved from the environment."""

    google_api_key: str = Field("", description="Default generative API key")
    model: str = Field(DEFAULT_MODEL, description="Generative model identifier")
    generative_url: str = Field(DEFAULT_GENERATIVE_URL)
    translate_url: str = Field(DEFAULT_TRANSLATE_URL)
    store_path: Path = Field(
        DEFAULT_STORE_PATH, description="JSON file holding the key and settings"
    )
    log_level: str = Field("INFO")

    @classmethod
    def from_env(cls) -> "AppConfig":
        load_dotenv()
        return cls(
            google_api_key=os.getenv("GOOGLE_API_KEY", ""),
            model=os.getenv("MINDFUL_CHAT_MODEL", DEFAULT_MODEL),
            generative_url=os.getenv(
                "MINDFUL_CHAT_GENERATIVE_URL", DEFAULT_GENERATIVE_URL
            ),
            translate_url=os.getenv("MINDFUL_CHAT_TRANSLATE_URL", DEFAULT_TRANSLATE_URL),
            store_path=Path(os.getenv("MINDFUL_CHAT_STORE", str(DEFAULT_STORE_PATH))),
            log_level=os.getenv("MINDFUL_CHAT_LOG_LEVEL", "INFO"),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
