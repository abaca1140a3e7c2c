# backend/app/config.py
from dotenv import load_dotenv
import os

load_dotenv()  # Loads .env automatically

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

MODES = ("async", "sync")
PROMPT_STYLES = ("detailed", "brief")


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    project_id: Optional[str] = None
    location: str = "us-central1"
    credentials_b64: Optional[str] = None
    model: str = "gemini-2.5-pro"
    mode: str = "async"
    prompt_style: str = "detailed"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3000

    @property
    def use_vertex(self) -> bool:
        # Vertex AI wins when a project is configured, like the original deployment.
        return bool(self.project_id)


def load_settings() -> Settings:
    mode = os.getenv("ADVENTURE_MODE", "async").strip().lower()
    if mode not in MODES:
        raise ValueError(f"ADVENTURE_MODE must be one of {MODES}, got {mode!r}")

    prompt_style = os.getenv("PROMPT_STYLE", "detailed").strip().lower()
    if prompt_style not in PROMPT_STYLES:
        raise ValueError(
            f"PROMPT_STYLE must be one of {PROMPT_STYLES}, got {prompt_style!r}"
        )

    return Settings(
        api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
        project_id=os.getenv("GOOGLE_PROJECT_ID") or None,
        location=os.getenv("GOOGLE_LOCATION", "us-central1"),
        credentials_b64=os.getenv("GOOGLE_APPLICATION_CREDENTIALS_B64") or None,
        model=os.getenv("GEMINI_MODEL", "gemini-2.5-pro"),
        mode=mode,
        prompt_style=prompt_style,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "3000")),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
