import base64
import json
from typing import Any, AsyncIterable, AsyncIterator, Optional, Protocol

from google import genai
from google.genai import types
from google.oauth2 import service_account

from .config import Settings
from .logging_config import log

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

SAFETY_SETTINGS = [
    types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_ONLY_HIGH)
    for category in (
        types.HarmCategory.HARM_CATEGORY_HARASSMENT,
        types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
    )
]


class GenerationError(RuntimeError):
    """The provider could not produce an adventure."""


class AdventureGenerator(Protocol):
    def stream(self, prompt: str) -> AsyncIterator[str]:
        ...


# --- Helpers ---

async def collect_fragments(fragments: AsyncIterable[str]) -> str:
    """
    Concatenate streamed fragments in arrival order.
    Errors raised by the stream propagate unchanged.
    """
    parts = []
    async for fragment in fragments:
        parts.append(fragment)
    return "".join(parts)


async def generate(generator: AdventureGenerator, prompt: str) -> str:
    return await collect_fragments(generator.stream(prompt))


def _chunk_text(chunk: Any) -> str:
    """Text of the first part of the first candidate, or "" for empty chunks."""
    candidates = getattr(chunk, "candidates", None)
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) if content else None
    if not parts:
        return ""
    return getattr(parts[0], "text", None) or ""


def _load_credentials(credentials_b64: str) -> service_account.Credentials:
    info = json.loads(base64.b64decode(credentials_b64).decode("utf-8"))
    return service_account.Credentials.from_service_account_info(
        info, scopes=[CLOUD_PLATFORM_SCOPE]
    )


def build_client(settings: Settings) -> genai.Client:
    if settings.use_vertex:
        credentials = (
            _load_credentials(settings.credentials_b64)
            if settings.credentials_b64
            else None
        )
        return genai.Client(
            vertexai=True,
            project=settings.project_id,
            location=settings.location,
            credentials=credentials,
        )

    if not settings.api_key:
        raise GenerationError(
            "Missing GEMINI_API_KEY / GOOGLE_API_KEY or GOOGLE_PROJECT_ID configuration."
        )
    return genai.Client(api_key=settings.api_key)


# --- Streaming Gemini call ---

class GeminiAdventureGenerator:
    """
    Streams an adventure from Gemini.

    The client is built on first use so a misconfigured deployment still
    starts and reports failures per request.
    """

    def __init__(self, settings: Settings, client: Optional[genai.Client] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = build_client(self.settings)
            log.info(
                "Gemini client ready (model=%s, vertex=%s)",
                self.settings.model,
                self.settings.use_vertex,
            )
        return self._client

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        try:
            response = await self.client.aio.models.generate_content_stream(
                model=self.settings.model,
                contents=[types.Content(role="user", parts=[types.Part(text=prompt)])],
                config=types.GenerateContentConfig(safety_settings=SAFETY_SETTINGS),
            )
            async for chunk in response:
                text = _chunk_text(chunk)
                if text:
                    yield text
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Gemini streaming failed: {e}") from e
