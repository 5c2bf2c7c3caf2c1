# src/todoscribe/llm/offline.py

from __future__ import annotations

from ..core.outcome import ErrorKind, Outcome
from .client import EMPTY_PROMPT, GENERATED_OK


class OfflineTextGenerator:
    """
    Offline deterministic generator used for demos when no Gemini key is configured.

    Same validation and status handling as GeminiTextGenerator, no network.
    """

    def __init__(self) -> None:
        self.status = ""
        self.last_text: str | None = None

    async def aclose(self) -> None:
        return None

    async def generate(self, prompt_text: str) -> Outcome:
        self.status = ""
        self.last_text = None

        if not (prompt_text or "").strip():
            self.status = EMPTY_PROMPT
            return Outcome.failure(EMPTY_PROMPT, ErrorKind.VALIDATION)

        text = (
            "Offline demo mode: no generative API is configured.\n"
            "Set TODOSCRIBE_GEMINI_API_KEY to enable real descriptions.\n\n"
            f"Concept: {prompt_text.strip()}"
        )
        self.last_text = text
        self.status = GENERATED_OK
        return Outcome.success(GENERATED_OK, text)
