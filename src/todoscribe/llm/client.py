# src/todoscribe/llm/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..api.client import ApiClient
from ..api.errors import ApiError, NetworkError, ResponseShapeError
from ..core.outcome import ErrorKind, Outcome

logger = logging.getLogger(__name__)

EMPTY_PROMPT = "Please enter a description to generate content."
GENERATED_OK = "Description generated successfully!"
COULD_NOT_GENERATE = "Error: Could not generate content. Try a different or simpler description."
CONNECTION_FAILED = "Connection or unexpected error. Check the logs for details."


def build_instruction(prompt_text: str) -> str:
    return (
        "Generate a detailed description of an image based on the following concept: "
        f'"{prompt_text}". Focus on visual details, colors, atmosphere and artistic style. '
        "Be concise."
    )


def build_payload(instruction: str, *, temperature: float, max_output_tokens: int) -> dict[str, Any]:
    return {
        "contents": [
            {
                "role": "user",
                "parts": [{"text": instruction}],
            }
        ],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
        },
    }


def extract_text(payload: Any) -> str | None:
    """candidates[0].content.parts[0].text, or None if any level is missing."""
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


class GeminiTextGenerator:
    """
    Single-prompt client for the Gemini `generateContent` endpoint.

    - The API key comes from settings; nothing is embedded in the source.
    - One request per call, no retries, no internal concurrency guard:
      the caller must not submit again while a request is outstanding.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "gemini-1.5-flash",
        temperature: float = 0.7,
        max_output_tokens: int = 500,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key or not str(api_key).strip():
            raise RuntimeError("Gemini API key is not set. Set TODOSCRIBE_GEMINI_API_KEY in your .env.")
        if not base_url.strip():
            raise RuntimeError("Gemini base URL is not set. Set TODOSCRIBE_GEMINI_BASE_URL in your .env.")

        self._api_key = str(api_key).strip()
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._api = ApiClient(base_url, None, timeout=timeout, transport=transport)

        self.status = ""
        self.last_text: str | None = None

    @classmethod
    def from_settings(cls, settings: Any, **kwargs: Any) -> GeminiTextGenerator:
        return cls(
            settings.gemini_api_key,
            base_url=settings.gemini_base_url,
            model=settings.gemini_model,
            temperature=settings.gen_temperature,
            max_output_tokens=settings.gen_max_output_tokens,
            timeout=settings.http_timeout_seconds,
            **kwargs,
        )

    async def aclose(self) -> None:
        await self._api.aclose()

    def _finish(self, outcome: Outcome) -> Outcome:
        self.status = outcome.message
        return outcome

    async def generate(self, prompt_text: str) -> Outcome:
        self.status = ""
        self.last_text = None

        if not (prompt_text or "").strip():
            return self._finish(Outcome.failure(EMPTY_PROMPT, ErrorKind.VALIDATION))

        payload = build_payload(
            build_instruction(prompt_text),
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )

        logger.info("Generating content: model=%s prompt_chars=%d", self.model, len(prompt_text))
        try:
            result = await self._api.post(
                f"/models/{self.model}:generateContent",
                json=payload,
                params={"key": self._api_key},
            )
        except ApiError as e:
            logger.error("Gemini API error status=%s payload=%r", e.status_code, e.payload)
            message = e.detail or f"Error {e.status_code}: {e.reason or 'Unexpected server response.'}"
            kind = ErrorKind.UNAUTHORIZED if e.status_code == 401 else ErrorKind.HTTP
            return self._finish(Outcome.failure(f"API error: {message}", kind, status_code=e.status_code))
        except NetworkError as e:
            logger.error("Gemini request failed: %s", e)
            return self._finish(Outcome.failure(CONNECTION_FAILED, ErrorKind.NETWORK))
        except ResponseShapeError as e:
            logger.error("Gemini returned a non-JSON body: %r", e.payload)
            return self._finish(Outcome.failure(COULD_NOT_GENERATE, ErrorKind.RESPONSE_SHAPE))

        text = extract_text(result)
        if text is None:
            logger.error("Unexpected Gemini response (no text content): %r", result)
            return self._finish(Outcome.failure(COULD_NOT_GENERATE, ErrorKind.RESPONSE_SHAPE))

        self.last_text = text
        return self._finish(Outcome.success(GENERATED_OK, text))
