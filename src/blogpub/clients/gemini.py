"""Gemini text generation over the REST API"""

from __future__ import annotations

import httpx

from blogpub.config import Settings
from blogpub.util.log import get_logger


logger = get_logger(__name__)


class GenerationError(RuntimeError):
    """The model could not be reached or returned no usable text."""


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.Client | None = None) -> GeminiClient | None:
        """Build a client, or None when no API key is configured."""
        if not settings.gemini_api_key:
            logger.info("No Gemini API key configured; AI-generated fields will use fallbacks")
            return None
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.http_timeout,
            client=client,
        )

    def _post(self, url: str, payload: dict) -> httpx.Response:
        headers = {"x-goog-api-key": self.api_key}
        if self._client is not None:
            return self._client.post(url, json=payload, headers=headers, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, json=payload, headers=headers)

    def generate(self, prompt: str) -> str:
        """Send a single-turn prompt and return the first candidate's text."""
        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            resp = self._post(url, payload)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationError(f"Gemini request failed: {e}") from e

        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(p.get("text", "") for p in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise GenerationError(f"Unexpected Gemini response shape: {e}") from e
        if not text.strip():
            raise GenerationError("Gemini returned an empty response")
        return text

    __call__ = generate
