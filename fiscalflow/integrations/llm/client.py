from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

from django.conf import settings

logger = logging.getLogger(__name__)


class LLMNotConfiguredError(Exception):
    """Raised when an LLM client is enabled but missing configuration."""


class LLMRequestError(Exception):
    """The provider could not be reached or returned no usable JSON."""


@dataclass
class LLMConfig:
    provider: str = "gemini"
    model: str = "gemini-1.5-flash"
    api_key: str | None = None
    timeout: float = 30.0


class LLMClient:
    """Provider-agnostic interface for text-generation returning JSON."""

    def generate_json(self, prompt: str, system: str | None = None) -> Any:
        raise NotImplementedError


class GeminiClient(LLMClient):
    """Minimal Gemini HTTP client over the REST API.

    Uses responseMimeType=application/json so the model returns JSON text.
    """

    def __init__(self, cfg: LLMConfig):
        if not cfg.api_key:
            msg = "GEMINI_API_KEY missing"
            raise LLMNotConfiguredError(msg)
        self.cfg = cfg

    def _endpoint(self) -> str:
        return (
            f"https://generativelanguage.googleapis.com/v1beta/models/"
            f"{self.cfg.model}:generateContent?key={self.cfg.api_key}"
        )

    def generate_json(self, prompt: str, system: str | None = None) -> Any:
        contents: list[dict[str, Any]] = []
        if system:
            contents.append({"role": "user", "parts": [{"text": system}]})
        contents.append({"role": "user", "parts": [{"text": prompt}]})

        payload = {
            "contents": contents,
            "generationConfig": {
                "temperature": 0.2,
                "responseMimeType": "application/json",
            },
        }
        req = urllib.request.Request(  # noqa: S310 - external URL by config
            self._endpoint(),
            data=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.cfg.timeout) as resp:  # noqa: S310 - external URL by config
                obj = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:  # pragma: no cover - network
            body = e.read().decode("utf-8", "ignore")
            logger.warning("Gemini HTTPError %s: %s", e.code, body)
            msg = f"Gemini returned HTTP {e.code}"
            raise LLMRequestError(msg) from e
        except (urllib.error.URLError, TimeoutError, ValueError) as e:
            logger.warning("Gemini request failed: %s", e)
            msg = "Gemini request failed"
            raise LLMRequestError(msg) from e
        return self._parse(obj)

    @staticmethod
    def _parse(obj: dict) -> Any:
        # candidates -> content -> parts -> text
        candidates = obj.get("candidates") or []
        parts = []
        if candidates:
            parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
        text = parts[0].get("text") if parts else None
        if not text:
            msg = "Gemini returned no content"
            raise LLMRequestError(msg)
        try:
            return json.loads(text)
        except ValueError as e:
            logger.debug("Failed to parse Gemini JSON: %s", e)
            msg = "Gemini returned malformed JSON"
            raise LLMRequestError(msg) from e


def get_llm_client_from_settings() -> LLMClient | None:
    """Factory reading settings to return a configured LLM client.

    Returns None when disabled or misconfigured.
    """
    if not getattr(settings, "LLM_ENABLED", False):
        return None

    cfg = LLMConfig(
        provider=getattr(settings, "LLM_PROVIDER", "gemini"),
        model=getattr(settings, "LLM_MODEL", "gemini-1.5-flash"),
        api_key=getattr(settings, "GEMINI_API_KEY", None),
        timeout=float(getattr(settings, "LLM_TIMEOUT", 30.0)),
    )
    if cfg.provider == "gemini":
        try:
            return GeminiClient(cfg)
        except LLMNotConfiguredError:
            logger.info("LLM enabled but GEMINI_API_KEY missing; skipping LLM")
            return None
    logger.info("LLM provider '%s' not supported; skipping LLM", cfg.provider)
    return None
