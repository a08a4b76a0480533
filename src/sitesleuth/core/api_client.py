"""Generation endpoint client for the AI ranking stages."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

import requests

from sitesleuth.core.exceptions import GenerationAPIError, GenerationTransportError
from sitesleuth.ranking.types import GroundedResponse, GroundingMetadata

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
MAX_ERROR_BODY_CHARS = 500


def _extract_text(resp_json: Dict[str, Any]) -> str:
    """Return ``candidates[0].content.parts[0].text`` or "" when absent."""
    try:
        text = resp_json["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""
    return text if isinstance(text, str) else ""


def _extract_grounding(resp_json: Dict[str, Any]) -> Optional[GroundingMetadata]:
    try:
        raw = resp_json["candidates"][0].get("groundingMetadata")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
    return GroundingMetadata.from_api(raw)


class GeminiClient:
    """Single-turn generateContent client; failures are raised, never retried."""

    def __init__(
        self,
        api_key: Optional[str],
        *,
        plain_model: str,
        grounded_model: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        user_agent: str = "sitesleuth",
    ) -> None:
        self.api_key = api_key
        self.plain_model = plain_model
        self.grounded_model = grounded_model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent

    def _endpoint(self, model_id: str) -> str:
        return f"{self.base_url}/models/{model_id}:generateContent"

    def _post(self, model_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise GenerationAPIError("API key is required for generation requests")

        url = self._endpoint(model_id)
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
            "x-goog-api-key": self.api_key,
        }
        logger.info(f"Sending request to generation API: {model_id}")
        started = time.perf_counter()
        try:
            resp = requests.post(
                url, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.warning(f"Generation request to {model_id} failed: {e}")
            raise GenerationTransportError(f"network error calling {model_id}: {e}") from e

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            "generation response model=%s status=%s elapsed_ms=%.2f",
            model_id,
            resp.status_code,
            elapsed_ms,
        )
        if not resp.ok:
            body = (resp.text or "")[:MAX_ERROR_BODY_CHARS]
            raise GenerationAPIError(
                f"API call failed: {resp.status_code} - {body}",
                status_code=resp.status_code,
            )

        try:
            resp_json = resp.json()
        except ValueError as e:
            raise GenerationAPIError(
                f"API returned a non-JSON body: {e}", status_code=resp.status_code
            ) from e
        if not isinstance(resp_json, dict):
            raise GenerationAPIError(
                "API returned an unexpected body", status_code=resp.status_code
            )
        return resp_json

    def generate_text(self, prompt: str) -> str:
        """Plain generation without search augmentation."""
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        return _extract_text(self._post(self.plain_model, payload))

    def generate_grounded(self, prompt: str) -> GroundedResponse:
        """Generation with web-search grounding and citation metadata."""
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "tools": [{"google_search": {}}],
        }
        resp_json = self._post(self.grounded_model, payload)
        return GroundedResponse(
            text=_extract_text(resp_json),
            metadata=_extract_grounding(resp_json),
        )


def _resolve_api_key(model_config: Dict[str, Any]) -> Optional[str]:
    if model_config.get("api_key"):
        return model_config["api_key"]
    api_key_env = model_config.get("api_key_env")
    if api_key_env:
        api_key = os.environ.get(api_key_env)
        if not api_key:
            logger.info(f"Warning: {api_key_env} not found in environment variables.")
        return api_key
    return None


def client_from_config(api_key: Optional[str] = None) -> GeminiClient:
    """Build a client from the configured ranking and grounded model aliases."""
    from sitesleuth.config import (
        GROUNDED_MODEL,
        MODELS,
        RANKING_MODEL,
        REQUEST_TIMEOUT,
        USER_AGENT,
    )

    plain_config = MODELS.get(RANKING_MODEL, {})
    grounded_config = MODELS.get(GROUNDED_MODEL, {})

    return GeminiClient(
        api_key or _resolve_api_key(plain_config),
        plain_model=plain_config.get("id", RANKING_MODEL),
        grounded_model=grounded_config.get("id", GROUNDED_MODEL),
        base_url=plain_config.get("base_url", DEFAULT_BASE_URL),
        timeout=REQUEST_TIMEOUT,
        user_agent=USER_AGENT,
    )
