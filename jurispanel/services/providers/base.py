"""
Model gateway interface shared by every AI provider.

A gateway sends one document plus the fixed output schema and returns the
parsed JSON. It never retries: any transport, HTTP or parse failure becomes
a single ``ModelGatewayError``.
"""
from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from jurispanel.core.config import settings
from jurispanel.db.schemas import ProviderConfig
from jurispanel.services.document_loader import DocumentPayload
from jurispanel.utils.helpers import truncate_text

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


class ModelGatewayError(Exception):
    """Transport, HTTP or parse failure while talking to a model provider."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


def parse_json_text(provider: str, text: str) -> Any:
    """Parse a JSON reply, tolerating a surrounding ```json fence."""
    if text is None or not text.strip():
        raise ModelGatewayError(provider, "empty response")
    candidate = text.strip()
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        match = _FENCE_RE.search(candidate)
        if match:
            try:
                return json.loads(match.group(1))
            except json.JSONDecodeError as exc:
                raise ModelGatewayError(provider, f"invalid JSON: {exc}") from exc
        raise ModelGatewayError(provider, f"response is not JSON: {candidate[:200]}")


class ModelGateway(ABC):
    """
    Capability interface: ``extract`` and ``extract_metadata``.

    Swapping the provider or model changes latency, cost and quality, never
    the shape of what comes back.
    """

    provider: str = ""

    def __init__(
        self,
        config: ProviderConfig,
        temperature: float,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.config = config
        self.model = (config.model or "").strip()
        self.temperature = temperature
        self._client = client

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    @abstractmethod
    def extract(self, document: DocumentPayload, schema: Dict[str, Any]) -> Any:
        """Return the parsed case list (expected to be a JSON array)."""

    @abstractmethod
    def extract_metadata(self, document: DocumentPayload) -> Dict[str, Any]:
        """Return session metadata fields found in the document."""

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    @property
    def api_key(self) -> str:
        return (self.config.key or "").strip() or self.ambient_key()

    def ambient_key(self) -> str:
        return ""

    def _require_key(self) -> str:
        key = self.api_key
        if not key:
            raise ModelGatewayError(self.provider, "no API key configured")
        return key

    def _post_json(self, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> Dict[str, Any]:
        logger.info("Calling %s model=%s", self.provider, self.model)
        client = self._client or httpx.Client(timeout=settings.AI_HTTP_TIMEOUT_SECONDS)
        try:
            response = client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            body = truncate_text(exc.response.text, 500)
            logger.error("%s returned HTTP %s: %s", self.provider, exc.response.status_code, body)
            raise ModelGatewayError(self.provider, f"HTTP {exc.response.status_code}: {body}") from exc
        except httpx.HTTPError as exc:
            logger.error("%s request failed: %s", self.provider, exc)
            raise ModelGatewayError(self.provider, f"request failed: {exc}") from exc
        except ValueError as exc:
            raise ModelGatewayError(self.provider, f"non-JSON HTTP body: {exc}") from exc
        finally:
            if self._client is None:
                client.close()
