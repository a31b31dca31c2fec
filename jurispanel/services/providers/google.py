"""
Google Gemini gateway (``models/{model}:generateContent``).
"""
from __future__ import annotations

from typing import Any, Dict, List

from jurispanel.core.config import settings
from jurispanel.services.document_loader import DocumentPayload
from jurispanel.services.prompts import EXTRACTION_PROMPT, METADATA_PROMPT, METADATA_SCHEMA
from jurispanel.services.providers.base import ModelGateway, ModelGatewayError, parse_json_text


def to_gemini_schema(schema: Any) -> Any:
    """Gemini expects OpenAPI-style upper-case type names."""
    if isinstance(schema, dict):
        out = {}
        for key, value in schema.items():
            if key == "type" and isinstance(value, str):
                out[key] = value.upper()
            else:
                out[key] = to_gemini_schema(value)
        return out
    if isinstance(schema, list):
        return [to_gemini_schema(item) for item in schema]
    return schema


class GoogleGateway(ModelGateway):
    provider = "google"

    def ambient_key(self) -> str:
        return settings.google_ambient_key

    def _parts(self, prompt: str, document: DocumentPayload, text_limit: int | None = None) -> List[Dict[str, Any]]:
        parts: List[Dict[str, Any]] = [{"text": prompt}]
        if document.is_pdf:
            parts.append({"inline_data": {"mime_type": document.mime_type, "data": document.data}})
        else:
            parts.append({"text": document.excerpt(text_limit) if text_limit else document.data})
        return parts

    def _generate(self, model: str, parts: List[Dict[str, Any]], generation_config: Dict[str, Any]) -> Any:
        key = self._require_key()
        url = f"{settings.GOOGLE_API_BASE_URL}/models/{model}:generateContent"
        data = self._post_json(
            url,
            {"contents": [{"role": "user", "parts": parts}], "generationConfig": generation_config},
            {"x-goog-api-key": key, "Content-Type": "application/json"},
        )
        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            raise ModelGatewayError(self.provider, f"no candidates returned ({feedback.get('blockReason', 'unknown')})")
        content = candidates[0].get("content") or {}
        text = "".join(p.get("text", "") for p in content.get("parts", []) if isinstance(p, dict))
        return parse_json_text(self.provider, text)

    def extract(self, document: DocumentPayload, schema: Dict[str, Any]) -> Any:
        return self._generate(
            self.model,
            self._parts(EXTRACTION_PROMPT, document),
            {
                "responseMimeType": "application/json",
                "responseSchema": to_gemini_schema(schema),
                "temperature": self.temperature,
            },
        )

    def extract_metadata(self, document: DocumentPayload) -> Dict[str, Any]:
        model = settings.METADATA_MODEL_GOOGLE or self.model
        generation_config: Dict[str, Any] = {
            "responseMimeType": "application/json",
            "responseSchema": to_gemini_schema(METADATA_SCHEMA),
            "temperature": 0,
        }
        if "flash" in model:
            generation_config["thinkingConfig"] = {"thinkingBudget": 0}
        result = self._generate(
            model,
            self._parts(METADATA_PROMPT, document, settings.METADATA_MAX_CHARS),
            generation_config,
        )
        if not isinstance(result, dict):
            raise ModelGatewayError(self.provider, "metadata response is not an object")
        return result
