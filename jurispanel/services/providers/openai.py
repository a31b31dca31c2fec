"""
OpenAI gateway (Chat Completions with a JSON-schema response format).
"""
from __future__ import annotations

from typing import Any, Dict, List

from jurispanel.core.config import settings
from jurispanel.services.document_loader import DocumentPayload
from jurispanel.services.prompts import (
    CASE_LIST_WRAPPER_KEY,
    EXTRACTION_PROMPT,
    METADATA_PROMPT,
    wrap_in_object,
)
from jurispanel.services.providers.base import ModelGateway, ModelGatewayError, parse_json_text


class OpenAIGateway(ModelGateway):
    provider = "openai"

    def ambient_key(self) -> str:
        return settings.OPENAI_API_KEY.strip()

    def _content(self, prompt: str, document: DocumentPayload, text_limit: int | None = None) -> List[Dict[str, Any]]:
        content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
        if document.is_pdf:
            content.append({
                "type": "file",
                "file": {
                    "filename": document.filename or "documento.pdf",
                    "file_data": f"data:{document.mime_type};base64,{document.data}",
                },
            })
        else:
            content.append({"type": "text", "text": document.excerpt(text_limit) if text_limit else document.data})
        return content

    def _complete(self, content: List[Dict[str, Any]], response_format: Dict[str, Any], temperature: float) -> Any:
        key = self._require_key()
        data = self._post_json(
            f"{settings.OPENAI_API_BASE_URL}/chat/completions",
            {
                "model": self.model,
                "temperature": temperature,
                "max_tokens": settings.AI_MAX_OUTPUT_TOKENS,
                "response_format": response_format,
                "messages": [{"role": "user", "content": content}],
            },
            {"Authorization": f"Bearer {key}", "Content-Type": "application/json"},
        )
        choices = data.get("choices") or []
        if not choices:
            raise ModelGatewayError(self.provider, "no choices returned")
        message = choices[0].get("message") or {}
        if message.get("refusal"):
            raise ModelGatewayError(self.provider, f"model refused: {message['refusal']}")
        return parse_json_text(self.provider, message.get("content") or "")

    def extract(self, document: DocumentPayload, schema: Dict[str, Any]) -> Any:
        result = self._complete(
            self._content(EXTRACTION_PROMPT, document),
            {
                "type": "json_schema",
                "json_schema": {"name": "processos", "schema": wrap_in_object(schema), "strict": False},
            },
            self.temperature,
        )
        if isinstance(result, dict) and CASE_LIST_WRAPPER_KEY in result:
            return result[CASE_LIST_WRAPPER_KEY]
        return result

    def extract_metadata(self, document: DocumentPayload) -> Dict[str, Any]:
        result = self._complete(
            self._content(METADATA_PROMPT, document, settings.METADATA_MAX_CHARS),
            {"type": "json_object"},
            0,
        )
        if not isinstance(result, dict):
            raise ModelGatewayError(self.provider, "metadata response is not an object")
        return result
