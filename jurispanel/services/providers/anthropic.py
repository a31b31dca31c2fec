"""
Anthropic gateway.

With an API key the Messages API is called directly. Without one the same
request goes through AWS Bedrock using ambient AWS credentials, so the
provider works with no key stored. Structured output is obtained by forcing
a single tool call whose input schema is the case-list schema.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import boto3
import httpx
from botocore.exceptions import BotoCoreError, ClientError

from jurispanel.core.config import settings
from jurispanel.db.schemas import ProviderConfig
from jurispanel.services.document_loader import DocumentPayload
from jurispanel.services.prompts import (
    CASE_LIST_WRAPPER_KEY,
    EXTRACTION_PROMPT,
    METADATA_PROMPT,
    METADATA_SCHEMA,
    wrap_in_object,
)
from jurispanel.services.providers.base import ModelGateway, ModelGatewayError, logger

_CASES_TOOL = "registrar_processos"
_METADATA_TOOL = "registrar_metadados"


class AnthropicGateway(ModelGateway):
    provider = "anthropic"

    def __init__(
        self,
        config: ProviderConfig,
        temperature: float,
        client: Optional[httpx.Client] = None,
        bedrock_client=None,
    ) -> None:
        super().__init__(config, temperature, client)
        self._bedrock = bedrock_client

    def ambient_key(self) -> str:
        return settings.ANTHROPIC_API_KEY.strip()

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def _content(self, prompt: str, document: DocumentPayload, text_limit: int | None = None) -> List[Dict[str, Any]]:
        if document.is_pdf:
            doc_block = {
                "type": "document",
                "source": {"type": "base64", "media_type": document.mime_type, "data": document.data},
            }
        else:
            doc_block = {"type": "text", "text": document.excerpt(text_limit) if text_limit else document.data}
        return [doc_block, {"type": "text", "text": prompt}]

    def _body(self, content: List[Dict[str, Any]], tool: str, schema: Dict[str, Any], temperature: float) -> Dict[str, Any]:
        return {
            "max_tokens": settings.AI_MAX_OUTPUT_TOKENS,
            "temperature": temperature,
            "messages": [{"role": "user", "content": content}],
            "tools": [{
                "name": tool,
                "description": "Registra o resultado estruturado da análise do documento.",
                "input_schema": schema,
            }],
            "tool_choice": {"type": "tool", "name": tool},
        }

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _invoke_messages_api(self, body: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(body, model=self.model)
        return self._post_json(
            f"{settings.ANTHROPIC_API_BASE_URL}/messages",
            payload,
            {
                "x-api-key": self.api_key,
                "anthropic-version": settings.ANTHROPIC_API_VERSION,
                "content-type": "application/json",
            },
        )

    def _invoke_bedrock(self, body: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(body, anthropic_version="bedrock-2023-05-31")
        logger.info("Calling anthropic via Bedrock model=%s", settings.BEDROCK_MODEL_ID)
        try:
            client = self._bedrock or boto3.client("bedrock-runtime", region_name=settings.AWS_REGION)
            response = client.invoke_model(
                modelId=settings.BEDROCK_MODEL_ID,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(payload),
            )
            return json.loads(response["body"].read())
        except (BotoCoreError, ClientError) as exc:
            logger.error("Bedrock invoke_model failed: %s", exc)
            raise ModelGatewayError(self.provider, f"Bedrock request failed: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ModelGatewayError(self.provider, f"non-JSON Bedrock body: {exc}") from exc

    def _call_tool(self, content: List[Dict[str, Any]], tool: str, schema: Dict[str, Any], temperature: float) -> Dict[str, Any]:
        body = self._body(content, tool, schema, temperature)
        data = self._invoke_messages_api(body) if self.api_key else self._invoke_bedrock(body)
        for block in data.get("content", []):
            if isinstance(block, dict) and block.get("type") == "tool_use" and block.get("name") == tool:
                tool_input = block.get("input")
                if isinstance(tool_input, dict):
                    return tool_input
        raise ModelGatewayError(self.provider, f"response did not call {tool} (stop_reason={data.get('stop_reason')})")

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def extract(self, document: DocumentPayload, schema: Dict[str, Any]) -> Any:
        result = self._call_tool(
            self._content(EXTRACTION_PROMPT, document),
            _CASES_TOOL,
            wrap_in_object(schema),
            self.temperature,
        )
        if CASE_LIST_WRAPPER_KEY not in result:
            raise ModelGatewayError(self.provider, f"tool input lacks '{CASE_LIST_WRAPPER_KEY}'")
        return result[CASE_LIST_WRAPPER_KEY]

    def extract_metadata(self, document: DocumentPayload) -> Dict[str, Any]:
        return self._call_tool(
            self._content(METADATA_PROMPT, document, settings.METADATA_MAX_CHARS),
            _METADATA_TOOL,
            METADATA_SCHEMA,
            0,
        )
