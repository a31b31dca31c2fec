"""
Model gateways, one per supported AI provider.
"""
from typing import Dict, Optional, Type

import httpx

from jurispanel.db.schemas import AISettings
from .base import ModelGateway, ModelGatewayError, parse_json_text
from .google import GoogleGateway
from .openai import OpenAIGateway
from .anthropic import AnthropicGateway

GATEWAYS: Dict[str, Type[ModelGateway]] = {
    "google": GoogleGateway,
    "openai": OpenAIGateway,
    "anthropic": AnthropicGateway,
}


def build_gateway(ai_settings: AISettings, client: Optional[httpx.Client] = None) -> ModelGateway:
    """Gateway for the active provider with its stored config and temperature."""
    from jurispanel.services.settings_service import DEFAULT_PROVIDER_CONFIGS

    provider = ai_settings.active_provider
    config = ai_settings.active_config()
    if not config.model.strip():
        # a cleared config still runs on the default model
        config = config.model_copy(update={"model": DEFAULT_PROVIDER_CONFIGS[provider].model})
    return GATEWAYS[provider](config, ai_settings.temperature, client=client)


__all__ = [
    "GATEWAYS",
    "ModelGateway",
    "ModelGatewayError",
    "GoogleGateway",
    "OpenAIGateway",
    "AnthropicGateway",
    "build_gateway",
    "parse_json_text",
]
