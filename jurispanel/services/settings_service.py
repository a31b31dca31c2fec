"""
Reviewer-editable AI provider settings, persisted in ``kv_store``.

Nothing here is required: with no stored settings the defaults select the
configured default provider and rely on ambient credentials.
"""
from __future__ import annotations

import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session

from jurispanel.core.config import settings
from jurispanel.db.models import KeyValueEntry
from jurispanel.db.schemas import PROVIDER_NAMES, AISettings, ProviderConfig, ProviderConfigUpdate
from jurispanel.utils.helpers import mask_secret

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings_ai"

DEFAULT_PROVIDER_CONFIGS = {
    "google": ProviderConfig(name="Google", key="", model="gemini-2.5-flash"),
    "openai": ProviderConfig(name="OpenAI", key="", model="gpt-4o"),
    "anthropic": ProviderConfig(name="Anthropic", key="", model="claude-3-5-sonnet-20240620"),
}

PROVIDER_LABELS = {name: cfg.name for name, cfg in DEFAULT_PROVIDER_CONFIGS.items()}


def default_ai_settings() -> AISettings:
    active = settings.DEFAULT_AI_PROVIDER if settings.DEFAULT_AI_PROVIDER in PROVIDER_NAMES else "google"
    return AISettings(
        active_provider=active,
        configs={name: cfg.model_copy() for name, cfg in DEFAULT_PROVIDER_CONFIGS.items()},
        temperature=settings.DEFAULT_AI_TEMPERATURE,
    )


def masked(ai_settings: AISettings) -> AISettings:
    """Copy of *ai_settings* safe to return to the browser."""
    return ai_settings.model_copy(update={
        "configs": {
            name: cfg.model_copy(update={"key": mask_secret(cfg.key)})
            for name, cfg in ai_settings.configs.items()
        }
    })


class SettingsService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self) -> AISettings:
        row = self.db.get(KeyValueEntry, SETTINGS_KEY)
        if row is None:
            return default_ai_settings()
        try:
            stored = AISettings.model_validate(row.value)
        except ValidationError as exc:
            logger.warning("Stored AI settings are invalid, using defaults: %s", exc)
            return default_ai_settings()
        # Providers added after the settings were stored get their defaults.
        configs = {name: cfg.model_copy() for name, cfg in DEFAULT_PROVIDER_CONFIGS.items()}
        configs.update(stored.configs)
        return stored.model_copy(update={"configs": configs})

    def _store(self, ai_settings: AISettings) -> AISettings:
        payload = ai_settings.model_dump(mode="json", by_alias=True)
        row = self.db.get(KeyValueEntry, SETTINGS_KEY)
        if row is None:
            self.db.add(KeyValueEntry(key=SETTINGS_KEY, value=payload))
        else:
            row.value = payload
        self.db.commit()
        return ai_settings

    def update_provider(self, provider: str, update: ProviderConfigUpdate) -> AISettings:
        current = self.get()
        existing = current.configs.get(provider) or ProviderConfig()
        config = ProviderConfig(
            name=(update.name if update.name is not None else existing.name) or PROVIDER_LABELS[provider],
            key=update.key if update.key is not None else existing.key,
            model=update.model,
        )
        configs = dict(current.configs)
        configs[provider] = config
        logger.info("AI provider %s configured with model=%s", provider, config.model)
        return self._store(current.model_copy(update={"configs": configs}))

    def activate(self, provider: str) -> AISettings:
        current = self.get()
        logger.info("AI provider switched %s -> %s", current.active_provider, provider)
        return self._store(current.model_copy(update={"active_provider": provider}))

    def clear_provider(self, provider: str) -> AISettings:
        """Blank a provider's config; the active provider falls back to google."""
        current = self.get()
        configs = dict(current.configs)
        configs[provider] = ProviderConfig(name="", key="", model="")
        active = "google" if current.active_provider == provider else current.active_provider
        return self._store(current.model_copy(update={"configs": configs, "active_provider": active}))

    def set_temperature(self, temperature: float) -> AISettings:
        current = self.get()
        return self._store(current.model_copy(update={"temperature": temperature}))
