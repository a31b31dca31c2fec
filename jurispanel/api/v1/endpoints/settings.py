"""
AI provider settings endpoints

Keys are stored as given but only ever returned masked.
"""
from fastapi import APIRouter, Depends

from jurispanel.api.v1.deps import get_settings_service
from jurispanel.db.schemas import AISettings, ProviderConfigUpdate, ProviderName, TemperatureUpdate
from jurispanel.services.settings_service import SettingsService, masked

router = APIRouter()


@router.get("/ai", response_model=AISettings, response_model_by_alias=True)
def get_ai_settings(service: SettingsService = Depends(get_settings_service)):
    return masked(service.get())


@router.put("/ai/providers/{provider}", response_model=AISettings, response_model_by_alias=True)
def update_provider(
    provider: ProviderName,
    update: ProviderConfigUpdate,
    service: SettingsService = Depends(get_settings_service),
):
    return masked(service.update_provider(provider, update))


@router.post("/ai/providers/{provider}/activate", response_model=AISettings, response_model_by_alias=True)
def activate_provider(provider: ProviderName, service: SettingsService = Depends(get_settings_service)):
    return masked(service.activate(provider))


@router.delete("/ai/providers/{provider}", response_model=AISettings, response_model_by_alias=True)
def clear_provider(provider: ProviderName, service: SettingsService = Depends(get_settings_service)):
    """Blank a provider's label, key and model."""
    return masked(service.clear_provider(provider))


@router.put("/ai/temperature", response_model=AISettings, response_model_by_alias=True)
def set_temperature(update: TemperatureUpdate, service: SettingsService = Depends(get_settings_service)):
    return masked(service.set_temperature(update.temperature))
