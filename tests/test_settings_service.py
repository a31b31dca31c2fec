from jurispanel.db.schemas import ProviderConfigUpdate
from jurispanel.services.providers import AnthropicGateway, GoogleGateway, OpenAIGateway, build_gateway
from jurispanel.services.settings_service import SettingsService, masked


def test_defaults_without_stored_settings(db):
    ai = SettingsService(db).get()

    assert ai.active_provider == "google"
    assert ai.temperature == 0.2
    assert ai.configs["google"].model == "gemini-2.5-flash"
    assert ai.configs["openai"].model == "gpt-4o"
    assert ai.configs["anthropic"].model == "claude-3-5-sonnet-20240620"


def test_update_provider_persists(db):
    service = SettingsService(db)
    service.update_provider("openai", ProviderConfigUpdate(key="sk-test-abcdef", model="gpt-4o-mini"))

    ai = SettingsService(db).get()
    assert ai.configs["openai"].key == "sk-test-abcdef"
    assert ai.configs["openai"].model == "gpt-4o-mini"
    assert ai.configs["openai"].name == "OpenAI"


def test_masked_hides_keys(db):
    service = SettingsService(db)
    ai = service.update_provider("anthropic", ProviderConfigUpdate(key="sk-ant-123456789", model="claude-3-5-sonnet-20240620"))

    shown = masked(ai)
    assert shown.configs["anthropic"].key.endswith("6789")
    assert "sk-ant" not in shown.configs["anthropic"].key
    assert shown.configs["google"].key == ""


def test_activate_and_build_gateway(db):
    service = SettingsService(db)

    assert isinstance(build_gateway(service.get()), GoogleGateway)
    assert isinstance(build_gateway(service.activate("openai")), OpenAIGateway)
    assert isinstance(build_gateway(service.activate("anthropic")), AnthropicGateway)


def test_clearing_active_provider_falls_back_to_google(db):
    service = SettingsService(db)
    service.activate("openai")

    ai = service.clear_provider("openai")

    assert ai.active_provider == "google"
    assert ai.configs["openai"].model == ""


def test_cleared_provider_runs_on_default_model(db):
    service = SettingsService(db)
    ai = service.clear_provider("google")

    assert build_gateway(ai).model == "gemini-2.5-flash"


def test_temperature(db):
    service = SettingsService(db)
    service.set_temperature(0.7)

    gateway = build_gateway(SettingsService(db).get())
    assert gateway.temperature == 0.7
