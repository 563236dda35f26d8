import pytest

from spend_analysis.config import CategorizerSettings


def test_defaults_are_rules_only() -> None:
    s = CategorizerSettings()
    assert s.provider is None
    assert not s.remote_enabled
    assert s.temperature == 0.2


def test_from_env_prefers_anthropic() -> None:
    s = CategorizerSettings.from_env({"ANTHROPIC_API_KEY": "a", "OPENAI_API_KEY": "o"})
    assert (s.provider, s.api_key) == ("anthropic", "a")


def test_from_env_openai_with_overrides() -> None:
    s = CategorizerSettings.from_env(
        {
            "ANTHROPIC_API_KEY": "  ",
            "OPENAI_API_KEY": " o ",
            "SPEND_ANALYSIS_LLM_MODEL": "gpt-4o",
            "SPEND_ANALYSIS_LLM_TIMEOUT": "12.5",
        }
    )
    assert (s.provider, s.api_key, s.model, s.timeout) == ("openai", "o", "gpt-4o", 12.5)
    assert s.remote_enabled


def test_from_env_without_credentials() -> None:
    s = CategorizerSettings.from_env({})
    assert not s.remote_enabled
    assert s.model is None and s.timeout is None


def test_from_env_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    assert CategorizerSettings.from_env().provider == "openai"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"provider": "openai"},
        {"provider": "anthropic", "api_key": "   "},
        {"provider": "mistral", "api_key": "k"},
        {"timeout": 0},
        {"provider": "openai", "api_key": "k", "timeout": -1},
    ],
)
def test_invalid_settings_are_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        CategorizerSettings(**kwargs)


def test_bad_timeout_env_value() -> None:
    with pytest.raises(ValueError, match="SPEND_ANALYSIS_LLM_TIMEOUT"):
        CategorizerSettings.from_env({"SPEND_ANALYSIS_LLM_TIMEOUT": "soon"})
