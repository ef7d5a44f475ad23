import pytest

from config.settings import Settings


def test_settings_defaults() -> None:
    settings = Settings({})
    assert settings.google_api_key is None
    assert settings.port == 3000
    assert settings.max_history == 20
    assert settings.gemini_model == "gemini-2.0-flash"
    assert settings.is_development


def test_gemini_api_key_fallback() -> None:
    assert Settings({"GEMINI_API_KEY": "abc"}).google_api_key == "abc"
    assert Settings({"GOOGLE_API_KEY": "x", "GEMINI_API_KEY": "y"}).google_api_key == "x"


def test_production_env_is_not_development() -> None:
    assert not Settings({"APP_ENV": "production"}).is_development


@pytest.mark.parametrize(
    "env",
    [
        {"PORT": "0"},
        {"PORT": "not-a-number"},
        {"MAX_HISTORY": "-1"},
        {"MODEL_TOP_P": "1.5"},
    ],
)
def test_invalid_settings_raise(env) -> None:
    with pytest.raises(ValueError):
        Settings(env)
