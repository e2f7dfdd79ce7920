import pytest

import config


@pytest.fixture
def env(monkeypatch):
    # Keep a developer's .env out of the picture
    monkeypatch.setattr(config, "load_dotenv", lambda **kw: False)
    for name in [
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SUPABASE_JWT_TEMPLATE",
        "CLERK_SECRET_KEY",
        "CLERK_API_URL",
        "CLERK_JWKS_URL",
        "DEV_USER_ID",
        "DEV_PLANS",
        "DEV_FEATURES",
        "USE_FALLBACK_DATA",
        "COMPANION_PERMISSION_FAIL_OPEN",
        "LOG_LEVEL",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(env):
    cfg = config.get_config()
    assert cfg.supabase_url is None
    assert not cfg.is_backend_configured
    assert cfg.supabase_jwt_template == "supabase"
    assert cfg.clerk_api_url == "https://api.clerk.com/v1"
    assert cfg.default_use_fallback is False
    assert cfg.permission_fail_open is True
    assert cfg.log_level == "INFO"


def test_blank_values_are_unset(env):
    env.setenv("SUPABASE_URL", "   ")
    assert config.get_config().supabase_url is None


def test_values_are_parsed(env):
    env.setenv("SUPABASE_URL", "https://x.supabase.co")
    env.setenv("SUPABASE_ANON_KEY", "anon")
    env.setenv("CLERK_API_URL", "https://clerk.internal/v1/")
    env.setenv("DEV_FEATURES", "3_companion_limit, extra ,")
    env.setenv("USE_FALLBACK_DATA", "TRUE")
    env.setenv("COMPANION_PERMISSION_FAIL_OPEN", "false")
    env.setenv("LOG_LEVEL", "debug")

    cfg = config.get_config()
    assert cfg.is_backend_configured
    assert cfg.clerk_api_url == "https://clerk.internal/v1"
    assert cfg.dev_features == ("3_companion_limit", "extra")
    assert cfg.default_use_fallback is True
    assert cfg.permission_fail_open is False
    assert cfg.log_level == "DEBUG"


def test_fail_open_flows_into_policy(env):
    from data.policy import get_policy

    env.setenv("COMPANION_PERMISSION_FAIL_OPEN", "false")
    assert get_policy(config.get_config()).allow_on_error is False
