import pytest

from src.core import config


def setup_function(function):
    config.get_settings.cache_clear()


def teardown_function(function):
    config.get_settings.cache_clear()


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for name in ("SUPPLIER_VIEW", "MAP_OUTPUT_PATH", "SUPABASE_TIMEOUT", "PORT"):
        monkeypatch.delenv(name, raising=False)


def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co/")
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")
    monkeypatch.setenv("MAP_OUTPUT_PATH", "out/map.html")
    monkeypatch.setenv("SUPABASE_TIMEOUT", "5")
    monkeypatch.setenv("PORT", "9100")

    settings = config.get_settings()

    assert settings.supabase_url == "https://abc.supabase.co"
    assert settings.supabase_key == "anon-key"
    assert settings.output_path == "out/map.html"
    assert settings.request_timeout == 5.0
    assert settings.preview_port == 9100
    assert settings.supplier_view == config.DEFAULT_VIEW


def test_get_settings_defaults(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")

    settings = config.get_settings()

    assert settings.output_path == "docs/index.html"
    assert settings.request_timeout == 10.0
    assert settings.preview_port == 8080


@pytest.mark.parametrize("missing", ["SUPABASE_URL", "SUPABASE_KEY"])
def test_get_settings_requires_credentials(monkeypatch, missing):
    monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")
    monkeypatch.setenv(missing, "  ")

    with pytest.raises(config.ConfigurationError) as excinfo:
        config.get_settings()

    assert missing in str(excinfo.value)


def test_get_settings_rejects_bad_timeout(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")
    monkeypatch.setenv("SUPABASE_TIMEOUT", "soon")

    with pytest.raises(config.ConfigurationError):
        config.get_settings()
