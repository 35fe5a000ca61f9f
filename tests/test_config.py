from decimal import Decimal

import pytest

from dressshop.utils.config import Settings, load_settings
from dressshop.utils.exceptions import ConfigError

SETTINGS_YAML = """
app:
  environment: ${ENVIRONMENT:development}
storage:
  backend: memory
auth:
  session_secret: ${SESSION_SECRET}
  admin_password: ${ADMIN_PASSWORD:fallback-pass}
pricing:
  tax_rate: "0.10"
"""


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(SETTINGS_YAML)
    return path


def test_env_substitution(settings_file, monkeypatch):
    monkeypatch.setenv("SESSION_SECRET", "s3cret")
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)

    settings = load_settings(settings_file)

    assert settings.auth.session_secret == "s3cret"
    assert settings.auth.admin_password == "fallback-pass"
    assert settings.is_production
    assert settings.pricing.tax_rate == Decimal("0.10")
    assert settings.pricing.shipping_flat == Decimal("9.99")
    assert settings.storage.backend == "memory"


def test_required_env_var_missing(settings_file, monkeypatch):
    monkeypatch.delenv("SESSION_SECRET", raising=False)
    with pytest.raises(ConfigError):
        load_settings(settings_file)


def test_explicit_missing_file(tmp_path, monkeypatch):
    monkeypatch.delenv("DRESSSHOP_CONFIG", raising=False)
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "absent.yaml")


def test_config_env_var_names_file(settings_file, monkeypatch):
    monkeypatch.setenv("DRESSSHOP_CONFIG", str(settings_file))
    monkeypatch.setenv("SESSION_SECRET", "from-env-file")
    assert load_settings().auth.session_secret == "from-env-file"


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.delenv("DRESSSHOP_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    settings = load_settings()
    assert settings == Settings()
    assert settings.auth.session_days == 30
    assert settings.pricing.order_prefix == "DRS"


def test_invalid_values(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("storage:\n  backend: postgres\n")
    with pytest.raises(ConfigError):
        load_settings(path)
