"""
Configuration management with schema validation.

Settings live in config/settings.yaml (or the file named by DRESSSHOP_CONFIG).
String values of the form ${VAR} or ${VAR:default} are substituted from the
environment, which is first populated from .env.
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigError

load_dotenv()

DEFAULT_CONFIG_FILE = Path("config") / "settings.yaml"


class AppSettings(BaseModel):
    name: str = "DressShop"
    version: str = "1.0.0"
    environment: str = "development"


class StorageSettings(BaseModel):
    backend: Literal["memory", "json"] = "json"
    data_dir: str = "data"
    lock_timeout_seconds: float = 30.0


class AuthSettings(BaseModel):
    session_secret: str = "dress-shop-secret-key"
    session_cookie_name: str = "dressshop_session"
    session_days: int = Field(30, ge=1)
    admin_username: str = "admin"
    admin_password: str = "P@$$word@ADMIN"
    totp_issuer: str = "DressShop Admin"
    bcrypt_rounds: int = Field(12, ge=4, le=31)


class PricingSettings(BaseModel):
    shipping_flat: Decimal = Decimal("9.99")
    tax_rate: Decimal = Decimal("0.08")
    order_prefix: str = "DRS"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_production(self) -> bool:
        return self.app.environment.strip().lower() == "production"


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute environment variables"""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            var_expr = value[2:-1]
            if ":" in var_expr:
                var_name, default = var_expr.split(":", 1)
                return os.getenv(var_name.strip(), default.strip())
            env_value = os.getenv(var_expr.strip())
            if env_value is None:
                raise ConfigError(f"Environment variable {var_expr} not found")
            return env_value
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Load and validate settings.

    An explicitly given path (argument or DRESSSHOP_CONFIG) must exist; the
    default file is optional and built-in defaults apply without it.
    """
    explicit = path or os.getenv("DRESSSHOP_CONFIG")
    settings_path = Path(explicit) if explicit else DEFAULT_CONFIG_FILE

    if not settings_path.exists():
        if explicit:
            raise ConfigError(f"Settings file not found: {settings_path}")
        return Settings()

    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read settings from {settings_path}: {e}")

    processed = _substitute_env_vars(raw_data)
    try:
        return Settings(**processed)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid settings in {settings_path}: {e}")
