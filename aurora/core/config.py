"""
Configuration management.

Settings come from three layers, later layers winning:

1. Model defaults below.
2. An optional YAML file (AURORA_SETTINGS_FILE, default config/settings.yaml).
   String values written as ${VAR} or ${VAR:default} are substituted from
   the environment.
3. Environment variables (typically via .env):

   - BOT_TOKEN            shared secret of the Telegram login bot
   - SUPER_ADMIN_HANDLE   username that is granted the admin role
   - AURORA_DB_PATH       path of the JSON document store
   - ANNOUNCEMENT_MARKER  subject prefix for broadcast tickets
   - LOG_LEVEL, LOG_FORMAT, LOG_FILE
   - WEB_HOST, PORT, CORS_ORIGINS, ENVIRONMENT
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..utils.exceptions import ConfigError

DEFAULT_SETTINGS_FILE = Path("config") / "settings.yaml"


class AuthSettings(BaseModel):
    bot_token: str = ""
    super_admin_handle: str = "AuroraStore_Safe"


class StoreSettings(BaseModel):
    db_path: str = "data/db.json"


class TicketSettings(BaseModel):
    announcement_marker: str = "[សេចក្តីជូនដំណឹង]"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class WebSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class Settings(BaseModel):
    auth: AuthSettings = Field(default_factory=AuthSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    tickets: TicketSettings = Field(default_factory=TicketSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    web: WebSettings = Field(default_factory=WebSettings)


# (section, field, env var)
_ENV_OVERRIDES = [
    ("auth", "bot_token", "BOT_TOKEN"),
    ("auth", "super_admin_handle", "SUPER_ADMIN_HANDLE"),
    ("store", "db_path", "AURORA_DB_PATH"),
    ("tickets", "announcement_marker", "ANNOUNCEMENT_MARKER"),
    ("logging", "level", "LOG_LEVEL"),
    ("logging", "format", "LOG_FORMAT"),
    ("logging", "file_path", "LOG_FILE"),
    ("web", "host", "WEB_HOST"),
    ("web", "port", "PORT"),
    ("web", "environment", "ENVIRONMENT"),
]


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR} / ${VAR:default} references"""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            var_expr = value[2:-1]
            if ":" in var_expr:
                var_name, default = var_expr.split(":", 1)
                return os.getenv(var_name.strip(), default.strip())
            env_value = os.getenv(var_expr)
            if env_value is None:
                raise ConfigError(f"Environment variable {var_expr} not found")
            return env_value
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def _read_settings_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read settings from {path}: {e}")
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return _substitute_env_vars(raw)


def load_settings(settings_file: Optional[str] = None) -> Settings:
    """Build Settings from defaults, the optional YAML file, and the environment."""
    load_dotenv()

    path = Path(settings_file or os.getenv("AURORA_SETTINGS_FILE") or DEFAULT_SETTINGS_FILE)
    data: Dict[str, Any] = _read_settings_file(path) if path.exists() else {}

    for section, field, env_var in _ENV_OVERRIDES:
        env_value = os.getenv(env_var)
        if env_value is not None and env_value != "":
            data.setdefault(section, {})[field] = env_value

    cors = os.getenv("CORS_ORIGINS")
    if cors:
        data.setdefault("web", {})["cors_origins"] = [o.strip() for o in cors.split(",") if o.strip()]

    try:
        return Settings(**data)
    except ValueError as e:
        raise ConfigError(f"Invalid settings: {e}")
