"""Configuration models and loading."""

import json
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "internal-api-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"


class ProxySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = 8080
    mount_prefix: str = "/api/op"
    dashboard: bool = True


class UpstreamSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    url_env: str = "INTERNAL_API_URL"
    fallback_url_env: str = "API_URL"
    # None keeps the httpx client default
    timeout: float | None = None


class LimitSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    keep_alive_timeout: int = 5


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    limits: LimitSettings = Field(default_factory=LimitSettings)


def load_config() -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not CONFIG_FILE.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        default = Config()
        CONFIG_FILE.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(CONFIG_FILE.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = CONFIG_FILE.with_suffix(".json.bak")
        CONFIG_FILE.rename(backup)
        default = Config()
        CONFIG_FILE.write_text(default.model_dump_json(indent=2))
        return default


def resolve_base_url(
    settings: UpstreamSettings,
    environ: Mapping[str, str] | None = None,
) -> tuple[str, str]:
    """Return (base_url, env_var_name) from the primary or fallback variable.

    Values are stripped of surrounding whitespace first, so a blank or
    whitespace-only variable counts as unset and falls through to the next
    one. A trailing slash is dropped so the target path can always be joined
    with a single "/".

    Raises:
        ConfigurationError: neither variable holds a value
    """
    env = os.environ if environ is None else environ
    for name in (settings.url_env, settings.fallback_url_env):
        value = env.get(name, "").strip()
        if value:
            return value.rstrip("/"), name
    raise ConfigurationError(
        f"Neither {settings.url_env} nor {settings.fallback_url_env} is set"
    )
