import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from alice_bridge.errors import ConfigError
from alice_bridge.providers import ProviderProfile, get_profile

MIN_KEY_LENGTH = 10


@dataclass(frozen=True)
class Settings:
    profile: ProviderProfile
    api_key: str
    model: str
    host: str = "0.0.0.0"
    port: int = 3000
    session_ttl: float = 30 * 60
    sweep_interval: float = 10 * 60
    upstream_timeout: float = 60.0
    log_level: str = "INFO"


def validate_api_key(profile: ProviderProfile, raw: Optional[str]) -> str:
    if not raw or not raw.strip():
        raise ConfigError(f"{profile.api_key_env} is not set (check your .env)")

    key = raw.strip()
    if len(key) < MIN_KEY_LENGTH or not key.startswith(profile.key_prefix):
        hint = f": must start with '{profile.key_prefix}'" if profile.key_prefix else ""
        raise ConfigError(f"Malformed {profile.api_key_env}{hint}")
    return key


def mask_key(key: str) -> str:
    return f"{key[:5]}..."


def _number(env: Mapping[str, str], name: str, default, cast=float):
    value = env.get(name)
    if value is None or value == "":
        return default
    try:
        return cast(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{value}'") from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment (and .env when using os.environ)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    profile = get_profile(environ.get("LLM_PROVIDER", "deepseek"))
    api_key = validate_api_key(profile, environ.get(profile.api_key_env))

    return Settings(
        profile=profile,
        api_key=api_key,
        model=environ.get("LLM_MODEL") or profile.model,
        host=environ.get("HOST", "0.0.0.0"),
        port=_number(environ, "PORT", 3000, int),
        session_ttl=_number(environ, "SESSION_TTL_SECONDS", 30 * 60),
        sweep_interval=_number(environ, "SWEEP_INTERVAL_SECONDS", 10 * 60),
        upstream_timeout=_number(environ, "UPSTREAM_TIMEOUT", 60.0),
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
    )
