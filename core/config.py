"""Configuration models and loading."""

import os
from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlsplit

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import ConfigurationError

ENV_FILE = Path.cwd() / ".env"

DEFAULT_PORTS = {"http": 80, "https": 443}


class UpstreamTarget(BaseModel):
    """Fixed upstream location, resolved once at startup."""

    model_config = ConfigDict(frozen=True)

    scheme: str
    host: str
    port: int

    @property
    def base_url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}"


class ProxySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    dashboard: bool = True


class AuthSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str = "your-secret-api-key-here"

    @field_validator("api_key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("API key must not be empty")
        return value


class UpstreamSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = "http://localhost:11434"

    @field_validator("url")
    @classmethod
    def _valid_url(cls, value: str) -> str:
        parsed = urlsplit(value)
        if parsed.scheme not in DEFAULT_PORTS:
            raise ValueError(f"unsupported upstream scheme: {parsed.scheme!r}")
        if not parsed.hostname:
            raise ValueError(f"upstream URL has no host: {value!r}")
        _ = parsed.port  # raises ValueError on a malformed port
        return value

    @property
    def target(self) -> UpstreamTarget:
        """Scheme/host/port of the upstream; any path in the URL is ignored."""
        parsed = urlsplit(self.url)
        return UpstreamTarget(
            scheme=parsed.scheme,
            host=parsed.hostname,
            port=parsed.port or DEFAULT_PORTS[parsed.scheme],
        )


class CorsSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Empty means every Origin is reflected back
    allowed_origins: tuple[str, ...] = ()


class LimitSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_body_size: int = Field(default=50 * 1024 * 1024, gt=0)
    upstream_timeout: float = Field(default=600.0, gt=0)
    keep_alive_timeout: int = 5


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    proxy: ProxySettings = Field(default_factory=ProxySettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)
    limits: LimitSettings = Field(default_factory=LimitSettings)


def load_config(environ: Mapping[str, str] | None = None, env_file: Path = ENV_FILE) -> Config:
    """Build configuration from the process environment and an optional .env file.

    Real environment variables take precedence over values from the .env file.
    """
    values: dict[str, str | None] = {}
    if env_file.exists():
        values.update(dotenv_values(env_file))
    values.update(os.environ if environ is None else environ)

    data: dict = {"proxy": {}, "auth": {}, "upstream": {}, "cors": {}, "limits": {}}
    _set(data, "proxy", "host", values.get("HOST"))
    _set(data, "proxy", "port", values.get("PORT"))
    _set(data, "proxy", "dashboard", values.get("DASHBOARD"))
    _set(data, "auth", "api_key", values.get("API_KEY"))
    _set(data, "upstream", "url", values.get("OLLAMA_URL"))
    _set(data, "limits", "max_body_size", values.get("MAX_BODY_SIZE"))
    _set(data, "limits", "upstream_timeout", values.get("UPSTREAM_TIMEOUT"))

    origins = values.get("CORS_ALLOWED_ORIGINS")
    if origins:
        data["cors"]["allowed_origins"] = tuple(
            origin.strip() for origin in origins.split(",") if origin.strip()
        )

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


def _set(data: dict, section: str, key: str, value: str | None) -> None:
    if value is not None and value != "":
        data[section][key] = value
