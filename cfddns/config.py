"""Configuration management for cfddns."""

from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from cfddns.exceptions import ConfigError
from cfddns.models import AddressFamily

CONFIG_FILE_NAMES = ("cfddns.yaml", "cfddns.yml")


class Settings(BaseSettings):
    """Runtime settings, read once at startup.

    Sources in priority order: process environment, ``.env`` in the working
    directory, then values loaded from a YAML file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    # IP lookup endpoints, each may list several URLs separated by ';'
    ipv4_endpoint: str | None = Field(None, validation_alias="IPV4_ENDPOINT")
    ipv6_endpoint: str | None = Field(None, validation_alias="IPV6_ENDPOINT")

    # Cloudflare
    zone_id: str = Field("", validation_alias="CF_DNS_ZONE_ID")
    api_token: str = Field("", validation_alias="CF_DNS_API_TOKEN")
    hosts: str = Field("", validation_alias="CF_DNS_HOSTS")
    create_if_missing: bool = Field(
        False, validation_alias="CF_DNS_CREATE_HOST_RECORDS"
    )
    ttl: int = Field(1, validation_alias="CF_DNS_TTL")
    proxied: bool = Field(False, validation_alias="CF_DNS_PROXIED")

    # Runtime
    repeat_interval_seconds: int = Field(
        0, ge=0, validation_alias="REPEAT_INTERVAL_SECONDS"
    )
    http_timeout_seconds: float = Field(
        10.0, gt=0, validation_alias="HTTP_TIMEOUT_SECONDS"
    )
    max_attempts: int = Field(3, ge=1, validation_alias="CF_DNS_MAX_ATTEMPTS")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs and must not shadow the environment.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @field_validator("hosts", mode="before")
    @classmethod
    def join_host_list(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return ";".join(str(item) for item in v)
        return v

    @field_validator("ipv4_endpoint", "ipv6_endpoint", mode="before")
    @classmethod
    def blank_endpoint_is_unset(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            v = ";".join(str(item) for item in v)
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("ipv4_endpoint", "ipv6_endpoint")
    @classmethod
    def check_endpoint_urls(cls, v: str | None) -> str | None:
        if v is None:
            return v
        problems = []
        for url in v.split(";"):
            problem = _endpoint_problem(url.strip()) if url.strip() else None
            if problem:
                problems.append(problem)
        if problems:
            raise ValueError("; ".join(problems))
        return v

    @field_validator("ttl")
    @classmethod
    def check_ttl(cls, v: int) -> int:
        if v != 1 and not 60 <= v <= 86400:
            raise ValueError("must be 1 (automatic) or between 60 and 86400")
        return v

    @model_validator(mode="after")
    def check_required(self) -> "Settings":
        problems = []
        if not self.endpoints:
            problems.append("at least one of IPV4_ENDPOINT or IPV6_ENDPOINT must be set")
        if not self.zone_id.strip():
            problems.append("CF_DNS_ZONE_ID is required")
        if not self.api_token.strip():
            problems.append("CF_DNS_API_TOKEN is required")
        if not self.hostnames:
            problems.append("CF_DNS_HOSTS must list at least one hostname")
        if problems:
            raise ValueError("; ".join(problems))
        return self

    @property
    def hostnames(self) -> list[str]:
        """Configured hostnames in order. Duplicates are kept."""
        return [name.strip() for name in self.hosts.strip().split(";") if name.strip()]

    @property
    def endpoints(self) -> dict[AddressFamily, list[str]]:
        """Endpoint URLs per configured family. Unconfigured families are absent."""
        configured = {}
        for family, value in (
            (AddressFamily.V4, self.ipv4_endpoint),
            (AddressFamily.V6, self.ipv6_endpoint),
        ):
            urls = [url.strip() for url in (value or "").split(";") if url.strip()]
            if urls:
                configured[family] = urls
        return configured


def _endpoint_problem(url: str) -> str | None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        return f"'{url}' is not a valid URL: {e}"
    if parsed.scheme not in ("http", "https") or not parsed.host:
        return f"'{url}' must be an http or https URL with a host"
    return None


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find cfddns.yaml in current or parent directories."""
    search_path = start_path or Path.cwd()

    for path in [search_path, *search_path.parents]:
        for name in CONFIG_FILE_NAMES:
            config_file = path / name
            if config_file.exists():
                return config_file

    return None


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load settings values from a YAML file."""
    if not config_path.exists():
        raise ConfigError([f"Config file not found: {config_path}"])

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError([f"Could not parse {config_path}: {e}"]) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError([f"{config_path} must contain a mapping of settings"])
    return data


def load_settings(config_path: Path | None = None) -> Settings:
    """Load and validate settings.

    Raises:
        ConfigError: Listing every problem found.
    """
    if config_path is None:
        config_path = find_config_file()
    file_values = load_config_file(config_path) if config_path else {}

    try:
        return Settings(**file_values)
    except ValidationError as e:
        raise ConfigError(_describe(e)) from e


def _describe(error: ValidationError) -> list[str]:
    problems = []
    for item in error.errors():
        message = item["msg"].removeprefix("Value error, ")
        location = ".".join(str(part) for part in item["loc"])
        if location:
            problems.append(f"{location}: {message}")
        else:
            problems.extend(message.split("; "))
    return problems
