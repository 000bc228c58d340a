from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = ".video-info"
ERROR_STATUS_MODES: frozenset[str] = frozenset({"uniform", "per_kind"})
TELEMETRY_SINKS: frozenset[str] = frozenset({"none", "log"})


def _resolve_path(value: str | Path) -> Path:
    return Path(value).expanduser().resolve()


def _parse_bool_with_default(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value == 1:
            return True
        if value == 0:
            return False
        return default
    if not isinstance(value, str):
        return default

    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _normalize_choice(value: Any, *, env_name: str, choices: frozenset[str]) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{env_name} must be a string.")
    normalized = value.strip().lower()
    if normalized in choices:
        return normalized
    raise ValueError(f"{env_name} must be set to: {', '.join(sorted(choices))}.")


class AppSettings(BaseSettings):
    """
    Runtime configuration, read from `VIDEO_INFO_*` environment variables.

    Upstream hostnames are fixed constants in the services and are not
    configurable here.
    """

    model_config = SettingsConfigDict(
        env_prefix="VIDEO_INFO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Outbound HTTP.
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout applied by the HTTP client to each upstream request.",
    )
    user_agent: str = Field(
        default="video-info-resolver/0.1",
        description="User-Agent sent with upstream requests.",
    )

    # Error responses.
    error_status_mode: Literal["uniform", "per_kind"] = Field(
        default="uniform",
        description=(
            "`uniform` answers every pipeline failure with `error_status_code`; "
            "`per_kind` maps failures to 400/404/502 by error kind."
        ),
    )
    error_status_code: int = Field(
        default=401,
        ge=400,
        le=599,
        description="Status code used for every failure when error_status_mode=uniform.",
    )

    # Logging.
    log_dir: Path = Field(
        default=Path(DEFAULT_DATA_DIR) / "logs",
        description="Directory for JSON log files.",
    )
    log_level: str = Field(
        default="INFO",
        description="Console log level (stdout).",
    )

    # Telemetry.
    telemetry_enabled: bool = Field(
        default=True,
        description="Enable lightweight internal telemetry events.",
    )
    telemetry_sink: Literal["none", "log"] = Field(
        default="log",
        description=(
            "Telemetry sink backend. `log` emits structured telemetry locally; "
            "`none` disables sink output."
        ),
    )

    @field_validator("error_status_mode", mode="before")
    @classmethod
    def _normalize_error_status_mode(cls, value: Any) -> str:
        return _normalize_choice(
            value,
            env_name="VIDEO_INFO_ERROR_STATUS_MODE",
            choices=ERROR_STATUS_MODES,
        )

    @field_validator("telemetry_sink", mode="before")
    @classmethod
    def _normalize_telemetry_sink(cls, value: Any) -> str:
        return _normalize_choice(
            value,
            env_name="VIDEO_INFO_TELEMETRY_SINK",
            choices=TELEMETRY_SINKS,
        )

    @field_validator("user_agent", mode="before")
    @classmethod
    def _normalize_user_agent(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("VIDEO_INFO_USER_AGENT must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("VIDEO_INFO_USER_AGENT must not be empty.")
        return normalized

    @field_validator("log_dir", mode="before")
    @classmethod
    def _normalize_log_dir(cls, value: str | Path) -> Path:
        return _resolve_path(value)

    @field_validator("telemetry_enabled", mode="before")
    @classmethod
    def _normalize_telemetry_enabled(cls, value: Any) -> bool:
        return _parse_bool_with_default(value, default=True)


def load_settings() -> AppSettings:
    settings = AppSettings()
    if "log_dir" not in settings.model_fields_set:
        settings = settings.model_copy(update={"log_dir": _resolve_path(settings.log_dir)})
    return settings
