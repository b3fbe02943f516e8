from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from labas.domain.constants import (
    AUDIO_EXTENSION,
    DEFAULT_SESSION_SIZE,
    FALLBACK_URL,
    MEMO_TTL_HOURS,
    PRIMARY_URL,
    PROBE_TIMEOUT,
    REQUEST_TIMEOUT,
    SESSION_LOG_LIMIT,
)


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/labas/config.toml",
        Path.home() / ".labas.toml",
    ]


def _data_dir() -> Path:
    return Path.home() / ".local/share/labas"


class AppConfig(BaseSettings):
    """
    Configuration model for labas.
    Supports loading from:
    1. Environment variables (LABAS_*)
    2. Config file (~/.config/labas/config.toml or ~/.labas.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="LABAS_",
        extra="ignore",
    )

    # Audio endpoints
    primary_url: str = PRIMARY_URL
    fallback_url: str = FALLBACK_URL
    primary_cache_path: str = "audio_cache"
    fallback_cache_path: str = "audio_cache"
    audio_extension: str = AUDIO_EXTENSION
    probe_timeout: float = PROBE_TIMEOUT
    request_timeout: float = REQUEST_TIMEOUT
    memo_ttl_hours: float = MEMO_TTL_HOURS

    # Local storage
    cache_dir: Path = Field(default_factory=lambda: _data_dir() / "audio_cache")
    vocabulary_path: Path = Field(default_factory=lambda: _data_dir() / "vocabulary.json")
    session_log_path: Path = Field(default_factory=lambda: _data_dir() / "sessions.json")
    session_limit: int = SESSION_LOG_LIMIT
    session_size: int = DEFAULT_SESSION_SIZE

    # External commands ({text}, {output}, {url} placeholders)
    synth_command: str | None = None
    player_command: str | None = None
    local_voice_command: str | None = None

    # Server
    host: str = "127.0.0.1"
    port: int = 3001

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Find the first existing file
        toml_file = next((f for f in config_files() if f.exists()), None)

        # Earlier sources win: CLI overrides, then env, then the TOML file.
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("cache_dir", "vocabulary_path", "session_log_path", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("probe_timeout", "request_timeout", "memo_ttl_hours")
    @classmethod
    def must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("primary_url", "fallback_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/labas/config.toml (if exists)
    3. Environment variables (LABAS_*)
    4. cli_overrides (passed from Typer), ignoring None values
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
