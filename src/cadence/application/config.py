from pathlib import Path
from typing import Any, Literal

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class CadenceConfig(BaseSettings):
    """
    Runtime configuration for cadence.
    Supports loading from:
    1. Environment variables (CADENCE_*)
    2. Config file (~/.config/cadence/config.toml)
    3. Manual overrides (CLI)

    Scheduling constants are fixed and deliberately absent here.
    """

    model_config = SettingsConfigDict(
        env_prefix="CADENCE_",
        extra="ignore",
    )

    # What to do with corrupted scheduling fields read from storage
    invalid_card_policy: Literal["reject", "clamp"] = "reject"

    # 0 = warnings only, 1 = info, 2+ = debug; the CLI -v flag overrides it
    verbose: int = 1

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

        # Home is resolved per call so tests can redirect it
        toml_files = [
            Path.home() / ".config/cadence/config.toml",
            Path.home() / ".cadence.toml",
        ]
        toml_file = next((f for f in toml_files if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> CadenceConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in CadenceConfig
    2. ~/.config/cadence/config.toml or ~/.cadence.toml (first that exists)
    3. Environment variables (CADENCE_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes None for options the user did not set
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return CadenceConfig(**overrides)
