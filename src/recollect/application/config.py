from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from recollect.domain.constants import DEFAULT_NEW_CARDS_PER_DAY, DEFAULT_REVIEWS_PER_DAY
from recollect.domain.models import DeckSettings, OrderMode


def config_file() -> Path:
    return Path.home() / ".config/recollect/config.toml"


class AppConfig(BaseSettings):
    """
    Configuration model for recollect.
    Supports loading from:
    1. Environment variables (RECOLLECT_*)
    2. Config file (~/.config/recollect/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="RECOLLECT_",
        extra="ignore",
    )

    # Paths
    data_file: Path = Field(
        default_factory=lambda: Path.home() / ".local/share/recollect/collection.json"
    )

    # Scheduling defaults for decks that carry no settings of their own
    new_cards_per_day: int = Field(default=DEFAULT_NEW_CARDS_PER_DAY, ge=0)
    reviews_per_day: int = Field(default=DEFAULT_REVIEWS_PER_DAY, ge=0)
    card_order: OrderMode = OrderMode.RANDOM

    # Fixed seed makes queue shuffling reproducible
    seed: int | None = None
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

        # Earlier sources win: CLI overrides, then env, then the TOML file.
        toml_file = config_file()
        if toml_file.exists():
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()

    def default_deck_settings(self) -> DeckSettings:
        return DeckSettings(
            new_cards_per_day=self.new_cards_per_day,
            reviews_per_day=self.reviews_per_day,
            card_order=self.card_order,
        )


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/recollect/config.toml (if exists)
    3. Environment variables (RECOLLECT_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes None for options the user did not set
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
