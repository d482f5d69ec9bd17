from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from sm15.domain import constants as c


def _config_files() -> list[Path]:
    return [
        Path.home() / ".config/sm15/config.toml",
        Path.home() / ".sm15.toml",
    ]


class EngineConfig(BaseSettings):
    """
    Tunable heuristics of the scheduling engine.
    Supports loading from:
    1. Manual overrides (keyword arguments)
    2. Environment variables (SM15_*)
    3. Config file (~/.config/sm15/config.toml or ~/.sm15.toml)
    """

    model_config = SettingsConfigDict(
        env_prefix="SM15_",
        extra="ignore",
    )

    # Memory model
    target_forgetting_index: float = Field(default=c.TARGET_FORGETTING_INDEX, gt=0, lt=1)
    initial_stability: float = Field(default=c.DEFAULT_STABILITY, gt=0)
    min_stability: float = Field(default=c.MIN_STABILITY, gt=0)
    max_stability: float = Field(default=c.MAX_STABILITY, gt=0)
    stability_gain: float = Field(default=c.STABILITY_GAIN, ge=0)
    stability_loss: float = Field(default=c.STABILITY_LOSS, ge=0, lt=1)

    # Difficulty tracker
    short_interval_days: int = Field(default=c.SHORT_INTERVAL_DAYS, ge=1)
    medium_interval_days: int = Field(default=c.MEDIUM_INTERVAL_DAYS, ge=1)
    short_interval_weight: float = Field(default=c.SHORT_INTERVAL_WEIGHT, ge=0, le=1)
    medium_interval_weight: float = Field(default=c.MEDIUM_INTERVAL_WEIGHT, ge=0, le=1)
    long_interval_weight: float = Field(default=c.LONG_INTERVAL_WEIGHT, ge=0, le=1)
    lapse_difficulty_step: float = Field(default=c.LAPSE_DIFFICULTY_STEP, ge=0)
    lapse_difficulty_per_lapse: float = Field(default=c.LAPSE_DIFFICULTY_PER_LAPSE, ge=0)

    # Interval calculator
    grade_multipliers: dict[int, float] = Field(
        default_factory=lambda: dict(c.GRADE_MULTIPLIERS)
    )

    # Optimal factor matrix
    factor_retention: float = Field(default=c.FACTOR_RETENTION, ge=0, lt=1)

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

        # First existing file wins
        toml_file = next((f for f in _config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("grade_multipliers")
    @classmethod
    def check_grade_multipliers(cls, v: dict[int, float]) -> dict[int, float]:
        expected = set(range(c.LAPSE_GRADE + 1, c.MAX_GRADE + 1))
        if set(v) != expected:
            raise ValueError(f"grade_multipliers needs exactly the grades {sorted(expected)}")
        if any(m <= 0 for m in v.values()):
            raise ValueError("grade multipliers must be positive")
        return dict(sorted(v.items()))

    @model_validator(mode="after")
    def check_interval_thresholds(self) -> "EngineConfig":
        if self.short_interval_days >= self.medium_interval_days:
            raise ValueError("short_interval_days must be below medium_interval_days")
        if self.min_stability >= self.max_stability:
            raise ValueError("min_stability must be below max_stability")
        return self


def resolve_config(overrides: dict[str, Any] | None = None) -> EngineConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in EngineConfig
    2. ~/.config/sm15/config.toml (if exists)
    3. Environment variables (SM15_*)
    4. overrides (e.g. passed from Typer)
    """
    # Typer passes None for options that were not given
    cleaned = {k: v for k, v in (overrides or {}).items() if v is not None}
    return EngineConfig(**cleaned)
