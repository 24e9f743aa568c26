# pyagree/config.py
import math
import multiprocessing
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EstimationSettings(BaseSettings):
    """Defaults for the inference epilogue of every estimator"""
    model_config = SettingsConfigDict(
        env_prefix="PYAGREE_ESTIMATION_",
        case_sensitive=False,
    )

    conflev: float = Field(
        default=0.95,
        gt=0,
        lt=1,
        description="Confidence level of the reported interval",
    )
    population_size: float = Field(
        default=math.inf,
        gt=0,
        description="Finite subject population size N (inf = no correction)",
    )
    ci_decimals: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Rounding used when formatting confidence intervals",
    )
    degenerate_variance: Literal["warn", "raise"] = Field(
        default="warn",
        description="What to do when the standard error is exactly zero",
    )


class WeightSettings(BaseSettings):
    """Weight scheme resolution settings"""
    model_config = SettingsConfigDict(
        env_prefix="PYAGREE_WEIGHTS_",
        case_sensitive=False,
    )

    default_scheme: str = Field(
        default="unweighted",
        description="Scheme used when an estimator is called with weights=None",
    )
    unknown_scheme_policy: Literal["error", "identity"] = Field(
        default="error",
        description="'identity' silently substitutes identity weights for unknown names",
    )

    @field_validator("default_scheme")
    @classmethod
    def validate_default_scheme(cls, v: str) -> str:
        from pyagree.ira.weights import WeightScheme

        name = v.strip().lower()
        if name not in WeightScheme.names():
            raise ValueError(
                f"default_scheme must be one of: {', '.join(WeightScheme.names())}"
            )
        return name


class ComputeSettings(BaseSettings):
    """Settings for running several estimators side by side"""
    model_config = SettingsConfigDict(
        env_prefix="PYAGREE_COMPUTE_",
        case_sensitive=False,
    )

    n_jobs: int = Field(
        default=1,
        description="Number of estimators run concurrently (-1 = all CPUs)",
        json_schema_extra={"example": 4}
    )

    @field_validator("n_jobs")
    @classmethod
    def validate_n_jobs(cls, v: int) -> int:
        if v == -1:
            return multiprocessing.cpu_count()
        elif v < 1:
            raise ValueError("n_jobs must be -1 or a positive integer")
        return min(v, multiprocessing.cpu_count())


class PyagreeSettings(BaseSettings):
    """Main configuration for pyagree"""

    model_config = SettingsConfigDict(
        env_prefix="PYAGREE_",

        # Later files take priority
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",

        # PYAGREE_ESTIMATION__CONFLEV=0.9
        env_nested_delimiter="__",

        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )

    estimation: EstimationSettings = Field(default_factory=EstimationSettings)
    weights: WeightSettings = Field(default_factory=WeightSettings)
    compute: ComputeSettings = Field(default_factory=ComputeSettings)

    debug: bool = Field(default=False)
    log_level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = (
        Field(default="WARNING")
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """
        Define the priority of settings sources.
        Higher priority sources override lower priority ones.
        """
        return (
            init_settings,      # 1. Arguments passed to constructor
            env_settings,       # 2. Environment variables
            dotenv_settings,    # 3. .env file
            file_secret_settings,  # 4. Secret files
        )


@lru_cache(maxsize=1)
def get_settings() -> PyagreeSettings:
    """Return the process-wide settings, loaded once from the environment."""
    return PyagreeSettings()


def reset_settings() -> None:
    """Forget cached settings so the next ``get_settings`` call reloads them."""
    get_settings.cache_clear()
