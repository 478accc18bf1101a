"""Typed configuration schema and loader for the generator."""

from __future__ import annotations

import os
from collections.abc import Mapping
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, conint, constr, field_validator

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class GenerationSettings(BaseModel):
    """How templates are read and how many documents are produced."""

    prefix: constr(min_length=1)
    count: conint(ge=0)

    model_config = ConfigDict(extra="forbid")


class OutputSettings(BaseModel):
    """Where generated documents go."""

    path: str
    echo: bool
    encoding: str
    sort_keys: bool

    model_config = ConfigDict(extra="forbid")


class SeedSettings(BaseModel):
    """Optional seed making generation reproducible."""

    env: str
    value: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("value", mode="before")
    @classmethod
    def _numeric_seed(cls, v: Any) -> Any:
        # YAML reads `value: 42` as an int
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class ConfigModel(BaseModel):
    """Top-level configuration model."""

    schema_version: conint(ge=1)
    generation: GenerationSettings
    output: OutputSettings
    seed: SeedSettings

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Loader utilities
# ---------------------------------------------------------------------------


def deep_merge_dicts(a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge mapping ``b`` onto ``a`` returning a new dict."""

    result: dict[str, Any] = dict(a)
    for key, b_val in b.items():
        if key in result and isinstance(result[key], dict) and isinstance(b_val, dict):
            result[key] = deep_merge_dicts(result[key], b_val)
        else:
            result[key] = b_val
    return result


def load_config(
    path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ConfigModel:
    """Load configuration from defaults and optional user overrides.

    Precedence of sources: package ``defaults.yml`` < user-provided YAML <
    environment variable named by ``seed.env``.
    """

    with (
        importlib_resources.files("rjg.config")
        .joinpath("defaults.yml")
        .open("r", encoding="utf-8") as f
    ):
        defaults = yaml.safe_load(f) or {}

    if path is not None:
        with Path(path).open("r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        if not isinstance(overrides, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        merged = deep_merge_dicts(defaults, overrides)
    else:
        merged = defaults

    cfg = ConfigModel.model_validate(merged)

    environ = env if env is not None else os.environ
    if cfg.seed.env in environ:
        cfg.seed.value = environ[cfg.seed.env]

    return cfg


__all__ = [
    "ConfigModel",
    "GenerationSettings",
    "OutputSettings",
    "SeedSettings",
    "deep_merge_dicts",
    "load_config",
]
