# src/dbtest/core/config.py
"""
Configuration schema and loading for dbtest.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class DbtestSettings(BaseModel):
    """Where assertion files live and how they are merged."""

    model_config = {"frozen": True, "extra": "forbid"}

    resource_paths: tuple[Path, ...] = Field(
        default=(Path("resources"), Path("tests/resources")),
        description="Ordered resource search path; relative entries resolve against the working directory",
    )
    asserts_dir: str = Field(
        default="asserts",
        min_length=1,
        description="Directory name looked up inside each resource path",
    )
    file_prefix: str = Field(
        default="assert-",
        description="Assertion file names start with this prefix",
    )
    file_suffix: str = Field(
        default=".xml",
        min_length=1,
        description="Assertion file names end with this suffix",
    )
    duplicate_ids: Literal["last_wins", "error"] = Field(
        default="last_wins",
        description="What happens when two entries share an id",
    )

    @field_validator("resource_paths")
    @classmethod
    def validate_resource_paths_not_empty(cls, v: tuple[Path, ...]) -> tuple[Path, ...]:
        """At least one resource path is required."""
        if not v:
            raise ValueError("At least one resource path is required")
        return v

    @field_validator("asserts_dir")
    @classmethod
    def validate_asserts_dir_is_name(cls, v: str) -> str:
        """asserts_dir is a single directory name, not a path."""
        if "/" in v or "\\" in v:
            raise ValueError(f"asserts_dir must be a directory name, got {v!r}")
        return v


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Unset variables without a default are left as written.
    """

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        default = match.group(2)
        if default is not None:
            return default
        return match.group(0)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_VAR_PATTERN.sub(replacer, value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def load_settings(config_path: Path | None = None) -> DbtestSettings:
    """Load settings from an optional YAML file with environment overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (DBTEST_*) - highest priority
    2. Config file, when given
    3. Defaults from Pydantic schema - lowest priority

    List values come from the environment in TOML syntax, e.g.
    ``DBTEST_RESOURCE_PATHS='["fixtures", "more_fixtures"]'``.

    Args:
        config_path: Path to YAML configuration file, or None for env/defaults only

    Returns:
        Validated DbtestSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config_path is given but doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="DBTEST",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys and mixes in its own bookkeeping
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    raw_config = _expand_env_vars(raw_config)

    return DbtestSettings(**raw_config)
