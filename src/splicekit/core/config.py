"""Application state and configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from splicekit.core.base import BaseConfig, BaseState
from splicekit.core.log import Logger, install_logger
from splicekit.core.patcher import Patcher
from splicekit.core.yaml_settings import YamlWithIncludesSettingsSource

# Modules available for template substitution in YAML files
# Usage: {platformdirs.user_log_dir}, {os.getcwd}, {Path.home}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class PatcherConfig(BaseConfig):
    """Settings for patchers built from configuration."""

    encoding: str = Field(
        default="utf-8",
        description="Codec used to turn text edits and inputs into bytes",
    )
    copy_data: bool = Field(
        default=False,
        description=(
            "Copy replacement buffers when an edit is recorded instead "
            "of holding a reference to the caller's buffer"
        ),
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default_factory=Logger,
        description="Logger configuration and runtime instance",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "splicekit"
        ),
        description=(
            "Root directory for all log files "
            "(supports {platformdirs.*} templates)"
        ),
    )
    run_name: str = Field(
        default="splicekit",
        description="Name of this run, used in log paths",
    )
    patcher: PatcherConfig = Field(
        default_factory=PatcherConfig,
        description="Patcher settings",
    )

    def setup_logger(self) -> Logger:
        """Install the configured logger as the global logger.

        Called once templates in log_root are resolved, so log files
        land under the final directory.
        """
        return install_logger(self.logger, self.log_root, self.run_name)

    def new_patcher(self) -> Patcher:
        """Create an empty Patcher using the patcher settings."""
        return Patcher(
            encoding=self.patcher.encoding,
            copy_data=self.patcher.copy_data,
        )


# ============================================================
# RUNTIME STATE MODELS (mutable during command execution)
# ============================================================

class ApplyState(BaseState):
    """Runtime state of the apply command."""

    status: str = Field(
        default="pending",
        description="Command status: pending, running, complete, failed",
    )
    edits_recorded: int = Field(
        default=0,
        description="Number of edits recorded from the script",
    )
    input_size: int = Field(
        default=0,
        description="Input size in bytes",
    )
    output_size: int = Field(
        default=0,
        description="Output size in bytes",
    )
    error: str | None = Field(
        default=None,
        description="Error text when the command failed",
    )


class Runtime(BaseModel):
    """Runtime state organized by command."""

    apply: ApplyState = Field(
        default_factory=ApplyState,
        description="Apply command runtime state",
    )


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Configuration plus runtime state, passed to every command.

    Loaded by pydantic-settings from, highest priority first:
    init arguments and CLI flags, environment variables
    (SPLICEKIT_CONFIG__PATCHER__ENCODING), .env, YAML files (see
    YamlWithIncludesSettingsSource) and file secrets. String and Path
    values may use {config.*} and {platformdirs.*} templates.
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)",
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during command execution)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge. "
            "Use --include on CLI or include: in YAML files."
        ),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SPLICEKIT_",
        env_nested_delimiter="__",
        cli_parse_args=True,
        cli_implicit_flags=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> "State":
        """Replace {a.b.c} templates, then install the logger."""
        self._substitute_recursive(self)
        self.config.setup_logger()
        return self

    def close(self):
        self.config.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False

    def _substitute_recursive(self, obj: Any) -> None:
        if isinstance(obj, BaseModel):
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute_value(value)
                if new_value is not value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute_value(obj[key])
        elif isinstance(obj, list):
            for i in range(len(obj)):
                obj[i] = self._substitute_value(obj[i])

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._substitute_string(value)
        if isinstance(value, Path):
            return Path(self._substitute_string(str(value)))
        if isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
        return value

    def _substitute_string(self, value: str) -> str:
        """Replace {field.path} templates with their values.

        References that do not resolve are left as written, which
        keeps format strings such as "{message}" intact.

        Examples:
            "{config.log_root}/runs" -> "/home/user/.local/state/splicekit/runs"
            "{platformdirs.user_cache_dir}" -> "/home/user/.cache/splicekit"
        """
        def replace_template(match):
            parts = match.group(1).split(".")

            if parts[0] in TEMPLATE_NAMESPACE:
                obj = TEMPLATE_NAMESPACE[parts[0]]
                parts = parts[1:]
            else:
                obj = self

            try:
                for part in parts:
                    obj = getattr(obj, part)
                if callable(obj):
                    try:
                        obj = obj("splicekit", appauthor=False)
                    except TypeError:
                        obj = obj()
                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        return re.sub(r'\{([A-Za-z_][A-Za-z0-9._]*)\}', replace_template, value)


__all__ = [
    "PatcherConfig",
    "Config",
    "ApplyState",
    "Runtime",
    "State",
]
