"""YAML configuration loading with include directive support."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

from splicekit.core.log import logger

DEFAULTS_FILE = Path(__file__).parent.parent / "defaults" / "default.yaml"


def merge_dicts(base: dict, override: dict) -> dict:
    """Return base with override merged in recursively (override wins)."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def cli_includes(argv: list[str]) -> list[str]:
    """Collect the values of every --include option in argv."""
    includes = []
    args = iter(argv[1:])
    for arg in args:
        if arg == "--include":
            value = next(args, None)
            if value is not None:
                includes.append(value)
    return includes


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """YAML settings source layering several config files.

    Deep merges, lowest priority first: package defaults, user config
    (platform config dir), project config (./splicekit.yaml), the
    yaml_file setting, then --include files from the command line.
    Each file may pull in others with an include: directive.
    """

    def __init__(
        self, settings_cls: type[BaseSettings], yaml_file=None
    ):
        base = yaml_file or settings_cls.model_config.get("yaml_file")
        files = [] if base is None else (
            [base] if isinstance(base, (str, os.PathLike)) else list(base)
        )
        files.extend(cli_includes(sys.argv))
        super().__init__(settings_cls, files or None)

    def _read_files(self, files, deep_merge: bool = True):  # noqa: ARG002
        files_to_load = [
            DEFAULTS_FILE,
            Path(user_config_dir("splicekit", appauthor=False))
            / "splicekit.yaml",
            Path("splicekit.yaml"),
        ]
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            files_to_load.extend(Path(f).expanduser() for f in files)

        result = {}
        for file_path in files_to_load:
            if file_path.is_file():
                logger.debug("Loading configuration", file=str(file_path))
                data = self._load_file_recursive(file_path, set())
                result = merge_dicts(result, data)
            else:
                logger.spew(
                    "Configuration file not found (skipping)",
                    file=str(file_path),
                )
        return result

    def _load_file_recursive(
        self, filepath: Path, visited: set[Path]
    ) -> dict:
        """Load a YAML file with its include: directives resolved.

        Included files are merged underneath the including file, so
        the including file wins on conflicting keys.

        Raises:
            ValueError: If an include cycle is found
        """
        filepath = filepath.resolve()
        if filepath in visited:
            raise ValueError(f"Circular include: {filepath}")
        visited = visited | {filepath}

        with open(filepath, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        includes = data.pop("include", [])
        if isinstance(includes, str):
            includes = [includes]

        merged = {}
        for inc in includes:
            inc_path = Path(inc).expanduser()
            if not inc_path.is_absolute():
                inc_path = filepath.parent / inc_path
            logger.debug(
                "Including configuration",
                included_from=str(filepath),
                include_file=str(inc_path),
            )
            merged = merge_dicts(
                merged, self._load_file_recursive(inc_path, visited)
            )

        return merge_dicts(merged, data)
