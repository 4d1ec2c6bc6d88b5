"""YAML configuration loading with include support."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

from toolpick.core.log import logger

DEFAULTS_FILE = Path(__file__).parent.parent / "defaults" / "default.yaml"
PROJECT_FILE = "toolpick.yaml"


def cli_includes(argv: list[str]) -> list[str]:
    """Collect the values of every `--include PATH` pair in argv."""
    includes = []
    i = 1
    while i < len(argv):
        if argv[i] == "--include" and i + 1 < len(argv):
            includes.append(argv[i + 1])
            i += 1
        i += 1
    return includes


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """YAML settings source layering several files.

    Loads, in increasing priority: package defaults, the user config
    file, ./toolpick.yaml, then any --include files from the command
    line. `include:` keys inside a file pull in further files relative
    to it. Everything is deep-merged; later files win.
    """

    def __init__(self, settings_cls: type[BaseSettings], yaml_file=None):
        includes = cli_includes(sys.argv)
        self.user_file = (
            Path(user_config_dir("toolpick", appauthor=False)) / PROJECT_FILE
        )
        self.project_file = Path(yaml_file or PROJECT_FILE)
        super().__init__(settings_cls, includes or None)

    def _read_files(self, files, deep_merge: bool = True):  # noqa: ARG002
        """Load and merge every configuration layer.

        Layers are always deep-merged.

        Args:
            files: --include file path(s), or None

        Returns:
            Deep-merged dictionary of all files found
        """
        files_to_load = [DEFAULTS_FILE, self.user_file, self.project_file]
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            files_to_load.extend(Path(f).expanduser() for f in files)

        result = {}
        for file_path in files_to_load:
            if not file_path.is_file():
                logger.debug(
                    "Configuration file not found (skipping)",
                    file=str(file_path),
                )
                continue
            data = self._load_file_recursive(file_path, set())
            result = self._deep_merge(result, data)
        return result

    def _load_file_recursive(
        self, filepath: Path, visited: set[Path]
    ) -> dict:
        """Load a file and resolve its include: directives.

        Raises:
            ValueError: If an include cycle is found
        """
        filepath = filepath.resolve()
        if filepath in visited:
            raise ValueError(f"Circular include: {filepath}")
        visited.add(filepath)

        with open(filepath, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Configuration file must contain a mapping: {filepath}"
            )

        includes = data.pop("include", None) or []
        if isinstance(includes, str):
            includes = [includes]

        merged = {}
        for inc in includes:
            inc_path = self._resolve_path(inc, filepath)
            merged = self._deep_merge(
                merged, self._load_file_recursive(inc_path, visited.copy())
            )
        # The including file overrides what it includes
        return self._deep_merge(merged, data)

    @staticmethod
    def _resolve_path(include_path: str, relative_to: Path) -> Path:
        path = Path(include_path).expanduser()
        if path.is_absolute():
            return path
        return (relative_to.parent / path).resolve()

    @classmethod
    def _deep_merge(cls, base: dict, override: dict) -> dict:
        """Return base updated recursively with override."""
        result = base.copy()
        for key, value in override.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = cls._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
