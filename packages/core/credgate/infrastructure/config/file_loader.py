"""Reads validation settings from a YAML or JSON file."""

import json
import os
from collections.abc import Callable
from pathlib import Path
from typing import IO, Any

import yaml

CONFIG_FILE_ENV = "CREDGATE_CONFIG_FILE"
"""Environment variable naming the settings file when no path is given."""


class ConfigurationError(Exception):
    """Settings could not be found, parsed or accepted."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)

    def __str__(self) -> str:
        if self.field:
            return f"Configuration error in field '{self.field}': {self.message}"
        return self.message


_PARSERS: dict[str, tuple[str, Callable[[IO[str]], Any], tuple[type[Exception], ...]]] = {
    ".yaml": ("YAML", yaml.safe_load, (yaml.YAMLError,)),
    ".yml": ("YAML", yaml.safe_load, (yaml.YAMLError,)),
    ".json": ("JSON", json.load, (json.JSONDecodeError,)),
}


class ConfigurationFileLoader:
    """Loads a flat mapping of setting names from a file.

    Settings may sit at the top level or under a ``credgate`` section, so the
    file can be shared with other services:

    ```yaml
    credgate:
      provider: anthropic
      probe_timeout_seconds: 5
    ```
    """

    SECTION = "credgate"

    def __init__(self, config_file_path: str | Path | None = None) -> None:
        """
        Args:
            config_file_path: Settings file. Falls back to CREDGATE_CONFIG_FILE.

        Raises:
            ConfigurationError: No path is available or the file does not exist.
        """
        config_file_path = config_file_path or os.getenv(CONFIG_FILE_ENV)
        if not config_file_path:
            raise ConfigurationError(
                f"Configuration file path not provided and {CONFIG_FILE_ENV} "
                "environment variable is not set"
            )

        self._path = Path(config_file_path)
        if not self._path.is_file():
            raise ConfigurationError(f"Configuration file not found: {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        """Parse the file and return its settings mapping.

        Raises:
            ConfigurationError: Unknown extension, unparseable content, or a
                document that is not a mapping.
        """
        suffix = self._path.suffix.lower()
        if suffix not in _PARSERS:
            raise ConfigurationError(
                f"Unsupported configuration file format: {suffix}. "
                f"Supported formats: {', '.join(_PARSERS)}"
            )
        format_name, parse, parse_errors = _PARSERS[suffix]

        try:
            with self._path.open("r", encoding="utf-8") as f:
                document = parse(f)
        except parse_errors as e:
            raise ConfigurationError(f"Invalid {format_name} format: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}") from e

        # An empty YAML file parses to None.
        if document is None:
            document = {}
        if not isinstance(document, dict):
            raise ConfigurationError(f"{format_name} document must be a mapping")

        section = document.get(self.SECTION, document)
        if not isinstance(section, dict):
            raise ConfigurationError("Configuration section must be a mapping", field=self.SECTION)
        return section
