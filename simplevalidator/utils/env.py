"""
SimpleValidator Environment Access
==================================

Reads library settings from environment variables and optional
``.env`` files.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, Optional, Union


class Env:
    """
    Environment variable reader scoped to a prefix.

    Values from a loaded ``.env`` file are used only when the process
    environment does not define the variable.

    Example:
        env = Env(prefix="SIMPLEVALIDATOR_").load()

        strict = env.bool("STRICT", default=False)   # SIMPLEVALIDATOR_STRICT
        tag = env.str("DEFAULT_FILTER", default="string")
    """

    _VARIABLE = re.compile(r"\$\{([^}]+)\}|\$(\w+)")

    def __init__(
        self,
        prefix: str = "",
        env_file: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize environment reader.

        Args:
            prefix: Prepended to every key looked up
            env_file: Path to .env file
        """
        self.prefix = prefix
        self._env_file = Path(env_file) if env_file else None
        self._file_values: Dict[str, str] = {}

    def load(self, env_file: Optional[Union[str, Path]] = None) -> "Env":
        """
        Load values from a .env file.

        A missing file is not an error: settings fall back to defaults.

        Returns:
            Self for chaining
        """
        path = Path(env_file) if env_file else self._env_file

        if path and path.exists():
            self._load_file(path)

        return self

    def _load_file(self, path: Path) -> None:
        for line in path.read_text().splitlines():
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            if line.startswith("export "):
                line = line[7:]

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
                value = value[1:-1]

            self._file_values[key] = self._expand_variables(value)

    def _expand_variables(self, value: str) -> str:
        """Expand ${VAR} and $VAR references."""

        def replace(match: "re.Match[str]") -> str:
            name = match.group(1) or match.group(2)
            return os.getenv(name, self._file_values.get(name, ""))

        return self._VARIABLE.sub(replace, value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get raw value of ``prefix + key``."""
        name = self.prefix + key
        return os.getenv(name, self._file_values.get(name, default))

    def str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get string value."""
        return self.get(key, default)

    def bool(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        """
        Get boolean value.

        Raises:
            ValueError: If the value is not a recognized boolean word
        """
        value = self.get(key)

        if value is None:
            return default

        lowered = value.strip().lower()

        if lowered in ("true", "1", "yes", "on", "enabled"):
            return True

        if lowered in ("false", "0", "no", "off", "disabled", ""):
            return False

        raise ValueError(
            f"Environment variable '{self.prefix + key}' is not a valid boolean"
        )

    def __contains__(self, key: str) -> bool:
        name = self.prefix + key
        return name in os.environ or name in self._file_values
