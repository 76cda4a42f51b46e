"""Layered TOML configuration.

The config directory holds an optional ``default.toml`` base layer and
optional per-environment overlays. The overlay is only applied when
``CONCIERGE_ENV`` names one, so a plain console run uses the base layer.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_DIR_VAR = "CONCIERGE_CONFIG_DIR"
ENVIRONMENT_VAR = "CONCIERGE_ENV"
BASE_LAYER = "default"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, section by section."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@dataclass(frozen=True)
class ConfigLayers:
    """The TOML files behind one settings load."""

    directory: Path
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "ConfigLayers":
        """Resolve the directory and overlay from ``CONCIERGE_*`` variables.

        Raises:
            FileNotFoundError: If CONCIERGE_CONFIG_DIR names a missing directory
        """
        override = os.environ.get(CONFIG_DIR_VAR)
        if override:
            directory = Path(override)
            if not directory.is_dir():
                raise FileNotFoundError(f"Config directory not found: {override}")
        else:
            directory = _find_config_dir(Path.cwd())
        return cls(directory=directory, environment=os.environ.get(ENVIRONMENT_VAR) or None)

    @property
    def files(self) -> list[Path]:
        """Candidate files, lowest precedence first."""
        names = [BASE_LAYER]
        if self.environment and self.environment != BASE_LAYER:
            names.append(self.environment)
        return [self.directory / f"{name}.toml" for name in names]

    def load(self) -> dict[str, Any]:
        """Read and merge the layers that exist.

        Raises:
            tomllib.TOMLDecodeError: If a layer is not valid TOML
        """
        config: dict[str, Any] = {}
        for path in self.files:
            if path.is_file():
                with path.open("rb") as f:
                    config = deep_merge(config, tomllib.load(f))
        return config


def _find_config_dir(start: Path) -> Path:
    # Running from a subdirectory of the checkout still finds config/
    for candidate in [start, *start.parents][:5]:
        if (candidate / "config").is_dir():
            return candidate / "config"
    return start / "config"


def load_config() -> dict[str, Any]:
    """Load the TOML layers selected by the environment."""
    return ConfigLayers.from_env().load()
