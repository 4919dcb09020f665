from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

import yaml

from combinator.domain.bitmap import (
    DEFAULT_ALPHA_MIN,
    DEFAULT_CELL_SIZE,
    DEFAULT_CHANNEL_MAX,
    STRICT_CHANNEL_MAX,
    InkThreshold,
    check_cell_size,
)
from combinator.domain.enums import ZipSource
from combinator.domain.errors import ConfigError

logger = logging.getLogger(__name__)


CONFIG_FILENAME: Final[str] = "config.yaml"

_DEFAULT_OUT_DIR: Final[str] = "dist"
_DEFAULT_WORKERS: Final[int] = 4


@dataclass(frozen=True)
class GlobalConfig:
    """Workspace-wide settings.

    Notes:
      - `ink` decides which pixels count as set bits.
      - `workers == 1` disables the thread pool.
    """

    size: int = DEFAULT_CELL_SIZE
    warn_no_match: bool = False
    out_dir: str = _DEFAULT_OUT_DIR
    ink: InkThreshold = field(default_factory=InkThreshold)
    workers: int = _DEFAULT_WORKERS
    zip_source: ZipSource = ZipSource.COMPLETE

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "GlobalConfig":
        """Validate a parsed config.yaml mapping.

        Raises:
            ConfigError: on any unknown key or out-of-range value.
        """
        known = {"size", "warn_no_match", "out_dir", "ink_threshold", "alpha_threshold", "workers", "zip_source"}
        unknown = sorted(set(data) - known, key=str)
        if unknown:
            raise ConfigError("{}: unknown setting(s): {}".format(CONFIG_FILENAME, ", ".join(map(str, unknown))))

        size = check_cell_size(data.get("size", DEFAULT_CELL_SIZE))

        warn_no_match = data.get("warn_no_match", False)
        if not isinstance(warn_no_match, bool):
            raise ConfigError("{}: warn_no_match must be true or false".format(CONFIG_FILENAME))

        out_dir = data.get("out_dir", _DEFAULT_OUT_DIR)
        if not isinstance(out_dir, str) or not out_dir.strip():
            raise ConfigError("{}: out_dir must be a non-empty string".format(CONFIG_FILENAME))

        channel_max = data.get("ink_threshold", DEFAULT_CHANNEL_MAX)
        if channel_max == "strict":
            channel_max = STRICT_CHANNEL_MAX
        alpha_min = data.get("alpha_threshold", DEFAULT_ALPHA_MIN)
        ink = InkThreshold(
            channel_max=_int_in_range("ink_threshold", channel_max, 1, 256),
            alpha_min=_int_in_range("alpha_threshold", alpha_min, 0, 255),
        )

        workers = _int_in_range("workers", data.get("workers", _DEFAULT_WORKERS), 1, 256)

        try:
            zip_source = ZipSource(data.get("zip_source", ZipSource.COMPLETE.value))
        except ValueError as e:
            raise ConfigError(
                "{}: zip_source must be one of {}".format(CONFIG_FILENAME, ", ".join(z.value for z in ZipSource))
            ) from e

        return cls(
            size=size,
            warn_no_match=warn_no_match,
            out_dir=out_dir,
            ink=ink,
            workers=workers,
            zip_source=zip_source,
        )


def _int_in_range(key: str, value: Any, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise ConfigError("{}: {} must be an integer in {}..{}, got {!r}".format(CONFIG_FILENAME, key, low, high, value))
    return value


def read_yaml_mapping(path: Path) -> dict[str, Any] | None:
    """Load a YAML mapping, or None if the file does not exist.

    An empty file is an empty mapping. Anything else that is not a mapping is
    a configuration error.
    """
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError("{}: malformed YAML: {}".format(path, e)) from e
    except UnicodeDecodeError as e:
        raise ConfigError("{}: not valid UTF-8: {}".format(path, e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("{}: expected a mapping at the top level".format(path))
    return data


class SettingsStore:
    """YAML-backed global settings for one workspace.

    Responsibilities:
      - Locate <workspace>/config.yaml
      - Fall back to defaults when the file is missing
    """

    def __init__(self, workspace: str | Path) -> None:
        self._path = Path(workspace) / CONFIG_FILENAME

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        return read_yaml_mapping(self._path) or {}

    def global_config(self, **overrides: Any) -> GlobalConfig:
        """Validate config.yaml, with `overrides` (config.yaml keys) taking precedence.

        None overrides are ignored. Overrides go through the same checks as the file.
        """
        data = self.load()
        if not data:
            logger.debug("No %s in workspace; using defaults", CONFIG_FILENAME)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return GlobalConfig.from_mapping(data)
