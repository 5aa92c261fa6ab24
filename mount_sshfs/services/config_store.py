"""YAML configuration file for mount options."""
import logging
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from mount_sshfs.shared.errors import ConfigurationParseError
from mount_sshfs.shared.models import MountOptions

logger = logging.getLogger(__name__)

# YAML key -> (MountOptions field, type, default)
_FIELDS: Dict[str, Tuple[str, type, Any]] = {
    "uid": ("uid", int, 0),
    "gid": ("gid", int, 0),
    "root": ("is_root", bool, False),
    "docker": ("is_for_docker", bool, False),
    "mount": ("mount_dir", str, ""),
    "remote": ("remote", str, ""),
}


def _coerce(key: str, value: Any, expected: type, default: Any) -> Any:
    if value is None:
        return default
    # bool is an int subclass; `uid: true` is still a mistake
    if expected is int and isinstance(value, bool):
        raise ConfigurationParseError(f"{key!r} must be an integer, got {value!r}")
    if not isinstance(value, expected):
        raise ConfigurationParseError(
            f"{key!r} must be of type {expected.__name__}, got {value!r}"
        )
    return value


def _yaml_problem(exc: yaml.YAMLError) -> str:
    """Describe a YAML error on one line, e.g. ``line 2, column 1: ...``."""
    problem = getattr(exc, "problem", None)
    mark = getattr(exc, "problem_mark", None)
    if problem and mark is not None:
        return f"line {mark.line + 1}, column {mark.column + 1}: {problem}"
    return " ".join(str(exc).split())


def options_from_mapping(data: Dict[str, Any]) -> MountOptions:
    """
    Build MountOptions from a parsed config mapping.

    Missing keys take their zero value; unknown keys are ignored.

    Raises:
        ConfigurationParseError: If a value has the wrong type
    """
    unknown = sorted(str(key) for key in data if key not in _FIELDS)
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

    kwargs = {}
    for key, (field_name, expected, default) in _FIELDS.items():
        kwargs[field_name] = _coerce(key, data.get(key), expected, default)
    return MountOptions(**kwargs)


class ConfigStore:
    """Load MountOptions from a YAML file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> MountOptions:
        """
        Read and parse the configuration file.

        Raises:
            ConfigurationParseError: If the file cannot be read, is not valid
                YAML, or does not describe a mapping of options
        """
        logger.info(f"reading configuration from {self.path}")
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigurationParseError(f"unable to read {self.path}: {exc}")

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationParseError(f"invalid YAML in {self.path}: {_yaml_problem(exc)}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationParseError(
                f"{self.path} must contain a mapping, got {type(data).__name__}"
            )
        return options_from_mapping(data)
