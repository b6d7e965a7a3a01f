"""Define typed configuration for texture extraction runs.

Use `ExtractConfig` to load, validate, and persist runtime settings.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass, field

import yaml

from .core.io import write_bytes_atomic

logger = logging.getLogger("texpack.config")

_SUPPORTED_CONFIG_VERSION = 1
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class ExtractOptions:
    """Store per-record extraction policy."""

    # False downgrades not-implemented container families to a logged skip.
    fail_on_unimplemented: bool = True
    overwrite: bool = True


@dataclass
class ValidationConfig:
    """Store settings for checks run on written containers."""

    enabled: bool = False
    open_with_pillow: bool = True
    fail_on_issues: bool = False


@dataclass
class ExtractConfig:
    """Master extraction configuration."""

    config_version: int = 1
    manifest_path: str = "./textures.csv"
    output_dir: str = "./extracted"
    log_level: str = "INFO"
    log_file: str = ""
    max_workers: int = 4
    dry_run: bool = False

    extract: ExtractOptions = field(default_factory=ExtractOptions)
    validation: ValidationConfig = field(default_factory=ValidationConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "ExtractConfig":
        """Load configuration from YAML, or defaults when ``path`` does not exist."""
        config = cls()
        if os.path.exists(path):
            data = _read_yaml_mapping(path)
            _warn_if_newer(path, data.get("config_version", 1))
            _merge_dict_to_dataclass(config, data)
        else:
            logger.info("Config file '%s' not found. Using defaults.", path)
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{path}: {exc}") from exc
        return config

    def to_yaml(self, path: str):
        """Write configuration to a YAML file."""
        text = yaml.safe_dump(dataclasses.asdict(self), default_flow_style=False, sort_keys=False)
        write_bytes_atomic(path, text.encode("utf-8"))

    def validate(self):
        """Raise ValueError listing every invalid setting."""
        errors = []
        if not isinstance(self.config_version, int) or self.config_version < 1:
            errors.append("config_version must be a positive integer")
        if not (1 <= self.max_workers <= 64):
            errors.append(f"max_workers must be in [1, 64], got {self.max_workers}")
        if str(self.log_level).upper() not in _VALID_LOG_LEVELS:
            errors.append(
                f"log_level must be one of {sorted(_VALID_LOG_LEVELS)}, "
                f"got '{self.log_level}'"
            )
        if not self.output_dir:
            errors.append("output_dir must not be empty")

        if self.validation.fail_on_issues and not self.validation.enabled:
            logger.warning(
                "validation.fail_on_issues is set but validation is disabled. "
                "No output checks will run."
            )
        if not self.extract.fail_on_unimplemented:
            logger.info(
                "Unimplemented container families (PVR, ATC) will be skipped, not failed."
            )

        if errors:
            raise ValueError(
                "Configuration validation failed:\n" +
                "\n".join(f"  - {e}" for e in errors)
            )


def _read_yaml_mapping(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to parse YAML config '{path}': {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Config file '{path}' must contain a YAML mapping, got {type(data).__name__}"
        )
    return data


def _warn_if_newer(path: str, version):
    if isinstance(version, int) and version > _SUPPORTED_CONFIG_VERSION:
        logger.warning(
            "Config file '%s' declares config_version=%d; this build reads "
            "version %d and may ignore some settings.",
            path, version, _SUPPORTED_CONFIG_VERSION,
        )


def _merge_dict_to_dataclass(obj, data: dict, _path: str = ""):
    for key, value in data.items():
        full_key = f"{_path}{key}"
        if not hasattr(obj, key):
            logger.warning("Unknown config key ignored: '%s'", full_key)
            continue
        field_val = getattr(obj, key)
        if dataclasses.is_dataclass(field_val):
            if isinstance(value, dict):
                _merge_dict_to_dataclass(field_val, value, f"{full_key}.")
            else:
                logger.warning(
                    "Config section '%s' must be a mapping, got %s. Using defaults.",
                    full_key, type(value).__name__,
                )
            continue
        if value is None:
            logger.warning(
                "Config key '%s' is null but field default is %s. Using default value.",
                full_key, type(field_val).__name__,
            )
            continue
        expected_type = type(field_val)
        # bool is an int subclass; keep the two apart.
        type_ok = isinstance(value, expected_type) and not (
            expected_type is int and isinstance(value, bool)
        )
        if not type_ok and expected_type is int and isinstance(value, float) \
                and value == int(value):
            value = int(value)
            type_ok = True
        if not type_ok:
            logger.warning(
                "Config type mismatch for '%s': expected %s, got %s (%r). "
                "Using default value.",
                full_key, expected_type.__name__, type(value).__name__, value,
            )
            continue
        setattr(obj, key, value)
