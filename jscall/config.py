"""
jscall Configuration Management.

Handles loading, saving, and validating configuration from various sources:
- Default values
- Configuration file (TOML)
- Environment variables
"""

from __future__ import annotations

import codecs
import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import tomli_w
import yaml

from jscall.bridge.protocol import (
    DEFAULT_ANCHOR_TAG,
    DEFAULT_REQUEST_TAG,
    DEFAULT_RESULT_TAG,
)

# Try to import tomllib (Python 3.11+) or tomli as fallback
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

logger = logging.getLogger(__name__)

# Configuration directory and file constants
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "jscall"
DEFAULT_CONFIG_FILE = "config.toml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# XML element names without namespace prefixes
_TAG_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9._-]*$")


@dataclass
class ValidationError:
    """Validation error for configuration."""
    field: str
    message: str
    severity: str  # "error" or "warning"

    def __str__(self) -> str:
        return f"[{self.severity.upper()}] {self.field}: {self.message}"


@dataclass
class MailboxConfig:
    """Configuration for the DOM mailbox."""

    # Element tags
    anchor_tag: str = DEFAULT_ANCHOR_TAG
    request_tag: str = DEFAULT_REQUEST_TAG
    result_tag: str = DEFAULT_RESULT_TAG

    # Embedded -> host channel (deprecated, off by default)
    result_channel_enabled: bool = False


@dataclass
class DocumentConfig:
    """Configuration for file-backed documents used by the CLI."""

    encoding: str = "utf-8"

    # Write the mutated document back to its source file
    write_back: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[Path] = None


@dataclass
class JSCallConfig:
    """Main configuration container for jscall."""

    config_dir: Path = DEFAULT_CONFIG_DIR

    # Sub-configurations
    mailbox: MailboxConfig = field(default_factory=MailboxConfig)
    document: DocumentConfig = field(default_factory=DocumentConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


SECTIONS = ("mailbox", "document", "logging")


def load_config(
    config_path: Optional[Path] = None,
    env_prefix: str = "JSCALL_"
) -> JSCallConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file
    3. Default values

    Args:
        config_path: Path to config file (default: ~/.config/jscall/config.toml)
        env_prefix: Prefix for environment variables

    Returns:
        Loaded configuration
    """
    config = JSCallConfig()

    if config_path is None:
        env_config_dir = os.environ.get(f"{env_prefix}CONFIG_DIR")
        if env_config_dir:
            config_path = Path(env_config_dir) / DEFAULT_CONFIG_FILE
        else:
            config_path = DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE

    if config_path.exists():
        config = _load_from_file(config_path, config)

    return _load_from_env(config, env_prefix)


def _load_from_file(path: Path, config: JSCallConfig) -> JSCallConfig:
    """Load configuration from a TOML file."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to load config from {path}: {e}")
        return config

    for section in SECTIONS:
        if section not in data:
            continue
        if not isinstance(data[section], dict):
            logger.warning(f"Ignoring config section {section}: expected a table")
            continue
        section_obj = getattr(config, section)
        for key, value in data[section].items():
            if hasattr(section_obj, key):
                setattr(section_obj, key, value)
            else:
                logger.warning(f"Ignoring unknown config key {section}.{key}")

    if isinstance(config.logging.file, str):
        config.logging.file = Path(config.logging.file)

    if "config_dir" in data:
        config.config_dir = Path(data["config_dir"])

    return config


def _env_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on")


def _load_from_env(config: JSCallConfig, prefix: str) -> JSCallConfig:
    """Load configuration from environment variables."""

    # Mailbox settings
    if env_val := os.environ.get(f"{prefix}ANCHOR_TAG"):
        config.mailbox.anchor_tag = env_val
    if env_val := os.environ.get(f"{prefix}REQUEST_TAG"):
        config.mailbox.request_tag = env_val
    if env_val := os.environ.get(f"{prefix}RESULT_TAG"):
        config.mailbox.result_tag = env_val
    if env_val := os.environ.get(f"{prefix}RESULT_CHANNEL"):
        config.mailbox.result_channel_enabled = _env_bool(env_val)

    # Document settings
    if env_val := os.environ.get(f"{prefix}DOCUMENT_ENCODING"):
        config.document.encoding = env_val
    if env_val := os.environ.get(f"{prefix}WRITE_BACK"):
        config.document.write_back = _env_bool(env_val)

    # Logging settings
    if env_val := os.environ.get(f"{prefix}LOG_LEVEL"):
        config.logging.level = env_val.upper()
    if env_val := os.environ.get(f"{prefix}LOG_FILE"):
        config.logging.file = Path(env_val)

    # Paths
    if env_val := os.environ.get(f"{prefix}CONFIG_DIR"):
        config.config_dir = Path(env_val)

    return config


def save_config(config: JSCallConfig, path: Optional[Path] = None) -> None:
    """
    Save configuration to a TOML file.

    Args:
        config: Configuration to save
        path: Path to save to (default: config.config_dir / config.toml)
    """
    if path is None:
        path = config.config_dir / DEFAULT_CONFIG_FILE

    path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "config_dir": str(config.config_dir),
        "mailbox": {
            "anchor_tag": config.mailbox.anchor_tag,
            "request_tag": config.mailbox.request_tag,
            "result_tag": config.mailbox.result_tag,
            "result_channel_enabled": config.mailbox.result_channel_enabled,
        },
        "document": {
            "encoding": config.document.encoding,
            "write_back": config.document.write_back,
        },
        "logging": {
            "level": config.logging.level,
            "format": config.logging.format,
        },
    }
    # TOML has no null
    if config.logging.file is not None:
        data["logging"]["file"] = str(config.logging.file)

    with open(path, "wb") as f:
        tomli_w.dump(data, f)


def get_default_config() -> JSCallConfig:
    """Get the default configuration."""
    return JSCallConfig()


# Global configuration instance (lazy-loaded)
_global_config: Optional[JSCallConfig] = None


def get_config() -> JSCallConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def set_config(config: JSCallConfig) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def clear_config_cache() -> None:
    """Clear the global configuration cache."""
    global _global_config
    _global_config = None


def set_config_value(section: str, key: str, value: str, config_path: Optional[Path] = None) -> None:
    """
    Set a single configuration value and persist to file.

    Args:
        section: Configuration section ('mailbox', 'document', 'logging')
        key: Configuration key within the section
        value: Value to set (converted to the type of the current value)
        config_path: Path to config file (default: DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE)
    """
    if config_path is None:
        config_dir = os.environ.get("JSCALL_CONFIG_DIR")
        config_path = (Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR) / DEFAULT_CONFIG_FILE

    config = load_config(config_path)

    if section not in SECTIONS:
        raise ValueError(f"Unknown configuration section: {section}")
    section_obj = getattr(config, section)

    if not hasattr(section_obj, key):
        raise ValueError(f"Unknown configuration key: {section}.{key}")

    current_value = getattr(section_obj, key)

    if isinstance(current_value, bool):
        converted_value: Any = _env_bool(value)
    elif isinstance(current_value, int):
        converted_value = int(value)
    elif isinstance(current_value, Path) or (section, key) == ("logging", "file"):
        converted_value = Path(value)
    else:
        converted_value = value

    setattr(section_obj, key, converted_value)
    save_config(config, config_path)


def validate_config(config: Optional[JSCallConfig] = None) -> List[ValidationError]:
    """
    Validate configuration and return list of errors.

    Args:
        config: Configuration to validate (default: loaded from file)

    Returns:
        List of validation errors (empty if valid)
    """
    if config is None:
        config = load_config()

    errors: List[ValidationError] = []

    tags = {
        "mailbox.anchor_tag": config.mailbox.anchor_tag,
        "mailbox.request_tag": config.mailbox.request_tag,
        "mailbox.result_tag": config.mailbox.result_tag,
    }
    for name, tag in tags.items():
        if not _TAG_PATTERN.match(tag or ""):
            errors.append(ValidationError(
                field=name,
                message=f"Invalid element name: {tag!r}",
                severity="error"
            ))

    if len(set(tags.values())) != len(tags):
        errors.append(ValidationError(
            field="mailbox",
            message="anchor_tag, request_tag and result_tag must all differ",
            severity="error"
        ))

    if config.mailbox.result_channel_enabled:
        errors.append(ValidationError(
            field="mailbox.result_channel_enabled",
            message="The result channel is deprecated; prefer letting the embedded script poll requests.",
            severity="warning"
        ))

    try:
        codecs.lookup(config.document.encoding)
    except LookupError:
        errors.append(ValidationError(
            field="document.encoding",
            message=f"Unknown encoding: {config.document.encoding}",
            severity="error"
        ))

    if config.logging.level.upper() not in LOG_LEVELS:
        errors.append(ValidationError(
            field="logging.level",
            message=f"Invalid log level: {config.logging.level}",
            severity="error"
        ))

    return errors


def _config_to_dict(config: JSCallConfig) -> dict[str, Any]:
    """Convert configuration to dictionary."""
    return {
        "config_dir": str(config.config_dir),
        "mailbox": {
            "anchor_tag": config.mailbox.anchor_tag,
            "request_tag": config.mailbox.request_tag,
            "result_tag": config.mailbox.result_tag,
            "result_channel_enabled": config.mailbox.result_channel_enabled,
        },
        "document": {
            "encoding": config.document.encoding,
            "write_back": config.document.write_back,
        },
        "logging": {
            "level": config.logging.level,
            "format": config.logging.format,
            "file": str(config.logging.file) if config.logging.file else None,
        },
    }


def _export_data(config: JSCallConfig, section: Optional[str]) -> dict[str, Any]:
    data = _config_to_dict(config)
    if section is None:
        return data
    if section not in SECTIONS:
        raise ValueError(f"Unknown configuration section: {section}")
    return {section: data[section]}


def export_config_yaml(config: JSCallConfig, section: Optional[str] = None) -> str:
    """Export configuration, or one section of it, as YAML string."""
    return yaml.dump(
        _export_data(config, section),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def export_config_json(config: JSCallConfig, section: Optional[str] = None) -> str:
    """Export configuration, or one section of it, as JSON string."""
    return json.dumps(_export_data(config, section), indent=2)
