#!/usr/bin/env python3

import copy
import json
import os
import tomllib
from pathlib import Path

import logging
import sys

import yaml

from .exit_codes import ConfigError

logger = logging.getLogger("nexttag")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']
LOCAL_CONFIG_FILENAMES = ['.nexttag.json', '.nexttag.toml', '.nexttag.yaml', '.nexttag.yml']


def configure_logging(level="INFO", fmt="%(levelname)s: %(message)s"):
    """Send nexttag log records to stderr.

    stdout is reserved for the command's own output.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))

    logger.handlers[:] = [handler]
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    return logger


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. NEXTTAG_CONFIG environment variable
    2. .nexttag.{json,toml,yaml,yml} in the working directory
    3. ~/.nexttag/ directory

    Returns None when no file exists.
    """
    if 'NEXTTAG_CONFIG' in os.environ:
        path = Path(os.environ['NEXTTAG_CONFIG'])
        if path.exists():
            return path
        logger.warning(f"NEXTTAG_CONFIG points to missing file {path}")

    for filename in LOCAL_CONFIG_FILENAMES:
        path = Path.cwd() / filename
        if path.exists():
            return path

    nexttag_dir = Path.home() / '.nexttag'
    for filename in CONFIG_FILENAMES:
        path = nexttag_dir / filename
        if path.exists():
            return path

    return None


def read_config_file(config_path):
    """Parse a JSON, TOML or YAML config file into a dict."""
    try:
        suffix = config_path.suffix.lower()
        if suffix == '.toml':
            with open(config_path, 'rb') as f:
                file_config = tomllib.load(f)
        elif suffix in ['.yaml', '.yml']:
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f)
        else:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading config from {config_path}: {e}") from e

    if file_config is None:
        return {}
    if not isinstance(file_config, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return file_config


def load_config(config_path=None):
    """Load configuration: defaults, then file, then environment overrides."""
    config = get_default_config()

    config_path = Path(config_path) if config_path else get_config_path()
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        config = merge_configs(config, read_config_file(config_path))
        logger.debug(f"Loaded configuration from {config_path}")

    return apply_env_overrides(config)


def get_default_config():
    """Get default configuration."""
    return {
        "github": {
            "token": "",
            "repository": "",
            "api_url": "https://api.github.com",
            "timeout_seconds": 30
        },
        "release": {
            "bump": "patch",
            "release_branches": "^main$,^master$",
            "issue_labels": "enhancement",
            "with_v": True,
            "dry_run": False,
            "prerelease_label": ""
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        }
    }


def merge_configs(base_config, override_config):
    """
    Overlay one configuration on another, section by section.

    Keys inside a section replace the base values one by one; sections
    the base does not know are taken as they are. Neither argument is
    modified.

    Raises:
        ConfigError: If a known section is overridden by a non-mapping
    """
    merged = copy.deepcopy(base_config)

    for section, values in override_config.items():
        current = merged.get(section)
        if isinstance(current, dict):
            if not isinstance(values, dict):
                raise ConfigError(f"config section {section!r} must be a mapping")
            current.update(values)
        else:
            merged[section] = copy.deepcopy(values)

    return merged


TRUE_VALUES = ('true', 'yes', 'on', '1')
FALSE_VALUES = ('false', 'no', 'off', '0')


def _coerce_env_value(name, value, default):
    """Convert an environment string to the type of the default value."""
    if isinstance(default, bool):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ConfigError(f"{name} must be a boolean, got {value!r}")
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    return value


def apply_env_overrides(config, environ=None):
    """
    Apply NEXTTAG_<SECTION>_<KEY> environment variables to a config.

    Only keys of the default configuration can be overridden, e.g.
    NEXTTAG_RELEASE_DRY_RUN=true or NEXTTAG_GITHUB_TIMEOUT_SECONDS=10.
    Values are converted to the type of the default.

    Raises:
        ConfigError: If a boolean or integer value does not convert
    """
    environ = os.environ if environ is None else environ

    for section, defaults in get_default_config().items():
        for key, default in defaults.items():
            name = f"NEXTTAG_{section}_{key}".upper()
            if name not in environ:
                continue
            config.setdefault(section, {})[key] = _coerce_env_value(name, environ[name], default)
            logger.debug(f"{section}.{key} set from {name}")

    return config
