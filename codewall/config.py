#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import toml
import yaml

from .domain.failure import ConfigurationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr)  # Default to stderr
    ]
)
logger = logging.getLogger("codewall")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']

# Variables accepted for the GitHub access token, in order of precedence.
TOKEN_ENV_VARS = ['CODEWALL_GITHUB_TOKEN', 'GITHUB_TOKEN']

# An approximation of the number of GitHub repositories, found by probing
# repository IDs upward until the API consistently returns 404 (see the
# `estimate-max-id` command). Only repositories created before this point
# can be drawn. Last updated: 2024-12-28
MAX_REPO_ID = 889_000_000


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. CODEWALL_CONFIG environment variable
    2. ~/.codewall/config.{json,toml,yaml,yml}
    """
    if 'CODEWALL_CONFIG' in os.environ:
        path = Path(os.environ['CODEWALL_CONFIG']).expanduser()
        if path.exists():
            return path

    codewall_dir = Path.home() / '.codewall'
    for filename in CONFIG_FILENAMES:
        path = codewall_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return codewall_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "github": {
            "token": "",
            "api_url": "https://api.github.com",
            "max_repo_id": MAX_REPO_ID,
            "request_timeout": None,
        },
        "acquisition": {
            "max_attempts": 100,
            "sample_attempts": 5,
            "max_not_found": None,
        },
        "usability": {
            "boring_patterns": [
                "README",
                "gitignore",
                "gitattributes",
                "npmignore",
                r"min\.js",
            ],
        },
        "render": {
            "font_size_em": 3,
            "page_title": "code view",
            "fonts": [],
        },
        "screenshot": {
            "chrome_binary": "google-chrome",
            "settle_seconds": 5,
            "default_resolution": [1920, 1080],
        },
        "output": {
            "directory": ".",
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s",
        },
    }


def _read_config_file(config_path):
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config():
    """Load configuration: defaults, then the config file, then environment."""
    config_path = get_config_path()

    config = get_default_config()

    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
            if not isinstance(file_config, dict):
                raise ValueError("top level must be a mapping")
            config = merge_configs(config, file_config)
        except (OSError, ValueError, tomllib.TOMLDecodeError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    return config


def load_file_config(config_path=None):
    """Load only what the config file itself says (no defaults, no env)."""
    config_path = Path(config_path) if config_path else get_config_path()
    if not config_path.exists():
        return {}
    file_config = _read_config_file(config_path)
    return file_config if isinstance(file_config, dict) else {}


def update_config_file(updates, config_path=None):
    """Merge `updates` into the config file and save it. Returns the path written."""
    config_path = Path(config_path) if config_path else get_config_path()
    merged = merge_configs(load_file_config(config_path), updates)
    return save_config(merged, config_path)


def save_config(config, config_path=None):
    """Save configuration to file. Returns the path written."""
    config_path = Path(config_path) if config_path else get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = config_path.suffix.lower()
    with open(config_path, 'w') as f:
        if suffix == '.toml':
            # TOML has no null; drop unset values
            toml.dump(_strip_none(config), f)
        elif suffix in ('.yaml', '.yml'):
            yaml.safe_dump(config, f, default_flow_style=False)
        else:
            json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def _strip_none(value):
    if isinstance(value, dict):
        return {k: _strip_none(v) for k, v in value.items() if v is not None}
    return value


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: CODEWALL_SECTION_KEY
    For example: CODEWALL_ACQUISITION_MAX_ATTEMPTS=20
    """
    env_prefix = "CODEWALL_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                # Path conflict, e.g., env var is longer but we found a non-dict value
                break

    return config


def get_github_token(config):
    """
    Return the GitHub access token.

    Raises:
        ConfigurationError: if no token is configured
    """
    token = config.get('github', {}).get('token')
    if token:
        return token
    for var in TOKEN_ENV_VARS:
        if os.environ.get(var):
            return os.environ[var]
    raise ConfigurationError("GITHUB_TOKEN environment variable not set.")


def configure_logging(config, debug=False):
    """Apply the configured log level and format to the root logger."""
    log_config = config.get('logging', {})
    if debug:
        level = logging.DEBUG
        fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    else:
        level = getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO)
        fmt = log_config.get('format', '%(levelname)s: %(message)s')

    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def redact(config):
    """Copy of config with secrets masked, for display."""
    shown = merge_configs(config, {})
    github = dict(shown.get('github', {}))
    if github.get('token'):
        github['token'] = '***'
    shown['github'] = github
    return shown
