"""Configuration loader for ecs-console."""
import copy
import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional

import boto3
import yaml
from botocore.exceptions import ProfileNotFound

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ECS_CONSOLE_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "clusters": ["production", "staging", "workers-production", "workers-staging"],
    "defaults": {
        "cluster": "production",
        "command": "rails console",
    },
    "aws": {
        "profile": None,
        "region": None,
    },
    "strict_secrets": False,
}


class ConfigError(Exception):
    """Configuration error exception."""
    pass


def default_config_path() -> Path:
    """XDG location of the config file: ~/.config/ecs-console/config.yml"""
    return Path.home() / ".config" / "ecs-console" / "config.yml"


def _get_config_path(explicit_path: Optional[str] = None) -> Optional[Path]:
    """
    Get config file path.

    Priority order:
    1. Path passed on the command line (--config)
    2. ECS_CONSOLE_CONFIG environment variable
    3. Default location: ~/.config/ecs-console/config.yml

    Returns:
        Path to the config file, or None when no file is configured and the
        default location does not exist (built-in defaults apply)

    Raises:
        ConfigError: If an explicitly named config file doesn't exist
    """
    for source, value in (("--config", explicit_path), (CONFIG_ENV_VAR, os.getenv(CONFIG_ENV_VAR))):
        if not value:
            continue
        config_path = Path(value).expanduser()
        if not config_path.is_file():
            raise ConfigError(
                f"Configuration file not found at: {config_path} (from {source})\n"
                f"Create it, or unset {source} to use {default_config_path()}"
            )
        logger.info(f"Using config from {source}: {config_path}")
        return config_path

    default_config = default_config_path()
    if default_config.is_file():
        logger.info(f"Using default config location: {default_config}")
        return default_config

    logger.debug(f"No config file at {default_config}, using built-in defaults")
    return None


def _merge_section(config: Dict[str, Any], raw: Dict[str, Any], section: str, config_path: Path) -> None:
    value = raw.get(section)
    if value is None:
        return
    if not isinstance(value, dict):
        raise ConfigError(f"'{section}' must be a mapping in config at {config_path}")
    unknown = set(value) - set(config[section])
    if unknown:
        raise ConfigError(
            f"Unknown keys in '{section}' section of {config_path}: {', '.join(sorted(unknown))}"
        )
    config[section].update(value)


def _validate(config: Dict[str, Any], origin: str) -> None:
    clusters = config["clusters"]
    if not isinstance(clusters, list) or not clusters:
        raise ConfigError(
            f"'clusters' must be a non-empty list in config at {origin}\n"
            f"Required format:\n"
            f"clusters:\n"
            f"  - production\n"
            f"  - staging"
        )
    if not all(isinstance(c, str) and c for c in clusters):
        raise ConfigError(f"'clusters' entries must be non-empty strings in config at {origin}")

    defaults = config["defaults"]
    if defaults["cluster"] not in clusters:
        raise ConfigError(
            f"Default cluster '{defaults['cluster']}' is not one of the configured clusters: "
            f"{', '.join(clusters)}"
        )
    if not isinstance(defaults["command"], str) or not defaults["command"].strip():
        raise ConfigError(f"'defaults.command' must be a non-empty string in config at {origin}")

    for key in ("profile", "region"):
        value = config["aws"][key]
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"'aws.{key}' must be a string in config at {origin}")

    if not isinstance(config["strict_secrets"], bool):
        raise ConfigError(f"'strict_secrets' must be true or false in config at {origin}")


def load_config(explicit_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load and validate configuration from YAML file.

    Args:
        explicit_path: Config path given on the command line, if any

    Returns:
        Dict containing configuration with keys:
        - clusters: list of cluster names accepted by --cluster
        - defaults: dict with cluster and command
        - aws: dict with profile and region (None means boto3 defaults)
        - strict_secrets: fail when a secret reference does not resolve

    Raises:
        ConfigError: If config file is missing, invalid, or has bad values
    """
    # Get config path dynamically each time (not cached at module level)
    config_path = _get_config_path(explicit_path)
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is None:
        _validate(config, "<built-in defaults>")
        return config

    # Load YAML
    try:
        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}")

    if raw is None:
        logger.warning(f"Config file at {config_path} is empty, using built-in defaults")
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {config_path} must contain a mapping")

    unknown = set(raw) - set(DEFAULT_CONFIG)
    if unknown:
        raise ConfigError(f"Unknown keys in config at {config_path}: {', '.join(sorted(unknown))}")

    if "clusters" in raw:
        config["clusters"] = raw["clusters"]
    if "strict_secrets" in raw:
        config["strict_secrets"] = raw["strict_secrets"]
    _merge_section(config, raw, "defaults", config_path)
    _merge_section(config, raw, "aws", config_path)

    # A custom cluster list without a default falls back to its first entry
    if "clusters" in raw and "cluster" not in (raw.get("defaults") or {}):
        clusters = config["clusters"]
        if isinstance(clusters, list) and clusters:
            config["defaults"]["cluster"] = clusters[0]

    _validate(config, str(config_path))

    logger.info(f"Configuration loaded successfully from {config_path}")
    logger.debug(f"Clusters: {', '.join(config['clusters'])}")
    logger.debug(f"AWS profile: {config['aws']['profile']}, region: {config['aws']['region']}")

    return config


def build_session(config: Dict[str, Any]) -> boto3.session.Session:
    """
    Create a boto3 session for the configured profile and region.

    Credentials are resolved via boto3's standard credential chain; the
    AWS_PROFILE and AWS_REGION environment variables apply when the config
    leaves profile/region unset.
    """
    aws = config["aws"]
    try:
        return boto3.session.Session(profile_name=aws["profile"], region_name=aws["region"])
    except ProfileNotFound as e:
        raise ConfigError(f"AWS profile from config not found: {e}")
