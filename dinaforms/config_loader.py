"""
Configuration loading utilities for DinaForms.

This module loads config.yaml, merges it over built-in defaults and
exposes cached lookups used by the host screen.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

from .exceptions import ConfigurationLoadError, log_error_with_context

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")

LOGGING_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

# Global configuration cache
_config_cache: Optional[Dict[str, Any]] = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'DinaForms',
            'version': '1.0.0',
            'debug': False
        },
        'schema': {
            'assets_dir': 'assets',
            'primary_schema': 'all-fields.json',
            'fallback_schema': 'all-fields.json'
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        },
        'ui': {
            'page_title': 'DinaForms',
            'viewport_width': 720
        }
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load application configuration merged over the defaults.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)

    Returns:
        Complete configuration dictionary
    """
    if config_path is None:
        config_path = CONFIG_FILE

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)
    except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
        log_error_with_context(ConfigurationLoadError(config_path, e), "configuration loading")
        logger.info("Using default configuration")
        return default_config

    if user_config is None:
        logger.warning(f"Configuration file is empty: {config_path}")
        return default_config

    if not isinstance(user_config, dict):
        logger.error(f"Configuration file is not a valid dictionary: {config_path}")
        logger.info("Using default configuration")
        return default_config

    config = deep_merge(default_config, user_config)
    logger.info(f"Successfully loaded configuration from {config_path}")
    return config


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and required fields.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'schema', 'logging', 'ui']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    schema = config['schema']
    for key in ['assets_dir', 'primary_schema']:
        if not isinstance(schema.get(key), str) or not schema.get(key):
            logger.warning(f"Schema setting must be a non-empty string: {key}")
            return False

    app = config['app']
    if 'name' not in app or 'version' not in app:
        logger.warning("Missing required app configuration (name or version)")
        return False

    level = config['logging'].get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in LOGGING_LEVELS:
        logger.warning(f"Unknown logging level: {level}")
        return False

    viewport_width = config['ui'].get('viewport_width')
    if viewport_width is not None:
        try:
            if int(viewport_width) <= 0:
                logger.warning("viewport_width must be positive")
                return False
        except (ValueError, TypeError):
            logger.warning("viewport_width must be a valid integer")
            return False

    return True


def get_logging_level(level_str: str) -> int:
    """Map string logging level to logging constant."""
    return LOGGING_LEVELS.get(str(level_str).upper(), logging.INFO)


def get_config() -> Dict[str, Any]:
    """Return the cached configuration, loading it on first use."""
    global _config_cache

    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def reload_config() -> Dict[str, Any]:
    """
    Force reload of configuration from file.
    Useful for testing or when configuration changes.
    """
    global _config_cache
    _config_cache = None
    return get_config()


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Get a specific configuration value.

    Args:
        section: Configuration section (e.g., 'schema', 'ui')
        key: Configuration key within section
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    config = get_config()
    return config.get(section, {}).get(key, default)
