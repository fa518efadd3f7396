"""
Configuration loading utilities for the onboarding form.

This module provides functionality to load and validate application
configuration (submission endpoint, notification timing, upload limits
and logging) with fallback to defaults.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")

DEFAULT_ENDPOINT = "https://id-form-backend.onrender.com/api/employees"

# Global configuration cache
_config_cache = None


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
            'name': 'ARTIBOTS',
            'version': '1.0.0',
            'page_title': 'Employee Identity Card Form',
            'subtitle': 'Please fill in the details below to generate your ID card.'
        },
        'submission': {
            'endpoint': DEFAULT_ENDPOINT,
            'success_message': 'Application submitted successfully!',
            'failure_message': 'Something went wrong. Please try again.'
        },
        'notifications': {
            'duration_seconds': 3
        },
        'uploads': {
            'max_file_size_mb': 5
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'
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
    except (yaml.YAMLError, OSError) as e:
        logger.error(f"Failed to load configuration from {config_path}: {e}")
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
    required_sections = ['app', 'submission', 'notifications', 'uploads', 'logging']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    endpoint = config['submission'].get('endpoint')
    if not isinstance(endpoint, str) or not endpoint.strip():
        logger.warning("submission.endpoint must be a non-empty string")
        return False

    try:
        duration = float(config['notifications'].get('duration_seconds', 3))
        if duration <= 0:
            logger.warning("notifications.duration_seconds must be positive")
            return False
    except (ValueError, TypeError):
        logger.warning("notifications.duration_seconds must be a valid number")
        return False

    try:
        size = float(config['uploads'].get('max_file_size_mb', 5))
        if size <= 0:
            logger.warning("uploads.max_file_size_mb must be positive")
            return False
    except (ValueError, TypeError):
        logger.warning("uploads.max_file_size_mb must be a valid number")
        return False

    return True


def get_config() -> Dict[str, Any]:
    """Return the cached application configuration, loading it on first use."""
    global _config_cache

    if _config_cache is None:
        config = load_config()
        if not validate_config(config):
            logger.warning("Configuration is invalid, using defaults")
            config = get_default_config()
        _config_cache = config

    return _config_cache


def reload_config():
    """Clear the configuration cache so the next read hits the file again."""
    global _config_cache
    _config_cache = None
    logger.info("Configuration cache cleared")


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Read a single value from the cached configuration.

    Args:
        section: Top-level configuration section
        key: Key inside the section
        default: Value returned when the section or key is missing
    """
    section_values = get_config().get(section, {})
    if not isinstance(section_values, dict):
        return default
    return section_values.get(key, default)


def get_config_summary(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Get a summary of the current configuration.

    Args:
        config: Configuration dictionary

    Returns:
        Dictionary with configuration summary
    """
    return {
        'app_name': config.get('app', {}).get('name', 'Unknown'),
        'app_version': config.get('app', {}).get('version', 'Unknown'),
        'endpoint': config.get('submission', {}).get('endpoint', DEFAULT_ENDPOINT),
        'notice_duration': config.get('notifications', {}).get('duration_seconds', 3),
        'max_file_size_mb': config.get('uploads', {}).get('max_file_size_mb', 5),
        'log_level': config.get('logging', {}).get('level', 'INFO')
    }
