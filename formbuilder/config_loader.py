"""
Configuration loading utilities for the form schema builder.

This module loads config.yaml, merges it over built-in defaults and exposes
typed accessors plus the logging setup used by the Streamlit app.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

from .exceptions import ConfigurationLoadError, log_error_with_context
from .schema_exporter import EXPORT_FILENAME

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

# Loaded once per process
_config_cache: Optional[Dict[str, Any]] = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge user settings over defaults, recursing into nested sections.

    Args:
        base_dict: Defaults
        update_dict: Values read from config.yaml

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
            'name': 'Form Schema Builder',
            'version': '1.0.0',
            'debug': False
        },
        'ui': {
            'page_title': 'Form Builder',
            'page_icon': '🧩',
            'layout': 'wide'
        },
        'export': {
            'filename': EXPORT_FILENAME,
            'directory': 'exports',
            'indent': 2,
            'save_copy': False
        },
        'logging': {
            'level': 'INFO',
            'format': DEFAULT_LOG_FORMAT
        }
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load application configuration.

    Never raises: a missing, empty, malformed or non-mapping file yields the
    defaults.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)

    Returns:
        Complete configuration dictionary
    """
    if config_path is None:
        config_path = CONFIG_FILE
    config_path = Path(config_path)

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
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


def get_config() -> Dict[str, Any]:
    """Return the cached configuration, loading it on first use."""
    global _config_cache

    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Look up one setting from the cached configuration.

    Args:
        section: Configuration section (e.g., 'export', 'ui')
        key: Configuration key within section
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    config = get_config()
    return config.get(section, {}).get(key, default)


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Check that the sections and values the app relies on are usable.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'ui', 'export', 'logging']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    app = config['app']
    if 'name' not in app or 'version' not in app:
        logger.warning("Missing required app configuration (name or version)")
        return False

    export = config['export']
    filename = export.get('filename')
    if not isinstance(filename, str) or not filename.strip():
        logger.warning("export.filename must be a non-empty string")
        return False
    if not isinstance(export.get('directory'), str):
        logger.warning("export.directory must be a string")
        return False

    indent = export.get('indent', 2)
    if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
        logger.warning("export.indent must be a non-negative integer")
        return False

    level = config['logging'].get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        logger.warning(f"Unknown logging level: {level}")
        return False

    return True


def get_logging_level(level_str: str) -> int:
    """Convert a level name from config.yaml to a logging constant (INFO if unknown)."""
    return LOG_LEVELS.get(str(level_str).upper(), logging.INFO)


def configure_logging(config: Optional[Dict[str, Any]] = None) -> int:
    """
    Configure root logging from the ``logging`` config section.

    Args:
        config: Configuration dictionary (defaults to the cached config)

    Returns:
        The numeric level applied
    """
    if config is None:
        config = get_config()

    logging_config = config.get('logging', {})
    level = get_logging_level(logging_config.get('level', 'INFO'))
    logging.basicConfig(level=level, format=logging_config.get('format', DEFAULT_LOG_FORMAT))
    logging.getLogger().setLevel(level)
    logger.info(f"Logging configured to level: {logging.getLevelName(level)}")
    return level


def get_config_summary(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Condense the configuration into the values shown on the debug panel.

    Args:
        config: Configuration dictionary

    Returns:
        Flat dictionary of key settings
    """
    return {
        'app_name': config.get('app', {}).get('name', 'Unknown'),
        'app_version': config.get('app', {}).get('version', 'Unknown'),
        'debug_mode': config.get('app', {}).get('debug', False),
        'export_filename': config.get('export', {}).get('filename', EXPORT_FILENAME),
        'export_directory': config.get('export', {}).get('directory', 'exports'),
        'log_level': config.get('logging', {}).get('level', 'INFO')
    }
