"""
csv2json Configuration Management

This module provides configuration management for csv2json.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv

from csv2json.exceptions import ConfigurationError
from csv2json.processors.record_mapper import MismatchPolicy

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / 'default_config.yaml'

STORAGE_TYPES = ['none', 'memory', 'sqlite', 'postgresql', 'postgres']
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

# Environment variable -> (config key, converter)
ENV_OVERRIDES = {
    'CSV2JSON_STORAGE_TYPE': ('storage.type', str),
    'CSV2JSON_SQLITE_PATH': ('storage.sqlite.path', str),
    'DB_HOST': ('storage.postgres.host', str),
    'DB_PORT': ('storage.postgres.port', int),
    'DB_USER': ('storage.postgres.user', str),
    'DB_PASSWORD': ('storage.postgres.password', str),
    'DB_NAME': ('storage.postgres.database', str),
    'DB_SSLMODE': ('storage.postgres.sslmode', str),
    'CSV2JSON_MISMATCH_POLICY': ('conversion.mismatch_policy', str),
    'CSV2JSON_LOG_LEVEL': ('logging.level', str),
}


def _deep_update(d: Dict[str, Any], u: Mapping[str, Any]) -> Dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, Mapping) and k in d and isinstance(d[k], dict):
            d[k] = _deep_update(d[k], v)
        else:
            d[k] = copy.deepcopy(v)
    return d


def _read_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file {path}: {str(e)}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration file {path}: {str(e)}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return data


class Csv2JsonConfig:
    """
    Manages configuration for csv2json

    Layers, lowest first: packaged defaults, a YAML file, environment
    variables. Keys are read and written with dot notation
    (e.g. 'storage.sqlite.path').
    """

    USER_CONFIG_FILE = Path.home() / '.csv2json' / 'config.yaml'

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration

        Args:
            config: Optional values merged over the packaged defaults
        """
        self.config: Dict[str, Any] = _read_yaml(DEFAULT_CONFIG_PATH)
        if config:
            _deep_update(self.config, config)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> 'Csv2JsonConfig':
        """Load configuration from a YAML file merged over the defaults

        Args:
            config_path: Path to configuration file

        Raises:
            ConfigurationError: If the file is missing or not valid YAML
        """
        instance = cls(_read_yaml(config_path))
        logger.debug(f"Configuration loaded from {config_path}")
        return instance

    @classmethod
    def load(
        cls,
        config_path: Optional[Union[str, Path]] = None,
        env_file: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> 'Csv2JsonConfig':
        """
        Build the effective configuration for a process

        Loads env_file (python-dotenv) when given, then the explicit config file or
        the user config file if present, then applies environment overrides.
        """
        if env_file:
            load_dotenv(dotenv_path=env_file)
        if config_path is not None:
            instance = cls.from_file(config_path)
        elif cls.USER_CONFIG_FILE.exists():
            instance = cls.from_file(cls.USER_CONFIG_FILE)
        else:
            instance = cls()
        instance.apply_env(os.environ if environ is None else environ)
        instance.validate()
        return instance

    def apply_env(self, environ: Mapping[str, str]) -> None:
        """Apply environment variable overrides"""
        for var, (key, convert) in ENV_OVERRIDES.items():
            value = environ.get(var)
            if value in (None, ''):
                continue
            try:
                self.set(key, convert(value))
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {var}: {value!r}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value

        Args:
            key: Configuration key (dot notation)
            default: Default value if key not found
        """
        try:
            value = self.config
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation"""
        keys = key.split('.')
        config = self.config
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    def update(self, config: Mapping[str, Any]) -> None:
        """Deep-merge new values into the configuration"""
        _deep_update(self.config, config)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config)

    def get_storage_config(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config.get('storage', {}))

    def get_logging_config(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config.get('logging', {}))

    def validate(self) -> None:
        """
        Validate configuration structure and values

        Raises:
            ConfigurationError: On the first invalid value found
        """
        storage_type = str(self.get('storage.type', 'none')).lower()
        if storage_type not in STORAGE_TYPES:
            raise ConfigurationError(f"Unsupported storage type: {storage_type}")

        MismatchPolicy.parse(self.get('conversion.mismatch_policy', MismatchPolicy.REJECT.value))

        indent = self.get('output.indent')
        if indent is not None and (not isinstance(indent, int) or isinstance(indent, bool) or indent < 0):
            raise ConfigurationError(f"output.indent must be a non-negative integer or null, got {indent!r}")

        level = str(self.get('logging.level', 'INFO')).upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(f"Unsupported logging level: {level}")

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the configuration as YAML (defaults to the user config file)"""
        path = Path(path) if path is not None else self.USER_CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(self.config, f, default_flow_style=False, sort_keys=False)
        logger.info(f"Configuration saved to {path}")
        return path
