"""Configuration management for the business health scoring engine."""

import os
import yaml
from typing import Dict, Any, Optional, List

from business_health.utils.exceptions import ConfigurationError


class ConfigManager:
    """Manages engine configuration from YAML files and environment variables."""

    ENV_MAPPINGS = {
        'BUSINESS_HEALTH_LOG_LEVEL': 'business_health.logging.level',
        'BUSINESS_HEALTH_LOG_FILE': 'business_health.logging.file_path',
        'BUSINESS_HEALTH_BENCHMARKS_FILE': 'business_health.scoring.benchmarks_file',
        'BUSINESS_HEALTH_MAX_WORKERS': 'business_health.batch.max_workers',
    }

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to configuration file. Defaults to the
                BUSINESS_HEALTH_CONFIG environment variable, then 'config.yaml'
        """
        self.config_path = config_path or os.environ.get('BUSINESS_HEALTH_CONFIG', 'config.yaml')
        self._config: Dict[str, Any] = {}
        self._schema: Dict[str, Any] = {}
        self._load_schema()
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from file and environment variables."""
        self._config = self._get_default_config()

        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as file:
                    file_config = yaml.safe_load(file) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(
                    f"Failed to load configuration from {self.config_path}: {str(e)}",
                    config_file=self.config_path,
                    original_exception=e
                )
            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    f"Configuration file {self.config_path} must contain a mapping",
                    config_file=self.config_path
                )
            self._merge_config(self._config, file_config)

        self._load_env_overrides()
        self._validate_config()

    def _load_schema(self) -> None:
        """Load configuration schema for validation."""
        self._schema = {
            'business_health': {
                'logging': {
                    'level': {'type': 'str', 'allowed': ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']},
                    'file_path': {'type': 'str', 'nullable': True},
                    'max_file_size': {'type': 'str'},
                    'backup_count': {'type': 'int', 'min': 0, 'max': 100},
                    'structured': {'type': 'bool'}
                },
                'scoring': {
                    'benchmarks_file': {'type': 'str', 'nullable': True},
                    'data_version': {'type': 'str'}
                },
                'batch': {
                    'max_workers': {'type': 'int', 'min': 1, 'max': 64},
                    'continue_on_error': {'type': 'bool'}
                }
            }
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key.

        Args:
            key: Configuration key in dot notation (e.g., 'business_health.logging.level')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self._config

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by dot-notation key.

        Args:
            key: Configuration key in dot notation
            value: Value to set
        """
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config or not isinstance(config[k], dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def save_config(self, path: Optional[str] = None) -> None:
        """Save current configuration to file.

        Args:
            path: Path to save configuration. Defaults to current config_path
        """
        save_path = path or self.config_path
        directory = os.path.dirname(save_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(save_path, 'w') as file:
            yaml.dump(self._config, file, default_flow_style=False, indent=2)

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return {
            'business_health': {
                'logging': {
                    'level': 'INFO',
                    'file_path': None,
                    'max_file_size': '10MB',
                    'backup_count': 5,
                    'structured': False
                },
                'scoring': {
                    'benchmarks_file': None,
                    'data_version': '1.0.0'
                },
                'batch': {
                    'max_workers': 4,
                    'continue_on_error': True
                }
            }
        }

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def _load_env_overrides(self) -> None:
        """Load configuration overrides from environment variables."""
        for env_var, config_key in self.ENV_MAPPINGS.items():
            if env_var in os.environ:
                value: Any = os.environ[env_var]
                if value.lower() in ('true', 'false'):
                    value = value.lower() == 'true'
                elif value.isdigit():
                    value = int(value)

                self.set(config_key, value)

    def _validate_config(self) -> None:
        """Validate configuration against schema."""
        errors: List[str] = []
        self._validate_against_schema(self._config, self._schema, '', errors)

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(errors)
            raise ConfigurationError(error_msg, config_file=self.config_path)

    @staticmethod
    def _is_leaf(schema_value: Dict[str, Any]) -> bool:
        return any(k in schema_value for k in ['type', 'allowed', 'min', 'max'])

    def _validate_against_schema(self, config: Dict[str, Any], schema: Dict[str, Any],
                                 path: str, errors: List[str]) -> None:
        """Recursively validate configuration against schema."""
        for key, schema_value in schema.items():
            full_path = f"{path}.{key}" if path else key

            if key not in config:
                if not self._is_leaf(schema_value):
                    config[key] = {}
                    self._validate_against_schema(config[key], schema_value, full_path, errors)
                continue

            value = config[key]

            if not self._is_leaf(schema_value):
                if not isinstance(value, dict):
                    errors.append(f"{full_path} should be an object")
                else:
                    self._validate_against_schema(value, schema_value, full_path, errors)
                continue

            if value is None:
                if not schema_value.get('nullable', False):
                    errors.append(f"{full_path} cannot be null")
                continue

            expected = schema_value.get('type')
            if expected == 'str' and not isinstance(value, str):
                errors.append(f"{full_path} should be a string")
            elif expected == 'int' and (not isinstance(value, int) or isinstance(value, bool)):
                errors.append(f"{full_path} should be an integer")
            elif expected == 'bool' and not isinstance(value, bool):
                errors.append(f"{full_path} should be a boolean")

            if 'allowed' in schema_value and value not in schema_value['allowed']:
                errors.append(f"{full_path} should be one of {schema_value['allowed']}")

            if isinstance(value, (int, float)) and not isinstance(value, bool):
                if 'min' in schema_value and value < schema_value['min']:
                    errors.append(f"{full_path} should be at least {schema_value['min']}")
                if 'max' in schema_value and value > schema_value['max']:
                    errors.append(f"{full_path} should be at most {schema_value['max']}")


# Global configuration instance
config = ConfigManager()
