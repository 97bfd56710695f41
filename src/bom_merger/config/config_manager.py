"""
Configuration management system for the BOM merger.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, asdict
import logging

from ..error_handling import ConfigurationError
from ..models.component import ComponentType

logger = logging.getLogger(__name__)


@dataclass
class MergeConfig:
    """Merge behaviour configuration."""
    default_mode: str = "flat"  # flat, hierarchical
    identity_policy: str = "descriptive"  # descriptive, full
    spec_version: str = "1.6"
    subject_type: str = "application"


@dataclass
class ValidationConfig:
    """Output validation configuration."""
    mode: str = "none"  # none, strict, relaxed
    schema_dir: Optional[str] = None


@dataclass
class LoadingConfig:
    """Input loading configuration."""
    max_workers: int = 1
    input_format: str = "autodetect"


@dataclass
class OutputConfig:
    """Output configuration for merged BOMs."""
    format: str = "autodetect"
    indent: int = 2


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5
    structured: bool = False


@dataclass
class AppConfig:
    """Complete application configuration."""
    merge: MergeConfig = None
    validation: ValidationConfig = None
    loading: LoadingConfig = None
    output: OutputConfig = None
    logging: LoggingConfig = None

    def __post_init__(self):
        self.merge = self.merge or MergeConfig()
        self.validation = self.validation or ValidationConfig()
        self.loading = self.loading or LoadingConfig()
        self.output = self.output or OutputConfig()
        self.logging = self.logging or LoggingConfig()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a nested dictionary."""
        return asdict(self)


class ConfigManager:
    """
    Manages application configuration from multiple sources.

    Configuration is loaded in the following order (later sources override earlier):
    1. Default configuration
    2. Configuration file
    3. Environment variables
    4. Command-line arguments (when provided)
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None
        self._env_var_mapping = self._create_env_var_mapping()

    def _create_env_var_mapping(self) -> Dict[str, str]:
        """Create mapping of environment variables to config paths."""
        return {
            # Merge configuration
            "BOM_MERGE_MODE": "merge.default_mode",
            "BOM_IDENTITY_POLICY": "merge.identity_policy",
            "BOM_SPEC_VERSION": "merge.spec_version",
            "BOM_SUBJECT_TYPE": "merge.subject_type",

            # Validation configuration
            "BOM_VALIDATION_MODE": "validation.mode",
            "BOM_SCHEMA_DIR": "validation.schema_dir",

            # Loading configuration
            "BOM_LOAD_WORKERS": "loading.max_workers",
            "BOM_INPUT_FORMAT": "loading.input_format",

            # Output configuration
            "BOM_OUTPUT_FORMAT": "output.format",
            "BOM_OUTPUT_INDENT": "output.indent",

            # Logging configuration
            "LOG_LEVEL": "logging.level",
            "LOG_FILE": "logging.file",
            "LOG_FORMAT": "logging.format",
            "LOG_MAX_SIZE": "logging.max_file_size",
            "LOG_BACKUP_COUNT": "logging.backup_count",
            "LOG_STRUCTURED": "logging.structured",
        }

    def load_config(self) -> AppConfig:
        """
        Load configuration from all sources.

        Returns:
            Complete application configuration
        """
        if self._config is not None:
            return self._config

        # Start with default configuration
        config_dict = self._get_default_config()

        # Load from configuration file
        if self.config_file and self.config_file.exists():
            file_config = self._load_config_file(self.config_file)
            config_dict = self._merge_configs(config_dict, file_config)

        # Override with environment variables
        env_config = self._load_env_config()
        config_dict = self._merge_configs(config_dict, env_config)

        # Substitute environment variables in string values
        config_dict = self._substitute_env_vars(config_dict)

        self._validate_config(config_dict)

        self._config = self._dict_to_config(config_dict)

        return self._config

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return AppConfig().to_dict()

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Configuration dictionary

        Raises:
            ConfigurationError: If the file is not valid YAML
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid configuration file {config_path}", cause=e)

        logger.info(f"Loaded configuration from {config_path}")
        return config or {}

    def _load_env_config(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        Returns:
            Configuration dictionary from environment variables
        """
        env_config = {}

        for env_var, config_path in self._env_var_mapping.items():
            value = os.getenv(env_var)
            if value is not None:
                value = self._convert_env_value(value)
                self._set_nested_value(env_config, config_path, value)

        return env_config

    def _convert_env_value(self, value: str) -> Any:
        """
        Convert environment variable string to appropriate type.

        Args:
            value: String value from environment variable

        Returns:
            Converted value
        """
        # Handle boolean values
        if value.lower() in ('true', 'yes', 'on'):
            return True
        elif value.lower() in ('false', 'no', 'off'):
            return False

        # Integers only; spec versions such as "1.6" stay strings
        try:
            return int(value)
        except ValueError:
            pass

        return value

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any) -> None:
        """
        Set a nested configuration value using dot notation.

        Args:
            config: Configuration dictionary
            path: Dot-separated path (e.g., 'merge.default_mode')
            value: Value to set
        """
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _substitute_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Substitute ``${VAR}`` references in configuration values.

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with environment variables substituted
        """
        def substitute_recursive(obj):
            if isinstance(obj, dict):
                return {k: substitute_recursive(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [substitute_recursive(item) for item in obj]
            elif isinstance(obj, str) and obj.startswith('${') and obj.endswith('}'):
                env_var = obj[2:-1]
                return os.getenv(env_var, obj)
            else:
                return obj

        return substitute_recursive(config)

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge two configuration dictionaries.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate configuration values.

        Args:
            config: Configuration dictionary

        Raises:
            ConfigurationError: If configuration is invalid
        """
        choices = {
            ("merge", "default_mode"): {"flat", "hierarchical"},
            ("merge", "identity_policy"): {"descriptive", "full"},
            ("merge", "subject_type"): {component_type.value for component_type in ComponentType},
            ("validation", "mode"): {"none", "strict", "relaxed"},
            ("loading", "input_format"): {"autodetect", "json"},
            ("output", "format"): {"autodetect", "json"},
            ("logging", "level"): {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"},
        }

        for (section, key), valid_values in choices.items():
            value = config.get(section, {}).get(key)
            if value not in valid_values:
                raise ConfigurationError(
                    f"Invalid value {value!r}. Valid values: {sorted(valid_values)}",
                    config_section=section,
                    config_key=key
                )

        max_workers = config.get("loading", {}).get("max_workers")
        if not isinstance(max_workers, int) or max_workers < 1:
            raise ConfigurationError("max_workers must be a positive integer",
                                     config_section="loading", config_key="max_workers")

        spec_version = config.get("merge", {}).get("spec_version")
        if not isinstance(spec_version, str):
            # YAML reads an unquoted 1.6 as a float
            config["merge"]["spec_version"] = str(spec_version)

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """
        Convert configuration dictionary to AppConfig object.

        Args:
            config_dict: Configuration dictionary

        Returns:
            AppConfig object

        Raises:
            ConfigurationError: If a section holds unknown keys
        """
        try:
            return AppConfig(
                merge=MergeConfig(**config_dict.get("merge", {})),
                validation=ValidationConfig(**config_dict.get("validation", {})),
                loading=LoadingConfig(**config_dict.get("loading", {})),
                output=OutputConfig(**config_dict.get("output", {})),
                logging=LoggingConfig(**config_dict.get("logging", {}))
            )
        except TypeError as e:
            raise ConfigurationError("Unknown configuration key", cause=e)

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Returns:
            Application configuration
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_config(self) -> AppConfig:
        """
        Reload configuration from all sources.

        Returns:
            Reloaded application configuration
        """
        self._config = None
        return self.load_config()

    def save_config(self, config_path: Optional[Path] = None) -> None:
        """
        Save current configuration to file.

        Args:
            config_path: Path to save configuration file
        """
        if config_path is None:
            config_path = self.config_file or Path("bom-merger.yaml")

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.get_config().to_dict(), f, default_flow_style=False, indent=2)

        logger.info(f"Configuration saved to {config_path}")


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_file: Optional[Union[str, Path]] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        config_file: Path to configuration file (only used on first call)

    Returns:
        ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_file)
    return _config_manager


def get_config() -> AppConfig:
    """
    Get the current application configuration.

    Returns:
        Application configuration
    """
    return get_config_manager().get_config()


def reset_config_manager() -> None:
    """Drop the global configuration manager so the next call reloads."""
    global _config_manager
    _config_manager = None
