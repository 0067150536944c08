"""
Configuration management for code generation.

Handles loading and merging settings from defaults, JSON files and
command-line overrides, and maps the camelCase setting names used in
build files onto GeneratorConfig fields.
"""

import json
import re
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Settings for one generation run."""

    # Service selection
    service_shape_id: Optional[str] = None

    # What to generate
    generate_client_stubs: bool = False
    generate_server_stubs: bool = False
    require_operation_io: bool = True

    # Output layout
    module_override_directory: Optional[str] = None
    source_subdirectory: str = "source"
    include_subdirectory: str = "include/aws"
    java_base_package: str = "software.amazon.awssdk.iot"
    model_relative_package: str = "model"
    no_clobber: bool = True

    # Code style
    indent_size: int = 4
    add_comments: bool = True
    license_header: Optional[str] = None

    # Shapes in namespaces with this prefix are never emitted
    builtin_namespace_prefix: str = "smithy"

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


_KNOWN_FIELDS = {f.name for f in fields(GeneratorConfig)}

# Spellings accepted from build files that don't follow plain camelCase
_SETTING_ALIASES = {
    "requireOperationIO": "require_operation_io",
}


def setting_name(key: str) -> str:
    """Map a camelCase setting name to its GeneratorConfig field name."""
    if key in _SETTING_ALIASES:
        return _SETTING_ALIASES[key]
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", key).lower()


def normalize_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Rename known camelCase keys; leave unknown keys as they are.

    Unknown keys later end up in GeneratorConfig.custom.
    """
    normalized = {}
    for key, value in settings.items():
        name = setting_name(key)
        normalized[name if name in _KNOWN_FIELDS else key] = value
    return normalized


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["python"] = {
            "indent_size": 4,
            "custom": {
                "future_type": "concurrent.futures.Future",
            },
        }

        self._configs["javascript"] = {
            "indent_size": 4,
            "custom": {
                "sdk_import": "aws-iot-device-sdk-v2",
            },
        }

        self._configs["cpp"] = {
            "indent_size": 4,
            "source_subdirectory": "source",
            "include_subdirectory": "include/aws",
            "custom": {
                "export_macro": "AWS_EVENTSTREAMRPC_API",
            },
        }

        self._configs["java"] = {
            "indent_size": 4,
            "java_base_package": "software.amazon.awssdk.iot",
            "model_relative_package": "model",
            "custom": {},
        }

    def get_config(
        self,
        language: str,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        defaults = self._configs.get(language, {})
        base_config = dict(defaults)
        base_config["custom"] = dict(defaults.get("custom", {}))

        if config_file:
            base_config.update(normalize_settings(self._load_config_file(config_file)))

        if custom_config:
            base_config.update(normalize_settings(custom_config))

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded %d settings from %s", len(config), path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in _KNOWN_FIELDS:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys land in the custom dict
        if custom_args:
            existing_custom = dict(config_args.get("custom") or {})
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict = asdict(config)
        custom = config_dict.pop("custom")
        config_dict.update(custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {str(e)}")

    def list_languages(self) -> List[str]:
        """Get list of languages with defaults."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str) -> List[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings
        """
        warnings = []

        if not config.service_shape_id:
            warnings.append("service_shape_id is not set")
        elif "#" not in config.service_shape_id:
            warnings.append(
                f"service_shape_id should be an absolute shape id (namespace#Name): "
                f"{config.service_shape_id}"
            )

        if config.indent_size < 1:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if config.generate_server_stubs:
            warnings.append("Server stub generation is not implemented and will fail")

        if language == "java":
            for part in config.java_base_package.split("."):
                if not part.isidentifier():
                    warnings.append(f"Invalid Java package name: {config.java_base_package}")
                    break
            if not config.model_relative_package.replace(".", "_").isidentifier():
                warnings.append(
                    f"Invalid model_relative_package: {config.model_relative_package}"
                )

        elif language == "cpp":
            if Path(config.include_subdirectory).is_absolute():
                warnings.append(
                    f"include_subdirectory should be relative: {config.include_subdirectory}"
                )
            if Path(config.source_subdirectory).is_absolute():
                warnings.append(
                    f"source_subdirectory should be relative: {config.source_subdirectory}"
                )

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str,
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)


# Example configuration file for reference
EXAMPLE_CONFIG = {
    "serviceShapeId": "aws.greengrass#GreengrassCoreIPC",
    "generateClientStubs": True,
    "moduleOverrideDirectory": "awsiot/greengrasscoreipc",
    "noClobber": False,
}
