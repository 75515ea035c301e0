"""
Configuration management utilities.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

import jsonschema
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


class ConfigManager:
    """
    Manages loading, validation, and merging of pipeline configurations.
    """

    def __init__(self, config_dir: Optional[str] = None, schema_dir: Optional[str] = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.schema_dir = Path(schema_dir) if schema_dir else self.config_dir / "schemas"

    def load_config(self, config_name: str, schema_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Load a configuration file (YAML or JSON).
        Optionally validate against a schema.

        Args:
            config_name: Name of config file (e.g. 'pipeline.yaml')
            schema_name: Name of schema file (e.g. 'pipeline_schema.json')

        Returns:
            Loaded configuration dictionary
        """
        config_path = self.config_dir / config_name

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r") as f:
            if config_path.suffix in (".yaml", ".yml"):
                config = yaml.safe_load(f) or {}
            elif config_path.suffix == ".json":
                config = json.load(f)
            else:
                raise ValueError(f"Unsupported configuration format: {config_path.suffix}")

        if schema_name:
            self.validate_config(config, schema_name)

        logger.info(f"Loaded configuration from {config_path}")
        return config

    def validate_config(self, config: Dict[str, Any], schema_name: str) -> None:
        """
        Validate configuration against a JSON schema.

        Args:
            config: Configuration dictionary
            schema_name: Name of schema file in the schema directory

        Raises:
            FileNotFoundError: If the schema file does not exist
            ValueError: If the configuration violates the schema
        """
        schema_path = self.schema_dir / schema_name
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        with open(schema_path, "r") as f:
            schema = json.load(f)

        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.exceptions.ValidationError as e:
            path_str = " -> ".join(str(p) for p in e.path) if e.path else "root"
            error_msg = f"Configuration validation failed at '{path_str}': {e.message}"
            logger.error(error_msg)
            raise ValueError(error_msg) from e

        logger.debug(f"Configuration validated against {schema_name}")

    def merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two configurations. Neither input is modified.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        merged = copy.deepcopy(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self.merge_configs(merged[key], value)
            else:
                merged[key] = copy.deepcopy(value)
        return merged

    def get_value(self, config: Dict[str, Any], path: str, default: Any = None) -> Any:
        """
        Get a value from configuration using dot notation.

        Args:
            config: Configuration dictionary
            path: Dot-separated path (e.g., 'walk_forward.train_fraction')
            default: Default value if path not found

        Returns:
            Value at path or default
        """
        current = config
        for key in path.split('.'):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current


def load_pipeline_config(
    config_dir: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    config_name: str = "pipeline.yaml",
) -> Dict[str, Any]:
    """
    Load the pipeline configuration, apply overrides, and validate the result.

    Args:
        config_dir: Directory holding the config file and a ``schemas`` folder
        overrides: Nested dictionary merged over the loaded values
        config_name: Configuration file name

    Returns:
        Validated configuration dictionary
    """
    manager = ConfigManager(config_dir=config_dir)
    config = manager.load_config(config_name)
    if overrides:
        config = manager.merge_configs(config, overrides)
    manager.validate_config(config, "pipeline_schema.json")
    return config
