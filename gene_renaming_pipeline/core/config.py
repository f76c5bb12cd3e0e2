#!/usr/bin/env python3

"""
Configuration management for the gene renaming pipeline.

Centralized configuration with support for file-based configuration
and environment variable overrides.
"""

import os
import json
from dataclasses import dataclass, asdict, field
from typing import Optional, Dict, Any, List

import yaml

from .exceptions import ConfigurationError
from .rules import split_rule_list
from .widths import COUNTER_SLOTS, parse_counter_format, CounterFormatSpec


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


def _parse_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes')


@dataclass
class RenamingConfig:
    """Centralized configuration for the gene renaming pipeline."""

    # Renaming behaviour
    exclude_types: List[str] = field(default_factory=list)
    rename_rules: List[str] = field(default_factory=list)
    counter_format: List[str] = field(default_factory=list)
    exclude_empty_seqids: bool = False

    # Output settings
    include_fasta: bool = True
    write_id_map: bool = True
    output_suffix: str = "renamed"
    generate_reports: bool = True

    # Performance settings
    memory_limit_mb: int = 4096
    enable_memory_monitoring: bool = True

    debug_mode: bool = False

    @classmethod
    def from_file(cls, config_path: str) -> 'RenamingConfig':
        """Load configuration from file (JSON or YAML)."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    config_data = yaml.safe_load(f)
                else:
                    config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON configuration file format: {e}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error loading configuration: {e}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")
        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'RenamingConfig':
        """Create configuration from dictionary."""
        # Filter out unknown keys
        known_keys = set(cls.__dataclass_fields__.keys())
        filtered_dict = {k: v for k, v in config_dict.items() if k in known_keys}

        # Rule lists and counter formats may be given as single strings
        if isinstance(filtered_dict.get('rename_rules'), str):
            filtered_dict['rename_rules'] = split_rule_list(filtered_dict['rename_rules'])
        if isinstance(filtered_dict.get('counter_format'), str):
            filtered_dict['counter_format'] = filtered_dict['counter_format'].split(',')
        if isinstance(filtered_dict.get('exclude_types'), str):
            filtered_dict['exclude_types'] = _split_list(filtered_dict['exclude_types'])

        try:
            return cls(**filtered_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration parameters: {e}")

    @classmethod
    def from_env(cls) -> 'RenamingConfig':
        """Load configuration from environment variables."""
        config = cls()

        # Map environment variables to config fields
        env_mappings = {
            'RENAMER_EXCLUDE_TYPES': ('exclude_types', _split_list),
            'RENAMER_RULES': ('rename_rules', split_rule_list),
            'RENAMER_COUNTER_FORMAT': ('counter_format', lambda x: x.split(',')),
            'RENAMER_EXCLUDE_EMPTY_SEQIDS': ('exclude_empty_seqids', _parse_bool),
            'RENAMER_MEMORY_LIMIT_MB': ('memory_limit_mb', int),
            'RENAMER_DEBUG_MODE': ('debug_mode', _parse_bool),
        }

        for env_var, (field_name, converter) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                try:
                    setattr(config, field_name, converter(env_value))
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(f"Invalid environment variable {env_var}: {e}")

        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to file."""
        config_dict = self.to_dict()

        try:
            with open(config_path, 'w') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    yaml.safe_dump(config_dict, f, default_flow_style=False)
                else:
                    json.dump(config_dict, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration: {e}")

    def counter_format_spec(self) -> CounterFormatSpec:
        """Parsed counter format vector (inferred slots left as None)."""
        return parse_counter_format(self.counter_format)

    def validate(self) -> None:
        """Validate configuration parameters."""
        if len(self.counter_format) > COUNTER_SLOTS:
            raise ConfigurationError(f"counter_format takes at most {COUNTER_SLOTS} values")
        self.counter_format_spec()

        if not self.output_suffix or '/' in self.output_suffix:
            raise ConfigurationError("output_suffix must be a non-empty file name fragment")

        if self.memory_limit_mb < 100:
            raise ConfigurationError("memory_limit_mb must be >= 100")

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.exclude_types = list(self.exclude_types)
        self.rename_rules = list(self.rename_rules)
        self.counter_format = [str(v) for v in self.counter_format]
        self.validate()


def load_config(config_path: Optional[str] = None,
                use_env: bool = True) -> RenamingConfig:
    """
    Load configuration with priority: file > environment > defaults.

    Args:
        config_path: Path to configuration file (optional)
        use_env: Whether to load environment variables

    Returns:
        RenamingConfig: Loaded configuration
    """
    config = RenamingConfig.from_env() if use_env else RenamingConfig()

    if config_path:
        file_config = RenamingConfig.from_file(config_path)
        for field_name in RenamingConfig.__dataclass_fields__.keys():
            setattr(config, field_name, getattr(file_config, field_name))

    return config
