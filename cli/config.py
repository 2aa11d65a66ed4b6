#!/usr/bin/env python3
"""
Configuration Management Module for the xcpv CLI

Handles hierarchical configuration loading (defaults, profile, file, environment),
dot-path access, and validation of the merged settings through the pydantic models
in ``validator.settings``.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pydantic
import yaml

from validator.settings import ValidationSettings

# Configuration file locations in order of precedence (highest to lowest)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / '.xcpv.yml',
    Path.cwd() / '.xcpv.json',
    Path.home() / '.xcpv' / 'config.yml',
    Path.home() / '.xcpv' / 'config.json',
    Path('/etc/xcpv/config.yml'),
]

# Environment variable prefix; sections and keys are separated by a double underscore,
# e.g. XCPV_AMOUNTS__ALLOW_DUST=false -> {'amounts': {'allow_dust': False}}
ENV_PREFIX = 'XCPV_'
ENV_NESTING_DELIMITER = '__'

# Default configuration values
DEFAULT_CONFIG = {
    'network': {
        'expected': None,  # mainnet, testnet, regtest or None for any
        'allow_multisig': True,
    },
    'amounts': {
        'unit': 'btc',  # btc, satoshis
        'allow_zero': False,
        'allow_dust': True,
        'max_amount': 2_100_000_000_000_000,
    },
    'fees': {
        'min_rate': 1,
        'max_rate': 1000,
    },
    'memo': {
        'max_bytes': 34,
        'allow_hex': True,
        'allow_text': True,
    },
    'guards': {
        'repeat_unit_max_length': 10,
        'repeat_min_count': 10,
        'qr_repeat_min_count': 100,
        'max_scan_length': 10_000,
        'max_text_length': 100_000,
    },
    'rate_limit': {
        'window_ms': 60_000,
        'max_operations': 10,
        'cleanup_threshold': 1000,
    },
    'cli': {
        'output_format': 'table',  # table, json, yaml
    },
}

# Configuration profiles
PROFILES = {
    'mainnet': {
        'network': {'expected': 'mainnet'},
        'amounts': {'allow_dust': False},
    },
    'testnet': {
        'network': {'expected': 'testnet'},
    },
    'regtest': {
        'network': {'expected': 'regtest'},
        'fees': {'min_rate': 0.1},
    },
}


class ConfigurationManager:
    """Manages hierarchical configuration with environment variable support."""

    def __init__(self, config_file: Optional[str] = None, profile: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Explicit configuration file path
            profile: Configuration profile to load (mainnet, testnet, regtest)
        """
        self.logger = logging.getLogger('xcpv.config')
        self.config_file = config_file
        self.profile = profile
        self._config_cache: Optional[Dict[str, Any]] = None
        self._config_sources: List[str] = []

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from all sources in hierarchical order.

        Returns:
            Merged configuration dictionary
        """
        if self._config_cache is not None:
            return self._config_cache

        self._config_sources = []
        configs = [copy.deepcopy(DEFAULT_CONFIG)]
        self._config_sources.append("defaults")

        if self.profile:
            if self.profile not in PROFILES:
                raise ValueError(f"Unknown profile: {self.profile}")
            configs.append(copy.deepcopy(PROFILES[self.profile]))
            self._config_sources.append(f"profile:{self.profile}")
            self.logger.debug(f"Applied profile: {self.profile}")

        if self.config_file:
            path = Path(self.config_file)
            if not path.exists():
                raise FileNotFoundError(f"Config file not found: {path}")
            configs.append(self._load_config_file(path))
            self._config_sources.append(f"file:{path}")
        else:
            for config_path in CONFIG_SEARCH_PATHS:
                if config_path.exists():
                    configs.append(self._load_config_file(config_path))
                    self._config_sources.append(f"file:{config_path}")
                    self.logger.debug(f"Loaded config from {config_path}")
                    break  # Use first found config file

        env_config = self._load_environment_variables()
        if env_config:
            configs.append(env_config)
            self._config_sources.append("environment")

        self._config_cache = self._deep_merge(*configs)
        return self._config_cache

    def _load_config_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML or JSON file."""
        with open(path, 'r') as f:
            if path.suffix in ('.yml', '.yaml'):
                data = yaml.safe_load(f)
            elif path.suffix == '.json':
                data = json.load(f)
            else:
                raise ValueError(f"Unknown config file format: {path}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX):].lower().split(ENV_NESTING_DELIMITER)
            if not all(parts):
                self.logger.warning(f"Ignoring malformed environment variable {key}")
                continue

            current = env_config
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = self._parse_env_value(value)

        return env_config

    def _parse_env_value(self, value: str) -> Union[str, int, float, bool, None]:
        """Parse environment variable value to appropriate type."""
        lowered = value.lower()
        if lowered in ('true', 'yes'):
            return True
        if lowered in ('false', 'no'):
            return False
        if lowered in ('null', 'none', ''):
            return None

        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    def _deep_merge(self, *dicts: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge multiple dictionaries."""
        result: Dict[str, Any] = {}

        for dictionary in dicts:
            for key, value in dictionary.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = self._deep_merge(result[key], value)
                else:
                    result[key] = value

        return result

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Args:
            key_path: Dot-separated path (e.g., 'amounts.allow_dust')
            default: Default value if key not found
        """
        current: Any = self.load()

        for key in key_path.split('.'):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current

    def set(self, key_path: str, value: Any):
        """
        Set configuration value by dot-notation path.

        Args:
            key_path: Dot-separated path (e.g., 'memo.max_bytes')
            value: Value to set
        """
        config = self.load()

        keys = key_path.split('.')
        current = config
        for key in keys[:-1]:
            current = current.setdefault(key, {})

        current[keys[-1]] = value

    def settings(self) -> ValidationSettings:
        """
        Typed view of the merged configuration.

        Raises:
            pydantic.ValidationError: If any section holds invalid values
        """
        return ValidationSettings.from_config(self.load())

    def validate(self) -> List[str]:
        """
        Validate current configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        try:
            self.settings()
        except pydantic.ValidationError as e:
            for error in e.errors():
                location = '.'.join(str(part) for part in error['loc'])
                errors.append(f"{location}: {error['msg']}" if location else error['msg'])

        output_format = self.get('cli.output_format')
        if output_format not in ('table', 'json', 'yaml'):
            errors.append(f"Invalid output format: {output_format}")

        return errors

    def get_sources(self) -> List[str]:
        """Get list of configuration sources that were loaded."""
        self.load()
        return list(self._config_sources)

    def reset(self):
        """Reset configuration cache."""
        self._config_cache = None
        self._config_sources = []
