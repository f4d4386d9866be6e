#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Centralized Configuration Manager for the Exam Template Catalog Engine

This module provides a singleton ConfigManager class that loads configuration
from config.yaml (optionally from a remote YAML document) and environment
variables, with fallback to sensible defaults. It serves as a single point of
access for all configuration needs across the engine.
"""

import copy
import os
import yaml
import logging
import time
import requests
from typing import Any, Dict, Optional, List
from pathlib import Path

logger = logging.getLogger(__name__)

class ConfigManager:
    """
    Singleton configuration manager that loads settings from config.yaml
    and environment variables, with fallback to sensible defaults.
    """
    _instance = None

    def __new__(cls):
        """Ensure only one instance of ConfigManager exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the configuration manager if not already initialized."""
        if self._initialized:
            return

        self.config: Dict[str, Any] = {}

        # Remote config caching (only used when CATALOG_CONFIG_URL is set)
        self._remote_config_cache: Optional[Dict[str, Any]] = None
        self._remote_config_cache_time: float = 0
        self._remote_config_ttl: int = 300  # 5 minutes cache TTL
        self._remote_config_url: Optional[str] = os.environ.get('CATALOG_CONFIG_URL')

        # Default configuration values
        self.defaults = {
            'api': {
                'port': 10000,
                'host': '0.0.0.0',
                'debug': False
            },
            'storage': {
                'db_path': 'exam_catalog.db',
                # The import endpoint only reads documents below this directory
                'templates_dir': 'templates'
            },
            'normalizer': {
                # Applied in order; every rule runs, earlier ones never block later ones.
                'title_synonyms': [
                    ['tomografia computadorizada de', 'tc'],
                    ['ressonância magnética de', 'rm'],
                    ['radiografia de', 'rx'],
                    ['ultrassonografia de', 'usg'],
                ],
                'modality_aliases': {
                    'US': 'USG'
                }
            },
            'parser': {
                'block_separator': '---',
                'fallback_region': 'Geral',
                'fallback_title': 'Sem Título',
                'source_hints': [
                    ['rx', 'RX'],
                    ['usg', 'US'],
                    ['tc', 'TC'],
                ],
                'default_modality': 'OT',
                'modality_map': {
                    'RX': 'RX', 'TC': 'TC', 'RM': 'RM', 'US': 'US',
                    'USG': 'US', 'MG': 'MG', 'OT': 'OT'
                }
            },
            'catalog': {
                'lateral_regions': [
                    'Ombro', 'Cotovelo', 'Punho', 'Mão', 'Quadril', 'Fêmur', 'Joelho',
                    'Tornozelo', 'Pé', 'Clavícula', 'Braço', 'Antebraço', 'Perna', 'Escápula'
                ],
                'custom_region': 'Geral'
            },
            'search': {
                'suggestion_limit': 5,
                'suggestion_min_score': 60
            },
            'logging': {
                'level': 'INFO',
                'format': '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
            }
        }

        self._load_config()
        self._load_env_variables()

        self._initialized = True
        logger.info("Configuration manager initialized successfully")

    def _load_config_file(self) -> Optional[Dict[str, Any]]:
        """Load configuration from config.yaml next to this module (or one level up)."""
        base_dir = Path(__file__).parent
        config_path = base_dir / 'config.yaml'
        if not config_path.exists():
            config_path = base_dir.parent / 'config.yaml'

        if not config_path.exists():
            logger.warning(f"Config file not found at {config_path}, using defaults")
            return None

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading configuration file {config_path}: {e}", exc_info=True)
            return None

        if not loaded_config:
            logger.warning(f"Config file {config_path} is empty, using defaults")
            return None
        logger.info(f"Loaded configuration from {config_path}")
        return loaded_config

    def _load_remote_config(self) -> Optional[Dict[str, Any]]:
        """Load configuration from the remote YAML URL with caching."""
        if not self._remote_config_url:
            return None
        try:
            current_time = time.time()
            if (self._remote_config_cache is not None and
                current_time - self._remote_config_cache_time < self._remote_config_ttl):
                logger.debug("Using cached remote config")
                return self._remote_config_cache

            logger.info(f"Fetching config from {self._remote_config_url}")
            response = requests.get(self._remote_config_url, timeout=10)
            response.raise_for_status()

            remote_config = yaml.safe_load(response.text)
            if remote_config:
                self._remote_config_cache = remote_config
                self._remote_config_cache_time = current_time
                logger.info("Successfully loaded remote config")
                return remote_config
            logger.warning("Remote config file is empty")
            return None

        except requests.exceptions.RequestException as e:
            logger.warning(f"Failed to fetch remote config: {e}")
            return None
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse remote config YAML: {e}")
            return None

    def _load_config(self) -> None:
        """Remote config first (when configured), then local file, then defaults."""
        remote_config = self._load_remote_config()
        if remote_config:
            self.config = remote_config
            logger.info("Using remote config")
            return

        local_config = self._load_config_file()
        if local_config:
            self.config = local_config
            return

        self.config = copy.deepcopy(self.defaults)

    def _load_env_variables(self) -> None:
        """Override configuration with environment variables."""
        if db_path := os.environ.get('CATALOG_DB_PATH'):
            self._set_nested_value(['storage', 'db_path'], db_path)

        if templates_dir := os.environ.get('CATALOG_TEMPLATES_DIR'):
            self._set_nested_value(['storage', 'templates_dir'], templates_dir)

        if port := os.environ.get('API_PORT'):
            self._set_nested_value(['api', 'port'], int(port))

        if host := os.environ.get('API_HOST'):
            self._set_nested_value(['api', 'host'], host)

        if debug := os.environ.get('API_DEBUG'):
            self._set_nested_value(['api', 'debug'], debug.lower() in ('true', '1', 'yes'))

        if log_level := os.environ.get('LOG_LEVEL'):
            self._set_nested_value(['logging', 'level'], log_level)

    def _set_nested_value(self, path: List[str], value: Any) -> None:
        """Set a nested value in the configuration dictionary."""
        current = self.config
        for key in path[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]
        current[path[-1]] = value

    def _get_nested_value(self, path: List[str], default: Any = None) -> Any:
        """Get a nested value from the configuration dictionary."""
        current = self.config
        try:
            for key in path:
                current = current[key]
            return current
        except (KeyError, TypeError):
            # Check in defaults
            current = self.defaults
            try:
                for key in path:
                    current = current[key]
                return current
            except (KeyError, TypeError):
                return default

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-separated path.

        Args:
            path: Dot-separated path to the configuration value (e.g., 'storage.db_path')
            default: Default value to return if the path is not found

        Returns:
            The configuration value or the default value if not found
        """
        keys = path.split('.')
        return self._get_nested_value(keys, default)

    def set(self, path: str, value: Any) -> None:
        """
        Set a configuration value by dot-separated path.

        Args:
            path: Dot-separated path to the configuration value (e.g., 'api.port')
            value: Value to set
        """
        keys = path.split('.')
        self._set_nested_value(keys, value)

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the configuration section or empty dict if not found
        """
        result = self.get(section, {})
        if not result and section in self.defaults:
            return self.defaults[section]
        return result

    def reload(self) -> None:
        """Reload configuration from all sources, bypassing the remote cache."""
        self._remote_config_cache = None
        self._remote_config_cache_time = 0
        self._remote_config_url = os.environ.get('CATALOG_CONFIG_URL')

        self._load_config()
        self._load_env_variables()
        logger.info("Configuration reloaded")

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access to configuration values."""
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        """Allow dictionary-style setting of configuration values."""
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        """Check if a configuration key exists."""
        return self.get(key) is not None


# Create a singleton instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the singleton ConfigManager instance.

    Returns:
        The ConfigManager instance
    """
    return config
