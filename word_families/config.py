#!/usr/bin/env python3
"""
Configuration Management for the Word Family System
Supports environment variables, a JSON config file, and development defaults
"""

import os
import json
import logging
from typing import Dict, Optional, Any
from pathlib import Path
from dataclasses import dataclass

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Family statistics are cached for five minutes
DEFAULT_STATS_CACHE_TTL = 300
DEFAULT_PROGRESS_EVERY = 50


@dataclass
class DatabaseConfig:
    """Database configuration with validation"""
    host: str
    port: int
    database: str
    user: str
    password: str
    schema: str = 'public'
    pool_size: int = 10
    timeout: int = 30

    def __post_init__(self):
        """Validate configuration after initialization"""
        if not self.host:
            raise ValueError("Database host is required")
        if not self.user:
            raise ValueError("Database user is required")
        if not self.password:
            raise ValueError("Database password is required")
        if not (1 <= self.port <= 65535):
            raise ValueError("Database port must be between 1 and 65535")

    def get_connection_string(self, hide_password: bool = True) -> str:
        """Get connection string representation"""
        password = "***" if hide_password else self.password
        conninfo = (
            f"postgresql://{self.user}:{password}@{self.host}:{self.port}/{self.database}"
        )
        if self.schema:
            conninfo += f"?options=-c%20search_path%3D{self.schema}"
        return conninfo


@dataclass
class AppConfig:
    """Engine settings that are not tied to the database connection"""
    stats_cache_ttl: float = DEFAULT_STATS_CACHE_TTL
    progress_every: int = DEFAULT_PROGRESS_EVERY
    log_level: str = 'INFO'

    def __post_init__(self):
        if self.stats_cache_ttl <= 0:
            raise ValueError("Stats cache TTL must be positive")
        if self.progress_every < 1:
            raise ValueError("Progress interval must be at least 1")
        self.log_level = self.log_level.upper()


class ConfigManager:
    """Configuration manager with environment variable support"""

    def __init__(self, config_file: Optional[Path] = None):
        self._db_config: Optional[DatabaseConfig] = None
        self._app_config: Optional[AppConfig] = None
        env_path = os.getenv('WORD_FAMILY_CONFIG')
        if config_file is not None:
            self._config_file = Path(config_file)
        elif env_path:
            self._config_file = Path(env_path)
        else:
            self._config_file = Path.cwd() / 'config.json'

    def get_database_config(self) -> DatabaseConfig:
        """
        Get database configuration from multiple sources in priority order:
        1. Environment variables
        2. config.json file
        3. Default values (development only)
        """
        if self._db_config is None:
            self._db_config = self._load_database_config()

        return self._db_config

    def get_app_config(self) -> AppConfig:
        if self._app_config is None:
            self._app_config = self._load_app_config()
        return self._app_config

    def _load_database_config(self) -> DatabaseConfig:
        if self._has_env_config():
            logger.info("Loading database config from environment variables")
            return self._load_from_environment()

        file_data = self._read_config_file()
        if 'database' in file_data:
            logger.info(f"Loading database config from {self._config_file}")
            return DatabaseConfig(**file_data['database'])

        logger.warning("Using default database configuration - not recommended for production")
        return self._load_default_config()

    def _has_env_config(self) -> bool:
        """Check if required environment variables are set"""
        required_vars = ['DB_HOST', 'DB_USER', 'DB_PASSWORD', 'DB_NAME']
        return all(os.getenv(var) for var in required_vars)

    def _load_from_environment(self) -> DatabaseConfig:
        return DatabaseConfig(
            host=os.getenv('DB_HOST', 'localhost'),
            port=int(os.getenv('DB_PORT', '5432')),
            database=os.getenv('DB_NAME', 'wf'),
            user=os.getenv('DB_USER', 'wf'),
            password=os.getenv('DB_PASSWORD', ''),
            schema=os.getenv('DB_SCHEMA', 'public'),
            pool_size=int(os.getenv('DB_POOL_SIZE', '10')),
            timeout=int(os.getenv('DB_TIMEOUT', '30'))
        )

    def _load_default_config(self) -> DatabaseConfig:
        return DatabaseConfig(
            host='localhost',
            port=5432,
            database='wf',
            user='wf',
            password='wf-development-password',
            schema='public',
            pool_size=10,
            timeout=30
        )

    def _load_app_config(self) -> AppConfig:
        settings = dict(self._read_config_file().get('application', {}))
        if os.getenv('STATS_CACHE_TTL'):
            settings['stats_cache_ttl'] = float(os.environ['STATS_CACHE_TTL'])
        if os.getenv('PROGRESS_EVERY'):
            settings['progress_every'] = int(os.environ['PROGRESS_EVERY'])
        if os.getenv('LOG_LEVEL'):
            settings['log_level'] = os.environ['LOG_LEVEL']
        return AppConfig(**settings)

    def _read_config_file(self) -> Dict[str, Any]:
        if not self._config_file.exists():
            return {}
        try:
            with open(self._config_file, 'r') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading config file {self._config_file}: {e}")
            return {}

    def get_config_info(self) -> Dict[str, Any]:
        """Get configuration information (without sensitive data)"""
        config = self.get_database_config()
        app = self.get_app_config()

        return {
            'database': {
                'host': config.host,
                'port': config.port,
                'database': config.database,
                'user': config.user,
                'connection_string': config.get_connection_string(hide_password=True),
                'pool_size': config.pool_size,
                'timeout': config.timeout
            },
            'application': {
                'stats_cache_ttl': app.stats_cache_ttl,
                'progress_every': app.progress_every,
                'log_level': app.log_level,
            },
            'config_sources': {
                'env_variables': self._has_env_config(),
                'config_file': self._config_file.exists(),
            }
        }


# Global configuration manager instance
config_manager = ConfigManager()


def get_database_config() -> DatabaseConfig:
    return config_manager.get_database_config()


def get_app_config() -> AppConfig:
    return config_manager.get_app_config()


def configure_logging(level: Optional[str] = None) -> None:
    """Install the root handler used by the web app and the CLI"""
    level_name = (level or get_app_config().log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
