from typing import List

import yaml
from pydantic import BaseModel, ConfigDict, Field

from netexport.config.paths import get_app_dir
from netexport.config.yaml import safe_load_with_env


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default='INFO', description='Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)')
    console_enabled: bool = Field(default=True, description='Enable console logging')
    file_enabled: bool = Field(default=True, description='Enable file logging')
    log_file_dir: str | None = Field(default=None, description='Log directory (defaults to ~/.netexport/logs)')
    max_file_size: str = Field(default='10MB', description='Maximum log file size before rotation')
    backup_count: int = Field(default=4, description='Number of backup files to keep')


class ConfigModel(BaseModel):
    """Configuration model with validation."""

    model_config = ConfigDict(extra='allow')

    version: str = Field(default='1', description='Config version')
    host: str = Field(default='127.0.0.1')
    port: int = Field(default=8000, ge=1, le=65535)
    dev: bool = Field(default=False)
    cors_allow_origins: List[str] = Field(default_factory=list)
    security_stripping: bool = Field(default=True, description='Strip cookies and credentials from dumps by default')
    redact_fields: List[str] = Field(default_factory=lambda: ['authorization', 'proxy-authorization', 'cookie', 'set-cookie', 'password'])
    poll_timeout: float = Field(default=10.0, gt=0, description='Seconds to wait for live data pollers')
    max_events: int = Field(default=10000, ge=1, description='Captured events kept for export')
    max_download_bytes: int = Field(default=64 * 1024 * 1024, ge=1)
    download_filename: str = Field(default='netexport-dump.json')
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description='Logging configuration')

    @classmethod
    def load(cls, config_path: str | None = None) -> 'ConfigModel':
        """Load configuration from YAML file.

        Tries multiple locations in order:
        1. Explicit config_path if provided
        2. ~/.netexport/config.yaml in user home directory
        3. ./config.yaml in current directory
        """
        config_paths = []
        if config_path:
            config_paths.append(config_path)
        else:
            home_config = get_app_dir() / 'config.yaml'
            if home_config.exists():
                config_paths.append(str(home_config))
            config_paths.append('config.yaml')

        # Later files override earlier ones
        data = {}
        for path in config_paths:
            try:
                with open(path, 'r') as f:
                    file_data = safe_load_with_env(f) or {}
                    data.update(file_data)
            except FileNotFoundError:
                continue
            except yaml.YAMLError as e:
                raise ValueError(f'Invalid YAML in config file {path}: {e}')
            except ValueError:
                raise
            except Exception as e:
                raise ValueError(f'Error reading config file {path}: {e}')

        return cls(**data)

    def save(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        with open(config_path, 'w') as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, sort_keys=False, indent=2)
