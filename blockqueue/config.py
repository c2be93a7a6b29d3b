import yaml
import os
from typing import Dict, Any, List, Optional
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError

class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000

class SchedulingConfig(BaseModel):
    poll_interval_seconds: float = 5.0 # Re-check cadence for blocked items

class LoggingConfig(BaseModel):
    keep_last_n_decisions_in_memory: int = 500
    log_dir: str = "logs"
    level: str = "INFO"

class AppConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    jobs: List[str] = [] # Jobs known at startup
    # Same shape the condition form submits: {"jobName": ..., "defineBlockingParams": {...}}
    conditions: List[Dict[str, Any]] = []

class ConfigLoader:
    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = config_path
        self._config: Optional[AppConfig] = None

    def load_config(self) -> AppConfig:
        if not os.path.exists(self.config_path):
            self._config = AppConfig() # Defaults
            return self._config

        with open(self.config_path, 'r') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {self.config_path}: {e}")

        try:
            self._config = AppConfig(**data)
        except (TypeError, ValidationError) as e:
            raise ConfigError(f"Invalid configuration in {self.config_path}: {e}")
        return self._config

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            self.load_config()
        return self._config

global_config = ConfigLoader(os.environ.get("BLOCKQUEUE_CONFIG", "config.yaml"))
