"""
Configuration Settings for TradeJournal

This module loads settings from config.yaml and the environment and provides
them as a Pydantic settings object.
"""

import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the base directory of the project
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))


def load_yaml_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the optional YAML configuration file"""
    config_path = path or os.environ.get("TRADEJOURNAL_CONFIG", os.path.join(BASE_DIR, "config.yaml"))
    try:
        with open(config_path, "r") as file:
            return yaml.safe_load(file) or {}
    except FileNotFoundError:
        return {}


# .env may name the YAML file through TRADEJOURNAL_CONFIG
load_dotenv()
yaml_config = load_yaml_config()


class Settings(BaseSettings):
    # Server settings
    host: str = yaml_config.get("server", {}).get("host", "127.0.0.1")
    port: int = yaml_config.get("server", {}).get("port", 8000)
    debug: bool = yaml_config.get("server", {}).get("debug", False)

    # API and security
    api_prefix: str = "/api"
    secret_key: str = yaml_config.get("security", {}).get("jwt_secret", "CHANGE_THIS_TO_A_STRONG_SECRET")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = yaml_config.get("security", {}).get("jwt_expire_minutes", 60)
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Database settings
    database_url: str = yaml_config.get("database", {}).get("url", "sqlite:///./tradejournal.db")

    # Tradovate settings
    tradovate_demo_client_id: Optional[str] = yaml_config.get("tradovate", {}).get("demo", {}).get("client_id")
    tradovate_demo_client_secret: Optional[str] = yaml_config.get("tradovate", {}).get("demo", {}).get("client_secret")
    tradovate_live_client_id: Optional[str] = yaml_config.get("tradovate", {}).get("live", {}).get("client_id")
    tradovate_live_client_secret: Optional[str] = yaml_config.get("tradovate", {}).get("live", {}).get("client_secret")
    tradovate_demo_url: str = "https://demo.tradovateapi.com"
    tradovate_live_url: str = "https://live.tradovateapi.com"
    tradovate_encryption_key: Optional[str] = None
    tradovate_timeout: float = yaml_config.get("tradovate", {}).get("timeout", 30.0)

    # Journal settings
    export_limit: int = 10000
    stats_trade_limit: int = 10000

    # Logging settings
    log_level: str = yaml_config.get("logging", {}).get("level", "INFO")
    log_dir: str = os.path.join(BASE_DIR, yaml_config.get("logging", {}).get("dir", "logs"))
    log_to_file: bool = yaml_config.get("logging", {}).get("to_file", False)

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("tradovate_encryption_key")
    @classmethod
    def validate_encryption_key(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        try:
            key = bytes.fromhex(v)
        except ValueError:
            raise ValueError("tradovate_encryption_key must be hex encoded")
        if len(key) != 32:
            raise ValueError("tradovate_encryption_key must be 32 bytes (64 hex characters)")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    def tradovate_client_id(self, environment: str) -> Optional[str]:
        return self.tradovate_demo_client_id if environment == "demo" else self.tradovate_live_client_id

    def tradovate_client_secret(self, environment: str) -> Optional[str]:
        return self.tradovate_demo_client_secret if environment == "demo" else self.tradovate_live_client_secret

    def tradovate_base_url(self, environment: str) -> str:
        return self.tradovate_demo_url if environment == "demo" else self.tradovate_live_url


@lru_cache()
def get_settings() -> Settings:
    """Get the process-wide settings object"""
    return Settings()


settings = get_settings()
