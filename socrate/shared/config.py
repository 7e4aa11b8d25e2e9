"""
Configuration management for Socrate.
Loads from config/socrate.yaml and environment variables.
"""

from pathlib import Path
from typing import Optional, Dict, Any
import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class GatewayConfig(BaseSettings):
    """Model gateway client configuration."""
    # Empty proxy_url means the in-process proxy is used instead of HTTP
    proxy_url: str = Field(default="", alias="GATEWAY_PROXY_URL")
    default_model: str = Field(default="gemini-1.5-flash", alias="GATEWAY_MODEL")
    timeout_seconds: Optional[float] = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_", extra="ignore", populate_by_name=True
    )


class VendorConfig(BaseSettings):
    """Server-held vendor credentials used by the model proxy."""
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta"
    )
    temperature: float = Field(default=0.7)
    max_tokens: int = Field(default=2000)

    model_config = SettingsConfigDict(
        env_prefix="VENDOR_", extra="ignore", populate_by_name=True
    )


class ApiConfig(BaseSettings):
    """API server configuration."""
    host: str = Field(default="0.0.0.0", alias="API_HOST")
    port: int = Field(default=8000, alias="API_PORT")
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    rate_limit_requests_per_minute: int = Field(default=30, alias="API_RATE_LIMIT_RPM")

    model_config = SettingsConfigDict(
        env_prefix="API_", extra="ignore", populate_by_name=True
    )


class SessionConfig(BaseSettings):
    """In-memory session configuration."""
    idle_timeout_minutes: int = Field(default=240, alias="SESSION_IDLE_TIMEOUT_MINUTES")

    model_config = SettingsConfigDict(
        env_prefix="SESSION_", extra="ignore", populate_by_name=True
    )


class ConversationConfig(BaseSettings):
    """Root-cause conversation configuration."""
    # When set, an unparseable reply keeps exploring with this question
    fallback_question: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="CONVERSATION_", extra="ignore", populate_by_name=True
    )


class DiaryConfig(BaseSettings):
    """Diary export configuration."""
    timestamp_format: str = Field(default="%d/%m/%Y, %H:%M:%S")
    date_format: str = Field(default="%d/%m/%Y")
    time_format: str = Field(default="%H:%M:%S")
    copied_flash_seconds: float = Field(default=2.0)

    model_config = SettingsConfigDict(
        env_prefix="DIARY_", extra="ignore", populate_by_name=True
    )


class SocrateSettings(BaseSettings):
    """Main Socrate configuration."""
    env: str = Field(default="dev", alias="SOCRATE_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[Path] = Field(default=None, alias="LOG_FILE")

    # Sub-configurations
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    vendor: VendorConfig = Field(default_factory=VendorConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    conversation: ConversationConfig = Field(default_factory=ConversationConfig)
    diary: DiaryConfig = Field(default_factory=DiaryConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
        populate_by_name=True
    )

    @classmethod
    def load_from_yaml(cls, config_path: Optional[Path] = None) -> "SocrateSettings":
        """Load settings from YAML file and merge with environment variables."""
        if config_path is None:
            config_path = Path("config/socrate.yaml")

        config_dict: Dict[str, Any] = {}

        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f) or {}
                config_dict = yaml_data.get("socrate", {})

        # Flatten api.rate_limit.requests_per_minute if present
        if "api" in config_dict and isinstance(config_dict["api"], dict):
            api_cfg = dict(config_dict["api"])
            rate_limit = api_cfg.pop("rate_limit", None)
            if isinstance(rate_limit, dict) and "requests_per_minute" in rate_limit:
                api_cfg["rate_limit_requests_per_minute"] = rate_limit["requests_per_minute"]
            config_dict["api"] = api_cfg

        return cls(**config_dict)


# Global settings instance
_settings: Optional[SocrateSettings] = None


def get_settings() -> SocrateSettings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = SocrateSettings.load_from_yaml()
    return _settings


# Alias for convenience
settings = get_settings()
