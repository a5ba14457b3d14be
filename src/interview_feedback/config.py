"""Configuration management for the interview feedback service."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # AI Gateway
    gemini_api_key: Optional[str] = Field(None, description="Gemini API key")
    gemini_model: str = Field("gemini-1.5-flash", description="Gemini model used for analysis")
    gemini_base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL"
    )
    gateway_timeout: float = Field(30.0, description="Per-request gateway timeout in seconds")
    
    # Feedback pipeline
    max_retries: int = Field(3, ge=1, description="Maximum analysis attempts per answer")
    retry_delay: float = Field(1.0, ge=0.0, description="Base retry delay in seconds")
    max_concurrency: int = Field(4, ge=1, description="Concurrent answer analyses")
    pipeline_deadline: Optional[float] = Field(
        None, gt=0.0, description="Overall pipeline deadline in seconds"
    )
    
    # Application Configuration
    debug: bool = Field(False, description="Enable debug mode")
    log_level: str = Field("INFO", description="Logging level")
    
    # Server Configuration
    api_host: str = Field("0.0.0.0", description="API server host")
    api_port: int = Field(8000, description="API server port")
    reload: bool = Field(False, description="Enable auto-reload")
    allowed_origins: list[str] = Field(["*"], description="CORS allowed origins")


# Global settings instance
settings = Settings()
