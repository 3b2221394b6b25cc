"""
Application configuration settings using Pydantic Settings.
Supports environment variables and .env files for flexible deployment.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class VsAgentSettings(BaseSettings):
    """Messaging service (VS Agent admin API) configuration."""

    model_config = SettingsConfigDict(env_prefix="VS_AGENT_")

    admin_url: str = Field(
        default="http://localhost:3001",
        description="Base URL of the VS Agent admin API"
    )
    timeout_seconds: float = Field(default=10.0, description="Outbound message timeout")


class LLMSettings(BaseSettings):
    """LLM provider settings (OpenAI-compatible chat completions or Anthropic Messages)."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    provider: Literal["openai", "ollama", "anthropic"] = Field(default="openai", description="LLM provider")
    base_url: str | None = Field(
        default=None,
        description="Override for the provider base URL"
    )
    api_key: str = Field(default="", description="API key for the LLM provider")
    model: str = Field(default="gpt-4o-mini", description="Model to use")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=512, ge=1, description="Max tokens for response")
    timeout_seconds: int = Field(default=30, description="API timeout")
    agent_prompt: str = Field(default="", description="Default agent persona prompt")

    @property
    def resolved_base_url(self) -> str:
        """Base URL for the configured provider."""
        if self.base_url:
            return self.base_url.rstrip("/")
        if self.provider == "ollama":
            return "http://localhost:11434/v1"
        if self.provider == "anthropic":
            return "https://api.anthropic.com/v1"
        return "https://api.openai.com/v1"


class MemorySettings(BaseSettings):
    """Conversation memory configuration."""

    model_config = SettingsConfigDict(env_prefix="MEMORY_")

    backend: Literal["memory", "redis"] = Field(default="memory", description="Memory backend")
    window: int = Field(default=8, ge=1, description="Max turns kept per connection")
    ttl_seconds: int = Field(
        default=4 * 60 * 60,
        ge=1,
        description="Retention of shared history per connection"
    )


class RedisSettings(BaseSettings):
    """Redis configuration for shared conversation memory."""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    host: str = Field(default="localhost", description="Redis host")
    port: int = Field(default=6379, description="Redis port")
    password: str | None = Field(default=None, description="Redis password")
    db: int = Field(default=0, description="Redis database number")

    @property
    def url(self) -> str:
        """Build Redis URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


class DatabaseSettings(BaseSettings):
    """Session store configuration."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    backend: Literal["memory", "sqlite"] = Field(default="sqlite", description="Session store backend")
    path: str = Field(default="sessions.db", description="SQLite database file")


class AgentSettings(BaseSettings):
    """Agent pack and credential flow settings."""

    model_config = SettingsConfigDict(env_prefix="AGENT_")

    pack_path: str = Field(
        default="agent-packs",
        description="Agent pack manifest file or directory containing one"
    )
    credential_definition_id: str | None = Field(
        default=None,
        description="Credential definition requested during authentication"
    )


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=3000, description="API port")
    workers: int = Field(default=1, description="Number of workers")
    debug: bool = Field(default=False, description="Debug mode")
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["*"],
        description="CORS allowed origins"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment"
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # Sub-settings
    vs_agent: VsAgentSettings = Field(default_factory=VsAgentSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    memory: MemorySettings = Field(default_factory=MemorySettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    agent: AgentSettings = Field(default_factory=AgentSettings)
    api: APISettings = Field(default_factory=APISettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
