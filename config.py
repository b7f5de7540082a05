"""
Configuration module for the Database Gateway service.

This module handles all configuration including:
- HTTP server settings (bind address, port, CORS)
- Gateway connection settings (timeouts, TLS CA)
- LLM provider settings (Ollama / OpenAI)
- Metadata store settings (history and prompt library)
- Logging

Credentials for the external databases the gateway talks to are NEVER
configured here; they arrive with each request.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, List
from enum import Enum

# Load .env file BEFORE any os.getenv calls
from dotenv import load_dotenv
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


def _int_env(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


class LLMProvider(Enum):
    """Supported LLM providers."""
    OLLAMA = "ollama"
    OPENAI = "openai"


class MetadataDBType(Enum):
    """Supported metadata store backends."""
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"


@dataclass
class ServerConfig:
    """HTTP server settings."""
    host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _int_env("API_PORT", 3001))

    # Comma-separated list; "*" allows every origin
    cors_origins: List[str] = field(
        default_factory=lambda: [
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        ]
    )


@dataclass
class GatewayConfig:
    """
    Settings applied to every ad-hoc external database connection.

    A query timeout of 0 means no deadline is imposed by the gateway.
    """
    connect_timeout: int = field(default_factory=lambda: _int_env("GATEWAY_CONNECT_TIMEOUT", 10))
    query_timeout: int = field(default_factory=lambda: _int_env("GATEWAY_QUERY_TIMEOUT", 0))

    # CA bundle used to verify server certificates when a request asks for TLS
    ssl_ca: Optional[str] = field(default_factory=lambda: os.getenv("GATEWAY_SSL_CA") or None)


@dataclass
class LLMConfig:
    """LLM configuration for SQL generation, chat and translation."""
    provider: LLMProvider = field(
        default_factory=lambda: LLMProvider(os.getenv("LLM_PROVIDER", "ollama").lower())
    )
    ollama_host: str = field(
        default_factory=lambda: os.getenv("OLLAMA_HOST", "http://localhost:11434").rstrip("/")
    )
    default_model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "llama3.2"))

    openai_api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    openai_model: str = field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4o-mini"))

    # Generation parameters
    temperature: float = 0.1  # Low temperature for more deterministic outputs
    max_tokens: int = 2000
    timeout: float = field(default_factory=lambda: float(os.getenv("LLM_TIMEOUT", "120")))

    def is_configured(self) -> bool:
        """Check if LLM is properly configured."""
        if self.provider == LLMProvider.OPENAI:
            return bool(self.openai_api_key)
        return bool(self.ollama_host)


@dataclass
class MetadataDBConfig:
    """
    Connection settings for the service's own metadata store.

    METADATA_DB_URL, when set, overrides the discrete DB_* settings.
    """
    db_type: MetadataDBType = field(
        default_factory=lambda: MetadataDBType(os.getenv("DB_TYPE", "postgresql").lower())
    )
    host: str = field(default_factory=lambda: os.getenv("DB_HOST", "localhost"))
    port: int = field(default_factory=lambda: _int_env("DB_PORT", 5432))
    database: str = field(default_factory=lambda: os.getenv("DB_NAME", "webtools"))
    username: str = field(default_factory=lambda: os.getenv("DB_USER", "webtools"))
    password: str = field(default_factory=lambda: os.getenv("DB_PASSWORD", "webtools123"))
    url: Optional[str] = field(default_factory=lambda: os.getenv("METADATA_DB_URL") or None)

    # Pool sizing: pool_size connections kept, up to pool_size + max_overflow open
    pool_size: int = field(default_factory=lambda: _int_env("DB_POOL_SIZE", 5))
    max_overflow: int = field(default_factory=lambda: _int_env("DB_POOL_MAX_OVERFLOW", 20))
    pool_recycle: int = field(default_factory=lambda: _int_env("DB_POOL_RECYCLE", 3600))
    pool_timeout: int = 30

    @property
    def resolved_type(self) -> MetadataDBType:
        """Backend type, taken from the URL scheme when a URL is given."""
        if self.url:
            scheme = self.url.split(":", 1)[0].split("+", 1)[0].lower()
            if scheme == "sqlite":
                return MetadataDBType.SQLITE
            if scheme in ("mysql", "mariadb"):
                return MetadataDBType.MYSQL
            return MetadataDBType.POSTGRESQL
        return self.db_type

    def is_configured(self) -> bool:
        """Check if all required metadata store settings are present."""
        if self.url:
            return True
        return all([self.host, self.database, self.username])


@dataclass
class LoggingConfig:
    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "info"))


class AppConfig:
    """
    Main application configuration aggregator.

    Combines all configuration sections and provides
    validation methods.
    """

    def __init__(self):
        self.server = ServerConfig()
        self.gateway = GatewayConfig()
        self.llm = LLMConfig()
        self.metadata = MetadataDBConfig()
        self.logging = LoggingConfig()

    def validate(self) -> tuple[bool, List[str]]:
        """
        Validate all configuration settings.

        Returns:
            tuple: (is_valid, list of error messages)
        """
        errors = []

        if self.gateway.connect_timeout < 0 or self.gateway.query_timeout < 0:
            errors.append("Gateway timeouts must be zero or positive.")

        if not self.llm.is_configured():
            errors.append(
                f"LLM configuration incomplete for provider: {self.llm.provider.value}. "
                "Check OLLAMA_HOST or OPENAI_API_KEY."
            )

        if not self.metadata.is_configured():
            errors.append("Metadata store configuration incomplete. Check DB_* environment variables.")

        return len(errors) == 0, errors

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()


# Global configuration instance
config = AppConfig.from_env()
