import pytest

from config import (
    AppConfig,
    GatewayConfig,
    LLMConfig,
    LLMProvider,
    MetadataDBConfig,
    MetadataDBType,
    ServerConfig,
)


def test_server_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("API_PORT", raising=False)
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    server = ServerConfig()
    assert server.port == 3001
    assert server.cors_origins == ["*"]


def test_server_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://tools.example.com")
    server = ServerConfig()
    assert server.port == 8080
    assert server.cors_origins == ["http://localhost:3000", "https://tools.example.com"]


def test_gateway_timeouts(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GATEWAY_CONNECT_TIMEOUT", "3")
    monkeypatch.setenv("GATEWAY_QUERY_TIMEOUT", "60")
    monkeypatch.setenv("GATEWAY_SSL_CA", "/etc/ssl/ca.pem")
    gateway = GatewayConfig()
    assert gateway.connect_timeout == 3
    assert gateway.query_timeout == 60
    assert gateway.ssl_ca == "/etc/ssl/ca.pem"


def test_llm_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "OpenAI")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    llm = LLMConfig()
    assert llm.provider is LLMProvider.OPENAI
    assert not llm.is_configured()


def test_ollama_host_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OLLAMA_HOST", "http://gpu:11434/")
    assert LLMConfig().ollama_host == "http://gpu:11434"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("sqlite://", MetadataDBType.SQLITE),
        ("sqlite:///meta.db", MetadataDBType.SQLITE),
        ("mysql+pymysql://u:p@h/db", MetadataDBType.MYSQL),
        ("postgresql://u:p@h/db", MetadataDBType.POSTGRESQL),
    ],
)
def test_metadata_type_from_url(url, expected) -> None:
    assert MetadataDBConfig(url=url).resolved_type is expected


def test_metadata_type_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("METADATA_DB_URL", raising=False)
    monkeypatch.setenv("DB_TYPE", "MySQL")
    assert MetadataDBConfig().resolved_type is MetadataDBType.MYSQL


def test_validate_reports_problems(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("GATEWAY_QUERY_TIMEOUT", "-1")
    is_valid, errors = AppConfig.from_env().validate()
    assert not is_valid
    assert len(errors) == 2
