from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from config import GatewayConfig, MetadataDBConfig
from database import ConnectionManager, DatabaseGateway
from llm import LLMClient, LLMError, LLMResponse
from storage import MetadataDatabase, init_metadata_store


class RecordingEngineFactory:
    """Stands in for create_engine; every engine is a fresh in-memory SQLite database."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        return create_engine("sqlite://", poolclass=NullPool)


class FakeLLMClient(LLMClient):
    def __init__(self, reply: str = "", models: Optional[List[Dict[str, Any]]] = None, error: str = "") -> None:
        self.reply = reply
        self.models = models or []
        self.error = error
        self.prompts: List[str] = []
        self.default_model = "llama3.2"
        self.endpoint = "http://ollama.test:11434"

    def generate(self, prompt: str, model: Optional[str] = None) -> LLMResponse:
        self.prompts.append(prompt)
        if self.error:
            raise LLMError(self.error)
        return LLMResponse(content=self.reply, model=model or self.default_model)

    def list_models(self) -> List[Dict[str, Any]]:
        if self.error:
            raise LLMError(self.error)
        return self.models


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(connect_timeout=5, query_timeout=0, ssl_ca=None)


@pytest.fixture
def engine_factory() -> RecordingEngineFactory:
    return RecordingEngineFactory()


@pytest.fixture
def gateway(gateway_config: GatewayConfig, engine_factory: RecordingEngineFactory) -> DatabaseGateway:
    return DatabaseGateway(connections=ConnectionManager(gateway_config, engine_factory=engine_factory))


@pytest.fixture
def mock_engine() -> MagicMock:
    """Engine whose connection answers the health check."""
    engine = MagicMock()
    connection = engine.connect.return_value
    connection.execute.return_value.fetchone.return_value = (1,)
    return engine


@pytest.fixture
def metadata_db() -> MetadataDatabase:
    db = MetadataDatabase(MetadataDBConfig(url="sqlite://"))
    yield db
    db.close()


@pytest.fixture
def metadata_store(metadata_db: MetadataDatabase):
    return init_metadata_store(db=metadata_db)


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient(reply="ok")
