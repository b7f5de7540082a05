"""Request bodies for the HTTP API."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DatabaseRequest(BaseModel):
    """Ad-hoc credentials for one external database."""
    type: str = ""
    host: str = ""
    port: Optional[int] = None
    user: str = ""
    password: str = ""
    database: str = ""
    ssl: bool = False


class ExecuteRequest(DatabaseRequest):
    sql: str = ""


class GenerateSQLRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = ""
    schema_text: str = Field("", alias="schema")
    model: Optional[str] = None
    db_type: str = Field("mysql", alias="dbType")


class ChatRequest(BaseModel):
    message: str = ""
    model: Optional[str] = None


class TranslateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    source_lang: str = Field("", alias="sourceLang")
    target_lang: str = Field("", alias="targetLang")
    style: str = ""
    model: Optional[str] = None


class HistoryRequest(BaseModel):
    tool_name: str = ""
    input_data: Any = None
    output_data: Any = None


class PromptRequest(BaseModel):
    title: str = ""
    content: str = ""
    tags: List[str] = []
