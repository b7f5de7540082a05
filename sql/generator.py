"""
Text-to-SQL Generator - Multi-Database Support.

Uses LLM to generate SQL queries from natural language,
with the caller's schema report as context. Supports PostgreSQL
and the MySQL family.
"""

import logging
import re
from typing import Optional

from llm.client import LLMClient

logger = logging.getLogger(__name__)


def get_sql_dialect(db_type: str) -> str:
    """Get the SQL dialect name for the given database type."""
    dialects = {
        "postgres": "PostgreSQL",
        "postgresql": "PostgreSQL",
        "mysql": "MySQL",
        "mariadb": "MySQL",
    }
    return dialects.get((db_type or "mysql").lower(), "MySQL")


def get_dialect_specific_hints(db_type: str) -> str:
    """Get database-specific hints for SQL generation."""
    if get_sql_dialect(db_type) == "PostgreSQL":
        return "Use PostgreSQL syntax (e.g., SERIAL for auto-increment, $1 for parameters if needed)."
    return ""


PROMPT_TEMPLATE = """You are a {dialect} expert. Based on the following database schema, write a {dialect} query for the request.

Database Schema:
{schema}

Request: {request}

Write only the SQL query, nothing else. Do not include markdown code blocks.{hints}"""


def build_sql_prompt(request: str, schema: str = "", db_type: str = "mysql") -> str:
    """
    Wrap a natural-language request with schema context.

    Without a schema the request is sent to the model as is.
    """
    if not schema:
        return request
    hints = get_dialect_specific_hints(db_type)
    return PROMPT_TEMPLATE.format(
        dialect=get_sql_dialect(db_type),
        schema=schema,
        request=request,
        hints=f" {hints}" if hints else "",
    )


def extract_sql(response: str) -> str:
    """Extract SQL from an LLM response, dropping markdown code fences."""
    code_block = re.search(r'```(?:sql)?\s*(.*?)```', response, re.DOTALL | re.IGNORECASE)
    if code_block:
        return code_block.group(1).strip()

    # Unterminated fence
    text = re.sub(r'^\s*```(?:sql)?', '', response, flags=re.IGNORECASE)
    return text.strip()


class SQLGenerator:
    """Generates SQL queries from natural language using LLM."""

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    def generate(
        self,
        request: str,
        schema: str = "",
        db_type: str = "mysql",
        model: Optional[str] = None,
    ) -> str:
        """
        Generate SQL from natural language.

        Returns:
            The cleaned SQL text. It is NOT validated or executed here.
        """
        prompt = build_sql_prompt(request, schema, db_type)
        response = self.llm_client.generate(prompt, model=model)
        logger.info(
            f"Generated {get_sql_dialect(db_type)} SQL with {response.model} "
            f"({response.total_tokens} tokens)"
        )
        return extract_sql(response.content)
