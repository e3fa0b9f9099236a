"""LLM completion oracle backed by the Anthropic Messages API."""

import asyncio
import json
import logging
import re
from typing import Any, Optional, Type

import anthropic
from anthropic import AsyncAnthropic
from pydantic import BaseModel, ValidationError

from ..config import settings
from ..errors import OracleTimeout, OracleUnavailable
from ..models.oracle import OracleErr, OracleOk, OracleResult

logger = logging.getLogger(__name__)

JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _strip_fences(text: str) -> str:
    clean = text.strip()
    if clean.startswith("```"):
        lines = clean.split("\n")
        if lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        clean = "\n".join(lines)
    return clean


def validate_structured(data: Any, schema: Type[BaseModel]) -> OracleResult:
    """Validate a decoded object against a schema. Null fields fall back to defaults."""
    if not isinstance(data, dict):
        return OracleErr(reason=f"Expected a JSON object, got {type(data).__name__}")
    data = {k: v for k, v in data.items() if v is not None}
    try:
        return OracleOk(value=schema.model_validate(data))
    except ValidationError as e:
        return OracleErr(reason=f"Response did not match {schema.__name__}: {e.error_count()} errors")


def parse_structured(text: str, schema: Type[BaseModel]) -> OracleResult:
    """Extract a JSON object from a free-text completion and validate it."""
    clean = _strip_fences(text)
    try:
        data = json.loads(clean)
    except json.JSONDecodeError:
        match = JSON_OBJECT_RE.search(clean)
        if not match:
            return OracleErr(reason="No JSON object found in oracle response")
        try:
            data = json.loads(match.group())
        except json.JSONDecodeError as e:
            return OracleErr(reason=f"Invalid JSON in oracle response: {e.msg}")
    return validate_structured(data, schema)


class ToneOracle:
    """
    Opaque text-completion oracle.

    `complete` returns an `OracleOk` holding either the completion text or,
    when a schema is given, a validated instance of that schema. Parse
    failures come back as `OracleErr`; transport failures raise
    `OracleTimeout` / `OracleUnavailable`.
    """

    def __init__(
        self,
        client: Optional[AsyncAnthropic] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.oracle_timeout_seconds
        self.client = client or AsyncAnthropic(api_key=settings.anthropic_api_key, max_retries=0)
        self.model = model or settings.anthropic_model
        self.max_tokens = max_tokens or settings.oracle_max_tokens

    async def complete(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        schema: Optional[Type[BaseModel]] = None,
    ) -> OracleResult:
        request = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": settings.oracle_temperature if temperature is None else temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if schema is not None:
            tool_name = f"record_{schema.__name__.lower()}"
            request["tools"] = [{
                "name": tool_name,
                "description": schema.__doc__ or f"Record a {schema.__name__}",
                "input_schema": schema.model_json_schema(),
            }]
            request["tool_choice"] = {"type": "tool", "name": tool_name}

        try:
            message = await asyncio.wait_for(
                self.client.messages.create(**request), timeout=self.timeout
            )
        except (asyncio.TimeoutError, anthropic.APITimeoutError):
            raise OracleTimeout(f"Oracle did not answer within {self.timeout}s")
        except anthropic.APIError as e:
            raise OracleUnavailable(f"Oracle request failed: {str(e)}")

        if schema is None:
            text = "".join(
                block.text for block in message.content if getattr(block, "type", None) == "text"
            )
            return OracleOk(value=text.strip())

        for block in message.content:
            if getattr(block, "type", None) == "tool_use":
                return validate_structured(block.input, schema)
        # Model answered in prose despite the forced tool
        text = "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )
        logger.warning(f"Oracle returned text instead of a {schema.__name__} tool call")
        return parse_structured(text, schema)
