"""Tagged result of an oracle call."""

from typing import Any, Union

from pydantic import BaseModel


class OracleOk(BaseModel):
    value: Any
    ok: bool = True


class OracleErr(BaseModel):
    reason: str
    ok: bool = False


OracleResult = Union[OracleOk, OracleErr]
