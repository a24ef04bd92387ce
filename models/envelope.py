"""
models/envelope.py
------------------
Response envelopes for the two upstream APIs and the pure decode steps that
turn a parsed JSON body into either the payload or a typed error.

Bybit v5:   {"retCode": 0, "retMsg": "OK", "result": {"list": [...]}}
Telegram:   {"ok": true, "result": {...}}  /  {"ok": false, "error_code": 400, "description": "..."}
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from core.errors import ApiError, ParseError


class BybitEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    retCode: Optional[int] = None
    retMsg: Optional[str] = None
    result: Any = None

    @property
    def code(self) -> int:
        return ApiError.MISSING_CODE if self.retCode is None else self.retCode

    @property
    def ok(self) -> bool:
        return self.code == 0


class BybitListResult(BaseModel):
    """`result` of a list endpoint; items stay loosely typed."""
    model_config = ConfigDict(extra="allow")

    list: List[Any]


class TelegramEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    ok: bool = False
    error_code: Optional[int] = None
    description: Optional[str] = None
    result: Any = None


def _validate(model: type[BaseModel], data: Any, what: str) -> BaseModel:
    if not isinstance(data, dict):
        raise ParseError(f"{what}: expected a JSON object, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(p) for p in first["loc"])
        raise ParseError(f"{what}: invalid field '{loc}': {first['msg']}") from exc


def decode_bybit(data: Any) -> Dict[str, Any]:
    """Return `data` unchanged when retCode == 0, raise otherwise.

    A missing retCode is an error with code ``ApiError.MISSING_CODE``.
    """
    env = _validate(BybitEnvelope, data, "Bybit envelope")
    if not env.ok:
        raise ApiError(env.code, env.retMsg or "Unknown error")
    return data


def decode_bybit_list(data: Dict[str, Any]) -> List[Any]:
    """Extract `result.list` from an already decoded Bybit envelope."""
    result = data.get("result")
    if not isinstance(result, dict) or "list" not in result:
        raise ParseError("'list' not found in result")
    parsed = _validate(BybitListResult, result, "Bybit result")
    return parsed.list


def decode_telegram(data: Any) -> TelegramEnvelope:
    env = _validate(TelegramEnvelope, data, "Telegram envelope")
    if not env.ok:
        raise ApiError(env.error_code or 0, env.description or "Unknown error")
    return env
