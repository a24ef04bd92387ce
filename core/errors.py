"""
core/errors.py
--------------
Error taxonomy shared by the Bybit and Telegram clients.

RequestError  transport problems and non-2xx HTTP replies
ParseError    malformed JSON or a missing / mistyped expected field
ApiError      the remote API rejected the call (code + message)
"""
from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    """Base class for everything raised at an API boundary."""


class RequestError(ServiceError):
    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        self.message = message
        self.status = status
        self.body = body
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.status is None:
            return f"Request error: {self.message}"
        return f"Request error: HTTP {self.status}: {self.message}. Body: {self.body}"


class ParseError(ServiceError):
    def __init__(self, message: str, *, body: Optional[str] = None) -> None:
        self.message = message
        self.body = body
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.body is None:
            return f"Parse error: {self.message}"
        return f"Parse error: {self.message}. Response: {self.body}"


class ApiError(ServiceError):
    """Application-level rejection, e.g. ``retCode != 0`` or ``ok == false``."""

    # retCode absent from the envelope
    MISSING_CODE = -1

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(self.__str__())

    def __str__(self) -> str:
        return f"API error {self.code}: {self.message}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return (self.code, self.message) == (other.code, other.message)

    def __hash__(self) -> int:
        return hash((self.code, self.message))
