"""
Marketplace error taxonomy.

Services return a `MarketError` member for expected business outcomes
(missing entity, inactive auction, insufficient gold...). Only the API
layer turns them into exceptions, via `MarketHTTPException`, so the
global handler can render one stable JSON envelope.
"""

from enum import Enum
from typing import TypeVar

from fastapi import HTTPException

T = TypeVar("T")


class ErrorKind(str, Enum):
    """High-level categories with a fixed transport mapping."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    PRECONDITION_FAILED = "precondition_failed"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    INTERNAL = "internal"

    @property
    def http_status(self) -> int:
        return _KIND_STATUS[self]


_KIND_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 422,
    ErrorKind.PRECONDITION_FAILED: 409,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class MarketError(Enum):
    """Every outcome a marketplace operation can fail with: (code, kind, message)."""

    CHARACTER_NOT_FOUND = ("character_not_found", ErrorKind.NOT_FOUND, "The character does not exist.")
    ITEM_NOT_FOUND = ("item_not_found", ErrorKind.NOT_FOUND, "The item does not exist.")
    ITEM_INSTANCE_NOT_FOUND = (
        "item_instance_not_found",
        ErrorKind.NOT_FOUND,
        "The item instance does not exist.",
    )
    AUCTION_NOT_FOUND = ("auction_not_found", ErrorKind.NOT_FOUND, "The auction does not exist.")
    EMPTY_NAME = ("empty_name", ErrorKind.VALIDATION, "The name provided is empty.")
    NAME_TAKEN = ("name_taken", ErrorKind.CONFLICT, "The name is already in use.")
    AUCTION_NOT_ACTIVE = (
        "auction_not_active",
        ErrorKind.PRECONDITION_FAILED,
        "The auction is no longer active.",
    )
    INSUFFICIENT_GOLD = (
        "insufficient_gold",
        ErrorKind.FORBIDDEN,
        "The buyer does not have enough gold.",
    )
    INCORRECT_BUYER = (
        "incorrect_buyer",
        ErrorKind.FORBIDDEN,
        "A character cannot buy its own auction.",
    )
    ITEM_INSTANCE_NOT_OWNED = (
        "item_instance_not_owned",
        ErrorKind.FORBIDDEN,
        "The item instance does not belong to this character.",
    )
    ITEM_INSTANCE_ALREADY_LISTED = (
        "item_instance_already_listed",
        ErrorKind.CONFLICT,
        "The item instance already has an active auction.",
    )
    INTERNAL = ("internal", ErrorKind.INTERNAL, "Internal server error.")

    def __init__(self, code: str, kind: ErrorKind, message: str):
        self.code = code
        self.kind = kind
        self.message = message

    @property
    def http_status(self) -> int:
        return self.kind.http_status

    def to_response(self) -> dict:
        return {"code": self.code, "kind": self.kind.value, "message": self.message}


class MarketHTTPException(HTTPException):
    """HTTPException carrying the MarketError it was raised for."""

    def __init__(self, error: MarketError):
        super().__init__(status_code=error.http_status, detail=error.message)
        self.error = error


def ok_or_raise(result: T | MarketError) -> T:
    """Endpoint helper: pass a service result through, or raise its MarketError."""
    if isinstance(result, MarketError):
        raise MarketHTTPException(result)
    return result
