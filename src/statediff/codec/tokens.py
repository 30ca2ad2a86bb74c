"""
Token model for the streaming marshaler.

A token stream is a flat, depth-first rendering of a node tree. Containers are bracketed
by open/close tokens; MAP_OPEN and ARR_OPEN carry the number of entries that follow.

Notes:
    - Tokens are immutable; sinks must not rely on identity.
    - A sink consumes tokens one at a time via step() and may raise to abort the stream.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "TokenKind",
    "Token",
    "TokenSink",
    "ListSink",
]


class TokenKind(str, Enum):
    MAP_OPEN = "map_open"
    MAP_CLOSE = "map_close"
    ARR_OPEN = "arr_open"
    ARR_CLOSE = "arr_close"
    STRING = "string"
    INT = "int"
    FLOAT64 = "float64"
    BOOL = "bool"
    NULL = "null"


@dataclass(frozen=True, slots=True)
class Token:
    """
    One element of a token stream.

    Attributes:
        kind (TokenKind): Token type.
        value (Any): Payload for STRING/INT/FLOAT64/BOOL; None otherwise.
        length (int): Entry count for MAP_OPEN/ARR_OPEN; -1 otherwise.

    Examples:
        >>> Token.string("/")
        Token(kind=<TokenKind.STRING: 'string'>, value='/', length=-1)
    """

    kind: TokenKind
    value: Any = None
    length: int = -1

    @classmethod
    def map_open(cls, length: int) -> Token:
        return cls(TokenKind.MAP_OPEN, length=length)

    @classmethod
    def map_close(cls) -> Token:
        return cls(TokenKind.MAP_CLOSE)

    @classmethod
    def arr_open(cls, length: int) -> Token:
        return cls(TokenKind.ARR_OPEN, length=length)

    @classmethod
    def arr_close(cls) -> Token:
        return cls(TokenKind.ARR_CLOSE)

    @classmethod
    def string(cls, value: str) -> Token:
        return cls(TokenKind.STRING, value)

    @classmethod
    def int_(cls, value: int) -> Token:
        return cls(TokenKind.INT, value)

    @classmethod
    def float64(cls, value: float) -> Token:
        return cls(TokenKind.FLOAT64, value)

    @classmethod
    def bool_(cls, value: bool) -> Token:
        return cls(TokenKind.BOOL, value)

    @classmethod
    def null(cls) -> Token:
        return cls(TokenKind.NULL)


@runtime_checkable
class TokenSink(Protocol):
    def step(self, token: Token) -> None:
        """Consume one token; raise to abort the stream."""
        ...


class ListSink:
    """Sink that records every token, for inspection and tests."""

    def __init__(self) -> None:
        self.tokens: list[Token] = []

    def step(self, token: Token) -> None:
        self.tokens.append(token)
