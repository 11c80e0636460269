"""Error type shared by every repository layer."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    NETWORK_FAILURE = "NETWORK_FAILURE"
    DECODE_FAILURE = "DECODE_FAILURE"
    ILLEGAL_STATE = "ILLEGAL_STATE"


class RepositoryError(RuntimeError):
    """Raised when a repository operation cannot be completed."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    @classmethod
    def not_found(cls, message: str) -> "RepositoryError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def network_failure(cls, message: str) -> "RepositoryError":
        return cls(ErrorKind.NETWORK_FAILURE, message)

    @classmethod
    def decode_failure(cls, message: str) -> "RepositoryError":
        return cls(ErrorKind.DECODE_FAILURE, message)

    @classmethod
    def illegal_state(cls, message: str) -> "RepositoryError":
        return cls(ErrorKind.ILLEGAL_STATE, message)

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.args[0]}"
