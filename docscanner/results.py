"""Result values returned across the scanner's public boundary."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from .exceptions import ScannerError

T = TypeVar("T")


class ScanFailure(str, Enum):
    """Why a scanning step produced no value."""

    IMAGE_UNAVAILABLE = "image_unavailable"
    NOT_FOUND = "not_found"
    INVALID_POLYGON = "invalid_polygon"
    DEGENERATE = "degenerate"
    ENCODE_FAILURE = "encode_failure"
    INVALID_MODE = "invalid_mode"


@dataclass(frozen=True)
class ScanResult(Generic[T]):
    """Either a value or a named failure, never both.

    Check ``ok`` (or truthiness) before reading ``value``; ``unwrap()``
    raises ``ScannerError`` on a failure.
    """

    value: Optional[T] = None
    failure: Optional[ScanFailure] = None
    message: str = ""

    @classmethod
    def success(cls, value: T) -> "ScanResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, failure: ScanFailure, message: str = "") -> "ScanResult[T]":
        return cls(failure=failure, message=message or failure.value)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        if self.failure is not None:
            raise ScannerError(f"{self.failure.value}: {self.message}")
        return self.value
