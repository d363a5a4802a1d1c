"""Discriminated failure results for expected access-control outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True, slots=True)
class Failure:
    kind: FailureKind
    message: str


UNAUTHENTICATED = Failure(FailureKind.UNAUTHENTICATED, "Unauthorized")
FORBIDDEN = Failure(FailureKind.FORBIDDEN, "Forbidden")


__all__ = ["FORBIDDEN", "UNAUTHENTICATED", "Failure", "FailureKind"]
