from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class LootError(Exception):
    """Structured error for configuration and generation flows.

    The server layer maps these to HTTP 4xx while keeping a stable
    machine-readable code for clients.
    """

    code: str
    message: str
    details: Optional[Any] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_payload(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


# Error codes (stable API surface)
INVALID_CONFIG = "INVALID_CONFIG"
EMPTY_POPULATION = "EMPTY_POPULATION"
NO_SUBTYPES = "NO_SUBTYPES"
NO_NAMES = "NO_NAMES"
DEGENERATE_WEIGHTS = "DEGENERATE_WEIGHTS"
INVALID_LEVEL = "INVALID_LEVEL"
INVALID_OPTIONS = "INVALID_OPTIONS"
BATCH_RELEASED = "BATCH_RELEASED"


class InvalidConfig(LootError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(INVALID_CONFIG, message, details)


class EmptyPopulation(LootError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(EMPTY_POPULATION, message, details)


class NoSubtypes(LootError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(NO_SUBTYPES, message, details)


class NoNames(LootError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(NO_NAMES, message, details)


class DegenerateWeights(LootError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(DEGENERATE_WEIGHTS, message, details)


class InvalidLevel(LootError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(INVALID_LEVEL, message, details)


class InvalidOptions(LootError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(INVALID_OPTIONS, message, details)


class BatchReleased(LootError):
    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(BATCH_RELEASED, message, details)


# Errors that describe the configured model rather than the request itself.
POPULATION_ERROR_CODES = frozenset({EMPTY_POPULATION, NO_SUBTYPES, NO_NAMES, DEGENERATE_WEIGHTS})
