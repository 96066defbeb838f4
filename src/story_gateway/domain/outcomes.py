"""Result types delivered by every gateway operation."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Operation completed; carries the decoded payload, if any."""

    value: T | None = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Operation failed; carries a human-readable message."""

    message: str

    @property
    def ok(self) -> bool:
        return False


Outcome = Success[T] | Failure
