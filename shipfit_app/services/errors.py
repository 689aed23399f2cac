"""
Exceptions raised by the fitting engine.

Constraint overages are never exceptions; they are reported as data in
`ValidationResult`. Cancellation surfaces as `asyncio.CancelledError`.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class NotFoundError(Exception):
    """A referenced ship/module/charge/item type is absent from the attribute store."""

    message: str
    type_id: int | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(slots=True)
class ComputationFailure(Exception):
    """Unexpected internal error while computing part of an aggregate result."""

    message: str
    component: str = ""

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message
