"""Tagged outcomes produced by the dispatcher and applied by a scenario."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .errors import AdaptiveError
from .policy import Action


@dataclass(frozen=True)
class Success:
    """Domain logic returned normally."""

    result: Any


@dataclass(frozen=True)
class StructuredFailure:
    """Adaptive error recorded as the scenario's failure."""

    error: AdaptiveError
    action: Action = Action.FAIL


@dataclass(frozen=True)
class Suppressed:
    """Adaptive error swallowed by an IGNORE or STOP policy."""

    error: AdaptiveError
    action: Action


@dataclass(frozen=True)
class Rethrow:
    """Adaptive error that must leave the scenario as an exception."""

    error: AdaptiveError


Outcome = Union[Success, StructuredFailure, Suppressed, Rethrow]

__all__ = ["Outcome", "Rethrow", "StructuredFailure", "Success", "Suppressed"]
