from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:  # pragma: no cover - type checking helper
    from .errors import AdaptiveError, NotifyLevel

Locale = Optional[str]


# ---- Ports (collaborator boundaries) ----
@runtime_checkable
class Notifier(Protocol):
    """Sink receiving adaptive errors a scenario policy asked to report.

    Implementations may raise; the dispatcher does not catch notifier errors.
    """

    def post(self, error: "AdaptiveError", level: "NotifyLevel") -> None: ...


__all__ = ["Locale", "Notifier"]
