"""Translate caught adaptive errors into scenario outcomes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from scenarist.domain.errors import AdaptiveError
from scenarist.domain.outcome import Outcome, Rethrow, StructuredFailure, Suppressed
from scenarist.domain.policy import RAISE_POLICY, Action, ExceptionPolicy, PolicyRegistry
from scenarist.domain.ports import Notifier

_log = logging.getLogger(__name__)


def resolve(error: AdaptiveError, registry: PolicyRegistry) -> ExceptionPolicy:
    """Resolve the policy for ``error``.

    Args:
        error: Adaptive error caught while running domain logic.
        registry: Policies of the scenario type that caught it.

    Returns:
        ExceptionPolicy: The policy registered for ``type(error)`` exactly; if
        none exists, the error's ``declared_action`` without notification;
        otherwise the RAISE policy.
    """
    found = registry.lookup(type(error))
    if found is not None:
        return found
    if error.declared_action is not None:
        return ExceptionPolicy(action=Action.parse(error.declared_action))
    return RAISE_POLICY


def decide(error: AdaptiveError, policy: ExceptionPolicy) -> Outcome:
    """Map a resolved policy onto the outcome a scenario applies."""
    if policy.action is Action.FAIL:
        return StructuredFailure(error)
    if policy.action.suppresses:
        return Suppressed(error, policy.action)
    return Rethrow(error)


@dataclass
class Dispatcher:
    """Resolve, notify, and decide for one caught adaptive error.

    The dispatcher never raises on its own account. Only the notifier may
    raise, and those errors propagate to the caller untouched.
    """

    registry: PolicyRegistry
    notifier: Optional[Notifier] = None

    def dispatch(self, error: AdaptiveError) -> Outcome:
        policy = resolve(error, self.registry)
        if policy.should_notify:
            self._notify(error, policy)
        outcome = decide(error, policy)
        _log.debug(
            "Dispatched %s (%s) -> %s",
            type(error).__name__,
            error.code,
            policy.action.value,
        )
        return outcome

    def _notify(self, error: AdaptiveError, policy: ExceptionPolicy) -> None:
        if self.notifier is None:
            _log.warning("No notifier configured; dropping notification for %s", type(error).__name__)
            return
        self.notifier.post(error, policy.level_for(error))


__all__ = ["Dispatcher", "decide", "resolve"]
