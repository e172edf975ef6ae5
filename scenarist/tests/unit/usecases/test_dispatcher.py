from __future__ import annotations

import pytest

from scenarist.adapters.notifier_memory import MemoryNotifier
from scenarist.domain.errors import AdaptiveError, NotifyLevel
from scenarist.domain.outcome import Rethrow, StructuredFailure, Suppressed
from scenarist.domain.policy import Action, ExceptionPolicy, PolicyRegistry
from scenarist.usecases.dispatcher import Dispatcher, decide, resolve


class EmailTaken(AdaptiveError):
    notify_level = NotifyLevel.INFO


class Declared(AdaptiveError):
    declared_action = "fail"


class _ExplodingNotifier:
    def post(self, error, level):
        raise RuntimeError("notifier down")


def test_resolve_returns_registered_policy() -> None:
    registry = PolicyRegistry().with_policy(EmailTaken, Action.FAIL, notify=True)

    assert resolve(EmailTaken(), registry) == ExceptionPolicy(Action.FAIL, notify=True)


def test_resolve_defaults_to_raise() -> None:
    assert resolve(EmailTaken(), PolicyRegistry()).action is Action.RAISE


def test_resolve_uses_declared_action_only_without_registry_entry() -> None:
    assert resolve(Declared(), PolicyRegistry()) == ExceptionPolicy(Action.FAIL)

    registry = PolicyRegistry().with_policy(Declared, Action.RAISE)
    assert resolve(Declared(), registry).action is Action.RAISE


@pytest.mark.parametrize(
    ("action", "expected"),
    [
        (Action.FAIL, StructuredFailure),
        (Action.IGNORE, Suppressed),
        (Action.STOP, Suppressed),
        (Action.RAISE, Rethrow),
    ],
)
def test_decide_maps_actions_to_outcomes(action, expected) -> None:
    err = EmailTaken()

    outcome = decide(err, ExceptionPolicy(action))

    assert isinstance(outcome, expected)
    assert outcome.error is err


def test_suppressed_outcome_keeps_action() -> None:
    assert decide(EmailTaken(), ExceptionPolicy(Action.STOP)).action is Action.STOP
    assert decide(EmailTaken(), ExceptionPolicy(Action.IGNORE)).action is Action.IGNORE


def test_dispatch_notifies_once_at_error_level() -> None:
    notifier = MemoryNotifier()
    registry = PolicyRegistry().with_policy(EmailTaken, Action.FAIL, notify=True)
    err = EmailTaken()

    outcome = Dispatcher(registry, notifier).dispatch(err)

    assert outcome == StructuredFailure(err)
    assert notifier.posts == [(err, NotifyLevel.INFO)]


def test_dispatch_skips_notification_when_disabled() -> None:
    notifier = MemoryNotifier()
    registry = PolicyRegistry().with_policy(EmailTaken, Action.IGNORE)

    Dispatcher(registry, notifier).dispatch(EmailTaken())

    assert notifier.posts == []


def test_dispatch_notifies_before_rethrow_decision() -> None:
    notifier = MemoryNotifier()
    registry = PolicyRegistry().with_policy(EmailTaken, Action.RAISE, notify="critical")
    err = EmailTaken()

    outcome = Dispatcher(registry, notifier).dispatch(err)

    assert outcome == Rethrow(err)
    assert notifier.posts == [(err, NotifyLevel.CRITICAL)]


def test_dispatch_lets_notifier_errors_propagate() -> None:
    registry = PolicyRegistry().with_policy(EmailTaken, Action.FAIL, notify=True)

    with pytest.raises(RuntimeError, match="notifier down"):
        Dispatcher(registry, _ExplodingNotifier()).dispatch(EmailTaken())
