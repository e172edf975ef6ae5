from __future__ import annotations

import pytest

from scenarist.domain.errors import AdaptiveError, ConfigurationError, NotifyLevel
from scenarist.domain.policy import (
    Action,
    ExceptionPolicy,
    PolicyRegistry,
    ScenarioConfig,
    policy,
)


class Parent(AdaptiveError):
    notify_level = NotifyLevel.ERROR


class Child(Parent):
    pass


class Other(AdaptiveError):
    pass


def test_action_parse_accepts_names_and_members() -> None:
    assert Action.parse("FAIL") is Action.FAIL
    assert Action.parse(" ignore ") is Action.IGNORE
    assert Action.parse(Action.STOP) is Action.STOP
    with pytest.raises(ConfigurationError):
        Action.parse("catch")


def test_policy_defaults_to_raise_without_notify() -> None:
    entry = ExceptionPolicy()

    assert entry.action is Action.RAISE
    assert entry.notify is False
    assert entry.should_notify is False


def test_notify_true_uses_error_level() -> None:
    entry = ExceptionPolicy(Action.FAIL, notify=True)

    assert entry.level_for(Parent()) is NotifyLevel.ERROR


def test_notify_level_overrides_error_level() -> None:
    entry = ExceptionPolicy("ignore", notify="info")

    assert entry.should_notify is True
    assert entry.level_for(Parent()) is NotifyLevel.INFO


def test_lookup_is_exact_type_only() -> None:
    registry = PolicyRegistry().with_policy(Parent, Action.FAIL)

    assert registry.lookup(Parent) == ExceptionPolicy(Action.FAIL)
    assert registry.lookup(Child) is None
    assert registry.lookup(Other) is None


def test_with_policy_returns_new_registry_and_overwrites() -> None:
    empty = PolicyRegistry()
    first = empty.with_policy(Other, Action.FAIL, notify=True)
    second = first.with_policy(Other, Action.IGNORE)

    assert len(empty) == 0
    assert first.lookup(Other) == ExceptionPolicy(Action.FAIL, notify=True)
    assert second.lookup(Other) == ExceptionPolicy(Action.IGNORE)
    assert len(second) == 1


def test_merged_keeps_child_entries_on_top() -> None:
    parent = PolicyRegistry().with_policy(Parent, Action.FAIL).with_policy(Other, Action.STOP)
    child = PolicyRegistry().with_policy(Other, Action.IGNORE)

    merged = child.merged(parent)

    assert merged.lookup(Parent) == ExceptionPolicy(Action.FAIL)
    assert merged.lookup(Other) == ExceptionPolicy(Action.IGNORE)
    assert set(merged) == {Parent, Other}


def test_registration_rejects_non_adaptive_types() -> None:
    with pytest.raises(ConfigurationError):
        PolicyRegistry().with_policy(ValueError, Action.FAIL)
    with pytest.raises(ConfigurationError):
        policy("Parent", Action.FAIL)


def test_policy_declaration_builds_entry() -> None:
    declaration = policy(Parent, "fail", notify=True)

    assert declaration.error_type is Parent
    assert declaration.policy == ExceptionPolicy(Action.FAIL, notify=True)


def test_scenario_config_is_copy_on_write() -> None:
    base = ScenarioConfig()
    updated = base.with_policy(Other, Action.FAIL)
    notifier = object()
    with_notifier = updated.with_notifier(notifier)

    assert Other not in base.policies
    assert Other in updated.policies
    assert updated.default_notifier is None
    assert with_notifier.default_notifier is notifier
    assert with_notifier.policies is updated.policies
