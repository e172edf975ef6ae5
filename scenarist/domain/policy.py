"""Exception policies and the per-scenario-type registry that holds them.

A registry is an immutable mapping from an exact ``AdaptiveError`` subclass to
an ``ExceptionPolicy``. Registration never mutates a registry in place; it
returns a new one, so a scenario type can swap its configuration atomically.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple, Type, Union

from .errors import AdaptiveError, ConfigurationError, NotifyLevel
from .ports import Notifier

NotifySetting = Union[bool, NotifyLevel]


class Action(str, Enum):
    """Control-flow action resolved for a caught adaptive error."""

    RAISE = "raise"
    FAIL = "fail"
    IGNORE = "ignore"
    STOP = "stop"

    @classmethod
    def parse(cls, value: "Action | str") -> "Action":
        """Accept enum members or their names, case-insensitively."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        try:
            return cls(text)
        except ValueError:
            raise ConfigurationError(f"Unknown error action: {value!r}") from None

    @property
    def suppresses(self) -> bool:
        return self in (Action.IGNORE, Action.STOP)


@dataclass(frozen=True)
class ExceptionPolicy:
    """Action and notification setting for one exact error type."""

    action: Action = Action.RAISE
    notify: NotifySetting = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "action", Action.parse(self.action))
        if not isinstance(self.notify, bool):
            object.__setattr__(self, "notify", NotifyLevel.parse(self.notify))

    @property
    def should_notify(self) -> bool:
        return self.notify is not False

    def level_for(self, error: AdaptiveError) -> NotifyLevel:
        """Return the level to post ``error`` at.

        ``notify=True`` uses the error's own level; a ``NotifyLevel`` overrides it.
        """
        if isinstance(self.notify, NotifyLevel):
            return self.notify
        return NotifyLevel.parse(error.notify_level)


RAISE_POLICY = ExceptionPolicy()


def _check_error_type(error_type: object) -> Type[AdaptiveError]:
    if not isinstance(error_type, type) or not issubclass(error_type, AdaptiveError):
        raise ConfigurationError(
            f"Policies can only be registered for AdaptiveError subclasses, got {error_type!r}"
        )
    return error_type


class PolicyRegistry:
    """Immutable exact-type mapping of error classes to policies."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[Type[AdaptiveError], ExceptionPolicy]] = None) -> None:
        checked: Dict[Type[AdaptiveError], ExceptionPolicy] = {}
        for error_type, entry in (entries or {}).items():
            checked[_check_error_type(error_type)] = entry
        self._entries = MappingProxyType(checked)

    def lookup(self, error_type: Type[BaseException]) -> Optional[ExceptionPolicy]:
        """Return the policy registered for exactly ``error_type``.

        Subclasses of a registered type are not matched.
        """
        return self._entries.get(error_type)

    def with_policy(
        self,
        error_type: Type[AdaptiveError],
        action: Action | str = Action.RAISE,
        *,
        notify: NotifySetting | str = False,
    ) -> "PolicyRegistry":
        """Return a new registry with ``error_type`` (re)bound to a policy."""
        entries = dict(self._entries)
        entries[_check_error_type(error_type)] = ExceptionPolicy(action=action, notify=notify)
        return PolicyRegistry(entries)

    def merged(self, parent: "PolicyRegistry") -> "PolicyRegistry":
        """Compose ``parent`` entries underneath this registry's own entries."""
        entries = dict(parent._entries)
        entries.update(self._entries)
        return PolicyRegistry(entries)

    def items(self) -> Iterator[Tuple[Type[AdaptiveError], ExceptionPolicy]]:
        return iter(self._entries.items())

    def __contains__(self, error_type: object) -> bool:
        return error_type in self._entries

    def __iter__(self) -> Iterator[Type[AdaptiveError]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PolicyRegistry):
            return NotImplemented
        return dict(self._entries) == dict(other._entries)

    def __repr__(self) -> str:
        names = ", ".join(
            f"{error_type.__name__}={entry.action.value}" for error_type, entry in self._entries.items()
        )
        return f"PolicyRegistry({names})"


@dataclass(frozen=True)
class PolicyDeclaration:
    """One entry of a scenario's declarative ``policies`` tuple."""

    error_type: Type[AdaptiveError]
    policy: ExceptionPolicy


def policy(
    error_type: Type[AdaptiveError],
    action: Action | str = Action.RAISE,
    *,
    notify: NotifySetting | str = False,
) -> PolicyDeclaration:
    """Declare a policy inside a scenario class body.

    Example::

        class CreateUser(Scenario):
            policies = (
                policy(DuplicateEmail, Action.FAIL, notify=True),
                policy(NotImportant, "ignore", notify="warning"),
            )
    """
    return PolicyDeclaration(
        error_type=_check_error_type(error_type),
        policy=ExceptionPolicy(action=action, notify=notify),
    )


@dataclass(frozen=True)
class ScenarioConfig:
    """Frozen per-type configuration owned by one concrete scenario class."""

    policies: PolicyRegistry = field(default_factory=PolicyRegistry)
    default_notifier: Optional[Notifier] = None

    def with_policy(
        self,
        error_type: Type[AdaptiveError],
        action: Action | str = Action.RAISE,
        *,
        notify: NotifySetting | str = False,
    ) -> "ScenarioConfig":
        return ScenarioConfig(
            policies=self.policies.with_policy(error_type, action, notify=notify),
            default_notifier=self.default_notifier,
        )

    def with_notifier(self, notifier: Optional[Notifier]) -> "ScenarioConfig":
        return ScenarioConfig(policies=self.policies, default_notifier=notifier)


__all__ = [
    "RAISE_POLICY",
    "Action",
    "ExceptionPolicy",
    "PolicyDeclaration",
    "PolicyRegistry",
    "ScenarioConfig",
    "policy",
]
