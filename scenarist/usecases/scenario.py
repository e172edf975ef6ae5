"""Single-shot scenario orchestrating one unit of domain logic.

A scenario is the high-level description of a business process. Subclasses
declare their inputs and implement ``execute``; callers use ``run`` to get a
structured outcome instead of an exception for the adaptive errors the
scenario type has a policy for.

Example::

    class CreateUser(Scenario):
        attributes = ("email", "password")
        policies = (policy(DuplicateEmail, Action.FAIL, notify=True),)

        def execute(self):
            if users.exists(self.email):
                raise DuplicateEmail(email=self.email)
            return users.create(self.email, self.password)

    scenario = CreateUser(email="ann@example.com", password="secret").run()
    scenario.is_failure()       # True when the email was taken
    scenario.failure_message()  # "Email ann@example.com is already registered"
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, Optional, Tuple, Type

from scenarist.domain.errors import AdaptiveError, ConfigurationError, ScenarioStateError
from scenarist.domain.outcome import Outcome, Rethrow, StructuredFailure, Success, Suppressed
from scenarist.domain.policy import (
    Action,
    ExceptionPolicy,
    NotifySetting,
    PolicyDeclaration,
    PolicyRegistry,
    ScenarioConfig,
)
from scenarist.domain.ports import Locale, Notifier
from scenarist.usecases.dispatcher import Dispatcher

_log = logging.getLogger(__name__)

# Guards copy-on-write swaps of per-type configuration and the shared notifier.
_CONFIG_LOCK = threading.RLock()
_shared_notifier: Optional[Notifier] = None


def _shared_default_notifier() -> Notifier:
    global _shared_notifier
    with _CONFIG_LOCK:
        if _shared_notifier is None:
            from scenarist.adapters.notifier_log import LogNotifier

            _shared_notifier = LogNotifier()
        return _shared_notifier


class ScenarioState(str, Enum):
    """Lifecycle of one scenario run."""

    INITIALIZED = "initialized"
    SUCCESS = "success"
    FAILED = "failed"


def _as_names(value: object, owner: str) -> Tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ConfigurationError(f"{owner}.attributes must be a sequence of names, got {value!r}")
    names = tuple(value)
    for name in names:
        if not isinstance(name, str) or not name.isidentifier() or name.startswith("_"):
            raise ConfigurationError(f"{owner}.attributes contains an invalid name: {name!r}")
    return names


def _as_registry(value: object, owner: str) -> PolicyRegistry:
    if not isinstance(value, (tuple, list)):
        raise ConfigurationError(f"{owner}.policies must be a tuple of policy(...) declarations")
    entries: Dict[Type[AdaptiveError], ExceptionPolicy] = {}
    for declaration in value:
        if not isinstance(declaration, PolicyDeclaration):
            raise ConfigurationError(f"{owner}.policies contains {declaration!r}; use policy(...)")
        entries[declaration.error_type] = declaration.policy
    return PolicyRegistry(entries)


class Scenario:
    """Base class for business-process scenarios.

    Class attributes:
        attributes: Names of the input fields accepted by the constructor.
            Merged along the class hierarchy.
        policies: ``policy(...)`` declarations for this exact class. Not
            inherited unless the subclass is defined with
            ``inherit_policies=True``.
    """

    attributes: ClassVar[Tuple[str, ...]] = ()
    policies: ClassVar[Tuple[PolicyDeclaration, ...]] = ()

    _config: ClassVar[ScenarioConfig]

    def __init_subclass__(cls, inherit_policies: bool = False, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for name in _as_names(cls.__dict__.get("attributes", ()), cls.__name__):
            if hasattr(Scenario, name):
                raise ConfigurationError(f"{cls.__name__}: attribute {name!r} is reserved by Scenario")
        registry = _as_registry(cls.__dict__.get("policies", ()), cls.__name__)
        if inherit_policies:
            for base in cls.__mro__[1:]:
                if issubclass(base, Scenario):
                    registry = registry.merged(base.config().policies)
                    break
        cls._config = ScenarioConfig(policies=registry)

    # ------------------------------------------------------------------ #
    # Type-level configuration
    # ------------------------------------------------------------------ #
    @classmethod
    def config(cls) -> ScenarioConfig:
        """Return the configuration owned by exactly this class."""
        return cls.__dict__["_config"]

    @classmethod
    def register_policy(
        cls,
        error_type: Type[AdaptiveError],
        action: Action | str = Action.RAISE,
        *,
        notify: NotifySetting | str = False,
    ) -> None:
        """Bind ``error_type`` to a policy on this class, replacing any prior entry."""
        with _CONFIG_LOCK:
            cls._config = cls.config().with_policy(error_type, action, notify=notify)

    @classmethod
    def set_default_notifier(cls, notifier: Optional[Notifier]) -> None:
        """Set the notifier used by instances constructed without one."""
        with _CONFIG_LOCK:
            cls._config = cls.config().with_notifier(notifier)

    @classmethod
    def default_notifier(cls) -> Notifier:
        return cls.config().default_notifier or _shared_default_notifier()

    @classmethod
    def declared_attributes(cls) -> Tuple[str, ...]:
        names: Dict[str, None] = {}
        for klass in reversed(cls.__mro__):
            for name in klass.__dict__.get("attributes", ()):
                names[name] = None
        return tuple(names)

    @classmethod
    def call(cls, **kwargs: Any) -> "Scenario":
        """Construct a scenario and ``run`` it."""
        return cls(**kwargs).run()

    @classmethod
    def call_bare(cls, **kwargs: Any) -> Any:
        """Construct a scenario and return ``execute()`` with no interception."""
        return cls(**kwargs).execute()

    # ------------------------------------------------------------------ #
    # Instance lifecycle
    # ------------------------------------------------------------------ #
    def __init__(self, *, notifier: Optional[Notifier] = None, locale: Locale = None, **attrs: Any) -> None:
        declared = self.declared_attributes()
        unknown = sorted(set(attrs) - set(declared))
        if unknown:
            raise ConfigurationError(
                f"{type(self).__name__} got unknown attributes: {', '.join(unknown)}"
            )
        for name in declared:
            setattr(self, name, attrs.get(name))
        self._notifier = notifier
        self._locale = locale
        self._state = ScenarioState.INITIALIZED
        self._result: Any = None
        self._failure: Optional[AdaptiveError] = None
        self._outcome: Optional[Outcome] = None
        self._started = False

    @property
    def state(self) -> ScenarioState:
        return self._state

    @property
    def result(self) -> Any:
        return self._result

    @property
    def failure(self) -> Optional[AdaptiveError]:
        return self._failure

    @property
    def outcome(self) -> Optional[Outcome]:
        """Outcome applied by ``run``; ``None`` before a run or after a throw."""
        return self._outcome

    @property
    def locale(self) -> Locale:
        return self._locale

    @property
    def notifier(self) -> Notifier:
        if self._notifier is None:
            self._notifier = type(self).default_notifier()
        return self._notifier

    def execute(self) -> Any:
        """Business logic of the scenario.

        Runs as is: errors propagate unmodified and the instance state is not
        touched. Call it directly to compose one scenario inside another.
        """
        raise NotImplementedError(f"{type(self).__name__} must implement execute()")

    def run(self) -> "Scenario":
        """Run ``execute`` and apply the exception policies of this type.

        Returns:
            Scenario: ``self``, with ``state``, ``result`` and ``failure`` set.

        Raises:
            AdaptiveError: When the resolved action is RAISE (including
                errors with no registered policy), re-rendered for ``locale``.
            ScenarioStateError: When the instance has already been run.
            Exception: Any non-adaptive error raised by ``execute`` or by the
                notifier, unmodified. A notifier error leaves ``state`` FAILED.
        """
        if self._started:
            raise ScenarioStateError(f"{type(self).__name__} instance has already been run")
        self._started = True
        try:
            value = self.execute()
        except AdaptiveError as error:
            outcome = self._dispatch(error)
        else:
            outcome = Success(value)
        self._apply(outcome)
        return self

    def _dispatch(self, error: AdaptiveError) -> Outcome:
        dispatcher = Dispatcher(registry=type(self).config().policies, notifier=self.notifier)
        try:
            return dispatcher.dispatch(error)
        except Exception:
            # The error was accepted for handling; only the notifier can fail here.
            self._state = ScenarioState.FAILED
            raise

    def _apply(self, outcome: Outcome) -> None:
        if isinstance(outcome, Rethrow):
            raise outcome.error.localized(self._locale)
        self._outcome = outcome
        if isinstance(outcome, Success):
            self._result = outcome.result
            self._failure = None
            self._state = ScenarioState.SUCCESS
            return
        self._result = None
        self._state = ScenarioState.FAILED
        if isinstance(outcome, StructuredFailure):
            self._failure = outcome.error
            _log.info("%s failed: %s", type(self).__name__, outcome.error.code)
        elif isinstance(outcome, Suppressed):
            _log.debug(
                "%s stopped by %s (%s)",
                type(self).__name__,
                outcome.error.code,
                outcome.action.value,
            )

    def is_success(self) -> bool:
        return self._state is ScenarioState.SUCCESS

    def is_failure(self) -> bool:
        return self._state is ScenarioState.FAILED

    def failure_message(self) -> Optional[str]:
        """Render the recorded failure for this scenario's locale, if any."""
        if self._failure is None:
            return None
        return self._failure.message(self._locale)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} state={self._state.value}>"


Scenario._config = ScenarioConfig()


__all__ = ["Scenario", "ScenarioState"]
