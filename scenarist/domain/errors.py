"""Error taxonomy consumed by scenarios and the dispatcher.

Two categories exist and never overlap:

- ``AdaptiveError`` subclasses are domain errors a scenario type may attach a
  policy to. Only these are intercepted by ``Scenario.run``.
- ``ScenarioError`` subclasses (and any other exception) are infrastructure or
  programmer errors. They always propagate and never touch scenario state.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping, Optional

if TYPE_CHECKING:  # pragma: no cover - type checking helper
    from scenarist.domain.policy import Action

DEFAULT_LOCALE = "en"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class NotifyLevel(str, Enum):
    """Severity attached to a notification about an adaptive error."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def logging_level(self) -> int:
        """Return the matching stdlib ``logging`` level."""
        return _LOGGING_LEVELS[self]

    @classmethod
    def parse(cls, value: "NotifyLevel | str") -> "NotifyLevel":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        try:
            return cls(text)
        except ValueError:
            raise ConfigurationError(f"Unknown notify level: {value!r}") from None


_LOGGING_LEVELS = {
    NotifyLevel.DEBUG: logging.DEBUG,
    NotifyLevel.INFO: logging.INFO,
    NotifyLevel.WARNING: logging.WARNING,
    NotifyLevel.ERROR: logging.ERROR,
    NotifyLevel.CRITICAL: logging.CRITICAL,
}


class _FormatDetails(dict):
    """Template mapping that leaves unknown placeholders untouched."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


class AdaptiveError(Exception):
    """Domain error eligible for policy-based handling inside a scenario.

    Subclasses describe themselves declaratively::

        class DuplicateEmail(AdaptiveError):
            default_message = "Email {email} is already registered"
            message_templates = {"de": "E-Mail {email} ist bereits registriert"}
            notify_level = NotifyLevel.INFO

        raise DuplicateEmail(email="ann@example.com")

    Attributes:
        default_message: Fallback text when no locale template matches.
        message_templates: Locale tag -> ``str.format`` template.
        notify_level: Severity used when a policy asks for notification.
        declared_action: Fallback action used only when the scenario type has
            no policy registered for this exact error type.
        code: Stable machine-readable identifier.
    """

    default_message: ClassVar[Optional[str]] = None
    message_templates: ClassVar[Mapping[str, str]] = {}
    notify_level: NotifyLevel = NotifyLevel.WARNING
    declared_action: Optional["Action | str"] = None
    code: ClassVar[str] = "ADAPTIVE_ERROR"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "code" not in cls.__dict__:
            cls.code = _CAMEL_BOUNDARY.sub("_", cls.__name__).upper()

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        notify_level: Optional[NotifyLevel | str] = None,
        action: Optional["Action | str"] = None,
        **details: Any,
    ) -> None:
        self._text = message
        self.details: Dict[str, Any] = dict(details)
        self.locale: Optional[str] = None
        if notify_level is not None:
            self.notify_level = NotifyLevel.parse(notify_level)
        if action is not None:
            self.declared_action = action
        super().__init__(self.message())

    def message(self, locale: Optional[str] = None) -> str:
        """Render the human message for ``locale``.

        Lookup order: explicit constructor text, the template for ``locale``,
        the template for ``DEFAULT_LOCALE``, ``default_message``, and finally
        the class name.
        """
        text = getattr(self, "_text", None)
        if text:
            return text
        template = None
        if locale is not None:
            template = self.message_templates.get(str(locale))
        if template is None:
            template = self.message_templates.get(DEFAULT_LOCALE)
        if template is None:
            template = self.default_message
        if template is None:
            return type(self).__name__
        return template.format_map(_FormatDetails(getattr(self, "details", {})))

    def localized(self, locale: Optional[str]) -> "AdaptiveError":
        """Re-render ``str(self)`` for ``locale`` and return the same instance."""
        self.locale = locale
        self.args = (self.message(locale),)
        return self

    def __str__(self) -> str:
        return self.args[0] if self.args else self.message(self.locale)


class ScenarioError(Exception):
    """Base class for library errors that are never dispatched."""


class ConfigurationError(ScenarioError):
    """Raised for invalid scenario attributes or policy declarations."""


class ScenarioStateError(ScenarioError):
    """Raised when a scenario instance is run more than once."""


class NotifierError(ScenarioError):
    """Raised by notifier adapters when delivery fails."""

    def __init__(self, message: str, *, status: Optional[int] = None, context: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.context = context


__all__ = [
    "DEFAULT_LOCALE",
    "AdaptiveError",
    "ConfigurationError",
    "NotifierError",
    "NotifyLevel",
    "ScenarioError",
    "ScenarioStateError",
]
