"""Domain package exports for the error taxonomy, policies, and outcomes."""

from .errors import (
    DEFAULT_LOCALE,
    AdaptiveError,
    ConfigurationError,
    NotifierError,
    NotifyLevel,
    ScenarioError,
    ScenarioStateError,
)
from .outcome import Outcome, Rethrow, StructuredFailure, Success, Suppressed
from .policy import Action, ExceptionPolicy, PolicyRegistry, ScenarioConfig, policy
from .ports import Locale, Notifier

__all__ = [
    "DEFAULT_LOCALE",
    "Action",
    "AdaptiveError",
    "ConfigurationError",
    "ExceptionPolicy",
    "Locale",
    "Notifier",
    "NotifierError",
    "NotifyLevel",
    "Outcome",
    "PolicyRegistry",
    "Rethrow",
    "ScenarioConfig",
    "ScenarioError",
    "ScenarioStateError",
    "StructuredFailure",
    "Success",
    "Suppressed",
    "policy",
]
