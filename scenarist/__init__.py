"""Scenario orchestration with declarative exception policies.

A scenario runs one unit of domain logic, records its outcome, and turns
raised adaptive errors into one of a few control-flow actions according to
the policies registered on its type.
"""

from scenarist.domain.errors import (
    AdaptiveError,
    ConfigurationError,
    NotifierError,
    NotifyLevel,
    ScenarioError,
    ScenarioStateError,
)
from scenarist.domain.policy import Action, ExceptionPolicy, PolicyRegistry, policy
from scenarist.usecases.scenario import Scenario, ScenarioState

__all__ = [
    "Action",
    "AdaptiveError",
    "ConfigurationError",
    "ExceptionPolicy",
    "NotifierError",
    "NotifyLevel",
    "PolicyRegistry",
    "Scenario",
    "ScenarioError",
    "ScenarioState",
    "ScenarioStateError",
    "policy",
]
