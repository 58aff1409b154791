"""Wizard core: selections, screens, command building and the task layer."""

from .builder import Action, ResourceKind, build_command
from .machine import dispatch, initial_state
from .runner import TaskRunner
from .state import Screen, Selections, WizardState

__all__ = [
    "Action",
    "ResourceKind",
    "Screen",
    "Selections",
    "TaskRunner",
    "WizardState",
    "build_command",
    "dispatch",
    "initial_state",
]
