"""Form phases as a tagged variant

A form is always in exactly one phase. Phases are immutable values, and
FormState bundles the phase with the field values and the error slot so
that the whole state of a form is replaced in one step.

    Idle -> Editing -> Submitting -> Succeeded -> Idle
                  ^          |
                  +- Failed -+
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional, Union

from core.error.types import FormError


@dataclass(frozen=True)
class Idle:
    name: str = field(default="idle", init=False)


@dataclass(frozen=True)
class Editing:
    name: str = field(default="editing", init=False)


@dataclass(frozen=True)
class Submitting:
    name: str = field(default="submitting", init=False)


@dataclass(frozen=True)
class Succeeded:
    name: str = field(default="succeeded", init=False)


@dataclass(frozen=True)
class Failed:
    error: FormError
    name: str = field(default="failed", init=False)


Phase = Union[Idle, Editing, Submitting, Succeeded, Failed]

# Allowed transitions keyed by phase type
TRANSITIONS = {
    Idle: (Editing,),
    Editing: (Idle, Editing, Submitting, Failed),
    Submitting: (Succeeded, Failed, Editing),
    Succeeded: (Idle,),
    Failed: (Editing,),
}


def can_transition(current: Phase, target: Phase) -> bool:
    return type(target) in TRANSITIONS[type(current)]


@dataclass(frozen=True)
class FormState:
    """Complete state of one form instance"""
    phase: Phase
    fields: Mapping[str, str]
    error: Optional[FormError] = None

    def __post_init__(self):
        # Freeze the field mapping so snapshots cannot be edited in place
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def is_open(self) -> bool:
        return not isinstance(self.phase, Idle)

    @property
    def is_submitting(self) -> bool:
        return isinstance(self.phase, Submitting)

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    def evolve(self, **changes) -> 'FormState':
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Audit-safe view of the state; field values are not included"""
        return {
            "phase": self.phase.name,
            "fields": sorted(self.fields),
            "error": self.error_message,
        }
