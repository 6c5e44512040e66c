"""
Events the front-end sends to the wizard controller.

Widgets never touch the store themselves; they translate user input into
one of these and hand it to ``WizardController.dispatch``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WizardEvent:
    pass


@dataclass(frozen=True)
class OptionSubmitted(WizardEvent):
    value: str


@dataclass(frozen=True)
class FieldEdited(WizardEvent):
    key: str
    value: str


@dataclass(frozen=True)
class Confirmed(WizardEvent):
    pass


@dataclass(frozen=True)
class Cancelled(WizardEvent):
    pass


@dataclass(frozen=True)
class Back(WizardEvent):
    pass
