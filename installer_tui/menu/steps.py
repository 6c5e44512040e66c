"""
Wizard steps and the registry that orders them.

A step turns the store into a panel and handles the events that panel can
produce. Handlers write through the store and report, via ``StepResult``,
whether the wizard should move on. They never navigate themselves.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from ..exceptions import IncompleteConfigurationError
from ..shared import FILESYSTEM, FINISH_VALUE, NETWORKING, RAID, STATIC_NETWORK_KEYS
from .events import Cancelled, Confirmed, FieldEdited, OptionSubmitted, WizardEvent
from .models import DEFAULT_STEPS, InstallerSettings, NetworkingMode, StepResult, validate_config_map
from .panels import (
    Panel,
    build_filesystem_panel,
    build_networking_panel,
    build_raid_panel,
    build_static_fields_panel,
    build_summary_panel,
)

if TYPE_CHECKING:
    from ..store import ConfigStore


class Step(ABC):
    """Abstract base class for wizard steps."""

    name: str = ""
    title: str = ""

    def enter(self) -> None:
        """Called whenever the wizard moves onto this step."""

    @property
    def is_nested(self) -> bool:
        """True while the step shows a nested panel on top of its main one."""
        return False

    def back(self) -> bool:
        """Handle a Back request inside the step.

        Returns True when the step consumed it, False to let the wizard
        move to the previous step.
        """
        return False

    @abstractmethod
    def build_panel(self, store: ConfigStore) -> Panel:
        """Return the panel to display for the current store state."""

    @abstractmethod
    def handle(self, store: ConfigStore, event: WizardEvent) -> StepResult | None:
        """Apply an event; None means the event does not apply to this step."""


class SelectionStep(Step):
    """Single-choice step whose submitted value is a final write of one key."""

    key: str = ""

    def handle(self, store: ConfigStore, event: WizardEvent) -> StepResult | None:
        if not isinstance(event, OptionSubmitted):
            return None
        store.write(self.key, event.value, is_final=True)
        return StepResult.PERSIST_AND_ADVANCE


class FilesystemStep(SelectionStep):
    name = "filesystem"
    title = "Filesystem"
    key = FILESYSTEM

    def build_panel(self, store: ConfigStore) -> Panel:
        return build_filesystem_panel(store)


class RaidStep(SelectionStep):
    name = "raid"
    title = "RAID"
    key = RAID

    def build_panel(self, store: ConfigStore) -> Panel:
        return build_raid_panel(store)


class NetworkingStage(Enum):
    MODE_CHOICE = "mode_choice"
    STATIC_FIELDS = "static_fields"


class NetworkingStep(Step):
    """Mode choice, followed by the static fields form when Static is picked.

    The static fields are written through on every edit. Leaving the form
    without confirming is only possible when ``allow_cancel`` is set.
    """

    name = "networking"
    title = "Networking"

    def __init__(self, allow_cancel: bool = False) -> None:
        self.allow_cancel = allow_cancel
        self.stage = NetworkingStage.MODE_CHOICE

    def enter(self) -> None:
        self.stage = NetworkingStage.MODE_CHOICE

    @property
    def is_nested(self) -> bool:
        return self.stage is NetworkingStage.STATIC_FIELDS

    def back(self) -> bool:
        if self.stage is not NetworkingStage.STATIC_FIELDS:
            return False
        if self.allow_cancel:
            self.stage = NetworkingStage.MODE_CHOICE
        else:
            logger.debug("Back ignored: static network configuration must be confirmed")
        return True

    def build_panel(self, store: ConfigStore) -> Panel:
        if self.stage is NetworkingStage.STATIC_FIELDS:
            return build_static_fields_panel(store, allow_cancel=self.allow_cancel)
        return build_networking_panel(store)

    def handle(self, store: ConfigStore, event: WizardEvent) -> StepResult | None:
        if self.stage is NetworkingStage.MODE_CHOICE:
            if not isinstance(event, OptionSubmitted):
                return None
            if event.value == NetworkingMode.DHCP.value:
                store.write(NETWORKING, event.value, is_final=True)
                return StepResult.PERSIST_AND_ADVANCE
            # Static is not complete until the fields are confirmed
            store.write(NETWORKING, event.value, is_final=False)
            self.stage = NetworkingStage.STATIC_FIELDS
            return StepResult.PERSIST_ONLY

        if isinstance(event, FieldEdited):
            if event.key not in STATIC_NETWORK_KEYS:
                return None
            store.write(event.key, event.value, is_final=False)
            return StepResult.PERSIST_ONLY
        if isinstance(event, Confirmed):
            store.write(NETWORKING, NetworkingMode.STATIC.value, is_final=True)
            self.stage = NetworkingStage.MODE_CHOICE
            return StepResult.PERSIST_AND_ADVANCE
        if isinstance(event, Cancelled) and self.allow_cancel:
            self.stage = NetworkingStage.MODE_CHOICE
            return StepResult.PERSIST_ONLY
        return None


class SummaryStep(Step):
    name = "summary"
    title = "Summary"

    def errors(self, store: ConfigStore) -> list[str]:
        errors = validate_config_map(store)
        if store[NETWORKING] == NetworkingMode.STATIC.value and not store.is_final(NETWORKING):
            errors.append("Static network configuration was not confirmed")
        return errors

    def build_panel(self, store: ConfigStore) -> Panel:
        return build_summary_panel(store, self.errors(store))

    def handle(self, store: ConfigStore, event: WizardEvent) -> StepResult | None:
        if not isinstance(event, OptionSubmitted) or event.value != FINISH_VALUE:
            return None
        errors = self.errors(store)
        if errors:
            raise IncompleteConfigurationError(errors)
        store.save()
        return StepResult.PERSIST_AND_ADVANCE


class StepRegistry:
    """Ordered collection of wizard steps."""

    def __init__(self) -> None:
        self._steps: list[Step] = []

    def register(self, step: Step) -> None:
        if self.get(step.name) is not None:
            raise ValueError(f"Step already registered: {step.name}")
        self._steps.append(step)
        logger.debug(f"Registered wizard step: {step.name}")

    def get(self, name: str) -> Step | None:
        for step in self._steps:
            if step.name == name:
                return step
        return None

    def index_of(self, name: str) -> int:
        for index, step in enumerate(self._steps):
            if step.name == name:
                return index
        raise KeyError(name)

    @property
    def steps(self) -> list[Step]:
        return list(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __getitem__(self, index: int) -> Step:
        return self._steps[index]


STEP_FACTORIES: dict[str, Callable[[InstallerSettings], Step]] = {
    "filesystem": lambda _settings: FilesystemStep(),
    "raid": lambda _settings: RaidStep(),
    "networking": lambda settings: NetworkingStep(allow_cancel=settings.allow_static_cancel),
    "summary": lambda _settings: SummaryStep(),
}


def create_registry(settings: InstallerSettings | None = None) -> StepRegistry:
    """Build the registry in the order given by the settings."""
    settings = settings or InstallerSettings()
    registry = StepRegistry()
    for name in settings.steps or DEFAULT_STEPS:
        registry.register(STEP_FACTORIES[name](settings))
    return registry
