"""
Navigation controller for the installer wizard.

The controller owns the position in the step registry. It dispatches
events to the active step, turns ``StepResult`` values into transitions and
asks the front-end to redraw whenever the displayed panel changes. Store
failures raised by a step are published on the store's error channel and
leave the wizard where it was.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from ..exceptions import ConfigError
from ..shared import BACK_VALUE
from .events import Back, OptionSubmitted, WizardEvent
from .models import StepResult
from .panels import Panel
from .steps import Step, StepRegistry

if TYPE_CHECKING:
    from ..store import ConfigStore


class Transition(Enum):
    STAY = "stay"
    ADVANCED = "advanced"
    RETREATED = "retreated"
    NESTED_OPENED = "nested_opened"
    NESTED_CLOSED = "nested_closed"
    FAILED = "failed"
    FINISHED = "finished"


# Transitions after which the displayed panel is different
_REDRAW = {
    Transition.ADVANCED,
    Transition.RETREATED,
    Transition.NESTED_OPENED,
    Transition.NESTED_CLOSED,
    Transition.FINISHED,
}


class WizardController:
    def __init__(
        self,
        store: ConfigStore,
        registry: StepRegistry,
        on_redraw: Callable[[], None] | None = None,
    ) -> None:
        if len(registry) == 0:
            raise ValueError("The wizard needs at least one step")
        self.store = store
        self.registry = registry
        self.on_redraw = on_redraw
        self.finished = False
        self._index = 0
        self.current_step.enter()

    @property
    def index(self) -> int:
        return self._index

    @property
    def current_step(self) -> Step:
        return self.registry[self._index]

    def current_panel(self) -> Panel:
        return self.current_step.build_panel(self.store)

    def dispatch(self, event: WizardEvent) -> Transition:
        if self.finished:
            logger.debug(f"Ignoring {event!r}: wizard already finished")
            return Transition.STAY
        if isinstance(event, Back) or (isinstance(event, OptionSubmitted) and event.value == BACK_VALUE):
            return self.back()

        step = self.current_step
        was_nested = step.is_nested
        try:
            result = step.handle(self.store, event)
        except ConfigError as e:
            logger.error(f"Step '{step.name}' failed: {e!s}")
            self.store.report_error(e)
            return Transition.FAILED

        if result is None:
            logger.debug(f"Step '{step.name}' ignored {event!r}")
            return Transition.STAY
        if result is StepResult.PERSIST_AND_ADVANCE:
            return self.advance()

        if step.is_nested and not was_nested:
            return self._finish_transition(Transition.NESTED_OPENED)
        if was_nested and not step.is_nested:
            return self._finish_transition(Transition.NESTED_CLOSED)
        return Transition.STAY

    def advance(self) -> Transition:
        if self._index + 1 >= len(self.registry):
            self.finished = True
            logger.info("Wizard finished")
            return self._finish_transition(Transition.FINISHED)
        self._index += 1
        self.current_step.enter()
        logger.info(f"Advanced to step '{self.current_step.name}'")
        return self._finish_transition(Transition.ADVANCED)

    def back(self) -> Transition:
        step = self.current_step
        was_nested = step.is_nested
        if step.back():
            if was_nested and not step.is_nested:
                return self._finish_transition(Transition.NESTED_CLOSED)
            return Transition.STAY
        if self._index == 0:
            logger.debug("Already at the first step")
            return Transition.STAY
        self._index -= 1
        self.current_step.enter()
        logger.info(f"Went back to step '{self.current_step.name}'")
        return self._finish_transition(Transition.RETREATED)

    def _finish_transition(self, transition: Transition) -> Transition:
        if transition in _REDRAW and self.on_redraw is not None:
            self.on_redraw()
        return transition
