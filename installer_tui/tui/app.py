"""
Installer wizard application.

Built with Textual. The app owns no configuration state: it renders the
controller's current panel, forwards widget events to the controller and
shows errors published on the store's error channel.
"""

from __future__ import annotations

from loguru import logger
from textual.app import App
from textual.binding import Binding
from textual.screen import Screen

from installer_tui.exceptions import ConfigError
from installer_tui.menu.controller import Transition, WizardController
from installer_tui.menu.events import Back, FieldEdited, WizardEvent
from installer_tui.tui.screens import ErrorDialog, FormScreen, screen_for_panel


class InstallerApp(App[bool]):
    """Runs the wizard; returns True when every step has been completed."""

    TITLE = "Installer configuration"

    CSS = """
    #dialog {
        width: 90%;
        max-width: 80;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    .screen-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }

    #panel-header {
        margin-bottom: 1;
    }

    OptionList {
        height: auto;
        max-height: 12;
    }

    .button-group {
        height: auto;
        margin-top: 1;
    }

    ErrorDialog {
        align: center middle;
    }

    #error-dialog {
        width: 60;
        height: auto;
        border: thick $error;
        background: $surface;
        padding: 1 2;
    }
    """

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("ctrl+c", "abort", "Abort", show=False, priority=True),
    ]

    def __init__(self, controller: WizardController) -> None:
        super().__init__()
        self.controller = controller
        self._panel_screen: Screen | None = None
        controller.on_redraw = self.show_current_panel
        controller.store.subscribe(self.show_error)

    def on_mount(self) -> None:
        self.show_current_panel()

    def on_unmount(self) -> None:
        self.controller.store.unsubscribe(self.show_error)

    def show_current_panel(self) -> None:
        if self.controller.finished:
            self.exit(True)
            return

        step = self.controller.current_step
        self.sub_title = f"Step {self.controller.index + 1}/{len(self.controller.registry)}: {step.title}"
        screen = screen_for_panel(self.controller.current_panel(), self.handle_event)
        if self._panel_screen is not None:
            self.switch_screen(screen)
        else:
            self.push_screen(screen)
        self._panel_screen = screen

    def handle_event(self, event: WizardEvent) -> None:
        transition = self.controller.dispatch(event)
        logger.debug(f"{event!r} -> {transition.value}")
        if transition is Transition.FAILED and isinstance(event, FieldEdited) and isinstance(self._panel_screen, FormScreen):
            # The store kept its old value; show that instead of the rejected text
            self._panel_screen.reset_field(event.key, self.controller.store[event.key])

    def show_error(self, error: ConfigError) -> None:
        self.push_screen(ErrorDialog(str(error)))

    def action_back(self) -> None:
        self.handle_event(Back())

    def action_abort(self) -> None:
        logger.info("Wizard aborted by user")
        self.exit(False)
