"""Textual screens that render wizard panels."""

from __future__ import annotations

from collections.abc import Callable

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, Footer, Header, Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from installer_tui.menu.events import Cancelled, Confirmed, FieldEdited, OptionSubmitted, WizardEvent
from installer_tui.menu.panels import FormPanel, Panel, SelectionPanel

EventSink = Callable[[WizardEvent], None]

FIELD_ID_PREFIX = "field-"


class SelectionScreen(Screen):
    """Single-choice list; submitting an option sends OptionSubmitted."""

    def __init__(self, panel: SelectionPanel, send_event: EventSink) -> None:
        super().__init__()
        self.panel = panel
        self.send_event = send_event

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="dialog"):
            yield Static(self.panel.title, classes="screen-title")
            if self.panel.header:
                yield Static(self.panel.header, id="panel-header")
            yield OptionList(
                *[Option(option.label, id=f"option-{index}") for index, option in enumerate(self.panel.options)],
                id="options",
            )
        yield Footer()

    def on_mount(self) -> None:
        option_list = self.query_one("#options", OptionList)
        # None is a valid state: nothing highlighted
        option_list.highlighted = self.panel.focus_index
        option_list.focus()

    @on(OptionList.OptionSelected, "#options")
    def handle_selected(self, event: OptionList.OptionSelected) -> None:
        option = self.panel.options[event.option_index]
        self.send_event(OptionSubmitted(option.value))


class FormScreen(Screen):
    """Free-text fields; every edit is sent straight away as FieldEdited."""

    def __init__(self, panel: FormPanel, send_event: EventSink) -> None:
        super().__init__()
        self.panel = panel
        self.send_event = send_event
        # Last value sent per field; Textual also reports the initial value
        self._sent: dict[str, str] = {field.key: field.value for field in panel.fields}

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="dialog"):
            yield Static(self.panel.title, classes="screen-title")
            for field in self.panel.fields:
                yield Label(field.label)
                yield Input(value=field.value, placeholder=field.label, id=f"{FIELD_ID_PREFIX}{field.key}")
            with Horizontal(classes="button-group"):
                if self.panel.cancel_label is not None:
                    yield Button(self.panel.cancel_label, id="cancel")
                yield Button(self.panel.confirm_label, id="confirm", variant="primary")
        yield Footer()

    @on(Input.Changed)
    def handle_changed(self, event: Input.Changed) -> None:
        input_id = event.input.id or ""
        if not input_id.startswith(FIELD_ID_PREFIX):
            return
        key = input_id[len(FIELD_ID_PREFIX) :]
        if self._sent.get(key) == event.value:
            return
        self._sent[key] = event.value
        self.send_event(FieldEdited(key, event.value))

    def reset_field(self, key: str, value: str) -> None:
        """Put ``value`` back into the field without reporting it as an edit."""
        self._sent[key] = value
        self.query_one(f"#{FIELD_ID_PREFIX}{key}", Input).value = value

    @on(Button.Pressed, "#confirm")
    def handle_confirm(self) -> None:
        self.send_event(Confirmed())

    @on(Button.Pressed, "#cancel")
    def handle_cancel(self) -> None:
        self.send_event(Cancelled())


class ErrorDialog(ModalScreen[None]):
    """Dismissible message shown when a write fails."""

    BINDINGS = [Binding("escape", "dismiss_error", "Dismiss")]

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Container(id="error-dialog"):
            yield Static("Error", classes="screen-title")
            yield Static(self.message, id="error-message")
            yield Button("Dismiss", id="dismiss", variant="error")

    def on_mount(self) -> None:
        self.query_one("#dismiss", Button).focus()

    @on(Button.Pressed, "#dismiss")
    def handle_dismiss(self) -> None:
        self.dismiss(None)

    def action_dismiss_error(self) -> None:
        self.dismiss(None)


def screen_for_panel(panel: Panel, send_event: EventSink) -> Screen:
    if isinstance(panel, FormPanel):
        return FormScreen(panel, send_event)
    return SelectionScreen(panel, send_event)
