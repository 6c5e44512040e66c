"""
Panel builders for the installer wizard.

Every builder is a pure function of the current configuration state and
returns a description of what to display. Rendering is left to the
front-end, which keeps the builders testable without a terminal.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

from ..shared import BACK_VALUE, DNS, FILESYSTEM, FINISH_VALUE, GATEWAY, NETWORKING, RAID, SUBNET
from .models import FilesystemType, NetworkingMode, RaidLevel


@dataclass(frozen=True)
class SelectionOption:
    label: str
    value: str


@dataclass(frozen=True)
class SelectionPanel:
    """Single-choice list. ``focus_index`` is None when nothing is highlighted."""

    key: str
    title: str
    options: tuple[SelectionOption, ...]
    focus_index: int | None = None
    header: str = ""

    def focused_option(self) -> SelectionOption | None:
        if self.focus_index is None or not 0 <= self.focus_index < len(self.options):
            return None
        return self.options[self.focus_index]

    def labels(self) -> list[str]:
        return [option.label for option in self.options]


@dataclass(frozen=True)
class TextField:
    key: str
    label: str
    value: str


@dataclass(frozen=True)
class FormPanel:
    """Free-text fields with a confirm control and an optional cancel control."""

    key: str
    title: str
    fields: tuple[TextField, ...]
    confirm_label: str = "Ok"
    cancel_label: str | None = None


Panel = Union[SelectionPanel, FormPanel]

FILESYSTEM_OPTIONS: tuple[SelectionOption, ...] = tuple(SelectionOption(fs.value, fs.value) for fs in FilesystemType)
NO_RAID_OPTION = SelectionOption(RaidLevel.NONE.value, RaidLevel.NONE.value)
RAID_LEVEL_OPTIONS: tuple[SelectionOption, ...] = tuple(
    SelectionOption(level.value, level.value) for level in RaidLevel if level is not RaidLevel.NONE
)
NETWORKING_OPTIONS: tuple[SelectionOption, ...] = tuple(SelectionOption(mode.value, mode.value) for mode in NetworkingMode)

STATIC_NET_CONFIG = "Static network configuration"


def _index_of(options: tuple[SelectionOption, ...], value: str) -> int | None:
    for index, option in enumerate(options):
        if option.value == value:
            return index
    return None


def filesystem_index(value: str) -> int:
    """Index of the stored filesystem, SQUASHFS for anything unrecognized."""
    index = _index_of(FILESYSTEM_OPTIONS, value)
    if index is None:
        return _index_of(FILESYSTEM_OPTIONS, FilesystemType.SQUASHFS.value) or 0
    return index


def raid_options(filesystem: str) -> tuple[SelectionOption, ...]:
    # Only ZFS supports this RAID layer
    if filesystem == FilesystemType.ZFS.value:
        return (NO_RAID_OPTION, *RAID_LEVEL_OPTIONS)
    return (NO_RAID_OPTION,)


def raid_index(value: str, options: tuple[SelectionOption, ...]) -> int | None:
    """Index of the stored RAID level among ``options``.

    "No raid", unknown values and levels that are not offered all mean
    "no selection".
    """
    if value == RaidLevel.NONE.value:
        return None
    return _index_of(options, value)


def networking_index(value: str) -> int:
    index = _index_of(NETWORKING_OPTIONS, value)
    if index is None:
        return _index_of(NETWORKING_OPTIONS, NetworkingMode.DHCP.value) or 0
    return index


def build_filesystem_panel(config: Mapping[str, str]) -> SelectionPanel:
    return SelectionPanel(
        key=FILESYSTEM,
        title="Choose FS",
        options=FILESYSTEM_OPTIONS,
        focus_index=filesystem_index(config[FILESYSTEM]),
    )


def build_raid_panel(config: Mapping[str, str]) -> SelectionPanel:
    options = raid_options(config[FILESYSTEM])
    return SelectionPanel(
        key=RAID,
        title="Choose RAID",
        options=options,
        focus_index=raid_index(config[RAID], options),
    )


def build_networking_panel(config: Mapping[str, str]) -> SelectionPanel:
    return SelectionPanel(
        key=NETWORKING,
        title="Networking configuration",
        options=NETWORKING_OPTIONS,
        focus_index=networking_index(config[NETWORKING]),
    )


def build_static_fields_panel(config: Mapping[str, str], allow_cancel: bool = False) -> FormPanel:
    return FormPanel(
        key=STATIC_NET_CONFIG,
        title=STATIC_NET_CONFIG,
        fields=(
            TextField(SUBNET, "Subnet", config[SUBNET]),
            TextField(GATEWAY, "Gateway", config[GATEWAY]),
            TextField(DNS, "DNS", config[DNS]),
        ),
        cancel_label="Cancel" if allow_cancel else None,
    )


def preview_lines(config: Mapping[str, str]) -> list[str]:
    lines = [
        f"Filesystem: {config[FILESYSTEM]}",
        f"RAID: {config[RAID]}",
        f"Networking: {config[NETWORKING]}",
    ]
    if config[NETWORKING] == NetworkingMode.STATIC.value:
        lines.append(f"  Subnet: {config[SUBNET] or 'Not set'}")
        lines.append(f"  Gateway: {config[GATEWAY] or 'Not set'}")
        lines.append(f"  DNS: {config[DNS] or 'Not set'}")
    return lines


def build_summary_panel(config: Mapping[str, str], errors: list[str] | None = None) -> SelectionPanel:
    header = "\n".join(preview_lines(config))
    if errors:
        header += "\n\nConfiguration errors:\n" + "\n".join(f"• {e}" for e in errors)
    return SelectionPanel(
        key="summary",
        title="Summary & Confirm",
        options=(SelectionOption("Finish", FINISH_VALUE), SelectionOption("Back", BACK_VALUE)),
        focus_index=0,
        header=header,
    )
