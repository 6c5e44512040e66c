"""
Tests for the panel builders.

The builders are pure functions of the configuration map, so plain dicts
stand in for the store here.
"""

import pytest

from installer_tui.menu.models import default_config_map
from installer_tui.menu.panels import (
    FILESYSTEM_OPTIONS,
    FormPanel,
    build_filesystem_panel,
    build_networking_panel,
    build_raid_panel,
    build_static_fields_panel,
    build_summary_panel,
    filesystem_index,
    networking_index,
    raid_index,
    raid_options,
)
from installer_tui.shared import BACK_VALUE, DNS, FILESYSTEM, FINISH_VALUE, GATEWAY, NETWORKING, RAID, SUBNET


def config(**overrides: str) -> dict[str, str]:
    values = default_config_map()
    values.update({key.replace("_", "-"): value for key, value in overrides.items()})
    return values


class TestFilesystemPanel:
    """Test filesystem choice and its default fallback."""

    def test_offers_four_filesystems(self) -> None:
        panel = build_filesystem_panel(config())
        assert panel.labels() == ["SQUASHFS", "EXT3", "EXT4", "ZFS"]
        assert panel.key == FILESYSTEM

    @pytest.mark.parametrize(("value", "index"), [("SQUASHFS", 0), ("EXT3", 1), ("EXT4", 2), ("ZFS", 3)])
    def test_current_value_is_highlighted(self, value: str, index: int) -> None:
        panel = build_filesystem_panel(config(filesystem_type=value))
        assert panel.focus_index == index
        assert panel.focused_option() == FILESYSTEM_OPTIONS[index]

    @pytest.mark.parametrize("value", ["", "btrfs", "ext4", "zfs ", "No raid"])
    def test_unrecognized_value_falls_back_to_squashfs(self, value: str) -> None:
        assert filesystem_index(value) == filesystem_index("SQUASHFS")

    def test_missing_key_fails(self) -> None:
        with pytest.raises(KeyError):
            build_filesystem_panel({})


class TestRaidPanel:
    """Test capability gating and the "no selection" default."""

    def test_zfs_offers_all_levels(self) -> None:
        panel = build_raid_panel(config(filesystem_type="ZFS"))
        assert panel.labels() == ["No raid", "0", "1", "5", "10"]

    @pytest.mark.parametrize("filesystem", ["SQUASHFS", "EXT3", "EXT4", "garbage"])
    def test_other_filesystems_offer_no_raid_only(self, filesystem: str) -> None:
        assert [o.label for o in raid_options(filesystem)] == ["No raid"]

    def test_no_raid_means_no_selection(self) -> None:
        panel = build_raid_panel(config(filesystem_type="ZFS", raid_level="No raid"))
        assert panel.focus_index is None
        assert panel.focused_option() is None

    def test_stored_level_is_highlighted(self) -> None:
        panel = build_raid_panel(config(filesystem_type="ZFS", raid_level="5"))
        assert panel.focus_index == 3
        assert panel.focused_option().value == "5"

    def test_level_not_offered_means_no_selection(self) -> None:
        options = raid_options("EXT4")
        assert raid_index("5", options) is None
        assert raid_index("garbage", raid_options("ZFS")) is None


class TestNetworkingPanels:
    """Test the mode choice and the static fields form."""

    def test_mode_choice(self) -> None:
        panel = build_networking_panel(config(networking_mode="Static"))
        assert panel.labels() == ["DHCP", "Static"]
        assert panel.focus_index == 1
        assert panel.key == NETWORKING

    @pytest.mark.parametrize("value", ["", "dhcp", "PPPoE"])
    def test_unrecognized_mode_falls_back_to_dhcp(self, value: str) -> None:
        assert networking_index(value) == 0

    def test_static_fields_prefilled(self) -> None:
        values = config(subnet="10.0.0.0/24", gateway="10.0.0.1", dns="1.1.1.1")
        panel = build_static_fields_panel(values)
        assert isinstance(panel, FormPanel)
        assert [(f.key, f.value) for f in panel.fields] == [
            (SUBNET, "10.0.0.0/24"),
            (GATEWAY, "10.0.0.1"),
            (DNS, "1.1.1.1"),
        ]
        assert panel.cancel_label is None

    def test_static_fields_cancel_control(self) -> None:
        assert build_static_fields_panel(config(), allow_cancel=True).cancel_label == "Cancel"


class TestSummaryPanel:
    def test_preview_and_errors(self) -> None:
        values = config(filesystem_type="EXT4", raid_level="5")
        panel = build_summary_panel(values, ["RAID level 5 requires the ZFS filesystem"])
        assert [o.value for o in panel.options] == [FINISH_VALUE, BACK_VALUE]
        assert "Filesystem: EXT4" in panel.header
        assert "RAID level 5 requires the ZFS filesystem" in panel.header
        assert RAID not in panel.header

    def test_static_details_only_for_static_mode(self) -> None:
        assert "Subnet" not in build_summary_panel(config()).header
        assert "Subnet: Not set" in build_summary_panel(config(networking_mode="Static")).header
