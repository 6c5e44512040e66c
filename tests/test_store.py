"""
Tests for the configuration store.
"""

from unittest.mock import Mock

import pytest

from installer_tui.config_io import MemoryBackend
from installer_tui.exceptions import ConfigValidationError, MissingKeyError, PersistenceError
from installer_tui.shared import DNS, FILESYSTEM, GATEWAY, NETWORKING, RAID, SUBNET
from installer_tui.store import ConfigStore


class TestSeeding:
    """Test defaults and prior answers."""

    def test_defaults(self, store: ConfigStore) -> None:
        """Every known key is seeded."""
        assert store.snapshot() == {
            FILESYSTEM: "SQUASHFS",
            RAID: "No raid",
            NETWORKING: "DHCP",
            SUBNET: "",
            GATEWAY: "",
            DNS: "",
        }

    def test_initial_values_override_defaults(self) -> None:
        store = ConfigStore(values={FILESYSTEM: "EXT4", RAID: "No raid"})
        assert store[FILESYSTEM] == "EXT4"
        assert store[NETWORKING] == "DHCP"

    def test_load_from_backend(self) -> None:
        """Prior answers are loaded; unknown keys and non-strings are dropped."""
        backend = MemoryBackend({FILESYSTEM: "ZFS", "hostname": "eve", SUBNET: 42})  # type: ignore[dict-item]
        store = ConfigStore.load(backend)
        assert store[FILESYSTEM] == "ZFS"
        assert store[SUBNET] == ""
        assert "hostname" not in store

    def test_load_keeps_unrecognized_enum_values(self) -> None:
        """Garbage values survive loading; panels fall back when rendering them."""
        store = ConfigStore.load(MemoryBackend({FILESYSTEM: "btrfs"}))
        assert store[FILESYSTEM] == "btrfs"

    def test_missing_key(self, store: ConfigStore) -> None:
        with pytest.raises(MissingKeyError):
            store["hostname"]
        with pytest.raises(KeyError):
            store["hostname"]


class TestWrite:
    """Test validated, persisted writes."""

    @pytest.mark.parametrize("value", ["SQUASHFS", "EXT3", "EXT4", "ZFS"])
    def test_filesystem_round_trip(self, store: ConfigStore, backend: MemoryBackend, value: str) -> None:
        store.write(FILESYSTEM, value, is_final=True)
        assert store[FILESYSTEM] == value
        assert backend.data[FILESYSTEM] == value

    def test_final_flag_is_tracked(self, store: ConfigStore) -> None:
        store.write(NETWORKING, "Static", is_final=False)
        assert not store.is_final(NETWORKING)
        store.write(NETWORKING, "Static", is_final=True)
        assert store.is_final(NETWORKING)
        store.write(NETWORKING, "DHCP")
        assert not store.is_final(NETWORKING)

    def test_last_write_wins(self, store: ConfigStore) -> None:
        store.write(SUBNET, "10.0.0.0/8")
        store.write(SUBNET, "10.1.0.0/16")
        assert store[SUBNET] == "10.1.0.0/16"

    def test_free_text_keys_accept_any_string(self, store: ConfigStore) -> None:
        """Partial edits are stored as typed."""
        store.write(GATEWAY, "192.168.")
        assert store[GATEWAY] == "192.168."

    def test_value_outside_domain(self, store: ConfigStore, backend: MemoryBackend) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            store.write(FILESYSTEM, "BTRFS", is_final=True)
        assert exc_info.value.key == FILESYSTEM
        assert store[FILESYSTEM] == "SQUASHFS"
        assert backend.data == {}

    def test_unknown_key(self, store: ConfigStore) -> None:
        with pytest.raises(ConfigValidationError, match="Unknown configuration key"):
            store.write("hostname", "eve")
        assert "hostname" not in store

    def test_non_string_value(self, store: ConfigStore) -> None:
        with pytest.raises(ConfigValidationError):
            store.write(DNS, 8)  # type: ignore[arg-type]

    def test_persistence_failure_leaves_store_unchanged(self, failing_backend) -> None:
        store = ConfigStore(failing_backend, {FILESYSTEM: "EXT4"})
        with pytest.raises(PersistenceError):
            store.write(FILESYSTEM, "ZFS", is_final=True)
        assert store[FILESYSTEM] == "EXT4"
        assert not store.is_final(FILESYSTEM)
        assert failing_backend.attempts == 1

    def test_os_error_becomes_persistence_error(self) -> None:
        backend = Mock(spec=MemoryBackend)
        backend.persist.side_effect = PermissionError("read-only filesystem")
        store = ConfigStore(backend)
        with pytest.raises(PersistenceError, match="read-only filesystem"):
            store.write(RAID, "No raid")
        assert store[RAID] == "No raid"


class TestErrorChannel:
    """Test error reporting to listeners."""

    def test_report_error_notifies_listeners(self, store: ConfigStore) -> None:
        listener = Mock()
        store.subscribe(listener)
        error = PersistenceError("disk full")
        store.report_error(error)
        listener.assert_called_once_with(error)
        assert store.last_error is error

    def test_only_last_error_kept(self, store: ConfigStore) -> None:
        store.report_error(PersistenceError("first"))
        second = PersistenceError("second")
        store.report_error(second)
        assert store.last_error is second

    def test_unsubscribed_listener_not_called(self, store: ConfigStore) -> None:
        listener = Mock()
        store.subscribe(listener)
        store.unsubscribe(listener)
        store.unsubscribe(listener)
        store.report_error(PersistenceError("disk full"))
        listener.assert_not_called()

    def test_save_persists_snapshot(self, store: ConfigStore, backend: MemoryBackend) -> None:
        store.save()
        assert backend.data == store.snapshot()
