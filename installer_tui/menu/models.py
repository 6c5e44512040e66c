from __future__ import annotations

import ipaddress
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..shared import CONFIG_KEYS


class FilesystemType(Enum):
    SQUASHFS = "SQUASHFS"
    EXT3 = "EXT3"
    EXT4 = "EXT4"
    ZFS = "ZFS"


class RaidLevel(Enum):
    NONE = "No raid"
    RAID0 = "0"
    RAID1 = "1"
    RAID5 = "5"
    RAID10 = "10"


class NetworkingMode(Enum):
    DHCP = "DHCP"
    STATIC = "Static"


class StepResult(Enum):
    """Outcome of a handled user action."""

    PERSIST_ONLY = "persist_only"
    PERSIST_AND_ADVANCE = "persist_and_advance"


class InstallerConfig(BaseModel):
    """Typed view of the answers collected by the wizard.

    Field aliases are the configuration keys used by the store and the JSON
    file, so a store snapshot can be validated as-is. Enums are stored by
    value for stable, human-readable JSON.
    """

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True, validate_default=True)

    filesystem_type: FilesystemType = Field(default=FilesystemType.SQUASHFS, alias="filesystem-type")
    raid_level: RaidLevel = Field(default=RaidLevel.NONE, alias="raid-level")
    networking_mode: NetworkingMode = Field(default=NetworkingMode.DHCP, alias="networking-mode")
    subnet: str = ""
    gateway: str = ""
    dns: str = ""

    @classmethod
    def field_name_for(cls, key: str) -> str | None:
        for name, info in cls.model_fields.items():
            if (info.alias or name) == key:
                return name
        return None

    @classmethod
    def validate_setting(cls, key: str, value: Any) -> str:
        """Check a single value against the domain of its key.

        Raises:
            ValueError: unknown key, or value outside the key's domain
                (pydantic's ValidationError is a ValueError)
        """
        name = cls.field_name_for(key)
        if name is None:
            raise ValueError(f"Unknown configuration key: {key}")
        result = TypeAdapter(cls.model_fields[name].annotation).validate_python(value)
        return result.value if isinstance(result, Enum) else result

    def validate_for_install(self) -> list[str]:
        """Return a list of validation errors; empty when valid."""
        errors: list[str] = []

        if self.raid_level != RaidLevel.NONE.value and self.filesystem_type != FilesystemType.ZFS.value:
            errors.append(f"RAID level {self.raid_level} requires the ZFS filesystem")

        if self.networking_mode != NetworkingMode.STATIC.value:
            return errors

        network = None
        if not self.subnet:
            errors.append("Subnet is required for static networking")
        else:
            try:
                network = ipaddress.ip_network(self.subnet, strict=False)
            except ValueError:
                errors.append(f"Subnet '{self.subnet}' is not a valid network (e.g. 192.168.1.0/24)")

        if not self.gateway:
            errors.append("Gateway is required for static networking")
        else:
            try:
                gateway = ipaddress.ip_address(self.gateway)
            except ValueError:
                errors.append(f"Gateway '{self.gateway}' is not a valid IP address")
            else:
                if network is not None and gateway not in network:
                    errors.append(f"Gateway {gateway} is outside subnet {network}")

        servers = self.dns_servers()
        if not servers:
            errors.append("At least one DNS server is required for static networking")
        for server in servers:
            try:
                ipaddress.ip_address(server)
            except ValueError:
                errors.append(f"DNS server '{server}' is not a valid IP address")

        return errors

    def dns_servers(self) -> list[str]:
        return [part for part in self.dns.replace(",", " ").split() if part]

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> InstallerConfig:
        return cls.model_validate(dict(data))


def validate_config_map(values: Mapping[str, str]) -> list[str]:
    """Validate a full store snapshot, reporting model errors as messages."""
    try:
        cfg = InstallerConfig.from_json(values)
    except ValidationError as e:
        return [f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()]
    return cfg.validate_for_install()


DEFAULT_STEPS = ["filesystem", "raid", "networking", "summary"]


class InstallerSettings(BaseModel):
    """Runtime settings of the installer front-end, built from the command line."""

    config_path: Path | None = None
    steps: list[str] = Field(default_factory=lambda: list(DEFAULT_STEPS))
    allow_static_cancel: bool = False
    silent: bool = False
    log_file: Path | None = None
    debug: bool = False

    @field_validator("steps")
    @classmethod
    def _validate_steps(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one wizard step is required")
        unknown = [name for name in v if name not in DEFAULT_STEPS]
        if unknown:
            raise ValueError(f"Unknown wizard steps: {', '.join(unknown)}")
        if len(set(v)) != len(v):
            raise ValueError("Wizard steps must not repeat")
        return v


def default_config_map() -> dict[str, str]:
    values = InstallerConfig().to_json()
    return {key: values[key] for key in CONFIG_KEYS}
