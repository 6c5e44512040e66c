from __future__ import annotations

# Configuration keys, shared by the store, the panels and the on-disk format.
FILESYSTEM = "filesystem-type"
RAID = "raid-level"
NETWORKING = "networking-mode"
SUBNET = "subnet"
GATEWAY = "gateway"
DNS = "dns"

CONFIG_KEYS: tuple[str, ...] = (FILESYSTEM, RAID, NETWORKING, SUBNET, GATEWAY, DNS)
STATIC_NETWORK_KEYS: tuple[str, ...] = (SUBNET, GATEWAY, DNS)

# Option value that asks the wizard to go one step back instead of persisting anything
BACK_VALUE = "__back__"
FINISH_VALUE = "__finish__"
