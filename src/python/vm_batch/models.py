"""Data models for vm_batch."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Provenance(Enum):
    """Where a hardware setting came from."""

    DEFAULT = "default"
    USER = "user-specified"


@dataclass
class Setting:
    """A configurable value paired with its provenance."""

    value: Any
    provenance: Provenance = Provenance.DEFAULT

    @classmethod
    def of(cls, explicit: Any, default: Any) -> "Setting":
        """Build a setting from an optional explicit value and its default."""
        if explicit is None:
            return cls(default, Provenance.DEFAULT)
        return cls(explicit, Provenance.USER)

    @property
    def is_default(self) -> bool:
        return self.provenance is Provenance.DEFAULT

    @property
    def label(self) -> str:
        return f"({self.provenance.value})"


@dataclass
class ProvisioningRequest:
    """Everything the operator asked for, before validation."""

    count: str
    prefix: str
    cpu_cores: Setting
    ram: Setting  # raw string, e.g. "4096M" or "2G"
    bridge: Setting
    disk_device: Setting
    extra_disk: Optional[str] = None  # e.g. "10G"
    first_ip: Optional[str] = None  # e.g. "192.168.1.50/24"
    snapshot: bool = False

    @property
    def static_ip(self) -> bool:
        return bool(self.first_ip)


@dataclass(frozen=True)
class HardwareSpec:
    """Validated hardware applied to every machine in the batch."""

    cpu_cores: int
    ram_mb: int
    bridge: str
    disk_device: str
    disk_growth: Optional[str] = None  # e.g. "+10G"

    @property
    def net0(self) -> str:
        return f"virtio,bridge={self.bridge}"


@dataclass(frozen=True)
class IdentifierBlock:
    """A contiguous run of VMIDs."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length - 1

    @property
    def ids(self) -> range:
        return range(self.start, self.start + self.length)


@dataclass(frozen=True)
class MachineSpec:
    """One VM to create."""

    vmid: int
    name: str
    ipconfig: str  # value for --ipconfig0
    hardware: HardwareSpec
    ip: Optional[str] = None  # e.g. "192.168.1.100/24", None for DHCP


@dataclass
class ProvisioningPlan:
    """The complete, confirmed-before-execution plan for one run."""

    template_id: int
    storage: str
    block: IdentifierBlock
    hardware: HardwareSpec
    machines: list[MachineSpec] = field(default_factory=list)
    first_ip: Optional[str] = None
    snapshot_name: Optional[str] = None
