"""Configuration loading from config.yaml."""

import logging
import socket
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

# Default location of config.yaml
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "vm-batch" / "config.yaml"


@dataclass(frozen=True)
class ProxmoxSettings:
    """Where and from what the batch is cloned."""

    node: str = field(default_factory=socket.gethostname)
    template_id: int = 5000
    storage: str = "local-lvm"
    start_id: int = 5050


@dataclass(frozen=True)
class HardwareDefaults:
    """Hardware applied when the operator does not override it."""

    cpu_cores: int = 2
    ram: str = "4096M"
    bridge: str = "vmbr1"
    disk_device: str = "scsi0"


@dataclass(frozen=True)
class Limits:
    """Bounds for operator-supplied hardware."""

    max_cpu_cores: int = 32
    min_ram_mb: int = 256
    max_ram_mb: int = 32768


@dataclass(frozen=True)
class BatchConfig:
    """Complete vm-batch configuration."""

    proxmox: ProxmoxSettings = field(default_factory=ProxmoxSettings)
    defaults: HardwareDefaults = field(default_factory=HardwareDefaults)
    limits: Limits = field(default_factory=Limits)


def _section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return section


def _int(section: dict, key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}")
    return value


def _str(section: dict, key: str, default: str) -> str:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ConfigError(f"'{key}' must be a string, got {value!r}")
    return str(value)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Optional[Path] = None) -> BatchConfig:
    """Load configuration, falling back to built-in defaults.

    Args:
        path: Explicit config file. When None, DEFAULT_CONFIG_PATH is used if it exists.

    Returns:
        BatchConfig with every missing key set to its default

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.debug("No config file at %s, using defaults", DEFAULT_CONFIG_PATH)
            return BatchConfig()
        path = DEFAULT_CONFIG_PATH
    elif not path.exists():
        raise ConfigError(f"Config file not found at {path}")

    logger.debug("Loading config from %s", path)
    data = _read_yaml(path)

    proxmox = _section(data, "proxmox")
    defaults = _section(data, "defaults")
    limits = _section(data, "limits")

    builtin_proxmox = ProxmoxSettings()
    builtin_defaults = HardwareDefaults()
    builtin_limits = Limits()

    return BatchConfig(
        proxmox=ProxmoxSettings(
            node=_str(proxmox, "node", builtin_proxmox.node),
            template_id=_int(proxmox, "template_id", builtin_proxmox.template_id),
            storage=_str(proxmox, "storage", builtin_proxmox.storage),
            start_id=_int(proxmox, "start_id", builtin_proxmox.start_id),
        ),
        defaults=HardwareDefaults(
            cpu_cores=_int(defaults, "cpu_cores", builtin_defaults.cpu_cores),
            ram=_str(defaults, "ram", builtin_defaults.ram),
            bridge=_str(defaults, "bridge", builtin_defaults.bridge),
            disk_device=_str(defaults, "disk_device", builtin_defaults.disk_device),
        ),
        limits=Limits(
            max_cpu_cores=_int(limits, "max_cpu_cores", builtin_limits.max_cpu_cores),
            min_ram_mb=_int(limits, "min_ram_mb", builtin_limits.min_ram_mb),
            max_ram_mb=_int(limits, "max_ram_mb", builtin_limits.max_ram_mb),
        ),
    )
