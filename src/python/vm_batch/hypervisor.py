"""Proxmox VE management commands (pvesh / qm)."""

import logging
import subprocess
from typing import Callable

from .errors import ExternalCallError

logger = logging.getLogger(__name__)

CommandRunner = Callable[[list[str]], str]


def run_command(cmd: list[str]) -> str:
    """Run a management command and return its stdout.

    Args:
        cmd: Command and arguments

    Returns:
        Captured standard output

    Raises:
        ExternalCallError: If the command exits non-zero or is not installed
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout
    except subprocess.CalledProcessError as e:
        raise ExternalCallError(
            f"Command failed: {' '.join(cmd)}: {(e.stderr or '').strip()}",
            command=cmd,
            stderr=e.stderr or "",
        ) from e
    except FileNotFoundError:
        raise ExternalCallError(
            f"'{cmd[0]}' not found. Run vm-batch on a Proxmox VE node.",
            command=cmd,
        ) from None


def parse_vmids(qm_list_output: str) -> set[int]:
    """Extract VMIDs from `qm list` output (first column, header skipped)."""
    vmids = set()
    for line in qm_list_output.splitlines()[1:]:
        fields = line.split()
        if fields and fields[0].isdigit():
            vmids.add(int(fields[0]))
    return vmids


class ProxmoxHost:
    """Management interface of a single Proxmox VE node."""

    def __init__(self, node: str, runner: CommandRunner = run_command):
        self.node = node
        self._run = runner

    def check_api(self) -> None:
        """Fail unless the node's API answers a status query."""
        try:
            self._run(["pvesh", "get", f"/nodes/{self.node}/status"])
        except ExternalCallError as e:
            raise ExternalCallError(
                "Proxmox API is not responding. Check node status.",
                command=e.command,
                stderr=e.stderr,
            ) from e

    def list_vmids(self) -> set[int]:
        return parse_vmids(self._run(["qm", "list"]))

    def snapshot(self, vmid: int, name: str) -> None:
        self._run(["qm", "snapshot", str(vmid), name])

    def clone(self, template_id: int, vmid: int, name: str, storage: str) -> None:
        self._run([
            "qm", "clone", str(template_id), str(vmid),
            "--name", name,
            "--full", "true",
            "--storage", storage,
        ])

    def set_hardware(self, vmid: int, memory_mb: int, cores: int) -> None:
        self._run(["qm", "set", str(vmid), "--memory", str(memory_mb), "--cores", str(cores)])

    def set_network(self, vmid: int, net0: str) -> None:
        self._run(["qm", "set", str(vmid), "--net0", net0])

    def set_ipconfig(self, vmid: int, ipconfig: str) -> None:
        self._run(["qm", "set", str(vmid), "--ipconfig0", ipconfig])

    def resize_disk(self, vmid: int, device: str, size: str) -> None:
        """Grow a disk; size must be a relative increment such as "+10G"."""
        if not size.startswith("+"):
            size = f"+{size}"
        self._run(["qm", "resize", str(vmid), device, size])

    def start(self, vmid: int) -> None:
        self._run(["qm", "start", str(vmid)])
