"""Batch provisioning flow: validate, resolve, allocate, confirm, execute."""

import logging
import re
from enum import Enum
from typing import Callable, Optional

import click

from .addressing import AddressPlan, check_ip_range, parse_ip_cidr
from .allocator import block_conflicts, find_available_start_id
from .config import BatchConfig
from .errors import FormatError, ProvisioningError, RangeError, UserAborted
from .hypervisor import ProxmoxHost
from .models import (
    HardwareSpec,
    IdentifierBlock,
    MachineSpec,
    ProvisioningPlan,
    ProvisioningRequest,
    Provenance,
    Setting,
)
from .planner import expand_machines, render_summary, snapshot_label
from .prompts import Prompter
from .sizes import growth_argument, parse_memory_mb

logger = logging.getLogger(__name__)

_POSITIVE_INT_RE = re.compile(r"^[0-9]+$")

# (request attribute, display name, question asked for the new value)
_OVERRIDABLE = (
    ("cpu_cores", "CPU cores", "Enter new CPU core count"),
    ("ram", "RAM", "Enter new RAM (e.g., 2048, 512M, 2G)"),
    ("bridge", "network bridge", "Enter new bridge name (e.g., vmbr0)"),
    ("disk_device", "disk device", "Enter new disk device (e.g., scsi0, virtio0)"),
)


class RunState(Enum):
    """Phases of a provisioning run."""

    PARSING_ARGS = "parsing-args"
    VALIDATING = "validating"
    RESOLVING_DEFAULTS = "resolving-defaults"
    ALLOCATING_IDENTIFIERS = "allocating-identifiers"
    PLANNING_ADDRESSES = "planning-addresses"
    AWAITING_CONFIRMATION = "awaiting-confirmation"
    EXECUTING = "executing"
    DONE = "done"
    FAILED = "failed"


def parse_count(value: str) -> int:
    """Parse the machine count, which must be a positive integer."""
    value = str(value).strip()
    if not _POSITIVE_INT_RE.match(value):
        raise FormatError(f"-n must be a positive integer, got '{value}'")
    count = int(value)
    if count < 1:
        raise RangeError("-n must be a positive integer")
    return count


def validate_cpu(value, max_cores: int) -> int:
    """Validate a CPU core count against [1, max_cores]."""
    text = str(value).strip()
    if not _POSITIVE_INT_RE.match(text):
        raise FormatError(f"CPU cores must be a positive integer, got '{value}'")
    cores = int(text)
    if cores < 1:
        raise RangeError("CPU cores must be a positive integer")
    if cores > max_cores:
        raise RangeError(f"CPU cores cannot exceed {max_cores}")
    return cores


def validate_ram(value, min_mb: int, max_mb: int) -> int:
    """Parse a memory string and check it lies within [min_mb, max_mb]."""
    ram_mb = parse_memory_mb(str(value))
    if ram_mb < min_mb or ram_mb > max_mb:
        raise RangeError(
            f"Memory must be between {min_mb}MB and {max_mb}MB (inclusive), got {ram_mb}MB"
        )
    return ram_mb


class Provisioner:
    """Creates a batch of VMs from the configured template.

    Args:
        config: Loaded vm-batch configuration
        host: Management interface of the target node
        prompter: Source of interactive answers, or None when running unattended
        echo: Output function with click.echo's signature
    """

    def __init__(
        self,
        config: BatchConfig,
        host: ProxmoxHost,
        prompter: Optional[Prompter] = None,
        echo: Callable[..., None] = click.echo,
    ):
        self.config = config
        self.host = host
        self.prompter = prompter
        self.echo = echo
        self.state = RunState.PARSING_ARGS

    def _enter(self, state: RunState) -> None:
        logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state

    def run(
        self,
        request: ProvisioningRequest,
        assume_yes: bool = False,
        dry_run: bool = False,
    ) -> ProvisioningPlan:
        """Provision every machine in the request.

        Args:
            request: What the operator asked for
            assume_yes: Skip the final confirmation
            dry_run: Stop after printing the summary

        Returns:
            The plan that was executed (or would have been, for a dry run)

        Raises:
            ProvisioningError: On any validation failure, external call failure or abort
        """
        try:
            plan = self._plan(request)

            self._enter(RunState.AWAITING_CONFIRMATION)
            for line in render_summary(plan, request):
                self.echo(line)
            if dry_run:
                self.echo("DRY RUN: No changes applied")
                self._enter(RunState.DONE)
                return plan
            self._confirm(assume_yes)

            self._enter(RunState.EXECUTING)
            self._execute(plan)
            self._enter(RunState.DONE)
            return plan
        except (ProvisioningError, click.Abort):
            self._enter(RunState.FAILED)
            raise

    def _plan(self, request: ProvisioningRequest) -> ProvisioningPlan:
        self._enter(RunState.PARSING_ARGS)
        count = parse_count(request.count)
        if not request.prefix or not request.prefix.strip():
            raise FormatError("-p (prefix) must not be empty")

        self._enter(RunState.VALIDATING)
        disk_growth = growth_argument(request.extra_disk) if request.extra_disk else None

        self._enter(RunState.RESOLVING_DEFAULTS)
        self._resolve_overrides(request)
        limits = self.config.limits
        hardware = HardwareSpec(
            cpu_cores=validate_cpu(request.cpu_cores.value, limits.max_cpu_cores),
            ram_mb=validate_ram(request.ram.value, limits.min_ram_mb, limits.max_ram_mb),
            bridge=str(request.bridge.value),
            disk_device=str(request.disk_device.value),
            disk_growth=disk_growth,
        )

        self._enter(RunState.ALLOCATING_IDENTIFIERS)
        self.host.check_api()
        in_use = self.host.list_vmids()
        block = IdentifierBlock(self._choose_start(count, in_use), count)
        snapshot_name = snapshot_label() if request.snapshot else None

        self._enter(RunState.PLANNING_ADDRESSES)
        address_plan: Optional[AddressPlan] = None
        if request.static_ip:
            address_plan = parse_ip_cidr(request.first_ip)
            check_ip_range(address_plan.start_octet, count, address_plan.prefix_length)

        proxmox = self.config.proxmox
        return ProvisioningPlan(
            template_id=proxmox.template_id,
            storage=proxmox.storage,
            block=block,
            hardware=hardware,
            machines=expand_machines(request.prefix, block, hardware, address_plan),
            first_ip=address_plan.first if address_plan else None,
            snapshot_name=snapshot_name,
        )

    def _resolve_overrides(self, request: ProvisioningRequest) -> None:
        """Offer to override every setting the operator left at its default."""
        if self.prompter is None:
            return

        for attr, display, question in _OVERRIDABLE:
            setting: Setting = getattr(request, attr)
            if not setting.is_default:
                continue
            self.echo(f"Default {display} is {setting.value}.")
            if not self.prompter.confirm(f"Would you like to override the default {display}?"):
                continue
            answer = self.prompter.ask(question).strip()
            if not answer:
                self.echo(f"Keeping default {display} {setting.value}.")
                continue
            if attr == "cpu_cores":
                validate_cpu(answer, self.config.limits.max_cpu_cores)
            setattr(request, attr, Setting(answer, Provenance.USER))

    def _choose_start(self, count: int, in_use: set[int]) -> int:
        desired = self.config.proxmox.start_id
        suggested = find_available_start_id(desired, count, in_use)
        if suggested == desired:
            return desired

        self.echo(
            f"WARNING: VM IDs in range {desired} - {IdentifierBlock(desired, count).end} are in use.",
            err=True,
        )
        self.echo(f"Suggested new starting ID: {suggested}", err=True)
        if self.prompter is None:
            return suggested

        answer = self.prompter.ask(
            f"Enter a new starting VM ID (or press Enter to use {suggested})"
        ).strip()
        if not answer:
            return suggested
        if not _POSITIVE_INT_RE.match(answer):
            raise FormatError(f"VM ID must be a positive integer, got '{answer}'")

        start = int(answer)
        taken = block_conflicts(start, count, in_use)
        if taken:
            self.echo(
                f"WARNING: VM IDs {', '.join(str(v) for v in taken)} already exist; "
                "cloning onto them will fail.",
                err=True,
            )
        return start

    def _confirm(self, assume_yes: bool) -> None:
        if assume_yes:
            return
        if self.prompter is None:
            raise UserAborted("Confirmation required. Re-run with --yes to proceed unattended.")
        if not self.prompter.confirm("Proceed with VM creation?"):
            raise UserAborted("Operation canceled.")

    def _execute(self, plan: ProvisioningPlan) -> None:
        if plan.snapshot_name:
            self.echo(f"Creating snapshot '{plan.snapshot_name}' on template ID {plan.template_id}...")
            self.host.snapshot(plan.template_id, plan.snapshot_name)
            self.echo(f"Snapshot {plan.snapshot_name} created.")

        for machine in plan.machines:
            self._create(plan, machine)

        self.echo(f"All {len(plan.machines)} VMs created and started.")

    def _create(self, plan: ProvisioningPlan, machine: MachineSpec) -> None:
        hw = machine.hardware

        self._step(
            f"Cloning VM {machine.vmid} ({machine.name})... ",
            self.host.clone, plan.template_id, machine.vmid, machine.name, plan.storage,
        )
        self.host.set_hardware(machine.vmid, hw.ram_mb, hw.cpu_cores)
        self.host.set_network(machine.vmid, hw.net0)
        self.host.set_ipconfig(machine.vmid, machine.ipconfig)

        if hw.disk_growth:
            self._step(
                f"Resizing disk for VM {machine.vmid} ({machine.name})... ",
                self.host.resize_disk, machine.vmid, hw.disk_device, hw.disk_growth,
            )

        self._step(f"Starting VM {machine.vmid} ({machine.name})... ", self.host.start, machine.vmid)

    def _step(self, message: str, func: Callable, *args) -> None:
        self.echo(message, nl=False)
        try:
            func(*args)
        except ProvisioningError:
            self.echo("Failed")
            raise
        self.echo("Done")
