"""Expansion of a request into per-machine specs, and the pre-flight summary."""

from datetime import datetime
from typing import Optional

from .addressing import DHCP_IPCONFIG, AddressPlan
from .models import HardwareSpec, IdentifierBlock, MachineSpec, ProvisioningPlan, ProvisioningRequest


def snapshot_label(now: Optional[datetime] = None) -> str:
    """Name for the template snapshot taken before cloning."""
    now = now or datetime.now()
    return f"pre-clone-{now:%Y%m%d-%H%M%S}"


def expand_machines(
    prefix: str,
    block: IdentifierBlock,
    hardware: HardwareSpec,
    address_plan: Optional[AddressPlan] = None,
) -> list[MachineSpec]:
    """Build one MachineSpec per VMID in the block.

    Args:
        prefix: Name prefix; machines are named prefix-1, prefix-2, ...
        block: VMIDs to use, in order
        hardware: Hardware shared by every machine
        address_plan: Static addressing, or None for DHCP

    Returns:
        MachineSpecs in creation order
    """
    machines = []
    for index, vmid in enumerate(block.ids, start=1):
        if address_plan is not None:
            ip = address_plan.cidr(index)
            ipconfig = address_plan.ipconfig(index)
        else:
            ip = None
            ipconfig = DHCP_IPCONFIG
        machines.append(
            MachineSpec(
                vmid=vmid,
                name=f"{prefix}-{index}",
                ipconfig=ipconfig,
                hardware=hardware,
                ip=ip,
            )
        )
    return machines


def render_summary(plan: ProvisioningPlan, request: ProvisioningRequest) -> list[str]:
    """Render the human-readable summary shown before confirmation."""
    hw = plan.hardware
    lines = [
        "",
        "==================  SUMMARY  ==================",
        f"VMs to create: {len(plan.machines)}",
        f"VM name prefix: {request.prefix}",
        f"Starting VM ID: {plan.block.start}",
        f"Template ID:    {plan.template_id}",
    ]
    if plan.snapshot_name:
        lines.append(f"Template snapshot: {plan.snapshot_name}")
    lines += [
        "",
        "Hardware specs for each VM:",
        f"  CPU cores:   {hw.cpu_cores} {request.cpu_cores.label}",
        f"  RAM:         {hw.ram_mb}MB {request.ram.label}",
        f"  Bridge:      {hw.bridge} {request.bridge.label}",
    ]
    if hw.disk_growth:
        lines.append(
            f"  Extra disk:  {hw.disk_growth.lstrip('+')} on device {hw.disk_device} "
            f"{request.disk_device.label}"
        )
    else:
        lines.append("  Extra disk:  None")
    lines.append("")

    if plan.first_ip:
        lines.append(f"Using static IP. First IP: {plan.first_ip}")
        lines.append("IPs will increment last octet by 1 for each subsequent VM.")
    else:
        lines.append("Network config: DHCP")

    lines += [
        "-----------------------------------------------",
        "The following VMs will be created:",
    ]
    for machine in plan.machines:
        lines.append(f"  - {machine.name} (VM ID: {machine.vmid}, IP: {machine.ip or 'DHCP'})")
    lines.append("===============================================")
    return lines
