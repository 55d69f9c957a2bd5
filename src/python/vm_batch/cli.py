"""Click CLI for vm_batch."""

import sys
from pathlib import Path

import click

from . import __version__
from .config import load_config
from .errors import ProvisioningError, UserAborted
from .hypervisor import ProxmoxHost
from .logging_config import configure_logging
from .models import ProvisioningRequest, Setting
from .prompts import ClickPrompter
from .provisioner import Provisioner

EPILOG = """\b
Examples:
  vm-batch -n 3 -p ansible
  vm-batch -n 3 -p ansible -c 2 -m 2G -b vmbr1 -i 192.168.10.50/24 -d 10G -D scsi0
"""


@click.command(context_settings={"help_option_names": ["-h", "--help"]}, epilog=EPILOG)
@click.option("-n", "count", metavar="NUM", help="Number of VMs to create (required).")
@click.option("-p", "prefix", metavar="PREFIX",
              help="VM name prefix, e.g. 'ansible' -> ansible-1, ansible-2 (required).")
@click.option("-c", "cpu", metavar="CPU", help="CPU cores per VM.")
@click.option("-m", "ram", metavar="RAM", help="RAM per VM: plain MB (4096) or with M/G suffix (512M, 2G).")
@click.option("-b", "bridge", metavar="BRIDGE", help="Network bridge.")
@click.option("-i", "first_ip", metavar="IP/CIDR",
              help="First static IP with optional CIDR (e.g. 192.168.10.50/24). "
                   "Each subsequent VM increments the last octet.")
@click.option("-d", "extra_disk", metavar="SIZE", help="Extra disk space to add to each VM (e.g. 10G, 512M).")
@click.option("-D", "disk_device", metavar="DEVICE", help="Disk device to resize.")
@click.option("-s", "snapshot", is_flag=True, help="Create a snapshot of the template before cloning.")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.option("--dry-run", is_flag=True, help="Print the summary and exit without changing anything")
@click.option("--interactive/--no-interactive", default=None,
              help="Offer to override defaults and ask for confirmation [default: when stdin is a TTY]")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              envvar="VM_BATCH_CONFIG", help="Path to config.yaml")
@click.option("--verbose", "-v", is_flag=True, help="Log every management command")
@click.version_option(version=__version__)
@click.pass_context
def cli(
    ctx: click.Context,
    count: str | None,
    prefix: str | None,
    cpu: str | None,
    ram: str | None,
    bridge: str | None,
    first_ip: str | None,
    extra_disk: str | None,
    disk_device: str | None,
    snapshot: bool,
    yes: bool,
    dry_run: bool,
    interactive: bool | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Create a batch of VMs on this Proxmox VE node by cloning a template."""
    configure_logging(verbose)

    if not count or not prefix:
        click.echo("Error: -n (num_vms) and -p (prefix) are required.", err=True)
        click.echo(ctx.get_help(), err=True)
        sys.exit(1)

    if interactive is None:
        interactive = sys.stdin.isatty()

    try:
        config = load_config(config_path)
        defaults = config.defaults
        request = ProvisioningRequest(
            count=count,
            prefix=prefix,
            cpu_cores=Setting.of(cpu, defaults.cpu_cores),
            ram=Setting.of(ram, defaults.ram),
            bridge=Setting.of(bridge, defaults.bridge),
            disk_device=Setting.of(disk_device, defaults.disk_device),
            extra_disk=extra_disk,
            first_ip=first_ip,
            snapshot=snapshot,
        )
        provisioner = Provisioner(
            config,
            ProxmoxHost(config.proxmox.node),
            prompter=ClickPrompter() if interactive else None,
        )
        provisioner.run(request, assume_yes=yes, dry_run=dry_run)
    except UserAborted as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    except ProvisioningError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except click.Abort:
        click.echo("Operation canceled.", err=True)
        sys.exit(1)
