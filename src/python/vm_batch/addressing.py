"""Static IPv4 address planning for a batch of VMs."""

import re
from dataclasses import dataclass

from .errors import AddressOverflowError, FormatError, RangeError

DEFAULT_PREFIX_LENGTH = 24

# Highest last octet handed out; .255 is never assigned.
MAX_HOST_OCTET = 254

DHCP_IPCONFIG = "ip=dhcp"

_IP_CIDR_RE = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)\.([0-9]+)(?:/([0-9]+))?$")


@dataclass(frozen=True)
class AddressPlan:
    """First static address of a batch; later machines increment the last octet."""

    network: str  # first three octets, e.g. "192.168.1"
    start_octet: int
    prefix_length: int = DEFAULT_PREFIX_LENGTH

    @property
    def gateway(self) -> str:
        # Gateway is always .1 of the base network
        return f"{self.network}.1"

    @property
    def first(self) -> str:
        return self.cidr(1)

    def address(self, index: int) -> str:
        """Address of the index-th machine (1-based)."""
        return f"{self.network}.{self.start_octet + index - 1}"

    def cidr(self, index: int) -> str:
        return f"{self.address(index)}/{self.prefix_length}"

    def ipconfig(self, index: int) -> str:
        """Proxmox cloud-init ipconfig0 value for the index-th machine."""
        return f"ip={self.cidr(index)},gw={self.gateway}"


def parse_ip_cidr(value: str) -> AddressPlan:
    """Parse "192.168.1.50" or "192.168.1.50/24" into an AddressPlan.

    Args:
        value: Dotted-quad IPv4 address with optional /prefix (default /24)

    Returns:
        AddressPlan for the first machine

    Raises:
        FormatError: If the string is not an address with optional prefix
        RangeError: If an octet is above 255 or the prefix above 32
    """
    match = _IP_CIDR_RE.match(value.strip())
    if not match:
        raise FormatError(
            f"Invalid IP/CIDR format '{value}'. Expected e.g. 192.168.1.50 or 192.168.1.50/24"
        )

    octets = [int(o) for o in match.group(1, 2, 3, 4)]
    for octet in octets:
        if octet > 255:
            raise RangeError(f"Invalid IP octet '{octet}' in '{value}'")

    prefix_length = DEFAULT_PREFIX_LENGTH
    if match.group(5) is not None:
        prefix_length = int(match.group(5))
        if prefix_length > 32:
            raise RangeError(f"Invalid prefix length '/{prefix_length}' in '{value}' (0-32)")

    return AddressPlan(
        network=".".join(str(o) for o in octets[:3]),
        start_octet=octets[3],
        prefix_length=prefix_length,
    )


def check_ip_range(start_octet: int, count: int, prefix_length: int) -> None:
    """Make sure `count` addresses starting at `start_octet` fit the range.

    The last octet of the final address may not pass .254. For prefixes
    longer than /24 the block must also end before the broadcast address of
    the subnet the first address belongs to.

    Raises:
        RangeError: If count is not positive
        AddressOverflowError: If the sequence would not fit
    """
    if count < 1:
        raise RangeError(f"Machine count must be at least 1, got {count}")

    end_octet = start_octet + count - 1
    if end_octet > MAX_HOST_OCTET:
        raise AddressOverflowError(
            f"Not enough IPs in the /{prefix_length} range for {count} VMs. "
            f"(Would exceed .{MAX_HOST_OCTET})"
        )

    if prefix_length > DEFAULT_PREFIX_LENGTH:
        block_size = 2 ** (32 - prefix_length)
        block_start = start_octet - start_octet % block_size
        # /31 and /32 have no broadcast address
        last_usable = block_start + block_size - (2 if prefix_length <= 30 else 1)
        if end_octet > last_usable:
            raise AddressOverflowError(
                f"Not enough IPs in the /{prefix_length} subnet for {count} VMs "
                f"starting at .{start_octet}. (Would exceed .{last_usable})"
            )
