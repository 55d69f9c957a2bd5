"""Memory and disk size parsing."""

import re

from .errors import FormatError

_MEMORY_RE = re.compile(r"^([0-9]+)([mMgG]?)$")
_DISK_RE = re.compile(r"^\+?([0-9]+)([mMgG])$")


def parse_memory_mb(size_str: str) -> int:
    """Convert a memory string to MB.

    Args:
        size_str: Plain MB ("4096") or a value with an M or G suffix ("512M", "2G")

    Returns:
        Size in MB

    Raises:
        FormatError: If the string is in none of the accepted forms
    """
    match = _MEMORY_RE.match(size_str.strip())
    if not match:
        raise FormatError(
            f"invalid memory format '{size_str}' (valid examples: 2048, 512M, 2G)"
        )

    amount, unit = int(match.group(1)), match.group(2).upper()
    if unit == "G":
        return amount * 1024
    return amount


def parse_disk_size(size_str: str) -> str:
    """Validate and normalise a disk size such as "10G" or "512m".

    Args:
        size_str: Integer with a mandatory M or G suffix, optionally with a leading "+"

    Returns:
        Normalised size without the sign, unit upper-cased (e.g. "512M")

    Raises:
        FormatError: If the string is not an integer followed by M or G
    """
    match = _DISK_RE.match(size_str.strip())
    if not match:
        raise FormatError(
            f"invalid extra disk space format '{size_str}' (valid examples: 10G, 512M)"
        )
    return f"{int(match.group(1))}{match.group(2).upper()}"


def growth_argument(size_str: str) -> str:
    """Return the relative increment passed to the resize command ("+10G")."""
    return f"+{parse_disk_size(size_str)}"
