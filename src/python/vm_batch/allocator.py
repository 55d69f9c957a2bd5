"""Contiguous VMID block allocation."""

import logging
from collections.abc import Iterable

from .errors import IdentifierExhaustedError, RangeError

logger = logging.getLogger(__name__)

# Highest VMID Proxmox VE accepts
MAX_VMID = 999_999_999


def block_conflicts(start: int, count: int, in_use: Iterable[int]) -> list[int]:
    """Return the in-use VMIDs that fall inside [start, start + count - 1]."""
    used = set(in_use)
    return [vmid for vmid in range(start, start + count) if vmid in used]


def find_available_start_id(
    desired: int,
    count: int,
    in_use: Iterable[int],
    max_id: int = MAX_VMID,
) -> int:
    """Find the first start >= desired whose block of `count` VMIDs is free.

    Args:
        desired: Preferred first VMID
        count: Number of consecutive VMIDs needed
        in_use: VMIDs already present on the host
        max_id: Highest VMID a block may reach

    Returns:
        The smallest conflict-free starting VMID

    Raises:
        RangeError: If count is not positive
        IdentifierExhaustedError: If no free block ends at or below max_id
    """
    if count < 1:
        raise RangeError(f"Machine count must be at least 1, got {count}")

    used = set(in_use)
    candidate = desired
    while candidate + count - 1 <= max_id:
        collision = next(
            (vmid for vmid in range(candidate, candidate + count) if vmid in used),
            None,
        )
        if collision is None:
            if candidate != desired:
                logger.info("VMIDs from %d are taken, next free block starts at %d", desired, candidate)
            return candidate
        candidate += 1

    raise IdentifierExhaustedError(
        f"No free block of {count} consecutive VM IDs between {desired} and {max_id}"
    )
