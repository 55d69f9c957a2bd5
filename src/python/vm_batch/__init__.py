"""Batch VM provisioning for a single Proxmox VE node."""

__version__ = "0.1.0"
