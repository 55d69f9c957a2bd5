"""Error taxonomy for vm_batch."""


class ProvisioningError(Exception):
    """Base class for every failure that aborts a provisioning run."""

    pass


class FormatError(ProvisioningError):
    """Raised when a size, address or number is syntactically malformed."""

    pass


class RangeError(ProvisioningError):
    """Raised when a value is outside its configured bounds."""

    pass


class AddressOverflowError(ProvisioningError):
    """Raised when a static IP sequence would run past the usable range."""

    pass


class IdentifierExhaustedError(ProvisioningError):
    """Raised when no free contiguous VMID block exists below the VMID ceiling."""

    pass


class ConfigError(ProvisioningError):
    """Raised when the configuration file cannot be loaded."""

    pass


class ExternalCallError(ProvisioningError):
    """Raised when a Proxmox management command fails or is unavailable."""

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = ""):
        super().__init__(message)
        self.command = command or []
        self.stderr = stderr


class UserAborted(ProvisioningError):
    """Raised when the operator declines a confirmation."""

    pass
