"""Domain-specific errors for edidctl."""


class EdidctlError(Exception):
    """Base error for edidctl."""


class DecodeError(EdidctlError):
    """Raised when an identification block cannot be decoded.

    ``step`` names the decode stage that failed, ``offset`` is the cursor
    position at the time, and ``available``/``required`` give the byte counts
    that were present versus needed.
    """

    def __init__(self, message: str, *, step: str, offset: int, available: int, required: int) -> None:
        super().__init__(message)
        self.step = step
        self.offset = offset
        self.available = available
        self.required = required


class MagicMismatchError(DecodeError):
    """Raised when the block does not start with the fixed header tag."""


class UnexpectedEndError(DecodeError):
    """Raised when fewer bytes remain than a fixed-size read requires."""


class InputFormatError(EdidctlError):
    """Raised when a dump file is neither raw binary nor hex text."""


class SettingsLoadError(EdidctlError):
    """Raised when the settings file cannot be read."""


class SettingsValidationError(EdidctlError):
    """Raised when the settings file does not conform to schema."""


class VendorRegistryError(EdidctlError):
    """Raised when a vendor registry file cannot be read or validated."""


class ConnectorDiscoveryError(EdidctlError):
    """Raised when sysfs connector enumeration or lookup fails."""
