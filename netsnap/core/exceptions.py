"""Custom exception hierarchy for netsnap.

All framework exceptions inherit from ``NetSnapError`` to enable
granular catch clauses while still allowing a single top-level handler.

Exception tree::

    NetSnapError
    ├── ScriptValidationError
    ├── AddressError
    ├── AttributeKindError
    ├── StorageError
    │   └── DeviceNotFoundError
    ├── DriverError
    │   └── MissingDriverError
    ├── SnapshotError
    └── InventoryError
"""

from __future__ import annotations


class NetSnapError(Exception):
    """Base exception for all netsnap errors.

    Attributes:
        message: Human-readable error description.
        device: Optional device name that triggered the error.
        details: Optional mapping of additional contextual data.

    """

    def __init__(
        self,
        message: str,
        device: str | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize with a message, optional device context, and details."""
        self.message = message
        self.device = device
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional device context."""
        parts: list[str] = []
        if self.device:
            parts.append(f"[{self.device}]")
        parts.append(self.message)
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)


class ScriptValidationError(NetSnapError):
    """Raised when a value handed over by a driver script fails validation.

    Examples:
        - Required key missing from a script object
        - Value of the wrong kind (string where a boolean is expected)
        - Empty or whitespace-only string

    """


class AddressError(NetSnapError):
    """Raised when a network or physical address cannot be built.

    Examples:
        - Malformed IPv4/IPv6 literal
        - Prefix length outside the family range
        - Non-contiguous dotted-decimal netmask
        - Unknown address usage tag

    """


class AttributeKindError(NetSnapError):
    """Raised when an attribute value disagrees with its declared kind."""


class StorageError(NetSnapError):
    """Raised when the device store cannot read or write a device.

    Examples:
        - Corrupt device document on disk
        - Store directory not writable

    """


class DeviceNotFoundError(StorageError):
    """Raised when a device lookup by id or name has no match."""


class DriverError(NetSnapError):
    """Raised when a driver or its descriptor is unusable.

    Examples:
        - Malformed descriptor YAML
        - Unknown attribute level or kind in a descriptor

    """


class MissingDriverError(DriverError):
    """Raised when a device references a driver that is not registered."""


class SnapshotError(NetSnapError):
    """Raised when a snapshot run cannot be started or persisted."""


class InventoryError(NetSnapError):
    """Raised when inventory loading or lookup fails.

    Examples:
        - Missing or malformed inventory file
        - Missing required host attributes

    """
