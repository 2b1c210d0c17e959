"""Core module providing the device model, storage and exception hierarchy.

This module contains the canonical device graph populated by driver scripts,
its address and attribute types, the JSON device store, the task log and the
custom exception hierarchy.  The snapshot runner lives in
``netsnap.core.snapshot_engine``.
"""

from .exceptions import (
    AddressError,
    AttributeKindError,
    DeviceNotFoundError,
    DriverError,
    InventoryError,
    MissingDriverError,
    NetSnapError,
    ScriptValidationError,
    SnapshotError,
    StorageError,
)

__all__ = [
    "AddressError",
    "AttributeKindError",
    "DeviceNotFoundError",
    "DriverError",
    "InventoryError",
    "MissingDriverError",
    "NetSnapError",
    "ScriptValidationError",
    "SnapshotError",
    "StorageError",
]
