"""YAML inventory management.

Loads the hosts file describing managed devices and seeds the device store.
"""

from .inventory_manager import HostEntry, InventoryManager

__all__ = ["HostEntry", "InventoryManager"]
