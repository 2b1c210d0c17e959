"""YAML inventory of managed devices.

Loads a hosts file describing the devices to manage and seeds the device
store with the ones it does not hold yet.  The hosts file maps each device
name to its driver and site data::

    core-rtr-1:
      driver: cisco_ios
      address: 10.0.0.1
      location: Paris DC1
      contact: noc@example.net
      networkClass: ROUTER
      comments: Primary core router

Usage::

    mgr = InventoryManager(hosts_file="inventory/hosts.yml")
    mgr.load()
    junos_hosts = mgr.filter(driver="juniper_junos")
    added = mgr.seed(DeviceStore(Path("./devices")))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from ..core.device import Device, NetworkClass
from ..core.device_store import DeviceStore
from ..core.exceptions import DeviceNotFoundError, InventoryError

logger = logging.getLogger(__name__)

DEFAULT_HOSTS_FILE = Path("inventory/hosts.yml")


@dataclass
class HostEntry:
    """Lightweight representation of an inventory host.

    Attributes:
        name: Device name, unique in the inventory.
        driver: Name of the driver that collects the device.
        address: Management address.
        location: Site location.
        contact: Site contact.
        network_class: Declared functional classification.
        comments: Free-form operator comments.

    """

    name: str
    driver: str
    address: str = ""
    location: str = ""
    contact: str = ""
    network_class: NetworkClass = NetworkClass.UNKNOWN
    comments: str = ""

    def to_device(self) -> Device:
        """Convert to an unstored ``Device``."""
        return Device(
            name=self.name,
            driver=self.driver,
            mgmt_address=self.address,
            location=self.location,
            contact=self.contact,
            network_class=self.network_class,
            comments=self.comments,
        )


class InventoryManager:
    """Load, query and seed the device inventory.

    Args:
        hosts_file: Path to the hosts YAML inventory file.

    """

    def __init__(self, hosts_file: Path | str = DEFAULT_HOSTS_FILE) -> None:
        """Initialize the inventory manager with the hosts file path."""
        self._hosts_file = Path(hosts_file)
        self._hosts: dict[str, HostEntry] = {}
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def load(self) -> None:
        """Load the inventory from the hosts file.

        Raises:
            InventoryError: If the file is missing, malformed, or a host
                entry is invalid.

        """
        if not self._hosts_file.exists():
            raise InventoryError(f"Hosts file not found: {self._hosts_file}")
        try:
            with self._hosts_file.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise InventoryError(
                f"Malformed hosts file: {self._hosts_file}",
                details={"error": str(exc)},
            ) from exc
        if not isinstance(raw, dict):
            raise InventoryError(f"Hosts file is not a mapping: {self._hosts_file}")

        hosts: dict[str, HostEntry] = {}
        for name, host_data in raw.items():
            hosts[str(name)] = self._parse_host(str(name), host_data)
        self._hosts = hosts
        self._logger.info("Inventory loaded from %s (%d hosts)", self._hosts_file, len(hosts))

    @staticmethod
    def _parse_host(name: str, host_data: Any) -> HostEntry:
        if not isinstance(host_data, dict):
            raise InventoryError("Host entry is not a mapping", device=name)
        driver = host_data.get("driver")
        if not driver:
            raise InventoryError("Host entry has no driver", device=name)
        network_class = str(host_data.get("networkClass", NetworkClass.UNKNOWN)).upper()
        if network_class not in NetworkClass.__members__:
            raise InventoryError(
                "Unknown network class",
                device=name,
                details={"networkClass": network_class},
            )
        return HostEntry(
            name=name,
            driver=str(driver),
            address=str(host_data.get("address", "")),
            location=str(host_data.get("location", "")),
            contact=str(host_data.get("contact", "")),
            network_class=NetworkClass[network_class],
            comments=str(host_data.get("comments", "")),
        )

    def add_host(self, entry: HostEntry) -> None:
        """Programmatically add a host to the inventory."""
        self._hosts[entry.name] = entry
        self._logger.debug("Added host %s to inventory", entry.name)

    def get_host(self, name: str) -> HostEntry:
        """Retrieve a single host by name.

        Raises:
            InventoryError: If the host is not found.

        """
        if name not in self._hosts:
            raise InventoryError(
                f"Host '{name}' not found in inventory",
                details={"available": list(self._hosts.keys())},
            )
        return self._hosts[name]

    def get_all_hosts(self) -> dict[str, HostEntry]:
        """Return a copy of all hosts in the inventory."""
        return dict(self._hosts)

    def filter(
        self,
        driver: str | None = None,
        network_class: NetworkClass | str | None = None,
    ) -> dict[str, HostEntry]:
        """Filter hosts by driver (case-insensitive) or network class."""
        results: dict[str, HostEntry] = {}
        for name, entry in self._hosts.items():
            if driver and entry.driver.lower() != driver.lower():
                continue
            if network_class and entry.network_class != str(network_class).upper():
                continue
            results[name] = entry
        return results

    def seed(self, store: DeviceStore) -> list[Device]:
        """Add every host missing from *store* as a new device.

        Hosts are matched to stored devices by name; existing devices are
        left untouched.

        Returns:
            The devices added, in inventory order.

        """
        added: list[Device] = []
        for name, entry in self._hosts.items():
            try:
                store.load_by_name(name)
                self._logger.debug("Device %s already stored, skipping", name)
                continue
            except DeviceNotFoundError:
                pass
            added.append(store.add(entry.to_device()))
        self._logger.info("Seeded %d new devices from inventory", len(added))
        return added

    @property
    def host_count(self) -> int:
        """Return the number of hosts in the inventory."""
        return len(self._hosts)
