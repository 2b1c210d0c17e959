"""Canonical device model populated by driver scripts.

A ``Device`` is owned by the device store: it is loaded before a driver run,
mutated through the scripting bridge and saved afterwards.  Every type in the
graph serializes to plain JSON-compatible mappings so that devices can be
persisted, compared and checked for unintended changes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

from .addresses import Network4Address, Network6Address, NetworkAddress, PhysicalAddress
from .attributes import ConfigAttribute, DeviceAttribute


class NetworkClass(StrEnum):
    """Functional classification of a device."""

    FIREWALL = "FIREWALL"
    LOADBALANCER = "LOADBALANCER"
    ROUTER = "ROUTER"
    SERVER = "SERVER"
    SWITCH = "SWITCH"
    SWITCHROUTER = "SWITCHROUTER"
    ACCESSPOINT = "ACCESSPOINT"
    WIRELESSCONTROLLER = "WIRELESSCONTROLLER"
    CONSOLESERVER = "CONSOLESERVER"
    UNKNOWN = "UNKNOWN"


def _now() -> str:
    return datetime.now(UTC).isoformat()


@dataclass
class Module:
    """Hardware module (line card, supervisor, transceiver...)."""

    slot: str = ""
    part_number: str = ""
    serial_number: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "slot": self.slot,
            "partNumber": self.part_number,
            "serialNumber": self.serial_number,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Module:
        return cls(
            slot=data.get("slot", ""),
            part_number=data.get("partNumber", ""),
            serial_number=data.get("serialNumber", ""),
        )


@dataclass
class NetworkInterface:
    """Logical or physical interface of a device.

    Attributes:
        name: Interface name as reported by the device.
        virtual_device: Virtual device (context, logical system) owning it.
        vrf: VRF instance the interface belongs to.
        enabled: Administrative state.
        level3: Whether the interface routes (has a layer-3 role).
        description: Configured description.
        physical_address: MAC address.
        addresses: Ordered IPv4/IPv6 addresses.

    """

    name: str
    virtual_device: str = ""
    vrf: str = ""
    enabled: bool = True
    level3: bool = True
    description: str = ""
    physical_address: PhysicalAddress = field(default_factory=PhysicalAddress)
    addresses: list[NetworkAddress] = field(default_factory=list)

    def add_address(self, address: NetworkAddress) -> None:
        """Append an address to the interface."""
        self.addresses.append(address)

    @property
    def ip4_addresses(self) -> list[Network4Address]:
        """Return the IPv4 addresses, in insertion order."""
        return [a for a in self.addresses if isinstance(a, Network4Address)]

    @property
    def ip6_addresses(self) -> list[Network6Address]:
        """Return the IPv6 addresses, in insertion order."""
        return [a for a in self.addresses if isinstance(a, Network6Address)]

    @property
    def mac_address(self) -> str:
        """Return the MAC address in dotted notation."""
        return str(self.physical_address)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "virtualDevice": self.virtual_device,
            "vrf": self.vrf,
            "enabled": self.enabled,
            "level3": self.level3,
            "description": self.description,
            "mac": self.mac_address,
            "addresses": [a.to_dict() for a in self.addresses],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NetworkInterface:
        return cls(
            name=data["name"],
            virtual_device=data.get("virtualDevice", ""),
            vrf=data.get("vrf", ""),
            enabled=data.get("enabled", True),
            level3=data.get("level3", True),
            description=data.get("description", ""),
            physical_address=PhysicalAddress.parse(data.get("mac", "0000.0000.0000")),
            addresses=[NetworkAddress.from_dict(a) for a in data.get("addresses", [])],
        )


@dataclass
class DiagnosticResult:
    """Output of a diagnostic executed against a device."""

    diagnostic_name: str | None
    data: Any = None
    created: str = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        return {"diagnosticName": self.diagnostic_name, "data": self.data, "created": self.created}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiagnosticResult:
        return cls(
            diagnostic_name=data.get("diagnosticName"),
            data=data.get("data"),
            created=data.get("created", ""),
        )


@dataclass
class Config:
    """One stored configuration version of a device.

    Attributes:
        id: Version number, increasing per device.
        changed_at: ISO-8601 timestamp of the capture.
        author: Who or what produced the configuration.
        attributes: Configuration-level attributes keyed by name.

    """

    id: int = 0
    changed_at: str = field(default_factory=_now)
    author: str = ""
    attributes: dict[str, ConfigAttribute] = field(default_factory=dict)

    def add_attribute(self, attribute: ConfigAttribute) -> None:
        """Add or replace an attribute."""
        self.attributes[attribute.name] = attribute

    def get_attribute(self, name: str) -> ConfigAttribute | None:
        return self.attributes.get(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "changedAt": self.changed_at,
            "author": self.author,
            "attributes": [a.to_dict() for a in self.attributes.values()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        config = cls(
            id=data.get("id", 0),
            changed_at=data.get("changedAt", ""),
            author=data.get("author", ""),
        )
        for raw in data.get("attributes", []):
            config.add_attribute(ConfigAttribute.from_dict(raw))
        return config


@dataclass
class Device:
    """A managed network device.

    Attributes:
        name: Device name, unique in the store.
        driver: Name of the driver that collects this device.
        id: Store identifier (``0`` until the device is first stored).
        mgmt_address: Management address used by the transport.
        family: Hardware/software family reported by the driver.
        location: Configured location.
        contact: Configured contact.
        software_version: Running software version.
        serial_number: Chassis serial number.
        comments: Free-form operator comments.
        network_class: Functional classification.
        modules: Hardware modules, in discovery order.
        interfaces: Network interfaces, in discovery order.
        vrfs: VRF instance names.
        virtual_devices: Virtual device names.
        attributes: Device-level attributes keyed by name.
        last_config: Latest stored configuration, if any.
        diagnostic_results: Results of diagnostics run on the device.
        eol_module: Module that triggered the end-of-life date.
        eos_module: Module that triggered the end-of-sale date.
        eol_date: End-of-life date.
        eos_date: End-of-sale date.

    """

    name: str
    driver: str = ""
    id: int = 0
    mgmt_address: str = ""
    family: str = ""
    location: str = ""
    contact: str = ""
    software_version: str = ""
    serial_number: str = ""
    comments: str = ""
    network_class: NetworkClass = NetworkClass.UNKNOWN
    modules: list[Module] = field(default_factory=list)
    interfaces: list[NetworkInterface] = field(default_factory=list)
    vrfs: set[str] = field(default_factory=set)
    virtual_devices: set[str] = field(default_factory=set)
    attributes: dict[str, DeviceAttribute] = field(default_factory=dict)
    last_config: Config | None = None
    diagnostic_results: list[DiagnosticResult] = field(default_factory=list)
    eol_module: str | None = None
    eos_module: str | None = None
    eol_date: date | None = None
    eos_date: date | None = None

    # -- Collections --------------------------------------------------------

    def add_vrf(self, name: str) -> None:
        self.vrfs.add(name)

    def clear_vrfs(self) -> None:
        self.vrfs.clear()

    def add_virtual_device(self, name: str) -> None:
        self.virtual_devices.add(name)

    def clear_virtual_devices(self) -> None:
        self.virtual_devices.clear()

    def add_attribute(self, attribute: DeviceAttribute) -> None:
        """Add an attribute, replacing any attribute with the same name."""
        self.attributes[attribute.name] = attribute

    def get_attribute(self, name: str) -> DeviceAttribute | None:
        return self.attributes.get(name)

    def clear_attributes(self) -> None:
        self.attributes.clear()

    def get_diagnostic_result(self, name: str) -> DiagnosticResult | None:
        """Return the first diagnostic result named exactly *name*."""
        for result in self.diagnostic_results:
            if result.diagnostic_name is not None and result.diagnostic_name == name:
                return result
        return None

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize the whole device graph to a JSON-compatible mapping."""
        return {
            "id": self.id,
            "name": self.name,
            "driver": self.driver,
            "mgmtAddress": self.mgmt_address,
            "family": self.family,
            "location": self.location,
            "contact": self.contact,
            "softwareVersion": self.software_version,
            "serialNumber": self.serial_number,
            "comments": self.comments,
            "networkClass": self.network_class.value,
            "modules": [m.to_dict() for m in self.modules],
            "interfaces": [i.to_dict() for i in self.interfaces],
            "vrfs": sorted(self.vrfs),
            "virtualDevices": sorted(self.virtual_devices),
            "attributes": [a.to_dict() for a in self.attributes.values()],
            "lastConfig": self.last_config.to_dict() if self.last_config else None,
            "diagnosticResults": [r.to_dict() for r in self.diagnostic_results],
            "eolModule": self.eol_module,
            "eosModule": self.eos_module,
            "eolDate": self.eol_date.isoformat() if self.eol_date else None,
            "eosDate": self.eos_date.isoformat() if self.eos_date else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Device:
        """Rebuild a device serialized by :meth:`to_dict`."""
        device = cls(
            name=data["name"],
            driver=data.get("driver", ""),
            id=data.get("id", 0),
            mgmt_address=data.get("mgmtAddress", ""),
            family=data.get("family", ""),
            location=data.get("location", ""),
            contact=data.get("contact", ""),
            software_version=data.get("softwareVersion", ""),
            serial_number=data.get("serialNumber", ""),
            comments=data.get("comments", ""),
            network_class=NetworkClass(data.get("networkClass", NetworkClass.UNKNOWN)),
            modules=[Module.from_dict(m) for m in data.get("modules", [])],
            interfaces=[NetworkInterface.from_dict(i) for i in data.get("interfaces", [])],
            vrfs=set(data.get("vrfs", [])),
            virtual_devices=set(data.get("virtualDevices", [])),
            diagnostic_results=[
                DiagnosticResult.from_dict(r) for r in data.get("diagnosticResults", [])
            ],
            eol_module=data.get("eolModule"),
            eos_module=data.get("eosModule"),
            eol_date=date.fromisoformat(data["eolDate"]) if data.get("eolDate") else None,
            eos_date=date.fromisoformat(data["eosDate"]) if data.get("eosDate") else None,
        )
        for raw in data.get("attributes", []):
            device.add_attribute(DeviceAttribute.from_dict(raw))
        if data.get("lastConfig"):
            device.last_config = Config.from_dict(data["lastConfig"])
        return device

    def to_json(self) -> str:
        """Serialize the device to a JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    @classmethod
    def from_json(cls, data: str) -> Device:
        """Deserialize a device from a JSON string."""
        payload: dict[str, Any] = json.loads(data)
        return cls.from_dict(payload)
