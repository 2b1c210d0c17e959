"""Mediation layer between driver scripts and the device model.

A ``ScriptBridge`` is built for one driver run against one device.  Driver
scripts read and write the device exclusively through it:

* ``get`` reads identity fields, collections, attributes and diagnostic
  results, of the bound device or of another stored device;
* ``add``, ``set`` and ``reset`` mutate the bound device, unless the bridge
  is read-only;
* ``debug`` and ``nslookup`` are small services offered to scripts.

No error raised while serving a script call escapes the bridge: failures are
written to the operator log and to the task log, and the call returns without
effect (or with ``None``).

Usage::

    bridge = ScriptBridge(device, session, TaskLog("snapshot"))
    bridge.reset()
    bridge.set("softwareVersion", "17.3.4")
    bridge.add("networkInterface", {"name": "Gi0/0", "ip": [{"ip": "10.0.0.1", "mask": 24}]})
    peer_version = bridge.get("softwareVersion", "core-router-2")
"""

from __future__ import annotations

import ipaddress
import logging
import socket
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from ..core.addresses import (
    ZERO_MAC,
    AddressUsage,
    Network4Address,
    Network6Address,
    NetworkAddress,
    PhysicalAddress,
)
from ..core.attributes import AttributeLevel, DeviceAttribute, DriverDescriptor
from ..core.device import Device, Module, NetworkClass, NetworkInterface
from ..core.device_store import StorageSession
from ..core.exceptions import DeviceNotFoundError, MissingDriverError, ScriptValidationError
from ..core.task_log import TaskLog
from .decode import to_string

logger = logging.getLogger(__name__)

DeviceRef = int | str
ScriptValue = bool | int | float | str


class DescriptorResolver(Protocol):
    """Source of the attribute schema of a device's driver."""

    def descriptor_for(self, device: Device) -> DriverDescriptor: ...


# ---------------------------------------------------------------------------
# Item getters
# ---------------------------------------------------------------------------


def _interface_item(interface: NetworkInterface) -> dict[str, Any]:
    ips: list[dict[str, str]] = [
        {"ip": a.ip, "mask": str(a.prefix_length), "usage": a.usage.value}
        for a in interface.ip4_addresses
    ]
    ips.extend(
        {"ipv6": a.ip, "mask": str(a.prefix_length), "usage": a.usage.value}
        for a in interface.ip6_addresses
    )
    return {
        "name": interface.name,
        "description": interface.description,
        "mac": interface.mac_address,
        "virtualDevice": interface.virtual_device,
        "vrf": interface.vrf,
        "enabled": interface.enabled,
        "level3": interface.level3,
        "ip": ips,
    }


_ITEM_GETTERS: dict[str, Callable[[Device, DriverDescriptor], Any]] = {
    "type": lambda device, driver: driver.description,
    "name": lambda device, _: device.name,
    "family": lambda device, _: device.family,
    "location": lambda device, _: device.location,
    "contact": lambda device, _: device.contact,
    "softwareVersion": lambda device, _: device.software_version,
    "serialNumber": lambda device, _: device.serial_number,
    "networkClass": lambda device, _: device.network_class.value if device.network_class else None,
    "virtualDevices": lambda device, _: sorted(device.virtual_devices),
    "vrfs": lambda device, _: sorted(device.vrfs),
    "modules": lambda device, _: [m.to_dict() for m in device.modules],
    "interfaces": lambda device, _: [_interface_item(i) for i in device.interfaces],
}

# Reserved ``set`` keys mapped to Device fields
_TEXT_FIELDS: dict[str, str] = {
    "name": "name",
    "family": "family",
    "location": "location",
    "contact": "contact",
    "softwareVersion": "software_version",
    "serialNumber": "serial_number",
    "comments": "comments",
}


# ---------------------------------------------------------------------------
# Script value helpers
# ---------------------------------------------------------------------------


def _optional_text(data: Mapping[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ScriptValidationError(f"The value of {key} is not a string.")
    return value


def _flag(data: Mapping[str, Any], key: str) -> bool:
    """Absent means ``True``; an explicit null means ``False``."""
    if key not in data:
        return True
    value = data[key]
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ScriptValidationError(f"The value of {key} is not a boolean.")
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _prefix_length(value: Any) -> int:
    if not _is_number(value):
        raise ScriptValidationError(f"Invalid mask '{value}', a number is expected.")
    return int(value)


def _address_entries(raw: Any) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        return list(raw.values())
    if isinstance(raw, list | tuple):
        return list(raw)
    raise ScriptValidationError("The value of ip is not a list.")


def _build_address(entry: Any) -> NetworkAddress:
    """Build an address from one script ``ip`` entry.

    The family is chosen by the first rule that applies: an ``ipv6`` key
    gives an IPv6 address with a numeric mask, a numeric ``mask`` gives an
    IPv4 address with a prefix length, anything else is read as an IPv4
    address with a dotted-decimal netmask.
    """
    if not isinstance(entry, Mapping):
        raise ScriptValidationError("IP address entry is not a script object.")
    usage = entry.get("usage")
    usage = AddressUsage.PRIMARY if usage is None else AddressUsage.parse(usage)
    mask = entry.get("mask")
    if entry.get("ipv6") is not None:
        return Network6Address(entry["ipv6"], _prefix_length(mask), usage)
    if _is_number(mask):
        return Network4Address(entry.get("ip"), int(mask), usage)
    return Network4Address.from_netmask(entry.get("ip"), mask, usage)


def _parse_network_class(value: str) -> NetworkClass:
    try:
        return NetworkClass[value]
    except KeyError:
        raise ScriptValidationError(f"Invalid network class '{value}'") from None


# ---------------------------------------------------------------------------
# Bridge
# ---------------------------------------------------------------------------


class ScriptBridge:
    """Read/write access to one device for one driver run.

    Args:
        device: The device bound to this run.
        session: Storage session borrowed for the bridge's lifetime, used for
            lookups on other devices.
        task_log: Task-visible log.
        read_only: If ``True``, every mutation is rejected.
        drivers: Resolver of driver descriptors; defaults to the built-in
            driver registry.

    """

    def __init__(
        self,
        device: Device,
        session: StorageSession,
        task_log: TaskLog,
        read_only: bool = False,
        drivers: DescriptorResolver | None = None,
    ) -> None:
        """Bind the bridge to a device, a session and a task log."""
        if drivers is None:
            from ..drivers.registry import DriverRegistry

            drivers = DriverRegistry()
        self._device = device
        self._session = session
        self._task_log = task_log
        self._read_only = read_only
        self._drivers = drivers
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # -- Properties ---------------------------------------------------------

    @property
    def device(self) -> Device:
        """Return the bound device."""
        return self._device

    @property
    def read_only(self) -> bool:
        return self._read_only

    @property
    def task_log(self) -> TaskLog:
        return self._task_log

    # -- Reads --------------------------------------------------------------

    def get(self, item: str, device: DeviceRef | None = None) -> Any:
        """Read an item of the bound device or of another stored device.

        Args:
            item: Field, collection, attribute name/title or diagnostic name.
            device: Id or name of another device.  When given and different
                from the bound device, the device is loaded from storage,
                read, then evicted from the session.

        Returns:
            The item value, or ``None`` if nothing matches or the lookup
            failed.

        """
        if device is None or self._is_bound(device):
            self._logger.debug("Script request for item %s on current device", item)
            return self._device_item(self._device, item)

        self._logger.debug("Script request for item %s on device %s", item, device)
        loaded: Device | None = None
        try:
            loaded = self._load(device)
            return self._device_item(loaded, item)
        except DeviceNotFoundError:
            self._logger.error(
                "Device not found on script get, item %s, device %s", item, device, exc_info=True
            )
            self._task_log.warn(f"Unable to find the device {device}.")
        except Exception:
            self._logger.exception("Error on script get, item %s, device %s", item, device)
            self._task_log.warn(f"Unable to get data {item} for device {device}.")
        finally:
            if loaded is not None:
                self._session.evict(loaded)
        return None

    def _device_item(self, device: Device, item: str) -> Any:
        try:
            driver = self._drivers.descriptor_for(device)
        except MissingDriverError:
            self._logger.debug("No driver for device %s, item %s unavailable", device.name, item)
            return None

        getter = _ITEM_GETTERS.get(item)
        if getter is not None:
            return getter(device, driver)

        for definition in driver.attributes:
            if not (definition.checkable and definition.matches(item)):
                continue
            if definition.level == AttributeLevel.CONFIG:
                if device.last_config is None:
                    return None
                attribute = device.last_config.get_attribute(definition.name)
            else:
                attribute = device.get_attribute(definition.name)
            return attribute.data if attribute is not None else None

        result = device.get_diagnostic_result(item)
        return result.data if result is not None else None

    def _is_bound(self, ref: Any) -> bool:
        if isinstance(ref, str):
            return ref == self._device.name
        if _is_number(ref):
            return ref == self._device.id
        return False

    def _load(self, ref: Any) -> Device:
        if isinstance(ref, str):
            loaded = self._session.load_device_by_name(ref)
        elif _is_number(ref) and float(ref).is_integer():
            loaded = self._session.load_device(int(ref))
        else:
            raise ScriptValidationError(f"Invalid device reference '{ref}'")
        if loaded is None:
            raise DeviceNotFoundError(f"No device {ref}")
        return loaded

    # -- Mutations ----------------------------------------------------------

    def add(self, key: str, value: Mapping[str, Any] | str | None) -> None:
        """Add a module, interface, VRF or virtual device to the bound device.

        Args:
            key: ``module`` or ``networkInterface`` with a mapping value,
                ``vrf`` or ``virtualDevice`` with a string value.
            value: Script value; ``None`` is ignored.

        """
        if self._rejected(f"Adding key '{key}' is forbidden"):
            return
        if value is None:
            return
        try:
            match value:
                case str():
                    self._add_name(key, value)
                case Mapping():
                    self._add_object(key, value)
                case _:
                    raise ScriptValidationError(f"Unsupported value for key {key}")
        except Exception as exc:
            self._logger.error(
                "Error during snapshot while adding device attribute key '%s'", key, exc_info=True
            )
            self._task_log.error(f"Can't add device attribute {key}: {exc}")

    def _add_name(self, key: str, value: str) -> None:
        if key == "vrf":
            self._device.add_vrf(value)
        elif key == "virtualDevice":
            self._device.add_virtual_device(value)
        else:
            self._logger.debug("Ignoring unknown add key '%s'", key)

    def _add_object(self, key: str, data: Mapping[str, Any]) -> None:
        if key == "module":
            self._device.modules.append(
                Module(
                    slot=_optional_text(data, "slot"),
                    part_number=_optional_text(data, "partNumber"),
                    serial_number=_optional_text(data, "serialNumber"),
                )
            )
        elif key == "networkInterface":
            self._add_interface(data)
        else:
            self._logger.debug("Ignoring unknown add key '%s'", key)

    def _add_interface(self, data: Mapping[str, Any]) -> None:
        interface = NetworkInterface(
            name=to_string(data, "name"),
            virtual_device=_optional_text(data, "virtualDevice"),
            vrf=_optional_text(data, "vrf"),
            enabled=_flag(data, "enabled"),
            level3=_flag(data, "level3"),
            description=_optional_text(data, "description"),
            physical_address=PhysicalAddress.parse(_optional_text(data, "mac", ZERO_MAC)),
        )
        # Attached before its addresses: a bad address leaves the earlier ones in place
        self._device.interfaces.append(interface)
        for entry in _address_entries(data.get("ip")):
            interface.add_address(_build_address(entry))

    def set(self, key: str, value: ScriptValue | None) -> None:
        """Set a built-in field or a device-level attribute.

        String values for ``name``, ``family``, ``location``, ``contact``,
        ``softwareVersion``, ``serialNumber``, ``comments`` and
        ``networkClass`` update the device directly.  Any other key is
        matched against the driver's DEVICE-level definitions: the first
        definition with that name decides, and a value whose kind differs
        from the definition's is dropped.

        Args:
            key: Field or attribute name.
            value: Boolean, number or string; ``None`` is ignored.

        """
        if self._rejected(f"Setting key '{key}' is forbidden"):
            return
        if value is None:
            return
        try:
            match value:
                case str() if key in _TEXT_FIELDS:
                    setattr(self._device, _TEXT_FIELDS[key], value)
                case str() if key == "networkClass":
                    self._device.network_class = _parse_network_class(value)
                case bool() | int() | float() | str():
                    self._set_attribute(key, value)
                case _:
                    raise ScriptValidationError(f"Unsupported value for key {key}")
        except Exception as exc:
            self._logger.error("Error during snapshot while setting device attribute key '%s'", key)
            self._task_log.error(f"Can't set device attribute {key}: {exc}")

    def _set_attribute(self, key: str, value: ScriptValue) -> None:
        driver = self._drivers.descriptor_for(self._device)
        for definition in driver.definitions(AttributeLevel.DEVICE):
            if definition.name != key:
                continue
            if definition.accepts(value):
                self._device.add_attribute(DeviceAttribute(key, definition.kind, value))
            else:
                self._logger.debug(
                    "Dropping value of %s: attribute %s is %s", type(value).__name__, key,
                    definition.kind.value,
                )
            return

    def reset(self) -> None:
        """Clear every collected field of the bound device."""
        if self._rejected("Resetting device is forbidden"):
            return
        device = self._device
        device.family = ""
        device.location = ""
        device.contact = ""
        device.software_version = ""
        device.network_class = NetworkClass.UNKNOWN
        device.clear_attributes()
        device.clear_vrfs()
        device.clear_virtual_devices()
        device.interfaces.clear()
        device.modules.clear()
        device.eol_module = None
        device.eos_module = None
        device.eol_date = None
        device.eos_date = None

    def _rejected(self, message: str) -> bool:
        if not self._read_only:
            return False
        self._logger.warning("%s on device %s (read-only)", message, self._device.name)
        self._task_log.error(message)
        return True

    # -- Services -----------------------------------------------------------

    def debug(self, message: str) -> None:
        """Write a driver message to the task log."""
        self._task_log.debug(message)

    def nslookup(self, host: str) -> dict[str, str]:
        """Resolve a host name or an address literal.

        Returns:
            ``{"name": ..., "address": ...}``.  For a literal, ``name`` is the
            reverse lookup result (``""`` if there is none).  Both values are
            ``""`` when the host cannot be resolved.

        """
        name = ""
        address = ""
        if isinstance(host, str) and host.strip():
            host = host.strip()
            try:
                ip, literal = self._resolve(host)
            except (OSError, UnicodeError, ValueError) as exc:
                self._logger.debug("Unable to resolve %s: %s", host, exc)
            else:
                address = str(ip)
                name = self._reverse(ip) if literal else host
        return {"name": name, "address": address}

    @staticmethod
    def _resolve(host: str) -> tuple[ipaddress.IPv4Address | ipaddress.IPv6Address, bool]:
        try:
            return ipaddress.ip_address(host), True
        except ValueError:
            pass
        infos = socket.getaddrinfo(host, None)
        return ipaddress.ip_address(infos[0][4][0]), False

    @staticmethod
    def _reverse(ip: ipaddress.IPv4Address | ipaddress.IPv6Address) -> str:
        try:
            return socket.gethostbyaddr(str(ip))[0]
        except OSError:
            return ""
