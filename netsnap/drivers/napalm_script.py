"""Template driver script for data shaped like NAPALM getter output.

The collection layer stores the result of each NAPALM getter under its own
key, so one collected payload looks like::

    {
        "facts": {...},              # get_facts()
        "interfaces": {...},         # get_interfaces()
        "interfaces_ip": {...},      # get_interfaces_ip()
        "network_instances": {...},  # get_network_instances()
        "environment": {...},        # get_environment()
        "config": {...},             # get_config()
        "inventory": [...],          # hardware modules
    }

``NapalmDriverScript.snapshot`` is a *template method*: it maps the common
getters and then calls ``populate_vendor`` for vendor-specific attributes.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

from .base import DriverScript

if TYPE_CHECKING:
    from ..script.bridge import ScriptBridge

BYTES_PER_MB = 1024 * 1024


class NapalmDriverScript(DriverScript):
    """Driver script mapping NAPALM getter data through the bridge."""

    def snapshot(self, device: ScriptBridge, collected: dict[str, Any]) -> None:
        facts: dict[str, Any] = collected.get("facts") or {}
        self._logger.debug("Populating %s from NAPALM data", facts.get("hostname", "device"))

        for key, fact in (
            ("family", "model"),
            ("softwareVersion", "os_version"),
            ("serialNumber", "serial_number"),
        ):
            if facts.get(fact):
                device.set(key, str(facts[fact]))
        device.set("networkClass", self.network_class(facts))

        vrf_by_interface = self._populate_vrfs(device, collected.get("network_instances") or {})
        self._populate_interfaces(device, collected, vrf_by_interface)

        for module in collected.get("inventory") or []:
            device.add(
                "module",
                {
                    "slot": module.get("slot", ""),
                    "partNumber": module.get("part_number", ""),
                    "serialNumber": module.get("serial_number", ""),
                },
            )

        memory = (collected.get("environment") or {}).get("memory") or {}
        if memory.get("available_ram"):
            device.set("mainMemorySize", round(memory["available_ram"] / BYTES_PER_MB))

        self.populate_vendor(device, collected)

    @abc.abstractmethod
    def network_class(self, facts: dict[str, Any]) -> str:
        """Return the network class name for a device model."""

    def populate_vendor(self, device: ScriptBridge, collected: dict[str, Any]) -> None:
        """Hook for vendor-specific attributes.  Does nothing by default."""

    # -- Internal helpers ---------------------------------------------------

    @staticmethod
    def _populate_vrfs(device: ScriptBridge, instances: dict[str, Any]) -> dict[str, str]:
        """Add L3 VRFs and return the VRF of each member interface."""
        vrf_by_interface: dict[str, str] = {}
        for name, instance in instances.items():
            if instance.get("type") != "L3VRF":
                continue
            device.add("vrf", name)
            members = (instance.get("interfaces") or {}).get("interface") or {}
            for interface in members:
                vrf_by_interface[interface] = name
        return vrf_by_interface

    @staticmethod
    def _populate_interfaces(
        device: ScriptBridge,
        collected: dict[str, Any],
        vrf_by_interface: dict[str, str],
    ) -> None:
        interfaces_ip: dict[str, Any] = collected.get("interfaces_ip") or {}
        for name, info in (collected.get("interfaces") or {}).items():
            addresses = interfaces_ip.get(name) or {}
            ips: list[dict[str, Any]] = [
                {"ip": ip, "mask": data["prefix_length"]}
                for ip, data in (addresses.get("ipv4") or {}).items()
            ]
            ips.extend(
                {"ipv6": ip, "mask": data["prefix_length"]}
                for ip, data in (addresses.get("ipv6") or {}).items()
            )
            interface: dict[str, Any] = {
                "name": name,
                "description": info.get("description", ""),
                "vrf": vrf_by_interface.get(name, ""),
                "level3": bool(ips),
                "ip": ips,
            }
            # A missing flag defaults to enabled; only forward real values
            if "is_enabled" in info:
                interface["enabled"] = bool(info["is_enabled"])
            if info.get("mac_address"):
                interface["mac"] = info["mac_address"]
            device.add("networkInterface", interface)
