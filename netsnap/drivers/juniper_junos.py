"""Juniper Junos driver script.

Maps NAPALM ``junos`` getter output, plus the raw ``show chassis hardware``
text, onto the device model.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from ..core.device import NetworkClass
from .descriptor import load_descriptor
from .napalm_script import NapalmDriverScript

if TYPE_CHECKING:
    from ..script.bridge import ScriptBridge

CHASSIS_RE = re.compile(r"^Chassis\s+(\S+)\s+(.+?)\s*$", re.MULTILINE)

MODEL_CLASSES: dict[str, NetworkClass] = {
    "EX": NetworkClass.SWITCH,
    "QFX": NetworkClass.SWITCH,
    "SRX": NetworkClass.FIREWALL,
}


class JuniperJunosDriver(NapalmDriverScript):
    """Driver script for Juniper MX, EX, QFX and SRX devices."""

    descriptor = load_descriptor("juniper_junos.yml")

    def network_class(self, facts: dict[str, Any]) -> str:
        model = str(facts.get("model", "")).upper()
        for prefix, network_class in MODEL_CLASSES.items():
            if model.startswith(prefix):
                return network_class.value
        return NetworkClass.ROUTER.value

    def populate_vendor(self, device: ScriptBridge, collected: dict[str, Any]) -> None:
        hardware = collected.get("show_chassis_hardware") or ""
        if match := CHASSIS_RE.search(hardware):
            device.set("chassisDescription", match.group(2))
        for logical_system in collected.get("logical_systems") or []:
            device.add("virtualDevice", logical_system)

    def config_attributes(self, collected: dict[str, Any]) -> dict[str, Any]:
        config = collected.get("config") or {}
        facts = collected.get("facts") or {}
        values = {
            "junosVersion": facts.get("os_version"),
            "configuration": config.get("running"),
        }
        return {k: v for k, v in values.items() if v}
