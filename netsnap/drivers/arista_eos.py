"""Arista EOS driver script.

Maps NAPALM ``eos`` getter output, plus the raw ``show boot-config`` and
``show zerotouch`` text, onto the device model.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from ..core.device import NetworkClass
from .descriptor import load_descriptor
from .napalm_script import NapalmDriverScript

if TYPE_CHECKING:
    from ..script.bridge import ScriptBridge

BOOT_IMAGE_RE = re.compile(r"^Software image:\s*(\S+)", re.MULTILINE)
ZTP_STATUS_RE = re.compile(r"^ZeroTouch Status:\s*(\S+)", re.MULTILINE)


class AristaEosDriver(NapalmDriverScript):
    """Driver script for Arista EOS switches."""

    descriptor = load_descriptor("arista_eos.yml")

    def network_class(self, facts: dict[str, Any]) -> str:
        return NetworkClass.SWITCH.value

    def populate_vendor(self, device: ScriptBridge, collected: dict[str, Any]) -> None:
        if match := BOOT_IMAGE_RE.search(collected.get("show_boot_config") or ""):
            device.set("eosImage", match.group(1))
        if match := ZTP_STATUS_RE.search(collected.get("show_zerotouch") or ""):
            device.set("ztpEnabled", match.group(1).lower() != "disabled")

    def config_attributes(self, collected: dict[str, Any]) -> dict[str, Any]:
        config = collected.get("config") or {}
        facts = collected.get("facts") or {}
        values = {
            "eosVersion": facts.get("os_version"),
            "runningConfig": config.get("running"),
            "startupConfig": config.get("startup"),
        }
        return {k: v for k, v in values.items() if v}
