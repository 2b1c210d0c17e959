"""Cisco IOS / IOS-XE driver script.

Maps NAPALM ``ios`` getter output, plus the raw ``show version`` and
``show license summary`` text, onto the device model.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from ..core.device import NetworkClass
from .descriptor import load_descriptor
from .napalm_script import NapalmDriverScript

if TYPE_CHECKING:
    from ..script.bridge import ScriptBridge

SWITCH_MODEL_PREFIXES = ("WS-C", "C9", "C3850", "IE-")

CONFIG_REGISTER_RE = re.compile(r"^Configuration register is (\S+)", re.MULTILINE)
SYSTEM_IMAGE_RE = re.compile(r'^System image file is "([^"]+)"', re.MULTILINE)
LICENSE_STATUS_RE = re.compile(r"^\s*Status:\s*(\S+)", re.MULTILINE)


class CiscoIosDriver(NapalmDriverScript):
    """Driver script for Cisco IOS and IOS-XE routers and switches."""

    descriptor = load_descriptor("cisco_ios.yml")

    def network_class(self, facts: dict[str, Any]) -> str:
        model = str(facts.get("model", "")).upper()
        if model.startswith(SWITCH_MODEL_PREFIXES):
            return NetworkClass.SWITCHROUTER.value
        return NetworkClass.ROUTER.value

    def populate_vendor(self, device: ScriptBridge, collected: dict[str, Any]) -> None:
        show_version = collected.get("show_version") or ""
        if match := CONFIG_REGISTER_RE.search(show_version):
            device.set("configRegister", match.group(1))
        if match := SYSTEM_IMAGE_RE.search(show_version):
            device.set("iosImageFile", match.group(1))

        license_summary = collected.get("show_license_summary") or ""
        if match := LICENSE_STATUS_RE.search(license_summary):
            device.set("licensed", match.group(1).upper() == "REGISTERED")
        else:
            device.debug("No smart licensing status found")

    def config_attributes(self, collected: dict[str, Any]) -> dict[str, Any]:
        config = collected.get("config") or {}
        facts = collected.get("facts") or {}
        values = {
            "iosVersion": facts.get("os_version"),
            "runningConfig": config.get("running"),
            "startupConfig": config.get("startup"),
        }
        return {k: v for k, v in values.items() if v}
