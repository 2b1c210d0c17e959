"""Unit tests for the built-in vendor driver scripts."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from netsnap.core.device import Device, NetworkClass
from netsnap.core.device_store import StorageSession
from netsnap.core.task_log import TaskLog
from netsnap.drivers.arista_eos import AristaEosDriver
from netsnap.drivers.cisco_ios import CiscoIosDriver
from netsnap.drivers.juniper_junos import JuniperJunosDriver
from netsnap.drivers.registry import DriverRegistry
from netsnap.script.bridge import ScriptBridge


def make_bridge(driver: str) -> tuple[ScriptBridge, Device, TaskLog]:
    """Bind a fresh device of the given driver to a writable bridge."""
    device = Device(name="dut", driver=driver, id=1)
    task_log = TaskLog("snapshot dut")
    bridge = ScriptBridge(
        device, MagicMock(spec=StorageSession), task_log, drivers=DriverRegistry()
    )
    return bridge, device, task_log


class TestCiscoIosDriver:
    """Tests for the IOS driver mapping NAPALM data."""

    @pytest.fixture
    def populated(self, napalm_collected: dict[str, Any]) -> tuple[Device, TaskLog]:
        bridge, device, task_log = make_bridge("cisco_ios")
        CiscoIosDriver().snapshot(bridge, napalm_collected)
        return device, task_log

    def test_identity(self, populated: tuple[Device, TaskLog]) -> None:
        device, task_log = populated
        assert device.family == "ISR4451-X/K9"
        assert device.software_version == "17.3.4"
        assert device.serial_number == "FDO21120U8N"
        assert device.network_class == NetworkClass.ROUTER
        assert task_log.errors == []

    def test_interfaces(self, populated: tuple[Device, TaskLog]) -> None:
        device, _ = populated
        by_name = {i.name: i for i in device.interfaces}
        uplink = by_name["GigabitEthernet0/0/0"]
        assert uplink.mac_address == "0011.2233.4455"
        assert [str(a) for a in uplink.addresses] == ["192.0.2.1/30", "2001:db8::1/64"]
        assert uplink.level3 is True

        mgmt = by_name["GigabitEthernet0/0/1"]
        assert mgmt.vrf == "MGMT"
        assert mgmt.enabled is False
        assert mgmt.level3 is False
        assert mgmt.physical_address.is_zero

    def test_vrfs_and_modules(self, populated: tuple[Device, TaskLog]) -> None:
        device, _ = populated
        assert device.vrfs == {"MGMT"}
        assert [m.slot for m in device.modules] == ["0", "0/1"]

    def test_vendor_attributes(self, populated: tuple[Device, TaskLog]) -> None:
        device, _ = populated
        assert device.get_attribute("mainMemorySize").data == 8192.0
        assert device.get_attribute("configRegister").data == "0x2102"
        assert device.get_attribute("iosImageFile").data == (
            "bootflash:isr4400-universalk9.17.03.04.SPA.bin"
        )
        assert device.get_attribute("licensed").data is True

    def test_config_attributes(self, napalm_collected: dict[str, Any]) -> None:
        values = CiscoIosDriver().config_attributes(napalm_collected)
        assert values["iosVersion"] == "17.3.4"
        assert values["runningConfig"].startswith("hostname core-rtr-1")
        assert "startupConfig" in values

    @pytest.mark.parametrize(
        "model,expected",
        [
            ("WS-C3850-48P", NetworkClass.SWITCHROUTER),
            ("C9300-48U", NetworkClass.SWITCHROUTER),
            ("ISR4331/K9", NetworkClass.ROUTER),
            ("", NetworkClass.ROUTER),
        ],
    )
    def test_network_class(self, model: str, expected: NetworkClass) -> None:
        assert CiscoIosDriver().network_class({"model": model}) == expected

    def test_missing_getters(self) -> None:
        bridge, device, task_log = make_bridge("cisco_ios")
        CiscoIosDriver().snapshot(bridge, {})
        assert device.interfaces == []
        assert device.network_class == NetworkClass.ROUTER
        assert task_log.errors == []


class TestJuniperJunosDriver:
    """Tests for the Junos driver."""

    @pytest.fixture
    def collected(self) -> dict[str, Any]:
        return {
            "facts": {"model": "MX480", "os_version": "21.4R3-S2", "serial_number": "JN1234"},
            "interfaces": {"ge-0/0/0": {"is_enabled": True, "description": "core"}},
            "interfaces_ip": {"ge-0/0/0": {"ipv4": {"10.1.0.1": {"prefix_length": 31}}}},
            "show_chassis_hardware": (
                "Hardware inventory:\n"
                "Item             Version  Part number  Serial number     Description\n"
                "Chassis                                JN1234AFA         MX480\n"
            ),
            "logical_systems": ["LS-CUSTOMER-A"],
            "config": {"running": "system { host-name pe1; }"},
        }

    def test_snapshot(self, collected: dict[str, Any]) -> None:
        bridge, device, task_log = make_bridge("juniper_junos")
        JuniperJunosDriver().snapshot(bridge, collected)
        assert device.network_class == NetworkClass.ROUTER
        assert device.get_attribute("chassisDescription").data == "MX480"
        assert device.virtual_devices == {"LS-CUSTOMER-A"}
        assert str(device.interfaces[0].addresses[0]) == "10.1.0.1/31"
        assert task_log.errors == []

    @pytest.mark.parametrize(
        "model,expected",
        [
            ("EX4300-48T", NetworkClass.SWITCH),
            ("QFX5120-48Y", NetworkClass.SWITCH),
            ("SRX345", NetworkClass.FIREWALL),
            ("MX204", NetworkClass.ROUTER),
        ],
    )
    def test_network_class(self, model: str, expected: NetworkClass) -> None:
        assert JuniperJunosDriver().network_class({"model": model}) == expected

    def test_config_attributes(self, collected: dict[str, Any]) -> None:
        assert JuniperJunosDriver().config_attributes(collected) == {
            "junosVersion": "21.4R3-S2",
            "configuration": "system { host-name pe1; }",
        }


class TestAristaEosDriver:
    """Tests for the EOS driver."""

    def test_snapshot(self) -> None:
        bridge, device, _ = make_bridge("arista_eos")
        AristaEosDriver().snapshot(
            bridge,
            {
                "facts": {"model": "DCS-7050SX3-48YC8", "os_version": "4.28.3M"},
                "show_boot_config": "Software image: flash:/EOS-4.28.3M.swi\nConsole speed: (not set)\n",
                "show_zerotouch": "ZeroTouch Status: Disabled\n",
            },
        )
        assert device.network_class == NetworkClass.SWITCH
        assert device.get_attribute("eosImage").data == "flash:/EOS-4.28.3M.swi"
        assert device.get_attribute("ztpEnabled").data is False

    def test_empty_config_values_are_skipped(self) -> None:
        values = AristaEosDriver().config_attributes(
            {"facts": {"os_version": "4.28.3M"}, "config": {"running": "", "startup": ""}}
        )
        assert values == {"eosVersion": "4.28.3M"}
