"""Unit tests for ScriptBridge reads on the bound device."""

from __future__ import annotations

from unittest.mock import MagicMock

from netsnap.core.addresses import AddressUsage, Network4Address, Network6Address, PhysicalAddress
from netsnap.core.attributes import AttributeKind, ConfigAttribute, DeviceAttribute
from netsnap.core.device import Config, DiagnosticResult, Device, Module, NetworkInterface
from netsnap.core.exceptions import MissingDriverError
from netsnap.script.bridge import ScriptBridge


class TestBuiltinItems:
    """Tests for identity fields and collections."""

    def test_name_after_construction(self, bridge: ScriptBridge, device: Device) -> None:
        assert bridge.get("name") == device.name

    def test_type_is_driver_description(self, bridge: ScriptBridge) -> None:
        assert bridge.get("type") == "Test Router"

    def test_identity_fields(self, bridge: ScriptBridge) -> None:
        assert bridge.get("family") == "ISR4451"
        assert bridge.get("location") == "Paris DC1"
        assert bridge.get("contact") == "noc@example.net"
        assert bridge.get("softwareVersion") == "17.3.4"
        assert bridge.get("serialNumber") == "FDO12345678"
        assert bridge.get("networkClass") == "ROUTER"

    def test_name_sets_are_sorted(self, bridge: ScriptBridge, device: Device) -> None:
        device.add_vrf("VOICE")
        device.add_vrf("MGMT")
        device.add_virtual_device("ctx2")
        device.add_virtual_device("ctx1")
        assert bridge.get("vrfs") == ["MGMT", "VOICE"]
        assert bridge.get("virtualDevices") == ["ctx1", "ctx2"]

    def test_modules(self, bridge: ScriptBridge, device: Device) -> None:
        device.modules.append(Module("0/1", "NIM-2GE", "FOC123"))
        assert bridge.get("modules") == [
            {"slot": "0/1", "partNumber": "NIM-2GE", "serialNumber": "FOC123"}
        ]

    def test_interfaces_list_ipv4_before_ipv6(self, bridge: ScriptBridge, device: Device) -> None:
        interface = NetworkInterface(
            name="Gi0/0",
            vrf="MGMT",
            description="uplink",
            physical_address=PhysicalAddress.parse("00:11:22:33:44:55"),
        )
        interface.add_address(Network6Address("2001:db8::1", 64))
        interface.add_address(Network4Address("10.0.0.1", 24, AddressUsage.SECONDARY))
        device.interfaces.append(interface)

        [item] = bridge.get("interfaces")

        assert item["name"] == "Gi0/0"
        assert item["mac"] == "0011.2233.4455"
        assert item["vrf"] == "MGMT"
        assert item["enabled"] is True
        assert item["ip"] == [
            {"ip": "10.0.0.1", "mask": "24", "usage": "SECONDARY"},
            {"ipv6": "2001:db8::1", "mask": "64", "usage": "PRIMARY"},
        ]


class TestAttributeItems:
    """Tests for attribute and diagnostic lookups."""

    def test_device_attribute_by_name(self, bridge: ScriptBridge, device: Device) -> None:
        device.add_attribute(DeviceAttribute("mainMemorySize", AttributeKind.NUMERIC, 4096))
        assert bridge.get("mainMemorySize") == 4096.0

    def test_device_attribute_by_title(self, bridge: ScriptBridge, device: Device) -> None:
        device.add_attribute(DeviceAttribute("licensed", AttributeKind.BINARY, True))
        assert bridge.get("Licensed") is True

    def test_missing_attribute_is_none(self, bridge: ScriptBridge) -> None:
        assert bridge.get("configRegister") is None

    def test_config_attribute_from_last_config(self, bridge: ScriptBridge, device: Device) -> None:
        config = Config(id=1)
        config.add_attribute(ConfigAttribute("osVersion", AttributeKind.TEXT, "17.3.4"))
        device.last_config = config
        assert bridge.get("osVersion") == "17.3.4"
        assert bridge.get("OS version") == "17.3.4"

    def test_config_attribute_without_config(self, bridge: ScriptBridge) -> None:
        assert bridge.get("osVersion") is None

    def test_non_checkable_attribute_is_hidden(self, bridge: ScriptBridge, device: Device) -> None:
        device.add_attribute(DeviceAttribute("secretHash", AttributeKind.TEXT, "abc"))
        assert bridge.get("secretHash") is None

    def test_diagnostic_result(self, bridge: ScriptBridge, device: Device) -> None:
        device.diagnostic_results.append(DiagnosticResult("ShowInventory", {"slots": 4}))
        assert bridge.get("ShowInventory") == {"slots": 4}

    def test_unknown_item(self, bridge: ScriptBridge) -> None:
        assert bridge.get("noSuchItem") is None

    def test_unknown_driver_yields_none(self, bridge: ScriptBridge, resolver: MagicMock) -> None:
        resolver.descriptor_for.side_effect = MissingDriverError("no driver")
        assert bridge.get("name") is None
