"""Shared pytest fixtures for the netsnap test suite.

Provides reusable fixtures for devices, driver descriptors, storage
sessions, scripting bridges and NAPALM-shaped collected data.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from netsnap.core.attributes import (
    AttributeDefinition,
    AttributeKind,
    AttributeLevel,
    DriverDescriptor,
)
from netsnap.core.device import Device, NetworkClass
from netsnap.core.device_store import DeviceStore, StorageSession
from netsnap.core.task_log import TaskLog
from netsnap.script.bridge import ScriptBridge

# ---------------------------------------------------------------------------
# Schema fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def descriptor() -> DriverDescriptor:
    """Descriptor of a small test driver covering every level and kind."""
    return DriverDescriptor(
        name="test_driver",
        description="Test Router",
        author="tests",
        attributes=(
            AttributeDefinition(
                "mainMemorySize", "Main memory size (MB)", AttributeLevel.DEVICE, AttributeKind.NUMERIC
            ),
            AttributeDefinition(
                "configRegister", "Configuration register", AttributeLevel.DEVICE, AttributeKind.TEXT
            ),
            AttributeDefinition("licensed", "Licensed", AttributeLevel.DEVICE, AttributeKind.BINARY),
            AttributeDefinition(
                "secretHash",
                "Secret hash",
                AttributeLevel.DEVICE,
                AttributeKind.TEXT,
                checkable=False,
            ),
            AttributeDefinition("osVersion", "OS version", AttributeLevel.CONFIG, AttributeKind.TEXT),
            AttributeDefinition(
                "runningConfig", "Running configuration", AttributeLevel.CONFIG, AttributeKind.LONGTEXT
            ),
        ),
    )


@pytest.fixture
def resolver(descriptor: DriverDescriptor) -> MagicMock:
    """Descriptor resolver returning the test descriptor for any device."""
    mock = MagicMock()
    mock.descriptor_for.return_value = descriptor
    return mock


# ---------------------------------------------------------------------------
# Device fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def device() -> Device:
    """A stored Cisco core router with some collected state."""
    return Device(
        name="core-rtr-1",
        driver="test_driver",
        id=1,
        mgmt_address="10.0.0.1",
        family="ISR4451",
        location="Paris DC1",
        contact="noc@example.net",
        software_version="17.3.4",
        serial_number="FDO12345678",
        network_class=NetworkClass.ROUTER,
    )


@pytest.fixture
def peer_device() -> Device:
    """A second stored device, reachable by cross-device lookups."""
    return Device(
        name="core-rtr-2",
        driver="test_driver",
        id=2,
        software_version="17.6.1",
        network_class=NetworkClass.ROUTER,
    )


# ---------------------------------------------------------------------------
# Bridge fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def session() -> MagicMock:
    """Mock storage session."""
    return MagicMock(spec=StorageSession)


@pytest.fixture
def task_log() -> TaskLog:
    """An empty task log."""
    return TaskLog("test")


@pytest.fixture
def bridge(
    device: Device, session: MagicMock, task_log: TaskLog, resolver: MagicMock
) -> ScriptBridge:
    """A writable bridge bound to the core router."""
    return ScriptBridge(device, session, task_log, drivers=resolver)


@pytest.fixture
def read_only_bridge(
    device: Device, session: MagicMock, task_log: TaskLog, resolver: MagicMock
) -> ScriptBridge:
    """A read-only bridge bound to the core router."""
    return ScriptBridge(device, session, task_log, read_only=True, drivers=resolver)


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store(tmp_path: Path) -> DeviceStore:
    """A device store in a temporary directory."""
    return DeviceStore(storage_dir=tmp_path / "devices")


# ---------------------------------------------------------------------------
# Collected data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def napalm_collected() -> dict[str, Any]:
    """Data collected from a Cisco IOS-XE router, keyed by NAPALM getter."""
    return {
        "facts": {
            "hostname": "core-rtr-1",
            "vendor": "Cisco",
            "model": "ISR4451-X/K9",
            "os_version": "17.3.4",
            "serial_number": "FDO21120U8N",
        },
        "interfaces": {
            "GigabitEthernet0/0/0": {
                "is_enabled": True,
                "is_up": True,
                "description": "Uplink to ISP",
                "mac_address": "00:11:22:33:44:55",
            },
            "GigabitEthernet0/0/1": {
                "is_enabled": False,
                "is_up": False,
                "description": "",
                "mac_address": "",
            },
            "Loopback0": {
                "is_enabled": True,
                "is_up": True,
                "description": "Router ID",
                "mac_address": "",
            },
        },
        "interfaces_ip": {
            "GigabitEthernet0/0/0": {
                "ipv4": {"192.0.2.1": {"prefix_length": 30}},
                "ipv6": {"2001:db8::1": {"prefix_length": 64}},
            },
            "Loopback0": {"ipv4": {"10.255.0.1": {"prefix_length": 32}}},
        },
        "network_instances": {
            "default": {"type": "DEFAULT_INSTANCE", "interfaces": {"interface": {}}},
            "MGMT": {
                "type": "L3VRF",
                "interfaces": {"interface": {"GigabitEthernet0/0/1": {}}},
            },
        },
        "environment": {"memory": {"available_ram": 8 * 1024 * 1024 * 1024, "used_ram": 0}},
        "inventory": [
            {"slot": "0", "part_number": "ISR4451-X/K9", "serial_number": "FDO21120U8N"},
            {"slot": "0/1", "part_number": "NIM-2GE-CU-SFP", "serial_number": "FOC2101X0AB"},
        ],
        "config": {
            "running": "hostname core-rtr-1\n!\nend\n",
            "startup": "hostname core-rtr-1\n!\nend\n",
            "candidate": "",
        },
        "show_version": (
            "Cisco IOS XE Software, Version 17.03.04\n"
            'System image file is "bootflash:isr4400-universalk9.17.03.04.SPA.bin"\n'
            "Configuration register is 0x2102\n"
        ),
        "show_license_summary": "Smart Licensing is ENABLED\n  Status: REGISTERED\n",
    }


# ---------------------------------------------------------------------------
# Pytest configuration
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow-running")
