"""Unit tests for the InventoryManager."""

from __future__ import annotations

from pathlib import Path

import pytest

from netsnap.core.device import Device, NetworkClass
from netsnap.core.device_store import DeviceStore
from netsnap.core.exceptions import InventoryError
from netsnap.inventory.inventory_manager import HostEntry, InventoryManager

HOSTS_YAML = """\
core-rtr-1:
  driver: cisco_ios
  address: 10.0.0.1
  location: Paris DC1
  contact: noc@example.net
  networkClass: router
  comments: Primary core router
spine1:
  driver: juniper_junos
  address: 10.0.1.1
  networkClass: SWITCH
leaf1:
  driver: arista_eos
  address: 10.0.2.1
"""


@pytest.fixture
def hosts_file(tmp_path: Path) -> Path:
    """Hosts file with one host per built-in driver."""
    path = tmp_path / "hosts.yml"
    path.write_text(HOSTS_YAML, encoding="utf-8")
    return path


@pytest.fixture
def manager(hosts_file: Path) -> InventoryManager:
    """A loaded InventoryManager."""
    mgr = InventoryManager(hosts_file=hosts_file)
    mgr.load()
    return mgr


class TestLoad:
    """Tests for hosts file parsing."""

    def test_load_hosts(self, manager: InventoryManager) -> None:
        assert manager.host_count == 3
        host = manager.get_host("core-rtr-1")
        assert host.driver == "cisco_ios"
        assert host.address == "10.0.0.1"
        assert host.network_class == NetworkClass.ROUTER

    def test_network_class_defaults_to_unknown(self, manager: InventoryManager) -> None:
        assert manager.get_host("leaf1").network_class == NetworkClass.UNKNOWN

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InventoryError, match="not found"):
            InventoryManager(hosts_file=tmp_path / "missing.yml").load()

    def test_malformed_file(self, tmp_path: Path) -> None:
        path = tmp_path / "hosts.yml"
        path.write_text("core-rtr-1: [driver\n", encoding="utf-8")
        with pytest.raises(InventoryError, match="Malformed"):
            InventoryManager(hosts_file=path).load()

    @pytest.mark.parametrize(
        "content,match",
        [
            ("rtr1: cisco_ios\n", "not a mapping"),
            ("rtr1:\n  address: 10.0.0.1\n", "no driver"),
            ("rtr1:\n  driver: cisco_ios\n  networkClass: MAINFRAME\n", "Unknown network class"),
        ],
    )
    def test_invalid_host(self, tmp_path: Path, content: str, match: str) -> None:
        path = tmp_path / "hosts.yml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(InventoryError, match=match):
            InventoryManager(hosts_file=path).load()

    def test_get_unknown_host(self, manager: InventoryManager) -> None:
        with pytest.raises(InventoryError, match="not found in inventory"):
            manager.get_host("ghost")


class TestQuery:
    """Tests for filtering and conversion."""

    def test_filter_by_driver(self, manager: InventoryManager) -> None:
        assert list(manager.filter(driver="JUNIPER_JUNOS")) == ["spine1"]

    def test_filter_by_network_class(self, manager: InventoryManager) -> None:
        assert list(manager.filter(network_class="switch")) == ["spine1"]

    def test_to_device(self, manager: InventoryManager) -> None:
        device = manager.get_host("core-rtr-1").to_device()
        assert device.id == 0
        assert device.mgmt_address == "10.0.0.1"
        assert device.comments == "Primary core router"

    def test_add_host(self, manager: InventoryManager) -> None:
        manager.add_host(HostEntry(name="edge1", driver="ios"))
        assert manager.get_host("edge1").driver == "ios"


class TestSeed:
    """Tests for seeding the device store."""

    def test_seed_adds_every_host(self, manager: InventoryManager, store: DeviceStore) -> None:
        added = manager.seed(store)
        assert [d.name for d in added] == ["core-rtr-1", "spine1", "leaf1"]
        assert store.load_by_name("spine1").driver == "juniper_junos"

    def test_seed_skips_stored_devices(
        self, manager: InventoryManager, store: DeviceStore
    ) -> None:
        existing = store.add(Device(name="spine1", driver="juniper_junos", location="kept"))

        added = manager.seed(store)

        assert [d.name for d in added] == ["core-rtr-1", "leaf1"]
        assert store.load(existing.id).location == "kept"

    def test_seed_twice_is_idempotent(
        self, manager: InventoryManager, store: DeviceStore
    ) -> None:
        manager.seed(store)
        assert manager.seed(store) == []
        assert len(store.device_ids()) == 3
