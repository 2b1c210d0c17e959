"""Snapshot task runner and device diff engine.

The ``SnapshotEngine`` runs one driver script against one stored device:
it loads the device, hands it to the driver through a ``ScriptBridge``,
stores the configuration the driver extracted and saves the result.  Every
run reports a deterministic diff between the device as it was loaded and the
device as it was saved.

Usage::

    engine = SnapshotEngine(DeviceStore(Path("./devices")), DriverRegistry())
    result = engine.run(device_id, collected)
    if result.status == SnapshotStatus.SUCCESS:
        for entry in result.diff.changed:
            print(entry.category, entry.key, entry.before, "->", entry.after)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from ..drivers.base import DriverScript
from ..drivers.registry import DriverRegistry
from ..script.bridge import ScriptBridge
from .attributes import AttributeLevel, ConfigAttribute
from .device import Config, Device
from .device_store import DeviceStore
from .exceptions import SnapshotError
from .task_log import TaskLog

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "netsnap"

IDENTITY_FIELDS = (
    "name",
    "family",
    "location",
    "contact",
    "softwareVersion",
    "serialNumber",
    "networkClass",
    "comments",
)


class SnapshotStatus(StrEnum):
    """Outcome of a snapshot run."""

    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class DiffEntry:
    """Single difference between two states of a device.

    Attributes:
        category: The data domain (e.g., ``interfaces``).
        key: The specific item that differs.
        action: One of ``added``, ``removed``, ``changed``.
        before: Value before the run (``None`` for additions).
        after: Value after the run (``None`` for removals).

    """

    category: str
    key: str
    action: str
    before: Any = None
    after: Any = None


@dataclass
class DeviceDiff:
    """Structured comparison of a device before and after a run."""

    device: str
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    diffs: list[DiffEntry] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """Return ``True`` if any differences were detected."""
        return len(self.diffs) > 0

    @property
    def added(self) -> list[DiffEntry]:
        return [d for d in self.diffs if d.action == "added"]

    @property
    def removed(self) -> list[DiffEntry]:
        return [d for d in self.diffs if d.action == "removed"]

    @property
    def changed(self) -> list[DiffEntry]:
        return [d for d in self.diffs if d.action == "changed"]

    def in_category(self, category: str) -> list[DiffEntry]:
        """Return the entries of one category, in diff order."""
        return [d for d in self.diffs if d.category == category]


@dataclass
class SnapshotResult:
    """Result of one snapshot run.

    Attributes:
        device: Name of the device.
        status: Outcome of the run.
        task_log: Messages recorded during the run.
        diff: Changes applied to the device; ``None`` when the run failed.
        config_id: Id of the configuration stored by the run, if any.

    """

    device: str
    status: SnapshotStatus
    task_log: TaskLog
    diff: DeviceDiff | None = None
    config_id: int | None = None


class SnapshotEngine:
    """Run driver scripts against stored devices.

    Args:
        store: Device store the devices are loaded from and saved to.
        registry: Driver registry; defaults to the built-in drivers.
        author: Author recorded on the configurations the engine stores.

    """

    def __init__(
        self,
        store: DeviceStore,
        registry: DriverRegistry | None = None,
        author: str = DEFAULT_AUTHOR,
    ) -> None:
        """Initialize the engine with a store and a driver registry."""
        self._store = store
        self._registry = registry or DriverRegistry()
        self._author = author
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # -- Public API ---------------------------------------------------------

    def run(self, device_id: int, collected: dict[str, Any]) -> SnapshotResult:
        """Snapshot one device from the data collected on it.

        The device is reset, then populated by its driver.  A failure inside
        the driver is contained: it is logged, recorded in the task log, and
        the device is left unsaved.

        Args:
            device_id: Store id of the device.
            collected: Raw data gathered from the device.

        Returns:
            The ``SnapshotResult`` of the run.

        Raises:
            DeviceNotFoundError: If no device has this id.
            MissingDriverError: If the device's driver is not registered.

        """
        with self._store.session() as session:
            device = session.load_device(device_id)
            before = Device.from_dict(device.to_dict())
            driver = self._registry.create(device.driver)
            task_log = TaskLog(f"snapshot {device.name}")
            bridge = ScriptBridge(device, session, task_log, drivers=self._registry)

            self._logger.info("Running driver %s on %s", driver.name, device.name)
            try:
                bridge.reset()
                driver.snapshot(bridge, collected)
                config = self._build_config(device, driver, collected, task_log)
            except Exception as exc:
                self._logger.exception("Snapshot of %s failed", device.name)
                task_log.error(f"Snapshot failed: {exc}")
                session.evict(device)
                return SnapshotResult(device.name, SnapshotStatus.FAILURE, task_log)

            if config is not None:
                device.last_config = config
            session.save(device)

        diff = self.diff(before, device)
        self._logger.info(
            "Snapshot of %s complete: +%d / -%d / ~%d",
            device.name,
            len(diff.added),
            len(diff.removed),
            len(diff.changed),
        )
        return SnapshotResult(
            device=device.name,
            status=SnapshotStatus.SUCCESS,
            task_log=task_log,
            diff=diff,
            config_id=config.id if config is not None else None,
        )

    def inspect(
        self,
        device_id: int,
        script: Callable[[ScriptBridge], Any],
    ) -> tuple[Any, TaskLog]:
        """Run *script* against a read-only bridge to a stored device.

        Returns:
            The value returned by *script* and the task log of the run.

        Raises:
            DeviceNotFoundError: If no device has this id.
            SnapshotError: If *script* raises.

        """
        with self._store.session() as session:
            device = session.load_device(device_id)
            task_log = TaskLog(f"inspect {device.name}")
            bridge = ScriptBridge(
                device, session, task_log, read_only=True, drivers=self._registry
            )
            try:
                return script(bridge), task_log
            except Exception as exc:
                raise SnapshotError(
                    "Inspection script failed",
                    device=device.name,
                    details={"error": str(exc)},
                ) from exc

    def diff(self, before: Device, after: Device) -> DeviceDiff:
        """Compute a structured diff between two states of a device.

        Args:
            before: The device as loaded.
            after: The device as populated.

        Returns:
            A ``DeviceDiff`` with categorized differences.

        """
        result = DeviceDiff(device=after.name)
        pre = before.to_dict()
        post = after.to_dict()
        categories: list[tuple[str, dict[str, Any], dict[str, Any]]] = [
            (
                "identity",
                {k: pre[k] for k in IDENTITY_FIELDS},
                {k: post[k] for k in IDENTITY_FIELDS},
            ),
            ("modules", self._by_key(pre["modules"], "slot"), self._by_key(post["modules"], "slot")),
            (
                "interfaces",
                self._by_key(pre["interfaces"], "name"),
                self._by_key(post["interfaces"], "name"),
            ),
            ("vrfs", {v: v for v in pre["vrfs"]}, {v: v for v in post["vrfs"]}),
            (
                "virtualDevices",
                {v: v for v in pre["virtualDevices"]},
                {v: v for v in post["virtualDevices"]},
            ),
            (
                "attributes",
                {a["name"]: a["value"] for a in pre["attributes"]},
                {a["name"]: a["value"] for a in post["attributes"]},
            ),
        ]
        for category, pre_data, post_data in categories:
            self._diff_category(result, category, pre_data, post_data)
        return result

    # -- Internal helpers ---------------------------------------------------

    def _build_config(
        self,
        device: Device,
        driver: DriverScript,
        collected: dict[str, Any],
        task_log: TaskLog,
    ) -> Config | None:
        """Build the next configuration from the driver's config attributes.

        Only CONFIG-level definitions are stored, and only with a value of
        the defined kind.  Returns ``None`` when nothing was extracted.
        """
        values = driver.config_attributes(collected)
        if not values:
            return None
        previous = device.last_config.id if device.last_config is not None else 0
        config = Config(id=previous + 1, author=self._author)
        for definition in driver.descriptor.definitions(AttributeLevel.CONFIG):
            value = values.get(definition.name)
            if value is None:
                continue
            if not definition.accepts(value):
                task_log.warn(f"Ignoring config attribute {definition.name}: not {definition.kind}")
                continue
            config.add_attribute(ConfigAttribute(definition.name, definition.kind, value))
        unknown = sorted(set(values) - set(config.attributes))
        if unknown:
            self._logger.debug("Config values without a definition on %s: %s", device.name, unknown)
        return config

    @staticmethod
    def _by_key(items: list[dict[str, Any]], key: str) -> dict[str, Any]:
        """Index serialized items by *key*, falling back to their position."""
        return {str(item.get(key) or f"#{index}"): item for index, item in enumerate(items)}

    @staticmethod
    def _diff_category(
        result: DeviceDiff,
        category: str,
        pre_data: dict[str, Any],
        post_data: dict[str, Any],
    ) -> None:
        """Compare two dictionaries within a single category."""
        for key in sorted(set(pre_data) | set(post_data)):
            pre_val = pre_data.get(key)
            post_val = post_data.get(key)

            if key not in pre_data:
                result.diffs.append(
                    DiffEntry(category=category, key=key, action="added", after=post_val)
                )
            elif key not in post_data:
                result.diffs.append(
                    DiffEntry(category=category, key=key, action="removed", before=pre_val)
                )
            elif pre_val != post_val:
                result.diffs.append(
                    DiffEntry(
                        category=category,
                        key=key,
                        action="changed",
                        before=pre_val,
                        after=post_val,
                    )
                )
