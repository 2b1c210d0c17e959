"""JSON-backed device store and the storage session handed to the bridge.

The ``DeviceStore`` keeps one JSON document per device, including its latest
configuration, so loading a device by id or name is a single read.  Work is
done through a ``StoreSession``, which tracks the devices it has loaded until
they are evicted or the session is closed.

Usage::

    store = DeviceStore(storage_dir=Path("./devices"))
    store.add(Device(name="spine1", driver="juniper_junos"))
    with store.session() as session:
        device = session.load_device_by_name("spine1")
        ...
        session.evict(device)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from .device import Device
from .exceptions import DeviceNotFoundError, StorageError

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_DIR = Path("devices")


@runtime_checkable
class StorageSession(Protocol):
    """Storage capability borrowed by a scripting bridge for one run."""

    def load_device(self, device_id: int) -> Device:
        """Load a device and its latest configuration by id.

        Raises:
            DeviceNotFoundError: If no device has this id.

        """
        ...

    def load_device_by_name(self, name: str) -> Device:
        """Load a device and its latest configuration by name.

        Raises:
            DeviceNotFoundError: If no device has this name.

        """
        ...

    def evict(self, device: Device) -> None:
        """Stop tracking *device*; unsaved changes to it are discarded."""
        ...


class DeviceStore:
    """Persist devices as JSON documents in a directory.

    Args:
        storage_dir: Directory where device JSON files are written.

    """

    def __init__(self, storage_dir: Path = DEFAULT_STORAGE_DIR) -> None:
        """Initialize the store with a storage directory."""
        self._storage_dir = Path(storage_dir)
        self._storage_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # -- Public API ---------------------------------------------------------

    def add(self, device: Device) -> Device:
        """Store a new device and assign it an id.

        Raises:
            StorageError: If a device with the same name already exists.

        """
        if self._find(device.name) is not None:
            raise StorageError("Device name already in use", device=device.name)
        device.id = max(self.device_ids(), default=0) + 1
        self.save(device)
        self._logger.info("Added device %s with id %d", device.name, device.id)
        return device

    def save(self, device: Device) -> Path:
        """Write a stored device, replacing its previous document.

        Returns:
            Path to the written file.

        Raises:
            StorageError: If the device was never added to the store.

        """
        if device.id <= 0:
            raise StorageError("Device has no id, add it to the store first", device=device.name)
        path = self._device_path(device)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(device.to_json(), encoding="utf-8")
            tmp_path.replace(path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(
                f"Unable to write device file: {path}",
                device=device.name,
                details={"error": str(exc)},
            ) from exc
        # A rename leaves the document under the previous name behind
        for stale in self._storage_dir.glob(f"{device.id}_*.json"):
            if stale != path:
                stale.unlink()
        self._logger.debug("Device %s persisted to %s", device.name, path)
        return path

    def load(self, device_id: int) -> Device:
        """Read a device by id.

        Raises:
            DeviceNotFoundError: If no document exists for this id.
            StorageError: If the document is corrupt.

        """
        paths = sorted(self._storage_dir.glob(f"{device_id}_*.json"))
        if not paths:
            raise DeviceNotFoundError(f"No device with id {device_id}")
        return self._read(paths[0])

    def load_by_name(self, name: str) -> Device:
        """Read a device by name.

        Raises:
            DeviceNotFoundError: If no device has this name.
            StorageError: If the document is corrupt.

        """
        device = self._find(name)
        if device is None:
            raise DeviceNotFoundError(f"No device named '{name}'")
        return device

    def device_ids(self) -> list[int]:
        """Return the ids of all stored devices, sorted."""
        ids: list[int] = []
        for path in self._storage_dir.glob("*_*.json"):
            prefix = path.stem.partition("_")[0]
            if prefix.isdigit():
                ids.append(int(prefix))
        return sorted(ids)

    def list_devices(self) -> list[Path]:
        """List stored device files."""
        return sorted(self._storage_dir.glob("*_*.json"))

    def session(self) -> StoreSession:
        """Open a new session on this store."""
        return StoreSession(self)

    # -- Internal helpers ---------------------------------------------------

    def _read(self, path: Path) -> Device:
        try:
            return Device.from_json(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, TypeError, KeyError, ValueError) as exc:
            raise StorageError(
                f"Corrupt device file: {path}",
                details={"error": str(exc)},
            ) from exc

    def _find(self, name: str) -> Device | None:
        """Return the stored device named exactly *name*.

        Several names share one file name once separators are escaped
        (``a/b`` and ``a_b``), so each candidate is read and compared.
        """
        safe_name = self._safe_name(name)
        for path in sorted(self._storage_dir.glob("*_*.json")):
            prefix, _, rest = path.stem.partition("_")
            if not (prefix.isdigit() and rest == safe_name):
                continue
            device = self._read(path)
            if device.name == name:
                return device
        return None

    def _device_path(self, device: Device) -> Path:
        return self._storage_dir / f"{device.id}_{self._safe_name(device.name)}.json"

    @staticmethod
    def _safe_name(name: str) -> str:
        return name.replace("/", "_").replace("\\", "_")


class StoreSession:
    """Unit of work on a ``DeviceStore``.

    Loaded devices are tracked in an identity map: loading the same device
    twice returns the same object until it is evicted.  The session is meant
    to be used by a single task at a time.

    Args:
        store: The backing store.

    """

    def __init__(self, store: DeviceStore) -> None:
        """Initialize an empty session on *store*."""
        self._store = store
        self._tracked: dict[int, Device] = {}
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def __enter__(self) -> StoreSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        self.close()

    def load_device(self, device_id: int) -> Device:
        if device_id in self._tracked:
            return self._tracked[device_id]
        return self._track(self._store.load(device_id))

    def load_device_by_name(self, name: str) -> Device:
        for device in self._tracked.values():
            if device.name == name:
                return device
        return self._track(self._store.load_by_name(name))

    def evict(self, device: Device) -> None:
        if self._tracked.get(device.id) is device:
            del self._tracked[device.id]
            self._logger.debug("Evicted device %s from session", device.name)

    def save(self, device: Device) -> None:
        """Persist a device and keep tracking it."""
        self._store.save(device)
        self._tracked[device.id] = device

    def contains(self, device: Device) -> bool:
        """Return ``True`` if *device* is tracked by this session."""
        return self._tracked.get(device.id) is device

    @property
    def tracked_count(self) -> int:
        """Return the number of devices currently tracked."""
        return len(self._tracked)

    def close(self) -> None:
        """Drop every tracked device."""
        self._tracked.clear()

    def _track(self, device: Device) -> Device:
        # The tracked object may hold unsaved changes; a disk copy never replaces it
        if device.id in self._tracked:
            self._logger.debug("Device id %d already tracked, returning detached copy", device.id)
            return device
        self._tracked[device.id] = device
        self._logger.debug("Loaded device %s (id %d)", device.name, device.id)
        return device
