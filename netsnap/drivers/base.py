"""Abstract base class for driver scripts.

A driver script turns the raw data collected from one device into the
canonical device model.  It never touches the model directly: every read and
write goes through the ``ScriptBridge`` it is handed.

Usage::

    class MyDriver(DriverScript):
        descriptor = load_descriptor("my_driver.yml")

        def snapshot(self, device, collected):
            device.set("softwareVersion", collected["version"])
"""

from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING, Any, ClassVar

from ..core.attributes import DriverDescriptor

if TYPE_CHECKING:
    from ..script.bridge import ScriptBridge

logger = logging.getLogger(__name__)


class DriverScript(abc.ABC):
    """Base class of all vendor driver scripts.

    Subclasses set ``descriptor`` and implement ``snapshot``.
    """

    descriptor: ClassVar[DriverDescriptor]

    def __init__(self) -> None:
        """Initialize the driver logger."""
        self._logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @property
    def name(self) -> str:
        """Return the driver name from its descriptor."""
        return self.descriptor.name

    @abc.abstractmethod
    def snapshot(self, device: ScriptBridge, collected: dict[str, Any]) -> None:
        """Populate the bound device from collected data.

        Args:
            device: Bridge to the device being snapshotted.
            collected: Raw data gathered from the device.

        """

    def config_attributes(self, collected: dict[str, Any]) -> dict[str, Any]:
        """Return configuration-level attribute values keyed by name.

        The default implementation collects nothing.
        """
        return {}
