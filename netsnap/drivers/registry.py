"""Registry of driver scripts.

Maps the ``driver`` field of a device to the ``DriverScript`` subclass that
collects it, and resolves the attribute schema the scripting bridge checks
script values against.

Usage::

    registry = DriverRegistry()
    script = registry.create("junos")
    descriptor = registry.descriptor_for(device)

    # Custom drivers
    registry.register("my_driver", MyDriver)
"""

from __future__ import annotations

import logging

from ..core.attributes import DriverDescriptor
from ..core.device import Device
from ..core.exceptions import MissingDriverError
from .arista_eos import AristaEosDriver
from .base import DriverScript
from .cisco_ios import CiscoIosDriver
from .juniper_junos import JuniperJunosDriver

logger = logging.getLogger(__name__)

BUILTIN_DRIVERS: dict[str, type[DriverScript]] = {
    "cisco_ios": CiscoIosDriver,
    "ios": CiscoIosDriver,
    "iosxe": CiscoIosDriver,
    "juniper_junos": JuniperJunosDriver,
    "junos": JuniperJunosDriver,
    "arista_eos": AristaEosDriver,
    "eos": AristaEosDriver,
}


class DriverRegistry:
    """Lookup of driver script classes by driver name.

    Names are case-insensitive.

    Args:
        custom_drivers: Optional mapping of additional driver names to
            driver classes.

    """

    def __init__(
        self,
        custom_drivers: dict[str, type[DriverScript]] | None = None,
    ) -> None:
        """Initialize the registry with the built-in drivers."""
        self._registry: dict[str, type[DriverScript]] = dict(BUILTIN_DRIVERS)
        if custom_drivers:
            for name, driver_cls in custom_drivers.items():
                self._registry[name.lower()] = driver_cls
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def register(self, name: str, driver_cls: type[DriverScript]) -> None:
        """Register a driver class under *name*.

        Args:
            name: Driver name as stored on devices.
            driver_cls: The driver class to associate.

        """
        self._registry[name.lower()] = driver_cls
        self._logger.info("Registered driver %s as '%s'", driver_cls.__name__, name)

    def get(self, name: str) -> type[DriverScript]:
        """Return the driver class registered under *name*.

        Raises:
            MissingDriverError: If no driver has this name.

        """
        driver_cls = self._registry.get((name or "").lower())
        if driver_cls is None:
            supported = ", ".join(self.supported_drivers)
            raise MissingDriverError(
                f"Unsupported driver '{name}'. Supported: {supported}",
                details={"driver": name},
            )
        return driver_cls

    def create(self, name: str) -> DriverScript:
        """Instantiate the driver script registered under *name*.

        Raises:
            MissingDriverError: If no driver has this name.

        """
        driver_cls = self.get(name)
        self._logger.debug("Creating %s for driver '%s'", driver_cls.__name__, name)
        return driver_cls()

    def descriptor_for(self, device: Device) -> DriverDescriptor:
        """Return the descriptor of the driver that collects *device*.

        Raises:
            MissingDriverError: If the device's driver is not registered.

        """
        try:
            return self.get(device.driver).descriptor
        except MissingDriverError as exc:
            exc.device = device.name
            raise

    @property
    def supported_drivers(self) -> list[str]:
        """Return the sorted list of registered driver names."""
        return sorted(self._registry.keys())
