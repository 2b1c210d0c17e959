"""Network and physical address value types.

Addresses are immutable and validated on construction: a malformed literal or
an out-of-range prefix length raises ``AddressError`` instead of being
clamped.  Parsing relies on the standard :mod:`ipaddress` module.

Usage::

    addr = Network4Address("10.0.0.1", 24)
    same = Network4Address.from_netmask("10.0.0.1", "255.255.255.0")
    v6 = Network6Address("2001:db8::1", 64, AddressUsage.SECONDARY)
    mac = PhysicalAddress.parse("0011.2233.4455")
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar

from .exceptions import AddressError

MAC_SEPARATORS = re.compile(r"[.:\-]")
MAC_HEX = re.compile(r"[0-9a-fA-F]{12}")

ZERO_MAC = "0000.0000.0000"


class AddressUsage(StrEnum):
    """Role of an address on its interface."""

    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"
    LOOPBACK = "LOOPBACK"
    VRRP = "VRRP"
    HSRP = "HSRP"
    GLBP = "GLBP"

    @classmethod
    def parse(cls, value: Any) -> AddressUsage:
        """Return the usage named *value*.

        Raises:
            AddressError: If *value* is not a usage name.

        """
        if isinstance(value, cls):
            return value
        try:
            return cls[value]
        except (KeyError, TypeError):
            raise AddressError(
                f"Invalid address usage '{value}'",
                details={"allowed": "/".join(u.value for u in cls)},
            ) from None


@dataclass(frozen=True)
class NetworkAddress:
    """Base class of IPv4 and IPv6 interface addresses.

    Attributes:
        ip: Canonical textual form of the host address.
        prefix_length: Length of the network prefix in bits.
        usage: Role of the address on its interface.

    """

    ip: str
    prefix_length: int
    usage: AddressUsage = AddressUsage.PRIMARY

    family: ClassVar[str] = ""
    max_prefix_length: ClassVar[int] = 0
    _parser: ClassVar[Any] = None

    def __post_init__(self) -> None:
        prefix = self.prefix_length
        if isinstance(prefix, bool) or not isinstance(prefix, int):
            raise AddressError(f"Invalid prefix length '{prefix}' for {self.family} address")
        if not 0 <= prefix <= self.max_prefix_length:
            raise AddressError(
                f"Prefix length {prefix} out of range for {self.family} address",
                details={"max": self.max_prefix_length},
            )
        if not isinstance(self.ip, str):
            raise AddressError(f"Invalid {self.family} address '{self.ip}'")
        try:
            parsed = self._parser(self.ip.strip())
        except ValueError as exc:
            raise AddressError(f"Invalid {self.family} address '{self.ip}'") from exc
        object.__setattr__(self, "ip", str(parsed))
        object.__setattr__(self, "usage", AddressUsage.parse(self.usage))

    def __str__(self) -> str:
        return f"{self.ip}/{self.prefix_length}"

    @property
    def network(self) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
        """Return the network this address belongs to."""
        return ipaddress.ip_interface(str(self)).network

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible mapping."""
        return {
            "family": self.family,
            "ip": self.ip,
            "prefixLength": self.prefix_length,
            "usage": self.usage.value,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> NetworkAddress:
        """Rebuild an address serialized by :meth:`to_dict`."""
        cls = Network6Address if data.get("family") == Network6Address.family else Network4Address
        return cls(data["ip"], data["prefixLength"], AddressUsage.parse(data["usage"]))


@dataclass(frozen=True)
class Network4Address(NetworkAddress):
    """IPv4 interface address (prefix length 0-32)."""

    family: ClassVar[str] = "ipv4"
    max_prefix_length: ClassVar[int] = 32
    _parser: ClassVar[Any] = ipaddress.IPv4Address

    @classmethod
    def from_netmask(
        cls,
        ip: str,
        netmask: str,
        usage: AddressUsage = AddressUsage.PRIMARY,
    ) -> Network4Address:
        """Build an address from a dotted-decimal netmask.

        Args:
            ip: IPv4 literal.
            netmask: Contiguous dotted-decimal mask such as ``255.255.255.0``.
            usage: Role of the address.

        Raises:
            AddressError: If the mask is malformed or non-contiguous.

        """
        if not isinstance(netmask, str):
            raise AddressError(f"Invalid netmask '{netmask}'")
        try:
            mask = ipaddress.IPv4Address(netmask.strip())
            network = ipaddress.IPv4Network(f"0.0.0.0/{mask}")
        except ValueError as exc:
            raise AddressError(f"Invalid netmask '{netmask}'") from exc
        # ipaddress also accepts host masks (0.0.0.255), which are not netmasks
        if network.netmask != mask:
            raise AddressError(f"Invalid netmask '{netmask}'")
        return cls(ip, network.prefixlen, usage)

    @property
    def netmask(self) -> str:
        """Return the prefix as a dotted-decimal netmask."""
        return str(self.network.netmask)


@dataclass(frozen=True)
class Network6Address(NetworkAddress):
    """IPv6 interface address (prefix length 0-128)."""

    family: ClassVar[str] = "ipv6"
    max_prefix_length: ClassVar[int] = 128
    _parser: ClassVar[Any] = ipaddress.IPv6Address


@dataclass(frozen=True)
class PhysicalAddress:
    """48-bit MAC address, rendered in Cisco dotted notation."""

    value: int = 0

    @classmethod
    def parse(cls, text: str) -> PhysicalAddress:
        """Parse dotted (``0011.2233.4455``), colon or dash notation.

        Raises:
            AddressError: If *text* is not a MAC address.

        """
        if not isinstance(text, str):
            raise AddressError(f"Invalid MAC address '{text}'")
        digits = MAC_SEPARATORS.sub("", text.strip())
        if not MAC_HEX.fullmatch(digits):
            raise AddressError(f"Invalid MAC address '{text}'")
        return cls(int(digits, 16))

    def __str__(self) -> str:
        digits = f"{self.value:012x}"
        return ".".join(digits[i : i + 4] for i in range(0, 12, 4))

    @property
    def is_zero(self) -> bool:
        """Return ``True`` for the all-zero placeholder address."""
        return self.value == 0
