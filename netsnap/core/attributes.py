"""Driver attribute schema and kind-tagged attribute values.

Each driver ships a static ``DriverDescriptor`` listing the attributes it
collects.  A definition's level tells whether the value belongs to the device
itself or to one stored configuration, and its kind is the only concrete
value type accepted for that name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .exceptions import AttributeKindError


class AttributeLevel(StrEnum):
    """Scope of an attribute."""

    DEVICE = "DEVICE"
    CONFIG = "CONFIG"


class AttributeKind(StrEnum):
    """Declared value kind of an attribute."""

    TEXT = "TEXT"
    LONGTEXT = "LONGTEXT"
    NUMERIC = "NUMERIC"
    BINARY = "BINARY"

    @classmethod
    def of(cls, value: Any) -> tuple[AttributeKind, ...]:
        """Return the kinds able to hold *value* (empty if none)."""
        if isinstance(value, bool):
            return (cls.BINARY,)
        if isinstance(value, int | float):
            return (cls.NUMERIC,)
        if isinstance(value, str):
            return (cls.TEXT, cls.LONGTEXT)
        return ()


@dataclass(frozen=True)
class AttributeDefinition:
    """Static description of one collectible attribute.

    Attributes:
        name: Key used by driver scripts.
        title: Human-readable title, also accepted by lookups.
        level: ``DEVICE`` or ``CONFIG``.
        kind: Declared value kind.
        checkable: Whether the attribute is exposed to compliance queries.

    """

    name: str
    title: str
    level: AttributeLevel
    kind: AttributeKind
    checkable: bool = True

    def matches(self, item: str) -> bool:
        """Return ``True`` if *item* is this definition's name or title."""
        return item in (self.name, self.title)

    def accepts(self, value: Any) -> bool:
        """Return ``True`` if *value* has this definition's kind."""
        return self.kind in AttributeKind.of(value)


@dataclass(frozen=True)
class DriverDescriptor:
    """Identity and attribute schema of a driver.

    Attributes:
        name: Registry key of the driver.
        description: Human-readable device type, returned by ``get("type")``.
        author: Driver author.
        version: Driver version string.
        attributes: Ordered attribute definitions.

    """

    name: str
    description: str
    author: str = ""
    version: str = "1.0"
    attributes: tuple[AttributeDefinition, ...] = ()

    def definitions(self, level: AttributeLevel | None = None) -> list[AttributeDefinition]:
        """Return definitions, optionally restricted to one level."""
        return [d for d in self.attributes if level is None or d.level == level]


@dataclass
class Attribute:
    """Kind-tagged named value.

    Attributes:
        name: Attribute name, unique within its owner.
        kind: Concrete value kind.
        value: The value; ``bool`` for BINARY, ``float`` for NUMERIC,
            ``str`` for TEXT and LONGTEXT.

    """

    name: str
    kind: AttributeKind
    value: Any = field(default=None)

    def __post_init__(self) -> None:
        self.kind = AttributeKind(self.kind)
        if self.kind not in AttributeKind.of(self.value):
            raise AttributeKindError(
                f"Value of attribute '{self.name}' is not {self.kind.value}",
                details={"type": type(self.value).__name__},
            )
        if self.kind == AttributeKind.NUMERIC:
            self.value = float(self.value)

    @property
    def data(self) -> Any:
        """Return the raw value as handed back to scripts."""
        return self.value

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible mapping."""
        return {"name": self.name, "kind": self.kind.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Attribute:
        """Rebuild an attribute serialized by :meth:`to_dict`."""
        return cls(name=data["name"], kind=AttributeKind(data["kind"]), value=data["value"])


class DeviceAttribute(Attribute):
    """Attribute attached to a device."""


class ConfigAttribute(Attribute):
    """Attribute attached to one stored configuration."""
