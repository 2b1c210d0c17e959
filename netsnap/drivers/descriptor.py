"""YAML loader for driver descriptors.

A descriptor file declares a driver's identity and its attribute schema::

    name: cisco_ios
    description: Cisco IOS and IOS-XE
    version: "1.2"
    attributes:
      - name: mainMemorySize
        title: Main memory size (MB)
        level: DEVICE
        kind: NUMERIC

Built-in descriptors are shipped in the ``descriptors`` directory of this
package.
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from ..core.attributes import AttributeDefinition, AttributeKind, AttributeLevel, DriverDescriptor
from ..core.exceptions import DriverError

logger = logging.getLogger(__name__)

DESCRIPTOR_DIR = "descriptors"


def load_descriptor(source: str | Path) -> DriverDescriptor:
    """Load a driver descriptor.

    Args:
        source: File name of a built-in descriptor (``cisco_ios.yml``) or a
            ``Path`` to a descriptor file.

    Returns:
        The parsed ``DriverDescriptor``.

    Raises:
        DriverError: If the file is missing or malformed.

    """
    try:
        if isinstance(source, Path):
            text = source.read_text(encoding="utf-8")
        else:
            text = (resources.files(__package__) / DESCRIPTOR_DIR / source).read_text(
                encoding="utf-8"
            )
    except OSError as exc:
        raise DriverError(
            f"Driver descriptor not found: {source}",
            details={"error": str(exc)},
        ) from exc
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise DriverError(
            f"Malformed driver descriptor: {source}",
            details={"error": str(exc)},
        ) from exc
    descriptor = descriptor_from_dict(raw, origin=str(source))
    logger.debug(
        "Loaded descriptor %s (%d attributes)", descriptor.name, len(descriptor.attributes)
    )
    return descriptor


def descriptor_from_dict(raw: Any, origin: str = "") -> DriverDescriptor:
    """Build a ``DriverDescriptor`` from parsed YAML data.

    Raises:
        DriverError: If the name is missing or an attribute is invalid.

    """
    if not isinstance(raw, dict) or not raw.get("name"):
        raise DriverError("Driver descriptor has no name", details={"source": origin})

    attributes: list[AttributeDefinition] = []
    for entry in raw.get("attributes") or []:
        try:
            attributes.append(
                AttributeDefinition(
                    name=str(entry["name"]),
                    title=str(entry.get("title", entry["name"])),
                    level=AttributeLevel(str(entry.get("level", "DEVICE")).upper()),
                    kind=AttributeKind(str(entry["kind"]).upper()),
                    checkable=bool(entry.get("checkable", True)),
                )
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise DriverError(
                "Invalid attribute definition",
                details={"source": origin, "entry": entry},
            ) from exc

    return DriverDescriptor(
        name=str(raw["name"]),
        description=str(raw.get("description", raw["name"])),
        author=str(raw.get("author", "")),
        version=str(raw.get("version", "1.0")),
        attributes=tuple(attributes),
    )
