"""Checked extraction of values handed over by driver scripts.

Script values are loosely typed.  These helpers look a key up in either a
bindings mapping or the script engine's global scope and return it only if it
has the requested kind, raising ``ScriptValidationError`` otherwise.  A
``None`` value counts as absent, in which case the default (if any) is used.

Usage::

    name = to_string(bindings, "name")
    enabled = to_boolean(bindings, "enabled", True)
    mask = to_integer(entry, "mask")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from ..core.exceptions import ScriptValidationError

_MISSING: Any = object()


@runtime_checkable
class ScriptScope(Protocol):
    """Global scope of a script engine."""

    def get(self, key: str) -> Any: ...


def to_object(source: Any, key: str, default: Any = _MISSING) -> Any:
    """Return the raw value of *key*.

    Args:
        source: A bindings mapping or a ``ScriptScope``.
        key: Key to look up.
        default: Value returned when the key is absent or ``None``.

    Raises:
        ScriptValidationError: If *source* is not supported, or the key is
            absent and no default was given.

    """
    if isinstance(source, Mapping) or isinstance(source, ScriptScope):
        value = source.get(key)
    else:
        raise ScriptValidationError("Invalid object.", details={"type": type(source).__name__})
    if value is None:
        if default is _MISSING or default is None:
            raise ScriptValidationError(f"The key '{key}' doesn't exist.")
        return default
    return value


def to_boolean(source: Any, key: str, default: bool | None = _MISSING) -> bool:
    """Return *key* as a boolean."""
    value = to_object(source, key, default)
    if not isinstance(value, bool):
        raise ScriptValidationError(f"The value of {key} is not a boolean.")
    return value


def to_integer(source: Any, key: str, default: int | None = _MISSING) -> int:
    """Return *key* as an integer; booleans are rejected."""
    value = to_object(source, key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ScriptValidationError(f"The value of {key} is not an integer.")
    return value


def to_string(source: Any, key: str, default: str | None = _MISSING) -> str:
    """Return *key* as a non-blank string.

    Raises:
        ScriptValidationError: If the value is missing, not a string, or
            empty after trimming whitespace.

    """
    value = to_object(source, key, default)
    if not isinstance(value, str):
        raise ScriptValidationError(f"The value of {key} is not a string.")
    if not value.strip():
        raise ScriptValidationError(f"The value of {key} cannot be empty.")
    return value


def to_bindings(
    source: Any, key: str, default: Mapping[str, Any] | None = _MISSING
) -> Mapping[str, Any]:
    """Return *key* as a nested bindings mapping."""
    value = to_object(source, key, default)
    if not isinstance(value, Mapping):
        raise ScriptValidationError(f"The value of {key} is not a script object.")
    return value
