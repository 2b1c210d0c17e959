"""Scripting bridge exposed to driver scripts.

``ScriptBridge`` mediates every read and write a driver script performs on
the device model; ``decode`` holds the checked value extraction helpers.
"""

from .bridge import DescriptorResolver, ScriptBridge
from .decode import ScriptScope, to_bindings, to_boolean, to_integer, to_object, to_string

__all__ = [
    "DescriptorResolver",
    "ScriptBridge",
    "ScriptScope",
    "to_bindings",
    "to_boolean",
    "to_integer",
    "to_object",
    "to_string",
]
