"""Driver scripts and their registry.

Each driver script maps data collected from one vendor platform onto the
device model through a ``ScriptBridge``.
"""

from .arista_eos import AristaEosDriver
from .base import DriverScript
from .cisco_ios import CiscoIosDriver
from .descriptor import load_descriptor
from .juniper_junos import JuniperJunosDriver
from .napalm_script import NapalmDriverScript
from .registry import DriverRegistry

__all__ = [
    "AristaEosDriver",
    "CiscoIosDriver",
    "DriverRegistry",
    "DriverScript",
    "JuniperJunosDriver",
    "NapalmDriverScript",
    "load_descriptor",
]
