"""Network device snapshot framework.

Driver scripts turn the data collected from Cisco, Juniper and Arista
devices into a canonical device model, reading and writing it only through
a scripting bridge that validates every value and contains every failure.
"""

__version__ = "1.0.0"
