"""
oscoca - Bridge OSC control messages to AES70 (OCA) devices.

This library receives Open Sound Control packets over UDP, resolves each
message's address to an object and method in an OCA device tree, encodes
the arguments as OCP.1 parameters, and submits the command to the device.

Example:
    >>> from oscoca import OscOcaBridge, BridgeSettings
    >>> from oscoca.device import OcaDevice, OcaGain
    >>>
    >>> async def main():
    ...     device = OcaDevice()
    ...     await device.add(OcaGain("Gain"))
    ...     async with OscOcaBridge(device, BridgeSettings(port=8000)) as bridge:
    ...         await bridge.wait()
"""

from oscoca.bridge import BridgeState, OscOcaBridge
from oscoca.bridging import ValueBridge, ValueBridgeRegistry, bridge_mute_state, create_default_registry
from oscoca.config import BridgeSettings
from oscoca.dispatcher import CommandDispatcher
from oscoca.exceptions import (
    BadMethodError,
    InvalidRequestError,
    MethodNotBridgedError,
    Ocp1Error,
    OscOcaError,
    ProcessingFailedError,
    TransportError,
)
from oscoca.ocp1.models import OcaMethodID, Ocp1Command, Ocp1Parameters
from oscoca.transport import AbstractDatagramTransport, AsyncUdpTransport

__version__ = "0.1.0"
__all__ = [
    # Bridge
    "OscOcaBridge",
    "BridgeState",
    "BridgeSettings",
    "CommandDispatcher",
    # Value bridging
    "ValueBridge",
    "ValueBridgeRegistry",
    "bridge_mute_state",
    "create_default_registry",
    # Models
    "OcaMethodID",
    "Ocp1Command",
    "Ocp1Parameters",
    # Exceptions
    "OscOcaError",
    "Ocp1Error",
    "BadMethodError",
    "ProcessingFailedError",
    "InvalidRequestError",
    "MethodNotBridgedError",
    "TransportError",
    # Transport
    "AbstractDatagramTransport",
    "AsyncUdpTransport",
    # Version
    "__version__",
]
