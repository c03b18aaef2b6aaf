"""
OCA device side.

This package contains the collaborator the bridge submits commands to:
- OcaController: the controller contract a device calls back into
- OcaDevice: in-memory object tree and command executor
- Object classes for the demo device (blocks, gains, mutes, switches)
"""

from oscoca.device.controller import OcaController
from oscoca.device.device import OcaDevice
from oscoca.device.objects import (
    OcaActuator,
    OcaBasicActuator,
    OcaBlock,
    OcaBooleanActuator,
    OcaGain,
    OcaMute,
    OcaRoot,
    OcaWorker,
    oca_method,
)

__all__ = [
    "OcaController",
    "OcaDevice",
    # Objects
    "OcaRoot",
    "OcaWorker",
    "OcaActuator",
    "OcaBasicActuator",
    "OcaBooleanActuator",
    "OcaMute",
    "OcaGain",
    "OcaBlock",
    "oca_method",
]
