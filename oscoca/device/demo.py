"""
Demo device served by the command line tool.

Object tree (role paths):

    Block/Actuator(0,0) ... Block/Actuator(3,1)   OcaBooleanActuator, 4 x 2
    Block/Gain                                      OcaGain
    Block/Mute                                      OcaMute

So "/Block/Gain/4.2 ,f -6.0" sets the gain and
"/Block/Actuator(2,1)/5.2 ,T" switches one actuator on.
"""

from __future__ import annotations

import logging

from oscoca.device.device import OcaDevice
from oscoca.device.objects import OcaBlock, OcaBooleanActuator, OcaGain, OcaMute, OcaRoot

logger = logging.getLogger(__name__)

DEMO_BLOCK_ROLE = "Block"
DEMO_ROWS = 4
DEMO_COLUMNS = 2


def _log_change(obj: OcaRoot, property_name: str, value: object) -> None:
    logger.info("%s %s set to %s", "/".join(obj.role_path), property_name, value)


async def build_demo_device() -> OcaDevice:
    """
    Create the demo device.

    Every object logs its property changes at INFO level.

    Returns:
        OcaDevice with the demo block populated.
    """
    device = OcaDevice()
    block = await device.add(OcaBlock(DEMO_BLOCK_ROLE))

    members: list[OcaRoot] = [
        OcaBooleanActuator(f"Actuator({x},{y})")
        for x in range(DEMO_ROWS)
        for y in range(DEMO_COLUMNS)
    ]
    members.append(OcaGain("Gain"))
    members.append(OcaMute("Mute"))

    for member in members:
        await device.add(member, container=block)
        member.add_listener(_log_change)

    return device
