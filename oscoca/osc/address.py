"""
OSC address pattern resolution.

An address pattern names an OCA object by role path and a method on it:

    /Block/Gain/4.2
     ^^^^^^^^^^ ^^^
     role path  method ID (def_level.method_index)

All segments but the last form the role path, which is looked up in the
device object tree. The last segment is the method token.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from oscoca.exceptions import BadMethodError, ProcessingFailedError
from oscoca.ocp1.constants import OcaObjectSearchResultFlags
from oscoca.ocp1.models import OcaMethodID

if TYPE_CHECKING:
    from oscoca.device.device import OcaDevice

logger = logging.getLogger(__name__)

MIN_PATH_COMPONENTS = 2
"""At least one role path segment plus the method token."""


class ResolvedAddress(BaseModel):
    """
    Address pattern resolved against a device.

    Attributes:
        role_path: Role names from the address, method token excluded.
        target_ono: Object number of the first matching object.
        method_id: Method parsed from the trailing token.
    """

    model_config = ConfigDict(frozen=True)

    role_path: tuple[str, ...]
    target_ono: int
    method_id: OcaMethodID


def split_address(address: str) -> tuple[tuple[str, ...], OcaMethodID]:
    """
    Split an address pattern into role path and method ID.

    Empty segments (from "//" or a trailing "/") are ignored.

    Args:
        address: OSC address pattern, e.g. "/Mixer/Gain/1/5.2".

    Returns:
        Tuple of (role path, method ID).

    Raises:
        BadMethodError: If there are fewer than two segments, or the last
            segment is not a "<uint>.<uint>" method token.

    Example:
        >>> split_address("/Mixer/Gain/1/5.2")
        (('Mixer', 'Gain', '1'), OcaMethodID(5.2))
    """
    components = [part for part in address.split("/") if part]
    if len(components) < MIN_PATH_COMPONENTS:
        raise BadMethodError(
            "Address needs a role path and a method token",
            address=address,
        )

    try:
        method_id = OcaMethodID.from_string(components[-1])
    except ValueError as e:
        raise BadMethodError(
            f"Invalid method token {components[-1]!r}",
            address=address,
        ) from e

    return tuple(components[:-1]), method_id


async def resolve_address(device: OcaDevice, address: str) -> ResolvedAddress:
    """
    Resolve an address pattern to a target object and method.

    Only object numbers are requested from the search. If several objects
    share the role path, the first one in tree order is used.

    Args:
        device: Device whose object tree is searched.
        address: OSC address pattern.

    Returns:
        ResolvedAddress for the first matching object.

    Raises:
        BadMethodError: If the address is malformed (see split_address).
        ProcessingFailedError: If no object has the role path.
    """
    role_path, method_id = split_address(address)

    results = await device.find_action_objects_by_role_path(
        role_path,
        OcaObjectSearchResultFlags.ONO,
    )
    if not results or results[0].ono is None:
        raise ProcessingFailedError("No object with role path", role_path=role_path)

    if len(results) > 1:
        logger.debug(
            "Role path %s matches %d objects, using ONo %d",
            "/".join(role_path),
            len(results),
            results[0].ono,
        )

    return ResolvedAddress(role_path=role_path, target_ono=results[0].ono, method_id=method_id)
