"""
OCP.1 parameter encoding and decoding.

OSC arguments are mapped onto OCP.1 values by their type tag:

    OSC tag     OCP.1 type
    -------     ----------
    i           OcaInt32
    h           OcaInt64
    f           OcaFloat32
    d           OcaFloat64
    s, S        OcaString
    b           OcaBlob
    T, F        OcaBoolean

Every other tag (nil, impulse, char, time tag, MIDI, RGBA, arrays) has no
OCP.1 encoding. A command's parameter data is the concatenation of the
encoded values in order, and its parameter count the number of values.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable
from typing import Final

from pydantic import ValidationError

from oscoca.exceptions import InvalidRequestError, Ocp1Error
from oscoca.ocp1.constants import OcaStatus, Ocp1Constants
from oscoca.ocp1.models import Ocp1Parameters
from oscoca.ocp1.values import (
    OcaBlob,
    OcaBoolean,
    OcaFloat32,
    OcaFloat64,
    OcaInt32,
    OcaInt64,
    OcaString,
    OcaValue,
)
from oscoca.osc.packet import OscArgument

OSC_TAG_TYPES: Final[dict[str, type[OcaValue]]] = {
    "i": OcaInt32,
    "h": OcaInt64,
    "f": OcaFloat32,
    "d": OcaFloat64,
    "s": OcaString,
    "S": OcaString,
    "b": OcaBlob,
    "T": OcaBoolean,
    "F": OcaBoolean,
}
"""OSC type tags with an OCP.1 encoding, and the value type they map to."""


def to_oca_value(argument: OscArgument) -> OcaValue:
    """
    Convert an OSC argument to the matching OCP.1 value.

    Args:
        argument: Decoded OSC argument.

    Returns:
        OcaValue of the type selected by the argument's tag.

    Raises:
        InvalidRequestError: If the tag has no OCP.1 encoding or the value
            does not fit the target type.

    Example:
        >>> to_oca_value(OscArgument(tag="f", value=0.8))
        OcaFloat32(value=0.8)
    """
    value_type = OSC_TAG_TYPES.get(argument.tag)
    if value_type is None:
        raise InvalidRequestError(
            f"OSC type tag {argument.tag!r} has no OCP.1 encoding",
            tag=argument.tag,
        )
    try:
        return value_type(value=argument.value)
    except ValidationError as e:
        raise InvalidRequestError(
            f"Value {argument.value!r} does not fit {value_type.__name__}",
            tag=argument.tag,
        ) from e


def encode_value(value: OcaValue | OscArgument) -> bytes:
    """
    Encode a single value in OCP.1 wire format.

    Args:
        value: An OcaValue, or an OscArgument to convert first.

    Returns:
        Encoded bytes.

    Raises:
        InvalidRequestError: If the value has no OCP.1 encoding.
    """
    if isinstance(value, OscArgument):
        value = to_oca_value(value)
    elif not isinstance(value, OcaValue):
        raise InvalidRequestError(f"No OCP.1 encoding for {type(value).__name__}")

    try:
        return value.encode()
    except (struct.error, OverflowError, UnicodeEncodeError) as e:
        raise InvalidRequestError(f"Cannot encode {value!r}: {e}") from e


def encode_parameters(values: Iterable[OcaValue | OscArgument]) -> Ocp1Parameters:
    """
    Encode an ordered sequence of values into command parameters.

    Encoding is all or nothing: if any value fails, no parameters are
    produced.

    Args:
        values: Values to encode, in parameter order.

    Returns:
        Ocp1Parameters with the concatenated encodings and their count.

    Raises:
        InvalidRequestError: If any value cannot be encoded, or there are
            more values than a parameter count can express.

    Example:
        >>> params = encode_parameters([OcaBoolean(value=True), OcaUint8(value=2)])
        >>> params.parameter_count, params.parameter_data
        (2, b'\\x01\\x02')
    """
    values = list(values)
    if len(values) > Ocp1Constants.MAX_PARAMETER_COUNT:
        raise InvalidRequestError(
            f"Too many parameters: {len(values)} "
            f"(max {Ocp1Constants.MAX_PARAMETER_COUNT})"
        )

    data = b"".join(encode_value(value) for value in values)
    return Ocp1Parameters(parameter_count=len(values), parameter_data=data)


def decode_parameters(
    parameters: Ocp1Parameters,
    *value_types: type[OcaValue],
) -> list[OcaValue]:
    """
    Decode command parameters into values of the expected types.

    Args:
        parameters: Parameters received with a command.
        *value_types: Expected value type of each parameter, in order.

    Returns:
        Decoded values, one per type.

    Raises:
        Ocp1Error: With status BAD_FORMAT if the count does not match, the
            data is truncated, or bytes are left over.
    """
    if parameters.parameter_count != len(value_types):
        raise Ocp1Error(
            OcaStatus.BAD_FORMAT,
            f"Expected {len(value_types)} parameters, got {parameters.parameter_count}",
        )

    data = parameters.parameter_data
    offset = 0
    values: list[OcaValue] = []
    for value_type in value_types:
        try:
            value, offset = value_type.decode(data, offset)
        except ValueError as e:
            raise Ocp1Error(OcaStatus.BAD_FORMAT, str(e)) from e
        values.append(value)

    if offset != len(data):
        raise Ocp1Error(
            OcaStatus.BAD_FORMAT,
            f"{len(data) - offset} trailing bytes after parameters",
        )
    return values
