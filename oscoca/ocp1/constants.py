"""
OCP.1 status codes, enumerations and protocol constants.

Values follow AES70-2023 (OCA) and its OCP.1 TCP/UDP protocol mapping.
"""

from __future__ import annotations

from enum import IntEnum, IntFlag
from typing import Final


class OcaStatus(IntEnum):
    """
    OCA status codes returned in OCP.1 responses.

    The bridge never sends responses, but its errors carry the status an
    OCP.1 device would report for the same condition.
    """

    OK = 0
    """Command succeeded."""

    PROTOCOL_VERSION_ERROR = 1
    """Protocol version mismatch."""

    DEVICE_ERROR = 2
    """Device-specific failure."""

    LOCKED = 3
    """Object is locked by another controller."""

    BAD_FORMAT = 4
    """Parameters could not be decoded."""

    BAD_ONO = 5
    """No object with the target object number."""

    PARAMETER_ERROR = 6
    """Parameter value is invalid."""

    PARAMETER_OUT_OF_RANGE = 7
    """Parameter value is outside the allowed range."""

    NOT_IMPLEMENTED = 8
    """Method is not implemented by the object."""

    INVALID_REQUEST = 9
    """Request is malformed."""

    PROCESSING_FAILED = 10
    """Request was understood but could not be processed."""

    BAD_METHOD = 11
    """Method identifier is invalid."""

    PARTIALLY_SUCCEEDED = 12
    """Only part of the request was carried out."""

    TIMEOUT = 13
    """Operation timed out."""

    BUFFER_OVERFLOW = 14
    """Result does not fit the buffer."""

    PERMISSION_DENIED = 15
    """Controller lacks permission."""


class OcaMessageType(IntEnum):
    """OCP.1 PDU message types."""

    COMMAND = 0
    COMMAND_RRQ = 1
    NOTIFICATION = 2
    RESPONSE = 3
    KEEP_ALIVE = 4


class OcaMuteState(IntEnum):
    """Mute state of an OcaMute object."""

    MUTED = 1
    UNMUTED = 2


class OcaControllerFlags(IntFlag):
    """Capability flags advertised by an OCA controller connection."""

    NONE = 0
    SUPPORTS_LOCKING = 1
    SUPPORTS_EV2 = 2


class OcaObjectSearchResultFlags(IntFlag):
    """Fields to fill in when searching the object tree."""

    ONO = 0x01
    CLASS_IDENTIFICATION = 0x02
    CONTAINER_PATH = 0x04
    ROLE = 0x08
    LABEL = 0x10


class Ocp1Constants:
    """
    OCP.1 protocol constants.

    These values are fixed by the protocol mapping and object model.
    """

    COMMAND_HANDLE: Final[int] = 0
    """Handle used for commands that expect no response."""

    MAX_PARAMETER_COUNT: Final[int] = 0xFF
    """Parameter count is transmitted as an OcaUint8."""

    MAX_BLOB_LENGTH: Final[int] = 0xFFFF
    """OcaString and OcaBlob lengths are transmitted as OcaUint16."""

    ROOT_BLOCK_ONO: Final[int] = 100
    """Object number of the device root block."""

    MAX_RESERVED_ONO: Final[int] = 4095
    """Object numbers up to this value are reserved for standard objects."""
