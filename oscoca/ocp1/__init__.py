"""
OCP.1 (AES70) protocol layer.

This package contains the target-side protocol handling:
- Status codes, enumerations and protocol constants
- Primitive value types with their wire encoding
- Command, parameter and search result models
- Parameter encoding/decoding (oscoca.ocp1.encoding)
"""

from oscoca.ocp1.constants import (
    OcaControllerFlags,
    OcaMessageType,
    OcaMuteState,
    OcaObjectSearchResultFlags,
    OcaStatus,
    Ocp1Constants,
)
from oscoca.ocp1.models import (
    OcaMethodID,
    OcaObjectSearchResult,
    Ocp1Command,
    Ocp1Parameters,
    Ocp1Response,
)
from oscoca.ocp1.values import (
    OcaBlob,
    OcaBoolean,
    OcaFloat32,
    OcaFloat64,
    OcaInt8,
    OcaInt16,
    OcaInt32,
    OcaInt64,
    OcaString,
    OcaUint8,
    OcaUint16,
    OcaUint32,
    OcaUint64,
    OcaValue,
)

__all__ = [
    # Constants
    "OcaStatus",
    "OcaMessageType",
    "OcaMuteState",
    "OcaControllerFlags",
    "OcaObjectSearchResultFlags",
    "Ocp1Constants",
    # Models
    "OcaMethodID",
    "OcaObjectSearchResult",
    "Ocp1Command",
    "Ocp1Parameters",
    "Ocp1Response",
    # Values
    "OcaValue",
    "OcaBoolean",
    "OcaUint8",
    "OcaUint16",
    "OcaUint32",
    "OcaUint64",
    "OcaInt8",
    "OcaInt16",
    "OcaInt32",
    "OcaInt64",
    "OcaFloat32",
    "OcaFloat64",
    "OcaString",
    "OcaBlob",
]
