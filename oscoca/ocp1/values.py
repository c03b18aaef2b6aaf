"""
OCP.1 primitive value types.

Each OCA base data type is an immutable Pydantic model that validates its
range on construction and knows its own big-endian wire encoding:

- OcaBoolean: 1 byte, 0 or 1
- OcaUint8/16/32/64, OcaInt8/16/32/64: fixed-width integers
- OcaFloat32/64: IEEE 754 floats
- OcaString: OcaUint16 count of Unicode code points, then UTF-8 bytes
- OcaBlob: OcaUint16 byte length, then the bytes

Example:
    >>> OcaFloat32(value=0.5).encode()
    b'?\\x00\\x00\\x00'
    >>> OcaString(value="Gain").encode()
    b'\\x00\\x04Gain'
"""

from __future__ import annotations

import struct
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from oscoca.ocp1.constants import Ocp1Constants

_UINT16: struct.Struct = struct.Struct(">H")


class OcaValue(BaseModel):
    """
    Base class for OCP.1 values.

    Subclasses implement encode() and decode(). Decoding returns the value
    together with the offset just past it, so parameter blobs can be read
    sequentially.
    """

    model_config = ConfigDict(frozen=True)

    def encode(self) -> bytes:
        """Encode this value in OCP.1 wire format."""
        raise NotImplementedError

    @classmethod
    def decode(cls, data: bytes, offset: int = 0) -> tuple[OcaValue, int]:
        """
        Decode a value of this type from data at offset.

        Args:
            data: Buffer holding the encoded value.
            offset: Position of the first byte.

        Returns:
            Tuple of (decoded value, offset after the value).

        Raises:
            ValueError: If the data is truncated or malformed.
        """
        raise NotImplementedError


class _FixedWidthValue(OcaValue):
    """Value encoded with a single struct format."""

    FORMAT: ClassVar[struct.Struct]

    def encode(self) -> bytes:
        return self.FORMAT.pack(self.value)  # type: ignore[attr-defined]

    @classmethod
    def decode(cls, data: bytes, offset: int = 0) -> tuple[OcaValue, int]:
        if len(data) - offset < cls.FORMAT.size:
            raise ValueError(
                f"{cls.__name__} needs {cls.FORMAT.size} bytes, "
                f"have {max(len(data) - offset, 0)}"
            )
        (value,) = cls.FORMAT.unpack_from(data, offset)
        return cls(value=value), offset + cls.FORMAT.size


class OcaBoolean(OcaValue):
    """Boolean, one byte on the wire."""

    value: bool

    def encode(self) -> bytes:
        return b"\x01" if self.value else b"\x00"

    @classmethod
    def decode(cls, data: bytes, offset: int = 0) -> tuple[OcaValue, int]:
        if len(data) <= offset:
            raise ValueError("OcaBoolean needs 1 byte, have 0")
        raw = data[offset]
        if raw not in (0, 1):
            raise ValueError(f"Invalid OcaBoolean byte 0x{raw:02X}")
        return cls(value=bool(raw)), offset + 1


class OcaUint8(_FixedWidthValue):
    FORMAT: ClassVar[struct.Struct] = struct.Struct(">B")
    value: int = Field(ge=0, le=0xFF)


class OcaUint16(_FixedWidthValue):
    FORMAT: ClassVar[struct.Struct] = struct.Struct(">H")
    value: int = Field(ge=0, le=0xFFFF)


class OcaUint32(_FixedWidthValue):
    FORMAT: ClassVar[struct.Struct] = struct.Struct(">I")
    value: int = Field(ge=0, le=0xFFFFFFFF)


class OcaUint64(_FixedWidthValue):
    FORMAT: ClassVar[struct.Struct] = struct.Struct(">Q")
    value: int = Field(ge=0, le=0xFFFFFFFFFFFFFFFF)


class OcaInt8(_FixedWidthValue):
    FORMAT: ClassVar[struct.Struct] = struct.Struct(">b")
    value: int = Field(ge=-0x80, le=0x7F)


class OcaInt16(_FixedWidthValue):
    FORMAT: ClassVar[struct.Struct] = struct.Struct(">h")
    value: int = Field(ge=-0x8000, le=0x7FFF)


class OcaInt32(_FixedWidthValue):
    FORMAT: ClassVar[struct.Struct] = struct.Struct(">i")
    value: int = Field(ge=-0x80000000, le=0x7FFFFFFF)


class OcaInt64(_FixedWidthValue):
    FORMAT: ClassVar[struct.Struct] = struct.Struct(">q")
    value: int = Field(ge=-0x8000000000000000, le=0x7FFFFFFFFFFFFFFF)


class OcaFloat32(_FixedWidthValue):
    FORMAT: ClassVar[struct.Struct] = struct.Struct(">f")
    value: float


class OcaFloat64(_FixedWidthValue):
    FORMAT: ClassVar[struct.Struct] = struct.Struct(">d")
    value: float


class OcaString(OcaValue):
    """
    Unicode string.

    The length prefix counts code points, not bytes, so decoding walks the
    UTF-8 lead bytes to find the end of the string.
    """

    value: str = Field(max_length=Ocp1Constants.MAX_BLOB_LENGTH)

    def encode(self) -> bytes:
        return _UINT16.pack(len(self.value)) + self.value.encode("utf-8")

    @classmethod
    def decode(cls, data: bytes, offset: int = 0) -> tuple[OcaValue, int]:
        if len(data) - offset < _UINT16.size:
            raise ValueError("OcaString length prefix truncated")
        (count,) = _UINT16.unpack_from(data, offset)
        start = offset + _UINT16.size
        end = start
        for _ in range(count):
            if end >= len(data):
                raise ValueError(f"OcaString truncated: expected {count} code points")
            end += _utf8_width(data[end])
        if end > len(data):
            raise ValueError(f"OcaString truncated: expected {count} code points")
        return cls(value=bytes(data[start:end]).decode("utf-8")), end

    def __str__(self) -> str:
        return self.value


class OcaBlob(OcaValue):
    """Opaque byte string with a 16-bit length prefix."""

    value: bytes = Field(max_length=Ocp1Constants.MAX_BLOB_LENGTH)

    def encode(self) -> bytes:
        return _UINT16.pack(len(self.value)) + self.value

    @classmethod
    def decode(cls, data: bytes, offset: int = 0) -> tuple[OcaValue, int]:
        if len(data) - offset < _UINT16.size:
            raise ValueError("OcaBlob length prefix truncated")
        (length,) = _UINT16.unpack_from(data, offset)
        start = offset + _UINT16.size
        end = start + length
        if end > len(data):
            raise ValueError(f"OcaBlob truncated: need {length} bytes, have {len(data) - start}")
        return cls(value=bytes(data[start:end])), end


def _utf8_width(lead: int) -> int:
    """Get the byte width of a UTF-8 sequence from its lead byte."""
    if lead < 0x80:
        return 1
    if lead >> 5 == 0b110:
        return 2
    if lead >> 4 == 0b1110:
        return 3
    if lead >> 3 == 0b11110:
        return 4
    raise ValueError(f"Invalid UTF-8 lead byte 0x{lead:02X}")
