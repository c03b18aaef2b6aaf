"""
OSC packet model and decoding.

Inbound datagrams are parsed with python-osc and converted into immutable
Pydantic models:

- OscArgument: one typed argument, i.e. an OSC type tag plus its value
- OscMessage: address pattern plus ordered arguments
- OscBundle: time tag plus ordered elements (messages or nested bundles)

python-osc exposes argument values without their type tags, so the tags are
read back from the message datagram and paired with the values. That keeps
the distinction between e.g. int32 and int64, which decides the OCP.1
encoding.

Example:
    >>> packet = decode_packet(datagram)
    >>> if isinstance(packet, OscMessage):
    ...     print(packet.address, [arg.tag for arg in packet.arguments])
"""

from __future__ import annotations

import struct
from collections.abc import Iterator
from typing import Any, Final, Union

from pydantic import BaseModel, ConfigDict, Field
from pythonosc import osc_bundle, osc_message
from pythonosc.parsing import osc_types

from oscoca.exceptions import InvalidRequestError

_PARSE_ERRORS: Final[tuple[type[Exception], ...]] = (
    osc_types.ParseError,
    osc_message.ParseError,
    osc_bundle.ParseError,
    struct.error,
    IndexError,
    ValueError,
    RecursionError,
)

_ARRAY_START: Final[str] = "["
_ARRAY_END: Final[str] = "]"

_BUNDLE_PREFIX: Final[bytes] = b"#bundle\x00"
# Prefix plus 64-bit time tag
_BUNDLE_HEADER_SIZE: Final[int] = 16

MAX_BUNDLE_DEPTH: Final[int] = 64
"""Deepest bundle nesting accepted. python-osc parses nested bundles recursively."""


class OscArgument(BaseModel):
    """
    A single OSC argument with its type tag.

    Attributes:
        tag: OSC type tag character ("i", "f", "s", "T", ...). Arrays use
            "[" and hold the nested list as value.
        value: Decoded Python value.
    """

    model_config = ConfigDict(frozen=True)

    tag: str = Field(min_length=1, max_length=1)
    value: Any = None

    def __repr__(self) -> str:
        return f"OscArgument({self.tag}:{self.value!r})"


class OscMessage(BaseModel):
    """
    OSC message: address pattern plus arguments.

    Example:
        >>> msg = OscMessage(address="/Mixer/Gain/4.2", arguments=(OscArgument(tag="f", value=0.8),))
        >>> msg.path_components
        ('Mixer', 'Gain', '4.2')
    """

    model_config = ConfigDict(frozen=True)

    address: str
    arguments: tuple[OscArgument, ...] = ()

    @property
    def path_components(self) -> tuple[str, ...]:
        """Get the non-empty "/"-separated segments of the address."""
        return tuple(part for part in self.address.split("/") if part)

    @property
    def values(self) -> tuple[Any, ...]:
        """Get the argument values without their tags."""
        return tuple(argument.value for argument in self.arguments)

    @property
    def type_tags(self) -> str:
        """Get the argument type tags as a string, e.g. "ifs"."""
        return "".join(argument.tag for argument in self.arguments)

    def __repr__(self) -> str:
        return f"OscMessage({self.address!r}, ',{self.type_tags}')"


class OscBundle(BaseModel):
    """
    OSC bundle: an ordered container of messages and bundles.

    Attributes:
        timetag: NTP time tag of the bundle (1 means "immediately").
        elements: Contained packets in document order.
    """

    model_config = ConfigDict(frozen=True)

    timetag: int = 1
    elements: tuple[Union[OscMessage, OscBundle], ...] = ()

    def __repr__(self) -> str:
        return f"OscBundle(timetag={self.timetag}, elements={len(self.elements)})"


OscPacket = Union[OscMessage, OscBundle]
"""Either kind of OSC packet."""


def decode_packet(data: bytes) -> OscPacket:
    """
    Decode a datagram into an OSC packet.

    Args:
        data: Raw datagram payload.

    Returns:
        OscMessage or OscBundle.

    Raises:
        InvalidRequestError: If the payload is not a valid OSC packet, or its
            bundles nest deeper than MAX_BUNDLE_DEPTH.
    """
    data = bytes(data)
    try:
        if osc_bundle.OscBundle.dgram_is_bundle(data):
            depth = bundle_depth(data)
            if depth > MAX_BUNDLE_DEPTH:
                raise InvalidRequestError(
                    f"OSC bundle nesting exceeds {MAX_BUNDLE_DEPTH} levels"
                )
            return _convert_bundle(osc_bundle.OscBundle(data))
        if osc_message.OscMessage.dgram_is_message(data):
            return _convert_message(osc_message.OscMessage(data))
    except InvalidRequestError:
        raise
    except _PARSE_ERRORS as e:
        raise InvalidRequestError(f"Malformed OSC packet: {e}") from e

    raise InvalidRequestError("Datagram is neither an OSC message nor an OSC bundle")


def bundle_depth(data: bytes) -> int:
    """
    Measure how deeply the bundles of a datagram nest, without parsing it.

    Walks the raw bundle framing ("#bundle\\0", time tag, then int32 size
    plus element, repeated) with an explicit stack. Malformed framing ends
    the walk for that bundle; the parser reports it afterwards.

    Args:
        data: Raw datagram payload.

    Returns:
        0 for a non-bundle, 1 for a bundle holding only messages, and so on.
        Stops counting once MAX_BUNDLE_DEPTH is exceeded.

    Example:
        >>> bundle_depth(OscMessageBuilder("/ping").build().dgram)
        0
    """
    if not data.startswith(_BUNDLE_PREFIX):
        return 0

    deepest = 0
    pending = [(0, len(data), 1)]
    while pending:
        start, end, depth = pending.pop()
        deepest = max(deepest, depth)
        if deepest > MAX_BUNDLE_DEPTH:
            break

        index = start + _BUNDLE_HEADER_SIZE
        while index + 4 <= end:
            (size,) = struct.unpack_from(">i", data, index)
            index += 4
            if size < 0 or index + size > end:
                break
            if data.startswith(_BUNDLE_PREFIX, index, index + size):
                pending.append((index, index + size, depth + 1))
            index += size

    return deepest


def _convert_message(raw: osc_message.OscMessage) -> OscMessage:
    """Convert a python-osc message, pairing parameters with type tags."""
    _, index = osc_types.get_string(raw.dgram, 0)
    type_tags, _ = osc_types.get_string(raw.dgram, index)
    if type_tags.startswith(","):
        type_tags = type_tags[1:]

    params = iter(raw.params)
    arguments: list[OscArgument] = []
    depth = 0
    for tag in type_tags:
        if depth:
            # Array contents are part of the list value already taken
            if tag == _ARRAY_START:
                depth += 1
            elif tag == _ARRAY_END:
                depth -= 1
            continue
        if tag == _ARRAY_START:
            depth = 1
        try:
            value = next(params)
        except StopIteration:
            raise InvalidRequestError(
                f"OSC message {raw.address!r} has fewer values than type tags",
                tag=tag,
            ) from None
        arguments.append(OscArgument(tag=tag, value=value))

    return OscMessage(address=raw.address, arguments=tuple(arguments))


def _convert_bundle(raw: osc_bundle.OscBundle) -> OscBundle:
    """
    Convert a python-osc bundle tree without recursing per nesting level.

    Each stack entry holds a raw bundle, an iterator over its contents and
    the converted elements collected so far. A bundle is built once its
    iterator is exhausted and appended to its parent's elements.
    """
    stack: list[tuple[osc_bundle.OscBundle, Iterator[Any], list[OscPacket]]] = [
        (raw, _contents(raw), [])
    ]
    while True:
        current, contents, elements = stack[-1]
        for content in contents:
            if isinstance(content, osc_bundle.OscBundle):
                stack.append((content, _contents(content), []))
                break
            elements.append(_convert_message(content))
        else:
            stack.pop()
            bundle = OscBundle(timetag=_timetag(current), elements=tuple(elements))
            if not stack:
                return bundle
            stack[-1][2].append(bundle)


def _contents(raw: osc_bundle.OscBundle) -> Iterator[Any]:
    """Iterate the parsed contents of a python-osc bundle in order."""
    return (raw.content(index) for index in range(raw.num_contents))


def _timetag(raw: osc_bundle.OscBundle) -> int:
    """Read the raw 64-bit NTP time tag from a bundle datagram."""
    # "#bundle\0" is 8 bytes, followed by the time tag
    (timetag,) = struct.unpack_from(">Q", raw.dgram, 8)
    return timetag


OscBundle.model_rebuild()
