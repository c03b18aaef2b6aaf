"""
OSC (source protocol) layer.

This package contains the inbound protocol handling:
- Packet model and decoding via python-osc
- Bundle flattening
- Address pattern resolution to OCA role paths and method IDs
"""

from oscoca.osc.address import ResolvedAddress, resolve_address, split_address
from oscoca.osc.flatten import count_messages, flatten_packet
from oscoca.osc.packet import OscArgument, OscBundle, OscMessage, OscPacket, decode_packet

__all__ = [
    # Packets
    "OscArgument",
    "OscMessage",
    "OscBundle",
    "OscPacket",
    "decode_packet",
    # Flattening
    "flatten_packet",
    "count_messages",
    # Addressing
    "ResolvedAddress",
    "split_address",
    "resolve_address",
]
