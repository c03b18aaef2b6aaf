"""
Transport layer for inbound OSC datagrams.

This package provides transport implementations that deliver raw
datagrams to the bridge.

Available transports:
- AsyncUdpTransport: asyncio UDP endpoint
- MockDatagramTransport: Mock transport for testing without sockets

Example:
    >>> from oscoca.transport import AsyncUdpTransport
    >>> async with AsyncUdpTransport("0.0.0.0", 8000) as transport:
    ...     datagram = await transport.receive()

Testing Example:
    >>> from oscoca.transport import MockDatagramTransport
    >>> mock = MockDatagramTransport()
    >>> mock.add_datagram(packet_bytes)
"""

from oscoca.transport.abc import AbstractDatagramTransport, Datagram
from oscoca.transport.mock import MockDatagramTransport
from oscoca.transport.udp import AsyncUdpTransport

__all__ = [
    "AbstractDatagramTransport",
    "AsyncUdpTransport",
    "Datagram",
    "MockDatagramTransport",
]
