"""
Async UDP transport using asyncio datagram endpoints.

This module provides the transport used to receive OSC packets from the
network. A DatagramProtocol feeds received datagrams into an asyncio.Queue
that receive() awaits, so cancelling the receiving task interrupts the wait
without losing queued datagrams.

Datagrams larger than max_datagram_size are dropped with a warning. The
default of 1500 bytes matches a typical Ethernet MTU.

Example:
    >>> transport = AsyncUdpTransport("0.0.0.0", 8000)
    >>> async with transport:
    ...     datagram = await transport.receive()
    ...     print(datagram.address, len(datagram.payload))
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Union

from oscoca.exceptions import TransportError
from oscoca.transport.abc import AbstractDatagramTransport, Datagram

logger = logging.getLogger(__name__)

DEFAULT_MAX_DATAGRAM_SIZE = 1500

_QueueItem = Union[Datagram, BaseException]


class _OscDatagramProtocol(asyncio.DatagramProtocol):
    """DatagramProtocol that queues datagrams for an AsyncUdpTransport."""

    def __init__(self, queue: asyncio.Queue[_QueueItem], max_datagram_size: int) -> None:
        self._queue = queue
        self._max_datagram_size = max_datagram_size
        self.closed: asyncio.Future[None] = asyncio.get_running_loop().create_future()

    def datagram_received(self, data: bytes, addr: Any) -> None:
        if len(data) > self._max_datagram_size:
            logger.warning(
                "Dropping %d byte datagram from %s (max %d)",
                len(data),
                addr,
                self._max_datagram_size,
            )
            return
        self._queue.put_nowait(Datagram(payload=bytes(data), address=addr))

    def error_received(self, exc: Exception) -> None:
        logger.warning("UDP socket error: %s", exc)

    def connection_lost(self, exc: Exception | None) -> None:
        if exc is not None:
            self._queue.put_nowait(exc)
        if not self.closed.done():
            self.closed.set_result(None)


class AsyncUdpTransport(AbstractDatagramTransport):
    """
    Async UDP transport bound to a local address.

    Attributes:
        local_address: (host, port); the real port once bound, which matters
            when binding port 0.
        is_open: Whether the socket is currently bound.

    Example:
        >>> transport = AsyncUdpTransport("127.0.0.1", 0)
        >>> await transport.open()
        >>> try:
        ...     host, port = transport.local_address
        ...     datagram = await transport.receive()
        ... finally:
        ...     await transport.close()
    """

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 8000,
        max_datagram_size: int = DEFAULT_MAX_DATAGRAM_SIZE,
    ) -> None:
        """
        Initialize the UDP transport.

        Args:
            host: Local address to bind.
            port: Local port to bind (0 picks a free port).
            max_datagram_size: Largest datagram accepted, in bytes.
        """
        self._host = host
        self._port = port
        self._max_datagram_size = max_datagram_size
        self._transport: asyncio.DatagramTransport | None = None
        self._protocol: _OscDatagramProtocol | None = None
        self._queue: asyncio.Queue[_QueueItem] | None = None

    @property
    def is_open(self) -> bool:
        """Check if the socket is bound."""
        return self._transport is not None and not self._transport.is_closing()

    @property
    def local_address(self) -> tuple[str, int]:
        """Get the bound (host, port), or the configured one when closed."""
        if self._transport is not None:
            sockname = self._transport.get_extra_info("sockname")
            if sockname:
                return sockname[0], sockname[1]
        return self._host, self._port

    @property
    def max_datagram_size(self) -> int:
        """Get the largest accepted datagram size."""
        return self._max_datagram_size

    async def open(self) -> None:
        """
        Bind the UDP socket.

        Raises:
            TransportError: If already open or the address cannot be bound.
        """
        if self.is_open:
            raise TransportError(f"UDP transport already open on {self.local_address}")

        queue: asyncio.Queue[_QueueItem] = asyncio.Queue()
        loop = asyncio.get_running_loop()
        try:
            transport, protocol = await loop.create_datagram_endpoint(
                lambda: _OscDatagramProtocol(queue, self._max_datagram_size),
                local_addr=(self._host, self._port),
            )
        except OSError as e:
            raise TransportError(f"Failed to bind {self._host}:{self._port}: {e}") from e

        self._transport = transport
        self._protocol = protocol
        self._queue = queue
        logger.debug("Bound UDP endpoint %s:%d", *self.local_address)

    async def close(self) -> None:
        """
        Release the UDP socket.

        Safe to call multiple times. Datagrams still queued are discarded.
        Returns once the socket is released, so the port can be rebound
        immediately.
        """
        transport, protocol = self._transport, self._protocol
        self._transport = None
        self._protocol = None
        self._queue = None

        if transport is not None:
            logger.debug("Closing UDP endpoint %s", transport.get_extra_info("sockname"))
            transport.close()
        if protocol is not None:
            await protocol.closed

    async def receive(self) -> Datagram:
        """
        Wait for the next datagram.

        Returns:
            The next Datagram in arrival order.

        Raises:
            TransportError: If the transport is not open or the socket
                was lost with an error.
        """
        if self._queue is None or not self.is_open:
            raise TransportError("UDP transport is not open")

        item = await self._queue.get()
        if isinstance(item, BaseException):
            raise TransportError(f"UDP socket lost: {item}") from item
        return item

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        host, port = self.local_address
        return f"AsyncUdpTransport({host!r}, {port}, {status})"
