"""
Mock transport for testing.

This module provides a mock datagram transport that allows testing the
bridge without sockets. Datagrams are queued by the test and handed out by
receive() in FIFO order.

Example:
    >>> from oscoca.transport import MockDatagramTransport
    >>> from oscoca import OscOcaBridge
    >>>
    >>> mock = MockDatagramTransport()
    >>> mock.add_datagram(OscMessageBuilder("/Mixer/Gain/4.2").build().dgram)
    >>>
    >>> async with OscOcaBridge(device, transport=mock):
    ...     await mock.wait_idle()
"""

from __future__ import annotations

import asyncio
from typing import Any

from oscoca.exceptions import TransportError
from oscoca.transport.abc import AbstractDatagramTransport, Datagram


class MockDatagramTransport(AbstractDatagramTransport):
    """
    Mock datagram transport for testing without sockets.

    Records how often it was opened and closed, and can be told to fail the
    next open() or receive() to exercise error paths.

    Attributes:
        open_count: Number of successful open() calls.
        close_count: Number of close() calls on an open transport.
        received_count: Number of datagrams handed out by receive().

    Example:
        >>> mock = MockDatagramTransport()
        >>> mock.add_datagram(b"/ping\\x00\\x00\\x00,\\x00\\x00\\x00")
        >>>
        >>> async with mock:
        ...     datagram = await mock.receive()
        ...     assert datagram.payload.startswith(b"/ping")
    """

    def __init__(self, local_address: tuple[str, int] = ("127.0.0.1", 8000)) -> None:
        """
        Initialize the mock transport.

        Args:
            local_address: Address reported by local_address.
        """
        self._local_address = local_address
        self._is_open = False
        self._queue: asyncio.Queue[Datagram] = asyncio.Queue()
        self._open_error: BaseException | None = None
        self._receive_error: BaseException | None = None
        self._idle = asyncio.Event()
        self.open_count = 0
        self.close_count = 0
        self.received_count = 0

    @property
    def is_open(self) -> bool:
        """Check if the mock transport is open."""
        return self._is_open

    @property
    def local_address(self) -> tuple[str, int]:
        """Get the mock local address."""
        return self._local_address

    @property
    def pending(self) -> int:
        """Get the number of datagrams not yet received."""
        return self._queue.qsize()

    def add_datagram(self, payload: bytes, address: Any = ("127.0.0.1", 9000)) -> None:
        """
        Queue a datagram for receive().

        Args:
            payload: Datagram bytes.
            address: Sender address to report.
        """
        self._idle.clear()
        self._queue.put_nowait(Datagram(payload=bytes(payload), address=address))

    def add_datagrams(self, *payloads: bytes) -> None:
        """
        Queue several datagrams from the default sender.

        Args:
            *payloads: Datagram bytes, in arrival order.
        """
        for payload in payloads:
            self.add_datagram(payload)

    def fail_next_open(self, error: BaseException) -> None:
        """Make the next open() raise error."""
        self._open_error = error

    def fail_next_receive(self, error: BaseException) -> None:
        """Make the next receive() raise error once the queue is drained."""
        self._idle.clear()
        self._receive_error = error

    async def wait_idle(self, timeout: float = 1.0) -> None:
        """
        Wait until every queued datagram has been received and handled.

        The transport counts as idle when receive() is called with nothing
        left to hand out, meaning the consumer finished the previous
        datagram.

        Args:
            timeout: Seconds to wait before giving up.

        Raises:
            asyncio.TimeoutError: If the consumer does not catch up in time.
        """
        await asyncio.wait_for(self._idle.wait(), timeout)

    async def open(self) -> None:
        """
        Open the mock transport.

        Raises:
            TransportError: If already open.
        """
        if self._open_error is not None:
            error, self._open_error = self._open_error, None
            raise error
        if self._is_open:
            raise TransportError("Mock transport already open")
        self._is_open = True
        self.open_count += 1

    async def close(self) -> None:
        """Close the mock transport. Queued datagrams are kept."""
        if self._is_open:
            self.close_count += 1
        self._is_open = False

    async def receive(self) -> Datagram:
        """
        Hand out the next queued datagram.

        Blocks while the queue is empty, like a real socket.

        Raises:
            TransportError: If the transport is not open.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")

        if self._queue.empty():
            if self._receive_error is not None:
                error, self._receive_error = self._receive_error, None
                raise error
            self._idle.set()

        datagram = await self._queue.get()
        self.received_count += 1
        return datagram
