"""
Abstract datagram transport interface.

This module defines the abstract base class for all inbound transports.
A transport binds a local endpoint and hands out received datagrams one at
a time.

The transport layer is responsible for:
- Binding and releasing the local endpoint
- Delivering datagrams in arrival order
- Dropping datagrams that exceed the configured size

Implementations:
- AsyncUdpTransport: asyncio UDP endpoint
- MockDatagramTransport: For testing without sockets
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from types import TracebackType


@dataclass(frozen=True)
class Datagram:
    """
    One received datagram.

    Attributes:
        payload: Raw datagram bytes.
        address: Sender address as reported by the socket, e.g. (host, port).
    """

    payload: bytes
    address: Any = None


class AbstractDatagramTransport(ABC):
    """
    Abstract base class for datagram transports.

    A transport can be opened, closed and opened again. receive() blocks
    until a datagram arrives; cancelling the awaiting task interrupts it.

    Transports support async context manager protocol for safe resource
    management:

        async with AsyncUdpTransport("0.0.0.0", 8000) as transport:
            datagram = await transport.receive()

    Attributes:
        is_open: Whether the endpoint is currently bound.
        local_address: Bound address, or the configured one while closed.
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the transport is currently bound.

        Returns:
            True if open and receiving, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def local_address(self) -> tuple[str, int]:
        """
        Get the local endpoint.

        Returns:
            (host, port) tuple. Reflects the actual port once bound.
        """
        ...

    @abstractmethod
    async def open(self) -> None:
        """
        Bind the local endpoint.

        Raises:
            TransportError: If the endpoint cannot be bound or is already open.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """
        Release the local endpoint.

        Safe to call multiple times (idempotent). After closing, the
        transport can be reopened with open().
        """
        ...

    @abstractmethod
    async def receive(self) -> Datagram:
        """
        Wait for the next datagram.

        Returns:
            The next received Datagram.

        Raises:
            TransportError: If the transport is not open or the socket fails.
        """
        ...

    async def __aenter__(self) -> AbstractDatagramTransport:
        """Async context manager entry - opens the transport."""
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - closes the transport."""
        await self.close()
