"""
OSC to OCA bridge session.

The bridge owns a datagram transport and at most one receive-loop task.
Every received datagram is decoded, flattened into messages, and each
message is translated into an OCP.1 command and submitted to the device.

The session implements a small state machine:
    STOPPED -> run() -> RUNNING
    RUNNING -> run() -> RUNNING (loop restarted, port rebound)
    RUNNING -> stop() -> STOPPED
    RUNNING -> fatal transport error -> FAILED

Example:
    >>> from oscoca import OscOcaBridge, BridgeSettings
    >>> from oscoca.device import OcaDevice, OcaGain
    >>>
    >>> async def main():
    ...     device = OcaDevice()
    ...     await device.add(OcaGain("Gain"))
    ...     async with OscOcaBridge(device, BridgeSettings(port=8000)) as bridge:
    ...         await bridge.wait()
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from oscoca.config import BridgeSettings
from oscoca.device.controller import OcaController
from oscoca.dispatcher import CommandDispatcher
from oscoca.exceptions import OscOcaError
from oscoca.ocp1.constants import OcaControllerFlags, OcaMessageType
from oscoca.osc.flatten import flatten_packet
from oscoca.osc.packet import decode_packet
from oscoca.transport.udp import AsyncUdpTransport

if TYPE_CHECKING:
    from types import TracebackType

    from oscoca.bridging import ValueBridgeRegistry
    from oscoca.device.device import OcaDevice
    from oscoca.transport.abc import AbstractDatagramTransport

# Module logger
logger = logging.getLogger(__name__)


class BridgeState(Enum):
    """Bridge session states."""

    STOPPED = auto()
    """No receive loop is running."""

    RUNNING = auto()
    """Receive loop is bound and dispatching."""

    FAILED = auto()
    """Receive loop ended with a transport error."""


class OscOcaBridge(OcaController):
    """
    Receives OSC datagrams and dispatches them as OCP.1 commands.

    The bridge acts as the OCA controller on whose behalf commands run. It
    never subscribes to events or receives notifications, so the controller
    methods are no-ops.

    Message-level failures (bad address, unknown role path, unencodable
    argument) drop that message only; the loop keeps receiving. Transport
    failures end the loop and are re-raised by wait().

    The loop task holds a reference to the bridge, so dropping the last
    reference does not stop it. Use the bridge as an async context manager,
    or call stop(), to tear the loop down and release the port.

    Attributes:
        state: Current session state.
        device: Device commands are submitted to.
        transport: The underlying datagram transport.
        messages_dispatched: Number of messages submitted to the device.
        messages_dropped: Number of messages or datagrams dropped.

    Example:
        >>> bridge = OscOcaBridge(device, BridgeSettings(port=8000))
        >>> await bridge.run()
        >>> try:
        ...     await bridge.wait()
        ... finally:
        ...     await bridge.stop()
    """

    def __init__(
        self,
        device: OcaDevice,
        settings: BridgeSettings | None = None,
        *,
        transport: AbstractDatagramTransport | None = None,
        registry: ValueBridgeRegistry | None = None,
    ) -> None:
        """
        Initialize the bridge.

        Args:
            device: Device to resolve addresses against and submit to.
            settings: Listen address and buffer size. Defaults to
                BridgeSettings().
            transport: Transport to receive from. Defaults to an
                AsyncUdpTransport built from settings.
            registry: Value bridges. Defaults to create_default_registry().
        """
        self._settings = settings if settings is not None else BridgeSettings()
        if transport is None:
            transport = AsyncUdpTransport(
                self._settings.host,
                self._settings.port,
                self._settings.max_datagram_size,
            )
        self._transport = transport
        self._device = device
        self._dispatcher = CommandDispatcher(device, self, registry)
        self._state = BridgeState.STOPPED
        self._task: asyncio.Task[None] | None = None
        self._lock = asyncio.Lock()
        self.messages_dispatched = 0
        self.messages_dropped = 0

    @property
    def state(self) -> BridgeState:
        """Get the current session state."""
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if the receive loop is running."""
        return self._state == BridgeState.RUNNING

    @property
    def device(self) -> OcaDevice:
        """Get the target device."""
        return self._device

    @property
    def transport(self) -> AbstractDatagramTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def dispatcher(self) -> CommandDispatcher:
        """Get the command dispatcher."""
        return self._dispatcher

    @property
    def settings(self) -> BridgeSettings:
        """Get the bridge settings."""
        return self._settings

    @property
    def local_address(self) -> tuple[str, int]:
        """Get the address the transport is (or will be) bound to."""
        return self._transport.local_address

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """
        Start the receive loop, restarting it if already running.

        Any existing loop is cancelled and awaited first, so its port is
        released before the new loop binds. Returns once the new loop has
        bound its endpoint.

        Raises:
            TransportError: If the endpoint cannot be bound.
        """
        async with self._lock:
            if self._task is not None:
                logger.info("Restarting OSC bridge")
            await self._cancel_task()

            bound: asyncio.Future[None] = asyncio.get_running_loop().create_future()
            task = asyncio.create_task(self._run(bound), name="oscoca-receive-loop")
            self._task = task
            await asyncio.wait({bound, task}, return_when=asyncio.FIRST_COMPLETED)

            if task.done() and not task.cancelled() and task.exception() is not None:
                raise task.exception()  # type: ignore[misc]

    async def stop(self) -> None:
        """
        Stop the receive loop.

        Cancels the loop task and waits for it to release the transport.
        Safe to call when not running.
        """
        async with self._lock:
            if self._task is None:
                return
            await self._cancel_task()
            self._state = BridgeState.STOPPED
            logger.info("OSC bridge stopped")

    async def wait(self) -> None:
        """
        Wait for the current receive loop to end.

        Returns when the loop is stopped or there is none.

        Raises:
            TransportError: If the loop ended with a transport error.
        """
        task = self._task
        if task is None:
            return
        await asyncio.wait({task})
        if not task.cancelled() and task.exception() is not None:
            raise task.exception()  # type: ignore[misc]

    async def _cancel_task(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    async def _run(self, bound: asyncio.Future[None]) -> None:
        transport = self._transport
        try:
            await transport.open()
            self._state = BridgeState.RUNNING
            bound.set_result(None)
            logger.info("OSC bridge listening on %s:%d", *transport.local_address)

            while True:
                datagram = await transport.receive()
                await self.handle_datagram(datagram.payload, datagram.address)

        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._state = BridgeState.FAILED
            logger.error("OSC bridge receive loop failed: %s", e)
            raise
        finally:
            await transport.close()

    # ------------------------------------------------------------------
    # Datagram handling
    # ------------------------------------------------------------------

    async def handle_datagram(self, payload: bytes, address: Any = None) -> int:
        """
        Decode a datagram and dispatch every message it contains.

        Failures are contained: an undecodable datagram is dropped, and a
        message that cannot be translated is dropped without affecting the
        other messages of the same bundle.

        Args:
            payload: Raw datagram bytes.
            address: Sender address, for logging.

        Returns:
            Number of messages dispatched.
        """
        try:
            packet = decode_packet(payload)
        except OscOcaError as e:
            self.messages_dropped += 1
            logger.debug("Dropping datagram from %s: %s", address, e)
            return 0
        except Exception:
            self.messages_dropped += 1
            logger.warning(
                "Unexpected error decoding %d byte datagram from %s",
                len(payload),
                address,
                exc_info=True,
            )
            return 0

        dispatched = 0
        for message in flatten_packet(packet):
            try:
                await self._dispatcher.dispatch(message)
            except OscOcaError as e:
                self.messages_dropped += 1
                logger.debug("Dropping %r from %s: %s", message, address, e)
            except Exception:
                self.messages_dropped += 1
                logger.warning(
                    "Unexpected error handling %r from %s",
                    message,
                    address,
                    exc_info=True,
                )
            else:
                dispatched += 1

        self.messages_dispatched += dispatched
        return dispatched

    # ------------------------------------------------------------------
    # OcaController
    # ------------------------------------------------------------------

    @property
    def flags(self) -> OcaControllerFlags:
        """The bridge supports no optional controller features."""
        return OcaControllerFlags.NONE

    async def add_subscription(self, subscription: Any) -> None:
        pass

    async def remove_subscription(self, subscription: Any) -> None:
        pass

    async def remove_subscription_for_event(
        self,
        event: Any,
        property_id: Any | None,
        subscriber: Any,
    ) -> None:
        pass

    async def send_message(self, message: Any, message_type: OcaMessageType) -> None:
        pass

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    async def __aenter__(self) -> OscOcaBridge:
        """Async context manager entry - starts the receive loop."""
        await self.run()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - stops the receive loop."""
        await self.stop()

    def __repr__(self) -> str:
        host, port = self.local_address
        return f"OscOcaBridge({host}:{port}, state={self._state.name})"
