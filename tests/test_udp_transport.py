"""Tests for AsyncUdpTransport over loopback."""

import asyncio
import logging

import pytest

from oscoca.exceptions import TransportError
from oscoca.transport.udp import AsyncUdpTransport


async def _send(payload, address):
    loop = asyncio.get_running_loop()
    sender, _ = await loop.create_datagram_endpoint(asyncio.DatagramProtocol, remote_addr=address)
    try:
        sender.sendto(payload)
    finally:
        sender.close()


class TestAsyncUdpTransport:
    """Tests for AsyncUdpTransport class."""

    @pytest.fixture
    def transport(self):
        """Create a transport on a free loopback port."""
        return AsyncUdpTransport("127.0.0.1", 0, max_datagram_size=64)

    @pytest.mark.asyncio
    async def test_open_reports_bound_port(self, transport):
        """Test the real port is reported once bound."""
        async with transport:
            host, port = transport.local_address
            assert host == "127.0.0.1"
            assert port != 0
            assert transport.is_open
        assert not transport.is_open

    @pytest.mark.asyncio
    async def test_receive(self, transport):
        """Test a datagram sent to the port is received."""
        async with transport:
            await _send(b"/ping", transport.local_address)
            datagram = await asyncio.wait_for(transport.receive(), 1.0)
        assert datagram.payload == b"/ping"
        assert datagram.address[0] == "127.0.0.1"

    @pytest.mark.asyncio
    async def test_oversize_dropped(self, transport, caplog):
        """Test datagrams over the size limit are dropped with a warning."""
        async with transport:
            with caplog.at_level(logging.WARNING, logger="oscoca.transport.udp"):
                await _send(b"x" * 65, transport.local_address)
                await _send(b"small", transport.local_address)
                datagram = await asyncio.wait_for(transport.receive(), 1.0)
        assert datagram.payload == b"small"
        assert "Dropping 65 byte datagram" in caplog.text

    @pytest.mark.asyncio
    async def test_bind_conflict(self, transport):
        """Test binding a port in use raises TransportError."""
        async with transport:
            other = AsyncUdpTransport(*transport.local_address)
            with pytest.raises(TransportError, match="Failed to bind"):
                await other.open()
            assert not other.is_open

    @pytest.mark.asyncio
    async def test_receive_when_closed_raises(self, transport):
        """Test that receiving on a closed transport raises."""
        with pytest.raises(TransportError):
            await transport.receive()

    @pytest.mark.asyncio
    async def test_reopen(self, transport):
        """Test the transport can be rebound after closing."""
        await transport.open()
        await transport.close()
        await transport.open()
        try:
            assert transport.is_open
        finally:
            await transport.close()

    @pytest.mark.asyncio
    async def test_double_open_raises(self, transport):
        """Test that opening twice raises error."""
        async with transport:
            with pytest.raises(TransportError):
                await transport.open()
