"""Tests for CommandDispatcher."""

import struct

import pytest

from oscoca.bridge import OscOcaBridge
from oscoca.bridging import ValueBridgeRegistry, create_default_registry
from oscoca.device import OcaMute
from oscoca.dispatcher import CommandDispatcher
from oscoca.exceptions import BadMethodError, InvalidRequestError, ProcessingFailedError
from oscoca.ocp1.constants import OcaMuteState, OcaStatus
from oscoca.ocp1.values import OcaUint8
from oscoca.osc.packet import OscArgument, OscMessage
from oscoca.transport.mock import MockDatagramTransport


def _message(address, *arguments):
    return OscMessage(
        address=address,
        arguments=tuple(OscArgument(tag=tag, value=value) for tag, value in arguments),
    )


class TestCommandDispatcher:
    """Tests for CommandDispatcher."""

    @pytest.fixture
    def controller(self, rig):
        """Create a bridge to act as the controller."""
        return OscOcaBridge(rig.device, transport=MockDatagramTransport())

    @pytest.fixture
    def dispatcher(self, rig, controller):
        """Create a dispatcher with the default bridges."""
        return CommandDispatcher(rig.device, controller)

    @pytest.mark.asyncio
    async def test_generic_float(self, rig, dispatcher):
        """Test /Mixer/Gain/1/5.2 with 0.8 becomes a float32 command."""
        command = await dispatcher.build_command(_message("/Mixer/Gain/1/5.2", ("f", 0.8)))

        assert command.handle == 0
        assert command.target_ono == rig.gain.object_number
        assert str(command.method_id) == "5.2"
        assert command.parameters.parameter_count == 1
        assert command.parameters.parameter_data == struct.pack(">f", 0.8)

    @pytest.mark.asyncio
    async def test_dispatch_submits_to_device(self, rig, dispatcher, controller):
        """Test dispatch hands the command to the device."""
        command = await dispatcher.dispatch(_message("/Mixer/Gain/1/4.2", ("f", -6.0)))

        assert rig.device.commands == [command]
        assert rig.device.responses[0].status_code == OcaStatus.OK
        assert rig.gain.gain == pytest.approx(-6.0)

    @pytest.mark.asyncio
    async def test_device_errors_ignored(self, rig, dispatcher):
        """Test a failing command status does not raise."""
        await dispatcher.dispatch(_message("/Mixer/Gain/1/5.2", ("f", 0.8)))
        assert rig.device.responses[0].status_code == OcaStatus.NOT_IMPLEMENTED

    @pytest.mark.asyncio
    async def test_argument_order(self, dispatcher):
        """Test arguments are encoded in message order."""
        command = await dispatcher.build_command(
            _message("/Switch/1.1", ("i", 1), ("s", "a"), ("F", False))
        )
        assert command.parameters.parameter_count == 3
        assert command.parameters.parameter_data == b"\x00\x00\x00\x01\x00\x01a\x00"

    @pytest.mark.asyncio
    async def test_no_arguments(self, dispatcher):
        """Test a message without arguments has an empty parameter blob."""
        command = await dispatcher.build_command(_message("/Switch/5.1"))
        assert command.parameters.parameter_count == 0
        assert command.parameters.parameter_data == b""

    @pytest.mark.asyncio
    async def test_default_mute_bridge(self, rig, dispatcher):
        """Test boolean SetState on a mute is sent as OcaMuteState."""
        await dispatcher.dispatch(_message("/Mute/4.2", ("T", True)))

        command = rig.device.commands[0]
        assert command.parameters.parameter_data == bytes([OcaMuteState.MUTED])
        assert rig.device.responses[0].status_code == OcaStatus.OK
        assert rig.mute.state == OcaMuteState.MUTED

    @pytest.mark.asyncio
    async def test_custom_bridge_for_mute(self, rig, controller):
        """Test /Mute/2.1 with true and a mute bridge encodes the enum value."""
        registry = ValueBridgeRegistry()

        def bridge(target, message, method_id):
            state = OcaMuteState.MUTED if message.arguments[0].value else OcaMuteState.UNMUTED
            return [OcaUint8(value=int(state))]

        registry.register(OcaMute, bridge)
        dispatcher = CommandDispatcher(rig.device, controller, registry)

        command = await dispatcher.build_command(_message("/Mute/2.1", ("T", True)))
        assert command.target_ono == rig.mute.object_number
        assert command.parameters.parameter_count == 1
        assert command.parameters.parameter_data == b"\x01"

    @pytest.mark.asyncio
    async def test_bridge_count_may_differ(self, rig, controller):
        """Test bridged values replace the arguments entirely."""
        registry = ValueBridgeRegistry()
        registry.register(
            OcaMute,
            lambda target, message, method_id: [OcaUint8(value=7), OcaUint8(value=8)],
        )
        dispatcher = CommandDispatcher(rig.device, controller, registry)

        command = await dispatcher.build_command(_message("/Mute/4.2", ("i", 1), ("i", 2), ("i", 3)))
        assert command.parameters.parameter_count == 2
        assert command.parameters.parameter_data == b"\x07\x08"

    @pytest.mark.asyncio
    async def test_declining_bridge_matches_generic(self, rig, controller):
        """Test a declined bridge gives the same command as no bridge."""
        message = _message("/Mute/4.1", ("i", 5))
        with_bridge = CommandDispatcher(rig.device, controller, create_default_registry())
        without_bridge = CommandDispatcher(rig.device, controller, ValueBridgeRegistry())

        assert await with_bridge.build_command(message) == await without_bridge.build_command(message)

    @pytest.mark.asyncio
    async def test_bad_method(self, rig, dispatcher):
        """Test /OnlyOneSegment is a bad method and nothing is submitted."""
        with pytest.raises(BadMethodError):
            await dispatcher.dispatch(_message("/OnlyOneSegment"))
        assert rig.device.commands == []

    @pytest.mark.asyncio
    async def test_unresolved_role_path(self, rig, dispatcher):
        """Test an unknown role path fails and nothing is submitted."""
        with pytest.raises(ProcessingFailedError):
            await dispatcher.dispatch(_message("/Nowhere/4.2", ("f", 1.0)))
        assert rig.device.commands == []

    @pytest.mark.asyncio
    async def test_unencodable_argument(self, rig, dispatcher):
        """Test an argument without OCP.1 encoding fails and nothing is submitted."""
        with pytest.raises(InvalidRequestError):
            await dispatcher.dispatch(_message("/Switch/5.2", ("N", None)))
        assert rig.device.commands == []

    def test_default_registry(self, rig, controller):
        """Test the default registry is used when none is given."""
        dispatcher = CommandDispatcher(rig.device, controller)
        assert dispatcher.registry.has_bridge(OcaMute)
