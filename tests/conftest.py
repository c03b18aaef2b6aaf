"""Shared fixtures: a small mixer device and OSC datagram builders."""

import struct
from dataclasses import dataclass

import pytest
from pythonosc import osc_bundle_builder
from pythonosc.osc_message_builder import OscMessageBuilder

from oscoca.device import OcaBlock, OcaBooleanActuator, OcaDevice, OcaGain, OcaMute
from oscoca.device.objects import OcaRoot


class RecordingDevice(OcaDevice):
    """OcaDevice that remembers every command and response."""

    def __init__(self):
        super().__init__()
        self.commands = []
        self.responses = []

    async def handle_command(self, command, controller=None):
        self.commands.append(command)
        response = await super().handle_command(command, controller)
        self.responses.append(response)
        return response


@dataclass
class MixerRig:
    """
    Device tree used across tests.

        Mixer/Gain/1    OcaGain
        Mixer/Mute      OcaMute
        Mute            OcaMute
        Switch          OcaBooleanActuator
    """

    device: RecordingDevice
    mixer: OcaBlock
    gain: OcaGain
    mixer_mute: OcaMute
    mute: OcaMute
    switch: OcaBooleanActuator


def place(device: OcaDevice, obj: OcaRoot, container: OcaBlock | None = None) -> OcaRoot:
    """Register obj and add it to container (root block by default)."""
    device.register(obj)
    (container or device.root_block).add_member(obj)
    return obj


@pytest.fixture
def rig():
    """Create the mixer device."""
    device = RecordingDevice()
    mixer = place(device, OcaBlock("Mixer"))
    gain_block = place(device, OcaBlock("Gain"), mixer)
    gain = place(device, OcaGain("1"), gain_block)
    mixer_mute = place(device, OcaMute("Mute"), mixer)
    mute = place(device, OcaMute("Mute"))
    switch = place(device, OcaBooleanActuator("Switch"))
    return MixerRig(
        device=device,
        mixer=mixer,
        gain=gain,
        mixer_mute=mixer_mute,
        mute=mute,
        switch=switch,
    )


def osc_message(address, *args):
    """
    Build an OSC message datagram.

    Each arg is either a value (type inferred by python-osc) or a
    (value, type_tag) tuple.
    """
    return build_message(address, *args).dgram


def build_message(address, *args):
    builder = OscMessageBuilder(address=address)
    for arg in args:
        if isinstance(arg, tuple):
            value, arg_type = arg
            builder.add_arg(value, arg_type=arg_type)
        else:
            builder.add_arg(arg)
    return builder.build()


def osc_bundle(*contents):
    """Build an OSC bundle datagram from python-osc messages or bundles."""
    return build_bundle(*contents).dgram


def build_bundle(*contents):
    builder = osc_bundle_builder.OscBundleBuilder(osc_bundle_builder.IMMEDIATELY)
    for content in contents:
        builder.add_content(content)
    return builder.build()


def nested_bundle(payload, depth):
    """Wrap a datagram in depth levels of single-element bundles."""
    for _ in range(depth):
        payload = b"#bundle\x00" + struct.pack(">Qi", 1, len(payload)) + payload
    return payload
