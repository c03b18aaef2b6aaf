"""Tests for the value bridge registry."""

import pytest

from oscoca.bridging import (
    MUTE_SET_STATE,
    ValueBridgeRegistry,
    bridge_mute_state,
    create_default_registry,
)
from oscoca.device import OcaActuator, OcaBooleanActuator, OcaGain, OcaMute, OcaRoot
from oscoca.exceptions import MethodNotBridgedError
from oscoca.ocp1.constants import OcaMuteState
from oscoca.ocp1.models import OcaMethodID
from oscoca.ocp1.values import OcaInt8, OcaUint8
from oscoca.osc.packet import OscArgument, OscMessage


def _message(*arguments):
    return OscMessage(address="/Mute/4.2", arguments=tuple(arguments))


TRUE = OscArgument(tag="T", value=True)
FALSE = OscArgument(tag="F", value=False)


class TestBridgeMuteState:
    """Tests for the built-in OcaMute bridge."""

    def test_true_mutes(self):
        """Test True becomes MUTED."""
        values = bridge_mute_state(OcaMute("Mute"), _message(TRUE), MUTE_SET_STATE)
        assert list(values) == [OcaUint8(value=OcaMuteState.MUTED)]

    def test_false_unmutes(self):
        """Test False becomes UNMUTED."""
        values = bridge_mute_state(OcaMute("Mute"), _message(FALSE), MUTE_SET_STATE)
        assert list(values) == [OcaUint8(value=OcaMuteState.UNMUTED)]

    def test_other_method_declined(self):
        """Test methods other than SetState are declined."""
        with pytest.raises(MethodNotBridgedError):
            bridge_mute_state(OcaMute("Mute"), _message(TRUE), OcaMethodID.from_string("4.1"))

    def test_set_state_is_level_four(self):
        """Test SetState sits at OcaMute's own definition level, not 2.1."""
        assert str(MUTE_SET_STATE) == "4.2"
        with pytest.raises(MethodNotBridgedError):
            bridge_mute_state(OcaMute("Mute"), _message(TRUE), OcaMethodID.from_string("2.1"))

    @pytest.mark.parametrize(
        "arguments",
        [(), (TRUE, TRUE), (OscArgument(tag="i", value=1),)],
    )
    def test_other_arguments_declined(self, arguments):
        """Test anything but one boolean argument is declined."""
        with pytest.raises(MethodNotBridgedError):
            bridge_mute_state(OcaMute("Mute"), _message(*arguments), MUTE_SET_STATE)


class TestValueBridgeRegistry:
    """Tests for ValueBridgeRegistry."""

    @pytest.fixture
    def registry(self):
        """Create an empty registry."""
        return ValueBridgeRegistry()

    def test_empty(self, registry):
        """Test a new registry has no bridges."""
        assert registry.registered_classes == frozenset()
        assert registry.lookup(OcaMute) is None
        assert registry.has_bridge(OcaMute) is False

    def test_register_and_lookup(self, registry):
        """Test a registered bridge is found for its class."""
        registry.register(OcaMute, bridge_mute_state)
        assert registry.lookup(OcaMute) is bridge_mute_state
        assert registry.registered_classes == frozenset({OcaMute})

    def test_lookup_walks_mro(self, registry):
        """Test a base class registration covers subclasses."""
        bridge = lambda target, message, method_id: []  # noqa: E731
        registry.register(OcaActuator, bridge)
        assert registry.lookup(OcaGain) is bridge
        assert registry.lookup(OcaBooleanActuator) is bridge
        assert registry.lookup(OcaRoot) is None

    def test_most_specific_wins(self, registry):
        """Test a subclass registration takes precedence."""
        base = lambda target, message, method_id: []  # noqa: E731
        registry.register(OcaActuator, base)
        registry.register(OcaMute, bridge_mute_state)
        assert registry.lookup(OcaMute) is bridge_mute_state
        assert registry.lookup(OcaGain) is base

    def test_cache_invalidated_on_register(self, registry):
        """Test cached negative lookups are dropped when a bridge is added."""
        assert registry.lookup(OcaGain) is None
        bridge = lambda target, message, method_id: []  # noqa: E731
        registry.register(OcaActuator, bridge)
        assert registry.lookup(OcaGain) is bridge

    def test_unregister(self, registry):
        """Test removing a registration."""
        registry.register(OcaMute, bridge_mute_state)
        assert registry.lookup(OcaMute) is bridge_mute_state
        assert registry.unregister(OcaMute) is True
        assert registry.lookup(OcaMute) is None
        assert registry.unregister(OcaMute) is False

    def test_clear(self, registry):
        """Test clearing all registrations."""
        registry.register(OcaMute, bridge_mute_state)
        registry.clear()
        assert registry.lookup(OcaMute) is None
        assert registry.registered_classes == frozenset()

    def test_bridge_values_no_bridge(self, registry):
        """Test None is returned when no bridge applies."""
        assert registry.bridge_values(OcaGain("Gain"), _message(TRUE), MUTE_SET_STATE) is None

    def test_bridge_values_declined(self, registry):
        """Test None is returned when the bridge declines."""
        registry.register(OcaMute, bridge_mute_state)
        method_id = OcaMethodID.from_string("4.1")
        assert registry.bridge_values(OcaMute("Mute"), _message(TRUE), method_id) is None

    def test_bridge_values_verbatim(self, registry):
        """Test bridged values are returned as-is, whatever their count."""
        values = [OcaUint8(value=1), OcaInt8(value=-1), OcaUint8(value=3)]
        registry.register(OcaGain, lambda target, message, method_id: tuple(values))
        result = registry.bridge_values(OcaGain("Gain"), _message(TRUE), MUTE_SET_STATE)
        assert result == values

    def test_bridge_receives_arguments(self, registry):
        """Test the bridge is called with target, message and method ID."""
        calls = []

        def bridge(target, message, method_id):
            calls.append((target, message, method_id))
            return []

        registry.register(OcaGain, bridge)
        target = OcaGain("Gain")
        message = _message(TRUE)
        registry.bridge_values(target, message, MUTE_SET_STATE)
        assert calls == [(target, message, MUTE_SET_STATE)]

    def test_repr(self, registry):
        """Test repr shows the bridge count."""
        registry.register(OcaMute, bridge_mute_state)
        assert repr(registry) == "ValueBridgeRegistry(bridges=1)"


class TestCreateDefaultRegistry:
    """Tests for create_default_registry."""

    def test_mute_registered(self):
        """Test the mute bridge is registered by default."""
        registry = create_default_registry()
        assert registry.lookup(OcaMute) is bridge_mute_state
        assert registry.has_bridge(OcaGain) is False

    def test_independent_instances(self):
        """Test each call returns a fresh registry."""
        first = create_default_registry()
        first.clear()
        assert create_default_registry().has_bridge(OcaMute) is True
