"""
Value bridge registry.

Generic translation maps every OSC argument to the OCP.1 type implied by its
tag. Some object classes expect something else: an OcaMute takes an
OcaMuteState enum, but OSC senders naturally send a boolean. A value bridge
is a function registered for an object class that produces the parameter
values for a message itself.

Lookup walks the target's class MRO, so a bridge registered for a base
class also covers its subclasses unless a more specific one is registered.

Architecture:
    ValueBridgeRegistry
        ├── OcaMute -> bridge_mute_state
        └── ... (user-registered bridges)

A bridge declines by raising MethodNotBridgedError; the caller then falls
back to the generic encoding.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from oscoca.exceptions import MethodNotBridgedError
from oscoca.ocp1.constants import OcaMuteState
from oscoca.ocp1.models import OcaMethodID
from oscoca.ocp1.values import OcaUint8, OcaValue

if TYPE_CHECKING:
    from oscoca.device.objects import OcaRoot
    from oscoca.osc.packet import OscMessage

logger = logging.getLogger(__name__)

ValueBridge = Callable[["OcaRoot", "OscMessage", OcaMethodID], Sequence[OcaValue]]
"""
Bridge function contract.

Called with (target object, OSC message, method ID). Returns the values to
encode, in order, or raises MethodNotBridgedError to decline.
"""

MUTE_SET_STATE = OcaMethodID(def_level=4, method_index=2)


def bridge_mute_state(
    target: OcaRoot,
    message: OscMessage,
    method_id: OcaMethodID,
) -> Sequence[OcaValue]:
    """
    Translate a boolean SetState on an OcaMute into an OcaMuteState.

    True mutes, False unmutes. Anything other than SetState with exactly
    one boolean argument is declined.

    SetState is method 4.2: OcaMute adds its methods at definition level 4
    (OcaRoot 1, OcaWorker 2, OcaActuator 3), and SetState is its second.
    Senders addressing another ID such as 2.1 (OcaWorker GetEnabled) fall
    through to the generic encoding.

    Raises:
        MethodNotBridgedError: If the method or arguments do not match.

    Example:
        >>> bridge_mute_state(mute, OscMessage(address="/Mute/4.2", arguments=(true_arg,)),
        ...                   MUTE_SET_STATE)
        [OcaUint8(value=1)]
    """
    if method_id != MUTE_SET_STATE:
        raise MethodNotBridgedError(f"Method {method_id} is not bridged for {type(target).__name__}")

    arguments = message.arguments
    if len(arguments) != 1 or arguments[0].tag not in ("T", "F"):
        raise MethodNotBridgedError("SetState bridging needs exactly one boolean argument")

    state = OcaMuteState.MUTED if arguments[0].value else OcaMuteState.UNMUTED
    return [OcaUint8(value=int(state))]


class ValueBridgeRegistry:
    """
    Registry of value bridges by object class.

    Example:
        >>> registry = ValueBridgeRegistry()
        >>> registry.register(OcaMute, bridge_mute_state)
        >>> values = registry.bridge_values(mute, message, method_id)
        >>> if values is None:
        ...     values = [to_oca_value(arg) for arg in message.arguments]
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._bridges: dict[type, ValueBridge] = {}
        self._resolved: dict[type, ValueBridge | None] = {}

    def register(self, object_class: type, bridge: ValueBridge) -> None:
        """
        Register a bridge for an object class.

        Args:
            object_class: Class the bridge applies to, including subclasses.
            bridge: Bridge function.

        Note:
            Replaces any existing bridge for the same class.
        """
        self._bridges[object_class] = bridge
        self._resolved.clear()

    def unregister(self, object_class: type) -> bool:
        """
        Remove a bridge registration.

        Args:
            object_class: Class to unregister.

        Returns:
            True if a bridge was removed, False if none was registered.
        """
        if object_class in self._bridges:
            del self._bridges[object_class]
            self._resolved.clear()
            return True
        return False

    def lookup(self, object_class: type) -> ValueBridge | None:
        """
        Get the bridge that applies to a class.

        The most specific registration along the MRO wins. The result is
        cached per class until the registrations change.

        Args:
            object_class: Concrete class of the target object.

        Returns:
            Bridge if one applies, None otherwise.
        """
        try:
            return self._resolved[object_class]
        except KeyError:
            pass

        bridge = next(
            (self._bridges[klass] for klass in object_class.__mro__ if klass in self._bridges),
            None,
        )
        self._resolved[object_class] = bridge
        return bridge

    def has_bridge(self, object_class: type) -> bool:
        """Check if a bridge applies to a class."""
        return self.lookup(object_class) is not None

    @property
    def registered_classes(self) -> frozenset[type]:
        """Get all classes with a directly registered bridge."""
        return frozenset(self._bridges.keys())

    def bridge_values(
        self,
        target: OcaRoot,
        message: OscMessage,
        method_id: OcaMethodID,
    ) -> list[OcaValue] | None:
        """
        Run the applicable bridge for a message.

        Args:
            target: Resolved target object.
            message: Message being translated.
            method_id: Method the message invokes.

        Returns:
            The values to encode, or None if no bridge applies or the bridge
            declined.
        """
        bridge = self.lookup(type(target))
        if bridge is None:
            return None

        try:
            values = list(bridge(target, message, method_id))
        except MethodNotBridgedError as e:
            logger.debug("Bridge for %s declined %s: %s", type(target).__name__, method_id, e)
            return None

        return values

    def clear(self) -> None:
        """Remove all registered bridges."""
        self._bridges.clear()
        self._resolved.clear()

    def __repr__(self) -> str:
        return f"ValueBridgeRegistry(bridges={len(self._bridges)})"


def create_default_registry() -> ValueBridgeRegistry:
    """
    Create a new registry with the built-in bridges registered.

    Registers:
    - OcaMute: boolean SetState to OcaMuteState

    Returns:
        ValueBridgeRegistry with all built-in bridges.
    """
    from oscoca.device.objects import OcaMute

    registry = ValueBridgeRegistry()
    registry.register(OcaMute, bridge_mute_state)
    return registry
