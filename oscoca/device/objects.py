"""
OCA object classes for the in-memory device.

Each class declares its methods with the @oca_method decorator. Method IDs
follow the AES70 class hierarchy: the definition level is the depth of the
class that introduces the method.

    OcaRoot                     1       1.1 GetClassIdentification, 1.5 GetRole
    └── OcaWorker               1.1     2.1 GetEnabled, 2.2 SetEnabled
        ├── OcaActuator         1.1.1
        │   ├── OcaBasicActuator 1.1.1.1
        │   │   └── OcaBooleanActuator 1.1.1.1.1   5.1 GetSetting, 5.2 SetSetting
        │   ├── OcaMute         1.1.1.2 4.1 GetState, 4.2 SetState
        │   └── OcaGain         1.1.1.5 4.1 GetGain, 4.2 SetGain
        └── OcaBlock            1.1.3

Handlers receive the command parameters and return response parameters.
Raising Ocp1Error turns into a response with that status.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from oscoca.exceptions import Ocp1Error
from oscoca.ocp1.constants import OcaMuteState, OcaStatus
from oscoca.ocp1.encoding import decode_parameters, encode_parameters
from oscoca.ocp1.models import OcaMethodID, Ocp1Command, Ocp1Parameters, Ocp1Response
from oscoca.ocp1.values import OcaBoolean, OcaFloat32, OcaString, OcaUint8, OcaUint16

if TYPE_CHECKING:
    from oscoca.device.controller import OcaController

logger = logging.getLogger(__name__)

MethodHandler = Callable[[Any, Ocp1Parameters], Awaitable[Ocp1Parameters]]
PropertyListener = Callable[["OcaRoot", str, Any], None]

F = TypeVar("F", bound=MethodHandler)


def oca_method(method_id: str) -> Callable[[F], F]:
    """
    Mark a coroutine method as the handler for an OCA method.

    Args:
        method_id: Method ID in "<def_level>.<method_index>" form.

    Example:
        >>> class OcaThing(OcaWorker):
        ...     @oca_method("4.1")
        ...     async def get_thing(self, parameters):
        ...         return encode_parameters([])
    """
    parsed = OcaMethodID.from_string(method_id)

    def decorator(func: F) -> F:
        func._oca_method_id = parsed  # type: ignore[attr-defined]
        return func

    return decorator


def _collect_methods(cls: type) -> dict[OcaMethodID, str]:
    methods: dict[OcaMethodID, str] = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            method_id = getattr(attr, "_oca_method_id", None)
            if method_id is not None:
                methods[method_id] = name
    return methods


class OcaRoot:
    """
    Base class of all OCA objects.

    Attributes:
        role: Role name, unique among the members of the containing block.
        label: Optional human readable label.
        object_number: ONo assigned when the object is added to a device.
        container: Block holding this object, None for the root block.
    """

    CLASS_ID: ClassVar[str] = "1"
    CLASS_VERSION: ClassVar[int] = 2

    _methods: ClassVar[dict[OcaMethodID, str]] = {}

    def __init__(self, role: str, *, label: str | None = None) -> None:
        self.role = role
        self.label = label
        self.object_number: int | None = None
        self.container: OcaBlock | None = None
        self._listeners: list[PropertyListener] = []

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._methods = _collect_methods(cls)

    @property
    def role_path(self) -> tuple[str, ...]:
        """Roles from the root block (excluded) down to this object."""
        path: list[str] = []
        obj: OcaRoot | None = self
        while obj is not None and obj.container is not None:
            path.append(obj.role)
            obj = obj.container
        return tuple(reversed(path))

    @property
    def container_path(self) -> tuple[int, ...]:
        """Object numbers of the containing blocks, root block excluded."""
        path: list[int] = []
        block = self.container
        while block is not None and block.container is not None:
            if block.object_number is not None:
                path.append(block.object_number)
            block = block.container
        return tuple(reversed(path))

    @classmethod
    def supported_methods(cls) -> frozenset[OcaMethodID]:
        """Get the method IDs this class implements."""
        return frozenset(cls._methods)

    def add_listener(self, listener: PropertyListener) -> None:
        """
        Register a callback for property changes.

        Args:
            listener: Called with (object, property name, new value).
        """
        self._listeners.append(listener)

    def notify(self, property_name: str, value: Any) -> None:
        """Report a property change to all listeners."""
        logger.debug("%s %s set to %r", self, property_name, value)
        for listener in self._listeners:
            listener(self, property_name, value)

    async def handle_command(
        self,
        command: Ocp1Command,
        controller: OcaController | None = None,
    ) -> Ocp1Response:
        """
        Execute a command addressed to this object.

        Args:
            command: Command to execute.
            controller: Controller the command came from.

        Returns:
            Response carrying the status and any result parameters.
        """
        name = self._methods.get(command.method_id)
        if name is None:
            return Ocp1Response(handle=command.handle, status_code=OcaStatus.NOT_IMPLEMENTED)

        try:
            result = await getattr(self, name)(command.parameters)
        except Ocp1Error as e:
            return Ocp1Response(handle=command.handle, status_code=e.status)

        return Ocp1Response(handle=command.handle, parameters=result)

    @oca_method("1.1")
    async def get_class_identification(self, parameters: Ocp1Parameters) -> Ocp1Parameters:
        decode_parameters(parameters)
        return encode_parameters([
            OcaString(value=self.CLASS_ID),
            OcaUint16(value=self.CLASS_VERSION),
        ])

    @oca_method("1.5")
    async def get_role(self, parameters: Ocp1Parameters) -> Ocp1Parameters:
        decode_parameters(parameters)
        return encode_parameters([OcaString(value=self.role)])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(role={self.role!r}, ono={self.object_number})"


OcaRoot._methods = _collect_methods(OcaRoot)


class OcaWorker(OcaRoot):
    """Base class of objects doing signal processing or control work."""

    CLASS_ID = "1.1"

    def __init__(self, role: str, *, label: str | None = None, enabled: bool = True) -> None:
        super().__init__(role, label=label)
        self.enabled = enabled

    @oca_method("2.1")
    async def get_enabled(self, parameters: Ocp1Parameters) -> Ocp1Parameters:
        decode_parameters(parameters)
        return encode_parameters([OcaBoolean(value=self.enabled)])

    @oca_method("2.2")
    async def set_enabled(self, parameters: Ocp1Parameters) -> Ocp1Parameters:
        (enabled,) = decode_parameters(parameters, OcaBoolean)
        self.enabled = enabled.value
        self.notify("enabled", self.enabled)
        return Ocp1Parameters()


class OcaActuator(OcaWorker):
    CLASS_ID = "1.1.1"


class OcaBasicActuator(OcaActuator):
    CLASS_ID = "1.1.1.1"


class OcaBooleanActuator(OcaBasicActuator):
    """Two-state actuator, e.g. a switch."""

    CLASS_ID = "1.1.1.1.1"

    def __init__(self, role: str, *, label: str | None = None, setting: bool = False) -> None:
        super().__init__(role, label=label)
        self.setting = setting

    @oca_method("5.1")
    async def get_setting(self, parameters: Ocp1Parameters) -> Ocp1Parameters:
        decode_parameters(parameters)
        return encode_parameters([OcaBoolean(value=self.setting)])

    @oca_method("5.2")
    async def set_setting(self, parameters: Ocp1Parameters) -> Ocp1Parameters:
        (setting,) = decode_parameters(parameters, OcaBoolean)
        self.setting = setting.value
        self.notify("setting", self.setting)
        return Ocp1Parameters()


class OcaMute(OcaActuator):
    """Signal mute. State is an OcaMuteState, not a boolean."""

    CLASS_ID = "1.1.1.2"

    def __init__(
        self,
        role: str,
        *,
        label: str | None = None,
        state: OcaMuteState = OcaMuteState.UNMUTED,
    ) -> None:
        super().__init__(role, label=label)
        self.state = state

    @oca_method("4.1")
    async def get_state(self, parameters: Ocp1Parameters) -> Ocp1Parameters:
        decode_parameters(parameters)
        return encode_parameters([OcaUint8(value=int(self.state))])

    @oca_method("4.2")
    async def set_state(self, parameters: Ocp1Parameters) -> Ocp1Parameters:
        (state,) = decode_parameters(parameters, OcaUint8)
        try:
            self.state = OcaMuteState(state.value)
        except ValueError:
            raise Ocp1Error(
                OcaStatus.PARAMETER_OUT_OF_RANGE,
                f"Invalid mute state {state.value}",
            ) from None
        self.notify("state", self.state)
        return Ocp1Parameters()


class OcaGain(OcaActuator):
    """Gain stage, value in dB."""

    CLASS_ID = "1.1.1.5"

    def __init__(
        self,
        role: str,
        *,
        label: str | None = None,
        gain: float = 0.0,
        min_gain: float = -144.0,
        max_gain: float = 20.0,
    ) -> None:
        super().__init__(role, label=label)
        self.gain = gain
        self.min_gain = min_gain
        self.max_gain = max_gain

    @oca_method("4.1")
    async def get_gain(self, parameters: Ocp1Parameters) -> Ocp1Parameters:
        decode_parameters(parameters)
        return encode_parameters([
            OcaFloat32(value=self.gain),
            OcaFloat32(value=self.min_gain),
            OcaFloat32(value=self.max_gain),
        ])

    @oca_method("4.2")
    async def set_gain(self, parameters: Ocp1Parameters) -> Ocp1Parameters:
        (gain,) = decode_parameters(parameters, OcaFloat32)
        if not self.min_gain <= gain.value <= self.max_gain:
            raise Ocp1Error(
                OcaStatus.PARAMETER_OUT_OF_RANGE,
                f"Gain {gain.value} outside [{self.min_gain}, {self.max_gain}]",
            )
        self.gain = gain.value
        self.notify("gain", self.gain)
        return Ocp1Parameters()


class OcaBlock(OcaWorker):
    """Container of other objects. Members are kept in insertion order."""

    CLASS_ID = "1.1.3"

    def __init__(self, role: str, *, label: str | None = None) -> None:
        super().__init__(role, label=label)
        self._members: list[OcaRoot] = []

    @property
    def members(self) -> tuple[OcaRoot, ...]:
        """Get the action objects directly contained in this block."""
        return tuple(self._members)

    def add_member(self, member: OcaRoot) -> None:
        """
        Add an object to this block.

        Raises:
            Ocp1Error: With PARAMETER_ERROR if the object already has a
                container or its role is taken in this block.
        """
        if member.container is not None:
            raise Ocp1Error(OcaStatus.PARAMETER_ERROR, f"{member!r} already has a container")
        if any(existing.role == member.role for existing in self._members):
            raise Ocp1Error(OcaStatus.PARAMETER_ERROR, f"Role {member.role!r} already in use")
        member.container = self
        self._members.append(member)

    def remove_member(self, member: OcaRoot) -> None:
        """Remove an object from this block."""
        if member.container is not self:
            raise Ocp1Error(OcaStatus.PARAMETER_ERROR, f"{member!r} is not a member")
        self._members.remove(member)
        member.container = None
