"""
OSC message to OCP.1 command dispatch.

For each message the dispatcher:
    1. resolves the address to a target ONo and method ID
    2. asks the value bridge registry for bridged values
    3. otherwise encodes the OSC arguments generically
    4. submits the command to the device and discards the response

Commands are fire-and-forget: the response status is logged, never acted on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from oscoca.bridging import ValueBridgeRegistry, create_default_registry
from oscoca.ocp1.constants import Ocp1Constants
from oscoca.ocp1.encoding import encode_parameters
from oscoca.ocp1.models import Ocp1Command
from oscoca.osc.address import resolve_address

if TYPE_CHECKING:
    from oscoca.device.controller import OcaController
    from oscoca.device.device import OcaDevice
    from oscoca.osc.packet import OscMessage

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """
    Builds and submits OCP.1 commands for OSC messages.

    Attributes:
        device: Device that resolves role paths and executes commands.
        controller: Controller the commands are sent on behalf of.
        registry: Value bridges consulted before generic encoding.

    Example:
        >>> dispatcher = CommandDispatcher(device, bridge)
        >>> command = await dispatcher.dispatch(message)
        >>> command.target_ono, str(command.method_id)
        (4097, '4.2')
    """

    def __init__(
        self,
        device: OcaDevice,
        controller: OcaController,
        registry: ValueBridgeRegistry | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            device: Device to resolve against and submit to.
            controller: Controller passed along with each command.
            registry: Value bridges. Defaults to create_default_registry().
        """
        self.device = device
        self.controller = controller
        self.registry = registry if registry is not None else create_default_registry()

    async def build_command(self, message: OscMessage) -> Ocp1Command:
        """
        Translate a message into a command without submitting it.

        Args:
            message: OSC message.

        Returns:
            Command addressed to the resolved object.

        Raises:
            BadMethodError: If the address does not name a method.
            ProcessingFailedError: If the role path matches no object.
            InvalidRequestError: If the arguments cannot be encoded.
        """
        resolved = await resolve_address(self.device, message.address)

        values = None
        target = self.device.resolve_object(resolved.target_ono)
        if target is not None:
            values = self.registry.bridge_values(target, message, resolved.method_id)

        parameters = encode_parameters(values if values is not None else message.arguments)

        return Ocp1Command(
            handle=Ocp1Constants.COMMAND_HANDLE,
            target_ono=resolved.target_ono,
            method_id=resolved.method_id,
            parameters=parameters,
        )

    async def dispatch(self, message: OscMessage) -> Ocp1Command:
        """
        Translate a message and submit the command to the device.

        Args:
            message: OSC message.

        Returns:
            The command that was submitted.

        Raises:
            Ocp1Error: If the message cannot be translated (see build_command).
        """
        command = await self.build_command(message)
        response = await self.device.handle_command(command, self.controller)
        logger.debug("%s %r -> %s", message.address, command, response.status_code.name)
        return command
