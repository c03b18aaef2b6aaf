"""
Abstract OCA controller interface.

A controller is the party on whose behalf a device executes commands. The
device may call back into it to manage event subscriptions or to push
notifications. The bridge is a controller that never needs either.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from oscoca.ocp1.constants import OcaControllerFlags, OcaMessageType


class OcaController(ABC):
    """
    Abstract base class for OCA controllers.

    Implementations receive subscription management calls and outbound
    messages from the device they are connected to.
    """

    @property
    @abstractmethod
    def flags(self) -> OcaControllerFlags:
        """
        Capabilities of this controller.

        Returns:
            OcaControllerFlags, NONE if nothing optional is supported.
        """
        ...

    @abstractmethod
    async def add_subscription(self, subscription: Any) -> None:
        """
        Add an event subscription for this controller.

        Args:
            subscription: Subscription record from the subscription manager.
        """
        ...

    @abstractmethod
    async def remove_subscription(self, subscription: Any) -> None:
        """
        Remove an event subscription.

        Args:
            subscription: Subscription record from the subscription manager.
        """
        ...

    @abstractmethod
    async def remove_subscription_for_event(
        self,
        event: Any,
        property_id: Any | None,
        subscriber: Any,
    ) -> None:
        """
        Remove the subscription matching an event and subscriber.

        Args:
            event: Event the subscription refers to.
            property_id: Property filter, or None for all properties.
            subscriber: Subscriber method.
        """
        ...

    @abstractmethod
    async def send_message(self, message: Any, message_type: OcaMessageType) -> None:
        """
        Send a message (typically a notification) to this controller.

        Args:
            message: OCP.1 message to send.
            message_type: Message type of the PDU.
        """
        ...
