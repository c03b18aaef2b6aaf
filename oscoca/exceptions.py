"""
Exception hierarchy for oscoca.

All exceptions inherit from OscOcaError. The design follows these principles:

1. Errors raised while translating a single OSC message carry an OCA status
   code, so they map directly onto the OCP.1 status taxonomy
2. The "fall through to generic encoding" signal used by value bridges is an
   exception of its own and never reaches the sender
3. Transport errors are distinct from translation errors: they end the
   receive loop, translation errors only drop one message
"""

from __future__ import annotations

from typing import Final

from oscoca.ocp1.constants import OcaStatus


class OscOcaError(Exception):
    """
    Base exception for all oscoca errors.

    All library-specific exceptions inherit from this class, allowing
    callers to catch all oscoca errors with a single except clause.
    """

    pass


class Ocp1Error(OscOcaError):
    """
    Error carrying an OCP.1 status code.

    Raised whenever a message cannot be turned into a command, or a command
    cannot be executed. The status attribute holds the OcaStatus that an
    OCP.1 device would report for the same condition.
    """

    def __init__(self, status: OcaStatus, message: str | None = None) -> None:
        self.status = OcaStatus(status)
        self.message = message or STATUS_MESSAGES.get(self.status, "Unknown status")
        super().__init__(f"{self.status.name.lower()}: {self.message}")


class BadMethodError(Ocp1Error):
    """
    Address pattern does not name a method.

    Raised when an address pattern has fewer than two segments, or its
    trailing segment is not a "<def_level>.<method_index>" token.
    """

    def __init__(self, message: str | None = None, *, address: str | None = None) -> None:
        super().__init__(OcaStatus.BAD_METHOD, message)
        self.address = address

    def __str__(self) -> str:
        base = super().__str__()
        if self.address is not None:
            return f"{base} (address={self.address!r})"
        return base


class ProcessingFailedError(Ocp1Error):
    """
    Role path lookup found no object.

    Raised when the role path of an address pattern matches nothing in the
    device object tree.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        role_path: tuple[str, ...] | None = None,
    ) -> None:
        super().__init__(OcaStatus.PROCESSING_FAILED, message)
        self.role_path = role_path

    def __str__(self) -> str:
        base = super().__str__()
        if self.role_path is not None:
            return f"{base} (role_path={'/'.join(self.role_path)})"
        return base


class InvalidRequestError(Ocp1Error):
    """
    Request cannot be decoded or encoded.

    Raised when:
    - An inbound datagram is not a valid OSC packet
    - An OSC argument has no OCP.1 encoding
    - A message carries more parameters than a command can hold
    """

    def __init__(self, message: str | None = None, *, tag: str | None = None) -> None:
        super().__init__(OcaStatus.INVALID_REQUEST, message)
        self.tag = tag

    def __str__(self) -> str:
        base = super().__str__()
        if self.tag is not None:
            return f"{base} (tag={self.tag!r})"
        return base


class MethodNotBridgedError(OscOcaError):
    """
    Value bridge declined a method.

    Raised by a value bridge to signal that the generic argument encoding
    should be used for this method. Never surfaced to the sender.
    """

    pass


class TransportError(OscOcaError):
    """
    Transport-level error.

    Raised for low-level datagram transport issues:
    - Address cannot be bound
    - Socket errors while receiving
    - Operations on a closed transport
    """

    pass


STATUS_MESSAGES: Final[dict[OcaStatus, str]] = {
    OcaStatus.OK: "OK",
    OcaStatus.PROTOCOL_VERSION_ERROR: "Protocol version error",
    OcaStatus.DEVICE_ERROR: "Device error",
    OcaStatus.LOCKED: "Object is locked",
    OcaStatus.BAD_FORMAT: "Bad parameter format",
    OcaStatus.BAD_ONO: "Unknown object number",
    OcaStatus.PARAMETER_ERROR: "Parameter error",
    OcaStatus.PARAMETER_OUT_OF_RANGE: "Parameter out of range",
    OcaStatus.NOT_IMPLEMENTED: "Method not implemented",
    OcaStatus.INVALID_REQUEST: "Invalid request",
    OcaStatus.PROCESSING_FAILED: "Processing failed",
    OcaStatus.BAD_METHOD: "Bad method",
    OcaStatus.PARTIALLY_SUCCEEDED: "Partially succeeded",
    OcaStatus.TIMEOUT: "Timeout",
    OcaStatus.BUFFER_OVERFLOW: "Buffer overflow",
    OcaStatus.PERMISSION_DENIED: "Permission denied",
}

_STATUS_EXCEPTIONS: Final[dict[OcaStatus, type[Ocp1Error]]] = {
    OcaStatus.BAD_METHOD: BadMethodError,
    OcaStatus.PROCESSING_FAILED: ProcessingFailedError,
    OcaStatus.INVALID_REQUEST: InvalidRequestError,
}


def raise_for_status(status: OcaStatus | int) -> None:
    """
    Raise the matching Ocp1Error if the given status is not OK.

    Args:
        status: OCA status code to check.

    Raises:
        Ocp1Error: If the status is anything other than OK. Statuses with a
            dedicated subclass raise that subclass.
    """
    status = OcaStatus(status)
    if status == OcaStatus.OK:
        return
    exc_class = _STATUS_EXCEPTIONS.get(status)
    if exc_class is not None:
        raise exc_class()
    raise Ocp1Error(status)
