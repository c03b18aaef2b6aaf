"""
Pydantic models for OCP.1 commands.

All models are frozen: a command is built once per resolved OSC message and
handed to the device executor unchanged.
"""

from __future__ import annotations

import re
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from oscoca.ocp1.constants import OcaStatus, Ocp1Constants

_METHOD_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"([0-9]+)\.([0-9]+)")


class OcaMethodID(BaseModel):
    """
    Method identifier: class definition level plus method index.

    Written in text form as "<def_level>.<method_index>", e.g. "4.2" for
    SetGain on an OcaGain object.

    Example:
        >>> method_id = OcaMethodID.from_string("4.2")
        >>> method_id.def_level, method_id.method_index
        (4, 2)
        >>> str(method_id)
        '4.2'
    """

    model_config = ConfigDict(frozen=True)

    def_level: int = Field(ge=0, le=0xFFFF, description="Class definition level")
    method_index: int = Field(ge=0, le=0xFFFF, description="Method index within the level")

    @classmethod
    def from_string(cls, token: str) -> OcaMethodID:
        """
        Parse a method identifier from its "<uint>.<uint>" text form.

        Args:
            token: Method token, decimal ASCII digits only.

        Returns:
            OcaMethodID instance.

        Raises:
            ValueError: If the token is malformed or a component exceeds
                the 16-bit range.
        """
        match = _METHOD_ID_PATTERN.fullmatch(token)
        if match is None:
            raise ValueError(f"Method token must be '<uint>.<uint>', got {token!r}")
        return cls(def_level=int(match.group(1)), method_index=int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.def_level}.{self.method_index}"

    def __repr__(self) -> str:
        return f"OcaMethodID({self})"


class Ocp1Parameters(BaseModel):
    """
    Encoded command parameters.

    parameter_data is the concatenation of the encoded values and
    parameter_count the number of values it holds.
    """

    model_config = ConfigDict(frozen=True)

    parameter_count: int = Field(default=0, ge=0, le=Ocp1Constants.MAX_PARAMETER_COUNT)
    parameter_data: bytes = b""

    def __repr__(self) -> str:
        return f"Ocp1Parameters(count={self.parameter_count}, data={self.parameter_data.hex()})"


class Ocp1Command(BaseModel):
    """
    OCP.1 command addressed to one object.

    Attributes:
        handle: Command handle used to correlate responses. Commands sent by
            the bridge expect no response and use Ocp1Constants.COMMAND_HANDLE.
        target_ono: Object number of the target object.
        method_id: Method to invoke.
        parameters: Encoded parameters.
    """

    model_config = ConfigDict(frozen=True)

    handle: int = Field(default=Ocp1Constants.COMMAND_HANDLE, ge=0, le=0xFFFFFFFF)
    target_ono: int = Field(ge=0, le=0xFFFFFFFF)
    method_id: OcaMethodID
    parameters: Ocp1Parameters = Field(default_factory=Ocp1Parameters)

    def __repr__(self) -> str:
        return (
            f"Ocp1Command(target={self.target_ono}, method={self.method_id}, "
            f"count={self.parameters.parameter_count})"
        )


class Ocp1Response(BaseModel):
    """Response produced by executing a command."""

    model_config = ConfigDict(frozen=True)

    handle: int = Field(default=Ocp1Constants.COMMAND_HANDLE, ge=0, le=0xFFFFFFFF)
    status_code: OcaStatus = OcaStatus.OK
    parameters: Ocp1Parameters = Field(default_factory=Ocp1Parameters)

    @property
    def is_ok(self) -> bool:
        """Check if the command succeeded."""
        return self.status_code == OcaStatus.OK


class OcaObjectSearchResult(BaseModel):
    """
    One match from a role path search of the object tree.

    Only the fields requested through OcaObjectSearchResultFlags are set.
    """

    model_config = ConfigDict(frozen=True)

    ono: int | None = None
    class_identification: str | None = None
    container_path: tuple[int, ...] | None = None
    role: str | None = None
    label: str | None = None
