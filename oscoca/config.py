"""
Bridge configuration.

Settings are a frozen pydantic model, so invalid ports or sizes are
rejected when the settings are built rather than when the socket is bound.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX: Final[str] = "OSCOCA_"

DEFAULT_HOST: Final[str] = "0.0.0.0"
DEFAULT_PORT: Final[int] = 8000
DEFAULT_MAX_DATAGRAM_SIZE: Final[int] = 1500


class BridgeSettings(BaseModel):
    """
    Network settings for an OscOcaBridge.

    Attributes:
        host: Local address to listen on.
        port: UDP port to listen on. 0 picks a free port.
        max_datagram_size: Largest datagram accepted, in bytes.

    Example:
        >>> settings = BridgeSettings(port=9000)
        >>> settings.host, settings.port
        ('0.0.0.0', 9000)
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(default=DEFAULT_HOST, min_length=1, description="Listen address")
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535, description="Listen port")
    max_datagram_size: int = Field(
        default=DEFAULT_MAX_DATAGRAM_SIZE,
        ge=16,
        le=65507,
        description="Receive buffer size in bytes",
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BridgeSettings:
        """
        Build settings from OSCOCA_* environment variables.

        Reads OSCOCA_HOST, OSCOCA_PORT and OSCOCA_MAX_DATAGRAM_SIZE. Unset
        variables keep their defaults.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            BridgeSettings instance.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        environ = os.environ if environ is None else environ
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        return cls.model_validate(values)

    @property
    def address(self) -> tuple[str, int]:
        """Get (host, port)."""
        return self.host, self.port
