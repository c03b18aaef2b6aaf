"""Typer CLI entrypoint."""

from __future__ import annotations

import asyncio
import logging

import typer
from pydantic import ValidationError

from oscoca.bridge import OscOcaBridge
from oscoca.config import BridgeSettings
from oscoca.device.demo import build_demo_device
from oscoca.exceptions import OscOcaError
from oscoca.osc.address import resolve_address, split_address

app = typer.Typer(help="Bridge OSC messages to AES70 (OCA) device commands")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise typer.BadParameter(f"Unknown log level {level!r}", param_hint="--log-level")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)


async def _serve(settings: BridgeSettings) -> None:
    device = await build_demo_device()
    async with OscOcaBridge(device, settings) as bridge:
        typer.echo(f"Bridging OSC on {bridge.local_address[0]}:{bridge.local_address[1]}")
        await bridge.wait()


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Listen address [env OSCOCA_HOST]"),
    port: int | None = typer.Option(None, "--port", help="Listen port [env OSCOCA_PORT]"),
    log_level: str = typer.Option("info", "--log-level", help="Logging level"),
) -> None:
    """Run the demo device behind an OSC bridge until interrupted."""
    _configure_logging(log_level)
    try:
        settings = BridgeSettings.from_env()
        overrides = {
            name: value
            for name, value in (("host", host), ("port", port))
            if value is not None
        }
        if overrides:
            settings = BridgeSettings.model_validate({**settings.model_dump(), **overrides})
        asyncio.run(_serve(settings))
    except KeyboardInterrupt:
        typer.echo("Stopped")
    except (OscOcaError, ValidationError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("resolve")
def resolve(address: str) -> None:
    """Show how ADDRESS maps onto the demo device.

    Prints the role path and method ID, and the target object number if the
    role path exists.
    """
    try:
        role_path, method_id = split_address(address)
        typer.echo(f"role path: {'/'.join(role_path)}")
        typer.echo(f"method: {method_id}")

        async def _resolve() -> int:
            device = await build_demo_device()
            resolved = await resolve_address(device, address)
            return resolved.target_ono

        typer.echo(f"target ONo: {asyncio.run(_resolve())}")
    except OscOcaError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
