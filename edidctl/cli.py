"""Typer CLI entrypoint."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from edidctl.core.errors import EdidctlError
from edidctl.core.model import DecodedBlock, Descriptor, DetailedTiming, DispatchMode, TextDescriptor, Unknown
from edidctl.core.service import EdidService

app = typer.Typer(help="Decode display identification (EDID) base blocks")

_DISPATCH_HELP = "Monitor descriptor classification: by sub-tag or legacy first-match order"


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _build_service() -> EdidService:
    service = EdidService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _describe_descriptor(descriptor: Descriptor) -> str:
    if isinstance(descriptor, DetailedTiming):
        return (
            f"{descriptor.kind} {descriptor.horizontal_active_pixels}x{descriptor.vertical_active_lines}"
            f" @ {descriptor.pixel_clock} kHz"
            f" (blanking {descriptor.horizontal_blanking_pixels}x{descriptor.vertical_blanking_lines},"
            f" {descriptor.horizontal_size}x{descriptor.vertical_size} mm)"
        )
    if isinstance(descriptor, TextDescriptor):
        return f"{descriptor.kind} {descriptor.text!r}"
    if isinstance(descriptor, Unknown):
        tag = "?" if descriptor.tag is None else f"0x{descriptor.tag:02x}"
        return f"{descriptor.kind} tag={tag} data={descriptor.data.hex()}"
    return descriptor.kind


def _render(block: DecodedBlock, service: EdidService, as_json: bool) -> None:
    edid = block.edid
    if as_json:
        payload = {"source": block.source, **edid.as_dict(), "trailing": block.trailing.hex()}
        payload["header"]["vendor_name"] = service.vendor_name(edid.header.vendor_code)
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    header = edid.header
    display = edid.display
    vendor = service.vendor_name(header.vendor_code) or "unknown vendor"
    typer.echo(f"Source: {block.source}")
    typer.echo(f"Vendor: {header.vendor_code} ({vendor})")
    typer.echo(f"Product: 0x{header.product:04x}  Serial: {header.serial}")
    typer.echo(f"Manufactured: week {header.week}, {header.manufacture_year}")
    typer.echo(f"Version: {header.version}.{header.revision}")
    typer.echo(
        f"Display: {display.width}x{display.height} cm, gamma {display.gamma_value:.2f},"
        f" input 0x{display.video_input:02x}, features 0x{display.features:02x}"
    )
    for index, descriptor in enumerate(edid.descriptors, start=1):
        typer.echo(f"Descriptor {index}: {_describe_descriptor(descriptor)}")
    if block.trailing:
        typer.echo(f"Trailing bytes: {len(block.trailing)}")


@app.command("decode")
def decode_file(
    path: Path = typer.Argument(..., help="Binary or hex dump of the block"),
    dispatch: DispatchMode | None = typer.Option(None, "--dispatch", help=_DISPATCH_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """Decode an identification block from a file."""
    try:
        service = _build_service()
        block = service.decode_file(path, dispatch=dispatch)
        _render(block, service, as_json)
    except EdidctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("connectors")
def list_connectors() -> None:
    """List display connectors exposed by the kernel and what is attached."""
    try:
        service = _build_service()
        connectors = service.list_connectors()
        if not connectors:
            typer.echo("No display connectors found")
            return

        for connector in connectors:
            summary = "-"
            if connector.edid_size:
                try:
                    block = service.decode_connector(connector.name)
                    summary = service.describe(block.edid)
                except EdidctlError as exc:
                    summary = f"<undecodable: {exc}>"
            typer.echo(f"{connector.name} [{connector.status}] {summary}")
    except EdidctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("show")
def show_connector(
    connector: str = typer.Argument(..., help="Connector name, e.g. card0-HDMI-A-1"),
    dispatch: DispatchMode | None = typer.Option(None, "--dispatch", help=_DISPATCH_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """Decode the identification block of an attached display."""
    try:
        service = _build_service()
        block = service.decode_connector(connector, dispatch=dispatch)
        _render(block, service, as_json)
    except EdidctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("vendor")
def lookup_vendor(code: str) -> None:
    """Look up a three-letter manufacturer ID."""
    try:
        service = _build_service()
        name = service.vendor_name(code)
        if name is None:
            typer.echo(f"Unknown vendor code '{code.upper()}'")
            raise typer.Exit(code=1)
        typer.echo(f"{code.upper()}: {name}")
    except EdidctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
