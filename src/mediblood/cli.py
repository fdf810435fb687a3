"""Command-line interface for the MediBlood order desk."""

import asyncio
import json
from typing import List, Optional

import typer
from loguru import logger
from typing_extensions import Annotated

from mediblood.config import get_settings
from mediblood.core import BothFailed, Listing, LocalSuccess, RetrievalResult
from mediblood.desk import OrderDesk
from mediblood.errors import DraftValidationError, SubmissionFailed
from mediblood.models import LineItem, OrderDraft, Record, RecordKind
from mediblood.utils.logging import setup_logging

app = typer.Typer(help="MediBlood order desk - place orders and blood requests, online or offline")


@app.callback()
def main(
    loglevel: Annotated[Optional[str], typer.Option("--loglevel", "-l", help="Logging level")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output")] = False,
) -> None:
    """Configure logging before running a command."""
    setup_logging("DEBUG" if verbose else loglevel)


def parse_item(spec: str) -> LineItem:
    """
    Parse a cart line given as ``SKU:QTY:PRICE[:NAME]``.

    Raises:
        DraftValidationError: If the line cannot be parsed
    """
    parts = spec.split(":", 3)
    if len(parts) < 3 or not parts[0].strip():
        raise DraftValidationError(f"Invalid item {spec!r}; expected SKU:QTY:PRICE[:NAME]")
    sku, qty, price = (p.strip() for p in parts[:3])
    name = parts[3].strip() if len(parts) == 4 else sku
    try:
        return LineItem(sku=sku, name=name, price=float(price), qty=int(qty))
    except ValueError as e:
        raise DraftValidationError(f"Invalid item {spec!r}: {e}") from e


def build_medicine_draft(
    items: List[str],
    name: str = "",
    phone: str = "",
    address: str = "",
    city: str = "",
    note: str = "",
) -> OrderDraft:
    """
    Turn command-line cart lines into a medicine order draft.

    Raises:
        DraftValidationError: If the cart is empty or a line is malformed
    """
    if not items:
        raise DraftValidationError("Add at least one item to your cart.")
    lines = [parse_item(spec) for spec in items]
    return OrderDraft.medicine(
        contact={"name": name, "phone": phone, "address": address, "city": city},
        items=[line.model_dump() for line in lines],
        note=note,
    )


def format_summary(record: Record) -> str:
    if record.kind is RecordKind.COMMODITY:
        return f"{record.total or 0:.2f} - {len(record.items or [])} items"
    request = record.request
    blood_type = request.blood_type if request else ""
    units = request.units if request else ""
    return f"{blood_type} - {units} units"


def format_row(record: Record) -> str:
    return "  ".join([
        record.id,
        record.kind.value,
        record.status,
        record.created_at,
        record.contact.name,
        format_summary(record),
    ])


async def _submit(draft: OrderDraft) -> None:
    desk = await OrderDesk.start(get_settings())
    try:
        outcome = await desk.place(draft)
    finally:
        await desk.aclose()

    if isinstance(outcome, BothFailed):
        raise SubmissionFailed(outcome.message or "Failed to place order.")
    if isinstance(outcome, LocalSuccess):
        typer.echo("Saved (offline mode).")
    else:
        typer.echo("Saved.")
    typer.echo(f"Order ID: {outcome.order_id}")


async def _track(order_id: str) -> RetrievalResult:
    desk = await OrderDesk.start(get_settings())
    try:
        return await desk.lookup(order_id or desk.last_submitted_id())
    finally:
        await desk.aclose()


async def _list() -> Listing:
    desk = await OrderDesk.start(get_settings())
    try:
        return await desk.list_all()
    finally:
        await desk.aclose()


async def _status() -> OrderDesk:
    desk = await OrderDesk.start(get_settings())
    await desk.aclose()
    return desk


def _run_submission(draft: OrderDraft) -> None:
    try:
        asyncio.run(_submit(draft))
    except SubmissionFailed as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)


@app.command()
def status() -> None:
    """Probe the order store and show whether orders are saved remotely."""
    desk = asyncio.run(_status())
    typer.echo(f"Mode: {desk.current_mode().value}")
    typer.echo(desk.banner.message)


@app.command()
def order(
    item: Annotated[Optional[List[str]], typer.Option("--item", "-i", help="Cart line as SKU:QTY:PRICE[:NAME]")] = None,
    name: Annotated[str, typer.Option("--name", help="Customer name")] = "",
    phone: Annotated[str, typer.Option("--phone", help="Customer phone")] = "",
    address: Annotated[str, typer.Option("--address", help="Delivery address")] = "",
    city: Annotated[str, typer.Option("--city", help="City")] = "",
    note: Annotated[str, typer.Option("--note", help="Note for the pharmacy")] = "",
) -> None:
    """Place a medicine order."""
    try:
        draft = build_medicine_draft(item or [], name=name, phone=phone, address=address, city=city, note=note)
    except DraftValidationError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)
    _run_submission(draft)


@app.command()
def blood(
    blood_type: Annotated[str, typer.Option("--blood-type", "-b", help="Blood type, e.g. O-")] = "",
    units: Annotated[str, typer.Option("--units", "-u", help="Number of units")] = "1",
    urgency: Annotated[str, typer.Option("--urgency", help="Urgency level")] = "Normal",
    hospital: Annotated[str, typer.Option("--hospital", help="Hospital")] = "",
    patient_name: Annotated[str, typer.Option("--patient", help="Patient name")] = "",
    name: Annotated[str, typer.Option("--name", help="Requester name")] = "",
    phone: Annotated[str, typer.Option("--phone", help="Requester phone")] = "",
    city: Annotated[str, typer.Option("--city", help="City")] = "",
    note: Annotated[str, typer.Option("--note", help="Additional details")] = "",
) -> None:
    """Submit a blood request."""
    draft = OrderDraft.blood(
        contact={"name": name, "phone": phone, "address": "", "city": city},
        request={
            "bloodType": blood_type,
            "units": units,
            "urgency": urgency,
            "hospital": hospital,
            "patientName": patient_name,
        },
        note=note,
    )
    _run_submission(draft)


@app.command()
def track(
    order_id: Annotated[str, typer.Argument(help="Order ID (defaults to the last submitted one)")] = "",
) -> None:
    """Look up an order or blood request by its ID."""
    result = asyncio.run(_track(order_id))
    if result.found:
        logger.debug(f"Order {result.record.id} served from {result.source.value} store")
        typer.echo(json.dumps(result.record.to_wire(), indent=2, ensure_ascii=False))
        return
    if result.message:
        typer.echo(result.message, err=True)
        raise typer.Exit(code=1)
    typer.echo("No order ID given and no previous order to track.", err=True)


@app.command("admin-list")
def admin_list() -> None:
    """List orders for administration."""
    listing = asyncio.run(_list())
    if not listing.ok:
        typer.echo(listing.notice, err=True)
        raise typer.Exit(code=1)
    if listing.notice:
        typer.echo(listing.notice)
    if not listing.records:
        typer.echo("No orders yet.")
        return
    for record in listing.records:
        typer.echo(format_row(record))


if __name__ == "__main__":
    app()
