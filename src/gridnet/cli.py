"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich import print
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from gridnet.application.interfaces import IPrompter
from gridnet.config import ROW_KEY_COLUMN
from gridnet.domain.models import RequestKind, RequestOutcome, SortSpec
from gridnet.errors import (
    ConfigurationError,
    GridNetError,
    InvalidRequestKind,
)
from gridnet.events.bus import EventBus
from gridnet.events.grid_events import RowsFetchedEvent
from gridnet.gui.viewmodels.grid_net_viewmodel import GridNetViewModel
from gridnet.infrastructure.row_store import InMemoryRowStore
from gridnet.infrastructure.transport import HttpxTransport
from gridnet.settings import NetConfig, load_config

app = typer.Typer(help="Talk to a data-grid service the way the grid does")
console = Console()


class ConsolePrompter(IPrompter):
    def __init__(self, assume_yes: bool = False) -> None:
        self._assume_yes = assume_yes

    def ask(self, message: str) -> bool:
        if self._assume_yes:
            console.print(message, "[dim](yes)[/dim]")
            return True
        return Confirm.ask(message, console=console)

    def inform(self, message: str) -> None:
        console.print(f"[yellow]{message}")

    def alert(self, message: str) -> None:
        console.print(f"[red]{message}")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ConfigurationError, InvalidRequestKind) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except GridNetError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _parse_params(values: List[str]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {item!r}", param_hint="--param")
        params[key] = value
    return params


def _build(config: NetConfig, store: InMemoryRowStore, bus: EventBus, assume_yes: bool) -> GridNetViewModel:
    return GridNetViewModel(
        replace(config, issue_initial_read=False),
        store,
        HttpxTransport.from_settings(config.transport),
        ConsolePrompter(assume_yes),
        event_bus=bus,
    )


def _wait(future, timeout: float) -> Optional[RequestOutcome]:
    if future is None:
        return None
    return future.result(timeout=timeout)


def _rows_table(rows: List[Dict[str, Any]]) -> Table:
    table = Table(show_lines=False)
    columns: List[str] = []
    for row in rows:
        for key in row:
            if key != ROW_KEY_COLUMN and key not in columns:
                columns.append(key)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*("" if row.get(c) is None else str(row.get(c)) for c in columns))
    return table


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("check-config")
@_handle_errors
def check_config(config_path: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    """Validate a configuration file and list its endpoints."""

    config = load_config(config_path)
    table = Table("request", "endpoint")
    for key, url in config.endpoints.items():
        table.add_row(key, url or "[dim]-[/dim]")
    console.print(table)
    print(
        f"[green]OK[/green] {config.items_per_page} rows per page, "
        f"history {'on' if config.enable_history else 'off'}, locale {config.locale}"
    )


@app.command()
@_handle_errors
def read(
    config_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    page: int = typer.Option(1, "--page", "-p", min=1),
    param: List[str] = typer.Option([], "--param", help="Form value as key=value"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Sort column"),
    descending: bool = typer.Option(False, "--desc"),
    timeout: float = typer.Option(60.0, "--timeout"),
) -> None:
    """Read one page and print it."""

    config = load_config(config_path)
    bus = EventBus()
    store = InMemoryRowStore(form_data=_parse_params(param), event_bus=bus)
    vm = _build(config, store, bus, assume_yes=True)
    fetched: List[RowsFetchedEvent] = []
    vm.event_bus.subscribe(RowsFetchedEvent, fetched.append)
    try:
        if sort:
            future = vm.orchestrator.initiate_read(page, False, SortSpec(sort, not descending))
        else:
            future = vm.orchestrator.initiate_read(page, reuse_last_form_data=False)
        outcome = _wait(future, timeout)
    finally:
        vm.dispose()

    if outcome is None or not fetched:
        raise typer.Exit(1)
    console.print(_rows_table(store.rows))
    event = fetched[-1]
    print(f"page {event.page} - {event.row_count} of {event.total_count} row(s)")


@app.command()
@_handle_errors
def send(
    kind: str = typer.Argument(..., help="create, update, delete or modify"),
    config_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    rows_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON array of rows"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    full: bool = typer.Option(False, "--full", help="Send every row as rowList"),
    timeout: float = typer.Option(60.0, "--timeout"),
) -> None:
    """Send rows from a JSON file.

    Rows go out as new rows (``createList``), or all of them as ``rowList``
    with --full.  Rows read from a file carry no edit or delete marks, so
    update and delete only make sense with --full.
    """

    request_kind = RequestKind.parse(kind)
    if not full and request_kind in (RequestKind.UPDATE, RequestKind.DELETE):
        raise InvalidRequestKind(
            request_kind.value,
            f"{request_kind.value} needs --full: rows from a file are never marked as changed",
        )
    config = load_config(config_path)
    try:
        rows = json.loads(rows_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(str(exc), param_hint="ROWS_PATH") from exc
    if not isinstance(rows, list):
        raise typer.BadParameter("Expected a JSON array", param_hint="ROWS_PATH")

    bus = EventBus()
    store = InMemoryRowStore(event_bus=bus)
    for row in rows:
        store.append_row(row)
    vm = _build(config, store, bus, assume_yes=yes)
    try:
        future = vm.request(
            request_kind,
            only_checked_rows=False,
            only_modified_rows=not full,
        )
        outcome = _wait(future, timeout)
    finally:
        vm.dispose()

    if outcome is None:
        print("[yellow]Nothing sent")
        raise typer.Exit(1)
    if outcome.response is None or not outcome.response.is_success:
        raise typer.Exit(1)
    print(f"[green]{request_kind.value} accepted (HTTP {outcome.http_status})")


if __name__ == "__main__":  # pragma: no cover
    app()
