"""CLI for linkfinder.

Commands:
    find <text> [--select N]   - Show candidates for text, optionally resolve one
    shorten <url>              - Create a short link for url
"""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from linkfinder.clients.link_store import HttpLinkStore
from linkfinder.controller import Candidate, ResolutionStatus, SearchOrCreateController, SessionState
from linkfinder.core.setting import settings

app = typer.Typer(
    name="linkfinder",
    help="Find existing short links or create new ones",
    no_args_is_help=True,
)
console = Console()

StoreUrlOption = Annotated[
    Optional[str], typer.Option("--store-url", help="Link store base URL (default: LINK_STORE_URL)")
]


@app.callback()
def main(
    debug: Annotated[bool, typer.Option("--debug", "-d", help="Turn debug logging on")] = False,
) -> None:
    """Configure logging for every command."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _print_candidates(state: SessionState) -> None:
    if not state.candidates:
        console.print("[dim]No candidates[/dim]")
        return

    table = Table(title=f"Candidates for '{state.input_text.strip()}'")
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Alias")
    table.add_column("Target")
    for index, candidate in enumerate(state.candidates, start=1):
        table.add_row(
            str(index),
            candidate.kind.value,
            candidate.alias or "",
            candidate.label if candidate.is_create else candidate.target,
        )
    console.print(table)


def _print_outcome(state: SessionState) -> None:
    if state.status is ResolutionStatus.RESOLVED and state.resolved_link:
        link = state.resolved_link
        console.print(f"[green]{link.alias}[/green] → {link.target}")
        if link.views:
            console.print(
                f"[dim]views: today {link.views.today}, "
                f"week {link.views.week}, all {link.views.all}[/dim]"
            )
    else:
        kind = state.error_kind.value if state.error_kind else "unknown"
        console.print(f"[red]Resolution failed: {kind}[/red]")


async def _find(text: str, select: Optional[int], store_url: Optional[str]) -> SessionState:
    store = HttpLinkStore(base_url=store_url)
    try:
        async with SearchOrCreateController(store) as controller:
            controller.set_input(text)
            state = await controller.settle()
            if state.error_kind:
                console.print(f"[yellow]Search failed ({state.error_kind.value}); you can still shorten[/yellow]")
            _print_candidates(state)

            if select is None:
                return state
            if not 1 <= select <= len(state.candidates):
                raise typer.BadParameter(f"--select must be between 1 and {len(state.candidates)}")

            controller.select_candidate(state.candidates[select - 1])
            return await controller.settle()
    finally:
        await store.aclose()


async def _shorten(url: str, store_url: Optional[str]) -> SessionState:
    store = HttpLinkStore(base_url=store_url)
    try:
        async with SearchOrCreateController(store) as controller:
            controller.select_candidate(Candidate.create(url.strip()))
            return await controller.settle()
    finally:
        await store.aclose()


@app.command()
def find(
    text: Annotated[str, typer.Argument(help="Partial alias or URL")],
    select: Annotated[Optional[int], typer.Option("--select", "-s", help="Resolve candidate N (1-based)")] = None,
    store_url: StoreUrlOption = None,
) -> None:
    """Show the candidates for TEXT, optionally resolving one of them."""
    state = asyncio.run(_find(text, select, store_url))
    if select is None:
        return
    _print_outcome(state)
    if state.status is not ResolutionStatus.RESOLVED:
        raise typer.Exit(code=1)


@app.command()
def shorten(
    url: Annotated[str, typer.Argument(help="Destination URL to shorten")],
    store_url: StoreUrlOption = None,
) -> None:
    """Create a short link for URL."""
    if not url.strip():
        raise typer.BadParameter("URL must not be empty")
    state = asyncio.run(_shorten(url, store_url))
    _print_outcome(state)
    if state.status is not ResolutionStatus.RESOLVED:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
