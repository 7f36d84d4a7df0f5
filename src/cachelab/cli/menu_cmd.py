"""Interactive caching playground.

Usage:
    cachelab menu
    cachelab menu --store memory

Pick a strategy, then set, get and check its key repeatedly to watch TTLs
decay, slide and dependent entries go stale.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import typer

from cachelab.cli.common import StoreKind

if TYPE_CHECKING:
    from rich.console import Console

    from cachelab.strategies.base import CacheStrategy

app = typer.Typer(
    help="Explore the caching strategies interactively",
    context_settings={"allow_interspersed_args": True},
)

OPERATIONS = {"1": "set", "2": "get", "3": "check"}


@app.callback(invoke_without_command=True)
def menu(
    store: StoreKind = typer.Option(
        StoreKind.REDIS,
        "--store",
        "-s",
        help="Store backend: redis, or memory for an offline session",
    ),
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Redis URL (defaults to CACHELAB_REDIS_URL / REDIS_URL)",
    ),
) -> None:
    """Run the interactive strategy menu."""
    from rich.console import Console

    console = Console()
    asyncio.run(_playground(console, store, redis_url))
    console.print("See you next time!")


async def _playground(console: Console, store_kind: StoreKind, redis_url: str | None) -> None:
    from cachelab.cli.common import open_store
    from cachelab.config import settings
    from cachelab.strategies import build_strategies

    async with open_store(store_kind, redis_url) as store:
        strategies = list(build_strategies(store, settings).values())
        try:
            await _main_menu(console, strategies)
        except EOFError:
            console.print()


async def _main_menu(console: Console, strategies: list[CacheStrategy]) -> None:
    while True:
        console.clear()
        console.rule("[bold cyan]Redis caching playground[/bold cyan]")
        console.print("Choose caching strategy to explore:")
        for index, strategy in enumerate(strategies, start=1):
            console.print(f"[green]\\[{index}] {strategy.name}[/green]")
        console.print("[green]\\[0] Exit[/green]")

        choice = console.input("[yellow]> [/yellow]").strip()
        if choice in ("", "0"):
            return

        if choice.isdigit() and 0 < int(choice) <= len(strategies):
            await _strategy_menu(console, strategies[int(choice) - 1])
        else:
            console.print("Unknown option. Please try again.")


async def _strategy_menu(console: Console, strategy: CacheStrategy) -> None:
    from cachelab.cli.common import print_report, run_operation
    from cachelab.errors import StoreUnavailableError

    while True:
        console.clear()
        console.rule(f"[bold cyan]{strategy.name}[/bold cyan]")
        console.print(f"[dim]Working key: {strategy.key}[/dim]")
        console.print()
        console.print("[green]\\[1] Set cache[/green]")
        console.print("[green]\\[2] Get cache[/green]")
        console.print("[green]\\[3] Check cache[/green]")
        console.print("[green]\\[0] Back to strategies[/green]")

        choice = console.input("[yellow]> [/yellow]").strip()
        if choice == "0":
            return

        operation = OPERATIONS.get(choice)
        if operation is None:
            console.print("Unknown option. Please try again.")
        else:
            try:
                print_report(console, await run_operation(strategy, operation))
            except StoreUnavailableError as e:
                console.print(str(e), style="red", markup=False, soft_wrap=True)
        _pause(console)


def _pause(console: Console) -> None:
    console.input("[dim]Press ENTER to continue...[/dim]")
