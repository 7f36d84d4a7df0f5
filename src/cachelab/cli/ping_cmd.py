"""CLI command for checking store connectivity.

Usage:
    cachelab ping
    cachelab ping --redis-url redis://cache:6379/0
"""

from __future__ import annotations

import asyncio

import typer

app = typer.Typer(
    help="Check connectivity to the key-value store",
    context_settings={"allow_interspersed_args": True},
)


@app.callback(invoke_without_command=True)
def ping(
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Redis URL (defaults to CACHELAB_REDIS_URL / REDIS_URL)",
    ),
) -> None:
    """Ping Redis and report whether it answered."""
    from rich.console import Console

    from cachelab.cli.common import StoreKind, open_store
    from cachelab.errors import StoreUnavailableError

    console = Console()

    async def _ping() -> bool:
        async with open_store(StoreKind.REDIS, redis_url) as store:
            return await store.ping()

    try:
        ok = asyncio.run(_ping())
    except StoreUnavailableError as e:
        console.print(str(e), style="red", markup=False, soft_wrap=True)
        raise typer.Exit(code=1)

    if not ok:
        console.print("[red]Store did not answer PING[/red]")
        raise typer.Exit(code=1)

    console.print("[green]Store is reachable[/green]")
