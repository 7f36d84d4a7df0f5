"""CLI command for running a single strategy operation.

Usage:
    cachelab run absolute set
    cachelab run sliding get --json
    cachelab run dependent check --redis-url redis://localhost:6379/1
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import TYPE_CHECKING

import typer

from cachelab.cli.common import StoreKind

if TYPE_CHECKING:
    from cachelab.strategies.base import CacheReport

app = typer.Typer(
    help="Run one operation of a caching strategy",
    context_settings={"allow_interspersed_args": True},
)


class StrategyName(str, Enum):
    ABSOLUTE = "absolute"
    SLIDING = "sliding"
    DEPENDENT = "dependent"


class Operation(str, Enum):
    SET = "set"
    GET = "get"
    CHECK = "check"


@app.callback(invoke_without_command=True)
def run(
    strategy: StrategyName = typer.Argument(..., help="Strategy to exercise"),
    operation: Operation = typer.Argument(..., help="Operation: set, get or check"),
    store: StoreKind = typer.Option(
        StoreKind.REDIS,
        "--store",
        "-s",
        help="Store backend. The memory store lives only for this command.",
    ),
    redis_url: str | None = typer.Option(
        None,
        "--redis-url",
        help="Redis URL (defaults to CACHELAB_REDIS_URL / REDIS_URL)",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the report as JSON",
    ),
) -> None:
    """Run set, get or check on one strategy and print the outcome."""
    import json

    from rich.console import Console

    from cachelab.cli.common import print_report
    from cachelab.errors import StoreUnavailableError

    console = Console()

    try:
        report = asyncio.run(_run(strategy.value, operation.value, store, redis_url))
    except StoreUnavailableError as e:
        console.print(str(e), style="red", markup=False, soft_wrap=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(console, report)


async def _run(
    strategy: str, operation: str, store_kind: StoreKind, redis_url: str | None
) -> CacheReport:
    from cachelab.cli.common import open_store, run_operation
    from cachelab.config import settings
    from cachelab.strategies import build_strategies

    async with open_store(store_kind, redis_url) as store:
        strategies = build_strategies(store, settings)
        return await run_operation(strategies[strategy], operation)
