"""CLI commands for cachelab.

Provides command-line interface using Typer:
- cachelab menu: Interactive caching playground
- cachelab run: Run one strategy operation
- cachelab ping: Check store connectivity

Usage:
    cachelab --help
    cachelab menu
    cachelab run dependent set
    cachelab --log-level info --log-json run sliding get
"""

from __future__ import annotations

from enum import Enum

import typer

from cachelab.cli.menu_cmd import app as menu_app
from cachelab.cli.ping_cmd import app as ping_app
from cachelab.cli.run_cmd import app as run_app

app = typer.Typer(
    name="cachelab",
    help="cachelab: absolute, sliding and dependent cache invalidation on Redis",
    no_args_is_help=True,
)

app.add_typer(menu_app, name="menu")
app.add_typer(run_app, name="run")
app.add_typer(ping_app, name="ping")


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@app.callback()
def callback(
    log_level: LogLevel | None = typer.Option(
        None,
        "--log-level",
        "-l",
        case_sensitive=False,
        help="Log level: debug, info, warning, error, critical (defaults to CACHELAB_LOG_LEVEL)",
    ),
    log_json: bool | None = typer.Option(
        None,
        "--log-json/--no-log-json",
        help="Emit JSON log lines (defaults to CACHELAB_LOG_JSON)",
    ),
) -> None:
    """cachelab: absolute, sliding and dependent cache invalidation on Redis."""
    from cachelab.config import settings
    from cachelab.observability.logging import configure_logging

    configure_logging(
        json_format=settings.log_json if log_json is None else log_json,
        level=log_level.value if log_level else settings.log_level,
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
