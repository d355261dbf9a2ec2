"""Typer CLI for hotstring."""

from __future__ import annotations

import asyncio
import json
import platform
import re
from pathlib import Path

import typer

from hotstring.config import load_settings
from hotstring.core.app import build_context
from hotstring.core.errors import HotstringError
from hotstring.host import MemoryTextHost, type_keys
from hotstring.logging import configure_logging
from hotstring.utils.escapes import translate_escapes

app = typer.Typer(no_args_is_help=True)


def _read(script: Path) -> str:
    return script.read_text(encoding="utf-8")


@app.command()
def expand(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    text: str = typer.Argument(..., help="Keystrokes to type; `n, `t and `b stand for Enter, Tab and Backspace."),
) -> None:
    """Type TEXT into an empty field with SCRIPT loaded and print the result."""

    settings = load_settings()
    configure_logging(settings)

    async def run() -> str:
        ctx = build_context(settings, MemoryTextHost())
        ctx.load_sources()
        ctx.engine.import_script(_read(script))
        type_keys(ctx.engine, ctx.host, translate_escapes(text))
        await ctx.engine.wait_idle()
        return ctx.host.text

    typer.echo(asyncio.run(run()))


@app.command()
def check(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    stop_on_error: bool = typer.Option(False, "--stop-on-error", help="Abort at the first bad line."),
) -> None:
    """Import SCRIPT and print a JSON report of added definitions and errors."""

    settings = load_settings()
    configure_logging(settings)
    ctx = build_context(settings)
    try:
        result = ctx.engine.import_script(_read(script), stop_on_error=stop_on_error)
    except HotstringError as exc:
        typer.echo(json.dumps({"error": str(exc)}, indent=2))
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(result.to_dict(), indent=2))
    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def search(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    query: str = typer.Argument(...),
    regex: bool = typer.Option(False, "--regex", help="Treat QUERY as a regular expression."),
) -> None:
    """List the labels of SCRIPT definitions whose replacement contains QUERY."""

    settings = load_settings()
    configure_logging(settings)
    ctx = build_context(settings)
    ctx.engine.import_script(_read(script))
    for label in ctx.engine.search(re.compile(query) if regex else query):
        typer.echo(label)


@app.command()
def doctor() -> None:
    """Print environment diagnostics."""

    settings = load_settings()
    configure_logging(settings)
    info = {
        "python": platform.python_version(),
        "platform": platform.platform(),
        "paths": {
            "home": str(settings.paths.base_dir),
            "logs": str(settings.paths.logs_dir),
        },
        "engine": {
            "max_buffer": settings.engine.max_buffer,
            "scripts": [str(path) for path in settings.engine.scripts],
        },
    }
    typer.echo(json.dumps(info, indent=2))


@app.command()
def settings(key: str | None = typer.Argument(None)) -> None:
    """Display current settings or a specific section."""

    data = load_settings().model_dump()
    if key:
        data = data.get(key, {})
    typer.echo(json.dumps(data, indent=2, default=str))
