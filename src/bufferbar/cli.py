"""CLI interface for bufferbar.

Renders a bar for a list of paths in the terminal, using the in-memory host.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from bufferbar import __version__, terminal
from bufferbar.bufferline import Bufferline
from bufferbar.commands import pick as pick_item
from bufferbar.config import MODES, SORT_CRITERIA, BufferlineConfig, configure_logging
from bufferbar.host import MemoryHost, NotifyLevel

app = typer.Typer(
    name="bufferbar",
    help="Fit a buffer bar into a terminal line.",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"bufferbar version {__version__}")
        raise typer.Exit()


def sort_by_callback(value: str | None) -> str | None:
    """Validate sort criterion."""
    if value is not None and value not in SORT_CRITERIA:
        valid = ", ".join(sorted(SORT_CRITERIA))
        raise typer.BadParameter(f"Invalid sort criterion. Valid: {valid}")
    return value


def mode_callback(value: str | None) -> str | None:
    """Validate bar mode."""
    if value is not None and value not in MODES:
        valid = ", ".join(sorted(MODES))
        raise typer.BadParameter(f"Invalid mode. Valid: {valid}")
    return value


def _load_config(config_file: Path | None, **overrides: Any) -> BufferlineConfig:
    config_path = config_file or BufferlineConfig.default_path()
    try:
        config = BufferlineConfig.from_file(config_path)
        options = {key: value for key, value in overrides.items() if value is not None}
        if options:
            data = config.model_dump(exclude={"options"})
            data["options"] = {**config.options.model_dump(), **options}
            config = BufferlineConfig.model_validate(data)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1) from None
    configure_logging(config)
    return config


def _build(
    paths: list[str], current: int, width: int | None, config: BufferlineConfig
) -> tuple[MemoryHost, Bufferline, list[int]]:
    """Open ``paths`` in a fresh host and set the bar up on it."""
    if not 1 <= current <= len(paths):
        raise typer.BadParameter(
            f"--current must be between 1 and {len(paths)}", param_hint="--current"
        )
    host = MemoryHost(width=width or console.width, working_dir=os.getcwd())
    ids = host.open_many(paths)
    if config.is_tabline():
        for buf_id in ids[1:]:
            host.new_tab(buf_id)
        host.focus_tab(host.tabs[current - 1].id)
    else:
        host.focus_buffer(ids[current - 1])

    bar = Bufferline(host, config)
    if not bar.setup():
        for message, _ in host.notifications:
            console.print(f"[red]{message}[/red]")
        raise typer.Exit(1)
    return host, bar, ids


def _print_bar(text: str) -> None:
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Fit a buffer bar into a terminal line."""


@app.command("render")
def render_command(
    paths: Annotated[list[str], typer.Argument(help="Paths to open, in order")],
    current: Annotated[
        int, typer.Option("--current", "-n", help="1-based position of the focused item")
    ] = 1,
    width: Annotated[
        int | None, typer.Option("--width", "-w", min=1, help="Available columns")
    ] = None,
    sort_by: Annotated[
        str | None,
        typer.Option("--sort-by", "-s", callback=sort_by_callback, help="Sort criterion"),
    ] = None,
    mode: Annotated[
        str | None, typer.Option("--mode", "-m", callback=mode_callback, help="buffers or tabs")
    ] = None,
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="Config file path")
    ] = None,
) -> None:
    """Print the bar for PATHS as it fits into the given width."""
    config = _load_config(config_file, sort_by=sort_by, mode=mode)
    host, _, _ = _build(paths, current, width, config)
    _print_bar(host.tabline)


@app.command("pick")
def pick_command(
    paths: Annotated[list[str], typer.Argument(help="Paths to open, in order")],
    current: Annotated[
        int, typer.Option("--current", "-n", help="1-based position of the focused item")
    ] = 1,
    width: Annotated[
        int | None, typer.Option("--width", "-w", min=1, help="Available columns")
    ] = None,
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="Config file path")
    ] = None,
) -> None:
    """Show pick letters and print the path of the item picked by key."""
    config = _load_config(config_file, mode="buffers")
    host, bar, _ = _build(paths, current, width, config)
    host.key_reader = lambda: terminal.read_key(host.tabline)

    picked: list[int] = []
    pick_item(bar, picked.append)
    for message, level in host.notifications:
        if level == NotifyLevel.ERROR:
            console.print(f"[red]{message}[/red]")
    if not picked:
        console.print("[yellow]Nothing picked.[/yellow]")
        raise typer.Exit(1)
    console.print(host.buffers[picked[0]].path, markup=False, highlight=False)


@app.command("config")
def config_cmd(
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="Config file path")
    ] = None,
) -> None:
    """Validate and display the effective configuration as JSON."""
    config = _load_config(config_file)
    console.print_json(config.model_dump_json())


if __name__ == "__main__":
    app()
