import json
import subprocess
import time
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from reloadwatch.checker import EventedFileUpdateChecker
from reloadwatch.cli.common import build_dirs
from reloadwatch.logging_config import logger
from reloadwatch.watcher.config import get_watcher_config

app = typer.Typer(help="Evented file update checking")
console = Console()


@app.command("roots")
def roots_cmd(
    files: List[str] = typer.Option(
        [],
        "--file",
        "-f",
        help="File to track (repeatable)",
    ),
    dirs: List[str] = typer.Option(
        [],
        "--dir",
        "-d",
        help="Directory to track as PATH or PATH:ext,ext (repeatable)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
):
    """
    Show the directories that would be registered for the given tracked set.
    """
    with EventedFileUpdateChecker(files, build_dirs(dirs), lambda: None) as checker:
        status = checker.status()

    if json_output:
        typer.echo(json.dumps(status.model_dump(), indent=2))
        return

    table = Table(title="Watch roots")
    table.add_column("Directory", style="cyan")
    table.add_column("Status")
    for root in status.watch_roots:
        table.add_row(root, "[green]present[/green]")
    for root in status.missing:
        table.add_row(root, "[yellow]missing[/yellow]")
    console.print(table)
    console.print(f"  State: {status.state}")
    if status.common_path:
        console.print(f"  Common path: {status.common_path}")


@app.command("run", context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def run_cmd(
    ctx: typer.Context,
    files: List[str] = typer.Option(
        [],
        "--file",
        "-f",
        help="File to track (repeatable)",
    ),
    dirs: List[str] = typer.Option(
        [],
        "--dir",
        "-d",
        help="Directory to track as PATH or PATH:ext,ext (repeatable)",
    ),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds between checks (default: RELOADWATCH_POLL_INTERVAL or 0.5)",
    ),
):
    """
    Run a command, then re-run it whenever a tracked file changes.

    Example:
        reloadwatch run --dir src:py -- python -m myapp
    """
    command = list(ctx.args)
    if not command:
        raise typer.BadParameter("No command given; pass it after --")
    if not files and not dirs:
        raise typer.BadParameter("Nothing to watch; pass --file and/or --dir")

    if interval is None:
        interval = get_watcher_config().poll_interval

    def run_command():
        logger.info(f"Running: {' '.join(command)}")
        result = subprocess.run(command)
        if result.returncode != 0:
            console.print(f"[red]✗[/red] Command exited with status {result.returncode}")

    with EventedFileUpdateChecker(files, build_dirs(dirs), run_command) as checker:
        status = checker.status()
        if status.state != "watching":
            console.print(f"[yellow]⚠[/yellow] Watch is {status.state}; waiting for directories to appear")
        run_command()
        try:
            while True:
                time.sleep(interval)
                checker.execute_if_updated()
        except KeyboardInterrupt:
            console.print("Stopped")


def main():
    app()


if __name__ == "__main__":
    main()
