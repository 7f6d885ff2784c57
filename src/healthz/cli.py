"""
Command-line interface for Healthz.

Provides commands for serving the health endpoint, inspecting local metrics,
and probing remote endpoints.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from healthz import __version__
from healthz.config import Config
from healthz.errors import ProbeError
from healthz.reporter import Reporter
from healthz.snapshot import Snapshot

console = Console()


def setup_logging(level: str, log_file: str | None = None) -> None:
    """Configure logging with rich handler."""
    handlers: list[logging.Handler] = [RichHandler(console=console, rich_tracebacks=True)]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="healthz")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "-V",
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def main(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """
    Healthz - Process health reporting for Linux.

    Serve a JSON health endpoint or probe a remote one.
    """
    ctx.ensure_object(dict)

    ctx.obj["config"] = Config.load(config)

    log_level = "DEBUG" if verbose else ctx.obj["config"].log_level
    setup_logging(log_level, ctx.obj["config"].log_file)


@main.command()
@click.option("--host", help="Interface to bind (overrides config)")
@click.option("--port", type=int, help="Port to listen on (overrides config)")
@click.option("--path", "mount_path", help="Health endpoint path (overrides config)")
@click.option("--app-version", help="Version string reported in every snapshot")
@click.pass_context
def serve(
    ctx: click.Context,
    host: str | None,
    port: int | None,
    mount_path: str | None,
    app_version: str | None,
) -> None:
    """Serve the health endpoint over HTTP."""
    import uvicorn

    from healthz.server import create_app

    base: Config = ctx.obj["config"]
    config = replace(
        base,
        version=app_version or base.version,
        server_host=host or base.server_host,
        server_port=port or base.server_port,
        server_path=mount_path or base.server_path,
    )

    console.print(
        Panel.fit(
            f"[bold blue]Healthz v{__version__}[/]\n"
            f"Serving http://{config.server_host}:{config.server_port}{config.server_path}",
            border_style="blue",
        )
    )

    uvicorn.run(
        create_app(config),
        host=config.server_host,
        port=config.server_port,
        log_level=config.log_level.lower(),
    )


@main.command()
@click.option(
    "--format",
    "-f",
    type=click.Choice(["json", "pretty"]),
    default="pretty",
    help="Output format",
)
@click.pass_context
def collect(ctx: click.Context, format: str) -> None:
    """Collect a snapshot of this process and print it."""
    config: Config = ctx.obj["config"]
    snapshot = Reporter(config).collect()

    if format == "json":
        console.print_json(snapshot.to_json())
    else:
        _display_snapshot(snapshot, "Local Snapshot")


@main.command()
@click.argument("url", required=False)
@click.option(
    "--retries", "-r", type=click.IntRange(min=1), help="Maximum number of attempts"
)
@click.option("--timeout", "-t", type=float, help="Per-request timeout in seconds")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["json", "pretty"]),
    default="pretty",
    help="Output format",
)
@click.pass_context
def probe(
    ctx: click.Context,
    url: str | None,
    retries: int | None,
    timeout: float | None,
    format: str,
) -> None:
    """
    Probe a remote health endpoint.

    Retries with exponential backoff until the endpoint answers HTTP 200.
    Exits with status 1 when every attempt fails.
    """
    from healthz.prober import Prober

    config: Config = ctx.obj["config"]
    url = url or config.probe_url
    if not url:
        console.print("[red]Error: No URL given.[/]")
        console.print("Pass a URL or set HEALTHZ_PROBE_URL / probe.url in the config file.")
        sys.exit(1)

    if timeout is not None:
        config = replace(config, probe_timeout=timeout)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Probing {url}...", total=None)
        try:
            with Prober(config) as prober:
                snapshot = prober.probe_with_retry(url, retries)
        except ProbeError as e:
            progress.update(task, completed=True)
            console.print(f"[red]✗ {e}[/]")
            sys.exit(1)
        progress.update(task, completed=True)

    if format == "json":
        console.print_json(snapshot.to_json())
    else:
        if snapshot.healthy:
            console.print("[green]✓ Endpoint is healthy[/]")
        else:
            console.print("[yellow]! Endpoint reachable with degraded metrics[/]")
        _display_snapshot(snapshot, url)


def _display_snapshot(snapshot: Snapshot, title: str) -> None:
    """Display a snapshot as a table."""
    table = Table(title=title, show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")

    for key, value in snapshot.to_dict().items():
        if key == "errors":
            continue
        table.add_row(key, str(value))

    console.print(table)

    if snapshot.errors:
        console.print()
        console.print("[yellow]Errors:[/]")
        for error in snapshot.errors:
            console.print(f"  • {error}")


@main.command("list")
def list_available() -> None:
    """List all available collectors."""
    table = Table(title="Available Collectors", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Description")

    from healthz.collectors import COLLECTORS

    for name, cls in COLLECTORS.items():
        table.add_row(name, cls.description)

    console.print()
    console.print(table)


@main.command("version", short_help="Display version information")
def version() -> None:
    """Display version information for Healthz."""
    console.print()
    console.print(
        Panel.fit(
            f"[bold blue]Healthz[/]\nVersion: [cyan]{__version__}[/]",
            border_style="blue",
            title="Version Information",
        )
    )
    console.print()

    table = Table(show_header=False, box=None)
    table.add_column("Component", style="dim", width=20)
    table.add_column("Version", style="cyan")

    table.add_row("Healthz", __version__)
    table.add_row("Python", sys.version.split()[0])

    console.print(table)
    console.print()


@main.command()
@click.argument("output_path", type=click.Path(path_type=Path))
def init_config(output_path: Path) -> None:
    """
    Generate a sample configuration file.

    Creates a YAML configuration file with all available options
    and helpful comments.
    """
    sample_config = """# Healthz Configuration

# Version string reported in every snapshot
version: dev

# Health endpoint
server:
  host: 127.0.0.1
  port: 8080
  path: /healthz

# Probing remote endpoints
probe:
  # Default URL for `healthz probe`
  url: null

  # Per-request timeout in seconds
  timeout: 10

  # Maximum number of attempts
  retries: 3

  # Initial backoff in seconds (doubled before every attempt)
  backoff: 0.5

  # Upper bound for a single backoff wait
  backoff_max: 30

# Logging
logging:
  # Log level: DEBUG, INFO, WARNING, ERROR
  level: INFO

  # Log file path (null = stderr only)
  file: null
"""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(sample_config)
    console.print(f"[green]✓ Configuration file created: {output_path}[/]")
    console.print()
    console.print("Next steps:")
    console.print("  1. Edit the configuration file")
    console.print("  2. Serve the endpoint: [cyan]healthz -c config.yaml serve[/]")
    console.print("  3. Probe it: [cyan]healthz probe http://127.0.0.1:8080/healthz[/]")


if __name__ == "__main__":
    main()
