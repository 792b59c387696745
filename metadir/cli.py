"""metadir CLI — the main entry point for the metadata directory service."""

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from metadir import __version__
from metadir.config import LOG_LEVELS

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """metadir — application metadata directory.

    Run the metadata service, check payload files offline, and smoke
    test a running service.
    """


# ── Serve ────────────────────────────────────────────────────────────


@main.command()
@click.option("--host", default=None, help="Interface to bind (default: METADIR_HOST or 0.0.0.0)")
@click.option("--port", "-p", default=None, type=int, help="Port to listen on (default: METADIR_PORT or 8080)")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level (default: METADIR_LOG_LEVEL or INFO)",
)
def serve(host: str | None, port: int | None, log_level: str | None):
    """Run the metadata HTTP service."""
    import uvicorn

    from metadir.config import Settings
    from web.backend.app.main import create_app

    settings = Settings.from_env()
    if host:
        settings.host = host
    if port is not None:
        settings.port = port
    if log_level:
        settings.log_level = log_level.upper()

    console.print(f"\n[bold blue]metadir[/] — Serving on {settings.host}:{settings.port}\n")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("payload_path", type=click.Path(exists=True, dir_okay=False))
def check(payload_path: str):
    """Decode and validate a metadata payload file without storing it."""
    from pathlib import Path

    from metadir.directory.errors import DirectoryError
    from metadir.utils.decoder import decode_payload
    from metadir.utils.validator import validate_record

    console.print(f"\n[bold blue]metadir[/] — Checking: {payload_path}\n")

    try:
        record = validate_record(decode_payload(Path(payload_path).read_bytes()))
    except DirectoryError as e:
        console.print(f"  [red]x[/] {escape(e.message)}")
        raise SystemExit(1)

    table = Table(title=record.title or record.source)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("source", record.source)
    table.add_row("company", record.company)
    table.add_row("version", record.version)
    for maintainer in record.maintainers:
        table.add_row("maintainer", f"{maintainer.name} <{maintainer.email}>")

    console.print(table)
    console.print("  [green]v[/] Payload is valid")


# ── Smoke ────────────────────────────────────────────────────────────


@main.command()
@click.argument("payload_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--base-url", "-u", default="http://localhost:8080", help="Service base URL")
def smoke(payload_dir: str, base_url: str):
    """Replay the end-to-end scenarios against a running service.

    PAYLOAD_DIR must hold the smoke payload files. Run against a freshly
    started service.
    """
    from metadir.client import MetadataClient
    from metadir.smoke import run_smoke

    console.print(f"\n[bold blue]metadir[/] — Smoke testing: {base_url}\n")

    with MetadataClient(base_url) as client:
        steps = run_smoke(client, payload_dir)

    for step in steps:
        mark = "[green]v[/]" if step.passed else "[red]x[/]"
        console.print(f"  {mark} {step.name}: {escape(repr(step.response))}")

    failed = [s for s in steps if not s.passed]
    if failed:
        console.print(f"\n[red]{len(failed)} of {len(steps)} steps failed.[/]")
        raise SystemExit(1)
    console.print(f"\n[green]All {len(steps)} steps passed.[/]")


if __name__ == "__main__":
    main()
