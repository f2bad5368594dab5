"""ShipRisk CLI.

Unified entry point for asking questions in-process, running the API
server, and inspecting configuration.

Usage:
    shiprisk ask "Show at-risk shipments to Chicago this week"
    shiprisk serve             Start the HTTP API
    shiprisk config show       Print resolved config (secrets masked)
"""

import asyncio
import json
import logging
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from src.cli.config import load_config
from src.cli.factory import build_orchestrator
from src.cli.output import format_result
from src.errors import ConfigurationError, PipelineError, get_error
from src.utils.logging_config import configure_logging
from src.utils.redaction import redact_mapping

_log = logging.getLogger(__name__)

app = typer.Typer(
    name="shiprisk",
    help="Natural language shipment lookups and SLA risk analysis",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Configuration management")
app.add_typer(config_app, name="config")

console = Console()

# --- Global state ---
_config_path: str | None = None


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to shiprisk.yaml config file"
    ),
):
    """ShipRisk CLI."""
    global _config_path
    _config_path = config


def _load_or_exit():
    try:
        return load_config(config_path=_config_path)
    except FileNotFoundError as e:
        console.print(f"[red]Config file not found:[/red] {e}")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Config validation failed:[/red] {e}")
        raise typer.Exit(1)


# --- Query ---


@app.command()
def ask(
    message: str = typer.Argument(..., help="Question about shipments or SLA risk"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response"),
):
    """Answer a question in-process and print the result."""
    cfg = _load_or_exit()
    configure_logging(cfg.server.log_level, cfg.server.log_format, cfg.server.log_file)

    try:
        orchestrator = build_orchestrator(cfg)
    except ConfigurationError as e:
        console.print(f"[red]Missing configuration:[/red] {', '.join(e.missing)}")
        raise typer.Exit(1)

    try:
        result = asyncio.run(orchestrator.run(message))
    except PipelineError as e:
        _log.debug("ask failed: %s", e)
        console.print(f"[red]Error {e.code}:[/red] {e.user_message}")
        raise typer.Exit(1)
    except Exception:
        _log.error("ask failed unexpectedly", exc_info=True)
        unexpected = get_error("E-4999")
        console.print(f"[red]Error {unexpected.code}:[/red] {unexpected.user_message}")
        raise typer.Exit(1)

    output = format_result(result, as_json=as_json)
    if as_json:
        typer.echo(output)
    else:
        console.print(output)


# --- Server ---


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from src.api.main import create_app

    cfg = _load_or_exit()
    missing = cfg.missing_settings()
    if missing:
        console.print(f"[red]Missing configuration:[/red] {', '.join(missing)}")
        raise typer.Exit(1)

    bind_host = host or cfg.server.host
    bind_port = port or cfg.server.port
    console.print(f"[green]Starting ShipRisk API on {bind_host}:{bind_port}[/green]")
    uvicorn.run(
        create_app(config=cfg),
        host=bind_host,
        port=bind_port,
        log_level=cfg.server.log_level.lower(),
    )


# --- Config commands ---


@config_app.command("show")
def config_show(
    as_json: bool = typer.Option(False, "--json", help="Print as JSON"),
):
    """Display resolved configuration (secrets masked)."""
    cfg = _load_or_exit()
    data = redact_mapping(cfg.model_dump())

    if as_json:
        typer.echo(json.dumps(data, indent=2))
        return

    for section, values in data.items():
        console.print(f"[bold]{section}:[/bold]")
        for key, value in values.items():
            console.print(f"  {key}: {value if value not in (None, '') else '—'}")


@config_app.command("validate")
def config_validate():
    """Check that every setting required to answer questions is present."""
    cfg = _load_or_exit()
    missing = cfg.missing_settings()
    if missing:
        console.print("[red]Config is incomplete.[/red]")
        for name in missing:
            console.print(f"  missing: {name}")
        raise typer.Exit(1)

    console.print("[green]Config is valid.[/green]")
    mode = "mock" if cfg.prediction.use_mock_predictions else "live"
    console.print(f"  Predictions: {mode}")
    console.print(f"  Query mode: {cfg.shipment_api.query_mode}")


if __name__ == "__main__":
    app()
