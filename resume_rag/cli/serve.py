"""CLI command for running the HTTP API."""

import logging
from typing import Annotated

import typer
import uvicorn
from rich.console import Console

from config.settings import get_settings
from resume_rag.agent.orchestrator import QueryOrchestrator
from resume_rag.api.app import create_app

console = Console()
app = typer.Typer()


@app.command()
def serve(
    host: Annotated[
        str,
        typer.Option("--host", help="Interface to bind"),
    ] = "127.0.0.1",
    port: Annotated[
        int,
        typer.Option("--port", help="Port to listen on"),
    ] = 8000,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Serve the query endpoint over HTTP."""
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level)

    settings = get_settings()
    if not settings.resume_rag_api_keys:
        console.print(
            "[bold yellow]RESUME_RAG_API_KEYS is empty; every query will be rejected.[/bold yellow]"
        )

    api = create_app(QueryOrchestrator.from_settings(settings), settings)
    console.print(f"[bold]Résumé RAG API[/bold] on http://{host}:{port}")
    uvicorn.run(api, host=host, port=port, log_level=logging.getLevelName(level).lower())
