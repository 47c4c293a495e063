"""CLI command for asking questions about the profile."""

import asyncio
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from config.settings import get_settings
from resume_rag.access.identity import ApiKeyVerifier, hash_api_key
from resume_rag.access.quota import InMemoryQuotaStore
from resume_rag.agent.orchestrator import QueryOrchestrator
from resume_rag.errors import ResumeRagError
from resume_rag.models.query import QueryAnswer

console = Console()
app = typer.Typer()

logger = logging.getLogger(__name__)

LOCAL_TOKEN = "local"
LOCAL_IDENTITY = "cli"


@app.command()
def ask(
    question: Annotated[
        str,
        typer.Argument(help="Your question about the profile"),
    ],
    stream: Annotated[
        bool,
        typer.Option("--stream", "-s", help="Print the answer as it is generated"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Ask a question about the ingested profile."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()

    if settings.resume_rag_llm_provider == "google" and not settings.google_api_key:
        console.print(
            "[bold red]GOOGLE_API_KEY not set.[/bold red]\n"
            "Export your API key: export GOOGLE_API_KEY='...'"
        )
        raise typer.Exit(1)

    orchestrator = QueryOrchestrator.from_settings(
        settings,
        verifier=ApiKeyVerifier({hash_api_key(LOCAL_TOKEN): LOCAL_IDENTITY}),
        quota_store=InMemoryQuotaStore(),
    )
    if orchestrator.store.count == 0:
        console.print(
            "[bold red]No documents in the vector store.[/bold red]\n"
            "Run 'resume-rag ingest' first to ingest the profile."
        )
        raise typer.Exit(1)

    try:
        asyncio.run(_ask(orchestrator, question, stream))
    except ResumeRagError as e:
        console.print(f"[bold red]{e.code.value}:[/bold red] {e.message}")
        raise typer.Exit(1)
    finally:
        orchestrator.store.close()


async def _ask(orchestrator: QueryOrchestrator, question: str, stream: bool) -> None:
    body = {"query": question, "stream": stream}
    authorization = f"Bearer {LOCAL_TOKEN}"

    if not stream:
        with console.status("[bold green]Thinking..."):
            result = await orchestrator.answer(body, authorization)
        _print_answer(result)
        return

    result = await orchestrator.answer(body, authorization)
    async with result:
        async for chunk in result:
            if chunk.error:
                console.print()
                console.print(f"[bold red]Error:[/bold red] {chunk.error}")
                raise typer.Exit(1)
            console.print(chunk.text, end="")
    console.print()


def _print_answer(result: QueryAnswer) -> None:
    header = Text()
    header.append("Résumé RAG", style="bold")
    header.append(
        f"  retrieve {result.retrieve_ms:.0f}ms · llm {result.llm_ms:.0f}ms · total {result.total_ms:.0f}ms",
        style="dim",
    )

    console.print()
    console.print(Panel(result.answer, title=header, border_style="green", padding=(1, 2)))
