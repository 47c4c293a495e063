"""CLI command for profile ingestion."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from config.settings import get_settings
from resume_rag.embedding.factory import get_embedding_provider
from resume_rag.errors import ResumeRagError, ValidationError
from resume_rag.ingestion.pipeline import run_ingestion_pipeline
from resume_rag.vectorstore.factory import build_vector_store

console = Console()
app = typer.Typer()


@app.command()
def ingest(
    path: Annotated[
        Path | None,
        typer.Option("--path", "-p", help="Path to the profile JSON file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Chunk, embed and store the profile document in the vector store."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    profile_path = path or settings.profile_path

    console.print("[bold]Résumé RAG Ingestion[/bold]")
    console.print(f"Profile: {profile_path}")
    console.print()

    store = build_vector_store(settings)
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Ingesting profile...", total=None)
            result = run_ingestion_pipeline(
                profile_path,
                store=store,
                embedding_provider=get_embedding_provider(settings),
            )
            progress.update(task, completed=True)
    except ValidationError as e:
        console.print(f"[bold red]{e.message}[/bold red]")
        for problem in e.errors:
            console.print(f"  - {problem}")
        raise typer.Exit(1)
    except ResumeRagError as e:
        console.print(f"[bold red]Ingestion failed:[/bold red] {e}")
        raise typer.Exit(1)
    finally:
        store.close()

    console.print()
    console.print("[bold green]Ingestion complete![/bold green]")
    console.print(f"  Chunks created: {result['chunks_created']}")
    console.print(f"  Documents stored: {result['documents_stored']}")
    console.print(f"  Sections: {', '.join(result['sections']) or '-'}")
    console.print(f"  Embedding dimension: {result['embedding_dimension']}")
    console.print(f"  Errors: {result['errors']}")
    console.print(f"  Total in store: {result['total_in_store']} documents")
