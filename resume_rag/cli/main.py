"""Résumé RAG CLI entry point."""

import typer

from resume_rag.cli.ask import ask
from resume_rag.cli.ingest import ingest
from resume_rag.cli.serve import serve

app = typer.Typer(
    name="resume-rag",
    help="Résumé RAG - Ask grounded questions about a single professional profile.",
)

app.command(name="ingest")(ingest)
app.command(name="ask")(ask)
app.command(name="serve")(serve)


if __name__ == "__main__":
    app()
