import typer
import os
from pathlib import Path
from typing import List, Optional
import logging
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .analyzer_service import PDF_CONTENT_TYPE, FileAnalyzerService
from .config import get_settings
from .errors import FileAnalyzerError
from .export import EXPORT_FILENAME, NO_EXPANSION
from .llm_service import get_llm_service
from .pdf_parser import PDFTextExtractor

# Configure logging
logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

# Initialize Typer app
app = typer.Typer(
    name="file-analyzer",
    help="Ask questions grounded in a PDF and export the answers",
    add_completion=False
)

# Initialize console for rich output
console = Console()


@app.command()
def analyze(
    pdf_path: str = typer.Argument(..., help="Path to the PDF file to analyze"),
    topics: List[str] = typer.Option(..., "--topic", "-t", help="Topic to search for (repeatable)"),
    expand: bool = typer.Option(False, "--expand", "-e", help="Also expand every topic with general information"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Where to write the exported chat log"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")
):
    """Search a PDF for each topic and export the session"""

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Validate inputs
    if not os.path.exists(pdf_path):
        console.print(f"[red]Error: PDF file not found: {pdf_path}[/red]")
        raise typer.Exit(1)

    service = FileAnalyzerService(PDFTextExtractor(), get_llm_service())
    output_path = Path(output) if output else Path(EXPORT_FILENAME)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console
        ) as progress:
            task = progress.add_task("Reading PDF...", total=None)
            session = service.upload(Path(pdf_path).read_bytes(), PDF_CONTENT_TYPE)

            for topic in topics:
                progress.update(task, description=f"Searching: {topic}")
                service.search(session.session_id, topic)

                if expand:
                    progress.update(task, description=f"Expanding: {topic}")
                    service.expand(session.session_id, topic)

            progress.update(task, description="Exporting...")
            output_path.write_bytes(service.export(session.session_id))

    except FileAnalyzerError as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        raise typer.Exit(1)

    display_history(service.history(session.session_id))
    console.print(f"[green]✓ Chat log saved to: {output_path}[/green]")


def display_history(entries):
    """Display every topic with its answer and expansion"""
    table = Table(title="Chat Log")
    table.add_column("Topic", style="cyan")
    table.add_column("Information from notes", style="white")
    table.add_column("AI Expanded Notes", style="magenta")

    for entry in entries:
        table.add_row(entry.topic, entry.grounded_answer, entry.expansion or NO_EXPANSION)

    console.print(table)


@app.command()
def check():
    """Check that the completion service answers"""
    if get_llm_service().test_connection():
        console.print("[green]✓ Completion service is reachable[/green]")
    else:
        console.print("[red]✗ Completion service did not answer. Check OPENAI_API_KEY and OPENAI_API_BASE.[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Host to bind the server to"),
    port: int = typer.Option(8000, "--port", help="Port to bind the server to"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes")
):
    """Start the FastAPI server"""

    console.print(f"[green]Starting server on {host}:{port}[/green]")

    import uvicorn
    uvicorn.run("file_analyzer.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
