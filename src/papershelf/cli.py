"""
Command-line interface for the paper corpus.
"""

import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import Settings
from .corpus.files import arxiv_id_from_url
from .corpus.models import PaperRecord
from .corpus.service import CorpusService
from .corpus.store import ContentStore
from .errors import PapershelfError

app = typer.Typer(
    name="papershelf",
    help="papershelf - local research paper corpus manager",
    add_completion=False
)
console = Console()

ARXIV_PDF_URL = "https://arxiv.org/pdf/{paper_id}"


def setup_logging(debug: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)]
    )


def _fail(action: str, error: Exception):
    console.print(f"{action} failed: {error}", style="red")
    raise typer.Exit(1)


def _open_service(storage_dir: Optional[str], debug: bool = False) -> CorpusService:
    try:
        settings = Settings.from_env()
    except PapershelfError as e:
        _fail("Configuration", e)
    setup_logging(debug or settings.debug)

    store = ContentStore(
        storage_dir or settings.storage_dir,
        timeout=settings.fetch_timeout
    )
    service = CorpusService(store)
    try:
        service.initialize()
    except PapershelfError as e:
        service.close()
        _fail("Opening storage", e)
    return service


@app.command()
def acquire(
    source: str = typer.Argument(..., help="Paper id or arXiv abs/pdf URL"),
    title: str = typer.Option(..., help="Paper title"),
    pdf_url: Optional[str] = typer.Option(None, help="PDF URL (defaults to the arXiv PDF)"),
    author: Optional[List[str]] = typer.Option(None, "--author", help="Author name (repeatable)"),
    category: Optional[List[str]] = typer.Option(None, "--category", help="Category tag (repeatable)"),
    abstract: str = typer.Option("", help="Abstract text"),
    storage_dir: Optional[str] = typer.Option(None, help="Storage directory"),
    debug: bool = typer.Option(False, help="Enable debug logging"),
):
    """Download a paper into the local corpus."""
    paper_id = arxiv_id_from_url(source) or source
    record = PaperRecord(
        title=title,
        authors=author or [],
        categories=category or [],
        abstract=abstract,
        pdf_url=pdf_url or ARXIV_PDF_URL.format(paper_id=paper_id),
    )

    service = _open_service(storage_dir, debug)
    try:
        document = service.acquire(paper_id, record)
        console.print(f"Stored {document.id} at {document.file_path}")
    except PapershelfError as e:
        _fail("Acquisition", e)
    finally:
        service.close()


@app.command("list")
def list_docs(
    storage_dir: Optional[str] = typer.Option(None, help="Storage directory"),
):
    """List downloaded papers."""
    service = _open_service(storage_dir)
    try:
        documents = service.list_documents()

        if not documents:
            console.print("No papers downloaded.")
            return

        table = Table(title=f"{len(documents)} papers")
        table.add_column("ID")
        table.add_column("Title")
        table.add_column("Authors")
        table.add_column("Downloaded")
        for doc in documents:
            table.add_row(doc.id, doc.title, ", ".join(doc.authors), doc.download_date.split("T")[0])
        console.print(table)

    except PapershelfError as e:
        _fail("Listing", e)
    finally:
        service.close()


@app.command()
def stats(
    storage_dir: Optional[str] = typer.Option(None, help="Storage directory"),
):
    """Show storage statistics."""
    service = _open_service(storage_dir)
    try:
        storage = service.stats()
        console.print("Storage Statistics:")
        console.print(f"Papers: {storage.total_papers}")
        console.print(f"Total size: {storage.formatted_size} ({storage.total_size} bytes)")
    except PapershelfError as e:
        _fail("Statistics", e)
    finally:
        service.close()


@app.command()
def read(
    paper_id: str = typer.Argument(..., help="Paper id"),
    section: Optional[str] = typer.Option(None, help="Only print this section"),
    storage_dir: Optional[str] = typer.Option(None, help="Storage directory"),
):
    """Print the sections of a downloaded paper."""
    service = _open_service(storage_dir)
    try:
        content = service.read(paper_id)
        console.print(f"[bold]{content.title}[/bold]")

        if section:
            body = content.sections.get(section.lower())
            if body is None:
                console.print(f"Section '{section}' not found. Available: {', '.join(content.sections) or 'none'}")
                raise typer.Exit(1)
            console.print(body, markup=False)
            return

        for name, body in content.sections.items():
            console.print(f"\n[bold]{name.upper()}[/bold]")
            console.print(body, markup=False)

    except PapershelfError as e:
        _fail("Reading", e)
    finally:
        service.close()


@app.command()
def search(
    paper_id: str = typer.Argument(..., help="Paper id"),
    term: str = typer.Argument(..., help="Search term (regular expression)"),
    case_sensitive: bool = typer.Option(False, "--case-sensitive", help="Match case"),
    storage_dir: Optional[str] = typer.Option(None, help="Storage directory"),
):
    """Search the text of a downloaded paper."""
    service = _open_service(storage_dir)
    try:
        results = service.search(paper_id, term, case_sensitive=case_sensitive)

        total = sum(len(r.matches) for r in results)
        if not total:
            console.print("No matches found.")
            return

        console.print(f"Found {total} matches in {len(results)} sections:")
        for result in results:
            console.print(f"\n[bold]{result.section}[/bold] ({len(result.matches)})")
            for match in result.matches:
                console.print(f"  @{match.position}: ...{match.text}...", markup=False)

    except PapershelfError as e:
        _fail("Search", e)
    finally:
        service.close()


@app.command()
def citations(
    paper_id: str = typer.Argument(..., help="Paper id"),
    storage_dir: Optional[str] = typer.Option(None, help="Storage directory"),
):
    """List references and DOIs found in a downloaded paper."""
    service = _open_service(storage_dir)
    try:
        found = service.citations(paper_id)
        console.print(f"Found {len(found)} citations:")
        for citation in found:
            console.print(f"- {citation}", markup=False)
    except PapershelfError as e:
        _fail("Citation extraction", e)
    finally:
        service.close()


@app.command()
def evict(
    paper_id: str = typer.Argument(..., help="Paper id"),
    storage_dir: Optional[str] = typer.Option(None, help="Storage directory"),
    confirm: bool = typer.Option(False, "--confirm", help="Skip confirmation prompt"),
):
    """Delete a downloaded paper."""
    if not confirm:
        confirmed = typer.confirm(f"Are you sure you want to delete paper '{paper_id}'?")
        if not confirmed:
            console.print("Cancelled.")
            return

    service = _open_service(storage_dir)
    try:
        if service.evict(paper_id):
            console.print(f"Deleted paper '{paper_id}'")
        else:
            console.print(f"Paper '{paper_id}' not found")
    except PapershelfError as e:
        _fail("Deletion", e)
    finally:
        service.close()


@app.command()
def cleanup(
    days: int = typer.Argument(..., help="Delete papers downloaded more than this many days ago"),
    storage_dir: Optional[str] = typer.Option(None, help="Storage directory"),
):
    """Delete old papers."""
    service = _open_service(storage_dir)
    try:
        deleted = service.cleanup_old(days)
        console.print(f"Deleted {deleted} papers older than {days} days")
    except PapershelfError as e:
        _fail("Cleanup", e)
    finally:
        service.close()


@app.command()
def version():
    """Show version."""
    console.print(f"papershelf v{__version__}")


if __name__ == "__main__":
    app()
