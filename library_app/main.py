import subprocess
import sys
import webbrowser
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from library_app.config import settings
from library_app.context import LibraryContext, create_context
from library_app.errors import LibraryError
from library_app.logging_config import setup_logging
from library_app.ui_helpers import print_book, print_books, print_error, print_persons, set_output_mode
from library_app.validators import parse_identifier

APP_NAME = "Library Lending CLI"

console = Console()


class LibrarySession:
    """Process-wide context for the CLI.

    Stores live in memory, so checkouts made by one command are only visible
    to later commands of the same process (for example inside ``shell``).
    """

    _context: Optional[LibraryContext] = None

    @classmethod
    def get_context(cls) -> LibraryContext:
        if cls._context is None:
            cls._context = create_context()
        return cls._context

    @classmethod
    def reset(cls) -> None:
        cls._context = None


def _fail(error: LibraryError) -> None:
    print_error(error)
    raise typer.Exit(code=1)


# --- Typer CLI application ---
app = typer.Typer(help="Library lending CLI")


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log service activity to stderr"),
):
    """Global CLI options (output mode, logging)."""
    if output:
        set_output_mode(output)
    setup_logging(settings.log_level if verbose else "WARNING", settings.log_file)


@app.command("books")
def cli_books(fields: Optional[str] = typer.Option(None, "--fields", "-f", help="Comma-separated fields to show")):
    """List all books."""
    ctx = LibrarySession.get_context()
    try:
        print_books(ctx.resolver.resolve_books(ctx.service.get_all_books(), fields))
    except LibraryError as e:
        _fail(e)


@app.command("book")
def cli_book(book_id: str, fields: Optional[str] = typer.Option(None, "--fields", "-f", help="Comma-separated fields to show")):
    """Show a single book."""
    ctx = LibrarySession.get_context()
    try:
        book = ctx.service.get_book(parse_identifier("bookId", book_id))
        print_book(ctx.resolver.resolve_book(book, fields))
    except LibraryError as e:
        _fail(e)


@app.command("persons")
def cli_persons(fields: Optional[str] = typer.Option(None, "--fields", "-f", help="Comma-separated fields to show")):
    """List all persons."""
    ctx = LibrarySession.get_context()
    try:
        print_persons(ctx.resolver.resolve_persons(ctx.service.get_persons(), fields))
    except LibraryError as e:
        _fail(e)


@app.command("loans")
def cli_loans(person_id: str):
    """List the books a person currently has checked out."""
    ctx = LibrarySession.get_context()
    try:
        books = ctx.service.get_books_checked_out_by(parse_identifier("personId", person_id))
        print_books(ctx.resolver.resolve_books(books))
    except LibraryError as e:
        _fail(e)


@app.command("checkout")
def cli_checkout(book_id: str, person_id: str):
    """Check a book out to a person."""
    ctx = LibrarySession.get_context()
    try:
        book = ctx.service.check_out_book(parse_identifier("bookId", book_id), parse_identifier("personId", person_id))
        print_book(ctx.resolver.resolve_book(book, "id,title,author,isCheckedOut,checkedOutBy"))
    except LibraryError as e:
        _fail(e)


@app.command("return")
def cli_return(book_id: str):
    """Return a checked-out book."""
    ctx = LibrarySession.get_context()
    try:
        book = ctx.service.return_book(parse_identifier("bookId", book_id))
        print_book(ctx.resolver.resolve_book(book))
    except LibraryError as e:
        _fail(e)


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: API_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default: API_PORT)"),
    open_browser: bool = typer.Option(False, "--open", help="Open the interactive API docs in a browser"),
):
    """Start the HTTP API with uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    url = f"http://{host}:{port}/docs"
    print(f"Starting API on http://{host}:{port}/")
    if open_browser:
        try:
            webbrowser.open(url)
        except webbrowser.Error:
            console.print("[yellow]Could not open a web browser automatically.[/]")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "library_app.api:app",
        "--host", host,
        "--port", str(port),
        "--log-level", settings.log_level.lower(),
    ]
    try:
        subprocess.run(args, check=False)
    except KeyboardInterrupt:
        print("Server stopped.")


# --- Interactive shell ---
def _ask_and_run(action) -> None:
    try:
        action()
    except LibraryError as e:
        print_error(e)


def run_menu() -> None:
    """Interactive menu; checkouts persist for the lifetime of the shell."""
    ctx = LibrarySession.get_context()

    def render_menu() -> None:
        menu_items = [
            ("1", "List all books", "📚"),
            ("2", "Show a book", "🔎"),
            ("3", "List persons", "👥"),
            ("4", "Check out a book", "📤"),
            ("5", "Return a book", "📥"),
            ("6", "Show a person's loans", "📋"),
            ("0", "Exit", "🚪"),
        ]
        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon in menu_items:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")
        console.print(Panel(table, title=APP_NAME, border_style="cyan", box=box.HEAVY, padding=(1, 2)))

    def show_book() -> None:
        book = ctx.service.get_book(parse_identifier("bookId", Prompt.ask("Book ID")))
        print_book(ctx.resolver.resolve_book(book, "id,title,author,isCheckedOut,checkedOutBy"))

    def check_out() -> None:
        book_id = parse_identifier("bookId", Prompt.ask("Book ID"))
        person_id = parse_identifier("personId", Prompt.ask("Person ID"))
        book = ctx.service.check_out_book(book_id, person_id)
        console.print(f"[green]Checked out:[/] {book.title}")

    def return_() -> None:
        book = ctx.service.return_book(parse_identifier("bookId", Prompt.ask("Book ID")))
        console.print(f"[green]Returned:[/] {book.title}")

    def loans() -> None:
        books = ctx.service.get_books_checked_out_by(parse_identifier("personId", Prompt.ask("Person ID")))
        print_books(ctx.resolver.resolve_books(books))

    actions = {
        "1": lambda: print_books(ctx.resolver.resolve_books(ctx.service.get_all_books(), "id,title,author,checkedOutBy")),
        "2": show_book,
        "3": lambda: print_persons(ctx.resolver.resolve_persons(ctx.service.get_persons())),
        "4": check_out,
        "5": return_,
        "6": loans,
    }

    while True:
        render_menu()
        choice = Prompt.ask("Choose an option", choices=["1", "2", "3", "4", "5", "6", "0"], default="1").strip()
        if choice == "0":
            console.print("[green]Goodbye![/]")
            break
        _ask_and_run(actions[choice])
        print()


@app.command("shell")
def cli_shell():
    """Interactive menu over a single in-memory session."""
    run_menu()


if __name__ == "__main__":
    app()
