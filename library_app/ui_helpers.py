import json
import os
from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from library_app.errors import LibraryError

# Environment variable controlling CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"
OUTPUT_MODES = {"plain", "json", "rich"}

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def _holder_name(row: Dict[str, Any]) -> str:
    person = row.get("checkedOutBy")
    if isinstance(person, dict) and (person.get("firstName") or person.get("lastName")):
        return f"{person.get('firstName', '')} {person.get('lastName', '')}".strip()
    return str(row.get("checkedOutById") or "")


def _status(row: Dict[str, Any]) -> str:
    checked_out = row.get("isCheckedOut")
    if checked_out is None:
        checked_out = row.get("checkedOutById") is not None or bool(row.get("checkedOutBy"))
    if not checked_out:
        return "available"
    holder = _holder_name(row)
    return f"checked out by {holder}" if holder else "checked out"


def _plain_line(row: Dict[str, Any]) -> str:
    if "title" in row and "author" in row:
        return f"{row.get('id', '')} - {row['title']} by {row['author']} ({_status(row)})"
    return ", ".join(f"{k}={v}" for k, v in row.items())


def print_books(rows: List[Dict[str, Any]]) -> None:
    """Print resolved book rows in the current output mode.
    - plain: 'ID - Title by Author (status)' lines, or 'No books in library.'
    - json: JSON array of the resolved fields
    - rich: Rich table
    """
    mode = get_output_mode()

    if not rows:
        print("No books in library.")
        return

    if mode == "json":
        print(json.dumps(rows, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Status", style="green")
        for row in rows:
            table.add_row(str(row.get("id", "")), str(row.get("title", "")), str(row.get("author", "")), _status(row))
        _console.print(table)
    else:
        for row in rows:
            print(_plain_line(row))


def print_book(row: Dict[str, Any]) -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(row, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{k}:[/] {escape(str(v))}" for k, v in row.items())
        _console.print(Panel.fit(content, title="📖 Book", border_style="cyan"))
    else:
        print(_plain_line(row))


def print_persons(rows: List[Dict[str, Any]]) -> None:
    mode = get_output_mode()

    if not rows:
        print("No persons registered.")
        return

    if mode == "json":
        print(json.dumps(rows, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👥 Persons", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Email", style="white")
        table.add_column("Phone", style="white")
        for row in rows:
            name = f"{row.get('firstName', '')} {row.get('lastName', '')}".strip()
            table.add_row(str(row.get("id", "")), name, str(row.get("emailAddress", "")), str(row.get("phoneNumber") or "-"))
        _console.print(table)
    else:
        for row in rows:
            if "firstName" in row:
                name = f"{row.get('firstName', '')} {row.get('lastName', '')}".strip()
                print(f"{row.get('id', '')} - {name} <{row.get('emailAddress', '')}>")
            else:
                print(_plain_line(row))


def print_error(error: LibraryError) -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(error.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        code = escape(f"[{error.code}]")
        _console.print(f"[bold red]Error {code}:[/] {escape(error.message)}")
    else:
        print(f"Error [{error.code}]: {error.message}")
