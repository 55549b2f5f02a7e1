import subprocess
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.markup import escape
from rich import box

from book import BookBuilder
from config import Settings, settings
from exceptions import LibraryError
from library import LibraryManager
from logging_setup import configure_logging
from notifications import RecordingNotifier
from observers import User
from utils.ui_helpers import (
    set_output_mode,
    print_list_result,
    print_loans_result,
    print_stats_result,
    print_outbox,
)

APP_NAME = "Library CLI"

console = Console()

OPERATIONS_HELP = """\
observe <user_id>
add <identifier> | <title> | <author>
remove <identifier>
find <identifier>
title <substring>
author <substring>
loan <identifier> <borrower>
return <identifier> <borrower>
list | loans [borrower] | stats | emails"""


class CommandError(Exception):
    """A line of input could not be understood."""


def build_manager() -> LibraryManager:
    """Composition root: one manager with a recording mail service per run."""
    return LibraryManager(RecordingNotifier(), Settings.from_env())


def _two_args(command: str, rest: str) -> tuple:
    args = rest.split()
    if len(args) != 2:
        raise CommandError(f"Usage: {command} <identifier> <borrower>")
    return args[0], args[1]


def _one_arg(command: str, rest: str, name: str = "identifier") -> str:
    args = rest.split()
    if len(args) != 1:
        raise CommandError(f"Usage: {command} <{name}>")
    return args[0]


def execute_line(manager: LibraryManager, line: str) -> None:
    """Run one operation line against the manager and print its outcome.

    Raises CommandError for malformed input and lets LibraryError from the
    manager propagate to the caller.
    """
    command, _, rest = line.strip().partition(" ")
    command = command.lower()
    rest = rest.strip()

    if command == "observe":
        user_id = _one_arg(command, rest, "user_id")
        manager.add_observer(User(user_id))
        print(f"Observer {user_id} registered.")
    elif command == "add":
        parts = [part.strip() for part in rest.split("|")]
        if len(parts) != 3:
            raise CommandError("Usage: add <identifier> | <title> | <author>")
        identifier, title, author = parts
        book = manager.add_book(BookBuilder().with_identifier(identifier).with_title(title).with_author(author))
        print(f"Successfully added: {book.title} by {book.author}")
    elif command == "remove":
        identifier = _one_arg(command, rest)
        if manager.remove_book(identifier):
            print(f"Book with ID {identifier} has been removed.")
        else:
            print(f"Book with ID {identifier} not found.")
    elif command == "find":
        identifier = _one_arg(command, rest)
        book = manager.search_by_identifier(identifier)
        if book:
            print("Book Found")
            print(f"Title: {book.title}")
            print(f"Author: {book.author}")
            print(f"ID: {book.identifier}")
        else:
            print(f"Book with ID {identifier} not found.")
    elif command == "title":
        print_list_result(manager.search_by_title(rest), "No matching books.")
    elif command == "author":
        print_list_result(manager.search_by_author(rest), "No matching books.")
    elif command == "loan":
        identifier, borrower = _two_args(command, rest)
        manager.loan_book(identifier, borrower)
        print(f"Book {identifier} loaned to {borrower}.")
    elif command == "return":
        identifier, borrower = _two_args(command, rest)
        manager.return_book(identifier, borrower)
        print(f"Book {identifier} returned by {borrower}.")
    elif command == "list":
        print_list_result(manager.list_books())
    elif command == "loans":
        print_loans_result(manager.list_loans(rest or None))
    elif command == "stats":
        print_stats_result(manager.get_statistics())
    elif command == "emails":
        print_outbox(getattr(manager.notifier, "outbox", []))
    else:
        raise CommandError(f"Unknown command: {command}")


# --- Typer CLI Uygulaması ---
app = typer.Typer(help="Library CLI")

@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (default: LOG_LEVEL or INFO)"),
):
    """Global options for the CLI (output mode, logging)."""
    if output:
        set_output_mode(output)
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")

@app.command("demo")
def cli_demo():
    """Run the sample scenario: one observer, one book, a loan and its return."""
    manager = build_manager()
    manager.add_observer(User("user01"))
    builder = BookBuilder().with_title("El Gran Gatsby").with_author("F. Scott Fitzgerald").with_identifier("123456789")
    manager.add_book(builder)
    manager.loan_book("123456789", "user01")
    manager.return_book("123456789", "user01")
    print_outbox(manager.notifier.outbox)
    try:
        manager.return_book("123456789", "user01")
    except LibraryError as e:
        print(f"Error: {e}")

@app.command("batch")
def cli_batch(
    file_path: Path = typer.Argument(..., help="File with one operation per line"),
    keep_going: bool = typer.Option(False, "--keep-going", "-k", help="Report library errors and continue"),
):
    """Run the operations listed in a file against a fresh catalog."""
    if not file_path.exists():
        print(f"File not found: {file_path}")
        raise typer.Exit(code=1)

    manager = build_manager()
    failed = 0
    with open(file_path, "r", encoding="utf-8") as f:
        for lineno, raw in enumerate(f, 1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            try:
                execute_line(manager, line)
            except CommandError as e:
                print(f"Line {lineno}: {e}")
                raise typer.Exit(code=2)
            except LibraryError as e:
                print(f"Line {lineno}: Error: {e}")
                failed += 1
                if not keep_going:
                    raise typer.Exit(code=1)

    if failed:
        print(f"{failed} operation(s) failed.")
        raise typer.Exit(code=1)

@app.command("shell")
def cli_shell():
    """Interactive prompt over an in-memory catalog."""
    manager = build_manager()
    console.print(Panel(escape(OPERATIONS_HELP), title=APP_NAME, border_style="cyan", box=box.HEAVY, padding=(1, 2)))
    while True:
        line = Prompt.ask("[bold cyan]library[/]", default="", show_default=False).strip()
        if line.lower() in ("quit", "exit"):
            console.print("[green]Goodbye![/]")
            break
        if not line or line.startswith("#"):
            continue
        if line.lower() == "help":
            console.print(escape(OPERATIONS_HELP))
            continue
        try:
            execute_line(manager, line)
        except CommandError as e:
            console.print(f"[yellow]{escape(str(e))}[/]")
        except LibraryError as e:
            console.print(f"[bold red]Error:[/] {escape(str(e))}")

@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: API_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default: API_PORT)"),
):
    """Start the HTTP API with uvicorn."""
    host = host or settings.api_host
    port = port or int(settings.api_port)
    print(f"Starting API on http://{host}:{port}/")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:app",
        "--host", host,
        "--port", str(port),
    ]
    try:
        subprocess.run(args)
    except FileNotFoundError:
        console.print("[bold red]Error:[/] `uvicorn` could not be started. Make sure it is installed.")
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
