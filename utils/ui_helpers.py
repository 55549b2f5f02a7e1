import os
import json
from typing import List, Any, Dict, Iterable, Tuple
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Environment variable to control CLI output mode
# İzin verilen değerler: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def print_list_result(books: List[Any], empty_message: str = "No books in library.") -> None:
    """Print books according to the current output mode.
    - plain: 'ID - Title by Author' lines, or the empty message
    - json: JSON array of identifier, title, author
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print(empty_message)
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        for b in books:
            table.add_row(b.identifier, b.title, b.author)
        _console.print(table)
    else:
        for b in books:
            print(f"{b.identifier} - {b.title} by {b.author}")

def print_loans_result(loans: List[Any]) -> None:
    mode = get_output_mode()

    if not loans:
        print("No active loans.")
        return

    if mode == "json":
        print(json.dumps([loan.to_dict() for loan in loans], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📖 Active Loans", header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Borrower", style="white")
        table.add_column("Since", style="dim")
        for loan in loans:
            table.add_row(loan.identifier, loan.borrower, loan.timestamp.strftime("%Y-%m-%d %H:%M"))
        _console.print(table)
    else:
        for loan in loans:
            print(f"{loan.identifier} -> {loan.borrower} ({loan.timestamp.isoformat()})")

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print statistics according to the current output mode."""
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{key.replace('_', ' ').title()}:[/] {value}" for key, value in stats.items())
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        for key, value in stats.items():
            print(f"{key.replace('_', ' ').title()}: {value}")

def print_outbox(outbox: Iterable[Tuple[str, str]]) -> None:
    mode = get_output_mode()
    messages = list(outbox)

    if mode == "json":
        print(json.dumps([{"to": to, "message": message} for to, message in messages], ensure_ascii=False))
    elif mode == "rich":
        for to, message in messages:
            _console.print(f"✉️  [bold]{to}[/]: {message}")
    else:
        for to, message in messages:
            print(f"Email to {to}: {message}")
