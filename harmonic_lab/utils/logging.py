from __future__ import annotations

from rich.console import Console

# stderr keeps stdout free for exported JSON / tables
console = Console(stderr=True, highlight=False)

_quiet = False


def set_quiet(quiet: bool) -> None:
    global _quiet
    _quiet = bool(quiet)


def info(msg: str) -> None:
    if not _quiet:
        console.print(f"[bold cyan]INFO[/bold cyan] {msg}")


def warn(msg: str) -> None:
    console.print(f"[bold yellow]WARN[/bold yellow] {msg}")


def error(msg: str) -> None:
    console.print(f"[bold red]ERROR[/bold red] {msg}")
