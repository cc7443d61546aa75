# album_sync/ui.py
from __future__ import annotations

from typing import Optional, Sequence

from prompt_toolkit import prompt as pt_prompt
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style as PtStyle
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt
from rich.table import Table

from .remote.items import RemoteItem

console = Console()

_ACCENT = "cyan"
_history = InMemoryHistory()


def hl(text: object) -> str:
    """Highlight a name or path inside a rich markup string."""
    return f"[{_ACCENT}]{escape(str(text))}[/{_ACCENT}]"


def print_message(text: str, style: str = "white", prefix: str = "•") -> None:
    console.print(f"[{style}]{prefix}[/{style}] {text}")


def print_success(message: str) -> None:
    print_message(message, "green", "✓")


def print_warning(message: str) -> None:
    print_message(message, "yellow", "⚠")


def print_error(message: str) -> None:
    print_message(message, "red", "✗")


def print_step(message: str) -> None:
    print_message(message, _ACCENT, "→")


def _prompt_style() -> PtStyle:
    return PtStyle.from_dict({"prompt": "bold ansicyan"})


def ask_query(message: str = "Select an album (search, empty to quit): ") -> str:
    try:
        return pt_prompt(message, history=_history, style=_prompt_style()).strip()
    except EOFError:
        # Ctrl+D quits like an empty query
        return ""


def ask_password(user: str, host: str) -> str:
    return pt_prompt(f"Password for {user}@{host}: ", is_password=True, style=_prompt_style())


def confirm(message: str, default: bool = True) -> bool:
    return Confirm.ask(message, default=default, console=console)


def render_items(items: Sequence[RemoteItem], title: Optional[str] = None) -> Table:
    table = Table(title=escape(title) if title else None, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Item", style=_ACCENT)
    for i, item in enumerate(items, start=1):
        table.add_row(str(i), escape(item.path()))
    return table


def choose_item(items: Sequence[RemoteItem]) -> Optional[RemoteItem]:
    """Numbered pick from ``items``; 0 means "search again"."""
    if not items:
        print_warning("No matches.")
        return None
    console.print(render_items(items))
    choices = [str(i) for i in range(0, len(items) + 1)]
    idx = IntPrompt.ask(
        "Pick an item (0 to search again)",
        choices=choices,
        show_choices=False,
        default=1 if len(items) == 1 else 0,
        console=console,
    )
    if idx == 0:
        return None
    return items[idx - 1]
