"""Quote command for Moodiary CLI."""

import click
from rich.console import Console
from rich.panel import Panel

from moodiary.services.quotes import DEFAULT_QUOTES, get_random_quote

console = Console()


@click.command()
@click.option("--previous", default=None, help="ID of the last quote shown, to avoid repeating it.")
def quote(previous: str | None) -> None:
    """Show a random quote.

    \b
    Examples:
      moodiary quote
      moodiary quote --previous q3
    """
    card = get_random_quote(DEFAULT_QUOTES, previous)
    if card is None:
        console.print("[yellow]No quotes available[/yellow]")
        return

    console.print(Panel(
        f"[italic]“{card.text}”[/italic]\n\n— {card.author}",
        title=f"[bold]Quote {card.id}[/bold] [dim]({card.category})[/dim]",
        border_style=card.background_color,
    ))
