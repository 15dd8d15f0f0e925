"""Entry commands for Moodiary CLI.

Handles writing entries, viewing them, calendar and dashboard listings,
and attaching images or drawings.
"""

import base64
import mimetypes
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from moodiary import config as cfg
from moodiary.errors import DiaryError, ValidationError
from moodiary.models import DEFAULT_THEME, MAX_IMAGES, MOOD_EMOJIS, THEME_NAMES, EntryInput, Mood

console = Console()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]


def _get_services(config: Optional[dict]):
    """Get the entry and user services for the configured store."""
    from moodiary.db.store import DataStore
    from moodiary.services.entries import EntryService
    from moodiary.services.users import UserService

    store = DataStore(cfg.get_db_path(config))
    max_attempts = cfg.get_max_attempts(config)
    return EntryService(store, max_attempts=max_attempts), UserService(store, max_attempts=max_attempts)


def _print_error(action: str, error: Exception) -> None:
    """Render an error panel."""
    if isinstance(error, ValidationError):
        detail = "\n".join(f"• {message}" for message in error.errors)
    else:
        detail = str(error)
    console.print(Panel(
        f"[red]{action}:[/red]\n\n{detail}",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))


def _mood_label(mood: Mood) -> str:
    return f"{MOOD_EMOJIS[mood]} {mood.value}"


@click.command()
@click.option("--title", "-t", required=True, help="Entry title (1-200 characters).")
@click.option(
    "--mood", "-m",
    required=True,
    type=click.Choice(Mood.values(), case_sensitive=False),
    help="How you feel.",
)
@click.option("--content", "-c", default="", help="Entry text.")
@click.option("--image", "images", multiple=True, help="Image URL (repeatable, max 10).")
@click.option("--drawing", "drawing_url", default=None, help="Drawing URL.")
@click.option(
    "--theme",
    type=click.Choice(THEME_NAMES),
    default=DEFAULT_THEME,
    show_default=True,
    help="Page theme.",
)
@click.option("--date", "entry_date", type=click.DateTime(formats=DATE_FORMATS), default=None,
              help="Entry date (default: now).")
@click.option("--entry-id", default=None, help="Overwrite this existing entry instead of creating one.")
@click.option("--user", "user_id", default=None, help="User ID (default: from config).")
def write(
    title: str,
    mood: str,
    content: str,
    images: tuple[str, ...],
    drawing_url: Optional[str],
    theme: str,
    entry_date: Optional[datetime],
    entry_id: Optional[str],
    user_id: Optional[str],
) -> None:
    """Write a new entry or overwrite an existing one.

    New entries count towards your daily streak.

    \b
    Examples:
      moodiary write -t "Lazy Sunday" -m calm -c "Read all afternoon"
      moodiary write -t "Catching up" -m productive --date 2025-07-09
      moodiary write -t "Fixed title" -m happy --entry-id abc123
    """
    config = cfg.load_config()
    user_id = user_id or cfg.get_user_id(config)

    entry_input = EntryInput(
        title=title,
        content={"text": content},
        mood=mood.lower(),
        images=list(images),
        drawing_url=drawing_url,
        theme=theme,
        date=entry_date or datetime.now(),
    )

    try:
        entries, users = _get_services(config)
        saved_id = entries.save_entry(user_id, entry_input, existing_entry_id=entry_id)
    except DiaryError as e:
        _print_error("Failed to save entry", e)
        raise SystemExit(1)

    if entry_id:
        # Updates leave the streak alone
        console.print(f"[green]✓ Updated entry {saved_id}[/green]")
        return

    console.print(f"[green]✓ Saved entry {saved_id}[/green]")
    profile = users.get_profile(user_id)
    console.print(f"[cyan]Streak: {profile.streak} day(s) (longest {profile.longest_streak})[/cyan]")


@click.command()
@click.argument("entry_id")
@click.option("--user", "user_id", default=None, help="User ID (default: from config).")
def show(entry_id: str, user_id: Optional[str]) -> None:
    """Show a single entry.

    \b
    Examples:
      moodiary show abc123
    """
    config = cfg.load_config()
    user_id = user_id or cfg.get_user_id(config)

    try:
        entries, _ = _get_services(config)
        entry = entries.get_entry(entry_id, user_id)
    except DiaryError as e:
        _print_error("Failed to load entry", e)
        raise SystemExit(1)

    text = entry.content.get("text", "") if isinstance(entry.content, dict) else str(entry.content or "")
    lines = [
        f"[bold]Date:[/bold] {entry.date.strftime('%Y-%m-%d %H:%M')}",
        f"[bold]Mood:[/bold] {_mood_label(entry.mood)}",
        f"[bold]Theme:[/bold] {entry.theme}",
    ]
    if entry.images:
        lines.append(f"[bold]Images:[/bold] {len(entry.images)}")
    if entry.drawing_url:
        lines.append(f"[bold]Drawing:[/bold] {entry.drawing_url}")
    if text:
        lines.append(f"\n{text}")

    console.print(Panel(
        "\n".join(lines),
        title=f"[bold]{entry.title}[/bold]",
        subtitle=f"[dim]{entry.id}[/dim]",
        border_style="magenta",
    ))


def _summary_table(title: str, summaries) -> Table:
    table = Table(title=title)
    table.add_column("Date", style="cyan")
    table.add_column("Mood")
    table.add_column("Title")
    table.add_column("ID", style="dim")
    for summary in summaries:
        table.add_row(
            summary.date.strftime("%Y-%m-%d"),
            _mood_label(summary.mood),
            summary.title,
            summary.entry_id,
        )
    return table


@click.command()
@click.argument("year", type=int, required=False)
@click.argument("month", type=click.IntRange(1, 12), required=False)
@click.option("--user", "user_id", default=None, help="User ID (default: from config).")
def month(year: Optional[int], month: Optional[int], user_id: Optional[str]) -> None:
    """List entries for a calendar month (default: this month).

    \b
    Examples:
      moodiary month
      moodiary month 2025 7
    """
    config = cfg.load_config()
    user_id = user_id or cfg.get_user_id(config)
    today = date.today()
    year = year or today.year
    month = month or today.month

    try:
        entries, _ = _get_services(config)
        summaries = entries.get_entries_for_month(user_id, year, month)
    except DiaryError as e:
        _print_error("Failed to load entries", e)
        raise SystemExit(1)

    heading = date(year, month, 1).strftime("%B %Y")
    if not summaries:
        console.print(f"[yellow]No entries in {heading}[/yellow]")
        return

    console.print(_summary_table(heading, summaries))


@click.command()
@click.option("--limit", "-n", type=click.IntRange(min=1), default=5, show_default=True,
              help="Number of entries to show.")
@click.option("--user", "user_id", default=None, help="User ID (default: from config).")
def recent(limit: int, user_id: Optional[str]) -> None:
    """List your most recent entries.

    \b
    Examples:
      moodiary recent
      moodiary recent -n 10
    """
    config = cfg.load_config()
    user_id = user_id or cfg.get_user_id(config)

    try:
        entries, _ = _get_services(config)
        summaries = entries.get_recent_entries(user_id, limit=limit)
    except DiaryError as e:
        _print_error("Failed to load entries", e)
        raise SystemExit(1)

    if not summaries:
        console.print("[yellow]No entries yet. Write one with 'moodiary write'.[/yellow]")
        return

    console.print(_summary_table("Recent entries", summaries))


@click.command()
@click.argument("entry_id")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--drawing", is_flag=True, help="Store the file as the entry's drawing (PNG).")
@click.option("--user", "user_id", default=None, help="User ID (default: from config).")
def attach(entry_id: str, file: Path, drawing: bool, user_id: Optional[str]) -> None:
    """Attach an image or drawing file to an entry.

    \b
    Examples:
      moodiary attach abc123 beach.jpg
      moodiary attach abc123 sketch.png --drawing
    """
    from moodiary.services.storage import LocalFileStore

    config = cfg.load_config()
    user_id = user_id or cfg.get_user_id(config)
    files = LocalFileStore(cfg.get_files_path(config))

    try:
        entries, _ = _get_services(config)
        entry = entries.get_entry(entry_id, user_id)
    except DiaryError as e:
        _print_error("Failed to attach file", e)
        raise SystemExit(1)

    if not drawing and len(entry.images) >= MAX_IMAGES:
        _print_error("Failed to attach file", ValidationError([f"Maximum {MAX_IMAGES} images allowed"]))
        raise SystemExit(1)

    images = list(entry.images)
    drawing_url = entry.drawing_url
    uploaded = None
    try:
        if drawing:
            encoded = base64.b64encode(file.read_bytes()).decode("ascii")
            drawing_url = files.upload_drawing(user_id, entry_id, f"data:image/png;base64,{encoded}")
            # Re-uploading a drawing overwrites the file the entry already points at
            if drawing_url != entry.drawing_url:
                uploaded = drawing_url
        else:
            content_type = mimetypes.guess_type(file.name)[0] or "application/octet-stream"
            uploaded = files.upload_image(user_id, entry_id, file.name, file.read_bytes(), content_type)
            images.append(uploaded)

        entries.save_entry(
            user_id,
            EntryInput(
                title=entry.title,
                content=entry.content,
                mood=entry.mood,
                images=images,
                drawing_url=drawing_url,
                theme=entry.theme,
                date=entry.date,
            ),
            existing_entry_id=entry_id,
        )
    except DiaryError as e:
        if uploaded and uploaded not in entry.images:
            files.delete(uploaded)
        _print_error("Failed to attach file", e)
        raise SystemExit(1)

    kind = "drawing" if drawing else "image"
    console.print(f"[green]✓ Attached {kind} {file.name} to entry {entry_id}[/green]")
