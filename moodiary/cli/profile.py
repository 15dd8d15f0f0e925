"""Profile commands for Moodiary CLI.

Handles first-time setup and streak display.
"""

import click
from rich.console import Console
from rich.panel import Panel

from moodiary import config as cfg
from moodiary.errors import DiaryError

console = Console()


def _get_user_service(config: dict | None):
    """Get the user service for the configured store."""
    from moodiary.db.store import DataStore
    from moodiary.services.users import UserService

    store = DataStore(cfg.get_db_path(config))
    return UserService(store, max_attempts=cfg.get_max_attempts(config))


@click.command()
@click.option("--name", default="", help="Display name for your profile.")
@click.option("--email", default="", help="Email for your profile.")
def init(name: str, email: str) -> None:
    """Create the config file and your profile.

    An existing config file is left untouched.

    \b
    Examples:
      moodiary init
      moodiary init --name "Sam" --email sam@example.com
    """
    config = cfg.load_config()
    if config is None:
        config_path = cfg.create_template_config(name=name, email=email)
        console.print(f"[green]✓ Created config at {config_path}[/green]")
        config = cfg.load_config()

    user_id = cfg.get_user_id(config)
    user_config = (config or {}).get("user", {})

    try:
        profile = _get_user_service(config).ensure_profile(
            user_id,
            name=name or user_config.get("name", ""),
            email=email or user_config.get("email", ""),
        )
    except DiaryError as e:
        console.print(Panel(
            f"[red]Failed to create profile:[/red]\n\n{str(e)}",
            title="[bold red]Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    console.print(f"[green]✓ Profile ready for '{profile.id}'[/green]")


@click.command()
@click.option("--user", "user_id", default=None, help="User ID (default: from config).")
def streak(user_id: str | None) -> None:
    """Show your current and longest writing streak.

    \b
    Examples:
      moodiary streak
    """
    config = cfg.load_config()
    user_id = user_id or cfg.get_user_id(config)

    try:
        profile = _get_user_service(config).get_profile(user_id)
    except DiaryError as e:
        console.print(Panel(
            f"[red]Failed to load profile:[/red]\n\n{str(e)}\n\n"
            "[dim]Run 'moodiary init' to create your profile.[/dim]",
            title="[bold red]Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    if profile.last_entry_date is None:
        last = "[dim]never[/dim]"
    else:
        last = profile.last_entry_date.strftime("%Y-%m-%d")

    fire = "🔥 " if profile.streak >= 3 else ""
    console.print(Panel(
        f"{fire}[bold]Current streak:[/bold] {profile.streak} day(s)\n"
        f"[bold]Longest streak:[/bold] {profile.longest_streak} day(s)\n"
        f"[bold]Last entry:[/bold] {last}",
        title=f"[bold cyan]Streak for {profile.id}[/bold cyan]",
        border_style="cyan",
    ))
