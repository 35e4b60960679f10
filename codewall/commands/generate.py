"""
Generate command for codewall.

Produces one wallpaper image from a random file in a random public
GitHub repository and prints the image's file name.
"""

import click
import json
import random
import sys
from pathlib import Path
from typing import Optional

from ..config import configure_logging, load_config
from ..domain.failure import FatalError
from ..exit_codes import INTERRUPTED, exit_with_code, get_exit_code_for_exception
from ..services.wallpaper_service import WallpaperResult, WallpaperService


@click.command('generate')
@click.option('--output-dir', '-o', type=click.Path(file_okay=False),
              help='Directory for the image (default: config output.directory)')
@click.option('--html-only', is_flag=True, help='Write the highlighted HTML page instead of a PNG')
@click.option('--seed', type=int, help='Seed the random choices (repository IDs, files, theme, font)')
@click.option('--json', 'as_json', is_flag=True, help='Print a JSON record instead of the file name')
@click.option('--pretty', is_flag=True, help='Show progress with rich formatting')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def generate_handler(
    output_dir: Optional[str],
    html_only: bool,
    seed: Optional[int],
    as_json: bool,
    pretty: bool,
    debug: bool,
):
    """
    Generate a wallpaper from random code.

    Requires a GitHub token in GITHUB_TOKEN. Each failed attempt is logged
    to stderr; the produced file name is printed to stdout.

    \b
    Examples:
        codewall
        codewall generate -o ~/Pictures/wallpapers
        codewall generate --html-only --seed 42
    """
    config = load_config()
    configure_logging(config, debug)

    rng = random.Random(seed) if seed is not None else None
    out = Path(output_dir) if output_dir else None

    try:
        service = WallpaperService(config=config, rng=rng)
        if pretty:
            result = _generate_pretty(service, out, html_only)
        else:
            result = service.generate(out, html_only=html_only)
    except KeyboardInterrupt:
        exit_with_code(INTERRUPTED, "Interrupted")
    except (FatalError, OSError) as e:
        exit_with_code(get_exit_code_for_exception(e), f"Error: {e}")

    if as_json:
        print(json.dumps(result.to_dict()))
    else:
        click.echo(str(result.path))


def _generate_pretty(service: WallpaperService, out: Optional[Path], html_only: bool) -> WallpaperResult:
    """Rich formatted progress and summary, on stderr."""
    from rich.console import Console
    from rich.table import Table

    console = Console(file=sys.stderr)

    with console.status("[bold]Searching for a random file...[/bold]"):
        result = service.generate(out, html_only=html_only)

    table = Table(title="Wallpaper", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Repository", result.candidate.repo.full_name)
    table.add_row("File", result.candidate.file.source_entry)
    table.add_row("Language", result.lexer)
    table.add_row("Theme", result.theme)
    table.add_row("Font", result.font)
    table.add_row("Attempts", str(result.attempts))
    console.print(table)
    console.print(f"[bold green]✓[/bold green] Saved {result.path}")
    return result
