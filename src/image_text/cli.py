"""Command-line interface for extracting and grouping image text."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import get_settings
from .coordinates import Size
from .models import FragmentGroup

app = typer.Typer(
    name="image-text",
    help="Extract text from images and group it into copyable regions",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    rich_markup_mode="rich",
)
history_app = typer.Typer(
    help="Inspect or clear the scan history", no_args_is_help=True
)
app.add_typer(history_app, name="history")

console = Console(stderr=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Extract text from images and group it into copyable regions."""
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, get_settings().log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


@app.command()
def scan(
    image: Path = typer.Argument(
        ...,
        help="Path to image file",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    backend: Optional[str] = typer.Option(
        None,
        "--backend",
        "-b",
        help="OCR backend ('livetext' or 'google_vision'), default from settings",
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        "-l",
        help="OCR language preference (e.g., 'en-US', 'zh-Hans')",
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print groups as JSON on stdout"
    ),
    save_history: bool = typer.Option(
        False, "--save-history", help="Add the scanned text to the history"
    ),
) -> None:
    """Run OCR on an image and print the grouped text."""
    from .backends import get_backend
    from .history import HistoryStore
    from .session import ScanSession

    settings = get_settings()

    try:
        ocr_backend = get_backend(backend, settings)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    session = ScanSession(
        ocr_backend, config=settings.grouping, language=language or settings.language
    )
    with session:
        try:
            session.select_image(image.read_bytes())
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

        console.print(f"[bold]Scanning {image.name}[/bold] with {ocr_backend.name}")
        result = session.scan()
        groups = session.groups

        if result.error:
            console.print(f"[yellow]OCR failed:[/yellow] {result.error}")

        _print_groups(groups, as_json)

        if save_history and groups:
            store = HistoryStore(settings.history_path, settings.history_limit)
            store.add(session.copy_all_text())
            console.print("[green]✓[/green] Saved to history")


@app.command()
def group(
    fragments_file: Path = typer.Argument(
        ...,
        help="JSON file of OCR fragments (normalized, bottom-left boxes)",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print groups as JSON on stdout"
    ),
) -> None:
    """Group previously recognized fragments without running OCR."""
    from .grouping import group_fragments
    from .io import load_fragments

    try:
        fragments = load_fragments(fragments_file)
    except (ValueError, KeyError, TypeError, json.JSONDecodeError) as e:
        console.print(f"[red]Error:[/red] Could not read fragments: {e}")
        raise typer.Exit(1) from e

    _print_groups(group_fragments(fragments, get_settings().grouping), as_json)


@app.command()
def overlay(
    image: Path = typer.Argument(
        ...,
        help="Path to image file",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    fragments_file: Path = typer.Argument(
        ...,
        help="JSON file of OCR fragments for this image",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Output PNG file (default: image name with .overlay.png)",
    ),
    width: Optional[int] = typer.Option(
        None, "--width", "-W", help="Container width in pixels"
    ),
    height: Optional[int] = typer.Option(
        None, "--height", "-H", help="Container height in pixels"
    ),
) -> None:
    """Render the tap-to-copy overlay for an image and its fragments."""
    from PIL import Image

    from .grouping import group_fragments
    from .io import load_fragments
    from .orientation import orientation_from_exif, upright
    from .overlay import build_overlay, render_overlay

    if output is None:
        output = image.with_suffix(".overlay.png")

    try:
        fragments = load_fragments(fragments_file)
    except (ValueError, KeyError, TypeError, json.JSONDecodeError) as e:
        console.print(f"[red]Error:[/red] Could not read fragments: {e}")
        raise typer.Exit(1) from e

    with Image.open(image) as source:
        picture = upright(source, orientation_from_exif(source)).copy()

    image_size = Size(width=picture.width, height=picture.height)
    container = Size(width=width or picture.width, height=height or picture.height)

    groups = group_fragments(fragments, get_settings().grouping)
    layout = build_overlay(groups, image_size, container)
    if layout is None:
        console.print("[red]Error:[/red] Image or container size is empty")
        raise typer.Exit(1)

    render_overlay(picture, layout).save(str(output))
    console.print(
        f"[green]✓[/green] {len(layout.items)} regions, overlay saved to {output}"
    )


@history_app.command("list")
def history_list(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of entries to show"),
) -> None:
    """Show the most recent history entries."""
    from .history import HistoryStore

    settings = get_settings()
    items = HistoryStore(settings.history_path, settings.history_limit).items[:limit]

    if not items:
        console.print("History is empty")
        return

    table = Table(title="Scan history")
    table.add_column("#", justify="right")
    table.add_column("When")
    table.add_column("Text")
    for index, item in enumerate(items):
        table.add_row(str(index), item.timestamp.strftime("%Y-%m-%d %H:%M"), item.text)
    Console().print(table)


@history_app.command("clear")
def history_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every history entry."""
    from .history import HistoryStore

    if not yes:
        typer.confirm("Clear the scan history?", abort=True)

    settings = get_settings()
    HistoryStore(settings.history_path, settings.history_limit).clear()
    console.print("[green]✓[/green] History cleared")


def _print_groups(groups: list[FragmentGroup], as_json: bool) -> None:
    from .io import group_to_dict

    if as_json:
        payload = [group_to_dict(g) for g in groups]
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    if not groups:
        console.print("No text detected")
        return

    table = Table(title=f"{len(groups)} text regions")
    table.add_column("#", justify="right")
    table.add_column("Text")
    table.add_column("Box (x, y, w, h)")
    for index, g in enumerate(groups):
        box = ", ".join(f"{v:.3f}" for v in g.box.as_list())
        table.add_row(str(index), g.combined_text, box)
    Console().print(table)


if __name__ == "__main__":
    app()
