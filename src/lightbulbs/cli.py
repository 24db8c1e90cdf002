"""CLI for Lightbulbs.

Commands:
    init-db                  - Create the database tables
    add-category <name>      - Create a category
    list-categories          - List categories
    list-tags                - List tags
    list-sources             - List reference sources
    search-bulbs             - Search bulbs by title, content, category or tag
    show-bulb <id>           - Show bulb details
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from lightbulbs.config import get_settings
from lightbulbs.db import Database
from lightbulbs.entities import Bulb, Category
from lightbulbs.errors import LightbulbsError
from lightbulbs.operators import (
    BulbOperator,
    CategoryOperator,
    ReferenceSourceOperator,
    TagOperator,
)

T = TypeVar("T")

app = typer.Typer(
    name="lightbulbs",
    help="Lightbulbs: personal knowledge base of bulbs, categories, tags and references",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logs")] = False,
) -> None:
    level = logging.DEBUG if verbose else get_settings().log_level
    logging.basicConfig(level=level, format="%(message)s", handlers=[RichHandler(console=console)])


def run_with_db(action: Callable[[Database], Awaitable[T]]) -> T:
    """Connect, run ``action``, disconnect. Domain errors exit with status 1."""

    async def _run() -> T:
        async with Database(get_settings().database_config()) as db:
            return await action(db)

    try:
        return asyncio.run(_run())
    except LightbulbsError as exc:
        console.print("[red]Error:[/red]", escape(exc.message))
        raise typer.Exit(1) from None


def _short(value: Any) -> str:
    return "-" if value is None else str(value)


@app.command("init-db")
def init_db() -> None:
    """Create the database tables."""
    run_with_db(lambda db: db.init_schema())
    console.print("[green]Database schema initialized.[/green]")


@app.command("add-category")
def add_category(
    name: Annotated[str, typer.Argument(help="Unique category name")],
    description: Annotated[str | None, typer.Option(help="Category description")] = None,
) -> None:
    """Create a category."""

    async def _add(db: Database) -> str | None:
        category = Category(db, {"name": name, "description": description})
        await category.save()
        return category.get_id()

    category_id = run_with_db(_add)
    console.print(f"[green]Created category[/green] {name} ({category_id})")


@app.command("list-categories")
def list_categories(
    name: Annotated[str | None, typer.Option(help="Case-insensitive name fragment")] = None,
) -> None:
    """List categories."""
    categories = run_with_db(
        lambda db: CategoryOperator.find_all(db, filter={"name": name} if name else None)
    )

    table = Table(title="Categories")
    table.add_column("ID", no_wrap=True)
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("Bulbs", justify="right")
    for category in categories:
        table.add_row(
            category["id"],
            category["name"],
            _short(category["description"]),
            str(category["statistics"]["total_bulbs"]),
        )
    console.print(table)


@app.command("list-tags")
def list_tags(
    label: Annotated[str | None, typer.Option(help="Case-insensitive label fragment")] = None,
) -> None:
    """List tags."""
    tags = run_with_db(lambda db: TagOperator.find_all(db, filter={"label": label} if label else None))

    table = Table(title="Tags")
    table.add_column("ID", no_wrap=True)
    table.add_column("Label")
    table.add_column("Parent", no_wrap=True)
    table.add_column("Bulbs", justify="right")
    table.add_column("Children", justify="right")
    for tag in tags:
        table.add_row(
            tag["id"],
            tag["label"],
            tag["parent"]["id"] if tag["parent"] else "-",
            str(tag["statistics"]["total_bulbs"]),
            str(tag["statistics"]["total_children"]),
        )
    console.print(table)


@app.command("list-sources")
def list_sources(
    source_type: Annotated[
        str | None, typer.Option("--type", help="Source type, e.g. 'Print' or 'Web Page'")
    ] = None,
) -> None:
    """List reference sources."""
    sources = run_with_db(
        lambda db: ReferenceSourceOperator.find_all(db, filter={"type": source_type} if source_type else None)
    )

    table = Table(title="Reference Sources")
    table.add_column("ID", no_wrap=True)
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Locator")
    for source in sources:
        table.add_row(source["id"], source["name"], source["type"].value, _short(source["locator"]))
    console.print(table)


@app.command("search-bulbs")
def search_bulbs(
    title: Annotated[str | None, typer.Option(help="Case-insensitive title fragment")] = None,
    content: Annotated[str | None, typer.Option(help="Case-insensitive content fragment")] = None,
    category: Annotated[list[str] | None, typer.Option(help="Category ID (repeatable)")] = None,
    tag: Annotated[list[str] | None, typer.Option(help="Tag ID (repeatable)")] = None,
) -> None:
    """Search bulbs. All given options must match."""
    criteria: dict[str, Any] = {}
    if title:
        criteria["title"] = title
    if content:
        criteria["content"] = content
    if category:
        criteria["categories"] = category
    if tag:
        criteria["tags"] = tag

    bulbs = run_with_db(
        lambda db: BulbOperator.find_all(
            db, filter=criteria or None, fields=["title", "category", "tags"]
        )
    )

    if not bulbs:
        console.print("[yellow]No bulbs found[/yellow]")
        return

    table = Table(title="Bulbs")
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Category", no_wrap=True)
    table.add_column("Tags", justify="right")
    for bulb in bulbs:
        table.add_row(bulb["id"], bulb["title"], bulb["category"]["id"], str(len(bulb["tags"])))
    console.print(table)


@app.command("show-bulb")
def show_bulb(
    bulb_id: Annotated[str, typer.Argument(help="Bulb ID (UUID)")],
) -> None:
    """Show details for a specific bulb."""

    async def _load(db: Database) -> dict[str, Any]:
        bulb = Bulb(db)
        await bulb.load(bulb_id)
        return dict(bulb.get_data() or {})

    data = run_with_db(_load)

    panel_content = [
        f"[bold]ID:[/bold] {data['id']}",
        f"[bold]Category:[/bold] {data['category']['id']}",
        f"[bold]Created:[/bold] {data['created_at']:%Y-%m-%d %H:%M}",
        f"[bold]Updated:[/bold] {data['updated_at']:%Y-%m-%d %H:%M}",
        "",
        data["content"],
    ]
    if data["references"]:
        panel_content.append("")
        panel_content.append("[bold]References:[/bold]")
        for reference in data["references"]:
            panel_content.append(f"  - {reference['source']['id']} {_short(reference['detail'])}")
    if data["tags"]:
        panel_content.append(f"[bold]Tags:[/bold] {', '.join(tag['id'] for tag in data['tags'])}")
    if data["past_versions"]:
        panel_content.append(f"[bold]Past versions:[/bold] {len(data['past_versions'])}")

    console.print(Panel("\n".join(panel_content), title=data["title"]))


if __name__ == "__main__":
    app()
