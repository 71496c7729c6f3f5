"""cardwise CLI: review, due queue, note overview, stats, import, config and serve commands."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from cardwise.application.config import config_file_path, resolve_config
from cardwise.domain.errors import CardwiseError
from cardwise.interface._common import _resolve_with_overrides, humanize_error

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cardwise: Spaced-repetition scheduling for your flashcards.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

config_app = typer.Typer(help="Manage cardwise configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Enable debug logging."
        ),
    ] = 0,
    db_path: Annotated[
        Path | None, typer.Option("--db", help="Card database path. Defaults to config.")
    ] = None,
):
    """Global settings for cardwise."""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db_path
    if verbose >= 1:
        logging.getLogger("cardwise").setLevel(logging.DEBUG)


def _fail(error: Exception, code: int = 1):
    typer.secho(humanize_error(error), fg="red", err=True)
    raise typer.Exit(code) from error


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def review(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="ID of the card you reviewed.")],
    quality: Annotated[
        int,
        typer.Argument(
            help="Recall quality: 0 blackout, 1-2 failed, 3 difficult, 4 hesitant, 5 perfect."
        ),
    ],
    time_taken: Annotated[
        int | None, typer.Option("--time-taken", help="Seconds spent on the card.")
    ] = None,
    user: Annotated[str | None, typer.Option("--user", help="Card owner.")] = None,
):
    """[bold green]Record[/bold green] a review and reschedule the card."""
    from cardwise.application.factory import get_card_repository, get_review_service
    from cardwise.domain.errors import InvalidQualityError

    config = _resolve_with_overrides(db_path=ctx.obj.get("db_path"), user_id=user)

    async def run():
        with get_card_repository(config) as repo:
            service = get_review_service(config, repo)
            return await service.record_review(
                config.user_id, card_id, quality, time_taken=time_taken
            )

    try:
        outcome = asyncio.run(run())
    except InvalidQualityError as e:
        _fail(e, code=2)
    except CardwiseError as e:
        _fail(e)

    card = outcome.card
    typer.secho(f"Next review: {card.next_review.isoformat()}", fg="green")
    typer.echo(
        f"Interval: {card.interval}d  Ease: {card.ease_factor:.2f}  "
        f"Repetitions: {card.repetitions}"
    )
    if not outcome.history_saved:
        typer.secho("Review history could not be saved.", fg="yellow")


@app.command()
def due(
    ctx: typer.Context,
    note: Annotated[
        str | None, typer.Option("--note", help="Drill a single note (no session cap).")
    ] = None,
    limit: Annotated[
        int | None, typer.Option("--limit", min=0, help="Cap for the all-due view.")
    ] = None,
    user: Annotated[str | None, typer.Option("--user", help="Card owner.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List cards due for review, most overdue first."""
    from cardwise.application.factory import get_card_repository, get_review_service

    config = _resolve_with_overrides(db_path=ctx.obj.get("db_path"), user_id=user)

    async def run():
        with get_card_repository(config) as repo:
            service = get_review_service(config, repo)
            return await service.due_cards(config.user_id, note_id=note, max_cards=limit)

    try:
        session = asyncio.run(run())
    except CardwiseError as e:
        _fail(e)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "total_due": session.total_due,
                    "note_id": session.note_id,
                    "cards": [
                        {
                            "id": c.id,
                            "question": c.question,
                            "note_id": c.note_id,
                            "next_review": c.next_review.isoformat(),
                        }
                        for c in session.cards
                    ],
                },
                indent=2,
            )
        )
        return

    if not session.cards:
        typer.secho("No cards due.", fg="green")
        return

    typer.echo(f"Due cards: {len(session.cards)}")
    if session.truncated:
        typer.secho(f"(showing {len(session.cards)} of {session.total_due})", fg="yellow")
    for card in session.cards:
        typer.echo(f"  {card.id}  {card.next_review:%Y-%m-%d %H:%M}  {card.question}")


@app.command()
def notes(
    ctx: typer.Context,
    user: Annotated[str | None, typer.Option("--user", help="Card owner.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show total and due card counts per note."""
    from cardwise.application.factory import get_card_repository, get_review_service

    config = _resolve_with_overrides(db_path=ctx.obj.get("db_path"), user_id=user)

    async def run():
        with get_card_repository(config) as repo:
            service = get_review_service(config, repo)
            return await service.due_overview(config.user_id)

    try:
        overview = asyncio.run(run())
    except CardwiseError as e:
        _fail(e)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "total_due": overview.total_due,
                    "notes": [
                        {
                            "note_id": n.note_id,
                            "total_cards": n.total_cards,
                            "due_cards": n.due_cards,
                        }
                        for n in overview.notes
                    ],
                },
                indent=2,
            )
        )
        return

    if not overview.notes:
        typer.secho("No notes with cards.", fg="yellow")
        return

    typer.echo(f"Due across notes: {overview.total_due}")
    for n in overview.notes:
        typer.echo(f"  {n.note_id}  {n.due_cards}/{n.total_cards} due")


@app.command()
def stats(
    ctx: typer.Context,
    user: Annotated[str | None, typer.Option("--user", help="Card owner.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show card maturity buckets and recent retention."""
    from cardwise.application.factory import get_card_repository, get_stats_service

    config = _resolve_with_overrides(db_path=ctx.obj.get("db_path"), user_id=user)

    async def run():
        with get_card_repository(config) as repo:
            return await get_stats_service(config, repo).summary(config.user_id)

    try:
        summary = asyncio.run(run())
    except CardwiseError as e:
        _fail(e)

    s = summary.stats
    if json_output:
        typer.echo(
            json.dumps(
                {
                    "total": s.total,
                    "due": s.due,
                    "new": s.new,
                    "learning": s.learning,
                    "mature": s.mature,
                    "average_ease": s.average_ease,
                    "retention_rate": summary.retention_rate,
                    "window_days": summary.window_days,
                },
                indent=2,
            )
        )
        return

    typer.echo(f"Cards: {s.total}  Due: {s.due}")
    typer.echo(f"New: {s.new}  Learning: {s.learning}  Mature: {s.mature}")
    typer.echo(f"Average ease: {s.average_ease:.2f}")
    typer.echo(
        f"Retention ({summary.window_days}d): {summary.retention_rate}% "
        f"over {summary.reviews_in_window} reviews"
    )


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="YAML or JSON deck file.")],
    note: Annotated[
        str | None, typer.Option("--note", help="Parent note ID for the imported cards.")
    ] = None,
    user: Annotated[str | None, typer.Option("--user", help="Card owner.")] = None,
):
    """Import generated cards; they are due immediately."""
    from cardwise.application.card_import import load_deck
    from cardwise.application.factory import get_card_repository, get_review_service

    config = _resolve_with_overrides(db_path=ctx.obj.get("db_path"), user_id=user)

    try:
        records = load_deck(path)
    except (CardwiseError, FileNotFoundError) as e:
        _fail(e, code=2)

    async def run():
        with get_card_repository(config) as repo:
            service = get_review_service(config, repo)
            return await service.import_cards(config.user_id, records, note_id=note)

    try:
        cards = asyncio.run(run())
    except CardwiseError as e:
        _fail(e, code=2)

    typer.secho(f"Imported {len(cards)} cards.", fg="green")


@app.command()
def serve(
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP API server."""
    import uvicorn

    config = _resolve_with_overrides(host=host, port=port)
    uvicorn.run("cardwise.server:app", host=config.host, port=config.port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


@config_app.command("path")
def config_path():
    """Print where the config file is read from."""
    cfg_path = config_file_path()
    typer.echo(str(cfg_path))
    if not cfg_path.exists():
        typer.secho("(file does not exist; defaults and CARDWISE_* env vars apply)", fg="yellow")
