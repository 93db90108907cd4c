"""recollect CLI: study queues, reviews, stats and collection management."""

import json
import logging
import sys
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Annotated, Any

import typer

from recollect.application.config import AppConfig, resolve_config
from recollect.application.factory import (
    get_collection,
    get_deck_service,
    get_session_service,
    get_stats_service,
)
from recollect.application.scheduler import format_interval, predict_intervals
from recollect.domain.errors import CardNotFoundError, RecollectError
from recollect.domain.models import (
    Card,
    DeckSettings,
    Difficulty,
    OrderMode,
    ReviewMode,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="recollect: SM-2 spaced-repetition scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

deck_app = typer.Typer(help="Manage decks.", no_args_is_help=True)
app.add_typer(deck_app, name="deck")

card_app = typer.Typer(help="Manage cards.", no_args_is_help=True)
app.add_typer(card_app, name="card")

config_app = typer.Typer(help="Manage recollect configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data: Annotated[
        Path | None, typer.Option("--data", help="Collection file. Defaults to config.")
    ] = None,
):
    """Global settings for recollect."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {"data_file": data, "verbose": verbose}

    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.getLogger("recollect").setLevel(level)


def _config(ctx: typer.Context, **overrides: Any) -> AppConfig:
    base = dict((ctx.obj or {}).get("overrides", {}))
    base.update(overrides)
    return resolve_config(base)


def _fail(err: RecollectError) -> typer.Exit:
    typer.secho(f"Error: {err}", fg="red", err=True)
    return typer.Exit(1)


def _card_row(card: Card) -> dict[str, Any]:
    review = card.review
    return {
        "id": card.id,
        "deck_id": card.deck_id,
        "front": card.payload.get("front"),
        "state": review.state.value,
        "due": review.next_due_date.isoformat(),
        "interval": review.interval,
        "repetitions": review.repetitions,
        "easiness": round(review.easiness_factor, 2),
    }


# ---------------------------------------------------------------------------
# Study commands
# ---------------------------------------------------------------------------


@app.command("queue")
def queue(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Deck id. Defaults to all decks.")] = None,
    seed: Annotated[int | None, typer.Option(help="Seed for reproducible shuffling.")] = None,
    max_new: Annotated[
        int | None, typer.Option(help="Override each deck's new cards per day.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show today's study queue.

    Overdue cards come first (oldest first), then today's cards in random
    order, with one new card after every third review card.
    """
    config = _config(ctx, seed=seed)
    try:
        service = get_session_service(config)
        if deck:
            cards = service.build_deck_queue(deck, max_new=max_new)
        else:
            cards = service.build_all_decks_queue(max_new=max_new)
    except RecollectError as e:
        raise _fail(e) from e

    if json_output:
        typer.echo(json.dumps([_card_row(c) for c in cards], indent=2))
        return

    if not cards:
        typer.secho("Nothing due. Come back tomorrow.", fg="green")
        return

    today = date.today()
    for i, card in enumerate(cards, start=1):
        row = _card_row(card)
        overdue = (today - card.review.next_due_date).days
        tag = "new" if row["state"] == "new" else f"+{overdue}d" if overdue > 0 else "today"
        typer.echo(f"{i:3}. [{tag:>6}] {row['front'] or card.id}  ({card.id})")
    typer.echo(f"\n{len(cards)} cards")


@app.command("review")
def review(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card to review.")],
    rating: Annotated[
        str, typer.Argument(help="again, hard, good, easy, or a raw quality 0-5.")
    ],
    mode: Annotated[ReviewMode, typer.Option(help="Review mode.")] = ReviewMode.CLASSIC,
    time_spent: Annotated[float, typer.Option(help="Seconds spent on the card.")] = 0.0,
):
    """[bold green]Record[/bold green] an answer and reschedule the card."""
    config = _config(ctx)
    try:
        service = get_session_service(config)
        if rating.isdecimal():
            card, event = service.review_card_with_quality(
                card_id, int(rating), mode, time_spent
            )
        else:
            try:
                difficulty = Difficulty(rating.lower())
            except ValueError:
                raise typer.BadParameter(
                    f"{rating!r} is not one of again, hard, good, easy or 0-5",
                    param_hint="RATING",
                ) from None
            card, event = service.review_card(card_id, difficulty, mode, time_spent)
    except RecollectError as e:
        raise _fail(e) from e

    typer.echo(
        f"{card.id}: {card.review.state.value}, next review "
        f"{card.review.next_due_date.isoformat()} "
        f"(interval {event.previous_interval}d -> {event.new_interval}d, "
        f"EF {event.previous_easiness:.2f} -> {event.new_easiness:.2f})"
    )


@app.command("predict")
def predict(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card to inspect.")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the interval each answer button would give."""
    try:
        card = get_collection(_config(ctx)).get_card(card_id)
    except RecollectError as e:
        raise _fail(e) from e
    if card is None:
        raise _fail(CardNotFoundError(card_id))

    intervals = predict_intervals(card.review)
    if json_output:
        typer.echo(json.dumps({d.value: days for d, days in intervals.items()}, indent=2))
        return
    typer.echo("  ".join(f"{d.value}: {format_interval(days)}" for d, days in intervals.items()))


@app.command("stats")
def stats(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Deck id. Defaults to all decks.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Deck statistics, today's summary and review streak."""
    config = _config(ctx)
    try:
        service = get_stats_service(config)
        if deck:
            per_deck = {deck: service.get_deck_stats(deck)}
        else:
            per_deck = service.get_all_deck_stats()
    except RecollectError as e:
        raise _fail(e) from e

    summary = service.get_daily_summary()
    streak = service.get_streak()

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "decks": {k: asdict(v) for k, v in per_deck.items()},
                    "today": {
                        "reviews": summary.reviews,
                        "cards_reviewed": summary.cards_reviewed,
                        "new_cards_seen": summary.new_cards_seen,
                        "accuracy": summary.accuracy,
                        "time_spent": summary.time_spent,
                    },
                    "streak": streak,
                },
                indent=2,
            )
        )
        return

    for deck_id, s in per_deck.items():
        typer.echo(
            f"{deck_id}: {s.total_cards} cards, {s.new_cards} new, "
            f"{s.learning_cards} learning, {s.due_today} due today, "
            f"avg EF {s.average_easiness:.2f}"
        )
    accuracy = f"{summary.accuracy:.0%}" if summary.accuracy is not None else "-"
    typer.echo(f"Today: {summary.reviews} reviews, accuracy {accuracy}")
    typer.echo(f"Streak: {streak} days")


# ---------------------------------------------------------------------------
# Deck subgroup
# ---------------------------------------------------------------------------


@deck_app.command("add")
def deck_add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Deck name.")],
    new_per_day: Annotated[
        int | None, typer.Option(min=0, help="New cards per day.")
    ] = None,
    reviews_per_day: Annotated[
        int | None, typer.Option(min=0, help="Reviews per day.")
    ] = None,
    order: Annotated[OrderMode | None, typer.Option(help="Card order.")] = None,
):
    """Create a deck. Unset limits come from the configuration."""
    config = _config(ctx)
    defaults = config.default_deck_settings()
    settings = DeckSettings(
        new_cards_per_day=defaults.new_cards_per_day if new_per_day is None else new_per_day,
        reviews_per_day=(
            defaults.reviews_per_day if reviews_per_day is None else reviews_per_day
        ),
        card_order=order or defaults.card_order,
    )

    try:
        deck = get_deck_service(config).create_deck(name, settings)
    except RecollectError as e:
        raise _fail(e) from e
    typer.echo(deck.id)


@deck_app.command("set")
def deck_set(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    name: Annotated[str | None, typer.Option(help="New deck name.")] = None,
    new_per_day: Annotated[
        int | None, typer.Option(min=0, help="New cards per day.")
    ] = None,
    reviews_per_day: Annotated[
        int | None, typer.Option(min=0, help="Reviews per day.")
    ] = None,
    order: Annotated[OrderMode | None, typer.Option(help="Card order.")] = None,
):
    """Rename a deck or change its daily limits."""
    try:
        deck = get_deck_service(_config(ctx)).update_deck(
            deck_id,
            name=name,
            new_cards_per_day=new_per_day,
            reviews_per_day=reviews_per_day,
            card_order=order,
        )
    except RecollectError as e:
        raise _fail(e) from e

    s = deck.settings
    typer.echo(
        f"{deck.id}  {deck.name}: {s.new_cards_per_day} new/day, "
        f"{s.reviews_per_day} reviews/day, order {s.card_order.value}"
    )


@deck_app.command("archive")
def deck_archive(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    restore: Annotated[
        bool, typer.Option("--restore", help="Bring an archived deck back.")
    ] = False,
):
    """Hide a deck from the daily queue without deleting its cards."""
    try:
        deck = get_deck_service(_config(ctx)).set_archived(deck_id, not restore)
    except RecollectError as e:
        raise _fail(e) from e
    typer.echo(f"{deck.id}  {'archived' if deck.is_archived else 'active'}")


@deck_app.command("remove")
def deck_remove(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation for destructive actions.")
    ] = False,
):
    """[bold red]Delete[/bold red] a deck with all its cards and review history."""
    config = _config(ctx)
    if not force:
        typer.confirm(f"Delete deck {deck_id} and all its cards?", abort=True)
    try:
        removed = get_deck_service(config).delete_deck(deck_id)
    except RecollectError as e:
        raise _fail(e) from e
    typer.echo(f"Deleted {deck_id} ({removed} cards)")


@deck_app.command("list")
def deck_list(
    ctx: typer.Context,
    all_decks: Annotated[
        bool, typer.Option("--all", help="Include archived decks.")
    ] = False,
):
    """List decks."""
    try:
        decks = get_collection(_config(ctx)).list_decks(include_archived=all_decks)
    except RecollectError as e:
        raise _fail(e) from e
    for deck in decks:
        suffix = "  (archived)" if deck.is_archived else ""
        typer.echo(f"{deck.id}  {deck.name}{suffix}")


# ---------------------------------------------------------------------------
# Card subgroup
# ---------------------------------------------------------------------------


@card_app.command("add")
def card_add(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    front: Annotated[str, typer.Option(help="Question side.")],
    back: Annotated[str, typer.Option(help="Answer side.")],
):
    """Add a new card to a deck."""
    try:
        card = get_deck_service(_config(ctx)).add_card(
            deck_id, {"front": front, "back": back}
        )
    except RecollectError as e:
        raise _fail(e) from e
    typer.echo(card.id)


@card_app.command("edit")
def card_edit(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
    front: Annotated[str | None, typer.Option(help="Question side.")] = None,
    back: Annotated[str | None, typer.Option(help="Answer side.")] = None,
):
    """Change a card's text. Its schedule is kept."""
    payload = {k: v for k, v in {"front": front, "back": back}.items() if v is not None}
    if not payload:
        raise typer.BadParameter("Pass --front and/or --back.")
    try:
        card = get_deck_service(_config(ctx)).update_card(card_id, payload)
    except RecollectError as e:
        raise _fail(e) from e
    typer.echo(card.id)


@card_app.command("remove")
def card_remove(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
):
    """Delete a card. Its past reviews stay in the statistics."""
    try:
        get_deck_service(_config(ctx)).delete_card(card_id)
    except RecollectError as e:
        raise _fail(e) from e
    typer.echo(f"Deleted {card_id}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))
