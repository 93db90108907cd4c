"""Tests for CLI commands: decks, cards, queue, review, predict, stats and config."""

import json
from datetime import date, timedelta

import pytest
from typer.testing import CliRunner

from recollect.infrastructure.adapters.json_store import JsonCollection
from recollect.interface.cli import app

runner = CliRunner()


@pytest.fixture
def data_file(mock_home, tmp_path):
    return tmp_path / "collection.json"


def invoke(data_file, *args):
    return runner.invoke(app, ["--data", str(data_file), *args])


@pytest.fixture
def deck_id(data_file):
    result = invoke(data_file, "deck", "add", "Spanish", "--new-per-day", "2")
    assert result.exit_code == 0, result.output
    return result.stdout.strip()


def add_card(data_file, deck_id, front):
    result = invoke(data_file, "card", "add", deck_id, "--front", front, "--back", "-")
    assert result.exit_code == 0, result.output
    return result.stdout.strip()


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "SM-2 spaced-repetition scheduler" in result.stdout
    assert "queue" in result.stdout
    assert "review" in result.stdout


# --- Decks and cards ---


def test_deck_add_and_list(data_file, deck_id):
    assert deck_id.startswith("deck_")

    result = invoke(data_file, "deck", "list")

    assert result.exit_code == 0
    assert f"{deck_id}  Spanish" in result.stdout
    deck = JsonCollection(data_file).get_deck(deck_id)
    assert deck.settings.new_cards_per_day == 2
    assert deck.settings.reviews_per_day == 100


def test_deck_add_rejects_blank_name(data_file):
    result = invoke(data_file, "deck", "add", "  ")
    assert result.exit_code == 1
    assert "Deck name is required" in result.output


def test_card_add_unknown_deck(data_file):
    result = invoke(data_file, "card", "add", "deck_nope", "--front", "a", "--back", "b")
    assert result.exit_code == 1
    assert "deck not found" in result.output


# --- Queue ---


def test_queue_caps_new_cards(data_file, deck_id):
    for i in range(4):
        add_card(data_file, deck_id, f"word {i}")

    result = invoke(data_file, "queue", "--deck", deck_id, "--json", "--seed", "3")

    assert result.exit_code == 0, result.output
    rows = json.loads(result.stdout)
    assert len(rows) == 2
    assert all(r["state"] == "new" for r in rows)


def test_queue_is_reproducible_with_seed(data_file, deck_id):
    for i in range(6):
        add_card(data_file, deck_id, f"word {i}")

    args = ("queue", "--deck", deck_id, "--json", "--seed", "11", "--max-new", "6")
    first = invoke(data_file, *args)
    second = invoke(data_file, *args)

    assert len(json.loads(first.stdout)) == 6
    assert first.stdout == second.stdout


def test_queue_empty(data_file, deck_id):
    result = invoke(data_file, "queue")
    assert result.exit_code == 0
    assert "Nothing due" in result.stdout


def test_queue_unknown_deck(data_file):
    result = invoke(data_file, "queue", "--deck", "deck_missing")
    assert result.exit_code == 1
    assert "deck not found" in result.output


def test_queue_max_new_without_deck(data_file):
    deck_id = invoke(data_file, "deck", "add", "Big", "--new-per-day", "5").stdout.strip()
    for i in range(5):
        add_card(data_file, deck_id, f"word {i}")

    result = invoke(data_file, "queue", "--json", "--max-new", "1")

    assert result.exit_code == 0, result.output
    assert len(json.loads(result.stdout)) == 1


def test_queue_text_output(data_file, deck_id):
    add_card(data_file, deck_id, "hola")
    result = invoke(data_file, "queue")
    assert result.exit_code == 0
    assert "hola" in result.stdout
    assert "1 cards" in result.stdout


# --- Review ---


def test_review_good_reschedules(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")

    result = invoke(data_file, "review", card_id, "good", "--time-spent", "3")

    assert result.exit_code == 0, result.output
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    assert f"next review {tomorrow}" in result.stdout
    assert "EF 2.50 -> 2.36" in result.stdout

    coll = JsonCollection(data_file)
    assert coll.get_card(card_id).review.state.value == "review"
    [event] = coll.all_events()
    assert event.time_spent == 3.0
    assert event.previous_interval == 0


def test_reviewed_card_leaves_todays_queue(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")
    invoke(data_file, "review", card_id, "again")

    result = invoke(data_file, "queue", "--json")

    assert json.loads(result.stdout) == []


def test_review_raw_quality(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")
    result = invoke(data_file, "review", card_id, "5")
    assert result.exit_code == 0
    assert "EF 2.50 -> 2.60" in result.stdout


def test_review_quality_out_of_range(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")
    result = invoke(data_file, "review", card_id, "9")
    assert result.exit_code == 1
    assert "quality must be an integer in 0..5" in result.output


def test_review_bad_rating(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")
    result = invoke(data_file, "review", card_id, "meh")
    assert result.exit_code == 2


def test_review_superscript_digit_is_bad_rating(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")
    result = invoke(data_file, "review", card_id, "\u00b2")
    assert result.exit_code == 2
    assert JsonCollection(data_file).all_events() == []


def test_review_unknown_card(data_file, deck_id):
    result = invoke(data_file, "review", "card_missing", "good")
    assert result.exit_code == 1
    assert "card not found" in result.output


# --- Predict ---


def test_predict_json(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")

    result = invoke(data_file, "predict", card_id, "--json")

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"again": 0, "hard": 1, "good": 1, "easy": 4}


def test_predict_text(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")
    invoke(data_file, "review", card_id, "good")

    result = invoke(data_file, "predict", card_id)

    assert "again: <1d  hard: 3d  good: 6d  easy: 10d" in result.stdout


# --- Stats ---


def test_stats_json(data_file, deck_id):
    first = add_card(data_file, deck_id, "uno")
    add_card(data_file, deck_id, "dos")
    add_card(data_file, deck_id, "tres")
    invoke(data_file, "review", first, "again")

    result = invoke(data_file, "stats", "--json")

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    deck = data["decks"][deck_id]
    assert deck["total_cards"] == 3
    assert deck["new_cards"] == 2
    assert deck["learning_cards"] == 1
    assert data["today"]["reviews"] == 1
    assert data["today"]["new_cards_seen"] == 1
    assert data["today"]["accuracy"] == 0.0
    assert data["streak"] == 1


def test_stats_unknown_deck(data_file):
    result = invoke(data_file, "stats", "--deck", "deck_missing")
    assert result.exit_code == 1


# --- Deck and card editing ---


def test_deck_set_changes_limits(data_file, deck_id):
    for i in range(4):
        add_card(data_file, deck_id, f"word {i}")

    result = invoke(data_file, "deck", "set", deck_id, "--new-per-day", "3", "--order", "oldest")

    assert result.exit_code == 0, result.output
    assert "3 new/day" in result.stdout
    settings = JsonCollection(data_file).get_deck(deck_id).settings
    assert settings.new_cards_per_day == 3
    assert settings.card_order.value == "oldest"
    queue = invoke(data_file, "queue", "--deck", deck_id, "--json")
    assert len(json.loads(queue.stdout)) == 3


def test_deck_set_rename(data_file, deck_id):
    result = invoke(data_file, "deck", "set", deck_id, "--name", "Vocab")
    assert result.exit_code == 0
    assert f"{deck_id}  Vocab" in invoke(data_file, "deck", "list").stdout


def test_deck_set_rejects_negative_limit(data_file, deck_id):
    result = invoke(data_file, "deck", "set", deck_id, "--new-per-day", "-1")
    assert result.exit_code == 2


def test_deck_set_unknown_deck(data_file):
    result = invoke(data_file, "deck", "set", "deck_nope", "--new-per-day", "1")
    assert result.exit_code == 1
    assert "deck not found" in result.output


def test_deck_archive_and_restore(data_file, deck_id):
    add_card(data_file, deck_id, "hola")

    result = invoke(data_file, "deck", "archive", deck_id)

    assert result.exit_code == 0
    assert "archived" in result.stdout
    assert json.loads(invoke(data_file, "queue", "--json").stdout) == []
    assert deck_id not in invoke(data_file, "deck", "list").stdout
    assert f"{deck_id}  Spanish  (archived)" in invoke(data_file, "deck", "list", "--all").stdout

    invoke(data_file, "deck", "archive", deck_id, "--restore")
    assert len(json.loads(invoke(data_file, "queue", "--json").stdout)) == 1


def test_deck_remove(data_file, deck_id):
    add_card(data_file, deck_id, "uno")
    add_card(data_file, deck_id, "dos")

    result = invoke(data_file, "deck", "remove", deck_id, "--force")

    assert result.exit_code == 0, result.output
    assert "2 cards" in result.stdout
    coll = JsonCollection(data_file)
    assert coll.get_deck(deck_id) is None
    assert coll.list_cards() == []


def test_deck_remove_asks_for_confirmation(data_file, deck_id):
    result = runner.invoke(
        app, ["--data", str(data_file), "deck", "remove", deck_id], input="n\n"
    )
    assert result.exit_code == 1
    assert JsonCollection(data_file).get_deck(deck_id) is not None


def test_card_edit(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")
    invoke(data_file, "review", card_id, "good")

    result = invoke(data_file, "card", "edit", card_id, "--back", "hello")

    assert result.exit_code == 0, result.output
    card = JsonCollection(data_file).get_card(card_id)
    assert card.payload == {"front": "hola", "back": "hello"}
    assert card.review.repetitions == 1


def test_card_edit_needs_a_field(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")
    result = invoke(data_file, "card", "edit", card_id)
    assert result.exit_code == 2


def test_card_remove(data_file, deck_id):
    card_id = add_card(data_file, deck_id, "hola")

    result = invoke(data_file, "card", "remove", card_id)

    assert result.exit_code == 0
    assert JsonCollection(data_file).get_card(card_id) is None
    assert invoke(data_file, "card", "remove", card_id).exit_code == 1


# --- Config ---


def test_config_show(data_file):
    result = invoke(data_file, "config", "show")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["data_file"] == str(data_file)
    assert data["card_order"] == "random"


def test_invalid_collection_file(data_file):
    data_file.write_text("not json")
    result = invoke(data_file, "queue")
    assert result.exit_code == 1
    assert "Invalid collection file" in result.output
