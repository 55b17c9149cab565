from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from trigo.cli import KEYS, CliGame, card_text, key_for_slot, main, parse_candidate, render_field
from trigo.engine.hints import find_match
from trigo.engine.match import MatchEngine, combinations, new_engine
from trigo.engine.types import Card, GameConfig
from trigo.services.telemetry import GAME_EVENTS, TelemetryService


def _game(seed: int, telemetry: TelemetryService | None = None) -> CliGame:
    engine = new_engine(seed=seed)
    engine.deal()
    return CliGame(engine=engine, telemetry=telemetry or TelemetryService(None))


def _keys(combo: tuple[int, ...] | list[int]) -> str:
    return "".join(KEYS[i] for i in combo)


def _non_match(engine: MatchEngine) -> tuple[int, ...]:
    for combo in combinations(engine.num_slots, 3):
        if not engine.is_match(combo):
            return combo
    raise AssertionError("every group matches")


def test_parse_candidate() -> None:
    assert parse_candidate("qaz", 3) == [0, 1, 2]
    assert parse_candidate(" wsx\n", 3) == [3, 4, 5]
    assert parse_candidate("qa", 3) == "You must enter 3 cards."
    assert parse_candidate("qqa", 3) == "Invalid cards.  Try again."
    assert parse_candidate("qa!", 3) == "Invalid cards.  Try again."
    assert parse_candidate("qa1", 3) == [0, 1, 26]
    assert parse_candidate("qazw", 4) == [0, 1, 2, 3]


def test_keys_and_card_text() -> None:
    assert len(set(KEYS)) == len(KEYS)
    assert key_for_slot(0) == "q"
    assert key_for_slot(len(KEYS)) == "?"
    assert card_text(Card.blank_card(), 4, 3) == "[       ]"
    assert card_text(Card(attrs=(0, 0, 0, 0)), 4, 3) == "[R □    ]"
    assert card_text(Card(attrs=(2, 1, 1, 2)), 4, 3) == "[G ● ● ●]"
    assert card_text(Card(attrs=(3, 0, 2, 1)), 4, 4) == "[3021]"
    assert card_text(Card.blank_card(), 4, 4) == "[    ]"


def test_render_field_is_column_major() -> None:
    game = _game(seed=3)
    lines = render_field(game.engine).splitlines()
    assert len(lines) == 3
    assert lines[0].startswith("q.")
    assert lines[1].startswith("a.")
    assert lines[2].startswith("z.")
    assert " w." in lines[0]


def test_wide_fields_stay_pickable() -> None:
    quad = GameConfig(num_attrs=4, num_attr_vals=4, field_size=28, field_expand=4)
    engine = new_engine(quad, seed=2)
    engine.deal()
    text = render_field(engine)
    assert " 1." in text and " 2." in text
    assert key_for_slot(27) == "2"
    assert parse_candidate("q12", 3) == [0, 26, 27]

    wide = GameConfig(num_attrs=4, num_attr_vals=4, field_size=40, field_expand=4)
    engine = new_engine(wide, seed=2)
    engine.deal()
    lines = render_field(engine).splitlines()
    assert "?." in render_field(engine)
    assert lines[-1].startswith("(")
    assert "slots marked ? have no key" in lines[-1]


def test_handle_match_and_miss(tmp_path: Path) -> None:
    log_path = tmp_path / "t.jsonl"
    game = _game(seed=9, telemetry=TelemetryService(log_path))

    miss = _non_match(game.engine)
    assert game.handle(_keys(miss)).startswith("x ")
    assert game.engine.matches_found == 0

    combo = find_match(game.engine)
    assert combo is not None
    assert game.handle(_keys(combo)).startswith("+ ")
    assert game.engine.matches_found == 1
    assert game.handle("/hint").startswith("Try: ")

    types = [json.loads(line)["type"] for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert types == ["match_missed", "match_found", "hint_shown"]
    assert set(types) <= set(GAME_EVENTS)


def test_handle_commands() -> None:
    game = _game(seed=4)
    hint = game.handle("/hint")
    assert hint.startswith("Try: ")
    assert game.engine.is_match(parse_candidate(hint[len("Try: ") :], 3))  # type: ignore[arg-type]

    assert game.handle("ab") == "You must enter 3 cards."
    assert game.handle("/new") == "New game."
    assert game.engine.matches_found == 0
    assert game.status() == f"[matches: 00, deck: {game.engine.deck_size():02d}]"


def test_round_completes_and_restarts() -> None:
    game = _game(seed=12)
    message = ""
    for _ in range(40):
        combo = find_match(game.engine)
        assert combo is not None
        message = game.handle(_keys(combo))
        if message.startswith("You found all"):
            break
    assert message == "You found all the matches!  Let's play again."
    assert game.engine.matches_found == 0
    assert game.engine.num_matches() >= 1


def test_run_reads_until_quit() -> None:
    game = _game(seed=5)
    combo = find_match(game.engine)
    assert combo is not None
    stdin = io.StringIO(_keys(combo) + "\n/quit\n")
    stdout = io.StringIO()
    game.run(stdin, stdout)
    out = stdout.getvalue()
    assert out.startswith("TriGo!")
    assert "[matches: 00," in out
    assert "[matches: 01," in out
    assert game.engine.matches_found == 1


def test_main_saves_and_resumes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    state = tmp_path / "state.json"
    telemetry = tmp_path / "telemetry.jsonl"
    monkeypatch.setattr("sys.stdin", io.StringIO("/quit\n"))
    assert main(["--seed", "1", "--state", str(state), "--telemetry", str(telemetry)]) == 0
    assert state.exists()
    first = MatchEngine.from_state(state.read_bytes())
    assert first is not None

    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main(["--state", str(state), "--telemetry", str(telemetry)]) == 0
    second = MatchEngine.from_state(state.read_bytes())
    assert second is not None
    assert second.field() == first.field()

    types = [json.loads(line)["type"] for line in telemetry.read_text(encoding="utf-8").splitlines()]
    assert "state_restored" in types
    assert types.count("state_saved") == 2


def test_main_rejects_unknown_variant(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--variant", "nope"]) == 2
    assert "Unknown variant" in capsys.readouterr().err


def test_main_plays_other_variant(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("/hint\n/quit\n"))
    assert main(["--variant", "quad", "--seed", "2"]) == 0
    out = capsys.readouterr().out
    assert "Try: " in out
