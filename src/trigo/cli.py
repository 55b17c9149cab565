from __future__ import annotations

import argparse
import logging
import random
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, TextIO

from trigo.engine.hints import find_match
from trigo.engine.match import MatchEngine
from trigo.engine.types import Card
from trigo.paths import get_paths
from trigo.services.content import ContentError, ContentService
from trigo.services.savestate import SaveStateError, SaveStateService
from trigo.services.telemetry import TelemetryService

log = logging.getLogger(__name__)

KEYS = "qazwsxedcrfvtgbyhnujmikolp1234567890"

COLORS = ["R", "G", "M"]
SHAPES = [
    ["□", "◨", "■"],
    ["○", "◑", "●"],
    ["△", "◮", "▲"],
]


def key_for_slot(slot: int) -> str:
    if 0 <= slot < len(KEYS):
        return KEYS[slot]
    return "?"


def card_text(card: Card, num_attrs: int, num_attr_vals: int) -> str:
    """Fixed-width text for one card; blank slots render as an empty frame."""
    if num_attrs == 4 and num_attr_vals == 3:
        width = 9
    else:
        width = num_attrs + 2
    if card.blank:
        return "[" + " " * (width - 2) + "]"
    if width == 9:
        num, clr, shp, fil = card.attrs
        glyphs = " ".join([SHAPES[shp][fil]] * (num + 1))
        return "[" + (COLORS[clr] + " " + glyphs).ljust(7) + "]"
    return "[" + "".join(str(a) for a in card.attrs) + "]"


def render_field(engine: MatchEngine) -> str:
    field = engine.field()
    rows = engine.config.field_expand
    cols = (len(field) + rows - 1) // rows
    cfg = engine.config
    lines: list[str] = []
    for r in range(rows):
        cells: list[str] = []
        for c in range(cols):
            slot = c * rows + r
            if slot >= len(field):
                continue
            cells.append(f"{key_for_slot(slot)}.{card_text(field[slot], cfg.num_attrs, cfg.num_attr_vals)}")
        lines.append("  ".join(cells))
    if len(field) > len(KEYS):
        lines.append(f"({len(field) - len(KEYS)} slots marked ? have no key and cannot be picked)")
    return "\n".join(lines)


def parse_candidate(text: str, size: int) -> list[int] | str:
    """Map a typed key string to slot indices, or return the message to show."""
    text = text.strip()
    if len(text) != size:
        return f"You must enter {size} cards."
    candidate: list[int] = []
    for ch in text:
        idx = KEYS.find(ch)
        if idx < 0 or idx in candidate:
            return "Invalid cards.  Try again."
        candidate.append(idx)
    return candidate


@dataclass
class CliGame:
    engine: MatchEngine
    telemetry: TelemetryService
    variant_id: str = "trigo"

    def status(self) -> str:
        return f"[matches: {self.engine.matches_found:02d}, deck: {self.engine.deck_size():02d}]"

    def new_round(self) -> None:
        self.engine.shuffle()
        self.engine.deal()
        self.telemetry.log("game_started", {"variant": self.variant_id})

    def handle(self, command: str) -> str:
        """Apply one line of input; return the message to print."""
        cmd = command.strip().lower()
        if cmd == "/hint":
            combo = find_match(self.engine)
            if combo is None:
                return "No matches on the field."
            self.telemetry.log("hint_shown", {"candidate": list(combo)})
            return "Try: " + "".join(key_for_slot(i) for i in combo)
        if cmd == "/new":
            self.new_round()
            return "New game."

        parsed = parse_candidate(cmd, self.engine.config.num_attr_vals)
        if isinstance(parsed, str):
            return parsed
        cfg = self.engine.config
        shown = " ".join(card_text(self.engine.field_card(i), cfg.num_attrs, cfg.num_attr_vals) for i in parsed)
        if not self.engine.resolve(parsed):
            self.telemetry.log("match_missed", {"candidate": parsed})
            return f"x {shown} x"
        self.telemetry.log(
            "match_found",
            {"candidate": parsed, "matches_found": self.engine.matches_found},
        )
        if self.engine.num_matches() == 0:
            self.telemetry.log("round_complete", {"matches_found": self.engine.matches_found})
            self.new_round()
            return "You found all the matches!  Let's play again."
        return f"+ {shown} +"

    def run(self, stdin: TextIO, stdout: TextIO) -> None:
        print("TriGo!\n", file=stdout)
        while True:
            print(render_field(self.engine), file=stdout)
            print(f"\n{self.status()} > ", end="", file=stdout)
            stdout.flush()
            line = stdin.readline()
            if not line or line.strip().lower() in ("/quit", "/exit"):
                print(file=stdout)
                return
            print("\n" + self.handle(line) + "\n", file=stdout)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="trigo")
    parser.add_argument("--variant", default=None, help="variant id from variants.json")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--state", type=Path, default=None, help="save file to resume from and save to")
    parser.add_argument("--telemetry", type=Path, default=None, help="JSON-lines event log")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    try:
        variant = content.load_variants().get(args.variant)
    except ContentError as e:
        print(str(e), file=sys.stderr)
        return 2

    rng = random.Random(args.seed)
    telemetry = TelemetryService(args.telemetry)
    saves: SaveStateService | None = None
    if args.state is not None:
        saves = SaveStateService(args.state, variant.config)
        engine, restored = saves.load_or_create(rng=rng)
        if restored:
            telemetry.log("state_restored", {"path": str(args.state)})
    else:
        engine = MatchEngine.from_config(variant.config, rng=rng)
        engine.deal()

    game = CliGame(engine=engine, telemetry=telemetry, variant_id=variant.id)
    telemetry.log("game_started", {"variant": variant.id})
    try:
        game.run(sys.stdin, sys.stdout)
    except KeyboardInterrupt:
        print(file=sys.stdout)
    finally:
        if saves is not None:
            try:
                saves.save(engine)
                telemetry.log("state_saved", {"path": str(saves.path)})
            except SaveStateError as e:
                log.error("%s", e)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
