from __future__ import annotations

import argparse
import time
from collections import Counter

from trigo.engine.hints import play_round
from trigo.engine.match import new_engine
from trigo.paths import get_paths
from trigo.services.content import ContentService


def deal_stats(variant_id: str | None, games: int, seed: int) -> None:
    paths = get_paths()
    variant = ContentService(paths.data_dir, paths.schema_dir).load_variants().get(variant_id)

    opening_matches: Counter[int] = Counter()
    opening_sizes: Counter[int] = Counter()
    leftover: Counter[int] = Counter()
    start = time.perf_counter()
    for g in range(games):
        engine = new_engine(variant.config, seed=seed + g)
        engine.deal()
        opening_matches[engine.num_matches()] += 1
        opening_sizes[engine.num_slots] += 1
        play_round(engine)
        leftover[sum(1 for c in engine.field() if not c.blank)] += 1
    elapsed = time.perf_counter() - start

    print(f"{variant.title}: {games} games in {elapsed:.2f}s")
    print("matches on opening deal:")
    for n in sorted(opening_matches):
        print(f"  {n:3d}: {opening_matches[n]}")
    print("opening field size:")
    for n in sorted(opening_sizes):
        print(f"  {n:3d}: {opening_sizes[n]}")
    print("cards left when the round ended:")
    for n in sorted(leftover):
        print(f"  {n:3d}: {leftover[n]}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(prog="deal_stats")
    parser.add_argument("--variant", default=None)
    parser.add_argument("--games", type=int, default=20)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()
    deal_stats(args.variant, args.games, args.seed)
