#!/usr/bin/env python3
"""Resolve one action many times and print how the outcomes fall.

By default the engine runs in-process. Pass ``--url`` to send the same
requests to a running resolution server instead, which exercises the whole
wire path.

Example:
    python scripts/action_sim.py --action track_deer --runs 2000 --seed 7
    python scripts/action_sim.py --action quick_draw_duel --url ws://localhost:8766
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import websockets

from destiny.catalog import load_catalog, starter_catalog
from destiny.engine import ResolutionEngine
from destiny.recorder import result_payload

LOGGER = logging.getLogger("action_sim")


@dataclass
class SimSummary:
    runs: int = 0
    successes: int = 0
    xp: int = 0
    gold: int = 0
    hands: Counter = field(default_factory=Counter)
    items: Counter = field(default_factory=Counter)

    def add(self, payload: Dict[str, Any]) -> None:
        self.runs += 1
        self.successes += 1 if payload["success"] else 0
        self.hands[payload["hand_rank"]] += 1
        rewards = payload["rewards_gained"]
        self.xp += rewards["xp"]
        self.gold += rewards["gold"]
        self.items.update(rewards["items"])

    def render(self) -> str:
        if not self.runs:
            return "No resolutions recorded"
        lines = [
            f"runs={self.runs} success_rate={self.successes / self.runs:.1%}",
            f"avg_xp={self.xp / self.runs:.2f} avg_gold={self.gold / self.runs:.2f}",
            "hands:",
        ]
        for rank, count in self.hands.most_common():
            lines.append(f"  {rank:<16} {count:>6} ({count / self.runs:.1%})")
        if self.items:
            lines.append("items:")
            for item, count in self.items.most_common():
                lines.append(f"  {item:<16} {count:>6}")
        return "\n".join(lines)


def seeds_for(runs: int, seed: Optional[int]) -> List[Optional[int]]:
    if seed is None:
        return [None] * runs
    rng = random.Random(seed)
    return [rng.getrandbits(32) for _ in range(runs)]


def run_local(action_id: str, runs: int, seed: Optional[int], catalog_path: Optional[str]) -> SimSummary:
    catalog = load_catalog(catalog_path) if catalog_path else starter_catalog()
    action = catalog.get(action_id)
    engine = ResolutionEngine()
    summary = SimSummary()
    for idx, draw_seed in enumerate(seeds_for(runs, seed)):
        result = engine.resolve(f"sim-{idx % 8}", action, seed=draw_seed)
        summary.add(result_payload(result))
    return summary


async def run_remote(url: str, action_id: str, runs: int, seed: Optional[int]) -> SimSummary:
    summary = SimSummary()
    async with websockets.connect(url) as ws:
        for idx, draw_seed in enumerate(seeds_for(runs, seed)):
            request: Dict[str, Any] = {"type": "resolve", "v": 1, "character_id": f"sim-{idx % 8}", "action_id": action_id}
            if draw_seed is not None:
                request["seed"] = draw_seed
            await ws.send(json.dumps(request))
            while True:
                message = json.loads(await ws.recv())
                if message.get("type") == "result":
                    summary.add(message["result"])
                    break
                if message.get("type") == "error":
                    raise RuntimeError(f"{message.get('code')}: {message.get('msg')}")
    return summary


def main() -> None:
    parser = argparse.ArgumentParser(description="Destiny Deck action simulator")
    parser.add_argument("--action", default="pickpocket_drunk")
    parser.add_argument("--runs", type=int, default=1_000)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible batches")
    parser.add_argument("--catalog", default=None, help="JSON action catalog for local runs")
    parser.add_argument("--url", default=None, help="Resolution server URL, e.g. ws://localhost:8766")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    if args.url:
        LOGGER.info("Resolving %s x%s against %s", args.action, args.runs, args.url)
        summary = asyncio.run(run_remote(args.url, args.action, args.runs, args.seed))
    else:
        LOGGER.info("Resolving %s x%s in-process", args.action, args.runs)
        summary = run_local(args.action, args.runs, args.seed, args.catalog)
    print(summary.render())


if __name__ == "__main__":
    main()
