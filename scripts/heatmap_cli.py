#!/usr/bin/env python3
"""
Replay a shot history and print the resulting probability heatmap.

Example:
    python scripts/heatmap_cli.py --rows 6 --fleet 3 2 --shots "h:2,2 h:2,3 m:2,4"
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Tuple

# Add project root to path
sys.path.append(str(Path(__file__).resolve().parent.parent))

import numpy as np

from sonar_probmap import (
    CellStatus,
    Mode,
    NoValidPlacement,
    OutOfRange,
    SonarError,
    build,
    compute_heatmap,
    load_config,
)
from sonar_probmap.log import configure_logging, setup_logging

logger = logging.getLogger("sonar_probmap.cli")


def parse_shots(text: str) -> List[Tuple[str, int, int]]:
    """Parse "h:0,0 m:1,2" into [("h", 0, 0), ("m", 1, 2)]."""
    shots = []
    for token in text.split():
        kind, _, coords = token.partition(":")
        kind = kind.lower()
        if kind not in ("h", "m") or "," not in coords:
            raise ValueError(f"Bad shot {token!r}; expected h:ROW,COL or m:ROW,COL")
        r, c = coords.split(",", 1)
        shots.append((kind, int(r), int(c)))
    return shots


def render(status: np.ndarray, probs: np.ndarray) -> str:
    lines = []
    for r in range(status.shape[0]):
        row = []
        for c in range(status.shape[1]):
            if status[r, c] == CellStatus.HIT:
                row.append("   X")
            elif status[r, c] == CellStatus.MISS:
                row.append("   o")
            else:
                row.append(f"{probs[r, c]:4.2f}")
        lines.append(" ".join(row))
    return "\n".join(lines)


def main() -> int:
    parser = argparse.ArgumentParser(description="Print a ship-placement heatmap.")
    parser.add_argument("--config", default="configs/engine.yaml", help="Path to engine config.")
    parser.add_argument("--rows", type=int, default=10, help="Board rows.")
    parser.add_argument("--cols", type=int, default=None, help="Board columns (default: rows).")
    parser.add_argument("--fleet", type=int, nargs="*", default=[5, 4, 3, 3, 2], help="Ship lengths.")
    parser.add_argument("--strategy", default=None, help="rule_based or monte_carlo.")
    parser.add_argument("--shots", default="", help='Shot history, e.g. "h:0,0 m:0,1".')
    parser.add_argument("--confirm-sinks", action="store_true", help="Accept every sink candidate.")
    parser.add_argument("--log-level", default=None, help="Log level (default: SONAR_LOG_LEVEL, then the config).")
    args = parser.parse_args()

    config = load_config(args.config)
    if args.log_level:
        configure_logging(args.log_level)
    else:
        setup_logging(config.log_level)

    try:
        board = build((args.rows, args.cols or args.rows), args.fleet)
        for kind, r, c in parse_shots(args.shots):
            if kind == "m":
                board.record_miss(r, c)
                continue
            outcome = board.record_hit(r, c, confirm=lambda _length: args.confirm_sinks)
            if outcome.sunk_confirmed:
                print(f"Sunk ship of length {outcome.sunk_candidate_length} at {list(outcome.sunk_cells)}")
            elif outcome.sunk_candidate_length is not None:
                print(f"Run of {outcome.sunk_candidate_length} could be a sunk ship (not confirmed)")
    except (SonarError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    try:
        probs = compute_heatmap(board, strategy=args.strategy, config=config)
    except OutOfRange as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except NoValidPlacement as exc:
        logger.warning("Hunt anchor %s exhausted (%s); falling back to search", exc.anchor, exc)
        probs = compute_heatmap(board, strategy=args.strategy, mode=Mode.SEARCH, config=config)

    print(render(board.status, probs))
    print(f"mode: {board.mode.name}  remaining fleet: {board.remaining_lengths()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
