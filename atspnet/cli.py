"""Command line entry point: build a tour through evenly spaced points on a line."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from atspnet.atsp import atsp


def _format_point(point: Sequence[float]) -> str:
    return f"({point[0]}, {point[1]})"


def main(argv: Sequence[str] | None = None) -> int:
    """Print the points, then the points in the order the tour visits them."""
    parser = argparse.ArgumentParser(
        prog="atspnet",
        description="Compute a traversal of points (i, 0) for i below COUNT.",
    )
    parser.add_argument("count", nargs="?", type=int, default=5, help="number of points")
    args = parser.parse_args(argv)
    if args.count < 1:
        parser.error("count must be at least 1")

    points = [(float(i), 0.0) for i in range(args.count)]
    print("[" + ", ".join(_format_point(p) for p in points) + "]")
    try:
        traversal = atsp(points)
    except ValueError as exc:
        print(f"atspnet: {exc}", file=sys.stderr)
        return 1
    print(" ".join(_format_point(points[u]) for u in traversal))
    return 0


if __name__ == "__main__":
    sys.exit(main())