"""Posterize an image with seeded k-means.

Reads INPUT, clusters its pixels around the colors found at the given seed
positions and writes the posterized image to OUTPUT::

    posterize koala.jpg koala_out.png -k 3 --seed 647 793 --seed 1661 1019 --seed 362 939
    posterize koala.jpg koala_out.png --params data/params_koala_20250101_120000.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import numpy as np

from .data_loader import load_params_file, posterize_file
from .kmeans import KMeansConfig, KMeansValidationError

logger = logging.getLogger("posterize")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(
        description="Posterize an image into K colors with seeded k-means clustering."
    )
    parser.add_argument("input", type=Path, help="Image to posterize.")
    parser.add_argument("output", type=Path, help="Where the posterized image is written.")
    parser.add_argument(
        "-k",
        "--clusters",
        type=int,
        default=None,
        help="Number of clusters (one --seed per cluster).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        nargs=2,
        action="append",
        metavar=("COL", "ROW"),
        default=[],
        help="Seed pixel for one cluster; repeat once per cluster.",
    )
    parser.add_argument(
        "--max-iter",
        type=int,
        default=None,
        help="Iteration cap (the counter starts at 1, default: 10). Overrides the value in --params.",
    )
    parser.add_argument(
        "--params",
        type=Path,
        default=None,
        help="JSON parameter file to read K, seeds and the iteration cap from. Cannot be combined with -k or --seed.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log the centroids before every pass.",
    )
    args = parser.parse_args(argv)
    if args.params is not None and (args.clusters is not None or args.seed):
        parser.error("--params cannot be combined with -k/--clusters or --seed")
    return args


def build_config(args: argparse.Namespace) -> KMeansConfig:
    """Build the clustering config from --params or from -k/--seed."""

    if args.params is not None:
        config = load_params_file(args.params).config
        if args.max_iter is not None:
            config = replace(config, max_iter=args.max_iter)
        return config

    seeds = [value for pair in args.seed for value in pair]
    n_clusters = args.clusters if args.clusters is not None else len(args.seed)
    max_iter = args.max_iter if args.max_iter is not None else 10
    return KMeansConfig(n_clusters=n_clusters, seeds=seeds, max_iter=max_iter)


def log_centroids(iteration: int, centroids: np.ndarray) -> None:
    """Per-iteration hook: log the centroid set about to be used."""

    logger.debug(
        "Iteration %d centroids: %s",
        iteration,
        ", ".join(str(centroid) for centroid in centroids.tolist()),
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
        result = posterize_file(args.input, args.output, config, on_iteration=log_centroids)
    except (KMeansValidationError, FileNotFoundError, KeyError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info(
        "Wrote %s (K=%d, %d passes, converged=%s, inertia=%s)",
        args.output,
        config.n_clusters,
        result.n_iter,
        result.converged,
        result.inertia,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
