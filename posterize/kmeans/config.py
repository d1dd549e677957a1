"""
K-Means Configuration

Configuration for seeded K-Means posterization.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple
import numpy as np


def _is_integer(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


@dataclass
class KMeansConfig:
    """
    Configuration for seeded K-Means clustering.

    Seeds are stored flat as (col0, row0, col1, row1, ...), one pair per
    cluster. Whether they match n_clusters and fit inside the image is only
    checked against a concrete image (see validate_seeds).

    Attributes:
        n_clusters: Number of clusters (K)
        seeds: Flat sequence of 2*K seed coordinates
        max_iter: Iteration cap. The counter starts at 1, so at most
                  max_iter - 1 assignment passes are run.
        fill_value: Sentinel written to the output buffers before the first pass
    """
    n_clusters: int
    seeds: Sequence[int] = field(default_factory=tuple)
    max_iter: int = 10
    """Iteration cap (default: 10)"""

    fill_value: int = 255
    """Output sentinel value (default: 255)"""

    def __post_init__(self):
        """Validate configuration."""
        for name in ('n_clusters', 'max_iter', 'fill_value'):
            value = getattr(self, name)
            if not _is_integer(value):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        if self.n_clusters < 1:
            raise ValueError(f"n_clusters must be >= 1, got {self.n_clusters}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        if not 0 <= self.fill_value <= 255:
            raise ValueError(f"fill_value must be in [0, 255], got {self.fill_value}")

        for value in self.seeds:
            if not _is_integer(value):
                raise ValueError(f"seed coordinates must be integers, got {value!r}")
        self.seeds = tuple(int(value) for value in self.seeds)

    @property
    def seed_points(self) -> List[Tuple[int, int]]:
        """Seeds as (col, row) pairs."""
        return list(zip(self.seeds[0::2], self.seeds[1::2]))

    def to_dict(self) -> Dict:
        return {
            "n_clusters": self.n_clusters,
            "seeds": list(self.seeds),
            "max_iter": self.max_iter,
            "fill_value": self.fill_value,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'KMeansConfig':
        """
        Build a config from a parameters dictionary.

        Args:
            data: Dict with 'n_clusters' and 'seeds', optionally 'max_iter'
                  and 'fill_value'

        Raises:
            KeyError: If 'n_clusters' or 'seeds' is missing
        """
        return cls(
            n_clusters=data["n_clusters"],
            seeds=data["seeds"],
            max_iter=data.get("max_iter", 10),
            fill_value=data.get("fill_value", 255),
        )
