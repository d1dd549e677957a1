"""
Validation errors raised before any clustering runs.
"""

from typing import Tuple


class KMeansValidationError(ValueError):
    """Base class for seed/configuration validation failures."""


class ConfigurationMismatchError(KMeansValidationError):
    """The seed list does not hold exactly 2*K coordinates."""

    def __init__(self, n_clusters: int, n_coordinates: int):
        self.n_clusters = n_clusters
        self.n_coordinates = n_coordinates
        super().__init__(
            f"Mismatch in K and initial seeds: K={n_clusters} needs "
            f"{2 * n_clusters} coordinates, got {n_coordinates}"
        )


class SeedOutOfBoundsError(KMeansValidationError):
    """A seed coordinate lies outside [0, width) x [0, height)."""

    def __init__(self, seed_index: int, position: Tuple[int, int], size: Tuple[int, int]):
        self.seed_index = seed_index
        self.position = position
        self.size = size
        super().__init__(
            f"Seed {seed_index} out of bounds: position (col, row)={position}, "
            f"image size (width, height)={size}"
        )
