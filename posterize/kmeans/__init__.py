"""
Seeded K-Means clustering module for color posterization.
"""

from .config import KMeansConfig
from .errors import KMeansValidationError, ConfigurationMismatchError, SeedOutOfBoundsError
from .image import ChannelImage
from .kmeans import (
    Accumulator,
    CentroidSet,
    KMeansResult,
    SeededKMeans,
    assignment_pass,
    channelwise_difference,
    compute_inertia,
    process_images_batch,
    run_kmeans,
    squared_color_distance,
    validate_seeds,
)

__all__ = [
    'KMeansConfig',
    'KMeansValidationError',
    'ConfigurationMismatchError',
    'SeedOutOfBoundsError',
    'ChannelImage',
    'Accumulator',
    'CentroidSet',
    'KMeansResult',
    'SeededKMeans',
    'assignment_pass',
    'channelwise_difference',
    'compute_inertia',
    'process_images_batch',
    'run_kmeans',
    'squared_color_distance',
    'validate_seeds',
]
