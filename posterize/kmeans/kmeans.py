"""
Seeded K-Means Clustering for Color Posterization

Clusters the pixels of a 3-channel image around K centroids bootstrapped
from caller-supplied seed pixels, then replaces every pixel with the color
of its cluster.

Algorithm:
1. Seed each accumulator entry with the color of its seed pixel (count 1)
   and start every centroid at zero
2. Convergence check: centroid = accumulator sum // count, per channel
3. If any centroid changed, assign every pixel to its nearest centroid,
   write that centroid's color to the output and accumulate the pixel
4. Repeat from 2 until nothing changes or the iteration cap is reached

Objective Function: J(V) = Σ Σ ||xn - vl||²
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import numpy as np

from .config import KMeansConfig
from .errors import ConfigurationMismatchError, SeedOutOfBoundsError
from .image import ChannelImage


IterationCallback = Callable[[int, np.ndarray], None]


# ============================================================================
# Color Arithmetic
# ============================================================================

def channelwise_difference(a, b) -> np.ndarray:
    """
    Signed per-channel difference a - b.

    Computed in int64 so that e.g. 10 - 210 is -200 and not an 8-bit
    wraparound. Accepts single triplets or broadcastable (..., 3) arrays.
    """
    return np.asarray(a, dtype=np.int64) - np.asarray(b, dtype=np.int64)


def squared_color_distance(a, b) -> np.ndarray:
    """
    Squared Euclidean distance in channel space.

    Args:
        a, b: Color triplets or broadcastable (..., 3) arrays

    Returns:
        Σ_channel (a - b)², reduced over the last axis
    """
    diff = channelwise_difference(a, b)
    return np.sum(diff * diff, axis=-1)


# ============================================================================
# Clustering State
# ============================================================================

class Accumulator:
    """
    Per-centroid running channel sums and occurrence counts.

    Attributes:
        sums: Channel sums, shape (K, 3), int64
        counts: Pixels accumulated per centroid, shape (K,), int64
    """

    def __init__(self, n_clusters: int):
        self.sums = np.zeros((n_clusters, 3), dtype=np.int64)
        self.counts = np.zeros(n_clusters, dtype=np.int64)

    @classmethod
    def from_seeds(
        cls,
        image: ChannelImage,
        seed_points: Sequence[Tuple[int, int]]
    ) -> 'Accumulator':
        """Seed entry i with the color at seed_points[i] and a count of 1."""
        accumulator = cls(len(seed_points))
        for i, (col, row) in enumerate(seed_points):
            accumulator.sums[i] = image.pixel(col, row)
            accumulator.counts[i] = 1
        return accumulator

    def __len__(self) -> int:
        return len(self.counts)

    def reset(self):
        self.sums.fill(0)
        self.counts.fill(0)

    def add(self, labels: np.ndarray, pixels: np.ndarray):
        """
        Accumulate pixels into the entries given by labels.

        Args:
            labels: Centroid index per pixel, shape (N,)
            pixels: Channel values, shape (N, 3)
        """
        n_clusters = len(self)
        for c in range(3):
            # bincount sums in float64, exact for any realistic pixel count
            channel_sums = np.bincount(labels, weights=pixels[:, c], minlength=n_clusters)
            self.sums[:, c] += channel_sums.astype(np.int64)
        self.counts += np.bincount(labels, minlength=n_clusters)

    def means(self, fallback: np.ndarray) -> np.ndarray:
        """
        Truncated per-channel means (sum // count).

        Entries with a zero count have no mean; they take the matching
        row of fallback instead.
        """
        means = np.array(fallback, dtype=np.int64, copy=True)
        occupied = self.counts > 0
        means[occupied] = self.sums[occupied] // self.counts[occupied, np.newaxis]
        return means


class CentroidSet:
    """
    K mutable color triplets, the evolving cluster representatives.
    """

    def __init__(self, values: np.ndarray):
        values = np.array(values, dtype=np.int64, copy=True)
        if values.ndim != 2 or values.shape[1] != 3:
            raise ValueError(f"centroids must have shape (K, 3), got {values.shape}")
        self._values = values

    @classmethod
    def zeros(cls, n_clusters: int) -> 'CentroidSet':
        """Unset centroids (all channels zero)."""
        return cls(np.zeros((n_clusters, 3), dtype=np.int64))

    def __len__(self) -> int:
        return len(self._values)

    @property
    def values(self) -> np.ndarray:
        """Copy of the centroid colors, shape (K, 3)."""
        return self._values.copy()

    def update_from(self, accumulator: Accumulator) -> bool:
        """
        Convergence check.

        Recomputes every centroid as the truncated mean of its accumulator
        entry and overwrites the ones that differ on any channel.

        Args:
            accumulator: Sums and counts of the previous pass (or the seeds)

        Returns:
            True if at least one centroid changed
        """
        candidates = accumulator.means(fallback=self._values)
        changed = np.any(candidates != self._values, axis=1)
        self._values[changed] = candidates[changed]
        return bool(changed.any())


# ============================================================================
# Validation
# ============================================================================

def validate_seeds(config: KMeansConfig, image: ChannelImage):
    """
    Check the seeds of config against image before clustering.

    Bounds are exclusive: 0 <= col < width and 0 <= row < height.

    Raises:
        ConfigurationMismatchError: If there are not exactly 2*K seed coordinates
        SeedOutOfBoundsError: If a seed lies outside the image
    """
    if len(config.seeds) != 2 * config.n_clusters:
        raise ConfigurationMismatchError(config.n_clusters, len(config.seeds))

    for seed_index, (col, row) in enumerate(config.seed_points):
        if not (0 <= col < image.width and 0 <= row < image.height):
            raise SeedOutOfBoundsError(seed_index, (col, row), (image.width, image.height))


# ============================================================================
# Assignment Pass
# ============================================================================

def assignment_pass(
    image: ChannelImage,
    centroids: CentroidSet,
    accumulator: Accumulator,
    output: Tuple[np.ndarray, np.ndarray, np.ndarray]
) -> np.ndarray:
    """
    Assign every pixel to its nearest centroid.

    Ties go to the lowest centroid index. Each pixel is added to its
    centroid's accumulator entry and the centroid's current color is
    written to the output buffers, which are overwritten entirely.

    Args:
        image: Input image
        centroids: Centroids for this pass
        accumulator: Zeroed accumulator, filled in place
        output: Three writable uint8 buffers of length image.size

    Returns:
        labels: Centroid index per pixel, shape (N,)
    """
    pixels = image.pixels()
    values = centroids.values

    distances = np.empty((image.size, len(values)), dtype=np.int64)
    for k, centroid in enumerate(values):
        distances[:, k] = squared_color_distance(pixels, centroid)

    # argmin returns the first minimum, i.e. the lowest index on ties
    labels = np.argmin(distances, axis=1)

    accumulator.add(labels, pixels)

    colors = values[labels]
    for c, buffer in enumerate(output):
        buffer[:] = colors[:, c]

    return labels


def compute_inertia(image: ChannelImage, centroids: np.ndarray, labels: np.ndarray) -> int:
    """
    Compute k-means objective function J(V).

    Args:
        image: Input image
        centroids: Cluster colors, shape (K, 3)
        labels: Cluster assignments, shape (N,)

    Returns:
        inertia: Sum of squared distances of every pixel to its centroid
    """
    return int(np.sum(squared_color_distance(image.pixels(), centroids[labels])))


# ============================================================================
# Results
# ============================================================================

@dataclass
class KMeansResult:
    """
    Results from seeded k-means clustering.
    """
    output: ChannelImage
    """Posterized image, same shape as the input."""

    labels: np.ndarray
    """Cluster index per pixel from the last pass, shape (H*W,).
    -1 everywhere if no pass ran."""

    centroids: np.ndarray
    """Centroid colors used by the last pass, shape (K, 3)."""

    counts: np.ndarray
    """Pixels per cluster on the last pass, shape (K,)."""

    n_iter: int
    """Number of assignment passes run."""

    converged: bool
    """False if the loop stopped on the iteration cap."""

    inertia: Optional[int] = None
    """Objective J(V) of the last pass, None if no pass ran."""

    history: List[np.ndarray] = field(default_factory=list)
    """Centroid set used by each pass, in order."""

    def reshape_labels(self, shape: Tuple[int, int]) -> np.ndarray:
        """
        Reshape flat labels to 2D image shape.

        Args:
            shape: (H, W) image dimensions
        """
        return self.labels.reshape(shape)

    def to_array(self) -> np.ndarray:
        """Posterized image as (H, W, 3) uint8."""
        return self.output.to_array()


# ============================================================================
# Driver Loop
# ============================================================================

def run_kmeans(
    image: ChannelImage,
    config: KMeansConfig,
    on_iteration: Optional[IterationCallback] = None
) -> KMeansResult:
    """
    Run seeded k-means on image.

    The loop stops as soon as a convergence check changes nothing; the
    output is then the one written by the previous pass, no extra pass is
    run with the converged centroids. It also stops once the iteration
    counter (starting at 1) reaches config.max_iter.

    Args:
        image: Input image
        config: Cluster count, seeds and iteration cap
        on_iteration: Optional hook called before each pass with the
                      iteration number and a copy of the centroids

    Returns:
        result: KMeansResult

    Raises:
        ConfigurationMismatchError: If len(config.seeds) != 2 * n_clusters
        SeedOutOfBoundsError: If a seed lies outside the image

    Example:
        >>> image = ChannelImage.from_array(rgb)  # (H, W, 3) uint8
        >>> config = KMeansConfig(n_clusters=2, seeds=[0, 0, 1, 1])
        >>> result = run_kmeans(image, config)
        >>> posterized = result.to_array()
    """
    validate_seeds(config, image)

    n_pixels = image.size
    output = tuple(np.full(n_pixels, config.fill_value, dtype=np.uint8) for _ in range(3))
    labels = np.full(n_pixels, -1, dtype=np.int64)
    counts = np.zeros(config.n_clusters, dtype=np.int64)

    centroids = CentroidSet.zeros(config.n_clusters)
    accumulator = Accumulator.from_seeds(image, config.seed_points)
    history = []

    iteration = 1
    converged = False
    while iteration < config.max_iter:
        if not centroids.update_from(accumulator):
            converged = True
            break

        accumulator.reset()
        if on_iteration is not None:
            on_iteration(iteration, centroids.values)

        history.append(centroids.values)
        labels = assignment_pass(image, centroids, accumulator, output)
        counts = accumulator.counts.copy()
        iteration += 1

    final_centroids = centroids.values
    inertia = compute_inertia(image, final_centroids, labels) if history else None

    return KMeansResult(
        output=ChannelImage(image.width, image.height, output),
        labels=labels,
        centroids=final_centroids,
        counts=counts,
        n_iter=len(history),
        converged=converged,
        inertia=inertia,
        history=history
    )


class SeededKMeans:
    """
    Seeded k-means wrapper for image posterization.

    Example:
        >>> kmeans = SeededKMeans(KMeansConfig(n_clusters=3, seeds=[...]))
        >>> kmeans.fit_image(image)  # image shape: (H, W, 3) uint8
        >>> segmented = kmeans.get_segmented_image()
    """

    def __init__(self, config: KMeansConfig, on_iteration: Optional[IterationCallback] = None):
        """
        Initialize the clusterer.

        Args:
            config: Configuration parameters
            on_iteration: Optional per-iteration hook, see run_kmeans()
        """
        self.config = config
        self.on_iteration = on_iteration
        self._result: Optional[KMeansResult] = None

    def fit(self, image: ChannelImage) -> 'SeededKMeans':
        """
        Cluster a ChannelImage.

        Returns:
            self: For method chaining
        """
        self._result = run_kmeans(image, self.config, self.on_iteration)
        return self

    def fit_image(self, image: np.ndarray) -> 'SeededKMeans':
        """
        Cluster an (H, W, 3) uint8 array.

        Raises:
            ValueError: If image is not (H, W, 3)
        """
        return self.fit(ChannelImage.from_array(image))

    @property
    def result(self) -> KMeansResult:
        if self._result is None:
            raise RuntimeError("Must call fit() or fit_image() before accessing results")
        return self._result

    @property
    def labels(self) -> np.ndarray:
        return self.result.labels

    @property
    def centroids(self) -> np.ndarray:
        return self.result.centroids

    @property
    def inertia(self) -> Optional[int]:
        return self.result.inertia

    def get_segmented_image(self) -> np.ndarray:
        """
        Posterized image with K colors, shape (H, W, 3).

        Raises:
            RuntimeError: If not fitted yet
        """
        return self.result.to_array()


def process_images_batch(
    images: Dict[str, np.ndarray],
    configs: Dict[str, KMeansConfig],
    on_iteration: Optional[IterationCallback] = None
) -> Dict[str, KMeansResult]:
    """
    Apply seeded k-means to a batch of images.

    Args:
        images: {image_id: (H, W, 3) uint8 array}
        configs: {image_id: KMeansConfig}, same keys as images
        on_iteration: Optional per-iteration hook shared by every run

    Returns:
        {image_id: KMeansResult}

    Raises:
        ValueError: If images and configs have different ids
        ConfigurationMismatchError, SeedOutOfBoundsError: From validation
    """
    image_ids = set(images.keys())
    config_ids = set(configs.keys())

    if image_ids != config_ids:
        missing_in_configs = image_ids - config_ids
        missing_in_images = config_ids - image_ids
        error_msg = "images and configs must have the same ids.\n"
        if missing_in_configs:
            error_msg += f"Missing in configs: {sorted(missing_in_configs)}\n"
        if missing_in_images:
            error_msg += f"Missing in images: {sorted(missing_in_images)}\n"
        raise ValueError(error_msg)

    results = {}
    for image_id in images:
        image = ChannelImage.from_array(images[image_id])
        results[image_id] = run_kmeans(image, configs[image_id], on_iteration)

    return results
