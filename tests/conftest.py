import numpy as np
import pytest

from posterize.kmeans import ChannelImage, KMeansConfig


@pytest.fixture
def worked_image():
    """2x2 gray image: (10), (200) / (12), (210)."""
    values = np.array([10, 200, 12, 210], dtype=np.uint8)
    return ChannelImage(2, 2, (values, values.copy(), values.copy()))


@pytest.fixture
def worked_config():
    return KMeansConfig(n_clusters=2, seeds=[0, 0, 1, 1])


@pytest.fixture
def blocks_array():
    """Four noisy color blocks, (40, 60, 3) uint8."""
    rng = np.random.default_rng(1234)
    blocks = np.zeros((40, 60, 3), dtype=np.int64)
    blocks[:20, :30] = (200, 40, 40)
    blocks[:20, 30:] = (40, 180, 60)
    blocks[20:, :30] = (30, 60, 200)
    blocks[20:, 30:] = (230, 220, 90)
    blocks += rng.integers(-20, 21, size=blocks.shape)
    return np.clip(blocks, 0, 255).astype(np.uint8)


@pytest.fixture
def blocks_config():
    return KMeansConfig(n_clusters=4, seeds=[5, 5, 55, 5, 5, 35, 55, 35])


@pytest.fixture
def noise_array():
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(30, 25, 3), dtype=np.uint8)
