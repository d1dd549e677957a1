"""
Per-channel image container.

The clustering code never sees an image file or an (H, W, 3) array, only
three parallel row-major buffers plus the grid dimensions.
"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np


@dataclass(frozen=True)
class ChannelImage:
    """
    Read-only view over three equal-length uint8 channel buffers.

    Pixel (col, row) lives at index col + row * width of every buffer.
    Channel order carries no meaning here; whatever is passed as channel 0
    comes back as channel 0.

    Attributes:
        width: Number of columns (> 0)
        height: Number of rows (> 0)
        channels: Three 1D uint8 arrays of length width * height
    """
    width: int
    height: int
    channels: Tuple[np.ndarray, np.ndarray, np.ndarray]

    def __post_init__(self):
        """Validate dimensions and freeze the channel buffers."""
        if self.width < 1 or self.height < 1:
            raise ValueError(
                f"Image dimensions must be positive, got width={self.width}, height={self.height}"
            )
        if len(self.channels) != 3:
            raise ValueError(f"Expected 3 channels, got {len(self.channels)}")

        n_pixels = self.width * self.height
        views = []
        for idx, channel in enumerate(self.channels):
            arr = np.asarray(channel)
            if arr.size != n_pixels:
                raise ValueError(
                    f"Channel {idx} has {arr.size} values, expected "
                    f"{n_pixels} ({self.width}x{self.height})"
                )
            if arr.dtype != np.uint8:
                if not np.issubdtype(arr.dtype, np.integer):
                    raise ValueError(f"Channel {idx} must hold integers, got dtype {arr.dtype}")
                if arr.size and (arr.min() < 0 or arr.max() > 255):
                    raise ValueError(f"Channel {idx} has values outside [0, 255]")
                arr = arr.astype(np.uint8)

            view = arr.reshape(-1).view()
            view.flags.writeable = False
            views.append(view)

        object.__setattr__(self, 'channels', tuple(views))

    @classmethod
    def from_array(cls, image: np.ndarray) -> 'ChannelImage':
        """
        Split an (H, W, 3) array into a ChannelImage.

        Raises:
            ValueError: If image is not (H, W, 3)
        """
        if image.ndim != 3 or image.shape[2] != 3:
            raise ValueError(f"Image must be (H, W, 3), got shape {image.shape}")

        h, w, _ = image.shape
        return cls(w, h, tuple(image[:, :, c].reshape(-1) for c in range(3)))

    @property
    def size(self) -> int:
        """Number of pixels."""
        return self.width * self.height

    @property
    def shape(self) -> Tuple[int, int]:
        """(H, W), numpy order."""
        return (self.height, self.width)

    def pixel(self, col: int, row: int) -> Tuple[int, int, int]:
        index = col + row * self.width
        return tuple(int(channel[index]) for channel in self.channels)

    def pixels(self) -> np.ndarray:
        """All pixels as an (N, 3) int64 matrix, row-major."""
        return np.stack(self.channels, axis=1).astype(np.int64)

    def to_array(self) -> np.ndarray:
        """Merge back into an (H, W, 3) uint8 array."""
        return np.stack(self.channels, axis=1).reshape(self.height, self.width, 3)
