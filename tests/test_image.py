import numpy as np
import pytest

from posterize.kmeans import ChannelImage


def test_row_major_indexing():
    array = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)  # (H=2, W=3)
    image = ChannelImage.from_array(array)

    assert (image.width, image.height) == (3, 2)
    assert image.shape == (2, 3)
    assert image.size == 6
    assert image.pixel(2, 1) == tuple(int(v) for v in array[1, 2])
    assert image.pixels()[2 + 1 * 3].tolist() == array[1, 2].tolist()


def test_to_array_restores_layout(noise_array):
    image = ChannelImage.from_array(noise_array)
    np.testing.assert_array_equal(image.to_array(), noise_array)


def test_channels_are_read_only(worked_image):
    for channel in worked_image.channels:
        with pytest.raises(ValueError):
            channel[0] = 1


def test_caller_buffers_stay_writable():
    values = np.zeros(4, dtype=np.uint8)
    ChannelImage(2, 2, (values, values, values))
    values[0] = 9
    assert values[0] == 9


def test_integer_lists_are_accepted():
    image = ChannelImage(2, 1, ([1, 2], [3, 4], [5, 6]))
    assert image.channels[0].dtype == np.uint8
    assert image.pixel(1, 0) == (2, 4, 6)


@pytest.mark.parametrize("width, height", [(0, 2), (2, 0), (-1, 1)])
def test_dimensions_must_be_positive(width, height):
    with pytest.raises(ValueError, match="positive"):
        ChannelImage(width, height, ([], [], []))


def test_channel_length_must_match():
    with pytest.raises(ValueError, match="Channel 1"):
        ChannelImage(2, 2, ([0] * 4, [0] * 3, [0] * 4))


def test_exactly_three_channels():
    with pytest.raises(ValueError, match="3 channels"):
        ChannelImage(1, 1, ([0], [0]))


def test_values_must_fit_in_a_byte():
    with pytest.raises(ValueError, match="outside"):
        ChannelImage(1, 1, ([0], [256], [0]))
    with pytest.raises(ValueError, match="integers"):
        ChannelImage(1, 1, ([0.5], [0], [0]))


def test_from_array_rejects_grayscale():
    with pytest.raises(ValueError):
        ChannelImage.from_array(np.zeros((3, 3), dtype=np.uint8))
