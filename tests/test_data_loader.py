import json
import os

import numpy as np
import pytest

from posterize.data_loader import (
    ConfigLoader,
    ParameterSnapshot,
    load_image,
    load_params_file,
    merge_channels,
    posterize_file,
    save_image,
    split_channels,
)
from posterize.kmeans import (
    ChannelImage,
    ConfigurationMismatchError,
    KMeansConfig,
    SeedOutOfBoundsError,
)


# ----------------------------------------------------------------------------
# Image I/O
# ----------------------------------------------------------------------------

def test_save_and_load_png(tmp_path, noise_array):
    path = tmp_path / "nested" / "noise.png"
    save_image(noise_array, path)

    loaded = load_image(path)
    assert loaded.dtype == np.uint8
    np.testing.assert_array_equal(loaded, noise_array)


def test_load_missing_image(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "missing.png")


def test_save_rejects_grayscale(tmp_path):
    with pytest.raises(ValueError):
        save_image(np.zeros((4, 4), dtype=np.uint8), tmp_path / "gray.png")


def test_split_channels_matches_channel_image(noise_array):
    image = split_channels(noise_array)

    assert isinstance(image, ChannelImage)
    assert image.shape == noise_array.shape[:2]
    for c in range(3):
        np.testing.assert_array_equal(image.channels[c], noise_array[:, :, c].reshape(-1))


def test_merge_channels_inverts_split(blocks_array):
    merged = merge_channels(split_channels(blocks_array))
    assert merged.shape == blocks_array.shape
    np.testing.assert_array_equal(merged, blocks_array)


def test_split_channels_rejects_bad_input():
    with pytest.raises(ValueError):
        split_channels(np.zeros((4, 4), dtype=np.uint8))
    with pytest.raises(ValueError):
        split_channels(np.zeros((4, 4, 3), dtype=np.float32))


def test_posterize_file(tmp_path, blocks_array, blocks_config):
    input_path = tmp_path / "blocks.png"
    output_path = tmp_path / "out" / "blocks_posterized.png"
    save_image(blocks_array, input_path)

    result = posterize_file(input_path, output_path, blocks_config)

    assert output_path.exists()
    written = load_image(output_path)
    np.testing.assert_array_equal(written, result.to_array())
    assert len(np.unique(written.reshape(-1, 3), axis=0)) == 4


def test_posterize_file_writes_nothing_on_bad_seeds(tmp_path, blocks_array):
    input_path = tmp_path / "blocks.png"
    output_path = tmp_path / "out.png"
    save_image(blocks_array, input_path)

    with pytest.raises(SeedOutOfBoundsError):
        posterize_file(input_path, output_path, KMeansConfig(n_clusters=1, seeds=[60, 0]))
    with pytest.raises(ConfigurationMismatchError):
        posterize_file(input_path, output_path, KMeansConfig(n_clusters=2, seeds=[0, 0]))

    assert not output_path.exists()


# ----------------------------------------------------------------------------
# Parameter files
# ----------------------------------------------------------------------------

def _write_params(path, parameters, metadata=None):
    with open(path, 'w') as f:
        json.dump({'metadata': metadata or {}, 'parameters': parameters}, f)


def test_load_params_file(tmp_path):
    path = tmp_path / "params_koala_20250101_120000.json"
    _write_params(path, {'n_clusters': 2, 'seeds': [0, 0, 1, 1]}, {'image_id': 'koala'})

    snapshot = load_params_file(path)
    assert isinstance(snapshot, ParameterSnapshot)
    assert snapshot.image_id == 'koala'
    assert snapshot.config == KMeansConfig(n_clusters=2, seeds=[0, 0, 1, 1])


def test_load_params_file_missing_keys(tmp_path):
    path = tmp_path / "params.json"
    _write_params(path, {'n_clusters': 2})

    with pytest.raises(KeyError, match="seeds") as excinfo:
        load_params_file(path)

    assert isinstance(excinfo.value.__cause__, KeyError)


def test_load_params_file_malformed_json(tmp_path):
    path = tmp_path / "params.json"
    path.write_text("{not json")

    with pytest.raises(json.JSONDecodeError) as excinfo:
        load_params_file(path)

    assert str(path) in excinfo.value.msg
    assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)


def test_config_loader_requires_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader(data_dir=tmp_path / "missing")


def test_config_loader_save_and_load(tmp_path):
    loader = ConfigLoader(data_dir=tmp_path)
    config = KMeansConfig(n_clusters=3, seeds=[1, 2, 3, 4, 5, 6], max_iter=7)

    path = loader.save_params('my_image', config, {'description': 'test'})
    snapshot = loader.load_params('my_image')

    assert path.name.startswith('params_my_image_')
    assert snapshot.config == config
    assert snapshot.metadata['description'] == 'test'
    assert snapshot.image_id == 'my_image'
    assert loader.get_available_images() == ['my_image']


def test_config_loader_picks_most_recent(tmp_path):
    older = tmp_path / "params_koala_20240101_000000.json"
    newer = tmp_path / "params_koala_20250101_000000.json"
    _write_params(older, {'n_clusters': 1, 'seeds': [0, 0]})
    _write_params(newer, {'n_clusters': 2, 'seeds': [0, 0, 1, 1]})
    os.utime(older, (1_000_000, 1_000_000))
    os.utime(newer, (2_000_000, 2_000_000))

    assert ConfigLoader(data_dir=tmp_path).load_params('koala').config.n_clusters == 2


def test_config_loader_does_not_mix_prefixed_ids(tmp_path):
    _write_params(tmp_path / "params_koala_20240101_000000.json", {'n_clusters': 1, 'seeds': [0, 0]})
    _write_params(
        tmp_path / "params_koala_big_20250101_000000.json",
        {'n_clusters': 2, 'seeds': [0, 0, 1, 1]}
    )
    loader = ConfigLoader(data_dir=tmp_path)

    assert loader.get_available_images() == ['koala', 'koala_big']
    assert loader.load_params('koala').config.n_clusters == 1
    assert loader.load_params('koala_big').config.n_clusters == 2


def test_config_loader_missing_params(tmp_path):
    with pytest.raises(FileNotFoundError, match="koala"):
        ConfigLoader(data_dir=tmp_path).load_params('koala')


def test_config_loader_load_all(tmp_path, blocks_array, blocks_config):
    loader = ConfigLoader(data_dir=tmp_path)
    save_image(blocks_array, tmp_path / "blocks.png")
    loader.save_params('blocks', blocks_config)

    images, configs = loader.load_all()

    assert list(images) == ['blocks']
    np.testing.assert_array_equal(images['blocks'], blocks_array)
    assert configs['blocks'] == blocks_config


def test_config_loader_missing_image(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader(data_dir=tmp_path).load_image('nothing')
