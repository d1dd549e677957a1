import json
import logging

import numpy as np
import pytest

from posterize.cli import build_config, log_centroids, main, parse_args
from posterize.data_loader import load_image, save_image


def test_parse_args_collects_seeds(tmp_path):
    args = parse_args(["in.png", "out.png", "-k", "2", "--seed", "1", "2", "--seed", "3", "4"])
    config = build_config(args)

    assert config.n_clusters == 2
    assert config.seeds == (1, 2, 3, 4)
    assert config.max_iter == 10


def test_cluster_count_defaults_to_seed_count():
    config = build_config(parse_args(["in.png", "out.png", "--seed", "0", "0", "--max-iter", "4"]))
    assert (config.n_clusters, config.max_iter) == (1, 4)


def test_main_posterizes(tmp_path, blocks_array):
    input_path = tmp_path / "blocks.png"
    output_path = tmp_path / "blocks_out.png"
    save_image(blocks_array, input_path)

    status = main([
        str(input_path), str(output_path), "-k", "4",
        "--seed", "5", "5", "--seed", "55", "5", "--seed", "5", "35", "--seed", "55", "35",
    ])

    assert status == 0
    assert len(np.unique(load_image(output_path).reshape(-1, 3), axis=0)) == 4


def test_main_with_params_file(tmp_path, blocks_array):
    input_path = tmp_path / "blocks.png"
    output_path = tmp_path / "blocks_out.png"
    params_path = tmp_path / "params_blocks_20250101_120000.json"
    save_image(blocks_array, input_path)
    params_path.write_text(json.dumps({
        "metadata": {"image_id": "blocks"},
        "parameters": {"n_clusters": 2, "seeds": [5, 5, 55, 35]},
    }))

    assert main([str(input_path), str(output_path), "--params", str(params_path), "-v"]) == 0
    assert len(np.unique(load_image(output_path).reshape(-1, 3), axis=0)) == 2


def test_main_reports_validation_errors(tmp_path, blocks_array, caplog):
    input_path = tmp_path / "blocks.png"
    output_path = tmp_path / "blocks_out.png"
    save_image(blocks_array, input_path)

    with caplog.at_level(logging.ERROR):
        status = main([str(input_path), str(output_path), "-k", "2", "--seed", "0", "0"])

    assert status == 1
    assert not output_path.exists()
    assert "Mismatch" in caplog.text


def test_main_missing_input(tmp_path):
    assert main([str(tmp_path / "nope.png"), str(tmp_path / "out.png"), "--seed", "0", "0"]) == 1


def test_log_centroids(caplog):
    with caplog.at_level(logging.DEBUG, logger="posterize"):
        log_centroids(3, np.array([[1, 2, 3], [4, 5, 6]]))

    assert "Iteration 3 centroids: [1, 2, 3], [4, 5, 6]" in caplog.text


def test_params_rejects_seed_and_clusters(capsys):
    with pytest.raises(SystemExit):
        parse_args(["in.png", "out.png", "--params", "p.json", "--seed", "0", "0"])
    with pytest.raises(SystemExit):
        parse_args(["in.png", "out.png", "--params", "p.json", "-k", "2"])

    assert "--params cannot be combined" in capsys.readouterr().err


def test_max_iter_overrides_params_file(tmp_path):
    params_path = tmp_path / "params_blocks_20250101_120000.json"
    params_path.write_text(json.dumps({
        "metadata": {"image_id": "blocks"},
        "parameters": {"n_clusters": 2, "seeds": [5, 5, 55, 35], "max_iter": 7},
    }))

    assert build_config(parse_args(["in.png", "out.png", "--params", str(params_path)])).max_iter == 7
    config = build_config(parse_args(["in.png", "out.png", "--params", str(params_path), "--max-iter", "3"]))
    assert (config.n_clusters, config.seeds, config.max_iter) == (2, (5, 5, 55, 35), 3)


def test_main_rejects_non_integer_params(tmp_path, blocks_array, caplog):
    input_path = tmp_path / "blocks.png"
    output_path = tmp_path / "blocks_out.png"
    params_path = tmp_path / "params_blocks_20250101_120000.json"
    save_image(blocks_array, input_path)
    params_path.write_text(json.dumps({
        "metadata": {"image_id": "blocks"},
        "parameters": {"n_clusters": "2", "seeds": [5, 5, 55, 35]},
    }))

    with caplog.at_level(logging.ERROR):
        status = main([str(input_path), str(output_path), "--params", str(params_path)])

    assert status == 1
    assert not output_path.exists()
    assert "n_clusters must be an integer" in caplog.text
