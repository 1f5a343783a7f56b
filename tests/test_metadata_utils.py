import pytest
from trendline.components.regression import Point
from trendline.utils.metadata_utils import (
    DEFAULT_CONFIG,
    get_metadata,
    get_sample,
    list_samples,
    load_config,
)


def test_samples_are_listed():
    assert {"ascending", "fractional", "hourly", "perfect_line"} <= set(list_samples())


def test_get_sample_returns_points():
    points = get_sample("ascending")
    assert len(points) == 5
    assert all(isinstance(p, Point) for p in points)
    assert points[1] == Point(2, 3)


def test_unknown_names():
    with pytest.raises(AssertionError):
        get_metadata("missing")
    with pytest.raises(KeyError):
        get_sample("missing")


def test_load_config_merges_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("window_size: 10\nstd_devs: 1.5\n")
    config = load_config(path)
    assert config["window_size"] == 10
    assert config["std_devs"] == 1.5
    assert config["precision"] == DEFAULT_CONFIG["precision"]


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == DEFAULT_CONFIG


def test_load_config_rejects_unknown_keys(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("windows: 3\n")
    with pytest.raises(ValueError, match="windows"):
        load_config(path)
