from pathlib import Path
from typing import Any, Dict, List

import yaml
from trendline.components.regression import as_point, Point

METADATA_PATH = Path(__file__).resolve().parent.parent.joinpath("metadata")

METADATA_NAME_MAPPING = {
    "samples": "samples.yaml",
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "precision": 28,
    "window_size": None,
    "std_devs": 2,
}


def get_metadata(name: str):
    assert name in METADATA_NAME_MAPPING, f"Unknown metadata name: {name}"
    with open(METADATA_PATH.joinpath(METADATA_NAME_MAPPING[name])) as f:
        return yaml.safe_load(f)


def list_samples() -> List[str]:
    return sorted(get_metadata("samples"))


def get_sample(name: str) -> List[Point]:
    samples = get_metadata("samples")
    if name not in samples:
        raise KeyError(f"Unknown sample: {name}. Available: {sorted(samples)}")
    return [as_point(point) for point in samples[name]]


def load_config(path) -> Dict[str, Any]:
    """
    Read a YAML run configuration and merge it over DEFAULT_CONFIG.

    An empty file gives the defaults.
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(data).__name__}")

    unknown = set(data) - set(DEFAULT_CONFIG)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {sorted(unknown)}")

    config = dict(DEFAULT_CONFIG)
    config.update(data)
    return config
