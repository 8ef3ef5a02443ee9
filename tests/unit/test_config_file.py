from __future__ import annotations

from pathlib import Path

import pytest

from trackbridge.errors import InitError
from trackbridge.runtime.config_file import flatten_config, load_config_file
from trackbridge.config.session import REASON_INVALID_CONFIG, REASON_INVALID_CONFIG_PATH


def test_flatten_nested_objects_to_dotted_string_keys() -> None:
    flat = flatten_config(
        {
            "Depth": {"Mirror": True, "FPS": 30},
            "DepthProvider": {"Depth2ColorRegistration": False},
            "License": None,
            "Segmentation": {"Ranges": [500, 4000]},
            "Realsense2Module": {"Depth": {"Preset": "Default"}},
        }
    )
    assert flat == {
        "Depth.Mirror": "true",
        "Depth.FPS": "30",
        "DepthProvider.Depth2ColorRegistration": "false",
        "License": "",
        "Segmentation.Ranges": "[500,4000]",
        "Realsense2Module.Depth.Preset": "Default",
    }


def test_load_config_file(tmp_path: Path) -> None:
    path = tmp_path / "nuitrack.json"
    path.write_bytes(b'{"Skeletonization": {"MaxDistance": 4.5}}')
    assert load_config_file(path) == {"Skeletonization.MaxDistance": "4.5"}


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InitError) as exc:
        load_config_file(tmp_path / "absent.json")
    assert exc.value.reason_code == REASON_INVALID_CONFIG_PATH
    assert isinstance(exc.value.__cause__, OSError)


@pytest.mark.parametrize("content", [b"{not json", b'"just a string"'])
def test_invalid_content(tmp_path: Path, content: bytes) -> None:
    path = tmp_path / "config.json"
    path.write_bytes(content)
    with pytest.raises(InitError) as exc:
        load_config_file(path)
    assert exc.value.reason_code == REASON_INVALID_CONFIG
