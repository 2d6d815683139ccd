"""
Tests for config.EngineConfig and load_engine_config

Test Coverage:
- Defaults and validation
- from_dict(): camelCase keys, coercion, unknown keys
- load_engine_config(): missing file, corrupt JSON, non-object JSON
"""
import json

import pytest

from collage_toolkit.config import EngineConfig, load_engine_config
from collage_toolkit.errors import ConfigError, OutOfRangeError


def test_defaults():
    config = EngineConfig()

    assert config.limit_memory_percentage == 0
    assert config.collage_image_width == 1200
    assert config.collage_image_quality == 75
    assert config.collage_pdf_density == 150
    assert config.ghostscript_directory is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"limit_memory_percentage": -1},
        {"collage_image_width": 599},
        {"collage_image_quality": 101},
        {"collage_pdf_density": 0},
    ],
)
def test_validation(kwargs):
    with pytest.raises(OutOfRangeError):
        EngineConfig(**kwargs)


def test_from_dict_accepts_camel_case():
    config = EngineConfig.from_dict(
        {
            "limitMemoryPercentage": "25",
            "collageImageWidth": 1024,
            "collagePdfDensity": 200,
            "ghostscriptDirectory": "",
        }
    )

    assert config.limit_memory_percentage == 25
    assert config.collage_image_width == 1024
    assert config.collage_pdf_density == 200
    assert config.ghostscript_directory is None


def test_from_dict_ignores_unknown_keys(caplog):
    with caplog.at_level("WARNING"):
        config = EngineConfig.from_dict({"collage_image_quality": 60, "theme": "dark"})

    assert config.collage_image_quality == 60
    assert "theme" in caplog.text


def test_from_dict_rejects_non_integer():
    with pytest.raises(ConfigError):
        EngineConfig.from_dict({"collageImageWidth": "wide"})


def test_round_trip_through_dict():
    config = EngineConfig(collage_image_width=900, ghostscript_directory="/opt/gs")

    assert EngineConfig.from_dict(config.to_dict()) == config


def test_load_missing_file_uses_defaults(tmp_path):
    assert load_engine_config(tmp_path / "engine.json") == EngineConfig()
    assert load_engine_config(None) == EngineConfig()


def test_load_reads_json(tmp_path):
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"collageImageQuality": 90}), encoding="utf-8")

    assert load_engine_config(path).collage_image_quality == 90


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_load_rejects_bad_content(tmp_path, content):
    path = tmp_path / "engine.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_engine_config(path)
