#!/usr/bin/env python3
"""
Tests for config.py
"""

import tempfile
from pathlib import Path

import pytest

from poimap.config import PipelineConfig, load_config


def write_yaml(directory: Path, text: str) -> Path:
    path = directory / 'pipeline.yaml'
    path.write_text(text, encoding='utf-8')
    return path


def test_defaults():
    config = load_config()
    assert config.poi_dir == Path('poi')
    assert config.aggregated_path == Path('poi/final.json')
    assert config.output_path == Path('kc3kai.json')
    assert config.on_duplicate == 'overwrite'
    assert config.progress is True


def test_yaml_overrides_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_yaml(Path(tmpdir), (
            "poi_dir: data/poi\n"
            "output_path: out/routes.json\n"
            "on_duplicate: error\n"
            "progress: false\n"
        ))
        config = load_config(path)

    assert config.poi_dir == Path('data/poi')
    assert config.output_path == Path('out/routes.json')
    assert config.aggregated_path == Path('poi/final.json')
    assert config.on_duplicate == 'error'
    assert config.progress is False


def test_empty_yaml_gives_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_yaml(Path(tmpdir), '')
        assert load_config(path) == PipelineConfig()


def test_unknown_field_rejected():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_yaml(Path(tmpdir), "poi_directory: poi\n")
        with pytest.raises(ValueError, match='poi_directory'):
            load_config(path)


def test_non_mapping_rejected():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_yaml(Path(tmpdir), "- poi\n- final.json\n")
        with pytest.raises(ValueError, match='mapping'):
            load_config(path)


def test_invalid_duplicate_policy():
    with pytest.raises(ValueError, match='on_duplicate'):
        PipelineConfig(on_duplicate='merge')


def test_with_overrides_skips_none():
    config = PipelineConfig().with_overrides(poi_dir='cells', output_path=None, progress=False)
    assert config.poi_dir == Path('cells')
    assert config.output_path == Path('kc3kai.json')
    assert config.progress is False


def test_wrongly_typed_values_rejected():
    tests = [
        ("poi_dir: 123\n", 'poi_dir'),
        ("output_path: [a, b]\n", 'output_path'),
        ("progress: 'no'\n", 'progress'),
        ("on_duplicate: 1\n", 'on_duplicate'),
    ]

    with tempfile.TemporaryDirectory() as tmpdir:
        for text, field in tests:
            path = write_yaml(Path(tmpdir), text)
            with pytest.raises(ValueError, match=field):
                load_config(path)


def test_non_string_keys_reported():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_yaml(Path(tmpdir), "1: poi\npoi_dir: poi\n")
        with pytest.raises(ValueError, match='Unknown config field'):
            load_config(path)


def test_null_value_keeps_default():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_yaml(Path(tmpdir), "poi_dir:\n")
        assert load_config(path).poi_dir == Path('poi')
