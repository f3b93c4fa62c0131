#!/usr/bin/env python3
"""
Tests for cell_key.py
"""

from pathlib import Path

import pytest

from poimap.cell_key import CellKey, parse_component


def test_from_filename():
    """Test parsing keys from file names."""
    tests = [
        ('1_2.json', CellKey(1, 2)),
        ('01_02.json', CellKey(1, 2)),
        ('12_345.json', CellKey(12, 345)),
        (Path('poi/sub/7_0.json'), CellKey(7, 0)),
    ]

    for name, expected in tests:
        result = CellKey.from_filename(name)
        assert result == expected, f"Expected {expected}, got {result}"


def test_from_filename_no_match():
    for name in ['final.json', '1_2.json.bak', '1-2.json', 'a_2.json', '1_2_3.json', '_2.json', '1_2.JSON']:
        assert CellKey.from_filename(name) is None, name


def test_composite_and_world_label():
    key = CellKey(3, 5)
    assert key.composite == '3-5'
    assert key.world_label == 'World 3-5'
    assert str(key) == '3-5'


def test_from_composite():
    assert CellKey.from_composite('3-5') == CellKey(3, 5)
    assert CellKey.from_composite('03-5').composite == '3-5'


def test_from_composite_invalid():
    for key in ['3', '3-5-1', 'a-5', '3-', ' 3-5', '+3-5']:
        with pytest.raises(ValueError, match='Invalid'):
            CellKey.from_composite(key)


def test_parse_component_names_value():
    assert parse_component('42', 'area') == 42

    with pytest.raises(ValueError) as exc_info:
        parse_component('4x', 'cell')
    assert "'4x'" in str(exc_info.value)
    assert 'cell' in str(exc_info.value)


def test_keys_are_hashable_and_ordered():
    keys = {CellKey(2, 1), CellKey(1, 9), CellKey(1, 2), CellKey(1, 2)}
    assert sorted(keys) == [CellKey(1, 2), CellKey(1, 9), CellKey(2, 1)]


def test_non_ascii_digits_rejected():
    # Arabic-Indic and fullwidth digits are decimal to Python but not cell numbers
    for name in ['١_٢.json', '１_２.json', '1_٢.json']:
        assert CellKey.from_filename(name) is None, name

    for key in ['١-٢', '１-２', '1-２']:
        with pytest.raises(ValueError, match='Invalid'):
            CellKey.from_composite(key)
