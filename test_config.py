"""
Test Configuration
==================
Dotted access and file loading for the Config class.
"""

import copy
import json

import pytest

from config import Config


@pytest.fixture
def restore_config():
    saved = copy.deepcopy(Config.to_dict())
    yield
    for key, value in saved.items():
        setattr(Config, key, value)


def test_get_dotted_keys():
    assert Config.get('TILING.max_preview_tiles') == 12000
    assert Config.get('CUT_ANALYSIS.triangular_min_ratio') == 0.45
    assert Config.get('TILING.missing', 'fallback') == 'fallback'
    assert Config.get('NOPE.nothing') is None


def test_set_dotted_keys(restore_config):
    Config.set('SKIRTING.max_strips_per_tile', 3)
    assert Config.SKIRTING['max_strips_per_tile'] == 3

    with pytest.raises(KeyError):
        Config.set('NOPE.value', 1)


def test_from_file_merges_sections(tmp_path, restore_config):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'TILING': {'max_preview_tiles': 500}, 'UNKNOWN': 1}))

    Config.from_file(str(path))

    assert Config.get('TILING.max_preview_tiles') == 500
    assert Config.get('TILING.circle_steps') == 48
    assert not hasattr(Config, 'UNKNOWN')


def test_from_yaml_file(tmp_path, restore_config):
    path = tmp_path / "config.yaml"
    path.write_text("WASTE:\n  kerf_cm: 0.2\n")

    Config.from_file(str(path))

    assert Config.get('WASTE.kerf_cm') == pytest.approx(0.2)
    assert Config.get('WASTE.allow_rotate') is True


def test_unsupported_format(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[TILING]\n")
    with pytest.raises(ValueError):
        Config.from_file(str(path))


def test_save_and_reload(tmp_path, restore_config):
    path = tmp_path / "saved.json"
    Config.set('PRICING.reserve_tiles', 4)
    Config.save_to_file(str(path))

    saved = json.loads(path.read_text())
    assert saved['PRICING']['reserve_tiles'] == 4

    Config.set('PRICING.reserve_tiles', 0)
    Config.from_file(str(path))
    assert Config.get('PRICING.reserve_tiles') == 4
