"""
Test Command Line
=================
End-to-end runs of the planner on JSON plan files.
"""

import json

import pytest

from main import TilePlanningSystem, main


PLAN = {
    'rooms': [
        {
            'id': 'hall',
            'name': 'Hall',
            'widthCm': 100,
            'heightCm': 50,
            'tile': {'widthCm': 30, 'heightCm': 30, 'shape': 'square'},
            'pattern': {'type': 'grid'},
            'excludedTiles': ['r0c0'],
        },
        {
            'id': 'closet',
            'widthCm': 10,
            'heightCm': 30,
            'tile': {'widthCm': 30, 'heightCm': 30},
            'skirting': {'enabled': False},
        },
    ],
    'waste': {'shareOffcuts': True},
    'pricing': {'pricePerM2': 40, 'packM2': 1, 'reserveTiles': 1},
}


@pytest.fixture
def plan_file(tmp_path):
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(PLAN))
    return str(path)


def test_load_plan(plan_file):
    rooms, waste, pricing = TilePlanningSystem().load_plan(plan_file)

    assert [r.id for r in rooms] == ['hall', 'closet']
    assert waste.share_offcuts
    assert pricing.reserve_tiles == 1


def test_single_room_plan(tmp_path):
    path = tmp_path / "room.json"
    path.write_text(json.dumps(PLAN['rooms'][0]))

    rooms, _, _ = TilePlanningSystem().load_plan(str(path))
    assert [r.id for r in rooms] == ['hall']


def test_json_output(plan_file, capsys):
    main([plan_file, "--json"])
    result = json.loads(capsys.readouterr().out)

    hall, closet = result['rooms']
    assert hall['room'] == 'hall'
    assert 'r0c0' not in {t['id'] for t in hall['tiling']['tiles']}
    assert hall['metrics']['ok']
    assert hall['skirtingNeeds']['pieces'] > 0
    assert closet['skirtingSegments'] == []
    assert result['summary']['rooms'] == 2
    assert result['waste']['shareOffcuts'] is True


def test_include_excluded_flags_tiles(plan_file, capsys):
    main([plan_file, "--json", "--include-excluded"])
    result = json.loads(capsys.readouterr().out)

    flagged = [t['id'] for t in result['rooms'][0]['tiling']['tiles'] if t['excluded']]
    assert flagged == ['r0c0']


def test_output_file(plan_file, tmp_path):
    out = tmp_path / "result.json"
    main([plan_file, "--output", str(out)])

    saved = json.loads(out.read_text())
    assert len(saved['rooms']) == 2


def test_missing_plan_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing.json")])
    assert exc.value.code == 1
