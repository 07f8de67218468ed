"""
Test Tile Models
================
Dict round trips and model defaults.
"""

import pytest

from tile_models import (
    Exclusion, ExclusionType, OriginPreset, PatternType, Point, Room, SkirtingType,
    TileShape, TileSpec, WasteOptions
)


ROOM_DATA = {
    'id': 'bath',
    'name': 'Bathroom',
    'widthCm': 240,
    'heightCm': 180,
    'sections': [
        {'id': 's1', 'x': 0, 'y': 0, 'widthCm': 240, 'heightCm': 180, 'skirtingEnabled': True},
    ],
    'exclusions': [
        {'id': 'tub', 'type': 'rect', 'x': 0, 'y': 0, 'w': 170, 'h': 75, 'skirtingEnabled': False},
        {'id': 'pipe', 'type': 'circle', 'cx': 200, 'cy': 20, 'r': 5},
        {'id': 'corner', 'type': 'tri', 'p1': {'x': 240, 'y': 180},
         'p2': {'x': 220, 'y': 180}, 'p3': {'x': 240, 'y': 160}},
    ],
    'tile': {'widthCm': 60, 'heightCm': 30, 'shape': 'rect'},
    'grout': {'widthCm': 0.3},
    'pattern': {'type': 'runningBond', 'rotationDeg': 0, 'bondFraction': 0.5,
                'origin': {'preset': 'center'}},
    'skirting': {'enabled': True, 'type': 'bought', 'heightCm': 8,
                 'boughtWidthCm': 120, 'boughtPricePerPiece': 4.5},
    'excludedTiles': ['r0c0'],
    'excludedSkirts': [],
}


def test_room_from_dict():
    room = Room.from_dict(ROOM_DATA)

    assert room.id == 'bath'
    assert room.tile.width_cm == 60
    assert room.grout.width_cm == pytest.approx(0.3)
    assert room.pattern.type == PatternType.RUNNING_BOND
    assert room.pattern.origin.preset == OriginPreset.CENTER
    assert room.skirting.type == SkirtingType.BOUGHT
    assert room.excluded_tiles == {'r0c0'}

    tub, pipe, corner = room.exclusions
    assert tub.type == ExclusionType.RECT and not tub.skirting_enabled
    assert pipe.type == ExclusionType.CIRCLE and pipe.skirting_enabled
    assert corner.points == [Point(240, 180), Point(220, 180), Point(240, 160)]


def test_room_round_trip():
    room = Room.from_dict(ROOM_DATA)
    again = Room.from_dict(room.to_dict())

    assert again.to_dict() == room.to_dict()


def test_defaults():
    room = Room.from_dict({'widthCm': 100, 'heightCm': 100})

    assert room.tile.width_cm == 0
    assert room.pattern.type == PatternType.GRID
    assert room.pattern.bond_fraction == 0.5
    assert room.pattern.origin.preset == OriginPreset.TOP_LEFT
    # Skirting is on unless switched off
    assert room.skirting.enabled
    assert room.skirting.type == SkirtingType.CUTOUT
    assert [s.id for s in room.get_sections()] == ['main']


def test_square_tile_forces_height():
    tile = TileSpec(30, 60, shape=TileShape.SQUARE)
    assert tile.height_cm == 30
    assert TileSpec.from_dict({'widthCm': 20, 'heightCm': 50, 'shape': 'square'}).height_cm == 20


def test_unknown_pattern_raises():
    with pytest.raises(ValueError):
        Room.from_dict({'pattern': {'type': 'chevron'}})


def test_waste_options_from_dict():
    waste = WasteOptions.from_dict({'optimizeCuts': True, 'kerfCm': -2})
    assert waste.allow_rotate
    assert waste.optimize_cuts
    assert waste.kerf_cm == 0
    assert not waste.share_offcuts


def test_exclusion_to_dict_by_type():
    ex = Exclusion.from_dict({'id': 'c', 'type': 'circle', 'cx': 1, 'cy': 2, 'r': 3})
    assert ex.to_dict() == {'id': 'c', 'type': 'circle', 'skirtingEnabled': True,
                            'cx': 1, 'cy': 2, 'r': 3}
