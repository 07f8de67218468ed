"""
Tile Models for Tile Layout Planning System
===========================================
Core data structures for room, tile, pattern and skirting configuration,
and for the placements, offcuts and trim pieces the planner produces.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Tuple, Optional, Any, Set
from enum import Enum
import numpy as np

from config import Config


Coord = Tuple[float, float]
Ring = List[Coord]
PolygonRings = List[Ring]
Boundary = List[PolygonRings]


class TileShape(Enum):
    """Supported tile outlines."""
    RECT = "rect"
    SQUARE = "square"
    HEX = "hex"
    RHOMBUS = "rhombus"

    @classmethod
    def parse(cls, value: Any) -> 'TileShape':
        """Parse a shape name, defaulting to rect for missing values."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.RECT
        try:
            return cls(value)
        except ValueError:
            return cls.RECT


class PatternType(Enum):
    """Placement pattern families."""
    GRID = "grid"
    RUNNING_BOND = "runningBond"
    HERRINGBONE = "herringbone"
    DOUBLE_HERRINGBONE = "doubleHerringbone"
    BASKETWEAVE = "basketweave"
    VERTICAL_STACK_ALTERNATING = "verticalStackAlternating"

    @classmethod
    def parse(cls, value: Any) -> 'PatternType':
        if isinstance(value, cls):
            return value
        if not value:
            return cls.GRID
        return cls(value)


class OriginPreset(Enum):
    """Anchor point of the pattern lattice."""
    TOP_LEFT = "tl"
    TOP_RIGHT = "tr"
    BOTTOM_LEFT = "bl"
    BOTTOM_RIGHT = "br"
    CENTER = "center"
    FREE = "free"

    @classmethod
    def parse(cls, value: Any) -> 'OriginPreset':
        if isinstance(value, cls):
            return value
        if not value:
            return cls.TOP_LEFT
        return cls(value)


class ExclusionType(Enum):
    """Cut-out shapes that are removed from the tiled area."""
    RECT = "rect"
    CIRCLE = "circle"
    TRIANGLE = "tri"
    FREEFORM = "freeform"


class SkirtingType(Enum):
    """Where skirting pieces come from."""
    CUTOUT = "cutout"   # Strips cut from floor tiles
    BOUGHT = "bought"   # Ready-made trim pieces


class ErrorKind(Enum):
    """Error categories returned as values by the planner."""
    TOO_MANY_TILES = "TooManyTiles"
    GEOMETRY_OPERATION_FAILED = "GeometryOperationFailed"
    INVALID_DIMENSIONS = "InvalidDimensions"
    DEGENERATE_PATH = "DegeneratePath"


def _num(value: Any, default: float = 0.0) -> float:
    """Coerce collaborator input to a finite float."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if not np.isfinite(result):
        return default
    return result


@dataclass
class Point:
    """2D point in room coordinates (centimeters)."""
    x: float
    y: float

    def __hash__(self):
        return hash((round(self.x, 6), round(self.y, 6)))

    def __eq__(self, other):
        if not isinstance(other, Point):
            return False
        return abs(self.x - other.x) < 1e-6 and abs(self.y - other.y) < 1e-6

    @classmethod
    def from_any(cls, value: Any) -> 'Point':
        """Build from a dict with x/y keys or a 2-sequence."""
        if isinstance(value, Point):
            return value
        if isinstance(value, dict):
            return cls(_num(value.get('x')), _num(value.get('y')))
        return cls(_num(value[0]), _num(value[1]))


@dataclass
class TileSpec:
    """Tile dimensions and outline."""
    width_cm: float
    height_cm: float
    shape: TileShape = TileShape.RECT
    reference: str = ""

    def __post_init__(self):
        self.shape = TileShape.parse(self.shape)
        if self.shape == TileShape.SQUARE:
            self.height_cm = self.width_cm

    @property
    def long_side(self) -> float:
        return max(self.width_cm, self.height_cm)

    @property
    def short_side(self) -> float:
        return min(self.width_cm, self.height_cm)

    @property
    def is_valid(self) -> bool:
        """Strictly positive dimensions."""
        return self.width_cm > 0 and self.height_cm > 0

    def to_dict(self) -> Dict:
        return {
            'widthCm': self.width_cm,
            'heightCm': self.height_cm,
            'shape': self.shape.value,
            'reference': self.reference,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'TileSpec':
        data = data or {}
        return cls(
            width_cm=_num(data.get('widthCm')),
            height_cm=_num(data.get('heightCm')),
            shape=TileShape.parse(data.get('shape')),
            reference=data.get('reference') or "",
        )


@dataclass
class GroutSpec:
    """Joint width between tiles."""
    width_cm: float = 0.0

    def to_dict(self) -> Dict:
        return {'widthCm': self.width_cm}

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'GroutSpec':
        data = data or {}
        return cls(width_cm=_num(data.get('widthCm')))


@dataclass
class OriginSpec:
    """Lattice origin: a preset corner/center or a free point."""
    preset: OriginPreset = OriginPreset.TOP_LEFT
    x_cm: float = 0.0
    y_cm: float = 0.0

    def __post_init__(self):
        self.preset = OriginPreset.parse(self.preset)

    def to_dict(self) -> Dict:
        return {'preset': self.preset.value, 'xCm': self.x_cm, 'yCm': self.y_cm}

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'OriginSpec':
        data = data or {}
        return cls(
            preset=OriginPreset.parse(data.get('preset')),
            x_cm=_num(data.get('xCm')),
            y_cm=_num(data.get('yCm')),
        )


@dataclass
class PatternSpec:
    """Pattern family and its placement parameters."""
    type: PatternType = PatternType.GRID
    rotation_deg: float = 0.0
    offset_x_cm: float = 0.0
    offset_y_cm: float = 0.0
    bond_fraction: float = 0.5
    origin: OriginSpec = field(default_factory=OriginSpec)

    def __post_init__(self):
        self.type = PatternType.parse(self.type)

    def to_dict(self) -> Dict:
        return {
            'type': self.type.value,
            'rotationDeg': self.rotation_deg,
            'offsetXcm': self.offset_x_cm,
            'offsetYcm': self.offset_y_cm,
            'bondFraction': self.bond_fraction,
            'origin': self.origin.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'PatternSpec':
        data = data or {}
        return cls(
            type=PatternType.parse(data.get('type')),
            rotation_deg=_num(data.get('rotationDeg')),
            offset_x_cm=_num(data.get('offsetXcm')),
            offset_y_cm=_num(data.get('offsetYcm')),
            bond_fraction=_num(data.get('bondFraction'), 0.5) or 0.5,
            origin=OriginSpec.from_dict(data.get('origin')),
        )


@dataclass
class Exclusion:
    """Area removed from tiling (pillar, cabinet, bathtub, ...)."""
    type: ExclusionType
    id: str = ""
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0
    cx: float = 0.0
    cy: float = 0.0
    r: float = 0.0
    points: List[Point] = field(default_factory=list)
    skirting_enabled: bool = True

    def to_dict(self) -> Dict:
        data: Dict[str, Any] = {
            'id': self.id,
            'type': self.type.value,
            'skirtingEnabled': self.skirting_enabled,
        }
        if self.type == ExclusionType.RECT:
            data.update({'x': self.x, 'y': self.y, 'w': self.w, 'h': self.h})
        elif self.type == ExclusionType.CIRCLE:
            data.update({'cx': self.cx, 'cy': self.cy, 'r': self.r})
        elif self.type == ExclusionType.TRIANGLE:
            for i, p in enumerate(self.points[:3], start=1):
                data[f'p{i}'] = {'x': p.x, 'y': p.y}
        else:
            data['points'] = [{'x': p.x, 'y': p.y} for p in self.points]
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> 'Exclusion':
        ex_type = ExclusionType(data.get('type'))
        if ex_type == ExclusionType.TRIANGLE:
            points = [Point.from_any(data[k]) for k in ('p1', 'p2', 'p3') if data.get(k) is not None]
        else:
            points = [Point.from_any(p) for p in data.get('points') or []]
        return cls(
            type=ex_type,
            id=str(data.get('id') or ""),
            x=_num(data.get('x')),
            y=_num(data.get('y')),
            w=_num(data.get('w')),
            h=_num(data.get('h')),
            cx=_num(data.get('cx')),
            cy=_num(data.get('cy')),
            r=_num(data.get('r')),
            points=points,
            skirting_enabled=data.get('skirtingEnabled', True) is not False,
        )


@dataclass
class Section:
    """Rectangular part of a composite room."""
    x: float
    y: float
    width_cm: float
    height_cm: float
    id: str = ""
    skirting_enabled: bool = True

    @property
    def is_valid(self) -> bool:
        return self.width_cm > 0 and self.height_cm > 0

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'widthCm': self.width_cm,
            'heightCm': self.height_cm,
            'skirtingEnabled': self.skirting_enabled,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Section':
        return cls(
            x=_num(data.get('x')),
            y=_num(data.get('y')),
            width_cm=_num(data.get('widthCm')),
            height_cm=_num(data.get('heightCm')),
            id=str(data.get('id') or ""),
            skirting_enabled=data.get('skirtingEnabled', True) is not False,
        )


@dataclass
class SkirtingSpec:
    """Skirting configuration for a room."""
    enabled: bool = True
    type: SkirtingType = SkirtingType.CUTOUT
    height_cm: float = 6.0
    bought_width_cm: float = 0.0
    bought_price_per_piece: float = 0.0

    def piece_length(self, tile: Optional[TileSpec]) -> Optional[float]:
        """Length of one trim piece, or None to keep wall runs whole."""
        if self.type == SkirtingType.BOUGHT and self.bought_width_cm > 0:
            return self.bought_width_cm
        if tile is not None and tile.width_cm > 0:
            return tile.width_cm
        return None

    def to_dict(self) -> Dict:
        return {
            'enabled': self.enabled,
            'type': self.type.value,
            'heightCm': self.height_cm,
            'boughtWidthCm': self.bought_width_cm,
            'boughtPricePerPiece': self.bought_price_per_piece,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'SkirtingSpec':
        data = data or {}
        return cls(
            enabled=data.get('enabled', True) is not False,
            type=SkirtingType(data.get('type') or SkirtingType.CUTOUT.value),
            height_cm=_num(data.get('heightCm'), Config.SKIRTING['default_height_cm']),
            bought_width_cm=_num(data.get('boughtWidthCm')),
            bought_price_per_piece=_num(data.get('boughtPricePerPiece')),
        )


@dataclass
class WasteOptions:
    """Offcut reuse settings for the costing pass."""
    allow_rotate: bool = True
    optimize_cuts: bool = False
    kerf_cm: float = 0.0
    share_offcuts: bool = False

    def to_dict(self) -> Dict:
        return {
            'allowRotate': self.allow_rotate,
            'optimizeCuts': self.optimize_cuts,
            'kerfCm': self.kerf_cm,
            'shareOffcuts': self.share_offcuts,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'WasteOptions':
        data = data or {}
        return cls(
            allow_rotate=data.get('allowRotate', True) is not False,
            optimize_cuts=bool(data.get('optimizeCuts', False)),
            kerf_cm=max(0.0, _num(data.get('kerfCm'))),
            share_offcuts=bool(data.get('shareOffcuts', False)),
        )


@dataclass
class PricingOptions:
    """Material pricing used by the costing pass."""
    price_per_m2: float = 0.0
    pack_m2: float = 0.0
    reserve_tiles: int = 0

    def to_dict(self) -> Dict:
        return {
            'pricePerM2': self.price_per_m2,
            'packM2': self.pack_m2,
            'reserveTiles': self.reserve_tiles,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'PricingOptions':
        data = data or {}
        return cls(
            price_per_m2=_num(data.get('pricePerM2')),
            pack_m2=_num(data.get('packM2')),
            reserve_tiles=max(0, int(_num(data.get('reserveTiles')))),
        )


@dataclass
class Room:
    """A room, already resolved to its own local coordinate system."""
    tile: TileSpec
    grout: GroutSpec = field(default_factory=GroutSpec)
    pattern: PatternSpec = field(default_factory=PatternSpec)
    skirting: SkirtingSpec = field(default_factory=SkirtingSpec)
    id: str = ""
    name: str = ""
    width_cm: float = 0.0
    height_cm: float = 0.0
    sections: List[Section] = field(default_factory=list)
    polygon_vertices: List[Point] = field(default_factory=list)
    exclusions: List[Exclusion] = field(default_factory=list)
    excluded_tiles: Set[str] = field(default_factory=set)
    excluded_skirts: Set[str] = field(default_factory=set)

    def __post_init__(self):
        self.excluded_tiles = set(self.excluded_tiles)
        self.excluded_skirts = set(self.excluded_skirts)

    def get_sections(self) -> List[Section]:
        """Sections of the room; a plain rectangle is one section."""
        if self.sections:
            return list(self.sections)
        if self.width_cm > 0 and self.height_cm > 0:
            return [Section(0.0, 0.0, self.width_cm, self.height_cm, id="main",
                            skirting_enabled=True)]
        return []

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'widthCm': self.width_cm,
            'heightCm': self.height_cm,
            'sections': [s.to_dict() for s in self.sections],
            'polygonVertices': [{'x': p.x, 'y': p.y} for p in self.polygon_vertices],
            'exclusions': [e.to_dict() for e in self.exclusions],
            'tile': self.tile.to_dict(),
            'grout': self.grout.to_dict(),
            'pattern': self.pattern.to_dict(),
            'skirting': self.skirting.to_dict(),
            'excludedTiles': sorted(self.excluded_tiles),
            'excludedSkirts': sorted(self.excluded_skirts),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Room':
        return cls(
            tile=TileSpec.from_dict(data.get('tile')),
            grout=GroutSpec.from_dict(data.get('grout')),
            pattern=PatternSpec.from_dict(data.get('pattern')),
            skirting=SkirtingSpec.from_dict(data.get('skirting')),
            id=str(data.get('id') or ""),
            name=str(data.get('name') or ""),
            width_cm=_num(data.get('widthCm')),
            height_cm=_num(data.get('heightCm')),
            sections=[Section.from_dict(s) for s in data.get('sections') or []],
            polygon_vertices=[Point.from_any(p) for p in data.get('polygonVertices') or []],
            exclusions=[Exclusion.from_dict(e) for e in data.get('exclusions') or []],
            excluded_tiles=set(data.get('excludedTiles') or []),
            excluded_skirts=set(data.get('excludedSkirts') or []),
        )


@dataclass
class TilePlacement:
    """One tile position clipped to the available area."""
    id: str
    boundary: Boundary
    is_full: bool
    area: float = 0.0
    excluded: bool = False

    @property
    def is_cut(self) -> bool:
        return not self.is_full

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'boundary': [[list(map(list, ring)) for ring in poly] for poly in self.boundary],
            'isFull': self.is_full,
            'area': self.area,
            'excluded': self.excluded,
        }


@dataclass
class Offcut:
    """Reusable rectangular remainder of a cut."""
    id: str
    width: float
    height: float
    origin_tag: str = "tile"

    @property
    def area(self) -> float:
        return self.width * self.height

    def to_dict(self) -> Dict:
        return {'id': self.id, 'w': self.width, 'h': self.height, 'from': self.origin_tag}


@dataclass
class UsedOffcut:
    """Record of a pool piece consumed by a take request."""
    id: str
    width: float
    height: float
    rot_used: bool
    remainders: List[Offcut] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'w': self.width,
            'h': self.height,
            'rotUsed': self.rot_used,
            'remainders': [r.to_dict() for r in self.remainders],
        }


@dataclass
class TakeResult:
    """Outcome of OffcutPool.take."""
    ok: bool
    used: Optional[UsedOffcut] = None


@dataclass
class BoundingBox:
    """Axis-aligned bounding box (x, y, width, height)."""
    x: float
    y: float
    w: float
    h: float

    @property
    def area(self) -> float:
        return self.w * self.h


@dataclass
class CutAnalysis:
    """Shape statistics of one cut placement."""
    bbox: BoundingBox
    bbox_area: float
    actual_area: float
    area_ratio: float
    is_triangular_cut: bool


@dataclass
class SkirtingSegment:
    """One physical trim piece along a wall."""
    p1: Coord
    p2: Coord
    length: float
    id: str
    excluded: bool = False

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'p1': list(self.p1),
            'p2': list(self.p2),
            'length': self.length,
            'excluded': self.excluded,
        }


@dataclass
class AreaResult:
    """Geometry plus an optional error string."""
    area: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class TilingResult:
    """Results from pattern generation."""
    tiles: List[TilePlacement] = field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def full_count(self) -> int:
        return sum(1 for t in self.tiles if t.is_full and not t.excluded)

    @property
    def cut_count(self) -> int:
        return sum(1 for t in self.tiles if t.is_cut and not t.excluded)

    def to_dict(self) -> Dict:
        return {
            'tiles': [t.to_dict() for t in self.tiles],
            'error': self.error,
            'errorKind': self.error_kind.value if self.error_kind else None,
        }


@dataclass
class PlanMetrics:
    """Material and pricing figures for one planned room."""
    ok: bool
    error: Optional[str] = None
    room_id: str = ""
    full_tiles: int = 0
    cut_tiles: int = 0
    reused_cuts: int = 0
    paired_cuts: int = 0
    purchased_tiles: int = 0
    reserve_tiles: int = 0
    tile_area_cm2: float = 0.0
    gross_room_area_m2: float = 0.0
    installed_area_m2: float = 0.0
    purchased_area_m2: float = 0.0
    waste_area_m2: float = 0.0
    waste_pct: float = 0.0
    waste_tiles_est: int = 0
    cut_tiles_pct: float = 0.0
    cut_need_area_m2_est: float = 0.0
    price_per_m2: float = 0.0
    pack_m2: float = 0.0
    packs: Optional[int] = None
    price_total: float = 0.0
    offcut_pool_final: List[Offcut] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def purchased_tiles_with_reserve(self) -> int:
        return self.purchased_tiles + self.reserve_tiles

    @property
    def placed_tiles(self) -> int:
        return self.full_tiles + self.cut_tiles

    def get_summary(self) -> str:
        """Generate text summary of results."""
        if not self.ok:
            return f"Planning failed: {self.error}"

        lines = [
            f"Full tiles: {self.full_tiles}",
            f"Cut tiles: {self.cut_tiles} ({self.cut_tiles_pct:.1f}%)",
            f"Cuts from offcuts: {self.reused_cuts}",
            f"Cuts from paired pieces: {self.paired_cuts}",
            f"Tiles to buy: {self.purchased_tiles_with_reserve} "
            f"(incl. {self.reserve_tiles} reserve)",
            f"Installed area: {self.installed_area_m2:.2f} m²",
            f"Purchased area: {self.purchased_area_m2:.2f} m²",
            f"Waste: {self.waste_area_m2:.2f} m² ({self.waste_pct:.1f}%)",
        ]
        if self.packs is not None:
            lines.append(f"Packs: {self.packs}")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings[:3]:
                lines.append(f"  - {warning}")

        return "\n".join(lines)

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            'ok': self.ok,
            'error': self.error,
            'roomId': self.room_id,
            'tiles': {
                'fullTiles': self.full_tiles,
                'cutTiles': self.cut_tiles,
                'reusedCuts': self.reused_cuts,
                'pairedCuts': self.paired_cuts,
                'purchasedTiles': self.purchased_tiles,
                'reserveTiles': self.reserve_tiles,
                'purchasedTilesWithReserve': self.purchased_tiles_with_reserve,
            },
            'material': {
                'tileAreaCm2': self.tile_area_cm2,
                'purchasedAreaM2': self.purchased_area_m2,
                'installedAreaM2': self.installed_area_m2,
                'wasteAreaM2': self.waste_area_m2,
                'wastePct': self.waste_pct,
                'wasteTilesEst': self.waste_tiles_est,
            },
            'labor': {
                'totalPlacedTiles': self.placed_tiles,
                'cutTiles': self.cut_tiles,
                'cutTilesPct': self.cut_tiles_pct,
                'cutNeedAreaM2Est': self.cut_need_area_m2_est,
            },
            'area': {
                'grossRoomAreaM2': self.gross_room_area_m2,
                'netAreaM2': self.installed_area_m2,
            },
            'pricing': {
                'pricePerM2': self.price_per_m2,
                'packM2': self.pack_m2,
                'packs': self.packs,
                'priceTotal': self.price_total,
            },
            'offcutPoolFinal': [o.to_dict() for o in self.offcut_pool_final],
            'warnings': self.warnings,
        }


@dataclass
class SkirtingNeeds:
    """Trim material for one room."""
    enabled: bool
    type: SkirtingType
    total_length_cm: float = 0.0
    runs: int = 0
    pieces: int = 0
    strips_per_tile: int = 0
    additional_tiles: int = 0
    bought_pieces: int = 0
    bought_cost: float = 0.0
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'enabled': self.enabled,
            'type': self.type.value,
            'totalLengthCm': self.total_length_cm,
            'runs': self.runs,
            'pieces': self.pieces,
            'stripsPerTile': self.strips_per_tile,
            'additionalTiles': self.additional_tiles,
            'boughtPieces': self.bought_pieces,
            'boughtCost': self.bought_cost,
            'warnings': self.warnings,
        }
