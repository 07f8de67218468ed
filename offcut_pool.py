"""
offcut_pool.py - Reusable Offcut Tracking
=========================================
Rectangular remainders of earlier cuts, served to later cut placements with
guillotine splitting and saw kerf.
"""

import logging
import math
from typing import List, Optional, Tuple

from tile_models import Offcut, TakeResult, UsedOffcut


logger = logging.getLogger(__name__)


def _positive(value: float) -> float:
    """Clamp to a finite non-negative number."""
    try:
        x = float(value)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, x) if math.isfinite(x) else 0.0


def guillotine_remainders(container_w: float, container_h: float,
                          need_w: float, need_h: float,
                          kerf_cm: float = 0.0) -> List[Tuple[float, float]]:
    """
    Split a need from the corner of a container with two straight cuts.

    Returns up to two rectangles: the strip right of the need (full
    container height) and the strip below it (need width). A cut that
    leaves a remainder on an axis consumes the kerf on that axis.
    """
    w, h = _positive(container_w), _positive(container_h)
    nw, nh = _positive(need_w), _positive(need_h)
    k = _positive(kerf_cm)

    if not (w > 0 and h > 0 and nw > 0 and nh > 0):
        return []
    if nw > w or nh > h:
        return []

    remainders = []

    right_w = max(0.0, w - nw - (k if w > nw else 0.0))
    if right_w > 0:
        remainders.append((right_w, h))

    bottom_h = max(0.0, h - nh - (k if h > nh else 0.0))
    if bottom_h > 0:
        remainders.append((nw, bottom_h))

    return remainders


def fits_with_kerf(piece_w: float, piece_h: float, need_w: float, need_h: float,
                   kerf_cm: float = 0.0) -> bool:
    """
    Check whether a piece can supply a need.

    An axis matching exactly needs no cut; a strictly larger axis must
    leave room for the kerf.
    """
    pw, ph = _positive(piece_w), _positive(piece_h)
    nw, nh = _positive(need_w), _positive(need_h)
    k = _positive(kerf_cm)

    if not (pw > 0 and ph > 0 and nw > 0 and nh > 0):
        return False
    if pw < nw or (pw > nw and pw < nw + k):
        return False
    if ph < nh or (ph > nh and ph < nh + k):
        return False
    return True


class OffcutPool:
    """
    Multiset of reusable offcuts kept in insertion order.

    A pool lives for one allocation pass (one room, or a room group when
    offcuts are shared) and is mutated in place by ``take``.
    """

    def __init__(self):
        self.pieces: List[Offcut] = []
        self._seq = 0

    def _next_id(self) -> str:
        self._seq += 1
        return f"o{self._seq}"

    def add(self, width: float, height: float, origin_tag: str = "tile") -> Optional[str]:
        """Add a piece; returns its id, or None for non-positive dimensions."""
        w, h = _positive(width), _positive(height)
        if w <= 0 or h <= 0:
            return None
        piece = Offcut(id=self._next_id(), width=w, height=h, origin_tag=origin_tag)
        self.pieces.append(piece)
        return piece.id

    def take(self, need_w: float, need_h: float, allow_rotate: bool = True,
             optimize_cuts: bool = False, kerf_cm: float = 0.0) -> TakeResult:
        """
        Serve a need_w x need_h request from the pool.

        First fit in pool order, or best fit (least leftover area, earliest
        piece on ties) when ``optimize_cuts`` is set. The used piece is
        removed and its guillotine remainders go back into the pool.
        """
        w, h = _positive(need_w), _positive(need_h)
        k = _positive(kerf_cm)
        if w <= 0 or h <= 0:
            return TakeResult(ok=False)

        best = None  # (index, rotated, leftover)
        for index, piece in enumerate(self.pieces):
            orientations = [False, True] if allow_rotate else [False]
            for rotated in orientations:
                nw, nh = (h, w) if rotated else (w, h)
                if not fits_with_kerf(piece.width, piece.height, nw, nh, k):
                    continue
                leftover = piece.area - w * h
                if not optimize_cuts:
                    return self._consume(index, rotated, w, h, k)
                if best is None or leftover < best[2]:
                    best = (index, rotated, leftover)

        if best is None:
            return TakeResult(ok=False)
        return self._consume(best[0], best[1], w, h, k)

    def _consume(self, index: int, rotated: bool, need_w: float, need_h: float,
                 kerf_cm: float) -> TakeResult:
        chosen = self.pieces.pop(index)
        used_w, used_h = (need_h, need_w) if rotated else (need_w, need_h)

        remainders = []
        for rw, rh in guillotine_remainders(chosen.width, chosen.height, used_w, used_h, kerf_cm):
            new_id = self.add(rw, rh, origin_tag="offcut")
            if new_id:
                remainders.append(Offcut(id=new_id, width=rw, height=rh, origin_tag="offcut"))

        logger.debug(f"Offcut {chosen.id} ({chosen.width:.1f}x{chosen.height:.1f}) "
                     f"used for {need_w:.1f}x{need_h:.1f}, {len(remainders)} remainders")
        return TakeResult(
            ok=True,
            used=UsedOffcut(id=chosen.id, width=chosen.width, height=chosen.height,
                            rot_used=rotated, remainders=remainders),
        )

    def count(self) -> int:
        return len(self.pieces)

    def snapshot(self) -> List[Offcut]:
        """Ordered copy of the pool for inspection."""
        return [Offcut(p.id, p.width, p.height, p.origin_tag) for p in self.pieces]

    def clear(self):
        self.pieces.clear()

    def __len__(self) -> int:
        return len(self.pieces)
