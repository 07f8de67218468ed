"""
Test Offcut Pool
================
Guillotine splitting, kerf handling and first/best fit selection.
"""

import pytest

from offcut_pool import OffcutPool, fits_with_kerf, guillotine_remainders


def test_take_with_kerf_leaves_two_remainders():
    pool = OffcutPool()
    assert pool.add(60, 60) == "o1"

    result = pool.take(30, 30, kerf_cm=2)

    assert result.ok
    assert result.used.id == "o1"
    assert not result.used.rot_used
    dims = [(r.width, r.height) for r in result.used.remainders]
    assert dims == [(28, 60), (30, 28)]
    assert pool.count() == 2
    assert [(p.width, p.height, p.origin_tag) for p in pool.snapshot()] == [
        (28, 60, "offcut"), (30, 28, "offcut")
    ]


def test_rejects_non_positive_dimensions():
    pool = OffcutPool()
    assert pool.add(0, 10) is None
    assert pool.add(10, -1) is None
    assert pool.count() == 0

    pool.add(50, 50)
    assert not pool.take(0, 10).ok
    assert not pool.take(10, -5).ok
    assert pool.take(-1, -1).used is None
    assert pool.count() == 1


def test_first_fit_uses_pool_order():
    pool = OffcutPool()
    pool.add(50, 50)
    pool.add(40, 40)

    result = pool.take(35, 35)

    assert result.used.id == "o1"


def test_best_fit_picks_least_leftover():
    pool = OffcutPool()
    pool.add(50, 50)
    pool.add(40, 40)

    result = pool.take(35, 35, optimize_cuts=True)

    assert result.used.id == "o2"


def test_best_fit_ties_keep_pool_order():
    pool = OffcutPool()
    pool.add(40, 40)
    pool.add(40, 40)

    assert pool.take(20, 20, optimize_cuts=True).used.id == "o1"


def test_rotation_is_optional():
    pool = OffcutPool()
    pool.add(20, 60)

    assert not pool.take(60, 20, allow_rotate=False).ok

    result = pool.take(60, 20, allow_rotate=True)
    assert result.ok
    assert result.used.rot_used
    assert result.used.remainders == []
    assert pool.count() == 0


def test_nothing_fits():
    pool = OffcutPool()
    pool.add(10, 10)
    result = pool.take(20, 5, allow_rotate=True)
    assert not result.ok
    assert result.used is None
    assert pool.count() == 1


def test_fits_with_kerf():
    # Exact match needs no cut
    assert fits_with_kerf(30, 30, 30, 30, kerf_cm=3)
    # Larger, but not by the kerf
    assert not fits_with_kerf(32, 30, 30, 30, kerf_cm=3)
    assert fits_with_kerf(33, 30, 30, 30, kerf_cm=3)
    assert not fits_with_kerf(29, 30, 30, 30)
    assert not fits_with_kerf(30, 30, 0, 30)


def test_guillotine_remainders():
    assert guillotine_remainders(60, 60, 60, 60, 2) == []
    assert guillotine_remainders(60, 40, 20, 40) == [(40, 40)]
    assert guillotine_remainders(60, 40, 60, 10) == [(60, 30)]
    assert guillotine_remainders(30, 30, 40, 10) == []
    assert guillotine_remainders(60, 60, 59, 59, 2) == []


def test_clear_and_len():
    pool = OffcutPool()
    pool.add(10, 10)
    pool.add(20, 20)
    assert len(pool) == 2
    pool.clear()
    assert pool.count() == 0
    # Ids keep counting after a clear
    assert pool.add(5, 5) == "o3"


def test_remainders_are_reusable():
    pool = OffcutPool()
    pool.add(60, 60)
    pool.take(30, 30, kerf_cm=2)

    result = pool.take(28, 60)
    assert result.ok
    assert result.used.width == pytest.approx(28)
    assert pool.count() == 1
