# tests/services/test_leveling.py
"""Tests for the logarithmic leveling curve."""

import pytest

from level_forum.services.leveling import MAX_EXPERIENCE, LevelCurve


@pytest.fixture()
def curve() -> LevelCurve:
    return LevelCurve(base=2.0, scale=100.0)


def test_thresholds(curve: LevelCurve) -> None:
    assert curve.exp_for_level(0) == 0
    assert curve.exp_for_level(1) == 100
    assert curve.exp_for_level(2) == 300
    assert curve.exp_for_level(3) == 700


def test_level_boundaries(curve: LevelCurve) -> None:
    assert curve.level(0) == 0
    assert curve.level(-50) == 0
    assert curve.level(99) == 0
    assert curve.level(100) == 1
    assert curve.level(299) == 1
    assert curve.level(300) == 2


@pytest.mark.parametrize("level", range(0, 51))
def test_threshold_maps_back_to_its_level(curve: LevelCurve, level: int) -> None:
    assert curve.level(curve.exp_for_level(level)) == level


def test_exact_powers_survive_float_logarithm() -> None:
    # log(1000, 10) evaluates to 2.9999999999999996
    curve = LevelCurve(base=10.0, scale=1.0)
    assert curve.exp_for_level(3) == 999
    assert curve.level(999) == 3
    assert curve.level(998) == 2


def test_progress(curve: LevelCurve) -> None:
    assert curve.progress_to_next(0) == 0.0
    assert curve.progress_to_next(100) == 0.0
    assert curve.progress_to_next(200) == pytest.approx(0.5)
    for experience in (1, 57, 299, 12345, 10**9):
        assert 0.0 <= curve.progress_to_next(experience) <= 1.0


def test_huge_levels_saturate(curve: LevelCurve) -> None:
    assert curve.exp_for_level(1100) == MAX_EXPERIENCE
    assert curve.exp_for_level(10**6) == MAX_EXPERIENCE
    assert curve.exp_for_level(63) == MAX_EXPERIENCE


def test_huge_experience_stays_finite(curve: LevelCurve) -> None:
    top = curve.level(MAX_EXPERIENCE)
    assert curve.exp_for_level(top) < MAX_EXPERIENCE
    assert curve.level(10**30) == top
    assert curve.level(MAX_EXPERIENCE - 1) == top
    assert curve.progress_to_next(10**30) == 1.0
    assert 0.0 <= curve.progress_to_next(MAX_EXPERIENCE) <= 1.0

def test_rejects_degenerate_curves() -> None:
    with pytest.raises(ValueError):
        LevelCurve(base=1.0)
    with pytest.raises(ValueError):
        LevelCurve(scale=0)
