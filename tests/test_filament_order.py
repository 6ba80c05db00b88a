import pytest

from filament_errors import PreconditionError
from filament_order import (
    REF_DISTANCE_KEY,
    compare_ref_distance,
    compare_start,
    compare_stop,
    sorted_by_ref_distance,
    sorted_by_start,
    sorted_by_stop,
)


@pytest.fixture
def filaments(band, filament_factory):
    return [
        filament_factory(band(30, 90, 10, 2)),
        filament_factory(band(10, 50, 30, 2)),
        filament_factory(band(30, 70, 50, 2)),
        filament_factory(band(0, 90, 70, 2)),
    ]


def test_compare_start_and_stop(filaments):
    f0, f1, f2, f3 = filaments

    assert compare_start(f1, f0) == -1
    assert compare_start(f0, f2) == 0
    assert compare_start(f0, f3) == 1
    assert compare_stop(f1, f2) == -1
    assert compare_stop(f0, f3) == 0


def test_sorted_by_start_is_stable(filaments):
    f0, f1, f2, f3 = filaments

    assert sorted_by_start(filaments) == [f3, f1, f0, f2]
    assert sorted_by_start([f2, f0]) == [f2, f0]


def test_sorted_by_stop_is_stable(filaments):
    f0, f1, f2, f3 = filaments

    assert sorted_by_stop(filaments) == [f1, f2, f0, f3]


def test_sorted_by_ref_distance(filaments):
    f0, f1, f2, f3 = filaments
    for filament, distance in zip(filaments, (5, -2, 5, 0.5)):
        filament.set_ref_distance(distance)

    assert sorted_by_ref_distance(filaments) == [f1, f3, f0, f2]
    assert compare_ref_distance(f0, f2) == 0
    assert min(filaments, key=REF_DISTANCE_KEY) is f1


def test_unset_ref_distance_is_a_precondition_error(filaments):
    f0, f1, f2, f3 = filaments
    f0.set_ref_distance(1)

    with pytest.raises(PreconditionError):
        compare_ref_distance(f0, f1)
    with pytest.raises(PreconditionError, match=repr(f1)):
        sorted_by_ref_distance(filaments)
