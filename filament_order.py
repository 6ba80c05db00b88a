"""
Total orders over filament collections, used to scan filaments deterministically.

Each comparison is a plain signed comparison with no secondary key; sorting
helpers rely on the stability of sorted() so that equal keys keep their
input order.
"""

from functools import cmp_to_key

from filament_errors import PreconditionError


def _sign(value):
    return (value > 0) - (value < 0)


def compare_start(f1, f2):
    """Compare filaments on their starting coordinate"""
    return _sign(f1.start_coord - f2.start_coord)


def compare_stop(f1, f2):
    """Compare filaments on their stopping coordinate"""
    return _sign(f1.stop_coord - f2.stop_coord)


def compare_ref_distance(f1, f2):
    """Compare filaments on distance from reference axis.

    Both filaments must have a reference distance set.
    """
    for filament in (f1, f2):
        if filament.ref_distance is None:
            raise PreconditionError(f"{filament!r} has no reference distance")
    return _sign(f1.ref_distance - f2.ref_distance)


START_KEY = cmp_to_key(compare_start)
STOP_KEY = cmp_to_key(compare_stop)
REF_DISTANCE_KEY = cmp_to_key(compare_ref_distance)


def sorted_by_start(filaments):
    return sorted(filaments, key=START_KEY)


def sorted_by_stop(filaments):
    return sorted(filaments, key=STOP_KEY)


def sorted_by_ref_distance(filaments):
    """Sort filaments on distance from reference axis.

    Args:
        filaments (iterable): Filaments, all with a reference distance

    Returns:
        list: Filaments by increasing distance, ties left in input order
    """
    filaments = list(filaments)
    for filament in filaments:
        if filament.ref_distance is None:
            raise PreconditionError(f"{filament!r} has no reference distance")
    return sorted(filaments, key=REF_DISTANCE_KEY)
