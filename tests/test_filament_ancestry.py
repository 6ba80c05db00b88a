import pytest

from filament_ancestry import FilamentArena
from filament_errors import PreconditionError, SelfIncludeError


def make_arena(count, compress=True):
    arena = FilamentArena(compress=compress)
    for i in range(count):
        assert arena.register(f"f{i}") == i
    return arena


def test_new_entries_are_representatives():
    arena = make_arena(3)

    assert len(arena) == 3
    assert arena[1] == "f1"
    assert list(arena) == ["f0", "f1", "f2"]
    assert arena.representatives() == ["f0", "f1", "f2"]
    assert all(arena.find(i) == i for i in range(3))


@pytest.mark.parametrize("compress", [True, False])
def test_find_follows_chain(compress):
    arena = make_arena(5, compress=compress)
    arena.link(4, 3)
    arena.link(3, 2)
    arena.link(2, 1)

    assert arena.find(4) == 1
    assert arena.lineage(4) == [4, 3, 2, 1]
    assert arena.representatives() == ["f0", "f1"]


def test_compression_keeps_true_lineage():
    arena = make_arena(4)
    arena.link(3, 2)
    arena.link(2, 1)
    arena.link(1, 0)

    assert arena.find(3) == 0
    assert arena._shortcuts[3] == 0

    assert arena.parent_of(3) == 2
    assert arena.lineage(3) == [3, 2, 1, 0]
    assert arena.absorbed(1) == [2]


def test_link_refuses_self_and_reversed_link():
    arena = make_arena(3)

    with pytest.raises(SelfIncludeError):
        arena.link(1, 1)

    arena.link(1, 0)
    with pytest.raises(PreconditionError, match="cannot absorb"):
        arena.link(0, 1)
    assert arena.lineage(1) == [1, 0]
    assert arena.is_representative(0)


def test_link_refuses_dead_participants():
    arena = make_arena(3)
    arena.link(1, 0)

    with pytest.raises(PreconditionError, match="already absorbed"):
        arena.link(1, 2)
    with pytest.raises(PreconditionError, match="cannot absorb"):
        arena.link(2, 1)

    assert arena.is_representative(2)
