import random
import sys

import pytest

from probeset.errors import InvariantViolation, NotFound
from probeset.shared import HASH_MASK
from probeset.slot import MutableSlots, ReplaceSlots, SlotState
from probeset.table import DEFAULT_GROWTH, GrowthPolicy, Table

STORAGES = [MutableSlots, ReplaceSlots]


def collide(key) -> int:
    return 0


@pytest.mark.parametrize("storage", STORAGES)
def test_table(storage):
    t = Table(storage=storage)
    n = 10

    for i in range(n):
        # should be absent before insertion
        assert not t.contains(str(i))

    for i in range(n):
        # should return true if adding a non-existent key
        assert t.add(str(i))

    for i in range(n):
        # should return false if adding an existing key
        assert not t.add(str(i))

    for i in range(n):
        # should be present after insertion
        assert str(i) in t

    assert len(t) == n

    for i in range(n):
        # should return true if discarding an existing key
        assert t.discard(str(i))

    for i in range(n):
        # should return false if discarding a non-existent key
        assert not t.discard(str(i))

    for i in range(n):
        # should be absent after discarding
        assert not t.contains(str(i))

    assert len(t) == 0
    assert t.is_empty()
    t.check_invariants()


@pytest.mark.parametrize("storage", STORAGES)
def test_end_to_end(storage):
    t = Table(storage=storage)
    assert t.capacity == 8

    assert t.add(42)
    assert len(t) == 1
    assert not t.add(42)
    assert len(t) == 1

    for key in [1, 2, 3]:
        t.add(key)
    assert len(t) == 4

    assert t.discard(3)
    assert len(t) == 3
    assert not t.contains(3)

    with pytest.raises(NotFound):
        t.remove(99)

    t = Table(storage=storage)
    for key in range(1, 21):
        t.add(key)
    assert len(t) == 20
    assert t.capacity > 8
    for key in range(1, 21):
        assert t.contains(key)


def test_construction():
    t = Table()
    assert t.capacity == 8
    assert t.mask == 7
    assert t.used == 0
    assert t.fill == 0

    assert Table(16).capacity == 16
    assert Table(9).capacity == 16
    assert Table(100).capacity == 128
    assert Table(0).capacity == 8
    assert Table(-5).capacity == 8
    assert Table(16).mask == 15

    with pytest.raises(TypeError):
        Table(1.5)
    with pytest.raises(TypeError):
        Table(True)


def test_repr():
    t = Table()
    t.add("x")
    assert repr(t) == "Table(used=1, capacity=8)"


@pytest.mark.parametrize("storage", STORAGES)
def test_resize_keeps_load_factor(storage):
    t = Table(storage=storage)
    for key in range(1, 21):
        assert t.add(key)
        assert t.fill * 3 < t.capacity * 2
        assert 0 <= t.used <= t.fill <= t.capacity
        t.check_invariants()

    # 6 keys fill 2/3 of 8 slots, regrown to hold 6 * 4
    assert t.capacity == 32
    for key in range(1, 21):
        assert key in t


@pytest.mark.parametrize("storage", STORAGES)
def test_resize_preserves_many_keys(storage):
    t = Table(storage=storage)
    n = 5000
    for key in range(n):
        t.add(f"key-{key}")

    assert len(t) == n
    for key in range(n):
        assert t.contains(f"key-{key}")
    t.check_invariants()


def test_resize_drops_tombstones():
    t = Table()
    for key in range(1, 6):
        t.add(key)
    t.discard(1)
    t.discard(2)
    assert t.fill == 5
    assert t.used == 3

    t.add(6)
    # fill 6 reached 2/3: the rebuilt table only carries live keys
    assert t.capacity == 32
    assert t.fill == t.used == 4
    assert sorted(t) == [3, 4, 5, 6]
    assert all(state != SlotState.TOMBSTONE for _, state, _, _ in t.slots())


def test_growth_policy():
    assert DEFAULT_GROWTH.target(10) == 40
    assert DEFAULT_GROWTH.target(50000) == 200000
    assert DEFAULT_GROWTH.target(50001) == 100002

    t = Table(growth=GrowthPolicy(threshold=4))
    for key in range(1, 7):
        t.add(key)
    assert t.capacity == 16

    with pytest.raises(ValueError):
        GrowthPolicy(small_factor=1)
    with pytest.raises(ValueError):
        GrowthPolicy(threshold=-1)


@pytest.mark.parametrize("storage", STORAGES)
def test_tombstone_reuse(storage):
    t = Table(storage=storage, hash_fn=collide)
    t.add("a")
    t.add("b")
    assert t.slot_of("a") == 0
    assert t.slot_of("b") == 1

    assert t.discard("a")
    assert t.slot_state(0) == SlotState.TOMBSTONE
    assert t.used == 1
    assert t.fill == 2

    assert t.add("c")
    assert t.slot_of("c") == 0
    assert t.used == 2
    assert t.fill == 2
    assert not t.contains("a")
    assert t.slot_of("a") is None


@pytest.mark.parametrize("storage", STORAGES)
def test_no_duplicate_behind_tombstone(storage):
    t = Table(storage=storage, hash_fn=collide)
    t.add("a")
    t.add("b")
    t.discard("a")

    assert not t.add("b")
    assert len(t) == 1
    assert list(t) == ["b"]
    t.check_invariants()


@pytest.mark.parametrize("storage", STORAGES)
def test_discard_keeps_chain_reachable(storage):
    t = Table(storage=storage, hash_fn=collide)
    for key in "abcd":
        t.add(key)

    t.discard("b")
    assert t.contains("c")
    assert t.contains("d")
    assert t.fill == 4
    assert t.used == 3


def test_remove():
    t = Table()
    t.add(1)
    t.remove(1)
    assert not t.contains(1)

    with pytest.raises(NotFound) as exc_info:
        t.remove(99)
    assert exc_info.value.key == 99
    assert isinstance(exc_info.value, KeyError)

    # discard reports the same absence without raising
    assert not t.discard(99)


def test_iteration_follows_slots():
    t = Table()
    for key in [5, 3, 1]:
        t.add(key)
    assert list(t.iterate()) == [1, 3, 5]

    t = Table()
    for key in range(20, 0, -1):
        t.add(key)
    assert list(t) == list(range(1, 21))


def test_iteration_depends_on_history():
    a = Table()
    a.add(0)
    a.add(8)
    b = Table()
    b.add(8)
    b.add(0)

    assert list(a) == [0, 8]
    assert list(b) == [8, 0]


@pytest.mark.parametrize("storage", STORAGES)
def test_deterministic_replay(storage):
    keys = [1, 5, 3, 7, 2, 8, 4, 6, 16, 24, "x", "y", (1, 2)]
    t1 = Table(storage=storage)
    t2 = Table(storage=storage)
    for key in keys:
        t1.add(key)
        t2.add(key)

    assert list(t1) == list(t2)
    assert list(t1.iterate()) == list(t1.iterate())


def test_iterate_restarts():
    t = Table()
    for key in range(5):
        t.add(key)

    it1 = t.iterate()
    next(it1)
    it2 = t.iterate()
    assert list(it2) == [0, 1, 2, 3, 4]
    assert list(it1) == [1, 2, 3, 4]

    t = Table()
    assert list(t) == []


def test_empty_after_discards():
    t = Table()
    for key in [1, 2, 3]:
        t.add(key)
    for key in [1, 2, 3]:
        t.discard(key)

    assert t.is_empty()
    assert t.used == 0
    assert t.fill == 3
    assert list(t) == []


def test_negative_hashes():
    t = Table(hash_fn=lambda key: -1 - key)
    for key in range(30):
        t.add(key)
    for key in range(30):
        assert key in t
    assert t.key_hash(0) == HASH_MASK


def test_identity_implies_equality():
    nan = float("nan")
    t = Table()
    assert t.add(nan)
    assert nan in t
    assert not t.add(nan)
    assert len(t) == 1


def test_unhashable_key():
    t = Table()
    with pytest.raises(TypeError):
        t.add([1, 2])


def test_capacity_overflow():
    t = Table()
    with pytest.raises(InvariantViolation):
        t._resize(sys.maxsize)


def test_check_invariants_detects_bad_counts():
    t = Table()
    t.add(1)
    t._used = 2
    with pytest.raises(InvariantViolation):
        t.check_invariants()


def test_storages_agree_with_builtin_set():
    rng = random.Random(1234)
    ops = [(rng.random() < 0.6, rng.randrange(300)) for _ in range(3000)]

    tables = [Table(storage=storage) for storage in STORAGES]
    model = set()
    for is_add, key in ops:
        if is_add:
            expected = key not in model
            model.add(key)
            for t in tables:
                assert t.add(key) == expected
        else:
            expected = key in model
            model.discard(key)
            for t in tables:
                assert t.discard(key) == expected

        for t in tables:
            assert len(t) == len(model)
    for t in tables:
        t.check_invariants()
        assert set(t) == model

    assert list(tables[0]) == list(tables[1])
