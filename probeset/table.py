"""
Open-addressing hash table holding keys only, laid out like CPython's set.

A Table owns its slot storage. Deleted keys leave TOMBSTONE slots behind so
probe chains passing through them stay intact; `fill` counts those along with
the ACTIVE slots and drives resizing once it reaches 2/3 of the capacity.

Iteration walks the slots in index order. Adding or discarding keys while an
iteration over the same table is running is not supported: a resize swaps
the storage out and the iterator keeps reading the old one.
"""
from dataclasses import dataclass
import sys
from typing import Any, Iterator

from .errors import InvariantViolation, NotFound
from .probe import HashFn, default_hash, lookkey, lookkey_for_insert
from .shared import HASH_MASK, is_power_of_two, printf
from .slot import MutableSlots, SlotState, StorageFactory

MIN_CAPACITY = 8


_debug_trace_resize = False


def set_debug_trace_resize(b: bool):
    global _debug_trace_resize
    _debug_trace_resize = b


@dataclass(frozen=True)
class GrowthPolicy:
    threshold: int = 50000
    small_factor: int = 4
    large_factor: int = 2

    def __post_init__(self):
        if self.threshold < 0:
            raise ValueError("growth threshold must not be negative", self.threshold)
        if self.small_factor < 2 or self.large_factor < 2:
            raise ValueError(
                "growth factors must be at least 2", self.small_factor, self.large_factor
            )

    def target(self, used: int) -> int:
        if used <= self.threshold:
            return used * self.small_factor
        return used * self.large_factor


DEFAULT_GROWTH = GrowthPolicy()


def round_capacity(capacity: int) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise TypeError("capacity must be an int", capacity)

    size = MIN_CAPACITY
    while size < capacity:
        size <<= 1
    return size


class Table:
    def __init__(
        self,
        capacity: int | None = None,
        *,
        storage: StorageFactory = MutableSlots,
        growth: GrowthPolicy = DEFAULT_GROWTH,
        hash_fn: HashFn = default_hash,
    ) -> None:
        size = MIN_CAPACITY if capacity is None else round_capacity(capacity)
        self.storage = storage
        self.growth = growth
        self.hash_fn = hash_fn

        self._slots = storage(size)
        self._mask = size - 1
        self._used = 0
        self._fill = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def mask(self) -> int:
        return self._mask

    @property
    def used(self) -> int:
        return self._used

    @property
    def fill(self) -> int:
        return self._fill

    def __len__(self) -> int:
        return self._used

    def __contains__(self, key: Any) -> bool:
        return self.contains(key)

    def __iter__(self) -> Iterator[Any]:
        return self.iterate()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(used={self._used}, capacity={self.capacity})"

    def is_empty(self) -> bool:
        return self._used == 0

    def key_hash(self, key: Any) -> int:
        return self.hash_fn(key) & HASH_MASK

    def contains(self, key: Any) -> bool:
        i = lookkey(self._slots, self._mask, key, self.key_hash(key))
        return self._slots[i].state == SlotState.ACTIVE

    def add(self, key: Any) -> bool:
        return self._insert(key, self.key_hash(key))

    def discard(self, key: Any) -> bool:
        i = lookkey(self._slots, self._mask, key, self.key_hash(key))
        if self._slots[i].state != SlotState.ACTIVE:
            return False

        # fill is left alone: the tombstone still occupies the slot
        self._slots.set_tombstone(i)
        self._used -= 1
        return True

    def remove(self, key: Any):
        if not self.discard(key):
            raise NotFound(key)

    def iterate(self) -> Iterator[Any]:
        for slot in self._slots:
            if slot.state == SlotState.ACTIVE:
                yield slot.key

    def slot_state(self, index: int) -> SlotState:
        return self._slots[index].state

    def slot_of(self, key: Any) -> int | None:
        i = lookkey(self._slots, self._mask, key, self.key_hash(key))
        if self._slots[i].state != SlotState.ACTIVE:
            return None
        return i

    def slots(self) -> Iterator[tuple[int, SlotState, int, Any]]:
        for i, slot in enumerate(self._slots):
            yield i, slot.state, slot.hash, slot.key

    def check_invariants(self):
        active = 0
        tombstones = 0
        for i, slot in enumerate(self._slots):
            match slot.state:
                case SlotState.ACTIVE:
                    active += 1
                case SlotState.TOMBSTONE:
                    tombstones += 1
                case SlotState.EMPTY:
                    pass
                case _:
                    raise InvariantViolation("slot in unknown state", i, slot.state)

        size = len(self._slots)
        if not is_power_of_two(size) or size < MIN_CAPACITY or self._mask != size - 1:
            raise InvariantViolation("bad capacity", size, self._mask)
        if active != self._used or active + tombstones != self._fill:
            raise InvariantViolation(
                "counts out of sync", self._used, self._fill, active, tombstones
            )
        if self._fill * 3 >= size * 2:
            raise InvariantViolation("load factor exceeded", self._fill, size)

    def _insert(self, key: Any, key_hash: int) -> bool:
        i = lookkey_for_insert(self._slots, self._mask, key, key_hash)
        match self._slots[i].state:
            case SlotState.ACTIVE:
                return False
            case SlotState.EMPTY:
                self._fill += 1
            case SlotState.TOMBSTONE:
                pass
            case state:
                raise InvariantViolation("slot in unknown state", i, state)

        self._slots.set_active(i, key, key_hash)
        self._used += 1

        if self._fill * 3 >= len(self._slots) * 2:
            self._resize(self.growth.target(self._used))
        return True

    def _resize(self, minused: int):
        size = MIN_CAPACITY
        while size <= minused:
            size <<= 1
        if size > sys.maxsize:
            raise InvariantViolation("table capacity overflow", minused)

        old = self._slots
        if _debug_trace_resize:
            printf(
                "resize {0:d} -> {1:d} (used={2:d}, fill={3:d})\n",
                len(old),
                size,
                self._used,
                self._fill,
            )

        self._slots = self.storage(size)
        self._mask = size - 1
        self._used = 0
        self._fill = 0

        for slot in old:
            if slot.state == SlotState.ACTIVE:
                self._insert(slot.key, slot.hash)
