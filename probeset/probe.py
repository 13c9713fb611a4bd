"""
Probe sequence of CPython's set object.

Candidate slots are visited in the order produced by the recurrence
`i = (5*i + 1 + perturb) & mask`. For the first LINEAR_PROBES steps `perturb`
is the full hash; afterwards it is shifted right by PERTURB_SHIFT before every
step, so the high bits of the hash take part in the search. Once `perturb`
reaches zero the recurrence visits every index of a power-of-two table.
"""
from typing import Any, Callable, Iterator

from .errors import InvariantViolation
from .shared import HASH_MASK
from .slot import SlotState, SlotStorage, SlotView

# steps taken with an unshifted perturb before the shifting phase starts
LINEAR_PROBES = 9
# bits dropped from perturb per step in the shifting phase
PERTURB_SHIFT = 5

HashFn = Callable[[Any], int]


def default_hash(key: Any) -> int:
    # reduce to an unsigned 64-bit value; negative hashes would never decay
    return hash(key) & HASH_MASK


def probe_sequence(key_hash: int, mask: int) -> Iterator[int]:
    i = key_hash & mask
    yield i

    perturb = key_hash
    for _ in range(LINEAR_PROBES):
        i = (5 * i + 1 + perturb) & mask
        yield i

    while True:
        perturb >>= PERTURB_SHIFT
        i = (5 * i + 1 + perturb) & mask
        yield i


def keys_match(slot: SlotView, key: Any, key_hash: int) -> bool:
    return slot.hash == key_hash and (slot.key is key or slot.key == key)


def lookkey(slots: SlotStorage, mask: int, key: Any, key_hash: int) -> int:
    for i in probe_sequence(key_hash, mask):
        slot = slots[i]
        match slot.state:
            case SlotState.EMPTY:
                return i
            case SlotState.ACTIVE:
                if keys_match(slot, key, key_hash):
                    return i
            case SlotState.TOMBSTONE:
                pass
            case _:
                raise InvariantViolation("slot in unknown state", i, slot.state)

    raise InvariantViolation("probe sequence ended", key_hash, mask)


def lookkey_for_insert(slots: SlotStorage, mask: int, key: Any, key_hash: int) -> int:
    """
    Index where `key` lives or should be written.

    The first TOMBSTONE on the chain is remembered and handed back only once
    an EMPTY slot proves `key` is absent, so a live copy of `key` further
    down the chain is still found and never duplicated.
    """
    freeslot = None
    for i in probe_sequence(key_hash, mask):
        slot = slots[i]
        match slot.state:
            case SlotState.EMPTY:
                return i if freeslot is None else freeslot
            case SlotState.TOMBSTONE:
                if freeslot is None:
                    freeslot = i
            case SlotState.ACTIVE:
                if keys_match(slot, key, key_hash):
                    return i
            case _:
                raise InvariantViolation("slot in unknown state", i, slot.state)

    raise InvariantViolation("probe sequence ended", key_hash, mask)
