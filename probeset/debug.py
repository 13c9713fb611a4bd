from typing import Any

from .errors import InvariantViolation
from .probe import probe_sequence
from .shared import printf
from .slot import SlotState
from .table import Table


def dump_table(table: Table, name: str):
    printf("== {0:s} ==\n", name)
    printf("capacity={0:d} used={1:d} fill={2:d}\n", table.capacity, table.used, table.fill)

    for index, state, key_hash, key in table.slots():
        dump_slot(index, state, key_hash, key)


def dump_slot(index: int, state: SlotState, key_hash: int, key: Any):
    printf("{0:04d} ", index)
    match state:
        case SlotState.ACTIVE:
            printf("ACTIVE    hash={0:016x} key={1!r}\n", key_hash, key)
        case SlotState.TOMBSTONE:
            printf("TOMBSTONE\n")
        case SlotState.EMPTY:
            printf("EMPTY\n")
        case _:
            raise InvariantViolation("slot in unknown state", index, state)


def trace_probe(table: Table, key: Any) -> list[int]:
    """
    Print and return the slots a membership test for `key` visits, up to and
    including the one it stops at.
    """
    key_hash = table.key_hash(key)
    home = table.slot_of(key)
    visited = []
    for i in probe_sequence(key_hash, table.mask):
        visited.append(i)
        if i == home or table.slot_state(i) == SlotState.EMPTY:
            break

    printf("probe {0!r} hash={1:016x}:", key, key_hash)
    for i in visited:
        printf(" {0:d}", i)
    printf("\n")
    return visited
