from dataclasses import dataclass
import enum
from typing import Any, Iterator, Protocol


class SlotState(enum.IntEnum):
    EMPTY = 0
    ACTIVE = 1
    TOMBSTONE = 2


@dataclass
class Slot:
    """A cell updated in place. `hash` and `key` mean something only when ACTIVE."""

    state: SlotState = SlotState.EMPTY
    hash: int = 0
    key: Any = None


@dataclass(frozen=True)
class FrozenSlot:
    state: SlotState
    hash: int = 0
    key: Any = None


EMPTY_SLOT = FrozenSlot(SlotState.EMPTY)
TOMBSTONE_SLOT = FrozenSlot(SlotState.TOMBSTONE)


class SlotView(Protocol):
    state: SlotState
    hash: int
    key: Any


class SlotStorage(Protocol):
    def __len__(self) -> int:
        ...

    def __getitem__(self, index: int) -> SlotView:
        ...

    def __iter__(self) -> Iterator[SlotView]:
        ...

    def set_active(self, index: int, key: Any, key_hash: int):
        ...

    def set_tombstone(self, index: int):
        ...


class MutableSlots:
    def __init__(self, capacity: int) -> None:
        self.slots = [Slot() for _ in range(capacity)]

    def __len__(self) -> int:
        return len(self.slots)

    def __getitem__(self, index: int) -> Slot:
        return self.slots[index]

    def __iter__(self) -> Iterator[Slot]:
        return iter(self.slots)

    def set_active(self, index: int, key: Any, key_hash: int):
        slot = self.slots[index]
        slot.state = SlotState.ACTIVE
        slot.hash = key_hash
        slot.key = key

    def set_tombstone(self, index: int):
        slot = self.slots[index]
        slot.state = SlotState.TOMBSTONE
        slot.hash = 0
        slot.key = None


class ReplaceSlots:
    def __init__(self, capacity: int) -> None:
        self.slots = [EMPTY_SLOT] * capacity

    def __len__(self) -> int:
        return len(self.slots)

    def __getitem__(self, index: int) -> FrozenSlot:
        return self.slots[index]

    def __iter__(self) -> Iterator[FrozenSlot]:
        return iter(self.slots)

    def set_active(self, index: int, key: Any, key_hash: int):
        self.slots[index] = FrozenSlot(SlotState.ACTIVE, key_hash, key)

    def set_tombstone(self, index: int):
        self.slots[index] = TOMBSTONE_SLOT


StorageFactory = type[MutableSlots] | type[ReplaceSlots]

STORAGE_POLICIES: dict[str, StorageFactory] = {
    "mutable": MutableSlots,
    "replace": ReplaceSlots,
}
