from collections.abc import Hashable, Iterable, Iterator, MutableSet, Set
from typing import Callable, Self, TypeVar

from .errors import EmptyCollection, NotFound
from .slot import MutableSlots, StorageFactory
from .table import DEFAULT_GROWTH, GrowthPolicy, Table

T = TypeVar("T", bound=Hashable)


class HashSet(MutableSet[T]):
    def __init__(
        self,
        iterable: Iterable[T] = (),
        *,
        capacity: int | None = None,
        storage: StorageFactory = MutableSlots,
        growth: GrowthPolicy = DEFAULT_GROWTH,
    ) -> None:
        self._capacity = capacity
        self._storage = storage
        self._growth = growth
        self._table = self._new_table()
        for key in iterable:
            self.add(key)

    def _new_table(self) -> Table:
        return Table(self._capacity, storage=self._storage, growth=self._growth)

    def _new(self, iterable: Iterable[T] = ()) -> Self:
        return type(self)(
            iterable,
            capacity=self._capacity,
            storage=self._storage,
            growth=self._growth,
        )

    @property
    def table(self) -> Table:
        return self._table

    def __contains__(self, key: object) -> bool:
        return self._table.contains(key)

    def __iter__(self) -> Iterator[T]:
        return self._table.iterate()

    def __len__(self) -> int:
        return len(self._table)

    def is_empty(self) -> bool:
        return len(self) == 0

    def add(self, key: T) -> bool:
        return self._table.add(key)

    def discard(self, key: T) -> bool:
        return self._table.discard(key)

    def remove(self, key: T):
        if not self.discard(key):
            raise NotFound(key)

    def pop(self) -> T:
        try:
            key = next(iter(self))
        except StopIteration:
            raise EmptyCollection() from None
        self.discard(key)
        return key

    def clear(self):
        self._table = self._new_table()

    def copy(self) -> Self:
        return self._new(self)

    def filter_inplace(self, predicate: Callable[[T], bool]) -> Self:
        for key in [key for key in self if not predicate(key)]:
            self.discard(key)
        return self

    def union(self, other: Iterable[T]) -> Self:
        result = self._new(self)
        for key in other:
            result.add(key)
        return result

    def intersection(self, other: Iterable[T]) -> Self:
        members = other if isinstance(other, Set) else self._new(other)
        return self._new(key for key in self if key in members)

    def difference(self, other: Iterable[T]) -> Self:
        members = other if isinstance(other, Set) else self._new(other)
        return self._new(key for key in self if key not in members)

    def __or__(self, other):
        if not isinstance(other, Iterable):
            return NotImplemented
        return self.union(other)

    def __and__(self, other):
        if not isinstance(other, Iterable):
            return NotImplemented
        return self.intersection(other)

    def __sub__(self, other):
        if not isinstance(other, Iterable):
            return NotImplemented
        return self.difference(other)

    def __eq__(self, other):
        if not isinstance(other, Set):
            return NotImplemented
        return len(self) == len(other) and all(key in other for key in self)

    def __hash__(self) -> int:
        return hash(frozenset(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}([{', '.join(repr(key) for key in self)}])"


class StableSet(HashSet[T]):
    """
    A HashSet that iterates in insertion order.

    Membership is still answered by the table. The arrival order is kept in a
    plain list, so removing an element costs O(n).
    """

    def __init__(self, iterable: Iterable[T] = (), **kwargs) -> None:
        self._order: list[T] = []
        super().__init__(iterable, **kwargs)

    def __iter__(self) -> Iterator[T]:
        return iter(self._order)

    def add(self, key: T) -> bool:
        if not super().add(key):
            return False
        self._order.append(key)
        return True

    def discard(self, key: T) -> bool:
        if not super().discard(key):
            return False
        self._order.remove(key)
        return True

    def clear(self):
        super().clear()
        self._order.clear()
