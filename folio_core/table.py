"""
KeyedTable: fixed-capacity open-addressing hash table keyed by symbol.

Linear probing with tombstone deletion. Keys are case-insensitive: they are
uppercased once on the way in and only canonical keys are stored or compared.
Slot state is an explicit variant (Empty, Occupied, Deleted); a Deleted slot
never exposes the entry it used to hold.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

V = TypeVar("V")

TABLE_SIZE = 101

_HASH_BASE = 31
_HASH_MASK = 0xFFFFFFFFFFFFFFFF


def normalize_key(key: str) -> str:
    """Canonical form of a symbol key (uppercase)."""
    return key.upper()


def symbol_hash(key: str, capacity: int = TABLE_SIZE) -> int:
    """Polynomial hash of the canonical key, reduced to a slot index."""
    value = 0
    for byte in normalize_key(key).encode("utf-8"):
        value = (value * _HASH_BASE + byte) & _HASH_MASK
    return value % capacity


@dataclass(frozen=True)
class Empty:
    """Never used. Terminates a probe sequence."""


@dataclass(frozen=True)
class Deleted:
    """Tombstone. Probing continues through it; insertion may reuse it."""


@dataclass(frozen=True)
class Occupied(Generic[V]):
    """Live entry under a canonical key."""

    key: str
    value: V


EMPTY = Empty()
DELETED = Deleted()


@dataclass(frozen=True)
class SlotRef:
    """
    Result of a probe. found=True: index holds the key. found=False: index is
    where the key would be inserted, or None when the table is full.
    """

    index: int | None
    found: bool = False

    @property
    def is_full(self) -> bool:
        return self.index is None


class KeyedTable(Generic[V]):
    """
    Open-addressing table with linear probing over a fixed number of slots.
    No resizing: once every slot is Occupied, inserts of new keys fail until
    a delete frees a tombstone.
    """

    def __init__(self, capacity: int = TABLE_SIZE) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._slots: list[Empty | Deleted | Occupied[V]] = [EMPTY] * capacity
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        """Number of Occupied slots."""
        return self._count

    def slot(self, index: int) -> Empty | Deleted | Occupied[V]:
        return self._slots[index]

    def clear(self) -> None:
        """Reset every slot to Empty."""
        self._slots = [EMPTY] * self._capacity
        self._count = 0

    def find_slot(self, key: str) -> SlotRef:
        """
        Single traversal serving both lookup and insertion.

        Walks from the hash origin through Deleted slots looking for a match.
        Stops at the first Empty slot: the key is absent and the insertion
        point is the first tombstone seen, else that Empty slot. If all
        slots are visited without meeting an Empty one, the first tombstone
        seen is returned, else the table is full (index None).
        """
        canonical = normalize_key(key)
        origin = symbol_hash(canonical, self._capacity)
        first_deleted: int | None = None
        for step in range(self._capacity):
            current = (origin + step) % self._capacity
            state = self._slots[current]
            if isinstance(state, Empty):
                if first_deleted is not None:
                    return SlotRef(first_deleted)
                return SlotRef(current)
            if isinstance(state, Deleted):
                if first_deleted is None:
                    first_deleted = current
            elif state.key == canonical:
                return SlotRef(current, found=True)
        return SlotRef(first_deleted)

    def store(self, ref: SlotRef, key: str, value: V) -> None:
        """Write value at a slot previously resolved by find_slot."""
        if ref.index is None:
            raise ValueError("cannot store into a full table")
        if not ref.found:
            self._count += 1
        self._slots[ref.index] = Occupied(normalize_key(key), value)

    def tombstone(self, ref: SlotRef) -> None:
        """Mark a found slot Deleted."""
        if ref.index is None or not ref.found:
            raise ValueError("can only tombstone a slot holding a key")
        self._slots[ref.index] = DELETED
        self._count -= 1

    def upsert(self, key: str, value: V) -> SlotRef:
        """Insert or overwrite. Returns the probe result; nothing is written when full."""
        ref = self.find_slot(key)
        if not ref.is_full:
            self.store(ref, key, value)
        return ref

    def lookup_exact(self, key: str) -> V | None:
        ref = self.find_slot(key)
        if not ref.found:
            return None
        state = self._slots[ref.index]
        return state.value if isinstance(state, Occupied) else None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.find_slot(key).found

    def delete(self, key: str) -> bool:
        """Tombstone the key's slot. False if the key is not present."""
        ref = self.find_slot(key)
        if not ref.found:
            return False
        self.tombstone(ref)
        return True

    def items(self) -> Iterator[tuple[str, V]]:
        """Occupied (key, value) pairs in slot order 0..capacity-1."""
        for state in self._slots:
            if isinstance(state, Occupied):
                yield state.key, state.value

    def values(self) -> Iterator[V]:
        for _, value in self.items():
            yield value

    def for_each_occupied(self, visitor: Callable[[str, V], None]) -> None:
        """Call visitor(key, value) for every Occupied slot, in slot order."""
        for key, value in self.items():
            visitor(key, value)
