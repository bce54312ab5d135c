import math
from numbers import Integral, Real
from typing import Dict, List, Optional
from dataclasses import dataclass, replace


class InvalidValueError(ValueError):
    """Raised when a value that is not a finite real number is inserted."""


@dataclass
class HeapEntry:
    value: Real
    priority: Real


class IndexedBinaryHeap:
    """Min-heap of (value, priority) entries with a value -> slot index.

    Inserting a value that is already present lowers its priority by one
    instead of adding a second entry.
    """

    def __init__(self):
        self.heap: List[HeapEntry] = []
        self.positions: Dict[Real, int] = {}

    def _parent(self, i: int):
        return (i + 1) // 2 - 1

    def _left(self, i: int):
        return 2 * i + 1

    def _right(self, i: int):
        return 2 * i + 2

    def _swap(self, i: int, j: int):
        self.heap[i], self.heap[j] = self.heap[j], self.heap[i]
        self.positions[self.heap[i].value] = i
        self.positions[self.heap[j].value] = j

    def _sift_up(self, i: int):
        if not isinstance(i, int) or isinstance(i, bool):
            return
        if i < 0 or i >= len(self.heap):
            return

        while i > 0:
            parent = self._parent(i)
            if self.heap[i].priority < self.heap[parent].priority:
                self._swap(i, parent)
                i = parent
            else:
                break

    def _sift_down(self, i: int = 0):
        size = len(self.heap)
        while True:
            smallest = i
            left = self._left(i)
            right = self._right(i)

            if left < size and self.heap[left].priority < self.heap[smallest].priority:
                smallest = left
            if right < size and self.heap[right].priority < self.heap[smallest].priority:
                smallest = right

            if smallest != i:
                self._swap(i, smallest)
                i = smallest
            else:
                break

    @staticmethod
    def _check_value(value):
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidValueError(f"value must be a real number, got {value!r}")
        if not isinstance(value, Integral) and not math.isfinite(value):
            raise InvalidValueError(f"value must be finite, got {value!r}")

    def insert(self, value: Real):
        """Add ``value`` with priority equal to itself, or bump its priority
        by one if it is already queued. O(log n)."""
        self._check_value(value)

        index = self.positions.get(value)
        if index is not None:
            # Priority only ever decreases, so the entry can only move up.
            self.heap[index].priority -= 1
            self._sift_up(index)
            return

        self.heap.append(HeapEntry(value=value, priority=value))
        index = len(self.heap) - 1
        self.positions[value] = index
        self._sift_up(index)

    def remove_top(self) -> Optional[HeapEntry]:
        """Remove and return the entry with the lowest priority number.

        Returns None when the heap is empty.
        """
        if not self.heap:
            return None

        top = self.heap[0]
        last = self.heap.pop()
        del self.positions[top.value]

        if self.heap:
            self.heap[0] = last
            self.positions[last.value] = 0
            self._sift_down(0)

        return top

    def peek(self) -> Optional[HeapEntry]:
        return replace(self.heap[0]) if self.heap else None

    def priority_of(self, value: Real) -> Optional[Real]:
        index = self.positions.get(value)
        return self.heap[index].priority if index is not None else None

    def __contains__(self, value):
        return value in self.positions

    def size(self):
        return len(self.heap)

    def is_empty(self):
        return len(self.heap) == 0
