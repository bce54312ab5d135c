"""
Randomized property tests for IndexedBinaryHeap.
Every operation sequence is checked against a plain dict of value -> priority.
"""
import pytest
import random
import time
from structures.indexed_heap import IndexedBinaryHeap
from conftest import assert_heap_valid


SEEDS = [0, 1, 7, 42, 1234]


def _reference_min(reference):
    return min(reference.values())


@pytest.mark.parametrize("seed", SEEDS)
def test_random_operations_keep_invariants(seed):
    """Heap order, index consistency, dequeue order and size all hold
    after every step of a random insert/remove sequence."""
    rng = random.Random(seed)
    heap = IndexedBinaryHeap()
    reference = {}

    for _ in range(2000):
        if reference and rng.random() < 0.3:
            expected_priority = _reference_min(reference)
            entry = heap.remove_top()

            assert entry is not None
            assert entry.priority == expected_priority, (
                f"Removed priority {entry.priority}, minimum was {expected_priority}"
            )
            assert reference.pop(entry.value) == entry.priority
        else:
            value = rng.randrange(-50, 200)
            if value in reference:
                reference[value] -= 1
            else:
                reference[value] = value
            heap.insert(value)

        assert heap.size() == len(reference)
        assert_heap_valid(heap)

    while reference:
        entry = heap.remove_top()
        assert entry.priority == _reference_min(reference)
        assert reference.pop(entry.value) == entry.priority

    assert heap.remove_top() is None


@pytest.mark.parametrize("array_size,ratio", [(32, 100), (100, 50), (1000, 10)])
def test_bulk_insert_priorities_match_occurrences(array_size, ratio):
    """Each value leaves with priority value - (occurrences - 1)."""
    rng = random.Random(array_size)
    values = [rng.randrange(max(1, array_size * ratio // 100)) for _ in range(array_size)]

    heap = IndexedBinaryHeap()
    for value in values:
        heap.insert(value)

    expected = {}
    for value in values:
        expected[value] = expected[value] - 1 if value in expected else value

    assert heap.size() == len(expected)

    previous = None
    while not heap.is_empty():
        entry = heap.remove_top()
        assert entry.priority == expected.pop(entry.value)
        if previous is not None:
            assert entry.priority >= previous
        previous = entry.priority

    assert expected == {}


def test_duplicate_insert_does_not_grow():
    heap = IndexedBinaryHeap()
    for value in range(10):
        heap.insert(value)

    for value in range(10):
        heap.insert(value)
        assert heap.size() == 10
        assert heap.priority_of(value) == value - 1


def test_size_counts_distinct_minus_removed():
    rng = random.Random(99)
    heap = IndexedBinaryHeap()

    values = [rng.randrange(30) for _ in range(200)]
    for value in values:
        heap.insert(value)
    distinct = len(set(values))

    removed = 0
    for _ in range(distinct // 2):
        assert heap.remove_top() is not None
        removed += 1

    assert heap.size() == distinct - removed

    while heap.remove_top() is not None:
        removed += 1
    assert removed == distinct
    assert heap.size() == 0


def test_large_heap_performance():
    """Insert and remove 10,000 items to verify O(log n) behaviour."""
    heap = IndexedBinaryHeap()

    start = time.time()
    for i in range(10000):
        heap.insert(i % 5000)
    insert_time = time.time() - start

    start = time.time()
    while not heap.is_empty():
        heap.remove_top()
    remove_time = time.time() - start

    assert insert_time < 1.0, f"10k inserts took {insert_time:.2f}s"
    assert remove_time < 1.0, f"5k removes took {remove_time:.2f}s"
