import pytest
from main import app_state


@pytest.fixture(autouse=True)
def reset_app_state():
    """Reset all shared state before each test to prevent cross-test contamination."""
    app_state["queues"] = {}

    yield

    app_state["queues"] = {}


def assert_heap_valid(heap):
    """Check heap order and that the position index agrees with storage."""
    for i in range(1, len(heap.heap)):
        parent = (i + 1) // 2 - 1
        assert heap.heap[i].priority >= heap.heap[parent].priority, (
            f"Heap order violated at slot {i}: "
            f"{heap.heap[parent].priority} > {heap.heap[i].priority}"
        )

    assert len(heap.positions) == len(heap.heap)
    for value, index in heap.positions.items():
        assert heap.heap[index].value == value, (
            f"Index for {value} points at slot {index} holding {heap.heap[index].value}"
        )
