from .indexed_heap import IndexedBinaryHeap, HeapEntry, InvalidValueError

__all__ = ['IndexedBinaryHeap', 'HeapEntry', 'InvalidValueError']
