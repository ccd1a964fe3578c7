"""
Distance ordering for filtered listings.

A hand-written Lomuto quicksort: the last element is the pivot, and elements
strictly closer than the pivot are swapped into a growing left partition.

Complexity: O(n log n) comparisons on average. It degrades to O(n^2) when the
pivot is repeatedly an extreme, which happens on input that is already sorted
in either direction or that has many equal distances. Inputs here are the few
candidates that survive the bounding-box and distance filters, so this is
accepted, not hidden. The sort recurses into the smaller partition and loops
over the larger one, so even the quadratic case keeps O(log n) stack depth.

The sort is not stable: listings at equal distance may swap places.
"""

from typing import List, Sequence, TypeVar

T = TypeVar("T")


def swap(items: List, i: int, j: int) -> None:
    items[i], items[j] = items[j], items[i]


def partition(items: Sequence, low: int, high: int) -> int:
    """Partition items[low:high + 1] around items[high].distance and return the pivot's final index."""
    pivot = items[high].distance
    i = low - 1

    for j in range(low, high):
        if items[j].distance < pivot:
            i += 1
            swap(items, i, j)

    swap(items, i + 1, high)
    return i + 1


def _quick_sort(items: List, low: int, high: int) -> None:
    while low < high:
        pi = partition(items, low, high)
        if pi - low < high - pi:
            _quick_sort(items, low, pi - 1)
            low = pi + 1
        else:
            _quick_sort(items, pi + 1, high)
            high = pi - 1


def quick_sort(items: List[T]) -> List[T]:
    """Sort items in place by ascending `.distance` and return the same list."""
    if len(items) > 1:
        _quick_sort(items, 0, len(items) - 1)
    return items
