import random
from dataclasses import dataclass

from listing_search.core.ordering import partition, quick_sort


@dataclass
class Item:
    name: str
    distance: float


def distances(items):
    return [item.distance for item in items]


def test_empty_and_single_are_unchanged():
    assert quick_sort([]) == []
    single = [Item("a", 3.0)]
    assert quick_sort(single) == [Item("a", 3.0)]


def test_sorts_in_place_and_returns_same_list():
    items = [Item("c", 30.0), Item("a", 1.5), Item("b", 12.0)]
    result = quick_sort(items)
    assert result is items
    assert [i.name for i in items] == ["a", "b", "c"]


def test_random_input_is_a_sorted_permutation():
    rng = random.Random(3)
    items = [Item(str(i), rng.choice([rng.uniform(0, 100), 5.0, 0.0])) for i in range(400)]
    before = sorted((i.name, i.distance) for i in items)

    quick_sort(items)

    assert distances(items) == sorted(distances(items))
    assert sorted((i.name, i.distance) for i in items) == before


def test_already_sorted_input_keeps_its_content():
    items = [Item(str(i), float(i)) for i in range(50)]
    quick_sort(items)
    assert distances(items) == [float(i) for i in range(50)]


def test_descending_input_does_not_exhaust_the_stack():
    items = [Item(str(i), float(i)) for i in range(1500, 0, -1)]
    quick_sort(items)
    assert distances(items) == [float(i) for i in range(1, 1501)]


def test_partition_places_pivot_at_boundary():
    items = [Item("a", 9.0), Item("b", 1.0), Item("c", 7.0), Item("d", 4.0)]
    pi = partition(items, 0, len(items) - 1)
    assert items[pi].distance == 4.0
    assert all(i.distance < 4.0 for i in items[:pi])
    assert all(i.distance >= 4.0 for i in items[pi + 1:])


def test_distances_are_not_mutated():
    items = [Item("x", float("inf")), Item("y", 2.0), Item("z", 2.0)]
    quick_sort(items)
    assert sorted(distances(items)) == [2.0, 2.0, float("inf")]
    assert items[-1].name == "x"
