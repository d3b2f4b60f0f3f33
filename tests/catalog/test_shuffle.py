import random

from app.catalog.shuffle import shuffled


def test_shuffle_is_a_permutation():
    items = list(range(50))
    result = shuffled(items, random.Random(7))
    assert sorted(result) == items
    assert items == list(range(50))


def test_shuffle_is_reproducible_with_seed():
    assert shuffled("abcdef", random.Random(3)) == shuffled("abcdef", random.Random(3))


def test_shuffle_small_inputs():
    assert shuffled([]) == []
    assert shuffled([1]) == [1]
