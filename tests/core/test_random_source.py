"""Tests for SeededRandom"""

import pytest
from core.random_source import SeededRandom


class TestSeededRandomStream:
    """Test the linear congruential stream"""

    def test_first_state_from_zero_seed(self):
        """Seed 0 advances to the increment"""
        rng = SeededRandom(0)
        value = rng.next()
        assert rng.state == 1013904223
        assert value == 1013904223 / 2 ** 32

    def test_first_state_from_seed_one(self):
        rng = SeededRandom(1)
        rng.next()
        assert rng.state == 1664525 + 1013904223

    def test_recurrence(self):
        """Every state follows the 32-bit recurrence"""
        rng = SeededRandom(12345)
        state = 12345
        for _ in range(100):
            rng.next()
            state = (state * 1664525 + 1013904223) % 2 ** 32
            assert rng.state == state

    def test_values_in_unit_interval(self):
        rng = SeededRandom(987654)
        values = [rng.next() for _ in range(1000)]
        assert all(0.0 <= v < 1.0 for v in values)

    def test_same_seed_same_sequence(self):
        a = SeededRandom(42)
        b = SeededRandom(42)
        assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]

    def test_different_seeds_differ(self):
        a = SeededRandom(1)
        b = SeededRandom(2)
        assert [a.next() for _ in range(5)] != [b.next() for _ in range(5)]

    def test_seed_reduced_to_32_bits(self):
        """Seeds wrap like an unsigned 32-bit integer"""
        assert SeededRandom(2 ** 32 + 5).state == 5
        assert SeededRandom(-1).state == 2 ** 32 - 1

    def test_instances_are_isolated(self):
        """Drawing from one generator does not affect another"""
        a = SeededRandom(7)
        b = SeededRandom(7)
        for _ in range(10):
            a.next()
        assert b.state == 7


class TestSeededRandomShuffle:
    """Test Fisher-Yates shuffle"""

    def test_shuffle_is_permutation(self):
        items = list(range(20))
        SeededRandom(3).shuffle(items)
        assert sorted(items) == list(range(20))

    def test_shuffle_deterministic(self):
        assert SeededRandom(99).shuffled(list(range(30))) == SeededRandom(99).shuffled(list(range(30)))

    def test_shuffle_matches_recipe(self):
        """Walks i from last to 1 and swaps with floor(next() * (i + 1))"""
        items = list("abcdefgh")
        expected = list(items)
        reference = SeededRandom(2024)
        for i in range(len(expected) - 1, 0, -1):
            j = int(reference.next() * (i + 1))
            expected[i], expected[j] = expected[j], expected[i]

        SeededRandom(2024).shuffle(items)
        assert items == expected

    def test_shuffle_consumes_n_minus_one_draws(self):
        rng = SeededRandom(5)
        rng.shuffle(list(range(10)))
        reference = SeededRandom(5)
        for _ in range(9):
            reference.next()
        assert rng.state == reference.state

    @pytest.mark.parametrize("items", [[], [1]])
    def test_shuffle_trivial_lists(self, items):
        rng = SeededRandom(1)
        rng.shuffle(items)
        assert rng.state == 1

    def test_shuffled_leaves_input_untouched(self):
        items = [1, 2, 3, 4, 5]
        SeededRandom(8).shuffled(items)
        assert items == [1, 2, 3, 4, 5]

    def test_randint_below_range(self):
        rng = SeededRandom(11)
        draws = [rng.randint_below(7) for _ in range(500)]
        assert min(draws) >= 0
        assert max(draws) <= 6
