import random

import pytest

from hairstyle_ai import suggester
from hairstyle_ai.hairstyles import HAIRSTYLES
from hairstyle_ai.schemas import FaceShape


class TestFilterPolicy:
    def test_only_suitable_entries(self):
        picked = suggester.filter_by_shape(FaceShape.heart)
        assert [h.name for h in picked] == ["Long Layered Cut"]

    @pytest.mark.parametrize("shape", list(FaceShape))
    def test_every_entry_matches(self, shape):
        picked = suggester.select(shape, policy="filter")
        assert all(shape in h.suitable_for for h in picked)
        assert len(picked) == sum(1 for h in HAIRSTYLES if shape in h.suitable_for)

    def test_idempotent(self):
        first = suggester.select(FaceShape.oval, policy="filter")
        second = suggester.select(FaceShape.oval, policy="filter")
        assert first == second

    def test_no_label_empty(self):
        assert suggester.select(None, policy="filter", no_label_result="empty") == []

    def test_no_label_all(self):
        assert suggester.select(None, policy="filter", no_label_result="all") == list(HAIRSTYLES)

    def test_table_not_mutated(self):
        before = list(HAIRSTYLES)
        suggester.select(FaceShape.square, policy="filter")
        assert list(HAIRSTYLES) == before


class TestRandomPolicy:
    def test_size_and_membership(self):
        rng = random.Random(7)
        for _ in range(50):
            picked = suggester.select(FaceShape.round, policy="random", rng=rng)
            assert len(picked) == 2
            assert all(h in HAIRSTYLES for h in picked)
            assert len({h.id for h in picked}) == 2

    def test_ignores_label(self):
        shapes = [FaceShape.heart, FaceShape.long]
        a = suggester.select(shapes[0], policy="random", rng=random.Random(3))
        b = suggester.select(shapes[1], policy="random", rng=random.Random(3))
        assert a == b

    def test_custom_count(self):
        picked = suggester.select(FaceShape.oval, policy="random", random_count=4, rng=random.Random(1))
        assert len(picked) == 4
        assert len({h.id for h in picked}) == 4

    def test_small_table_returns_all(self):
        table = HAIRSTYLES[:1]
        picked = suggester.sample_random(2, table, random.Random(0))
        assert picked == list(table)

    def test_every_entry_can_be_picked(self):
        rng = random.Random(11)
        seen = set()
        for _ in range(200):
            seen.update(h.id for h in suggester.sample_random(2, rng=rng))
        assert seen == {h.id for h in HAIRSTYLES}

    def test_no_label_empty(self):
        assert suggester.select(None, policy="random") == []

    def test_no_label_all_still_samples(self):
        picked = suggester.select(None, policy="random", no_label_result="all", rng=random.Random(5))
        assert len(picked) == 2


def test_unknown_policy():
    with pytest.raises(ValueError):
        suggester.select(FaceShape.oval, policy="popular")
