import random
from typing import List, Optional, Sequence

from .hairstyles import HAIRSTYLES
from .schemas import FaceShape, HairstyleEntry

POLICIES = ("filter", "random")


def filter_by_shape(face_shape: FaceShape,
                    table: Sequence[HairstyleEntry] = HAIRSTYLES) -> List[HairstyleEntry]:
    return [h for h in table if face_shape in h.suitable_for]


def sample_random(count: int,
                  table: Sequence[HairstyleEntry] = HAIRSTYLES,
                  rng: Optional[random.Random] = None) -> List[HairstyleEntry]:
    """
    Uniform sample of `count` distinct entries, using a partial Fisher-Yates
    shuffle over a copy of the table. Returns every entry (shuffled) when the
    table is smaller than `count`.
    """
    rng = rng or random.Random()
    pool = list(table)
    n = min(count, len(pool))
    for i in range(n):
        j = rng.randrange(i, len(pool))
        pool[i], pool[j] = pool[j], pool[i]
    return pool[:n]


def select(face_shape: Optional[FaceShape],
           policy: str = "filter",
           random_count: int = 2,
           no_label_result: str = "empty",
           table: Sequence[HairstyleEntry] = HAIRSTYLES,
           rng: Optional[random.Random] = None) -> List[HairstyleEntry]:
    if policy not in POLICIES:
        raise ValueError(f"Unknown recommendation policy: {policy!r}")

    if face_shape is None:
        if no_label_result == "empty":
            return []
        if policy == "filter":
            return list(table)

    if policy == "random":
        return sample_random(random_count, table, rng)
    return filter_by_shape(face_shape, table)
