"""Deterministic RNG utilities for reproducible shuffles and reversals."""

import hashlib
import random
from typing import List, MutableSequence, Optional, Union

Seed = Union[int, str]


def seeded_random(seed: Optional[Seed], salt: str = "") -> random.Random:
    """Create a random.Random instance from seed and optional salt.

    Args:
        seed: Base seed (int or string). None yields an unseeded generator.
        salt: Optional salt so one seed can feed several independent streams
            (e.g. "deck" and "reversal")

    Returns:
        random.Random instance that will produce deterministic sequences
    """
    if seed is None:
        return random.Random()

    combined = f"{seed}{salt}"
    hash_obj = hashlib.sha256(combined.encode('utf-8'))
    int_seed = int(hash_obj.hexdigest(), 16)

    # Mask to fit within Python's random seed range
    int_seed = int_seed & ((1 << 31) - 1)

    return random.Random(int_seed)


def fisher_yates(items: MutableSequence, rng: random.Random) -> None:
    """Shuffle items in place.

    Walks from the last index down to 1, swapping element i with a uniformly
    chosen element in [0, i].
    """
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def roll_reversals(count: int, rng: random.Random, probability: float) -> List[bool]:
    """Independently decide, for each of count cards, whether it lands reversed.

    Args:
        count: Number of cards
        rng: Random source
        probability: Chance in [0, 1] that a single card is reversed

    Returns:
        List of booleans, True meaning reversed
    """
    return [rng.random() < probability for _ in range(count)]
