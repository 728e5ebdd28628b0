import math
import random
from typing import Optional


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Instance-scoped random source. Never touch the module-level random state."""
    return random.Random(seed)


def gaussian(rng: random.Random, mean: float = 0.0, stdev: float = 1.0) -> float:
    """One normal draw via Box-Muller; the companion sine value is discarded."""
    # random() is in [0, 1), so 1 - random() is in (0, 1] and log(u) is defined.
    u = 1.0 - rng.random()
    v = rng.random()
    z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
    return z * stdev + mean
