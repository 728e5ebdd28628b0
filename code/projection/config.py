"""Fixed market and simulation parameters for the projection engine."""

from dataclasses import dataclass
from typing import Tuple

MONTE_CARLO_RUNS = 1000
SP500_MEAN_RETURN = 0.10
SP500_STD_DEV = 0.18
ILLUSTRATIVE_BAND_FACTOR = 0.8
CONSERVATIVE_YIELD = 0.08
CONSERVATIVE_YIELD_SPREAD = 0.01
SPEND_INFLATION = 0.02
OUTCOME_PERCENTILES = (0.05, 0.50, 0.95)


@dataclass(frozen=True)
class ProjectionConfig:
    """Parameters for one projection run.

    Attributes:
        monte_carlo_runs: Number of independent stochastic trajectories.
        mean_return: Mean annual market return for the aggressive strategy.
        return_stdev: Standard deviation of the annual market return.
        band_factor: Multiple of return_stdev used for the illustrative best/worst curves.
        base_yield: Conservative yield, also the post-retirement withdrawal rate.
        yield_spread: Offset applied to base_yield for the conservative best/worst.
        spend_inflation: Annual growth of pre-retirement spending.
        percentiles: (worst, avg, best) rank positions into the sorted outcomes.
        workers: Process count for the Monte Carlo batch. 1 runs inline.
    """

    monte_carlo_runs: int = MONTE_CARLO_RUNS
    mean_return: float = SP500_MEAN_RETURN
    return_stdev: float = SP500_STD_DEV
    band_factor: float = ILLUSTRATIVE_BAND_FACTOR
    base_yield: float = CONSERVATIVE_YIELD
    yield_spread: float = CONSERVATIVE_YIELD_SPREAD
    spend_inflation: float = SPEND_INFLATION
    percentiles: Tuple[float, float, float] = OUTCOME_PERCENTILES
    workers: int = 1

    def __post_init__(self):
        if self.monte_carlo_runs < 1:
            raise ValueError("monte_carlo_runs must be at least 1")
        if self.return_stdev < 0:
            raise ValueError("return_stdev must be non-negative")
        if len(self.percentiles) != 3:
            raise ValueError("percentiles must be a (worst, avg, best) triple")
        if any(p < 0 or p > 1 for p in self.percentiles):
            raise ValueError("percentiles must lie in [0, 1]")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")


DEFAULT_CONFIG = ProjectionConfig()
