"""Aggressive strategy: Monte Carlo over normally distributed index returns."""

import logging
import random
from concurrent.futures import ProcessPoolExecutor
from typing import List, Sequence

from .config import DEFAULT_CONFIG, ProjectionConfig
from .schemas import Deposit, SimulationOutcome, SimulationResult, SimulationTimelinePoint
from .variates import gaussian

logger = logging.getLogger(__name__)

AGGRESSIVE_NAME = "Aggressive (S&P 500 ETF)"


def simulate_trajectory(
    timeline: Sequence[Deposit],
    current_cash: float,
    rng: random.Random,
    mean: float,
    stdev: float,
) -> float:
    wealth = float(current_cash)
    for deposit in timeline:
        # deposit lands first, then the year's return applies to the new balance
        wealth += deposit.monthly_deposit * 12
        annual_return = gaussian(rng, mean, stdev)
        wealth *= 1 + annual_return
    return wealth


def _run_batch(
    timeline: Sequence[Deposit],
    current_cash: float,
    seed: int,
    runs: int,
    mean: float,
    stdev: float,
) -> List[float]:
    rng = random.Random(seed)
    return [simulate_trajectory(timeline, current_cash, rng, mean, stdev) for _ in range(runs)]


def run_monte_carlo(
    timeline: Sequence[Deposit],
    current_cash: float,
    rng: random.Random,
    runs: int = DEFAULT_CONFIG.monte_carlo_runs,
    mean: float = DEFAULT_CONFIG.mean_return,
    stdev: float = DEFAULT_CONFIG.return_stdev,
    workers: int = 1,
) -> List[float]:
    """Terminal wealth of each independent trajectory.

    With workers > 1 the runs are split into batches, each seeded from rng and
    executed in its own process; all batches are joined before returning.
    The draws then differ from a workers=1 run with the same rng.
    """
    if workers <= 1 or runs < workers:
        return [simulate_trajectory(timeline, current_cash, rng, mean, stdev) for _ in range(runs)]

    sizes = [runs // workers + (1 if i < runs % workers else 0) for i in range(workers)]
    seeds = [rng.getrandbits(64) for _ in sizes]
    timeline = list(timeline)
    outcomes: List[float] = []
    with ProcessPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(_run_batch, timeline, current_cash, seed, size, mean, stdev)
            for seed, size in zip(seeds, sizes)
        ]
        for future in futures:
            outcomes.extend(future.result())
    return outcomes


def percentile_outcome(
    values: Sequence[float],
    percentiles: Sequence[float] = DEFAULT_CONFIG.percentiles,
) -> SimulationOutcome:
    """Index-based (non-interpolated) percentiles over the sorted values."""
    if not values:
        return SimulationOutcome(worst=0.0, avg=0.0, best=0.0)
    ordered = sorted(values)
    n = len(ordered)
    # int() floors for the non-negative products here; p == 1.0 is the only overflow
    indices = [min(int(n * p), n - 1) for p in percentiles]
    logger.debug("percentile indices %s over %d outcomes", indices, n)
    worst, avg, best = (ordered[i] for i in indices)
    return SimulationOutcome(worst=worst, avg=avg, best=best)


def illustrative_timeline(
    timeline: Sequence[Deposit],
    current_cash: float,
    mean: float = DEFAULT_CONFIG.mean_return,
    stdev: float = DEFAULT_CONFIG.return_stdev,
    band_factor: float = DEFAULT_CONFIG.band_factor,
) -> List[SimulationTimelinePoint]:
    """Closed-form chart curve at mean and mean +/- stdev*band_factor.

    This is not derived from the Monte Carlo trajectories and does not match
    the percentile outcomes; it only gives the chart a smooth shape. Each
    point uses that year's deposit as if it had been made every year so far.
    """
    points: List[SimulationTimelinePoint] = []
    for i, deposit in enumerate(timeline):
        years = i + 1
        principal = current_cash + deposit.monthly_deposit * 12 * years
        points.append(
            SimulationTimelinePoint(
                year=deposit.year,
                best=principal * (1 + mean + stdev * band_factor) ** years,
                avg=principal * (1 + mean) ** years,
                worst=principal * (1 + mean - stdev * band_factor) ** years,
            )
        )
    return points


def simulate_aggressive(
    timeline: Sequence[Deposit],
    current_cash: float,
    rng: random.Random,
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> SimulationResult:
    finals = run_monte_carlo(
        timeline,
        current_cash,
        rng,
        runs=config.monte_carlo_runs,
        mean=config.mean_return,
        stdev=config.return_stdev,
        workers=config.workers,
    )
    logger.debug("aggressive: %d trajectories over %d years", len(finals), len(timeline))
    return SimulationResult(
        name=AGGRESSIVE_NAME,
        outcomes=percentile_outcome(finals, config.percentiles),
        timeline=illustrative_timeline(
            timeline, current_cash, config.mean_return, config.return_stdev, config.band_factor
        ),
    )
