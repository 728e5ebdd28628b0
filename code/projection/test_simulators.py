import math
import random
import statistics

import pytest

from projection.aggressive import (
    AGGRESSIVE_NAME,
    illustrative_timeline,
    percentile_outcome,
    run_monte_carlo,
    simulate_aggressive,
    simulate_trajectory,
)
from projection.config import ProjectionConfig
from projection.conservative import (
    CONSERVATIVE_NAME,
    compound_wealth,
    simulate_conservative,
)
from projection.schemas import Deposit
from projection.variates import gaussian, make_rng


class FixedRandom:
    """random() returns the queued values in order."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


def deposits(*monthly, start_year=2025, age=30):
    return [Deposit(year=start_year + i, age=age + i, monthly_deposit=m) for i, m in enumerate(monthly)]


# variates

def test_gaussian_zero_uniform_does_not_hit_log_domain():
    # u = 1 - 0.0 = 1.0, so z = 0 and the draw is exactly the mean
    assert gaussian(FixedRandom([0.0, 0.3]), 0.1, 0.18) == 0.1


def test_gaussian_box_muller_value():
    u, v = 0.5, 0.1
    rng = FixedRandom([1 - u, v])
    expected = math.sqrt(-2 * math.log(u)) * math.cos(2 * math.pi * v) * 2.0 + 1.0
    assert gaussian(rng, 1.0, 2.0) == pytest.approx(expected)


def test_gaussian_moments():
    rng = make_rng(123)
    draws = [gaussian(rng, 0.10, 0.18) for _ in range(20000)]
    assert statistics.fmean(draws) == pytest.approx(0.10, abs=0.01)
    assert statistics.pstdev(draws) == pytest.approx(0.18, abs=0.01)


def test_seeded_rngs_are_independent_of_global_state():
    a = make_rng(5)
    random.seed(999)
    b = make_rng(5)
    assert [gaussian(a) for _ in range(5)] == [gaussian(b) for _ in range(5)]


# aggressive

def test_trajectory_deposits_before_return():
    timeline = deposits(100)
    wealth = simulate_trajectory(timeline, 1000, make_rng(1), mean=0.10, stdev=0.0)
    assert wealth == pytest.approx((1000 + 1200) * 1.10)


def test_trajectory_two_years():
    timeline = deposits(100, 200)
    wealth = simulate_trajectory(timeline, 0, make_rng(1), mean=0.05, stdev=0.0)
    assert wealth == pytest.approx(((1200 * 1.05) + 2400) * 1.05)


def test_empty_timeline_collapses_to_cash():
    result = simulate_aggressive([], 10000, make_rng(3))
    assert result.outcomes.worst == result.outcomes.avg == result.outcomes.best == 10000
    assert result.timeline == []


def test_monte_carlo_run_count_and_reproducibility():
    timeline = deposits(*([1000] * 10))
    first = run_monte_carlo(timeline, 5000, make_rng(42), runs=300)
    second = run_monte_carlo(timeline, 5000, make_rng(42), runs=300)
    assert len(first) == 300
    assert first == second


def test_monte_carlo_parallel_batches():
    timeline = deposits(*([500] * 5))
    outcomes = run_monte_carlo(timeline, 1000, make_rng(9), runs=101, workers=2)
    assert len(outcomes) == 101
    again = run_monte_carlo(timeline, 1000, make_rng(9), runs=101, workers=2)
    assert sorted(outcomes) == sorted(again)


def test_percentile_indices_are_floor_based():
    values = list(range(1000))
    random.Random(0).shuffle(values)
    outcome = percentile_outcome(values)
    assert (outcome.worst, outcome.avg, outcome.best) == (50, 500, 950)


def test_percentile_small_sample():
    outcome = percentile_outcome([9, 1, 5, 3, 7, 2, 8, 4, 6, 0])
    # indices floor(10*0.05)=0, floor(10*0.5)=5, floor(10*0.95)=9
    assert (outcome.worst, outcome.avg, outcome.best) == (0, 5, 9)


def test_percentile_one_is_clamped_to_last():
    outcome = percentile_outcome([3.0, 1.0, 2.0], (0.0, 0.5, 1.0))
    assert outcome.best == 3.0
    assert outcome.worst == 1.0


def test_percentile_of_nothing_is_zero():
    outcome = percentile_outcome([])
    assert outcome.worst == outcome.avg == outcome.best == 0.0


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_aggressive_ordering(seed):
    timeline = deposits(*([2000] * 20))
    result = simulate_aggressive(timeline, 10000, make_rng(seed), ProjectionConfig(monte_carlo_runs=200))
    assert result.name == AGGRESSIVE_NAME
    assert result.outcomes.worst <= result.outcomes.avg <= result.outcomes.best


def test_illustrative_timeline_is_closed_form():
    timeline = deposits(100, 200)
    points = illustrative_timeline(timeline, 1000, mean=0.10, stdev=0.18, band_factor=0.8)
    assert [p.year for p in points] == [2025, 2026]
    assert points[0].avg == pytest.approx(2200 * 1.10)
    assert points[0].best == pytest.approx(2200 * (1 + 0.10 + 0.144))
    assert points[0].worst == pytest.approx(2200 * (1 + 0.10 - 0.144))
    # second year uses that year's deposit times two years
    assert points[1].avg == pytest.approx((1000 + 200 * 12 * 2) * 1.10 ** 2)


def test_illustrative_timeline_ignores_random_draws():
    timeline = deposits(*([1500] * 8))
    a = simulate_aggressive(timeline, 0, make_rng(1), ProjectionConfig(monte_carlo_runs=50))
    b = simulate_aggressive(timeline, 0, make_rng(2), ProjectionConfig(monte_carlo_runs=50))
    assert a.timeline == b.timeline
    assert a.outcomes != b.outcomes


# conservative

def test_compound_wealth():
    assert compound_wealth(deposits(100), 1000, 0.08) == pytest.approx(2200 * 1.08)
    assert compound_wealth(deposits(100, 100), 0, 0.0) == pytest.approx(2400)


def test_conservative_empty_timeline_is_cash():
    result = simulate_conservative([], 10000)
    assert result.outcomes.best == 10000
    assert result.outcomes.avg == 10000
    assert result.outcomes.worst == 10000


def test_conservative_yield_variants():
    timeline = deposits(*([1000] * 5))
    result = simulate_conservative(timeline, 10000)
    assert result.name == CONSERVATIVE_NAME
    assert result.outcomes.avg == compound_wealth(timeline, 10000, 0.08)
    assert result.outcomes.best == compound_wealth(timeline, 10000, 0.09)
    assert result.outcomes.worst == compound_wealth(timeline, 10000, 0.07)
    assert result.outcomes.worst < result.outcomes.avg < result.outcomes.best


def test_conservative_is_deterministic():
    timeline = deposits(*([1234.5] * 12))
    assert simulate_conservative(timeline, 777) == simulate_conservative(timeline, 777)


def test_conservative_terminal_timeline_repeats_outcomes():
    timeline = deposits(100, 200, 300)
    result = simulate_conservative(timeline, 0)
    assert len(result.timeline) == 3
    for point in result.timeline:
        assert (point.best, point.avg, point.worst) == (
            result.outcomes.best,
            result.outcomes.avg,
            result.outcomes.worst,
        )


def test_conservative_compounding_timeline():
    timeline = deposits(100, 200, 300)
    result = simulate_conservative(timeline, 0, timeline_mode="compounding")
    assert result.timeline[0].avg == pytest.approx(1200 * 1.08)
    assert result.timeline[-1].avg == result.outcomes.avg
    assert result.timeline[-1].best == result.outcomes.best
    assert result.timeline[0].avg < result.timeline[1].avg < result.timeline[2].avg


def test_conservative_rejects_unknown_timeline_mode():
    with pytest.raises(ValueError):
        simulate_conservative([], 0, timeline_mode="yearly")
