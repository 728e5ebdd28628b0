"""Conservative strategy: fixed dividend yield, no randomness."""

from typing import List, Sequence

from .config import DEFAULT_CONFIG, ProjectionConfig
from .schemas import Deposit, SimulationOutcome, SimulationResult, SimulationTimelinePoint

CONSERVATIVE_NAME = "Conservative (8% Dividend Yield)"

TIMELINE_TERMINAL = "terminal"
TIMELINE_COMPOUNDING = "compounding"
TIMELINE_MODES = (TIMELINE_TERMINAL, TIMELINE_COMPOUNDING)


def compound_wealth(timeline: Sequence[Deposit], current_cash: float, yield_rate: float) -> float:
    wealth = float(current_cash)
    for deposit in timeline:
        wealth = (wealth + deposit.monthly_deposit * 12) * (1 + yield_rate)
    return wealth


def compounding_balances(timeline: Sequence[Deposit], current_cash: float, yield_rate: float) -> List[float]:
    balances: List[float] = []
    wealth = float(current_cash)
    for deposit in timeline:
        wealth = (wealth + deposit.monthly_deposit * 12) * (1 + yield_rate)
        balances.append(wealth)
    return balances


def simulate_conservative(
    timeline: Sequence[Deposit],
    current_cash: float,
    config: ProjectionConfig = DEFAULT_CONFIG,
    timeline_mode: str = TIMELINE_TERMINAL,
) -> SimulationResult:
    """Terminal wealth at base yield (avg) and base yield +/- spread (best/worst).

    timeline_mode "terminal" repeats the three terminal values at every year,
    which is the historical chart behaviour. "compounding" returns the running
    balance for each year instead.
    """
    if timeline_mode not in TIMELINE_MODES:
        raise ValueError(f"timeline_mode must be one of {TIMELINE_MODES}, got {timeline_mode!r}")

    avg_rate = config.base_yield
    best_rate = config.base_yield + config.yield_spread
    worst_rate = config.base_yield - config.yield_spread

    outcomes = SimulationOutcome(
        worst=compound_wealth(timeline, current_cash, worst_rate),
        avg=compound_wealth(timeline, current_cash, avg_rate),
        best=compound_wealth(timeline, current_cash, best_rate),
    )

    if timeline_mode == TIMELINE_TERMINAL:
        points = [
            SimulationTimelinePoint(year=d.year, best=outcomes.best, avg=outcomes.avg, worst=outcomes.worst)
            for d in timeline
        ]
    else:
        best = compounding_balances(timeline, current_cash, best_rate)
        avg = compounding_balances(timeline, current_cash, avg_rate)
        worst = compounding_balances(timeline, current_cash, worst_rate)
        points = [
            SimulationTimelinePoint(year=d.year, best=b, avg=a, worst=w)
            for d, b, a, w in zip(timeline, best, avg, worst)
        ]

    return SimulationResult(name=CONSERVATIVE_NAME, outcomes=outcomes, timeline=points)
