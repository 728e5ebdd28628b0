from typing import List, Sequence, Tuple

from .config import CONSERVATIVE_YIELD
from .schemas import PostRetirementScenario, SimulationResult

AGGRESSIVE = "aggressive"
CONSERVATIVE = "conservative"

# (scenario name, strategy, outcome band)
ScenarioPick = Tuple[str, str, str]

DEFAULT_SELECTION: Tuple[ScenarioPick, ...] = (
    ("Aggressive - Best Case", AGGRESSIVE, "best"),
    ("Aggressive - Avg Case", AGGRESSIVE, "avg"),
    ("Aggressive - Worst Case", AGGRESSIVE, "worst"),
    ("Conservative - Avg Case", CONSERVATIVE, "avg"),
)

FULL_SELECTION: Tuple[ScenarioPick, ...] = DEFAULT_SELECTION[:3] + (
    ("Conservative - Best Case", CONSERVATIVE, "best"),
    ("Conservative - Avg Case", CONSERVATIVE, "avg"),
    ("Conservative - Worst Case", CONSERVATIVE, "worst"),
)


def _coverage_ratio(monthly_income: float, monthly_spend_retire: float) -> float:
    if monthly_spend_retire == 0:
        if monthly_income > 0:
            return float("inf")
        if monthly_income < 0:
            return float("-inf")
        return float("nan")
    return monthly_income / monthly_spend_retire


def create_scenario(
    name: str,
    final_wealth: float,
    monthly_spend_retire: float,
    base_yield: float = CONSERVATIVE_YIELD,
) -> PostRetirementScenario:
    monthly_passive_income = final_wealth * base_yield / 12
    return PostRetirementScenario(
        name=name,
        final_wealth=final_wealth,
        monthly_passive_income=monthly_passive_income,
        coverage_ratio=_coverage_ratio(monthly_passive_income, monthly_spend_retire),
    )


def build_post_retirement_scenarios(
    aggressive: SimulationResult,
    conservative: SimulationResult,
    monthly_spend_retire: float,
    base_yield: float = CONSERVATIVE_YIELD,
    selection: Sequence[ScenarioPick] = DEFAULT_SELECTION,
) -> List[PostRetirementScenario]:
    """One scenario per selected (strategy, band). The default omits conservative best/worst."""
    results = {AGGRESSIVE: aggressive, CONSERVATIVE: conservative}
    scenarios: List[PostRetirementScenario] = []
    for name, strategy, band in selection:
        if strategy not in results:
            raise ValueError(f"unknown strategy {strategy!r} in scenario {name!r}")
        if band not in ("best", "avg", "worst"):
            raise ValueError(f"unknown outcome band {band!r} in scenario {name!r}")
        final_wealth = getattr(results[strategy].outcomes, band)
        scenarios.append(create_scenario(name, final_wealth, monthly_spend_retire, base_yield))
    return scenarios
