import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def finite_or_none(value: Optional[float]) -> Optional[float]:
    # inf / nan are not valid JSON; callers get None instead.
    if value is None or not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class UserProfile:
    age: int
    current_cash: float
    annual_salary: float
    salary_growth: float
    monthly_spend: float
    stable_income_retire: float
    retirement_age: int
    monthly_spend_retire: float

    @property
    def working_years(self) -> int:
        return int(self.retirement_age - self.age)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "age": self.age,
            "current_cash": self.current_cash,
            "annual_salary": self.annual_salary,
            "salary_growth": self.salary_growth,
            "monthly_spend": self.monthly_spend,
            "stable_income_retire": self.stable_income_retire,
            "retirement_age": self.retirement_age,
            "monthly_spend_retire": self.monthly_spend_retire,
        }


@dataclass(frozen=True)
class Deposit:
    year: int
    age: int
    monthly_deposit: float

    def to_dict(self) -> Dict[str, Any]:
        return {"year": self.year, "age": self.age, "monthlyDeposit": self.monthly_deposit}


@dataclass(frozen=True)
class SimulationOutcome:
    worst: float
    avg: float
    best: float

    def to_dict(self) -> Dict[str, Any]:
        return {"best": finite_or_none(self.best), "avg": finite_or_none(self.avg), "worst": finite_or_none(self.worst)}


@dataclass(frozen=True)
class SimulationTimelinePoint:
    """One year of the chart curve. Illustrative only, see aggressive.illustrative_timeline."""

    year: int
    best: float
    avg: float
    worst: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "best": finite_or_none(self.best),
            "avg": finite_or_none(self.avg),
            "worst": finite_or_none(self.worst),
        }


@dataclass(frozen=True)
class SimulationResult:
    name: str
    outcomes: SimulationOutcome
    timeline: List[SimulationTimelinePoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "outcomes": self.outcomes.to_dict(),
            "timeline": [p.to_dict() for p in self.timeline],
        }


@dataclass(frozen=True)
class PostRetirementScenario:
    name: str
    final_wealth: float
    monthly_passive_income: float
    coverage_ratio: float

    @property
    def goal_met(self) -> bool:
        # nan compares False, which is what we want here
        return self.coverage_ratio >= 1.0

    @property
    def coverage_defined(self) -> bool:
        return math.isfinite(self.coverage_ratio)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "finalWealth": finite_or_none(self.final_wealth),
            "monthlyPassiveIncome": finite_or_none(self.monthly_passive_income),
            "coverageRatio": finite_or_none(self.coverage_ratio),
            "coverageDefined": self.coverage_defined,
        }


@dataclass(frozen=True)
class ProjectionResult:
    deposit_timeline: List[Deposit]
    aggressive: SimulationResult
    conservative: SimulationResult
    scenarios: List[PostRetirementScenario]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "depositTimeline": [d.to_dict() for d in self.deposit_timeline],
            "aggressive": self.aggressive.to_dict(),
            "conservative": self.conservative.to_dict(),
            "scenarios": [s.to_dict() for s in self.scenarios],
        }
