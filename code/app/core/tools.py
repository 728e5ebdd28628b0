import math
from typing import Dict, List, Optional

from projection.schemas import PostRetirementScenario

LLM_AGE_MAX = 120.0
LLM_CASH_MAX = 50000000.0
LLM_SALARY_MAX = 5000000.0
LLM_GROWTH_MIN = -50.0
LLM_GROWTH_MAX = 50.0
LLM_MONTHLY_SPEND_MAX = 500000.0
LLM_WEALTH_MAX = 1000000000.0
LLM_COVERAGE_MAX = 100.0

TONE_ENCOURAGING = (
    "Encouraging, optimistic, and educational. Focus on wealth preservation and growth opportunities."
)
TONE_SUPPORTIVE = (
    "Supportive, constructive, and practical. Provide actionable steps to improve the financial outlook."
)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(value, hi))


def format_currency(value: Optional[float]) -> str:
    if value is None or not math.isfinite(value):
        return "n/a"
    return f"${value:,.0f}"


def format_coverage(ratio: Optional[float]) -> str:
    if ratio is None or not math.isfinite(ratio):
        return "n/a (no retirement spending entered)"
    return f"{ratio:.2f}x"


def select_tone(scenarios: List[PostRetirementScenario]) -> str:
    if any(s.goal_met for s in scenarios):
        return TONE_ENCOURAGING
    return TONE_SUPPORTIVE


def average_coverage(scenarios: List[PostRetirementScenario]) -> Optional[float]:
    avg = [s.coverage_ratio for s in scenarios if "Avg" in s.name and math.isfinite(s.coverage_ratio)]
    if not avg:
        return None
    return sum(avg) / len(avg)


def clamp_llm_profile(profile: Dict[str, float]) -> Dict[str, float]:
    return {
        "age": clamp(profile["age"], 0.0, LLM_AGE_MAX),
        "current_cash": clamp(profile["current_cash"], 0.0, LLM_CASH_MAX),
        "annual_salary": clamp(profile["annual_salary"], 0.0, LLM_SALARY_MAX),
        "salary_growth": clamp(profile["salary_growth"], LLM_GROWTH_MIN, LLM_GROWTH_MAX),
        "monthly_spend": clamp(profile["monthly_spend"], 0.0, LLM_MONTHLY_SPEND_MAX),
        "stable_income_retire": clamp(profile.get("stable_income_retire", 0.0), 0.0, LLM_MONTHLY_SPEND_MAX),
        "retirement_age": clamp(profile["retirement_age"], 0.0, LLM_AGE_MAX),
        "monthly_spend_retire": clamp(profile["monthly_spend_retire"], 0.0, LLM_MONTHLY_SPEND_MAX),
    }


def clamp_llm_scenario(scenario: PostRetirementScenario) -> Dict[str, Optional[float]]:
    coverage = scenario.coverage_ratio
    return {
        "name": scenario.name,
        "final_wealth": clamp(scenario.final_wealth, -LLM_WEALTH_MAX, LLM_WEALTH_MAX),
        "monthly_passive_income": clamp(scenario.monthly_passive_income, -LLM_WEALTH_MAX, LLM_WEALTH_MAX),
        "coverage_ratio": clamp(coverage, 0.0, LLM_COVERAGE_MAX) if math.isfinite(coverage) else None,
    }
