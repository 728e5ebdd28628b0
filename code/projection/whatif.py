import random
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .conservative import compound_wealth
from .config import DEFAULT_CONFIG, ProjectionConfig
from .engine import run_projection
from .scenarios import create_scenario
from .schemas import ProjectionResult, UserProfile, finite_or_none
from .timeline import build_deposit_timeline
from .variates import make_rng

MUTABLE_FIELDS = ("retirement_age", "monthly_spend", "salary_growth", "current_cash", "monthly_spend_retire")


def generate_default_variations() -> List[Dict[str, Any]]:
    return [
        {"name": "baseline", "changes": {}},
        {"name": "retire_plus_5", "changes": {"retirement_age": 5}},
        {"name": "retire_minus_5", "changes": {"retirement_age": -5}},
        {"name": "spend_minus_10", "factors": {"monthly_spend": 0.9}},
        {"name": "salary_growth_plus_1", "changes": {"salary_growth": 1}},
        {"name": "cash_plus_50k", "changes": {"current_cash": 50000}},
    ]


def apply_variation(profile: UserProfile, variation: Dict[str, Any]) -> UserProfile:
    """Additive `changes` and multiplicative `factors` over a profile."""
    updates: Dict[str, Any] = {}
    for key, delta in variation.get("changes", {}).items():
        if key not in MUTABLE_FIELDS:
            raise ValueError(f"cannot vary field {key!r}")
        updates[key] = getattr(profile, key) + delta
    for key, factor in variation.get("factors", {}).items():
        if key not in MUTABLE_FIELDS:
            raise ValueError(f"cannot vary field {key!r}")
        updates[key] = updates.get(key, getattr(profile, key)) * factor
    return replace(profile, **updates)


def _coverage_by_name(result: ProjectionResult) -> Dict[str, Optional[float]]:
    return {s.name: finite_or_none(s.coverage_ratio) for s in result.scenarios}


def _delta(base: Optional[float], other: Optional[float]) -> Optional[float]:
    if base is None or other is None:
        return None
    return round(other - base, 4)


def run_variations(
    profile: UserProfile,
    seed: Optional[int] = None,
    custom_variations: Optional[List[Dict[str, Any]]] = None,
    config: Optional[ProjectionConfig] = None,
    start_year: Optional[int] = None,
) -> Dict[str, Any]:
    """Re-run the projection for each variation with the same seed and compare coverage.

    Returns:
      {
        "baseline": {...projection dict...},
        "variations": [
          {"name": "...", "profile": {...}, "coverage": {...}, "delta": {...}},
          ...
        ],
        "metadata": {...}
      }
    """
    if seed is None:
        # all variations share one seed
        seed = random.SystemRandom().randrange(2**32)
    defs = generate_default_variations()
    if custom_variations:
        defs.extend(custom_variations)

    baseline = run_projection(profile, rng=make_rng(seed), config=config, start_year=start_year)
    base_cov = _coverage_by_name(baseline)

    out: List[Dict[str, Any]] = []
    for d in defs:
        varied = apply_variation(profile, d)
        result = run_projection(varied, rng=make_rng(seed), config=config, start_year=start_year)
        cov = _coverage_by_name(result)
        out.append({
            "name": d.get("name", "unnamed"),
            "profile": varied.to_dict(),
            "coverage": cov,
            "delta": {name: _delta(base_cov.get(name), value) for name, value in cov.items()},
        })

    return {
        "baseline": baseline.to_dict(),
        "variations": out,
        "metadata": {"seed": seed, "variation_count": len(out)},
    }


def earliest_covered_retirement_age(
    profile: UserProfile,
    max_age: int = 80,
    config: Optional[ProjectionConfig] = None,
) -> Optional[int]:
    """First retirement age whose conservative-avg income covers retirement spending.

    Deterministic: only the fixed-yield strategy is used.
    """
    config = config or DEFAULT_CONFIG
    for retirement_age in range(profile.age + 1, max_age + 1):
        candidate = replace(profile, retirement_age=retirement_age)
        timeline = build_deposit_timeline(candidate, spend_inflation=config.spend_inflation)
        wealth = compound_wealth(timeline, candidate.current_cash, config.base_yield)
        scenario = create_scenario("Conservative - Avg Case", wealth, candidate.monthly_spend_retire, config.base_yield)
        if scenario.goal_met:
            return retirement_age
    return None
