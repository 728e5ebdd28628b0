import json

import pytest

from projection.config import ProjectionConfig
from projection.engine import run_projection
from projection.scenarios import FULL_SELECTION
from projection.schemas import UserProfile, finite_or_none
from projection.utils import ProfileValidationError, validate_profile_payload
from projection.variates import make_rng
from projection.whatif import (
    apply_variation,
    earliest_covered_retirement_age,
    generate_default_variations,
    run_variations,
)

SAMPLE = {
    "age": 30,
    "current_cash": 10000,
    "annual_salary": 80000,
    "salary_growth": 3,
    "monthly_spend": 3000,
    "stable_income_retire": 0,
    "retirement_age": 60,
    "monthly_spend_retire": 4000,
}

FAST = ProjectionConfig(monte_carlo_runs=100)


def profile(**overrides):
    values = dict(SAMPLE)
    values.update(overrides)
    return UserProfile(**values)


def test_end_to_end_sample_profile():
    result = run_projection(profile(), rng=make_rng(7), start_year=2025)
    assert len(result.deposit_timeline) == 30
    assert result.deposit_timeline[0].monthly_deposit == pytest.approx(3666.67, abs=0.01)
    assert len(result.aggressive.timeline) == 30
    assert len(result.conservative.timeline) == 30
    assert result.aggressive.outcomes.worst <= result.aggressive.outcomes.avg <= result.aggressive.outcomes.best
    assert [s.name for s in result.scenarios] == [
        "Aggressive - Best Case",
        "Aggressive - Avg Case",
        "Aggressive - Worst Case",
        "Conservative - Avg Case",
    ]
    assert result.scenarios[3].final_wealth == result.conservative.outcomes.avg


def test_same_seed_same_result():
    a = run_projection(profile(), rng=make_rng(11), start_year=2025)
    b = run_projection(profile(), rng=make_rng(11), start_year=2025)
    assert a == b


@pytest.mark.parametrize("retirement_age", [30, 25])
def test_retired_profile_degrades_to_cash(retirement_age):
    result = run_projection(profile(retirement_age=retirement_age), rng=make_rng(1))
    assert result.deposit_timeline == []
    for outcomes in (result.aggressive.outcomes, result.conservative.outcomes):
        assert outcomes.worst == outcomes.avg == outcomes.best == 10000
    assert all(s.final_wealth == 10000 for s in result.scenarios)
    assert result.scenarios[0].monthly_passive_income == pytest.approx(10000 * 0.08 / 12)


def test_zero_retirement_spend_does_not_raise():
    result = run_projection(profile(monthly_spend_retire=0), rng=make_rng(1), config=FAST)
    assert all(not s.coverage_defined for s in result.scenarios)


def test_to_dict_is_json_ready():
    result = run_projection(profile(monthly_spend_retire=0), rng=make_rng(2), config=FAST, start_year=2025)
    data = result.to_dict()
    json.dumps(data, allow_nan=False)
    assert set(data) == {"depositTimeline", "aggressive", "conservative", "scenarios"}
    assert set(data["depositTimeline"][0]) == {"year", "age", "monthlyDeposit"}
    assert set(data["scenarios"][0]) >= {"name", "finalWealth", "monthlyPassiveIncome", "coverageRatio"}
    assert data["aggressive"]["name"] == "Aggressive (S&P 500 ETF)"


def test_optional_modes():
    result = run_projection(
        profile(),
        rng=make_rng(3),
        config=FAST,
        scenario_selection=FULL_SELECTION,
        conservative_timeline="compounding",
    )
    assert len(result.scenarios) == 6
    assert result.conservative.timeline[0].avg < result.conservative.timeline[-1].avg


def test_config_validation():
    with pytest.raises(ValueError):
        ProjectionConfig(monte_carlo_runs=0)
    with pytest.raises(ValueError):
        ProjectionConfig(return_stdev=-0.1)
    with pytest.raises(ValueError):
        ProjectionConfig(percentiles=(0.05, 0.5, 1.5))
    with pytest.raises(ValueError):
        ProjectionConfig(workers=0)
    assert ProjectionConfig().monte_carlo_runs == 1000


# utils

def test_validate_profile_payload():
    user = validate_profile_payload({**SAMPLE, "age": "30", "retirement_age": 60.0})
    assert user.age == 30 and isinstance(user.age, int)
    assert user.retirement_age == 60


def test_validate_profile_payload_lists_every_problem():
    payload = dict(SAMPLE)
    del payload["annual_salary"]
    payload["monthly_spend"] = "lots"
    with pytest.raises(ProfileValidationError) as exc:
        validate_profile_payload(payload)
    assert "annual_salary is required" in exc.value.problems
    assert "monthly_spend must be a number" in exc.value.problems
    assert isinstance(exc.value, ValueError)


@pytest.mark.parametrize("field", ["age", "retirement_age"])
def test_validate_profile_payload_rejects_fractional_ages(field):
    with pytest.raises(ProfileValidationError) as exc:
        validate_profile_payload({**SAMPLE, field: SAMPLE[field] + 0.5})
    assert exc.value.problems == [f"{field} must be a whole number"]


def test_finite_or_none():
    assert finite_or_none(float("inf")) is None
    assert finite_or_none(float("nan")) is None
    assert finite_or_none(None) is None
    assert finite_or_none(1.5) == 1.5


# what-if

def test_default_variations():
    names = [d["name"] for d in generate_default_variations()]
    assert names[0] == "baseline"
    assert "retire_plus_5" in names


def test_apply_variation():
    varied = apply_variation(profile(), {"changes": {"retirement_age": 5}, "factors": {"monthly_spend": 0.5}})
    assert varied.retirement_age == 65
    assert varied.monthly_spend == 1500
    with pytest.raises(ValueError):
        apply_variation(profile(), {"changes": {"age": 1}})


def test_run_variations():
    report = run_variations(profile(), seed=5, config=FAST, start_year=2025)
    assert report["metadata"] == {"seed": 5, "variation_count": 6}
    by_name = {v["name"]: v for v in report["variations"]}
    assert all(d == 0.0 for d in by_name["baseline"]["delta"].values())
    assert by_name["retire_plus_5"]["delta"]["Conservative - Avg Case"] > 0
    assert by_name["retire_minus_5"]["delta"]["Conservative - Avg Case"] < 0


def test_run_variations_picks_a_seed():
    report = run_variations(profile(), config=FAST)
    assert isinstance(report["metadata"]["seed"], int)


def test_earliest_covered_retirement_age():
    age = earliest_covered_retirement_age(profile())
    assert age is not None and 30 < age <= 60
    assert earliest_covered_retirement_age(profile(), max_age=age - 1) is None


def test_earliest_covered_retirement_age_unreachable():
    assert earliest_covered_retirement_age(profile(current_cash=0, monthly_spend=20000)) is None
