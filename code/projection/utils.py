import math
from typing import Any, Mapping

from .schemas import UserProfile

PROFILE_FIELDS = (
    "age",
    "current_cash",
    "annual_salary",
    "salary_growth",
    "monthly_spend",
    "stable_income_retire",
    "retirement_age",
    "monthly_spend_retire",
)
INT_FIELDS = ("age", "retirement_age")


class ProfileValidationError(ValueError):
    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("invalid profile: " + "; ".join(self.problems))


def validate_profile_payload(payload: Mapping[str, Any]) -> UserProfile:
    """Build a UserProfile from a plain mapping, reporting every bad field at once."""
    problems = []
    values = {}
    for name in PROFILE_FIELDS:
        if name not in payload or payload[name] is None:
            problems.append(f"{name} is required")
            continue
        raw = payload[name]
        if isinstance(raw, bool):
            problems.append(f"{name} must be a number")
            continue
        try:
            number = float(raw)
        except (TypeError, ValueError):
            problems.append(f"{name} must be a number")
            continue
        if not math.isfinite(number):
            problems.append(f"{name} must be finite")
            continue
        if name in INT_FIELDS:
            if number != int(number):
                problems.append(f"{name} must be a whole number")
                continue
            number = int(number)
        values[name] = number
    if problems:
        raise ProfileValidationError(problems)
    return UserProfile(**values)
