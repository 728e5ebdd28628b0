from datetime import date
from typing import List, Optional

from .config import SPEND_INFLATION
from .schemas import Deposit, UserProfile


def build_deposit_timeline(
    profile: UserProfile,
    start_year: Optional[int] = None,
    spend_inflation: float = SPEND_INFLATION,
) -> List[Deposit]:
    """Year-by-year savings schedule from today until the year before retirement.

    Salary grows by the profile's salary_growth (percent); spending grows by a
    fixed inflation constant that does not come from the profile. A deficit
    year contributes a zero deposit, never a withdrawal.
    """
    if start_year is None:
        start_year = date.today().year

    timeline: List[Deposit] = []
    salary = float(profile.annual_salary)
    monthly_spend = float(profile.monthly_spend)
    for i in range(max(profile.working_years, 0)):
        monthly_deposit = max(0.0, salary / 12.0 - monthly_spend)
        timeline.append(Deposit(year=start_year + i, age=profile.age + i, monthly_deposit=monthly_deposit))

        salary *= 1 + profile.salary_growth / 100.0
        monthly_spend *= 1 + spend_inflation
    return timeline


def average_monthly_deposit(timeline: List[Deposit]) -> float:
    if not timeline:
        return 0.0
    return sum(d.monthly_deposit for d in timeline) / len(timeline)
