SAMPLE_PROFILE = {
    "age": 30,
    "current_cash": 10000,
    "annual_salary": 80000,
    "salary_growth": 3,
    "monthly_spend": 3000,
    "stable_income_retire": 0,
    "retirement_age": 60,
    "monthly_spend_retire": 4000,
}

SAMPLE_REQUEST = {
    "profile": SAMPLE_PROFILE,
    "seed": 42,
    "include_advice": True,
}

SAMPLE_QUESTION = {
    "question": "Explain the risk trade-offs between the Aggressive and Conservative modes.",
    "profile": SAMPLE_PROFILE,
    "seed": 42,
}
