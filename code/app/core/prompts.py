import json
from typing import Any, Dict, List

from .tools import format_coverage, format_currency


def build_advice_prompt(
    profile: Dict[str, float],
    average_monthly_deposit: float,
    scenarios: List[Dict[str, Any]],
    base_yield: float,
    tone: str,
) -> str:
    scenario_lines = "\n".join(
        f"- {s['name']}: Final Wealth of {format_currency(s['final_wealth'])} -> "
        f"Monthly Passive Income of {format_currency(s['monthly_passive_income'])} "
        f"(Coverage Ratio: {format_coverage(s['coverage_ratio'])} of expected spending)"
        for s in scenarios
    )
    return f"""
You are an expert private wealth management advisor. Analyze the following user financial profile and simulation results to provide personalized financial guidance.

User Profile:
- Age: {profile['age']:.0f}
- Current Investible Cash: {format_currency(profile['current_cash'])}
- Annual Salary: {format_currency(profile['annual_salary'])} (with {profile['salary_growth']:g}% expected annual growth)
- Current Monthly Spending: {format_currency(profile['monthly_spend'])}
- Expected Retirement Age: {profile['retirement_age']:.0f}
- Expected Monthly Expenditure After Retirement: {format_currency(profile['monthly_spend_retire'])}

Projected Savings:
- The user is projected to save an average of {format_currency(average_monthly_deposit)} per month until retirement.

Post-Retirement Cashflow Scenarios (Based on a {base_yield * 100:g}% annual yield on final wealth):
{scenario_lines}

Task:
1. Analyze Retirement Readiness: Concisely evaluate if the user's projected post-retirement cash flow meets their expected expenses in the average-case scenarios.
2. Provide Actionable Guidance:
   - If there is a shortfall (average coverage ratio < 1.0): Propose specific, practical adjustments to savings or spending. Suggest realistic strategies to bridge the gap.
   - If the goals are met (average coverage ratio >= 1.0): Congratulate the user and suggest strategies for wealth preservation and safe growth post-retirement. Mention diversification, and perhaps exploring lower-risk assets.
3. Maintain the correct tone: {tone}
4. Formatting: Use markdown (headings, bold text, bullet points). Start with a summary, then the detailed analysis, and finally a list of key action items.
""".strip()


def build_question_prompt(question: str, context: Dict[str, Any]) -> str:
    return f"""
Given the user's financial context, answer the following question. Use up-to-date and accurate information where relevant.

User's Financial Context:
- Profile: {json.dumps(context.get('userProfile'), indent=2)}
- Simulation Results: {json.dumps(context.get('simulationResults'), indent=2)}
- Post-Retirement Scenarios: {json.dumps(context.get('postRetirementScenarios'), indent=2)}

User's Question:
"{question}"

Please provide a concise and helpful response. If you use external information, cite your sources.
""".strip()
