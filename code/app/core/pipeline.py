import logging
from typing import Dict, List, Tuple

from projection.engine import run_projection
from projection.config import DEFAULT_CONFIG
from projection.schemas import ProjectionResult, UserProfile
from projection.timeline import average_monthly_deposit
from projection.utils import validate_profile_payload
from projection.variates import make_rng
from projection.whatif import earliest_covered_retirement_age, run_variations

from .models import (
    AnswerResponse,
    ProfileIn,
    ProjectionRequest,
    ProjectionResponse,
    QuestionRequest,
    WhatIfRequest,
    WhatIfResponse,
)
from .prompts import build_advice_prompt, build_question_prompt
from .tools import (
    average_coverage,
    clamp_llm_profile,
    clamp_llm_scenario,
    format_coverage,
    format_currency,
    select_tone,
)
from app.ai.advisor_client import ADVISOR_QUESTION_MODEL, extract_sources, extract_text, query_advisor

logger = logging.getLogger(__name__)

QUESTION_FALLBACK = "Sorry, I couldn't process that request. Please try again."


def to_user_profile(profile: ProfileIn) -> UserProfile:
    return validate_profile_payload(profile.model_dump())


def _deterministic_advice(profile: UserProfile, result: ProjectionResult) -> str:
    scenarios = result.scenarios
    avg_cov = average_coverage(scenarios)
    avg_deposit = average_monthly_deposit(result.deposit_timeline)

    lines: List[str] = ["## Summary"]
    if not result.deposit_timeline:
        lines.append(
            f"- Retirement age {profile.retirement_age} is not after current age {profile.age}, "
            "so no working years were projected."
        )
    else:
        lines.append(
            f"- Over {len(result.deposit_timeline)} working years you are projected to save about "
            f"{format_currency(avg_deposit)} per month."
        )
    if avg_cov is None:
        lines.append("- Coverage cannot be assessed because no retirement spending was entered.")
    elif avg_cov >= 1.0:
        lines.append(f"- Average-case passive income covers about {avg_cov:.2f}x of planned retirement spending.")
    else:
        lines.append(
            f"- Average-case passive income covers only {avg_cov:.2f}x of planned retirement spending."
        )

    lines.extend(["", "## Scenarios"])
    for s in scenarios:
        lines.append(
            f"- {s.name}: {format_currency(s.final_wealth)} -> "
            f"{format_currency(s.monthly_passive_income)}/mo ({format_coverage(s.coverage_ratio)})"
        )

    lines.extend(["", "## Action items"])
    if avg_cov is not None and avg_cov < 1.0:
        lines.append("- Increase monthly savings or lower current discretionary spending.")
        lines.append("- Consider a later retirement age or a lower retirement budget.")
    else:
        lines.append("- Keep the savings rate steady and review the plan yearly.")
        lines.append("- Diversify and shift toward lower-risk assets as retirement approaches.")
    lines.append("- The aggressive worst case shows what a poor market sequence could mean for your plan.")
    return "\n".join(lines).strip()


def _advice_for(profile: UserProfile, result: ProjectionResult) -> Tuple[str, List[Dict[str, str]]]:
    prompt = build_advice_prompt(
        clamp_llm_profile(profile.to_dict()),
        average_monthly_deposit(result.deposit_timeline),
        [clamp_llm_scenario(s) for s in result.scenarios],
        DEFAULT_CONFIG.base_yield,
        select_tone(result.scenarios),
    )
    advice = ""
    sources: List[Dict[str, str]] = []
    try:
        response = query_advisor(prompt)
        advice = extract_text(response)
        sources = extract_sources(response)
    except Exception as e:
        # narration must never take the projection down with it
        logger.warning("advice generation failed: %s", e)
        advice = ""

    if not advice:
        return _deterministic_advice(profile, result), []
    return advice, sources


def _response(result: ProjectionResult, advice: str = "", sources=None) -> ProjectionResponse:
    payload = result.to_dict()
    payload["advice"] = advice
    payload["sources"] = sources or []
    return ProjectionResponse.model_validate(payload)


def run_projection_analysis(payload: ProjectionRequest) -> ProjectionResponse:
    profile = to_user_profile(payload.profile)
    result = run_projection(profile, rng=make_rng(payload.seed))

    advice, sources = "", []
    if payload.include_advice:
        advice, sources = _advice_for(profile, result)
    return _response(result, advice, sources)


def _question_context(profile: UserProfile, result: ProjectionResult) -> Dict[str, object]:
    data = result.to_dict()
    return {
        "userProfile": profile.to_dict(),
        "simulationResults": {"aggressive": data["aggressive"], "conservative": data["conservative"]},
        "postRetirementScenarios": data["scenarios"],
    }


def answer_question(payload: QuestionRequest) -> AnswerResponse:
    profile = to_user_profile(payload.profile)
    result = run_projection(profile, rng=make_rng(payload.seed))
    prompt = build_question_prompt(payload.question, _question_context(profile, result))

    answer = ""
    sources: List[Dict[str, str]] = []
    try:
        response = query_advisor(prompt, model=ADVISOR_QUESTION_MODEL)
        answer = extract_text(response)
        sources = extract_sources(response)
    except Exception as e:
        logger.warning("question answering failed: %s", e)

    if not answer:
        return AnswerResponse(answer=QUESTION_FALLBACK, sources=[])
    return AnswerResponse(answer=answer, sources=sources)


def run_what_if(payload: WhatIfRequest) -> WhatIfResponse:
    profile = to_user_profile(payload.profile)
    report = run_variations(profile, seed=payload.seed)
    baseline = ProjectionResponse.model_validate(report["baseline"])
    return WhatIfResponse(
        baseline=baseline,
        variations=report["variations"],
        earliest_covered_retirement_age=earliest_covered_retirement_age(
            profile, max_age=payload.max_retirement_age
        ),
        seed=report["metadata"]["seed"],
    )
