"""Projection pipeline: profile -> timeline -> both simulators -> scenarios."""

import logging
import random
from typing import Optional, Sequence

from .aggressive import simulate_aggressive
from .config import DEFAULT_CONFIG, ProjectionConfig
from .conservative import TIMELINE_TERMINAL, simulate_conservative
from .scenarios import DEFAULT_SELECTION, ScenarioPick, build_post_retirement_scenarios
from .schemas import ProjectionResult, UserProfile
from .timeline import build_deposit_timeline
from .variates import make_rng

logger = logging.getLogger(__name__)


def run_projection(
    profile: UserProfile,
    rng: Optional[random.Random] = None,
    config: Optional[ProjectionConfig] = None,
    start_year: Optional[int] = None,
    scenario_selection: Sequence[ScenarioPick] = DEFAULT_SELECTION,
    conservative_timeline: str = TIMELINE_TERMINAL,
) -> ProjectionResult:
    """Run the full projection for one profile.

    Every call recomputes the whole chain. Pass a seeded rng for reproducible
    aggressive outcomes; without one a fresh unseeded generator is used.
    A profile with retirement_age <= age yields an empty timeline and
    outcomes equal to current_cash.
    """
    config = config or DEFAULT_CONFIG
    rng = rng if rng is not None else make_rng()

    timeline = build_deposit_timeline(profile, start_year=start_year, spend_inflation=config.spend_inflation)
    if not timeline:
        logger.debug("empty deposit timeline for age=%s retirement_age=%s", profile.age, profile.retirement_age)

    aggressive = simulate_aggressive(timeline, profile.current_cash, rng, config)
    conservative = simulate_conservative(timeline, profile.current_cash, config, conservative_timeline)
    scenarios = build_post_retirement_scenarios(
        aggressive,
        conservative,
        profile.monthly_spend_retire,
        base_yield=config.base_yield,
        selection=scenario_selection,
    )
    return ProjectionResult(
        deposit_timeline=timeline,
        aggressive=aggressive,
        conservative=conservative,
        scenarios=scenarios,
    )
