from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProfileIn(BaseModel):
    age: int = Field(ge=0, le=120)
    current_cash: float = Field(ge=0)
    annual_salary: float = Field(ge=0)
    salary_growth: float = Field(ge=-100, le=100)
    monthly_spend: float = Field(ge=0)
    stable_income_retire: float = Field(ge=0)
    # retirement_age <= age is allowed; it produces an empty projection.
    retirement_age: int = Field(ge=0, le=120)
    monthly_spend_retire: float = Field(ge=0)


class ProjectionRequest(BaseModel):
    profile: ProfileIn
    seed: Optional[int] = None
    include_advice: bool = True


class QuestionRequest(BaseModel):
    question: str = Field(min_length=1, max_length=2000)
    profile: ProfileIn
    seed: Optional[int] = None


class WhatIfRequest(BaseModel):
    profile: ProfileIn
    seed: Optional[int] = None
    max_retirement_age: int = Field(ge=0, le=120, default=80)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DepositOut(_CamelModel):
    year: int
    age: int
    monthly_deposit: float


class OutcomesOut(_CamelModel):
    best: Optional[float]
    avg: Optional[float]
    worst: Optional[float]


class TimelinePointOut(_CamelModel):
    year: int
    best: Optional[float]
    avg: Optional[float]
    worst: Optional[float]


class SimulationResultOut(_CamelModel):
    name: str
    outcomes: OutcomesOut
    timeline: List[TimelinePointOut]


class ScenarioOut(_CamelModel):
    name: str
    final_wealth: Optional[float]
    monthly_passive_income: Optional[float]
    # None when retirement spending is zero; see coverage_defined.
    coverage_ratio: Optional[float]
    coverage_defined: bool


class Source(BaseModel):
    uri: str
    title: str = ""


class ProjectionResponse(_CamelModel):
    deposit_timeline: List[DepositOut]
    aggressive: SimulationResultOut
    conservative: SimulationResultOut
    scenarios: List[ScenarioOut]
    advice: str = ""
    sources: List[Source] = []


class AnswerResponse(_CamelModel):
    answer: str
    sources: List[Source] = []


class ProfileOut(_CamelModel):
    age: int
    current_cash: float
    annual_salary: float
    salary_growth: float
    monthly_spend: float
    stable_income_retire: float
    retirement_age: int
    monthly_spend_retire: float


class VariationOut(_CamelModel):
    name: str
    profile: ProfileOut
    # keyed by scenario name
    coverage: Dict[str, Optional[float]]
    delta: Dict[str, Optional[float]]


class WhatIfResponse(_CamelModel):
    baseline: ProjectionResponse
    variations: List[VariationOut]
    earliest_covered_retirement_age: Optional[int]
    seed: int
