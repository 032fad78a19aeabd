from typing import Dict, List

from pydantic import BaseModel, Field


class GroupSummary(BaseModel):
    name: str
    count: int
    average_score: float


class PeriodSummary(BaseModel):
    period: str  # YYYY-MM
    count: int
    average_score: float


class ReasonCount(BaseModel):
    reason: str
    count: int


class QuestionFailure(BaseModel):
    question_id: str
    text: str
    section_title: str
    count: int


class MonitoringSummary(BaseModel):
    """
    Aggregated indicators over a set of evaluations.

    Rates and attainments are percentages (0-100) rounded to two decimals.
    """

    total_evaluations: int = 0
    average_score: float = 0.0
    critical_failure_rate: float = 0.0
    conversion_rate: float = 0.0
    not_applicable_rate: float = 0.0
    section_attainment: Dict[str, float] = Field(default_factory=dict)
    criticality_distribution: Dict[str, int] = Field(default_factory=dict)
    no_sale_reasons: List[ReasonCount] = Field(default_factory=list)
    question_failures: List[QuestionFailure] = Field(default_factory=list)
    consultants: List[GroupSummary] = Field(default_factory=list)
    supervisors: List[GroupSummary] = Field(default_factory=list)
    monthly_evolution: List[PeriodSummary] = Field(default_factory=list)
