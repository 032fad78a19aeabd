from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class AnswerValue(str, Enum):
    YES = "Sim"
    NO = "Não"
    NOT_APPLICABLE = "N/A"


class Criticality(str, Enum):
    EXCELLENT = "ÓTIMO"
    GOOD = "BOM"
    FAIR = "REGULAR"
    CRITICAL = "CRÍTICO"


class Evaluation(BaseModel):
    """One scored quality review ("monitoria") of a customer contact.

    Attributes:
        id (str): Opaque unique identifier.
        created_at (datetime): When the record was built.
        contact_date (date): Date of the monitored contact.
        month (str): Month name, derived from contact_date unless the source provided one.
        week (int): Week of year (1-based, Jan-1 anchored) unless the source provided one.
        year (int): Year, derived from contact_date unless the source provided one.
        answers (dict[str, AnswerValue]): Question id → answer. Unanswered questions are absent.
        section_scores (dict[str, float]): Section id → weighted points.
        final_score (float): Sum of section_scores, within [0, 100].
        date_degraded (bool): True when no source date could be parsed and "today" was used.
    """

    id: str
    created_at: datetime
    contact_date: date
    month: str
    week: int
    year: int

    consultant_name: str = Field(..., min_length=1)
    monitor_name: str | None = None
    supervisor_name: str | None = None

    center: str | None = None
    base: str | None = None
    shift: str | None = None
    cycle: str | None = None
    channel: str | None = None
    contact_link: str | None = None
    source_timestamp: str | None = None

    sale_effective: bool = False
    no_sale_reason: str | None = None

    answers: dict[str, AnswerValue] = Field(default_factory=dict)

    has_critical_failure: bool = False
    critical_failure_reason: str | None = None
    section_scores: dict[str, float] = Field(default_factory=dict)
    final_score: float = Field(0.0, ge=0, le=100)
    criticality: Criticality

    notes: str | None = None
    pros: str | None = None
    cons: str | None = None

    feedback_status: str = "Pendente"
    status: str = "Monitorado"
    acknowledged_at: str | None = None
    ai_feedback: str | None = None

    date_degraded: bool = False

    @model_validator(mode="after")
    def _enforce_critical_failure_override(self) -> "Evaluation":
        if self.has_critical_failure:
            if self.final_score != 0 or any(score != 0 for score in self.section_scores.values()):
                raise ValueError("Evaluations with a critical failure must score exactly 0")
            if self.criticality is not Criticality.CRITICAL:
                raise ValueError("Evaluations with a critical failure must be classified as CRÍTICO")
        return self


class EvaluationSubmission(BaseModel):
    """Already-validated payload of the monitoring form, before scoring."""

    contact_date: date
    consultant_name: str = Field(..., min_length=1)
    monitor_name: str | None = None
    supervisor_name: str | None = None
    center: str | None = None
    base: str | None = None
    shift: str | None = None
    cycle: str | None = None
    channel: str | None = None
    contact_link: str | None = None
    sale_effective: bool = False
    no_sale_reason: str | None = None
    answers: dict[str, AnswerValue] = Field(default_factory=dict)
    has_critical_failure: bool = False
    critical_failure_reason: str | None = None
    notes: str | None = None
    pros: str | None = None
    cons: str | None = None
    ai_feedback: str | None = None
