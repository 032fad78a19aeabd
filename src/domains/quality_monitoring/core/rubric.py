from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

WEIGHT_TOTAL = 100.0
WEIGHT_TOLERANCE = 1e-6

# Canonical metadata keys, in the order the spreadsheet export declares them.
CANONICAL_FIELDS: tuple[str, ...] = (
    "source_timestamp",
    "month",
    "week",
    "year",
    "contact_date",
    "consultant_name",
    "monitor_name",
    "supervisor_name",
    "center",
    "base",
    "shift",
    "cycle",
    "contact_link",
    "channel",
    "sale_effective",
    "no_sale_reason",
    "final_score",
    "criticality",
    "feedback_status",
    "status",
    "acknowledged_at",
    "has_critical_failure",
    "critical_failure_reason",
    "notes",
    "pros",
    "cons",
)


class Question(BaseModel):
    """A single Sim/Não/N/A item of the monitoring form."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)


class Section(BaseModel):
    """A weighted block of questions (e.g. "Negociação", weight 40)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    weight: float = Field(..., ge=0)
    questions: tuple[Question, ...]


class RubricDefinition(BaseModel):
    """Ordered sections whose weights add up to 100. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    name: str = "default"
    sections: tuple[Section, ...]

    @field_validator("sections")
    @classmethod
    def _require_sections(cls, sections: tuple[Section, ...]) -> tuple[Section, ...]:
        if not sections:
            raise ValueError("Rubric must include at least one section")
        return sections

    @model_validator(mode="after")
    def _validate_structure(self) -> "RubricDefinition":
        section_ids = [section.id for section in self.sections]
        if len(section_ids) != len(set(section_ids)):
            raise ValueError(f"Duplicate section ids: {section_ids}")

        question_ids = [question.id for _, question in self.iter_questions()]
        if len(question_ids) != len(set(question_ids)):
            raise ValueError("Question ids must be unique across the rubric")

        if abs(self.total_weight - WEIGHT_TOTAL) > WEIGHT_TOLERANCE:
            raise ValueError(f"Section weights must sum to {WEIGHT_TOTAL:g}, got {self.total_weight:g}")
        return self

    def iter_questions(self) -> Iterator[tuple[Section, Question]]:
        """Yields (section, question) pairs in rubric order."""
        for section in self.sections:
            for question in section.questions:
                yield section, question

    @property
    def total_weight(self) -> float:
        return sum(section.weight for section in self.sections)


class HeaderTable(BaseModel):
    """Maps canonical field keys to the column labels used by the spreadsheet.

    The insertion order of ``labels`` is the column order used on export.
    """

    model_config = ConfigDict(frozen=True)

    labels: dict[str, str]

    @field_validator("labels")
    @classmethod
    def _validate_labels(cls, labels: dict[str, str]) -> dict[str, str]:
        unknown = [key for key in labels if key not in CANONICAL_FIELDS]
        if unknown:
            raise ValueError(f"Unknown canonical keys: {unknown}")
        empty = [key for key, label in labels.items() if not label.strip()]
        if empty:
            raise ValueError(f"Empty header labels for keys: {empty}")
        return labels
