from enum import Enum

from pydantic import BaseModel, Field

from .action_item import ActionItem, ActionItemStatus
from .evaluation import Evaluation


class RowWarningKind(str, Enum):
    SKIPPED_ROW = "SKIPPED_ROW"
    DATE_FALLBACK = "DATE_FALLBACK"
    INVALID_SCORE = "INVALID_SCORE"
    UNKNOWN_ANSWER = "UNKNOWN_ANSWER"
    MISSING_CONSULTANT = "MISSING_CONSULTANT"
    SCORE_MISMATCH = "SCORE_MISMATCH"
    INVALID_DATE = "INVALID_DATE"
    INVALID_WEEK_YEAR = "INVALID_WEEK_YEAR"


class RowWarning(BaseModel):
    """Non-fatal problem found while importing one row.

    ``row_index`` counts tokenized rows, the header being row 0.
    """

    row_index: int
    kind: RowWarningKind
    message: str


class BuiltRecord(BaseModel):
    """Outcome of building one row: an evaluation, or None when the row was skipped."""

    row_index: int
    evaluation: Evaluation | None = None
    warnings: list[RowWarning] = Field(default_factory=list)


class ImportResult(BaseModel):
    evaluations: list[Evaluation] = Field(default_factory=list)
    action_items: list[ActionItem] = Field(default_factory=list)
    warnings: list[RowWarning] = Field(default_factory=list)
    skipped_rows: list[int] = Field(default_factory=list)

    @property
    def degraded_evaluations(self) -> list[Evaluation]:
        return [evaluation for evaluation in self.evaluations if evaluation.date_degraded]

    @property
    def active_items(self) -> list[ActionItem]:
        return [item for item in self.action_items if item.status is ActionItemStatus.PENDING]
