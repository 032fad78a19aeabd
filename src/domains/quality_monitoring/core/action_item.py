from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class ActionItemStatus(str, Enum):
    PENDING = "Pendente"
    IN_PROGRESS = "Em Andamento"
    DONE = "Concluído"


class ActionItemPriority(str, Enum):
    HIGH = "Alta"
    MEDIUM = "Média"
    LOW = "Baixa"


class Responsible(str, Enum):
    CONSULTANT = "Consultor"
    SUPERVISOR = "Supervisor"


class ActionItemKind(str, Enum):
    DEVELOPMENT_PLAN = "PDI"
    FOLLOW_UP = "FollowUp"


class ActionItem(BaseModel):
    """A corrective task (PDI) owned by the consultant it targets."""

    id: str
    consultant_name: str = Field(..., min_length=1)
    title: str
    action_plan: str
    deadline: date
    status: ActionItemStatus = ActionItemStatus.PENDING
    created_at: datetime
    priority: ActionItemPriority
    responsible: Responsible
    origin_evaluation_id: str | None = None
    kind: ActionItemKind = ActionItemKind.DEVELOPMENT_PLAN

    def with_status(self, status: ActionItemStatus) -> "ActionItem":
        """Returns a copy of the item in the given status; the original is left untouched."""
        return self.model_copy(update={"status": status})
