import os
import tempfile
from datetime import date, datetime
from pathlib import Path

os.environ.setdefault("LOG_OUTPUT", "console")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="qatoolkit-logs-"))

import log_config  # noqa: E402,F401  (initializes the LogManager singleton)
import pytest  # noqa: E402

from domains.quality_monitoring.core.config import Config  # noqa: E402
from domains.quality_monitoring.core.evaluation import AnswerValue, Criticality, Evaluation  # noqa: E402
from domains.quality_monitoring.core.loaders import load_header_table, load_rubric  # noqa: E402
from domains.quality_monitoring.core.rubric import HeaderTable, RubricDefinition  # noqa: E402

CONFIG_DIR = Path(__file__).resolve().parents[1] / "src" / "domains" / "quality_monitoring" / "config"
NOW = datetime(2024, 3, 20, 9, 30, 0)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def rubric() -> RubricDefinition:
    return load_rubric(str(CONFIG_DIR / "rubric.json"))


@pytest.fixture
def header_table() -> HeaderTable:
    return load_header_table(str(CONFIG_DIR / "header_map.json"))


@pytest.fixture
def small_rubric() -> RubricDefinition:
    """Two sections, weights 60/40: A has three questions, B has two."""
    return RubricDefinition.model_validate(
        {
            "name": "small",
            "sections": [
                {
                    "id": "a",
                    "title": "Abordagem",
                    "weight": 60,
                    "questions": [
                        {"id": "a1", "text": "O consultor se apresentou corretamente ao cliente"},
                        {"id": "a2", "text": "Ele confirmou os dados cadastrais do cliente"},
                        {"id": "a3", "text": "Ele explicou o objetivo da ligação"},
                    ],
                },
                {
                    "id": "b",
                    "title": "Fechamento",
                    "weight": 40,
                    "questions": [
                        {"id": "b1", "text": "O consultor resumiu os próximos passos"},
                        {"id": "b2", "text": "Ele agradeceu o contato de forma cordial"},
                    ],
                },
            ],
        }
    )


@pytest.fixture
def small_header_table() -> HeaderTable:
    return HeaderTable(
        labels={
            "source_timestamp": "Carimbo de data/hora",
            "contact_date": "Data do Contato",
            "week": "Semana",
            "year": "Ano",
            "consultant_name": "Nome do consultor",
            "supervisor_name": "Supervisor Responsável:",
            "sale_effective": "A venda foi efetivada?",
            "no_sale_reason": "Motivo da não venda",
            "final_score": "Nota final",
            "status": "Status da Análise",
            "has_critical_failure": "Falha Grave",
            "critical_failure_reason": "Motivo Falha Grave",
        }
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_evaluation(
    evaluation_id: str = "ev-1",
    consultant_name: str = "Ana Souza",
    contact_date: date = date(2024, 3, 15),
    answers: dict | None = None,
    section_scores: dict | None = None,
    final_score: float = 100.0,
    has_critical_failure: bool = False,
    **overrides,
) -> Evaluation:
    """Builds an Evaluation directly; scores are taken as given."""
    if has_critical_failure:
        criticality = Criticality.CRITICAL
    elif final_score >= 90:
        criticality = Criticality.EXCELLENT
    elif final_score >= 80:
        criticality = Criticality.GOOD
    elif final_score >= 70:
        criticality = Criticality.FAIR
    else:
        criticality = Criticality.CRITICAL
    data = {
        "id": evaluation_id,
        "created_at": NOW,
        "contact_date": contact_date,
        "month": "março",
        "week": 11,
        "year": contact_date.year,
        "consultant_name": consultant_name,
        "answers": {key: AnswerValue(value) for key, value in (answers or {}).items()},
        "section_scores": section_scores if section_scores is not None else {"a": 60.0, "b": 40.0},
        "final_score": final_score,
        "has_critical_failure": has_critical_failure,
        "criticality": criticality,
    }
    data.update(overrides)
    return Evaluation(**data)
