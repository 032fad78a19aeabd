"""Tests for the record builder.

Covers:
- Skip rule for short rows
- Answer token mapping and unknown tokens
- Date priority chain, unparsable values and fallback warning
- Week/year parsing and derivation
- Booleans, score parsing, recomputation and mismatch warnings
- Workflow status filtering and defaults
- Fresh form submissions
"""

import itertools
from datetime import date, datetime

import pytest

from domains.quality_monitoring.core.evaluation import AnswerValue, Criticality, EvaluationSubmission
from domains.quality_monitoring.core.import_result import RowWarningKind
from domains.quality_monitoring.processors.evaluation_processor import UNKNOWN_CONSULTANT, EvaluationProcessor

NOW = datetime(2024, 3, 20, 9, 30, 0)

HEADER = [
    "Carimbo de data/hora",
    "Data do Contato",
    "Semana",
    "Ano",
    "Nome do consultor",
    "Supervisor Responsável:",
    "A venda foi efetivada?",
    "Motivo da não venda",
    "Nota final",
    "Status da Análise",
    "Falha Grave",
    "Motivo Falha Grave",
    "O consultor se apresentou corretamente ao cliente",
    "Ele confirmou os dados cadastrais do cliente",
    "Ele explicou o objetivo da ligação",
    "O consultor resumiu os próximos passos",
    "Ele agradeceu o contato de forma cordial",
]


def _row(**values) -> list[str]:
    """Data row for HEADER; keys are canonical names or question ids."""
    columns = [
        "source_timestamp",
        "contact_date",
        "week",
        "year",
        "consultant_name",
        "supervisor_name",
        "sale_effective",
        "no_sale_reason",
        "final_score",
        "status",
        "has_critical_failure",
        "critical_failure_reason",
        "a1",
        "a2",
        "a3",
        "b1",
        "b2",
    ]
    defaults = {"consultant_name": "Ana Souza", "contact_date": "15/03/2024"}
    defaults.update(values)
    return [defaults.get(column, "") for column in columns]


@pytest.fixture
def processor(small_rubric, small_header_table, config) -> EvaluationProcessor:
    counter = itertools.count(1)
    return EvaluationProcessor(
        small_rubric,
        small_header_table,
        config=config,
        id_factory=lambda: f"ev-{next(counter)}",
        clock=lambda: NOW,
    )


@pytest.fixture
def resolved(processor):
    return processor.resolve_headers(HEADER)


def _kinds(built) -> list[RowWarningKind]:
    return [warning.kind for warning in built.warnings]


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------

def test_short_row_is_skipped_with_warning(processor, resolved):
    built = processor.build_record(["Ana", "15/03/2024"], 4, resolved)
    assert built.evaluation is None
    assert _kinds(built) == [RowWarningKind.SKIPPED_ROW]
    assert built.warnings[0].row_index == 4


def test_row_with_half_the_columns_is_kept(processor, resolved):
    row = _row()[:9]  # 9 of 17 fields, not below half
    built = processor.build_record(row, 1, resolved)
    assert built.evaluation is not None


def test_process_sheet_numbers_rows_from_header(processor):
    built = processor.process_sheet([HEADER, _row(), ["x"]])
    assert [record.row_index for record in built] == [1, 2]
    assert built[1].evaluation is None


def test_sheet_without_data_rows_is_empty(processor):
    assert processor.process_sheet([HEADER]) == []


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------

def test_answer_tokens_are_mapped(processor, resolved):
    built = processor.build_record(
        _row(a1="Sim", a2="Não", a3="N/A", b1="Não se aplica"), 1, resolved
    )
    assert built.evaluation.answers == {
        "a1": AnswerValue.YES,
        "a2": AnswerValue.NO,
        "a3": AnswerValue.NOT_APPLICABLE,
        "b1": AnswerValue.NOT_APPLICABLE,
    }
    assert "b2" not in built.evaluation.answers


def test_unknown_answer_is_left_unanswered_with_warning(processor, resolved):
    built = processor.build_record(_row(a1="sim", a2="Talvez"), 1, resolved)
    assert built.evaluation.answers == {}
    assert _kinds(built).count(RowWarningKind.UNKNOWN_ANSWER) == 2


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def test_contact_date_has_priority(processor, resolved):
    built = processor.build_record(
        _row(contact_date="10/03/2024", source_timestamp="2024-03-12 08:00:00"), 1, resolved
    )
    assert built.evaluation.contact_date == date(2024, 3, 10)
    assert built.evaluation.date_degraded is False


def test_timestamp_used_when_contact_date_invalid(processor, resolved):
    built = processor.build_record(
        _row(contact_date="03-15-2024", source_timestamp="12/03/2024 08:00:00"), 1, resolved
    )
    assert built.evaluation.contact_date == date(2024, 3, 12)
    assert built.evaluation.date_degraded is False
    assert _kinds(built) == [RowWarningKind.INVALID_DATE]
    assert built.warnings[0].row_index == 1
    assert "03-15-2024" in built.warnings[0].message


def test_today_used_as_last_resort_with_warning(processor, resolved):
    built = processor.build_record(_row(contact_date="ontem", source_timestamp=""), 1, resolved)
    assert built.evaluation.contact_date == NOW.date()
    assert built.evaluation.date_degraded is True
    assert _kinds(built) == [RowWarningKind.INVALID_DATE, RowWarningKind.DATE_FALLBACK]


def test_temporal_metadata_is_derived_from_date(processor, resolved):
    evaluation = processor.build_record(_row(contact_date="15/03/2024"), 1, resolved).evaluation
    assert (evaluation.month, evaluation.week, evaluation.year) == ("março", 11, 2024)


def test_source_week_and_year_are_kept_after_stripping(processor, resolved):
    evaluation = processor.build_record(_row(week="Semana 09", year="2023."), 1, resolved).evaluation
    assert evaluation.week == 9
    assert evaluation.year == 2023


def test_zero_week_is_derived_and_unparsable_year_is_flagged(processor, resolved):
    built = processor.build_record(_row(week="0", year="abc"), 1, resolved)
    assert built.evaluation.week == 11
    assert built.evaluation.year == 2024
    assert _kinds(built) == [RowWarningKind.INVALID_WEEK_YEAR]


def test_empty_dates_fall_back_without_parse_warnings(processor, resolved):
    built = processor.build_record(_row(contact_date="", source_timestamp=""), 1, resolved)
    assert built.evaluation.contact_date == NOW.date()
    assert _kinds(built) == [RowWarningKind.DATE_FALLBACK]


def test_batch_reference_overrides_processor_clock(processor, resolved):
    reference = datetime(2024, 1, 5, 8, 0, 0)
    built = processor.build_record(_row(contact_date="", source_timestamp=""), 1, resolved, reference)
    assert built.evaluation.contact_date == reference.date()
    assert built.evaluation.created_at == reference


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

def test_missing_consultant_gets_placeholder(processor, resolved):
    built = processor.build_record(_row(consultant_name=""), 1, resolved)
    assert built.evaluation.consultant_name == UNKNOWN_CONSULTANT
    assert RowWarningKind.MISSING_CONSULTANT in _kinds(built)


def test_booleans_are_true_only_for_sim(processor, resolved):
    evaluation = processor.build_record(
        _row(sale_effective="SIM", has_critical_failure="yes"), 1, resolved
    ).evaluation
    assert evaluation.sale_effective is True
    assert evaluation.has_critical_failure is False


def test_scores_are_recomputed_from_answers(processor, resolved):
    row = _row(a1="Sim", a2="Sim", a3="Sim", b1="Não", b2="Não")
    evaluation = processor.build_record(row, 1, resolved).evaluation
    assert evaluation.section_scores == {"a": 60.0, "b": 0.0}
    assert evaluation.final_score == 60.0
    assert evaluation.criticality is Criticality.CRITICAL


def test_matching_source_score_with_decimal_comma(processor, resolved):
    row = _row(a1="Sim", a2="Sim", a3="Sim", b1="Sim", b2="Não", final_score="80,00")
    built = processor.build_record(row, 1, resolved)
    assert built.evaluation.final_score == 80.0
    assert built.warnings == []


def test_mismatching_source_score_is_flagged(processor, resolved):
    row = _row(a1="Sim", a2="Sim", a3="Sim", b1="Sim", b2="Sim", final_score="75,5")
    built = processor.build_record(row, 1, resolved)
    assert built.evaluation.final_score == 100.0
    assert _kinds(built) == [RowWarningKind.SCORE_MISMATCH]


def test_unparsable_score_is_flagged(processor, resolved):
    built = processor.build_record(_row(a1="Sim", final_score="noventa"), 1, resolved)
    assert RowWarningKind.INVALID_SCORE in _kinds(built)
    assert built.evaluation.final_score == 60.0


def test_critical_failure_zeroes_scores(processor, resolved):
    row = _row(a1="Sim", a2="Sim", a3="Sim", b1="Sim", b2="Sim", has_critical_failure="Sim",
               critical_failure_reason="Informação falsa")
    evaluation = processor.build_record(row, 1, resolved).evaluation
    assert evaluation.final_score == 0
    assert set(evaluation.section_scores.values()) == {0.0}
    assert evaluation.criticality is Criticality.CRITICAL
    assert evaluation.critical_failure_reason == "Informação falsa"


def test_unknown_status_falls_back_to_default(processor, resolved):
    assert processor.build_record(_row(status="Revisado"), 1, resolved).evaluation.status == "Revisado"
    assert processor.build_record(_row(status="Arquivado"), 1, resolved).evaluation.status == "Monitorado"


def test_empty_text_fields_become_none(processor, resolved):
    evaluation = processor.build_record(_row(supervisor_name=""), 1, resolved).evaluation
    assert evaluation.supervisor_name is None
    assert evaluation.feedback_status == "Pendente"


def test_process_file_reads_semicolon_export(processor, tmp_path):
    path = tmp_path / "monitorias.csv"
    lines = [";".join(HEADER), ";".join(_row(a1="Sim", a2="Sim", a3="Sim", b1="Sim", b2="Sim"))]
    path.write_bytes(("\ufeff" + "\r\n".join(lines)).encode("utf-8"))
    built = processor.process_file(path)
    assert len(built) == 1
    assert built[0].evaluation.final_score == 100.0


def test_process_file_rejects_unknown_extension(processor, tmp_path):
    path = tmp_path / "monitorias.xlsx"
    path.write_bytes(b"")
    with pytest.raises(ValueError):
        processor.process_file(path)


# ---------------------------------------------------------------------------
# Fresh submissions
# ---------------------------------------------------------------------------

def test_submission_is_scored_and_dated(processor):
    submission = EvaluationSubmission(
        contact_date=date(2024, 3, 15),
        consultant_name="Bruno Lima",
        sale_effective=True,
        no_sale_reason="Preço",
        answers={"a1": "Sim", "a2": "Sim", "a3": "Sim", "b1": "Sim", "b2": "Não"},
        critical_failure_reason="Sem motivo",
    )
    evaluation = processor.build_submission(submission)
    assert evaluation.id == "ev-1"
    assert evaluation.final_score == 80.0
    assert evaluation.criticality is Criticality.GOOD
    assert (evaluation.month, evaluation.week, evaluation.year) == ("março", 11, 2024)
    assert evaluation.no_sale_reason is None
    assert evaluation.critical_failure_reason is None
    assert evaluation.status == "Monitorado"
