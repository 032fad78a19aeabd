from datetime import date

import pytest

from conftest import make_evaluation
from domains.quality_monitoring.services.monitoring_statistics import NO_SUPERVISOR, MonitoringStatistics

GENERIC_REASON = "Desinteresse genérico (resposta vaga)"


@pytest.fixture
def statistics(small_rubric) -> MonitoringStatistics:
    return MonitoringStatistics(small_rubric)


@pytest.fixture
def evaluations():
    return [
        make_evaluation(
            "ev-1",
            consultant_name="Ana Souza",
            supervisor_name="Carla Dias",
            contact_date=date(2024, 2, 10),
            final_score=100.0,
            section_scores={"a": 60.0, "b": 40.0},
            answers={"a1": "Sim", "a2": "N/A", "b1": "Sim"},
            sale_effective=True,
        ),
        make_evaluation(
            "ev-2",
            consultant_name="Ana Souza",
            supervisor_name="Carla Dias",
            contact_date=date(2024, 3, 5),
            final_score=60.0,
            section_scores={"a": 60.0, "b": 0.0},
            answers={"a1": "Sim", "b1": "Não", "b2": "Não"},
            no_sale_reason=GENERIC_REASON,
        ),
        make_evaluation(
            "ev-3",
            consultant_name="Bruno Lima",
            contact_date=date(2024, 3, 12),
            final_score=0.0,
            section_scores={"a": 0.0, "b": 0.0},
            answers={"b1": "Não"},
            has_critical_failure=True,
            critical_failure_reason="Informação falsa",
            no_sale_reason="Preço",
        ),
        make_evaluation(
            "ev-4",
            consultant_name="Bruno Lima",
            contact_date=date(2024, 3, 20),
            final_score=80.0,
            section_scores={"a": 40.0, "b": 40.0},
            no_sale_reason=GENERIC_REASON,
        ),
    ]


def test_overall_indicators(statistics, evaluations):
    summary = statistics.summarize(evaluations)
    assert summary.total_evaluations == 4
    assert summary.average_score == 60.0
    assert summary.critical_failure_rate == 25.0
    assert summary.conversion_rate == 25.0


def test_section_attainment_is_percentage_of_weight(statistics, evaluations):
    summary = statistics.summarize(evaluations)
    assert summary.section_attainment == {"a": pytest.approx(66.67), "b": 50.0}


def test_criticality_distribution_lists_every_label(statistics, evaluations):
    summary = statistics.summarize(evaluations)
    assert summary.criticality_distribution == {"ÓTIMO": 1, "BOM": 1, "REGULAR": 0, "CRÍTICO": 2}


def test_no_sale_reasons_are_ranked(statistics, evaluations):
    reasons = statistics.summarize(evaluations).no_sale_reasons
    assert [(r.reason, r.count) for r in reasons] == [(GENERIC_REASON, 2), ("Preço", 1)]


def test_question_failures_and_not_applicable_rate(statistics, evaluations):
    summary = statistics.summarize(evaluations)
    assert [(f.question_id, f.count) for f in summary.question_failures] == [("b1", 2), ("b2", 1)]
    assert summary.question_failures[0].section_title == "Fechamento"
    # 7 answers given, one N/A
    assert summary.not_applicable_rate == pytest.approx(14.29)


def test_consultant_and_supervisor_rankings(statistics, evaluations):
    summary = statistics.summarize(evaluations)
    assert [(g.name, g.count, g.average_score) for g in summary.consultants] == [
        ("Ana Souza", 2, 80.0),
        ("Bruno Lima", 2, 40.0),
    ]
    assert [(g.name, g.count) for g in summary.supervisors] == [("Carla Dias", 2), (NO_SUPERVISOR, 2)]


def test_monthly_evolution_is_chronological(statistics, evaluations):
    evolution = statistics.summarize(evaluations).monthly_evolution
    assert [(p.period, p.count, p.average_score) for p in evolution] == [
        ("2024-02", 1, 100.0),
        ("2024-03", 3, pytest.approx(46.67)),
    ]


def test_empty_input_yields_zeroed_summary(statistics):
    summary = statistics.summarize([])
    assert summary.total_evaluations == 0
    assert summary.average_score == 0.0
    assert summary.criticality_distribution["CRÍTICO"] == 0
    assert summary.consultants == []
