import json
import os
from argparse import Namespace

from domains.quality_monitoring.evaluation_summary_command import EvaluationSummaryCommand
from domains.quality_monitoring.export_evaluations_command import ExportEvaluationsCommand
from domains.quality_monitoring.import_evaluations_command import ImportEvaluationsCommand
from utils.command.command_manager import CommandManager

SRC_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")

CSV = (
    "Carimbo de data/hora;Data do Contato;Nome do consultor;A venda foi efetivada?;"
    "O consultor inicia a ligação com uma saudação;Falha Grave\n"
    "15/03/2024 10:00:00;15/03/2024;Ana Souza;Não;Não;Não\n"
    "02/01/2024 10:00:00;;Bruno Lima;Sim;Sim;Sim\n"
)


def test_commands_are_discovered_under_the_domain():
    manager = CommandManager(os.path.join(SRC_DIR, "domains"))
    manager.load_commands()
    assert set(manager.hierarchy["quality_monitoring"]) == {
        "import_evaluations",
        "export_evaluations",
        "evaluation_summary",
        "generate_feedback",
    }
    parser = manager.build_parser()
    args = parser.parse_args(
        ["quality_monitoring", "import_evaluations", "--input_file", "a.csv", "--output", "b.json"]
    )
    assert args.func is ImportEvaluationsCommand.main


def test_import_export_and_summary_flow(tmp_path):
    source = tmp_path / "monitorias.csv"
    source.write_text(CSV, encoding="utf-8")
    report = tmp_path / "report.json"

    ImportEvaluationsCommand.main(
        Namespace(input_file=str(source), output=str(report), history=None, today="2024-03-20")
    )
    data = json.loads(report.read_text(encoding="utf-8"))
    assert [e["consultant_name"] for e in data["evaluations"]] == ["Ana Souza", "Bruno Lima"]
    assert data["evaluations"][1]["has_critical_failure"] is True
    assert data["evaluations"][1]["contact_date"] == "2024-01-02"
    statuses = {item["origin_evaluation_id"]: item["status"] for item in data["action_items"]}
    assert statuses[data["evaluations"][0]["id"]] == "Pendente"
    assert statuses[data["evaluations"][1]["id"]] == "Concluído"

    exported = tmp_path / "export.csv"
    ExportEvaluationsCommand.main(Namespace(input_file=str(report), output=str(exported)))
    assert exported.read_bytes().startswith("\ufeff".encode("utf-8"))

    summary_path = tmp_path / "summary.json"
    EvaluationSummaryCommand.main(Namespace(input_file=str(report), output=str(summary_path), consultant=None))
    summary = json.loads(summary_path.read_text(encoding="utf-8"))
    assert summary["total_evaluations"] == 2
    assert summary["critical_failure_rate"] == 50.0
