from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable

from utils.file_manager import FileManager
from utils.logging.logging_manager import LogManager

from ..core.evaluation import Evaluation
from ..core.rubric import HeaderTable, RubricDefinition
from ..processors.csv_tokenizer import BOM

EXPORT_DELIMITER = ";"
CHARACTERS_REQUIRING_QUOTES = (",", '"', "\n", ";")
BOOLEAN_FIELDS = ("sale_effective", "has_critical_failure")


class EvaluationCsvExporter:
    """Writes evaluations as a semicolon-separated spreadsheet export.

    Columns are the header-table labels in declaration order followed by one column
    per rubric question in rubric order, so the result can be imported back with the
    same header table.
    """

    def __init__(self, rubric: RubricDefinition, header_table: HeaderTable):
        self.rubric = rubric
        self.header_table = header_table
        self.logger = LogManager.get_instance().get_logger("EvaluationCsvExporter")

    def headers(self) -> list[str]:
        return [*self.header_table.labels.values(), *(q.text for _, q in self.rubric.iter_questions())]

    def export(self, evaluations: Iterable[Evaluation]) -> str:
        lines = [self._join(self.headers())]
        lines.extend(self._join(self._row(evaluation)) for evaluation in evaluations)
        return BOM + "\n".join(lines)

    def export_to_file(self, evaluations: Iterable[Evaluation], output_path: str) -> str:
        evaluations = list(evaluations)
        FileManager.write_file(output_path, self.export(evaluations))
        self.logger.info(f"Exported {len(evaluations)} evaluations to {output_path}")
        return output_path

    def _row(self, evaluation: Evaluation) -> list[str]:
        values = [self._format_field(key, getattr(evaluation, key, None)) for key in self.header_table.labels]
        # Unanswered questions stay empty so a re-import does not invent N/A answers.
        values.extend(
            evaluation.answers[q.id].value if q.id in evaluation.answers else ""
            for _, q in self.rubric.iter_questions()
        )
        return values

    @staticmethod
    def _format_field(key: str, value: Any) -> str:
        if key in BOOLEAN_FIELDS:
            return "Sim" if value else "Não"
        if key == "status" and not value:
            return "Monitorado"
        if value is None:
            return ""
        if key == "final_score":
            return f"{value:.2f}"
        if isinstance(value, Enum):
            return str(value.value)
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return str(value)

    @staticmethod
    def _escape(value: str) -> str:
        if any(character in value for character in CHARACTERS_REQUIRING_QUOTES):
            return '"' + value.replace('"', '""') + '"'
        return value

    def _join(self, values: list[str]) -> str:
        return EXPORT_DELIMITER.join(self._escape(value) for value in values)
