from datetime import datetime
from pathlib import Path
from typing import Iterable

from utils.logging.logging_manager import LogManager

from ..core.action_item import ActionItem, ActionItemStatus
from ..core.evaluation import Evaluation
from ..core.import_result import BuiltRecord, ImportResult, RowWarningKind
from ..processors.evaluation_processor import EvaluationProcessor
from .action_plan_engine import ActionPlanEngine


class EvaluationImportService:
    """Runs a batch import: build each row, score it, and derive action items.

    Rows are handled strictly in file order. Each evaluation is checked against the
    prior history plus every evaluation imported before it in the same batch, so
    recurrences inside one file are detected. One reference instant is used for the
    whole batch: rows without a usable date are dated with it, and it decides the
    current month. Items triggered by evaluations outside the current month are
    stored as already done.
    """

    def __init__(self, processor: EvaluationProcessor, action_plan_engine: ActionPlanEngine):
        self.processor = processor
        self.action_plan_engine = action_plan_engine
        self.logger = LogManager.get_instance().get_logger("EvaluationImportService")

    def import_file(
        self, file_path: str | Path, history: Iterable[Evaluation] = (), now: datetime | None = None
    ) -> ImportResult:
        """Imports a spreadsheet export from disk.

        Raises:
            FileNotFoundError: If the file does not exist.
            ParseError: If the file is not decodable text.
        """
        now = now or self.processor.clock()
        return self._run(self.processor.process_file(file_path, now=now), history, now)

    def import_content(
        self, content: str | bytes, history: Iterable[Evaluation] = (), now: datetime | None = None
    ) -> ImportResult:
        rows = self.processor.tokenizer.tokenize(content)
        return self.import_rows(rows, history, now)

    def import_rows(
        self, rows: list[list[str]], history: Iterable[Evaluation] = (), now: datetime | None = None
    ) -> ImportResult:
        """Imports already tokenized rows; the first row is the header."""
        now = now or self.processor.clock()
        return self._run(self.processor.process_sheet(rows, now=now), history, now)

    def register_submission(
        self, evaluation: Evaluation, history: Iterable[Evaluation] = (), now: datetime | None = None
    ) -> list[ActionItem]:
        """Action items for a single freshly submitted evaluation. All are Pending."""
        return self.action_plan_engine.generate(evaluation, list(history), now)

    def _run(self, built_records: list[BuiltRecord], history: Iterable[Evaluation], now: datetime) -> ImportResult:
        current_period = (now.year, now.month)
        cumulative = list(history)
        result = ImportResult()

        for built in built_records:
            result.warnings.extend(built.warnings)
            evaluation = built.evaluation
            if evaluation is None:
                result.skipped_rows.append(built.row_index)
                continue

            items = self.action_plan_engine.generate(evaluation, cumulative, now)
            if (evaluation.contact_date.year, evaluation.contact_date.month) != current_period:
                items = [item.with_status(ActionItemStatus.DONE) for item in items]

            result.evaluations.append(evaluation)
            result.action_items.extend(items)
            cumulative.append(evaluation)

        degraded = sum(1 for warning in result.warnings if warning.kind is RowWarningKind.DATE_FALLBACK)
        self.logger.info(
            f"Imported {len(result.evaluations)} evaluations ({len(result.skipped_rows)} skipped, "
            f"{degraded} with fallback date); {len(result.action_items)} action items, "
            f"{len(result.active_items)} active"
        )
        return result
