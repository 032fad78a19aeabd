import math
import re
from datetime import date, datetime
from pathlib import Path
from typing import Callable
from uuid import uuid4

from utils.base_processor import BaseProcessor
from utils.file_manager import FileManager

from ..core.config import Config
from ..core.evaluation import AnswerValue, Evaluation, EvaluationSubmission
from ..core.import_result import BuiltRecord, RowWarning, RowWarningKind
from ..core.rubric import HeaderTable, RubricDefinition
from ..services.scoring_engine import ScoringEngine
from .csv_tokenizer import CsvTokenizer
from .date_normalizer import DateNormalizer
from .header_resolver import HeaderResolver, ResolvedHeaders

UNKNOWN_CONSULTANT = "Consultor Desconhecido"
SCORE_MISMATCH_TOLERANCE = 0.01

ANSWER_TOKENS = {
    "Sim": AnswerValue.YES,
    "Não": AnswerValue.NO,
    "N/A": AnswerValue.NOT_APPLICABLE,
    "Não se aplica": AnswerValue.NOT_APPLICABLE,
}

# Free-text fields copied as-is (empty → None).
TEXT_FIELDS = (
    "monitor_name",
    "supervisor_name",
    "center",
    "base",
    "shift",
    "cycle",
    "channel",
    "contact_link",
    "source_timestamp",
    "no_sale_reason",
    "critical_failure_reason",
    "acknowledged_at",
    "notes",
    "pros",
    "cons",
)


class EvaluationProcessor(BaseProcessor):
    """Builds scored Evaluation records from tokenized spreadsheet rows.

    Rows are never rejected for bad values: every fallback (unknown consultant,
    today's date, score 0) is applied and reported as a RowWarning on the row.
    """

    def __init__(
        self,
        rubric: RubricDefinition,
        header_table: HeaderTable,
        config: Config | None = None,
        scoring_engine: ScoringEngine | None = None,
        tokenizer: CsvTokenizer | None = None,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        super().__init__(allowed_extensions=[".csv", ".txt", ".tsv"])
        self.rubric = rubric
        self.config = config or Config()
        self.scoring_engine = scoring_engine or ScoringEngine(rubric)
        self.tokenizer = tokenizer or CsvTokenizer(self.config.import_encodings)
        self.header_resolver = HeaderResolver(header_table, rubric)
        self.id_factory = id_factory or (lambda: uuid4().hex)
        self.clock = clock or datetime.now

    def resolve_headers(self, header_row: list[str]) -> ResolvedHeaders:
        return self.header_resolver.resolve(header_row)

    def process_file(self, file_path: str | Path, now: datetime | None = None, **kwargs) -> list[BuiltRecord]:
        """Reads, tokenizes and builds every data row of a spreadsheet export.

        Args:
            file_path (Union[str, Path]): CSV-like export.
            now (datetime): Reference instant for the batch; read from the clock when omitted.

        Returns:
            list[BuiltRecord]: One entry per data row, in file order.

        Raises:
            FileNotFoundError: If the file does not exist.
            ParseError: If the content cannot be decoded as text.
        """
        path = self.validate_input(file_path)
        self.logger.info(f"Reading evaluations from {path}")
        rows = self.tokenizer.tokenize(FileManager.read_bytes(str(path)))
        return self.process_sheet(rows, now=now)

    def process_sheet(
        self, sheet_data: list[list[str]], now: datetime | None = None, **kwargs
    ) -> list[BuiltRecord]:
        """Builds records from tokenized rows; the first row is the header.

        Every row of the batch shares one reference instant, used for fallback dates.
        """
        if len(sheet_data) < 2:
            self.logger.info("No data rows found")
            return []

        now = now or self.clock()
        resolved = self.resolve_headers(sheet_data[0])
        return [
            self.build_record(row, row_index, resolved, now)
            for row_index, row in enumerate(sheet_data[1:], start=1)
        ]

    def build_record(
        self, row: list[str], row_index: int, resolved: ResolvedHeaders, now: datetime | None = None
    ) -> BuiltRecord:
        """Builds one Evaluation from a data row, or skips the row when it is too short."""
        now = now or self.clock()
        built = BuiltRecord(row_index=row_index)

        if len(row) < resolved.header_count / 2:
            self._warn(
                built,
                RowWarningKind.SKIPPED_ROW,
                f"Row has {len(row)} fields for {resolved.header_count} headers",
            )
            return built

        values = {
            key: row[position].strip()
            for key, position in resolved.field_positions.items()
            if position < len(row)
        }

        def text(key: str) -> str | None:
            return values.get(key) or None

        answers = self._extract_answers(row, resolved, built)

        consultant_name = text("consultant_name")
        if not consultant_name:
            consultant_name = UNKNOWN_CONSULTANT
            self._warn(built, RowWarningKind.MISSING_CONSULTANT, f"Consultant name missing, using '{UNKNOWN_CONSULTANT}'")

        contact_date = self._parse_date(text("contact_date"), "contact date", built)
        if contact_date is None:
            contact_date = self._parse_date(text("source_timestamp"), "timestamp", built)
        date_degraded = contact_date is None
        if date_degraded:
            contact_date = now.date()
            self._warn(
                built,
                RowWarningKind.DATE_FALLBACK,
                f"No parsable date (contact date: {text('contact_date')!r}, "
                f"timestamp: {text('source_timestamp')!r}); using {contact_date.isoformat()}",
            )

        has_critical_failure = self._is_yes(values.get("has_critical_failure"))
        source_score = self._parse_score(values.get("final_score"), built)
        scores = self.scoring_engine.score(answers, has_critical_failure)
        if source_score and abs(source_score - scores.total) > SCORE_MISMATCH_TOLERANCE:
            self._warn(
                built,
                RowWarningKind.SCORE_MISMATCH,
                f"Source score {source_score:g} differs from computed {scores.total:.2f}; using computed",
            )

        status = values.get("status")
        if status not in self.config.workflow_statuses:
            status = self.config.default_workflow_status

        built.evaluation = Evaluation(
            id=self.id_factory(),
            created_at=now,
            contact_date=contact_date,
            month=text("month") or DateNormalizer.month_name(contact_date),
            week=self._parse_period(values.get("week"), "week", built) or DateNormalizer.week_number(contact_date),
            year=self._parse_period(values.get("year"), "year", built) or contact_date.year,
            consultant_name=consultant_name,
            sale_effective=self._is_yes(values.get("sale_effective")),
            answers=answers,
            has_critical_failure=has_critical_failure,
            section_scores=scores.per_section,
            final_score=scores.total,
            criticality=ScoringEngine.classify(scores.total, has_critical_failure),
            feedback_status=text("feedback_status") or self.config.default_feedback_status,
            status=status,
            date_degraded=date_degraded,
            **{key: text(key) for key in TEXT_FIELDS},
        )
        self.logger.debug(
            f"Row {row_index}: {consultant_name} scored {scores.total:.2f} "
            f"({len(answers)} answers, critical failure: {has_critical_failure})"
        )
        return built

    def build_submission(self, submission: EvaluationSubmission) -> Evaluation:
        """Scores a validated form submission and derives its temporal metadata."""
        scores = self.scoring_engine.score(submission.answers, submission.has_critical_failure)
        data = submission.model_dump()
        if not submission.has_critical_failure:
            data["critical_failure_reason"] = None
        if submission.sale_effective:
            data["no_sale_reason"] = None

        evaluation = Evaluation(
            id=self.id_factory(),
            created_at=self.clock(),
            month=DateNormalizer.month_name(submission.contact_date),
            week=DateNormalizer.week_number(submission.contact_date),
            year=submission.contact_date.year,
            section_scores=scores.per_section,
            final_score=scores.total,
            criticality=ScoringEngine.classify(scores.total, submission.has_critical_failure),
            feedback_status=self.config.default_feedback_status,
            status=self.config.default_workflow_status,
            **data,
        )
        self.logger.info(f"Registered evaluation {evaluation.id} for {evaluation.consultant_name}: {scores.total:.2f}")
        return evaluation

    def _extract_answers(
        self, row: list[str], resolved: ResolvedHeaders, built: BuiltRecord
    ) -> dict[str, AnswerValue]:
        answers: dict[str, AnswerValue] = {}
        for position, question_id in resolved.question_positions.items():
            if position >= len(row):
                continue
            token = row[position].strip()
            if not token:
                continue
            answer = ANSWER_TOKENS.get(token)
            if answer is None:
                self._warn(built, RowWarningKind.UNKNOWN_ANSWER, f"Unknown answer {token!r} for question {question_id}")
                continue
            answers[question_id] = answer
        return answers

    def _parse_score(self, raw: str | None, built: BuiltRecord) -> float:
        if not raw:
            return 0.0
        try:
            score = float(raw.replace(",", ".", 1))
        except ValueError:
            score = math.nan
        if not math.isfinite(score):
            self._warn(built, RowWarningKind.INVALID_SCORE, f"Unparsable score {raw!r}, using 0")
            return 0.0
        return score

    def _parse_date(self, raw: str | None, label: str, built: BuiltRecord) -> date | None:
        parsed = DateNormalizer.normalize(raw)
        if raw and parsed is None:
            self._warn(built, RowWarningKind.INVALID_DATE, f"Unparsable {label} {raw!r}")
        return parsed

    def _parse_period(self, raw: str | None, label: str, built: BuiltRecord) -> int:
        """Digits of a week or year token; 0 means derive it from the contact date."""
        if not raw:
            return 0
        digits = re.sub(r"\D", "", raw)
        if not digits:
            self._warn(built, RowWarningKind.INVALID_WEEK_YEAR, f"Unparsable {label} {raw!r}, deriving from contact date")
            return 0
        return int(digits)

    @staticmethod
    def _is_yes(raw: str | None) -> bool:
        return (raw or "").lower() == "sim"

    def _warn(self, built: BuiltRecord, kind: RowWarningKind, message: str) -> None:
        self.logger.warning(f"Row {built.row_index}: {message}")
        built.warnings.append(RowWarning(row_index=built.row_index, kind=kind, message=message))
