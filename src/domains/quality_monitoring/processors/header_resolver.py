from dataclasses import dataclass, field

from utils.logging.logging_manager import LogManager

from ..core.rubric import HeaderTable, RubricDefinition
from .csv_tokenizer import BOM

QUESTION_PREFIX_LENGTH = 20


@dataclass
class ResolvedHeaders:
    """Column positions found in a header row.

    Attributes:
        field_positions (dict[str, int]): Canonical key → column index. Unmatched keys are absent.
        question_positions (dict[int, str]): Column index → question id.
        header_count (int): Number of columns in the header row.
    """

    field_positions: dict[str, int] = field(default_factory=dict)
    question_positions: dict[int, str] = field(default_factory=dict)
    header_count: int = 0

    def position(self, key: str) -> int | None:
        return self.field_positions.get(key)


class HeaderResolver:
    """Maps a spreadsheet header row onto canonical field keys and rubric questions.

    Each column is claimed by at most one canonical field and at most one question;
    scanning goes left to right, so the first matching column wins.
    """

    def __init__(self, header_table: HeaderTable, rubric: RubricDefinition):
        self.header_table = header_table
        self.rubric = rubric
        self.logger = LogManager.get_instance().get_logger("HeaderResolver")

    @staticmethod
    def clean_header(header: str) -> str:
        return header.replace(BOM, "").strip().strip('"').strip()

    def resolve(self, header_row: list[str]) -> ResolvedHeaders:
        headers = [self.clean_header(header) for header in header_row]
        resolved = ResolvedHeaders(header_count=len(headers))

        claimed: set[int] = set()
        for key, label in self.header_table.labels.items():
            position = self._match_field(headers, label, claimed)
            if position is None:
                self.logger.debug(f"No column found for '{key}' (label '{label}')")
                continue
            resolved.field_positions[key] = position
            claimed.add(position)

        lowered = [header.lower() for header in headers]
        for _, question in self.rubric.iter_questions():
            prefix = question.text[:QUESTION_PREFIX_LENGTH].lower()
            position = next(
                (
                    index
                    for index, header in enumerate(lowered)
                    if index not in resolved.question_positions and prefix in header
                ),
                None,
            )
            if position is None:
                self.logger.debug(f"No column found for question '{question.id}'")
                continue
            resolved.question_positions[position] = question.id

        self.logger.info(
            f"Resolved {len(resolved.field_positions)}/{len(self.header_table.labels)} fields and "
            f"{len(resolved.question_positions)} questions from {len(headers)} columns"
        )
        return resolved

    @staticmethod
    def _match_field(headers: list[str], label: str, claimed: set[int]) -> int | None:
        label_no_colon = label.strip().removesuffix(":").strip()
        candidates = [index for index in range(len(headers)) if index not in claimed]

        for index in candidates:
            if headers[index] == label:
                return index
        for index in candidates:
            if headers[index] == label_no_colon:
                return index
        variants = {label.lower(), label_no_colon.lower()}
        for index in candidates:
            if headers[index].lower() in variants:
                return index
        return None
