"""Loaders for the external configuration and for previously exported records."""

from typing import Any

from pydantic import ValidationError

from utils.data.json_manager import JSONManager
from utils.logging.logging_manager import LogManager

from .errors import HeaderTableError, RubricDefinitionError
from .evaluation import Evaluation
from .rubric import HeaderTable, RubricDefinition

logger = LogManager.get_instance().get_logger("QualityMonitoringLoaders")


def load_rubric(file_path: str) -> RubricDefinition:
    """Reads a rubric JSON file: ``{"name": ..., "sections": [...]}`` or a bare list of sections."""
    raw = JSONManager.read_json(file_path)
    if isinstance(raw, list):
        raw = {"sections": raw}
    if not isinstance(raw, dict):
        raise RubricDefinitionError(file_path, "Rubric file must be a list or an object with 'sections'")

    try:
        rubric = RubricDefinition.model_validate(raw)
    except ValidationError as e:
        raise RubricDefinitionError(file_path, e) from e

    logger.info(
        f"Loaded rubric '{rubric.name}' with {len(rubric.sections)} sections "
        f"and {sum(len(s.questions) for s in rubric.sections)} questions"
    )
    return rubric


def load_header_table(file_path: str) -> HeaderTable:
    """Reads the canonical key → spreadsheet label table."""
    raw = JSONManager.read_json(file_path)
    if not isinstance(raw, dict):
        raise HeaderTableError(file_path, "Header table must be a JSON object")

    try:
        return HeaderTable(labels=raw)
    except ValidationError as e:
        raise HeaderTableError(file_path, e) from e


def load_evaluations(file_path: str | None) -> list[Evaluation]:
    """Reads evaluations previously written by the import command. No path → empty list."""
    if not file_path:
        return []
    raw = JSONManager.read_json(file_path)
    return [Evaluation.model_validate(item) for item in _records(raw, "evaluations")]


def _records(raw: Any, key: str) -> list[dict]:
    # Accept both a bare list and the full import report object.
    if isinstance(raw, dict):
        raw = raw.get(key, [])
    if not isinstance(raw, list):
        raise ValueError(f"Expected a list of {key}")
    return raw
