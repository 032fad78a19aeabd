from dataclasses import dataclass
from datetime import datetime

from ..core.config import Config
from ..core.loaders import load_header_table, load_rubric
from ..core.rubric import HeaderTable, RubricDefinition
from ..processors.evaluation_processor import EvaluationProcessor
from .action_plan_engine import ActionPlanEngine
from .csv_export_service import EvaluationCsvExporter
from .import_service import EvaluationImportService
from .monitoring_statistics import MonitoringStatistics


@dataclass
class QualityMonitoringComponents:
    config: Config
    rubric: RubricDefinition
    header_table: HeaderTable
    processor: EvaluationProcessor
    import_service: EvaluationImportService
    exporter: EvaluationCsvExporter
    statistics: MonitoringStatistics


def build_components(config: Config | None = None, now: datetime | None = None) -> QualityMonitoringComponents:
    """Loads the external rubric and header table and wires the services around them.

    Args:
        config (Config): Domain configuration; read from the environment when omitted.
        now (datetime): Fixed clock for fallback dates, used by the CLI ``--today`` option.

    Raises:
        RubricDefinitionError: If the rubric file is invalid.
        HeaderTableError: If the header table file is invalid.
    """
    config = config or Config()
    rubric = load_rubric(config.rubric_file)
    header_table = load_header_table(config.header_map_file)

    processor = EvaluationProcessor(
        rubric,
        header_table,
        config=config,
        clock=(lambda: now) if now else None,
    )
    engine = ActionPlanEngine(rubric, config.generic_disinterest_reason)
    return QualityMonitoringComponents(
        config=config,
        rubric=rubric,
        header_table=header_table,
        processor=processor,
        import_service=EvaluationImportService(processor, engine),
        exporter=EvaluationCsvExporter(rubric, header_table),
        statistics=MonitoringStatistics(rubric),
    )
