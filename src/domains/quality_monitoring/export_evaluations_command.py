from argparse import ArgumentParser, Namespace

from domains.quality_monitoring.core.loaders import load_evaluations
from domains.quality_monitoring.services.component_factory import build_components
from utils.command.base_command import BaseCommand
from utils.logging.logging_manager import LogManager

logger = LogManager.get_instance().get_logger("ExportEvaluationsCommand")


class ExportEvaluationsCommand(BaseCommand):
    """
    Command to export stored evaluations back to the spreadsheet CSV layout.
    """

    @staticmethod
    def get_name() -> str:
        return "export_evaluations"

    @staticmethod
    def get_description() -> str:
        return "Exports evaluations to a semicolon-separated, UTF-8 (BOM) CSV that can be re-imported."

    @staticmethod
    def get_help() -> str:
        return "Export evaluations from a JSON file to CSV."

    @staticmethod
    def get_arguments(parser: ArgumentParser) -> None:
        parser.add_argument(
            "--input_file",
            type=str,
            required=True,
            help="JSON file with evaluations (a list, or the output of import_evaluations).",
        )
        parser.add_argument(
            "--output",
            type=str,
            required=True,
            help="Path to save the CSV file.",
        )

    @staticmethod
    def main(args: Namespace) -> None:
        try:
            evaluations = load_evaluations(args.input_file)
            components = build_components()
            components.exporter.export_to_file(evaluations, args.output)
            logger.info(f"{len(evaluations)} evaluations exported to {args.output}")

        except FileNotFoundError as fnfe:
            logger.error(f"File not found: {fnfe}", exc_info=True)
            raise
        except ValueError as ve:
            logger.error(f"Invalid evaluation data: {ve}", exc_info=True)
            raise
