from argparse import ArgumentParser, Namespace
from datetime import datetime

from domains.quality_monitoring.core.loaders import load_evaluations
from domains.quality_monitoring.services.component_factory import build_components
from utils.command.base_command import BaseCommand
from utils.data.json_manager import JSONManager
from utils.logging.logging_manager import LogManager

logger = LogManager.get_instance().get_logger("ImportEvaluationsCommand")


class ImportEvaluationsCommand(BaseCommand):
    """
    Command to import a monitoring spreadsheet export, score it and derive action items.
    """

    @staticmethod
    def get_name() -> str:
        return "import_evaluations"

    @staticmethod
    def get_description() -> str:
        return (
            "Imports a CSV export of quality evaluations, scores every row against the rubric "
            "and generates development plans from each consultant's history."
        )

    @staticmethod
    def get_help() -> str:
        return "Import a monitoring CSV and write evaluations, action items and row warnings as JSON."

    @staticmethod
    def get_arguments(parser: ArgumentParser) -> None:
        parser.add_argument(
            "--input_file",
            type=str,
            required=True,
            help="Path to the CSV export (comma, semicolon or tab separated).",
        )
        parser.add_argument(
            "--output",
            type=str,
            required=True,
            help="Path to save the import result as a JSON file.",
        )
        parser.add_argument(
            "--history",
            type=str,
            required=False,
            help="JSON file with previously imported evaluations, used for recurrence rules.",
        )
        parser.add_argument(
            "--today",
            type=str,
            required=False,
            help="Reference date (YYYY-MM-DD) for deadlines, fallback dates and the current month.",
        )

    @staticmethod
    def main(args: Namespace) -> None:
        """
        Imports the CSV and writes the result.

        Args:
            args (Namespace): Parsed command-line arguments.

        Raises:
            FileNotFoundError: If an input file does not exist.
            ValueError: If a file is malformed or --today is not a date.
        """
        try:
            now = datetime.fromisoformat(args.today) if args.today else datetime.now()
            logger.info(
                f"Starting evaluation import with inputs:"
                f"\nInput File: {args.input_file}"
                f"\nHistory: {args.history or '-'}"
                f"\nReference date: {now.date().isoformat()}"
            )

            components = build_components(now=now if args.today else None)
            history = load_evaluations(args.history)
            result = components.import_service.import_file(args.input_file, history=history, now=now)

            JSONManager.write_json(result.model_dump(mode="json"), args.output)
            logger.info(
                f"Imported {len(result.evaluations)} evaluations "
                f"({len(result.skipped_rows)} skipped rows, {len(result.warnings)} warnings) "
                f"and {len(result.action_items)} action items; saved to {args.output}"
            )

        except FileNotFoundError as fnfe:
            logger.error(f"File not found: {fnfe}", exc_info=True)
            raise
        except ValueError as ve:
            logger.error(f"Invalid data: {ve}", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"Unexpected error during evaluation import: {e}", exc_info=True)
            raise
