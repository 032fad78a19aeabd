from argparse import ArgumentParser, Namespace

from domains.quality_monitoring.core.loaders import load_evaluations
from domains.quality_monitoring.services.component_factory import build_components
from utils.command.base_command import BaseCommand
from utils.data.json_manager import JSONManager
from utils.logging.logging_manager import LogManager

logger = LogManager.get_instance().get_logger("EvaluationSummaryCommand")


class EvaluationSummaryCommand(BaseCommand):
    """
    Command to compute the monitoring dashboard indicators.
    """

    @staticmethod
    def get_name() -> str:
        return "evaluation_summary"

    @staticmethod
    def get_description() -> str:
        return (
            "Summarizes evaluations: average score, critical-failure and conversion rates, "
            "section attainment, rankings per consultant and supervisor, monthly evolution."
        )

    @staticmethod
    def get_help() -> str:
        return "Compute monitoring statistics from a JSON file of evaluations."

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
            required=False,
            help="Path to save the summary as JSON. Printed to stdout when omitted.",
        )
        parser.add_argument(
            "--consultant",
            type=str,
            required=False,
            help="Only summarize evaluations of this consultant.",
        )

    @staticmethod
    def main(args: Namespace) -> None:
        try:
            evaluations = load_evaluations(args.input_file)
            if args.consultant:
                evaluations = [e for e in evaluations if e.consultant_name == args.consultant]
                logger.info(f"{len(evaluations)} evaluations for consultant {args.consultant}")

            summary = build_components().statistics.summarize(evaluations)

            if args.output:
                JSONManager.write_json(summary.model_dump(mode="json"), args.output)
                logger.info(f"Summary saved to {args.output}")
            else:
                print(summary.model_dump_json(indent=4))

        except FileNotFoundError as fnfe:
            logger.error(f"File not found: {fnfe}", exc_info=True)
            raise
        except ValueError as ve:
            logger.error(f"Invalid evaluation data: {ve}", exc_info=True)
            raise
