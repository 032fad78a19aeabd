from argparse import ArgumentParser, Namespace

from domains.quality_monitoring.core.loaders import load_evaluations
from domains.quality_monitoring.services.component_factory import build_components
from domains.quality_monitoring.services.feedback_specialist import FeedbackSpecialist
from utils.command.base_command import BaseCommand
from utils.file_manager import FileManager
from utils.logging.logging_manager import LogManager

logger = LogManager.get_instance().get_logger("GenerateFeedbackCommand")


class GenerateFeedbackCommand(BaseCommand):
    """
    Command to draft coaching feedback for one evaluation with a local Ollama model.
    """

    @staticmethod
    def get_name() -> str:
        return "generate_feedback"

    @staticmethod
    def get_description() -> str:
        return (
            "Drafts constructive feedback for an evaluation from its failed items, "
            "critical failure and contact description."
        )

    @staticmethod
    def get_help() -> str:
        return "Generate AI feedback text for one evaluation."

    @staticmethod
    def get_arguments(parser: ArgumentParser) -> None:
        parser.add_argument(
            "--input_file",
            type=str,
            required=True,
            help="JSON file with evaluations (a list, or the output of import_evaluations).",
        )
        parser.add_argument(
            "--evaluation_id",
            type=str,
            required=True,
            help="Id of the evaluation to write feedback for.",
        )
        parser.add_argument(
            "--output",
            type=str,
            required=False,
            help="Path to save the feedback as a Markdown file. Printed to stdout when omitted.",
        )

    @staticmethod
    def main(args: Namespace) -> None:
        try:
            evaluations = load_evaluations(args.input_file)
            evaluation = next((e for e in evaluations if e.id == args.evaluation_id), None)
            if evaluation is None:
                raise ValueError(f"Evaluation '{args.evaluation_id}' not found in {args.input_file}")

            components = build_components()
            config = components.config
            specialist = FeedbackSpecialist(
                host=config.ollama_host,
                model=config.ollama_model,
                **config.get_ollama_config(),
            )
            feedback = specialist.generate_for_evaluation(evaluation, components.rubric)

            if args.output:
                FileManager.write_file(args.output, feedback)
                logger.info(f"Feedback for {evaluation.consultant_name} saved to {args.output}")
            else:
                print(feedback)

        except FileNotFoundError as fnfe:
            logger.error(f"File not found: {fnfe}", exc_info=True)
            raise
        except ValueError as ve:
            logger.error(f"Invalid input: {ve}", exc_info=True)
            raise
