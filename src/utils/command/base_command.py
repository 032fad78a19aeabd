from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace


class BaseCommand(ABC):
    """CLI command discovered under ``domains/``.

    The command manager places each subclass under the domain path of its module,
    e.g. ``domains/quality_monitoring/x_command.py`` → ``qatoolkit quality_monitoring <name>``.
    """

    @staticmethod
    @abstractmethod
    def get_name() -> str:
        """Name used on the command line."""
        pass

    @staticmethod
    def get_description() -> str:
        return "No description provided."

    @staticmethod
    def get_help() -> str:
        return "No help available."

    @classmethod
    def register_command(cls, parent_parser):
        """Adds the command to ``parent_parser`` (a subparsers action) and binds ``main``."""
        parser = parent_parser.add_parser(
            cls.get_name(),
            description=cls.get_description(),
            help=cls.get_help(),
        )
        cls.get_arguments(parser)
        parser.set_defaults(func=cls.main)

    @staticmethod
    @abstractmethod
    def get_arguments(parser: ArgumentParser):
        """Declares the command arguments on ``parser``."""
        pass

    @staticmethod
    @abstractmethod
    def main(args: Namespace):
        """Runs the command with the parsed CLI arguments."""
        pass
