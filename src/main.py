import os

from log_config import LogManager
from utils.command.command_manager import CommandManager
from utils.error.error_manager import handle_generic_exception

logger = LogManager.get_instance().get_logger("CLI")


def main():
    """Entry point of the qatoolkit CLI: discovers the domain commands and runs the requested one."""
    command_manager = CommandManager(os.path.join(os.path.dirname(__file__), "domains"))
    command_manager.load_commands()
    parser = command_manager.build_parser()

    args, unknown = parser.parse_known_args()

    if "help" in unknown or getattr(args, "func", None) is None:
        parser.print_help()
        return

    logger.debug(f"Running {args.domain} command with {vars(args)}")
    try:
        args.func(args)
    except Exception as e:
        handle_generic_exception(e, "An error occurred during execution.")


if __name__ == "__main__":
    main()
