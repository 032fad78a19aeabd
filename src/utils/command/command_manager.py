import importlib
import inspect
import os
import pkgutil
from argparse import ArgumentParser, _SubParsersAction

from utils.command.base_command import BaseCommand
from utils.logging.logging_manager import LogManager

from .error import (
    CommandLoadError,
    CommandManagerError,
    HierarchyConflictError,
    ModuleImportError,
)


class CommandManager:
    """Discovers BaseCommand subclasses under a package tree and builds the argparse hierarchy.

    A command defined in ``<package>/a/b/c_command.py`` is exposed as ``a b <name>``.
    """

    _logger = LogManager.get_instance().get_logger("CommandManager")

    def __init__(self, base_path: str, package: str = "domains", prog: str = "qatoolkit"):
        self.base_path = os.path.abspath(base_path)
        self.package = package
        self.prog = prog
        self.hierarchy: dict[str, dict] = {}

    def load_commands(self) -> None:
        """Imports every module of every package below base_path and registers its commands.

        A module that fails to import is logged and skipped so one broken domain does
        not take the whole CLI down.
        """
        self._logger.debug(f"Loading commands from {self.base_path}")

        for root, _, _ in os.walk(self.base_path):
            if not os.path.isfile(os.path.join(root, "__init__.py")):
                continue

            for module_info in pkgutil.iter_modules([root]):
                if module_info.ispkg:
                    continue
                try:
                    module = self._import_module(root, module_info.name)
                    for command in self._find_commands(module):
                        self._add_to_hierarchy(command)
                except CommandManagerError as e:
                    self._logger.error(str(e), exc_info=True)

        self._logger.debug(f"Loaded command hierarchy: {list(self.hierarchy)}")

    def _module_path(self, root: str, module_name: str) -> str:
        relative_path = os.path.relpath(root, self.base_path)
        if relative_path == ".":
            return f".{module_name}"
        return f".{relative_path.replace(os.sep, '.')}.{module_name}"

    def _import_module(self, root: str, module_name: str):
        module_path = self._module_path(root, module_name)
        try:
            return importlib.import_module(module_path, package=self.package)
        except Exception as e:
            raise ModuleImportError(module_path=module_path, error=e) from e

    @staticmethod
    def _find_commands(module) -> list[type[BaseCommand]]:
        # Only classes defined in the module itself; imported ones are registered where they live.
        return [
            obj
            for _, obj in inspect.getmembers(module, inspect.isclass)
            if issubclass(obj, BaseCommand)
            and obj.__module__ == module.__name__
            and not inspect.isabstract(obj)
        ]

    def _add_to_hierarchy(self, command: type[BaseCommand]) -> None:
        try:
            name_parts = command.__module__.split(".")[1:-1]
            command_name = command.get_name()

            current_level = self.hierarchy
            for part in name_parts:
                current_level = current_level.setdefault(part, {})

            if command_name in current_level:
                raise HierarchyConflictError(command_name=command_name, command_path=".".join(name_parts))

            current_level[command_name] = {
                "name": command_name,
                "description": command.get_description(),
                "help": command.get_help(),
                "class": command,
            }
            self._logger.debug(f"Registered command {'.'.join([*name_parts, command_name])}")
        except HierarchyConflictError:
            raise
        except Exception as e:
            raise CommandLoadError(module_name=command.__module__, error=e) from e

    def build_parser(self) -> ArgumentParser:
        """Builds the ArgumentParser tree from the loaded hierarchy."""
        try:
            parser = ArgumentParser(
                prog=self.prog,
                description=f"{self.prog} CLI - call-center quality monitoring toolkit",
                add_help=False,
            )
            subparsers = parser.add_subparsers(dest="domain", help="Available domains")
            for name, substructure in self.hierarchy.items():
                self._add_subparser(subparsers, name, substructure)
            return parser
        except Exception as e:
            raise CommandManagerError("Failed to build argument parser hierarchy", error=e) from e

    def _add_subparser(self, subparsers: _SubParsersAction, name: str, substructure: dict) -> None:
        if "class" in substructure:
            substructure["class"].register_command(subparsers)
            return

        parser = subparsers.add_parser(name, help=f"{name} commands")
        children = parser.add_subparsers(dest="subdomain_or_command", help=f"{name} subcommands")
        for key, value in substructure.items():
            self._add_subparser(children, key, value)
