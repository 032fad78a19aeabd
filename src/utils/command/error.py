from utils.error.base_custom_error import BaseCustomError


class CommandManagerError(BaseCustomError):
    """Base class for errors raised while discovering and wiring CLI commands."""

    pass


class ModuleImportError(CommandManagerError):
    """A module under the commands package could not be imported."""

    def __init__(self, module_path: str, error: Exception):
        super().__init__(f"Could not import command module '{module_path}'", module_path=module_path, original_error=error)


class CommandLoadError(CommandManagerError):
    """A command class was found but could not be registered."""

    def __init__(self, module_name: str, error: Exception):
        super().__init__(f"Could not register command from '{module_name}'", module_name=module_name, original_error=error)


class HierarchyConflictError(CommandManagerError):
    """Two commands share a name at the same level of the command tree."""

    def __init__(self, command_name: str, command_path: str = ""):
        super().__init__(
            f"Command '{command_name}' is already registered under '{command_path or '<root>'}'",
            command_name=command_name,
            command_path=command_path,
        )
