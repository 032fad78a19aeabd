from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from utils.file_manager import FileManager
from utils.logging.logging_manager import LogManager


class BaseProcessor(ABC):
    """Base class for processing data extracted from input files."""

    def __init__(self, allowed_extensions: list[str] | None = None):
        """Initializes the BaseProcessor with optional file extensions and a logger.

        Args:
            allowed_extensions (Optional[List[str]]): List of allowed file extensions.
                If None, all file types are allowed.
        """
        self.logger = LogManager.get_instance().get_logger(self.__class__.__name__)
        self.allowed_extensions = allowed_extensions or ["*"]

    def validate_input(self, file_path: str | Path) -> Path:
        """Checks that the file exists and has an allowed extension.

        Args:
            file_path (Union[str, Path]): Path to the file.

        Returns:
            Path: The validated path.
        """
        file_path = Path(file_path)
        extensions = None if "*" in self.allowed_extensions else self.allowed_extensions
        FileManager.validate_file(str(file_path), allowed_extensions=extensions)
        return file_path

    @abstractmethod
    def process_file(self, file_path: str | Path, **kwargs) -> Any:
        """Processes a single file.

        Args:
            file_path (Union[str, Path]): Path to the file.

        Returns:
            Any: Data extracted from the file.
        """
        pass

    @abstractmethod
    def process_sheet(self, sheet_data: Any, **kwargs) -> Any:
        """Processes the tabular content of one file.

        Args:
            sheet_data (Any): Rows extracted from a file.

        Returns:
            Any: Processed sheet data.
        """
        pass
