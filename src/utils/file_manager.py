import os
from typing import List, Optional


class FileManager:
    """
    General file management operations: validating paths, reading raw bytes and
    writing text output.
    """

    @staticmethod
    def read_bytes(file_path: str) -> bytes:
        """
        Reads the raw content of a file. Decoding is left to the caller, which
        knows which encodings the source may use.

        Args:
            file_path (str): Path to the file.

        Returns:
            bytes: The file content.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")
        with open(file_path, "rb") as file:
            return file.read()

    @staticmethod
    def write_file(file_path: str, content: str, encoding: str = "utf-8") -> None:
        """
        Writes content to a file, creating the parent folder when needed.
        Line endings are written exactly as given.

        Args:
            file_path (str): Path to the file.
            content (str): The content to write to the file.
            encoding (str): Text encoding. Defaults to utf-8.
        """
        output_dir = os.path.dirname(file_path)
        if output_dir:
            FileManager.create_folder(output_dir)
        with open(file_path, "w", encoding=encoding, newline="") as file:
            file.write(content)

    @staticmethod
    def create_folder(folder_path: str, exist_ok: bool = True) -> None:
        """
        Creates a folder.

        Args:
            folder_path (str): Path of the folder to create.
            exist_ok (bool): If True, suppresses errors if the folder exists.

        Raises:
            OSError: If the folder cannot be created.
        """
        os.makedirs(folder_path, exist_ok=exist_ok)

    @staticmethod
    def validate_file(file_path: str, allowed_extensions: Optional[List[str]] = None) -> None:
        """
        Validates file existence and extension.

        Args:
            file_path (str): Path to the file.
            allowed_extensions (Optional[List[str]]): Valid extensions.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file extension is invalid.
        """
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")
        if allowed_extensions:
            _, ext = os.path.splitext(file_path)
            if ext.lower() not in allowed_extensions:
                raise ValueError(f"Invalid file extension: {ext}. Allowed: {allowed_extensions}")
