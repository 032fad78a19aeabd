from utils.error.base_custom_error import BaseCustomError


class QualityMonitoringError(BaseCustomError):
    """Base class for all quality monitoring errors."""

    pass


class ParseError(QualityMonitoringError):
    """Raised when an import file cannot be decoded as text. Aborts the whole import."""

    def __init__(self, message: str, **metadata):
        super().__init__(message, **metadata)


class RubricDefinitionError(QualityMonitoringError):
    """Raised when the rubric configuration is structurally invalid."""

    def __init__(self, source: str, error: Exception | str):
        super().__init__(f"Invalid rubric definition in '{source}'", source=source, original_error=error)


class HeaderTableError(QualityMonitoringError):
    """Raised when the key→label header table is invalid."""

    def __init__(self, source: str, error: Exception | str):
        super().__init__(f"Invalid header table in '{source}'", source=source, original_error=error)
