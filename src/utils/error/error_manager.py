from log_config import log_manager
from utils.error.base_custom_error import BaseCustomError

logger = log_manager.get_logger("ErrorManager")


def handle_generic_exception(exception: Exception, context_message: str, metadata: dict | None = None):
    """Logs a failure with its context and re-raises it as a RuntimeError.

    Metadata carried by a BaseCustomError is merged into the logged context, so
    import and configuration errors keep their file and row details in the log.

    :param exception: The exception raised.
    :param context_message: What was being done when it failed.
    :param metadata: Extra context for the log line.
    """
    context = dict(metadata or {})
    if isinstance(exception, BaseCustomError):
        context.update({k: v for k, v in exception.metadata.items() if k not in context})
        detail = exception.message
    else:
        detail = str(exception)

    context_info = f" | Metadata: {context}" if context else ""
    logger.error(f"{context_message}{context_info} - {type(exception).__name__}: {detail}", exc_info=True)
    raise RuntimeError(f"{context_message}: {detail}") from exception
