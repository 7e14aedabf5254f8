"""Logging setup that speaks the GitHub Actions workflow command syntax."""

import logging
import sys

LOG_FORMAT = "%(message)s"

_WORKFLOW_COMMANDS: dict[int, str] = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def escape_data(message: str) -> str:
    """Escape a message so the runner doesn't cut it off at line breaks."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowCommandFormatter(logging.Formatter):
    """Render records as ``::debug::``, ``::warning::`` or ``::error::`` commands.

    Info records are printed as plain lines, like ``core.info`` does.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Wrap the formatted record in the workflow command for its level."""
        message = super().format(record)
        command = _WORKFLOW_COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{escape_data(message)}"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Configure the package logger to write workflow commands to stdout.

    The runner itself hides ``::debug::`` lines unless step debug logging is on.
    """
    logger = logging.getLogger("action_helpers")
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(WorkflowCommandFormatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
