"""Exceptions raised to callers of the action helpers."""


class ActionHelpersError(Exception):
    """Base class for all errors raised by this package."""


class CommandExecutionError(ActionHelpersError):
    """A shell command exited with a nonzero exit code."""

    def __init__(self, exit_code: int) -> None:
        """Use the exit code as the error message."""
        super().__init__(str(exit_code))
        self.exit_code = exit_code


class InputValidationError(ActionHelpersError):
    """An action input did not match its required pattern."""

    def __init__(self, key: str, value: str) -> None:
        """Name both the offending input and its value in the message."""
        super().__init__(f"Invalid value for '{key}': '{value}'")
        self.key = key
        self.value = value
