"""Read and validate the inputs passed to a GitHub Action."""

import os
import re

from action_helpers.errors import InputValidationError

SUDO_INPUT_PATTERN = re.compile(r"^(auto|true|false)$")


def _input_env_var(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str) -> str:
    """Get the value of an action input, as exposed by the runner.

    :param name: name of the input as declared in ``action.yml``, e.g. ``github-token``
    :return: the whitespace-trimmed value, or an empty string if it was not provided
    """
    return os.environ.get(_input_env_var(name), "").strip()


def get_validated_input(key: str, pattern: str | re.Pattern[str]) -> str:
    """Get the value of an action input and check it against a pattern.

    Only a non-empty value that does not match fails; missing inputs pass.

    :param key: name of the input
    :param pattern: regular expression searched for in the value
    :raises InputValidationError: if the value is set and does not match
    :return: the value of the input
    """
    value = get_input(key)
    if value and not re.search(pattern, value):
        raise InputValidationError(key, value)
    return value


def use_sudo_prefix() -> bool:
    """Whether commands should be prefixed with ``sudo``, per the ``sudo`` input."""
    value = get_validated_input("sudo", SUDO_INPUT_PATTERN)
    if value == "auto":
        # Windows has no uid, and is never treated as root
        uid = os.getuid() if hasattr(os, "getuid") else -1
        return uid != 0
    return value == "true"
