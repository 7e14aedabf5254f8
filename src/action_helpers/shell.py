"""Run shell commands in the shell appropriate for the host platform."""

import codecs
import logging
import os
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from io import BufferedReader
from typing import cast

from action_helpers.errors import CommandExecutionError
from action_helpers.inputs import get_input

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 65536
MSYS2_BASH_PATH = "C:\\msys64\\usr\\bin\\bash.exe"


class SpawnProfile(ABC):
    """How a command line is turned into a subprocess on a given platform."""

    use_shell: bool = False

    @abstractmethod
    def build_args(self, cmd: str) -> str | list[str]:
        """Return the arguments passed to ``subprocess.Popen`` for this command."""

    @abstractmethod
    def build_env(self, base_env: Mapping[str, str]) -> dict[str, str]:
        """Return the environment the subprocess is started with."""


@dataclass(frozen=True)
class PosixShellProfile(SpawnProfile):
    """Run the command through the default system shell."""

    use_shell: bool = True

    def build_args(self, cmd: str) -> str:
        """Hand the command line to the shell verbatim."""
        return cmd

    def build_env(self, base_env: Mapping[str, str]) -> dict[str, str]:
        """Forward the ``github-token`` input to Homebrew, if one was provided."""
        env = dict(base_env)
        if token := get_input("github-token"):
            env["HOMEBREW_GITHUB_API_TOKEN"] = token
        return env


@dataclass(frozen=True)
class MsysBashProfile(SpawnProfile):
    """Run the command through the MSYS2 bash as a login shell."""

    bash_path: str = MSYS2_BASH_PATH
    env_overrides: Mapping[str, str] = field(
        default_factory=lambda: {
            "MSYS2_PATH_TYPE": "inherit",  # keep the inherited PATH
            "CHERE_INVOKING": "1",  # do not cd to $HOME
            "MSYSTEM": "MINGW64",  # include the programs in C:/msys64/mingw64/bin/
        },
    )

    def build_args(self, cmd: str) -> list[str]:
        """Run the command line with ``bash -lc``."""
        return [self.bash_path, "-lc", cmd]

    def build_env(self, base_env: Mapping[str, str]) -> dict[str, str]:
        """Apply the MSYS2 overrides on top of the inherited environment."""
        return {**base_env, **self.env_overrides}


def select_spawn_profile(platform: str) -> SpawnProfile:
    """Pick the spawn profile for a ``sys.platform`` value."""
    if platform == "win32":
        return MsysBashProfile()
    return PosixShellProfile()


DEFAULT_SPAWN_PROFILE: SpawnProfile = select_spawn_profile(sys.platform)


def execute_shell_command(
    cmd: str,
    *,
    quiet: bool = False,
    profile: SpawnProfile | None = None,
) -> str:
    """Run a command line and collect what it writes to stdout.

    stdout is echoed to our own stdout as it arrives, unless ``quiet`` is set.
    stderr is passed through to our own stderr and never captured.

    :param cmd: command line, passed to the shell as is
    :param quiet: don't echo the command's stdout
    :param profile: spawn profile to use, defaults to the one for this platform
    :raises CommandExecutionError: if the command exits with a nonzero exit code
    :return: the command's stdout, stripped of surrounding whitespace
    """
    profile = profile or DEFAULT_SPAWN_PROFILE
    logger.debug("Executing shell command: [%s]", cmd)

    chunks: list[str] = []
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    with subprocess.Popen(  # noqa: S603
        profile.build_args(cmd),
        shell=profile.use_shell,  # noqa: S602
        env=profile.build_env(os.environ),
        stdout=subprocess.PIPE,
    ) as proc:
        stdout = cast(BufferedReader, proc.stdout)
        # read1 returns whatever is available, so partial lines are echoed too
        while data := stdout.read1(READ_CHUNK_SIZE):
            _collect_chunk(decoder.decode(data), chunks, quiet=quiet)
        _collect_chunk(decoder.decode(b"", final=True), chunks, quiet=quiet)
    exit_code = proc.returncode

    if exit_code != 0:
        raise CommandExecutionError(exit_code)
    return "".join(chunks).strip()


def _collect_chunk(chunk: str, chunks: list[str], *, quiet: bool) -> None:
    if not chunk:
        return
    if not quiet:
        sys.stdout.write(chunk)
        sys.stdout.flush()
    chunks.append(chunk)
