"""Launching external commands and mapping their failures to exceptions."""

import asyncio
import os
import re
import shlex
import signal
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field

from f1_ext_install.logger import LOGGER

#: arguments that reference an environment variable are left for the shell
#: to expand when a command is rendered
_ENV_REFERENCE_RE = re.compile(r"\$[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class Command:
    """An external command, kept as data so that it can be logged, compared
    in tests and rendered into a :file:`Dockerfile`.

    """

    #: the program to execute (``argv[0]``)
    program: str

    #: the arguments passed to :py:attr:`program`
    args: tuple[str, ...] = ()

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        return " ".join(
            arg if _ENV_REFERENCE_RE.fullmatch(arg) else shlex.quote(arg)
            for arg in self.argv
        )


class CommandError(RuntimeError):
    """Base class of all failures of external commands."""

    def __init__(self, command: Command, message: str) -> None:
        super().__init__(f"{command.program}: {message} (command: {command})")
        self.command = command


class CommandLaunchError(CommandError):
    """The process could not be started, usually the program is missing."""

    def __init__(self, command: Command, err: OSError) -> None:
        super().__init__(command, f"I/O error: {err}")
        self.err = err


class CommandExitError(CommandError):
    """The process exited with a non-zero code or was killed by a signal."""

    def __init__(self, command: Command, returncode: int) -> None:
        super().__init__(
            command, f"process exited unsuccessfully: {_exit_reason(returncode)}"
        )
        self.returncode = returncode


class CommandDecodeError(CommandError):
    """The standard output of the process is not valid UTF-8."""

    def __init__(self, command: Command, err: UnicodeDecodeError) -> None:
        super().__init__(command, f"UTF-8 error: {err}")
        self.err = err


def _exit_reason(returncode: int) -> str:
    if returncode >= 0:
        return f"non-zero exit code {returncode}"
    try:
        name = signal.Signals(-returncode).name
    except ValueError:
        name = str(-returncode)
    return f"killed by signal {name}"


@dataclass
class CommandRunner:
    """Runs commands one after another, passing the standard error (and,
    unless captured, the standard output) through to the user.

    """

    #: additional environment variables for the launched processes
    env: Mapping[str, str] = field(default_factory=dict)

    def _env(self) -> dict[str, str] | None:
        if not self.env:
            return None
        return {**os.environ, **self.env}

    async def _spawn(self, command: Command, **kwargs) -> asyncio.subprocess.Process:
        LOGGER.info("Running %s", command)
        try:
            return await asyncio.create_subprocess_exec(
                *command.argv, env=self._env(), **kwargs
            )
        except OSError as err:
            raise CommandLaunchError(command, err) from err

    async def run(self, command: Command) -> None:
        """Run ``command`` and wait for it to finish.

        Raises:
            :py:class:`CommandLaunchError`: if the process cannot be started
            :py:class:`CommandExitError`: if the process fails

        """
        process = await self._spawn(command)
        if (returncode := await process.wait()) != 0:
            raise CommandExitError(command, returncode)

    async def stdout(self, command: Command) -> str:
        """Run ``command`` with a closed standard input and return its
        decoded standard output.

        Raises:
            :py:class:`CommandLaunchError`: if the process cannot be started
            :py:class:`CommandExitError`: if the process fails
            :py:class:`CommandDecodeError`: if the output is not valid UTF-8

        """
        process = await self._spawn(
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
        )
        output, _ = await process.communicate()
        if process.returncode != 0:
            assert process.returncode is not None
            raise CommandExitError(command, process.returncode)

        try:
            return output.decode("utf-8")
        except UnicodeDecodeError as err:
            raise CommandDecodeError(command, err) from err
