import os
from dataclasses import dataclass
from dataclasses import field

import pytest

from f1_ext_install.system.command import Command
from f1_ext_install.system.command import CommandRunner


@dataclass
class RecordingRunner(CommandRunner):
    """Runner that records the commands instead of executing them."""

    #: standard output returned by :py:meth:`stdout`, keyed by program
    outputs: dict[str, str] = field(default_factory=dict)

    commands: list[Command] = field(default_factory=list)

    async def run(self, command: Command) -> None:
        self.commands.append(command)

    async def stdout(self, command: Command) -> str:
        self.commands.append(command)
        return self.outputs.get(command.program, "")


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture(autouse=True)
def _clean_f1_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("F1_") or name == "PHPIZE_DEPS":
            monkeypatch.delenv(name)
