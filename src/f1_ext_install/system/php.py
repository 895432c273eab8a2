"""The PHP toolchain of the official PHP container images."""

import os
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field

from f1_ext_install.extension import Extension
from f1_ext_install.system.command import Command


def default_jobs() -> int:
    """The number of parallel jobs for :command:`docker-php-ext-install`."""
    return os.cpu_count() or 1


@dataclass(frozen=True)
class PhpToolchain:
    """Builds the invocations of :command:`pecl` and the
    :command:`docker-php-ext-*` scripts.

    """

    #: parallelism hint passed to :command:`docker-php-ext-install -j`
    jobs: int = field(default_factory=default_jobs)

    def __post_init__(self) -> None:
        if self.jobs < 1:
            raise ValueError(f"The number of jobs must be positive, got {self.jobs}")

    @staticmethod
    def configure_command(name: str, configure_args: Iterable[str]) -> Command:
        return Command("docker-php-ext-configure", (name, *configure_args))

    def install_command(self, names: Iterable[str]) -> Command | None:
        """Returns the command to compile all builtins ``names`` at once or
        ``None`` if there is nothing to install.

        """
        if not (names := tuple(names)):
            return None
        return Command("docker-php-ext-install", ("-j", str(self.jobs), *names))

    @staticmethod
    def pecl_install_command(specifier: str) -> Command:
        return Command("pecl", ("install", specifier))

    @staticmethod
    def enable_command(name: str) -> Command:
        return Command("docker-php-ext-enable", (name,))

    def pecl_commands(self, extension: Extension) -> list[Command]:
        """Install the PECL ``extension`` and enable it, unless it is disabled
        by default (like ``xdebug``).

        """
        if not extension.is_pecl:
            raise ValueError(f"{extension} is not a PECL extension")
        commands = [self.pecl_install_command(extension.specifier)]
        if extension.default_enabled:
            commands.append(self.enable_command(extension.name))
        return commands
