"""The Alpine package manager :command:`apk`.

Build dependencies are installed into the virtual package
:py:const:`BUILD_DEPS_VIRTUAL` so that they can be removed with a single
:command:`apk del` once the extensions are compiled. Before that, the shared
libraries that the freshly built binaries in :file:`/usr/local` link against
are pinned via the virtual package :py:const:`RUNTIME_DEPS_VIRTUAL`.

"""

import os
import re
from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field

import aiofiles.os

from f1_ext_install.extension import Extension
from f1_ext_install.logger import LOGGER
from f1_ext_install.system.command import Command
from f1_ext_install.system.command import CommandRunner

#: environment variable with the packages that :command:`phpize` needs (C
#: compiler, autoconf, …), set by the official PHP images
PHPIZE_DEPS_ENVVAR_NAME = "PHPIZE_DEPS"

BUILD_DEPS_VIRTUAL = ".build-deps"

RUNTIME_DEPS_VIRTUAL = ".docker-phpexts-rundeps"

_SCANELF_DELIMITER_RE = re.compile(r"[,\s]+")


def phpize_deps(environ: Mapping[str, str] | None = None) -> list[str]:
    """Returns the whitespace separated packages from ``$PHPIZE_DEPS``."""
    env = os.environ if environ is None else environ
    return env.get(PHPIZE_DEPS_ENVVAR_NAME, "").split()


def collect_packages(
    extensions: Iterable[Extension], baseline: Iterable[str] = ()
) -> list[str]:
    """Concatenate ``baseline`` (usually :py:func:`phpize_deps`) and the
    packages of every extension, keeping their order.

    """
    packages = list(baseline)
    for extension in extensions:
        packages.extend(extension.packages or ())
    return packages


def split_scanelf_output(output: str) -> list[str]:
    """Split the output of :command:`scanelf --format '%n#p'` (comma separated
    libraries, one binary per line) into the sorted set of libraries.

    """
    return sorted({lib for lib in _SCANELF_DELIMITER_RE.split(output) if lib})


@dataclass
class Apk:
    #: directory that is scanned for binaries needing shared libraries
    scan_dir: str = "/usr/local"

    #: libraries found in this directory are provided by the image itself
    lib_dir: str = "/usr/local/lib"

    _run_cmd: CommandRunner = field(default_factory=CommandRunner)

    @staticmethod
    def install_command(packages: Iterable[str]) -> Command:
        return Command(
            "apk", ("add", "--no-cache", "--virtual", BUILD_DEPS_VIRTUAL, *packages)
        )

    def scanelf_command(self) -> Command:
        return Command(
            "scanelf",
            (
                "--needed",
                "--nobanner",
                "--format",
                "%n#p",
                "--recursive",
                self.scan_dir,
            ),
        )

    @staticmethod
    def save_runtime_deps_command(libraries: Iterable[str]) -> Command:
        return Command(
            "apk",
            (
                "add",
                "--virtual",
                RUNTIME_DEPS_VIRTUAL,
                *(f"so:{lib}" for lib in libraries),
            ),
        )

    @staticmethod
    def remove_build_deps_command() -> Command:
        return Command("apk", ("del", BUILD_DEPS_VIRTUAL))

    async def save_runtime_deps(self) -> None:
        """Mark the shared libraries needed by the binaries in
        :py:attr:`scan_dir` as explicitly installed, so that removing the
        build dependencies does not remove them.

        """
        output = await self._run_cmd.stdout(self.scanelf_command())

        rundeps = []
        for lib in split_scanelf_output(output):
            if await aiofiles.os.path.exists(os.path.join(self.lib_dir, lib)):
                LOGGER.debug("%s is provided by %s, skipping it", lib, self.lib_dir)
                continue
            rundeps.append(lib)

        if not rundeps:
            LOGGER.info("No runtime dependencies need to be saved")
            return

        await self._run_cmd.run(self.save_runtime_deps_command(rundeps))

