"""Command line entry point of :command:`f1-ext-install`."""

import argparse
import asyncio
import sys
from collections.abc import Sequence

from f1_ext_install import __version__
from f1_ext_install.extension import Extension
from f1_ext_install.install import Installer
from f1_ext_install.logger import LOGGER
from f1_ext_install.logger import set_verbosity
from f1_ext_install.parse import ParseError
from f1_ext_install.system.apk import Apk
from f1_ext_install.system.apk import PHPIZE_DEPS_ENVVAR_NAME
from f1_ext_install.system.apk import phpize_deps
from f1_ext_install.system.command import CommandError
from f1_ext_install.system.command import CommandRunner
from f1_ext_install.system.php import PhpToolchain
from f1_ext_install.system.php import default_jobs


def _extension(value: str) -> Extension:
    try:
        return Extension.parse(value)
    except ParseError as err:
        raise argparse.ArgumentTypeError(str(err)) from err


def _positive_int(value: str) -> int:
    try:
        jobs = int(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid number: '{value}'") from err
    if jobs < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {jobs}")
    return jobs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "f1-ext-install",
        description="Install builtin and PECL PHP extensions inside a container build.",
        epilog=f"The packages from ${PHPIZE_DEPS_ENVVAR_NAME} are installed as build dependencies. "
        "Packages and configure arguments of extensions that are not known to this tool "
        "can be supplied via the environment variables F1_BUILTIN_<NAME>_PACKAGES, "
        "F1_BUILTIN_<NAME>_CONFIGURE_CMD, F1_PECL_<NAME>_PACKAGES and "
        "F1_PECL_<NAME>_DISABLED (lists are comma separated).",
    )
    parser.add_argument(
        "extensions",
        type=_extension,
        nargs="+",
        metavar="EXTENSION",
        help="The extensions to install: builtin:<name>, pecl:<name>, "
        "pecl:<name>@stable or pecl:<name>@<MAJOR.MINOR.PATCH>",
    )
    parser.add_argument(
        "--jobs",
        "-j",
        type=_positive_int,
        default=None,
        help="Number of parallel jobs used to compile builtins (defaults to the number of CPUs)",
    )
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Don't run anything, print the equivalent Dockerfile RUN instruction instead",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Set the verbosity of the logger to stderr",
    )
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    set_verbosity(args.verbose)

    runner = CommandRunner()
    installer = Installer(
        apk=Apk(_run_cmd=runner),
        php=PhpToolchain(jobs=args.jobs or default_jobs()),
        _run_cmd=runner,
    )
    extensions: list[Extension] = args.extensions

    if args.dry_run:
        print(installer.render(extensions))
        return 0

    baseline = phpize_deps()

    try:
        asyncio.run(installer.install(extensions, baseline))
    except CommandError as err:
        LOGGER.error("%s", err)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
