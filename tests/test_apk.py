import pathlib

import pytest

from f1_ext_install.extension import Extension
from f1_ext_install.system.apk import Apk
from f1_ext_install.system.apk import collect_packages
from f1_ext_install.system.apk import phpize_deps
from f1_ext_install.system.apk import split_scanelf_output
from f1_ext_install.system.command import Command

_SCANELF_OUTPUT = """
libedit.so.0,libcurl.so.4,libz.so.1,libxml2.so.2,libssl.so.45,libcrypto.so.43,libc.musl-x86_64.so.1
libc.musl-x86_64.so.1
libpng16.so.16,libz.so.1,libjpeg.so.8,libfreetype.so.6,libc.musl-x86_64.so.1
libz.so.1,libc.musl-x86_64.so.1
libedit.so.0,libcurl.so.4,libz.so.1,libxml2.so.2,libssl.so.45,libcrypto.so.43,libc.musl-x86_64.so.1
"""


def test_split_scanelf_output():
    assert split_scanelf_output(_SCANELF_OUTPUT) == [
        "libc.musl-x86_64.so.1",
        "libcrypto.so.43",
        "libcurl.so.4",
        "libedit.so.0",
        "libfreetype.so.6",
        "libjpeg.so.8",
        "libpng16.so.16",
        "libssl.so.45",
        "libxml2.so.2",
        "libz.so.1",
    ]


def test_split_empty_scanelf_output():
    assert split_scanelf_output("\n") == []


@pytest.mark.parametrize(
    "value, packages",
    [
        (
            "autoconf dpkg-dev dpkg file g++ gcc",
            ["autoconf", "dpkg-dev", "dpkg", "file", "g++", "gcc"],
        ),
        ("  autoconf\n\tmake  re2c ", ["autoconf", "make", "re2c"]),
        ("", []),
    ],
)
def test_phpize_deps(value: str, packages: list[str]):
    assert phpize_deps({"PHPIZE_DEPS": value}) == packages


def test_phpize_deps_unset():
    assert phpize_deps({}) == []


def test_phpize_deps_from_os_environ(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PHPIZE_DEPS", "autoconf make")
    assert phpize_deps() == ["autoconf", "make"]


def test_collect_packages():
    extensions = [
        Extension.parse("builtin:opcache", {}),
        Extension.parse("builtin:zip", {}),
        Extension.parse("pecl:memcached", {}),
        Extension.parse("pecl:xdebug", {}),
    ]
    assert collect_packages(extensions, ["autoconf", "make"]) == [
        "autoconf",
        "make",
        "libzip-dev",
        "libmemcached-dev",
        "zlib-dev",
        "libevent-dev",
    ]


def test_install_command():
    assert Apk.install_command(["autoconf", "icu-dev"]) == Command(
        "apk", ("add", "--no-cache", "--virtual", ".build-deps", "autoconf", "icu-dev")
    )


def test_remove_build_deps_command():
    assert Apk.remove_build_deps_command() == Command("apk", ("del", ".build-deps"))


@pytest.mark.asyncio
async def test_save_runtime_deps_skips_local_libraries(runner, tmp_path: pathlib.Path):
    (tmp_path / "libpng16.so.16").touch()
    runner.outputs["scanelf"] = "libpng16.so.16,libz.so.1\nlibz.so.1,libc.musl-x86_64.so.1\n"

    apk = Apk(scan_dir="/opt/php", lib_dir=str(tmp_path), _run_cmd=runner)
    await apk.save_runtime_deps()

    assert runner.commands == [
        Command(
            "scanelf",
            ("--needed", "--nobanner", "--format", "%n#p", "--recursive", "/opt/php"),
        ),
        Command(
            "apk",
            (
                "add",
                "--virtual",
                ".docker-phpexts-rundeps",
                "so:libc.musl-x86_64.so.1",
                "so:libz.so.1",
            ),
        ),
    ]


@pytest.mark.asyncio
async def test_save_runtime_deps_without_libraries(runner, tmp_path: pathlib.Path):
    (tmp_path / "libfoo.so.1").touch()
    runner.outputs["scanelf"] = "libfoo.so.1\n"

    await Apk(lib_dir=str(tmp_path), _run_cmd=runner).save_runtime_deps()

    assert [cmd.program for cmd in runner.commands] == ["scanelf"]
