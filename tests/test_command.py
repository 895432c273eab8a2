import pytest

from f1_ext_install.system.command import Command
from f1_ext_install.system.command import CommandDecodeError
from f1_ext_install.system.command import CommandError
from f1_ext_install.system.command import CommandExitError
from f1_ext_install.system.command import CommandLaunchError
from f1_ext_install.system.command import CommandRunner


def test_command_as_str():
    assert (
        str(Command("scanelf", ("--format", "%n#p", "/usr/local")))
        == "scanelf --format '%n#p' /usr/local"
    )
    assert Command("apk", ("del", ".build-deps")).argv == ["apk", "del", ".build-deps"]


@pytest.mark.asyncio
async def test_run_success():
    await CommandRunner().run(Command("true"))


@pytest.mark.asyncio
async def test_run_non_zero_exit():
    with pytest.raises(CommandExitError) as exc_info:
        await CommandRunner().run(Command("sh", ("-c", "exit 3")))

    assert exc_info.value.returncode == 3
    assert "non-zero exit code 3" in str(exc_info.value)
    assert "sh -c 'exit 3'" in str(exc_info.value)


@pytest.mark.asyncio
async def test_run_killed_by_signal():
    with pytest.raises(CommandExitError) as exc_info:
        await CommandRunner().run(Command("sh", ("-c", "kill -KILL $$")))

    assert exc_info.value.returncode == -9
    assert "killed by signal SIGKILL" in str(exc_info.value)


@pytest.mark.asyncio
async def test_missing_program():
    with pytest.raises(CommandLaunchError) as exc_info:
        await CommandRunner().run(Command("f1-this-program-does-not-exist"))

    assert isinstance(exc_info.value, CommandError)
    assert exc_info.value.command.program == "f1-this-program-does-not-exist"


@pytest.mark.asyncio
async def test_stdout():
    assert (
        await CommandRunner().stdout(Command("printf", ("%s\n", "libz.so.1")))
        == "libz.so.1\n"
    )


@pytest.mark.asyncio
async def test_stdout_env():
    runner = CommandRunner(env={"F1_TEST_VALUE": "foobar"})
    assert (
        await runner.stdout(Command("sh", ("-c", 'printf "$F1_TEST_VALUE"')))
        == "foobar"
    )


@pytest.mark.asyncio
async def test_stdout_failure():
    with pytest.raises(CommandExitError):
        await CommandRunner().stdout(Command("false"))


@pytest.mark.asyncio
async def test_stdout_invalid_utf8():
    with pytest.raises(CommandDecodeError):
        await CommandRunner().stdout(Command("printf", ("\\377\\376",)))


def test_env_reference_is_not_quoted():
    assert (
        str(Command("apk", ("add", "$PHPIZE_DEPS", "$(id)", "a b")))
        == "apk add $PHPIZE_DEPS '$(id)' 'a b'"
    )
