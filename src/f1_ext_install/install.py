"""Installation of a list of extensions.

A run is first turned into a plan, a list of steps that are either external
commands or the (output dependent) saving of runtime dependencies. The plan
is then either executed or rendered into the single :file:`Dockerfile`
``RUN`` instruction that it replaces.

"""

from collections.abc import Iterable
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field

from f1_ext_install.extension import Extension
from f1_ext_install.logger import LOGGER
from f1_ext_install.system.apk import Apk
from f1_ext_install.system.apk import PHPIZE_DEPS_ENVVAR_NAME
from f1_ext_install.system.apk import RUNTIME_DEPS_VIRTUAL
from f1_ext_install.system.apk import collect_packages
from f1_ext_install.system.command import Command
from f1_ext_install.system.command import CommandRunner
from f1_ext_install.system.php import PhpToolchain
from f1_ext_install.templates import DOCKERFILE_RUN_TEMPLATE
from f1_ext_install.templates import SAVE_RUNTIME_DEPS_TEMPLATE


@dataclass(frozen=True)
class SaveRuntimeDeps:
    """Plan step that pins the shared libraries of the built extensions."""


Step = Command | SaveRuntimeDeps


@dataclass
class Installer:
    apk: Apk = field(default_factory=Apk)

    php: PhpToolchain = field(default_factory=PhpToolchain)

    _run_cmd: CommandRunner = field(default_factory=CommandRunner)

    def plan(
        self, extensions: Sequence[Extension], baseline: Iterable[str] = ()
    ) -> list[Step]:
        """Returns the steps that install ``extensions``:

        1. install ``baseline`` and the packages of all extensions
        2. configure every builtin that has a configure command
        3. compile all builtins with one :command:`docker-php-ext-install`
        4. install (and possibly enable) every PECL extension
        5. save the runtime dependencies if any extension needed packages
        6. remove the build dependencies

        """
        steps: list[Step] = [
            self.apk.install_command(collect_packages(extensions, baseline))
        ]

        builtins = [extension for extension in extensions if extension.is_builtin]
        for builtin in builtins:
            if builtin.configure_cmd is not None:
                steps.append(
                    self.php.configure_command(builtin.name, builtin.configure_cmd)
                )

        if (
            install := self.php.install_command(builtin.name for builtin in builtins)
        ) is not None:
            steps.append(install)

        for extension in extensions:
            if extension.is_pecl:
                steps.extend(self.php.pecl_commands(extension))

        if any(extension.has_packages for extension in extensions):
            steps.append(SaveRuntimeDeps())

        steps.append(self.apk.remove_build_deps_command())
        return steps

    async def install(
        self, extensions: Sequence[Extension], baseline: Iterable[str] = ()
    ) -> None:
        """Execute the plan for ``extensions``, stopping at the first failure.

        Raises:
            :py:class:`~f1_ext_install.system.command.CommandError`: if a
                command fails

        """
        LOGGER.info("Installing %s", ", ".join(str(ext) for ext in extensions))
        for step in self.plan(extensions, baseline):
            if isinstance(step, SaveRuntimeDeps):
                await self.apk.save_runtime_deps()
            else:
                await self._run_cmd.run(step)

    def render(
        self,
        extensions: Sequence[Extension],
        baseline: Iterable[str] = (f"${PHPIZE_DEPS_ENVVAR_NAME}",),
    ) -> str:
        """Render the plan for ``extensions`` as a :file:`Dockerfile` ``RUN``
        instruction. The baseline packages default to a reference to
        ``$PHPIZE_DEPS``, which the image being built provides.

        """
        steps = []
        for step in self.plan(extensions, baseline):
            if isinstance(step, SaveRuntimeDeps):
                steps.append(
                    SAVE_RUNTIME_DEPS_TEMPLATE.render(
                        apk=self.apk, virtual=RUNTIME_DEPS_VIRTUAL
                    )
                )
            else:
                steps.append(str(step))
        return DOCKERFILE_RUN_TEMPLATE.render(steps=steps)
