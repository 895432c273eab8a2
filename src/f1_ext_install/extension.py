"""The extensions that should be installed into the image being built."""

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field

from f1_ext_install.parse import BUILTIN_TAG
from f1_ext_install.parse import ExpectedPrefixError
from f1_ext_install.parse import PECL_TAG
from f1_ext_install.parse import parse_all
from f1_ext_install.parse import parse_name
from f1_ext_install.parse import parse_version
from f1_ext_install.registry import ExtensionKind
from f1_ext_install.registry import ExtensionMetadata
from f1_ext_install.registry import resolve
from f1_ext_install.version import Version


@dataclass(frozen=True)
class Extension:
    """A PHP extension, either a builtin (e.g. ``gd``, ``opcache``) or an
    extension from PECL (e.g. ``memcached``, ``xdebug``).

    Builtins never have a version, PECL extensions always have one (the stable
    channel by default).

    """

    kind: ExtensionKind

    #: the extension name as understood by :command:`docker-php-ext-install`
    #: or :command:`pecl`
    name: str

    metadata: ExtensionMetadata = field(default_factory=ExtensionMetadata)

    #: the requested version, only set for PECL extensions
    version: Version | None = None

    def __post_init__(self) -> None:
        parse_all(self.name, parse_name)

        if self.kind == ExtensionKind.PECL and self.version is None:
            raise ValueError(f"The PECL extension {self.name} requires a version")
        if self.kind == ExtensionKind.BUILTIN and self.version is not None:
            raise ValueError(f"The builtin {self.name} cannot have a version")

    @classmethod
    def builtin(
        cls, name: str, environ: Mapping[str, str] | None = None
    ) -> "Extension":
        """Create the builtin ``name`` with the metadata found in the registry
        or in ``environ`` (defaults to :py:data:`os.environ`).

        """
        return cls(
            kind=ExtensionKind.BUILTIN,
            name=name,
            metadata=resolve(name, ExtensionKind.BUILTIN, environ),
        )

    @classmethod
    def pecl(
        cls,
        name: str,
        version: Version | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Extension":
        return cls(
            kind=ExtensionKind.PECL,
            name=name,
            metadata=resolve(name, ExtensionKind.PECL, environ),
            version=version or Version.stable(),
        )

    @classmethod
    def parse(
        cls, text: str, environ: Mapping[str, str] | None = None
    ) -> "Extension":
        """Parse an extension specifier from the command line.

        The syntax is one of:

        * ``builtin:<name>``: the PHP builtin ``<name>``
        * ``pecl:<name>``: the latest stable release of the PECL extension ``<name>``
        * ``pecl:<name>@stable``: same as above, with the channel made explicit
        * ``pecl:<name>@<version>``: the release ``MAJOR.MINOR.PATCH``

        The whole input has to match, trailing characters are an error.

        Raises:
            :py:class:`~f1_ext_install.parse.ExpectedPrefixError`: if the prefix
                is neither ``builtin:`` nor ``pecl:``
            :py:class:`~f1_ext_install.parse.InvalidSyntaxError`: if the name or
                version is malformed

        """
        if text.startswith(BUILTIN_TAG):
            name = parse_all(text, parse_name, len(BUILTIN_TAG))
            return cls.builtin(name, environ)

        if text.startswith(PECL_TAG):

            def _name_and_version(
                text: str, pos: int
            ) -> tuple[tuple[str, Version], int]:
                name, pos = parse_name(text, pos)
                version = Version.stable()
                if text.startswith("@", pos):
                    version, pos = parse_version(text, pos + 1)
                return (name, version), pos

            name, version = parse_all(text, _name_and_version, len(PECL_TAG))
            return cls.pecl(name, version, environ)

        raise ExpectedPrefixError(text)

    @property
    def is_builtin(self) -> bool:
        return self.kind == ExtensionKind.BUILTIN

    @property
    def is_pecl(self) -> bool:
        return self.kind == ExtensionKind.PECL

    @property
    def packages(self) -> tuple[str, ...] | None:
        """The :command:`apk` packages needed to build this extension (if any)."""
        return self.metadata.packages

    @property
    def has_packages(self) -> bool:
        return bool(self.metadata.packages)

    @property
    def configure_cmd(self) -> tuple[str, ...] | None:
        """The arguments for :command:`docker-php-ext-configure`. Always
        ``None`` for PECL extensions.

        """
        if self.is_pecl:
            return None
        return self.metadata.configure_cmd

    @property
    def default_enabled(self) -> bool:
        """Whether :command:`docker-php-ext-enable` is run after installing
        this extension. Builtins are enabled by :command:`docker-php-ext-install`.

        """
        return self.metadata.default_enabled

    @property
    def specifier(self) -> str:
        """The package specifier in the form ``<name>-<version>`` as passed to
        :command:`pecl install`, builtins are specified by their bare name.

        """
        if self.version is None:
            return self.name
        return f"{self.name}-{self.version}"

    def __str__(self) -> str:
        if self.version is None:
            return f"{self.kind}:{self.name}"
        return f"{self.kind}:{self.name}@{self.version}"
