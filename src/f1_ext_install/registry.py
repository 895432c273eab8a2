"""Metadata of known PHP extensions and its environment based fallback.

The metadata of an extension is looked up in three steps, each of which
short-circuits:

1. the static registry of this module (separate tables for builtins and PECL
   extensions)
2. the environment variables ``F1_<KIND>_<NAME>_<FIELD>``, where ``<KIND>`` is
   ``BUILTIN`` or ``PECL``, ``<NAME>`` is the upper cased extension name and
   ``<FIELD>`` is one of ``PACKAGES`` and ``CONFIGURE_CMD`` (builtins) or
   ``PACKAGES`` and ``DISABLED`` (PECL)
3. empty metadata, which is what most builtins need

List valued variables are split on commas, whitespace around each item is
stripped and empty items are dropped, so ``"gmp-dev, zlib-dev"`` and
``"gmp-dev,zlib-dev,"`` both yield ``("gmp-dev", "zlib-dev")``. A variable
that is set to the empty string yields an empty list. Booleans accept
``true``/``false`` (case insensitive) and ``1``/``0``.

"""

import enum
import os
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from f1_ext_install.logger import LOGGER


@enum.unique
class ExtensionKind(enum.Enum):
    """The installation method of an extension."""

    #: compiled from the PHP source tree via :command:`docker-php-ext-install`
    BUILTIN = "builtin"
    #: fetched and compiled from the PHP Extension Community Library
    PECL = "pecl"

    def __str__(self) -> str:
        return self.value

    @property
    def env_tag(self) -> str:
        """The ``<KIND>`` part of the environment variables of this kind."""
        return self.value.upper()


@dataclass(frozen=True)
class ExtensionMetadata:
    """Packages and configuration that an extension needs to be built."""

    #: names of the :command:`apk` packages required to build the extension
    packages: tuple[str, ...] | None = None

    #: arguments for :command:`docker-php-ext-configure`, builtins only
    configure_cmd: tuple[str, ...] | None = None

    #: whether the extension gets enabled after the installation, PECL only
    default_enabled: bool = True


class EnvironmentDecodeError(ValueError):
    """An environment variable of the metadata overlay has an invalid value."""


#: comments list builtins that deliberately have no entry:
#:
#: - "no need": no external dependencies, the empty metadata works
#: - "already loaded": ``extension_loaded()`` is true in the ``php:*-cli-alpine``
#:   images
_BUILTIN_REGISTRY: Mapping[str, ExtensionMetadata] = MappingProxyType(
    {
        # bcmath: no need
        "bz2": ExtensionMetadata(
            packages=("bzip2-dev",),
            configure_cmd=("--with-bz2",),
        ),
        # calendar: no need
        # ctype, curl, dom: already loaded
        "enchant": ExtensionMetadata(
            packages=("enchant-dev",),
            configure_cmd=("--with-enchant",),
        ),
        # exif: no need
        # fileinfo, filter, ftp: already loaded
        "gd": ExtensionMetadata(
            packages=("coreutils", "freetype-dev", "libjpeg-turbo-dev"),
            configure_cmd=(
                "--with-freetype-dir=/usr/include/",
                "--with-jpeg-dir=/usr/include/",
                "--with-png-dir=/usr/include/",
            ),
        ),
        "gettext": ExtensionMetadata(
            packages=("gettext", "gettext-dev"),
            configure_cmd=("--with-gettext",),
        ),
        "gmp": ExtensionMetadata(
            packages=("gmp-dev",),
            configure_cmd=("--with-gmp",),
        ),
        # iconv: already loaded
        "imap": ExtensionMetadata(
            packages=("imap-dev", "openssl-dev"),
            configure_cmd=("--with-imap", "--with-imap-ssl"),
        ),
        "intl": ExtensionMetadata(packages=("icu-dev",)),
        # json: already loaded
        "ldap": ExtensionMetadata(
            packages=("openldap-dev",),
            configure_cmd=("--with-ldap", "--with-ldap-sasl"),
        ),
        # mysqli, mysqlnd, opcache, pcntl, pdo_mysql, phar: no need
        "soap": ExtensionMetadata(packages=("libxml2-dev",)),
        # sodium, sqlite3, tokenizer, xml*: already loaded
        "zip": ExtensionMetadata(packages=("libzip-dev",)),
    }
)

_PECL_REGISTRY: Mapping[str, ExtensionMetadata] = MappingProxyType(
    {
        "imagick": ExtensionMetadata(packages=("imagemagick-dev",)),
        "memcached": ExtensionMetadata(
            packages=("libmemcached-dev", "zlib-dev", "libevent-dev"),
        ),
        # xdebug slows down every request, users have to enable it themselves
        "xdebug": ExtensionMetadata(default_enabled=False),
    }
)

_REGISTRIES: Mapping[ExtensionKind, Mapping[str, ExtensionMetadata]] = (
    MappingProxyType(
        {
            ExtensionKind.BUILTIN: _BUILTIN_REGISTRY,
            ExtensionKind.PECL: _PECL_REGISTRY,
        }
    )
)

_TRUE_VALUES = ("true", "1")
_FALSE_VALUES = ("false", "0")


def env_var_name(kind: ExtensionKind, name: str, field: str) -> str:
    """Returns the name of the environment variable that overrides ``field``
    (e.g. ``PACKAGES``) of the extension ``name``.

    """
    return f"F1_{kind.env_tag}_{name.upper()}_{field}"


def decode_list(value: str) -> tuple[str, ...]:
    """Split a comma separated environment variable into its items."""
    return tuple(item for part in value.split(",") if (item := part.strip()))


def decode_bool(value: str) -> bool:
    if (lowered := value.strip().lower()) in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise EnvironmentDecodeError(
        f"Invalid boolean value '{value}', expected one of "
        + ", ".join(_TRUE_VALUES + _FALSE_VALUES)
    )


def metadata_from_env(
    kind: ExtensionKind, name: str, environ: Mapping[str, str] | None = None
) -> ExtensionMetadata | None:
    """Build the metadata of the extension ``name`` from the environment.

    Returns ``None`` if none of the relevant variables is set.

    Raises:
        :py:class:`EnvironmentDecodeError`: if a variable has an invalid value

    """
    env = os.environ if environ is None else environ

    packages_var = env_var_name(kind, name, "PACKAGES")
    packages = decode_list(env[packages_var]) if packages_var in env else None

    if kind == ExtensionKind.BUILTIN:
        configure_var = env_var_name(kind, name, "CONFIGURE_CMD")
        configure_cmd = (
            decode_list(env[configure_var]) if configure_var in env else None
        )
        if packages is None and configure_cmd is None:
            return None
        return ExtensionMetadata(packages=packages, configure_cmd=configure_cmd)

    disabled_var = env_var_name(kind, name, "DISABLED")
    disabled = None
    if disabled_var in env:
        try:
            disabled = decode_bool(env[disabled_var])
        except EnvironmentDecodeError as err:
            raise EnvironmentDecodeError(f"{disabled_var}: {err}") from err

    if packages is None and disabled is None:
        return None
    return ExtensionMetadata(packages=packages, default_enabled=not disabled)


def resolve(
    name: str, kind: ExtensionKind, environ: Mapping[str, str] | None = None
) -> ExtensionMetadata:
    """Find the metadata of the extension ``name`` of the given ``kind``.

    Unknown extensions are not an error, they simply get empty metadata.

    """
    if (found := _REGISTRIES[kind].get(name)) is not None:
        LOGGER.debug("Using the built-in metadata of %s:%s", kind, name)
        return found

    try:
        from_env = metadata_from_env(kind, name, environ)
    except EnvironmentDecodeError as err:
        LOGGER.warning(
            "Ignoring the environment configuration of %s:%s: %s", kind, name, err
        )
        return ExtensionMetadata()

    if from_env is not None:
        LOGGER.debug("Using the metadata of %s:%s from the environment", kind, name)
        return from_env

    LOGGER.debug("No metadata found for %s:%s", kind, name)
    return ExtensionMetadata()
