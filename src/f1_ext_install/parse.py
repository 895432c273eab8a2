"""Parsers for the building blocks of an extension specifier.

All parsers share the same calling convention: they receive the complete
input and the offset at which they should start and return the parsed value
together with the offset right after the consumed input. On a mismatch they
raise a :py:class:`ParseError` that knows the offending input and position,
so that the user gets a pointer to the exact character that was rejected.

"""

import re
from collections.abc import Callable
from typing import TypeVar

from f1_ext_install.version import RELEASE_RE
from f1_ext_install.version import Version

T = TypeVar("T")

#: Prefix of a builtin extension specifier
BUILTIN_TAG = "builtin:"

#: Prefix of a PECL extension specifier
PECL_TAG = "pecl:"

#: alphabetic led segments joined by single underscores, neither
#: :command:`docker-php-ext-install` nor :command:`pecl` accept names like
#: ``foo__bar`` or ``_foo``
_NAME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9]*(?:_[a-zA-Z][a-zA-Z0-9]*)*")

_STABLE = str(Version.stable())


class ParseError(ValueError):
    """Base class of all errors raised while parsing an extension specifier."""

    def __init__(self, message: str, text: str, offset: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.text = text
        self.offset = offset

    def __str__(self) -> str:
        return f"""{self.message}
    {self.text}
    {" " * self.offset}^"""


class ExpectedPrefixError(ParseError):
    """The specifier neither starts with ``builtin:`` nor with ``pecl:``."""

    def __init__(self, text: str) -> None:
        super().__init__(
            f'An extension specifier needs to begin with either "{BUILTIN_TAG}" or "{PECL_TAG}"',
            text,
        )


class InvalidSyntaxError(ParseError):
    """The name or version is malformed or there is unconsumed input left."""


def parse_name(text: str, pos: int = 0) -> tuple[str, int]:
    """Consume the longest extension name starting at ``pos``.

    Names are identifiers made of alphanumeric segments that start with a
    letter and are joined by single underscores, e.g. ``gd``, ``pdo_mysql``
    or ``example_foo``. Trailing input is left untouched, so ``foo_`` yields
    ``foo`` and leaves the underscore to the caller.

    Raises:
        :py:class:`InvalidSyntaxError`: if no name starts at ``pos``

    """
    if not (match := _NAME_RE.match(text, pos)):
        raise InvalidSyntaxError(
            "An extension name needs to be a valid name (e.g., memcached, pdo_mysql, gd)",
            text,
            pos,
        )
    return match.group(0), match.end()


def parse_version(text: str, pos: int = 0) -> tuple[Version, int]:
    """Consume a PECL version starting at ``pos``, which is either the literal
    ``stable`` or a ``MAJOR.MINOR.PATCH`` release.

    Raises:
        :py:class:`InvalidSyntaxError`: if neither alternative matches

    """
    if text.startswith(_STABLE, pos):
        return Version.stable(), pos + len(_STABLE)

    if match := RELEASE_RE.match(text, pos):
        return Version.custom(match.group(0)), match.end()

    raise InvalidSyntaxError(
        f"A version needs to be either '{_STABLE}' or of the form MAJOR.MINOR.PATCH (e.g. 2.5.5)",
        text,
        pos,
    )


def parse_all(
    text: str, parser: Callable[[str, int], tuple[T, int]], pos: int = 0
) -> T:
    """Run ``parser`` on ``text`` from ``pos`` and require that it consumes the
    complete rest of the input.

    Raises:
        :py:class:`InvalidSyntaxError`: if the parser fails or input is left over

    """
    value, end = parser(text, pos)
    if end != len(text):
        raise InvalidSyntaxError(
            f"Unexpected trailing input '{text[end:]}'", text, end
        )
    return value
