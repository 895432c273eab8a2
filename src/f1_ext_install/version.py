"""The version (or release channel) of a PECL extension."""

import enum
import re
from dataclasses import dataclass

#: a strict ``MAJOR.MINOR.PATCH`` triple, ASCII digits only
RELEASE_RE = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")


@enum.unique
class VersionKind(enum.Enum):
    """Discriminant of a :py:class:`Version`."""

    #: the ``stable`` release channel
    STABLE = "stable"
    #: an explicit ``MAJOR.MINOR.PATCH`` release
    CUSTOM = "custom"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Version:
    """A PECL version, either the stable channel or a fixed release.

    Versions only support equality, there is deliberately no ordering.

    """

    kind: VersionKind = VersionKind.STABLE

    #: the ``MAJOR.MINOR.PATCH`` string, only set for custom versions
    release: str | None = None

    def __post_init__(self) -> None:
        if self.kind == VersionKind.CUSTOM and not self.release:
            raise ValueError("A custom version requires a release string")
        if self.kind == VersionKind.STABLE and self.release is not None:
            raise ValueError(
                f"The stable channel cannot have the release {self.release}"
            )
        if self.release is not None and not RELEASE_RE.fullmatch(self.release):
            raise ValueError(
                f"Invalid release '{self.release}', expected MAJOR.MINOR.PATCH"
            )

    @classmethod
    def stable(cls) -> "Version":
        return cls()

    @classmethod
    def custom(cls, release: str) -> "Version":
        return cls(kind=VersionKind.CUSTOM, release=release)

    @property
    def is_stable(self) -> bool:
        return self.kind == VersionKind.STABLE

    def __str__(self) -> str:
        if self.kind == VersionKind.STABLE:
            return str(VersionKind.STABLE)
        assert self.release is not None
        return self.release
