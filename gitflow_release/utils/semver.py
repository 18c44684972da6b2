"""Semantic version parsing and increments.

Increments follow the npm ``semver`` rules that release tooling on GitHub
usually expects, e.g. ``1.0.0-1`` bumped by ``major`` is ``1.0.0`` and
``1.2.3`` bumped by ``prerelease`` is ``1.2.4-0``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

INCREMENT_KINDS = (
    "major",
    "premajor",
    "minor",
    "preminor",
    "patch",
    "prepatch",
    "prerelease",
)

_IDENT = r"(?:\d+|\d*[a-zA-Z-][a-zA-Z0-9-]*)"

# Loose form: tolerates a leading "v" or "=", surrounding whitespace and
# a missing "-" before the prerelease part.
_LOOSE_RE = re.compile(
    rf"^[v=\s]*(\d+)\.(\d+)\.(\d+)"
    rf"(?:-?({_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)

Identifier = Union[int, str]


@dataclass(frozen=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: Tuple[Identifier, ...] = ()

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            version += "-" + ".".join(str(part) for part in self.prerelease)
        return version

    def bump(self, kind: str) -> "SemVer":
        if kind == "premajor":
            return SemVer(self.major + 1, 0, 0)._bump_pre()
        if kind == "preminor":
            return SemVer(self.major, self.minor + 1, 0)._bump_pre()
        if kind == "prepatch":
            return SemVer(self.major, self.minor, self.patch + 1)._bump_pre()
        if kind == "prerelease":
            base = self if self.prerelease else self.bump("patch")
            return replace(base, prerelease=self.prerelease)._bump_pre()
        if kind == "major":
            if self.minor != 0 or self.patch != 0 or not self.prerelease:
                return SemVer(self.major + 1, 0, 0)
            return SemVer(self.major, 0, 0)
        if kind == "minor":
            if self.patch != 0 or not self.prerelease:
                return SemVer(self.major, self.minor + 1, 0)
            return SemVer(self.major, self.minor, 0)
        if kind == "patch":
            if not self.prerelease:
                return SemVer(self.major, self.minor, self.patch + 1)
            return SemVer(self.major, self.minor, self.patch)
        raise ValueError(f"unknown increment kind: {kind}")

    def _bump_pre(self) -> "SemVer":
        parts = list(self.prerelease)
        if not parts:
            return replace(self, prerelease=(0,))
        for index in range(len(parts) - 1, -1, -1):
            if isinstance(parts[index], int):
                parts[index] += 1
                break
        else:
            parts.append(0)
        return replace(self, prerelease=tuple(parts))


def _identifier(part: str) -> Identifier:
    return int(part) if part.isdigit() else part


def parse_loose(version: str) -> Optional[SemVer]:
    """Parse ``version`` leniently, returning None when it is not semver."""
    m = _LOOSE_RE.match(version.strip())
    if m is None:
        return None
    prerelease: Tuple[Identifier, ...] = ()
    if m.group(4):
        prerelease = tuple(_identifier(part) for part in m.group(4).split("."))
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)), prerelease)


def increment(version: str, kind: str) -> Optional[str]:
    """Return ``version`` bumped by ``kind``, or None if either is invalid."""
    if kind not in INCREMENT_KINDS:
        return None
    parsed = parse_loose(version)
    if parsed is None:
        return None
    return str(parsed.bump(kind))
