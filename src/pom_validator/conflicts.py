"""Duplicate and version-conflict detection over coordinate declarations."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeVar

from pydantic import BaseModel

from pom_validator.models import DependencyEntry, PluginEntry


Entry = TypeVar("Entry", DependencyEntry, PluginEntry)


class Conflict(BaseModel):
    """One coordinate declared more than once in a single list.

    `versions` holds the distinct non-null versions in declaration order; a
    version conflict exists only when it has more than one element.
    """

    key: str
    count: int
    versions: list[str]

    @property
    def has_version_conflict(self) -> bool:
        return len(self.versions) > 1

    def version_set(self) -> str:
        return "{" + ", ".join(self.versions) + "}"


def group_by_key(entries: Iterable[Entry]) -> dict[str, list[Entry]]:
    """Group entries by `groupId:artifactId`, preserving first-seen order."""
    groups: dict[str, list[Entry]] = {}
    for entry in entries:
        groups.setdefault(entry.key(), []).append(entry)
    return groups


def find_conflicts(entries: Sequence[Entry]) -> list[Conflict]:
    """Return one Conflict per coordinate declared more than once.

    Callers turn each Conflict into exactly one "duplicate" issue, plus exactly
    one "version conflict" issue when `has_version_conflict` is set, however
    many times the coordinate repeats.
    """
    conflicts: list[Conflict] = []
    for key, group in group_by_key(entries).items():
        if len(group) < 2:
            continue
        versions: list[str] = []
        for entry in group:
            if entry.version is not None and entry.version not in versions:
                versions.append(entry.version)
        conflicts.append(Conflict(key=key, count=len(group), versions=versions))
    return conflicts


def first_occurrences(entries: Sequence[Entry], key: str | None = None) -> list[Entry]:
    """Keep the first declaration of each coordinate, drop the rest.

    With `key`, only repeats of that coordinate are dropped.
    """
    seen: set[str] = set()
    kept: list[Entry] = []
    for entry in entries:
        if entry.key() in seen and (key is None or entry.key() == key):
            continue
        seen.add(entry.key())
        kept.append(entry)
    return kept
