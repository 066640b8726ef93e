"""Expand device glob patterns into device file paths.

Matching is done one path component at a time, so wildcards never cross a
``/``. A wildcard never matches a leading ``.`` unless the pattern component
itself starts with one. Entries of each directory are visited in sorted order.

Errors on individual candidates are yielded as :class:`MatchError` values so
the caller can report them and carry on with the remaining matches.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from fnmatch import fnmatchcase
from pathlib import Path

from loudspin.core.errors import PatternError
from loudspin.core.model import MatchError

_MAGIC_CHARS = frozenset("*?[")
_RECURSIVE = "**"


def _has_magic(component: str) -> bool:
    return any(char in _MAGIC_CHARS for char in component)


def _check_component(component: str, pattern: str) -> None:
    if _RECURSIVE in component and component != _RECURSIVE:
        raise PatternError(
            f"invalid glob pattern {pattern!r}: recursive wildcards must form a single path component"
        )

    index = component.find("[")
    while index != -1:
        end = index + 1
        if end < len(component) and component[end] == "!":
            end += 1
        if end < len(component) and component[end] == "]":
            end += 1
        close = component.find("]", end)
        if close == -1:
            raise PatternError(f"invalid glob pattern {pattern!r}: unterminated character class")
        index = component.find("[", close + 1)


def _split(pattern: str) -> tuple[Path, list[str]]:
    if not pattern:
        raise PatternError("invalid glob pattern '': pattern is empty")

    root = Path("/") if pattern.startswith("/") else Path(".")
    components = [part for part in pattern.split("/") if part]
    for component in components:
        _check_component(component, pattern)
    return root, components


def _component_matches(component: str, name: str) -> bool:
    if name.startswith(".") and not component.startswith("."):
        return False
    return fnmatchcase(name, component)


def _probe_candidate(path: Path) -> None:
    os.stat(path)


def _finish(path: Path) -> Iterator[Path | MatchError]:
    try:
        _probe_candidate(path)
    except OSError as exc:
        yield MatchError(path=path, error=exc)
        return
    yield path


def _list_dir(base: Path) -> list[os.DirEntry[str]]:
    with os.scandir(base) as entries:
        return sorted(entries, key=lambda entry: entry.name)


def _walk_dirs(base: Path) -> Iterator[Path | MatchError]:
    """Yield ``base`` and every non-hidden directory below it."""
    yield base
    try:
        entries = _list_dir(base)
    except OSError as exc:
        yield MatchError(path=base, error=exc)
        return

    for entry in entries:
        if entry.name.startswith("."):
            continue
        path = base / entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            yield MatchError(path=path, error=exc)
            continue
        if is_dir:
            yield from _walk_dirs(path)


def _expand(base: Path, components: list[str]) -> Iterator[Path | MatchError]:
    if not components:
        yield from _finish(base)
        return

    head, rest = components[0], components[1:]

    if head == _RECURSIVE:
        for item in _walk_dirs(base):
            if isinstance(item, MatchError):
                yield item
                continue
            yield from _expand(item, rest)
        return

    if not _has_magic(head):
        candidate = base / head
        if rest:
            try:
                is_dir = candidate.is_dir()
            except OSError as exc:
                yield MatchError(path=candidate, error=exc)
                return
            if is_dir:
                yield from _expand(candidate, rest)
        elif os.path.lexists(candidate):
            yield from _finish(candidate)
        return

    try:
        entries = _list_dir(base)
    except OSError as exc:
        yield MatchError(path=base, error=exc)
        return

    for entry in entries:
        if not _component_matches(head, entry.name):
            continue
        path = base / entry.name
        if not rest:
            yield from _finish(path)
            continue
        try:
            is_dir = entry.is_dir()
        except OSError as exc:
            yield MatchError(path=path, error=exc)
            continue
        if is_dir:
            yield from _expand(path, rest)


def expand_pattern(pattern: str) -> Iterator[Path | MatchError]:
    """Validate ``pattern`` and return a lazy iterator over its matches.

    Raises :class:`PatternError` immediately for a malformed pattern.
    """
    root, components = _split(pattern)
    return _expand(root, components)
