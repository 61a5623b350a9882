#!/usr/bin/env python3
r"""Filter rules matching relative asset paths.

This module provides the matching predicates used by filters:
- ExtensionRule: exact, case-sensitive file extension match
- PatternRule: regular expression search over the path string

Paths are matched relative to the asset root, rendered as platform-native
strings. Normalizing separators inside patterns is up to the caller; a
pattern meant for every platform should accept both, e.g. ``^styles[/\\]``.

Example:
    >>> rule = ExtensionRule("html")
    >>> rule.matches("about/index.html")
    True
    >>> PatternRule(r"^styles/.*\.css$").matches("styles/site.css")
    True
"""

from abc import ABC, abstractmethod
from os import PathLike
from pathlib import PurePath
from typing import Optional, Pattern, Union

from assetembed.core.validators import validate_extension, validate_pattern

PathType = Union[str, PathLike]


def file_extension(path: PathType) -> Optional[str]:
    """Return the characters after the final period of the file name.

    A name without a period, or whose only period is the leading one
    (``.hidden``), has no extension.

    Args:
        path: File path

    Returns:
        Extension without the period, or None
    """
    name = PurePath(path).name
    stem, dot, extension = name.rpartition(".")
    if not dot or not stem:
        return None
    return extension


class FilterRule(ABC):
    """A matching predicate over a path relative to the asset root."""

    @abstractmethod
    def matches(self, relative_path: PathType) -> bool:
        """Check if the path matches this rule.

        Args:
            relative_path: Path relative to the asset root

        Returns:
            True if the rule matches
        """

    @abstractmethod
    def describe(self) -> str:
        """Short human readable form used in logs and errors."""


class ExtensionRule(FilterRule):
    """Match files carrying an exact extension.

    The extension is given without a leading period.
    """

    def __init__(self, extension: str):
        """Initialize extension rule.

        Args:
            extension: Extension without the period (e.g. "png")

        Raises:
            InvalidRuleError: If the extension is empty or starts with a period
        """
        validate_extension(extension)
        self._extension = extension

    @property
    def extension(self) -> str:
        return self._extension

    def matches(self, relative_path: PathType) -> bool:
        return file_extension(relative_path) == self._extension

    def describe(self) -> str:
        return f"extension={self._extension}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtensionRule):
            return NotImplemented
        return self._extension == other._extension

    def __hash__(self) -> int:
        return hash(("extension", self._extension))

    def __repr__(self) -> str:
        return f"ExtensionRule({self._extension!r})"


class PatternRule(FilterRule):
    """Match paths with a regular expression.

    The expression is searched anywhere in the path; anchor it with ``^`` and
    ``$`` for whole-path matches.
    """

    def __init__(self, pattern: Union[str, Pattern[str]]):
        """Initialize pattern rule.

        Args:
            pattern: Regex string or compiled pattern

        Raises:
            InvalidRuleError: If the pattern does not compile
        """
        self._compiled = validate_pattern(pattern)

    @property
    def pattern(self) -> str:
        return self._compiled.pattern

    def matches(self, relative_path: PathType) -> bool:
        return self._compiled.search(str(relative_path)) is not None

    def describe(self) -> str:
        return f"pattern={self._compiled.pattern}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PatternRule):
            return NotImplemented
        return self._compiled == other._compiled

    def __hash__(self) -> int:
        return hash(("pattern", self._compiled.pattern, self._compiled.flags))

    def __repr__(self) -> str:
        return f"PatternRule({self._compiled.pattern!r})"
