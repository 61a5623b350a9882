#!/usr/bin/env python3
"""Filter chain deciding which files become assets.

This module provides ordered include/exclude filtering:
- Filters pair a rule with an include or exclude action
- First-match-wins evaluation in construction order
- Whitelist/blacklist default when nothing matches

Placing a narrow exception before a broad rule covers the usual
"this folder, except that subfolder" setups.

Example:
    >>> chain = FilterChain(
    ...     [Filter.exclude_regex(r"^admin/"), Filter.include_extension("js")],
    ...     policy=ListPolicy.WHITELIST,
    ... )
    >>> chain.accepts("app.js")
    True
    >>> chain.accepts("admin/app.js")
    False
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Tuple, Union

from assetembed.core.constants import FilterAction, ListPolicy
from assetembed.rules.patterns import ExtensionRule, FilterRule, PathType, PatternRule


@dataclass(frozen=True)
class Filter:
    """A filter rule tagged as include or exclude."""

    action: FilterAction
    rule: FilterRule

    @classmethod
    def include(cls, rule: FilterRule) -> "Filter":
        return cls(FilterAction.INCLUDE, rule)

    @classmethod
    def exclude(cls, rule: FilterRule) -> "Filter":
        return cls(FilterAction.EXCLUDE, rule)

    @classmethod
    def include_extension(cls, extension: str) -> "Filter":
        """Create a filter that includes a file extension.

        Raises:
            InvalidRuleError: If the extension starts with a period
        """
        return cls(FilterAction.INCLUDE, ExtensionRule(extension))

    @classmethod
    def exclude_extension(cls, extension: str) -> "Filter":
        """Create a filter that excludes a file extension.

        Raises:
            InvalidRuleError: If the extension starts with a period
        """
        return cls(FilterAction.EXCLUDE, ExtensionRule(extension))

    @classmethod
    def include_regex(cls, pattern: Union[str, Pattern[str]]) -> "Filter":
        """Create a filter that includes paths matching a regex.

        Raises:
            InvalidRuleError: If the pattern does not compile
        """
        return cls(FilterAction.INCLUDE, PatternRule(pattern))

    @classmethod
    def exclude_regex(cls, pattern: Union[str, Pattern[str]]) -> "Filter":
        """Create a filter that excludes paths matching a regex.

        Raises:
            InvalidRuleError: If the pattern does not compile
        """
        return cls(FilterAction.EXCLUDE, PatternRule(pattern))

    @property
    def is_exclude(self) -> bool:
        return self.action == FilterAction.EXCLUDE

    def matches(self, relative_path: PathType) -> bool:
        """Check if this filter's rule matches the path."""
        return self.rule.matches(relative_path)

    def __str__(self) -> str:
        return f"{self.action.value}({self.rule.describe()})"


class FilterChain:
    """Ordered filters plus a default policy.

    Filters are evaluated in construction order and the first one whose rule
    matches decides. When none match, BLACKLIST accepts and WHITELIST rejects.
    """

    def __init__(
        self,
        filters: Iterable[Filter] = (),
        policy: ListPolicy = ListPolicy.BLACKLIST,
    ):
        """Initialize filter chain.

        Args:
            filters: Filters in evaluation order
            policy: Default disposition when no filter matches
        """
        self._filters: Tuple[Filter, ...] = tuple(filters)
        self._policy = policy

    @property
    def filters(self) -> Tuple[Filter, ...]:
        return self._filters

    @property
    def policy(self) -> ListPolicy:
        return self._policy

    @property
    def rejects_everything(self) -> bool:
        """True when no candidate can ever be accepted."""
        return not self._filters and self._policy == ListPolicy.WHITELIST

    def matching_filter(self, relative_path: PathType) -> Optional[Filter]:
        """Get the filter that decides the path, if any.

        Args:
            relative_path: Path relative to the asset root

        Returns:
            First matching filter, or None
        """
        for filter_ in self._filters:
            if filter_.matches(relative_path):
                return filter_
        return None

    def accepts(self, relative_path: PathType) -> bool:
        """Decide whether the path is accepted.

        Args:
            relative_path: Path relative to the asset root

        Returns:
            True if the path should become an asset
        """
        if not self._filters:
            return self._policy == ListPolicy.BLACKLIST

        decided_by = self.matching_filter(relative_path)
        if decided_by is None:
            return self._policy == ListPolicy.BLACKLIST

        return not decided_by.is_exclude

    def with_filter(self, filter_: Filter) -> "FilterChain":
        """Return a new chain with a filter appended."""
        return FilterChain(self._filters + (filter_,), self._policy)

    def describe(self) -> List[str]:
        return [str(f) for f in self._filters]

    def __len__(self) -> int:
        """Return number of filters."""
        return len(self._filters)

    def __repr__(self) -> str:
        return f"<FilterChain policy={self._policy.value} filters={self.describe()}>"
