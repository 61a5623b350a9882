"""assetembed Rules System.

This module provides the filters that select assets:
- FilterRule: ExtensionRule and PatternRule predicates
- Filter / FilterChain: ordered include/exclude evaluation

Rules are matched against paths relative to the asset root.
"""

from assetembed.core.constants import FilterAction, ListPolicy

from .engine import Filter, FilterChain
from .patterns import ExtensionRule, FilterRule, PatternRule, file_extension

__all__ = [
    # Rules
    "FilterRule",
    "ExtensionRule",
    "PatternRule",
    "file_extension",
    # Filters
    "FilterAction",
    "ListPolicy",
    "Filter",
    "FilterChain",
]
