"""
Filter and Sort Engine

This module produces the filtered and ordered views shown in the dashboard
tabs. Every tab is a TabVariant carrying its own search fields and sort table;
all functions are pure and never mutate the collection they are given.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from constants import (
    DEFAULT_SORT_OPTION, SORT_NEWEST, SORT_OLDEST, SORT_AZ, SORT_ZA, SORT_STARS, TAB_DEFINITIONS
)
from utils import contains_query, parse_github_timestamp

SortFunction = Callable[[Sequence[Any]], List[Any]]


class TabVariant(Enum):
    """The entity collections shown as dashboard tabs."""

    PULL_REQUESTS = "pull-requests"
    ISSUES = "issues"
    REPOSITORIES = "repositories"
    ORGANIZATIONS = "organizations"
    STARRED = "starred"

    @classmethod
    def from_tab_id(cls, tab_id: str) -> "TabVariant":
        """Resolve a tab id; unknown ids raise ValueError."""
        return cls(tab_id)

    @property
    def label(self) -> str:
        return dict(TAB_DEFINITIONS)[self.value]


@dataclass(frozen=True)
class TabConfig:
    """Search and sort configuration for one tab."""

    noun: str
    search_fields: Callable[[Any], Iterable[Optional[str]]]
    sorters: Dict[str, SortFunction]
    fallback_sort: str

    @property
    def sort_options(self) -> Tuple[str, ...]:
        return tuple(self.sorters)


# =============================================================================
# Sort Building Blocks
# =============================================================================

def _collation_key(value: Optional[str]) -> Tuple[str, str]:
    """Case-insensitive ordering with the raw text as tie-breaker."""
    text = value or ""
    return text.casefold(), text


def _by_text(attribute: str, descending: bool = False) -> SortFunction:
    def sort(items: Sequence[Any]) -> List[Any]:
        return sorted(items, key=lambda item: _collation_key(getattr(item, attribute)), reverse=descending)
    return sort


def _by_timestamp(attribute: str, descending: bool) -> SortFunction:
    """Order by a timestamp attribute; records without a valid timestamp go last."""
    def sort(items: Sequence[Any]) -> List[Any]:
        dated: List[Tuple[datetime, Any]] = []
        undated: List[Any] = []
        for item in items:
            timestamp = parse_github_timestamp(getattr(item, attribute))
            if timestamp is None:
                undated.append(item)
            else:
                dated.append((timestamp, item))
        dated.sort(key=lambda pair: pair[0], reverse=descending)
        return [item for _, item in dated] + undated
    return sort


def _by_stars(items: Sequence[Any]) -> List[Any]:
    return sorted(items, key=lambda item: item.stars or 0, reverse=True)


# =============================================================================
# Tab Configurations
# =============================================================================

def _activity_fields(item: Any) -> Iterable[Optional[str]]:
    return (item.title, item.repository, item.labels)


def _repository_fields(item: Any) -> Iterable[Optional[str]]:
    return (item.name, item.description, item.language, *(item.topics or ()))


def _organization_fields(item: Any) -> Iterable[Optional[str]]:
    return (item.login, item.name, item.description)


_ACTIVITY_SORTERS: Dict[str, SortFunction] = {
    SORT_NEWEST: _by_timestamp("created_datetime", descending=True),
    SORT_OLDEST: _by_timestamp("created_datetime", descending=False),
    SORT_AZ: _by_text("title"),
    SORT_ZA: _by_text("title", descending=True),
}

TAB_CONFIGS: Dict[TabVariant, TabConfig] = {
    TabVariant.PULL_REQUESTS: TabConfig(
        noun="pull requests",
        search_fields=_activity_fields,
        sorters=_ACTIVITY_SORTERS,
        fallback_sort=DEFAULT_SORT_OPTION,
    ),
    TabVariant.ISSUES: TabConfig(
        noun="issues",
        search_fields=_activity_fields,
        sorters=_ACTIVITY_SORTERS,
        fallback_sort=DEFAULT_SORT_OPTION,
    ),
    TabVariant.REPOSITORIES: TabConfig(
        noun="repositories",
        search_fields=_repository_fields,
        sorters={
            SORT_NEWEST: _by_timestamp("updated", descending=True),
            SORT_OLDEST: _by_timestamp("created", descending=False),
            SORT_AZ: _by_text("name"),
            SORT_ZA: _by_text("name", descending=True),
        },
        fallback_sort=DEFAULT_SORT_OPTION,
    ),
    TabVariant.ORGANIZATIONS: TabConfig(
        noun="organizations",
        search_fields=_organization_fields,
        sorters={
            # no date field, both date orders fall back to login
            SORT_NEWEST: _by_text("login"),
            SORT_OLDEST: _by_text("login"),
            SORT_AZ: _by_text("name"),
            SORT_ZA: _by_text("name", descending=True),
        },
        fallback_sort=DEFAULT_SORT_OPTION,
    ),
    TabVariant.STARRED: TabConfig(
        noun="starred repositories",
        search_fields=_repository_fields,
        sorters={
            SORT_STARS: _by_stars,
            SORT_NEWEST: _by_stars,
            SORT_OLDEST: _by_stars,
            SORT_AZ: _by_text("name"),
            SORT_ZA: _by_text("name", descending=True),
        },
        fallback_sort=SORT_STARS,
    ),
}

_unconfigured = set(TabVariant) - set(TAB_CONFIGS)
if _unconfigured:
    raise RuntimeError(f"Missing tab configuration for: {sorted(v.name for v in _unconfigured)}")


# =============================================================================
# Public API
# =============================================================================

def get_tab_config(variant: TabVariant) -> TabConfig:
    return TAB_CONFIGS[variant]


def filter_items(collection: Optional[Sequence[Any]], search_query: Optional[str],
                 variant: TabVariant) -> List[Any]:
    """
    Keep the records whose searchable fields contain the query.

    Args:
        collection: Records of the variant's type (None is treated as empty)
        search_query: Free-text query, matched case-insensitively
        variant: Tab whose search fields apply

    Returns:
        New list in the original order; the whole collection for an empty query
    """
    items = list(collection or [])
    if not search_query:
        return items

    query = search_query.lower()
    search_fields = TAB_CONFIGS[variant].search_fields
    return [
        item for item in items
        if any(contains_query(value, query) for value in search_fields(item))
    ]


def sort_items(collection: Optional[Sequence[Any]], sort_option: Optional[str],
               variant: TabVariant) -> List[Any]:
    """
    Order records by the variant's policy for sort_option.

    Unrecognized options use the variant's fallback policy. The sort is
    stable, so records that compare equal keep their fetch order.
    """
    config = TAB_CONFIGS[variant]
    sorter = config.sorters.get(sort_option) or config.sorters[config.fallback_sort]
    return sorter(list(collection or []))


def filter_and_sort(collection: Optional[Sequence[Any]], search_query: Optional[str],
                    sort_option: Optional[str], variant: TabVariant) -> List[Any]:
    """
    Produce the filtered-and-ordered view for a tab.

    Args:
        collection: Records of the variant's type, in fetch order
        search_query: Free-text query (case-insensitive, empty means no filtering)
        sort_option: One of the variant's sort options
        variant: Which tab the records belong to

    Returns:
        A new list; the input collection is never modified
    """
    return sort_items(filter_items(collection, search_query, variant), sort_option, variant)


def filter_and_sort_pull_requests(pull_requests, search_query, sort_option):
    return filter_and_sort(pull_requests, search_query, sort_option, TabVariant.PULL_REQUESTS)


def filter_and_sort_issues(issues, search_query, sort_option):
    return filter_and_sort(issues, search_query, sort_option, TabVariant.ISSUES)


def filter_and_sort_repositories(repositories, search_query, sort_option):
    return filter_and_sort(repositories, search_query, sort_option, TabVariant.REPOSITORIES)


def filter_and_sort_organizations(organizations, search_query, sort_option):
    return filter_and_sort(organizations, search_query, sort_option, TabVariant.ORGANIZATIONS)


def filter_and_sort_starred(starred_repos, search_query, sort_option):
    return filter_and_sort(starred_repos, search_query, sort_option, TabVariant.STARRED)


def empty_state_message(variant: TabVariant, search_query: Optional[str]) -> str:
    """
    Message for a tab with nothing to show.

    Distinguishes "no data at all" from "no matches for the query".
    """
    noun = TAB_CONFIGS[variant].noun
    if search_query:
        return f'No {noun} found matching "{search_query}"'
    return f"No {noun} available"
