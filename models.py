"""
Data models for the GitHub Activity Dashboard.

Records are immutable snapshots produced by the data processing layer. The
filter, sort and metrics functions only ever read them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from constants import NOT_AVAILABLE
from utils import round_half_up


@dataclass(frozen=True)
class ActivityItem:
    """A pull request or issue authored by the user.

    Attributes:
        number: Number within its repository.
        repository: Full repository name ("owner/name").
        title: Title as entered on GitHub.
        state: "Open", "Merged" or "Closed" for pull requests,
            "open" or "closed" for issues.
        created_datetime: Creation timestamp (None if it could not be parsed).
        closed_datetime: Close or merge timestamp, None while open.
        labels: Label names joined with ", ".
        days_open: Days between creation and close (or now while open).
        created: Creation date as YYYY-MM-DD.
        updated: Last update date as YYYY-MM-DD.
    """

    number: int
    repository: str
    title: str
    state: str
    created_datetime: Optional[datetime]
    closed_datetime: Optional[datetime] = None
    labels: str = ""
    days_open: float = 0.0
    created: str = ""
    updated: str = ""
    url: str = ""
    comments: int = 0
    hour_created: Optional[int] = None
    day_of_week: str = ""
    month: str = ""
    year: str = ""

    def to_row(self) -> Dict[str, Any]:
        """Convert to a table row for display."""
        return {
            "#": self.number,
            "Repository": self.repository,
            "Title": self.title,
            "State": self.state,
            "Days Open": self.days_open,
            "Created": self.created,
            "Updated": self.updated,
            "Labels": self.labels,
            "URL": self.url,
        }


@dataclass(frozen=True)
class PullRequest(ActivityItem):
    """A pull request; state is "Open", "Merged" or "Closed"."""


@dataclass(frozen=True)
class Issue(ActivityItem):
    """An issue; state is lowercase "open" or "closed"."""


@dataclass(frozen=True)
class Repository:
    """A repository owned by or accessible to the user."""

    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    topics: Tuple[str, ...] = ()
    stars: int = 0
    forks: int = 0
    watchers: int = 0
    is_private: bool = False
    is_archived: bool = False
    is_fork: bool = False
    created: str = ""
    updated: str = ""
    url: str = ""
    size: int = 0

    def to_row(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "Description": self.description or "",
            "Language": self.language or "",
            "Topics": ", ".join(self.topics),
            "Stars": self.stars,
            "Forks": self.forks,
            "Visibility": "Private" if self.is_private else "Public",
            "Fork": self.is_fork,
            "Created": self.created,
            "Updated": self.updated,
            "URL": self.url,
        }


@dataclass(frozen=True)
class StarredRepository:
    """A repository the user has starred."""

    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    topics: Tuple[str, ...] = ()
    stars: int = 0
    url: str = ""

    def to_row(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "Description": self.description or "",
            "Language": self.language or "",
            "Topics": ", ".join(self.topics),
            "Stars": self.stars,
            "URL": self.url,
        }


@dataclass(frozen=True)
class Organization:
    """An organization the user belongs to. Name falls back to the login."""

    login: str
    name: str = ""
    description: Optional[str] = None
    url: str = ""
    avatar_url: str = ""

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, "name", self.login)

    def to_row(self) -> Dict[str, Any]:
        return {
            "Avatar": self.avatar_url,
            "Login": self.login,
            "Name": self.name,
            "Description": self.description or "",
            "URL": self.url,
        }


@dataclass
class MonthlyBucket:
    """One calendar month of the metrics window."""

    label: str
    start_date: date
    end_date: date
    pull_requests: List[PullRequest] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)


@dataclass(frozen=True)
class MonthlyMetrics:
    """Per-month metric series; None marks a month with no data (a chart gap)."""

    labels: List[str]
    pr_merge_time: List[Optional[float]]
    issue_resolution_time: List[Optional[float]]
    review_efficiency: List[Optional[float]]

    @property
    def has_data(self) -> bool:
        return len(self.labels) > 0


@dataclass(frozen=True)
class MetricsSummary:
    """Averages across the non-null months of each series."""

    average_pr_merge_time: Optional[float]
    average_issue_resolution_time: Optional[float]
    pr_success_rate: Optional[float]

    @property
    def pr_merge_time_display(self) -> str:
        if self.average_pr_merge_time is None:
            return NOT_AVAILABLE
        return f"{round_half_up(self.average_pr_merge_time, 1):.1f}d"

    @property
    def issue_resolution_time_display(self) -> str:
        if self.average_issue_resolution_time is None:
            return NOT_AVAILABLE
        return f"{round_half_up(self.average_issue_resolution_time, 1):.1f}d"

    @property
    def pr_success_rate_display(self) -> str:
        if self.pr_success_rate is None:
            return NOT_AVAILABLE
        return f"{round_half_up(self.pr_success_rate, 0):.0f}%"


@dataclass
class ProcessedGithubData:
    """Everything the dashboard needs from one fetch cycle."""

    user_data: Dict[str, Any] = field(default_factory=dict)
    pull_requests: List[PullRequest] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)
    repositories: List[Repository] = field(default_factory=list)
    organizations: List[Organization] = field(default_factory=list)
    starred_repos: List[StarredRepository] = field(default_factory=list)
    analytics: Dict[str, Any] = field(default_factory=dict)
