"""
Data Processing Module

This module converts raw GitHub REST API payloads into the immutable records
used by the dashboard. A record that cannot be processed is reported and
skipped so one bad item never aborts the batch.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from constants import (
    DAYS_OF_WEEK, ISSUE_STATE_OPEN, PR_STATE_CLOSED, PR_STATE_MERGED, PR_STATE_OPEN
)
from models import (
    Issue, Organization, ProcessedGithubData, PullRequest, Repository, StarredRepository
)
from utils import days_between, parse_github_timestamp, round_half_up, safe_get_field, to_iso_date
from analytics import generate_analytics

REPOSITORY_API_PREFIX = "https://api.github.com/repos/"


def extract_repository_name(repository_url: Optional[str]) -> str:
    """Turn a repository API URL into "owner/name"."""
    if not repository_url:
        return ""
    if "/repos/" in repository_url:
        return repository_url.split("/repos/", 1)[1]
    return repository_url.replace(REPOSITORY_API_PREFIX, "")


def join_labels(labels: Optional[List[Dict[str, Any]]]) -> str:
    return ", ".join(label.get("name", "") for label in labels or [] if label.get("name"))


def determine_pr_state(raw_pr: Dict[str, Any]) -> str:
    """Merged when a merge timestamp exists, Closed when closed, otherwise Open."""
    if (raw_pr.get("pull_request") or {}).get("merged_at"):
        return PR_STATE_MERGED
    if raw_pr.get("state") == "closed":
        return PR_STATE_CLOSED
    return PR_STATE_OPEN


def _activity_fields(raw_item: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """Fields shared by pull requests and issues."""
    created_at = parse_github_timestamp(raw_item["created_at"])
    if created_at is None:
        raise ValueError(f"invalid created_at {raw_item.get('created_at')!r}")
    closed_at = parse_github_timestamp(raw_item.get("closed_at"))

    days_open = days_between(created_at, closed_at or now)
    local_created = created_at.astimezone()

    return {
        "number": raw_item["number"],
        "repository": extract_repository_name(raw_item.get("repository_url")),
        "title": raw_item["title"],
        "created_datetime": created_at,
        "closed_datetime": closed_at,
        "labels": join_labels(raw_item.get("labels")),
        "days_open": round_half_up(days_open, 1),
        "created": to_iso_date(created_at),
        "updated": to_iso_date(raw_item.get("updated_at")),
        "url": safe_get_field(raw_item, "html_url"),
        "comments": raw_item.get("comments") or 0,
        "hour_created": local_created.hour,
        "day_of_week": DAYS_OF_WEEK[local_created.weekday()],
        "month": local_created.strftime("%B"),
        "year": str(local_created.year),
    }


def process_pull_requests(raw_pull_requests: Optional[List[Dict[str, Any]]],
                          now: Optional[datetime] = None) -> List[PullRequest]:
    """
    Convert search API pull request items into PullRequest records.

    Args:
        raw_pull_requests: Items from the issues search endpoint (type:pr)
        now: Reference time for the days-open figure of open pull requests

    Returns:
        List of PullRequest records in fetch order
    """
    now = parse_github_timestamp(now) or datetime.now(timezone.utc)
    pull_requests = []

    for raw_pr in raw_pull_requests or []:
        try:
            fields = _activity_fields(raw_pr, now)
            pull_requests.append(PullRequest(state=determine_pr_state(raw_pr), **fields))
        except (KeyError, TypeError, ValueError) as e:
            print(f"⚠️  [DATA PROCESSING] Error processing PR #{raw_pr.get('number', 'unknown')}: {e}")

    return pull_requests


def process_issues(raw_issues: Optional[List[Dict[str, Any]]],
                   now: Optional[datetime] = None) -> List[Issue]:
    """
    Convert search API issue items into Issue records.

    Items carrying a "pull_request" key are pull requests and are left out.
    """
    now = parse_github_timestamp(now) or datetime.now(timezone.utc)
    issues = []

    for raw_issue in raw_issues or []:
        if raw_issue.get("pull_request"):
            continue
        try:
            fields = _activity_fields(raw_issue, now)
            issues.append(Issue(state=raw_issue.get("state", ISSUE_STATE_OPEN), **fields))
        except (KeyError, TypeError, ValueError) as e:
            print(f"⚠️  [DATA PROCESSING] Error processing issue #{raw_issue.get('number', 'unknown')}: {e}")

    return issues


def process_repositories(raw_repositories: Optional[List[Dict[str, Any]]]) -> List[Repository]:
    """Convert repository payloads into Repository records."""
    repositories = []

    for raw_repo in raw_repositories or []:
        try:
            repositories.append(Repository(
                name=raw_repo["full_name"],
                description=raw_repo.get("description") or None,
                language=raw_repo.get("language") or None,
                topics=tuple(raw_repo.get("topics") or ()),
                stars=raw_repo.get("stargazers_count") or 0,
                forks=raw_repo.get("forks_count") or 0,
                watchers=raw_repo.get("watchers_count") or 0,
                is_private=bool(raw_repo.get("private")),
                is_archived=bool(raw_repo.get("archived")),
                is_fork=bool(raw_repo.get("fork")),
                created=to_iso_date(raw_repo.get("created_at")),
                updated=to_iso_date(raw_repo.get("updated_at")),
                url=safe_get_field(raw_repo, "html_url"),
                size=raw_repo.get("size") or 0
            ))
        except (KeyError, TypeError) as e:
            print(f"⚠️  [DATA PROCESSING] Error processing repo {raw_repo.get('full_name', 'unknown')}: {e}")

    return repositories


def process_organizations(raw_organizations: Optional[List[Dict[str, Any]]]) -> List[Organization]:
    """Convert organization payloads into Organization records."""
    organizations = []

    for raw_org in raw_organizations or []:
        try:
            organizations.append(Organization(
                login=raw_org["login"],
                name=raw_org.get("name") or raw_org["login"],
                description=raw_org.get("description") or None,
                url=safe_get_field(raw_org, "html_url"),
                avatar_url=safe_get_field(raw_org, "avatar_url")
            ))
        except (KeyError, TypeError) as e:
            print(f"⚠️  [DATA PROCESSING] Error processing organization {raw_org.get('login', 'unknown')}: {e}")

    return organizations


def process_starred_repos(raw_starred: Optional[List[Dict[str, Any]]]) -> List[StarredRepository]:
    """Convert starred repository payloads into StarredRepository records."""
    starred = []

    for raw_repo in raw_starred or []:
        try:
            starred.append(StarredRepository(
                name=raw_repo["full_name"],
                description=raw_repo.get("description") or None,
                language=raw_repo.get("language") or None,
                topics=tuple(raw_repo.get("topics") or ()),
                stars=raw_repo.get("stargazers_count") or 0,
                url=safe_get_field(raw_repo, "html_url")
            ))
        except (KeyError, TypeError) as e:
            print(f"⚠️  [DATA PROCESSING] Error processing starred repo {raw_repo.get('full_name', 'unknown')}: {e}")

    return starred


def process_github_data(raw_data: Dict[str, Any], now: Optional[datetime] = None) -> ProcessedGithubData:
    """
    Process everything fetched in one cycle.

    Args:
        raw_data: Dictionary with user_profile, pull_requests, issues_created,
            repositories, organizations and starred_repos keys
        now: Reference time for days-open figures and timelines

    Returns:
        ProcessedGithubData with records and analytics
    """
    pull_requests = process_pull_requests(raw_data.get("pull_requests"), now)
    issues = process_issues(raw_data.get("issues_created"), now)
    repositories = process_repositories(raw_data.get("repositories"))

    print(f"📋 [DATA PROCESSING] Processed {len(pull_requests)} PRs, {len(issues)} issues, "
          f"{len(repositories)} repositories")

    return ProcessedGithubData(
        user_data=raw_data.get("user_profile") or {},
        pull_requests=pull_requests,
        issues=issues,
        repositories=repositories,
        organizations=process_organizations(raw_data.get("organizations")),
        starred_repos=process_starred_repos(raw_data.get("starred_repos")),
        analytics=generate_analytics(pull_requests, issues, repositories, now=now)
    )
