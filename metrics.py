"""
Performance Metrics Module

This module turns pull requests and issues into a rolling monthly time series
of merge time, issue resolution time and review efficiency, plus the summary
averages shown on the metric cards.
"""

import calendar
from datetime import date, datetime
from typing import List, Optional, Sequence

import pandas as pd

from constants import (
    METRICS_WINDOW_MONTHS, PR_STATE_MERGED, ISSUE_STATE_CLOSED
)
from models import ActivityItem, Issue, MetricsSummary, MonthlyBucket, MonthlyMetrics, PullRequest
from utils import (
    days_between, format_month_label, month_index, parse_github_timestamp, round_half_up, shift_month
)


def _resolve_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now().astimezone()
    return parse_github_timestamp(now)


# =============================================================================
# Bucketing
# =============================================================================

def build_monthly_buckets(window_months: int = METRICS_WINDOW_MONTHS,
                          now: Optional[datetime] = None) -> List[MonthlyBucket]:
    """
    Build one bucket per calendar month, oldest first, ending at the current month.

    Args:
        window_months: Number of months in the window
        now: Reference time (defaults to the current local time)

    Returns:
        List of empty MonthlyBucket objects with first-day/last-day bounds
    """
    now = _resolve_now(now)
    buckets = []

    for offset in range(window_months - 1, -1, -1):
        year, month = shift_month(now.year, now.month, -offset)
        last_day = calendar.monthrange(year, month)[1]
        buckets.append(MonthlyBucket(
            label=format_month_label(year, month),
            start_date=date(year, month, 1),
            end_date=date(year, month, last_day),
        ))

    return buckets


def find_bucket_index(created: object, window_months: int, now: datetime) -> Optional[int]:
    """
    Locate the bucket a creation timestamp belongs to.

    The month offset from now is computed directly, so lookup does not scan
    the buckets.

    Returns:
        Bucket index (0 is the oldest month), or None when the timestamp is
        malformed, later than now, or older than the window
    """
    created_at = parse_github_timestamp(created)
    if created_at is None or created_at > now:
        return None

    local_created = created_at.astimezone(now.tzinfo)
    offset = month_index(now.year, now.month) - month_index(local_created.year, local_created.month)
    if offset < 0 or offset >= window_months:
        return None
    return window_months - 1 - offset


def assign_to_buckets(pull_requests: Optional[Sequence[PullRequest]], issues: Optional[Sequence[Issue]],
                      window_months: int = METRICS_WINDOW_MONTHS,
                      now: Optional[datetime] = None) -> List[MonthlyBucket]:
    """Group pull requests and issues into the monthly buckets of the window."""
    now = _resolve_now(now)
    buckets = build_monthly_buckets(window_months, now)

    for pull_request in pull_requests or []:
        index = find_bucket_index(pull_request.created_datetime, window_months, now)
        if index is not None:
            buckets[index].pull_requests.append(pull_request)

    for issue in issues or []:
        index = find_bucket_index(issue.created_datetime, window_months, now)
        if index is not None:
            buckets[index].issues.append(issue)

    return buckets


# =============================================================================
# Metric Calculations
# =============================================================================

def average_days_to_close(items: Sequence[ActivityItem]) -> Optional[float]:
    """
    Mean of (closed - created) in days, rounded to one decimal.

    Returns:
        None when there is nothing to average
    """
    durations = []
    for item in items:
        created_at = parse_github_timestamp(item.created_datetime)
        closed_at = parse_github_timestamp(item.closed_datetime)
        if created_at is None or closed_at is None:
            continue
        durations.append(days_between(created_at, closed_at))

    if not durations:
        return None
    return round_half_up(sum(durations) / len(durations), 1)


def merged_pull_requests(pull_requests: Sequence[PullRequest]) -> List[PullRequest]:
    return [pr for pr in pull_requests if pr.state == PR_STATE_MERGED and pr.closed_datetime]


def closed_issues(issues: Sequence[Issue]) -> List[Issue]:
    return [issue for issue in issues if issue.state == ISSUE_STATE_CLOSED and issue.closed_datetime]


def review_efficiency(pull_requests: Sequence[PullRequest]) -> Optional[float]:
    """
    Percentage of the month's pull requests that were merged.

    The denominator counts every pull request created in the month, including
    ones that are still open.
    """
    if not pull_requests:
        return None
    merged_count = len(merged_pull_requests(pull_requests))
    return round_half_up(merged_count / len(pull_requests) * 100, 1)


def compute_monthly_metrics(pull_requests: Optional[Sequence[PullRequest]], issues: Optional[Sequence[Issue]],
                            window_months: int = METRICS_WINDOW_MONTHS,
                            now: Optional[datetime] = None) -> MonthlyMetrics:
    """
    Compute the rolling monthly performance metrics.

    Args:
        pull_requests: Pull requests to analyze
        issues: Issues to analyze
        window_months: Number of trailing calendar months, current month included
        now: Reference time (defaults to the current local time)

    Returns:
        MonthlyMetrics whose series hold None for months without data
    """
    buckets = assign_to_buckets(pull_requests, issues, window_months, now)

    labels = []
    pr_merge_time = []
    issue_resolution_time = []
    efficiency = []

    for bucket in buckets:
        labels.append(bucket.label)
        pr_merge_time.append(average_days_to_close(merged_pull_requests(bucket.pull_requests)))
        issue_resolution_time.append(average_days_to_close(closed_issues(bucket.issues)))
        efficiency.append(review_efficiency(bucket.pull_requests))

    return MonthlyMetrics(
        labels=labels,
        pr_merge_time=pr_merge_time,
        issue_resolution_time=issue_resolution_time,
        review_efficiency=efficiency,
    )


# =============================================================================
# Summary and Chart Data
# =============================================================================

def mean_of_present(values: Sequence[Optional[float]]) -> Optional[float]:
    """Mean over the non-null entries; None when there are none."""
    present = [value for value in values if value is not None]
    if not present:
        return None
    return sum(present) / len(present)


def summarize_metrics(metrics: MonthlyMetrics) -> MetricsSummary:
    """Average each series across the months that have data."""
    return MetricsSummary(
        average_pr_merge_time=mean_of_present(metrics.pr_merge_time),
        average_issue_resolution_time=mean_of_present(metrics.issue_resolution_time),
        pr_success_rate=mean_of_present(metrics.review_efficiency),
    )


def metrics_to_dataframe(metrics: MonthlyMetrics) -> pd.DataFrame:
    """
    Convert metrics to a DataFrame for plotting.

    Missing months become NaN so line charts show a gap rather than a zero.
    """
    return pd.DataFrame({
        "Month": metrics.labels,
        "PR Merge Time": pd.Series(metrics.pr_merge_time, dtype="float64"),
        "Issue Resolution Time": pd.Series(metrics.issue_resolution_time, dtype="float64"),
        "Review Efficiency": pd.Series(metrics.review_efficiency, dtype="float64"),
    })
