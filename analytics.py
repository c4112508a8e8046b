"""
Analytics Module

Chart-ready aggregations over processed GitHub records: language usage,
monthly timelines, weekday and hourly activity, PR state and repository
type distributions, and topic frequency.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from constants import (
    DAYS_OF_WEEK, LANGUAGE_COLORS, LANGUAGE_MIN_WEIGHT, LANGUAGE_STAR_WEIGHT,
    PR_STATE_COLORS, PR_STATES, REPO_ORIGIN_COLORS, REPO_VISIBILITY_COLORS,
    TIMELINE_MONTHS, TOP_LANGUAGE_COUNT, TOP_TOPIC_COUNT
)
from models import ActivityItem, Issue, PullRequest, Repository
from utils import format_month_label, hash_color, parse_github_timestamp, shift_month


def language_colors(languages: Sequence[str]) -> Dict[str, str]:
    """Known languages get their GitHub color, others a stable hash-derived one."""
    return {language: LANGUAGE_COLORS.get(language) or hash_color(language) for language in languages}


def language_stats(repositories: Sequence[Repository]) -> Dict[str, List[Any]]:
    """
    Star-weighted language usage across original (non-fork) repositories.

    Each repository counts 1 plus 0.1 per star. Languages under the minimum
    weight are dropped; beyond the top ten the rest are folded into "Other".
    """
    weights: Dict[str, float] = {}
    for repo in repositories:
        if repo.language and not repo.is_fork:
            weights[repo.language] = weights.get(repo.language, 0) + 1 + LANGUAGE_STAR_WEIGHT * repo.stars

    ranked = sorted(
        ((language, weight) for language, weight in weights.items() if weight >= LANGUAGE_MIN_WEIGHT),
        key=lambda pair: pair[1],
        reverse=True
    )
    top = dict(ranked[:TOP_LANGUAGE_COUNT])
    other_weight = sum(weight for _, weight in ranked[TOP_LANGUAGE_COUNT:])
    if other_weight > 0:
        top["Other"] = other_weight

    colors = language_colors(list(top))
    return {
        "labels": list(top),
        "data": list(top.values()),
        "colors": [colors[language] for language in top]
    }


def monthly_timeline(records: Sequence[ActivityItem], months: int = TIMELINE_MONTHS,
                     now: Optional[datetime] = None) -> Dict[str, List[Any]]:
    """Count records per calendar month over the trailing window, oldest first."""
    now = parse_github_timestamp(now) or datetime.now().astimezone()
    labels = []
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(now.year, now.month, -offset)
        labels.append(format_month_label(year, month))

    counts = Counter()
    for record in records:
        created_at = parse_github_timestamp(record.created_datetime)
        if created_at is None:
            continue
        local_created = created_at.astimezone(now.tzinfo)
        counts[format_month_label(local_created.year, local_created.month)] += 1

    return {
        "labels": labels,
        "data": [counts.get(label, 0) for label in labels]
    }


def day_of_week_activity(pull_requests: Sequence[PullRequest], issues: Sequence[Issue]) -> Dict[str, List[Any]]:
    """Monday-to-Sunday creation counts for pull requests and issues."""
    pr_counts = Counter(pr.day_of_week for pr in pull_requests)
    issue_counts = Counter(issue.day_of_week for issue in issues)
    return {
        "labels": list(DAYS_OF_WEEK),
        "pr_data": [pr_counts.get(day, 0) for day in DAYS_OF_WEEK],
        "issue_data": [issue_counts.get(day, 0) for day in DAYS_OF_WEEK]
    }


def time_of_day_activity(pull_requests: Sequence[PullRequest], issues: Sequence[Issue]) -> Dict[str, List[Any]]:
    """Hourly creation counts (24 bins)."""
    pr_counts = [0] * 24
    issue_counts = [0] * 24

    for pr in pull_requests:
        if pr.hour_created is not None:
            pr_counts[pr.hour_created] += 1
    for issue in issues:
        if issue.hour_created is not None:
            issue_counts[issue.hour_created] += 1

    return {
        "labels": [f"{hour}:00" for hour in range(24)],
        "pr_data": pr_counts,
        "issue_data": issue_counts
    }


def pr_state_distribution(pull_requests: Sequence[PullRequest]) -> Dict[str, List[Any]]:
    """Counts of Open, Closed and Merged pull requests."""
    counts = Counter(pr.state for pr in pull_requests if pr.state in PR_STATES)
    return {
        "labels": list(PR_STATES),
        "data": [counts.get(state, 0) for state in PR_STATES],
        "colors": [PR_STATE_COLORS[state] for state in PR_STATES]
    }


def repository_type_distribution(repositories: Sequence[Repository]) -> Dict[str, Dict[str, List[Any]]]:
    """Public/Private and Original/Forked splits."""
    private_count = sum(1 for repo in repositories if repo.is_private)
    fork_count = sum(1 for repo in repositories if repo.is_fork)
    total = len(repositories)

    return {
        "visibility": {
            "labels": ["Public", "Private"],
            "data": [total - private_count, private_count],
            "colors": list(REPO_VISIBILITY_COLORS)
        },
        "origin": {
            "labels": ["Original", "Forked"],
            "data": [total - fork_count, fork_count],
            "colors": list(REPO_ORIGIN_COLORS)
        }
    }


def repository_topics(repositories: Sequence[Repository], limit: int = TOP_TOPIC_COUNT) -> Dict[str, List[Any]]:
    """Most frequent repository topics."""
    counts = Counter(topic for repo in repositories for topic in repo.topics)
    top_topics = counts.most_common(limit)
    return {
        "labels": [topic for topic, _ in top_topics],
        "data": [count for _, count in top_topics],
        "colors": [hash_color(topic) for topic, _ in top_topics]
    }


def generate_analytics(pull_requests: Sequence[PullRequest], issues: Sequence[Issue],
                       repositories: Sequence[Repository], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Bundle every chart aggregation for one data snapshot."""
    return {
        "language_stats": language_stats(repositories),
        "pr_timeline": monthly_timeline(pull_requests, now=now),
        "issue_timeline": monthly_timeline(issues, now=now),
        "day_of_week_activity": day_of_week_activity(pull_requests, issues),
        "pr_state_distribution": pr_state_distribution(pull_requests),
        "time_of_day": time_of_day_activity(pull_requests, issues),
        "repo_type_distribution": repository_type_distribution(repositories),
        "repository_topics": repository_topics(repositories)
    }
