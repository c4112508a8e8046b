import math
import unittest
from datetime import date, datetime, timezone, timedelta

from metrics import (
    build_monthly_buckets, find_bucket_index, assign_to_buckets, average_days_to_close,
    review_efficiency, compute_monthly_metrics, mean_of_present, summarize_metrics,
    metrics_to_dataframe
)
from models import Issue, MonthlyMetrics, PullRequest

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def make_pr(created, state="Open", days_to_close=None, number=1):
    closed = created + timedelta(days=days_to_close) if days_to_close is not None else None
    return PullRequest(number=number, repository="o/r", title="t", state=state,
                       created_datetime=created, closed_datetime=closed)


def make_issue(created, state="open", days_to_close=None):
    closed = created + timedelta(days=days_to_close) if days_to_close is not None else None
    return Issue(number=1, repository="o/r", title="t", state=state,
                 created_datetime=created, closed_datetime=closed)


class TestBuckets(unittest.TestCase):
    """Test monthly bucket construction and assignment."""

    def test_buckets_oldest_first(self):
        """Test six buckets ending at the current month."""
        buckets = build_monthly_buckets(6, NOW)
        self.assertEqual([b.label for b in buckets],
                         ["Jan 2024", "Feb 2024", "Mar 2024", "Apr 2024", "May 2024", "Jun 2024"])
        self.assertEqual(buckets[1].start_date, date(2024, 2, 1))
        self.assertEqual(buckets[1].end_date, date(2024, 2, 29))
        self.assertEqual(buckets[-1].end_date, date(2024, 6, 30))

    def test_buckets_cross_year_boundary(self):
        buckets = build_monthly_buckets(3, datetime(2024, 1, 10, tzinfo=timezone.utc))
        self.assertEqual([b.label for b in buckets], ["Nov 2023", "Dec 2023", "Jan 2024"])

    def test_find_bucket_index(self):
        self.assertEqual(find_bucket_index(datetime(2024, 6, 1, tzinfo=timezone.utc), 6, NOW), 5)
        self.assertEqual(find_bucket_index("2024-01-31T23:00:00Z", 6, NOW), 0)
        self.assertIsNone(find_bucket_index("2023-12-31T23:00:00Z", 6, NOW))
        self.assertIsNone(find_bucket_index("2024-06-20T00:00:00Z", 6, NOW))
        self.assertIsNone(find_bucket_index("garbage", 6, NOW))
        self.assertIsNone(find_bucket_index(None, 6, NOW))

    def test_assign_partitions_records(self):
        """Test that each in-window record lands in exactly one bucket."""
        prs = [
            make_pr(datetime(2024, 6, 2, tzinfo=timezone.utc), number=1),
            make_pr(datetime(2024, 3, 10, tzinfo=timezone.utc), number=2),
            make_pr(datetime(2023, 1, 10, tzinfo=timezone.utc), number=3),
            make_pr(datetime(2024, 7, 1, tzinfo=timezone.utc), number=4),
            make_pr(None, number=5),
        ]
        issues = [make_issue(datetime(2024, 3, 11, tzinfo=timezone.utc))]
        buckets = assign_to_buckets(prs, issues, 6, NOW)

        assigned = [pr.number for bucket in buckets for pr in bucket.pull_requests]
        self.assertEqual(sorted(assigned), [1, 2])
        self.assertEqual([pr.number for pr in buckets[5].pull_requests], [1])
        self.assertEqual([pr.number for pr in buckets[2].pull_requests], [2])
        self.assertEqual(len(buckets[2].issues), 1)


class TestMetricCalculations(unittest.TestCase):
    """Test the per-month metric formulas."""

    def test_merge_time_and_efficiency(self):
        """Test three June pull requests with two merged after 2 and 4 days."""
        prs = [
            make_pr(datetime(2024, 6, 1, tzinfo=timezone.utc), "Merged", 2),
            make_pr(datetime(2024, 6, 3, tzinfo=timezone.utc), "Merged", 4),
            make_pr(datetime(2024, 6, 5, tzinfo=timezone.utc), "Open"),
        ]
        metrics = compute_monthly_metrics(prs, [], 6, NOW)
        self.assertEqual(metrics.labels[-1], "Jun 2024")
        self.assertEqual(metrics.pr_merge_time[-1], 3.0)
        self.assertEqual(metrics.review_efficiency[-1], 66.7)
        self.assertIsNone(metrics.issue_resolution_time[-1])

    def test_efficiency_rounds_halves_up(self):
        """Test one merged pull request out of sixteen gives 6.3, not 6.2."""
        prs = [make_pr(datetime(2024, 6, 1, tzinfo=timezone.utc), "Merged", 1, number=0)]
        prs += [make_pr(datetime(2024, 6, 2, tzinfo=timezone.utc), number=n) for n in range(1, 16)]
        metrics = compute_monthly_metrics(prs, [], 6, NOW)
        self.assertEqual(metrics.review_efficiency[-1], 6.3)

    def test_merge_time_rounds_halves_up(self):
        created = datetime(2024, 6, 1, tzinfo=timezone.utc)
        prs = [make_pr(created, "Merged", 0.25)]
        self.assertEqual(average_days_to_close(prs), 0.3)

    def test_empty_months_are_none_not_zero(self):
        metrics = compute_monthly_metrics([], [], 6, NOW)
        self.assertEqual(len(metrics.labels), 6)
        self.assertEqual(metrics.pr_merge_time, [None] * 6)
        self.assertEqual(metrics.issue_resolution_time, [None] * 6)
        self.assertEqual(metrics.review_efficiency, [None] * 6)

    def test_month_with_only_open_prs(self):
        """Test that efficiency is zero while merge time stays missing."""
        prs = [make_pr(datetime(2024, 5, 2, tzinfo=timezone.utc))]
        metrics = compute_monthly_metrics(prs, None, 6, NOW)
        self.assertEqual(metrics.review_efficiency[4], 0.0)
        self.assertIsNone(metrics.pr_merge_time[4])

    def test_closed_pr_is_not_merged(self):
        prs = [make_pr(datetime(2024, 5, 2, tzinfo=timezone.utc), "Closed", 1)]
        metrics = compute_monthly_metrics(prs, [], 6, NOW)
        self.assertIsNone(metrics.pr_merge_time[4])
        self.assertEqual(metrics.review_efficiency[4], 0.0)

    def test_issue_resolution_time(self):
        issues = [
            make_issue(datetime(2024, 4, 1, tzinfo=timezone.utc), "closed", 1),
            make_issue(datetime(2024, 4, 2, tzinfo=timezone.utc), "closed", 2.5),
            make_issue(datetime(2024, 4, 3, tzinfo=timezone.utc), "open"),
        ]
        metrics = compute_monthly_metrics([], issues, 6, NOW)
        self.assertEqual(metrics.issue_resolution_time[3], 1.8)

    def test_average_days_to_close_rounds(self):
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        items = [make_pr(created, "Merged", 1), make_pr(created, "Merged", 1.25)]
        self.assertEqual(average_days_to_close(items), 1.1)
        self.assertIsNone(average_days_to_close([]))

    def test_review_efficiency_empty(self):
        self.assertIsNone(review_efficiency([]))

    def test_window_size_is_configurable(self):
        metrics = compute_monthly_metrics([], [], 3, NOW)
        self.assertEqual(metrics.labels, ["Apr 2024", "May 2024", "Jun 2024"])


class TestSummary(unittest.TestCase):
    """Test summary averages and chart data."""

    def test_mean_of_present_skips_none_only(self):
        self.assertEqual(mean_of_present([None, 2.0, 4.0, None]), 3.0)
        self.assertEqual(mean_of_present([0.0, 10.0]), 5.0)
        self.assertIsNone(mean_of_present([None, None]))

    def test_summary_with_data(self):
        metrics = MonthlyMetrics(
            labels=["Jan 2024", "Feb 2024"],
            pr_merge_time=[2.0, None],
            issue_resolution_time=[None, 5.0],
            review_efficiency=[50.0, 66.7],
        )
        summary = summarize_metrics(metrics)
        self.assertEqual(summary.pr_merge_time_display, "2.0d")
        self.assertEqual(summary.issue_resolution_time_display, "5.0d")
        self.assertEqual(summary.pr_success_rate_display, "58%")

    def test_summary_without_data_is_not_available(self):
        """Test that cards show N/A rather than zero."""
        summary = summarize_metrics(compute_monthly_metrics([], [], 6, NOW))
        self.assertIsNone(summary.average_pr_merge_time)
        self.assertEqual(summary.pr_merge_time_display, "N/A")
        self.assertEqual(summary.issue_resolution_time_display, "N/A")
        self.assertEqual(summary.pr_success_rate_display, "N/A")

    def test_dataframe_uses_nan_for_missing_months(self):
        metrics = MonthlyMetrics(
            labels=["May 2024", "Jun 2024"],
            pr_merge_time=[None, 3.0],
            issue_resolution_time=[None, None],
            review_efficiency=[0.0, 66.7],
        )
        df = metrics_to_dataframe(metrics)
        self.assertEqual(list(df.columns),
                         ["Month", "PR Merge Time", "Issue Resolution Time", "Review Efficiency"])
        self.assertTrue(math.isnan(df["PR Merge Time"].iloc[0]))
        self.assertEqual(df["PR Merge Time"].iloc[1], 3.0)
        self.assertEqual(df["Review Efficiency"].iloc[0], 0.0)


if __name__ == '__main__':
    unittest.main()
