import unittest
from datetime import datetime, timezone
from unittest.mock import patch

from data_processing import (
    extract_repository_name, join_labels, determine_pr_state, process_pull_requests,
    process_issues, process_repositories, process_organizations, process_starred_repos,
    process_github_data
)

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def raw_item(number=1, title="Fix bug", created_at="2024-06-01T10:00:00Z", closed_at=None,
             state="open", **extra):
    item = {
        "number": number,
        "title": title,
        "state": state,
        "created_at": created_at,
        "closed_at": closed_at,
        "updated_at": "2024-06-02T10:00:00Z",
        "repository_url": "https://api.github.com/repos/owner/repo",
        "html_url": f"https://github.com/owner/repo/issues/{number}",
        "labels": [{"name": "bug"}, {"name": "urgent"}],
        "comments": 3,
    }
    item.update(extra)
    return item


class TestHelpers(unittest.TestCase):
    """Test raw payload helpers."""

    def test_extract_repository_name(self):
        self.assertEqual(extract_repository_name("https://api.github.com/repos/owner/repo"), "owner/repo")
        self.assertEqual(extract_repository_name("https://ghe.example.com/api/v3/repos/a/b"), "a/b")
        self.assertEqual(extract_repository_name(None), "")

    def test_join_labels(self):
        self.assertEqual(join_labels([{"name": "bug"}, {"name": "ui"}]), "bug, ui")
        self.assertEqual(join_labels(None), "")

    def test_determine_pr_state(self):
        """Test that merge takes precedence over closed."""
        merged = {"state": "closed", "pull_request": {"merged_at": "2024-06-02T00:00:00Z"}}
        closed = {"state": "closed", "pull_request": {"merged_at": None}}
        open_pr = {"state": "open", "pull_request": {}}
        self.assertEqual(determine_pr_state(merged), "Merged")
        self.assertEqual(determine_pr_state(closed), "Closed")
        self.assertEqual(determine_pr_state(open_pr), "Open")


class TestProcessActivity(unittest.TestCase):
    """Test pull request and issue processing."""

    def test_process_merged_pull_request(self):
        raw = raw_item(state="closed", closed_at="2024-06-03T10:00:00Z",
                       pull_request={"merged_at": "2024-06-03T10:00:00Z"})
        prs = process_pull_requests([raw], now=NOW)

        self.assertEqual(len(prs), 1)
        pr = prs[0]
        self.assertEqual(pr.state, "Merged")
        self.assertEqual(pr.repository, "owner/repo")
        self.assertEqual(pr.labels, "bug, urgent")
        self.assertEqual(pr.days_open, 2.0)
        self.assertEqual(pr.created, "2024-06-01")
        self.assertEqual(pr.updated, "2024-06-02")
        self.assertEqual(pr.comments, 3)
        self.assertEqual(pr.created_datetime, datetime(2024, 6, 1, 10, tzinfo=timezone.utc))

    def test_open_pull_request_days_open_uses_now(self):
        prs = process_pull_requests([raw_item(created_at="2024-06-10T12:00:00Z")], now=NOW)
        self.assertEqual(prs[0].state, "Open")
        self.assertEqual(prs[0].days_open, 5.0)
        self.assertIsNone(prs[0].closed_datetime)

    @patch('builtins.print')
    def test_malformed_records_are_skipped(self, mock_print):
        """Test that one bad record does not abort the batch."""
        raw = [
            raw_item(number=1),
            raw_item(number=2, created_at="not a date"),
            {"number": 3},
            raw_item(number=4),
        ]
        prs = process_pull_requests(raw, now=NOW)
        self.assertEqual([pr.number for pr in prs], [1, 4])
        self.assertEqual(mock_print.call_count, 2)

    def test_issues_exclude_pull_requests(self):
        raw = [
            raw_item(number=1, state="closed", closed_at="2024-06-02T10:00:00Z"),
            raw_item(number=2, pull_request={"merged_at": None}),
        ]
        issues = process_issues(raw, now=NOW)
        self.assertEqual([issue.number for issue in issues], [1])
        self.assertEqual(issues[0].state, "closed")
        self.assertEqual(issues[0].days_open, 1.0)

    def test_empty_input(self):
        self.assertEqual(process_pull_requests(None), [])
        self.assertEqual(process_issues([]), [])


class TestProcessRepositories(unittest.TestCase):
    """Test repository, organization and starred processing."""

    def test_process_repositories(self):
        raw = [{
            "full_name": "owner/tool",
            "description": "",
            "language": "Python",
            "topics": ["cli"],
            "stargazers_count": 5,
            "forks_count": 1,
            "private": True,
            "fork": False,
            "created_at": "2020-01-01T00:00:00Z",
            "updated_at": "2024-01-01T00:00:00Z",
            "html_url": "https://github.com/owner/tool",
        }]
        repo = process_repositories(raw)[0]
        self.assertEqual(repo.name, "owner/tool")
        self.assertIsNone(repo.description)
        self.assertEqual(repo.topics, ("cli",))
        self.assertTrue(repo.is_private)
        self.assertEqual(repo.created, "2020-01-01")
        self.assertEqual(repo.updated, "2024-01-01")

    @patch('builtins.print')
    def test_repository_without_name_is_skipped(self, mock_print):
        self.assertEqual(process_repositories([{"language": "Go"}]), [])
        mock_print.assert_called_once()

    def test_process_organizations_name_fallback(self):
        orgs = process_organizations([
            {"login": "acme", "name": None, "avatar_url": "https://avatars/acme"},
            {"login": "beta", "name": "Beta Inc", "description": "Things"},
        ])
        self.assertEqual(orgs[0].name, "acme")
        self.assertEqual(orgs[0].avatar_url, "https://avatars/acme")
        self.assertEqual(orgs[1].name, "Beta Inc")

    def test_process_starred_repos(self):
        starred = process_starred_repos([{"full_name": "x/y", "stargazers_count": 42, "topics": None}])
        self.assertEqual(starred[0].stars, 42)
        self.assertEqual(starred[0].topics, ())


class TestProcessGithubData(unittest.TestCase):
    """Test processing of a whole fetch cycle."""

    @patch('builtins.print')
    def test_process_github_data(self, mock_print):
        raw_data = {
            "user_profile": {"login": "octocat"},
            "pull_requests": [raw_item(pull_request={"merged_at": None})],
            "issues_created": [raw_item(number=2)],
            "repositories": [{"full_name": "octocat/hello", "language": "Python"}],
            "organizations": [{"login": "github"}],
            "starred_repos": [],
        }
        processed = process_github_data(raw_data, now=NOW)

        self.assertEqual(processed.user_data["login"], "octocat")
        self.assertEqual(len(processed.pull_requests), 1)
        self.assertEqual(len(processed.issues), 1)
        self.assertEqual(len(processed.repositories), 1)
        self.assertEqual(processed.organizations[0].name, "github")
        self.assertEqual(processed.starred_repos, [])
        self.assertEqual(processed.analytics["pr_state_distribution"]["data"], [1, 0, 0])
        self.assertEqual(processed.analytics["language_stats"]["labels"], ["Python"])

    @patch('builtins.print')
    def test_missing_keys_yield_empty_collections(self, mock_print):
        processed = process_github_data({}, now=NOW)
        self.assertEqual(processed.user_data, {})
        self.assertEqual(processed.pull_requests, [])
        self.assertEqual(processed.organizations, [])


if __name__ == '__main__':
    unittest.main()
