import unittest
from constants import (
    METRICS_WINDOW_MONTHS, TIMELINE_MONTHS, SORT_OPTION_LABELS, PR_STATES,
    PR_STATE_COLORS, LANGUAGE_COLORS, ERROR_MESSAGES, INFO_MESSAGES, ENV_VARS,
    TAB_DEFINITIONS, DAYS_OF_WEEK, DEFAULT_THEME, THEME_DARK, THEME_LIGHT
)


class TestConstants(unittest.TestCase):
    """Test the constants module."""

    def test_metrics_window_is_positive_integer(self):
        """Test that the metrics window is a positive integer."""
        self.assertIsInstance(METRICS_WINDOW_MONTHS, int)
        self.assertGreater(METRICS_WINDOW_MONTHS, 0)
        self.assertEqual(TIMELINE_MONTHS, 12)

    def test_sort_option_labels(self):
        """Test that every sort option has a label."""
        for option in ["newest", "oldest", "az", "za", "stars"]:
            self.assertIn(option, SORT_OPTION_LABELS)
            self.assertIsInstance(SORT_OPTION_LABELS[option], str)

    def test_pr_state_colors(self):
        """Test that every PR state has a hex color."""
        for state in PR_STATES:
            self.assertIn(state, PR_STATE_COLORS)
            self.assertTrue(PR_STATE_COLORS[state].startswith("#"))

    def test_language_colors_include_other(self):
        """Test that the language palette has an Other entry."""
        self.assertIn("Other", LANGUAGE_COLORS)
        self.assertEqual(LANGUAGE_COLORS["Python"], "#3572A5")

    def test_error_messages_dict(self):
        """Test that ERROR_MESSAGES contains required keys."""
        for key in ["no_token", "api_error", "no_user"]:
            self.assertIn(key, ERROR_MESSAGES)
            self.assertIsInstance(ERROR_MESSAGES[key], str)

    def test_info_messages_dict(self):
        """Test that INFO_MESSAGES contains required keys."""
        for key in ["debug_mode_on", "debug_mode_off", "insufficient_data"]:
            self.assertIn(key, INFO_MESSAGES)

    def test_env_vars_dict(self):
        """Test that ENV_VARS contains required environment variable names."""
        for key in ["github_token", "rest_api_url", "debug_mode", "metrics_window_months"]:
            self.assertIn(key, ENV_VARS)
            self.assertIsInstance(ENV_VARS[key], str)

    def test_tab_definitions(self):
        """Test the tab ids in display order."""
        self.assertEqual(
            [tab_id for tab_id, _ in TAB_DEFINITIONS],
            ["pull-requests", "issues", "repositories", "organizations", "starred"]
        )

    def test_days_of_week_start_monday(self):
        self.assertEqual(len(DAYS_OF_WEEK), 7)
        self.assertEqual(DAYS_OF_WEEK[0], "Monday")

    def test_default_theme_is_known(self):
        self.assertIn(DEFAULT_THEME, (THEME_DARK, THEME_LIGHT))


if __name__ == '__main__':
    unittest.main()
