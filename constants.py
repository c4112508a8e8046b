"""
Constants for the GitHub Activity Dashboard application.

This module contains all hardcoded values, configuration, and magic numbers
to improve maintainability and make configuration easier.
"""

import os
from typing import Dict, List, Tuple

# =============================================================================
# Application Configuration
# =============================================================================

# Debug and file settings
DEBUG_MODE: bool = os.getenv("DEBUG_MODE", "false").lower() in ("1", "true", "yes")
DEBUG_DATA_FILENAME: str = "github_activity.json"
DEBUG_DATA_FILE: str = os.path.join(os.getcwd(), DEBUG_DATA_FILENAME)

# Theme preference (the only persisted client setting)
THEME_PREFERENCE_FILENAME: str = ".dashboard_theme.json"
THEME_PREFERENCE_FILE: str = os.path.join(os.getcwd(), THEME_PREFERENCE_FILENAME)
THEME_DARK: str = "dark"
THEME_LIGHT: str = "light"
DEFAULT_THEME: str = THEME_LIGHT

# Streamlit cache lifetime (in seconds)
CACHE_TTL_SECONDS: int = 600

# =============================================================================
# API and Network Configuration
# =============================================================================

REQUEST_TIMEOUT: int = 30
GITHUB_REST_API_URL: str = os.getenv("GITHUB_REST_API_URL", "https://api.github.com")
GITHUB_API_VERSION: str = "2022-11-28"

# Single page per endpoint
API_PAGE_SIZE: int = 100

# =============================================================================
# Metrics Configuration
# =============================================================================

DEFAULT_METRICS_WINDOW_MONTHS: int = 6
_window_months_env: str = os.getenv("METRICS_WINDOW_MONTHS", "").strip()
METRICS_WINDOW_MONTHS: int = (
    int(_window_months_env)
    if _window_months_env.isdigit() and int(_window_months_env) > 0
    else DEFAULT_METRICS_WINDOW_MONTHS
)
TIMELINE_MONTHS: int = 12
MONTH_LABEL_FORMAT: str = "%b %Y"
SECONDS_PER_DAY: int = 60 * 60 * 24
NOT_AVAILABLE: str = "N/A"

# Language chart tuning
LANGUAGE_STAR_WEIGHT: float = 0.1
LANGUAGE_MIN_WEIGHT: float = 0.5
TOP_LANGUAGE_COUNT: int = 10
TOP_TOPIC_COUNT: int = 20

DAYS_OF_WEEK: List[str] = [
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
]

# =============================================================================
# Entity States
# =============================================================================

PR_STATE_OPEN: str = "Open"
PR_STATE_MERGED: str = "Merged"
PR_STATE_CLOSED: str = "Closed"
PR_STATES: List[str] = [PR_STATE_OPEN, PR_STATE_CLOSED, PR_STATE_MERGED]

ISSUE_STATE_OPEN: str = "open"
ISSUE_STATE_CLOSED: str = "closed"

# =============================================================================
# Sort Options
# =============================================================================

SORT_NEWEST: str = "newest"
SORT_OLDEST: str = "oldest"
SORT_AZ: str = "az"
SORT_ZA: str = "za"
SORT_STARS: str = "stars"
DEFAULT_SORT_OPTION: str = SORT_NEWEST

SORT_OPTION_LABELS: Dict[str, str] = {
    SORT_NEWEST: "Newest First",
    SORT_OLDEST: "Oldest First",
    SORT_AZ: "A-Z",
    SORT_ZA: "Z-A",
    SORT_STARS: "Most Stars",
}

# =============================================================================
# UI and Display Configuration
# =============================================================================

# PR status indicators
PR_STATUS_EMOJIS: Dict[str, str] = {
    "Open": "🔄",
    "Merged": "✅",
    "Closed": "❌"
}

PR_STATE_COLORS: Dict[str, str] = {
    "Open": "#10b981",      # Green
    "Closed": "#ef4444",    # Red
    "Merged": "#8b5cf6"     # Purple
}

REPO_VISIBILITY_COLORS: List[str] = ["#22c55e", "#6366f1"]
REPO_ORIGIN_COLORS: List[str] = ["#3b82f6", "#a855f7"]

METRIC_LINE_COLORS: Dict[str, str] = {
    "pr_merge_time": "#3b82f6",
    "issue_resolution_time": "#10b981",
    "review_efficiency": "#8b5cf6"
}

# Common language colors (GitHub-like)
LANGUAGE_COLORS: Dict[str, str] = {
    "JavaScript": "#f1e05a",
    "TypeScript": "#2b7489",
    "Python": "#3572A5",
    "Java": "#b07219",
    "C#": "#178600",
    "PHP": "#4F5D95",
    "C++": "#f34b7d",
    "C": "#555555",
    "Shell": "#89e051",
    "Ruby": "#701516",
    "Go": "#00ADD8",
    "Swift": "#ffac45",
    "Kotlin": "#F18E33",
    "Rust": "#dea584",
    "Dart": "#00B4AB",
    "HTML": "#e34c26",
    "CSS": "#563d7c",
    "Jupyter Notebook": "#DA5B0B",
    "Vue": "#2c3e50",
    "R": "#198CE7",
    "Other": "#8b8b8b",
}

CHART_HEIGHT: int = 320
TABLE_CONTAINER_HEIGHT: int = 450

# Text formatting
TITLE_MAX_LENGTH: int = 100
DEFAULT_TEXT_TRUNCATION_SUFFIX: str = "..."

# =============================================================================
# Error Messages and Logging
# =============================================================================

ERROR_MESSAGES: Dict[str, str] = {
    "no_token": "GITHUB_TOKEN environment variable not set.",
    "api_error": "Failed to load GitHub data. Please check your connection and token validity.",
    "no_user": "Could not load user data.",
    "file_not_found": "Debug file not found.",
    "invalid_data": "Invalid data format received."
}

INFO_MESSAGES: Dict[str, str] = {
    "debug_mode_on": "Debug Mode is ON. Using local data.",
    "debug_mode_off": "Debug Mode is OFF. Fetching live data.",
    "refresh_data": "Refresh Live Data",
    "insufficient_data": "Insufficient data to display chart.",
    "data_cleared": "Data cleared. Load data from the sidebar to see your activity again.",
    "load_data": "Load Data"
}

# =============================================================================
# Environment Variables
# =============================================================================

ENV_VARS: Dict[str, str] = {
    "github_token": "GITHUB_TOKEN",
    "rest_api_url": "GITHUB_REST_API_URL",
    "debug_mode": "DEBUG_MODE",
    "metrics_window_months": "METRICS_WINDOW_MONTHS"
}

# =============================================================================
# Tabs
# =============================================================================

# (tab id, label) in display order
TAB_DEFINITIONS: List[Tuple[str, str]] = [
    ("pull-requests", "Pull Requests"),
    ("issues", "Issues"),
    ("repositories", "Repositories"),
    ("organizations", "Organizations"),
    ("starred", "Starred"),
]
