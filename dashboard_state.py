"""
Dashboard State Module

Holds the data snapshot shared by the dashboard sections and the persisted
theme preference. The context is an explicit object with an
initialize/teardown lifecycle that callers pass to whatever needs it.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from constants import DEFAULT_THEME, THEME_DARK, THEME_LIGHT, THEME_PREFERENCE_FILE
from filter_sort import TabVariant
from models import Issue, Organization, ProcessedGithubData, PullRequest, Repository, StarredRepository


class ThemePreference:
    """Reads and writes the single "dark"/"light" preference."""

    def __init__(self, path: str = THEME_PREFERENCE_FILE):
        self.path = path

    def load(self) -> str:
        """Return the saved theme, or the default when none is saved or the file is unreadable."""
        if not os.path.exists(self.path):
            return DEFAULT_THEME
        try:
            with open(self.path, 'r') as f:
                theme = json.load(f).get("theme")
        except (OSError, ValueError, AttributeError) as e:
            print(f"⚠️  [DASHBOARD STATE] Could not read theme preference '{self.path}': {e}")
            return DEFAULT_THEME
        return theme if theme in (THEME_DARK, THEME_LIGHT) else DEFAULT_THEME

    def save(self, theme: str) -> None:
        if theme not in (THEME_DARK, THEME_LIGHT):
            raise ValueError(f"Unknown theme: {theme!r}")
        with open(self.path, 'w') as f:
            json.dump({"theme": theme}, f)


@dataclass
class DashboardContext:
    """
    Snapshot of everything the dashboard renders.

    Collections are replaced wholesale by load() and emptied by clear_data();
    the filter, sort and metrics functions only read them.
    """

    theme_preference: ThemePreference = field(default_factory=ThemePreference)
    theme: str = DEFAULT_THEME
    user_data: Optional[Dict[str, Any]] = None
    pull_requests: List[PullRequest] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)
    repositories: List[Repository] = field(default_factory=list)
    organizations: List[Organization] = field(default_factory=list)
    starred_repos: List[StarredRepository] = field(default_factory=list)
    analytics: Dict[str, Any] = field(default_factory=dict)
    loading: bool = False
    error: Optional[str] = None
    initialized: bool = False

    def initialize(self) -> "DashboardContext":
        """Load the persisted theme. Returns self for chaining."""
        self.theme = self.theme_preference.load()
        self.initialized = True
        return self

    def teardown(self) -> None:
        """Persist the theme and release the data snapshot."""
        if self.initialized:
            self.theme_preference.save(self.theme)
        self.clear_data()
        self.initialized = False

    @property
    def dark_mode(self) -> bool:
        return self.theme == THEME_DARK

    def toggle_dark_mode(self) -> str:
        """Flip the theme and persist it immediately."""
        self.theme = THEME_LIGHT if self.dark_mode else THEME_DARK
        self.theme_preference.save(self.theme)
        return self.theme

    def load(self, processed: ProcessedGithubData) -> None:
        """Replace the snapshot with a freshly processed fetch."""
        self.user_data = processed.user_data
        self.pull_requests = list(processed.pull_requests)
        self.issues = list(processed.issues)
        self.repositories = list(processed.repositories)
        self.organizations = list(processed.organizations)
        self.starred_repos = list(processed.starred_repos)
        self.analytics = dict(processed.analytics)
        self.error = None

    def clear_data(self) -> None:
        self.user_data = None
        self.pull_requests = []
        self.issues = []
        self.repositories = []
        self.organizations = []
        self.starred_repos = []
        self.analytics = {}

    def collection_for(self, variant: TabVariant) -> list:
        """Return the collection shown by a tab."""
        collections = {
            TabVariant.PULL_REQUESTS: self.pull_requests,
            TabVariant.ISSUES: self.issues,
            TabVariant.REPOSITORIES: self.repositories,
            TabVariant.ORGANIZATIONS: self.organizations,
            TabVariant.STARRED: self.starred_repos,
        }
        return collections[variant]

    def tab_counts(self) -> Dict[TabVariant, int]:
        return {variant: len(self.collection_for(variant)) for variant in TabVariant}
