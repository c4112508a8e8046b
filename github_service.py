"""
GitHub REST Service Module

This module provides functions for fetching the authenticated user's profile,
pull requests, issues, repositories, organizations and starred repositories
from the GitHub REST API. Each endpoint is read once, one page per call.
"""

from typing import Any, Dict, List, Optional

import requests

from constants import API_PAGE_SIZE, GITHUB_API_VERSION, GITHUB_REST_API_URL, REQUEST_TIMEOUT


# =============================================================================
# Core REST Functions
# =============================================================================

def build_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": GITHUB_API_VERSION
    }


def execute_rest_request(token: str, path: str, params: Optional[Dict[str, Any]] = None,
                         base_url: str = GITHUB_REST_API_URL) -> Any:
    """
    Execute a GET request against the GitHub REST API.

    Args:
        token: GitHub personal access token
        path: API path (e.g., "/user/repos")
        params: Optional query parameters
        base_url: API root, overridable for GitHub Enterprise

    Returns:
        Decoded JSON response

    Raises:
        requests.HTTPError: If the request fails
    """
    url = f"{base_url.rstrip('/')}{path}"
    response = requests.get(url, headers=build_headers(token), params=params, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    return response.json()


def _search_items(token: str, query: str, base_url: str) -> List[Dict[str, Any]]:
    result = execute_rest_request(
        token, "/search/issues",
        params={"q": query, "per_page": API_PAGE_SIZE, "sort": "created", "order": "desc"},
        base_url=base_url
    )
    return result.get("items", [])


# =============================================================================
# Entity Fetch Functions
# =============================================================================

def fetch_user_profile(token: str, base_url: str = GITHUB_REST_API_URL) -> Dict[str, Any]:
    """Fetch the authenticated user's profile."""
    return execute_rest_request(token, "/user", base_url=base_url)


def fetch_pull_requests(token: str, login: str, base_url: str = GITHUB_REST_API_URL) -> List[Dict[str, Any]]:
    """Fetch pull requests authored by the user via the search API."""
    return _search_items(token, f"author:{login} type:pr", base_url)


def fetch_issues_created(token: str, login: str, base_url: str = GITHUB_REST_API_URL) -> List[Dict[str, Any]]:
    """Fetch issues authored by the user via the search API."""
    return _search_items(token, f"author:{login} type:issue", base_url)


def fetch_repositories(token: str, base_url: str = GITHUB_REST_API_URL) -> List[Dict[str, Any]]:
    """Fetch repositories the user owns, collaborates on, or can access through organizations."""
    return execute_rest_request(
        token, "/user/repos",
        params={"per_page": API_PAGE_SIZE, "sort": "updated"},
        base_url=base_url
    )


def fetch_organizations(token: str, base_url: str = GITHUB_REST_API_URL) -> List[Dict[str, Any]]:
    """Fetch organizations the user belongs to."""
    return execute_rest_request(token, "/user/orgs", params={"per_page": API_PAGE_SIZE}, base_url=base_url)


def fetch_starred_repos(token: str, base_url: str = GITHUB_REST_API_URL) -> List[Dict[str, Any]]:
    """Fetch repositories the user has starred."""
    return execute_rest_request(token, "/user/starred", params={"per_page": API_PAGE_SIZE}, base_url=base_url)


# =============================================================================
# Main Data Function
# =============================================================================

def fetch_all_github_data(token: str, base_url: str = GITHUB_REST_API_URL) -> Dict[str, Any]:
    """
    Fetch every collection the dashboard displays.

    Args:
        token: GitHub personal access token
        base_url: API root

    Returns:
        Dictionary of raw payloads keyed by collection name

    Raises:
        requests.HTTPError: If any request fails
    """
    print("📡 [GITHUB SERVICE] Fetching user profile...")
    user_profile = fetch_user_profile(token, base_url)
    login = user_profile["login"]

    print(f"📡 [GITHUB SERVICE] Fetching activity for {login}...")
    raw_data = {
        "user_profile": user_profile,
        "pull_requests": fetch_pull_requests(token, login, base_url),
        "issues_created": fetch_issues_created(token, login, base_url),
        "repositories": fetch_repositories(token, base_url),
        "organizations": fetch_organizations(token, base_url),
        "starred_repos": fetch_starred_repos(token, base_url)
    }

    print(f"✅ [GITHUB SERVICE] Fetched {len(raw_data['pull_requests'])} PRs, "
          f"{len(raw_data['issues_created'])} issues, {len(raw_data['repositories'])} repositories, "
          f"{len(raw_data['organizations'])} organizations, {len(raw_data['starred_repos'])} starred")
    return raw_data
