"""
GitHub Activity Dashboard Main Application

This module provides a Streamlit-based dashboard for viewing a user's GitHub
activity: pull requests, issues, repositories, organizations and starred
repositories, with performance metrics and activity charts.
"""

import streamlit as st
import pandas as pd
import os
import json
import time
from dotenv import load_dotenv
from typing import Any, Dict, List, Optional
import plotly.graph_objects as go

# Import shared modules and services
from constants import (
    DEBUG_MODE, DEBUG_DATA_FILE, CACHE_TTL_SECONDS, CHART_HEIGHT, TABLE_CONTAINER_HEIGHT,
    ERROR_MESSAGES, INFO_MESSAGES, ENV_VARS, GITHUB_REST_API_URL, METRICS_WINDOW_MONTHS,
    METRIC_LINE_COLORS, PR_STATUS_EMOJIS, SORT_OPTION_LABELS, TITLE_MAX_LENGTH
)
from utils import parse_positive_int, truncate_text
from models import ProcessedGithubData
from github_service import fetch_all_github_data
from data_processing import process_github_data
from dashboard_state import DashboardContext
from filter_sort import TabVariant, empty_state_message, filter_and_sort, get_tab_config
from metrics import compute_monthly_metrics, metrics_to_dataframe, summarize_metrics

load_dotenv()

CONTEXT_KEY = "dashboard_context"
DATA_CLEARED_KEY = "data_cleared"


# =============================================================================
# Configuration and Setup
# =============================================================================

def get_application_config() -> Dict[str, Any]:
    """Get application configuration from environment variables and constants."""
    debug_env = os.getenv(ENV_VARS['debug_mode'])
    return {
        'github_token': os.getenv(ENV_VARS['github_token']),
        'rest_api_url': os.getenv(ENV_VARS['rest_api_url'], GITHUB_REST_API_URL),
        'debug_mode': DEBUG_MODE if debug_env is None else debug_env.lower() in ("1", "true", "yes"),
        'debug_data_file': DEBUG_DATA_FILE,
        'metrics_window_months': parse_positive_int(
            os.getenv(ENV_VARS['metrics_window_months']), METRICS_WINDOW_MONTHS
        )
    }


def get_dashboard_context() -> DashboardContext:
    """Return the session's DashboardContext, creating and initializing it on first use."""
    if CONTEXT_KEY not in st.session_state:
        st.session_state[CONTEXT_KEY] = DashboardContext().initialize()
    return st.session_state[CONTEXT_KEY]


# =============================================================================
# Data Loading Functions
# =============================================================================

def load_debug_data(debug_file_path: str) -> Optional[Dict[str, Any]]:
    """Load raw payloads from the debug file if it exists."""
    if not os.path.exists(debug_file_path):
        print(f"📋 [DASHBOARD] {ERROR_MESSAGES['file_not_found']} ({debug_file_path})")
        return None
    try:
        with open(debug_file_path, 'r') as f:
            raw_data = json.load(f)
    except ValueError as e:
        print(f"⚠️  [DASHBOARD] {ERROR_MESSAGES['invalid_data']} ({debug_file_path}: {e})")
        return None
    if not isinstance(raw_data, dict):
        print(f"⚠️  [DASHBOARD] {ERROR_MESSAGES['invalid_data']} ({debug_file_path})")
        return None
    return raw_data


def save_debug_data(debug_file_path: str, raw_data: Dict[str, Any]) -> None:
    """Save raw payloads to the debug file."""
    with open(debug_file_path, 'w') as f:
        json.dump(raw_data, f, indent=4)


@st.cache_data(ttl=CACHE_TTL_SECONDS)
def fetch_live_github_data_cached(token: str, base_url: str) -> Dict[str, Any]:
    """Fetch live data from the GitHub API with caching."""
    return fetch_all_github_data(token, base_url)


def get_github_data(config: Dict[str, Any]) -> Optional[ProcessedGithubData]:
    """
    Main function to get GitHub data, either from the debug file or the live API.

    Returns:
        ProcessedGithubData, or None when nothing could be loaded
    """
    token = config['github_token']
    debug_mode = config['debug_mode']
    debug_data_file = config['debug_data_file']

    if debug_mode:
        raw_data = load_debug_data(debug_data_file)
        if raw_data:
            print(f"📋 [DASHBOARD] DEBUG MODE: Loaded data from {debug_data_file}")
            return process_github_data(raw_data)

    if not token:
        st.error(ERROR_MESSAGES['no_token'])
        return None

    try:
        raw_data = fetch_live_github_data_cached(token, config['rest_api_url'])
    except Exception as e:
        print(f"❌ [DASHBOARD] Error loading GitHub data: {e}")
        st.error(ERROR_MESSAGES['api_error'])
        return None

    save_debug_data(debug_data_file, raw_data)
    return process_github_data(raw_data)


# =============================================================================
# Tab View Functions
# =============================================================================

@st.cache_data(show_spinner=False)
def get_tab_view(collection: tuple, search_query: str, sort_option: str, variant_value: str) -> list:
    """Memoized filter-and-sort keyed on the collection, query and sort option."""
    return filter_and_sort(collection, search_query, sort_option, TabVariant(variant_value))


def build_tab_dataframe(records: List[Any], variant: TabVariant) -> pd.DataFrame:
    """Build the display table for a tab's records."""
    rows = [record.to_row() for record in records]
    df = pd.DataFrame(rows)
    if variant in (TabVariant.PULL_REQUESTS, TabVariant.ISSUES) and not df.empty:
        df['Title'] = df['Title'].apply(lambda title: truncate_text(title, TITLE_MAX_LENGTH))
    if variant == TabVariant.PULL_REQUESTS and not df.empty:
        df['State'] = df['State'].apply(lambda state: f"{PR_STATUS_EMOJIS.get(state, '')} {state}".strip())
    return df


def format_sort_option(option: str) -> str:
    return SORT_OPTION_LABELS.get(option, option)


def display_tab(context: DashboardContext, variant: TabVariant) -> None:
    """Display one tab: search box, sort select, and the filtered table."""
    config = get_tab_config(variant)
    col1, col2 = st.columns([3, 1])

    with col1:
        search_query = st.text_input(
            "Search", key=f"search_{variant.value}",
            placeholder=f"Filter {config.noun}...", label_visibility="collapsed"
        )
    with col2:
        sort_option = st.selectbox(
            "Sort", config.sort_options, key=f"sort_{variant.value}",
            format_func=format_sort_option, label_visibility="collapsed"
        )

    records = get_tab_view(tuple(context.collection_for(variant)), search_query, sort_option, variant.value)

    if not records:
        st.info(empty_state_message(variant, search_query))
        return

    column_config = {"URL": st.column_config.LinkColumn("Link", display_text="Open on GitHub →")}
    if variant == TabVariant.ORGANIZATIONS:
        column_config["Avatar"] = st.column_config.ImageColumn("Avatar")

    st.dataframe(
        build_tab_dataframe(records, variant),
        column_config=column_config,
        use_container_width=True,
        hide_index=True,
        height=TABLE_CONTAINER_HEIGHT
    )


def display_tabs_section(context: DashboardContext) -> None:
    """Display the detailed activity tabs."""
    st.header("Detailed Activity")
    counts = context.tab_counts()
    variants = list(TabVariant)
    tabs = st.tabs([f"{variant.label} ({counts[variant]})" for variant in variants])

    for tab, variant in zip(tabs, variants):
        with tab:
            display_tab(context, variant)


# =============================================================================
# Chart Functions
# =============================================================================

def chart_template(dark_mode: bool) -> str:
    return "plotly_dark" if dark_mode else "plotly_white"


def create_metrics_line_chart(df: pd.DataFrame, columns: List[str], colors: List[str],
                              y_title: str, dark_mode: bool, y_max: Optional[float] = None) -> go.Figure:
    """Line chart over the metrics months; NaN values render as gaps."""
    fig = go.Figure()
    for column, color in zip(columns, colors):
        fig.add_trace(go.Scatter(
            x=df['Month'],
            y=df[column],
            name=column,
            mode='lines+markers',
            connectgaps=False,
            line=dict(color=color, shape='spline')
        ))

    yaxis = dict(title=y_title, rangemode='tozero', gridcolor='rgba(128,128,128,0.2)')
    if y_max is not None:
        yaxis['range'] = [0, y_max]

    fig.update_layout(
        height=CHART_HEIGHT,
        margin=dict(l=20, r=20, t=30, b=40),
        hovermode='x unified',
        template=chart_template(dark_mode),
        yaxis=yaxis,
        legend=dict(orientation='h', y=-0.2)
    )
    return fig


def display_performance_metrics(context: DashboardContext, window_months: int) -> None:
    """Display resolution time and review efficiency charts with summary cards."""
    st.subheader("Performance Metrics")
    if not context.pull_requests and not context.issues:
        st.info(INFO_MESSAGES['insufficient_data'])
        return

    metrics = compute_monthly_metrics(context.pull_requests, context.issues, window_months)
    if not metrics.has_data:
        st.info(INFO_MESSAGES['insufficient_data'])
        return

    df = metrics_to_dataframe(metrics)
    col1, col2 = st.columns(2)

    with col1:
        st.markdown("**Resolution Times**")
        fig = create_metrics_line_chart(
            df, ['PR Merge Time', 'Issue Resolution Time'],
            [METRIC_LINE_COLORS['pr_merge_time'], METRIC_LINE_COLORS['issue_resolution_time']],
            'Days', context.dark_mode
        )
        st.plotly_chart(fig, use_container_width=True)

    with col2:
        st.markdown("**Review Efficiency**")
        fig = create_metrics_line_chart(
            df, ['Review Efficiency'], [METRIC_LINE_COLORS['review_efficiency']],
            'Merged %', context.dark_mode, y_max=100
        )
        st.plotly_chart(fig, use_container_width=True)

    summary = summarize_metrics(metrics)
    card1, card2, card3 = st.columns(3)
    card1.metric("Average PR Merge Time", summary.pr_merge_time_display)
    card2.metric("Average Issue Resolution", summary.issue_resolution_time_display)
    card3.metric("PR Success Rate", summary.pr_success_rate_display)


def display_pr_status_chart(analytics: Dict[str, Any], dark_mode: bool) -> None:
    """Display PR state distribution as a donut chart."""
    st.markdown("**🔀 Pull Request Status**")
    distribution = analytics.get('pr_state_distribution')
    if not distribution or not sum(distribution['data']):
        st.markdown("*No pull request data*")
        return

    fig = go.Figure(go.Pie(
        labels=distribution['labels'],
        values=distribution['data'],
        marker=dict(colors=distribution['colors']),
        hole=0.5
    ))
    fig.update_layout(height=CHART_HEIGHT, margin=dict(l=20, r=20, t=30, b=20),
                      template=chart_template(dark_mode))
    st.plotly_chart(fig, use_container_width=True)


def display_language_chart(analytics: Dict[str, Any], dark_mode: bool) -> None:
    """Display star-weighted language usage as a horizontal bar chart."""
    st.markdown("**💻 Languages**")
    stats = analytics.get('language_stats')
    if not stats or not stats['labels']:
        st.markdown("*No language data*")
        return

    fig = go.Figure(go.Bar(
        x=stats['data'],
        y=stats['labels'],
        orientation='h',
        marker=dict(color=stats['colors'])
    ))
    fig.update_layout(
        height=CHART_HEIGHT,
        margin=dict(l=20, r=20, t=30, b=20),
        template=chart_template(dark_mode),
        yaxis=dict(autorange='reversed'),
        xaxis=dict(title='Weighted repositories', gridcolor='rgba(128,128,128,0.2)')
    )
    st.plotly_chart(fig, use_container_width=True)


def display_activity_timeline(analytics: Dict[str, Any], dark_mode: bool) -> None:
    """Display monthly PR and issue counts for the last twelve months."""
    st.markdown("**📅 Activity Timeline**")
    pr_timeline = analytics.get('pr_timeline')
    issue_timeline = analytics.get('issue_timeline')
    if not pr_timeline or not issue_timeline:
        st.markdown("*No activity data*")
        return

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=pr_timeline['labels'], y=pr_timeline['data'], name='Pull Requests',
                             mode='lines+markers', line=dict(color=METRIC_LINE_COLORS['pr_merge_time'])))
    fig.add_trace(go.Scatter(x=issue_timeline['labels'], y=issue_timeline['data'], name='Issues',
                             mode='lines+markers', line=dict(color=METRIC_LINE_COLORS['issue_resolution_time'])))
    fig.update_layout(height=CHART_HEIGHT, margin=dict(l=20, r=20, t=30, b=40),
                      template=chart_template(dark_mode), legend=dict(orientation='h', y=-0.2))
    st.plotly_chart(fig, use_container_width=True)


def display_charts_section(context: DashboardContext, window_months: int) -> None:
    display_performance_metrics(context, window_months)
    st.divider()

    col1, col2, col3 = st.columns(3)
    with col1:
        display_pr_status_chart(context.analytics, context.dark_mode)
    with col2:
        display_language_chart(context.analytics, context.dark_mode)
    with col3:
        display_activity_timeline(context.analytics, context.dark_mode)


# =============================================================================
# Overview and Sidebar
# =============================================================================

def display_overview(context: DashboardContext) -> None:
    """Display the user header and headline counts."""
    user = context.user_data or {}
    name = user.get("name") or user.get("login", "Unknown")
    login = user.get("login", "")

    header_col, avatar_col = st.columns([5, 1])
    with header_col:
        st.markdown(f"#### 🐙 {name}" + (f" (@{login})" if login and login != name else ""))
        if user.get("bio"):
            st.caption(user["bio"])
    with avatar_col:
        if user.get("avatar_url"):
            st.image(user["avatar_url"], width=64)

    counts = context.tab_counts()
    columns = st.columns(len(counts))
    for column, variant in zip(columns, TabVariant):
        column.metric(variant.label, counts[variant])


def apply_custom_styling(dark_mode: bool) -> None:
    """Apply custom CSS for the selected theme."""
    background = "#0d1117" if dark_mode else "#ffffff"
    text = "#e6edf3" if dark_mode else "#1f2328"
    st.markdown(f"""
    <style>
    .stApp {{
        background-color: {background};
        color: {text};
    }}
    h1, h2, h3, h4 {{
        margin-bottom: 0.5rem !important;
    }}
    hr {{
        margin: 0.3rem 0 !important;
    }}
    </style>
    """, unsafe_allow_html=True)


def display_sidebar(context: DashboardContext, config: Dict[str, Any], fetch_time: float) -> None:
    """Display the application sidebar with settings and status."""
    st.sidebar.markdown("### ⚙️ Settings")

    theme_label = "☀️ Light Mode" if context.dark_mode else "🌙 Dark Mode"
    if st.sidebar.button(theme_label):
        context.toggle_dark_mode()
        st.rerun()

    if config['debug_mode']:
        st.sidebar.warning(INFO_MESSAGES['debug_mode_on'])
    else:
        st.sidebar.info(INFO_MESSAGES['debug_mode_off'])

    if st.session_state.get(DATA_CLEARED_KEY):
        if st.sidebar.button(INFO_MESSAGES['load_data']):
            st.session_state[DATA_CLEARED_KEY] = False
            st.rerun()
        return

    if not config['debug_mode'] and st.sidebar.button(INFO_MESSAGES['refresh_data']):
        st.cache_data.clear()
        st.rerun()

    if st.sidebar.button("Clear Data"):
        clear_dashboard_data(context)
        st.rerun()

    st.sidebar.markdown("---")
    st.sidebar.markdown("**⏱️ Performance:**")
    st.sidebar.text(f"Total fetch: {fetch_time:.2f}s")


def clear_dashboard_data(context: DashboardContext) -> None:
    """Drop the loaded snapshot and keep the dashboard empty until data is loaded again."""
    context.teardown()
    st.session_state.pop(CONTEXT_KEY, None)
    st.session_state[DATA_CLEARED_KEY] = True
    st.cache_data.clear()
    print("🧹 [DASHBOARD] Data cleared")


# =============================================================================
# Main Application Function
# =============================================================================

def main() -> None:
    """Main application entry point."""
    st.set_page_config(
        page_title="GitHub Activity Dashboard",
        page_icon="🐙",
        layout="wide"
    )

    config = get_application_config()
    context = get_dashboard_context()
    apply_custom_styling(context.dark_mode)

    if st.session_state.get(DATA_CLEARED_KEY):
        display_sidebar(context, config, 0.0)
        st.info(INFO_MESSAGES['data_cleared'])
        return

    with st.spinner('Loading your GitHub data...'):
        context.loading = True
        start_time = time.time()
        processed = get_github_data(config)
        fetch_time = time.time() - start_time
        context.loading = False

    display_sidebar(context, config, fetch_time)

    if processed is None:
        context.error = ERROR_MESSAGES['api_error']
        return

    context.load(processed)
    if not context.user_data:
        st.error(ERROR_MESSAGES['no_user'])
        return

    display_overview(context)
    st.divider()
    display_charts_section(context, config['metrics_window_months'])
    st.divider()
    display_tabs_section(context)


if __name__ == "__main__":
    main()
