#!/usr/bin/env python3
"""
Channel Discovery - Streamlit Application
Run a discovery job interactively and review the collected channels.

Installation:
    1. pip install -e .
    2. Create a .env file in the working directory with: YOUTUBE_API_KEY=your_api_key_here
    3. Get your API key from: https://console.cloud.google.com/
    4. Run: streamlit run channel_discovery/app.py
"""

import os
from typing import Dict, List, Optional

import streamlit as st
from dotenv import load_dotenv

from channel_discovery.aggregation import records_to_dataframe
from channel_discovery.config import (
    API_KEY_ENV_VAR,
    DEFAULT_EXCLUDE_KEYWORDS,
    DEFAULT_STORAGE_DIR,
    ConfigError,
    DiscoveryConfig,
)
from channel_discovery.pipeline import run_discovery
from channel_discovery.storage import open_storage


def split_lines(text: str) -> List[str]:
    """Non-empty stripped lines (or comma-separated entries) of a text area."""
    items = []
    for line in (text or '').replace(',', '\n').splitlines():
        line = line.strip()
        if line:
            items.append(line)
    return items


def config_from_form(values: Dict, api_key: Optional[str]) -> DiscoveryConfig:
    """
    Convert the form values into a run configuration.

    Args:
        values: Form values keyed by input name
        api_key: YouTube Data API key

    Returns:
        DiscoveryConfig

    Raises:
        ConfigError: If a value is invalid
    """
    avg_views_max = values.get('avgViewsMax') or None
    return DiscoveryConfig.from_input({
        'apiKey': api_key or '',
        'minSubscribers': values.get('minSubscribers'),
        'avgViewsMin': values.get('avgViewsMin'),
        'avgViewsMax': avg_views_max,
        'recentVideoWithinDays': values.get('recentVideoWithinDays'),
        'sampleSize': values.get('sampleSize'),
        'allowShorts': values.get('allowShorts'),
        'includeKeywords': split_lines(values.get('includeKeywords', '')),
        'excludeKeywords': split_lines(values.get('excludeKeywords', '')),
        'country': values.get('country', ''),
        'maxChannels': values.get('maxChannels'),
        'seedChannels': split_lines(values.get('seedChannels', '')),
        'searchQueries': split_lines(values.get('searchQueries', '')),
        'verbose': values.get('verbose'),
    })


def render_form() -> Optional[Dict]:
    """Render the run form; returns the submitted values or None."""
    with st.form("discovery"):
        col1, col2 = st.columns(2)

        with col1:
            search_queries = st.text_area("Search queries (one per line)", placeholder="business coach\nsales coaching")
            seed_channels = st.text_area("Seed channels (IDs, URLs or handles)")
            include_keywords = st.text_area("Include keywords", help="If set, at least one must match")
            exclude_keywords = st.text_area("Exclude keywords", value="\n".join(DEFAULT_EXCLUDE_KEYWORDS))

        with col2:
            min_subscribers = st.number_input("Min subscribers", min_value=0, value=1000, step=1000)
            avg_views_min = st.number_input("Min average views", min_value=0, value=0, step=500)
            avg_views_max = st.number_input("Max average views (0 = no limit)", min_value=0, value=0, step=500)
            recent_days = st.number_input("Recent video within days (0 = off)", min_value=0, value=30)
            sample_size = st.number_input("Sample size", min_value=1, max_value=50, value=12)
            max_channels = st.number_input("Max channels", min_value=0, value=50)
            country = st.text_input("Country code", placeholder="e.g. US")
            allow_shorts = st.checkbox("Allow shorts", value=False)
            verbose = st.checkbox("Log skipped channels", value=True)

        submitted = st.form_submit_button("Run discovery", type="primary")

    if not submitted:
        return None

    return {
        'searchQueries': search_queries,
        'seedChannels': seed_channels,
        'includeKeywords': include_keywords,
        'excludeKeywords': exclude_keywords,
        'minSubscribers': int(min_subscribers),
        'avgViewsMin': int(avg_views_min),
        'avgViewsMax': int(avg_views_max),
        'recentVideoWithinDays': int(recent_days),
        'sampleSize': int(sample_size),
        'maxChannels': int(max_channels),
        'country': country,
        'allowShorts': allow_shorts,
        'verbose': verbose,
    }


def render_results(records: List[Dict]):
    """Render collected channels as a table with a CSV download."""
    if not records:
        st.info("No channels match your criteria.")
        return

    df = records_to_dataframe(records)
    st.caption(f"{len(records)} channels collected")
    st.dataframe(
        df,
        column_config={
            'channelName': st.column_config.TextColumn('Channel', width='medium'),
            'channelUrl': st.column_config.LinkColumn('Link'),
            'subscriberCount': st.column_config.NumberColumn('Subs', format='%d'),
            'avgViews': st.column_config.NumberColumn('Avg Views', format='%d'),
            'shortsRatio': st.column_config.NumberColumn('Shorts', format='%.2f'),
            'sampleSize': st.column_config.NumberColumn('Sample', width='small'),
            'country': st.column_config.TextColumn('Country', width='small'),
            'latestVideoAt': st.column_config.TextColumn('Latest Video'),
            'channelId': None,  # Hidden column
        },
        hide_index=True,
    )
    st.download_button(
        "Download CSV",
        data=df.to_csv(index=False),
        file_name="channels.csv",
        mime="text/csv",
    )


def main():
    """Run page - configure and execute a discovery run."""
    st.set_page_config(page_title="Channel Discovery", page_icon="🔍", layout="wide")
    load_dotenv()

    st.title("Channel Discovery")
    st.caption("Find channels that match your audience and content criteria")

    api_key = os.getenv(API_KEY_ENV_VAR)
    if not api_key:
        st.error(f"{API_KEY_ENV_VAR} not found in environment. Please add it to .env file.")
        st.info("Get your API key from: https://console.cloud.google.com/")
        return

    values = render_form()
    if values is not None:
        try:
            config = config_from_form(values, api_key)
        except ConfigError as e:
            st.error(str(e))
            return

        if not config.seed_channels and not config.search_queries:
            st.warning("Enter at least one search query or seed channel.")
            return

        dataset, store = open_storage(DEFAULT_STORAGE_DIR)
        with st.status("Running discovery...", expanded=True) as status:
            summary = run_discovery(config, dataset=dataset, store=store, on_progress=st.write)
            status.update(label=f"Collected {summary['info']['collected']} channels", state="complete")
        st.session_state.results = summary['results']

    render_results(st.session_state.get('results', []))


if __name__ == '__main__':
    main()
