"""
Website generator package
Feed filtering, feed rendering and the static site builder
"""
from website_generator.feed_filter import (
    PageContext,
    filter_by_candidate,
    filter_by_category,
    get_candidate_slug,
    sort_newest_first,
    unique_categories,
)
from website_generator.feed_renderer import (
    Container,
    ContentSink,
    ElementSink,
    render_feed_list,
    render_filter_bar,
    render_profile_feed,
)
from website_generator.generator import WebsiteGenerator

__all__ = [
    'PageContext',
    'filter_by_candidate',
    'filter_by_category',
    'get_candidate_slug',
    'sort_newest_first',
    'unique_categories',
    'Container',
    'ContentSink',
    'ElementSink',
    'render_feed_list',
    'render_filter_bar',
    'render_profile_feed',
    'WebsiteGenerator',
]
