"""
News Sites Module
Built-in and user-managed lists of news sites
"""

from .checker import NewsSiteChecker
from .utils import (
    DEFAULT_NEWS_DOMAINS,
    load_news_domains,
    load_custom_sites,
    save_custom_sites
)

__all__ = [
    'NewsSiteChecker',
    'DEFAULT_NEWS_DOMAINS',
    'load_news_domains',
    'load_custom_sites',
    'save_custom_sites'
]
