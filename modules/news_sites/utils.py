"""
News site list utility functions
"""

import os
import json
import logging

logger = logging.getLogger(__name__)

DEFAULT_NEWS_DOMAINS = [
    'nytimes', 'washingtonpost', 'theguardian', 'bbc', 'cnn',
    'foxnews', 'reuters', 'apnews', 'thehill', 'npr',
    'wsj', 'economist', 'time', 'usatoday', 'latimes'
]

CACHE_DURATION = 24 * 60 * 60  # seconds


def load_news_domains(filepath):
    """Load the built-in news site names, falling back to the default list"""
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            domains = json.load(f)
        if not isinstance(domains, list):
            raise ValueError("News domains file must contain a JSON list")
        domains = [str(domain).strip().lower() for domain in domains if str(domain).strip()]
        logger.info(f"Loaded {len(domains)} news domains from {filepath}")
        return domains
    except (OSError, ValueError) as e:
        logger.error(f"Error loading news domains: {e}")
        return list(DEFAULT_NEWS_DOMAINS)


def load_custom_sites(filepath):
    """Load user-added news sites"""
    try:
        if os.path.exists(filepath):
            with open(filepath, 'r', encoding='utf-8') as f:
                sites = json.load(f)
            if isinstance(sites, list):
                return [str(site) for site in sites]
            logger.warning(f"Custom sites file {filepath} is not a list, ignoring it")
    except (OSError, ValueError) as e:
        logger.error(f"Error loading custom news sites: {e}")
    return []


def save_custom_sites(sites, filepath):
    """Save user-added news sites"""
    try:
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(sites, f, ensure_ascii=False, indent=2)
        return True
    except OSError as e:
        logger.error(f"Error saving custom news sites: {e}")
        return False
