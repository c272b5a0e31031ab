"""
News site checker
Decides whether a page belongs to a news site before its text is analyzed
"""

import time
import logging
import threading

from modules.source_encoder import extract_site_name

from .utils import (
    CACHE_DURATION,
    load_news_domains,
    load_custom_sites,
    save_custom_sites
)

logger = logging.getLogger(__name__)


class NewsSiteChecker:
    def __init__(self, news_domains_file, custom_sites_file, cache_duration=CACHE_DURATION, clock=time.time):
        self.news_domains_file = news_domains_file
        self.custom_sites_file = custom_sites_file
        self.cache_duration = cache_duration
        self.clock = clock

        self.default_domains = set(load_news_domains(news_domains_file))
        self.custom_sites = load_custom_sites(custom_sites_file)
        self.domain_cache = {}
        self._lock = threading.Lock()

    def is_news_site(self, domain):
        return self.check(domain)['is_news_site']

    def check(self, domain):
        """Look a domain up in the cache, then the custom sites, then the defaults"""
        site_name = extract_site_name(domain)
        if not site_name:
            return {'is_news_site': False, 'site_name': '', 'source': 'none'}

        now = self.clock()
        with self._lock:
            cached = self.domain_cache.get(site_name)
            if cached and now - cached['timestamp'] < self.cache_duration:
                return {'is_news_site': cached['is_news_site'], 'site_name': site_name, 'source': cached['source']}

            if site_name in self.custom_sites:
                source = 'custom'
            elif site_name in self.default_domains:
                source = 'default'
            else:
                source = 'none'

            is_news_site = source != 'none'
            self.domain_cache[site_name] = {
                'is_news_site': is_news_site,
                'timestamp': now,
                'source': source
            }

        logger.debug(f"Is {site_name} a news site? {is_news_site} ({source})")
        return {'is_news_site': is_news_site, 'site_name': site_name, 'source': source}

    def add_site(self, domain):
        site_name = extract_site_name(domain)
        if not site_name:
            raise ValueError(f"Cannot extract a site name from '{domain}'")

        with self._lock:
            if site_name not in self.custom_sites:
                self.custom_sites.append(site_name)
                save_custom_sites(self.custom_sites, self.custom_sites_file)
                logger.info(f"Added to custom news sites: {site_name}")
            self.domain_cache.pop(site_name, None)
            return list(self.custom_sites)

    def remove_site(self, domain):
        site_name = extract_site_name(domain)
        if not site_name:
            raise ValueError(f"Cannot extract a site name from '{domain}'")

        with self._lock:
            if site_name in self.custom_sites:
                self.custom_sites = [site for site in self.custom_sites if site != site_name]
                save_custom_sites(self.custom_sites, self.custom_sites_file)
                logger.info(f"Removed from custom news sites: {site_name}")
            self.domain_cache.pop(site_name, None)
            return list(self.custom_sites)
