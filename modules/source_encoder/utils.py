"""
Source Encoder Utility Functions
Domain extraction, hash fallback ids and encoder file loading
"""

import os
import re
import json
import hashlib
import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

# Second-level labels that form a two-part public suffix (example.co.uk, example.com.au)
MULTI_PART_SUFFIX_MARKERS = {'co', 'com', 'net', 'org', 'gov', 'edu', 'ac'}

DEFAULT_SOURCE_VOCAB_SIZE = 2031

HOST_LABEL_PATTERN = re.compile(r'^[\w-]+$')


def extract_hostname(url):
    """Return the lowercased hostname of a URL or bare host string, or '' when malformed"""
    if url is None:
        return ''
    if not isinstance(url, str):
        logger.debug(f"Ignoring non-string URL {url!r}")
        return ''

    value = url.strip().lower()
    if not value:
        return ''

    if '://' not in value:
        value = '//' + value

    try:
        hostname = urlparse(value).hostname or ''
    except ValueError as e:
        logger.debug(f"Could not parse URL '{url}': {e}")
        return ''

    if hostname.startswith('www.'):
        hostname = hostname[4:]

    return hostname


def extract_site_name(url):
    """
    Reduce a URL or hostname to its site name.

    www.example.com -> example, news.bbc.co.uk -> bbc, example.co.uk -> example.
    Malformed input yields ''.
    """
    hostname = extract_hostname(url)
    if not hostname:
        return ''

    parts = hostname.split('.')
    if any(not part or not HOST_LABEL_PATTERN.match(part) for part in parts):
        logger.debug(f"Malformed hostname '{hostname}'")
        return ''

    if len(parts) > 2 and parts[-2] in MULTI_PART_SUFFIX_MARKERS:
        return parts[-3]

    return parts[0]


def hash_source_id(site_name, source_vocab_size=DEFAULT_SOURCE_VOCAB_SIZE):
    """Deterministic id in [1, source_vocab_size) for a site name missing from the table"""
    if source_vocab_size < 2:
        raise ValueError(f"source_vocab_size must be at least 2, got {source_vocab_size}")

    digest = hashlib.md5(site_name.encode('utf-8')).hexdigest()
    return 1 + int(digest, 16) % (source_vocab_size - 1)


def load_source_index(filepath):
    """Load the domain -> id mapping from a source encoder JSON file"""
    try:
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Source encoder file {filepath} does not exist")

        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)

        return parse_source_index(data)

    except (OSError, ValueError, TypeError) as e:
        logger.error(f"Error loading source encoder from {filepath}: {e}")
        return {}


def parse_source_index(data):
    if not isinstance(data, dict):
        raise ValueError("Source encoder file must contain a JSON object")

    index = data.get('source_to_index')
    if index is None:
        index = data.get('index')
    if isinstance(index, str):
        index = json.loads(index)
    if not isinstance(index, dict):
        raise ValueError("Source encoder file has no source_to_index mapping")

    return {str(source).strip().lower(): int(source_id) for source, source_id in index.items()}
