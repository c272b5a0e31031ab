"""
Source Encoder Module
Extracts a page's site name and maps it to the fake news model's source id
"""

from .encoder import DomainTable, SourceEncoder
from .utils import (
    extract_hostname,
    extract_site_name,
    hash_source_id,
    load_source_index,
    MULTI_PART_SUFFIX_MARKERS,
    DEFAULT_SOURCE_VOCAB_SIZE
)

__all__ = [
    'DomainTable',
    'SourceEncoder',
    'extract_hostname',
    'extract_site_name',
    'hash_source_id',
    'load_source_index',
    'MULTI_PART_SUFFIX_MARKERS',
    'DEFAULT_SOURCE_VOCAB_SIZE'
]
