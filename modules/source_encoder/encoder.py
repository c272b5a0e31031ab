"""
Source encoder that turns a page's domain into the fake news model's source input
"""

import logging
from types import MappingProxyType

from .utils import (
    DEFAULT_SOURCE_VOCAB_SIZE,
    extract_site_name,
    hash_source_id,
    load_source_index,
    parse_source_index
)

logger = logging.getLogger(__name__)


class DomainTable:
    """Read-only site name -> id mapping"""

    def __init__(self, source_index=None):
        self._index = MappingProxyType(dict(source_index or {}))

    def __len__(self):
        return len(self._index)

    def lookup(self, site_name):
        # '' is never a valid key, so malformed URLs always miss
        if not site_name:
            return None
        return self._index.get(site_name)

    def to_dict(self):
        return dict(self._index)


class SourceEncoder:
    def __init__(self, table=None, source_vocab_size=DEFAULT_SOURCE_VOCAB_SIZE):
        self.table = table or DomainTable()
        self.source_vocab_size = int(source_vocab_size)

    @classmethod
    def from_file(cls, filepath, source_vocab_size=DEFAULT_SOURCE_VOCAB_SIZE):
        table = DomainTable(load_source_index(filepath))
        logger.info(f"Source encoder loaded with {len(table)} entries")
        return cls(table, source_vocab_size)

    @classmethod
    def from_json(cls, document, source_vocab_size=DEFAULT_SOURCE_VOCAB_SIZE):
        try:
            index = parse_source_index(document)
        except (ValueError, TypeError) as e:
            logger.error(f"Invalid source encoder document: {e}")
            index = {}
        return cls(DomainTable(index), source_vocab_size)

    def to_data(self):
        return {'source_to_index': self.table.to_dict()}

    def bind_to_model(self, source_vocab_size):
        return SourceEncoder(self.table, source_vocab_size or self.source_vocab_size)

    def encode_site_name(self, site_name):
        """Return (id, is_known) for an already extracted site name"""
        source_id = self.table.lookup(site_name)
        if source_id is not None and 0 < source_id < self.source_vocab_size:
            return source_id, True

        if source_id is not None:
            logger.warning(f"Source '{site_name}' mapped to invalid id {source_id}, using hash fallback")

        return hash_source_id(site_name, self.source_vocab_size), False

    def encode(self, url):
        """Encode a URL or hostname into a single source id"""
        site_name = extract_site_name(url)
        source_id, _ = self.encode_site_name(site_name)
        return source_id

    def describe(self, url):
        site_name = extract_site_name(url)
        source_id, is_known = self.encode_site_name(site_name)
        return {
            'original_source': url,
            'site_name': site_name,
            'source_id': source_id,
            'is_oov': not is_known
        }
