"""
Vocabulary table and sequence encoder for the text models
"""

import logging
from types import MappingProxyType

from .utils import (
    DEFAULT_OOV_TOKEN,
    DEFAULT_OOV_ID,
    PAD_ID,
    normalize_text,
    apply_filters,
    split_tokens,
    load_tokenizer_data,
    parse_tokenizer_data,
    fallback_tokenizer_data
)

logger = logging.getLogger(__name__)


class VocabularyTable:
    """Read-only token -> id mapping with a reserved padding id and an OOV id"""

    def __init__(self, word_index, oov_token=DEFAULT_OOV_TOKEN):
        self._index = MappingProxyType(dict(word_index))
        self.oov_token = oov_token
        oov_id = self._index.get(oov_token)
        self.oov_id = oov_id if oov_id and oov_id > PAD_ID else DEFAULT_OOV_ID

    @property
    def word_index(self):
        return self._index

    def __len__(self):
        return len(self._index)

    def __contains__(self, token):
        return token in self._index

    def lookup(self, token):
        """Return the id for a token, or None when the token is unknown"""
        token_id = self._index.get(token)
        # id 0 is reserved for padding, never a real token
        if token_id is None or token_id == PAD_ID:
            return None
        return token_id


class TextTokenizer:
    """
    Encodes raw text into fixed-length id sequences.

    Every encoded sequence is exactly ``max_len`` long and every id lies in
    ``[0, vocab_size)``: ids the model cannot embed are clamped to the OOV id.
    """

    def __init__(self, vocabulary, max_len, vocab_size, char_level=False,
                 filters='', split=' ', is_fallback=False):
        if max_len < 1:
            raise ValueError(f"max_len must be positive, got {max_len}")
        if vocab_size < 2:
            raise ValueError(f"vocab_size must be at least 2, got {vocab_size}")

        self.vocabulary = vocabulary
        self.max_len = int(max_len)
        self.vocab_size = int(vocab_size)
        self.char_level = char_level
        self.filters = filters
        self.split = split
        self.is_fallback = is_fallback

    @classmethod
    def from_data(cls, data, max_len, vocab_size=None):
        """Build a tokenizer from parsed tokenizer data (see utils.parse_tokenizer_data)"""
        vocabulary = VocabularyTable(data['word_index'], data.get('oov_token', DEFAULT_OOV_TOKEN))
        return cls(
            vocabulary,
            max_len=data.get('max_len') or max_len,
            vocab_size=vocab_size or data.get('vocab_size') or len(vocabulary) + 1,
            char_level=data.get('char_level', False),
            filters=data.get('filters', ''),
            split=data.get('split', ' '),
            is_fallback=data.get('fallback', False)
        )

    @classmethod
    def from_file(cls, filepath, max_len, vocab_size=None, config_path=None):
        return cls.from_data(load_tokenizer_data(filepath, config_path), max_len, vocab_size)

    @classmethod
    def from_json(cls, document, max_len, vocab_size=None):
        """Build from an already-decoded JSON document, falling back to the OOV-only vocabulary"""
        try:
            data = parse_tokenizer_data(document)
        except (ValueError, TypeError) as e:
            logger.error(f"Invalid tokenizer document: {e}")
            data = fallback_tokenizer_data()
        return cls.from_data(data, max_len, vocab_size)

    def to_data(self):
        """Serializable form, used by the session tokenizer cache"""
        return {
            'word_index': dict(self.vocabulary.word_index),
            'oov_token': self.vocabulary.oov_token,
            'max_len': self.max_len,
            'vocab_size': self.vocab_size,
            'char_level': self.char_level,
            'filters': self.filters,
            'split': self.split,
            'fallback': self.is_fallback
        }

    @property
    def oov_id(self):
        # the OOV id itself has to fit the embedding
        return min(self.vocabulary.oov_id, self.vocab_size - 1)

    def bind_to_model(self, max_len=None, vocab_size=None):
        """Copy of this tokenizer bound to a model's declared input length and embedding size"""
        return TextTokenizer(
            self.vocabulary,
            max_len=max_len or self.max_len,
            vocab_size=vocab_size or self.vocab_size,
            char_level=self.char_level,
            filters=self.filters,
            split=self.split,
            is_fallback=self.is_fallback
        )

    def tokenize(self, text):
        normalized = apply_filters(normalize_text(text), self.filters)
        return split_tokens(normalized, char_level=self.char_level, split=self.split)

    def encode_tokens(self, tokens):
        """Map tokens to ids, clamping anything outside the embedding range to OOV"""
        oov_id = self.oov_id
        sequence = []
        details = []

        for token in tokens:
            looked_up = self.vocabulary.lookup(token)
            token_id = oov_id if looked_up is None else looked_up
            clamped = False

            if token_id < 0 or token_id >= self.vocab_size:
                logger.warning(f"Token '{token}' mapped to invalid id {token_id}, using OOV id {oov_id} instead")
                token_id = oov_id
                clamped = True

            sequence.append(token_id)
            details.append({
                'token': token,
                'id': token_id,
                'is_oov': looked_up is None,
                'clamped': clamped
            })

        return sequence, details

    def pad_sequence(self, sequence):
        if len(sequence) > self.max_len:
            return sequence[:self.max_len]
        return sequence + [PAD_ID] * (self.max_len - len(sequence))

    def encode(self, text):
        """Encode text into a padded/truncated id sequence"""
        sequence, _ = self.encode_tokens(self.tokenize(text))
        return self.pad_sequence(sequence)

    def encode_with_report(self, text):
        """Encode text and return per-token debug information alongside the sequence"""
        normalized = normalize_text(text)
        sequence, details = self.encode_tokens(self.tokenize(text))

        return {
            'original': text,
            'cleaned': normalized,
            'sequence': self.pad_sequence(sequence),
            'length': self.max_len,
            'tokens': details[:self.max_len],
            'truncated': len(sequence) > self.max_len,
            'padded': len(sequence) < self.max_len,
            'oov_count': sum(1 for detail in details if detail['is_oov'])
        }
