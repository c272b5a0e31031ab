"""
Utility functions for text normalization and tokenizer file loading
"""

import os
import json
import re
import logging

logger = logging.getLogger(__name__)

DEFAULT_OOV_TOKEN = '<UNK>'
DEFAULT_OOV_ID = 1
PAD_ID = 0

TAG_PATTERN = re.compile(r'<[^>]+>')
APOSTROPHE_PATTERN = re.compile(r"(?<=\w)['’](?=\w)")
PUNCTUATION_PATTERN = re.compile(r'[^\w\s]')
WHITESPACE_PATTERN = re.compile(r'\s+')


def normalize_text(text):
    """Lowercase, strip tags and punctuation, collapse whitespace"""
    if not text:
        return ''

    text = str(text).lower()
    text = TAG_PATTERN.sub('', text)

    # "won't" -> "wont", every other punctuation mark becomes a separator
    text = APOSTROPHE_PATTERN.sub('', text)
    text = PUNCTUATION_PATTERN.sub(' ', text)
    text = WHITESPACE_PATTERN.sub(' ', text)

    return text.strip()


def apply_filters(text, filters):
    """Replace every character listed in a Keras-style filter string with a space"""
    if not filters:
        return text
    filter_regex = '[' + re.escape(filters) + ']'
    return re.sub(filter_regex, ' ', text)


def split_tokens(text, char_level=False, split=' '):
    """Split normalized text into tokens"""
    if not text:
        return []
    if char_level:
        return list(text)
    if split == ' ':
        return text.split()
    return [token for token in text.split(split) if token]


def fallback_tokenizer_data(oov_token=DEFAULT_OOV_TOKEN):
    """Minimal single-entry vocabulary used when the tokenizer files are unusable"""
    return {
        'word_index': {oov_token: DEFAULT_OOV_ID},
        'oov_token': oov_token,
        'fallback': True
    }


def _read_json(filepath):
    with open(filepath, 'r', encoding='utf-8') as f:
        return json.load(f)


def _coerce_word_index(word_index):
    # Keras exports word_index as a JSON string inside the config block
    if isinstance(word_index, str):
        word_index = json.loads(word_index)
    if not isinstance(word_index, dict):
        raise ValueError(f"word_index must be an object, got {type(word_index).__name__}")
    return {str(token): int(index) for token, index in word_index.items()}


def checked_dimension(name, value, minimum):
    """Integer tokenizer setting, rejected with ValueError when below minimum"""
    value = int(value)
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return value


def parse_tokenizer_data(data):
    """
    Flatten a tokenizer JSON document into a single dict.

    Accepts the flat layout (word_index plus scalar settings at the top level)
    and the Keras layout where everything sits under a "config" key.
    """
    if not isinstance(data, dict):
        raise ValueError("Tokenizer file must contain a JSON object")

    config = data.get('config') if isinstance(data.get('config'), dict) else {}
    merged = dict(config)
    merged.update({key: value for key, value in data.items() if key != 'config'})

    word_index = merged.get('word_index')
    if word_index is None:
        # word_index.json files are a bare token -> id mapping
        if data and all(isinstance(value, int) for value in data.values()):
            word_index = data
            merged = {}
        else:
            raise ValueError("Tokenizer file has no word_index mapping")

    parsed = {
        'word_index': _coerce_word_index(word_index),
        'oov_token': merged.get('oov_token') or DEFAULT_OOV_TOKEN,
        'filters': merged.get('filters') or '',
        'split': merged.get('split') or ' ',
        'char_level': bool(merged.get('char_level', False)),
    }

    if merged.get('max_len') is not None:
        parsed['max_len'] = checked_dimension('max_len', merged['max_len'], 1)
    if merged.get('vocab_size') is not None:
        parsed['vocab_size'] = checked_dimension('vocab_size', merged['vocab_size'], 2)
    if merged.get('num_words') is not None and 'vocab_size' not in parsed:
        parsed['vocab_size'] = checked_dimension('num_words', merged['num_words'], 2)

    return parsed


def load_tokenizer_data(filepath, config_path=None):
    """Load tokenizer settings from disk, degrading to the OOV-only vocabulary on failure"""
    try:
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Tokenizer file {filepath} does not exist")

        data = parse_tokenizer_data(_read_json(filepath))

        if config_path:
            if os.path.exists(config_path):
                extra = _read_json(config_path)
                if not isinstance(extra, dict):
                    raise ValueError("Tokenizer config must contain a JSON object")
                if extra.get('oov_token'):
                    data['oov_token'] = extra['oov_token']
                if extra.get('max_len') is not None:
                    data['max_len'] = checked_dimension('max_len', extra['max_len'], 1)
                if extra.get('vocab_size') is not None:
                    data['vocab_size'] = checked_dimension('vocab_size', extra['vocab_size'], 2)
            else:
                logger.warning(f"Tokenizer config {config_path} not found, using defaults")

        logger.info(f"Loaded tokenizer from {filepath} with {len(data['word_index'])} entries")
        return data

    except (OSError, ValueError, TypeError) as e:
        logger.error(f"Error loading tokenizer from {filepath}: {e}")
        return fallback_tokenizer_data()
