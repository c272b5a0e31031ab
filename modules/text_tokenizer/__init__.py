"""
Text Tokenizer Module
Normalizes webpage text and encodes it into fixed-length model inputs
"""

from .tokenizer import VocabularyTable, TextTokenizer
from .utils import (
    normalize_text,
    split_tokens,
    load_tokenizer_data,
    parse_tokenizer_data,
    fallback_tokenizer_data,
    PAD_ID,
    DEFAULT_OOV_TOKEN
)

__all__ = [
    'VocabularyTable',
    'TextTokenizer',
    'normalize_text',
    'split_tokens',
    'load_tokenizer_data',
    'parse_tokenizer_data',
    'fallback_tokenizer_data',
    'PAD_ID',
    'DEFAULT_OOV_TOKEN'
]
