"""
Session State Module
Session storage, initialization tracking and the tokenizer cache
"""

from .state import SessionStorage, InitializationTracker, InitializationGuard
from .utils import (
    STORAGE_KEYS,
    TOKENIZER_KEYS,
    save_tokenizer,
    get_tokenizer,
    are_tokenizers_cached,
    save_all_tokenizers,
    restore_tokenizers
)

__all__ = [
    'SessionStorage',
    'InitializationTracker',
    'InitializationGuard',
    'STORAGE_KEYS',
    'TOKENIZER_KEYS',
    'save_tokenizer',
    'get_tokenizer',
    'are_tokenizers_cached',
    'save_all_tokenizers',
    'restore_tokenizers'
]
