"""
Session state utility functions
Storage keys and the tokenizer cache kept in session storage
"""

import logging

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    'RUNTIME_INITIALIZED': 'runtime_initialized',
    'MODELS_LOADED': 'ai_models_loaded',
    'TOKENIZERS_LOADED': 'ai_tokenizers_loaded'
}

TOKENIZER_KEYS = {
    'FAKE_NEWS_TEXT': 'tokenizer_fake_news_text',
    'FAKE_NEWS_SOURCE': 'tokenizer_fake_news_source',
    'CLICKBAIT': 'tokenizer_clickbait'
}


def save_tokenizer(storage, key, tokenizer_data):
    """Save a tokenizer's configuration to session storage"""
    if storage.set_item(key, tokenizer_data):
        logger.info(f"Saved tokenizer cache: {key}")
        return True
    return False


def get_tokenizer(storage, key):
    """Retrieve tokenizer configuration from session storage"""
    data = storage.get_item(key)
    if data is None:
        return None
    if not isinstance(data, dict):
        logger.error(f"Error retrieving tokenizer cache for {key}: unexpected {type(data).__name__}")
        return None
    logger.info(f"Retrieved tokenizer from cache: {key}")
    return data


def are_tokenizers_cached(storage):
    return all(storage.get_item(key) is not None for key in TOKENIZER_KEYS.values())


def save_all_tokenizers(storage, tokenizers):
    """Save every tokenizer at once; tokenizers maps cache keys to their data"""
    saved = [save_tokenizer(storage, key, data) for key, data in tokenizers.items()]
    return all(saved)


def restore_tokenizers(storage):
    """Restore whatever tokenizers are cached, keyed like TOKENIZER_KEYS values"""
    tokenizers = {}
    for key in TOKENIZER_KEYS.values():
        data = get_tokenizer(storage, key)
        if data is not None:
            tokenizers[key] = data
    logger.info(f"Restored tokenizers: {list(tokenizers.keys())}")
    return tokenizers
