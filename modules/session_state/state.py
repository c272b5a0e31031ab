"""
Session-scoped initialization state
Tracks one-time setup (runtime backend, tokenizers, models) so it is not repeated
"""

import os
import json
import logging
import threading
from concurrent.futures import Future, TimeoutError as FutureTimeoutError

from .utils import STORAGE_KEYS

logger = logging.getLogger(__name__)


class SessionStorage:
    """
    Small key/value store scoped to one browsing session.

    Values are JSON-serializable. With a filepath the store is written through
    to disk so a restarted server in the same session can reuse it; without
    one it lives in memory only. Failures are logged and reported as False/None.
    """

    def __init__(self, filepath=None):
        self.filepath = filepath
        self._items = {}
        self._lock = threading.Lock()
        if filepath:
            self._items = self._read_file()

    def _read_file(self):
        try:
            if os.path.exists(self.filepath):
                with open(self.filepath, 'r', encoding='utf-8') as f:
                    items = json.load(f)
                if isinstance(items, dict):
                    return items
                logger.warning(f"Session storage {self.filepath} is not a JSON object, starting empty")
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read session storage {self.filepath}: {e}")
        return {}

    def _write_file(self, items):
        if not self.filepath:
            return True
        try:
            with open(self.filepath, 'w', encoding='utf-8') as f:
                json.dump(items, f, ensure_ascii=False)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Could not write session storage {self.filepath}: {e}")
            return False

    def get_item(self, key):
        with self._lock:
            return self._items.get(key)

    def set_item(self, key, value):
        with self._lock:
            items = dict(self._items)
            items[key] = value
            try:
                # reject values the file backend could not persist either
                json.dumps(value)
            except (TypeError, ValueError) as e:
                logger.warning(f"Could not store session value for {key}: {e}")
                return False
            if not self._write_file(items):
                return False
            self._items = items
            return True

    def remove_item(self, key):
        with self._lock:
            items = dict(self._items)
            items.pop(key, None)
            if not self._write_file(items):
                return False
            self._items = items
            return True

    def clear(self):
        with self._lock:
            if not self._write_file({}):
                return False
            self._items = {}
            return True

    def keys(self):
        with self._lock:
            return list(self._items.keys())


class InitializationTracker:
    """Records which setup steps already completed in this session"""

    def __init__(self, storage):
        self.storage = storage

    def is_initialized(self, key):
        return self.storage.get_item(key) is True

    def mark_initialized(self, key):
        return self.storage.set_item(key, True)

    def reset(self, key):
        return self.storage.remove_item(key)

    def is_runtime_initialized(self):
        return self.is_initialized(STORAGE_KEYS['RUNTIME_INITIALIZED'])

    def mark_runtime_initialized(self):
        return self.mark_initialized(STORAGE_KEYS['RUNTIME_INITIALIZED'])

    def are_models_loaded(self):
        return self.is_initialized(STORAGE_KEYS['MODELS_LOADED'])

    def mark_models_loaded(self):
        return self.mark_initialized(STORAGE_KEYS['MODELS_LOADED'])

    def are_tokenizers_loaded(self):
        return self.is_initialized(STORAGE_KEYS['TOKENIZERS_LOADED'])

    def mark_tokenizers_loaded(self):
        return self.mark_initialized(STORAGE_KEYS['TOKENIZERS_LOADED'])

    def snapshot(self):
        return {name.lower(): self.is_initialized(key) for name, key in STORAGE_KEYS.items()}


class InitializationGuard:
    """
    Runs a loader at most once at a time.

    The first caller creates a Future and runs the loader; callers arriving
    while it is in flight wait on that same Future. A failed load may be
    retried until max_attempts is reached.
    """

    def __init__(self, max_attempts=2):
        self.max_attempts = max_attempts
        self.attempts = 0
        self._future = None
        self._lock = threading.Lock()

    @property
    def in_progress(self):
        future = self._future
        return future is not None and not future.done()

    @property
    def succeeded(self):
        future = self._future
        return future is not None and future.done() and future.result() is True

    @property
    def exhausted(self):
        """True once every attempt has been used and the last one failed"""
        future = self._future
        return (self.attempts >= self.max_attempts and future is not None
                and future.done() and future.result() is not True)

    def run(self, loader, timeout=None):
        with self._lock:
            future = self._future
            start_new = future is None or (
                future.done() and future.result() is not True and self.attempts < self.max_attempts
            )
            if start_new:
                future = Future()
                self._future = future
                self.attempts += 1

        if not start_new:
            if not future.done():
                logger.info("Initialization already in progress, waiting...")
            return self.wait(timeout)

        try:
            result = bool(loader())
        except Exception as e:
            logger.error(f"Initialization attempt {self.attempts}/{self.max_attempts} failed: {e}")
            result = False
        future.set_result(result)
        return result

    def wait(self, timeout=None):
        """Block until the in-flight load finishes; False on timeout or when nothing was started"""
        future = self._future
        if future is None:
            return False
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            logger.warning(f"Timed out after {timeout}s waiting for initialization")
            return False

    def reset(self):
        with self._lock:
            if self._future is not None and not self._future.done():
                raise RuntimeError("Cannot reset while initialization is in progress")
            self._future = None
            self.attempts = 0
