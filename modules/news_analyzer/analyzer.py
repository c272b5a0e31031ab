"""
News Analyzer class that runs the fake news and clickbait models on webpage text
"""

import copy
import logging
import threading
from collections import deque

import numpy as np
from joblib import Parallel, delayed

from modules.text_tokenizer import TextTokenizer, load_tokenizer_data
from modules.source_encoder import SourceEncoder
from modules.session_state import (
    SessionStorage,
    InitializationTracker,
    InitializationGuard,
    save_all_tokenizers,
    restore_tokenizers
)

from .config import AnalyzerConfig, RECENT_ANALYSES_LIMIT
from .runtime import ModelRuntime
from .results import PredictionResult, AnalysisResult
from .utils import (
    heuristic_prediction,
    heuristic_predictions,
    summarize_analysis,
    empty_stats
)

logger = logging.getLogger(__name__)


class NewsAnalyzer:
    """
    Orchestrates tokenization, model invocation and thresholding.

    Tokenizers and models are loaded lazily on first use through an
    InitializationGuard, so concurrent requests share one load. Any failure
    in the runtime turns into a heuristic result instead of an exception.
    """

    def __init__(self, config=None, runtime=None, storage=None):
        self.config = config or AnalyzerConfig()
        self.runtime = runtime or ModelRuntime()
        self.storage = storage or SessionStorage(self.config.session_file)
        self.tracker = InitializationTracker(self.storage)
        self.guard = InitializationGuard(self.config.max_init_attempts)

        self.models = {}
        self.tokenizers = {}
        self.source_encoders = {}
        self.use_fallback = False

        self.recent_analyses = deque(maxlen=RECENT_ANALYSES_LIMIT)
        self.stats = empty_stats(self.config.model_specs)
        self._stats_lock = threading.Lock()

    @property
    def specs(self):
        return self.config.model_specs

    @property
    def is_initialized(self):
        return self.guard.succeeded

    def initialize(self, timeout=None):
        """Load runtime, tokenizers and models once; safe to call from many threads"""
        if self.guard.succeeded:
            return True

        success = self.guard.run(self._load_resources, timeout)

        if not success and self.guard.exhausted and not self.use_fallback:
            logger.warning("Using heuristic analysis after failed initialization attempts")
            self.use_fallback = True
        elif not success and not self.guard.in_progress:
            logger.info(f"Will retry initialization later (attempt {self.guard.attempts}/{self.guard.max_attempts})")

        return success

    def wait_until_ready(self, timeout=None):
        """Wait for an in-flight initialization; False once the timeout passes"""
        if self.guard.succeeded:
            return True
        timeout = self.config.init_timeout if timeout is None else timeout
        return self.guard.wait(timeout)

    def _load_resources(self):
        self._prepare_runtime()

        # tokenizers first so they are available before any model is used
        tokenizers, source_encoders = self._load_tokenizers()
        models = self._load_models()

        for spec in self.specs:
            loaded = models[spec.name]
            tokenizers[spec.name] = tokenizers[spec.name].bind_to_model(
                max_len=loaded.text_length,
                vocab_size=loaded.text_vocab_size
            )
            if spec.uses_source:
                source_encoders[spec.name] = source_encoders[spec.name].bind_to_model(
                    loaded.source_vocab_size
                )

        self.tokenizers = tokenizers
        self.source_encoders = source_encoders
        self.models = models
        self.tracker.mark_models_loaded()

        logger.info("News analyzer initialized successfully")
        return True

    def _prepare_runtime(self):
        if self.runtime.is_ready:
            return
        already_done = self.tracker.is_runtime_initialized()
        if already_done:
            logger.info("Runtime already initialized in this session, skipping verification")
        self.runtime.prepare(verify=not already_done)
        self.tracker.mark_runtime_initialized()

    def _load_tokenizers(self):
        cached = restore_tokenizers(self.storage) if self.tracker.are_tokenizers_loaded() else {}
        tokenizers = {}
        source_encoders = {}
        to_cache = {}

        for spec in self.specs:
            data = cached.get(spec.tokenizer_key)
            if data is None:
                data = load_tokenizer_data(
                    spec.path(self.config.models_dir, spec.tokenizer_file),
                    spec.path(self.config.models_dir, spec.tokenizer_config_file)
                )
                if not data.get('fallback'):
                    to_cache[spec.tokenizer_key] = data

            vocab_size = data.get('vocab_size') or spec.vocab_size
            tokenizers[spec.name] = TextTokenizer.from_data(data, spec.max_len, vocab_size)

            if spec.uses_source:
                source_data = cached.get(spec.source_key)
                if source_data is not None:
                    encoder = SourceEncoder.from_json(source_data, spec.source_vocab_size)
                else:
                    encoder = SourceEncoder.from_file(
                        spec.path(self.config.models_dir, spec.source_encoder_file),
                        spec.source_vocab_size
                    )
                    if len(encoder.table):
                        to_cache[spec.source_key] = encoder.to_data()
                source_encoders[spec.name] = encoder

        if to_cache and save_all_tokenizers(self.storage, to_cache):
            self.tracker.mark_tokenizers_loaded()

        return tokenizers, source_encoders

    def _load_models(self):
        models = {}
        for spec in self.specs:
            filepath = spec.path(self.config.models_dir, spec.model_file)
            models[spec.name] = self.runtime.load_model(filepath, spec.name)
        return models

    def build_inputs(self, spec, text, source_url=None):
        """Encode text (and the source for models that take one) into runtime input arrays"""
        tokenizer = self.tokenizers[spec.name]
        inputs = [np.array([tokenizer.encode(text)], dtype=np.int32)]

        if spec.uses_source:
            source_id = self.source_encoders[spec.name].encode(source_url or '')
            inputs.append(np.array([[source_id]], dtype=np.int32))

        return inputs

    def _predict(self, spec, text, source_url=None):
        try:
            inputs = self.build_inputs(spec, text, source_url)
            probability = self.runtime.predict(self.models[spec.name], inputs)
            return PredictionResult.from_probability(
                probability,
                spec.positive_label,
                spec.negative_label,
                self.config.threshold
            )
        except Exception as e:
            logger.error(f"Error with {spec.name} model, using heuristic result: {e}")
            return heuristic_prediction(text, spec, error=str(e))

    def _ensure_ready(self):
        if self.guard.succeeded:
            return True
        if self.use_fallback:
            return False
        return self.initialize(timeout=self.config.init_timeout)

    def analyze_text(self, text, source_url=None):
        """Run every model on one text; always returns a complete AnalysisResult"""
        return self._analyze(text, source_url, self._ensure_ready())

    def _analyze(self, text, source_url, ready):
        text = text or ''
        source_info = None

        if not ready:
            error = None if self.use_fallback else 'Analyzer not initialized'
            result = AnalysisResult(text, heuristic_predictions(text, self.specs, error))
            self._record(result)
            return result

        predictions = {spec.name: self._predict(spec, text, source_url) for spec in self.specs}

        for spec in self.specs:
            if spec.uses_source and spec.name in self.source_encoders:
                source_info = self.source_encoders[spec.name].describe(source_url or '')
                break

        result = AnalysisResult(text, predictions, source_info)
        self._record(result)
        return result

    def analyze_text_array(self, texts, source_url=None):
        """Analyze a batch of texts, each one independently"""
        texts = list(texts)
        if not texts:
            return []

        # one initialization attempt per batch, not one per item
        ready = self._ensure_ready()

        if self.runtime.backend == 'threads' and len(texts) > 1:
            results = Parallel(n_jobs=self.runtime.n_jobs, prefer='threads')(
                delayed(self._analyze)(text, source_url, ready) for text in texts
            )
        else:
            results = [self._analyze(text, source_url, ready) for text in texts]

        flagged = {
            spec.name: sum(1 for result in results if result[spec.name].label == spec.flag_label)
            for spec in self.specs
        }
        logger.info(f"Analysis of {len(texts)} texts: {flagged}")
        return results

    def tokenize(self, text, model_name):
        """Debug view of how a model's tokenizer encodes text"""
        self._ensure_ready()
        tokenizer = self.tokenizers.get(model_name)
        if tokenizer is None:
            raise LookupError(f"Tokenizer for '{model_name}' is not loaded")
        return tokenizer.encode_with_report(text)

    def _record(self, result):
        preview = {}
        for spec in self.specs:
            tokenizer = self.tokenizers.get(spec.name)
            if tokenizer is not None and not result[spec.name].is_fallback:
                preview[spec.name] = tokenizer.encode(result.text)[:20]

        with self._stats_lock:
            self.stats['total_analyzed'] += 1
            for spec in self.specs:
                prediction = result[spec.name]
                if prediction.label == spec.flag_label:
                    self.stats['flagged'][spec.name] += 1
            if result.is_degraded:
                self.stats['heuristic_results'] += 1
            self.recent_analyses.appendleft(summarize_analysis(result, preview))

    def get_stats(self, recent=3):
        with self._stats_lock:
            stats = copy.deepcopy(self.stats)
            stats['recent_analyses'] = list(self.recent_analyses)[:recent]
        stats['initialized'] = self.is_initialized
        stats['use_fallback'] = self.use_fallback
        return stats

    def reset_stats(self):
        with self._stats_lock:
            self.stats = empty_stats(self.specs)
            self.recent_analyses.clear()

    def get_status(self):
        return {
            'initialized': self.is_initialized,
            'initializing': self.guard.in_progress,
            'use_fallback': self.use_fallback,
            'backend': self.runtime.backend,
            'tokenizer_loaded': {spec.name: spec.name in self.tokenizers for spec in self.specs},
            'model_loaded': {spec.name: spec.name in self.models for spec in self.specs},
            'max_sequence_length': {
                name: tokenizer.max_len for name, tokenizer in self.tokenizers.items()
            },
            'models': {name: loaded.describe() for name, loaded in self.models.items()},
            'session': self.tracker.snapshot()
        }
