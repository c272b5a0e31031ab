"""
Model runtime adapter
Loads joblib model artifacts and runs them on encoded inputs
"""

import os
import logging
import numpy as np
import joblib

logger = logging.getLogger(__name__)


class ModelLoadError(Exception):
    pass


class LoadedModel:
    """An estimator plus the input/output shapes and vocab sizes its artifact declares"""

    def __init__(self, name, estimator, input_shapes=None, output_shape=None,
                 text_vocab_size=None, source_vocab_size=None, metadata=None):
        self.name = name
        self.estimator = estimator
        self.input_shapes = [list(shape) for shape in input_shapes] if input_shapes else None
        self.output_shape = list(output_shape) if output_shape else None
        self.text_vocab_size = text_vocab_size
        self.source_vocab_size = source_vocab_size
        self.metadata = metadata or {}

    @property
    def text_length(self):
        """Sequence length of the first (text) input, when declared"""
        if self.input_shapes and len(self.input_shapes[0]) > 1:
            return self.input_shapes[0][1]
        return None

    def describe(self):
        return {
            'name': self.name,
            'estimator': type(self.estimator).__name__,
            'input_shapes': self.input_shapes,
            'output_shape': self.output_shape,
            'text_vocab_size': self.text_vocab_size,
            'source_vocab_size': self.source_vocab_size
        }


class ModelRuntime:
    def __init__(self, preferred_backend=None):
        self.preferred_backend = preferred_backend
        self.backend = None
        self.n_jobs = 1

    def prepare(self, verify=True):
        """Select a backend; with verify, also make sure numerical operations work"""
        cpu_count = os.cpu_count() or 1
        backend = self.preferred_backend
        if backend is None:
            backend = 'threads' if cpu_count > 1 else 'sequential'
        if backend not in ('threads', 'sequential'):
            logger.warning(f"Unknown backend '{backend}', falling back to sequential")
            backend = 'sequential'

        if verify:
            smoke = np.arange(3, dtype=np.float32)
            if float(smoke @ smoke) != 5.0:
                raise RuntimeError("Numerical backend returned an unexpected result")

        self.backend = backend
        self.n_jobs = min(max(cpu_count - 1, 1), 4) if backend == 'threads' else 1
        logger.info(f"Model runtime ready (backend: {self.backend}, workers: {self.n_jobs})")
        return self.backend

    @property
    def is_ready(self):
        return self.backend is not None

    def load_model(self, filepath, name=None):
        """Load a joblib artifact; raises ModelLoadError when it is missing or unusable"""
        name = name or os.path.basename(os.path.dirname(filepath))
        if not os.path.exists(filepath):
            raise ModelLoadError(f"Model file not found at: {filepath}")

        logger.info(f"Loading model from: {filepath}")
        try:
            artifact = joblib.load(filepath)
        except Exception as e:
            raise ModelLoadError(f"Model file {filepath} appears to be corrupted or incomplete: {e}") from e

        if isinstance(artifact, dict):
            if 'model' not in artifact:
                raise ModelLoadError(f"Model file {filepath} is missing keys: ['model']")
            estimator = artifact['model']
            loaded = LoadedModel(
                name,
                estimator,
                input_shapes=artifact.get('input_shapes'),
                output_shape=artifact.get('output_shape'),
                text_vocab_size=artifact.get('text_vocab_size'),
                source_vocab_size=artifact.get('source_vocab_size'),
                metadata={key: value for key, value in artifact.items() if key != 'model'}
            )
        else:
            loaded = LoadedModel(name, artifact)

        if not (hasattr(loaded.estimator, 'predict_proba') or hasattr(loaded.estimator, 'predict')):
            raise ModelLoadError(f"Model '{name}' has neither predict_proba nor predict")

        logger.info(f"Model '{name}' loaded (input shapes: {loaded.input_shapes}, output shape: {loaded.output_shape})")
        return loaded

    def _check_shapes(self, loaded, inputs):
        if not loaded.input_shapes:
            return
        if len(inputs) != len(loaded.input_shapes):
            raise ValueError(
                f"Model '{loaded.name}' expects {len(loaded.input_shapes)} inputs, got {len(inputs)}"
            )
        for array, declared in zip(inputs, loaded.input_shapes):
            if array.ndim != len(declared):
                raise ValueError(f"Input rank {array.ndim} does not match declared shape {declared}")
            for actual, expected in zip(array.shape, declared):
                if expected is not None and actual != expected:
                    raise ValueError(f"Input shape {list(array.shape)} does not match declared shape {declared}")

    def predict(self, loaded, inputs):
        """Return the positive-class probability for a single-row batch of inputs"""
        return self.predict_batch(loaded, inputs)[0]

    def predict_batch(self, loaded, inputs):
        """Return one positive-class probability per row of the input arrays"""
        if not self.is_ready:
            raise RuntimeError("Model runtime has not been prepared")

        inputs = [np.asarray(array) for array in inputs]
        self._check_shapes(loaded, inputs)
        features = np.hstack([array.reshape(array.shape[0], -1) for array in inputs])

        estimator = loaded.estimator
        if hasattr(estimator, 'predict_proba'):
            probabilities = np.asarray(estimator.predict_proba(features))
            classes = list(getattr(estimator, 'classes_', []))
            column = classes.index(1) if 1 in classes else probabilities.shape[1] - 1
            positive = probabilities[:, column]
        else:
            positive = np.asarray(estimator.predict(features), dtype=float).reshape(features.shape[0], -1)[:, 0]

        positive = positive.astype(float)
        if not np.all(np.isfinite(positive)) or np.any(positive < 0) or np.any(positive > 1):
            raise ValueError(f"Model '{loaded.name}' returned probabilities outside [0, 1]")

        return [float(value) for value in positive]
