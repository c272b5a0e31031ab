"""
Tests for loading joblib model artifacts and running them
"""

import joblib
import numpy as np
import pytest
from sklearn.dummy import DummyClassifier
from sklearn.linear_model import LogisticRegression

from modules.news_analyzer import ModelRuntime, ModelLoadError


@pytest.fixture
def runtime():
    runtime = ModelRuntime(preferred_backend='sequential')
    runtime.prepare()
    return runtime


def test_prepare_selects_backend():
    runtime = ModelRuntime(preferred_backend='threads')

    assert not runtime.is_ready
    assert runtime.prepare() == 'threads'
    assert runtime.is_ready
    assert 1 <= runtime.n_jobs <= 4


def test_unknown_backend_falls_back_to_sequential():
    runtime = ModelRuntime(preferred_backend='webgl')
    assert runtime.prepare(verify=False) == 'sequential'
    assert runtime.n_jobs == 1


def test_missing_model_file_raises(runtime, tmp_path):
    with pytest.raises(ModelLoadError, match='not found'):
        runtime.load_model(str(tmp_path / 'model.joblib'))


def test_corrupt_model_file_raises(runtime, tmp_path):
    path = tmp_path / 'model.joblib'
    path.write_bytes(b'definitely not a pickle')

    with pytest.raises(ModelLoadError, match='corrupted'):
        runtime.load_model(str(path))


def test_model_dict_without_model_key_raises(runtime, tmp_path):
    path = tmp_path / 'model.joblib'
    joblib.dump({'accuracy': 0.9}, path)

    with pytest.raises(ModelLoadError, match='missing keys'):
        runtime.load_model(str(path))


def test_bare_estimator_artifact(runtime, tmp_path):
    X = np.array([[0, 0], [1, 1], [0, 1], [1, 0]] * 5)
    y = np.array([0, 1, 0, 1] * 5)
    path = tmp_path / 'model.joblib'
    joblib.dump(LogisticRegression().fit(X, y), path)

    loaded = runtime.load_model(str(path), 'clickbait')
    probabilities = runtime.predict_batch(loaded, [np.array([[1, 1], [0, 0]])])

    assert loaded.input_shapes is None
    assert len(probabilities) == 2
    assert probabilities[0] > probabilities[1]
    assert all(0.0 <= value <= 1.0 for value in probabilities)


def test_predict_checks_declared_shapes(runtime, tmp_path):
    model = DummyClassifier(strategy='prior').fit(np.zeros((2, 30)), [0, 1])
    path = tmp_path / 'model.joblib'
    joblib.dump({'model': model, 'input_shapes': [[None, 30]], 'output_shape': [None, 1]}, path)
    loaded = runtime.load_model(str(path), 'clickbait')

    assert loaded.text_length == 30
    assert runtime.predict(loaded, [np.zeros((1, 30), dtype=np.int32)]) == pytest.approx(0.5)

    with pytest.raises(ValueError):
        runtime.predict(loaded, [np.zeros((1, 20), dtype=np.int32)])
    with pytest.raises(ValueError):
        runtime.predict(loaded, [np.zeros((1, 30)), np.zeros((1, 1))])


def test_predict_requires_prepared_runtime(tmp_path):
    model = DummyClassifier().fit(np.zeros((2, 1)), [0, 1])
    path = tmp_path / 'model.joblib'
    joblib.dump(model, path)

    runtime = ModelRuntime()
    loaded = runtime.load_model(str(path))

    with pytest.raises(RuntimeError):
        runtime.predict(loaded, [np.zeros((1, 1))])
