"""
Shared fixtures: a small models directory with tokenizers, a source encoder
and joblib model artifacts laid out the way the analyzer expects
"""

import json

import numpy as np
import joblib
import pytest
from sklearn.dummy import DummyClassifier

from modules.news_analyzer import NewsAnalyzer, AnalyzerConfig, ModelRuntime
from modules.news_sites import NewsSiteChecker
from modules.session_state import SessionStorage

FAKE_NEWS_WORDS = {
    '<UNK>': 1, 'breaking': 2, 'news': 3, 'you': 4, 'wont': 5,
    'believe': 6, 'this': 7, 'president': 8, 'says': 9
}

CLICKBAIT_WORDS = {
    '<UNK>': 1, 'you': 2, 'wont': 3, 'believe': 4, 'this': 5,
    'breaking': 6, 'shocking': 7, 'secret': 8
}

SOURCE_INDEX = {'bbc': 5, 'cnn': 7, 'reuters': 12}


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding='utf-8')


def dump_model(path, labels, n_features, **metadata):
    """Fit a prior-only classifier so its positive probability is the share of 1s in labels"""
    model = DummyClassifier(strategy='prior')
    model.fit(np.zeros((len(labels), n_features)), labels)
    model_data = {'model': model}
    model_data.update(metadata)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model_data, path)


@pytest.fixture
def models_dir(tmp_path):
    root = tmp_path / 'models'

    write_json(root / 'fake_news_model' / 'tokenizer.json', {
        'config': {
            'oov_token': '<UNK>',
            'word_index': json.dumps(FAKE_NEWS_WORDS)
        }
    })
    write_json(root / 'fake_news_model' / 'source_encoder.json', {'source_to_index': SOURCE_INDEX})
    # P(verified) = 0.75
    dump_model(
        root / 'fake_news_model' / 'model.joblib',
        [0, 1, 1, 1],
        301,
        input_shapes=[[None, 300], [None, 1]],
        output_shape=[None, 1],
        text_vocab_size=20000,
        source_vocab_size=2031
    )

    write_json(root / 'clickbait_model' / 'word_index.json', CLICKBAIT_WORDS)
    write_json(root / 'clickbait_model' / 'tokenizer_config.json', {'oov_token': '<UNK>', 'max_len': 30})
    # P(clickbait) = 0.25
    dump_model(
        root / 'clickbait_model' / 'model.joblib',
        [0, 0, 0, 1],
        30,
        input_shapes=[[None, 30]],
        output_shape=[None, 1],
        text_vocab_size=10000
    )

    return root


@pytest.fixture
def analyzer_config(models_dir, tmp_path):
    return AnalyzerConfig(
        models_dir=str(models_dir),
        news_domains_file=str(tmp_path / 'missing_news_domains.json'),
        custom_sites_file=str(tmp_path / 'custom_news_sites.json'),
        init_timeout=5.0
    )


@pytest.fixture
def analyzer(analyzer_config):
    return NewsAnalyzer(
        analyzer_config,
        runtime=ModelRuntime(preferred_backend='sequential'),
        storage=SessionStorage()
    )


@pytest.fixture
def site_checker(analyzer_config):
    return NewsSiteChecker(analyzer_config.news_domains_file, analyzer_config.custom_sites_file)
