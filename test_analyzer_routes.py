"""
Tests for the HTTP routes using Flask's test client
"""

import threading

import pytest

from web_app import create_app, initialize_models
from modules.news_analyzer import NewsAnalyzer, AnalyzerConfig, ModelRuntime
from modules.session_state import SessionStorage


@pytest.fixture
def client(analyzer_config, analyzer, site_checker):
    app = create_app(analyzer_config, analyzer, site_checker)
    app.config['TESTING'] = True
    return app.test_client()


def test_classify_single_text(client):
    response = client.post('/api/classify', json={'text': 'Breaking news', 'url': 'https://www.cnn.com/a'})
    data = response.get_json()

    assert response.status_code == 200
    assert data['success']
    assert data['data']['fake_news']['label'] == 'verified'
    assert data['data']['clickbait']['label'] == 'not_clickbait'
    assert data['data']['source']['site_name'] == 'cnn'
    assert data['data']['is_degraded'] is False


def test_classify_batch(client):
    response = client.post('/api/classify', json={'texts': ['one', 'two']})
    data = response.get_json()

    assert response.status_code == 200
    assert data['data']['count'] == 2
    assert len(data['data']['results']) == 2


@pytest.mark.parametrize('payload', [{}, {'text': '   '}, {'text': 42}, {'texts': 'not a list'}, {'texts': [1, 2]}])
def test_classify_validation(client, payload):
    response = client.post('/api/classify', json=payload)

    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_classify_error_returns_500(client, analyzer, monkeypatch):
    def broken(text, source_url=None):
        raise RuntimeError('boom')

    monkeypatch.setattr(analyzer, 'analyze_text', broken)
    response = client.post('/api/classify', json={'text': 'hello'})

    assert response.status_code == 500
    assert 'boom' in response.get_json()['error']


def test_check_domain(client):
    response = client.post('/api/check-domain', json={'domain': 'www.reuters.com'})

    assert response.get_json() == {
        'is_news_site': True,
        'domain': 'www.reuters.com',
        'site_name': 'reuters',
        'source': 'default'
    }
    assert client.post('/api/check-domain', json={}).status_code == 400


def test_check_domain_safety_timeout(analyzer_config, analyzer, site_checker, monkeypatch):
    release = threading.Event()

    def slow_check(domain):
        release.wait(5)
        return {'is_news_site': True, 'site_name': 'slow', 'source': 'default'}

    monkeypatch.setattr(site_checker, 'check', slow_check)
    analyzer_config.domain_check_timeout = 0.05
    client = create_app(analyzer_config, analyzer, site_checker).test_client()

    try:
        data = client.post('/api/check-domain', json={'domain': 'slow.com'}).get_json()
    finally:
        release.set()

    assert data == {'is_news_site': False, 'domain': 'slow.com', 'error': 'Safety timeout'}


def test_custom_news_sites(client):
    response = client.post('/api/news-sites', json={'domain': 'https://localnews.com'})
    assert response.get_json() == {'success': True, 'custom_sites': ['localnews']}

    assert client.get('/api/news-sites').get_json()['custom_sites'] == ['localnews']
    assert client.post('/api/check-domain', json={'domain': 'localnews.com'}).get_json()['source'] == 'custom'

    response = client.delete('/api/news-sites', json={'domain': 'localnews.com'})
    assert response.get_json() == {'success': True, 'custom_sites': []}

    assert client.post('/api/news-sites', json={'domain': ''}).status_code == 400
    assert client.post('/api/news-sites', json={'domain': 'bad..domain'}).status_code == 400


def test_stats(client):
    client.post('/api/classify', json={'text': 'first'})
    data = client.get('/api/stats').get_json()['data']

    assert data['total_analyzed'] == 1
    assert data['recent_analyses'][0]['text'] == 'first'


def test_tokenize(client):
    response = client.post('/api/tokenize', json={'text': "You WON'T believe this"})
    data = response.get_json()

    assert response.status_code == 200
    assert data['model'] == 'clickbait'
    assert data['data']['cleaned'] == 'you wont believe this'
    assert data['data']['sequence'][:4] == [2, 3, 4, 5]
    assert len(data['data']['sequence']) == 30

    assert client.post('/api/tokenize', json={'text': 'x', 'model': 'sentiment'}).status_code == 400
    assert client.post('/api/tokenize', json={}).status_code == 400


def test_status_and_health(client, analyzer):
    analyzer.initialize()

    status = client.get('/api/status').get_json()['data']
    assert status['model_loaded'] == {'fake_news': True, 'clickbait': True}

    health = client.get('/health').get_json()
    assert health['status'] == 'healthy'


def test_health_degraded_before_initialization(client):
    assert client.get('/health').get_json()['status'] == 'degraded'


@pytest.mark.parametrize('url', [123, ['https://cnn.com'], {'host': 'cnn.com'}])
def test_classify_rejects_non_string_url(client, url):
    response = client.post('/api/classify', json={'text': 'breaking news', 'url': url})

    assert response.status_code == 400
    assert response.get_json() == {'success': False, 'error': 'url must be a string'}


@pytest.mark.parametrize('method,path', [
    ('post', '/api/classify'),
    ('post', '/api/check-domain'),
    ('post', '/api/news-sites'),
    ('delete', '/api/news-sites'),
    ('post', '/api/tokenize'),
])
@pytest.mark.parametrize('body', [['cnn.com'], 'cnn.com', 42])
def test_non_object_bodies_are_rejected(client, method, path, body):
    response = getattr(client, method)(path, json=body)

    assert response.status_code == 400
    assert response.get_json() == {'success': False, 'error': 'Request body must be a JSON object'}


def test_tokenize_rejects_non_string_model(client):
    response = client.post('/api/tokenize', json={'text': 'hello', 'model': ['clickbait']})

    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_startup_initialization_leaves_a_retry_for_requests(tmp_path, capsys):
    config = AnalyzerConfig(models_dir=str(tmp_path / 'empty'), custom_sites_file=str(tmp_path / 'sites.json'))
    analyzer = NewsAnalyzer(config, runtime=ModelRuntime('sequential'), storage=SessionStorage())

    initialize_models(analyzer)

    assert analyzer.guard.attempts == 1
    assert not analyzer.use_fallback
    assert 'heuristic analysis' in capsys.readouterr().out

    analyzer.analyze_text('breaking news')
    assert analyzer.guard.attempts == 2
    assert analyzer.use_fallback


def test_startup_initialization_loads_models(analyzer, capsys):
    initialize_models(analyzer)

    assert analyzer.is_initialized
    assert analyzer.guard.attempts == 1
    assert 'fake_news model ready' in capsys.readouterr().out
