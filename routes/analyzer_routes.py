"""
Routes for News Analyzer functionality
Handles text classification, news site checks and the custom site list
"""

import sys
import os
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from flask import Blueprint, request, jsonify

from modules.news_analyzer.config import DOMAIN_CHECK_TIMEOUT

logger = logging.getLogger(__name__)

# Create blueprint for news analyzer routes
analyzer_bp = Blueprint('news_analyzer', __name__)

# Initialized by the main app
news_analyzer = None
site_checker = None
domain_check_timeout = DOMAIN_CHECK_TIMEOUT

NOT_AN_OBJECT_ERROR = 'Request body must be a JSON object'

domain_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix='domain-check')


def init_news_analyzer(analyzer, checker, check_timeout=None):
    """Initialize the news analyzer and site checker used by the routes"""
    global news_analyzer, site_checker, domain_check_timeout
    news_analyzer = analyzer
    site_checker = checker
    if check_timeout is not None:
        domain_check_timeout = check_timeout


def get_news_analyzer():
    return news_analyzer


def _request_data():
    """JSON body as a dict, or None when the body is not a JSON object"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return data


def _invalid_body():
    return jsonify({
        'success': False,
        'error': NOT_AN_OBJECT_ERROR
    }), 400


def _request_domain(data):
    domain = data.get('domain', '')
    if not isinstance(domain, str):
        return ''
    return domain.strip()


@analyzer_bp.route('/api/classify', methods=['POST'])
def classify():
    """Classify one text or a batch of texts"""
    try:
        data = _request_data()
        if data is None:
            return _invalid_body()

        url = data.get('url') or None
        if url is not None and not isinstance(url, str):
            return jsonify({
                'success': False,
                'error': 'url must be a string'
            }), 400

        if 'texts' in data:
            texts = data.get('texts')
            if not isinstance(texts, list) or not all(isinstance(text, str) for text in texts):
                return jsonify({
                    'success': False,
                    'error': 'texts must be a list of strings'
                }), 400

            results = news_analyzer.analyze_text_array(texts, url)
            return jsonify({
                'success': True,
                'data': {
                    'results': [result.to_dict() for result in results],
                    'count': len(results)
                }
            })

        text = data.get('text', '')
        if not isinstance(text, str) or not text.strip():
            return jsonify({
                'success': False,
                'error': 'No text provided'
            }), 400

        result = news_analyzer.analyze_text(text, url)
        return jsonify({
            'success': True,
            'data': result.to_dict()
        })

    except Exception as e:
        logger.error(f"Error classifying text: {e}")
        return jsonify({
            'success': False,
            'error': f'Classification failed: {str(e)}'
        }), 500


@analyzer_bp.route('/api/check-domain', methods=['POST'])
def check_domain():
    """Check whether a domain is a news site, answering within the safety timeout"""
    data = _request_data()
    if data is None:
        return _invalid_body()

    domain = _request_domain(data)
    if not domain:
        return jsonify({
            'success': False,
            'error': 'No domain provided'
        }), 400

    future = domain_executor.submit(site_checker.check, domain)
    try:
        result = future.result(timeout=domain_check_timeout)
    except FutureTimeoutError:
        logger.warning(f"Domain check for {domain} timed out")
        return jsonify({
            'is_news_site': False,
            'domain': domain,
            'error': 'Safety timeout'
        })
    except Exception as e:
        logger.error(f"Error checking domain {domain}: {e}")
        return jsonify({
            'is_news_site': False,
            'domain': domain,
            'error': str(e)
        }), 500

    return jsonify({
        'is_news_site': result['is_news_site'],
        'domain': domain,
        'site_name': result['site_name'],
        'source': result['source']
    })


@analyzer_bp.route('/api/news-sites', methods=['GET'])
def list_news_sites():
    return jsonify({
        'success': True,
        'custom_sites': list(site_checker.custom_sites)
    })


@analyzer_bp.route('/api/news-sites', methods=['POST'])
def add_news_site():
    """Add a site to the custom news site list"""
    data = _request_data()
    if data is None:
        return _invalid_body()

    domain = _request_domain(data)
    if not domain:
        return jsonify({
            'success': False,
            'error': 'No domain provided'
        }), 400

    try:
        custom_sites = site_checker.add_site(domain)
    except ValueError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400

    return jsonify({
        'success': True,
        'custom_sites': custom_sites
    })


@analyzer_bp.route('/api/news-sites', methods=['DELETE'])
def remove_news_site():
    """Remove a site from the custom news site list"""
    data = _request_data()
    if data is None:
        return _invalid_body()

    domain = _request_domain(data)
    if not domain:
        return jsonify({
            'success': False,
            'error': 'No domain provided'
        }), 400

    try:
        custom_sites = site_checker.remove_site(domain)
    except ValueError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400

    return jsonify({
        'success': True,
        'custom_sites': custom_sites
    })


@analyzer_bp.route('/api/stats', methods=['GET'])
def stats():
    """Analysis statistics and the most recent analyses"""
    try:
        recent = request.args.get('recent', 3, type=int)
        return jsonify({
            'success': True,
            'data': news_analyzer.get_stats(recent=max(0, recent))
        })
    except Exception as e:
        logger.error(f"Error getting stats: {e}")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@analyzer_bp.route('/api/tokenize', methods=['POST'])
def tokenize():
    """Show how a model's tokenizer encodes a text"""
    data = _request_data()
    if data is None:
        return _invalid_body()

    text = data.get('text', '')
    model_name = data.get('model', 'clickbait')
    if not isinstance(model_name, str):
        return jsonify({
            'success': False,
            'error': 'model must be a string'
        }), 400

    if not isinstance(text, str) or not text.strip():
        return jsonify({
            'success': False,
            'error': 'No text provided'
        }), 400

    try:
        report = news_analyzer.tokenize(text, model_name)
    except LookupError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400
    except Exception as e:
        logger.error(f"Error tokenizing text: {e}")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500

    return jsonify({
        'success': True,
        'model': model_name,
        'data': report
    })


@analyzer_bp.route('/api/status', methods=['GET'])
def status():
    """Loaded tokenizers, models and runtime backend"""
    return jsonify({
        'success': True,
        'data': news_analyzer.get_status()
    })
