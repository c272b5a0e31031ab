from flask import Flask, jsonify
from datetime import datetime
import logging
import threading
import os

from modules.news_analyzer import NewsAnalyzer, AnalyzerConfig, ModelRuntime
from modules.news_sites import NewsSiteChecker
from routes.analyzer_routes import analyzer_bp, init_news_analyzer

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def create_app(config=None, analyzer=None, checker=None):
    """Build the Flask app with the analyzer and news site checker wired into the routes"""
    config = config or AnalyzerConfig.from_env()
    analyzer = analyzer or NewsAnalyzer(config, runtime=ModelRuntime())
    checker = checker or NewsSiteChecker(config.news_domains_file, config.custom_sites_file)

    app = Flask(__name__)
    app.config['NEWS_ANALYZER'] = analyzer
    app.config['NEWS_SITE_CHECKER'] = checker

    init_news_analyzer(analyzer, checker, config.domain_check_timeout)
    app.register_blueprint(analyzer_bp)

    @app.route('/health')
    def health_check():
        """Health check endpoint with model status"""
        try:
            status = analyzer.get_status()
            is_healthy = status['initialized'] and not status['use_fallback']

            return jsonify({
                'status': 'healthy' if is_healthy else 'degraded',
                'timestamp': datetime.now().isoformat(),
                'models': status['model_loaded'],
                'tokenizers': status['tokenizer_loaded'],
                'message': 'All systems operational' if is_healthy else 'Using heuristic analysis'
            })

        except Exception as e:
            return jsonify({
                'status': 'unhealthy',
                'timestamp': datetime.now().isoformat(),
                'error': str(e)
            }), 500

    return app


def initialize_models(analyzer):
    """Load tokenizers and models, printing the outcome for each model"""
    try:
        print("=== Initializing News Analyzer Models ===")
        print(f"Models directory: {analyzer.config.models_dir}")

        ready = analyzer.initialize(timeout=None)

        print("\n=== Initialization Complete ===")
        if ready:
            for name, loaded in analyzer.models.items():
                print(f"✓ {name} model ready (input shapes: {loaded.input_shapes})")
            print(f"✓ Runtime backend: {analyzer.runtime.backend}")
        else:
            print("⚠ Models not loaded yet - using heuristic analysis until a later attempt succeeds")

    except Exception as e:
        print(f"✗ Error initializing models: {str(e)}")
        print("The application will run with heuristic analysis only.")


app = create_app()


if __name__ == '__main__':
    # Initialize models in a separate thread to avoid blocking
    model_thread = threading.Thread(target=initialize_models, args=(app.config['NEWS_ANALYZER'],))
    model_thread.daemon = True
    model_thread.start()

    # Get port from environment variable (for deployment) or default to 5000
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_ENV') != 'production'

    app.run(host='0.0.0.0', port=port, debug=debug)
