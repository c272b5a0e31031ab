"""
Routes package for the News Analyzer application
"""

from .analyzer_routes import analyzer_bp, init_news_analyzer

__all__ = ['analyzer_bp', 'init_news_analyzer']
