"""
News Analyzer Module
Fake news and clickbait classification of webpage text with a heuristic fallback
"""

from .analyzer import NewsAnalyzer
from .config import (
    AnalyzerConfig,
    ModelSpec,
    FAKE_NEWS_SPEC,
    CLICKBAIT_SPEC,
    DEFAULT_MODEL_SPECS
)
from .runtime import ModelRuntime, LoadedModel, ModelLoadError
from .results import PredictionResult, AnalysisResult, SOURCE_MODEL, SOURCE_HEURISTIC
from .utils import heuristic_score, heuristic_prediction

__all__ = [
    'NewsAnalyzer',
    'AnalyzerConfig',
    'ModelSpec',
    'FAKE_NEWS_SPEC',
    'CLICKBAIT_SPEC',
    'DEFAULT_MODEL_SPECS',
    'ModelRuntime',
    'LoadedModel',
    'ModelLoadError',
    'PredictionResult',
    'AnalysisResult',
    'SOURCE_MODEL',
    'SOURCE_HEURISTIC',
    'heuristic_score',
    'heuristic_prediction'
]
