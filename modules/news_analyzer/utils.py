"""
News analyzer utility functions
Heuristic fallback scoring and analysis bookkeeping
"""

import re

from .results import PredictionResult, SOURCE_HEURISTIC

DIGIT_PATTERN = re.compile(r'\d')


def heuristic_score(text):
    """Deterministic suspicion score in [0.5, 0.95] from superficial text features"""
    text = text or ''
    text_length = len(text)
    word_count = len(text.split(' '))

    score = ((text_length * 13) ^ (word_count * 7)) % 100 / 100

    if '?' in text:
        score += 0.15
    if '!' in text:
        score += 0.2
    if DIGIT_PATTERN.search(text):
        score += 0.1

    return min(0.95, max(0.5, score))


def heuristic_prediction(text, spec, error=None):
    """Stand-in result labelled in the cautious direction for the given model"""
    return PredictionResult(
        spec.flag_label,
        heuristic_score(text),
        raw_probability=None,
        source=SOURCE_HEURISTIC,
        error=error
    )


def heuristic_predictions(text, specs, error=None):
    return {spec.name: heuristic_prediction(text, spec, error) for spec in specs}


def summarize_analysis(result, token_preview=None, limit=100):
    """Compact record of one analysis for the recent-analyses list"""
    text = result.text or ''
    return {
        'text': text[:limit] + ('...' if len(text) > limit else ''),
        'timestamp': result.timestamp,
        'tokens': token_preview or {},
        'source': result.source_info,
        'predictions': {name: prediction.to_dict() for name, prediction in result.predictions.items()}
    }


def empty_stats(specs):
    return {
        'total_analyzed': 0,
        'heuristic_results': 0,
        'flagged': {spec.name: 0 for spec in specs}
    }
