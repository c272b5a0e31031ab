"""
Result types returned by the news analyzer
"""

from datetime import datetime

SOURCE_MODEL = 'model'
SOURCE_HEURISTIC = 'heuristic'


class PredictionResult:
    """
    Label and confidence for one model on one text.

    ``source`` tells real model output apart from the heuristic stand-in used
    when the runtime is unavailable.
    """

    def __init__(self, label, score, raw_probability=None, source=SOURCE_MODEL, error=None):
        self.label = label
        self.score = float(score)
        self.raw_probability = raw_probability
        self.source = source
        self.error = error

    @classmethod
    def from_probability(cls, probability, positive_label, negative_label, threshold=0.5):
        probability = float(probability)
        if probability > threshold:
            return cls(positive_label, probability, raw_probability=probability)
        return cls(negative_label, 1 - probability, raw_probability=probability)

    @property
    def is_fallback(self):
        return self.source != SOURCE_MODEL

    def to_dict(self):
        result = {
            'label': self.label,
            'score': self.score,
            'raw_probability': self.raw_probability,
            'source': self.source,
            'is_fallback': self.is_fallback
        }
        if self.error:
            result['error'] = self.error
        return result

    def __repr__(self):
        return f"PredictionResult(label={self.label!r}, score={self.score:.3f}, source={self.source!r})"


class AnalysisResult:
    """All model predictions for one text"""

    def __init__(self, text, predictions, source_info=None):
        self.text = text
        self.predictions = predictions
        self.source_info = source_info
        self.timestamp = datetime.now().isoformat()

    def __getitem__(self, model_name):
        return self.predictions[model_name]

    @property
    def is_degraded(self):
        return any(prediction.is_fallback for prediction in self.predictions.values())

    def to_dict(self):
        result = {name: prediction.to_dict() for name, prediction in self.predictions.items()}
        result['is_degraded'] = self.is_degraded
        if self.source_info:
            result['source'] = self.source_info
        return result
