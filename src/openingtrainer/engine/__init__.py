"""Engine evaluation: score models, evaluation cache and UCI adapter."""

from openingtrainer.engine.cache import EvaluationCache
from openingtrainer.engine.evaluator import CachedEvaluator, Evaluator
from openingtrainer.engine.models import EvaluatedPosition, Score
from openingtrainer.engine.uci import UciEvaluator

__all__ = [
    "CachedEvaluator",
    "EvaluatedPosition",
    "EvaluationCache",
    "Evaluator",
    "Score",
    "UciEvaluator",
]
