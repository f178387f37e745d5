"""
Bots module - the opponent's decision-making.

Provides:
- ComboEvaluator: Expected-value scoring of combo rows
- OpponentPolicy: Interface for the opponent's spin/respin/row choice
- GreedyRespinPolicy: The stock single-respin-trial opponent
- FirstRowPolicy: Deterministic baseline
"""

from .evaluator import ComboEvaluator, EvaluationWeights
from .policy import OpponentPolicy, SpinDecision, GreedyRespinPolicy, FirstRowPolicy

__all__ = [
    "ComboEvaluator",
    "EvaluationWeights",
    "OpponentPolicy",
    "SpinDecision",
    "GreedyRespinPolicy",
    "FirstRowPolicy",
]
