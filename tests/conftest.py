"""
Shared pytest fixtures for the reorder advisor test suite.

Provides:
  - ``RuleClassifier``: a deterministic stand-in for the torch model, so
    evaluator and pipeline tests do not depend on what four training rows
    happen to teach a network.
  - ``rule_lazy_classifier``: a ``LazyClassifier`` wired to ``RuleClassifier``
    with a call counter on its training function.
"""

from __future__ import annotations

from typing import Sequence

import pytest

from reorder_advisor.config import ClassifierConfig
from reorder_advisor.ml.classifier import ReorderClassifier
from reorder_advisor.ml.features import FeatureVector
from reorder_advisor.ml.trainer import LazyClassifier


# ── Stand-in classifier ───────────────────────────────────────────────────────

class RuleClassifier(ReorderClassifier):
    """Reorders when inventory covers fewer than two weeks of sales."""

    def __init__(self, threshold: float = 0.5) -> None:
        super().__init__(threshold=threshold)
        self._net = object()  # marks the instance as fitted

    def predict_proba_batch(self, vectors: Sequence[FeatureVector]) -> list[float]:
        return [
            0.9 if v.current_inventory < v.avg_sales_per_week * 2 else 0.1
            for v in vectors
        ]


class CountingTrainer:
    """Training function that records how often it is called."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, config: ClassifierConfig) -> ReorderClassifier:
        self.calls += 1
        return RuleClassifier(threshold=config.decision_threshold)


@pytest.fixture
def counting_trainer() -> CountingTrainer:
    return CountingTrainer()


@pytest.fixture
def rule_lazy_classifier(counting_trainer: CountingTrainer) -> LazyClassifier:
    """A ``LazyClassifier`` that 'trains' a ``RuleClassifier``."""
    return LazyClassifier(ClassifierConfig(), train_fn=counting_trainer)


@pytest.fixture
def fast_classifier_config() -> ClassifierConfig:
    """Minimum-size real torch training settings."""
    return ClassifierConfig(hidden_units=8, epochs=100, learning_rate=0.01, seed=7)
