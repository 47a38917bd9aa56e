"""
Feed-forward reorder classifier.

Architecture
------------
    Linear(3 → hidden) → ReLU → Linear(hidden → 1) → Sigmoid

Trained full-batch with binary cross-entropy and Adam on the fixed bootstrap
dataset in ``reorder_advisor.ml.features``. Inputs are raw magnitudes
(units, units/week, days); see ``features.py`` for why there is no scaling.

Determinism
-----------
Weight initialization draws from torch's RNG inside ``torch.random.fork_rng``
seeded with ``seed``, so two classifiers fitted with the same seed produce the
same weights without disturbing the caller's global RNG state.

Decision rule
-------------
``needs_reorder = probability > threshold`` (strict). A probability of exactly
the threshold is "no reorder".
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Sequence

from reorder_advisor.ml.features import FEATURE_COLS, FeatureVector, build_feature_matrix

logger = logging.getLogger(__name__)


class ReorderClassifier:
    """Two-layer binary classifier over ``FeatureVector`` inputs.

    Attributes:
        MODEL_VERSION: Version string reported in training metrics.
        threshold: Probability cut-off for a positive decision.
    """

    MODEL_VERSION = "v1.0.0"

    def __init__(
        self,
        hidden_units: int = 8,
        epochs: int = 200,
        learning_rate: float = 0.01,
        seed: int = 42,
        threshold: float = 0.5,
    ) -> None:
        self.threshold = threshold
        self._hyperparams: dict[str, Any] = {
            "hidden_units":  hidden_units,
            "epochs":        epochs,
            "learning_rate": learning_rate,
            "seed":          seed,
        }
        self._net = None  # torch.nn.Sequential; None until fit()
        self._train_metrics: dict[str, float] = {}
        self._trained_at: str = ""

    # ── Properties ────────────────────────────────────────────────────────────

    @property
    def is_fitted(self) -> bool:
        """True after fit() has completed successfully."""
        return self._net is not None

    @property
    def train_metrics(self) -> dict[str, float]:
        """Final loss and training accuracy from the most recent fit()."""
        return dict(self._train_metrics)

    @property
    def trained_at(self) -> str:
        return self._trained_at

    # ── Training ──────────────────────────────────────────────────────────────

    def fit(
        self,
        features: Sequence[FeatureVector],
        labels: Sequence[int],
    ) -> dict[str, float]:
        """Train the network on labelled feature vectors.

        Args:
            features: Training inputs in ``FEATURE_COLS`` order.
            labels:   Binary labels (0/1), same length as ``features``.

        Returns:
            Dict with ``final_loss``, ``train_accuracy`` and ``n_train``.

        Raises:
            ValueError:         Empty input, length mismatch, or non-binary labels.
            FloatingPointError: The loss became NaN or infinite during training.
        """
        import numpy as np
        import torch
        from torch import nn, optim

        if not features:
            raise ValueError("ReorderClassifier.fit() needs at least one training row.")
        if len(features) != len(labels):
            raise ValueError(
                f"features and labels differ in length: {len(features)} != {len(labels)}."
            )
        if any(label not in (0, 1) for label in labels):
            raise ValueError(f"labels must be 0 or 1, got {sorted(set(labels))}.")

        X = torch.from_numpy(
            np.asarray(build_feature_matrix(list(features)), dtype=np.float32)
        )
        y = torch.from_numpy(np.asarray(labels, dtype=np.float32)).unsqueeze(1)

        hidden = self._hyperparams["hidden_units"]
        epochs = self._hyperparams["epochs"]

        with torch.random.fork_rng(devices=[]):
            torch.manual_seed(self._hyperparams["seed"])
            net = nn.Sequential(
                nn.Linear(len(FEATURE_COLS), hidden),
                nn.ReLU(),
                nn.Linear(hidden, 1),
                nn.Sigmoid(),
            )

        optimizer = optim.Adam(net.parameters(), lr=self._hyperparams["learning_rate"])
        criterion = nn.BCELoss()

        loss_value = float("nan")
        net.train()
        for epoch in range(epochs):
            optimizer.zero_grad()
            output = net(X)
            loss = criterion(output, y)
            loss.backward()
            optimizer.step()
            loss_value = loss.item()
            if not math.isfinite(loss_value):
                raise FloatingPointError(
                    f"Training diverged at epoch {epoch + 1}/{epochs}: loss={loss_value}."
                )

        net.eval()
        with torch.no_grad():
            probs = net(X).squeeze(1).tolist()
        correct = sum(
            1 for p, label in zip(probs, labels) if (p > self.threshold) == bool(label)
        )

        self._net = net
        self._trained_at = datetime.now(tz=timezone.utc).isoformat()
        self._train_metrics = {
            "final_loss":     loss_value,
            "train_accuracy": correct / len(labels),
            "n_train":        float(len(labels)),
        }
        return dict(self._train_metrics)

    # ── Inference ─────────────────────────────────────────────────────────────

    def predict_proba(self, vector: FeatureVector) -> float:
        """Return the reorder probability for a single feature vector.

        Raises:
            RuntimeError: If the classifier has not been fitted.
        """
        return self.predict_proba_batch([vector])[0]

    def predict_proba_batch(self, vectors: Sequence[FeatureVector]) -> list[float]:
        """Return reorder probabilities (each in [0, 1]) for many vectors."""
        if not self.is_fitted:
            raise RuntimeError("Cannot predict with an unfitted ReorderClassifier.")
        if not vectors:
            return []

        import numpy as np
        import torch

        X = torch.from_numpy(
            np.asarray(build_feature_matrix(list(vectors)), dtype=np.float32)
        )
        with torch.no_grad():
            preds = self._net(X).squeeze(1).tolist()
        return [min(1.0, max(0.0, float(p))) for p in preds]

    def needs_reorder(self, probability: float) -> bool:
        """Apply the strict decision threshold."""
        return probability > self.threshold
