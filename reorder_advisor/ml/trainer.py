"""
One-time classifier training with a single-flight guarantee.

``LazyClassifier`` owns the process's reorder model. It is created by the
caller (CLI, service, test) and passed to every ``ReorderEvaluator``; there is
no module-level model.

Lifecycle
---------
1. Constructed untrained. Nothing happens until the first ``get()`` /
   ``train_once()``.
2. The first caller creates an ``asyncio.Task`` running the training function
   in a worker thread and stores it *before* awaiting, so callers arriving
   while training is in flight await the same task.
3. On success the fitted classifier is held for the lifetime of the handle.
4. On failure (training error or caller timeout) the handle is poisoned:
   every later call raises the same ``InitializationFailure``. There is no
   retry; a new process (or a new handle) is required.

``train_timeout_seconds`` bounds how long callers wait, not how long training
runs. A worker thread cannot be interrupted, so after a timeout the training
call still runs to completion in the background, and ``asyncio.run()`` waits
for it while shutting down the default executor. The CLI therefore still
exits only once training has returned.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from reorder_advisor.config import ClassifierConfig
from reorder_advisor.ml.classifier import ReorderClassifier
from reorder_advisor.ml.features import BOOTSTRAP_FEATURES, BOOTSTRAP_LABELS

logger = logging.getLogger(__name__)


class InitializationFailure(RuntimeError):
    """Raised when the reorder classifier could not be trained.

    Attributes:
        reason: Short description of the underlying failure.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(
            f"Reorder classifier initialization failed: {reason}  "
            "No reorder decisions can be made until the process restarts."
        )


def train_bootstrap_classifier(config: ClassifierConfig) -> ReorderClassifier:
    """Fit a ``ReorderClassifier`` on the fixed bootstrap dataset.

    Blocking; ``LazyClassifier`` runs it in a worker thread.
    """
    classifier = ReorderClassifier(
        hidden_units=config.hidden_units,
        epochs=config.epochs,
        learning_rate=config.learning_rate,
        seed=config.seed,
        threshold=config.decision_threshold,
    )
    logger.info(
        "Training reorder classifier  hidden=%d  epochs=%d  lr=%s  seed=%d",
        config.hidden_units, config.epochs, config.learning_rate, config.seed,
    )
    metrics = classifier.fit(list(BOOTSTRAP_FEATURES), list(BOOTSTRAP_LABELS))
    logger.info(
        "Reorder classifier trained  loss=%.4f  train_acc=%.2f",
        metrics["final_loss"], metrics["train_accuracy"],
    )
    return classifier


class LazyClassifier:
    """Lazily trained, train-once handle around a ``ReorderClassifier``.

    Args:
        config:   Classifier section of ``AppConfig``.
        train_fn: Blocking callable returning a fitted classifier. Defaults to
            ``train_bootstrap_classifier``; tests inject a fake.

    Attributes:
        training_runs: Number of times ``train_fn`` has been invoked.
    """

    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        train_fn: Optional[Callable[[ClassifierConfig], ReorderClassifier]] = None,
    ) -> None:
        self.config = config or ClassifierConfig()
        self._train_fn = train_fn or train_bootstrap_classifier
        self._task: Optional[asyncio.Task] = None
        self._classifier: Optional[ReorderClassifier] = None
        self._failure: Optional[InitializationFailure] = None
        self.training_runs = 0

    @property
    def is_ready(self) -> bool:
        return self._classifier is not None

    @property
    def failure(self) -> Optional[InitializationFailure]:
        return self._failure

    async def train_once(self) -> None:
        """Ensure the classifier is trained. Idempotent and single-flight."""
        await self.get()

    async def get(self) -> ReorderClassifier:
        """Return the trained classifier, training it first if needed.

        Raises:
            InitializationFailure: Training failed now or on an earlier call,
                or ``train_timeout_seconds`` expired.
        """
        if self._classifier is not None:
            return self._classifier
        if self._failure is not None:
            raise self._failure

        if self._task is None:
            self._task = asyncio.ensure_future(self._train())
            self._task.add_done_callback(self._collect_outcome)

        timeout = self.config.train_timeout_seconds
        try:
            if timeout is None:
                return await asyncio.shield(self._task)
            return await asyncio.wait_for(asyncio.shield(self._task), timeout)
        except asyncio.TimeoutError:
            self._poison(InitializationFailure(f"training exceeded {timeout}s timeout"))
            raise self._failure from None

    async def _train(self) -> ReorderClassifier:
        self.training_runs += 1
        try:
            classifier = await asyncio.to_thread(self._train_fn, self.config)
        except Exception as exc:
            logger.error("Reorder classifier training FAILED: %s", exc)
            self._poison(InitializationFailure(f"{type(exc).__name__}: {exc}"))
            raise self._failure from exc

        if not classifier.is_fitted:
            self._poison(InitializationFailure("training returned an unfitted classifier"))
            raise self._failure

        if self._failure is None:
            self._classifier = classifier
        return classifier

    def _collect_outcome(self, task: asyncio.Task) -> None:
        # Training may outlive a timed-out caller; retrieve its result here.
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None and self._failure is not exc:
            logger.debug("Training finished after the handle was poisoned: %s", exc)

    def _poison(self, failure: InitializationFailure) -> None:
        if self._failure is None:
            self._failure = failure
