"""
ML layer — the reorder classifier.

Modules
-------
features   : FEATURE_COLS, FeatureVector, bootstrap dataset, extract_features().
classifier : ReorderClassifier (torch) — fit, predict_proba, decision threshold.
trainer    : LazyClassifier — train-once, single-flight handle;
             InitializationFailure.
"""
