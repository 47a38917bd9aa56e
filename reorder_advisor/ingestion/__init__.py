"""
Ingestion layer — catalog source client and record augmentation.

Submodules:
  catalog_client — HTTP / file / fixture catalog sources
  augment        — simulated stock & sales figures, catalog padding

Environment overrides (.env, gitignored):
  REORDER_ADVISOR_CATALOG_URL — products endpoint (default: dummyjson)
"""
