"""Pytest configuration shared by the suite.

Puts the workspace ``packages/`` dir on ``sys.path`` so ``statement_ingest``
imports without an install, and clears the package's environment variables
for every test so a developer's shell or ``.env`` can't change results.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
# Ensure `packages/` precedes the repo root on sys.path so local packages resolve first.
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]

_ENV_VARS = (
    "SI_STATEMENT_CONVENTION",
    "SI_CLASSIFIER_SAMPLE_ROWS",
    "STATEMENT_INGEST_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
