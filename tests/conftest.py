from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from graphcalc.expression_engine import compile_cached  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_compile_cache():
    """Keep cached evaluators from leaking between tests."""
    compile_cached.cache_clear()
    yield
    compile_cached.cache_clear()
