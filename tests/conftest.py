# tests/conftest.py
"""Shared test fixtures.

Fixtures:
- asserts_root: empty ``asserts`` directory under tmp_path
- isolated environment: DBTEST_* variables removed for every test
- shared loader reset before and after every test

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from dbtest.asserts.loader import reset_loader

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_dbtest_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's DBTEST_* variables out of settings loading."""
    for name in list(os.environ):
        if name.startswith("DBTEST_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def _reset_shared_loader() -> Iterator[None]:
    """Every test starts and ends without a process-wide loader."""
    reset_loader()
    yield
    reset_loader()


@pytest.fixture
def asserts_root(tmp_path: Path) -> Path:
    """An empty asserts directory inside a resources tree."""
    root = tmp_path / "resources" / "asserts"
    root.mkdir(parents=True)
    return root
