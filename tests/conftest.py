from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))
for extra in (ROOT, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fakes import FakeClock  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """CLI runs attach file handlers; drop them so tmp dirs can vanish."""

    yield
    logger = logging.getLogger("lingo_drill")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch) -> Path:
    """Point the workspace at tmp and hide real provider credentials."""

    home = tmp_path / "lingo-home"
    monkeypatch.setenv("LINGO_DRILL_DATA_HOME", str(home))
    monkeypatch.delenv("LINGO_DRILL_CONFIG", raising=False)
    monkeypatch.delenv("ELEVENLABS_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    return home
