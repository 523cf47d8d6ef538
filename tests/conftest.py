"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest
from hypothesis import HealthCheck, settings

from scriptboard.config import ScriptBoardSettings, reset_settings, set_settings

SAMPLE_SCRIPT = """\
---
cssclasses: [fountain]
---

# The Heist

FADE IN:

## Act One

EXT. BANK - NIGHT
%%summary: The crew cases the bank.%%
%%color: red%%

Rain hammers the empty street.

@JOHN
(whispering)
We go at midnight.

MARY: Not without the keys.

CUT TO:

INT. VAULT - CONTINUOUS

The door swings open. Gold bars glint in the torchlight.

## Act Two

.THE GETAWAY
%%note: needs a chase%%

Tires squeal as the van peels away from the curb.
"""

# Settings isolation is autouse and function scoped; it holds no per-example state
settings.register_profile(
    "scriptboard", suppress_health_check=[HealthCheck.function_scoped_fixture]
)
settings.load_profile("scriptboard")


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test against default settings with no SCRIPTBOARD_ overrides."""
    for key in list(os.environ):
        if key.startswith("SCRIPTBOARD_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    set_settings(ScriptBoardSettings(_env_file=None))
    yield
    reset_settings()


@pytest.fixture
def sample_text() -> str:
    """A small script exercising sections, scenes, tags and cues."""
    return SAMPLE_SCRIPT


@pytest.fixture
def script_file(tmp_path: Path) -> Path:
    """The sample script written to a temporary file."""
    path = tmp_path / "heist.md"
    path.write_text(SAMPLE_SCRIPT, encoding="utf-8")
    return path
