"""Shared test fixtures for plugspec.

Provides reusable fixtures for loading spec fixtures, creating isolated
config environments, and managing output state. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from plugspec.enrichment import enrich_spec
from plugspec.models import Specification
from plugspec.output import reset_output
from plugspec.parser import parse_spec


FIXTURES_DIR = Path(__file__).parent / "fixtures"

PACKAGE_ROOT = "github.com/acme/plugins/slack"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use. The package logger is reset for the same
    reason, since its handler writes to the stderr of the test that
    configured it.
    """
    yield
    reset_output()
    package_logger = logging.getLogger("plugspec")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


# ---------------------------------------------------------------------------
# Raw spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def slack_spec_path() -> Path:
    """Path to the full-featured Slack plugin spec fixture."""
    return FIXTURES_DIR / "slack.yaml"


@pytest.fixture
def slack_spec_bytes(slack_spec_path: Path) -> bytes:
    """Raw bytes of the Slack plugin spec."""
    return slack_spec_path.read_bytes()


@pytest.fixture
def simple_types_bytes() -> bytes:
    """Raw bytes of a spec whose first type references a later one."""
    return (FIXTURES_DIR / "simple_types.yaml").read_bytes()


# ---------------------------------------------------------------------------
# Parsed and enriched spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def slack_spec(slack_spec_bytes: bytes) -> Specification:
    """Parsed, not yet enriched, Slack spec."""
    return parse_spec(slack_spec_bytes, PACKAGE_ROOT)


@pytest.fixture
def enriched_slack(slack_spec: Specification) -> Specification:
    """Enriched Slack spec, ready for generation."""
    return enrich_spec(slack_spec)


@pytest.fixture
def enriched_simple_types(simple_types_bytes: bytes) -> Specification:
    """Enriched ctx_channel / thing spec."""
    return enrich_spec(parse_spec(simple_types_bytes, "example.com/simple"))


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears the PLUGSPEC_*
    and GOPATH environment variables and changes the working directory
    to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("plugspec.config._is_xdg_platform", lambda: True)

    for var in ["PLUGSPEC_WORKSPACE", "PLUGSPEC_SKIP_TOOLCHAIN", "GOPATH"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path
