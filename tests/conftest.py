"""Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and ensures proper test environment setup.
"""

import sys
from pathlib import Path

import pytest

# Ensure project root is in PYTHONPATH for imports to work
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from tests.doubles import FakeTools, Recorder  # noqa: E402


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Temporary workspace exposed through AGENT_WORKSPACE_PATH."""
    root = tmp_path / "workspace"
    root.mkdir()
    monkeypatch.setenv("AGENT_WORKSPACE_PATH", str(root))
    return root


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def fake_tools():
    return FakeTools()
