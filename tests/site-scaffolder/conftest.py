"""Shared fixtures for the scaffold-run tests."""

import os
import sys
import tempfile

import pytest

# Ensure tests/site-scaffolder/ is on sys.path so test files can import the
# fakes unambiguously.
sys.path.insert(0, os.path.dirname(__file__))

from fake_command_runner import FakeCommandRunner  # noqa: E402


@pytest.fixture
def fake_runner(tmp_path):
    return FakeCommandRunner(cwd=str(tmp_path / "site"))


@pytest.fixture(autouse=True)
def scratch_root(tmp_path, monkeypatch):
    """Keep scratch directories created with tempfile.mkdtemp under tmp_path."""
    root = tmp_path / "scratch"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


def pytest_collection_modifyitems(items):
    for item in items:
        if "site-scaffolder" in str(item.fspath) and item.get_closest_marker("integration") is None:
            item.add_marker(pytest.mark.unit)
