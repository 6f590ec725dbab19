"""Pytest configuration helpers for test collection.

Ensure the project root is on sys.path so tests can import the package
without requiring PYTHONPATH to be set externally.
"""
import logging
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def backend():
    from oxistore.storage import MemoryStorage
    return MemoryStorage()


@pytest.fixture
def store(backend):
    from oxistore import OxiStorage
    return OxiStorage(backend)


@pytest.fixture(autouse=True)
def keep_test_logging(monkeypatch):
    # entry points reset root handlers; keep pytest's capture handlers in place
    monkeypatch.setattr('oxistore.main.configure_logging', lambda level=None: logging.getLogger('oxistore'))
    monkeypatch.setattr('oxistore.cli.configure_logging', lambda level=None: None)
