"""Shared fixtures for airwatch tests."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from airwatch import create_app
from utils.wifi import NetshScanner, ThreatMonitor


@pytest.fixture
def now():
    """Fixed pass timestamp."""
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def scanner():
    """Scanner double returning an empty scan."""
    mock_scanner = MagicMock(spec=NetshScanner)
    mock_scanner.scan.return_value = []
    return mock_scanner


@pytest.fixture
def monitor(scanner):
    monitor = ThreatMonitor(scanner=scanner)
    yield monitor
    monitor.stop()


@pytest.fixture
def app(monitor):
    """Create application for testing."""
    app = create_app(monitor=monitor)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
