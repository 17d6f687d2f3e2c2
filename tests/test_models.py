"""Tests for WiFi data models."""

from datetime import datetime, timezone

import pytest

from utils.wifi.models import (
    DetectedThreat,
    NetworkRecord,
    ThreatScope,
    normalize_bssid,
    parse_signal,
)


class TestParseSignal:
    """Tests for parse_signal."""

    @pytest.mark.parametrize('value,expected', [
        ('87%', 87),
        (' 45 % ', 45),
        ('100', 100),
        ('', 0),
        (None, 0),
        ('strong', 0),
    ])
    def test_values(self, value, expected):
        assert parse_signal(value) == expected


class TestNetworkRecord:
    """Tests for NetworkRecord."""

    def test_normalized_bssid(self):
        network = NetworkRecord(ssid='Home', bssid=' AA:BB:CC:DD:EE:FF ')
        assert network.normalized_bssid == 'aa:bb:cc:dd:ee:ff'
        assert normalize_bssid(None) == ''

    @pytest.mark.parametrize('ssid,hidden', [
        ('', True),
        ('   ', True),
        ('-', True),
        ('Home', False),
        ('-Home', False),
    ])
    def test_is_hidden(self, ssid, hidden):
        assert NetworkRecord(ssid=ssid, bssid='aa:bb:cc:dd:ee:ff').is_hidden is hidden

    def test_to_dict(self):
        network = NetworkRecord(ssid='Home', bssid='aa:bb:cc:dd:ee:ff', signal='50%', risk='L')
        data = network.to_dict()

        assert data['ssid'] == 'Home'
        assert data['signal'] == '50%'
        assert data['risk'] == 'L'
        assert data['is_evil_twin'] is False


class TestDetectedThreat:
    """Tests for DetectedThreat scope rendering."""

    timestamp = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def _threat(self, **kwargs):
        return DetectedThreat(
            threat_type='flood_attack',
            severity='High',
            details='test',
            timestamp=self.timestamp,
            **kwargs,
        )

    def test_network_scope(self):
        threat = self._threat(ssid='Home', bssid='aa:bb:cc:dd:ee:ff')
        assert threat.network_ssid == 'Home'
        assert threat.network_bssid == 'aa:bb:cc:dd:ee:ff'

    def test_aggregate_scope(self):
        threat = self._threat(scope=ThreatScope.AGGREGATE)
        assert threat.network_ssid == 'Multiple'
        assert threat.network_bssid == 'Multiple'

    def test_hidden_scope(self):
        threat = self._threat(scope=ThreatScope.HIDDEN)
        assert threat.network_ssid == 'Hidden'
        assert threat.network_bssid == 'Multiple'

    def test_unknown_scope(self):
        threat = self._threat(scope=ThreatScope.UNKNOWN)
        assert threat.network_ssid == 'Unknown'
        assert threat.network_bssid == 'Unknown'

    def test_frozen(self):
        threat = self._threat()
        with pytest.raises(AttributeError):
            threat.severity = 'Medium'

    def test_to_dict(self):
        data = self._threat(scope=ThreatScope.AGGREGATE).to_dict()

        assert data['threat_type'] == 'flood_attack'
        assert data['scope'] == 'aggregate'
        assert data['network_ssid'] == 'Multiple'
        assert data['timestamp'] == '2024-05-01T12:00:00+00:00'
