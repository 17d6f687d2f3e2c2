"""Tests for remote threat alert forwarding."""

import json
import urllib.error
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from utils.alerts import ThreatAlertForwarder, get_default_forwarder
from utils.wifi.models import DetectedThreat


def _threat():
    return DetectedThreat(
        threat_type='blacklisted_network',
        severity='Critical',
        details='Blacklisted network detected: Evil (BSSID: aa:bb:cc:dd:ee:ff), avoid connecting',
        timestamp=datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc),
        ssid='Evil',
        bssid='aa:bb:cc:dd:ee:ff',
    )


def _response(status=200):
    response = MagicMock()
    response.status = status
    response.__enter__.return_value = response
    return response


class TestThreatAlertForwarder:
    """Tests for ThreatAlertForwarder."""

    def test_url(self):
        forwarder = ThreatAlertForwarder('https://alerts.example.com/')
        assert forwarder.url == 'https://alerts.example.com/threats/alert'

    def test_send_posts_threat(self):
        forwarder = ThreatAlertForwarder('https://alerts.example.com', 'secret', timeout=2)

        with patch('utils.alerts.urllib.request.urlopen', return_value=_response()) as mock_open:
            assert forwarder.send(_threat()) is True

        request, = mock_open.call_args.args
        assert request.full_url == 'https://alerts.example.com/threats/alert'
        assert request.get_method() == 'POST'
        assert request.get_header('Authorization') == 'Bearer secret'
        assert request.get_header('Content-type') == 'application/json'
        assert mock_open.call_args.kwargs['timeout'] == 2

        payload = json.loads(request.data.decode('utf-8'))
        assert payload['threat_type'] == 'blacklisted_network'
        assert payload['network_bssid'] == 'aa:bb:cc:dd:ee:ff'
        assert forwarder.sent_count == 1

    def test_no_token_no_auth_header(self):
        forwarder = ThreatAlertForwarder('https://alerts.example.com')

        with patch('utils.alerts.urllib.request.urlopen', return_value=_response()) as mock_open:
            forwarder.send(_threat())

        request, = mock_open.call_args.args
        assert request.get_header('Authorization') is None

    def test_http_error_returns_false(self):
        forwarder = ThreatAlertForwarder('https://alerts.example.com')
        error = urllib.error.HTTPError('https://alerts.example.com/threats/alert', 500, 'boom', {}, None)

        with patch('utils.alerts.urllib.request.urlopen', side_effect=error):
            assert forwarder.send(_threat()) is False

        assert forwarder.failed_count == 1

    def test_connection_error_returns_false(self):
        forwarder = ThreatAlertForwarder('https://alerts.example.com')

        with patch('utils.alerts.urllib.request.urlopen', side_effect=urllib.error.URLError('refused')):
            assert forwarder.send(_threat()) is False

    def test_non_2xx_status(self):
        forwarder = ThreatAlertForwarder('https://alerts.example.com')

        with patch('utils.alerts.urllib.request.urlopen', return_value=_response(302)):
            assert forwarder.send(_threat()) is False

        assert forwarder.to_dict()['failed'] == 1


class TestGetDefaultForwarder:
    """Tests for get_default_forwarder."""

    def test_disabled_without_url(self):
        with patch('utils.alerts.config') as mock_config:
            mock_config.ALERT_WEBHOOK_URL = ''
            assert get_default_forwarder() is None

    def test_built_from_config(self):
        with patch('utils.alerts.config') as mock_config:
            mock_config.ALERT_WEBHOOK_URL = 'https://alerts.example.com'
            mock_config.ALERT_WEBHOOK_TOKEN = 'token'
            mock_config.ALERT_WEBHOOK_TIMEOUT = 1.5
            forwarder = get_default_forwarder()

        assert forwarder.url == 'https://alerts.example.com/threats/alert'
        assert forwarder.auth_token == 'token'
        assert forwarder.timeout == 1.5
