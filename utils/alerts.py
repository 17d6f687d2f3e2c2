"""Remote forwarding of detected threats to an alert server."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Optional

import config
from utils.wifi.models import DetectedThreat

logger = logging.getLogger('airwatch.alerts')

ALERT_PATH = '/threats/alert'


class ThreatAlertForwarder:
    """POSTs each threat as JSON to `{server_url}/threats/alert`."""

    def __init__(
        self,
        server_url: str,
        auth_token: str = '',
        timeout: Optional[float] = None,
    ) -> None:
        self.server_url = server_url.rstrip('/')
        self.auth_token = auth_token or ''
        if timeout is None:
            timeout = getattr(config, 'ALERT_WEBHOOK_TIMEOUT', 5.0)
        self.timeout = timeout
        self.sent_count = 0
        self.failed_count = 0

    @property
    def url(self) -> str:
        return f"{self.server_url}{ALERT_PATH}"

    def send(self, threat: DetectedThreat) -> bool:
        """Send one threat. Returns False on any failure, never raises."""
        headers = {
            'Content-Type': 'application/json',
            'User-Agent': 'Airwatch-Alert',
        }
        if self.auth_token:
            headers['Authorization'] = f"Bearer {self.auth_token}"

        req = urllib.request.Request(
            self.url,
            data=json.dumps(threat.to_dict()).encode('utf-8'),
            headers=headers,
            method='POST',
        )

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                status = getattr(response, 'status', 200)
        except urllib.error.HTTPError as e:
            self.failed_count += 1
            logger.debug(f"Failed to send threat alert: HTTP {e.code}")
            return False
        except (urllib.error.URLError, OSError, ValueError) as e:
            self.failed_count += 1
            logger.debug(f"Error sending threat alert to server: {e}")
            return False

        if 200 <= status < 300:
            self.sent_count += 1
            logger.debug(f"Threat alert sent: {threat.threat_type}")
            return True

        self.failed_count += 1
        logger.debug(f"Failed to send threat alert: HTTP {status}")
        return False

    def to_dict(self) -> dict:
        return {
            'url': self.url,
            'sent': self.sent_count,
            'failed': self.failed_count,
        }


def get_default_forwarder() -> Optional[ThreatAlertForwarder]:
    """Forwarder from configuration, or None when no URL is configured."""
    url = getattr(config, 'ALERT_WEBHOOK_URL', '')
    if not url:
        return None
    return ThreatAlertForwarder(url, getattr(config, 'ALERT_WEBHOOK_TOKEN', ''))
