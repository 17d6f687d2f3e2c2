"""
WiFi data models for scan records and detected threats.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .constants import (
    HIDDEN_SSID_PLACEHOLDER,
    SCOPE_HIDDEN,
    SCOPE_MULTIPLE,
    SCOPE_UNKNOWN,
)


def parse_signal(value: Optional[str]) -> int:
    """Parse a signal string like '87%' into an integer, 0 if unparsable."""
    if not value:
        return 0
    text = value.strip().rstrip('%').strip()
    try:
        return int(text)
    except ValueError:
        return 0


def normalize_bssid(bssid: Optional[str]) -> str:
    """Canonical BSSID form used for every key and comparison."""
    return (bssid or '').strip().lower()


def as_utc(timestamp: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp


@dataclass
class NetworkRecord:
    """One access point observed in one scan."""

    ssid: str
    bssid: str
    authentication: str = ''
    encryption: str = ''
    signal: str = ''

    # Filled in by the annotation pass
    risk: str = ''
    is_evil_twin: bool = False

    @property
    def signal_percent(self) -> int:
        """Signal strength as an integer percentage."""
        return parse_signal(self.signal)

    @property
    def normalized_bssid(self) -> str:
        return normalize_bssid(self.bssid)

    @property
    def is_hidden(self) -> bool:
        """Check if the SSID is empty or the hidden placeholder."""
        return not self.ssid.strip() or self.ssid == HIDDEN_SSID_PLACEHOLDER

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'ssid': self.ssid,
            'bssid': self.bssid,
            'authentication': self.authentication,
            'encryption': self.encryption,
            'signal': self.signal,
            'risk': self.risk,
            'is_evil_twin': self.is_evil_twin,
        }


class ThreatScope(Enum):
    """What a detected threat points at."""
    NETWORK = 'network'        # One concrete SSID/BSSID
    AGGREGATE = 'aggregate'    # Spans many networks
    HIDDEN = 'hidden'          # Spans many hidden networks
    UNKNOWN = 'unknown'        # Identity not available


@dataclass(frozen=True)
class DetectedThreat:
    """A threat produced by one detection pass."""

    threat_type: str
    severity: str
    details: str
    timestamp: datetime
    scope: ThreatScope = ThreatScope.NETWORK
    ssid: Optional[str] = None
    bssid: Optional[str] = None

    @property
    def network_ssid(self) -> str:
        if self.scope is ThreatScope.AGGREGATE:
            return SCOPE_MULTIPLE
        if self.scope is ThreatScope.HIDDEN:
            return SCOPE_HIDDEN
        if self.scope is ThreatScope.UNKNOWN or self.ssid is None:
            return SCOPE_UNKNOWN
        return self.ssid

    @property
    def network_bssid(self) -> str:
        if self.scope in (ThreatScope.AGGREGATE, ThreatScope.HIDDEN):
            return SCOPE_MULTIPLE
        if self.scope is ThreatScope.UNKNOWN or self.bssid is None:
            return SCOPE_UNKNOWN
        return self.bssid

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'threat_type': self.threat_type,
            'severity': self.severity,
            'network_ssid': self.network_ssid,
            'network_bssid': self.network_bssid,
            'scope': self.scope.value,
            'details': self.details,
            'timestamp': self.timestamp.isoformat(),
        }
