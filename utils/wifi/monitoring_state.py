"""
Cross-scan monitoring state.

One MonitoringState lives for one monitoring session. It is only mutated by
a detection pass (and by connection-failure recording), and callers must
serialize access to it.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from .constants import (
    CONNECTION_FAILURE_RETENTION,
    MAX_SIGNAL_SAMPLES,
    NETWORK_STALE_TIMEOUT,
)
from .models import NetworkRecord, as_utc, normalize_bssid


def _signal_queue() -> deque:
    return deque(maxlen=MAX_SIGNAL_SAMPLES)


@dataclass
class NetworkHistory:
    """Rolling record of one BSSID across scans."""

    ssid: str
    bssid: str
    signal_strength: int
    first_seen: datetime
    last_seen: datetime
    appearance_count: int = 0
    previous_signals: deque = field(default_factory=_signal_queue)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'ssid': self.ssid,
            'bssid': self.bssid,
            'signal_strength': self.signal_strength,
            'first_seen': self.first_seen.isoformat(),
            'last_seen': self.last_seen.isoformat(),
            'appearance_count': self.appearance_count,
            'previous_signals': list(self.previous_signals),
        }


@dataclass
class ConnectionFailure:
    """A failed connection attempt reported by the connection logic."""

    network_ssid: str
    network_bssid: str
    timestamp: datetime
    reason: str = ''

    def to_dict(self) -> dict:
        return {
            'network_ssid': self.network_ssid,
            'network_bssid': self.network_bssid,
            'timestamp': self.timestamp.isoformat(),
            'reason': self.reason,
        }


@dataclass
class MonitoringState:
    """Everything a detection pass needs to remember between scans."""

    previous_networks: list[NetworkRecord] = field(default_factory=list)
    network_history: dict[str, NetworkHistory] = field(default_factory=dict)
    connection_failures: list[ConnectionFailure] = field(default_factory=list)
    signal_baselines: dict[str, deque] = field(default_factory=dict)
    scan_count: int = 0
    last_scan_time: Optional[datetime] = None

    def record_connection_failure(
        self,
        network_ssid: str,
        network_bssid: str,
        reason: str = '',
        timestamp: Optional[datetime] = None,
    ) -> ConnectionFailure:
        """Append a connection failure event."""
        failure = ConnectionFailure(
            network_ssid=network_ssid or '',
            network_bssid=normalize_bssid(network_bssid),
            timestamp=as_utc(timestamp) if timestamp else datetime.now(timezone.utc),
            reason=reason or '',
        )
        self.connection_failures.append(failure)
        return failure

    def purge_connection_failures(self, now: datetime) -> None:
        """Keep only failures from the last minute."""
        cutoff = as_utc(now) - timedelta(seconds=CONNECTION_FAILURE_RETENTION)
        self.connection_failures = [
            f for f in self.connection_failures if f.timestamp > cutoff
        ]

    def reset(self) -> None:
        """Forget everything, as at the start of a new session."""
        self.previous_networks = []
        self.network_history.clear()
        self.connection_failures = []
        self.signal_baselines.clear()
        self.scan_count = 0
        self.last_scan_time = None

    def to_summary_dict(self) -> dict:
        """Compact summary for status endpoints."""
        return {
            'scan_count': self.scan_count,
            'last_scan_time': self.last_scan_time.isoformat() if self.last_scan_time else None,
            'previous_network_count': len(self.previous_networks),
            'tracked_networks': len(self.network_history),
            'baselines': len(self.signal_baselines),
            'pending_failures': len(self.connection_failures),
        }


def update_network_history(
    networks: list[NetworkRecord],
    state: MonitoringState,
    now: datetime,
) -> None:
    """
    Fold one scan into the per-BSSID history and signal baselines.

    Entries not seen for NETWORK_STALE_TIMEOUT are dropped afterwards.
    Signal baselines are never time-evicted.
    """
    now = as_utc(now)
    for network in networks:
        bssid = normalize_bssid(network.bssid)
        signal_strength = network.signal_percent

        history = state.network_history.get(bssid)
        if history is None:
            history = NetworkHistory(
                ssid=network.ssid,
                bssid=bssid,
                signal_strength=signal_strength,
                first_seen=now,
                last_seen=now,
            )
            state.network_history[bssid] = history

        history.last_seen = now
        history.appearance_count += 1
        history.signal_strength = signal_strength
        history.ssid = network.ssid
        history.previous_signals.append(signal_strength)

        baseline = state.signal_baselines.get(bssid)
        if baseline is None:
            baseline = _signal_queue()
            state.signal_baselines[bssid] = baseline
        baseline.append(signal_strength)

    cutoff = now - timedelta(seconds=NETWORK_STALE_TIMEOUT)
    stale = [
        bssid for bssid, history in state.network_history.items()
        if history.last_seen <= cutoff
    ]
    for bssid in stale:
        del state.network_history[bssid]
