"""
Continuous threat monitoring.

ThreatMonitor is an explicit handle: the application creates one per
session and passes it to whatever needs it. It owns the MonitoringState
and holds its lock for the whole of every detection pass, so readers never
see half-applied state.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections import deque
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Generator, Iterable, Optional

import config

from .constants import (
    EVENT_QUEUE_SIZE,
    MAX_THREAT_HISTORY,
    MONITOR_MAX_INTERVAL,
    MONITOR_MIN_INTERVAL,
)
from .models import DetectedThreat, NetworkRecord, normalize_bssid
from .monitoring_state import ConnectionFailure, MonitoringState
from .scanner import NetshScanner, WiFiScanError
from .threat_detector import detect_threats

if TYPE_CHECKING:
    from utils.alerts import ThreatAlertForwarder

logger = logging.getLogger('airwatch.wifi.monitor')


def clamp_interval(seconds: Optional[float]) -> int:
    """Clamp a scan interval to the supported range."""
    if seconds is None:
        seconds = getattr(config, 'MONITOR_INTERVAL_SECONDS', 10)
    try:
        seconds = int(seconds)
    except (TypeError, ValueError):
        seconds = getattr(config, 'MONITOR_INTERVAL_SECONDS', 10)
    return max(MONITOR_MIN_INTERVAL, min(MONITOR_MAX_INTERVAL, seconds))


class ThreatMonitor:
    """
    Periodically scans and runs threat detection in a background thread.

    run_once() and process_scan() can also be driven directly, without
    starting the thread.
    """

    def __init__(
        self,
        scanner: Optional[NetshScanner] = None,
        state: Optional[MonitoringState] = None,
        on_threat: Optional[Callable[[DetectedThreat], None]] = None,
    ):
        """
        Initialize the monitor.

        Args:
            scanner: Adapter used for scans (defaults to NetshScanner).
            state: Session state (defaults to a fresh MonitoringState).
            on_threat: Optional callback for every reported threat.
        """
        self.scanner = scanner or NetshScanner()
        self.on_threat = on_threat

        self._state = state or MonitoringState()
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        # Configuration (set by start())
        self._interval = clamp_interval(None)
        self._enabled_types: set[str] = set()
        self._whitelist: set[str] = set(getattr(config, 'WHITELIST_BSSIDS', []) or [])
        self._blacklist: set[str] = set(getattr(config, 'BLACKLIST_BSSIDS', []) or [])
        self._forwarder: Optional['ThreatAlertForwarder'] = None

        # Output
        self._threats: deque[DetectedThreat] = deque(maxlen=MAX_THREAT_HISTORY)
        self._event_queue: queue.Queue = queue.Queue(maxsize=EVENT_QUEUE_SIZE)

        # Stats
        self._started_at: Optional[float] = None
        self._last_error: Optional[str] = None
        self._threats_reported = 0

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def interval(self) -> int:
        return self._interval

    @property
    def enabled_threat_types(self) -> set[str]:
        return set(self._enabled_types)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def configure(
        self,
        interval_seconds: Optional[float] = None,
        enabled_threat_types: Optional[Iterable[str]] = None,
        whitelist: Optional[Iterable[str]] = None,
        blacklist: Optional[Iterable[str]] = None,
        forwarder: Optional['ThreatAlertForwarder'] = None,
    ) -> None:
        """Update monitoring settings. Access lists are compared lowercased."""
        with self._lock:
            self._interval = clamp_interval(interval_seconds)
            self._enabled_types = {t for t in (enabled_threat_types or []) if t}
            if whitelist is not None:
                self._whitelist = {normalize_bssid(b) for b in whitelist if b}
            if blacklist is not None:
                self._blacklist = {normalize_bssid(b) for b in blacklist if b}
            self._forwarder = forwarder

    def start(
        self,
        interval_seconds: Optional[float] = None,
        enabled_threat_types: Optional[Iterable[str]] = None,
        whitelist: Optional[Iterable[str]] = None,
        blacklist: Optional[Iterable[str]] = None,
        forwarder: Optional['ThreatAlertForwarder'] = None,
    ) -> bool:
        """
        Start monitoring in a background thread.

        Returns:
            False if monitoring is already running.
        """
        if self.is_running:
            logger.warning("Threat monitor already running")
            return False

        self.configure(interval_seconds, enabled_threat_types, whitelist, blacklist, forwarder)

        # Fresh event per run; a lingering thread keeps its own
        self._stop_event = threading.Event()
        self._started_at = time.time()
        self._last_error = None

        self._thread = threading.Thread(
            target=self._run_loop,
            args=(self._stop_event,),
            name="ThreatMonitor",
            daemon=True,
        )
        self._thread.start()

        logger.info(f"Threat monitor started (interval {self._interval}s)")
        return True

    def stop(self, timeout: float = 5.0) -> bool:
        """
        Stop monitoring.

        Returns:
            False if monitoring was not running, or if the thread is still
            busy after the timeout. The monitor then stays running until the
            thread exits, and start() keeps refusing.
        """
        if not self.is_running:
            return False

        logger.info("Stopping threat monitor...")
        self._stop_event.set()

        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            logger.warning("Threat monitor thread did not stop cleanly")
            return False

        self._thread = None
        self._started_at = None
        logger.info("Threat monitor stopped")
        return True

    def _run_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                networks = self.scanner.scan(cancel_event=stop_event)
                if stop_event.is_set():
                    break
                self.process_scan(networks)
                self._last_error = None
            except WiFiScanError as e:
                self._last_error = str(e)
                logger.warning(f"Error during monitoring scan: {e}")
            except Exception as e:
                self._last_error = str(e)
                logger.exception(f"Unexpected monitoring error: {e}")

            stop_event.wait(self._interval)

    # =========================================================================
    # Detection
    # =========================================================================

    def run_once(self, now: Optional[datetime] = None) -> list[DetectedThreat]:
        """
        Scan once and run detection.

        Raises:
            WiFiScanError: The adapter could not scan.
        """
        networks = self.scanner.scan()
        return self.process_scan(networks, now=now)

    def process_scan(
        self,
        networks: list[NetworkRecord],
        now: Optional[datetime] = None,
    ) -> list[DetectedThreat]:
        """
        Run one detection pass over an annotated scan.

        Returns:
            Threats that passed the enabled-type filter.
        """
        with self._lock:
            threats = detect_threats(
                networks,
                self._state,
                self._whitelist,
                self._blacklist,
                now=now,
            )
            enabled = set(self._enabled_types)
            forwarder = self._forwarder

        if enabled:
            threats = [t for t in threats if t.threat_type in enabled]

        for threat in threats:
            self._report(threat, forwarder)

        return threats

    def evaluate_scan(
        self,
        networks: list[NetworkRecord],
        now: Optional[datetime] = None,
    ) -> list[DetectedThreat]:
        """
        Run the rules over one scan on a scratch state.

        Uses the configured access lists and enabled types, but neither
        touches the session state nor reports the threats.
        """
        with self._lock:
            whitelist = set(self._whitelist)
            blacklist = set(self._blacklist)
            enabled = set(self._enabled_types)

        threats = detect_threats(networks, MonitoringState(), whitelist, blacklist, now=now)
        if enabled:
            threats = [t for t in threats if t.threat_type in enabled]
        return threats

    def _report(self, threat: DetectedThreat, forwarder: Optional['ThreatAlertForwarder']) -> None:
        self._threats.append(threat)
        self._threats_reported += 1
        self._queue_event({'type': 'threat', **threat.to_dict()})

        if self.on_threat:
            try:
                self.on_threat(threat)
            except Exception as e:
                logger.debug(f"Threat callback error: {e}")

        if forwarder:
            forwarder.send(threat)

    def record_connection_failure(
        self,
        network_ssid: str,
        network_bssid: str,
        reason: str = '',
        timestamp: Optional[datetime] = None,
    ) -> ConnectionFailure:
        """Record a failed connection attempt for deauth detection."""
        with self._lock:
            return self._state.record_connection_failure(
                network_ssid, network_bssid, reason, timestamp
            )

    def reset_state(self) -> None:
        """Start a new monitoring session."""
        with self._lock:
            self._state.reset()
        self._threats.clear()

    # =========================================================================
    # Reporting
    # =========================================================================

    def get_threats(
        self,
        limit: int = 100,
        severity: Optional[str] = None,
        threat_type: Optional[str] = None,
    ) -> list[dict]:
        """Most recent threats, newest last."""
        threats = list(self._threats)
        if severity:
            threats = [t for t in threats if t.severity.lower() == severity.lower()]
        if threat_type:
            threats = [t for t in threats if t.threat_type == threat_type]
        if limit > 0:
            threats = threats[-limit:]
        return [t.to_dict() for t in threats]

    def clear_threats(self) -> None:
        self._threats.clear()

    def _queue_event(self, event: dict) -> None:
        try:
            self._event_queue.put_nowait(event)
        except queue.Full:
            try:
                self._event_queue.get_nowait()
                self._event_queue.put_nowait(event)
            except queue.Empty:
                pass

    def get_event_stream(self, timeout: float = 1.0) -> Generator[dict, None, None]:
        """Yield queued threat events, with keepalives when idle."""
        while True:
            try:
                yield self._event_queue.get(timeout=timeout)
            except queue.Empty:
                yield {'type': 'keepalive'}

    def state_summary(self) -> dict:
        with self._lock:
            return self._state.to_summary_dict()

    def network_history(self) -> list[dict]:
        with self._lock:
            return [h.to_dict() for h in self._state.network_history.values()]

    def status(self) -> dict:
        """Running flag, settings and state summary."""
        with self._lock:
            settings = {
                'interval_seconds': self._interval,
                'enabled_threat_types': sorted(self._enabled_types),
                'whitelist_count': len(self._whitelist),
                'blacklist_count': len(self._blacklist),
                'forwarding': self._forwarder.to_dict() if self._forwarder else None,
            }
            state = self._state.to_summary_dict()

        return {
            'is_running': self.is_running,
            'started_at': self._started_at,
            'settings': settings,
            'state': state,
            'threats_reported': self._threats_reported,
            'last_error': self._last_error,
        }
