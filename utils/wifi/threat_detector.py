"""
WiFi threat detection across successive scans.

detect_threats() runs a fixed pipeline over one MonitoringState:

    1. fold the current scan into history and signal baselines
    2. evaluate every rule against the current scan and the prior state
    3. commit the scan as previous_networks, bump counters, purge failures

Rules work on lowercased BSSIDs; SSIDs compare exactly.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict, deque
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from .constants import (
    DEAUTH_DETECTION_WINDOW,
    DEAUTH_FAILURE_THRESHOLD,
    FLOOD_NETWORK_THRESHOLD,
    JAMMING_MIN_BASELINE_SAMPLES,
    JAMMING_SIMULTANEOUS_THRESHOLD,
    MAC_SPOOF_MAX_BSSIDS_PER_SSID,
    PROBE_HIDDEN_THRESHOLD,
    SEVERITY_CRITICAL,
    SEVERITY_HIGH,
    SEVERITY_MEDIUM,
    THREAT_BLACKLISTED_NETWORK,
    THREAT_DEAUTH_ATTACK,
    THREAT_FLOOD_ATTACK,
    THREAT_MAC_SPOOF,
    THREAT_PROBE_ANOMALY,
    THREAT_RF_JAMMING,
    THREAT_UNAUTHORIZED_CLIENT,
)
from .models import DetectedThreat, NetworkRecord, ThreatScope, as_utc, normalize_bssid
from .monitoring_state import MonitoringState, update_network_history

logger = logging.getLogger('airwatch.wifi.threats')


def _normalize_bssid_set(bssids: Optional[Iterable[str]]) -> set[str]:
    if not bssids:
        return set()
    return {normalize_bssid(b) for b in bssids if b and b.strip()}


def detect_threats(
    current_networks: list[NetworkRecord],
    state: MonitoringState,
    whitelist_bssids: Optional[Iterable[str]] = None,
    blacklist_bssids: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None,
) -> list[DetectedThreat]:
    """
    Run one detection pass.

    Args:
        current_networks: Annotated records of the current scan.
        state: Session state, mutated in place. Callers must not run two
            passes over the same state concurrently.
        whitelist_bssids: Allowed BSSIDs. Empty disables the whitelist rule.
        blacklist_bssids: Forbidden BSSIDs.
        now: Pass timestamp; defaults to the current UTC time. Naive values
            are taken as UTC.

    Returns:
        Threats in rule order. Never raises on malformed records.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    now = as_utc(now)

    whitelist = _normalize_bssid_set(whitelist_bssids)
    blacklist = _normalize_bssid_set(blacklist_bssids)

    update_network_history(current_networks, state, now)

    threats: list[DetectedThreat] = []
    threats.extend(detect_mac_spoofing(current_networks, now))
    threats.extend(detect_deauth_attacks(state, now))
    threats.extend(detect_flood_attacks(current_networks, state, now))
    threats.extend(detect_unauthorized_clients(current_networks, whitelist, now))
    threats.extend(detect_probe_anomalies(current_networks, now))
    threats.extend(detect_rf_jamming(current_networks, state.signal_baselines, now))
    threats.extend(detect_blacklisted_networks(current_networks, blacklist, now))

    state.previous_networks = list(current_networks)
    state.scan_count += 1
    state.last_scan_time = now
    state.purge_connection_failures(now)

    if threats:
        logger.info(
            f"Scan {state.scan_count}: {len(threats)} threats across "
            f"{len(current_networks)} networks"
        )
        for threat in threats:
            if threat.severity in (SEVERITY_CRITICAL, SEVERITY_HIGH):
                logger.warning(f"{threat.threat_type} [{threat.severity}] {threat.details}")
    else:
        logger.debug(f"Scan {state.scan_count}: no threats across {len(current_networks)} networks")

    return threats


# =============================================================================
# Rules
# =============================================================================

def detect_mac_spoofing(networks: list[NetworkRecord], now: datetime) -> list[DetectedThreat]:
    """One BSSID under several SSIDs, or one SSID under too many BSSIDs."""
    threats = []
    bssid_to_ssids: dict[str, set[str]] = defaultdict(set)
    ssid_to_bssids: dict[str, set[str]] = defaultdict(set)

    for network in networks:
        bssid = network.normalized_bssid
        ssid = network.ssid
        if not ssid.strip() or not bssid:
            continue
        bssid_to_ssids[bssid].add(ssid)
        ssid_to_bssids[ssid].add(bssid)

    for bssid, ssids in bssid_to_ssids.items():
        if len(ssids) > 1:
            names = sorted(ssids)
            threats.append(DetectedThreat(
                threat_type=THREAT_MAC_SPOOF,
                severity=SEVERITY_CRITICAL,
                ssid=names[0],
                bssid=bssid,
                details=f"BSSID {bssid} appears with multiple SSIDs: {', '.join(names)}",
                timestamp=now,
            ))

    for ssid, bssids in ssid_to_bssids.items():
        if len(bssids) > MAC_SPOOF_MAX_BSSIDS_PER_SSID:
            threats.append(DetectedThreat(
                threat_type=THREAT_MAC_SPOOF,
                severity=SEVERITY_HIGH,
                ssid=ssid,
                bssid=sorted(bssids)[0],
                details=f"SSID {ssid} has {len(bssids)} different BSSIDs, possible MAC spoofing attack",
                timestamp=now,
            ))

    return threats


def detect_deauth_attacks(state: MonitoringState, now: datetime) -> list[DetectedThreat]:
    """Bursts of connection failures against the same network."""
    threats = []
    cutoff = now - timedelta(seconds=DEAUTH_DETECTION_WINDOW)

    failures_per_network: Counter = Counter(
        (failure.network_ssid, normalize_bssid(failure.network_bssid))
        for failure in state.connection_failures
        if failure.timestamp > cutoff
    )

    for (ssid, bssid), count in failures_per_network.items():
        if count > DEAUTH_FAILURE_THRESHOLD:
            known = bool(ssid or bssid)
            threats.append(DetectedThreat(
                threat_type=THREAT_DEAUTH_ATTACK,
                severity=SEVERITY_HIGH,
                scope=ThreatScope.NETWORK if known else ThreatScope.UNKNOWN,
                ssid=ssid or None,
                bssid=bssid or None,
                details=(
                    f"Rapid connection failures detected ({count} failures in "
                    f"{DEAUTH_DETECTION_WINDOW} seconds), possible deauthentication attack"
                ),
                timestamp=now,
            ))

    return threats


def detect_flood_attacks(
    networks: list[NetworkRecord],
    state: MonitoringState,
    now: datetime,
) -> list[DetectedThreat]:
    """Many networks appearing or vanishing between two scans."""
    threats = []

    # First scan of a session has nothing to compare against
    if not state.previous_networks:
        return threats

    previous = {n.normalized_bssid for n in state.previous_networks}
    current = {n.normalized_bssid for n in networks}

    appeared = current - previous
    if len(appeared) > FLOOD_NETWORK_THRESHOLD:
        threats.append(DetectedThreat(
            threat_type=THREAT_FLOOD_ATTACK,
            severity=SEVERITY_HIGH,
            scope=ThreatScope.AGGREGATE,
            details=(
                f"Rapid network appearance detected: {len(appeared)} new networks "
                f"appeared in single scan, possible flood attack"
            ),
            timestamp=now,
        ))

    disappeared = previous - current
    if len(disappeared) > FLOOD_NETWORK_THRESHOLD:
        threats.append(DetectedThreat(
            threat_type=THREAT_FLOOD_ATTACK,
            severity=SEVERITY_MEDIUM,
            scope=ThreatScope.AGGREGATE,
            details=(
                f"Rapid network disappearance detected: {len(disappeared)} networks "
                f"disappeared in single scan"
            ),
            timestamp=now,
        ))

    return threats


def detect_unauthorized_clients(
    networks: list[NetworkRecord],
    whitelist: set[str],
    now: datetime,
) -> list[DetectedThreat]:
    """Every network outside a non-empty whitelist."""
    if not whitelist:
        return []

    threats = []
    for network in networks:
        bssid = network.normalized_bssid
        if bssid not in whitelist:
            threats.append(DetectedThreat(
                threat_type=THREAT_UNAUTHORIZED_CLIENT,
                severity=SEVERITY_MEDIUM,
                ssid=network.ssid,
                bssid=bssid,
                details=f"Unauthorized network detected: {network.ssid} (BSSID: {bssid}) not in whitelist",
                timestamp=now,
            ))
    return threats


def detect_probe_anomalies(networks: list[NetworkRecord], now: datetime) -> list[DetectedThreat]:
    """Too many hidden SSIDs in one scan."""
    hidden_count = sum(1 for n in networks if n.is_hidden)
    if hidden_count <= PROBE_HIDDEN_THRESHOLD:
        return []

    return [DetectedThreat(
        threat_type=THREAT_PROBE_ANOMALY,
        severity=SEVERITY_MEDIUM,
        scope=ThreatScope.HIDDEN,
        details=(
            f"Excessive hidden network probes detected: {hidden_count} hidden "
            f"networks, possible probe flood"
        ),
        timestamp=now,
    )]


def detect_rf_jamming(
    networks: list[NetworkRecord],
    baselines: dict[str, deque],
    now: datetime,
) -> list[DetectedThreat]:
    """
    Signal collapsing below half of its recent average.

    Args:
        baselines: Signal samples per BSSID, including this scan.
    """
    threats = []
    networks_with_drops = 0

    for network in networks:
        bssid = network.normalized_bssid
        samples = baselines.get(bssid)
        if not samples or len(samples) < JAMMING_MIN_BASELINE_SAMPLES:
            continue

        avg_baseline = int(sum(samples) / len(samples))
        current_signal = network.signal_percent

        if avg_baseline > 0 and current_signal < avg_baseline // 2:
            networks_with_drops += 1
            decrease = (avg_baseline - current_signal) * 100 // avg_baseline
            threats.append(DetectedThreat(
                threat_type=THREAT_RF_JAMMING,
                severity=SEVERITY_HIGH,
                ssid=network.ssid,
                bssid=bssid,
                details=(
                    f"Sudden signal strength drop detected: {avg_baseline}% -> "
                    f"{current_signal}% ({decrease}% decrease), possible RF jamming"
                ),
                timestamp=now,
            ))

    if networks_with_drops > JAMMING_SIMULTANEOUS_THRESHOLD:
        threats.append(DetectedThreat(
            threat_type=THREAT_RF_JAMMING,
            severity=SEVERITY_CRITICAL,
            scope=ThreatScope.AGGREGATE,
            details=(
                f"Multiple networks ({networks_with_drops}) showing simultaneous "
                f"signal drops, likely RF jamming attack"
            ),
            timestamp=now,
        ))

    return threats


def detect_blacklisted_networks(
    networks: list[NetworkRecord],
    blacklist: set[str],
    now: datetime,
) -> list[DetectedThreat]:
    """Every network on the blacklist."""
    threats = []
    for network in networks:
        bssid = network.normalized_bssid
        if bssid in blacklist:
            threats.append(DetectedThreat(
                threat_type=THREAT_BLACKLISTED_NETWORK,
                severity=SEVERITY_CRITICAL,
                ssid=network.ssid,
                bssid=bssid,
                details=f"Blacklisted network detected: {network.ssid} (BSSID: {bssid}), avoid connecting",
                timestamp=now,
            ))
    return threats
