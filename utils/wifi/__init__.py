"""
WiFi threat detection.

Scans are parsed from netsh output, annotated with a risk rating and an
evil twin flag, then passed through the rule-based threat detector.
"""

from .constants import (
    SEVERITIES,
    SEVERITY_CRITICAL,
    SEVERITY_HIGH,
    SEVERITY_MEDIUM,
    THREAT_BLACKLISTED_NETWORK,
    THREAT_DEAUTH_ATTACK,
    THREAT_FLOOD_ATTACK,
    THREAT_MAC_SPOOF,
    THREAT_PROBE_ANOMALY,
    THREAT_RF_JAMMING,
    THREAT_TYPES,
    THREAT_UNAUTHORIZED_CLIENT,
)
from .evil_twin import find_evil_twin_ssids, mark_evil_twins
from .models import DetectedThreat, NetworkRecord, ThreatScope, normalize_bssid, parse_signal
from .monitor import ThreatMonitor, clamp_interval
from .monitoring_state import (
    ConnectionFailure,
    MonitoringState,
    NetworkHistory,
    update_network_history,
)
from .parsers import parse_netsh_interfaces, parse_netsh_scan
from .risk import calculate_risk, calculate_risk_score
from .scanner import NetshScanner, WiFiScanError
from .threat_detector import detect_threats

__all__ = [
    # Models
    'NetworkRecord',
    'DetectedThreat',
    'ThreatScope',
    'NetworkHistory',
    'ConnectionFailure',
    'MonitoringState',
    'normalize_bssid',
    'parse_signal',
    # Scan annotation
    'parse_netsh_scan',
    'parse_netsh_interfaces',
    'calculate_risk',
    'calculate_risk_score',
    'find_evil_twin_ssids',
    'mark_evil_twins',
    # Detection
    'update_network_history',
    'detect_threats',
    'NetshScanner',
    'WiFiScanError',
    'ThreatMonitor',
    'clamp_interval',
    # Constants
    'THREAT_TYPES',
    'THREAT_MAC_SPOOF',
    'THREAT_DEAUTH_ATTACK',
    'THREAT_FLOOD_ATTACK',
    'THREAT_UNAUTHORIZED_CLIENT',
    'THREAT_PROBE_ANOMALY',
    'THREAT_RF_JAMMING',
    'THREAT_BLACKLISTED_NETWORK',
    'SEVERITIES',
    'SEVERITY_CRITICAL',
    'SEVERITY_HIGH',
    'SEVERITY_MEDIUM',
]
