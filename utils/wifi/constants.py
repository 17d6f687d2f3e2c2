"""
WiFi-specific constants for scan parsing, risk scoring and threat detection.
"""

from __future__ import annotations

# =============================================================================
# MONITORING STATE
# =============================================================================

# Signal samples kept per BSSID (history and baseline queues)
MAX_SIGNAL_SAMPLES = 10

# Network history expiration (seconds since last seen)
NETWORK_STALE_TIMEOUT = 300  # 5 minutes

# Connection failures older than this are purged after every pass
CONNECTION_FAILURE_RETENTION = 60  # 1 minute

# =============================================================================
# DETECTION THRESHOLDS
# =============================================================================

# MAC spoofing: one SSID advertised by more than this many BSSIDs
MAC_SPOOF_MAX_BSSIDS_PER_SSID = 3

# Deauthentication: more than this many failures per network in the window
DEAUTH_DETECTION_WINDOW = 30  # seconds
DEAUTH_FAILURE_THRESHOLD = 3

# Flood: more than this many BSSIDs appearing/disappearing between scans
FLOOD_NETWORK_THRESHOLD = 10

# Probe anomaly: more than this many hidden SSIDs in one scan
PROBE_HIDDEN_THRESHOLD = 5
HIDDEN_SSID_PLACEHOLDER = '-'

# RF jamming: baseline samples required, and simultaneous drops for Critical
JAMMING_MIN_BASELINE_SAMPLES = 3
JAMMING_SIMULTANEOUS_THRESHOLD = 3

# =============================================================================
# THREAT TYPES
# =============================================================================

THREAT_MAC_SPOOF = 'mac_spoof'
THREAT_DEAUTH_ATTACK = 'deauth_attack'
THREAT_FLOOD_ATTACK = 'flood_attack'
THREAT_UNAUTHORIZED_CLIENT = 'unauthorized_client'
THREAT_PROBE_ANOMALY = 'probe_anomaly'
THREAT_RF_JAMMING = 'rf_jamming'
THREAT_BLACKLISTED_NETWORK = 'blacklisted_network'

THREAT_TYPES = (
    THREAT_MAC_SPOOF,
    THREAT_DEAUTH_ATTACK,
    THREAT_FLOOD_ATTACK,
    THREAT_UNAUTHORIZED_CLIENT,
    THREAT_PROBE_ANOMALY,
    THREAT_RF_JAMMING,
    THREAT_BLACKLISTED_NETWORK,
)

# =============================================================================
# SEVERITIES
# =============================================================================

SEVERITY_CRITICAL = 'Critical'
SEVERITY_HIGH = 'High'
SEVERITY_MEDIUM = 'Medium'

SEVERITIES = (SEVERITY_CRITICAL, SEVERITY_HIGH, SEVERITY_MEDIUM)

# Display values for threats that do not point at a single network
SCOPE_MULTIPLE = 'Multiple'
SCOPE_HIDDEN = 'Hidden'
SCOPE_UNKNOWN = 'Unknown'

# =============================================================================
# RISK RATING
# =============================================================================

RISK_LOW = 'L'
RISK_MEDIUM = 'M'
RISK_HIGH = 'H'
RISK_CRITICAL = 'C'

# Minimum score for each rating (checked highest first)
RISK_SCORE_CRITICAL = 6
RISK_SCORE_HIGH = 4
RISK_SCORE_MEDIUM = 2

# Signal percentage below which a network counts as weak
WEAK_SIGNAL_PERCENT = 30

# Names commonly used by captive portals and rogue hotspots
SUSPICIOUS_SSID_KEYWORDS = (
    'free',
    'public',
    'guest',
    'hotspot',
    'open',
    'airport',
    'hotel',
    'setup',
    'default',
)

# =============================================================================
# NETSH SCAN OUTPUT
# =============================================================================

NETSH_LABEL_SSID = 'SSID'
NETSH_LABEL_BSSID = 'BSSID'
NETSH_LABEL_AUTHENTICATION = 'Authentication'
NETSH_LABEL_ENCRYPTION = 'Encryption'
NETSH_LABEL_SIGNAL = 'Signal'

NETSH_POWERED_DOWN = 'The wireless local area network interface is powered down'
NETSH_NOT_SUPPORTED = "doesn't support the requested operation"
NETSH_SOFTWARE_OFF = 'Software Off'
NETSH_RADIO_STATUS = 'Radio status'

# Monitor loop interval bounds (seconds)
MONITOR_MIN_INTERVAL = 5
MONITOR_MAX_INTERVAL = 60

# Recent threats kept for the API, and SSE queue size
MAX_THREAT_HISTORY = 500
EVENT_QUEUE_SIZE = 1000
