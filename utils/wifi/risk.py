"""
Per-network risk rating from advertised security attributes.

Each weakness adds points; the total maps onto L/M/H/C.
"""

from __future__ import annotations

from .constants import (
    RISK_CRITICAL,
    RISK_HIGH,
    RISK_LOW,
    RISK_MEDIUM,
    RISK_SCORE_CRITICAL,
    RISK_SCORE_HIGH,
    RISK_SCORE_MEDIUM,
    SUSPICIOUS_SSID_KEYWORDS,
    WEAK_SIGNAL_PERCENT,
)
from .models import parse_signal


def _authentication_score(authentication: str) -> int:
    auth = authentication.strip().lower()
    if not auth or auth == 'open':
        return 3
    if 'wpa3' in auth or 'owe' in auth:
        return 0
    if 'wpa2' in auth:
        return 0
    if 'wpa' in auth:
        return 2
    if 'shared' in auth or 'wep' in auth:
        return 3
    return 1


def _encryption_score(encryption: str) -> int:
    enc = encryption.strip().lower()
    if not enc or enc == 'none':
        return 3
    if 'wep' in enc:
        return 3
    if 'tkip' in enc:
        return 2
    if 'ccmp' in enc or 'gcmp' in enc or 'aes' in enc:
        return 0
    return 1


def _signal_score(signal: str) -> int:
    return 1 if parse_signal(signal) < WEAK_SIGNAL_PERCENT else 0


def _ssid_score(ssid: str) -> int:
    name = ssid.strip().lower()
    if not name:
        return 2
    if any(keyword in name for keyword in SUSPICIOUS_SSID_KEYWORDS):
        return 1
    return 0


def calculate_risk_score(authentication: str, encryption: str, signal: str, ssid: str) -> int:
    """Sum of the individual weakness scores."""
    return (
        _authentication_score(authentication or '')
        + _encryption_score(encryption or '')
        + _signal_score(signal or '')
        + _ssid_score(ssid or '')
    )


def calculate_risk(authentication: str, encryption: str, signal: str, ssid: str) -> str:
    """
    Rate a network as L (low), M (medium), H (high) or C (critical).

    Deterministic and defined for every input, including empty strings.
    """
    score = calculate_risk_score(authentication, encryption, signal, ssid)
    if score >= RISK_SCORE_CRITICAL:
        return RISK_CRITICAL
    if score >= RISK_SCORE_HIGH:
        return RISK_HIGH
    if score >= RISK_SCORE_MEDIUM:
        return RISK_MEDIUM
    return RISK_LOW
