"""
Evil twin tagging for a single scan.

An SSID advertised by several BSSIDs is normal for mesh and multi-band
setups, as long as every radio offers the same security. Differing
authentication or encryption under one name marks every record of that
SSID as a possible evil twin.
"""

from __future__ import annotations

from collections import defaultdict

from .models import NetworkRecord


def _security_posture(network: NetworkRecord) -> tuple[str, str]:
    return (
        network.authentication.strip().lower(),
        network.encryption.strip().lower(),
    )


def find_evil_twin_ssids(networks: list[NetworkRecord]) -> set[str]:
    """Return SSIDs bound to several BSSIDs with conflicting security."""
    bssids: dict[str, set[str]] = defaultdict(set)
    postures: dict[str, set[tuple[str, str]]] = defaultdict(set)

    for network in networks:
        if not network.ssid.strip() or not network.normalized_bssid:
            continue
        bssids[network.ssid].add(network.normalized_bssid)
        postures[network.ssid].add(_security_posture(network))

    return {
        ssid for ssid, seen in bssids.items()
        if len(seen) > 1 and len(postures[ssid]) > 1
    }


def mark_evil_twins(networks: list[NetworkRecord]) -> list[NetworkRecord]:
    """
    Set is_evil_twin on every record of the batch, in place.

    Returns the same list for chaining.
    """
    twins = find_evil_twin_ssids(networks)
    for network in networks:
        network.is_evil_twin = network.ssid in twins
    return networks
