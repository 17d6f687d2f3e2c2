"""
Parser for Windows `netsh wlan` output.

`netsh wlan show networks mode=bssid` prints one block per SSID followed by
one sub-block per BSSID:

    SSID 1 : HomeNetwork
        Network type            : Infrastructure
        Authentication          : WPA2-Personal
        Encryption              : CCMP
        BSSID 1                 : aa:bb:cc:dd:ee:ff
             Signal             : 87%
             Radio type         : 802.11ac
             Channel            : 36
"""

from __future__ import annotations

import logging
from typing import Optional

from ..constants import (
    NETSH_LABEL_AUTHENTICATION,
    NETSH_LABEL_BSSID,
    NETSH_LABEL_ENCRYPTION,
    NETSH_LABEL_SIGNAL,
    NETSH_LABEL_SSID,
    NETSH_RADIO_STATUS,
    NETSH_SOFTWARE_OFF,
)
from ..models import NetworkRecord
from ..risk import calculate_risk

logger = logging.getLogger('airwatch.wifi.parser')


def _value_after_colon(line: str) -> str:
    """Return the trimmed text after the first colon."""
    return line.split(':', 1)[1].strip()


def parse_netsh_scan(output: str) -> list[NetworkRecord]:
    """
    Parse `netsh wlan show networks mode=bssid` output.

    Args:
        output: Raw command output.

    Returns:
        One NetworkRecord per BSSID, in output order, with risk filled in.
    """
    networks: list[NetworkRecord] = []

    current_ssid = ''
    current_auth = ''
    current_encryption = ''
    current: Optional[NetworkRecord] = None

    for line in output.splitlines():
        trimmed = line.strip()
        if ':' not in trimmed:
            continue

        if trimmed.startswith(NETSH_LABEL_SSID):
            if current is not None:
                networks.append(current)
                current = None

            ssid = _value_after_colon(trimmed)
            # Empty values belong to numbered-label continuation lines
            if ssid:
                current_ssid = ssid
                current_auth = ''
                current_encryption = ''

        elif trimmed.startswith(NETSH_LABEL_AUTHENTICATION):
            current_auth = _value_after_colon(trimmed)

        elif trimmed.startswith(NETSH_LABEL_ENCRYPTION):
            current_encryption = _value_after_colon(trimmed)

        elif trimmed.startswith(NETSH_LABEL_BSSID):
            if current is not None:
                networks.append(current)
                current = None

            bssid = _value_after_colon(trimmed)
            if current_ssid and bssid:
                current = NetworkRecord(
                    ssid=current_ssid,
                    bssid=bssid,
                    authentication=current_auth,
                    encryption=current_encryption,
                )

        elif trimmed.startswith(NETSH_LABEL_SIGNAL):
            if current is not None:
                current.signal = _value_after_colon(trimmed)

    if current is not None:
        networks.append(current)

    for network in networks:
        network.risk = calculate_risk(
            network.authentication,
            network.encryption,
            network.signal,
            network.ssid,
        )

    logger.debug(f"Parsed {len(networks)} networks from netsh output")
    return networks


def parse_netsh_interfaces(output: str) -> dict:
    """
    Parse `netsh wlan show interfaces` output for adapter state.

    Returns:
        Dict with 'has_interface' and 'radio_software_off' flags.
    """
    has_interface = False
    radio_software_off = False

    lines = output.splitlines()
    for i, line in enumerate(lines):
        trimmed = line.strip()

        if trimmed.startswith('State'):
            has_interface = True

        # Radio status is followed by one line per radio
        if NETSH_RADIO_STATUS in trimmed:
            for following in lines[i + 1:i + 5]:
                if NETSH_SOFTWARE_OFF in following:
                    radio_software_off = True
                    break

        if NETSH_SOFTWARE_OFF in trimmed:
            radio_software_off = True

    return {
        'has_interface': has_interface,
        'radio_software_off': radio_software_off,
    }
