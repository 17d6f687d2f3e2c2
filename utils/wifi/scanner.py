"""
Windows WiFi adapter access via netsh.

Produces the annotated scan batch (parsed, risk-rated, evil-twin tagged)
that the threat detector consumes.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import Optional

import config

from .constants import NETSH_NOT_SUPPORTED, NETSH_POWERED_DOWN
from .evil_twin import mark_evil_twins
from .models import NetworkRecord
from .parsers.netsh import parse_netsh_interfaces, parse_netsh_scan

logger = logging.getLogger('airwatch.wifi.scanner')


class WiFiScanError(RuntimeError):
    """The adapter could not produce a scan."""


class NetshScanner:
    """
    Scan nearby access points with `netsh wlan`.

    Every call is synchronous; the settle delay waits on an optional
    cancel event so callers can abort it.
    """

    def __init__(
        self,
        settle_seconds: Optional[float] = None,
        command_timeout: Optional[float] = None,
    ):
        """
        Initialize the scanner.

        Args:
            settle_seconds: Delay before reading results, letting the
                adapter finish its background scan.
            command_timeout: Timeout for each netsh invocation.
        """
        if settle_seconds is None:
            settle_seconds = getattr(config, 'SCAN_SETTLE_SECONDS', 2.0)
        if command_timeout is None:
            command_timeout = getattr(config, 'SCAN_COMMAND_TIMEOUT', 15.0)
        self.settle_seconds = max(0.0, float(settle_seconds))
        self.command_timeout = float(command_timeout)

    def _run_netsh(self, args: list[str], purpose: str) -> str:
        try:
            result = subprocess.run(
                ['netsh', 'wlan', *args],
                capture_output=True,
                text=True,
                timeout=self.command_timeout,
            )
        except subprocess.TimeoutExpired:
            raise WiFiScanError(f"Failed to {purpose}: netsh timed out after {self.command_timeout}s")
        except FileNotFoundError:
            raise WiFiScanError(f"Failed to {purpose}: netsh not found (Windows WLAN service required)")
        except OSError as e:
            raise WiFiScanError(f"Failed to {purpose}: {e}")

        if result.returncode != 0 and not result.stdout.strip():
            error_msg = result.stderr.strip() or f"netsh returned code {result.returncode}"
            raise WiFiScanError(f"Failed to {purpose}: {error_msg}")

        return result.stdout or ''

    def check_adapter(self) -> dict:
        """
        Verify a WiFi adapter exists and its radio is on.

        Raises:
            WiFiScanError: No adapter, or the radio is switched off.
        """
        output = self._run_netsh(['show', 'interfaces'], 'check WiFi adapter state')
        adapter = parse_netsh_interfaces(output)

        if not adapter['has_interface']:
            logger.error("No WiFi adapter found")
            raise WiFiScanError(
                "No WiFi adapter found. Please ensure your WiFi adapter is installed and enabled."
            )

        if adapter['radio_software_off']:
            logger.error("WiFi adapter radio is software-off")
            raise WiFiScanError(
                "WiFi adapter is turned off. Please enable WiFi in Windows Settings "
                "or use the WiFi toggle in the system tray."
            )

        return adapter

    def read_scan_output(self) -> str:
        """Run the BSSID listing and reject adapter error messages."""
        output = self._run_netsh(['show', 'networks', 'mode=bssid'], 'scan WiFi networks')

        if NETSH_POWERED_DOWN in output:
            raise WiFiScanError("WiFi adapter is powered down. Please enable WiFi in Windows Settings.")

        if NETSH_NOT_SUPPORTED in output:
            raise WiFiScanError(
                "WiFi adapter is not ready for scanning. Please enable WiFi in Windows Settings."
            )

        return output

    def scan(self, cancel_event: Optional[threading.Event] = None) -> list[NetworkRecord]:
        """
        Perform one scan.

        Args:
            cancel_event: Set to abort during the settle delay; an aborted
                scan returns an empty list.

        Returns:
            Annotated NetworkRecords.

        Raises:
            WiFiScanError: The adapter is missing, off, or netsh failed.
        """
        self.check_adapter()

        if self.settle_seconds:
            waiter = cancel_event or threading.Event()
            if waiter.wait(self.settle_seconds):
                logger.debug("Scan cancelled while waiting for adapter")
                return []

        output = self.read_scan_output()
        networks = mark_evil_twins(parse_netsh_scan(output))
        logger.info(f"Scan complete: {len(networks)} networks found")
        return networks
