"""
WiFi threat monitoring API routes.

One-shot scans, raw netsh parsing, background monitor control, threat
history, connection failure reporting and an SSE stream of threats.
"""

from __future__ import annotations

from typing import Generator

from flask import Blueprint, Response, current_app, jsonify, request

from utils.alerts import ThreatAlertForwarder, get_default_forwarder
from utils.logging import get_logger
from utils.sse import format_sse
from utils.wifi import (
    SEVERITIES,
    THREAT_TYPES,
    ThreatMonitor,
    WiFiScanError,
    mark_evil_twins,
    parse_netsh_scan,
)

logger = get_logger('routes.wifi')

wifi_monitor_bp = Blueprint('wifi_monitor', __name__, url_prefix='/wifi')


def get_monitor() -> ThreatMonitor:
    """The monitor handle created with the app."""
    return current_app.extensions['airwatch']['monitor']


def _error(message: str, code: int):
    return jsonify({'status': 'error', 'message': message}), code


def _string_list(value, name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(',') if item.strip()]
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return [v.strip() for v in value if v.strip()]
    raise ValueError(f'{name} must be a list of strings')


# =============================================================================
# One-shot Scanning
# =============================================================================

@wifi_monitor_bp.route('/scan', methods=['POST'])
def scan_networks():
    """
    Scan nearby networks once.

    Returns:
        Annotated networks (risk rating and evil twin flag).
    """
    monitor = get_monitor()
    try:
        networks = monitor.scanner.scan()
    except WiFiScanError as e:
        logger.error(f"WiFi scan failed: {e}")
        return _error(str(e), 503)

    return jsonify({
        'status': 'success',
        'count': len(networks),
        'networks': [n.to_dict() for n in networks],
    })


@wifi_monitor_bp.route('/parse', methods=['POST'])
def parse_output():
    """
    Parse raw `netsh wlan show networks mode=bssid` output.

    Request body:
        output: Raw command output
        detect: Also evaluate the parsed scan on its own (default false).
            The monitoring session is not affected.
    """
    data = request.get_json(silent=True) or {}
    output = data.get('output')
    if not isinstance(output, str):
        return _error('output must be a string', 400)

    networks = mark_evil_twins(parse_netsh_scan(output))
    result = {
        'status': 'success',
        'count': len(networks),
        'networks': [n.to_dict() for n in networks],
    }

    if data.get('detect'):
        threats = get_monitor().evaluate_scan(networks)
        result['threats'] = [t.to_dict() for t in threats]

    return jsonify(result)


# =============================================================================
# Monitor Control
# =============================================================================

@wifi_monitor_bp.route('/monitor/start', methods=['POST'])
def start_monitor():
    """
    Start background threat monitoring.

    Request body:
        interval_seconds: Scan interval, clamped to 5-60 (default from config)
        enabled_threat_types: Threat types to report (default all)
        whitelist: Allowed BSSIDs
        blacklist: Forbidden BSSIDs
        server_url: Optional alert server; falls back to configuration
        auth_token: Bearer token for the alert server
    """
    data = request.get_json(silent=True) or {}

    interval = data.get('interval_seconds')
    if interval is not None:
        try:
            interval = int(interval)
        except (TypeError, ValueError):
            return _error('interval_seconds must be an integer', 400)

    try:
        enabled = _string_list(data.get('enabled_threat_types'), 'enabled_threat_types')
        whitelist = _string_list(data.get('whitelist'), 'whitelist') if 'whitelist' in data else None
        blacklist = _string_list(data.get('blacklist'), 'blacklist') if 'blacklist' in data else None
    except ValueError as e:
        return _error(str(e), 400)

    unknown = [t for t in enabled if t not in THREAT_TYPES]
    if unknown:
        return _error(f"Unknown threat types: {', '.join(unknown)}", 400)

    server_url = data.get('server_url')
    if server_url:
        forwarder = ThreatAlertForwarder(server_url, data.get('auth_token') or '')
    else:
        forwarder = get_default_forwarder()

    monitor = get_monitor()
    if not monitor.start(
        interval_seconds=interval,
        enabled_threat_types=enabled,
        whitelist=whitelist,
        blacklist=blacklist,
        forwarder=forwarder,
    ):
        return _error('Monitor already running', 409)

    return jsonify({'status': 'success', 'monitor': monitor.status()})


@wifi_monitor_bp.route('/monitor/stop', methods=['POST'])
def stop_monitor():
    """Stop background threat monitoring."""
    monitor = get_monitor()
    if not monitor.is_running:
        return _error('Monitor not running', 409)
    if not monitor.stop():
        return _error('Monitor is still finishing a scan, try again shortly', 409)
    return jsonify({'status': 'success', 'monitor': monitor.status()})


@wifi_monitor_bp.route('/monitor/status', methods=['GET'])
def monitor_status():
    """Get monitor status."""
    return jsonify({'status': 'success', 'monitor': get_monitor().status()})


@wifi_monitor_bp.route('/monitor/scan', methods=['POST'])
def monitor_scan():
    """Run a single scan and detection pass now."""
    monitor = get_monitor()
    try:
        threats = monitor.run_once()
    except WiFiScanError as e:
        logger.error(f"Detection scan failed: {e}")
        return _error(str(e), 503)

    return jsonify({
        'status': 'success',
        'count': len(threats),
        'threats': [t.to_dict() for t in threats],
    })


# =============================================================================
# Threat Data
# =============================================================================

@wifi_monitor_bp.route('/threats', methods=['GET'])
def get_threats():
    """
    Get recent threats.

    Query params:
        limit: Max threats to return (default 100)
        severity: Critical, High or Medium
        threat_type: One of the threat type identifiers
    """
    limit = request.args.get('limit', 100, type=int)
    if limit < 0:
        return _error('limit must be a non-negative integer', 400)

    severity = request.args.get('severity')
    if severity and severity.lower() not in {s.lower() for s in SEVERITIES}:
        return _error(f'Unknown severity: {severity}', 400)

    threat_type = request.args.get('threat_type')
    if threat_type and threat_type not in THREAT_TYPES:
        return _error(f'Unknown threat type: {threat_type}', 400)

    threats = get_monitor().get_threats(limit=limit, severity=severity, threat_type=threat_type)
    return jsonify({
        'status': 'success',
        'count': len(threats),
        'threats': threats,
    })


@wifi_monitor_bp.route('/failures', methods=['POST'])
def record_failure():
    """
    Report a failed connection attempt.

    Request body:
        ssid: Network name
        bssid: Access point MAC
        reason: Optional failure reason
    """
    data = request.get_json(silent=True) or {}
    ssid = data.get('ssid', '')
    bssid = data.get('bssid', '')
    reason = data.get('reason', '')

    if not all(isinstance(v, str) for v in (ssid, bssid, reason)):
        return _error('ssid, bssid and reason must be strings', 400)
    if not ssid and not bssid:
        return _error('ssid or bssid is required', 400)

    failure = get_monitor().record_connection_failure(ssid, bssid, reason)
    return jsonify({'status': 'success', 'failure': failure.to_dict()})


# =============================================================================
# Streaming
# =============================================================================

@wifi_monitor_bp.route('/stream', methods=['GET'])
def event_stream():
    """
    Server-Sent Events stream of detected threats.

    Events:
        - threat: A reported threat
        - keepalive: Periodic keepalive
    """
    monitor = get_monitor()

    def generate() -> Generator[str, None, None]:
        for event in monitor.get_event_stream():
            yield format_sse(event)

    response = Response(generate(), mimetype='text/event-stream')
    response.headers['Cache-Control'] = 'no-cache'
    response.headers['X-Accel-Buffering'] = 'no'
    response.headers['Connection'] = 'keep-alive'
    return response
