#!/usr/bin/env python3
"""
Airwatch - WiFi threat detection service.

Scans nearby access points with netsh, rates their security, flags evil
twins and runs rule-based threat detection across successive scans.
"""

from __future__ import annotations

import argparse
from typing import Optional

from flask import Flask, jsonify

import config
from routes import register_blueprints
from utils.logging import configure_logging, get_logger
from utils.wifi import NetshScanner, ThreatMonitor

logger = get_logger('airwatch')


def create_app(
    scanner: Optional[NetshScanner] = None,
    monitor: Optional[ThreatMonitor] = None,
) -> Flask:
    """
    Build the Flask application.

    Args:
        scanner: Adapter used by the monitor (defaults to NetshScanner).
        monitor: Monitor handle; built around `scanner` when omitted.
    """
    app = Flask(__name__)

    if monitor is None:
        monitor = ThreatMonitor(scanner=scanner)
    app.extensions['airwatch'] = {'monitor': monitor}

    register_blueprints(app)

    @app.route('/health')
    def health():
        status = monitor.status()
        return jsonify({
            'status': 'healthy',
            'monitoring': status['is_running'],
            'scan_count': status['state']['scan_count'],
            'last_error': status['last_error'],
        })

    return app


def main():
    parser = argparse.ArgumentParser(description='Airwatch WiFi threat detection')
    parser.add_argument('--host', default=config.HOST, help='Bind address')
    parser.add_argument('--port', type=int, default=config.PORT, help='Listen port')
    parser.add_argument('--debug', action='store_true', default=config.DEBUG, help='Enable debug mode')
    parser.add_argument('--log-level', default=config.LOG_LEVEL, help='Logging level')
    args = parser.parse_args()

    configure_logging('DEBUG' if args.debug else args.log_level)

    app = create_app()
    logger.info(f"Airwatch listening on http://{args.host}:{args.port}")

    try:
        app.run(host=args.host, port=args.port, debug=args.debug, threaded=True, use_reloader=False)
    finally:
        app.extensions['airwatch']['monitor'].stop()


if __name__ == '__main__':
    main()
